"""Identity token lookup from the sign-in redirect URL."""

from __future__ import annotations

from urllib.parse import parse_qs, urlsplit


def token_from_url(url: str, *, param: str = "id_token") -> str | None:
    """Return the identity token carried in *url*'s fragment, if any.

    The hosted sign-in page redirects back with
    ``#id_token=...&access_token=...``.
    """
    fragment = urlsplit(url).fragment
    values = parse_qs(fragment).get(param)
    if not values or not values[0].strip():
        return None
    return values[0].strip()
