#!/usr/bin/env python3
"""Run the live dashboard loop against the real backend, printing every render.

The browser page is replaced by a console sink: each time a slot is
(re)drawn its latest point is printed. Useful to check the refresh cadence
and the unit/depth projections without a browser.

Usage
-----
::

    export DSS_TOKEN="<id_token from the sign-in redirect>"
    python scripts/watch_dashboard.py --unit in --depth 2

Options::

    --token TOKEN        Identity token (default: $DSS_TOKEN)
    --url URL            Sign-in redirect URL to read the token from
    --unit {mm,in}       Display unit for rainfall and ET
    --depth {1,2,3,4}    Soil moisture depth selector
    --duration SECONDS   Stop after this long (default: run until Ctrl-C)
    --once               Single fetch and render, no refresh loop
    --verbose, -v        Enable debug logging
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pydss import (  # noqa: E402
    SERIES_STYLE,
    ChartSlot,
    DashboardController,
    DssClient,
    DisplayUnit,
    DssConfig,
    GaugeViewModel,
    SeriesViewModel,
    token_from_url,
)


class ConsoleSink:
    """Prints one line per rendered slot."""

    def __init__(self, unit: DisplayUnit) -> None:
        self.unit = unit

    def render(self, slot: ChartSlot, view_model: SeriesViewModel | GaugeViewModel) -> None:
        if isinstance(view_model, GaugeViewModel):
            print(
                f"  {slot.canvas_id:<24} {view_model.label:<20} {view_model.display_text:>5}  "
                f"{view_model.color.value} ({view_model.color.hex})"
            )
            return
        tooltip = SERIES_STYLE[slot].tooltip(view_model.values[-1], self.unit)
        print(f"  {slot.canvas_id:<24} {len(view_model):>4} pts  last {view_model.timestamps[-1]:%m/%d %H:%M}  {tooltip}")


async def main() -> None:
    parser = argparse.ArgumentParser(description="Watch the irrigation dashboard refresh loop from a console.")
    parser.add_argument("--token", default=os.environ.get("DSS_TOKEN"), help="Identity token (default: $DSS_TOKEN)")
    parser.add_argument("--url", help="Sign-in redirect URL carrying #id_token=...")
    parser.add_argument("--unit", choices=["mm", "in"], help="Display unit for rainfall and ET")
    parser.add_argument("--depth", type=int, choices=[1, 2, 3, 4], help="Soil moisture depth selector")
    parser.add_argument("--duration", type=float, help="Stop after this many seconds")
    parser.add_argument("--once", action="store_true", help="Single fetch and render, no refresh loop")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    token = token_from_url(args.url) if args.url else args.token

    overrides: dict[str, object] = {}
    if args.unit:
        overrides["unit"] = args.unit
    if args.depth:
        overrides["depth"] = args.depth
    config = DssConfig.from_env(**overrides)

    async with DssClient(config) as client:
        controller = DashboardController(client, ConsoleSink(config.unit), config=config, token=token)

        if not controller.load():
            print("No token available; pass --token, --url or set DSS_TOKEN.", file=sys.stderr)
            return

        if args.once:
            outcome = await controller.refresh()
            print(f"refresh: {outcome.value}")
            return

        controller.set_visible(True)
        try:
            if args.duration:
                await asyncio.sleep(args.duration)
            else:
                await asyncio.Event().wait()
        finally:
            controller.set_visible(False)
            await controller.close()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
