"""Command line render: ``python -m xwing_base --size small --faction rebel-alliance``."""

import argparse
import asyncio
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from xwing_base.config import load_config
from xwing_base.engine import RenderEngine
from xwing_base.types import BACK_ARC_VARIANTS, FRONT_ARC_VARIANTS, BaseSize, Faction


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Render a custom miniature base")
    parser.add_argument("--config", type=Path, default=None, help="JSON config file")
    parser.add_argument("--assets", type=str, default=None, help="Asset root (dir or URL)")
    parser.add_argument(
        "--size", choices=[s.value for s in BaseSize], default=BaseSize.SMALL.value
    )
    parser.add_argument(
        "--faction", choices=[f.value for f in Faction], default=Faction.NONE.value
    )
    parser.add_argument(
        "--front-arc", choices=["none"] + [a.value for a in FRONT_ARC_VARIANTS], default="none"
    )
    parser.add_argument(
        "--back-arc", choices=["none"] + [a.value for a in BACK_ARC_VARIANTS], default="none"
    )
    parser.add_argument("--pilot", type=str, default="", help="Pilot name")
    parser.add_argument("--initiative", type=str, default="")
    parser.add_argument("--icon", type=Path, default=None, help="Ship icon image")
    parser.add_argument("--out", "-o", type=Path, default=Path("."), help="Output directory")
    return parser


async def run(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    if args.assets:
        config = replace(config, asset_root=args.assets)

    messages: List[str] = []
    engine = RenderEngine(config, on_message=messages.append)
    engine.store.update(
        base_size=args.size,
        faction=args.faction,
        front_arc=args.front_arc,
        back_arc=args.back_arc,
        pilot_name=args.pilot,
        initiative=args.initiative,
    )
    if args.icon is not None:
        await engine.upload_icon(args.icon.read_bytes())

    result = await engine.render()
    if result is not None:
        logging.info(result.status.summary)

    download = await engine.export(lambda d: d.save(args.out))
    for message in messages:
        print(message, file=sys.stderr)
    if download is None:
        return 1
    print(args.out / download.filename)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(name)s] %(message)s")
    logging.getLogger("PIL").setLevel(logging.WARNING)
    args = build_parser().parse_args(argv)
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
