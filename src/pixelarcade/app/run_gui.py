from __future__ import annotations

import argparse
import logging

from pixelarcade.core.config import load_game_config
from pixelarcade.core.model.map import resolve_map_path
from pixelarcade.gui.pyglet_app import run


def main(argv: list[str] | None = None) -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--map", default="default", help="Map name (e.g. serpent) or path to json")
    ap.add_argument("--config", default=None, help="Balance config JSON")
    ap.add_argument("--set", dest="overrides", action="append", default=[], help="Config override a.b=value")
    ap.add_argument("--seed", type=int, default=None)
    ap.add_argument("--verbose", action="store_true")
    args = ap.parse_args(argv)

    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)
    run(resolve_map_path(args.map), load_game_config(args.config, args.overrides), seed=args.seed)


if __name__ == "__main__":
    main()
