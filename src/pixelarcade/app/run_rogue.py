from __future__ import annotations

import argparse
import logging

from pixelarcade.gui.rogue_app import run


def main(argv: list[str] | None = None) -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--save", dest="save_path", default=None, help="Save file (default saves/rpg_save.json)")
    ap.add_argument("--seed", type=int, default=None)
    ap.add_argument("--verbose", action="store_true")
    args = ap.parse_args(argv)

    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)
    run(seed=args.seed, save_path=args.save_path)


if __name__ == "__main__":
    main()
