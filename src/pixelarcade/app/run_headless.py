from __future__ import annotations
import argparse
import logging

from pixelarcade.core.config import load_game_config
from pixelarcade.core.engine import Engine
from pixelarcade.core.model.map import load_map_json, resolve_map_path


logger = logging.getLogger(__name__)


def _parse_placement(raw: str) -> tuple[str, int, int]:
    # kind:col,row  e.g. blaster:4,3
    try:
        kind, coords = raw.split(":", 1)
        col, row = coords.split(",", 1)
        return kind.strip(), int(col), int(row)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"placement must look like kind:col,row, got {raw!r}") from exc


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser()
    ap.add_argument("--map", default="default", help="Map name (e.g. default) or path to json")
    ap.add_argument("--config", default=None, help="Balance config JSON")
    ap.add_argument("--set", dest="overrides", action="append", default=[], help="Config override a.b=value")
    ap.add_argument("--place", action="append", type=_parse_placement, default=[], help="kind:col,row")
    ap.add_argument("--seconds", type=float, default=60.0)
    ap.add_argument("--fps", type=int, default=60)
    ap.add_argument("--seed", type=int, default=1)
    ap.add_argument("--no-auto-waves", dest="auto_waves", action="store_false")
    ap.add_argument("--verbose", action="store_true")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    map_data = load_map_json(resolve_map_path(args.map))
    config = load_game_config(args.config, args.overrides)
    engine = Engine(map_data, config, seed=args.seed)

    tile = map_data.tile
    for kind, col, row in args.place:
        result = engine.act(
            "PLACE_TURRET",
            {"x": col * tile + tile / 2, "y": row * tile + tile / 2, "kind": kind},
        )
        if result is None or not result.accepted:
            reason = getattr(result, "reason", "ignored")
            logger.warning("placement %s at (%s,%s) rejected: %s", kind, col, row, reason)

    frames = int(args.seconds * args.fps)
    outcome = None
    for _ in range(frames):
        if args.auto_waves and engine.can_start_wave:
            engine.act("START_WAVE")
        outcome = engine.step_frame()
        if outcome is not None:
            break

    s = engine.state
    print(
        f"frames={s.frame} wave={s.wave} phase={s.phase.value} lives={s.lives} money={s.money} "
        f"enemies={len(s.enemies)} turrets={len(s.turrets)} outcome={outcome or 'running'}"
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
