from __future__ import annotations

from pathlib import Path
import json
import logging

from .model import Player, default_save_path


logger = logging.getLogger(__name__)

SAVE_VERSION = 1


def save_player(player: Player, path: str | Path | None = None) -> Path:
    target = Path(path) if path is not None else default_save_path()
    target.parent.mkdir(parents=True, exist_ok=True)
    payload = {"save_version": SAVE_VERSION, "player": player.to_dict()}
    target.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
    logger.info("saved player floor=%s level=%s to %s", player.floor, player.level, target)
    return target


def load_player(path: str | Path | None = None) -> Player | None:
    """Player from the save file, or None when there is no save."""
    source = Path(path) if path is not None else default_save_path()
    if not source.exists():
        return None
    try:
        data = json.loads(source.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid save file {source}: {exc}") from exc
    if not isinstance(data, dict) or not isinstance(data.get("player"), dict):
        raise ValueError(f"Save file {source} has no player record")
    version = data.get("save_version", SAVE_VERSION)
    if version != SAVE_VERSION:
        raise ValueError(f"Unsupported save_version {version!r} in {source}")
    player = Player.from_dict(data["player"])
    logger.info("loaded player floor=%s level=%s from %s", player.floor, player.level, source)
    return player


def delete_save(path: str | Path | None = None) -> bool:
    target = Path(path) if path is not None else default_save_path()
    if not target.exists():
        return False
    target.unlink()
    logger.info("deleted save %s", target)
    return True
