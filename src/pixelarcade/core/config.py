from __future__ import annotations

from dataclasses import dataclass, field, replace
import json
import logging
from pathlib import Path
from typing import Any

from .model.turrets import TURRET_DEFS, TurretDef


logger = logging.getLogger(__name__)

_SUPPORTED_SCHEMA_VERSIONS = {1}
_TURRET_KEYS = ("price", "range", "fire_rate", "damage", "projectile_speed")
_ALLOWED_KEYS: dict[str, Any] = {
    "schema_version": None,
    "economy": {
        "start_money": None,
        "start_lives": None,
        "start_wave": None,
        "clear_bonus": None,
    },
    "waves": {
        "count_base": None,
        "count_per_wave": None,
        "spawn_interval_initial": None,
        "spawn_interval_step": None,
        "spawn_interval_min": None,
    },
    "enemies": {
        "base_hp": None,
        "hp_growth": None,
        "base_speed": None,
        "speed_growth": None,
        "max_speed": None,
        "radius": None,
        "base_bounty": None,
    },
    "projectiles": {
        "radius": None,
    },
    # per-kind keys are checked in _validate_turrets
    "turrets": None,
}


@dataclass(frozen=True)
class GameConfig:
    start_money: int = 350
    start_lives: int = 20
    start_wave: int = 1
    clear_bonus: int = 50

    count_base: int = 5
    count_per_wave: float = 1.5
    spawn_interval_initial: int = 60
    spawn_interval_step: int = 3
    spawn_interval_min: int = 18

    enemy_base_hp: float = 30.0
    enemy_hp_growth: float = 0.25
    enemy_base_speed: float = 1.0
    enemy_speed_growth: float = 0.05
    enemy_max_speed: float = 2.5
    enemy_radius: float = 10.0
    enemy_base_bounty: int = 5

    projectile_radius: float = 4.0

    turrets: dict[str, TurretDef] = field(default_factory=lambda: dict(TURRET_DEFS))

    def turret_def(self, kind: str) -> TurretDef:
        try:
            return self.turrets[kind]
        except KeyError as exc:
            raise KeyError(f"Unknown turret kind: {kind!r}") from exc


DEFAULT_CONFIG = GameConfig()


def load_json_config(path: str | Path) -> dict[str, Any]:
    p = Path(path)
    with p.open("r", encoding="utf-8") as f:
        payload = json.load(f)
    if not isinstance(payload, dict):
        raise ValueError(f"config root must be a JSON object: {p}")
    validate_config(payload)
    logger.info("loaded config %s", p)
    return payload


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    out: dict[str, Any] = dict(base)
    for key, value in override.items():
        if key in out and isinstance(out[key], dict) and isinstance(value, dict):
            out[key] = deep_merge(out[key], value)
        else:
            out[key] = value
    return out


def apply_overrides(cfg: dict[str, Any], overrides_list: list[str] | None) -> dict[str, Any]:
    if not overrides_list:
        return cfg

    out = cfg
    for item in overrides_list:
        if "=" not in item:
            raise ValueError(f"override must contain '=': {item}")
        path_str, value_str = item.split("=", 1)
        if not path_str:
            raise ValueError(f"override path empty: {item}")
        keys = path_str.split(".")
        if any(not key for key in keys):
            raise ValueError(f"override path has empty segment: {item}")
        value = _cast_scalar(value_str)

        cursor = out
        for key in keys[:-1]:
            if key not in cursor or not isinstance(cursor[key], dict):
                cursor[key] = {}
            cursor = cursor[key]
        cursor[keys[-1]] = value
    return out


def game_config_from_dict(cfg: dict[str, Any] | None) -> GameConfig:
    """Build a GameConfig from a (validated) config dict; missing keys keep defaults."""
    if not cfg:
        return DEFAULT_CONFIG
    validate_config(cfg)

    economy = cfg.get("economy", {}) or {}
    waves = cfg.get("waves", {}) or {}
    enemies = cfg.get("enemies", {}) or {}
    projectiles = cfg.get("projectiles", {}) or {}
    d = DEFAULT_CONFIG

    turrets = dict(d.turrets)
    for kind, overrides in (cfg.get("turrets", {}) or {}).items():
        turrets[kind] = replace(turrets[kind], **{k: _turret_value(k, v) for k, v in overrides.items()})

    return GameConfig(
        start_money=int(economy.get("start_money", d.start_money)),
        start_lives=int(economy.get("start_lives", d.start_lives)),
        start_wave=int(economy.get("start_wave", d.start_wave)),
        clear_bonus=int(economy.get("clear_bonus", d.clear_bonus)),
        count_base=int(waves.get("count_base", d.count_base)),
        count_per_wave=float(waves.get("count_per_wave", d.count_per_wave)),
        spawn_interval_initial=int(waves.get("spawn_interval_initial", d.spawn_interval_initial)),
        spawn_interval_step=int(waves.get("spawn_interval_step", d.spawn_interval_step)),
        spawn_interval_min=int(waves.get("spawn_interval_min", d.spawn_interval_min)),
        enemy_base_hp=float(enemies.get("base_hp", d.enemy_base_hp)),
        enemy_hp_growth=float(enemies.get("hp_growth", d.enemy_hp_growth)),
        enemy_base_speed=float(enemies.get("base_speed", d.enemy_base_speed)),
        enemy_speed_growth=float(enemies.get("speed_growth", d.enemy_speed_growth)),
        enemy_max_speed=float(enemies.get("max_speed", d.enemy_max_speed)),
        enemy_radius=float(enemies.get("radius", d.enemy_radius)),
        enemy_base_bounty=int(enemies.get("base_bounty", d.enemy_base_bounty)),
        projectile_radius=float(projectiles.get("radius", d.projectile_radius)),
        turrets=turrets,
    )


def load_game_config(path: str | Path | None, overrides_list: list[str] | None = None) -> GameConfig:
    cfg: dict[str, Any] = {"schema_version": 1}
    if path is not None:
        cfg = load_json_config(path)
    cfg = apply_overrides(cfg, overrides_list)
    return game_config_from_dict(cfg)


def _turret_value(key: str, value: Any) -> Any:
    if key in ("price", "fire_rate"):
        return int(value)
    return float(value)


def _cast_scalar(value: str) -> Any:
    lowered = value.strip().lower()
    if lowered in ("true", "false"):
        return lowered == "true"
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        pass
    return value


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_config(cfg: dict[str, Any]) -> None:
    unknown = _find_unknown_keys(cfg, _ALLOWED_KEYS, path="")
    if unknown:
        unknown_str = ", ".join(sorted(unknown))
        raise ValueError(f"unknown config keys: {unknown_str}")

    schema_version = cfg.get("schema_version")
    if schema_version not in _SUPPORTED_SCHEMA_VERSIONS:
        raise ValueError(f"unsupported schema_version: {schema_version}")

    for section in ("economy", "waves", "enemies", "projectiles"):
        values = cfg.get(section)
        if values is None:
            continue
        if not isinstance(values, dict):
            raise ValueError(f"config '{section}' must be a JSON object")
        for key, value in values.items():
            if not _is_number(value):
                raise ValueError(f"config '{section}.{key}' must be a number")
            if value < 0:
                raise ValueError(f"config '{section}.{key}' must be >= 0")

    waves = cfg.get("waves") or {}
    if waves.get("spawn_interval_min", 1) < 1:
        raise ValueError("waves.spawn_interval_min must be >= 1")
    economy = cfg.get("economy") or {}
    if economy.get("start_lives", 1) < 1:
        raise ValueError("economy.start_lives must be >= 1")

    _validate_turrets(cfg.get("turrets"))


def _validate_turrets(turrets: Any) -> None:
    if turrets is None:
        return
    if not isinstance(turrets, dict):
        raise ValueError("config 'turrets' must be a JSON object")
    for kind, values in turrets.items():
        if kind not in TURRET_DEFS:
            raise ValueError(f"unknown turret kind in config: {kind}")
        if not isinstance(values, dict):
            raise ValueError(f"config 'turrets.{kind}' must be a JSON object")
        for key, value in values.items():
            if key not in _TURRET_KEYS:
                raise ValueError(f"unknown config keys: turrets.{kind}.{key}")
            if not _is_number(value) or value <= 0:
                raise ValueError(f"config 'turrets.{kind}.{key}' must be a number > 0")


def _find_unknown_keys(value: Any, allowed: Any, *, path: str) -> list[str]:
    if not isinstance(value, dict) or not isinstance(allowed, dict):
        return []
    unknown: list[str] = []
    for key, sub_value in value.items():
        if key not in allowed:
            unknown.append(f"{path}{key}" if path else key)
            continue
        sub_allowed = allowed[key]
        if isinstance(sub_value, dict) and isinstance(sub_allowed, dict):
            child_path = f"{path}{key}."
            unknown.extend(_find_unknown_keys(sub_value, sub_allowed, path=child_path))
    return unknown
