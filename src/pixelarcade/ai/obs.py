from __future__ import annotations

from typing import Any
import math

from pixelarcade.core.model.state import WavePhase

from .actions import ActionSpaceSpec


MONEY_SCALE = 10_000.0
WAVE_SCALE = 100.0
ENEMY_SCALE = 100.0

SCALAR_KEYS = (
    "money_norm",
    "lives_norm",
    "wave_norm",
    "phase_idle",
    "phase_spawning",
    "phase_settling",
    "enemy_count_norm",
    "turret_count_norm",
)


def _log_norm(value: int | float, scale: float) -> float:
    if scale <= 0:
        return 0.0
    return min(1.0, math.log1p(max(0.0, float(value))) / math.log1p(scale))


def build_observation(state, map_data, spec: ActionSpaceSpec) -> dict[str, Any]:
    start_lives = max(1, int(state.config.start_lives))
    n_cells = max(1, len(spec.cell_positions))

    kind_index = {kind: i for i, kind in enumerate(spec.turret_kinds)}
    occupied = {(t.cell_x, t.cell_y): t.kind for t in state.turrets}
    n_kinds = max(1, len(spec.turret_kinds))
    cells = []
    for cell in spec.cell_positions:
        kind = occupied.get(cell)
        cells.append(0.0 if kind is None else (kind_index.get(kind, 0) + 1) / n_kinds)

    return {
        "money_norm": _log_norm(state.money, MONEY_SCALE),
        "lives_norm": min(1.0, state.lives / start_lives),
        "wave_norm": _log_norm(state.wave, WAVE_SCALE),
        "phase_idle": float(state.phase == WavePhase.IDLE),
        "phase_spawning": float(state.phase == WavePhase.SPAWNING),
        "phase_settling": float(state.phase == WavePhase.SETTLING),
        "enemy_count_norm": _log_norm(len(state.enemies), ENEMY_SCALE),
        "turret_count_norm": min(1.0, len(state.turrets) / n_cells),
        "cells": cells,
    }


def flatten_observation(obs: dict[str, Any]) -> list[float]:
    values = [float(obs[key]) for key in SCALAR_KEYS]
    values.extend(float(v) for v in obs["cells"])
    return values


def observation_size(spec: ActionSpaceSpec) -> int:
    return len(SCALAR_KEYS) + len(spec.cell_positions)
