# src/pixelarcade/core/rules/wave_spawner.py
from __future__ import annotations

import logging
import math

from ..model.entities import Enemy
from ..model.state import WavePhase
from .economy import advance_wave, credit, set_phase
from .effects import GOLD, ORANGE, spawn_text


logger = logging.getLogger(__name__)


def wave_enemy_count(wave: int, config) -> int:
    return int(config.count_base + math.floor(config.count_per_wave * wave))


def wave_spawn_interval(wave: int, config) -> int:
    """Frames between two spawns; shrinks by a fixed step per wave down to a floor."""
    interval = config.spawn_interval_initial - (wave - 1) * config.spawn_interval_step
    return int(max(config.spawn_interval_min, interval))


def can_start_wave(state) -> bool:
    if state.game_over:
        return False
    return state.phase == WavePhase.IDLE and not state.enemies


def start_next_wave(state, map_data) -> bool:
    """
    Manual wave trigger.

    Rejected (no-op, returns False) unless the controller is IDLE and the
    field is empty. On success the spawn countdown is armed; the first enemy
    appears one full interval later, like a repeating timer.
    """
    if not can_start_wave(state):
        if not state.game_over:
            x, y = map_data.path.point_at(0)
            spawn_text(state, x, y, "Wave in progress", ORANGE)
        return False

    cfg = state.config
    state.spawn_remaining = wave_enemy_count(state.wave, cfg)
    state.spawned_this_wave = 0
    state.spawn_interval = wave_spawn_interval(state.wave, cfg)
    state.spawn_timer = float(state.spawn_interval)
    set_phase(state, WavePhase.SPAWNING)
    logger.info(
        "wave=%s start count=%s interval=%s",
        state.wave,
        state.spawn_remaining,
        state.spawn_interval,
    )
    return True


def step_spawner(state, map_data, *, dt_scale: float = 1.0) -> None:
    if state.phase != WavePhase.SPAWNING:
        return
    state.spawn_timer -= dt_scale
    while state.spawn_timer <= 0.0 and state.spawn_remaining > 0:
        spawn_enemy(state, map_data)
        state.spawn_remaining -= 1
        state.spawned_this_wave += 1
        state.spawn_timer += state.spawn_interval
    if state.spawn_remaining <= 0:
        state.spawn_timer = 0.0
        set_phase(state, WavePhase.SETTLING)


def check_wave_end(state, map_data=None) -> bool:
    """SETTLING -> IDLE once the field is clear; pays the flat clear bonus."""
    if state.phase != WavePhase.SETTLING or state.enemies:
        return False
    cleared = state.wave
    credit(state, state.config.clear_bonus)
    if map_data is not None:
        x, y = map_data.path.point_at(len(map_data.path) - 1)
        spawn_text(state, x, y, f"Wave clear +${state.config.clear_bonus}", GOLD)
    advance_wave(state)
    set_phase(state, WavePhase.IDLE)
    logger.info("wave=%s cleared bonus=%s money=%s", cleared, state.config.clear_bonus, state.money)
    return True


def enemy_stats(wave: int, config) -> dict[str, float]:
    scale = 1.0 + (wave - 1) * config.enemy_hp_growth
    hp = float(math.floor(config.enemy_base_hp * scale + 0.5))
    speed = min(config.enemy_max_speed, config.enemy_base_speed + (wave - 1) * config.enemy_speed_growth)
    return {
        "scale": scale,
        "hp": hp,
        "speed": float(speed),
        "bounty": int(config.enemy_base_bounty + wave // 2),
        "radius": float(config.enemy_radius),
    }


def spawn_enemy(state, map_data) -> Enemy:
    path = map_data.path
    x, y = path.point_at(0)
    stats = enemy_stats(state.wave, state.config)
    enemy = Enemy(
        id=state.next_enemy_id,
        x=float(x),
        y=float(y),
        waypoint=1,
        speed=stats["speed"],
        radius=stats["radius"],
        hp=stats["hp"],
        max_hp=stats["hp"],
        bounty=int(stats["bounty"]),
        scale=stats["scale"],
    )
    state.next_enemy_id += 1
    state.enemies.append(enemy)
    return enemy

