# src/pixelarcade/core/engine.py
from __future__ import annotations

import logging
from typing import Any, Literal

from .config import GameConfig
from .model.map import MapData
from .model.state import GameState, new_game_state
from .rules.economy import credit, lose_life
from .rules.effects import GOLD, RED, spawn_burst, spawn_text, step_effects
from .rules.enemy_motion import advance_enemy
from .rules.placement import PlacementResult, try_place
from .rules.projectiles import step_projectiles
from .rules.targeting import step_turrets
from .rules.wave_spawner import can_start_wave, check_wave_end, start_next_wave, step_spawner


logger = logging.getLogger(__name__)

ActionType = Literal[
    "START_WAVE",
    "PLACE_TURRET",
    "PAUSE_TOGGLE",
]


class Engine:
    """
    Deterministic tower-defense simulation, no GUI dependency.

    One simulation step is one 60 Hz frame. ``step`` runs whole frames out of
    an accumulator; ``step_frame`` runs exactly one.
    """
    FRAME_DT = 1.0 / 60.0

    def __init__(self, map_data: MapData, config: GameConfig | None = None, *, seed: int | None = None):
        self.map = map_data
        self.config = config
        self.seed = seed
        self.state: GameState = new_game_state(config, seed=seed)
        self._accum = 0.0

    def reset(self) -> None:
        listeners = list(self.state.listeners)
        self.state = new_game_state(self.config, seed=self.seed)
        self.state.listeners.extend(listeners)
        self._accum = 0.0

    def act(self, action_type: ActionType, payload: dict[str, Any] | None = None) -> bool | PlacementResult | None:
        if self.state.game_over:
            return None

        if action_type == "PAUSE_TOGGLE":
            self.state.paused = not self.state.paused
            return self.state.paused

        if action_type == "START_WAVE":
            if self.state.paused:
                return False
            return start_next_wave(self.state, self.map)

        if action_type == "PLACE_TURRET":
            if not payload:
                return None
            x = payload.get("x")
            y = payload.get("y")
            if x is None or y is None:
                return None
            kind = str(payload.get("kind", "blaster"))
            return try_place(self.state, self.map, float(x), float(y), kind)

        raise ValueError(f"Unknown action_type={action_type!r}")

    def step(self, dt_seconds: float) -> str | None:
        if self.state.game_over:
            return "game lost"
        if self.state.paused:
            return None

        self._accum += max(0.0, dt_seconds)
        while self._accum >= self.FRAME_DT:
            self._accum -= self.FRAME_DT
            result = self.step_frame()
            if result is not None:
                return result
        return None

    def step_frame(self) -> str | None:
        """
        One frame, fixed order:
        spawner, turrets, enemies (reverse, prune), projectiles, effects, wave end.
        """
        s = self.state
        if s.game_over:
            return "game lost"
        s.frame += 1

        step_spawner(s, self.map)
        step_turrets(s)
        if self._step_enemies():
            logger.warning("game over on wave=%s frame=%s", s.wave, s.frame)
            return "game lost"
        step_projectiles(s, self.map)
        step_effects(s)
        check_wave_end(s, self.map)
        return None

    def _step_enemies(self) -> bool:
        """Reverse index walk so pops keep the remaining indices valid."""
        s = self.state
        enemies = s.enemies
        path = self.map.path
        for i in range(len(enemies) - 1, -1, -1):
            enemy = enemies[i]
            if enemy.hp <= 0:
                enemies.pop(i)
                credit(s, enemy.bounty)
                spawn_burst(s, enemy.x, enemy.y, RED, count=10, speed=2.5)
                spawn_text(s, enemy.x, enemy.y, f"+${enemy.bounty}", GOLD)
                continue
            if advance_enemy(enemy, path):
                enemies.pop(i)
                if lose_life(s):
                    return True
        return False

    @property
    def can_start_wave(self) -> bool:
        return can_start_wave(self.state)

    def observe(self) -> dict[str, Any]:
        s = self.state
        return {
            "money": s.money,
            "lives": s.lives,
            "wave": s.wave,
            "phase": s.phase.value,
            "paused": s.paused,
            "game_over": s.game_over,
            "frame": s.frame,
            "enemies": [
                {
                    "id": e.id,
                    "x": e.x,
                    "y": e.y,
                    "hp": e.hp,
                    "max_hp": e.max_hp,
                    "speed": e.speed,
                    "waypoint": e.waypoint,
                }
                for e in s.enemies
            ],
            "turrets": [
                {
                    "cell_x": t.cell_x,
                    "cell_y": t.cell_y,
                    "kind": t.kind,
                    "range": t.range,
                    "cooldown": t.cooldown,
                    "angle": t.angle,
                }
                for t in s.turrets
            ],
            "projectiles": len(s.projectiles),
        }
