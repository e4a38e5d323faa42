from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
import random
from typing import Any, Callable

from ..config import DEFAULT_CONFIG, GameConfig
from ..rng import make_rng
from .entities import Enemy, FloatingText, Particle, Projectile, Turret


class WavePhase(Enum):
    IDLE = "IDLE"
    SPAWNING = "SPAWNING"
    SETTLING = "SETTLING"


@dataclass(slots=True)
class GameState:
    money: int = 350
    lives: int = 20
    wave: int = 1
    paused: bool = False
    game_over: bool = False

    phase: WavePhase = WavePhase.IDLE
    spawn_remaining: int = 0
    spawned_this_wave: int = 0
    spawn_interval: int = 0
    spawn_timer: float = 0.0

    next_enemy_id: int = 1
    frame: int = 0

    enemies: list[Enemy] = field(default_factory=list)
    turrets: list[Turret] = field(default_factory=list)
    projectiles: list[Projectile] = field(default_factory=list)
    particles: list[Particle] = field(default_factory=list)
    texts: list[FloatingText] = field(default_factory=list)

    config: GameConfig = DEFAULT_CONFIG
    rng: random.Random = field(default_factory=lambda: random.Random(1))
    listeners: list[Callable[[str, Any], None]] = field(default_factory=list)


def new_game_state(config: GameConfig | None = None, *, seed: int | None = None) -> GameState:
    cfg = config if config is not None else DEFAULT_CONFIG
    return GameState(
        money=cfg.start_money,
        lives=cfg.start_lives,
        wave=cfg.start_wave,
        config=cfg,
        rng=make_rng(seed),
    )
