from __future__ import annotations
from dataclasses import dataclass


@dataclass(slots=True)
class Enemy:
    id: int
    x: float
    y: float

    # index of the waypoint currently walked towards
    waypoint: int

    speed: float
    radius: float
    hp: float
    max_hp: float
    bounty: int
    scale: float
    reached_end: bool = False

    @property
    def alive(self) -> bool:
        return self.hp > 0 and not self.reached_end


@dataclass(slots=True)
class Turret:
    cell_x: int
    cell_y: int
    x: float
    y: float
    kind: str
    title: str
    price: int
    range: float
    fire_rate: int
    damage: float
    projectile_speed: float
    homing: bool
    color: tuple[int, int, int]
    angle: float = 0.0
    cooldown: float = 0.0


@dataclass(slots=True)
class Projectile:
    x: float
    y: float
    vx: float
    vy: float
    speed: float
    damage: float
    radius: float
    color: tuple[int, int, int]
    homing: bool = False
    # enemy id, resolved against the live list every tick
    target_id: int | None = None


@dataclass(slots=True)
class Particle:
    x: float
    y: float
    vx: float
    vy: float
    life: int
    max_life: int
    color: tuple[int, int, int]
    size: float


@dataclass(slots=True)
class FloatingText:
    x: float
    y: float
    text: str
    color: tuple[int, int, int]
    life: int
    max_life: int
    drift: float = -0.6
