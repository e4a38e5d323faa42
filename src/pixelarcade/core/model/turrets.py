from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class TurretDef:
    kind: str
    title: str
    price: int
    range: float
    fire_rate: int          # frames between shots
    damage: float
    projectile_speed: float
    color: tuple[int, int, int]
    homing: bool = False
    description: str = ""


TURRET_DEFS: dict[str, TurretDef] = {
    "blaster": TurretDef(
        kind="blaster",
        title="BLASTER",
        price=100,
        range=120.0,
        fire_rate=40,
        damage=10.0,
        projectile_speed=6.0,
        color=(80, 200, 255),
        description="Cheap all-rounder. Medium range, medium rate of fire.",
    ),
    "rapid": TurretDef(
        kind="rapid",
        title="RAPID",
        price=150,
        range=100.0,
        fire_rate=15,
        damage=4.0,
        projectile_speed=8.0,
        color=(255, 220, 60),
        description="Short range, sprays fast low-damage bolts.",
    ),
    "sniper": TurretDef(
        kind="sniper",
        title="SNIPER",
        price=250,
        range=220.0,
        fire_rate=90,
        damage=40.0,
        projectile_speed=12.0,
        color=(255, 90, 90),
        description="Very long range, slow heavy shots.",
    ),
    "seeker": TurretDef(
        kind="seeker",
        title="SEEKER",
        price=300,
        range=150.0,
        fire_rate=60,
        damage=18.0,
        projectile_speed=5.0,
        color=(190, 110, 255),
        homing=True,
        description="Missiles steer towards their target while it lives.",
    ),
}
