# src/pixelarcade/core/rules/targeting.py
from __future__ import annotations

from ..geometry import angle_to, distance_sq, normalize
from ..model.entities import Enemy, Projectile, Turret


def select_target(turret: Turret, enemies: list[Enemy]) -> Enemy | None:
    """
    Closest live enemy strictly inside the turret's range.

    Ties keep the first enemy met in list order (strict ``<``).
    """
    range_sq = float(turret.range) ** 2
    best: Enemy | None = None
    best_dist = range_sq
    for enemy in enemies:
        if not enemy.alive:
            continue
        dist_sq = distance_sq(turret.x, turret.y, enemy.x, enemy.y)
        if dist_sq < best_dist:
            best_dist = dist_sq
            best = enemy
    return best


def fire(state, turret: Turret, target: Enemy) -> Projectile:
    ux, uy = normalize(target.x - turret.x, target.y - turret.y)
    projectile = Projectile(
        x=turret.x,
        y=turret.y,
        vx=ux * turret.projectile_speed,
        vy=uy * turret.projectile_speed,
        speed=turret.projectile_speed,
        damage=turret.damage,
        radius=float(state.config.projectile_radius),
        color=turret.color,
        homing=turret.homing,
        target_id=target.id,
    )
    state.projectiles.append(projectile)
    turret.cooldown = float(turret.fire_rate)
    return projectile


def update_turret(state, turret: Turret, *, dt_scale: float = 1.0) -> Projectile | None:
    if turret.cooldown > 0.0:
        turret.cooldown = max(0.0, turret.cooldown - dt_scale)

    target = select_target(turret, state.enemies)
    if target is None:
        return None
    turret.angle = angle_to(turret.x, turret.y, target.x, target.y)
    if turret.cooldown > 0.0:
        return None
    return fire(state, turret, target)


def step_turrets(state, *, dt_scale: float = 1.0) -> None:
    """Tick turret -> target -> shot. Targets are recomputed every frame."""
    for turret in state.turrets:
        update_turret(state, turret, dt_scale=dt_scale)
