# src/pixelarcade/core/rules/projectiles.py
from __future__ import annotations

from ..geometry import distance_sq, normalize
from ..model.entities import Enemy, Projectile
from .effects import spawn_burst


def find_enemy(enemies: list[Enemy], enemy_id: int | None) -> Enemy | None:
    if enemy_id is None:
        return None
    for enemy in enemies:
        if enemy.id == enemy_id:
            return enemy if enemy.alive else None
    return None


def _steer(projectile: Projectile, enemies: list[Enemy]) -> None:
    target = find_enemy(enemies, projectile.target_id)
    if target is None:
        # lost target: fly straight on, any enemy can still be hit
        projectile.target_id = None
        return
    ux, uy = normalize(target.x - projectile.x, target.y - projectile.y)
    if ux == 0.0 and uy == 0.0:
        return
    projectile.vx = ux * projectile.speed
    projectile.vy = uy * projectile.speed


def update_projectile(state, projectile: Projectile, width: float, height: float) -> bool:
    """
    Advance one frame; returns True on the frame the projectile is done.

    Damage only: bounty and enemy removal belong to the simulation loop.
    """
    enemies = state.enemies
    if projectile.homing and projectile.target_id is not None:
        _steer(projectile, enemies)

    projectile.x += projectile.vx
    projectile.y += projectile.vy

    for enemy in enemies:
        if not enemy.alive:
            continue
        reach = enemy.radius + projectile.radius
        if distance_sq(projectile.x, projectile.y, enemy.x, enemy.y) < reach * reach:
            enemy.hp -= projectile.damage
            spawn_burst(state, projectile.x, projectile.y, projectile.color, count=4)
            return True

    return projectile.x < 0.0 or projectile.x > width or projectile.y < 0.0 or projectile.y > height


def step_projectiles(state, map_data) -> None:
    width = float(map_data.width)
    height = float(map_data.height)
    # oldest shot resolves first
    state.projectiles[:] = [
        p for p in list(state.projectiles) if not update_projectile(state, p, width, height)
    ]
