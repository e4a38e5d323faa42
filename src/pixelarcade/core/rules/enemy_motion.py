# src/pixelarcade/core/rules/enemy_motion.py
from __future__ import annotations

import math

from ..model.entities import Enemy


def advance_enemy(enemy: Enemy, path, *, dt_scale: float = 1.0) -> bool:
    """
    Move one frame along the path; returns True when the last waypoint is reached.

    The waypoint index never leaves [0, len(path)); arriving on the final
    waypoint only raises ``reached_end``.
    """
    if enemy.reached_end:
        return True

    step = enemy.speed * dt_scale
    last = len(path) - 1
    while step > 0.0:
        tx, ty = path.point_at(enemy.waypoint)
        dx = tx - enemy.x
        dy = ty - enemy.y
        dist = math.hypot(dx, dy)
        if dist > step:
            enemy.x += dx / dist * step
            enemy.y += dy / dist * step
            return False

        # snap onto the waypoint and carry the leftover distance
        enemy.x = tx
        enemy.y = ty
        step -= dist
        if enemy.waypoint >= last:
            enemy.reached_end = True
            return True
        enemy.waypoint += 1
    return False
