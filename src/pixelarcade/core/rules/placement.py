from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Literal

from ..model.entities import Turret
from .economy import spend
from .effects import GOLD, RED, spawn_text


logger = logging.getLogger(__name__)

RejectReason = Literal["out_of_bounds", "on_path", "occupied", "insufficient_funds"]

REJECT_MESSAGES: dict[str, str] = {
    "out_of_bounds": "Out of bounds",
    "on_path": "Can't build on the path",
    "occupied": "Tile occupied",
    "insufficient_funds": "Not enough money",
}


@dataclass(frozen=True, slots=True)
class PlacementResult:
    accepted: bool
    reason: str
    turret: Turret | None = None


def snap_to_cell(map_data, screen_x: float, screen_y: float) -> tuple[int, int]:
    """Top-left pixel corner of the tile under a screen point."""
    tile = int(map_data.tile)
    return int(screen_x // tile) * tile, int(screen_y // tile) * tile


def cell_center(map_data, cell_x: int, cell_y: int) -> tuple[float, float]:
    tile = map_data.tile
    return cell_x + tile * 0.5, cell_y + tile * 0.5


def cell_in_bounds(map_data, cell_x: int, cell_y: int) -> bool:
    tile = int(map_data.tile)
    if cell_x < 0 or cell_y < 0:
        return False
    return cell_x + tile <= map_data.width and cell_y + tile <= map_data.height


def cell_on_path(map_data, cell_x: int, cell_y: int) -> bool:
    cx, cy = cell_center(map_data, cell_x, cell_y)
    half = map_data.tile * 0.5
    return map_data.path.distance_sq_to(cx, cy) <= half * half


def turret_at(state, cell_x: int, cell_y: int) -> Turret | None:
    for turret in state.turrets:
        if turret.cell_x == cell_x and turret.cell_y == cell_y:
            return turret
    return None


def placement_check(state, map_data, cell_x: int, cell_y: int, kind: str) -> str | None:
    """Reason the tile cannot take a turret of ``kind``, or None if it can."""
    turret_def = state.config.turret_def(kind)
    if not cell_in_bounds(map_data, cell_x, cell_y):
        return "out_of_bounds"
    if cell_on_path(map_data, cell_x, cell_y):
        return "on_path"
    if turret_at(state, cell_x, cell_y) is not None:
        return "occupied"
    if int(state.money) < turret_def.price:
        return "insufficient_funds"
    return None


def can_place(state, map_data, screen_x: float, screen_y: float, kind: str) -> bool:
    cell_x, cell_y = snap_to_cell(map_data, screen_x, screen_y)
    return placement_check(state, map_data, cell_x, cell_y, kind) is None


def buildable_cells(map_data) -> list[tuple[int, int]]:
    tile = int(map_data.tile)
    cells: list[tuple[int, int]] = []
    for y in range(0, map_data.height - tile + 1, tile):
        for x in range(0, map_data.width - tile + 1, tile):
            if cell_on_path(map_data, x, y):
                continue
            cells.append((x, y))
    return cells


def try_place(state, map_data, screen_x: float, screen_y: float, kind: str) -> PlacementResult:
    cell_x, cell_y = snap_to_cell(map_data, screen_x, screen_y)
    cx, cy = cell_center(map_data, cell_x, cell_y)
    reason = placement_check(state, map_data, cell_x, cell_y, kind)
    if reason is not None:
        spawn_text(state, cx, cy, REJECT_MESSAGES[reason], RED)
        return PlacementResult(accepted=False, reason=reason)

    turret_def = state.config.turret_def(kind)
    turret = Turret(
        cell_x=cell_x,
        cell_y=cell_y,
        x=cx,
        y=cy,
        kind=turret_def.kind,
        title=turret_def.title,
        price=turret_def.price,
        range=float(turret_def.range),
        fire_rate=int(turret_def.fire_rate),
        damage=float(turret_def.damage),
        projectile_speed=float(turret_def.projectile_speed),
        homing=bool(turret_def.homing),
        color=turret_def.color,
    )
    # debit and append belong together
    if not spend(state, turret_def.price):
        spawn_text(state, cx, cy, REJECT_MESSAGES["insufficient_funds"], RED)
        return PlacementResult(accepted=False, reason="insufficient_funds")
    state.turrets.append(turret)
    spawn_text(state, cx, cy, f"-${turret_def.price}", GOLD)
    logger.info("placed %s at (%s,%s) money=%s", kind, cell_x, cell_y, state.money)
    return PlacementResult(accepted=True, reason="ok", turret=turret)
