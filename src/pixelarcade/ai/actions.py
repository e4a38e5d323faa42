from __future__ import annotations

from dataclasses import dataclass
import logging

from pixelarcade.core.rules.placement import buildable_cells, cell_center, placement_check
from pixelarcade.core.rules.wave_spawner import can_start_wave


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class StartWave:
    pass


@dataclass(frozen=True, slots=True)
class Place:
    turret_type: int
    cell: int


@dataclass(frozen=True, slots=True)
class Noop:
    pass


Action = StartWave | Place | Noop


@dataclass(frozen=True, slots=True)
class ActionOffsets:
    noop: int
    start_wave: int
    place: int


@dataclass(frozen=True, slots=True)
class ActionSpaceSpec:
    map_name: str
    turret_kinds: tuple[str, ...]
    cell_positions: tuple[tuple[int, int], ...]
    offsets: ActionOffsets
    place_count: int
    num_actions: int


def action_space_spec(map_data, turret_kinds) -> ActionSpaceSpec:
    kinds = tuple(str(kind) for kind in turret_kinds)
    cells = list(buildable_cells(map_data))
    cells.sort(key=lambda cell: (cell[1], cell[0]))
    offsets = ActionOffsets(noop=0, start_wave=1, place=2)
    place_count = len(kinds) * len(cells)
    logger.debug("action space map=%s kinds=%s cells=%s", map_data.name, len(kinds), len(cells))
    return ActionSpaceSpec(
        map_name=str(map_data.name),
        turret_kinds=kinds,
        cell_positions=tuple(cells),
        offsets=offsets,
        place_count=place_count,
        num_actions=offsets.place + place_count,
    )


def flatten(action: Action, spec: ActionSpaceSpec) -> int:
    if isinstance(action, Noop):
        return spec.offsets.noop
    if isinstance(action, StartWave):
        return spec.offsets.start_wave
    if isinstance(action, Place):
        if not 0 <= action.turret_type < len(spec.turret_kinds):
            raise ValueError(f"turret_type out of range: {action.turret_type}")
        if not 0 <= action.cell < len(spec.cell_positions):
            raise ValueError(f"cell out of range: {action.cell}")
        return spec.offsets.place + action.turret_type * len(spec.cell_positions) + action.cell
    raise TypeError(f"Unknown action {action!r}")


def unflatten(action_id: int, spec: ActionSpaceSpec) -> Action:
    if action_id < 0 or action_id >= spec.num_actions:
        raise ValueError(f"action id out of range: {action_id}")
    if action_id == spec.offsets.noop:
        return Noop()
    if action_id == spec.offsets.start_wave:
        return StartWave()
    turret_type, cell = divmod(action_id - spec.offsets.place, len(spec.cell_positions))
    return Place(turret_type=turret_type, cell=cell)


def place_payload(action: Place, spec: ActionSpaceSpec, map_data) -> dict[str, float | str]:
    cell_x, cell_y = spec.cell_positions[action.cell]
    x, y = cell_center(map_data, cell_x, cell_y)
    return {"x": x, "y": y, "kind": spec.turret_kinds[action.turret_type]}


def compute_action_mask(state, map_data, spec: ActionSpaceSpec) -> list[bool]:
    mask = [False] * spec.num_actions
    if state.game_over:
        mask[spec.offsets.noop] = True
        return mask
    mask[spec.offsets.noop] = True
    mask[spec.offsets.start_wave] = can_start_wave(state)
    n_cells = len(spec.cell_positions)
    for t, kind in enumerate(spec.turret_kinds):
        base = spec.offsets.place + t * n_cells
        for c, (cell_x, cell_y) in enumerate(spec.cell_positions):
            mask[base + c] = placement_check(state, map_data, cell_x, cell_y, kind) is None
    return mask
