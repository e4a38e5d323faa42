from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
import random
from typing import Any

from pixelarcade.core.model.map import project_root
from pixelarcade.core.rng import make_rng

TILE_SIZE = 32
GRID_SIZE = 15

FLOOR = 0
WALL = 1
STAIRS = 2

WALL_CHANCE = 0.15
HEAL_COST = 50
HEAL_AMOUNT = 50
MESSAGE_LIMIT = 20
DAMAGE_TEXT_LIFE = 20

Color = tuple[int, int, int]

GREY = (170, 170, 170)
GOLD = (255, 215, 0)
RED = (230, 70, 70)
LIME = (50, 255, 50)
CYAN = (0, 255, 255)
ORANGE = (255, 165, 0)
WHITE = (255, 255, 255)


@dataclass(slots=True)
class Player:
    x: int = 1
    y: int = 1
    level: int = 1
    hp: int = 100
    max_hp: int = 100
    xp: int = 0
    next_level_xp: int = 100
    atk: int = 10
    gold: int = 0
    floor: int = 1

    @property
    def alive(self) -> bool:
        return self.hp > 0

    def to_dict(self) -> dict[str, int]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Player":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown player fields: {', '.join(unknown)}")
        try:
            return cls(**{key: int(value) for key, value in data.items()})
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Invalid player record: {exc}") from exc


@dataclass(slots=True)
class Monster:
    x: int
    y: int
    hp: int
    max_hp: int
    atk: int
    xp: int
    gold: int


@dataclass(slots=True)
class Message:
    text: str
    color: Color = GREY


@dataclass(slots=True)
class DamageText:
    x: int
    y: int
    text: str
    color: Color
    life: int = 0


@dataclass(slots=True)
class DungeonState:
    player: Player = field(default_factory=Player)
    grid: list[list[int]] = field(default_factory=list)
    monsters: list[Monster] = field(default_factory=list)
    messages: list[Message] = field(default_factory=list)
    texts: list[DamageText] = field(default_factory=list)
    rng: random.Random = field(default_factory=lambda: random.Random(1))
    save_path: Path | None = None

    @property
    def game_over(self) -> bool:
        return not self.player.alive

    def tile(self, x: int, y: int) -> int:
        if not (0 <= x < GRID_SIZE and 0 <= y < GRID_SIZE):
            return WALL
        return self.grid[y][x]

    def monster_at(self, x: int, y: int) -> Monster | None:
        for monster in self.monsters:
            if monster.x == x and monster.y == y:
                return monster
        return None


def default_save_path() -> Path:
    return project_root() / "saves" / "rpg_save.json"


def new_dungeon(*, seed: int | None = None, player: Player | None = None, save_path: str | Path | None = None) -> DungeonState:
    return DungeonState(
        player=player if player is not None else Player(),
        rng=make_rng(seed),
        save_path=Path(save_path) if save_path is not None else default_save_path(),
    )
