from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
import json

from ..geometry import point_segment_distance_sq

MAX_WIDTH = 600


@dataclass(frozen=True, slots=True)
class PathModel:
    """
    Ordered pixel-space route, one point per waypoint (tile centers).

    Immutable once built; enemies only keep an index into it.
    """
    points: tuple[tuple[float, float], ...]

    @classmethod
    def from_waypoints(cls, waypoints, tile: int) -> "PathModel":
        pts = tuple(
            (int(col) * tile + tile * 0.5, int(row) * tile + tile * 0.5)
            for col, row in waypoints
        )
        if len(pts) < 2:
            raise ValueError(f"Path needs at least 2 waypoints, got {len(pts)}")
        return cls(points=pts)

    def point_at(self, index: int) -> tuple[float, float]:
        return self.points[index]

    def length(self) -> int:
        return len(self.points)

    def __len__(self) -> int:
        return len(self.points)

    def segments(self) -> list[tuple[float, float, float, float]]:
        return [
            (x1, y1, x2, y2)
            for (x1, y1), (x2, y2) in zip(self.points[:-1], self.points[1:])
        ]

    def distance_sq_to(self, px: float, py: float) -> float:
        return min(
            point_segment_distance_sq(px, py, x1, y1, x2, y2)
            for x1, y1, x2, y2 in self.segments()
        )

    def distance_to(self, px: float, py: float) -> float:
        return self.distance_sq_to(px, py) ** 0.5


@dataclass(slots=True)
class MapData:
    name: str
    width: int
    height: int
    tile: int
    waypoints: list[tuple[int, int]]
    path: PathModel = field(init=False)

    def __post_init__(self) -> None:
        if self.tile <= 0:
            raise ValueError(f"Map '{self.name}' has invalid tile size {self.tile}")
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Map '{self.name}' has invalid size {self.width}x{self.height}")
        if self.width > MAX_WIDTH:
            raise ValueError(f"Map '{self.name}' is wider than {MAX_WIDTH}px")
        self.path = PathModel.from_waypoints(self.waypoints, self.tile)

    @property
    def columns(self) -> int:
        return self.width // self.tile

    @property
    def rows(self) -> int:
        return self.height // self.tile


def load_map_json(path: str | Path) -> MapData:
    p = Path(path)
    data = json.loads(p.read_text(encoding="utf-8"))

    world = data.get("world", {})
    raw_points = data.get("waypoints")
    if not isinstance(raw_points, list):
        raise ValueError(f"Map file {p} has no 'waypoints' list")
    waypoints: list[tuple[int, int]] = []
    for point in raw_points:
        if not isinstance(point, (list, tuple)) or len(point) != 2:
            raise ValueError(f"Invalid waypoint {point!r} in {p}")
        waypoints.append((int(point[0]), int(point[1])))

    return MapData(
        name=str(data.get("name", p.stem)),
        width=int(world.get("width", 600)),
        height=int(world.get("height", 600)),
        tile=int(world.get("tile", 40)),
        waypoints=waypoints,
    )


def resolve_map_path(map_arg: str, root: Path | None = None) -> Path:
    base = root if root is not None else project_root()
    p = Path(map_arg)
    if p.suffix:
        return p if p.is_absolute() or p.exists() else base / p
    if p.parent == Path("."):
        return base / "data" / "maps" / f"{p.name}.json"
    return base / p.with_suffix(".json")


def project_root() -> Path:
    return Path(__file__).resolve().parents[4]
