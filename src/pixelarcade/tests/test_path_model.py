from pathlib import Path

import pytest

from pixelarcade.core.model.map import MapData, PathModel, load_map_json, resolve_map_path


DATA_DIR = Path(__file__).resolve().parents[3] / "data"


def test_default_map_waypoints_become_tile_centers():
    m = load_map_json(DATA_DIR / "maps" / "default.json")
    assert m.width == 600 and m.height == 600 and m.tile == 40
    assert len(m.path) == len(m.waypoints) == 8
    assert m.path.point_at(0) == (20.0, 60.0)
    assert m.path.point_at(len(m.path) - 1) == (580.0, 540.0)
    assert len(m.path.segments()) == 7


def test_every_shipped_map_loads():
    for map_file in sorted((DATA_DIR / "maps").glob("*.json")):
        m = load_map_json(map_file)
        assert m.width <= 600
        assert len(m.path) >= 2


def test_path_needs_two_points():
    with pytest.raises(ValueError):
        PathModel.from_waypoints([(0, 0)], 40)


def test_map_rejects_oversized_width():
    with pytest.raises(ValueError):
        MapData(name="wide", width=640, height=400, tile=40, waypoints=[(0, 0), (5, 0)])


def test_distance_to_path_is_distance_to_nearest_segment():
    path = PathModel.from_waypoints([(0, 0), (4, 0), (4, 4)], 40)
    # (20, 20) -> (180, 20) -> (180, 180)
    assert path.distance_to(100, 60) == pytest.approx(40.0)
    assert path.distance_to(220, 100) == pytest.approx(40.0)


def test_resolve_map_path_handles_names_and_files(tmp_path):
    assert resolve_map_path("serpent", root=tmp_path) == tmp_path / "data" / "maps" / "serpent.json"
    direct = tmp_path / "custom.json"
    direct.write_text("{}", encoding="utf-8")
    assert resolve_map_path(str(direct), root=tmp_path) == direct
