from pathlib import Path

import pytest

from pixelarcade.core.config import DEFAULT_CONFIG
from pixelarcade.core.model.map import load_map_json
from pixelarcade.core.model.state import WavePhase, new_game_state
from pixelarcade.core.rules.wave_spawner import (
    check_wave_end,
    enemy_stats,
    start_next_wave,
    step_spawner,
    wave_enemy_count,
    wave_spawn_interval,
)


DATA_DIR = Path(__file__).resolve().parents[3] / "data"


def _map():
    return load_map_json(DATA_DIR / "maps" / "default.json")


def test_first_wave_spawns_six_then_pays_clear_bonus():
    m = _map()
    s = new_game_state()
    assert (s.money, s.lives, s.wave) == (350, 20, 1)

    assert start_next_wave(s, m)
    assert s.phase == WavePhase.SPAWNING
    assert s.spawn_remaining == 6
    assert s.spawn_interval == 60

    for _ in range(59):
        step_spawner(s, m)
    assert s.enemies == []
    step_spawner(s, m)
    assert len(s.enemies) == 1

    for _ in range(5 * 60):
        step_spawner(s, m)
    assert len(s.enemies) == 6
    assert s.spawned_this_wave == 6
    assert s.phase == WavePhase.SETTLING

    # nothing is paid while enemies remain
    assert not check_wave_end(s, m)
    s.enemies.clear()
    assert check_wave_end(s, m)
    assert s.money == 400
    assert s.wave == 2
    assert s.phase == WavePhase.IDLE


def test_trigger_is_noop_outside_idle():
    m = _map()
    s = new_game_state()
    assert start_next_wave(s, m)
    remaining = s.spawn_remaining
    assert not start_next_wave(s, m)
    assert s.spawn_remaining == remaining
    assert s.phase == WavePhase.SPAWNING
    assert s.wave == 1


def test_trigger_rejected_while_enemies_alive():
    m = _map()
    s = new_game_state()
    start_next_wave(s, m)
    for _ in range(6 * 60):
        step_spawner(s, m)
    assert s.phase == WavePhase.SETTLING
    assert not start_next_wave(s, m)
    assert s.texts[-1].text == "Wave in progress"


def test_spawn_ids_are_unique_and_start_on_first_waypoint():
    m = _map()
    s = new_game_state()
    start_next_wave(s, m)
    for _ in range(6 * 60):
        step_spawner(s, m)
    ids = [e.id for e in s.enemies]
    assert len(set(ids)) == len(ids)
    first = s.enemies[0]
    assert (first.x, first.y) == m.path.point_at(0)
    assert first.waypoint == 1


def test_wave_count_and_interval_formulas():
    assert wave_enemy_count(1, DEFAULT_CONFIG) == 6
    assert wave_enemy_count(2, DEFAULT_CONFIG) == 8
    assert wave_spawn_interval(1, DEFAULT_CONFIG) == 60
    assert wave_spawn_interval(5, DEFAULT_CONFIG) == 48
    assert wave_spawn_interval(100, DEFAULT_CONFIG) == DEFAULT_CONFIG.spawn_interval_min


def test_enemy_stats_scale_with_wave():
    first = enemy_stats(1, DEFAULT_CONFIG)
    assert first["hp"] == 30.0
    assert first["speed"] == 1.0
    assert first["bounty"] == 5

    fifth = enemy_stats(5, DEFAULT_CONFIG)
    assert fifth["hp"] == 60.0
    assert fifth["bounty"] == 7

    late = enemy_stats(200, DEFAULT_CONFIG)
    assert late["speed"] == DEFAULT_CONFIG.enemy_max_speed


@pytest.mark.parametrize(("wave", "hp"), [(2, 38.0), (4, 53.0)])
def test_enemy_hp_rounds_half_up(wave: int, hp: float):
    assert enemy_stats(wave, DEFAULT_CONFIG)["hp"] == hp
