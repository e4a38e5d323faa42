from pathlib import Path

import pytest

from pixelarcade.core.config import GameConfig
from pixelarcade.core.engine import Engine
from pixelarcade.core.model.entities import Projectile
from pixelarcade.core.model.map import load_map_json
from pixelarcade.core.model.state import WavePhase
from pixelarcade.core.rules.economy import lose_life
from pixelarcade.core.rules.wave_spawner import spawn_enemy


DATA_DIR = Path(__file__).resolve().parents[3] / "data"


def _engine(config: GameConfig | None = None) -> Engine:
    return Engine(load_map_json(DATA_DIR / "maps" / "default.json"), config, seed=1)


def test_killed_enemy_pruned_next_pass_and_paid_once():
    engine = _engine()
    s = engine.state
    enemy = spawn_enemy(s, engine.map)
    s.projectiles.append(
        Projectile(x=enemy.x, y=enemy.y, vx=0.0, vy=0.0, speed=0.0, damage=enemy.hp, radius=4.0, color=(255, 255, 255))
    )

    engine.step_frame()
    # health hits exactly 0 during the projectile pass; pruning happens next frame
    assert enemy.hp == 0
    assert s.enemies == [enemy]
    assert s.projectiles == []
    assert s.money == 350

    engine.step_frame()
    assert s.enemies == []
    assert s.money == 350 + enemy.bounty

    engine.step_frame()
    assert s.money == 350 + enemy.bounty


def test_enemy_reaching_end_costs_one_life():
    engine = _engine()
    s = engine.state
    enemy = spawn_enemy(s, engine.map)
    last = len(engine.map.path) - 1
    enemy.waypoint = last
    enemy.x, enemy.y = engine.map.path.point_at(last)

    assert engine.step_frame() is None
    assert s.enemies == []
    assert s.lives == 19
    assert not s.game_over


def test_last_life_ends_game_on_that_tick():
    engine = _engine(GameConfig(start_lives=1))
    s = engine.state
    enemy = spawn_enemy(s, engine.map)
    last = len(engine.map.path) - 1
    enemy.waypoint = last
    enemy.x, enemy.y = engine.map.path.point_at(last)

    assert engine.step_frame() == "game lost"
    assert s.lives == 0
    assert s.game_over
    assert engine.act("START_WAVE") is None
    assert engine.step_frame() == "game lost"
    assert s.lives == 0


def test_step_keeps_reporting_game_lost():
    engine = _engine(GameConfig(start_lives=1))
    s = engine.state
    enemy = spawn_enemy(s, engine.map)
    last = len(engine.map.path) - 1
    enemy.waypoint = last
    enemy.x, enemy.y = engine.map.path.point_at(last)

    assert engine.step(Engine.FRAME_DT) == "game lost"
    frame = s.frame
    assert engine.step(Engine.FRAME_DT) == "game lost"
    assert s.frame == frame


def test_lives_never_negative():
    engine = _engine(GameConfig(start_lives=1))
    s = engine.state
    assert lose_life(s)
    assert lose_life(s)
    assert s.lives == 0


def test_wave_without_defence_drains_lives_then_returns_to_idle():
    engine = _engine()
    s = engine.state
    assert engine.act("START_WAVE") is True
    for _ in range(5000):
        engine.step_frame()
        if s.phase == WavePhase.IDLE:
            break
    assert s.phase == WavePhase.IDLE
    assert s.lives == 14
    assert s.wave == 2
    assert s.money == 400


def test_pause_freezes_simulation():
    engine = _engine()
    assert engine.act("PAUSE_TOGGLE") is True
    assert engine.act("START_WAVE") is False
    engine.step(1.0)
    assert engine.state.frame == 0
    assert engine.act("PAUSE_TOGGLE") is False


def test_step_runs_whole_frames_from_accumulator():
    engine = _engine()
    engine.step(Engine.FRAME_DT * 3 + 1e-6)
    assert engine.state.frame == 3
    engine.step(Engine.FRAME_DT * 0.5)
    assert engine.state.frame == 3


def test_place_turret_action_returns_placement_result():
    engine = _engine()
    result = engine.act("PLACE_TURRET", {"x": 20.0, "y": 20.0, "kind": "rapid"})
    assert result.accepted
    assert engine.state.money == 200
    assert engine.observe()["turrets"][0]["kind"] == "rapid"


def test_unknown_action_raises():
    engine = _engine()
    with pytest.raises(ValueError):
        engine.act("SELL_TURRET")


def test_reset_keeps_listeners():
    engine = _engine()
    seen = []
    engine.state.listeners.append(lambda name, value: seen.append(name))
    engine.reset()
    engine.act("PLACE_TURRET", {"x": 20.0, "y": 20.0, "kind": "blaster"})
    assert "money" in seen


def test_defended_wave_earns_bounty():
    engine = _engine()
    for x, y in ((100.0, 20.0), (180.0, 20.0), (260.0, 20.0)):
        assert engine.act("PLACE_TURRET", {"x": x, "y": y, "kind": "blaster"}).accepted
    s = engine.state
    engine.act("START_WAVE")
    for _ in range(5000):
        engine.step_frame()
        if s.phase == WavePhase.IDLE:
            break
    assert s.wave == 2
    assert s.money > 50 + 50
