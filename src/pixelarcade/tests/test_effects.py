import pytest

from pixelarcade.core.events import subscribe, unsubscribe
from pixelarcade.core.model.state import WavePhase, new_game_state
from pixelarcade.core.rules.economy import credit, set_phase, spend
from pixelarcade.core.rules.effects import (
    PARTICLE_LIFE,
    TEXT_LIFE,
    WHITE,
    spawn_burst,
    spawn_text,
    step_effects,
)


def test_floating_text_drifts_and_expires():
    s = new_game_state()
    text = spawn_text(s, 100.0, 100.0, "+$5")
    step_effects(s)
    assert text.y == pytest.approx(99.4)
    for _ in range(TEXT_LIFE - 1):
        step_effects(s)
    assert s.texts == []


def test_burst_particles_expire_after_their_life():
    s = new_game_state(seed=4)
    spawn_burst(s, 50.0, 50.0, WHITE, count=5)
    assert len(s.particles) == 5
    for _ in range(PARTICLE_LIFE - 1):
        step_effects(s)
    assert len(s.particles) == 5
    step_effects(s)
    assert s.particles == []


def test_bursts_are_seeded():
    a = new_game_state(seed=9)
    b = new_game_state(seed=9)
    spawn_burst(a, 0.0, 0.0, WHITE)
    spawn_burst(b, 0.0, 0.0, WHITE)
    assert [(p.vx, p.vy) for p in a.particles] == [(p.vx, p.vy) for p in b.particles]


def test_spend_never_goes_negative():
    s = new_game_state()
    assert not spend(s, 351)
    assert s.money == 350
    assert spend(s, 350)
    assert s.money == 0
    assert not spend(s, 1)


def test_hud_listeners_receive_changes():
    s = new_game_state()
    seen = []

    def listener(name, value):
        seen.append((name, value))

    subscribe(s, listener)
    credit(s, 25)
    set_phase(s, WavePhase.SPAWNING)
    set_phase(s, WavePhase.SPAWNING)
    unsubscribe(s, listener)
    credit(s, 5)

    assert seen == [("money", 375), ("phase", WavePhase.SPAWNING)]
