from __future__ import annotations

from ..events import publish


def credit(state, amount: int) -> None:
    if amount <= 0:
        return
    state.money = int(state.money) + int(amount)
    publish(state, "money", state.money)


def spend(state, amount: int) -> bool:
    """Debit ``amount`` if funds allow; money never goes negative."""
    if amount < 0 or int(state.money) < amount:
        return False
    state.money = int(state.money) - int(amount)
    publish(state, "money", state.money)
    return True


def lose_life(state) -> bool:
    """Returns True when this loss ends the game."""
    state.lives = max(0, int(state.lives) - 1)
    publish(state, "lives", state.lives)
    if state.lives <= 0 and not state.game_over:
        state.game_over = True
        publish(state, "game_over", state.wave)
    return state.game_over


def advance_wave(state) -> None:
    state.wave = int(state.wave) + 1
    publish(state, "wave", state.wave)


def set_phase(state, phase) -> None:
    if state.phase == phase:
        return
    state.phase = phase
    publish(state, "phase", phase)
