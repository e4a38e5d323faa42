from __future__ import annotations

from typing import Any, Callable, Literal

HudField = Literal["money", "lives", "wave", "phase", "game_over"]
Listener = Callable[[str, Any], None]


def subscribe(state, listener: Listener) -> None:
    """Register a HUD listener; it receives (field, new_value) after each change."""
    state.listeners.append(listener)


def unsubscribe(state, listener: Listener) -> None:
    try:
        state.listeners.remove(listener)
    except ValueError:
        pass


def publish(state, name: HudField, value: Any) -> None:
    for listener in list(getattr(state, "listeners", ())):
        listener(name, value)
