from __future__ import annotations

import math

from ..model.entities import FloatingText, Particle

TEXT_LIFE = 45
PARTICLE_LIFE = 20
PARTICLE_DRAG = 0.92

GOLD = (255, 215, 0)
RED = (230, 70, 70)
WHITE = (240, 240, 240)
ORANGE = (255, 160, 40)


def spawn_text(state, x: float, y: float, text: str, color: tuple[int, int, int] = WHITE) -> FloatingText:
    ft = FloatingText(x=float(x), y=float(y), text=str(text), color=color, life=TEXT_LIFE, max_life=TEXT_LIFE)
    state.texts.append(ft)
    return ft


def spawn_burst(
    state,
    x: float,
    y: float,
    color: tuple[int, int, int],
    *,
    count: int = 6,
    speed: float = 2.0,
) -> None:
    rng = state.rng
    for _ in range(count):
        angle = rng.uniform(0.0, 2.0 * math.pi)
        velocity = rng.uniform(0.3, 1.0) * speed
        state.particles.append(
            Particle(
                x=float(x),
                y=float(y),
                vx=math.cos(angle) * velocity,
                vy=math.sin(angle) * velocity,
                life=PARTICLE_LIFE,
                max_life=PARTICLE_LIFE,
                color=color,
                size=rng.uniform(1.5, 3.0),
            )
        )


def update_particle(p: Particle) -> bool:
    """Advance one frame; returns True once the particle has expired."""
    p.x += p.vx
    p.y += p.vy
    p.vx *= PARTICLE_DRAG
    p.vy *= PARTICLE_DRAG
    p.life -= 1
    return p.life <= 0


def update_text(t: FloatingText) -> bool:
    t.y += t.drift
    t.life -= 1
    return t.life <= 0


def step_effects(state) -> None:
    particles = state.particles
    for i in range(len(particles) - 1, -1, -1):
        if update_particle(particles[i]):
            particles.pop(i)
    texts = state.texts
    for i in range(len(texts) - 1, -1, -1):
        if update_text(texts[i]):
            texts.pop(i)
