from __future__ import annotations

import random


def normalize_seed(seed: int | None) -> int:
    if seed is None:
        return 1
    seed_val = int(seed) & 0x7FFFFFFF
    return seed_val if seed_val != 0 else 1


def make_rng(seed: int | None) -> random.Random:
    return random.Random(normalize_seed(seed))


def seed_state(state, seed: int | None) -> int:
    seed_val = normalize_seed(seed)
    state.rng = random.Random(seed_val)
    return seed_val
