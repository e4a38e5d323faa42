import argparse
import logging
import random

from gymnasium.utils.env_checker import check_env

from pixelarcade.ai.env import TowerDefenseEnv


def _choose_action(mask, rng: random.Random) -> int:
    valid = [idx for idx, allowed in enumerate(mask) if bool(allowed)]
    if not valid:
        raise RuntimeError("No valid actions available")
    return rng.choice(valid)


def main() -> int:
    ap = argparse.ArgumentParser()
    ap.add_argument("--map", default="default")
    ap.add_argument("--config", default=None)
    ap.add_argument("--seed", type=int, default=123)
    ap.add_argument("--steps", type=int, default=20)
    ap.add_argument("--max-wave-ticks", type=int, default=20_000)
    ap.add_argument("--verbose", action="store_true")
    args = ap.parse_args()

    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)
    env = TowerDefenseEnv(default_map=args.map, config=args.config, max_wave_ticks=args.max_wave_ticks)
    check_env(env, skip_render_check=True)

    rng = random.Random(args.seed)
    env.reset(seed=args.seed)
    waves = 0
    for step_idx in range(args.steps):
        action = _choose_action(env.action_masks(), rng)
        _, _, terminated, truncated, info = env.step(action)
        if "wave_ticks" in info:
            waves += 1
        if terminated or truncated:
            env.reset(seed=args.seed + step_idx + 1)
    print(f"ok steps={args.steps} waves={waves} actions={env.action_space.n}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
