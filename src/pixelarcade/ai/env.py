from __future__ import annotations

import logging
from typing import Any

import gymnasium as gym
import numpy as np

from pixelarcade.core.config import DEFAULT_CONFIG, GameConfig, load_game_config
from pixelarcade.core.engine import Engine
from pixelarcade.core.model.map import load_map_json, resolve_map_path
from pixelarcade.core.model.state import WavePhase
from pixelarcade.core.rng import seed_state

from .actions import (
    Action,
    Noop,
    Place,
    StartWave,
    action_space_spec,
    compute_action_mask,
    flatten,
    place_payload,
    unflatten,
)
from .obs import build_observation, flatten_observation, observation_size
from .rewards import RewardConfig, compute_reward, reward_state_from


logger = logging.getLogger(__name__)


class TowerDefenseEnv(gym.Env):
    """
    Build-phase environment: every placement is one step, and START_WAVE
    simulates the whole wave before returning.
    """

    metadata = {"render_modes": []}

    def __init__(
        self,
        *,
        default_map: str = "default",
        config: GameConfig | str | None = None,
        max_wave_ticks: int = 20_000,
        max_waves: int | None = None,
        strict_invalid_actions: bool = False,
        reward_config: RewardConfig | None = None,
    ) -> None:
        super().__init__()
        self.default_map = default_map
        if config is None or isinstance(config, GameConfig):
            self.config = config
        else:
            self.config = load_game_config(config)
        self.max_wave_ticks = int(max_wave_ticks)
        self.max_waves = max_waves
        self.strict_invalid_actions = strict_invalid_actions
        self.reward_config = reward_config or RewardConfig()

        self.engine: Engine | None = None
        self.episode_seed: int | None = None
        self._last_action_mask: np.ndarray | None = None
        self._last_obs_dict: dict[str, Any] | None = None

        self.map_data = load_map_json(resolve_map_path(self.default_map))
        kinds = self._turret_kinds()
        self.action_spec = action_space_spec(self.map_data, kinds)
        self.action_space = gym.spaces.Discrete(self.action_spec.num_actions)
        self.observation_space = gym.spaces.Box(
            low=0.0,
            high=1.0,
            shape=(observation_size(self.action_spec),),
            dtype=np.float32,
        )

    def _turret_kinds(self) -> list[str]:
        cfg = self.config if self.config is not None else DEFAULT_CONFIG
        return sorted(cfg.turrets, key=lambda kind: cfg.turrets[kind].price)

    @property
    def last_obs(self) -> dict[str, Any] | None:
        return self._last_obs_dict

    def reset(self, *, seed: int | None = None, options: dict[str, Any] | None = None) -> tuple[np.ndarray, dict]:
        super().reset(seed=seed)
        if options and options.get("map_path"):
            self.map_data = load_map_json(resolve_map_path(str(options["map_path"])))
            self.action_spec = action_space_spec(self.map_data, self._turret_kinds())
            self.action_space = gym.spaces.Discrete(self.action_spec.num_actions)
            self.observation_space = gym.spaces.Box(
                low=0.0,
                high=1.0,
                shape=(observation_size(self.action_spec),),
                dtype=np.float32,
            )

        self.engine = Engine(self.map_data, self.config)
        engine_seed = int(self.np_random.integers(0, 2**31 - 1))
        self.episode_seed = seed_state(self.engine.state, engine_seed)

        self._last_action_mask = self._compute_action_mask()
        obs = self._observe()
        info = {"engine_seed": self.episode_seed, "action_mask": self._last_action_mask}
        logger.debug("reset map=%s seed=%s engine_seed=%s", self.map_data.name, seed, self.episode_seed)
        return obs, info

    def _observe(self) -> np.ndarray:
        obs_dict = build_observation(self.engine.state, self.map_data, self.action_spec)
        self._last_obs_dict = obs_dict
        return np.asarray(flatten_observation(obs_dict), dtype=np.float32)

    def _compute_action_mask(self) -> np.ndarray:
        if self.engine is None or self.action_spec is None:
            raise RuntimeError("Environment not reset")
        mask = compute_action_mask(self.engine.state, self.map_data, self.action_spec)
        return np.asarray(mask, dtype=bool)

    def action_masks(self) -> np.ndarray:
        if self._last_action_mask is None:
            self._last_action_mask = self._compute_action_mask()
        return self._last_action_mask

    def _resolve_action(self, action: Action | int) -> tuple[Action, int, bool]:
        try:
            if isinstance(action, (int, np.integer)):
                action_id = int(action)
                return unflatten(action_id, self.action_spec), action_id, False
            return action, flatten(action, self.action_spec), False
        except (TypeError, ValueError) as exc:
            if self.strict_invalid_actions:
                raise ValueError(f"Invalid action {action!r}") from exc
            return Noop(), self.action_spec.offsets.noop, True

    def step(self, action: Action | int) -> tuple[np.ndarray, float, bool, bool, dict[str, Any]]:
        if self.engine is None or self.action_spec is None:
            raise RuntimeError("Environment not reset")

        action_obj, action_id, invalid_action = self._resolve_action(action)
        mask_before = self.action_masks()
        if not bool(mask_before[action_id]):
            if self.strict_invalid_actions:
                raise ValueError(f"Action not valid in current state: {action_obj!r}")
            invalid_action = True
            action_obj = Noop()
            action_id = self.action_spec.offsets.noop

        prev_state = reward_state_from(self.engine.state)
        info: dict[str, Any] = {"invalid_action": invalid_action, "action_id": action_id}
        truncated = False

        if isinstance(action_obj, StartWave):
            self.engine.act("START_WAVE")
            ticks, timeout = self._run_wave()
            info["wave_ticks"] = ticks
            info["timeout"] = timeout
            truncated = timeout
            logger.debug(
                "wave_done wave=%s ticks=%s lives=%s money=%s",
                self.engine.state.wave,
                ticks,
                self.engine.state.lives,
                self.engine.state.money,
            )
        elif isinstance(action_obj, Place):
            result = self.engine.act("PLACE_TURRET", place_payload(action_obj, self.action_spec, self.map_data))
            info["placement"] = getattr(result, "reason", None)

        state = self.engine.state
        terminated = bool(state.game_over)
        if self.max_waves is not None and state.wave > self.max_waves:
            truncated = True

        reward = compute_reward(
            prev_state,
            reward_state_from(state),
            config=self.reward_config,
            invalid_action=invalid_action,
            game_lost=terminated,
        )

        self._last_action_mask = self._compute_action_mask()
        info["action_mask"] = self._last_action_mask
        obs = self._observe()
        if terminated:
            logger.info("episode_done wave=%s money=%s", state.wave, state.money)
        return obs, reward, terminated, truncated, info

    def _run_wave(self) -> tuple[int, bool]:
        state = self.engine.state
        ticks = 0
        while ticks < self.max_wave_ticks:
            if state.game_over or state.phase == WavePhase.IDLE:
                break
            self.engine.step_frame()
            ticks += 1
        timeout = ticks >= self.max_wave_ticks and not state.game_over and state.phase != WavePhase.IDLE
        if timeout:
            logger.error("Wave simulation exceeded max_wave_ticks=%s", self.max_wave_ticks)
        return ticks, timeout

    def render(self) -> None:
        return None
