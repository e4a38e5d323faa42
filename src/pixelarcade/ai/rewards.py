from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RewardState:
    money: int
    lives: int
    wave: int


@dataclass(frozen=True, slots=True)
class RewardConfig:
    wave_clear_bonus: float = 10.0
    money_weight: float = 0.01
    life_loss_penalty: float = 5.0
    terminal_loss_penalty: float = 100.0
    invalid_action_penalty: float = -1.0


def reward_state_from(state) -> RewardState:
    return RewardState(
        money=int(state.money),
        lives=int(state.lives),
        wave=int(state.wave),
    )


def compute_reward(
    prev_state: RewardState,
    new_state: RewardState,
    *,
    config: RewardConfig,
    invalid_action: bool = False,
    game_lost: bool = False,
) -> float:
    reward = 0.0
    waves_cleared = max(0, new_state.wave - prev_state.wave)
    reward += waves_cleared * config.wave_clear_bonus
    # income only; spending on turrets is not penalised
    reward += max(0, new_state.money - prev_state.money) * config.money_weight
    lives_lost = max(0, prev_state.lives - new_state.lives)
    reward -= lives_lost * config.life_loss_penalty
    if invalid_action:
        reward += config.invalid_action_penalty
    if game_lost:
        reward -= config.terminal_loss_penalty
    return float(reward)
