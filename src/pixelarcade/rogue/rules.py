from __future__ import annotations

import logging
import math
from typing import Literal

from .model import (
    CYAN,
    DAMAGE_TEXT_LIFE,
    FLOOR,
    GOLD,
    GREY,
    GRID_SIZE,
    HEAL_AMOUNT,
    HEAL_COST,
    LIME,
    MESSAGE_LIMIT,
    ORANGE,
    RED,
    STAIRS,
    WALL,
    WALL_CHANCE,
    WHITE,
    Color,
    DamageText,
    DungeonState,
    Message,
    Monster,
    Player,
)
from .save import delete_save, load_player, save_player


logger = logging.getLogger(__name__)

MoveOutcome = Literal["dead", "blocked", "attacked", "moved", "descended"]


def log_message(state: DungeonState, text: str, color: Color = GREY) -> None:
    """Newest first; the oldest entry falls off past the limit."""
    state.messages.insert(0, Message(text=text, color=color))
    del state.messages[MESSAGE_LIMIT:]


def add_damage_text(state: DungeonState, x: int, y: int, text: str, color: Color) -> DamageText:
    dt = DamageText(x=x, y=y, text=text, color=color)
    state.texts.append(dt)
    return dt


def step_texts(state: DungeonState) -> None:
    for i in range(len(state.texts) - 1, -1, -1):
        text = state.texts[i]
        text.life += 1
        if text.life > DAMAGE_TEXT_LIFE:
            state.texts.pop(i)


def _interior_cells():
    for y in range(1, GRID_SIZE - 1):
        for x in range(1, GRID_SIZE - 1):
            yield x, y


def generate_floor(state: DungeonState) -> None:
    rng = state.rng
    player = state.player
    grid: list[list[int]] = []
    for y in range(GRID_SIZE):
        row = []
        for x in range(GRID_SIZE):
            if x in (0, GRID_SIZE - 1) or y in (0, GRID_SIZE - 1):
                row.append(WALL)
            else:
                row.append(WALL if rng.random() < WALL_CHANCE else FLOOR)
        grid.append(row)
    state.grid = grid
    state.monsters = []

    # the player's own tile is always walkable
    grid[player.y][player.x] = FLOOR

    candidates = [
        (x, y) for x, y in _interior_cells() if grid[y][x] != WALL and (x, y) != (player.x, player.y)
    ]
    if not candidates:
        candidates = [(x, y) for x, y in _interior_cells() if (x, y) != (player.x, player.y)]
    sx, sy = rng.choice(candidates)
    grid[sy][sx] = STAIRS

    for _ in range(monster_count(player.floor)):
        spawn_monster(state)
    logger.debug("floor %s generated with %s monsters", player.floor, len(state.monsters))


def monster_count(floor: int) -> int:
    return 3 + floor // 2


def spawn_monster(state: DungeonState) -> Monster | None:
    player = state.player
    free = [
        (x, y)
        for x, y in _interior_cells()
        if state.grid[y][x] == FLOOR
        and (x, y) != (player.x, player.y)
        and state.monster_at(x, y) is None
    ]
    if not free:
        return None
    x, y = state.rng.choice(free)
    scale = player.floor
    hp = 20 + scale * 10
    monster = Monster(
        x=x,
        y=y,
        hp=hp,
        max_hp=hp,
        atk=2 + scale,
        xp=10 + scale * 5,
        gold=state.rng.randint(0, 9) + scale,
    )
    state.monsters.append(monster)
    return monster


def move_player(state: DungeonState, dx: int, dy: int) -> MoveOutcome:
    player = state.player
    if not player.alive:
        return "dead"
    nx, ny = player.x + dx, player.y + dy
    if state.tile(nx, ny) == WALL:
        return "blocked"

    monster = state.monster_at(nx, ny)
    if monster is not None:
        attack_monster(state, monster)
        return "attacked"

    player.x, player.y = nx, ny
    if state.tile(nx, ny) == STAIRS:
        next_floor(state)
        return "descended"
    return "moved"


def attack_monster(state: DungeonState, monster: Monster) -> bool:
    """Returns True when the monster dies."""
    player = state.player
    damage = math.floor(player.atk * state.rng.uniform(0.8, 1.2))
    monster.hp -= damage
    add_damage_text(state, monster.x, monster.y, f"-{damage}", WHITE)

    if monster.hp <= 0:
        state.monsters.remove(monster)
        player.xp += monster.xp
        player.gold += monster.gold
        log_message(state, f"Monster slain! +{monster.xp} XP, +{monster.gold} gold", GOLD)
        check_level_up(state)
        return True

    counter = max(1, math.floor(monster.atk - player.level * 0.5))
    player.hp -= counter
    add_damage_text(state, player.x, player.y, f"-{counter}", RED)
    log_message(state, f"The monster hits back for {counter} damage!", RED)
    if player.hp <= 0:
        player.hp = 0
        log_message(state, "GAME OVER! You died.", RED)
        logger.info("player died on floor=%s level=%s", player.floor, player.level)
    return False


def check_level_up(state: DungeonState) -> bool:
    player = state.player
    if player.xp < player.next_level_xp:
        return False
    player.level += 1
    player.xp -= player.next_level_xp
    player.next_level_xp = math.floor(player.next_level_xp * 1.5)
    player.max_hp += 20
    player.hp = player.max_hp
    player.atk += 5
    log_message(state, f"LEVEL UP! You are now level {player.level}!", LIME)
    add_damage_text(state, player.x, player.y, "LEVEL UP!", LIME)
    logger.info("level up to %s", player.level)
    return True


def next_floor(state: DungeonState) -> None:
    state.player.floor += 1
    log_message(state, f"Descending to floor {state.player.floor}...", CYAN)
    generate_floor(state)
    save_game(state)


def heal(state: DungeonState) -> bool:
    player = state.player
    if player.gold < HEAL_COST:
        log_message(state, f"Not enough gold! (need {HEAL_COST})", ORANGE)
        return False
    player.gold -= HEAL_COST
    player.hp = min(player.hp + HEAL_AMOUNT, player.max_hp)
    log_message(state, f"Drank a potion (+{HEAL_AMOUNT} HP)", CYAN)
    return True


def save_game(state: DungeonState) -> None:
    save_player(state.player, state.save_path)
    log_message(state, "Game saved!", LIME)


def load_game(state: DungeonState) -> bool:
    player = load_player(state.save_path)
    if player is None:
        return False
    state.player = player
    log_message(state, "Save loaded!", LIME)
    return True


def reset_game(state: DungeonState) -> None:
    delete_save(state.save_path)
    state.player = Player()
    state.messages.clear()
    state.texts.clear()
    generate_floor(state)
    log_message(state, "A new adventure begins.", CYAN)
