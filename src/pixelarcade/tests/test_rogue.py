import pytest

from pixelarcade.rogue.model import (
    DAMAGE_TEXT_LIFE,
    FLOOR,
    GRID_SIZE,
    MESSAGE_LIMIT,
    STAIRS,
    WALL,
    Monster,
    Player,
    new_dungeon,
)
from pixelarcade.rogue.rules import (
    attack_monster,
    check_level_up,
    generate_floor,
    heal,
    log_message,
    monster_count,
    move_player,
    spawn_monster,
    step_texts,
)


def _open_state(seed: int = 3, **player_kw):
    """Bordered room with no interior walls and no monsters."""
    state = new_dungeon(seed=seed, player=Player(**player_kw))
    state.grid = [
        [WALL if x in (0, GRID_SIZE - 1) or y in (0, GRID_SIZE - 1) else FLOOR for x in range(GRID_SIZE)]
        for y in range(GRID_SIZE)
    ]
    return state


def _monster(x: int, y: int, *, hp: int = 30, atk: int = 3, xp: int = 15, gold: int = 4) -> Monster:
    return Monster(x=x, y=y, hp=hp, max_hp=hp, atk=atk, xp=xp, gold=gold)


@pytest.mark.parametrize("seed", [1, 2, 3, 4, 5])
def test_generated_floor_layout(seed: int):
    state = new_dungeon(seed=seed)
    generate_floor(state)
    grid = state.grid
    assert len(grid) == GRID_SIZE and all(len(row) == GRID_SIZE for row in grid)
    for i in range(GRID_SIZE):
        assert grid[0][i] == WALL and grid[GRID_SIZE - 1][i] == WALL
        assert grid[i][0] == WALL and grid[i][GRID_SIZE - 1] == WALL
    assert sum(row.count(STAIRS) for row in grid) == 1
    p = state.player
    assert grid[p.y][p.x] == FLOOR
    assert len(state.monsters) == monster_count(p.floor) == 3
    cells = {(m.x, m.y) for m in state.monsters}
    assert len(cells) == len(state.monsters)
    assert (p.x, p.y) not in cells
    assert all(grid[m.y][m.x] == FLOOR for m in state.monsters)


def test_monster_count_grows_every_second_floor():
    assert [monster_count(f) for f in (1, 2, 3, 4, 5)] == [3, 4, 4, 5, 5]


def test_monster_stats_scale_with_floor():
    state = _open_state(floor=3)
    monster = spawn_monster(state)
    assert monster.hp == monster.max_hp == 50
    assert monster.atk == 5
    assert monster.xp == 25
    assert 3 <= monster.gold <= 12


def test_walls_block_movement():
    state = _open_state()
    assert move_player(state, -1, 0) == "blocked"
    assert (state.player.x, state.player.y) == (1, 1)
    assert move_player(state, 1, 0) == "moved"
    assert (state.player.x, state.player.y) == (2, 1)


def test_bumping_monster_attacks_instead_of_moving():
    state = _open_state()
    monster = _monster(2, 1, hp=500)
    state.monsters.append(monster)
    assert move_player(state, 1, 0) == "attacked"
    assert (state.player.x, state.player.y) == (1, 1)
    assert 8 <= 500 - monster.hp <= 12


def test_kill_awards_xp_and_gold():
    state = _open_state()
    monster = _monster(2, 1, hp=1, xp=15, gold=4)
    state.monsters.append(monster)
    assert attack_monster(state, monster)
    assert state.monsters == []
    assert state.player.xp == 15
    assert state.player.gold == 4
    assert state.player.hp == 100
    assert "+15 XP" in state.messages[0].text


def test_survivor_counter_attacks():
    state = _open_state()
    monster = _monster(2, 1, hp=500, atk=10)
    attack_monster(state, monster)
    assert state.player.hp == 100 - 9


def test_counter_attack_deals_at_least_one():
    state = _open_state(level=10)
    monster = _monster(2, 1, hp=500, atk=1)
    attack_monster(state, monster)
    assert state.player.hp == 99


def test_death_clamps_hp_and_stops_movement():
    state = _open_state(hp=3)
    monster = _monster(2, 1, hp=500, atk=10)
    state.monsters.append(monster)
    move_player(state, 1, 0)
    assert state.player.hp == 0
    assert state.game_over
    assert move_player(state, 0, 1) == "dead"
    assert (state.player.x, state.player.y) == (1, 1)


def test_level_up_applies_growth():
    state = _open_state(xp=150)
    assert check_level_up(state)
    p = state.player
    assert (p.level, p.xp, p.next_level_xp) == (2, 50, 150)
    assert (p.max_hp, p.hp, p.atk) == (120, 120, 15)
    assert not check_level_up(state)


def test_heal_costs_gold_and_caps_at_max():
    state = _open_state(hp=80, gold=60)
    assert heal(state)
    assert state.player.hp == 100
    assert state.player.gold == 10
    assert not heal(state)
    assert state.player.gold == 10
    assert "Not enough gold" in state.messages[0].text


def test_stairs_descend_and_regenerate(tmp_path):
    state = _open_state()
    state.save_path = tmp_path / "save.json"
    state.grid[1][2] = STAIRS
    assert move_player(state, 1, 0) == "descended"
    assert state.player.floor == 2
    assert state.save_path.exists()
    assert len(state.monsters) == monster_count(2)
    assert state.grid[1][2] == FLOOR


def test_descending_autosaves_to_default_path(tmp_path, monkeypatch):
    target = tmp_path / "saves" / "rpg_save.json"
    monkeypatch.setattr("pixelarcade.rogue.model.default_save_path", lambda: target)
    state = _open_state()
    assert state.save_path == target
    state.grid[1][2] = STAIRS
    assert move_player(state, 1, 0) == "descended"
    assert target.exists()
    assert state.messages[0].text == "Game saved!"


def test_message_log_is_newest_first_and_capped():
    state = _open_state()
    for i in range(MESSAGE_LIMIT + 5):
        log_message(state, f"m{i}")
    assert len(state.messages) == MESSAGE_LIMIT
    assert state.messages[0].text == f"m{MESSAGE_LIMIT + 4}"


def test_damage_text_expires():
    state = _open_state()
    monster = _monster(2, 1, hp=500)
    attack_monster(state, monster)
    assert len(state.texts) == 2
    for _ in range(DAMAGE_TEXT_LIFE):
        step_texts(state)
    assert len(state.texts) == 2
    step_texts(state)
    assert state.texts == []
