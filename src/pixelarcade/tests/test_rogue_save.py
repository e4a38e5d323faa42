import json

import pytest

from pixelarcade.rogue.model import Player, new_dungeon
from pixelarcade.rogue.rules import generate_floor, load_game, reset_game, save_game
from pixelarcade.rogue.save import delete_save, load_player, save_player


def test_saved_player_loads_back(tmp_path):
    path = tmp_path / "saves" / "rpg_save.json"
    player = Player(x=4, y=5, level=3, hp=77, max_hp=140, xp=12, next_level_xp=225, atk=20, gold=31, floor=6)
    save_player(player, path)
    assert load_player(path) == player


def test_missing_save_loads_nothing(tmp_path):
    assert load_player(tmp_path / "none.json") is None


@pytest.mark.parametrize(
    "content",
    [
        "{not json",
        json.dumps({"save_version": 1}),
        json.dumps({"save_version": 9, "player": {}}),
        json.dumps({"save_version": 1, "player": {"mana": 3}}),
    ],
)
def test_broken_saves_raise(tmp_path, content: str):
    path = tmp_path / "bad.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(ValueError):
        load_player(path)


def test_delete_save(tmp_path):
    path = save_player(Player(), tmp_path / "s.json")
    assert delete_save(path)
    assert not path.exists()
    assert not delete_save(path)


def test_game_save_load_and_reset(tmp_path):
    path = tmp_path / "rpg_save.json"
    state = new_dungeon(seed=11, save_path=path)
    generate_floor(state)
    state.player.gold = 99
    save_game(state)

    fresh = new_dungeon(seed=12, save_path=path)
    assert load_game(fresh)
    assert fresh.player.gold == 99

    reset_game(fresh)
    assert not path.exists()
    assert fresh.player == Player()
    assert fresh.grid
