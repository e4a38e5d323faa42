import random
from types import SimpleNamespace

from pixelarcade.core.config import DEFAULT_CONFIG
from pixelarcade.core.model.entities import Enemy, Turret
from pixelarcade.core.rules.targeting import select_target, step_turrets, update_turret


def _enemy(enemy_id: int, x: float, y: float, hp: float = 30.0) -> Enemy:
    return Enemy(
        id=enemy_id, x=x, y=y, waypoint=1, speed=1.0, radius=10.0,
        hp=hp, max_hp=hp, bounty=5, scale=1.0,
    )


def _turret(x: float = 100.0, y: float = 100.0, *, kind: str = "blaster") -> Turret:
    d = DEFAULT_CONFIG.turret_def(kind)
    return Turret(
        cell_x=int(x - 20), cell_y=int(y - 20), x=x, y=y, kind=d.kind, title=d.title, price=d.price,
        range=d.range, fire_rate=d.fire_rate, damage=d.damage, projectile_speed=d.projectile_speed,
        homing=d.homing, color=d.color,
    )


def _state(enemies, turrets=()):
    return SimpleNamespace(
        enemies=list(enemies),
        turrets=list(turrets),
        projectiles=[],
        particles=[],
        config=DEFAULT_CONFIG,
        rng=random.Random(1),
    )


def test_selects_closest_enemy_in_range():
    turret = _turret()
    far = _enemy(1, 200.0, 100.0)
    near = _enemy(2, 150.0, 100.0)
    assert select_target(turret, [far, near]) is near


def test_equal_distance_keeps_first_in_list():
    turret = _turret()
    a = _enemy(1, 150.0, 100.0)
    b = _enemy(2, 50.0, 100.0)
    assert select_target(turret, [a, b]) is a
    assert select_target(turret, [b, a]) is b


def test_range_is_strict():
    turret = _turret()
    edge = _enemy(1, 100.0 + turret.range, 100.0)
    assert select_target(turret, [edge]) is None


def test_dead_enemies_are_not_targets():
    turret = _turret()
    dead = _enemy(1, 110.0, 100.0, hp=0.0)
    finished = _enemy(2, 120.0, 100.0)
    finished.reached_end = True
    alive = _enemy(3, 180.0, 100.0)
    assert select_target(turret, [dead, finished, alive]) is alive


def test_fire_resets_cooldown_and_aims_projectile():
    turret = _turret()
    target = _enemy(7, 160.0, 100.0)
    s = _state([target], [turret])

    shot = update_turret(s, turret)
    assert shot is not None
    assert turret.cooldown == float(turret.fire_rate)
    assert shot.target_id == 7
    assert shot.vx > 0 and shot.vy == 0
    assert not shot.homing

    assert update_turret(s, turret) is None
    assert len(s.projectiles) == 1


def test_turret_fires_again_after_cooldown():
    turret = _turret()
    s = _state([_enemy(1, 160.0, 100.0)], [turret])
    for _ in range(turret.fire_rate + 1):
        step_turrets(s)
    assert len(s.projectiles) == 2


def test_no_target_no_shot():
    turret = _turret()
    s = _state([_enemy(1, 500.0, 500.0)], [turret])
    step_turrets(s)
    assert s.projectiles == []
    assert turret.cooldown == 0.0


def test_seeker_projectiles_home():
    turret = _turret(kind="seeker")
    s = _state([_enemy(1, 150.0, 100.0)], [turret])
    shot = update_turret(s, turret)
    assert shot.homing
