from dataclasses import replace

from termvaders.frame import new_frame
from termvaders.invaders import Invader, InvaderSwarm
from termvaders.player import Player, Shot


def test_starts_centered_on_bottom_row(settings):
    player = Player(settings)
    assert (player.x, player.y) == (settings.width // 2, settings.height - 1)


def test_movement_is_bounded_and_idempotent_at_edges(settings):
    player = Player(settings)
    for _ in range(settings.width * 2):
        player.move_left()
    assert player.x == 0
    player.move_left()
    assert player.x == 0
    for _ in range(settings.width * 2):
        player.move_right()
    assert player.x == settings.width - 1
    player.move_right()
    assert player.x == settings.width - 1


def test_shoot_refused_within_cooldown(settings):
    player = Player(replace(settings, shot_cooldown=0.3, max_shots=10))
    results = []
    for _ in range(3):
        results.append(player.shoot())
        player.update(0.1)
    assert results == [True, False, False]
    player.update(0.5)
    assert player.shoot() is True
    assert len(player.shots) == 2


def test_shoot_limited_by_live_shots(settings):
    player = Player(replace(settings, max_shots=2))
    assert player.shoot()
    assert player.shoot()
    assert player.shoot() is False
    assert len(player.shots) == 2


def test_shot_starts_above_ship_and_climbs(settings):
    player = Player(settings)
    player.shoot()
    shot = player.shots[0]
    assert (shot.x, shot.y) == (player.x, player.y - 1)
    player.update(settings.shot_step)
    assert shot.y == player.y - 2


def test_shot_removed_at_top(settings):
    player = Player(settings)
    player.shoot()
    for _ in range(settings.height):
        player.update(settings.shot_step)
    assert player.shots == []


def test_exploding_shot_stays_then_disappears():
    shot = Shot(3, 4, step=0.05, explode_time=0.25)
    shot.explode()
    shot.update(0.1)
    assert (shot.y, shot.dead()) == (4, False)
    shot.update(0.2)
    assert shot.dead()


def test_detect_hits_removes_exactly_the_overlapping_pair(settings):
    player = Player(settings)
    swarm = InvaderSwarm(settings)
    swarm.army = [Invader(player.x, player.y - 1), Invader(0, 2)]
    player.shoot()

    assert player.detect_hits(swarm) is True
    assert swarm.count == 1
    assert swarm.army == [Invader(0, 2)]
    assert player.shots[0].exploding
    # An exploding shot cannot hit again
    swarm.army.append(Invader(player.x, player.y - 1))
    assert player.detect_hits(swarm) is False
    assert swarm.count == 2


def test_detect_hits_without_overlap(settings):
    player = Player(settings)
    swarm = InvaderSwarm(settings)
    before = swarm.count
    player.move_left()  # odd column, the formation only uses even ones
    player.shoot()
    assert player.detect_hits(swarm) is False
    assert swarm.count == before


def test_draw_ship_and_shots(settings):
    player = Player(settings)
    player.shoot()
    frame = new_frame(settings.width, settings.height)
    player.draw(frame)
    assert frame.get(player.x, player.y) == "A"
    assert frame.get(player.x, player.y - 1) == "|"
    player.shots[0].explode()
    player.draw(frame)
    assert frame.get(player.x, player.y - 1) == "*"
