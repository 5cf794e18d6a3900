from dataclasses import replace

import pytest

from conftest import FakeClock, FakeKeys
from termvaders.channel import frame_channel
from termvaders.errors import ChannelClosedError
from termvaders.frame import new_frame
from termvaders.game import Game, GameState, Outcome
from termvaders.input import Key
from termvaders.invaders import Invader


def _game(settings, audio, batches=None, clock_step=0.01):
    sender, receiver = frame_channel()
    game = Game(settings, sender, audio, FakeKeys(batches), clock=FakeClock(clock_step), sleep=lambda s: None)
    return game, receiver


def test_quit_ends_game_without_frame(settings, audio):
    game, receiver = _game(settings, audio, [[Key.QUIT]])
    assert game.run() == Outcome.QUIT
    assert game.state == GameState.TERMINATED
    assert audio.played == ["startup", "lose"]
    assert receiver.pending == 0
    assert list(receiver) == []


def test_quit_ignores_keys_after_it(settings, audio):
    game, _receiver = _game(settings, audio, [[Key.QUIT, Key.FIRE]])
    game.run()
    assert game.player.shots == []
    assert "pew" not in audio.played


def test_win_when_all_invaders_gone(settings, audio):
    game, receiver = _game(settings, audio)
    game.invaders.army.clear()
    assert game.run() == Outcome.WIN
    assert audio.played == ["startup", "win"]
    assert len(list(receiver)) == 1


def test_lose_when_swarm_reaches_bottom(settings, audio):
    game, receiver = _game(settings, audio)
    game.invaders.army = [Invader(3, settings.bottom_boundary)]
    assert game.run() == Outcome.LOSE
    assert audio.played == ["startup", "lose"]
    assert game.state == GameState.TERMINATED
    assert len(list(receiver)) == 1


def test_tick_state_transitions(settings, audio):
    game, _receiver = _game(settings, audio)
    assert game.tick() == GameState.RUNNING
    game.invaders.army.clear()
    assert game.tick() == GameState.WIN_PENDING
    # No further ticks once the game is decided
    assert game.tick() == GameState.WIN_PENDING
    assert game.ticks == 2
    game.finish()
    assert game.state == GameState.TERMINATED
    assert game.sender.closed


def test_no_send_possible_after_terminated(settings, audio):
    game, _receiver = _game(settings, audio, [[Key.QUIT]])
    game.run()
    assert game.tick() == GameState.TERMINATED
    with pytest.raises(ChannelClosedError):
        game.sender.send(new_frame(settings.width, settings.height))


def test_fire_plays_cue_only_when_shot_created(settings, audio):
    game, _receiver = _game(replace(settings, max_shots=1), audio, [[Key.FIRE, Key.FIRE]])
    game.tick()
    assert audio.played.count("pew") == 1
    assert len(game.player.shots) == 1


def test_movement_keys(settings, audio):
    game, _receiver = _game(settings, audio, [[Key.LEFT, Key.LEFT], [Key.RIGHT]])
    start = game.player.x
    game.tick()
    assert game.player.x == start - 2
    game.tick()
    assert game.player.x == start - 1


def test_move_cue_on_swarm_step(settings, audio):
    game, _receiver = _game(settings, audio, clock_step=settings.invader_move_interval)
    game._last_tick = game.clock()
    game.tick()
    assert audio.played == ["move"]


def test_explode_cue_on_hit(settings, audio):
    game, _receiver = _game(settings, audio, [[Key.FIRE]])
    player = game.player
    game.invaders.army = [Invader(player.x, player.y - 1), Invader(0, 2)]
    game.tick()
    assert "explode" in audio.played
    assert game.invaders.count == 1


def test_frames_sent_in_tick_order(settings, audio):
    game, receiver = _game(settings, audio, [[Key.LEFT], [Key.LEFT], [Key.LEFT]])
    for _ in range(3):
        game.tick()
    frames = [receiver.recv(timeout=0.1) for _ in range(3)]
    positions = [next(x for x in range(settings.width) if f.get(x, settings.height - 1) == "A") for f in frames]
    start = settings.width // 2
    assert positions == [start - 1, start - 2, start - 3]
    assert all(f.frozen for f in frames)


def test_invaders_drawn_over_player(settings, audio):
    game, _receiver = _game(settings, audio)
    game.invaders.army = [Invader(game.player.x, game.player.y)]
    frame = game.draw()
    assert frame.get(game.player.x, game.player.y) in ("x", "+")


def test_send_to_gone_renderer_is_tolerated(settings, audio):
    game, receiver = _game(settings, audio)
    receiver.close()
    assert game.tick() == GameState.RUNNING
    assert game.frames_dropped == 1


def test_delta_comes_from_clock(settings, audio):
    game, _receiver = _game(settings, audio, clock_step=0.5)
    game._last_tick = game.clock()
    game.tick()
    assert game.invaders.move_timer.time_left == pytest.approx(settings.invader_move_interval - 0.5)
