import pytest

from termvaders.errors import ConfigError
from termvaders.settings import Settings, from_env, load_settings


def test_defaults():
    settings = load_settings(environ={})
    assert (settings.width, settings.height) == (40, 20)
    assert settings.bottom_boundary == 19
    assert settings.channel_capacity is None
    assert settings.input_backend == "curses"
    assert settings.audio is True


def test_env_overrides():
    settings = from_env(environ={
        "TERMVADERS_WIDTH": "50",
        "TERMVADERS_AUDIO": "off",
        "TERMVADERS_SHOT_COOLDOWN": "0.5",
        "TERMVADERS_CHANNEL_CAPACITY": "8",
        "TERMVADERS_INPUT_BACKEND": "pynput",
    })
    assert settings.width == 50
    assert settings.audio is False
    assert settings.shot_cooldown == 0.5
    assert settings.channel_capacity == 8
    assert settings.input_backend == "pynput"


def test_malformed_env_falls_back_to_default():
    settings = from_env(environ={"TERMVADERS_HEIGHT": "tall", "TERMVADERS_AUDIO": "maybe"})
    assert settings.height == Settings.height
    assert settings.audio is True


def test_explicit_overrides_win_and_none_is_skipped():
    settings = load_settings(environ={"TERMVADERS_LOG_LEVEL": "DEBUG"}, log_level=None, audio=False)
    assert settings.log_level == "DEBUG"
    assert settings.audio is False


def test_bottom_row_override():
    assert load_settings(environ={}, bottom_row=12).bottom_boundary == 12


@pytest.mark.parametrize(
    "overrides",
    [
        {"width": 2},
        {"max_shots": 0},
        {"channel_capacity": 0},
        {"bottom_row": 20},
        {"bottom_row": -1},
        {"input_backend": "joystick"},
        {"tick_sleep": -1.0},
        {"invader_move_interval": 0.1, "invader_min_interval": 0.25},
    ],
)
def test_invalid_settings(overrides):
    with pytest.raises(ConfigError):
        load_settings(environ={}, **overrides)


def test_unknown_setting():
    with pytest.raises(ConfigError):
        load_settings(environ={}, difficulty="hard")
