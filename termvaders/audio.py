"""
Audio cues.

Sounds are synthesized at startup with numpy (square/triangle/sawtooth
oscillators, a moving-average low-pass and an attack/decay envelope) and
played through pygame's mixer. Playback is fire-and-forget; ``wait()`` is
only used at shutdown so the last cue is not cut off.
"""

import logging
import os
import sys
import time
from typing import Dict, Optional

import numpy as np

# Suppress pygame welcome message
os.environ.setdefault('PYGAME_HIDE_SUPPORT_PROMPT', '1')

# Prevent microphone permission request on macOS
if sys.platform == 'darwin':
    os.environ.setdefault('SDL_AUDIODRIVER', 'coreaudio')
    os.environ.setdefault('SDL_AUDIO_DEVICE_ADD_CAPTURE', '0')

import pygame  # noqa: E402

logger = logging.getLogger(__name__)

SAMPLE_RATE = 22050

STARTUP = 'startup'
PEW = 'pew'
MOVE = 'move'
EXPLODE = 'explode'
WIN = 'win'
LOSE = 'lose'
CUES = (STARTUP, PEW, MOVE, EXPLODE, WIN, LOSE)


def _timeline(duration: float, sample_rate: int = SAMPLE_RATE) -> np.ndarray:
    return np.linspace(0, duration, int(sample_rate * duration))


def square_wave(frequency: float, duration: float, volume: float = 0.3, sample_rate: int = SAMPLE_RATE) -> np.ndarray:
    """Square wave (classic 8-bit sound)"""
    t = _timeline(duration, sample_rate)
    return volume * np.sign(np.sin(2 * np.pi * frequency * t))


def triangle_wave(frequency: float, duration: float, volume: float = 0.3, sample_rate: int = SAMPLE_RATE) -> np.ndarray:
    """Triangle wave (smoother retro sound)"""
    t = _timeline(duration, sample_rate)
    return volume * 2 * np.abs(2 * ((frequency * t) % 1) - 1) - volume


def sawtooth_wave(frequency: float, duration: float, volume: float = 0.3, sample_rate: int = SAMPLE_RATE) -> np.ndarray:
    """Sawtooth wave (bright, buzzy)"""
    t = _timeline(duration, sample_rate)
    return volume * 2 * ((frequency * t) % 1) - volume


def lowpass(wave: np.ndarray, cutoff_freq: float = 2000, sample_rate: int = SAMPLE_RATE) -> np.ndarray:
    """Moving-average low-pass to soften harsh edges"""
    window_size = max(1, int(sample_rate / cutoff_freq))
    kernel = np.ones(window_size) / window_size
    return np.convolve(wave, kernel, mode='same')


def envelope(wave: np.ndarray, attack: float = 0.01, decay: float = 0.1, sample_rate: int = SAMPLE_RATE) -> np.ndarray:
    """Linear attack at the start, linear fade at the end"""
    length = len(wave)
    attack_samples = min(int(attack * sample_rate), length)
    decay_samples = int(decay * sample_rate)

    env = np.ones(length)
    if attack_samples > 0:
        env[:attack_samples] = np.linspace(0, 1, attack_samples)
    if 0 < decay_samples < length:
        env[-decay_samples:] = np.linspace(1, 0, decay_samples)
    return wave * env


def sequence(notes, total: float, oscillator, volume: float, cutoff: float, sample_rate: int = SAMPLE_RATE) -> np.ndarray:
    """Mix (frequency, start, duration) notes onto a silent track of ``total`` seconds"""
    track = np.zeros(int(sample_rate * total))
    for freq, start, duration in notes:
        note = oscillator(freq, duration, volume, sample_rate)
        note = lowpass(note, cutoff, sample_rate)
        note = envelope(note, 0.01, min(0.15, duration / 2), sample_rate)
        start_sample = int(start * sample_rate)
        end_sample = min(start_sample + len(note), len(track))
        track[start_sample:end_sample] += note[:end_sample - start_sample]
    return track


def to_pcm(wave: np.ndarray) -> np.ndarray:
    """Float wave in [-1, 1] to interleaved 16-bit stereo samples"""
    samples = np.clip(wave * 32767, -32767, 32767).astype(np.int16)
    return np.ascontiguousarray(np.column_stack((samples, samples)))


def synthesize_cues(sample_rate: int = SAMPLE_RATE) -> Dict[str, np.ndarray]:
    """Build the float waveform of every cue"""
    sr = sample_rate
    waves = {}

    # Startup - ominous E minor ascent
    melody = sequence([(330, 0.0, 0.15), (392, 0.15, 0.15), (466, 0.3, 0.2), (659, 0.5, 0.5)],
                      1.0, sawtooth_wave, 0.28, 2000, sr)
    bass = sequence([(82, 0.0, 0.5), (82, 0.5, 0.5)], 1.0, sawtooth_wave, 0.35, 450, sr)
    waves[STARTUP] = envelope(melody + bass, 0.008, 0.3, sr)

    # Pew - sawtooth pitch drop with a bass kick
    t = _timeline(0.06, sr)
    freq_sweep = 1000 - 200 * (t / 0.06)
    high = 0.28 * 2 * ((freq_sweep * t) % 1) - 0.28
    high = envelope(lowpass(high, 4000, sr), 0.0005, 0.03, sr)
    kick = 0.35 * np.sin(2 * np.pi * (200 - 150 * (t / 0.06)) * t)
    kick = envelope(kick, 0.001, 0.035, sr)
    waves[PEW] = high + kick

    # Move - low square thump for each swarm step
    thump = square_wave(55, 0.09, 0.3, sr)
    waves[MOVE] = envelope(lowpass(thump, 600, sr), 0.002, 0.06, sr)

    # Explode - descending sweep with noise
    t = _timeline(0.18, sr)
    freq = 800 - 600 * t / 0.18
    boom = 0.2 * 2 * ((freq * t) % 1) - 0.2
    boom = boom + np.random.uniform(-0.1, 0.1, len(boom))
    waves[EXPLODE] = envelope(lowpass(boom, 3500, sr), 0.005, 0.1, sr)

    # Win - bright C major arpeggio
    arpeggio = sequence([(523, 0.0, 0.1), (659, 0.1, 0.1), (784, 0.2, 0.1), (1047, 0.3, 0.5)],
                        0.8, sawtooth_wave, 0.16, 4000, sr)
    harmony = sequence([(262, 0.0, 0.3), (392, 0.3, 0.5)], 0.8, triangle_wave, 0.22, 1500, sr)
    waves[WIN] = envelope(arpeggio + harmony, 0.01, 0.25, sr)

    # Lose - quick descending phrase ending on a low note
    melody = sequence([(659, 0.0, 0.15), (494, 0.15, 0.15), (392, 0.3, 0.2), (330, 0.5, 0.25), (165, 0.75, 0.75)],
                      1.5, sawtooth_wave, 0.22, 3500, sr)
    bass = sequence([(165, 0.0, 0.3), (147, 0.3, 0.3), (131, 0.6, 0.9)], 1.5, triangle_wave, 0.28, 600, sr)
    waves[LOSE] = envelope(melody + bass, 0.01, 0.3, sr)

    return waves


class RetroSynth:
    """Plays synthesized cues through pygame's mixer"""

    def __init__(self, sample_rate: int = SAMPLE_RATE):
        pygame.mixer.init(frequency=sample_rate, size=-16, channels=2, buffer=512)
        self.sample_rate = sample_rate
        self.sounds: Dict[str, pygame.mixer.Sound] = {
            name: pygame.mixer.Sound(array=to_pcm(wave))
            for name, wave in synthesize_cues(sample_rate).items()
        }

    def play(self, sound_name: str):
        """Play a cue without waiting for it"""
        if sound_name in self.sounds:
            self.sounds[sound_name].play()
        else:
            logger.debug("unknown audio cue %r", sound_name)

    def wait(self, timeout: Optional[float] = None):
        """Block until every playing cue has finished"""
        deadline = None if timeout is None else time.monotonic() + timeout
        while pygame.mixer.get_busy():
            if deadline is not None and time.monotonic() >= deadline:
                logger.debug("audio still busy after %.1fs, giving up", timeout)
                return
            time.sleep(0.01)

    def close(self):
        pygame.mixer.quit()


class SilentAudio:
    """Dispatcher that plays nothing (muted, or no sound device)"""

    def play(self, sound_name: str):
        pass

    def wait(self, timeout: Optional[float] = None):
        pass

    def close(self):
        pass


def open_audio(enabled: bool = True):
    """RetroSynth when audio is enabled and the mixer starts, SilentAudio otherwise"""
    if not enabled:
        return SilentAudio()
    try:
        return RetroSynth()
    except pygame.error as exc:
        logger.warning("audio disabled, mixer failed to start: %s", exc)
        return SilentAudio()
