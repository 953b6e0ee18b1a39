"""Entry rumble and impact thump, synthesised with numpy and played by pygame.mixer."""
from __future__ import annotations

import logging
import math

import numpy as np
import pygame

from impact_sim.core.config import AUDIO_CFG, AudioCfg
from impact_sim.core.model import ImpactReport, SimulationListener, SimulationState

logger = logging.getLogger(__name__)


def db_to_gain(db: float) -> float:
    return 10.0 ** (db / 20.0)


def brown_noise(samples: int, rng: np.random.Generator) -> np.ndarray:
    """Integrated white noise, detrended so the buffer loops without a click."""

    if samples < 2:
        raise ValueError("samples must be at least 2")
    walk = np.cumsum(rng.standard_normal(samples))
    walk -= np.linspace(walk[0], walk[-1], samples)
    walk -= walk.mean()
    peak = float(np.max(np.abs(walk)))
    return walk / peak if peak > 0.0 else walk


def membrane_hit(cfg: AudioCfg = AUDIO_CFG, sample_rate: int | None = None) -> np.ndarray:
    """Sine drum whose pitch falls from ``octaves`` times the base note."""

    rate = sample_rate or cfg.sample_rate
    total = cfg.impact_hold + cfg.impact_release
    t = np.arange(int(total * rate)) / rate

    start_freq = cfg.impact_base_frequency * cfg.impact_octaves
    freq = cfg.impact_base_frequency + (start_freq - cfg.impact_base_frequency) * np.exp(
        -t / cfg.impact_pitch_decay
    )
    phase = 2.0 * math.pi * np.cumsum(freq) / rate
    wave = np.sin(phase)

    attack = np.clip(t / cfg.impact_attack, 0.0, 1.0)
    decay = cfg.impact_sustain + (1.0 - cfg.impact_sustain) * np.exp(
        -np.maximum(t - cfg.impact_attack, 0.0) / (cfg.impact_decay / 5.0)
    )
    release = np.where(
        t > cfg.impact_hold,
        np.exp(-(t - cfg.impact_hold) / (cfg.impact_release / 5.0)),
        1.0,
    )
    return wave * attack * decay * release


def to_pcm(samples: np.ndarray, channels: int) -> np.ndarray:
    pcm = (np.clip(samples, -1.0, 1.0) * 32767).astype(np.int16)
    if channels > 1:
        pcm = np.repeat(pcm[:, np.newaxis], channels, axis=1)
    return np.ascontiguousarray(pcm)


class AudioEngine(SimulationListener):
    """Starts the rumble on entry and plays the thump on impact."""

    def __init__(self, cfg: AudioCfg = AUDIO_CFG, *, seed: int | None = None) -> None:
        self.cfg = cfg
        self.enabled = False
        self._noise: pygame.mixer.Sound | None = None
        self._impact: pygame.mixer.Sound | None = None
        self._volume_db = cfg.noise_start_db
        self._ramp_from = cfg.noise_start_db
        self._ramp_to = cfg.noise_start_db
        self._ramp_elapsed = 0.0
        self._ramp_duration = 0.0
        try:
            if pygame.mixer.get_init() is None:
                pygame.mixer.init(frequency=cfg.sample_rate, size=-16, channels=1)
            # The mixer may already be open at another rate (pygame.init opens it).
            frequency, _, channels = pygame.mixer.get_init()
            rng = np.random.default_rng(seed)
            noise = brown_noise(int(cfg.noise_seconds * frequency), rng)
            self._noise = pygame.sndarray.make_sound(to_pcm(noise, channels))
            self._impact = pygame.sndarray.make_sound(to_pcm(membrane_hit(cfg, frequency), channels))
            self.enabled = True
        except pygame.error as exc:
            logger.warning("Audio disabled: %s", exc)

    @property
    def volume_db(self) -> float:
        return self._volume_db

    def ramp_to(self, target_db: float, seconds: float) -> None:
        self._ramp_from = self._volume_db
        self._ramp_to = target_db
        self._ramp_elapsed = 0.0
        self._ramp_duration = max(0.0, seconds)
        if self._ramp_duration == 0.0:
            self._set_volume(target_db)

    def update(self, dt: float) -> None:
        if self._ramp_elapsed >= self._ramp_duration:
            return
        self._ramp_elapsed = min(self._ramp_duration, self._ramp_elapsed + max(0.0, dt))
        t = self._ramp_elapsed / self._ramp_duration
        self._set_volume(self._ramp_from + (self._ramp_to - self._ramp_from) * t)

    def _set_volume(self, db: float) -> None:
        self._volume_db = db
        if self._noise is not None:
            self._noise.set_volume(db_to_gain(db))

    def on_entry(self, state: SimulationState) -> None:
        if not self.enabled or self._noise is None:
            return
        self._set_volume(self.cfg.noise_start_db)
        self._noise.play(loops=-1)
        self.ramp_to(self.cfg.noise_entry_db, self.cfg.noise_ramp_seconds)

    def on_impact(self, state: SimulationState, report: ImpactReport) -> None:
        if not self.enabled:
            return
        if self._noise is not None:
            self._noise.stop()
        self._ramp_duration = 0.0
        if self._impact is not None:
            self._impact.play()

    def stop(self) -> None:
        if self._noise is not None:
            self._noise.stop()
        if self._impact is not None:
            self._impact.stop()


__all__ = ["AudioEngine", "brown_noise", "db_to_gain", "membrane_hit", "to_pcm"]
