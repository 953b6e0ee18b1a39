import numpy as np
import pygame
import pytest

from impact_sim.core.config import AUDIO_CFG
from impact_sim.render.audio import AudioEngine, brown_noise, db_to_gain, membrane_hit, to_pcm


def test_db_to_gain():
    assert db_to_gain(0.0) == pytest.approx(1.0)
    assert db_to_gain(-20.0) == pytest.approx(0.1)
    assert db_to_gain(-60.0) == pytest.approx(0.001)


def test_brown_noise_is_normalised_and_loops():
    noise = brown_noise(4096, np.random.default_rng(1))

    assert noise.shape == (4096,)
    assert np.max(np.abs(noise)) == pytest.approx(1.0)
    assert noise[0] == pytest.approx(noise[-1])


def test_brown_noise_needs_samples():
    with pytest.raises(ValueError):
        brown_noise(1, np.random.default_rng(0))


def test_membrane_hit_envelope():
    wave = membrane_hit(AUDIO_CFG)

    expected = int((AUDIO_CFG.impact_hold + AUDIO_CFG.impact_release) * AUDIO_CFG.sample_rate)
    assert wave.shape == (expected,)
    assert wave[0] == pytest.approx(0.0)
    assert np.max(np.abs(wave)) <= 1.0
    assert np.max(np.abs(wave[-100:])) < 0.01


def test_to_pcm_shapes():
    samples = np.array([0.0, 0.5, -2.0])

    mono = to_pcm(samples, 1)
    stereo = to_pcm(samples, 2)

    assert mono.dtype == np.int16
    assert mono.tolist() == [0, 16383, -32767]
    assert stereo.shape == (3, 2)


def test_volume_ramp_follows_frame_time():
    engine = AudioEngine(seed=3)

    engine.ramp_to(-20.0, 1.0)
    engine.update(0.5)
    assert engine.volume_db == pytest.approx(-40.0)

    engine.update(2.0)
    assert engine.volume_db == pytest.approx(-20.0)
    engine.stop()


def test_membrane_hit_at_other_rate_keeps_duration():
    wave = membrane_hit(AUDIO_CFG, 44_100)

    expected = int((AUDIO_CFG.impact_hold + AUDIO_CFG.impact_release) * 44_100)
    assert wave.shape == (expected,)


def test_impact_sound_plays_at_mixer_rate_after_pygame_init():
    pygame.init()
    try:
        engine = AudioEngine(seed=1)
        if not engine.enabled:
            pytest.skip("mixer unavailable")

        expected = AUDIO_CFG.impact_hold + AUDIO_CFG.impact_release
        assert engine._impact.get_length() == pytest.approx(expected, abs=0.05)
        engine.stop()
    finally:
        pygame.quit()
