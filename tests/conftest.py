"""Shared test fixtures."""

import numpy as np
import pytest

import pitchdetect


SAMPLE_RATE = 44100

# Frequencies every detector must resolve to within TOLERANCE_HZ
TEST_FREQUENCIES = [100, 180, 242, 432, 440, 510, 600, 686]
TOLERANCE_HZ = 5.0


def make_sine(frequency: float, sample_rate: float = SAMPLE_RATE,
              duration: float = 1.0, amplitude: float = 1.0) -> np.ndarray:
    """Generate a float32 sine wave."""
    t = np.arange(int(sample_rate * duration)) / sample_rate
    return (amplitude * np.sin(2 * np.pi * frequency * t)).astype(np.float32)


@pytest.fixture
def sine_432():
    """One second of a 432 Hz sine at 44.1 kHz."""
    return make_sine(432.0)


@pytest.fixture
def noise():
    """One second of uniform white noise in [-1, 1]."""
    rng = np.random.default_rng(12345)
    return rng.uniform(-1.0, 1.0, SAMPLE_RATE).astype(np.float32)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Run every test without user config files or environment overrides."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.delenv("PITCHDETECT_METHOD", raising=False)
    pitchdetect.reload_config()
    yield
    pitchdetect.reload_config()
