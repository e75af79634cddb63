"""Tests for the Sound container and file loading."""

import numpy as np
import pytest

from pitchdetect import Sound

from conftest import SAMPLE_RATE, TOLERANCE_HZ, make_sine


@pytest.fixture
def sine_wav(tmp_path):
    """Write a one-second 440 Hz mono WAV file."""
    sf = pytest.importorskip("soundfile")
    path = tmp_path / "sine_440hz.wav"
    sf.write(str(path), 0.5 * make_sine(440.0), SAMPLE_RATE)
    return path


@pytest.fixture
def stereo_wav(tmp_path):
    """Write a stereo WAV with 220 Hz left and 660 Hz right."""
    sf = pytest.importorskip("soundfile")
    path = tmp_path / "stereo.wav"
    data = np.stack([0.5 * make_sine(220.0), 0.5 * make_sine(660.0)], axis=1)
    sf.write(str(path), data, SAMPLE_RATE)
    return path


class TestSound:
    """Construction and properties."""

    def test_properties(self):
        """Test basic properties."""
        sound = Sound(np.zeros(22050), 44100)

        assert sound.n_samples == 22050
        assert sound.sample_rate == 44100.0
        assert sound.duration == pytest.approx(0.5)
        assert sound.samples.dtype == np.float64

    def test_mono_only(self):
        """Test that 2-D samples are rejected."""
        with pytest.raises(ValueError, match="mono"):
            Sound(np.zeros((100, 2)), 44100)

    def test_positive_sample_rate(self):
        """Test that the sample rate must be positive."""
        with pytest.raises(ValueError):
            Sound(np.zeros(100), 0)

    def test_repr(self):
        """Test the string representation."""
        assert repr(Sound(np.zeros(44100), 44100)) == "Sound(44100 samples, 44100.0 Hz, 1.000s)"

    def test_extract_part(self):
        """Test extracting a time range, clamped to the sound."""
        sound = Sound(np.arange(44100, dtype=float), 44100)
        part = sound.extract_part(0.25, 2.0)

        assert part.n_samples == 44100 - 11025
        assert part.samples[0] == 11025.0
        assert part.sample_rate == sound.sample_rate

    def test_detect_pitch(self):
        """Test detection through the Sound convenience method."""
        sound = Sound(make_sine(600.0), SAMPLE_RATE)

        assert sound.detect_pitch() == pytest.approx(600.0, abs=TOLERANCE_HZ)
        assert sound.detect_pitch("asdf", threshold=0.2) == pytest.approx(600.0, abs=TOLERANCE_HZ)

    def test_detect_pitch_of_part(self):
        """Test detecting the second note of a two-note sound."""
        samples = np.concatenate([make_sine(261.63), make_sine(440.0)])
        sound = Sound(samples, SAMPLE_RATE)

        assert sound.extract_part(0.2, 0.5).detect_pitch("mcleod") == pytest.approx(261.63, abs=TOLERANCE_HZ)
        assert sound.extract_part(1.2, 1.5).detect_pitch("mcleod") == pytest.approx(440.0, abs=TOLERANCE_HZ)


class TestFileLoading:
    """from_file() and from_file_channel()."""

    def test_from_file(self, sine_wav):
        """Test loading a mono WAV and detecting its pitch."""
        sound = Sound.from_file(sine_wav)

        assert sound.sample_rate == SAMPLE_RATE
        assert sound.n_samples == SAMPLE_RATE
        assert sound.detect_pitch("yin") == pytest.approx(440.0, abs=TOLERANCE_HZ)

    def test_from_file_stereo_rejected(self, stereo_wav):
        """Test that multi-channel files need from_file_channel()."""
        with pytest.raises(ValueError, match="from_file_channel"):
            Sound.from_file(stereo_wav)

    def test_from_file_channel(self, stereo_wav):
        """Test selecting each channel of a stereo file."""
        left = Sound.from_file_channel(stereo_wav, 0)
        right = Sound.from_file_channel(stereo_wav, 1)

        assert left.detect_pitch("mcleod") == pytest.approx(220.0, abs=TOLERANCE_HZ)
        assert right.detect_pitch("mcleod") == pytest.approx(660.0, abs=TOLERANCE_HZ)

    def test_from_file_channel_out_of_range(self, stereo_wav):
        """Test that a missing channel raises."""
        with pytest.raises(ValueError, match="does not exist"):
            Sound.from_file_channel(stereo_wav, 2)

    def test_from_file_channel_mono(self, sine_wav):
        """Test that channel 0 of a mono file works and channel 1 does not."""
        assert Sound.from_file_channel(sine_wav, 0).n_samples == SAMPLE_RATE
        with pytest.raises(ValueError):
            Sound.from_file_channel(sine_wav, 1)

    def test_from_file_channel_negative(self, stereo_wav):
        """Test that negative channel indices are not read from the end."""
        with pytest.raises(ValueError, match="does not exist"):
            Sound.from_file_channel(stereo_wav, -1)
