"""
Sound - a mono recording ready for pitch detection.

Detectors take a bare sample buffer and a rate. Sound keeps the two
together so a file read from disk, or a slice of one, can be handed to
detect_pitch() in one call. Multi-channel files are read one channel at a
time with from_file_channel(). soundfile is only imported when a file is
read, so the detectors work without it installed.

Usage:
    from pitchdetect import Sound

    sound = Sound.from_file("note.wav")
    f0 = sound.detect_pitch()               # default method
    f0 = sound.detect_pitch("mcleod", threshold=0.6)

    # One note of a longer take
    f0 = sound.extract_part(1.2, 1.4).detect_pitch("yin")
"""

from pathlib import Path
from typing import Any, Optional, Tuple, Union

import numpy as np


def _read_audio(path: Union[str, Path]) -> Tuple[np.ndarray, int]:
    """Decode a file to (float64 frames x channels, sample rate)."""
    import soundfile as sf

    return sf.read(str(path), dtype="float64")


class Sound:
    """
    A mono sample buffer and the rate it was sampled at.

    Attributes:
        samples: 1D float64 array
        sample_rate: Sample rate in Hz
    """

    def __init__(self, samples: np.ndarray, sample_rate: float):
        """
        Args:
            samples: Mono sample buffer (any 1D array-like)
            sample_rate: Sample rate in Hz

        Raises:
            ValueError: If samples is not 1D or sample_rate is not positive
        """
        samples = np.asarray(samples, dtype=np.float64)
        if samples.ndim != 1:
            raise ValueError(f"Sound holds mono audio only, got shape {samples.shape}")
        if sample_rate <= 0:
            raise ValueError(f"sample_rate must be positive, got {sample_rate!r}")

        self._samples = samples
        self._sample_rate = float(sample_rate)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "Sound":
        """
        Read a mono recording for pitch detection.

        Samples come back as float64 in [-1, 1] whatever the file's encoding.

        Raises:
            ValueError: If the file holds more than one channel
        """
        data, sample_rate = _read_audio(path)
        if data.ndim > 1:
            raise ValueError(
                f"{path} has {data.shape[1]} channels; pick one with "
                "Sound.from_file_channel()"
            )
        return cls(data, sample_rate)

    @classmethod
    def from_file_channel(cls, path: Union[str, Path], channel: int = 0) -> "Sound":
        """
        Read one channel of a recording, e.g. the vocal track of a stereo take.

        A mono file only has channel 0.
        """
        data, sample_rate = _read_audio(path)
        if data.ndim == 1:
            data = data[:, np.newaxis]

        n_channels = data.shape[1]
        if not 0 <= channel < n_channels:
            raise ValueError(f"Channel {channel} does not exist in {path} ({n_channels} channels)")
        return cls(data[:, channel], sample_rate)

    @property
    def samples(self) -> np.ndarray:
        return self._samples

    @property
    def sample_rate(self) -> float:
        return self._sample_rate

    @property
    def n_samples(self) -> int:
        return len(self._samples)

    @property
    def duration(self) -> float:
        """Length in seconds."""
        return self.n_samples / self._sample_rate

    def __repr__(self) -> str:
        return f"Sound({self.n_samples} samples, {self.sample_rate} Hz, {self.duration:.3f}s)"

    def extract_part(self, start_time: float, end_time: float) -> "Sound":
        """
        Copy the samples between two times, clamped to the recording.

        Args:
            start_time: Start time in seconds
            end_time: End time in seconds
        """
        start = max(0, int(start_time * self._sample_rate))
        end = min(self.n_samples, int(end_time * self._sample_rate))
        return Sound(self._samples[start:end].copy(), self._sample_rate)

    def detect_pitch(self, method: Optional[str] = None, **options: Any) -> Optional[float]:
        """
        Estimate the fundamental frequency of the whole sound.

        Args:
            method: "amdf", "asdf", "yin" or "mcleod" (None = default method)
            **options: Detector options

        Returns:
            Frequency in Hz, or None if no pitch was found
        """
        from .selector import detect_pitch
        return detect_pitch(self._samples, self._sample_rate, method, **options)
