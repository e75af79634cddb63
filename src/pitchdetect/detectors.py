"""
Pitch detectors - One detect(samples, sample_rate) contract, four algorithms.

Every detector runs the same pipeline:

    samples -> metric over a lag range -> best lag -> parabolic refinement
            -> sample_rate / lag

and differs only in the metric and the search strategy:

    Amdf    average magnitude difference    threshold-and-descend
    Asdf    average squared difference      threshold-and-descend
    Yin     cumulative mean normalized diff threshold-and-descend
    McLeod  normalized square difference    highest peak

detect() returns the frequency in Hz, or None when no lag qualifies. None is
the only "no pitch" result, so a returned float is always a real estimate.

Detectors hold nothing but an immutable options value. configure() swaps in
a merged copy, and detect() reads it once, so a detector can be shared
across threads.

Usage:
    from pitchdetect import Yin

    yin = Yin(threshold=0.15)
    f0 = yin.detect(samples, 44100)
    if f0 is None:
        print("no pitch")
"""

import logging
import math
from abc import ABC, abstractmethod
from typing import Any, Optional

import numpy as np

from . import metrics
from .options import (
    AmdfOptions,
    AsdfOptions,
    ConfigurationError,
    FrequencyBoundedOptions,
    McLeodOptions,
    YinOptions,
    merge,
)
from .search import (
    lag_range,
    lag_to_frequency,
    parabolic_interpolation,
    pick_peak,
    threshold_descend,
)

logger = logging.getLogger(__name__)

# Fewer samples than this cannot hold a lag with both neighbours
MIN_SAMPLES = 3


def _prepare_samples(samples: Any, sample_rate: float) -> np.ndarray:
    """Validate inputs and return the samples as a 1-D float64 array."""
    if isinstance(sample_rate, bool) or not isinstance(sample_rate, (int, float, np.integer, np.floating)):
        raise ConfigurationError(f"sample_rate must be a number, got {sample_rate!r}")
    if not math.isfinite(sample_rate) or sample_rate <= 0:
        raise ConfigurationError(f"sample_rate must be positive and finite, got {sample_rate!r}")

    samples = np.asarray(samples, dtype=np.float64)
    if samples.ndim != 1:
        raise ValueError("Only mono audio supported. Got shape: {}".format(samples.shape))
    return samples


def _is_constant(samples: np.ndarray) -> bool:
    """True for silence, including silence with a DC offset."""
    return bool(np.ptp(samples) == 0)


class PitchDetector(ABC):
    """
    Base class for all detectors.

    Subclasses set `options_class` and implement detect().
    """

    name: str = ""
    options_class: Optional[type] = None

    def __init__(self, **options: Any):
        """
        Create a detector with default options, overridden by `options`.

        Raises:
            ConfigurationError: If an option is unknown or invalid
        """
        self._options = merge(self.options_class(), options)

    @property
    def options(self):
        """Current options value (immutable)."""
        return self._options

    def configure(self, **options: Any) -> "PitchDetector":
        """
        Replace only the given options; all others keep their values.

        Returns:
            self, for chaining

        Raises:
            ConfigurationError: If an option is unknown or the result is invalid
        """
        self._options = merge(self._options, options)
        return self

    @abstractmethod
    def detect(self, samples: Any, sample_rate: float) -> Optional[float]:
        """
        Estimate the fundamental frequency of `samples`.

        Args:
            samples: Mono sample buffer (any array-like of floats)
            sample_rate: Sample rate in Hz

        Returns:
            Frequency in Hz, or None if no pitch was found

        Raises:
            ConfigurationError: If sample_rate is not positive
            ValueError: If samples is not one-dimensional
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._options!r})"


class _DifferenceDetector(PitchDetector):
    """Frequency-bounded detector over an average difference metric."""

    @abstractmethod
    def _metric(self, samples: np.ndarray, max_lag: int) -> np.ndarray:
        """Metric values for lags [0, max_lag]."""

    def detect(self, samples: Any, sample_rate: float) -> Optional[float]:
        samples = _prepare_samples(samples, sample_rate)
        options: FrequencyBoundedOptions = self._options

        if len(samples) < MIN_SAMPLES or _is_constant(samples):
            return None

        min_lag, max_lag = lag_range(sample_rate, options.min_frequency,
                                     options.max_frequency, len(samples))
        if min_lag >= max_lag:
            logger.debug("%s: empty lag range [%d, %d) for %d samples",
                         self.name, min_lag, max_lag, len(samples))
            return None

        values = self._metric(samples, max_lag)
        lag = threshold_descend(values, min_lag, max_lag, options.threshold)
        if lag is None:
            logger.debug("%s: no lag in [%d, %d) below threshold %g",
                         self.name, min_lag, max_lag, options.threshold)
            return None

        return lag_to_frequency(sample_rate, parabolic_interpolation(values, lag))


class Amdf(_DifferenceDetector):
    """
    Average Magnitude Difference Function detector.

    Options (see AmdfOptions): min_frequency=50, max_frequency=1000,
    threshold=0.1. The threshold is in the units of the samples, so it
    assumes input normalized to [-1, 1].
    """

    name = "amdf"
    options_class = AmdfOptions

    def _metric(self, samples: np.ndarray, max_lag: int) -> np.ndarray:
        return metrics.amdf(samples, max_lag)


class Asdf(_DifferenceDetector):
    """
    Average Squared Difference Function detector.

    Like Amdf, but squares the differences, which sharpens the dip at the
    period. Options (see AsdfOptions): min_frequency=50, max_frequency=1000,
    threshold=0.1.
    """

    name = "asdf"
    options_class = AsdfOptions

    def _metric(self, samples: np.ndarray, max_lag: int) -> np.ndarray:
        return metrics.asdf(samples, max_lag)


class Yin(PitchDetector):
    """
    YIN detector (de Cheveigné & Kawahara, 2002).

    Lags [0, buffer_size) are evaluated on the cumulative mean normalized
    difference. The difference windows span the whole buffer, so passing
    more samples than buffer_size gives steadier values at large lags.

    Options (see YinOptions): buffer_size=1024, threshold=0.1.
    """

    name = "yin"
    options_class = YinOptions

    def detect(self, samples: Any, sample_rate: float) -> Optional[float]:
        samples = _prepare_samples(samples, sample_rate)
        options: YinOptions = self._options

        if len(samples) < MIN_SAMPLES or _is_constant(samples):
            return None

        n_lags = min(options.buffer_size, len(samples))
        values = metrics.cmnd(metrics.difference(samples, n_lags))

        lag = threshold_descend(values, 1, n_lags, options.threshold)
        if lag is None:
            logger.debug("yin: CMND never below %g in %d lags", options.threshold, n_lags)
            return None

        return lag_to_frequency(sample_rate, parabolic_interpolation(values, lag))


class McLeod(PitchDetector):
    """
    McLeod Pitch Method detector (McLeod & Wyvill, 2005).

    Evaluates the NSDF over lags [0, buffer_size) and picks the highest
    local maximum above the threshold. Peaks within tie_tolerance of the
    highest are treated as tied and the smallest lag wins, which keeps
    period multiples from displacing the fundamental.

    Options (see McLeodOptions): buffer_size=1024, threshold=0.5,
    tie_tolerance=0.01.
    """

    name = "mcleod"
    options_class = McLeodOptions

    def detect(self, samples: Any, sample_rate: float) -> Optional[float]:
        samples = _prepare_samples(samples, sample_rate)
        options: McLeodOptions = self._options

        if len(samples) < MIN_SAMPLES or _is_constant(samples):
            return None

        n_lags = min(options.buffer_size, len(samples))
        values = metrics.nsdf(samples, n_lags)

        lag = pick_peak(values, options.threshold, options.tie_tolerance)
        if lag is None:
            logger.debug("mcleod: no NSDF peak above %g in %d lags", options.threshold, n_lags)
            return None

        return lag_to_frequency(sample_rate, parabolic_interpolation(values, lag))
