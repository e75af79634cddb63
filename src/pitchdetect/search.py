"""
Lag search, sub-sample refinement and frequency conversion.

Two search strategies pick an integer lag from a metric array:

- threshold_descend(): for dissimilarity metrics (AMDF, ASDF, CMND). Finds
  the first lag whose value drops below the threshold, then walks downhill
  to the first local minimum. The first dip is taken rather than the global
  minimum, which may sit on a multiple of the period.

- pick_peak(): for the NSDF. Collects strict local maxima above the
  threshold and returns the highest, preferring the smallest lag on ties.

parabolic_interpolation() then refines the integer lag to a fractional one.
"""

import math
from typing import List, Optional, Sequence, Tuple


def lag_range(sample_rate: float, min_frequency: float, max_frequency: float,
              n_samples: int) -> Tuple[int, int]:
    """
    Convert a frequency band to a lag search range [min_lag, max_lag).

    min_lag = floor(rate / max_frequency), at least 1.
    max_lag = ceil(rate / min_frequency), at most n_samples - 1, so every
    lag in the range (and max_lag itself) leaves a non-empty window.

    Args:
        sample_rate: Sample rate in Hz
        min_frequency: Lowest frequency of interest in Hz
        max_frequency: Highest frequency of interest in Hz
        n_samples: Length of the sample buffer

    Returns:
        (min_lag, max_lag) tuple; empty when min_lag >= max_lag
    """
    min_lag = max(1, int(math.floor(sample_rate / max_frequency)))
    max_lag = min(int(math.ceil(sample_rate / min_frequency)), n_samples - 1)
    return min_lag, max_lag


def threshold_descend(values: Sequence[float], min_lag: int, max_lag: int,
                      threshold: float) -> Optional[int]:
    """
    Find the first local minimum after the metric drops below a threshold.

    Scans lags upward from min_lag. At the first lag with a value below the
    threshold, keeps advancing while the next value is strictly smaller and
    still inside the range.

    Args:
        values: Metric values indexed by lag
        min_lag: First lag to examine
        max_lag: Exclusive upper bound of the search
        threshold: Crossing level

    Returns:
        Chosen lag, or None if no value in [min_lag, max_lag) is below threshold
    """
    max_lag = min(max_lag, len(values))

    for lag in range(max(min_lag, 0), max_lag):
        if values[lag] < threshold:
            while lag + 1 < max_lag and values[lag + 1] < values[lag]:
                lag += 1
            return lag

    return None


def find_peaks(values: Sequence[float], threshold: float) -> List[int]:
    """
    Indices of strict local maxima whose value exceeds the threshold.

    Only interior indices 1 .. len-2 are considered.
    """
    peaks = []
    for i in range(1, len(values) - 1):
        if values[i] > threshold and values[i] > values[i-1] and values[i] > values[i+1]:
            peaks.append(i)
    return peaks


def pick_peak(values: Sequence[float], threshold: float,
              tie_tolerance: float = 0.0) -> Optional[int]:
    """
    Pick the best peak of a similarity metric.

    The highest peak wins. Any peak within `tie_tolerance` of the highest
    counts as a tie, and ties go to the smallest lag (highest frequency).

    Args:
        values: Metric values indexed by lag
        threshold: Minimum peak value
        tie_tolerance: Absolute tolerance for treating peaks as tied

    Returns:
        Chosen lag, or None if no peak exceeds the threshold
    """
    peaks = find_peaks(values, threshold)
    if not peaks:
        return None

    best_value = max(values[i] for i in peaks)
    for i in peaks:
        if values[i] >= best_value - tie_tolerance:
            return i

    return None


def parabolic_interpolation(values: Sequence[float], lag: int) -> float:
    """
    Refine an integer lag by fitting a parabola through its neighbours.

    With a = v[lag-1], b = v[lag], c = v[lag+1], the vertex lies at

        lag + 0.5 * (a - c) / (a - 2b + c)

    which holds for minima and maxima alike.

    The lag is returned unchanged when a neighbour is missing (lag at the
    first or last index), when the neighbourhood is flat (zero curvature),
    or when the vertex falls a full sample or more away from `lag`.

    Args:
        values: Metric values indexed by lag
        lag: Integer lag to refine

    Returns:
        Refined (fractional) lag
    """
    if lag - 1 < 0 or lag + 1 >= len(values):
        return float(lag)

    a = values[lag - 1]
    b = values[lag]
    c = values[lag + 1]

    denom = a - 2*b + c
    if denom == 0:
        return float(lag)

    delta = 0.5 * (a - c) / denom
    if not abs(delta) < 1:
        return float(lag)

    return float(lag + delta)


def lag_to_frequency(sample_rate: float, lag: Optional[float]) -> Optional[float]:
    """
    Convert a lag in samples to a frequency in Hz.

    Returns:
        sample_rate / lag, or None when there is no usable lag
    """
    if lag is None or lag <= 0:
        return None
    return float(sample_rate / lag)
