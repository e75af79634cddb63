"""
Lag-domain metrics - Similarity and dissimilarity of a signal with itself.

Every metric compares the buffer x[0:N] with a copy of itself shifted by a
lag τ, over the window i = 0 .. N-τ-1 (so that i+τ stays in bounds):

    AMDF(τ)  = mean |x[i] - x[i+τ]|
    ASDF(τ)  = mean (x[i] - x[i+τ])²
    d(τ)     = Σ (x[i] - x[i+τ])²                       (YIN difference)
    CMND(τ)  = d(τ) · τ / Σ_{k=1..τ} d(k),  CMND(0) = 1
    NSDF(τ)  = 2 Σ x[i]x[i+τ] / Σ (x[i]² + x[i+τ]²)    (McLeod)

AMDF and ASDF dip towards 0 at the period, CMND dips below 1, NSDF peaks
near 1.

The difference function and the NSDF share the same decomposition:

    Σ (x[i] - x[i+τ])² = Σ x[i]² + Σ x[i+τ]² - 2 r(τ)

The two energy terms are read off a running sum of squares, so each lag
reuses the previous partial sums instead of rescanning the window, and r(τ)
comes from a single FFT correlation.

All functions take a 1-D float64 array and return a float64 array indexed
by lag. Callers must keep lags below len(samples).
"""

from typing import Tuple

import numpy as np


def amdf(samples: np.ndarray, max_lag: int) -> np.ndarray:
    """
    Average magnitude difference for lags 0 to max_lag (inclusive).

    Args:
        samples: Signal samples
        max_lag: Largest lag to evaluate

    Returns:
        Array of length max_lag + 1
    """
    n = len(samples)
    values = np.zeros(max_lag + 1)

    for lag in range(1, min(max_lag + 1, n)):
        values[lag] = np.mean(np.abs(samples[:n-lag] - samples[lag:]))

    return values


def asdf(samples: np.ndarray, max_lag: int) -> np.ndarray:
    """
    Average squared difference for lags 0 to max_lag (inclusive).

    Args:
        samples: Signal samples
        max_lag: Largest lag to evaluate

    Returns:
        Array of length max_lag + 1
    """
    n = len(samples)
    values = np.zeros(max_lag + 1)

    for lag in range(1, min(max_lag + 1, n)):
        diff = samples[:n-lag] - samples[lag:]
        values[lag] = np.mean(diff * diff)

    return values


def autocorrelation(samples: np.ndarray, max_lag: int) -> np.ndarray:
    """
    Unnormalized autocorrelation r(τ) = Σ x[i]x[i+τ] for lags [0, max_lag).

    Args:
        samples: Signal samples
        max_lag: Number of lags (clamped to len(samples))

    Returns:
        Array of length min(max_lag, len(samples))
    """
    from scipy import signal

    n = len(samples)
    max_lag = min(max_lag, n)
    if max_lag <= 0:
        return np.zeros(0)

    full = signal.correlate(samples, samples, mode="full", method="fft")
    return full[n-1:n-1+max_lag]


def window_energies(samples: np.ndarray, max_lag: int) -> Tuple[np.ndarray, np.ndarray]:
    """
    Energy of the leading and trailing windows for lags [0, max_lag).

    For lag τ the leading window is x[0:N-τ] and the trailing window is
    x[τ:N]. Both are taken from one cumulative sum of squares.

    Returns:
        (head, tail) arrays of length min(max_lag, len(samples))
    """
    n = len(samples)
    max_lag = min(max_lag, n)

    cumulative = np.concatenate(([0.0], np.cumsum(samples * samples)))
    lags = np.arange(max_lag)

    head = cumulative[n - lags]
    tail = cumulative[n] - cumulative[lags]
    return head, tail


def difference(samples: np.ndarray, max_lag: int) -> np.ndarray:
    """
    YIN difference function d(τ) = Σ (x[i] - x[i+τ])² for lags [0, max_lag).

    Args:
        samples: Signal samples
        max_lag: Number of lags (clamped to len(samples))

    Returns:
        Non-negative array of length min(max_lag, len(samples))
    """
    head, tail = window_energies(samples, max_lag)
    r = autocorrelation(samples, max_lag)

    # FFT round-off can push exact periods slightly negative
    return np.maximum(head + tail - 2.0 * r, 0.0)


def cmnd(diff: np.ndarray) -> np.ndarray:
    """
    Cumulative mean normalized difference from a difference function.

    CMND(0) is 1. Lags whose running sum of d is still 0 (a silent prefix)
    are also 1, since they carry no evidence of periodicity.

    Args:
        diff: Output of difference()

    Returns:
        Array of the same length as `diff`
    """
    values = np.ones(len(diff))
    if len(diff) < 2:
        return values

    running = np.cumsum(diff[1:])
    lags = np.arange(1, len(diff))

    with np.errstate(divide="ignore", invalid="ignore"):
        normalized = diff[1:] * lags / running
    values[1:] = np.where(running > 0, normalized, 1.0)

    return values


def nsdf(samples: np.ndarray, max_lag: int) -> np.ndarray:
    """
    McLeod normalized square difference function for lags [0, max_lag).

    Values lie in [-1, 1]. Lags with zero window energy are 0.

    Args:
        samples: Signal samples
        max_lag: Number of lags (clamped to len(samples))

    Returns:
        Array of length min(max_lag, len(samples))
    """
    head, tail = window_energies(samples, max_lag)
    r = autocorrelation(samples, max_lag)
    m = head + tail

    with np.errstate(divide="ignore", invalid="ignore"):
        values = np.where(m > 0, 2.0 * r / m, 0.0)

    return values
