"""
Options - Immutable configuration values for the pitch detectors.

Each detector is configured by a frozen dataclass. Reconfiguration never
mutates a value in place: merge() builds a new value with only the supplied
fields replaced, and validation runs on every construction, so an invalid
combination is reported at the moment it is introduced.

Two shapes exist:
- Frequency-bounded (AMDF, ASDF): min_frequency, max_frequency, threshold.
  The lag range is derived from the sample rate at detection time.
- Buffer-bounded (YIN, McLeod): buffer_size, threshold. The lag range is
  [0, buffer_size).
"""

import math
from dataclasses import dataclass, fields, replace
from typing import Any, Mapping, Optional, TypeVar

import numpy as np


class ConfigurationError(ValueError):
    """Raised when detector options or the sample rate are invalid."""
    pass


def _check_positive(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float, np.integer, np.floating)):
        raise ConfigurationError(f"{name} must be a number, got {value!r}")
    if not math.isfinite(value) or value <= 0:
        raise ConfigurationError(f"{name} must be positive and finite, got {value!r}")


def _check_buffer_size(value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise ConfigurationError(f"buffer_size must be an integer, got {value!r}")
    if value <= 0:
        raise ConfigurationError(f"buffer_size must be positive, got {value!r}")


@dataclass(frozen=True)
class FrequencyBoundedOptions:
    """
    Options for detectors that search a frequency band.

    Attributes:
        min_frequency: Lowest pitch of interest in Hz
        max_frequency: Highest pitch of interest in Hz
        threshold: The metric must drop below this value for a lag to qualify
    """
    min_frequency: float = 50.0
    max_frequency: float = 1000.0
    threshold: float = 0.1

    def __post_init__(self):
        _check_positive("min_frequency", self.min_frequency)
        _check_positive("max_frequency", self.max_frequency)
        _check_positive("threshold", self.threshold)
        if self.min_frequency >= self.max_frequency:
            raise ConfigurationError(
                f"min_frequency ({self.min_frequency}) must be below "
                f"max_frequency ({self.max_frequency})"
            )


@dataclass(frozen=True)
class AmdfOptions(FrequencyBoundedOptions):
    """Options for the AMDF detector."""
    pass


@dataclass(frozen=True)
class AsdfOptions(FrequencyBoundedOptions):
    """Options for the ASDF detector."""
    pass


@dataclass(frozen=True)
class YinOptions:
    """
    Options for the YIN detector.

    Attributes:
        buffer_size: Lags in [0, buffer_size) are evaluated
        threshold: Absolute CMND threshold (lower = stricter)
    """
    buffer_size: int = 1024
    threshold: float = 0.1

    def __post_init__(self):
        _check_buffer_size(self.buffer_size)
        _check_positive("threshold", self.threshold)


@dataclass(frozen=True)
class McLeodOptions:
    """
    Options for the McLeod detector.

    Attributes:
        buffer_size: Lags in [0, buffer_size) are evaluated
        threshold: Minimum NSDF value for a peak to be considered
        tie_tolerance: Peaks within this distance of the highest peak count
            as tied with it; the smallest tied lag wins. 0 means exact ties.
    """
    buffer_size: int = 1024
    threshold: float = 0.5
    tie_tolerance: float = 0.01

    def __post_init__(self):
        _check_buffer_size(self.buffer_size)
        _check_positive("threshold", self.threshold)
        if self.tie_tolerance != 0:
            _check_positive("tie_tolerance", self.tie_tolerance)


OptionsT = TypeVar("OptionsT")


def merge(current: OptionsT, partial: Optional[Mapping[str, Any]] = None, **overrides: Any) -> OptionsT:
    """
    Return a copy of `current` with the supplied fields replaced.

    Fields given as None are treated as not supplied, so callers can pass
    optional arguments through unchanged.

    Args:
        current: Existing options value
        partial: Mapping of field name to new value
        **overrides: More field values (take precedence over `partial`)

    Returns:
        New options value of the same type

    Raises:
        ConfigurationError: If a field name is unknown or the result is invalid
    """
    changes = dict(partial or {})
    changes.update(overrides)

    known = {f.name for f in fields(current)}
    unknown = sorted(set(changes) - known)
    if unknown:
        raise ConfigurationError(
            f"Unknown option(s) for {type(current).__name__}: {', '.join(unknown)}. "
            f"Valid options: {', '.join(sorted(known))}"
        )

    changes = {name: value for name, value in changes.items() if value is not None}
    if not changes:
        return current
    return replace(current, **changes)
