"""
Method selection and configuration defaults.

Detectors can be created by name through create_detector(), which also
applies option defaults from a configuration file.

Default method (in order of preference):
    1. PITCHDETECT_METHOD environment variable
    2. `method` key in the config file
    3. "yin"

Config file (first one found):
    ./pitchdetect.toml
    ~/.pitchdetect/config.toml

Example config:

    method = "mcleod"

    [mcleod]
    threshold = 0.6

    [amdf]
    min_frequency = 80
    max_frequency = 800

Options passed to create_detector() take precedence over the file.
"""

import logging
import os
import sys
import warnings
from pathlib import Path
from typing import Any, Dict, List, Optional

from .detectors import Amdf, Asdf, McLeod, PitchDetector, Yin

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

logger = logging.getLogger(__name__)

ENV_METHOD = "PITCHDETECT_METHOD"
LOCAL_CONFIG = Path("pitchdetect.toml")
USER_CONFIG = Path("~/.pitchdetect/config.toml")
FALLBACK_METHOD = "yin"

DETECTORS = {
    "amdf": Amdf,
    "asdf": Asdf,
    "yin": Yin,
    "mcleod": McLeod,
}


class MethodNotAvailableError(Exception):
    """Raised when a requested pitch detection method does not exist."""
    pass


def available_methods() -> List[str]:
    """Return the names of all detection methods."""
    return list(DETECTORS)


# =============================================================================
# Configuration file
# =============================================================================

_config: Optional[Dict[str, Any]] = None
_current_method: Optional[str] = None


def _config_path() -> Optional[Path]:
    """Locate the config file, local before user."""
    if LOCAL_CONFIG.exists():
        return LOCAL_CONFIG

    user_config = USER_CONFIG.expanduser()
    if user_config.exists():
        return user_config

    return None


def _read_config_file(path: Path) -> Dict[str, Any]:
    """Parse a TOML config file; warn and return {} if it cannot be read."""
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        warnings.warn(f"Ignoring config file {path}: {e}")
        return {}


def get_config() -> Dict[str, Any]:
    """Return the parsed config file contents ({} if there is none)."""
    global _config

    if _config is None:
        path = _config_path()
        _config = _read_config_file(path) if path is not None else {}
        if path is not None:
            logger.debug("Loaded config from %s", path)

    return _config


def reload_config() -> None:
    """Forget the cached config file and default method."""
    global _config, _current_method
    _config = None
    _current_method = None


def method_defaults(method: str) -> Dict[str, Any]:
    """
    Option defaults for a method from the config file.

    Args:
        method: Method name

    Returns:
        Mapping of option name to value (empty if none configured)
    """
    section = get_config().get(method, {})
    if not isinstance(section, dict):
        warnings.warn(f"Config entry '{method}' should be a table, got {type(section).__name__}")
        return {}
    return dict(section)


# =============================================================================
# Method selection
# =============================================================================

def _normalize_method(name: str) -> str:
    return name.lower().strip()


def _select_method() -> str:
    """Select the default method based on environment and config file."""
    global _current_method

    if _current_method is not None:
        return _current_method

    # 1. Environment variable
    env_method = os.environ.get(ENV_METHOD)
    if env_method:
        method = _normalize_method(env_method)
        if method not in DETECTORS:
            raise MethodNotAvailableError(
                f"Requested method '{env_method}' is not available. "
                f"Available: {available_methods()}"
            )
        logger.debug("Default method '%s' from %s", method, ENV_METHOD)
        _current_method = method
        return _current_method

    # 2. Config file
    config_method = get_config().get("method")
    if config_method:
        method = _normalize_method(str(config_method))
        if method in DETECTORS:
            logger.debug("Default method '%s' from config file", method)
            _current_method = method
            return _current_method
        warnings.warn(
            f"Configured method '{config_method}' is not available. "
            f"Falling back to '{FALLBACK_METHOD}'."
        )

    # 3. Built-in default
    _current_method = FALLBACK_METHOD
    return _current_method


def get_default_method() -> str:
    """Get the name of the default detection method."""
    return _select_method()


def set_default_method(name: Optional[str]) -> None:
    """
    Set the default detection method.

    Args:
        name: Method name ("amdf", "asdf", "yin", "mcleod"), or None to
            go back to environment/config/built-in selection

    Raises:
        MethodNotAvailableError: If the method does not exist
    """
    global _current_method

    if name is None:
        _current_method = None
        return

    method = _normalize_method(name)
    if method not in DETECTORS:
        raise MethodNotAvailableError(
            f"Method '{name}' is not available. Available: {available_methods()}"
        )
    _current_method = method


# =============================================================================
# Factories
# =============================================================================

def create_detector(method: Optional[str] = None, **options: Any) -> PitchDetector:
    """
    Create a detector by name.

    Config-file defaults for the method are applied first, then `options`.

    Args:
        method: Method name (None = default method)
        **options: Detector options

    Returns:
        Configured PitchDetector

    Raises:
        MethodNotAvailableError: If the method does not exist
        ConfigurationError: If an option is unknown or invalid
    """
    name = _normalize_method(method) if method is not None else get_default_method()
    if name not in DETECTORS:
        raise MethodNotAvailableError(
            f"Method '{method}' is not available. Available: {available_methods()}"
        )

    merged = method_defaults(name)
    merged.update(options)
    return DETECTORS[name](**merged)


def detect_pitch(samples: Any, sample_rate: float, method: Optional[str] = None,
                 **options: Any) -> Optional[float]:
    """
    Detect the pitch of a sample buffer in one call.

    Args:
        samples: Mono sample buffer
        sample_rate: Sample rate in Hz
        method: Method name (None = default method)
        **options: Detector options

    Returns:
        Frequency in Hz, or None if no pitch was found
    """
    return create_detector(method, **options).detect(samples, sample_rate)
