"""
pitchdetect - Fundamental frequency estimation for monophonic audio.

Four interchangeable detectors share one contract, detect(samples,
sample_rate), which returns the frequency in Hz or None when the buffer
shows no periodicity:

    Amdf    average magnitude difference function
    Asdf    average squared difference function
    Yin     cumulative mean normalized difference (YIN)
    McLeod  normalized square difference function (MPM)

Usage:
    import numpy as np
    from pitchdetect import Yin, McLeod, detect_pitch

    t = np.arange(44100) / 44100
    samples = np.sin(2 * np.pi * 440 * t)

    Yin().detect(samples, 44100)                  # ~440.0
    McLeod(threshold=0.6).detect(samples, 44100)  # ~440.0
    detect_pitch(samples, 44100, method="amdf")   # ~440.0

    # Options can be changed later; only the given fields change
    yin = Yin().configure(threshold=0.15)

Method selection for detect_pitch()/create_detector() (in order of preference):
    1. PITCHDETECT_METHOD environment variable
    2. Config file (./pitchdetect.toml or ~/.pitchdetect/config.toml)
    3. "yin"
"""

from .detectors import Amdf, Asdf, McLeod, PitchDetector, Yin
from .options import (
    AmdfOptions,
    AsdfOptions,
    ConfigurationError,
    McLeodOptions,
    YinOptions,
    merge,
)
from .selector import (
    MethodNotAvailableError,
    available_methods,
    create_detector,
    detect_pitch,
    get_default_method,
    reload_config,
    set_default_method,
)
from .sound import Sound

# Returned by every detector when no pitch is found
NO_PITCH = None

__version__ = "0.1.0"
__all__ = [
    "PitchDetector",
    "Amdf",
    "Asdf",
    "Yin",
    "McLeod",
    "AmdfOptions",
    "AsdfOptions",
    "YinOptions",
    "McLeodOptions",
    "merge",
    "ConfigurationError",
    "MethodNotAvailableError",
    "available_methods",
    "create_detector",
    "detect_pitch",
    "get_default_method",
    "set_default_method",
    "reload_config",
    "Sound",
    "NO_PITCH",
]
