"""Convolution of multichannel audio with an impulse response."""

from __future__ import annotations

from itertools import repeat
from pathlib import PurePath

import numpy as np

from sigkit.fir import convolve

DEFAULT_PEAK = 32767.0


def _as_channels(values, what: str) -> np.ndarray:
    m = np.asarray(values, dtype=float)
    if m.ndim == 1:
        m = m[np.newaxis, :]
    if m.ndim != 2:
        raise ValueError(f"{what} must be two-dimensional, got shape {m.shape}")
    return m


def convolve_channels(audio, impulse) -> np.ndarray:
    """Convolve each channel with the impulse response.

    The impulse response has either one channel, used for every audio
    channel, or as many channels as the audio. The result keeps the
    audio's shape.
    """
    signal = _as_channels(audio, "audio")
    system = _as_channels(impulse, "impulse")
    if system.shape[0] not in (1, signal.shape[0]):
        raise ValueError(
            f"impulse has {system.shape[0]} channels; expected 1 or {signal.shape[0]}"
        )
    if signal.shape[1] < system.shape[1]:
        raise ValueError(
            f"audio ({signal.shape[1]}) is shorter than the impulse ({system.shape[1]})"
        )
    responses = repeat(system[0]) if system.shape[0] == 1 else system
    return np.vstack([convolve(channel, h) for channel, h in zip(signal, responses)])


def convolve_and_level(audio, impulse, peak: float = DEFAULT_PEAK) -> np.ndarray:
    """Convolve and scale the result so its largest absolute sample equals peak."""
    output = convolve_channels(audio, impulse)
    maximum = float(np.abs(output).max()) if output.size else 0.0
    if maximum == 0.0:
        raise ValueError("the convolved signal is silent and cannot be levelled")
    return output * (peak / maximum)


def output_name(input_path, system_path) -> str:
    """Default output file name built from the two input file names."""
    return f"{PurePath(input_path).stem}_{PurePath(system_path).stem}.wav"