"""Tables summarising estimated filters: spectrum, energy and impulse."""

from __future__ import annotations

import numpy as np

from sigkit.ft import ft, to_polar

_CHANNEL_COLUMNS = ",Amplitude,Argument,Energy,Impluse"


def results_table(signal, sampling_rate: int) -> np.ndarray:
    """Table of frequency, then amplitude, argument, energy and impulse per channel.

    Row 0 holds the frequency of each bin. For channel c, rows 4c + 1 to
    4c + 4 hold the amplitude, the argument, the square root of the
    running sum of squares, and the samples themselves.
    """
    data = np.asarray(signal, dtype=float)
    if data.ndim == 1:
        data = data[np.newaxis, :]
    if data.ndim != 2:
        raise ValueError(f"signal must be two-dimensional, got shape {data.shape}")
    n = data.shape[1]
    if n == 0:
        raise ValueError("signal must not be empty")
    table = np.empty((1 + 4 * data.shape[0], n), dtype=float)
    table[0] = np.arange(n, dtype=float) * (1.0 / n) * sampling_rate
    for c, channel in enumerate(data):
        polar = to_polar(ft(channel))
        table[4 * c + 1] = polar[0]
        table[4 * c + 2] = polar[1]
        table[4 * c + 3] = np.sqrt(np.cumsum(channel * channel))
        table[4 * c + 4] = channel
    return table


def results_header(channels: int) -> str:
    """Header line matching the columns of results_table."""
    channels = int(channels)
    if channels < 0:
        raise ValueError(f"channel count must not be negative: {channels}")
    return ",Frequency" + _CHANNEL_COLUMNS * channels + "\n"