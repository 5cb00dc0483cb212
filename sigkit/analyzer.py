"""Energy and averaged spectrum analysis of multichannel waveforms.

The spectrum is averaged over frames that advance by half a window. The
first and last frames are half filled with zeros, so every sample is
covered by two frames.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

import numpy as np

from sigkit import window
from sigkit.ft import fft, ft, to_polar

LOWEST_SAMPLE_COUNT = 512


class GainFormat(Enum):
    """How the amplitude row of a spectrum is expressed."""

    AMPLITUDE = "amp"
    TEN_LOG = "10log"
    TWENTY_LOG = "20log"


class ArgFormat(Enum):
    """How the argument row of a spectrum is expressed."""

    RADIAN = "rad"
    DEGREE = "deg"


class WindowType(Enum):
    """Window applied to every analysis frame."""

    RECTANGULAR = "rec"
    HANNING = "han"
    HAMMING = "ham"
    BLACKMAN = "blk"
    BLACKMAN_HARRIS = "hrs"


_WINDOWS = {
    WindowType.RECTANGULAR: window.rectangular,
    WindowType.HANNING: window.hanning,
    WindowType.HAMMING: window.hamming,
    WindowType.BLACKMAN: window.blackman,
    WindowType.BLACKMAN_HARRIS: window.blackman_harris,
}


@dataclass
class Prepared:
    """A signal resized to a whole number of windows, with its analysis settings."""

    signal: np.ndarray
    window_length: int
    only_ft: bool

    @property
    def window_count(self) -> int:
        return self.signal.shape[1] // self.window_length


def parse_window_type(name: str) -> WindowType:
    """Window type from its short name: rec, han, ham, blk or hrs."""
    try:
        return WindowType(name)
    except ValueError:
        names = ", ".join(f'"{w.value}"' for w in WindowType)
        raise ValueError(f"window type must be one of {names}: {name!r}") from None


def is_power_of(value: int, base: int) -> bool:
    """Whether value is a non-negative integer power of base."""
    value = int(value)
    base = int(base)
    if base == 0 or value == 0:
        return False
    while value > 1:
        if value % base:
            return False
        value //= base
    return True


def highest_bit(value: int) -> int:
    """Position of the highest set bit, or -1 for zero."""
    value = int(value)
    if value < 0:
        raise ValueError(f"value must not be negative: {value}")
    return value.bit_length() - 1


def lower_limit_size(frequency: int) -> int:
    """Smallest window giving about a hundredth of the sampling rate in resolution.

    The power of two at or below frequency / 100 is doubled when the
    next lower bit is also set.
    """
    bits = (int(frequency) // 100) & 0xFFFFFFFF
    if bits == 0:
        raise ValueError(f"sampling rate is too low: {frequency}")
    k = bits.bit_length() - 1
    size = 1 << k
    if k not in (0, 31) and bits & (1 << (k - 1)):
        size <<= 1
    return size


def _choose_window_length(n: int, sampling_rate: int) -> int:
    n = int(n)
    if n < 1:
        raise ValueError(f"sample count must be positive: {n}")
    upper = 1 << highest_bit(n * 2 - 1)
    lower = lower_limit_size(sampling_rate)
    if upper < lower:
        return upper
    widths = []
    w = lower
    while w <= upper:
        widths.append(w)
        w *= 2
    ratios = [(n % w) / w for w in widths]
    largest = max(ratios)
    smallest = min(ratios)
    # 1 - largest is how much is missing, smallest how much is left over.
    target = largest if 1.0 - largest < smallest else smallest
    index = max(k for k, r in enumerate(ratios) if r == target)
    return lower << index


def window_length(n: int, sampling_rate: int) -> int:
    """Power-of-two window that divides n samples with the least remainder or shortage."""
    return _choose_window_length(n, sampling_rate)


def _as_channels(values) -> np.ndarray:
    m = np.asarray(values, dtype=float)
    if m.ndim == 1:
        m = m[np.newaxis, :]
    if m.ndim != 2:
        raise ValueError(f"signal must be two-dimensional, got shape {m.shape}")
    return m


def preprocess(
    signal,
    sampling_rate: int,
    window_length: int = 0,
    sample_count: int = 0,
    only_ft: bool = False,
) -> Prepared:
    """Settle the window length and resize the signal to a whole number of windows.

    A sample count of zero uses the whole signal. A window length of zero
    is chosen automatically; a given one must be a power of two and is
    shortened when far longer than the signal. Fewer than 512 samples are
    analysed as a single plain Fourier transform.
    """
    data = _as_channels(signal)
    signal_length = data.shape[1]
    count = int(sample_count) if sample_count > 0 else signal_length
    if count < 1:
        raise ValueError("there are no samples to analyse")
    width = int(window_length)

    if width == 0:
        if is_power_of(count, 2):
            only_ft = False
            width = count
        else:
            width = count if only_ft else _choose_window_length(count, sampling_rate)
    else:
        if not is_power_of(width, 2):
            raise ValueError(f"window length must be a power of two: {width}")
        if width > signal_length << 1:
            width = 1 << (highest_bit(signal_length) + 1)

    if count < LOWEST_SAMPLE_COUNT:
        only_ft = True
        width = count

    ratio = (count % width) / width
    windows = count // width + (1 if ratio >= 0.5 else 0)
    used = windows * width

    if used != signal_length:
        resized = np.zeros((data.shape[0], used), dtype=float)
        keep = min(used, signal_length)
        resized[:, :keep] = data[:, :keep]
        data = resized
    else:
        data = data.copy()
    return Prepared(data, width, bool(only_ft))


def energy_table(signal) -> np.ndarray:
    """Cumulative energy of every channel and its share of the total.

    Row 2c holds the square root of the running sum of squares of
    channel c; row 2c + 1 holds that value divided by the channel's norm.
    """
    data = _as_channels(signal)
    rows = np.empty((2 * data.shape[0], data.shape[1]), dtype=float)
    for c, channel in enumerate(data):
        running = np.sqrt(np.cumsum(channel * channel))
        energy = math.sqrt(float(channel @ channel))
        rows[2 * c] = running
        with np.errstate(divide="ignore", invalid="ignore"):
            rows[2 * c + 1] = running / energy
    return rows


def spectrum_table(
    signal,
    sampling_rate: int,
    window_length: int,
    window_type=WindowType.HANNING,
    only_ft: bool = False,
    gain_format=GainFormat.AMPLITUDE,
    arg_format=ArgFormat.RADIAN,
) -> np.ndarray:
    """Spectrum averaged over half-overlapping windowed frames.

    Row 0 holds the frequency of each bin; rows 2c + 1 and 2c + 2 hold
    the amplitude and argument of channel c. The signal length must be a
    whole, non-zero multiple of the window length.
    """
    data = _as_channels(signal)
    n = int(window_length)
    if n < 1:
        raise ValueError(f"window length must be positive: {n}")
    frames = data.shape[1] // n
    if data.shape[1] % n:
        raise ValueError(
            f"signal length {data.shape[1]} is not a multiple of the window length {n}"
        )
    if frames < 1:
        raise ValueError("the signal is shorter than one window")
    weights = _WINDOWS[WindowType(window_type)](n)
    gain = GainFormat(gain_format)
    arg = ArgFormat(arg_format)
    transform = ft if only_ft else fft

    table = np.empty((2 * data.shape[0] + 1, n), dtype=float)
    table[0] = np.arange(n, dtype=float) / n * sampling_rate
    window_energy = math.sqrt(float(weights @ weights) / n)
    half = n // 2

    for c, channel in enumerate(data):
        total = np.zeros((2, n), dtype=float)
        for k in range(2 * frames + 1):
            if k == 0:
                part = np.zeros(n, dtype=float)
                part[half:half + half] = channel[:half]
            elif k == 2 * frames:
                part = np.zeros(n, dtype=float)
                start = ((2 * frames - 1) * n) // 2
                part[:half] = channel[start:start + half]
            else:
                head = (n * (k - 1)) // 2
                part = channel[head:head + n].copy()
            total += to_polar(transform(part * weights))
        total[0] /= window_energy
        if gain is not GainFormat.AMPLITUDE:
            factor = 10.0 if gain is GainFormat.TEN_LOG else 20.0
            with np.errstate(divide="ignore", invalid="ignore"):
                total[0] = factor * np.log10(total[0])
        if arg is ArgFormat.DEGREE:
            total[1] = total[1] / math.pi * 180.0
        table[2 * c + 1] = total[0]
        table[2 * c + 2] = total[1]
    return table