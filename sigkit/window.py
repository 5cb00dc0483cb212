"""Window functions sampled at the centres of N equal intervals."""

from __future__ import annotations

import math

import numpy as np

_I0_TERMS = 50
_FACTORIALS_SQUARED = np.array(
    [float(math.factorial(k)) ** 2 for k in range(_I0_TERMS)], dtype=float
)


def _check_length(n: int) -> int:
    n = int(n)
    if n < 0:
        raise ValueError(f"window length must not be negative: {n}")
    return n


def _phases(n: int) -> np.ndarray:
    """Return (2i + 1) * pi / n for i in [0, n)."""
    n = _check_length(n)
    if n == 0:
        return np.zeros(0, dtype=float)
    return (2 * np.arange(n, dtype=float) + 1) * math.pi / n


def _i0(x: np.ndarray) -> np.ndarray:
    x = np.asarray(x, dtype=float)
    k = np.arange(_I0_TERMS, dtype=float)
    terms = np.power(x[..., np.newaxis] / 2.0, 2 * k) / _FACTORIALS_SQUARED
    return terms.sum(axis=-1)


def bessel_i0(x: float) -> float:
    """Modified Bessel function of the first kind, order 0, by a 50-term series."""
    return float(_i0(np.asarray(x, dtype=float)))


def rectangular(n: int) -> np.ndarray:
    """Rectangular window: all ones."""
    return np.ones(_check_length(n), dtype=float)


def generalized_hamming(n: int, a: float) -> np.ndarray:
    """Generalised Hamming window a - (1 - a) cos(t)."""
    t = _phases(n)
    return a - (1.0 - a) * np.cos(t)


def hanning(n: int) -> np.ndarray:
    """Hann window."""
    return generalized_hamming(n, 0.50)


def hamming(n: int) -> np.ndarray:
    """Hamming window."""
    return generalized_hamming(n, 0.54)


def blackman(n: int) -> np.ndarray:
    """Blackman window."""
    t = _phases(n)
    return 0.42 - 0.5 * np.cos(t) + 0.08 * np.cos(2 * t)


def blackman_harris(n: int) -> np.ndarray:
    """Four-term Blackman-Harris window."""
    t = _phases(n)
    return (
        0.35875
        - 0.48829 * np.cos(t)
        + 0.14128 * np.cos(2 * t)
        - 0.01168 * np.cos(3 * t)
    )


def nuttall(n: int) -> np.ndarray:
    """Nuttall window."""
    t = _phases(n)
    return (
        0.355768
        - 0.487396 * np.cos(t)
        + 0.144232 * np.cos(2 * t)
        - 0.012604 * np.cos(3 * t)
    )


def kaiser(n: int, alpha: float) -> np.ndarray:
    """Kaiser window with shape parameter alpha."""
    t = _phases(n)
    if t.size == 0:
        return t
    arg = math.pi * alpha * np.sqrt(1.0 - (t / math.pi - 1.0) ** 2)
    return _i0(arg) / bessel_i0(math.pi * alpha)


def flattop(n: int) -> np.ndarray:
    """Flat-top window, normalised so its peak coefficient sum is one."""
    t = _phases(n)
    scale = 1 + 1.93 + 1.29 + 0.388 + 0.032
    return (
        1
        - 1.93 * np.cos(t)
        + 1.29 * np.cos(2 * t)
        - 0.388 * np.cos(3 * t)
        + 0.032 * np.cos(4 * t)
    ) / scale