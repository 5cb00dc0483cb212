"""Discrete Fourier transforms and polar/complex conversions.

A spectrum is a 2 x N array: row 0 holds the real parts and row 1 the
imaginary parts. A polar spectrum is a 2 x N array holding the magnitude
in row 0 and the argument in row 1.
"""

from __future__ import annotations

import numpy as np


def _as_signal(signal) -> np.ndarray:
    x = np.asarray(signal, dtype=float)
    if x.ndim != 1:
        raise ValueError(f"signal must be one-dimensional, got shape {x.shape}")
    return x


def _as_pair(matrix, what: str) -> np.ndarray:
    m = np.asarray(matrix, dtype=float)
    if m.ndim != 2 or m.shape[0] < 2:
        raise ValueError(f"{what} must have at least two rows, got shape {m.shape}")
    return m


def _is_power_of_two(n: int) -> bool:
    return n > 0 and (n & (n - 1)) == 0


def _stack(values: np.ndarray) -> np.ndarray:
    return np.vstack((values.real, values.imag)).astype(float)


def ft(signal) -> np.ndarray:
    """Discrete Fourier transform of a real signal of any length."""
    x = _as_signal(signal)
    if x.size == 0:
        return np.zeros((2, 0), dtype=float)
    return _stack(np.fft.fft(x))


def ift(spectrum) -> np.ndarray:
    """Inverse discrete Fourier transform, keeping the real part."""
    s = _as_pair(spectrum, "spectrum")
    if s.shape[1] == 0:
        return np.zeros(0, dtype=float)
    return np.fft.ifft(s[0] + 1j * s[1]).real


def fft(signal) -> np.ndarray:
    """Fast Fourier transform; the length must be a power of two."""
    x = _as_signal(signal)
    if not _is_power_of_two(x.size):
        raise ValueError(f"FFT length must be a power of two: {x.size}")
    return _stack(np.fft.fft(x))


def ifft(spectrum) -> np.ndarray:
    """Inverse fast Fourier transform; the length must be a power of two."""
    s = _as_pair(spectrum, "spectrum")
    n = s.shape[1]
    if not _is_power_of_two(n):
        raise ValueError(f"IFFT length must be a power of two: {n}")
    return np.fft.ifft(s[0] + 1j * s[1]).real


def to_polar(spectrum) -> np.ndarray:
    """Magnitude and argument of each bin; the argument is atan(imag / real)."""
    s = _as_pair(spectrum, "spectrum")
    real, imag = s[0], s[1]
    magnitude = np.sqrt(real**2 + imag**2)
    with np.errstate(divide="ignore", invalid="ignore"):
        argument = np.arctan(imag / real)
    return np.vstack((magnitude, argument))


def to_complex(polar) -> np.ndarray:
    """Real and imaginary parts from magnitude and argument."""
    p = _as_pair(polar, "polar spectrum")
    magnitude, argument = p[0], p[1]
    return np.vstack((magnitude * np.cos(argument), magnitude * np.sin(argument)))