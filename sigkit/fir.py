"""Windowed-sinc and Lanczos FIR coefficient design and linear convolution."""

from __future__ import annotations

import math
from enum import Enum
from typing import Callable

import numpy as np

# The tap estimate uses the single-precision value of 3.1.
_TAP_CONSTANT = float(np.float32(3.1))

_Base = Callable[[np.ndarray, float], np.ndarray]


def _sinc_array(x: np.ndarray) -> np.ndarray:
    x = np.asarray(x, dtype=float)
    safe = np.where(x == 0.0, 1.0, x)
    return np.where(x == 0.0, 1.0, np.sin(safe) / safe)


def sinc(x: float) -> float:
    """Unnormalised sinc: sin(x) / x, with sinc(0) = 1."""
    return 1.0 if x == 0.0 else math.sin(x) / x


def _sinc_base(x: np.ndarray, _arg: float) -> np.ndarray:
    return _sinc_array(x)


def _lanczos_base(x: np.ndarray, order: float) -> np.ndarray:
    return _sinc_array(x) * _sinc_array(np.asarray(x, dtype=float) / order)


class _Kind(Enum):
    LPF = "lpf"
    HPF = "hpf"
    BPF = "bpf"
    BEF = "bef"


def _response(kind: _Kind, m: np.ndarray, fe1: float, fe2: float, arg: float, base: _Base) -> np.ndarray:
    pi = math.pi
    if kind is _Kind.LPF:
        return 2.0 * fe1 * base(2.0 * pi * fe1 * m, arg)
    if kind is _Kind.HPF:
        return base(pi * m, arg) - 2.0 * fe1 * base(2.0 * pi * fe1 * m, arg)
    if kind is _Kind.BPF:
        return 2.0 * fe2 * base(2.0 * pi * fe2 * m, arg) - 2.0 * fe1 * base(2.0 * pi * fe1 * m, arg)
    return (
        base(pi * m, arg)
        - 2.0 * fe2 * base(2.0 * pi * fe2 * m, arg)
        + 2.0 * fe1 * base(2.0 * pi * fe1 * m, arg)
    )


def _design(n: int, fe1: float, fe2: float, arg: float, kind: _Kind, base: _Base) -> np.ndarray:
    n = int(n)
    if n < 0:
        raise ValueError(f"number of taps must not be negative: {n}")
    half = (n + 1) // 2
    m = (2 * np.arange(half, dtype=float) + 1 - n) / 2.0
    values = _response(kind, m, fe1, fe2, arg, base)
    coef = np.empty(n, dtype=float)
    coef[:half] = values
    coef[n - half:] = values[::-1]
    return coef


def lpf_sinc(n: int, fe: float) -> np.ndarray:
    """Low-pass sinc coefficients with normalised cutoff fe."""
    return _design(n, fe, 0.0, 0.0, _Kind.LPF, _sinc_base)


def hpf_sinc(n: int, fe: float) -> np.ndarray:
    """High-pass sinc coefficients with normalised cutoff fe."""
    return _design(n, fe, 0.0, 0.0, _Kind.HPF, _sinc_base)


def bpf_sinc(n: int, fe1: float, fe2: float) -> np.ndarray:
    """Band-pass sinc coefficients passing fe1..fe2."""
    return _design(n, fe1, fe2, 0.0, _Kind.BPF, _sinc_base)


def bef_sinc(n: int, fe1: float, fe2: float) -> np.ndarray:
    """Band-elimination sinc coefficients stopping fe1..fe2."""
    return _design(n, fe1, fe2, 0.0, _Kind.BEF, _sinc_base)


def lpf_lanczos(n: int, fe: float, order: float) -> np.ndarray:
    """Low-pass Lanczos coefficients."""
    return _design(n, fe, 0.0, order, _Kind.LPF, _lanczos_base)


def hpf_lanczos(n: int, fe: float, order: float) -> np.ndarray:
    """High-pass Lanczos coefficients."""
    return _design(n, fe, 0.0, order, _Kind.HPF, _lanczos_base)


def bpf_lanczos(n: int, fe1: float, fe2: float, order: float) -> np.ndarray:
    """Band-pass Lanczos coefficients."""
    return _design(n, fe1, fe2, order, _Kind.BPF, _lanczos_base)


def bef_lanczos(n: int, fe1: float, fe2: float, order: float) -> np.ndarray:
    """Band-elimination Lanczos coefficients."""
    return _design(n, fe1, fe2, order, _Kind.BEF, _lanczos_base)


def filter_sinc(n: int, fe: float) -> np.ndarray:
    """Low-pass sinc filter of n taps."""
    return lpf_sinc(n, fe)


def filter_lanczos(n: int, fe: float, order: float) -> np.ndarray:
    """Low-pass Lanczos filter of n taps; orders below 1 are raised to 1."""
    return lpf_lanczos(n, fe, max(order, 1.0))


def num_taps(delta: float) -> int:
    """Odd number of taps for a normalised transition band width delta."""
    if delta <= 0:
        raise ValueError(f"transition band width must be positive: {delta}")
    taps = int(_TAP_CONSTANT / delta + 0.5 - 1)
    if taps % 2 == 0:
        taps += 1
    return taps


def convolve(signal, impulse) -> np.ndarray:
    """Causal convolution truncated to the length of the signal."""
    x = np.asarray(signal, dtype=float)
    h = np.asarray(impulse, dtype=float)
    if h.size == 0:
        raise ValueError("impulse response must not be empty")
    if x.size < h.size:
        raise ValueError(
            f"signal ({x.size}) is shorter than the impulse response ({h.size})"
        )
    return np.convolve(x, h)[: x.size]