"""Second-order (biquad) IIR filters designed by the bilinear transform."""

from __future__ import annotations

import math
from enum import Enum

import numpy as np


class FilterType(Enum):
    """Response shape of a biquad section."""

    LPF = "lpf"
    HPF = "hpf"
    BPF = "bpf"
    BEF = "bef"


def convert_d2a(fd: float, fs: float) -> float:
    """Pre-warp a digital frequency fd at sampling rate fs to an analogue one."""
    if fs <= 0:
        raise ValueError(f"sampling rate must be positive: {fs}")
    return math.tan(math.pi * fd / fs) / (2.0 * math.pi)


class Biquad:
    """A biquad section holding its coefficients and two samples of history.

    Coefficients follow y[n] = b0 x[n] + b1 x[n-1] + b2 x[n-2]
    - a0 y[n-1] - a1 y[n-2]. Without a design the section passes its input
    through unchanged.
    """

    def __init__(self, q=None, fc=None, filter_type=None, fs=None) -> None:
        self.b: tuple[float, float, float] = (1.0, 0.0, 0.0)
        self.a: tuple[float, float] = (0.0, 0.0)
        self._x = [0.0, 0.0]
        self._y = [0.0, 0.0]
        if filter_type is not None:
            if q is None or fc is None or fs is None:
                raise ValueError("q, fc and fs are required with a filter type")
            self.calculate_coefficients(q, fc, filter_type, fs)

    def calculate_coefficients(self, q: float, fc: float, filter_type, fs: float) -> None:
        """Design the section for quality factor q and cutoff fc in Hz."""
        kind = FilterType(filter_type)
        if q == 0:
            raise ValueError("quality factor must not be zero")
        fa = convert_d2a(fc, fs)
        w = 2.0 * math.pi * fa
        c = w * w
        if kind in (FilterType.LPF, FilterType.HPF):
            d = 1 + w / q + c
            if kind is FilterType.LPF:
                self.b = (c / d, 2.0 * c / d, c / d)
            else:
                self.b = (1.0 / d, -2.0 / d, 1.0 / d)
            self.a = ((2.0 * c - 2.0) / d, (1 - w / q + c) / d)
        else:
            d = w / q
            e = 1 + d + c
            if kind is FilterType.BPF:
                self.b = (d / e, 0.0, -d / e)
            else:
                self.b = ((c + 1.0) / e, (2.0 * c - 2.0) / e, (c + 1.0) / e)
            self.a = ((2.0 * c - 2.0) / e, (1 - d + c) / e)

    def reset(self) -> None:
        """Clear the input and output history, keeping the coefficients."""
        self._x = [0.0, 0.0]
        self._y = [0.0, 0.0]

    def apply(self, x: float) -> float:
        """Filter one sample and return the output sample."""
        b0, b1, b2 = self.b
        a0, a1 = self.a
        x = float(x)
        y = (
            b0 * x
            + b1 * self._x[0]
            + b2 * self._x[1]
            - a0 * self._y[0]
            - a1 * self._y[1]
        )
        self._y = [y, self._y[0]]
        self._x = [x, self._x[0]]
        return y

    def process(self, samples) -> np.ndarray:
        """Filter a sequence of samples, continuing from the current history."""
        return np.array([self.apply(s) for s in np.asarray(samples, dtype=float).ravel()])