"""Rational sampling-rate conversion through a windowed-sinc FIR filter."""

from __future__ import annotations

from enum import Enum

import numpy as np

from sigkit import window
from sigkit.fir import lpf_sinc

_KAISER_ALPHA_OFFSET = 2
# Half transition bands per Kaiser alpha 2..10, held in single precision.
_KAISER_TRANSITION_BAND = [
    float(np.float32(v))
    for v in (3.0 / 2, 4.0 / 2, 5.2 / 2, 6.4 / 2, 7.6 / 2, 9.0 / 2, 10.2 / 2, 11.4 / 2, 12.8 / 2)
]
_KAISER_STOPBAND_DECAY = [29, 27, 45, 54, 63, 72, 81, 90, 99]


class ResamplerWindow(Enum):
    """Window applied to the sinc kernel of the anti-aliasing filter."""

    HANNING = "hanning"
    HAMMING = "hamming"
    BLACKMAN = "blackman"
    KAISER = "kaiser"


class Resampler:
    """Converts a signal from base_fs to target_fs by the ratio L / M."""

    def __init__(self, target_fs: int, base_fs: int, pass_band: float, stop_band: float) -> None:
        self.target_fs = 0
        self.base_fs = 0
        self.up_factor = 1
        self.down_factor = 1
        self.pass_band = 0.0
        self.stop_band = 0.0
        self._coefficients: np.ndarray | None = None
        self.set_sampling_rates(target_fs, base_fs)
        self.set_filter_params(pass_band, stop_band)

    def set_sampling_rates(self, target_fs: int, base_fs: int) -> None:
        """Set the rates and reduce their ratio to up/down factors."""
        target_fs = int(target_fs)
        base_fs = int(base_fs)
        if target_fs <= 0 or base_fs <= 0:
            raise ValueError(f"sampling rates must be positive: {target_fs}, {base_fs}")
        self.target_fs = target_fs
        self.base_fs = base_fs
        x, y = base_fs, target_fs
        limit = min(x, y) // 2
        i = 2
        while i < limit:
            if x % i == 0 and y % i == 0:
                x //= i
                y //= i
                i = 2
            else:
                i += 1
        self.up_factor = y
        self.down_factor = x

    def set_filter_params(self, pass_band: float, stop_band: float) -> None:
        """Set normalised pass- and stop-band edges, both in (0, 1)."""
        if not (0.0 < pass_band < 1.0) or not (0.0 < stop_band < 1.0) or stop_band < pass_band:
            raise ValueError(f"illegal filter band edges: {pass_band}, {stop_band}")
        self.pass_band = float(pass_band)
        self.stop_band = float(stop_band)

    def make_filter_by_window(self, window_type, alpha: float = 2.0) -> None:
        """Design the filter with the given window; Kaiser alpha is clamped to [2, 10]."""
        kind = ResamplerWindow(window_type)
        if kind is ResamplerWindow.KAISER:
            alpha = min(max(alpha, 2.0), 10.0)
        self._update(kind, alpha)

    def make_filter_by_spec(self, ripple: float, decay: float) -> None:
        """Design a Kaiser filter reaching the requested stop-band decay in dB."""
        for index, value in enumerate(_KAISER_STOPBAND_DECAY):
            if value > decay:
                self._update(ResamplerWindow.KAISER, float(index + _KAISER_ALPHA_OFFSET))
                return
        raise LookupError(f"no Kaiser window reaches a stop-band decay of {decay} dB")

    def _update(self, kind: ResamplerWindow, alpha: float) -> None:
        band = self.stop_band - self.pass_band
        if band <= 0:
            raise ValueError("stop band must lie above the pass band")
        if kind is ResamplerWindow.HANNING:
            factor, make = 6.2 / 2, window.hanning
        elif kind is ResamplerWindow.HAMMING:
            factor, make = 6.6 / 2, window.hamming
        elif kind is ResamplerWindow.BLACKMAN:
            factor, make = 11.0 / 2, window.blackman
        else:
            index = int(alpha + 0.5) - _KAISER_ALPHA_OFFSET
            factor = _KAISER_TRANSITION_BAND[index]

            def make(n: int) -> np.ndarray:
                return window.kaiser(n, alpha)

        n = int(factor / band + 0.5)
        if n % 2 == 0:
            n += 1
        n *= self.up_factor
        cutoff = (self.stop_band + self.pass_band) / 2.0 / max(self.up_factor, self.down_factor)
        self._coefficients = make(n) * lpf_sinc(n, cutoff)

    def convert(self, signal) -> np.ndarray:
        """Resample a one-dimensional signal; samples past its end count as zero."""
        if self._coefficients is None:
            raise RuntimeError("no filter has been designed")
        x = np.asarray(signal, dtype=float).ravel()
        up, down = self.up_factor, self.down_factor
        coef = self._coefficients
        out_len = (x.size * up + down - 1) // down
        width = coef.size // up
        needed = (out_len * down) // up + width
        padded = np.concatenate((x, np.zeros(max(0, needed - x.size))))
        out = np.empty(out_len, dtype=float)
        acc = 0
        for i in range(out_len):
            acc += down
            index, phase = divmod(acc, up)
            m = i + 1 if width - 1 > i else width
            data = padded[index:index + m][::-1]
            taps = coef[phase:phase + m * up:up]
            out[i] = float(data @ taps)
        return out

    def coefficients(self) -> np.ndarray:
        """Return a copy of the designed filter coefficients."""
        if self._coefficients is None:
            raise RuntimeError("no filter has been designed")
        return self._coefficients.copy()