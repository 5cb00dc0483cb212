"""Least-squares estimation of FIR filters and the levelling of their results.

The normal equation solves h = (Ut Ut^T)^-1 Ut d. Here Ut is the M x N
matrix whose row m holds the input delayed by m samples, so Ut^T h is the
causal convolution of the input with h. The recursive least-squares
routine reaches the same estimate one sample at a time.
"""

from __future__ import annotations

import numpy as np

from sigkit.fir import convolve

_RLS_INITIAL_SCALE = 0.001


def _as_vector(values, what: str) -> np.ndarray:
    v = np.asarray(values, dtype=float)
    if v.ndim != 1:
        raise ValueError(f"{what} must be one-dimensional, got shape {v.shape}")
    return v


def _as_matrix(values, what: str) -> np.ndarray:
    m = np.asarray(values, dtype=float)
    if m.ndim == 1:
        m = m[np.newaxis, :]
    if m.ndim != 2:
        raise ValueError(f"{what} must be two-dimensional, got shape {m.shape}")
    return m


def _segment(values: np.ndarray, start: int, length: int) -> np.ndarray:
    """Return values[start:start + length], zero-padded past the end."""
    out = np.zeros(length, dtype=float)
    if start < 0:
        raise ValueError(f"segment start must not be negative: {start}")
    part = values[start:start + length]
    out[: part.size] = part
    return out


def normal_equation_pre(u, taps: int, length: int) -> tuple[np.ndarray, np.ndarray]:
    """Build the delay matrix Ut (taps x length) and the inverse of Ut Ut^T."""
    taps = int(taps)
    length = int(length)
    if taps <= 0 or length <= 0:
        raise ValueError(f"taps and length must be positive: {taps}, {length}")
    samples = _segment(_as_vector(u, "input"), 0, length)
    ut = np.zeros((taps, length), dtype=float)
    for m, row in enumerate(ut):
        if m < length:
            row[m:] = samples[: length - m]
    inversed = np.linalg.inv(ut @ ut.T)
    return inversed, ut


def normal_equation_post(inversed, ut, d) -> tuple[np.ndarray, float]:
    """Solve for the filter and return it with its squared error against d."""
    inversed = np.asarray(inversed, dtype=float)
    ut = np.asarray(ut, dtype=float)
    target = _as_vector(d, "reference")
    if target.size != ut.shape[1]:
        raise ValueError(
            f"reference length {target.size} does not match the matrix width {ut.shape[1]}"
        )
    h = inversed @ (ut @ target)
    diff = target - ut.T @ h
    return h, float(diff @ diff)


def normal_equation(u, d, taps: int) -> tuple[np.ndarray, float]:
    """Least-squares filter of `taps` coefficients mapping u onto d, and its error."""
    target = _as_vector(d, "reference")
    taps = int(taps)
    if taps <= 0 or taps > target.size:
        raise ValueError(
            f"taps ({taps}) must be positive and not exceed the reference length ({target.size})"
        )
    inversed, ut = normal_equation_pre(u, taps, target.size)
    return normal_equation_post(inversed, ut, target)


def rls(u, d, taps: int) -> np.ndarray:
    """Recursive least-squares estimate of a filter mapping u onto d."""
    samples = _as_vector(u, "input")
    target = _as_vector(d, "reference")
    taps = int(taps)
    if taps <= 0:
        raise ValueError(f"taps must be positive: {taps}")
    if target.size < samples.size:
        raise ValueError(
            f"reference ({target.size}) is shorter than the input ({samples.size})"
        )
    p = np.eye(taps) / _RLS_INITIAL_SCALE
    h = np.zeros(taps, dtype=float)
    state = np.zeros(taps, dtype=float)
    for sample, wanted in zip(samples, target):
        state = np.concatenate(([sample], state[:-1]))
        pu = p @ state
        gain = pu / (state @ pu + 1.0)
        eta = wanted - state @ h
        h = h + gain * eta
        p = p - np.outer(gain, state @ p)
    return h


def estimate(inputs, reference, taps: int, reference_offsets=None) -> np.ndarray:
    """Estimate one filter per input channel that maps it onto the reference.

    Each channel may read the reference from its own offset. Returns an
    array of shape (channels, taps).
    """
    signal = _as_matrix(inputs, "inputs")
    target = _as_vector(reference, "reference")
    taps = int(taps)
    offsets = None
    if reference_offsets is not None:
        offsets = [int(o) for o in np.asarray(reference_offsets).ravel()]
        if len(offsets) < signal.shape[0]:
            raise ValueError("one reference offset is needed for each channel")
    max_offset = max(offsets) if offsets else 0
    length = min(signal.shape[1], target.size - max_offset + 1)
    if taps > length:
        raise ValueError(f"taps ({taps}) exceed the usable length ({length})")
    estimated = np.empty((signal.shape[0], taps), dtype=float)
    for r, channel in enumerate(signal):
        offset = offsets[r] if offsets else 0
        d = _segment(target, offset, length)
        h, _ = normal_equation(channel[:length], d, taps)
        estimated[r] = h
    return estimated


def level(inversed, upper_value: float) -> np.ndarray:
    """Equalise channel energies upwards, then scale so no output can exceed upper_value.

    The final scale divides by the largest sum of absolute coefficients
    taken before the energies were equalised.
    """
    filters = _as_matrix(inversed, "filters").copy()
    energies = np.sqrt(np.einsum("ij,ij->i", filters, filters))
    if np.any(energies == 0):
        raise ValueError("a channel has zero energy and cannot be levelled")
    sumups = np.abs(filters).sum(axis=1)
    filters *= np.sqrt(energies.max() / energies)[:, np.newaxis]
    return filters * (upper_value / sumups.max())


def verify(inputs, inversed) -> np.ndarray:
    """Convolve each input channel with its estimated filter."""
    signal = _as_matrix(inputs, "inputs")
    filters = _as_matrix(inversed, "filters")
    if filters.shape[0] < signal.shape[0]:
        raise ValueError("one filter is needed for each input channel")
    return np.vstack([convolve(x, h) for x, h in zip(signal, filters)])