"""Search for the reference offset that minimises the least-squares error.

An input and a reference signal give different estimation errors
depending on how far the reference is shifted against the input. The
search splits a range of offsets into equal steps, picks the step whose
error is the lowest valley, narrows the range around it and repeats
until the step is a single sample.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from sigkit.rls import normal_equation_post, normal_equation_pre

_SPLIT = 16
_INPUT_THRESHOLD = 0.999
_REFERENCE_THRESHOLD = 0.99
_SPOT_THRESHOLD = 0.95


@dataclass(frozen=True)
class EnergyRange:
    """Inclusive sample range holding most of a signal's energy."""

    start: int
    end: int

    @property
    def width(self) -> int:
        return self.end - self.start + 1


@dataclass
class OptimizationResult:
    """Outcome of an offset search.

    offsets holds one reference offset per input channel, or None when no
    error valley was found. log holds, for every stage, one row of errors
    per channel followed by a row of their sums; the last column of each
    row is the offset found for that row, or -1.
    """

    offsets: tuple[int, ...] | None
    input_range: EnergyRange
    reference_range: EnergyRange
    log: np.ndarray

    @property
    def found(self) -> bool:
        return self.offsets is not None


def _first_hit(squares: np.ndarray, energy: float, threshold: float) -> int:
    with np.errstate(divide="ignore", invalid="ignore"):
        ratio = np.cumsum(squares) / energy
    hits = np.flatnonzero(ratio > threshold)
    return int(hits[0]) if hits.size else -1


def find_base_from_front(signal, energy: float, threshold: float) -> int:
    """First index at which the energy summed from the front exceeds the threshold, or -1."""
    x = np.asarray(signal, dtype=float).ravel()
    return _first_hit(x * x, float(energy), threshold)


def find_base_from_back(signal, energy: float, threshold: float) -> int:
    """Last index from which the energy summed to the end exceeds the threshold, or -1."""
    x = np.asarray(signal, dtype=float).ravel()
    hit = _first_hit((x * x)[::-1], float(energy), threshold)
    return -1 if hit < 0 else x.size - 1 - hit


def energy_spot(signal, threshold: float = _SPOT_THRESHOLD) -> tuple[int, int]:
    """Return (start, end) of the region holding the given share of the energy."""
    x = np.asarray(signal, dtype=float).ravel()
    energy = float(x @ x)
    return (
        find_base_from_back(x, energy, threshold),
        find_base_from_front(x, energy, threshold),
    )


def _as_channels(values) -> np.ndarray:
    m = np.asarray(values, dtype=float)
    if m.ndim == 1:
        m = m[np.newaxis, :]
    if m.ndim != 2:
        raise ValueError(f"inputs must be two-dimensional, got shape {m.shape}")
    return m


def input_energy_range(inputs, threshold: float) -> EnergyRange:
    """Union of the energy spots of every input channel."""
    signal = _as_channels(inputs)
    start = signal.shape[1] - 1
    end = 0
    for channel in signal:
        spot_start, spot_end = energy_spot(channel, threshold)
        start = min(start, spot_start)
        end = max(end, spot_end)
    return EnergyRange(start, end)


def reference_energy_range(reference, threshold: float) -> EnergyRange:
    """Energy spot of the reference signal."""
    start, end = energy_spot(reference, threshold)
    return EnergyRange(start, end)


def find_local_minimum(values) -> int:
    """Index of the lowest strict valley, ignoring zeros and the ends, or -1."""
    v = np.asarray(values, dtype=float).ravel()
    if v.size == 0:
        return -1
    minimum = float(v.max())
    index = -1
    for k, (before, value, after) in enumerate(zip(v, v[1:], v[2:]), start=1):
        if value == 0:
            continue
        if before > value < after and value < minimum:
            index = k
            minimum = float(value)
    return index


def iteration_count(m: int, split: int) -> int:
    """Number of stages the search takes to narrow a range of m down to single steps."""
    m = int(m)
    split = int(split)
    if m <= 0 or split <= 0:
        raise ValueError(f"range and split must be positive: {m}, {split}")
    count = 0
    search = m
    while True:
        step = max(0, (search + split - 1) // split)
        count += 1
        if step == 1:
            return count
        search = 3 * step


def _segment(values: np.ndarray, start: int, length: int) -> np.ndarray:
    out = np.zeros(length, dtype=float)
    part = values[start:start + length]
    out[: part.size] = part
    return out


def optimize(inputs, reference, separately: bool = False) -> OptimizationResult:
    """Find the reference offset giving the least estimation error for each channel.

    With separately set, every channel is searched on its own errors;
    otherwise all channels share the offset of the summed errors.
    """
    signal = _as_channels(inputs)
    ref = np.asarray(reference, dtype=float).ravel()

    input_range = input_energy_range(signal, _INPUT_THRESHOLD)
    taps = input_range.width
    if taps < 1:
        raise ValueError("the input holds no usable energy")
    length = min(int(taps * 1.5), signal.shape[1])
    rows = signal.shape[0]
    channel_count = rows + 1
    reference_range = reference_energy_range(ref, _REFERENCE_THRESHOLD)

    offsets = [max(0, reference_range.end - taps + 1)] * channel_count
    search = taps
    stages = iteration_count(taps, _SPLIT)
    log = np.zeros((stages * channel_count, _SPLIT + 1), dtype=float)
    last = _SPLIT
    found: tuple[int, ...] | None = None

    for stage in range(stages):
        step = max(0, (search + _SPLIT - 1) // _SPLIT)
        first_row = channel_count * stage
        total = log[first_row + channel_count - 1]
        total[:] = 0.0

        for r, channel in enumerate(signal):
            offset = offsets[r] if separately else offsets[-1]
            errors = log[first_row + r]
            errors[:] = 0.0
            inversed, ut = normal_equation_pre(channel[:length], taps, length)
            for k in range(_SPLIT):
                d = _segment(ref, k * step + offset, length)
                _, error = normal_equation_post(inversed, ut, d)
                errors[k] += error
                total[k] += error

        for ch in range(channel_count):
            errors = log[first_row + ch]
            index = find_local_minimum(errors)
            if index >= 0:
                offset = offsets[ch] if separately else offsets[-1]
                index = index * step + offset
            errors[last] = index

        if total[last] < 0:
            break

        if step == 1:
            if separately:
                found = tuple(int(log[first_row + ch][last]) for ch in range(rows))
            else:
                found = (int(total[last]),) * rows
            break

        for ch in range(channel_count):
            base = log[first_row + ch][last] if separately else total[last]
            offsets[ch] = max(0, int(base) - step + 1)
        search = 3 * step

    return OptimizationResult(found, input_range, reference_range, log)