import numpy as np
import pytest

from sigkit.optimizer import (
    EnergyRange,
    energy_spot,
    find_base_from_back,
    find_base_from_front,
    find_local_minimum,
    input_energy_range,
    iteration_count,
    optimize,
    reference_energy_range,
)

# A reference whose error against a two-tap input falls to a single valley.
REFERENCE = [1000, 0, 0, 8, 15, 13, 3, -6, -6, 2, 9, 9, 3, -2, 0, 8, 15, 15]
EXPECTED_OFFSET = 8


def _input(channels=1):
    row = np.zeros(10)
    row[:2] = 1.0
    return np.tile(row, (channels, 1))


def test_front_not_found_above_one():
    x = np.array([1.0, 2.0, 3.0])
    assert find_base_from_front(x, float(x @ x), 1.5) == -1


def test_back_not_found_above_one():
    x = np.array([1.0, 2.0, 3.0])
    assert find_base_from_back(x, float(x @ x), 1.5) == -1


def test_back_mirrors_front():
    rng = np.random.default_rng(3)
    x = rng.normal(size=40)
    energy = float(x @ x)
    for threshold in (0.3, 0.6, 0.9):
        back = find_base_from_back(x, energy, threshold)
        front = find_base_from_front(x[::-1], energy, threshold)
        assert back == x.size - 1 - front


def test_front_reaches_threshold():
    rng = np.random.default_rng(5)
    x = rng.normal(size=50)
    energy = float(x @ x)
    k = find_base_from_front(x, energy, 0.7)
    assert np.sum(x[: k + 1] ** 2) / energy > 0.7
    assert np.sum(x[:k] ** 2) / energy <= 0.7


def test_energy_spot_ordered():
    rng = np.random.default_rng(7)
    for _ in range(10):
        x = rng.normal(size=30)
        start, end = energy_spot(x)
        assert 0 <= start <= end < x.size


def test_input_range_is_union_of_spots():
    rng = np.random.default_rng(11)
    signal = rng.normal(size=(3, 25))
    spots = [energy_spot(row, 0.9) for row in signal]
    result = input_energy_range(signal, 0.9)
    assert result.start == min(s for s, _ in spots)
    assert result.end == max(e for _, e in spots)


def test_reference_range_matches_spot():
    rng = np.random.default_rng(13)
    x = rng.normal(size=20)
    start, end = energy_spot(x, 0.8)
    result = reference_energy_range(x, 0.8)
    assert result == EnergyRange(start, end)
    assert result.width == end - start + 1


def test_local_minimum_single_valley():
    assert find_local_minimum([3.0, 1.0, 3.0]) == 1


def test_local_minimum_prefers_lowest_valley():
    values = [5.0, 2.0, 4.0, 1.0, 6.0]
    index = find_local_minimum(values)
    assert values[index] == min(values[1:-1])


def test_local_minimum_skips_zero_and_monotonic():
    assert find_local_minimum([5.0, 0.0, 5.0]) == -1
    assert find_local_minimum([1.0, 2.0, 3.0, 4.0]) == -1
    assert find_local_minimum([]) == -1


def test_iteration_count_single_stage_for_small_range():
    for m in range(1, 17):
        assert iteration_count(m, 16) == 1


def test_iteration_count_grows_with_range():
    counts = [iteration_count(m, 16) for m in (16, 100, 1000, 10000)]
    assert counts == sorted(counts)
    assert counts[-1] > counts[0]


def test_iteration_count_rejects_zero():
    with pytest.raises(ValueError):
        iteration_count(0, 16)


def test_optimize_finds_valley():
    result = optimize(_input(), REFERENCE, False)
    assert result.found
    assert result.offsets == (EXPECTED_OFFSET,)
    assert result.log.shape == (iteration_count(result.input_range.width, 16) * 2, 17)
    assert result.log[-1][-1] == EXPECTED_OFFSET


def test_optimize_separately_matches_shared():
    shared = optimize(_input(2), REFERENCE, False)
    separate = optimize(_input(2), REFERENCE, True)
    assert shared.offsets == separate.offsets == (EXPECTED_OFFSET, EXPECTED_OFFSET)


def test_optimize_reports_ranges():
    result = optimize(_input(), REFERENCE, False)
    assert result.reference_range == reference_energy_range(REFERENCE, 0.99)
    assert result.input_range == input_energy_range(_input(), 0.999)


def test_optimize_without_valley():
    signal = np.zeros(6)
    signal[0] = 1.0
    result = optimize(signal, np.arange(1.0, 30.0), False)
    assert result.offsets is None
    assert not result.found
    assert result.log[-1][-1] == -1