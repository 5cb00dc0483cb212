import math

import numpy as np
import pytest

from sigkit.iir import Biquad, FilterType, convert_d2a


def _gain_at_dc(bq):
    return sum(bq.b) / (1.0 + sum(bq.a))


def _gain_at_nyquist(bq):
    b0, b1, b2 = bq.b
    a0, a1 = bq.a
    return (b0 - b1 + b2) / (1.0 - a0 + a1)


Q = 1 / math.sqrt(2)


def test_default_is_pass_through():
    bq = Biquad()
    data = [0.5, -1.0, 3.0, 2.25]
    assert list(bq.process(data)) == data


def test_convert_d2a_quarter_rate():
    assert convert_d2a(12000, 48000) == pytest.approx(1.0 / (2.0 * math.pi))


def test_convert_d2a_rejects_bad_rate():
    with pytest.raises(ValueError):
        convert_d2a(1000, 0)


def test_lpf_passes_dc_and_blocks_nyquist():
    bq = Biquad(Q, 2000, FilterType.LPF, 48000)
    assert _gain_at_dc(bq) == pytest.approx(1.0)
    assert bq.b[0] - bq.b[1] + bq.b[2] == pytest.approx(0.0)


def test_hpf_blocks_dc_and_passes_nyquist():
    bq = Biquad(Q, 2000, FilterType.HPF, 48000)
    assert sum(bq.b) == pytest.approx(0.0)
    assert _gain_at_nyquist(bq) == pytest.approx(1.0)


def test_bpf_blocks_dc():
    bq = Biquad(Q, 2000, FilterType.BPF, 48000)
    assert sum(bq.b) == pytest.approx(0.0)
    assert bq.b[1] == 0.0


def test_bef_passes_dc_and_nyquist():
    bq = Biquad(Q, 2000, FilterType.BEF, 48000)
    assert _gain_at_dc(bq) == pytest.approx(1.0)
    assert _gain_at_nyquist(bq) == pytest.approx(1.0)


def test_lpf_step_response_settles_to_one():
    bq = Biquad(Q, 2000, FilterType.LPF, 48000)
    out = bq.process(np.ones(2000))
    assert out[-1] == pytest.approx(1.0, abs=1e-9)


def test_process_matches_sample_by_sample_apply():
    data = np.sin(np.arange(64) * 0.3)
    a = Biquad(Q, 1000, FilterType.BPF, 8000)
    b = Biquad(Q, 1000, FilterType.BPF, 8000)
    expected = [b.apply(v) for v in data]
    assert np.allclose(a.process(data), expected)


def test_reset_restores_initial_behaviour():
    bq = Biquad(Q, 1000, FilterType.HPF, 8000)
    first = bq.process([1.0, 0.0, 0.0, 0.0])
    bq.reset()
    second = bq.process([1.0, 0.0, 0.0, 0.0])
    assert np.array_equal(first, second)


def test_accepts_string_filter_type():
    a = Biquad(Q, 1000, "lpf", 8000)
    b = Biquad(Q, 1000, FilterType.LPF, 8000)
    assert a.b == b.b and a.a == b.a


def test_unknown_filter_type_raises():
    with pytest.raises(ValueError):
        Biquad(Q, 1000, "notch", 8000)


def test_missing_design_parameters_raise():
    with pytest.raises(ValueError):
        Biquad(None, 1000, FilterType.LPF, 8000)