import numpy as np
import pytest

from sigkit.convolution import (
    DEFAULT_PEAK,
    convolve_and_level,
    convolve_channels,
    output_name,
)


def _audio():
    rng = np.random.default_rng(21)
    return rng.normal(size=(2, 32))


def test_unit_impulse_is_identity():
    audio = _audio()
    np.testing.assert_allclose(convolve_channels(audio, [[1.0]]), audio)


def test_delayed_impulse_shifts():
    audio = _audio()
    out = convolve_channels(audio, [[0.0, 1.0]])
    np.testing.assert_allclose(out[:, 1:], audio[:, :-1])
    np.testing.assert_allclose(out[:, 0], 0.0)


def test_mono_impulse_applies_to_all_channels():
    audio = _audio()
    impulse = np.array([0.5, 0.25, -0.125])
    out = convolve_channels(audio, impulse)
    for channel, result in zip(audio, out):
        np.testing.assert_allclose(result, np.convolve(channel, impulse)[: channel.size])


def test_per_channel_impulses():
    audio = _audio()
    impulse = np.array([[2.0], [-1.0]])
    out = convolve_channels(audio, impulse)
    np.testing.assert_allclose(out[0], 2.0 * audio[0])
    np.testing.assert_allclose(out[1], -audio[1])


def test_channel_mismatch_raises():
    audio = np.ones((2, 8))
    with pytest.raises(ValueError):
        convolve_channels(audio, np.ones((3, 2)))


def test_impulse_longer_than_audio_raises():
    with pytest.raises(ValueError):
        convolve_channels(np.ones((1, 4)), np.ones(5))


def test_level_reaches_default_peak():
    out = convolve_and_level(_audio(), [[0.3, 0.1]])
    assert np.abs(out).max() == pytest.approx(DEFAULT_PEAK)
    assert out.shape == (2, 32)


def test_level_preserves_shape_of_signal():
    audio = _audio()
    raw = convolve_channels(audio, [[0.3, 0.1]])
    out = convolve_and_level(audio, [[0.3, 0.1]], peak=1.0)
    ratio = out / raw
    np.testing.assert_allclose(ratio, ratio.flat[0])
    assert np.abs(out).max() == pytest.approx(1.0)


def test_level_silent_raises():
    with pytest.raises(ValueError):
        convolve_and_level(np.zeros((1, 8)), [[1.0]])


def test_output_name():
    assert output_name("dir/input.wav", "system.wav") == "input_system.wav"
    assert output_name("a.wav", "sub/b.wav").endswith(".wav")