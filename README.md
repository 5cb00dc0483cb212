# sigkit

sigkit is a library for analysing and shaping audio signals held in NumPy
arrays. A single channel is a one-dimensional array; multi-channel audio is a
two-dimensional array of shape (channels, samples). Functions that take
multi-channel audio also accept a one-dimensional array as one channel.

## Modules

| Module | Contents |
| --- | --- |
| `sigkit.window` | `rectangular`, `hanning`, `hamming`, `generalized_hamming`, `blackman`, `blackman_harris`, `nuttall`, `kaiser`, `flattop`, each returning `n` coefficients sampled at the centres of `n` equal intervals, and `bessel_i0`, the order-0 modified Bessel function summed over 50 series terms. |
| `sigkit.fir` | Symmetric FIR coefficients: `lpf_sinc`, `hpf_sinc`, `bpf_sinc`, `bef_sinc` and their Lanczos counterparts `lpf_lanczos`, `hpf_lanczos`, `bpf_lanczos`, `bef_lanczos`; `filter_sinc` and `filter_lanczos` (order raised to at least 1); `num_taps`, an odd tap count for a transition band width; `sinc`; `convolve`, a causal convolution truncated to the signal length. |
| `sigkit.ft` | `ft` and `ift` for any length, `fft` and `ifft` for power-of-two lengths, `to_polar` and `to_complex`. A spectrum is a 2 × N array of real and imaginary parts; a polar spectrum holds magnitude and argument, the argument being `atan(imag / real)`. |
| `sigkit.iir` | `Biquad`, a second-order section designed by the bilinear transform for a `FilterType` (`LPF`, `HPF`, `BPF`, `BEF`), with `apply` for one sample, `process` for a sequence and `reset`; `convert_d2a`, the frequency pre-warping used in the design. |
| `sigkit.resampler` | `Resampler`, a rational rate converter with a windowed-sinc anti-aliasing filter designed either by `make_filter_by_window` with a `ResamplerWindow` (`HANNING`, `HAMMING`, `BLACKMAN`, `KAISER`) or by `make_filter_by_spec` from a stop-band decay. |
| `sigkit.rls` | Least-squares filter estimation: `normal_equation_pre`, `normal_equation_post`, `normal_equation`, the recursive `rls`, the per-channel `estimate`, `level` and `verify`. |
| `sigkit.optimizer` | `optimize`, a staged search for the reference offset giving the least estimation error, returning an `OptimizationResult`; and the helpers it builds on: `energy_spot`, `find_base_from_front`, `find_base_from_back`, `input_energy_range`, `reference_energy_range` (returning `EnergyRange`), `find_local_minimum`, `iteration_count`. |
| `sigkit.convolution` | `convolve_channels` with one shared or one-per-channel impulse response, `convolve_and_level` scaling the peak to a given value (32767 by default), and `output_name`, a default `<input>_<system>.wav` file name. |
| `sigkit.analyzer` | Waveform analysis: `preprocess` chooses a window length and pads or trims the signal to whole windows (returning `Prepared`); `energy_table` gives cumulative energies; `spectrum_table` averages windowed spectra over half-overlapping frames. Helpers: `window_length`, `lower_limit_size`, `is_power_of`, `highest_bit`, `parse_window_type`, and the enums `WindowType`, `GainFormat`, `ArgFormat`. |
| `sigkit.report` | `results_table`, a table of frequency and, per channel, amplitude, argument, cumulative energy and samples; `results_header`, the matching CSV header line. |

## Examples

Windowed low-pass filtering:

```python
import numpy as np
from sigkit import fir, window

taps = fir.lpf_sinc(25, 0.125) * window.hanning(25)
noise = np.random.default_rng(0).standard_normal(1024)
filtered = fir.convolve(noise, taps)
```

Fourier transforms:

```python
from sigkit import ft

spectrum = ft.fft(signal)        # length must be a power of two
polar = ft.to_polar(spectrum)    # rows: magnitude, argument
restored = ft.ifft(spectrum)
```

A biquad low-pass filter at 2 kHz:

```python
from sigkit.iir import Biquad, FilterType

lpf = Biquad(2 ** -0.5, 2000.0, FilterType.LPF, 48000)
out = lpf.process(samples)
```

Resampling from 48 kHz to 16 kHz:

```python
from sigkit.resampler import Resampler, ResamplerWindow

resampler = Resampler(16000, 48000, 0.35, 0.45)
resampler.make_filter_by_window(ResamplerWindow.HANNING)
converted = resampler.convert(signal)
```

Estimating inverse filters that map each input channel onto a reference,
optionally after searching for the best reference offset:

```python
from sigkit import optimizer, rls

result = optimizer.optimize(inputs, reference, separately=False)
inversed = rls.estimate(inputs, reference, 256, result.offsets)
inversed = rls.level(inversed, 32767.0)
check = rls.verify(inputs, inversed)
```

Averaged spectrum of a recording:

```python
from sigkit import analyzer

prepared = analyzer.preprocess(signal, 48000)
table = analyzer.spectrum_table(
    prepared.signal,
    48000,
    prepared.window_length,
    analyzer.WindowType.HANNING,
    prepared.only_ft,
    analyzer.GainFormat.TWENTY_LOG,
    analyzer.ArgFormat.DEGREE,
)
```

Invalid input is reported by exceptions: `ValueError` for bad lengths,
shapes or parameters, `LookupError` when `make_filter_by_spec` cannot reach
the requested decay, and `RuntimeError` when a `Resampler` is used before a
filter has been designed.

## What sigkit does not do

sigkit works on arrays in memory only. It does not read or write WAV or CSV
files and it installs no command-line programs; loading audio, saving the
tables it produces and driving a complete analysis from a shell are left to
the caller.

## Tests

The tests use pytest and live in `tests/`:

```
pip install -e .[test]
pytest
```