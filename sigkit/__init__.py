"""Audio signal analysis on NumPy arrays: windows, filters, transforms, resampling and inverse-filter estimation."""

__version__ = "0.1.0"

__all__ = [
    "analyzer",
    "convolution",
    "fir",
    "ft",
    "iir",
    "optimizer",
    "report",
    "resampler",
    "rls",
    "window",
]