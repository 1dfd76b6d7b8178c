"""SIFT descriptors and matching, image filters, B-spline kernels and signal helpers."""

__version__ = "0.1.0"
__all__ = [
    "filters",
    "sift_descriptor",
    "sift_match",
    "signal",
    "splines",
]