"""
Compensated Summation Library

A generic wrapper value implementing compensated (Kahan and Kahan-Neumaier)
addition for any admissible raw value type: Python and NumPy numbers,
complex numbers, NumPy arrays, PyTorch tensors and user-defined types.

This library provides:
- Capability classification of raw types into real, complex and generic
- Kahan-Neumaier summation for ordered types with a magnitude
- Per-component Kahan-Neumaier summation for complex-shaped types
- Plain Kahan summation for everything else
- Compensated sum, mean, variance and dot product helpers
"""

from .traits import InadmissibleTypeError, Kind, Traits, classify, register_type, unregister_type
from .core import CompensatedValue
from .arrays import ArrayBackend
from .algorithms import (
    compensated_accumulate,
    compensated_sum,
    compensated_mean,
    compensated_variance,
    compensated_dot
)

__version__ = "1.0.0"
__author__ = "Compensated Summation Contributors"

__all__ = [
    "CompensatedValue",
    "InadmissibleTypeError",
    "Kind",
    "Traits",
    "classify",
    "register_type",
    "unregister_type",
    "ArrayBackend",
    "compensated_accumulate",
    "compensated_sum",
    "compensated_mean",
    "compensated_variance",
    "compensated_dot"
]
