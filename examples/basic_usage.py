#!/usr/bin/env python3
"""
Basic usage examples for the compensated summation library.

This script demonstrates how CompensatedValue recovers the precision that
plain floating-point addition loses, for real, complex, array and
user-defined raw types.
"""

import numpy as np
import torch

# Import the compensated summation library
import sys
sys.path.append('..')

from compensated import (
    CompensatedValue,
    compensated_dot,
    compensated_mean,
    compensated_sum,
    compensated_variance
)

# A huge number and a tiny number whose naive sum loses the tiny one
HUGE = 1.0e30
TINY = 1.0e-30


class Point:
    """A very simple 3D vector, to show that any type with + and - works."""

    def __init__(self, n=0):
        self.x = self.y = self.z = float(n)

    def __add__(self, other):
        result = Point()
        result.x, result.y, result.z = self.x + other.x, self.y + other.y, self.z + other.z
        return result

    def __sub__(self, other):
        result = Point()
        result.x, result.y, result.z = self.x - other.x, self.y - other.y, self.z - other.z
        return result


def demonstrate_precision_loss():
    """Show how naive addition loses precision and how it is recovered."""
    print("=" * 60)
    print("DEMONSTRATION: Precision Loss in Naive Addition")
    print("=" * 60)

    expected_zero = HUGE + TINY - HUGE - TINY
    print(f"Naive:       {HUGE} + {TINY} - {HUGE} - {TINY} = {expected_zero}")

    value = CompensatedValue(HUGE)
    value += TINY
    value -= HUGE
    value -= TINY
    print(f"Compensated: {value.to_raw()} (kind: {value.kind.value})")
    print(f"Equal to zero: {value == 0.0}")
    print()


def demonstrate_complex_numbers():
    """Show the per-component rule on complex values."""
    print("=" * 60)
    print("DEMONSTRATION: Complex Numbers")
    print("=" * 60)

    z = complex(HUGE, TINY)
    w = complex(TINY, HUGE)

    value = CompensatedValue(z)
    value += w
    value -= z
    value -= w
    print(f"In-place operators:  [Real]: {value.real}  [Imag]: {value.imag}")

    cz, cw = CompensatedValue(z), CompensatedValue(w)
    result = cz + cw - cz - cw
    print(f"Binary operators:    [Real]: {result.real}  [Imag]: {result.imag}")

    # Raw values on the left and mixed in
    result = z + cw - cz - w
    print(f"Left operators:      [Real]: {result.real}  [Imag]: {result.imag}")
    print()


def demonstrate_custom_type():
    """Show plain Kahan on a user-defined class."""
    print("=" * 60)
    print("DEMONSTRATION: Custom Class")
    print("=" * 60)

    tiny_point, huge_point = Point(), Point()
    tiny_point.x = tiny_point.y = tiny_point.z = TINY
    huge_point.x = huge_point.y = huge_point.z = HUGE

    cv_tiny = CompensatedValue(tiny_point)
    cv_huge = CompensatedValue(huge_point)
    point = (cv_huge + cv_tiny - cv_huge - cv_tiny).to_raw()

    print(f"Algorithm family: {cv_huge.kind.value}")
    print(f"point.x == {point.x}")
    print(f"point.y == {point.y}")
    print(f"point.z == {point.z}")
    print()


def demonstrate_arrays():
    """Show element-wise compensation on arrays and tensors."""
    print("=" * 60)
    print("DEMONSTRATION: Arrays and Tensors")
    print("=" * 60)

    z = np.array([HUGE, TINY])
    w = np.array([TINY, HUGE])
    print(f"Naive NumPy:  {z + w - z - w}")

    value = CompensatedValue(z)
    value += w
    value -= z
    value -= w
    print(f"Compensated:  {value.to_raw()}")

    t = torch.tensor([HUGE, TINY], dtype=torch.float64)
    u = torch.tensor([TINY, HUGE], dtype=torch.float64)
    tensor_value = CompensatedValue(t) + u - t - u
    print(f"PyTorch:      {tensor_value.to_raw()}")
    print()


def demonstrate_incremental_summation():
    """Show incremental summation with error estimates."""
    print("=" * 60)
    print("DEMONSTRATION: Incremental Summation")
    print("=" * 60)

    acc = CompensatedValue.from_zero(float)
    values = [1e16, 1.0, 2.0, 3.0, -1e16, 4.0, 5.0]

    print(f"{'Value':<15} {'Running Sum':<15} {'Error':<15}")
    print("-" * 45)

    for value in values:
        acc += value
        print(f"{value:<15.1f} {acc.to_raw():<15.6f} {acc.error():<15.2e}")

    print()
    print(f"Final sum: {acc.to_raw()}")
    print(f"Naive sum: {sum(values)}")
    print()


def demonstrate_statistical_functions():
    """Show the sequence-level helpers."""
    print("=" * 60)
    print("DEMONSTRATION: Compensated Statistics")
    print("=" * 60)

    data = np.array([1e8, 1.0, -1e8], dtype=np.float32)
    print(f"{'Function':<20} {'NumPy':<15} {'Compensated':<15}")
    print("-" * 50)
    print(f"{'Sum':<20} {np.sum(data):<15.6f} {compensated_sum(data):<15.6f}")
    print(f"{'Mean':<20} {np.mean(data):<15.6f} {compensated_mean(data):<15.6f}")

    offset = np.array([1e9 + 4.0, 1e9 + 7.0, 1e9 + 13.0, 1e9 + 16.0])
    print(f"{'Variance':<20} {np.var(offset, ddof=1):<15.6f} "
          f"{compensated_variance(offset):<15.6f}")

    dot, error = compensated_dot([1e30, 1.0, -1e30], [1.0, 1.0, 1.0])
    print(f"{'Dot':<20} {np.dot([1e30, 1.0, -1e30], [1.0, 1.0, 1.0]):<15.6f} {dot:<15.6f}")
    print(f"Dot conversion error: {error:.2e}")
    print()


def main():
    """Run all demonstrations."""
    print("COMPENSATED SUMMATION LIBRARY - BASIC USAGE EXAMPLES")
    print("=" * 60)
    print()

    demonstrate_precision_loss()
    demonstrate_complex_numbers()
    demonstrate_custom_type()
    demonstrate_arrays()
    demonstrate_incremental_summation()
    demonstrate_statistical_functions()

    print("=" * 60)
    print("All demonstrations completed!")
    print("=" * 60)


if __name__ == "__main__":
    main()
