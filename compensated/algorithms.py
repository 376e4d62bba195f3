"""
Sequence-level algorithms built on compensated values.

These helpers accept Python iterables, NumPy arrays and PyTorch tensors.
Arrays and tensors are flattened and summed element by element, in order;
nothing here reorders or splits its input.
"""

from typing import Any, Iterable, List, Optional, Tuple, Union

import numpy as np
import torch

from .arrays import as_flat_sequence
from .core import CompensatedValue

Values = Union[Iterable[Any], np.ndarray, torch.Tensor]


def compensated_accumulate(values: Values, start: Optional[Any] = None) -> Optional[CompensatedValue]:
    """
    Accumulate a sequence into a compensated value.

    Args:
        values: Sequence of raw values to add
        start: Optional initial raw or compensated value

    Returns:
        The accumulated value, or None for an empty input without ``start``
    """
    items = iter(as_flat_sequence(values))
    if start is None:
        start = next(items, None)
        if start is None:
            return None

    if isinstance(start, CompensatedValue):
        accumulator = start.copy()
    else:
        accumulator = CompensatedValue.from_raw(start)
    accumulator.accumulate(items)
    return accumulator


def compensated_sum(values: Values, start: Optional[Any] = None) -> Any:
    """
    Compute a sum using compensated summation.

    Args:
        values: Sequence of values to sum
        start: Optional initial raw value

    Returns:
        Compensated sum as a raw value; ``start`` (or 0.0) for empty input
    """
    accumulator = compensated_accumulate(values, start)
    if accumulator is None:
        return 0.0
    return accumulator.to_raw()


def _materialize(values: Values) -> List[Any]:
    return list(as_flat_sequence(values))


def _as_array(values: Values) -> np.ndarray:
    if isinstance(values, torch.Tensor):
        return values.detach().cpu().numpy()
    return np.asarray(values)


def compensated_mean(values: Values) -> Any:
    """
    Compute the mean using compensated summation.

    Args:
        values: Sequence of values

    Returns:
        Compensated mean (0.0 for empty input)
    """
    items = _materialize(values)
    if not items:
        return 0.0
    return compensated_sum(items) / len(items)


def compensated_variance(values: Values, ddof: int = 1) -> Any:
    """
    Compute variance using compensated summation.

    Args:
        values: Sequence of values
        ddof: Delta degrees of freedom (1 for sample variance, 0 for population)

    Returns:
        Compensated variance
    """
    items = _materialize(values)
    n = len(items)
    if n <= ddof:
        return 0.0

    # Two-pass algorithm with compensated summation
    mean = compensated_sum(items) / n
    sum_sq_dev = compensated_sum((x - mean) ** 2 for x in items)
    return sum_sq_dev / (n - ddof)


def compensated_dot(a: Values, b: Values) -> Tuple[Any, Any]:
    """
    Compute a dot product with compensated accumulation.

    Products are formed with ordinary multiplication; only their
    accumulation is compensated.

    Args:
        a: First vector
        b: Second vector

    Returns:
        Tuple of (dot_product, conversion_error)

    Raises:
        ValueError: If the inputs have different shapes
    """
    a, b = _as_array(a), _as_array(b)
    if a.shape != b.shape:
        raise ValueError(f"Vectors must have same shape, got {a.shape} and {b.shape}")

    accumulator = compensated_accumulate(a * b)
    if accumulator is None:
        return 0.0, 0.0
    return accumulator.to_raw(), accumulator.error()
