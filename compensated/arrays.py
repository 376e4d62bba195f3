"""
Element-wise compensated summation for NumPy arrays and PyTorch tensors.

Arrays are classified as Real, but the Kahan-Neumaier anchor is chosen per
element rather than once for the whole value. Complex-dtype arrays apply the
rule to the real and imaginary parts separately, as for complex scalars.

The zero of an array type is the integer literal ``0``: it broadcasts
against any shape and leaves the dtype of the other operand untouched.
"""

from typing import Any, Callable, Tuple

import numpy as np
import torch

from .traits import Kind, register_type


def _array_zero() -> int:
    return 0


def _elementwise_either(first: Any, second: Callable[[], Any]) -> Any:
    return first | second()


def _numpy_complex(re: Any, im: Any) -> np.ndarray:
    re, im = np.broadcast_arrays(np.asarray(re), np.asarray(im))
    # Assigning parts avoids the inf * 0j -> nan of ``re + 1j * im``
    result = np.empty(re.shape, dtype=np.result_type(re.dtype, im.dtype, np.complex64))
    result.real = re
    result.imag = im
    return result


def _torch_is_complex(value: Any) -> bool:
    return torch.is_tensor(value) and value.is_complex()


class ArrayBackend:
    """
    Element-wise Kahan-Neumaier update for one array library.

    Args:
        where: Element-wise select, ``where(condition, if_true, if_false)``
        is_complex: Whether a value has a complex dtype
        make_complex: Builds a complex array from real and imaginary parts
    """

    def __init__(self, where: Callable, is_complex: Callable[[Any], bool],
                 make_complex: Callable[[Any, Any], Any]):
        self.where = where
        self.is_complex = is_complex
        self.make_complex = make_complex

    def residual(self, total: Any, naive: Any, increment: Any) -> Any:
        """Per-element residual; ties pick the increment as anchor."""
        keep_total = abs(total) > abs(increment)
        return self.where(keep_total,
                          (total - naive) + increment,
                          (increment - naive) + total)

    def step(self, total: Any, compensation: Any, increment: Any) -> Tuple[Any, Any]:
        naive = total + increment
        if self.is_complex(naive):
            update = self.make_complex(
                self.residual(total.real, naive.real, increment.real),
                self.residual(total.imag, naive.imag, increment.imag),
            )
        else:
            update = self.residual(total, naive, increment)
        return naive, compensation + update


NUMPY_BACKEND = ArrayBackend(np.where, np.iscomplexobj, _numpy_complex)
TORCH_BACKEND = ArrayBackend(torch.where, _torch_is_complex, torch.complex)


def as_flat_sequence(values: Any) -> Any:
    """
    Flatten arrays and tensors for sequential summation.

    Tensors are moved to CPU NumPy first; arrays are flattened in C order.
    Any other iterable is returned unchanged.
    """
    if isinstance(values, torch.Tensor):
        values = values.detach().cpu().numpy()
    if isinstance(values, np.ndarray):
        return values.ravel()
    return values


# NumPy orders complex scalars lexicographically, which would classify them as Real.
register_type(np.complexfloating, kind=Kind.COMPLEX)
register_type(np.ndarray, kind=Kind.REAL, zero=_array_zero,
              step=NUMPY_BACKEND.step, either=_elementwise_either)
register_type(torch.Tensor, kind=Kind.REAL, zero=_array_zero,
              step=TORCH_BACKEND.step, either=_elementwise_either)
