"""
Core compensated value implementation.

This module contains ``CompensatedValue``, a wrapper around any admissible
raw value type that keeps a running sum together with a running
compensation for the rounding error lost by each addition.
"""

import copy
from typing import Any, Generic, Iterable, Optional, TypeVar

from .traits import Kind, Traits, classify

V = TypeVar("V")


class CompensatedValue(Generic[V]):
    """
    Value with compensated (Kahan / Kahan-Neumaier) addition.

    The represented quantity is ``sum + compensation``. The update rule is
    chosen once per raw type by ``classify``: Kahan-Neumaier for ordered
    types with a magnitude, its per-component form for complex-shaped types,
    and plain Kahan otherwise.

    Attributes:
        sum: The dominant-magnitude running total
        compensation: The residual lost to rounding so far
    """

    # Make NumPy defer to the reflected operators below instead of
    # broadcasting this object as a scalar.
    __array_ufunc__ = None

    def __init__(self, raw: Optional[V] = None, raw_type: Optional[type] = None):
        """
        Initialize a compensated value.

        Args:
            raw: Initial raw value; zero when omitted
            raw_type: Type used for classification (default: ``type(raw)``)

        Raises:
            InadmissibleTypeError: If the raw type cannot be summed
        """
        if raw_type is None:
            if raw is None:
                raise TypeError("CompensatedValue needs a raw value or a raw_type")
            raw_type = type(raw)

        self._traits: Traits = classify(raw_type)
        self._sum = self._traits.zero() if raw is None else raw
        self._compensation = self._traits.zero()

    @classmethod
    def from_zero(cls, raw_type: type) -> "CompensatedValue[V]":
        """Create a zero value of the given raw type."""
        return cls(raw_type=raw_type)

    @classmethod
    def from_raw(cls, raw: V, raw_type: Optional[type] = None) -> "CompensatedValue[V]":
        """Create a value holding ``raw`` with zero compensation."""
        return cls(raw, raw_type=raw_type)

    @classmethod
    def _from_parts(cls, traits: Traits, total: Any, compensation: Any) -> "CompensatedValue[V]":
        value = cls.__new__(cls)
        value._traits = traits
        value._sum = total
        value._compensation = compensation
        return value

    @property
    def sum(self) -> V:
        return self._sum

    @property
    def compensation(self) -> V:
        return self._compensation

    @property
    def kind(self) -> Kind:
        """Algorithm family used for this value's raw type."""
        return self._traits.kind

    @property
    def raw_type(self) -> type:
        return self._traits.raw_type

    # --- Conversion ---

    def to_raw(self) -> V:
        """
        Fold the compensation into the sum.

        This is a single ordinary addition and may itself round; use
        ``error()`` to estimate what it loses.
        """
        return self._sum + self._compensation

    def error(self) -> V:
        """Estimate of the error introduced by ``to_raw()``."""
        return (self._sum - self.to_raw()) + self._compensation

    def __float__(self) -> float:
        return float(self.to_raw())

    def __complex__(self) -> complex:
        return complex(self.to_raw())

    @property
    def real(self) -> Any:
        """Real part; only for complex-shaped raw types."""
        traits = self._complex_traits("real")
        return traits.real(self._sum) + traits.real(self._compensation)

    @property
    def imag(self) -> Any:
        """Imaginary part; only for complex-shaped raw types."""
        traits = self._complex_traits("imag")
        return traits.imag(self._sum) + traits.imag(self._compensation)

    def _complex_traits(self, part: str) -> Traits:
        if self._traits.kind is not Kind.COMPLEX:
            raise AttributeError(
                f"'{part}' is only available for complex raw types, "
                f"{self._traits.raw_type.__qualname__} is {self._traits.kind.value}"
            )
        return self._traits

    # --- State ---

    def assign(self, raw: V):
        """Replace the state with ``raw`` and zero compensation."""
        self._sum, self._compensation = raw, self._traits.zero()

    def reset(self):
        """Reset the value to zero."""
        self._sum, self._compensation = self._traits.zero(), self._traits.zero()

    def copy(self) -> "CompensatedValue[V]":
        return self._from_parts(self._traits, self._sum, self._compensation)

    __copy__ = copy

    def __deepcopy__(self, memo) -> "CompensatedValue[V]":
        return self._from_parts(self._traits,
                                copy.deepcopy(self._sum, memo),
                                copy.deepcopy(self._compensation, memo))

    # --- In-place arithmetic ---

    def _add_raw(self, increment: Any):
        self._sum, self._compensation = self._traits.step(self._sum, self._compensation, increment)

    def __iadd__(self, other: Any) -> "CompensatedValue[V]":
        if isinstance(other, CompensatedValue):
            step = self._traits.step
            total, compensation = step(self._sum, self._compensation, other._sum)
            self._sum, self._compensation = step(total, compensation, other._compensation)
        else:
            self._add_raw(other)
        return self

    def __isub__(self, other: Any) -> "CompensatedValue[V]":
        if isinstance(other, CompensatedValue):
            return self.__iadd__(-other)
        self._add_raw(self._traits.negate(other))
        return self

    def accumulate(self, values: Iterable[Any]):
        """
        Add every item of ``values`` in iteration order.

        Args:
            values: Any single-pass iterable of raw values (or compensated
                values); it is traversed exactly once
        """
        for item in values:
            self += item

    # --- Arithmetic ---

    def __neg__(self) -> "CompensatedValue[V]":
        negate = self._traits.negate
        return self._from_parts(self._traits, negate(self._sum), negate(self._compensation))

    def __pos__(self) -> "CompensatedValue[V]":
        return self.copy()

    def __add__(self, other: Any) -> "CompensatedValue[V]":
        result = self.copy()
        result += other
        return result

    def __sub__(self, other: Any) -> "CompensatedValue[V]":
        result = self.copy()
        result -= other
        return result

    def __radd__(self, raw: Any) -> "CompensatedValue[V]":
        return self + raw

    def __rsub__(self, raw: Any) -> "CompensatedValue[V]":
        return (-self) + raw

    # --- Comparison ---

    def __eq__(self, other: Any) -> Any:
        try:
            if isinstance(other, CompensatedValue):
                # Rearrangement of sum1 + comp1 == sum2 + comp2, not bit-identical to it.
                return self._sum - other._sum == other._compensation - self._compensation
            return self._traits.either(self._compensation == other - self._sum,
                                       lambda: self._sum == other - self._compensation)
        except (TypeError, ValueError):
            # Raw types that cannot be compared, or comparisons without a truth value
            return NotImplemented

    def __ne__(self, other: Any) -> Any:
        equal = self.__eq__(other)
        if equal is NotImplemented:
            return equal
        # xor keeps element-wise results element-wise
        return equal ^ True

    __hash__ = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(sum={self._sum!r}, compensation={self._compensation!r})"
