"""
Capability classification of raw value types.

A raw type is inspected once, by probing a zero instance of it, and the
result is memoised as a frozen ``Traits`` record. The record carries the
operations a ``CompensatedValue`` needs (zero, negation, the update step),
so the arithmetic never inspects types on the hot path.

Classification precedence is strict:

1. Real: ordered, with a magnitude (builtin ``abs()`` or a member ``abs()``)
2. Complex: ``real``/``imag`` parts that are themselves Real, and a
   ``(real, imag)`` constructor
3. Generic: anything else that is admissible
"""

import enum
import functools
import logging
import operator
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

from .variants import complex_neumaier_step, kahan_step, neumaier_step

logger = logging.getLogger(__name__)

# What a probe raises when the raw type lacks the operation being probed.
_PROBE_ERRORS = (TypeError, AttributeError, ValueError)

_OPTION_NAMES = ("kind", "zero", "magnitude", "step", "either")


class InadmissibleTypeError(TypeError):
    """Raised when a raw type cannot be used for compensated summation."""


class Kind(enum.Enum):
    """Algorithm family selected for a raw type."""

    REAL = "real"
    COMPLEX = "complex"
    GENERIC = "generic"


def _either(first: Any, second: Callable[[], Any]) -> Any:
    return first or second()


@dataclass(frozen=True)
class Traits:
    """
    Resolved capabilities of a raw value type.

    Attributes:
        raw_type: The classified type
        kind: Algorithm family
        zero: Factory for the additive identity
        negate: Unary negation, or subtraction from zero where V has none
        step: Update rule ``(total, compensation, increment) -> (total, compensation)``
        either: Combines the two raw-equality checks; the second is passed
            as a thunk so scalar types can short-circuit
        magnitude: Anchor selector (Real) or component magnitude (Complex)
        real: Real-part accessor (Complex only)
        imag: Imaginary-part accessor (Complex only)
    """

    raw_type: type
    kind: Kind
    zero: Callable[[], Any]
    negate: Callable[[Any], Any]
    step: Callable[[Any, Any, Any], Tuple[Any, Any]]
    either: Callable[[Any, Callable[[], Any]], Any] = _either
    magnitude: Optional[Callable[[Any], Any]] = None
    real: Optional[Callable[[Any], Any]] = None
    imag: Optional[Callable[[Any], Any]] = None


_REGISTRY: Dict[type, Dict[str, Any]] = {}


def _name(raw_type: type) -> str:
    return f"{raw_type.__module__}.{raw_type.__qualname__}"


def register_type(raw_type: type, *,
                  kind: Optional[Kind] = None,
                  zero: Optional[Callable[[], Any]] = None,
                  magnitude: Optional[Callable[[Any], Any]] = None,
                  step: Optional[Callable[[Any, Any, Any], Tuple[Any, Any]]] = None,
                  either: Optional[Callable[[Any, Callable[[], Any]], Any]] = None):
    """
    Override the classification of a raw type and its subclasses.

    Anything not overridden is still inferred by probing.

    Args:
        raw_type: Type to configure
        kind: Pin the algorithm family instead of inferring it
        zero: Factory for the additive identity (default ``raw_type(0)``)
        magnitude: Magnitude function for Real types
        step: Custom update rule, replacing the variant for ``kind``
        either: Combiner for the two raw-equality checks
    """
    supplied = dict(zip(_OPTION_NAMES, (kind, zero, magnitude, step, either)))
    options = {name: value for name, value in supplied.items() if value is not None}
    if not options:
        raise ValueError("register_type() needs at least one override")

    _REGISTRY[raw_type] = options
    classify.cache_clear()
    logger.debug("Registered %s with overrides: %s", _name(raw_type), ", ".join(options))


def unregister_type(raw_type: type):
    """Remove overrides previously set with ``register_type``."""
    if _REGISTRY.pop(raw_type, None) is not None:
        classify.cache_clear()
        logger.debug("Unregistered %s", _name(raw_type))


def _registered_options(raw_type: type) -> Dict[str, Any]:
    for base in raw_type.__mro__:
        if base in _REGISTRY:
            return _REGISTRY[base]
    return {}


def _admissible_zero(raw_type: type, zero: Optional[Callable[[], Any]]) -> Tuple[Callable[[], Any], Any]:
    if zero is None:
        zero = functools.partial(raw_type, 0)
    try:
        origin = zero()
        origin + origin
        origin - origin
    except _PROBE_ERRORS as exc:
        raise InadmissibleTypeError(
            f"{_name(raw_type)} is not admissible for compensated summation: "
            f"it needs a zero built from the literal 0 and binary + and -"
        ) from exc
    return zero, origin


def _negation(zero: Callable[[], Any], origin: Any) -> Callable[[Any], Any]:
    try:
        -origin
    except _PROBE_ERRORS:
        return lambda raw: zero() - raw
    return operator.neg


def _is_ordered(value: Any) -> bool:
    try:
        value > value
    except _PROBE_ERRORS:
        return False
    return True


def _magnitude(value: Any) -> Optional[Callable[[Any], Any]]:
    # The builtin abs() wins over a member abs() when both exist.
    for candidate in (abs, operator.methodcaller("abs")):
        try:
            size = candidate(value)
        except _PROBE_ERRORS:
            continue
        if _is_ordered(size):
            return candidate
    return None


def _accessor(value: Any, name: str) -> Callable[[Any], Any]:
    if callable(getattr(value, name)):
        return operator.methodcaller(name)
    return operator.attrgetter(name)


def _rebuilder(raw_type: type, re: Any, im: Any) -> Optional[Callable[[Any, Any], Any]]:
    # NumPy complex scalars only take a single complex argument.
    candidates = (raw_type, lambda x, y: raw_type(complex(x, y)))
    for candidate in candidates:
        try:
            candidate(re, im)
        except _PROBE_ERRORS:
            continue
        return candidate
    return None


def _complex_shape(raw_type: type, origin: Any) -> Optional[Dict[str, Any]]:
    try:
        real, imag = _accessor(origin, "real"), _accessor(origin, "imag")
        re, im = real(origin), imag(origin)
    except _PROBE_ERRORS:
        return None
    if raw_type in (type(re), type(im)):
        return None

    try:
        component = classify(type(re))
        if component.kind is not Kind.REAL or classify(type(im)).kind is not Kind.REAL:
            return None
    except InadmissibleTypeError:
        return None

    rebuild = _rebuilder(raw_type, re, im)
    if rebuild is None:
        return None
    return {"real": real, "imag": imag, "rebuild": rebuild, "magnitude": component.magnitude}


@functools.lru_cache(maxsize=None)
def classify(raw_type: type) -> Traits:
    """
    Classify a raw value type for compensated summation.

    Args:
        raw_type: Type of the raw values to be summed

    Returns:
        Memoised ``Traits`` for the type

    Raises:
        InadmissibleTypeError: If the type lacks a zero, ``+`` or ``-``
    """
    if not isinstance(raw_type, type):
        raise TypeError(f"classify() expects a type, got {raw_type!r}")

    options = _registered_options(raw_type)
    zero, origin = _admissible_zero(raw_type, options.get("zero"))
    kind = options.get("kind")
    step = options.get("step")
    magnitude = options.get("magnitude")
    shape = None

    if kind in (None, Kind.REAL):
        if magnitude is None and _is_ordered(origin):
            magnitude = _magnitude(origin)
        if magnitude is not None:
            kind = Kind.REAL
        elif kind is Kind.REAL and step is None:
            raise InadmissibleTypeError(f"{_name(raw_type)} is registered as real but has no magnitude")

    if kind in (None, Kind.COMPLEX):
        shape = _complex_shape(raw_type, origin)
        if shape is not None:
            kind = Kind.COMPLEX
            magnitude = shape["magnitude"]
        elif kind is Kind.COMPLEX:
            raise InadmissibleTypeError(f"{_name(raw_type)} is registered as complex but has no real/imag parts")

    if kind is None:
        kind = Kind.GENERIC

    if step is None:
        if kind is Kind.REAL:
            step = functools.partial(neumaier_step, magnitude=magnitude)
        elif kind is Kind.COMPLEX:
            step = functools.partial(complex_neumaier_step, real=shape["real"], imag=shape["imag"],
                                     rebuild=shape["rebuild"], magnitude=magnitude)
        else:
            step = kahan_step

    logger.debug("Classified %s as %s", _name(raw_type), kind.value)
    return Traits(
        raw_type=raw_type,
        kind=kind,
        zero=zero,
        negate=_negation(zero, origin),
        step=step,
        either=options.get("either", _either),
        magnitude=magnitude,
        real=shape["real"] if shape else None,
        imag=shape["imag"] if shape else None,
    )
