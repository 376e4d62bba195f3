"""
Update rules for compensated summation.

Each variant is a pure function taking the current ``(total, compensation)``
pair and a raw increment, and returning the new pair. The classifier binds
exactly one of them to every admissible raw type:

- ``neumaier_step``: Kahan-Neumaier, for ordered types with a magnitude
- ``complex_neumaier_step``: Kahan-Neumaier applied per component
- ``kahan_step``: plain Kahan, for everything else
"""

from typing import Any, Callable, Tuple


def kahan_step(total: Any, compensation: Any, increment: Any) -> Tuple[Any, Any]:
    """
    Single-step Kahan addition.

    The running total is always used as the anchor for cancellation, since
    nothing is known about the relative magnitudes of the operands.

    Args:
        total: Current running sum
        compensation: Current running compensation
        increment: Raw value to add

    Returns:
        Tuple of (new_total, new_compensation)
    """
    naive = total + increment
    return naive, compensation + ((total - naive) + increment)


def neumaier_residual(total: Any, naive: Any, increment: Any,
                      magnitude: Callable[[Any], Any] = abs) -> Any:
    """
    Rounding residual of ``naive = total + increment``.

    The operand with the larger magnitude is cancelled against the naive sum,
    which leaves the lost low-order bits as the residual. The comparison is
    strict: on a tie the increment is the anchor.
    """
    if magnitude(total) > magnitude(increment):
        return (total - naive) + increment
    return (increment - naive) + total


def neumaier_step(total: Any, compensation: Any, increment: Any,
                  magnitude: Callable[[Any], Any] = abs) -> Tuple[Any, Any]:
    """
    Single-step Kahan-Neumaier addition.

    Args:
        total: Current running sum
        compensation: Current running compensation
        increment: Raw value to add
        magnitude: Function returning an orderable magnitude of a raw value

    Returns:
        Tuple of (new_total, new_compensation)
    """
    naive = total + increment
    return naive, compensation + neumaier_residual(total, naive, increment, magnitude)


def complex_neumaier_step(total: Any, compensation: Any, increment: Any,
                          real: Callable[[Any], Any],
                          imag: Callable[[Any], Any],
                          rebuild: Callable[[Any, Any], Any],
                          magnitude: Callable[[Any], Any] = abs) -> Tuple[Any, Any]:
    """
    Kahan-Neumaier addition for complex-shaped values.

    The real and imaginary parts choose their anchors independently, so the
    two branch decisions may differ. The two residuals are rebuilt into a
    single raw value before being added to the compensation.

    Args:
        total: Current running sum
        compensation: Current running compensation
        increment: Raw value to add
        real: Accessor for the real component
        imag: Accessor for the imaginary component
        rebuild: Constructor taking ``(real, imag)``
        magnitude: Magnitude function of the component type

    Returns:
        Tuple of (new_total, new_compensation)
    """
    naive = total + increment
    update = rebuild(
        neumaier_residual(real(total), real(naive), real(increment), magnitude),
        neumaier_residual(imag(total), imag(naive), imag(increment), magnitude),
    )
    return naive, compensation + update
