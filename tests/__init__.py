"""
Test suite for the compensated summation library.

Test Structure:
- test_traits.py: Raw type classification and registration
- test_variants.py: The Kahan / Kahan-Neumaier update rules
- test_core.py: CompensatedValue construction, arithmetic and equality
- test_arrays.py: NumPy array and PyTorch tensor raw values
- test_algorithms.py: Sequence-level helpers
- custom_types.py: User-defined raw types shared by the tests
- conftest.py: Shared fixtures and configuration

Usage:
    # Run all tests
    pytest

    # Run tests with coverage
    pytest --cov=compensated

    # Run only fast tests
    pytest -m "not slow"
"""
