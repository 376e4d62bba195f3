#!/usr/bin/env python3
"""
Pytest configuration and fixtures for compensated summation tests.

This file contains shared test fixtures, configuration, and utilities
used across the test suite.
"""

import logging
import pytest
import numpy as np
import torch
from typing import Tuple
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from compensated import unregister_type
from tests.custom_types import Tracked


# Lossy pair used throughout: huge + tiny rounds back to huge in float64
HUGE = 1.0e30
TINY = 1.0e-30


def lossy_pair(dtype) -> Tuple[np.generic, np.generic]:
    """
    Values whose naive sum loses the small one.

    ``huge`` is 2 ** (4 * bits / 8) and ``tiny`` its reciprocal, so that
    ``huge + tiny == huge`` in the given precision.
    """
    half_bitsize = 4 * np.dtype(dtype).itemsize
    huge = dtype(2.0) ** half_bitsize
    tiny = dtype(0.5) ** half_bitsize
    return huge, tiny


@pytest.fixture(scope="session")
def random_seed():
    """Set random seed for reproducible tests."""
    seed = 42
    np.random.seed(seed)
    torch.manual_seed(seed)
    return seed


@pytest.fixture
def simple_data():
    """Simple test data for basic functionality tests."""
    return [1.0, 2.0, 3.0, 4.0, 5.0]


@pytest.fixture
def challenging_float32():
    """Challenging float32 data that exposes precision issues."""
    return np.array([1e8, 1.0, -1e8], dtype=np.float32)


@pytest.fixture(params=[np.float32, np.float64])
def dtype(request):
    """Parameterized fixture for different data types."""
    return request.param


@pytest.fixture
def lossy(dtype):
    """(huge, tiny) pair for the parameterized dtype."""
    return lossy_pair(dtype)


@pytest.fixture(params=["cpu"] + (["cuda"] if torch.cuda.is_available() else []))
def device(request):
    """Parameterized fixture for different devices."""
    return torch.device(request.param)


@pytest.fixture
def tracked_minuends():
    """Minuend log of ``Tracked``, emptied before and after the test."""
    Tracked.minuends.clear()
    yield Tracked.minuends
    Tracked.minuends.clear()


@pytest.fixture
def registered():
    """Collects types registered during a test and unregisters them afterwards."""
    types = []
    yield types
    for raw_type in types:
        unregister_type(raw_type)


@pytest.fixture
def debug_logging(caplog):
    """Capture DEBUG records of the classifier."""
    caplog.set_level(logging.DEBUG, logger="compensated.traits")
    return caplog


class AccuracyChecker:
    """Utility class for checking numerical accuracy."""

    @staticmethod
    def relative_error(computed: float, reference: float) -> float:
        """Calculate relative error."""
        if reference == 0:
            return abs(computed)
        return abs(computed - reference) / abs(reference)

    @staticmethod
    def naive_sum(values) -> float:
        """Left-to-right uncompensated sum in the values' own precision."""
        total = values[0]
        for value in values[1:]:
            total = total + value
        return total


@pytest.fixture
def accuracy_checker():
    """Fixture providing accuracy checking utilities."""
    return AccuracyChecker()


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "torch: marks tests exercising PyTorch tensors"
    )


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers automatically."""
    for item in items:
        # Mark tests that take long time as slow
        if "large" in item.name or "stress" in item.name:
            item.add_marker(pytest.mark.slow)

        if "torch" in item.name or "tensor" in item.name:
            item.add_marker(pytest.mark.torch)
