#!/usr/bin/env python3
"""
Accuracy comparison benchmarks for compensated summation.

This script compares naive left-to-right addition, NumPy's pairwise sum,
plain Kahan and Kahan-Neumaier across challenging test cases.
"""

import math
import time
from typing import Dict, Tuple

import numpy as np
import pandas as pd
import sys
sys.path.append('..')

from compensated import compensated_sum
from compensated.variants import kahan_step


def naive_sum(data: np.ndarray) -> float:
    """Left-to-right addition in the data's own precision."""
    total = data.dtype.type(0)
    for value in data:
        total = total + value
    return total


def kahan_sum(data: np.ndarray) -> float:
    """Plain Kahan: the running total is always the anchor."""
    total, compensation = data.dtype.type(0), data.dtype.type(0)
    for value in data:
        total, compensation = kahan_step(total, compensation, value)
    return total + compensation


class AccuracyBenchmark:
    """
    Accuracy benchmark suite for summation algorithms.
    """

    def __init__(self):
        self.algorithms = {
            'naive': naive_sum,
            'numpy': np.sum,
            'kahan': kahan_sum,
            'neumaier': compensated_sum,
        }

        self.results = []

    def generate_test_case(self, case_type: str, size: int, dtype=np.float32) -> Tuple[np.ndarray, float]:
        """
        Generate test cases with known exact results.

        Args:
            case_type: Type of test case
            size: Array size
            dtype: Data type

        Returns:
            Tuple of (test_array, exact_result)
        """
        rng = np.random.default_rng(42)

        if case_type == 'alternating_large':
            # Large values cancelling each other around a small remainder
            data = np.zeros(size, dtype=dtype)
            data[::2] = 1e8
            data[1::2] = -1e8
            data[size // 2] = 1.0

        elif case_type == 'large_first':
            # One huge value followed by many small ones, then its negation;
            # plain Kahan loses the small ones once the huge value leaves
            data = np.concatenate([[1e8], np.ones(size - 2), [-1e8]]).astype(dtype)

        elif case_type == 'harmonic_series':
            data = (1.0 / np.arange(1, size + 1, dtype=np.float64)).astype(dtype)

        elif case_type == 'random_normal':
            data = rng.normal(0, 1, size).astype(dtype)

        elif case_type == 'ill_conditioned':
            # Numbers spanning many orders of magnitude with random signs
            exponents = rng.uniform(-10, 10, size)
            signs = rng.choice([-1, 1], size)
            data = (signs * 10.0 ** exponents).astype(dtype)

        else:
            raise ValueError(f"Unknown test case type: {case_type}")

        # The elements are exact in float64, so fsum gives the exact sum
        exact = math.fsum(data.astype(np.float64))
        return data, exact

    def run_single_benchmark(self, test_name: str, data: np.ndarray, exact: float) -> Dict:
        """
        Run benchmark on a single test case.

        Args:
            test_name: Name of the test case
            data: Test data
            exact: Exact result

        Returns:
            Dictionary with benchmark results
        """
        results = {
            'test_name': test_name,
            'size': len(data),
            'exact_result': exact,
            'condition_number': self._estimate_condition_number(data),
        }

        for alg_name, algorithm in self.algorithms.items():
            start_time = time.perf_counter()
            result = float(algorithm(data))
            elapsed_time = time.perf_counter() - start_time

            absolute_error = abs(result - exact)
            relative_error = absolute_error / abs(exact) if exact != 0 else absolute_error

            results[f'{alg_name}_time'] = elapsed_time
            results[f'{alg_name}_rel_error'] = relative_error

        return results

    def _estimate_condition_number(self, data: np.ndarray) -> float:
        """Estimate condition number for summation problem."""
        abs_sum = math.fsum(np.abs(data.astype(np.float64)))
        result_sum = abs(math.fsum(data.astype(np.float64)))

        if result_sum == 0:
            return np.inf
        return abs_sum / result_sum

    def run_benchmark(self) -> pd.DataFrame:
        """
        Run the benchmark across all test cases, sizes and dtypes.

        Returns:
            DataFrame with all benchmark results
        """
        test_cases = [
            'alternating_large',
            'large_first',
            'harmonic_series',
            'random_normal',
            'ill_conditioned',
        ]
        sizes = [100, 1000, 10000]
        dtypes = [np.float32, np.float64]

        total_tests = len(test_cases) * len(sizes) * len(dtypes)
        print(f"Running accuracy benchmark ({total_tests} combinations)...")
        print()

        for case_type in test_cases:
            for size in sizes:
                for dtype in dtypes:
                    test_name = f"{case_type}_{dtype.__name__}_{size}"
                    data, exact = self.generate_test_case(case_type, size, dtype)
                    result = self.run_single_benchmark(test_name, data, exact)
                    result['case_type'] = case_type
                    result['dtype'] = dtype.__name__
                    self.results.append(result)

        return pd.DataFrame(self.results)

    def analyze_results(self, df: pd.DataFrame) -> None:
        """
        Display median relative errors per case and algorithm.

        Args:
            df: DataFrame with benchmark results
        """
        print("=" * 80)
        print("ACCURACY BENCHMARK ANALYSIS")
        print("=" * 80)

        error_columns = [f'{name}_rel_error' for name in self.algorithms]
        summary = df.groupby(['case_type', 'dtype'])[error_columns].median()
        summary.columns = list(self.algorithms)
        print(summary.to_string(float_format=lambda x: f"{x:.2e}"))
        print()

        time_columns = [f'{name}_time' for name in self.algorithms]
        timings = df[time_columns].mean() * 1000
        print("Mean execution time (ms):")
        for name, elapsed in zip(self.algorithms, timings):
            print(f"  {name:<10} {elapsed:10.3f}")


def main():
    """Run the accuracy benchmark suite."""
    print("COMPENSATED SUMMATION LIBRARY - ACCURACY BENCHMARK")
    print("=" * 60)

    benchmark = AccuracyBenchmark()
    results_df = benchmark.run_benchmark()

    results_df.to_csv('accuracy_benchmark_results.csv', index=False)
    print("Results saved to accuracy_benchmark_results.csv")
    print()

    benchmark.analyze_results(results_df)

    print("\n" + "=" * 60)
    print("Accuracy benchmark completed!")
    print("=" * 60)


if __name__ == "__main__":
    main()
