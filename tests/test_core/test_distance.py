"""
Тесты евклидовой метрики, проверки сходимости и функции стоимости.
"""

import numpy as np
import pytest
from lloyd.core.convergence import DEFAULT_TOLERANCE, centroid_shifts, has_converged
from lloyd.core.cost import inertia, total_cost
from lloyd.core.distance import euclidean_distance, point_distances, squared_distances
from lloyd.core.errors import DimensionMismatchError


class TestDistance:
    def test_euclidean_distance(self):
        assert euclidean_distance([0.0, 0.0], [3.0, 4.0]) == pytest.approx(5.0)
        assert euclidean_distance([1.0, 2.0, 3.0], [1.0, 2.0, 3.0]) == 0.0

    def test_euclidean_distance_dimension_mismatch(self):
        with pytest.raises(DimensionMismatchError) as exc_info:
            euclidean_distance([0.0, 0.0], [1.0, 2.0, 3.0])
        assert exc_info.value.expected == 2
        assert exc_info.value.actual == 3

    def test_squared_distances(self, simple_2d_dataset):
        X, centroids = simple_2d_dataset
        d2 = squared_distances(X, centroids)

        assert d2.shape == (6, 2)
        expected = np.array([[euclidean_distance(x, c) ** 2 for c in centroids] for x in X])
        np.testing.assert_allclose(d2, expected)

    def test_squared_distances_dimension_mismatch(self):
        with pytest.raises(DimensionMismatchError):
            squared_distances(np.zeros((4, 2)), np.zeros((2, 3)))

    def test_point_distances(self):
        X = np.array([[0.0, 0.0], [3.0, 4.0]])
        centroids = np.array([[0.0, 0.0], [0.0, 0.0]])
        np.testing.assert_allclose(point_distances(X, centroids, np.array([0, 1])), [0.0, 5.0])


class TestConvergence:
    def test_default_tolerance(self):
        assert DEFAULT_TOLERANCE == 1e-3

    def test_centroid_shifts(self):
        old = np.array([[0.0, 0.0], [1.0, 1.0]])
        new = np.array([[3.0, 4.0], [1.0, 1.0]])
        np.testing.assert_allclose(centroid_shifts(old, new), [5.0, 0.0])

    def test_converged_only_if_every_shift_within_tol(self):
        old = np.zeros((3, 2))
        within = np.array([[0.0, 0.0005], [0.0005, 0.0], [0.0, 0.0]])
        one_outside = within.copy()
        one_outside[2] = [0.0, 0.01]

        assert has_converged(old, within, tol=1e-3)
        assert not has_converged(old, one_outside, tol=1e-3)

    def test_tolerance_boundary_is_inclusive(self):
        old = np.zeros((1, 2))
        new = np.array([[0.0, 0.5]])
        assert has_converged(old, new, tol=0.5)

    def test_shape_mismatch(self):
        with pytest.raises(DimensionMismatchError):
            has_converged(np.zeros((2, 2)), np.zeros((2, 3)))


class TestCost:
    def test_cost_is_sum_of_distances(self, four_points):
        centroids = np.array([[0.0, 0.5], [10.0, 0.5]])
        labels = np.array([0, 0, 1, 1])

        assert total_cost(four_points, centroids, labels) == pytest.approx(2.0)
        assert inertia(four_points, centroids, labels) == pytest.approx(1.0)

    def test_cost_zero_when_points_coincide(self, four_points):
        labels = np.arange(4)
        assert total_cost(four_points, four_points, labels) == 0.0

    def test_cost_non_negative(self, rng):
        X = rng.standard_normal((50, 3))
        centroids = rng.standard_normal((4, 3))
        labels = rng.integers(0, 4, size=50)
        assert total_cost(X, centroids, labels) > 0.0
