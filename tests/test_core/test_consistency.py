"""
Тесты согласованности между различными реализациями K-means.

Критически важно: все реализации должны давать одинаковые результаты
на одинаковых входных данных.
"""

import numpy as np
import pytest
from lloyd.core.cpu_multiprocessing import KMeansCPUMultiprocessing
from lloyd.core.cpu_numpy import KMeansCPUNumpy
from lloyd.core.cpu_threads import KMeansCPUThreads
from lloyd.core.driver import run_clustering
from lloyd.core.init import InitPolicy
from lloyd.core.partition import ParallelConfig
from lloyd.core.reduction import EmptyClusterPolicy


class TestImplementationConsistency:
    """Тесты согласованности между реализациями."""

    def test_cpu_numpy_vs_threads(self, small_dataset):
        """CPU NumPy и пул потоков должны давать одинаковые результаты."""
        X, initial_centroids = small_dataset

        res_numpy = KMeansCPUNumpy(n_clusters=2, n_iters=20).fit(X, initial_centroids)
        res_threads = KMeansCPUThreads(
            n_clusters=2,
            n_iters=20,
            parallel=ParallelConfig(n_workers=3),
        ).fit(X, initial_centroids)

        np.testing.assert_array_equal(res_numpy.labels, res_threads.labels)
        np.testing.assert_allclose(
            res_numpy.centroids,
            res_threads.centroids,
            rtol=1e-10,
            atol=1e-10,
            err_msg="CPU NumPy и Threads дают разные центроиды",
        )
        assert res_numpy.n_iters == res_threads.n_iters

    def test_cpu_numpy_vs_multiprocessing(self, small_dataset):
        """CPU NumPy и Multiprocessing должны давать одинаковые результаты."""
        X, initial_centroids = small_dataset

        res_numpy = KMeansCPUNumpy(n_clusters=2, n_iters=20).fit(X, initial_centroids)
        res_mp = KMeansCPUMultiprocessing(
            n_clusters=2,
            n_iters=20,
            parallel=ParallelConfig(n_workers=2),
        ).fit(X, initial_centroids)

        np.testing.assert_array_equal(res_numpy.labels, res_mp.labels)
        np.testing.assert_allclose(
            res_numpy.centroids,
            res_mp.centroids,
            rtol=1e-10,
            atol=1e-10,
            err_msg="CPU NumPy и Multiprocessing дают разные центроиды",
        )

    @pytest.mark.parametrize("chunk_size", [1, 7, 1000])
    def test_threads_chunk_size_does_not_change_result(self, medium_dataset, chunk_size):
        X, initial_centroids = medium_dataset

        expected = KMeansCPUNumpy(n_clusters=3).fit(X, initial_centroids)
        result = KMeansCPUThreads(
            n_clusters=3,
            parallel=ParallelConfig(n_workers=4, chunk_size=chunk_size),
        ).fit(X, initial_centroids)

        np.testing.assert_array_equal(expected.labels, result.labels)
        np.testing.assert_allclose(expected.centroids, result.centroids, atol=1e-10)

    @pytest.mark.parametrize("backend", ["numpy", "threads", "processes"])
    def test_backends_via_driver(self, four_points, backend):
        result = run_clustering(
            four_points,
            2,
            init_policy=InitPolicy.FIRST_K,
            backend=backend,
            n_workers=2,
        )
        np.testing.assert_allclose(result.centroids, [[5.0, 0.0], [5.0, 1.0]])
        assert result.labels.tolist() == [0, 1, 0, 1]

    @pytest.mark.parametrize("policy", list(EmptyClusterPolicy))
    @pytest.mark.parametrize("model_cls", [KMeansCPUThreads, KMeansCPUMultiprocessing])
    def test_empty_cluster_policy_matches_numpy(self, model_cls, policy):
        """Параллельные реализации применяют ту же политику пустых кластеров."""
        X = np.array([[0.0, 0.0], [1.0, 0.0], [2.0, 0.0]])
        init = np.array([[1.0, 0.0], [100.0, 100.0]])

        expected = KMeansCPUNumpy(n_clusters=2, empty_cluster=policy, seed=3).fit(X, init)
        result = model_cls(
            n_clusters=2,
            parallel=ParallelConfig(n_workers=2),
            empty_cluster=policy,
            seed=3,
        ).fit(X, init)

        np.testing.assert_allclose(result.centroids, expected.centroids)
        np.testing.assert_array_equal(result.labels, expected.labels)
        assert result.n_iters == expected.n_iters

    def test_pool_released_after_fit(self, small_dataset):
        X, initial_centroids = small_dataset
        threads = KMeansCPUThreads(n_clusters=2, parallel=ParallelConfig(n_workers=2))
        mp = KMeansCPUMultiprocessing(n_clusters=2, parallel=ParallelConfig(n_workers=2))

        threads.fit(X, initial_centroids)
        mp.fit(X, initial_centroids)

        assert threads._executor is None
        assert mp._pool is None
