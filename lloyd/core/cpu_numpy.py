# core/cpu_numpy.py
from __future__ import annotations

import numpy as np

from .base import KMeansBase
from .distance import squared_distances
from .reduction import finalize_centroids, partial_sums


class KMeansCPUNumpy(KMeansBase):
    """Простая однопоточная реализация KMeans на NumPy (baseline)."""

    def assign_clusters(self, X: np.ndarray, centroids: np.ndarray) -> np.ndarray:
        # argmin возвращает первый минимум: при равенстве побеждает меньший индекс
        return np.argmin(squared_distances(X, centroids), axis=1)

    def update_centroids(self, X: np.ndarray, labels: np.ndarray) -> np.ndarray:
        sums, counts = partial_sums(X, labels, self.K)
        return finalize_centroids(
            sums, counts, self.centroids, X, self.empty_cluster, self.rng
        )
