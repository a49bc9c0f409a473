from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Tuple

import numpy as np

from .base import KMeansBase
from .distance import squared_distances
from .partition import ParallelConfig, make_chunks
from .reduction import finalize_centroids, merge_partials, partial_sums


class KMeansCPUThreads(KMeansBase):
    """
    K-Means на CPU с пулом потоков (пул один раз на fit).

    Точки делятся на непрерывные чанки по числу воркеров. NumPy отпускает
    GIL внутри векторных операций, поэтому чанки считаются параллельно.
    Executor.map служит барьером: шаг возвращается, только когда все чанки
    обработаны.
    """

    def __init__(
        self,
        n_clusters: int,
        n_iters: int = 100,
        parallel: ParallelConfig = ParallelConfig(),
        **kwargs,
    ) -> None:
        super().__init__(n_clusters=n_clusters, n_iters=n_iters, **kwargs)
        self.parallel = parallel

        self._executor: Optional[ThreadPoolExecutor] = None
        self._chunks: Optional[List[slice]] = None

    # --- Пул и разбиение ---

    def _ensure_executor(self, X: np.ndarray) -> None:
        if self._executor is not None and self._chunks is not None:
            return
        n_workers = self.parallel.resolve_workers()
        self._chunks = make_chunks(X.shape[0], n_workers, self.parallel.chunk_size)
        self._executor = ThreadPoolExecutor(
            max_workers=min(n_workers, len(self._chunks)),
            thread_name_prefix="lloyd-worker",
        )

    def _shutdown(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=True)
        self._executor = None
        self._chunks = None

    # ---------- Assignment (parallel over chunks) ----------

    def assign_clusters(self, X: np.ndarray, centroids: np.ndarray) -> np.ndarray:
        self._ensure_executor(X)
        assert self._executor is not None and self._chunks is not None

        labels = np.empty(X.shape[0], dtype=np.int64)

        def work(chunk: slice) -> None:
            # каждый воркер пишет только в свой срез labels
            labels[chunk] = np.argmin(squared_distances(X[chunk], centroids), axis=1)

        # list(...) дожидается всех задач и пробрасывает исключения воркеров
        list(self._executor.map(work, self._chunks))
        return labels

    # ---------- Update (parallel reduction) ----------

    def update_centroids(self, X: np.ndarray, labels: np.ndarray) -> np.ndarray:
        self._ensure_executor(X)
        assert self._executor is not None and self._chunks is not None

        def work(chunk: slice) -> Tuple[np.ndarray, np.ndarray]:
            return partial_sums(X[chunk], labels[chunk], self.K)

        partials = list(self._executor.map(work, self._chunks))
        sums, counts = merge_partials(partials, self.K, X.shape[1])
        return finalize_centroids(
            sums, counts, self.centroids, X, self.empty_cluster, self.rng
        )

    def fit(self, X: np.ndarray, initial_centroids: np.ndarray):
        """fit с переиспользованием пула и гарантированным закрытием."""
        try:
            return super().fit(X, initial_centroids)
        finally:
            self._shutdown()
