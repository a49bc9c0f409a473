from __future__ import annotations

from multiprocessing import Pool, RawArray
from typing import List, Optional, Tuple

import numpy as np

from lloyd.core.base import KMeansBase
from lloyd.core.distance import squared_distances
from lloyd.core.partition import ParallelConfig, make_chunks
from lloyd.core.reduction import finalize_centroids, merge_partials, partial_sums


# --- Глобальное состояние воркера: точки в shared memory ---
_SHARED_POINTS_BUF: RawArray | None = None
_SHARED_POINTS_SHAPE: Tuple[int, int] | None = None


def _init_shared_points(raw: RawArray, shape: Tuple[int, int]) -> None:
    """Инициализатор пула: регистрирует shared-буфер с точками."""
    global _SHARED_POINTS_BUF, _SHARED_POINTS_SHAPE
    _SHARED_POINTS_BUF = raw
    _SHARED_POINTS_SHAPE = shape


def _shared_points() -> np.ndarray:
    """Read-only NumPy-представление точек без копирования."""
    assert _SHARED_POINTS_BUF is not None and _SHARED_POINTS_SHAPE is not None
    arr = np.frombuffer(_SHARED_POINTS_BUF, dtype=np.float64).reshape(_SHARED_POINTS_SHAPE)
    arr.setflags(write=False)
    return arr


def _assign_chunk_worker(args: Tuple[slice, np.ndarray]) -> np.ndarray:
    """Назначение для чанка: границы чанка + снимок центроидов."""
    chunk, centroids = args
    X_chunk = _shared_points()[chunk]
    return np.argmin(squared_distances(X_chunk, centroids), axis=1)


def _partial_reduce_worker(
    args: Tuple[slice, np.ndarray, int]
) -> Tuple[np.ndarray, np.ndarray]:
    """Локальные (sums[K,D], counts[K]) для чанка."""
    chunk, labels_chunk, K = args
    return partial_sums(_shared_points()[chunk], labels_chunk, K)


class KMeansCPUMultiprocessing(KMeansBase):
    """K-Means на CPU с multiprocessing и shared X (пул один раз на fit)."""

    def __init__(
        self,
        n_clusters: int,
        n_iters: int = 100,
        parallel: ParallelConfig = ParallelConfig(),
        **kwargs,
    ) -> None:
        super().__init__(n_clusters=n_clusters, n_iters=n_iters, **kwargs)
        self.parallel = parallel

        # Пул и чанки переиспользуются в рамках fit
        self._pool: Optional[Pool] = None
        self._chunks: Optional[List[slice]] = None

    def _ensure_pool_and_chunks(self, X: np.ndarray) -> None:
        """Ленивая инициализация пула, shared X и чанков."""
        if self._pool is not None and self._chunks is not None:
            return

        n_procs = self.parallel.resolve_workers()
        self._chunks = make_chunks(X.shape[0], n_procs, self.parallel.chunk_size)

        # Копируем X один раз в shared RawArray (float64)
        X_c = np.ascontiguousarray(X, dtype=np.float64)
        raw = RawArray("d", int(X_c.size))
        np.frombuffer(raw, dtype=np.float64).reshape(X_c.shape)[:] = X_c

        self._pool = Pool(
            processes=min(n_procs, len(self._chunks)),
            initializer=_init_shared_points,
            initargs=(raw, X_c.shape),
        )

    def _close_pool(self) -> None:
        """Закрыть пул после fit."""
        if self._pool is not None:
            self._pool.close()
            self._pool.join()
        self._pool = None
        self._chunks = None

    # ---------- Assignment (parallel over chunks) ----------

    def assign_clusters(self, X: np.ndarray, centroids: np.ndarray) -> np.ndarray:
        self._ensure_pool_and_chunks(X)
        assert self._pool is not None and self._chunks is not None

        labels = np.empty(X.shape[0], dtype=np.int64)
        results = self._pool.map(
            _assign_chunk_worker, [(chunk, centroids) for chunk in self._chunks]
        )
        for chunk, lbl_chunk in zip(self._chunks, results):
            labels[chunk] = lbl_chunk
        return labels

    # ---------- Update (parallel reduction) ----------

    def update_centroids(self, X: np.ndarray, labels: np.ndarray) -> np.ndarray:
        self._ensure_pool_and_chunks(X)
        assert self._pool is not None and self._chunks is not None

        partials = self._pool.map(
            _partial_reduce_worker,
            [(chunk, labels[chunk], self.K) for chunk in self._chunks],
        )
        sums, counts = merge_partials(partials, self.K, X.shape[1])
        return finalize_centroids(
            sums, counts, self.centroids, X, self.empty_cluster, self.rng
        )

    def fit(self, X: np.ndarray, initial_centroids: np.ndarray):
        """fit с переиспользованием пула и гарантированным закрытием."""
        try:
            return super().fit(X, initial_centroids)
        finally:
            self._close_pool()
