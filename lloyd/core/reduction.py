"""
Редукция шага обновления центроидов.

Каждый воркер накапливает локальные суммы и счётчики по своему чанку точек,
после чего частичные результаты сливаются последовательно. Общего
изменяемого аккумулятора нет, поэтому блокировки не нужны.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable, Tuple

import numpy as np


class EmptyClusterPolicy(str, Enum):
    """Что делать с кластером, которому не досталось ни одной точки."""

    ZERO = "zero"  # нулевой центроид
    KEEP = "keep"  # центроид с предыдущей итерации
    RESEED = "reseed"  # случайная точка из входных данных


def partial_sums(
    X_chunk: np.ndarray, labels_chunk: np.ndarray, K: int
) -> Tuple[np.ndarray, np.ndarray]:
    """Частичная редукция: возвращает (sums[K,D], counts[K]) для чанка."""
    D = X_chunk.shape[1]
    sums = np.zeros((K, D), dtype=np.float64)
    np.add.at(sums, labels_chunk, X_chunk)
    counts = np.bincount(labels_chunk, minlength=K).astype(np.int64, copy=False)
    return sums, counts


def merge_partials(
    partials: Iterable[Tuple[np.ndarray, np.ndarray]], K: int, D: int
) -> Tuple[np.ndarray, np.ndarray]:
    """Последовательное слияние частичных сумм всех воркеров."""
    sums_total = np.zeros((K, D), dtype=np.float64)
    counts_total = np.zeros(K, dtype=np.int64)
    for sums, counts in partials:
        sums_total += sums
        counts_total += counts
    return sums_total, counts_total


def finalize_centroids(
    sums: np.ndarray,
    counts: np.ndarray,
    previous: np.ndarray,
    X: np.ndarray,
    policy: EmptyClusterPolicy = EmptyClusterPolicy.ZERO,
    rng: np.random.Generator | None = None,
) -> np.ndarray:
    """
    Делит суммы на счётчики и применяет политику пустых кластеров.

    Всегда возвращает новый массив: previous и X не изменяются.
    """
    policy = EmptyClusterPolicy(policy)
    non_empty = counts > 0

    if policy is EmptyClusterPolicy.KEEP:
        centroids = previous.astype(np.float64, copy=True)
    else:
        centroids = np.zeros_like(sums)

    centroids[non_empty] = sums[non_empty] / counts[non_empty, None]

    if policy is EmptyClusterPolicy.RESEED and not np.all(non_empty):
        if rng is None:
            rng = np.random.default_rng()
        empty = np.flatnonzero(~non_empty)
        centroids[empty] = X[rng.integers(0, X.shape[0], size=empty.size)]

    return centroids
