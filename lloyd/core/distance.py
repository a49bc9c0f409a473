"""
Евклидова метрика и её векторизованные варианты.

Предусловие для всех функций: размерности сравниваемых векторов совпадают.
Нарушение предусловия приводит к DimensionMismatchError, обрезка по
меньшей размерности никогда не выполняется.
"""

from __future__ import annotations

import numpy as np

from .errors import DimensionMismatchError


def euclidean_distance(a: np.ndarray, b: np.ndarray) -> float:
    """
    Евклидово расстояние между двумя векторами одинаковой длины.

    Args:
        a: Первый вектор (D,)
        b: Второй вектор (D,)

    Returns:
        sqrt(sum((a_i - b_i)^2)), неотрицательное число

    Raises:
        DimensionMismatchError: Если длины векторов различаются
    """
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    if a.shape != b.shape:
        raise DimensionMismatchError(a.size, b.size, where="vector")
    diff = a - b
    return float(np.sqrt(np.dot(diff, diff)))


def squared_distances(X: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """Квадраты расстояний от каждой точки до каждого центроида, (N, K)."""
    if X.shape[1] != centroids.shape[1]:
        raise DimensionMismatchError(X.shape[1], centroids.shape[1], where="centroid")
    # (N, K, D) → (N, K)
    diff = X[:, None, :] - centroids[None, :, :]
    return np.einsum("nkd,nkd->nk", diff, diff, optimize=True)


def point_distances(
    X: np.ndarray, centroids: np.ndarray, labels: np.ndarray
) -> np.ndarray:
    """Расстояние каждой точки до назначенного ей центроида, (N,)."""
    if X.shape[1] != centroids.shape[1]:
        raise DimensionMismatchError(X.shape[1], centroids.shape[1], where="centroid")
    diff = X - centroids[labels]
    return np.sqrt(np.einsum("nd,nd->n", diff, diff))
