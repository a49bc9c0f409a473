"""
Оценка качества разбиения.

cost: сумма евклидовых расстояний от точек до их центроидов; по ней
ранжируются независимые перезапуски. inertia: сумма квадратов тех же
расстояний, выводится справочно и для ранжирования не используется.
"""

from __future__ import annotations

import numpy as np

from .distance import point_distances


def total_cost(X: np.ndarray, centroids: np.ndarray, labels: np.ndarray) -> float:
    """
    Суммарная стоимость разбиения.

    Args:
        X: Точки (N, D)
        centroids: Центроиды (K, D)
        labels: Номера кластеров (N,)

    Returns:
        Неотрицательное число; 0 только если каждая точка совпадает
        со своим центроидом
    """
    return float(np.sum(point_distances(X, centroids, labels)))


def inertia(X: np.ndarray, centroids: np.ndarray, labels: np.ndarray) -> float:
    """Сумма квадратов расстояний до назначенных центроидов."""
    d = point_distances(X, centroids, labels)
    return float(np.dot(d, d))
