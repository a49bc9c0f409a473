from __future__ import annotations

import operator
from enum import Enum

import numpy as np

from .errors import InvalidClusterCountError


class InitPolicy(str, Enum):
    """Политика выбора начальных центроидов."""

    FIRST_K = "first_k"  # первые K точек входной последовательности
    RANDOM = "random"  # K точек равновероятно, с возвращением


def check_cluster_count(k: int, n_points: int) -> None:
    """Проверяет, что K целое (не bool) и 1 <= K <= N, до инициализации."""
    if isinstance(k, bool):
        raise InvalidClusterCountError(k, n_points)
    try:
        k_int = operator.index(k)
    except TypeError:
        raise InvalidClusterCountError(k, n_points) from None
    if k_int <= 0 or k_int > n_points:
        raise InvalidClusterCountError(k, n_points)


def select_initial_centroids(
    X: np.ndarray,
    k: int,
    policy: InitPolicy = InitPolicy.FIRST_K,
    rng: np.random.Generator | None = None,
) -> np.ndarray:
    """
    Выбирает K начальных центроидов.

    Args:
        X: Точки (N, D)
        k: Количество кластеров
        policy: FIRST_K или RANDOM
        rng: Источник случайности для RANDOM; обязателен для воспроизводимости,
            без него создаётся генератор с энтропией ОС

    Returns:
        Новый массив (K, D); исходные точки не разделяют с ним память
    """
    check_cluster_count(k, X.shape[0])
    policy = InitPolicy(policy)

    if policy is InitPolicy.FIRST_K:
        return X[:k].copy()

    if rng is None:
        rng = np.random.default_rng()
    idx = rng.integers(0, X.shape[0], size=k)
    return X[idx].copy()
