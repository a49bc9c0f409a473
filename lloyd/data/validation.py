"""
Валидация входных точек перед кластеризацией.

Проверки выполняются до инициализации центроидов, поэтому ядро никогда
не возвращает результат с несогласованной размерностью.
"""

from __future__ import annotations

from typing import Any

import numpy as np

from lloyd.core.errors import DimensionMismatchError
from lloyd.core.init import check_cluster_count


def validate_points(points: Any, k: int | None = None) -> np.ndarray:
    """
    Приводит точки к массиву float64 (N, D) и проверяет его.

    Args:
        points: Массив или последовательность последовательностей чисел
        k: Если задан, дополнительно проверяется 1 <= k <= N

    Returns:
        Массив (N, D). Если вход уже float64 ndarray, копия не создаётся

    Raises:
        DimensionMismatchError: Точки разной размерности
        InvalidClusterCountError: k вне диапазона
        ValueError: Пустой вход, нулевая размерность или нечисловые значения
    """
    if isinstance(points, np.ndarray):
        X = points
    else:
        rows = list(points)
        if rows and not np.isscalar(rows[0]):
            dim = len(rows[0])
            for i, row in enumerate(rows):
                if len(row) != dim:
                    raise DimensionMismatchError(dim, len(row), where=f"point {i}")
        X = np.asarray(rows)

    X = np.asarray(X, dtype=np.float64)

    if X.ndim != 2:
        raise ValueError(f"Points must form a 2-D table, got shape {X.shape}")
    if X.shape[0] == 0:
        raise ValueError("No points to cluster")
    if X.shape[1] == 0:
        raise ValueError("Points must have at least one coordinate")
    if not np.all(np.isfinite(X)):
        raise ValueError("Points contain NaN or infinite values")

    if k is not None:
        check_cluster_count(k, X.shape[0])

    return X


def validate_dataset(dataset: Any, k: int | None = None) -> None:
    """
    Проверяет соответствие загруженного датасета его метаданным.

    Raises:
        ValueError: Если данные не загружены или размеры не совпадают
    """
    meta = dataset.dataset_info

    if dataset.X is None:
        raise ValueError("Dataset data (X) is None")

    validate_points(dataset.X, k)

    if dataset.X.shape[0] != meta["N"]:
        raise ValueError(f"Expected {meta['N']} points, got {dataset.X.shape[0]}")
    if dataset.X.shape[1] != meta["D"]:
        raise DimensionMismatchError(meta["D"], dataset.X.shape[1], where="dataset")
