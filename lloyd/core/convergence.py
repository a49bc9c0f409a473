from __future__ import annotations

import numpy as np

from .errors import DimensionMismatchError

# Порог сходимости: максимальное евклидово смещение центроида за итерацию
DEFAULT_TOLERANCE: float = 1e-3


def centroid_shifts(old: np.ndarray, new: np.ndarray) -> np.ndarray:
    """Евклидово смещение каждого центроида между итерациями, (K,)."""
    if old.shape != new.shape:
        raise DimensionMismatchError(old.shape[-1], new.shape[-1], where="centroid")
    diff = new - old
    return np.sqrt(np.einsum("kd,kd->k", diff, diff))


def has_converged(
    old: np.ndarray, new: np.ndarray, tol: float = DEFAULT_TOLERANCE
) -> bool:
    """
    Проверка сходимости.

    Сходимость наступает, только если смещение каждого центроида
    не превышает tol (граница включается).
    """
    return bool(np.all(centroid_shifts(old, new) <= tol))
