"""
Исключения ядра кластеризации.

Все ошибки наследуются от ValueError, поэтому вызывающий код, который уже
перехватывает ValueError на некорректных входных данных, продолжает работать.
"""

from __future__ import annotations


class KMeansError(ValueError):
    """Базовая ошибка ядра K-means."""


class DimensionMismatchError(KMeansError):
    """Размерность точки или центроида не совпадает с размерностью данных."""

    def __init__(self, expected: int, actual: int, where: str = "point") -> None:
        self.expected = expected
        self.actual = actual
        self.where = where
        super().__init__(
            f"Dimension mismatch for {where}: expected {expected}, got {actual}"
        )


class InvalidClusterCountError(KMeansError):
    """Количество кластеров K вне допустимого диапазона [1, N]."""

    def __init__(self, k: int, n_points: int) -> None:
        self.k = k
        self.n_points = n_points
        super().__init__(
            f"Invalid cluster count K={k}: must satisfy 1 <= K <= N (N={n_points})"
        )


class RestartsFailedError(KMeansError):
    """Ни один из независимых перезапусков не завершился успешно."""

    def __init__(self, failures: list) -> None:
        self.failures = failures
        super().__init__(f"All {len(failures)} restarts failed")
