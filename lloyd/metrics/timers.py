"""
Высокоточные таймеры для измерения этапов итерации.

Timer: контекстный менеджер на time.perf_counter(). Повторное
использование одного экземпляра накапливает суммарное время в total,
что позволяет одним таймером замерять этап по всем итерациям цикла.
"""
from __future__ import annotations
import time
from typing import Any


class Timer:
    """
    Контекстный менеджер для измерения времени выполнения кода.

    Пример использования:
        t_assign = Timer()
        for _ in range(n_iters):
            with t_assign:
                labels = model.assign_clusters(X, centroids)
        t_assign.elapsed  # последний замер
        t_assign.total    # сумма по всем замерам
        t_assign.count    # количество замеров
    """

    def __init__(self) -> None:
        self.start: float = 0.0
        self.end: float = 0.0
        self.elapsed: float = 0.0
        self.total: float = 0.0
        self.count: int = 0

    def __enter__(self) -> Timer:
        self.start = time.perf_counter()
        return self

    def __exit__(self, *args: Any) -> None:
        self.end = time.perf_counter()
        self.elapsed = self.end - self.start
        self.total += self.elapsed
        self.count += 1
