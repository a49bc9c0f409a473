"""
Тесты таймеров для замера этапов итерации.
"""

import time
from lloyd.metrics.timers import Timer


class TestTimer:
    """Тесты контекстного менеджера Timer."""

    def test_timer_basic(self):
        """Базовый тест работы таймера."""
        with Timer() as t:
            time.sleep(0.05)

        assert t.elapsed >= 0.05
        assert t.end > t.start
        assert abs(t.elapsed - (t.end - t.start)) < 1e-9

    def test_timer_accumulates_total(self):
        """Повторное использование накапливает total и count."""
        timer = Timer()

        for _ in range(3):
            with timer:
                time.sleep(0.01)

        assert timer.count == 3
        assert timer.total >= 0.03
        assert timer.total >= timer.elapsed

    def test_timer_nested(self):
        """Тест вложенных таймеров."""
        with Timer() as outer:
            time.sleep(0.02)
            with Timer() as inner:
                time.sleep(0.01)

        assert outer.elapsed > inner.elapsed

    def test_timer_fast_operation(self):
        """Даже быстрая операция даёт неотрицательный замер."""
        with Timer() as t:
            _ = sum(range(1000))

        assert t.elapsed >= 0
        assert t.count == 1
