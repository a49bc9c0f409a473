import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, List, Optional

import numpy as np

from lloyd.core.convergence import DEFAULT_TOLERANCE
from lloyd.core.driver import run_clustering
from lloyd.core.errors import RestartsFailedError
from lloyd.core.init import InitPolicy
from lloyd.core.reduction import EmptyClusterPolicy
from lloyd.core.result import RestartFailure, RestartSummary, RunResult
from lloyd.metrics.timers import Timer
from lloyd.utils.logging import format_points_prefix


class _PrefixedLogger:
    """Обёртка над логгером, добавляющая префикс к каждому сообщению."""

    def __init__(self, base_logger: logging.Logger | None, prefix: str) -> None:
        self._base = base_logger
        self._prefix = prefix

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        if self._base:
            self._base.info(f"{self._prefix} {msg}", *args, **kwargs)

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None:
        if self._base:
            self._base.error(f"{self._prefix} {msg}", *args, **kwargs)


class BestResult:
    """
    Лучший результат среди завершившихся перезапусков.

    Единственное разделяемое изменяемое состояние поиска; все обновления
    идут под одной блокировкой. При равной стоимости предпочитается
    перезапуск с меньшим номером, поэтому итог не зависит от порядка
    завершения потоков.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._result: Optional[RunResult] = None
        self._restart_idx: Optional[int] = None
        self._history: List[float] = []

    def offer(self, result: RunResult, restart_idx: int = 0) -> bool:
        """Атомарно заменяет лучший результат, если новый дешевле."""
        with self._lock:
            improved = (
                self._result is None
                or result.cost < self._result.cost
                or (result.cost == self._result.cost and restart_idx < self._restart_idx)
            )
            if improved:
                self._result = result
                self._restart_idx = restart_idx
            self._history.append(self._result.cost)
            return improved

    @property
    def result(self) -> Optional[RunResult]:
        with self._lock:
            return self._result

    @property
    def restart_idx(self) -> Optional[int]:
        with self._lock:
            return self._restart_idx

    @property
    def history(self) -> List[float]:
        """Лучшая стоимость после каждого завершённого перезапуска."""
        with self._lock:
            return list(self._history)


class RestartRunner:
    """
    Запускает серию независимых прогонов KMeans на одном наборе точек.

    Каждый перезапуск использует случайную инициализацию со своим seed.
    Перезапуски не разделяют состояние, кроме BestResult, поэтому могут
    выполняться в пуле потоков (n_jobs > 1).
    """

    def __init__(
        self,
        X: np.ndarray,
        k: int,
        max_iterations: int = 100,
        tolerance: float = DEFAULT_TOLERANCE,
        backend: str = "numpy",
        n_workers: Optional[int] = None,
        empty_cluster: EmptyClusterPolicy = EmptyClusterPolicy.ZERO,
        logger: logging.Logger | None = None,
        result_sink: Callable[[dict], None] | None = None,
        run_fn: Callable[..., RunResult] = run_clustering,
    ) -> None:
        self.X = X
        self.k = k
        self.max_iterations = max_iterations
        self.tolerance = tolerance
        self.backend = backend
        self.n_workers = n_workers
        self.empty_cluster = empty_cluster
        self.logger = logger
        self._sink = result_sink
        self._sink_lock = threading.Lock()
        self._run_fn = run_fn

        self._prefix = format_points_prefix(X.shape[0], X.shape[1], k)

    @staticmethod
    def spawn_seeds(random_seed: Optional[int], n: int) -> List[int]:
        """Независимые seed'ы перезапусков из одного корневого seed."""
        states = np.random.SeedSequence(random_seed).generate_state(n)
        return [int(s) for s in states]

    def _emit(self, record: Dict[str, Any]) -> None:
        if self._sink:
            with self._sink_lock:
                self._sink(record)

    def _restart_logger(self, restart_idx: int, num_restarts: int) -> _PrefixedLogger:
        return _PrefixedLogger(
            self.logger, f"{self._prefix} [restart {restart_idx + 1}/{num_restarts}]"
        )

    def _run_one(self, restart_idx: int, seed: int, num_restarts: int) -> RunResult:
        log = self._restart_logger(restart_idx, num_restarts)
        result = self._run_fn(
            self.X,
            self.k,
            self.max_iterations,
            self.tolerance,
            InitPolicy.RANDOM,
            seed,
            backend=self.backend,
            n_workers=self.n_workers,
            empty_cluster=self.empty_cluster,
        )
        log.info(
            f"Cost: {result.cost:.4f} "
            f"(n_iters={result.n_iters}, status={result.status.value})"
        )
        return result

    def run(
        self,
        num_restarts: int = 10,
        random_seed: Optional[int] = None,
        n_jobs: int = 1,
    ) -> RestartSummary:
        """
        Запускает num_restarts перезапусков и возвращает сводку.

        :param num_restarts: количество независимых перезапусков
        :param random_seed: корневой seed; None означает энтропию ОС
        :param n_jobs: количество одновременно выполняемых перезапусков
        :return: RestartSummary с лучшим результатом и статистикой
        :raises RestartsFailedError: если не удался ни один перезапуск
        """
        if num_restarts <= 0:
            raise ValueError("num_restarts must be positive")
        if n_jobs <= 0:
            raise ValueError("n_jobs must be positive")

        seeds = self.spawn_seeds(random_seed, num_restarts)
        best = BestResult()
        costs: List[Optional[float]] = [None] * num_restarts
        failures: List[RestartFailure] = []
        failures_lock = threading.Lock()

        if self.logger:
            self.logger.info(
                f"{self._prefix} Starting {num_restarts} restarts (n_jobs={n_jobs})"
            )

        def task(restart_idx: int) -> None:
            seed = seeds[restart_idx]
            try:
                result = self._run_one(restart_idx, seed, num_restarts)
            except Exception as exc:  # noqa: BLE001
                self._restart_logger(restart_idx, num_restarts).error(f"Failed: {exc}")
                with failures_lock:
                    failures.append(RestartFailure(restart_idx, seed, exc))
                self._emit(
                    {"restart_idx": restart_idx, "seed": seed, "error": str(exc)}
                )
                return

            costs[restart_idx] = result.cost
            improved = best.offer(result, restart_idx)
            self._emit(
                {
                    "restart_idx": restart_idx,
                    "seed": seed,
                    "cost": result.cost,
                    "inertia": result.inertia,
                    "n_iters": result.n_iters,
                    "status": result.status.value,
                    "improved": improved,
                }
            )

        with Timer() as t_total:
            if n_jobs == 1:
                for restart_idx in range(num_restarts):
                    task(restart_idx)
            else:
                with ThreadPoolExecutor(
                    max_workers=n_jobs, thread_name_prefix="lloyd-restart"
                ) as pool:
                    list(pool.map(task, range(num_restarts)))

        if best.result is None:
            raise RestartsFailedError(sorted(failures, key=lambda f: f.restart_idx))

        summary = RestartSummary(
            best=best.result,
            costs=[c for c in costs if c is not None],
            best_cost_history=best.history,
            failures=sorted(failures, key=lambda f: f.restart_idx),
            seconds=float(t_total.elapsed),
        )

        if self.logger:
            stats = summary.stats()
            self.logger.info(
                f"{self._prefix} Best cost {summary.best.cost:.4f} "
                f"(restart {best.restart_idx + 1}/{num_restarts}, "
                f"mean={stats['cost_mean']:.4f}, std={stats['cost_std']:.4f}, "
                f"failed={len(failures)}, {summary.seconds:.3f}s)"
            )

        return summary
