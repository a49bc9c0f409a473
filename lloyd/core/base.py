from abc import ABC, abstractmethod
from typing import Any

import numpy as np

from lloyd.core.convergence import DEFAULT_TOLERANCE, centroid_shifts
from lloyd.core.cost import inertia, total_cost
from lloyd.core.errors import DimensionMismatchError, KMeansError
from lloyd.core.init import check_cluster_count
from lloyd.core.reduction import EmptyClusterPolicy
from lloyd.core.result import RunResult, RunStatus
from lloyd.metrics.timers import Timer


class KMeansBase(ABC):
    """
    Базовый класс для реализаций KMeans.

    Отвечает за цикл Ллойда и сбор низкоуровневых таймингов:
    - T_назначения: время шага assign_clusters;
    - T_обновления: время шага update_centroids;
    - T_итерации: сумма двух предыдущих.

    Реализации определяют только два шага. Шаг назначения всегда читает один
    и тот же снимок центроидов; новый набор центроидов подменяет старый
    целиком и только после того, как назначение всех точек завершено.
    """

    def __init__(
        self,
        n_clusters: int,
        n_iters: int = 100,
        tol: float = DEFAULT_TOLERANCE,
        empty_cluster: EmptyClusterPolicy = EmptyClusterPolicy.ZERO,
        rng: np.random.Generator | None = None,
        seed: int | None = None,
        logger: Any | None = None,
    ):
        if n_iters < 0:
            raise ValueError("n_iters must be non-negative")
        if tol < 0:
            raise ValueError("tol must be non-negative")

        self.K = n_clusters
        self.n_iters = n_iters
        self.tol = tol  # Порог сходимости (максимальное смещение центроида)
        self.empty_cluster = EmptyClusterPolicy(empty_cluster)
        self.seed = seed
        # RNG нужен только политике RESEED; владеет им модель, а не процесс
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.logger = logger

        self.centroids: np.ndarray | None = None
        self.labels: np.ndarray | None = None
        self.status: RunStatus = RunStatus.INITIALIZING
        self.result: RunResult | None = None

        # агрегированные тайминги за один вызов fit(...)
        self.t_assign_total: float = 0.0
        self.t_update_total: float = 0.0
        self.t_iter_total: float = 0.0

        # Реальное количество выполненных проходов обновления
        self.n_iters_actual: int = 0

    def _validate(self, X: np.ndarray, initial_centroids: np.ndarray) -> tuple:
        X = np.asarray(X, dtype=np.float64)
        centroids = np.array(initial_centroids, dtype=np.float64, copy=True)
        if X.ndim != 2:
            raise ValueError(f"X must be a 2-D array, got shape {X.shape}")
        check_cluster_count(self.K, X.shape[0])
        if centroids.ndim != 2 or centroids.shape[0] != self.K:
            raise ValueError(
                f"Expected initial centroids shape ({self.K}, {X.shape[1]}), "
                f"got {centroids.shape}"
            )
        if centroids.shape[1] != X.shape[1]:
            raise DimensionMismatchError(X.shape[1], centroids.shape[1], where="centroid")
        return X, centroids

    def _check_labels(self, labels: np.ndarray, n_points: int) -> None:
        if labels.shape != (n_points,):
            raise KMeansError(
                f"Assignment vector has shape {labels.shape}, expected ({n_points},)"
            )
        if labels.size and (labels.min() < 0 or labels.max() >= self.K):
            raise KMeansError(f"Cluster index out of range [0, {self.K})")

    def fit(self, X: np.ndarray, initial_centroids: np.ndarray) -> RunResult:
        """
        Основной цикл KMeans с остановкой по сходимости.

        Алгоритм останавливается, когда:
        - смещение каждого центроида не превышает tol (CONVERGED), ИЛИ
        - выполнено n_iters проходов обновления (MAX_ITERATIONS_REACHED).

        При сходимости сохраняется снимок центроидов, по которому были
        вычислены метки. При исчерпании лимита метки пересчитываются по
        последним центроидам, поэтому результат всегда согласован.
        При n_iters=0 метки вычисляются один раз по начальным центроидам.
        """
        self.status = RunStatus.INITIALIZING
        X, centroids = self._validate(X, initial_centroids)
        self.centroids = centroids
        self.labels = None

        # сбрасываем накопленные тайминги для нового запуска
        t_assign = Timer()
        t_update = Timer()
        self.n_iters_actual = 0

        self.status = RunStatus.ITERATING
        for i in range(self.n_iters):
            with t_assign:
                labels = self.assign_clusters(X, self.centroids)
            with t_update:
                new_centroids = self.update_centroids(X, labels)

            self.labels = labels
            self.n_iters_actual = i + 1

            shifts = centroid_shifts(self.centroids, new_centroids)
            max_shift = float(np.max(shifts))
            converged = max_shift <= self.tol

            if self.logger and (i == 0 or (i + 1) % 10 == 0 or converged):
                status = " (converged)" if converged else ""
                self.logger.info(
                    f"  Iteration {i + 1}/{self.n_iters}{status} "
                    f"(T_assign={t_assign.elapsed:.6f}s, "
                    f"T_update={t_update.elapsed:.6f}s, "
                    f"max_shift={max_shift:.2e})"
                )

            if converged:
                self.status = RunStatus.CONVERGED
                if self.logger:
                    self.logger.info(
                        f"  Convergence reached after {i + 1} iterations "
                        f"(max_shift={max_shift:.2e} <= tol={self.tol:.2e})"
                    )
                break

            # Подмена снимка целиком, старый массив не изменяется
            self.centroids = new_centroids

        if self.status is not RunStatus.CONVERGED:
            self.status = RunStatus.MAX_ITERATIONS_REACHED
            with t_assign:
                self.labels = self.assign_clusters(X, self.centroids)
            if self.logger:
                self.logger.info(
                    f"  Stopped after {self.n_iters_actual} iterations without convergence"
                )

        self._check_labels(self.labels, X.shape[0])

        self.t_assign_total = t_assign.total
        self.t_update_total = t_update.total
        self.t_iter_total = t_assign.total + t_update.total

        self.result = RunResult(
            centroids=self.centroids,
            labels=self.labels,
            cost=total_cost(X, self.centroids, self.labels),
            inertia=inertia(X, self.centroids, self.labels),
            n_iters=self.n_iters_actual,
            status=self.status,
            seed=self.seed,
            t_assign_total=self.t_assign_total,
            t_update_total=self.t_update_total,
            t_iter_total=self.t_iter_total,
        )
        return self.result

    @abstractmethod
    def assign_clusters(self, X: np.ndarray, centroids: np.ndarray) -> np.ndarray:
        """Шаг назначения точек кластерам."""
        raise NotImplementedError

    @abstractmethod
    def update_centroids(self, X: np.ndarray, labels: np.ndarray) -> np.ndarray:
        """Шаг обновления центроидов по присвоенным меткам."""
        raise NotImplementedError
