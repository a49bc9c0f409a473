"""
Точки входа ядра кластеризации.

run_clustering выполняет один прогон цикла Ллойда: проверка входа,
выбор начальных центроидов, итерации до сходимости или лимита.
run_clustering_best_of запускает несколько независимых прогонов со
случайной инициализацией и возвращает лучший по стоимости.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional, Type

import numpy as np

from lloyd.core.base import KMeansBase
from lloyd.core.convergence import DEFAULT_TOLERANCE
from lloyd.core.cpu_multiprocessing import KMeansCPUMultiprocessing
from lloyd.core.cpu_numpy import KMeansCPUNumpy
from lloyd.core.cpu_threads import KMeansCPUThreads
from lloyd.core.init import InitPolicy, check_cluster_count, select_initial_centroids
from lloyd.core.partition import ParallelConfig
from lloyd.core.reduction import EmptyClusterPolicy
from lloyd.core.result import RestartSummary, RunResult
from lloyd.data.validation import validate_points

BACKENDS: Dict[str, Type[KMeansBase]] = {
    "numpy": KMeansCPUNumpy,
    "threads": KMeansCPUThreads,
    "processes": KMeansCPUMultiprocessing,
}


def make_model(
    backend: str,
    n_clusters: int,
    n_workers: Optional[int] = None,
    chunk_size: Optional[int] = None,
    **kwargs: Any,
) -> KMeansBase:
    """Создаёт модель по имени реализации ("numpy", "threads", "processes")."""
    try:
        cls = BACKENDS[backend]
    except KeyError:
        raise ValueError(
            f"Unknown backend '{backend}', expected one of {sorted(BACKENDS)}"
        ) from None
    if cls is KMeansCPUNumpy:
        return cls(n_clusters=n_clusters, **kwargs)
    return cls(
        n_clusters=n_clusters,
        parallel=ParallelConfig(n_workers=n_workers, chunk_size=chunk_size),
        **kwargs,
    )


def run_clustering(
    points: Any,
    k: int,
    max_iterations: int = 100,
    tolerance: float = DEFAULT_TOLERANCE,
    init_policy: InitPolicy = InitPolicy.FIRST_K,
    random_seed: Optional[int] = None,
    *,
    backend: str = "numpy",
    n_workers: Optional[int] = None,
    chunk_size: Optional[int] = None,
    empty_cluster: EmptyClusterPolicy = EmptyClusterPolicy.ZERO,
    rng: Optional[np.random.Generator] = None,
    logger: Any | None = None,
) -> RunResult:
    """
    Один полный прогон K-means.

    Args:
        points: Последовательность точек одинаковой размерности (N, D)
        k: Количество кластеров, 1 <= k <= N
        max_iterations: Лимит проходов обновления (0: только назначение)
        tolerance: Порог смещения центроидов для сходимости
        init_policy: FIRST_K или RANDOM
        random_seed: Seed для RANDOM-инициализации и политики RESEED
        backend: Реализация шагов ("numpy", "threads", "processes")
        n_workers: Число воркеров параллельных реализаций
        chunk_size: Фиксированный размер чанка (по умолчанию чанк на воркер)
        empty_cluster: Политика пустых кластеров
        rng: Готовый генератор; если задан, random_seed только записывается
            в результат
        logger: Логгер для сообщений о ходе итераций

    Returns:
        RunResult

    Raises:
        InvalidClusterCountError: Если k <= 0 или k > N
        DimensionMismatchError: Если точки разной размерности
    """
    X = validate_points(points)
    check_cluster_count(k, X.shape[0])

    if rng is None:
        rng = np.random.default_rng(random_seed)

    initial = select_initial_centroids(X, k, init_policy, rng)
    model = make_model(
        backend,
        n_clusters=k,
        n_workers=n_workers,
        chunk_size=chunk_size,
        n_iters=max_iterations,
        tol=tolerance,
        empty_cluster=empty_cluster,
        rng=rng,
        seed=random_seed,
        logger=logger,
    )
    return model.fit(X, initial)


def run_clustering_best_of(
    points: Any,
    k: int,
    max_iterations: int = 100,
    tolerance: float = DEFAULT_TOLERANCE,
    num_restarts: int = 10,
    *,
    random_seed: Optional[int] = None,
    n_jobs: int = 1,
    backend: str = "numpy",
    n_workers: Optional[int] = None,
    empty_cluster: EmptyClusterPolicy = EmptyClusterPolicy.ZERO,
    result_sink: Callable[[dict], None] | None = None,
    logger: logging.Logger | None = None,
) -> RestartSummary:
    """
    Лучший из num_restarts независимых прогонов со случайной инициализацией.

    Каждый перезапуск получает собственный seed, порождённый из random_seed,
    поэтому при фиксированном random_seed результат воспроизводим независимо
    от n_jobs. Ошибка одного перезапуска не прерывает остальные.
    """
    # импорт здесь: restarts сам использует run_clustering
    from lloyd.core.restarts import RestartRunner

    X = validate_points(points)
    check_cluster_count(k, X.shape[0])

    runner = RestartRunner(
        X,
        k,
        max_iterations=max_iterations,
        tolerance=tolerance,
        backend=backend,
        n_workers=n_workers,
        empty_cluster=empty_cluster,
        logger=logger,
        result_sink=result_sink,
    )
    return runner.run(num_restarts=num_restarts, random_seed=random_seed, n_jobs=n_jobs)
