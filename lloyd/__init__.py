"""
Параллельный K-means (алгоритм Ллойда) с поиском лучшего из перезапусков.

Основные точки входа: run_clustering и run_clustering_best_of.
"""

from lloyd.core import (
    DimensionMismatchError,
    EmptyClusterPolicy,
    InitPolicy,
    InvalidClusterCountError,
    KMeansError,
    RestartSummary,
    RunResult,
    RunStatus,
    run_clustering,
    run_clustering_best_of,
)

__version__ = "0.1.0"

__all__ = [
    "DimensionMismatchError",
    "EmptyClusterPolicy",
    "InitPolicy",
    "InvalidClusterCountError",
    "KMeansError",
    "RestartSummary",
    "RunResult",
    "RunStatus",
    "run_clustering",
    "run_clustering_best_of",
]
