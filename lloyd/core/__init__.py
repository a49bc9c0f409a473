from .base import KMeansBase
from .cpu_numpy import KMeansCPUNumpy
from .cpu_threads import KMeansCPUThreads
from .cpu_multiprocessing import KMeansCPUMultiprocessing
from .convergence import DEFAULT_TOLERANCE, centroid_shifts, has_converged
from .cost import inertia, total_cost
from .distance import euclidean_distance, point_distances, squared_distances
from .errors import (
    DimensionMismatchError,
    InvalidClusterCountError,
    KMeansError,
    RestartsFailedError,
)
from .init import InitPolicy, select_initial_centroids
from .partition import ParallelConfig
from .reduction import EmptyClusterPolicy
from .result import RestartFailure, RestartSummary, RunResult, RunStatus
from .driver import BACKENDS, make_model, run_clustering, run_clustering_best_of
from .restarts import BestResult, RestartRunner

__all__ = [
    "KMeansBase",
    "KMeansCPUNumpy",
    "KMeansCPUThreads",
    "KMeansCPUMultiprocessing",
    "DEFAULT_TOLERANCE",
    "centroid_shifts",
    "has_converged",
    "inertia",
    "total_cost",
    "euclidean_distance",
    "point_distances",
    "squared_distances",
    "DimensionMismatchError",
    "InvalidClusterCountError",
    "KMeansError",
    "RestartsFailedError",
    "InitPolicy",
    "select_initial_centroids",
    "ParallelConfig",
    "EmptyClusterPolicy",
    "RestartFailure",
    "RestartSummary",
    "RunResult",
    "RunStatus",
    "BACKENDS",
    "make_model",
    "run_clustering",
    "run_clustering_best_of",
    "BestResult",
    "RestartRunner",
]
