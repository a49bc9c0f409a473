from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

import numpy as np


class RunStatus(str, Enum):
    """Состояния цикла Ллойда."""

    INITIALIZING = "initializing"
    ITERATING = "iterating"
    CONVERGED = "converged"
    MAX_ITERATIONS_REACHED = "max_iterations_reached"


def _frozen(arr: np.ndarray) -> np.ndarray:
    out = np.array(arr, copy=True)
    out.setflags(write=False)
    return out


@dataclass(frozen=True)
class RunResult:
    """
    Результат одного полного прогона цикла.

    Массивы копируются и помечаются только для чтения, поэтому результат
    неизменяем после создания.
    """

    centroids: np.ndarray
    labels: np.ndarray
    cost: float
    inertia: float
    n_iters: int
    status: RunStatus
    seed: Optional[int] = None
    t_assign_total: float = 0.0
    t_update_total: float = 0.0
    t_iter_total: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "centroids", _frozen(self.centroids))
        object.__setattr__(self, "labels", _frozen(self.labels))

    @property
    def converged(self) -> bool:
        return self.status is RunStatus.CONVERGED

    @property
    def n_clusters(self) -> int:
        return int(self.centroids.shape[0])

    def to_dict(self, include_labels: bool = True) -> Dict[str, Any]:
        record: Dict[str, Any] = {
            "centroids": self.centroids.tolist(),
            "cost": self.cost,
            "inertia": self.inertia,
            "n_iters": self.n_iters,
            "status": self.status.value,
            "seed": self.seed,
            "T_assign_total": self.t_assign_total,
            "T_update_total": self.t_update_total,
            "T_iter_total": self.t_iter_total,
        }
        if include_labels:
            record["labels"] = self.labels.tolist()
        return record


@dataclass(frozen=True)
class RestartFailure:
    """Перезапуск, завершившийся исключением."""

    restart_idx: int
    seed: Optional[int]
    error: BaseException

    def to_dict(self) -> Dict[str, Any]:
        return {
            "restart_idx": self.restart_idx,
            "seed": self.seed,
            "error": f"{type(self.error).__name__}: {self.error}",
        }


@dataclass
class RestartSummary:
    """Итог поиска лучшего из нескольких независимых перезапусков."""

    best: RunResult
    costs: List[float]
    best_cost_history: List[float]
    failures: List[RestartFailure] = field(default_factory=list)
    seconds: float = 0.0

    @property
    def n_restarts(self) -> int:
        return len(self.costs) + len(self.failures)

    def stats(self) -> Dict[str, float]:
        costs = np.asarray(self.costs, dtype=np.float64)
        return {
            "cost_min": float(np.min(costs)),
            "cost_mean": float(np.mean(costs)),
            "cost_std": float(np.std(costs)),
            "cost_max": float(np.max(costs)),
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "best": self.best.to_dict(),
            "n_restarts": self.n_restarts,
            "n_failed": len(self.failures),
            "failures": [f.to_dict() for f in self.failures],
            "best_cost_history": list(self.best_cost_history),
            "seconds": self.seconds,
            **self.stats(),
        }
