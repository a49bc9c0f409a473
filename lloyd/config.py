from __future__ import annotations

import json
import operator
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

from lloyd.core.convergence import DEFAULT_TOLERANCE
from lloyd.core.driver import BACKENDS
from lloyd.core.init import InitPolicy
from lloyd.core.reduction import EmptyClusterPolicy


def _is_integer(value: Any) -> bool:
    try:
        operator.index(value)
    except TypeError:
        return False
    return True


@dataclass
class ClusteringConfig:
    """Параметры запуска кластеризации (CLI, JSON-файл или код)."""

    k: int
    max_iterations: int = 100
    tolerance: float = DEFAULT_TOLERANCE
    init_policy: InitPolicy = InitPolicy.RANDOM
    empty_cluster: EmptyClusterPolicy = EmptyClusterPolicy.ZERO
    backend: str = "threads"
    n_workers: Optional[int] = None
    random_seed: Optional[int] = None
    num_restarts: int = 1
    n_jobs: int = 1

    def __post_init__(self) -> None:
        self.init_policy = InitPolicy(self.init_policy)
        self.empty_cluster = EmptyClusterPolicy(self.empty_cluster)

    def validate(self) -> None:
        """
        Проверяет значения, не зависящие от данных.

        Верхняя граница K (K <= N) проверяется ядром после загрузки точек.

        Raises:
            ValueError: Если параметр вне допустимого диапазона
        """
        if isinstance(self.k, bool) or not _is_integer(self.k) or self.k <= 0:
            raise ValueError(f"k must be a positive integer, got {self.k!r}")
        if self.max_iterations < 0:
            raise ValueError("max_iterations must be non-negative")
        if self.tolerance < 0:
            raise ValueError("tolerance must be non-negative")
        if self.backend not in BACKENDS:
            raise ValueError(
                f"Unknown backend '{self.backend}', expected one of {sorted(BACKENDS)}"
            )
        if self.n_workers is not None and self.n_workers <= 0:
            raise ValueError("n_workers must be positive")
        if self.num_restarts <= 0:
            raise ValueError("num_restarts must be positive")
        if self.n_jobs <= 0:
            raise ValueError("n_jobs must be positive")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ClusteringConfig:
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown config keys: {sorted(unknown)}")
        return cls(**data)

    @classmethod
    def from_json(cls, path: str | Path) -> ClusteringConfig:
        with open(path, "r", encoding="utf-8") as f:
            return cls.from_dict(json.load(f))

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["init_policy"] = self.init_policy.value
        data["empty_cluster"] = self.empty_cluster.value
        return data
