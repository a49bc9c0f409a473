# main.py
from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Any, Callable, List, Optional

from lloyd.config import ClusteringConfig
from lloyd.core.driver import BACKENDS, run_clustering, run_clustering_best_of
from lloyd.core.init import InitPolicy
from lloyd.core.reduction import EmptyClusterPolicy
from lloyd.core.result import RunResult
from lloyd.data.dataset import Dataset
from lloyd.data.validation import validate_dataset
from lloyd.utils.logging import setup_logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lloyd",
        description="Параллельная кластеризация K-means (алгоритм Ллойда) "
        "с поиском лучшего из нескольких перезапусков.",
    )
    parser.add_argument(
        "source",
        help="CSV-файл или http(s)-URL: одна точка на строку, координаты через запятую",
    )
    parser.add_argument("-k", "--clusters", type=int, default=None, help="Количество кластеров K")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON с параметрами ClusteringConfig; флаги командной строки имеют приоритет",
    )
    parser.add_argument("--max-iterations", type=int, default=None, help="Лимит итераций (по умолчанию 100)")
    parser.add_argument("--tolerance", type=float, default=None, help="Порог сходимости (по умолчанию 0.001)")
    parser.add_argument(
        "--init",
        choices=[p.value for p in InitPolicy],
        default=None,
        help="Выбор начальных центроидов (по умолчанию random)",
    )
    parser.add_argument(
        "--empty-cluster",
        choices=[p.value for p in EmptyClusterPolicy],
        default=None,
        help="Политика пустых кластеров (по умолчанию zero)",
    )
    parser.add_argument("--backend", choices=sorted(BACKENDS), default=None, help="Реализация шагов итерации")
    parser.add_argument("--workers", type=int, default=None, help="Число воркеров внутри итерации")
    parser.add_argument("--seed", type=int, default=None, help="Seed генератора случайных чисел")
    parser.add_argument("--restarts", type=int, default=None, help="Число независимых перезапусков")
    parser.add_argument("--jobs", type=int, default=None, help="Число одновременно выполняемых перезапусков")
    parser.add_argument(
        "--results-json",
        type=Path,
        default=None,
        help="NDJSON-файл, куда потоково пишется запись о каждом перезапуске",
    )
    parser.add_argument("--output", type=Path, default=None, help="JSON-файл для итогового результата")
    parser.add_argument("--quiet", action="store_true", help="Не печатать метки точек")
    return parser


def resolve_config(args: argparse.Namespace) -> ClusteringConfig:
    """Собирает конфигурацию: JSON-файл, затем переопределения из флагов."""
    data: dict[str, Any] = {}
    if args.config is not None:
        data = ClusteringConfig.from_json(args.config).to_dict()

    overrides = {
        "k": args.clusters,
        "max_iterations": args.max_iterations,
        "tolerance": args.tolerance,
        "init_policy": args.init,
        "empty_cluster": args.empty_cluster,
        "backend": args.backend,
        "n_workers": args.workers,
        "random_seed": args.seed,
        "num_restarts": args.restarts,
        "n_jobs": args.jobs,
    }
    data.update({key: value for key, value in overrides.items() if value is not None})

    if "k" not in data:
        raise ValueError("Number of clusters is required (-k or 'k' in --config)")

    config = ClusteringConfig.from_dict(data)
    config.validate()
    return config


def ndjson_sink(path: Path) -> Callable[[dict], None]:
    """Потоковая запись записей в NDJSON; файл очищается при создании."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("", encoding="utf-8")

    def sink(rec: dict) -> None:
        with open(path, "a", encoding="utf-8") as f:
            f.write(json.dumps(rec, ensure_ascii=False))
            f.write("\n")

    return sink


def print_result(result: RunResult, show_labels: bool = True) -> None:
    print("Best centroids:")
    for idx, centroid in enumerate(result.centroids):
        print(f"  [{idx}] " + ", ".join(f"{v:.4f}" for v in centroid))
    if show_labels:
        print("Best assignments:")
        print(result.labels.tolist())
    print(f"Best cost: {result.cost:.4f}")
    print(f"Iterations: {result.n_iters} ({result.status.value})")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logger = setup_logger()

    try:
        config = resolve_config(args)
        dataset = Dataset(args.source)
        validate_dataset(dataset, config.k)
        X = dataset.X

        sink = None
        if args.results_json is not None:
            sink = ndjson_sink(args.results_json)

        if config.num_restarts == 1:
            result = run_clustering(
                X,
                config.k,
                config.max_iterations,
                config.tolerance,
                config.init_policy,
                config.random_seed,
                backend=config.backend,
                n_workers=config.n_workers,
                empty_cluster=config.empty_cluster,
                logger=logger,
            )
            record: dict[str, Any] = result.to_dict()
            if sink is not None:
                sink({"restart_idx": 0, **result.to_dict(include_labels=False)})
        else:
            summary = run_clustering_best_of(
                X,
                config.k,
                config.max_iterations,
                config.tolerance,
                config.num_restarts,
                random_seed=config.random_seed,
                n_jobs=config.n_jobs,
                backend=config.backend,
                n_workers=config.n_workers,
                empty_cluster=config.empty_cluster,
                result_sink=sink,
                logger=logger,
            )
            result = summary.best
            record = summary.to_dict()
    except (ValueError, OSError) as exc:
        # KMeansError и CSVParseError наследуются от ValueError
        logger.error(f"{type(exc).__name__}: {exc}")
        return 1

    print_result(result, show_labels=not args.quiet)

    if args.output is not None:
        record["config"] = config.to_dict()
        args.output.parent.mkdir(parents=True, exist_ok=True)
        with open(args.output, "w", encoding="utf-8") as f:
            json.dump(record, f, ensure_ascii=False, indent=2)
        logger.info(f"Result saved to {args.output}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
