"""
Визуализация результатов кластеризации.

Модуль содержит функции для:
- 2D-графика точек, раскрашенных по кластерам, с центроидами и
  гистограммой размеров кластеров;
- графика стоимости перезапусков и лучшей найденной стоимости.

Входные данные: CSV с точками и JSON, сохранённый `lloyd --output`.
"""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Any, Sequence

import matplotlib.pyplot as plt
import numpy as np

from lloyd.data.csv_table import read_points


def configure_plot_style() -> None:
    """Настройка стиля графиков."""
    plt.style.use("seaborn-v0_8-darkgrid")
    plt.rcParams.update(
        {
            "axes.titlesize": 13,
            "axes.labelsize": 11,
            "legend.fontsize": 10,
            "figure.titlesize": 14,
            "figure.titleweight": "bold",
        }
    )


def create_info_box(ax: Any, text: str, right: bool = False) -> None:
    """Информационный блок в верхнем углу графика."""
    ax.text(
        0.98 if right else 0.02,
        0.98,
        text,
        transform=ax.transAxes,
        verticalalignment="top",
        horizontalalignment="right" if right else "left",
        fontsize=9,
        fontweight="bold",
        bbox=dict(boxstyle="round", facecolor="#E8F4F8", alpha=0.9, edgecolor="#3498DB", linewidth=2),
    )


def plot_clusters_2d(
    X: np.ndarray,
    labels: np.ndarray,
    centroids: np.ndarray,
    save_path: Path,
    cost: float | None = None,
) -> Path:
    """
    Точки и центроиды по первым двум координатам + размеры кластеров.

    Одномерные данные рисуются на оси y=0.
    """
    configure_plot_style()
    X = np.asarray(X, dtype=np.float64)
    labels = np.asarray(labels)
    centroids = np.asarray(centroids, dtype=np.float64)
    K = centroids.shape[0]

    if X.shape[1] >= 2:
        plot_X, plot_C = X[:, :2], centroids[:, :2]
    else:
        plot_X = np.column_stack([X[:, 0], np.zeros(len(X))])
        plot_C = np.column_stack([centroids[:, 0], np.zeros(K)])

    fig, axes = plt.subplots(1, 2, figsize=(16, 7))
    fig.suptitle("Результат кластеризации K-means", y=1.02)

    ax1 = axes[0]
    ax1.scatter(plot_X[:, 0], plot_X[:, 1], c=labels, cmap="tab10", alpha=0.7, s=20, edgecolors="white", linewidth=0.4)
    ax1.scatter(
        plot_C[:, 0],
        plot_C[:, 1],
        c="#FF6B6B",
        marker="*",
        s=350,
        edgecolors="black",
        linewidth=2,
        label="Центроиды",
        zorder=10,
    )
    ax1.set_xlabel("Признак 1", fontweight="bold")
    ax1.set_ylabel("Признак 2", fontweight="bold")
    ax1.legend(loc="upper right")

    info = f"N={X.shape[0]:,}  D={X.shape[1]}  K={K}"
    if cost is not None:
        info += f"\ncost={cost:.4f}"
    create_info_box(ax1, info)

    ax2 = axes[1]
    counts = np.bincount(labels, minlength=K)
    ax2.bar(np.arange(K), counts, color=plt.cm.tab10(np.arange(K) % 10), edgecolor="black", linewidth=1.5, alpha=0.8)
    ax2.set_xticks(np.arange(K))
    ax2.set_xlabel("ID кластера", fontweight="bold")
    ax2.set_ylabel("Количество точек", fontweight="bold")
    ax2.set_title("Распределение точек по кластерам", pad=15)
    create_info_box(ax2, f"Пустых кластеров: {int(np.sum(counts == 0))}", right=True)

    save_path = Path(save_path)
    save_path.parent.mkdir(parents=True, exist_ok=True)
    plt.tight_layout()
    plt.savefig(save_path, dpi=150, bbox_inches="tight", facecolor="white")
    plt.close(fig)
    print(f"  Сохранено: {save_path}")
    return save_path


def plot_restart_costs(
    best_cost_history: Sequence[float],
    save_path: Path,
) -> Path:
    """Лучшая стоимость после каждого завершённого перезапуска."""
    configure_plot_style()
    history = np.asarray(best_cost_history, dtype=np.float64)

    fig, ax = plt.subplots(figsize=(10, 5))
    ax.plot(np.arange(1, len(history) + 1), history, color="#2C3E50", linewidth=2)
    ax.set_xlabel("Завершённые перезапуски", fontweight="bold")
    ax.set_ylabel("Лучшая стоимость", fontweight="bold")
    ax.set_title("Поиск лучшего из перезапусков", pad=15)
    create_info_box(ax, f"best={history[-1]:.4f}", right=True)

    save_path = Path(save_path)
    save_path.parent.mkdir(parents=True, exist_ok=True)
    plt.tight_layout()
    plt.savefig(save_path, dpi=150, bbox_inches="tight", facecolor="white")
    plt.close(fig)
    print(f"  Сохранено: {save_path}")
    return save_path


def visualize_result(points_source: str | Path, result_json: Path, output_dir: Path) -> list[Path]:
    """Строит все графики по CSV с точками и JSON-результату."""
    X = read_points(points_source)
    with open(result_json, "r", encoding="utf-8") as f:
        record = json.load(f)

    # JSON одного прогона или сводка перезапусков с ключом "best"
    best = record.get("best", record)
    if "labels" not in best:
        raise ValueError(f"{result_json} does not contain point labels")

    output_dir = Path(output_dir)
    paths = [
        plot_clusters_2d(X, best["labels"], best["centroids"], output_dir / "clusters.png", best.get("cost"))
    ]
    if record.get("best_cost_history"):
        paths.append(plot_restart_costs(record["best_cost_history"], output_dir / "restart_costs.png"))
    return paths


def _cli() -> None:
    parser = argparse.ArgumentParser(description="Визуализация результата кластеризации K-means.")
    parser.add_argument("points", help="CSV-файл с точками")
    parser.add_argument("result", type=Path, help="JSON, сохранённый lloyd --output")
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path("visualizations"),
        help="Директория для сохранения графиков (по умолчанию: ./visualizations)",
    )
    args = parser.parse_args()
    visualize_result(args.points, args.result, args.output_dir)


if __name__ == "__main__":
    _cli()
