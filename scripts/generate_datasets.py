"""
Генератор синтетических CSV-датасетов для кластеризации.

Создаёт наборы точек с помощью sklearn.make_blobs и сохраняет их в формате,
который читает lloyd.data.csv_table: одна точка на строку, координаты через
запятую, без меток. Истинные центры и параметры генерации пишутся рядом
в metadata.json.
"""

from __future__ import annotations

import json
import time
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

import numpy as np
from sklearn.datasets import make_blobs
from sklearn.preprocessing import StandardScaler

from lloyd.data.csv_table import write_points


@dataclass
class DatasetConfig:
    """Конфигурация параметров датасета."""

    name: str
    N: int
    D: int
    K: int
    cluster_std: float = 1.0
    seed_offset: int = 0
    center_box_range: tuple[float, float] = (-10.0, 10.0)
    standardize: bool = False
    noise_std: float = 0.0
    bom: bool = False  # BOM в начале файла, как у выгрузок из табличных редакторов


# Наборы, которые создаёт generate_all
PRESETS: list[DatasetConfig] = [
    DatasetConfig(name="demo_2d", N=1_000, D=2, K=4, cluster_std=1.0, bom=True),
    DatasetConfig(
        name="overlap_2d",
        N=5_000,
        D=2,
        K=4,
        cluster_std=1.5,
        seed_offset=1,
        center_box_range=(-3.0, 3.0),
        standardize=True,
        noise_std=0.1,
    ),
    DatasetConfig(name="blobs_10d", N=20_000, D=10, K=8, cluster_std=1.2, seed_offset=2),
    DatasetConfig(name="blobs_50d", N=100_000, D=50, K=8, cluster_std=1.5, seed_offset=3),
]


class DatasetGenerator:
    """
    Генератор синтетических датасетов.

    Использует sklearn.make_blobs для создания кластеризованных данных
    с заданными параметрами и сохраняет их в CSV.
    """

    def __init__(self, base_seed: int = 42, datasets_dir: str | Path = "datasets") -> None:
        """
        Инициализация генератора.

        Args:
            base_seed: Базовое значение seed для воспроизводимости
            datasets_dir: Директория для сохранения CSV и metadata.json
        """
        self.base_seed = base_seed
        self.datasets_dir = Path(datasets_dir)
        self.datasets_dir.mkdir(parents=True, exist_ok=True)

    def generate_blobs_dataset(
        self, config: DatasetConfig
    ) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        Генерация синтетического датасета с помощью make_blobs.

        Returns:
            Кортеж (data, labels, centers):
            - data: массив данных (N x D)
            - labels: истинные метки кластеров (N,)
            - centers: центры кластеров (K x D)
        """
        seed = self.base_seed + config.seed_offset
        print(
            f"Генерация {config.name}: N={config.N:,}, D={config.D}, K={config.K}, "
            f"cluster_std={config.cluster_std:.2f}, seed={seed}"
        )

        data, labels, centers = make_blobs(
            n_samples=config.N,
            n_features=config.D,
            centers=config.K,
            cluster_std=config.cluster_std,
            center_box=config.center_box_range,
            random_state=seed,
            return_centers=True,
        )

        if config.standardize:
            scaler = StandardScaler()
            data = scaler.fit_transform(data)
            centers = scaler.transform(centers)

        if config.noise_std > 0:
            rng = np.random.default_rng(seed)
            data = data + rng.normal(0.0, config.noise_std, data.shape)

        return data, labels, centers

    def _create_metadata(
        self, config: DatasetConfig, data: np.ndarray, centers: np.ndarray
    ) -> dict[str, Any]:
        meta = asdict(config)
        meta["center_box_range"] = list(config.center_box_range)
        meta.update(
            {
                "generated": time.strftime("%Y-%m-%d %H:%M:%S"),
                "seed": self.base_seed + config.seed_offset,
                "filepath": f"{config.name}.csv",
                "true_centers": np.asarray(centers).tolist(),
            }
        )
        return meta

    def generate(self, config: DatasetConfig) -> Path:
        """Генерирует один датасет, сохраняет CSV и обновляет metadata.json."""
        data, _, centers = self.generate_blobs_dataset(config)
        filepath = self.datasets_dir / f"{config.name}.csv"
        write_points(data, filepath, bom=config.bom)

        metadata_path = self.datasets_dir / "metadata.json"
        existing: dict[str, Any] = {}
        if metadata_path.exists():
            with open(metadata_path, "r", encoding="utf-8") as f:
                existing = json.load(f)
        existing[config.name] = self._create_metadata(config, data, centers)
        with open(metadata_path, "w", encoding="utf-8") as f:
            json.dump(existing, f, indent=2, ensure_ascii=False)

        print(f"  Сохранено: {filepath} ({data.shape[0]:,} точек, {data.shape[1]}D)")
        return filepath

    def generate_all(self, presets: list[DatasetConfig] | None = None) -> list[Path]:
        """Генерирует все наборы из PRESETS (или переданного списка)."""
        start_time = time.time()
        paths = [self.generate(cfg) for cfg in (presets or PRESETS)]
        print(f"Генерация завершена за {time.time() - start_time:.2f} секунд")
        print(f"Датасеты сохранены в: {self.datasets_dir.absolute()}")
        return paths


if __name__ == "__main__":
    DatasetGenerator(base_seed=42).generate_all()
