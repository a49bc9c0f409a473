"""
Загрузка и представление таблицы точек для кластеризации.

Модуль предоставляет класс Dataset, который читает CSV из локального
файла или по URL и хранит точки вместе с метаданными.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import numpy as np

from lloyd.data.csv_table import is_url, read_points
from lloyd.utils.logging import format_dataset_prefix


class Dataset:
    """
    Набор точек для кластеризации.

    Точки загружаются один раз и больше не изменяются: массив X
    помечается только для чтения.
    """

    def __init__(self, source: str | Path, delimiter: str = ",") -> None:
        """
        Инициализация датасета.

        Args:
            source: Путь к CSV-файлу или http(s)-URL
            delimiter: Разделитель полей
        """
        self.source = source if is_url(source) else Path(source)
        self.delimiter = delimiter
        self.X: np.ndarray | None = None
        self.dataset_info: dict[str, Any] = {}

        logging.info(f"Loading dataset from {self.source}")
        self._load_data()

    def _load_data(self) -> None:
        self._set_points(read_points(self.source, delimiter=self.delimiter))

    def _set_points(self, X: np.ndarray) -> None:
        X = np.array(X, dtype=np.float64, copy=True)
        X.setflags(write=False)
        self.X = X
        self.dataset_info = {
            "N": int(X.shape[0]),
            "D": int(X.shape[1]) if X.ndim == 2 else 0,
            "source": str(self.source),
        }
        logging.info(f"Dataset loaded {format_dataset_prefix(self.dataset_info)}")
