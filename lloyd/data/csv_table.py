"""
Чтение таблицы точек из CSV.

Формат: одна точка на строку, одна координата на поле, разделитель запятая.
BOM в начале поля отбрасывается. Нечисловое поле даёт фатальную ошибку
разбора с указанием строки и столбца. Строки разной длины дают
DimensionMismatchError. Источник: локальный файл или http(s)-URL.
"""

from __future__ import annotations

import csv
import io
import logging
from pathlib import Path
from urllib.request import urlopen

import numpy as np

from lloyd.core.errors import DimensionMismatchError

logger = logging.getLogger(__name__)

BOM = "\ufeff"


class CSVParseError(ValueError):
    """Поле записи не удалось разобрать как число."""

    def __init__(self, row: int, column: int, value: str) -> None:
        self.row = row
        self.column = column
        self.value = value
        super().__init__(
            f"Cannot parse value {value!r} at row {row}, column {column} as float"
        )


def parse_points(text: str, delimiter: str = ",") -> np.ndarray:
    """
    Разбирает CSV-текст в массив точек (N, D).

    Args:
        text: Содержимое CSV
        delimiter: Разделитель полей

    Returns:
        np.ndarray float64 формы (N, D); пустые строки пропускаются

    Raises:
        CSVParseError: Нечисловое поле (row/column считаются с 1)
        DimensionMismatchError: Строка с другим числом координат
        ValueError: В тексте нет ни одной точки
    """
    rows: list[list[float]] = []
    dim: int | None = None

    reader = csv.reader(io.StringIO(text), delimiter=delimiter)
    for row_no, record in enumerate(reader, start=1):
        if not record or all(not field.strip() for field in record):
            continue

        values: list[float] = []
        for col_no, field in enumerate(record, start=1):
            value = field.strip().lstrip(BOM).strip()
            try:
                values.append(float(value))
            except ValueError:
                raise CSVParseError(row_no, col_no, field) from None

        if dim is None:
            dim = len(values)
        elif len(values) != dim:
            raise DimensionMismatchError(dim, len(values), where=f"row {row_no}")
        rows.append(values)

    if not rows:
        raise ValueError("CSV contains no data points")

    return np.asarray(rows, dtype=np.float64)


def is_url(source: str | Path) -> bool:
    return isinstance(source, str) and source.startswith(("http://", "https://"))


def read_text(source: str | Path, timeout: float = 30.0) -> str:
    """Читает текст таблицы из файла или по http(s)-URL."""
    if is_url(source):
        logger.info(f"Fetching CSV from {source}")
        with urlopen(source, timeout=timeout) as resp:
            return resp.read().decode("utf-8")

    path = Path(source)
    logger.info(f"Reading CSV from {path}")
    # utf-8-sig снимает BOM на уровне файла; остаточный BOM убирает parse_points
    return path.read_text(encoding="utf-8-sig")


def read_points(source: str | Path, delimiter: str = ",") -> np.ndarray:
    """Загружает точки из CSV-файла или URL."""
    X = parse_points(read_text(source), delimiter=delimiter)
    logger.info(f"Loaded {X.shape[0]} points of dimension {X.shape[1]}")
    return X


def write_points(X: np.ndarray, path: str | Path, bom: bool = False) -> None:
    """Сохраняет точки в CSV (опционально с BOM, как у табличных редакторов)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8-sig" if bom else "utf-8", newline="") as f:
        writer = csv.writer(f)
        for row in np.asarray(X, dtype=np.float64):
            writer.writerow([repr(float(v)) for v in row])
