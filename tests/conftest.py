"""
Общие фикстуры для всех тестов.
"""

import numpy as np
import pytest


@pytest.fixture
def rng():
    """Собственный генератор вместо глобального np.random.seed."""
    return np.random.default_rng(42)


@pytest.fixture
def small_dataset(rng):
    """Фикстура с небольшим тестовым датасетом (2D, 2 кластера)."""
    # Два явно разделённых кластера
    cluster1 = rng.standard_normal((30, 2)) + [0, 0]
    cluster2 = rng.standard_normal((30, 2)) + [5, 5]
    X = np.vstack([cluster1, cluster2])
    initial_centroids = np.array([
        [-1.0, -1.0],
        [6.0, 6.0],
    ])
    return X, initial_centroids


@pytest.fixture
def medium_dataset(rng):
    """Фикстура со средним тестовым датасетом (10D, 3 кластера)."""
    cluster1 = rng.standard_normal((50, 10)) + [0] * 10
    cluster2 = rng.standard_normal((50, 10)) + [5] * 10
    cluster3 = rng.standard_normal((50, 10)) + [-5] * 10
    X = np.vstack([cluster1, cluster2, cluster3])
    initial_centroids = np.array([
        [-1.0] * 10,
        [6.0] * 10,
        [-6.0] * 10,
    ])
    return X, initial_centroids


@pytest.fixture
def simple_2d_dataset():
    """Фикстура с очень простым 2D датасетом для базовых тестов."""
    X = np.array([
        [0.0, 0.0],
        [1.0, 1.0],
        [2.0, 2.0],
        [10.0, 10.0],
        [11.0, 11.0],
        [12.0, 12.0],
    ])
    initial_centroids = np.array([
        [0.5, 0.5],
        [11.0, 11.0],
    ])
    return X, initial_centroids


@pytest.fixture
def four_points():
    """Две пары точек на расстоянии 10 друг от друга."""
    return np.array([
        [0.0, 0.0],
        [0.0, 1.0],
        [10.0, 0.0],
        [10.0, 1.0],
    ])


@pytest.fixture
def csv_file(tmp_path, four_points):
    """CSV с four_points и BOM в начале, как у выгрузок из табличных редакторов."""
    path = tmp_path / "points.csv"
    lines = [",".join(str(v) for v in row) for row in four_points]
    path.write_text("\ufeff" + "\n".join(lines) + "\n", encoding="utf-8")
    return path
