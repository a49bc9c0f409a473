from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class ParallelConfig:
    """Параметры параллельных реализаций KMeans."""

    n_workers: Optional[int] = None  # None → число доступных ядер
    chunk_size: Optional[int] = None  # None → по одному чанку на воркер

    def resolve_workers(self) -> int:
        n = self.n_workers if self.n_workers is not None else (os.cpu_count() or 1)
        if n <= 0:
            raise ValueError("n_workers must be positive")
        return int(n)


def make_chunks(N: int, n_parts: int, chunk_size: Optional[int] = None) -> List[slice]:
    """
    Разбиение индексов 0..N-1 на непрерывные непустые чанки.

    Без chunk_size точки делятся на n_parts почти равных частей
    (как np.array_split); с chunk_size на куски фиксированной длины.
    Чанки не пересекаются и покрывают все индексы ровно один раз.
    """
    if chunk_size is not None:
        cs = int(chunk_size)
        if cs <= 0:
            raise ValueError("chunk_size must be positive")
        return [slice(i, min(i + cs, N)) for i in range(0, N, cs)]

    n_parts = max(1, min(int(n_parts), N))
    base, extra = divmod(N, n_parts)
    chunks: List[slice] = []
    start = 0
    for p in range(n_parts):
        stop = start + base + (1 if p < extra else 0)
        if stop > start:
            chunks.append(slice(start, stop))
        start = stop
    return chunks
