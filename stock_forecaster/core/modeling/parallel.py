"""Thread fan-out shared by forest training and path simulation."""

from __future__ import annotations

import os
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Sequence, TypeVar

T = TypeVar("T")
R = TypeVar("R")


def resolve_workers(n_jobs: int | None, tasks: int) -> int:
    """Clamp ``n_jobs`` to ``[1, tasks]``; a negative value means one per CPU."""

    cpu_count = os.cpu_count() or 1
    try:
        workers = int(n_jobs) if n_jobs is not None else 1
    except (TypeError, ValueError):
        workers = 1
    if workers < 0:
        workers = cpu_count
    return max(1, min(workers, tasks))


def map_in_threads(func: Callable[[T], R], items: Sequence[T], n_jobs: int | None) -> list[R]:
    """Apply ``func`` to ``items`` preserving order, on up to ``n_jobs`` threads."""

    workers = resolve_workers(n_jobs, len(items))
    if workers == 1:
        return [func(item) for item in items]
    with ThreadPoolExecutor(max_workers=workers) as executor:
        return list(executor.map(func, items))


__all__ = ["map_in_threads", "resolve_workers"]
