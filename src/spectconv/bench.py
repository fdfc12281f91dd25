# src/spectconv/bench.py
"""Timing sweep of the FFT engine against direct spatial convolution."""
from __future__ import annotations

import csv
import logging
import time
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Iterable, Iterator, List, Sequence, Tuple

import numpy as np
from tqdm import tqdm

from spectconv.conv2d.direct import direct_convolve
from spectconv.conv2d.engine import convolve
from spectconv.conv2d.modes import ConvolutionMode, ModeLike
from spectconv.conv2d.workspace import Workspace

__all__ = [
    "BenchmarkRecord",
    "size_pairs",
    "run_benchmark",
    "write_benchmark_csv",
    "read_benchmark_csv",
    "summarize",
]

logger = logging.getLogger(__name__)

DIRECT_LABEL = "direct"


@dataclass(frozen=True)
class BenchmarkRecord:
    method: str
    src_size: int
    kernel_size: int
    working_height: int
    working_width: int
    seconds: float


def size_pairs(max_size: int, min_size: int = 3) -> Iterator[Tuple[int, int]]:
    """
    (source, kernel) side lengths swept by the benchmark: source from
    `min_size` to `max_size`, kernel from `min_size` to source - 1.
    """
    for n in range(min_size, max_size + 1):
        for k in range(min_size, n):
            yield n, k


def _best_time(fn, repeats: int) -> float:
    best = float("inf")
    for _ in range(repeats):
        t0 = time.perf_counter()
        fn()
        best = min(best, time.perf_counter() - t0)
    return best


def run_benchmark(
    max_size: int = 32,
    modes: Sequence[ModeLike] = ("linear", "circular"),
    *,
    min_size: int = 3,
    repeats: int = 3,
    include_direct: bool = True,
    seed: int = 0,
    progress: bool = False,
) -> List[BenchmarkRecord]:
    """
    Time square convolutions for every size pair of :func:`size_pairs`.

    Each FFT mode reuses one workspace per shape, so only the convolution
    itself is timed. The direct reference is timed with zero boundary.

    Parameters
    ----------
    max_size : int
        Largest source side length.
    modes : sequence of mode
        FFT modes to time.
    min_size : int
        Smallest source and kernel side length.
    repeats : int
        Timing repetitions; the best run is kept.
    include_direct : bool
        Also time :func:`direct_convolve`.
    seed : int
        Seed for the random inputs.
    progress : bool
        Show a tqdm progress bar.

    Returns
    -------
    list[BenchmarkRecord]
    """
    if repeats < 1:
        raise ValueError(f"repeats must be >= 1, got {repeats}")
    modes_t = [ConvolutionMode.coerce(m) for m in modes]
    rng = np.random.default_rng(seed)
    pairs = list(size_pairs(max_size, min_size=min_size))

    records: List[BenchmarkRecord] = []
    pair_iter: Iterable[Tuple[int, int]] = pairs
    if progress:
        pair_iter = tqdm(pairs, total=len(pairs), desc="convolution benchmark", unit="shape")

    for n, k in pair_iter:
        src = rng.standard_normal((n, n))
        ker = rng.standard_normal((k, k))
        dst = np.empty((n, n), dtype=np.float64)

        for mode in modes_t:
            with Workspace(mode, n, n, k, k) as ws:
                seconds = _best_time(lambda: convolve(ws, src, ker, dst), repeats)
                geom = ws.geometry
            records.append(
                BenchmarkRecord(mode.value, n, k, geom.working_height, geom.working_width, seconds)
            )

        if include_direct:
            seconds = _best_time(lambda: direct_convolve(src, ker), repeats)
            records.append(BenchmarkRecord(DIRECT_LABEL, n, k, n, n, seconds))

    logger.debug("Benchmarked %d shapes, %d records", len(pairs), len(records))
    return records


def write_benchmark_csv(records: Iterable[BenchmarkRecord], path: str | Path) -> Path:
    """Write records to CSV with a header row; returns the path."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    names = [f.name for f in fields(BenchmarkRecord)]
    with path.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.DictWriter(handle, fieldnames=names)
        writer.writeheader()
        for rec in records:
            writer.writerow(asdict(rec))
    return path


def read_benchmark_csv(path: str | Path) -> List[BenchmarkRecord]:
    """Load records written by :func:`write_benchmark_csv`."""
    out: List[BenchmarkRecord] = []
    with Path(path).open("r", newline="", encoding="utf-8") as handle:
        for row in csv.DictReader(handle):
            out.append(
                BenchmarkRecord(
                    method=row["method"],
                    src_size=int(row["src_size"]),
                    kernel_size=int(row["kernel_size"]),
                    working_height=int(row["working_height"]),
                    working_width=int(row["working_width"]),
                    seconds=float(row["seconds"]),
                )
            )
    return out


def summarize(records: Iterable[BenchmarkRecord]) -> dict[str, float]:
    """Total best-run seconds per method."""
    totals: dict[str, float] = {}
    for rec in records:
        totals[rec.method] = totals.get(rec.method, 0.0) + rec.seconds
    return totals
