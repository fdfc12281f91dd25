# tests/test_bench.py
import pytest

from spectconv.bench import (
    BenchmarkRecord,
    read_benchmark_csv,
    run_benchmark,
    size_pairs,
    summarize,
    write_benchmark_csv,
)


def test_size_pairs_sweep_kernels_smaller_than_source():
    assert list(size_pairs(5)) == [(4, 3), (5, 3), (5, 4)]
    assert list(size_pairs(3)) == []


def test_run_benchmark_records(tmp_path):
    records = run_benchmark(max_size=5, modes=("linear", "circular-optimal"), repeats=1)
    assert len(records) == 3 * 3
    methods = {r.method for r in records}
    assert methods == {"linear", "circular-optimal", "direct"}
    for r in records:
        assert r.seconds >= 0.0
        assert r.working_height >= r.src_size
    lin = [r for r in records if r.method == "linear" and r.src_size == 5 and r.kernel_size == 4]
    assert lin[0].working_height == 5 + 2

    path = write_benchmark_csv(records, tmp_path / "out" / "bench.csv")
    assert read_benchmark_csv(path) == records

    totals = summarize(records)
    assert set(totals) == methods


def test_run_benchmark_without_direct_and_with_progress():
    records = run_benchmark(max_size=4, modes=["circular"], repeats=1, include_direct=False, progress=True)
    assert records == [
        BenchmarkRecord("circular", 4, 3, 7, 7, records[0].seconds),
    ]


def test_run_benchmark_rejects_bad_arguments():
    with pytest.raises(ValueError):
        run_benchmark(max_size=4, repeats=0)
    with pytest.raises(ValueError):
        run_benchmark(max_size=4, modes=("nope",))
