import pytest

from timings import BuildTimings, compute_summary, compute_unit_rows


def test_unit_rows_sorted_slowest_first(sample_timings):
    rows = compute_unit_rows(sample_timings)
    assert [r["i"] for r in rows] == [6, 3, 5, 4, 1, 2, 0]
    assert [r["#"] for r in rows] == list(range(1, 8))


def test_unit_row_formatting(sample_timings):
    rows = {r["i"]: r for r in compute_unit_rows(sample_timings)}

    libc = rows[3]
    assert libc["Unit"] == "libc v0.2.155(lib)"
    assert libc["Mode"] == "build"
    assert libc["Total"] == "1.84s"
    assert libc["Codegen"] == "1.12s (61%)"
    assert libc["Features"] == "default, std"

    assert rows[2]["Mode"] == "run-custom-build"
    assert rows[6]["Codegen"] == "-"
    assert rows[6]["Features"] == ""


def test_unit_row_without_version_uses_label(chain_timings):
    rows = compute_unit_rows(chain_timings)
    assert rows[0]["Unit"] == "a(lib)"


def test_summary(sample_timings):
    summary = compute_summary(sample_timings)
    assert summary["units"] == 7
    assert summary["total_time"] == 5.0
    assert summary["max_concurrency"] == 3
    assert summary["pipelined_units"] == 4
    assert summary["avg_cpu_usage"] == pytest.approx(451.0 / 9)


def test_summary_of_empty_build():
    summary = compute_summary(BuildTimings(units=[], duration=0.0))
    assert summary == {
        "units": 0,
        "total_time": 0.0,
        "max_concurrency": 0,
        "avg_cpu_usage": 0.0,
        "pipelined_units": 0,
    }
