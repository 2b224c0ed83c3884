from __future__ import annotations

from datetime import datetime, timedelta, timezone

from bulk_upload.models.processing_result import UploadSummary
from bulk_upload.models.upload_result import UploadResult
from bulk_upload.services.summary import render_summary_line

START = datetime(2025, 1, 1, 10, 0, 0, tzinfo=timezone.utc)


def _summary(**overrides) -> UploadSummary:
    fields = dict(
        total_products=4,
        success_products=3,
        failed_products=1,
        total_sizes=9,
        start_time=START,
        end_time=START + timedelta(seconds=2),
        elapsed_seconds=2.0,
        throughput_products_per_sec=2.0,
    )
    fields.update(overrides)
    return UploadSummary(**fields)


def test_render_summary_line_integers():
    assert render_summary_line(_summary()) == (
        "SUMMARY products=4 success=3 failed=1 sizes=9 elapsed_sec=2 throughput_pps=2"
    )


def test_render_summary_line_zero_elapsed():
    line = render_summary_line(_summary(elapsed_seconds=0.0, throughput_products_per_sec=0.0))
    assert line.endswith("elapsed_sec=0 throughput_pps=0")


def test_render_summary_line_small_values_avoid_scientific_notation():
    line = render_summary_line(_summary(elapsed_seconds=0.000123))
    assert "elapsed_sec=0.000123" in line
    assert "e-" not in line


def test_render_summary_line_fractional_values():
    line = render_summary_line(_summary(elapsed_seconds=1.23456, throughput_products_per_sec=3.24))
    assert "elapsed_sec=1.235" in line
    assert "throughput_pps=3.24" in line


def test_upload_summary_from_results_counts_sizes_of_successes():
    results = [
        UploadResult.succeeded("A", "1"),
        UploadResult.failed("B", "boom"),
        UploadResult.succeeded("C", None),
    ]
    summary = UploadSummary.from_results(results, [2, 5, 3], START, START + timedelta(seconds=4))
    assert summary.total_products == 3
    assert summary.success_products == 2
    assert summary.failed_products == 1
    assert summary.total_sizes == 5
    assert summary.elapsed_seconds == 4.0
    assert summary.throughput_products_per_sec == 0.75


def test_upload_summary_empty_run():
    summary = UploadSummary.from_results([], [], START, START)
    assert summary.total_products == 0
    assert summary.throughput_products_per_sec == 0.0
