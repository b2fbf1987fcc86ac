"""Tests for validation report rendering and batch runs."""
import json

import pytest

from easykicad.validation import (
    ComparisonResult, Diff, ValidationReport, format_text, render_batch_html,
    render_html, run_batch, to_json,
)


@pytest.fixture
def failed_report():
    result = ComparisonResult(
        kind="footprint",
        passed=False,
        reference_count=2,
        generated_count=1,
        matched_count=1,
        diffs=[
            Diff(designator="2", field="missing", severity="error",
                 message="Pad 2 at (1.000, 0.000) missing in generated output"),
            Diff(designator="1", field="shape", severity="warning",
                 message="Pad 1 shape differs: expected circle, got rect",
                 expected="circle", actual="rect"),
        ],
    )
    return ValidationReport(kind="footprint", name="R<0603>", result=result)


@pytest.fixture
def passed_report():
    result = ComparisonResult(
        kind="symbol", passed=True, reference_count=2, generated_count=2, matched_count=2,
    )
    return ValidationReport(kind="symbol", name="10k", result=result)


@pytest.fixture
def error_report():
    return ValidationReport(kind="footprint", name="BAD", error="reference SVG is empty")


def test_report_status(failed_report, passed_report, error_report):
    assert not failed_report.passed
    assert passed_report.passed
    assert not error_report.passed


def test_format_text(failed_report):
    text = format_text(failed_report)
    lines = text.splitlines()

    assert lines[0] == "Footprint R<0603>: FAIL"
    assert "  Pad count: 1/2 (1 matched)" in lines
    assert "  Errors (1):" in lines
    assert "  Warnings (1):" in lines
    assert "    - Pad 2 at (1.000, 0.000) missing in generated output" in lines


def test_format_text_engine_error(error_report, passed_report):
    assert format_text(error_report) == "Footprint BAD: ERROR\n  Engine error: reference SVG is empty"
    assert format_text(passed_report) == "Symbol 10k: PASS\n  Pin count: 2/2 (2 matched)"


def test_to_json(failed_report):
    data = json.loads(to_json(failed_report))

    assert data["kind"] == "footprint"
    assert data["error"] is None
    assert data["result"]["passed"] is False
    assert [d["field"] for d in data["result"]["diffs"]] == ["missing", "shape"]
    assert ValidationReport.model_validate(data) == failed_report


def test_render_html_embeds_previews(failed_report):
    html = render_html(failed_report, reference_svg="<svg></svg>", generated_svg=None)

    assert html.startswith("<!DOCTYPE html>")
    assert "R&lt;0603&gt;" in html
    assert "R<0603>" not in html
    assert "data:image/svg+xml;base64," in html
    assert "Not available" in html
    assert "1 errors" in html
    assert "1 warnings" in html


def test_render_html_engine_error(error_report):
    html = render_html(error_report)
    assert "error-banner" in html
    assert "reference SVG is empty" in html


def test_render_batch_html(failed_report, passed_report, error_report):
    html = render_batch_html([passed_report, failed_report, error_report])

    assert "1 passed" in html
    assert "1 failed" in html
    assert "1 errors" in html
    assert "3 total" in html
    assert html.index("10k") < html.index("R&lt;0603&gt;") < html.index("BAD")


def test_run_batch_preserves_order_and_reports_progress(passed_report, error_report):
    by_name = {"good": passed_report, "bad": error_report}
    progress = []

    reports = run_batch(
        ["good", "bad", "good"],
        lambda name: by_name[name],
        on_progress=lambda index, total, report: progress.append((index, total, report.name)),
    )

    assert [r.name for r in reports] == ["10k", "BAD", "10k"]
    assert progress == [(1, 3, "10k"), (2, 3, "BAD"), (3, 3, "10k")]


def test_run_batch_empty():
    assert run_batch([], lambda case: case) == []
