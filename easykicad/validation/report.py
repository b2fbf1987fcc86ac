"""Text, JSON and HTML renderings of validation reports."""
import base64
from html import escape
from typing import Iterable, Optional

from .models import ComparisonResult, Diff, ValidationReport

_STYLE = """
body { font-family: sans-serif; margin: 2em; color: #222; }
.pass { color: #1a7f37; } .fail { color: #cf222e; } .warn { color: #9a6700; }
.panels { display: flex; gap: 1em; }
.panel { flex: 1; border: 1px solid #ddd; padding: 0.5em; background: #111; }
.panel h3 { color: #eee; margin: 0 0 0.5em 0; font-size: 0.9em; }
.panel img { width: 100%; }
.no-preview { color: #888; }
table { border-collapse: collapse; margin-top: 1em; }
td, th { border: 1px solid #ddd; padding: 0.3em 0.6em; text-align: left; }
.error-banner { background: #ffebe9; border: 1px solid #cf222e; padding: 0.5em; }
"""


def _status(report: ValidationReport) -> str:
    if report.error is not None:
        return "ERROR"
    return "PASS" if report.passed else "FAIL"


def format_text(report: ValidationReport) -> str:
    """Plain text summary of one report."""
    lines = [f"{report.kind.capitalize()} {report.name}: {_status(report)}"]
    if report.error is not None:
        lines.append(f"  Engine error: {report.error}")
        return "\n".join(lines)

    result = report.result
    unit = "Pad" if result.kind == "footprint" else "Pin"
    lines.append(
        f"  {unit} count: {result.generated_count}/{result.reference_count}"
        f" ({result.matched_count} matched)"
    )
    for title, diffs in (("Errors", result.errors), ("Warnings", result.warnings)):
        if diffs:
            lines.append(f"  {title} ({len(diffs)}):")
            lines.extend(f"    - {d.message}" for d in diffs)
    return "\n".join(lines)


def to_json(report: ValidationReport, indent: Optional[int] = 2) -> str:
    """Machine-readable report."""
    return report.model_dump_json(indent=indent)


def _svg_panel(title: str, svg: Optional[str]) -> str:
    if svg:
        data = base64.b64encode(svg.encode("utf-8")).decode("ascii")
        body = f'<img alt="{escape(title)}" src="data:image/svg+xml;base64,{data}">'
    else:
        body = '<div class="no-preview">Not available</div>'
    return f'<div class="panel"><h3>{escape(title)}</h3>{body}</div>'


def _diff_rows(diffs: Iterable[Diff]) -> str:
    rows = []
    for d in diffs:
        css = "fail" if d.severity == "error" else "warn"
        rows.append(
            f'<tr class="{css}"><td>{escape(d.severity)}</td><td>{escape(d.designator)}</td>'
            f"<td>{escape(d.field)}</td><td>{escape(d.message)}</td></tr>"
        )
    return "".join(rows)


def _result_section(result: ComparisonResult) -> str:
    unit = "Pads" if result.kind == "footprint" else "Pins"
    table = ""
    if result.diffs:
        table = (
            "<table><tr><th>Severity</th><th>Number</th><th>Field</th><th>Message</th></tr>"
            f"{_diff_rows(result.diffs)}</table>"
        )
    return (
        f"<p>{unit}: {result.generated_count} generated / {result.reference_count} reference, "
        f"{result.matched_count} matched. "
        f'<span class="fail">{len(result.errors)} errors</span>, '
        f'<span class="warn">{len(result.warnings)} warnings</span></p>{table}'
    )


def _page(title: str, body: str) -> str:
    return (
        "<!DOCTYPE html>\n<html><head><meta charset=\"utf-8\">"
        f"<title>{escape(title)}</title><style>{_STYLE}</style></head>"
        f"<body>{body}</body></html>\n"
    )


def render_html(
    report: ValidationReport,
    reference_svg: Optional[str] = None,
    generated_svg: Optional[str] = None,
) -> str:
    """
    Self-contained HTML page with the reference and generated renderings side by side.

    Args:
        report: Validation report
        reference_svg: SVG markup from the source service
        generated_svg: SVG rendered from the generated KiCad text

    Returns:
        HTML document text
    """
    status = _status(report)
    css = "pass" if status == "PASS" else "fail"
    body = [f'<h1>{escape(report.kind.capitalize())} {escape(report.name)} <span class="{css}">{status}</span></h1>']
    if report.error is not None:
        body.append(f'<div class="error-banner">{escape(report.error)}</div>')
    body.append(
        '<div class="panels">'
        f"{_svg_panel('Reference', reference_svg)}{_svg_panel('Generated', generated_svg)}"
        "</div>"
    )
    if report.result is not None:
        body.append(_result_section(report.result))
    return _page(f"{report.name} validation", "".join(body))


def render_batch_html(reports: Iterable[ValidationReport]) -> str:
    """Summary table over many reports, in the given order."""
    reports = list(reports)
    passed = sum(1 for r in reports if r.passed)
    errored = sum(1 for r in reports if r.error is not None)
    failed = len(reports) - passed - errored

    rows = []
    for r in reports:
        status = _status(r)
        css = "pass" if status == "PASS" else "fail"
        if r.error is not None:
            detail = escape(r.error)
        else:
            detail = f"{len(r.result.errors)} errors, {len(r.result.warnings)} warnings"
        rows.append(
            f"<tr><td>{escape(r.name)}</td><td>{escape(r.kind)}</td>"
            f'<td class="{css}">{status}</td><td>{detail}</td></tr>'
        )

    body = (
        "<h1>Validation summary</h1>"
        f'<p><span class="pass">{passed} passed</span>, <span class="fail">{failed} failed</span>, '
        f"{errored} errors, {len(reports)} total</p>"
        "<table><tr><th>Name</th><th>Kind</th><th>Status</th><th>Details</th></tr>"
        f"{''.join(rows)}</table>"
    )
    return _page("Validation summary", body)
