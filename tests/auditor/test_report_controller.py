# tests/auditor/test_report_controller.py
import json

import pandas as pd
import pytest

from rsx_auditor.controllers.report_controller import EXPORT_COLUMNS, ReportController
from rsx_auditor.model import Diagnostic, FileError, LintSummary, RuleId, Severity


def _diag(rule, severity, file="src/app.rs", line=1, column=1, message="msg"):
    return Diagnostic(rule=rule, severity=severity, message=message, help="Fix it.",
                      file=file, line=line, column=column, element="div")


@pytest.fixture
def summary():
    return LintSummary(
        diagnostics=(
            _diag(RuleId.ALT_TEXT, Severity.ERROR, line=3, column=9,
                  message="<img> element is missing an `alt` attribute."),
            _diag(RuleId.ANCHOR_IS_VALID, Severity.WARNING, line=5, column=12),
            _diag(RuleId.ANCHOR_IS_VALID, Severity.WARNING, file="src/nav.rs", line=2, column=4),
            _diag(RuleId.PREFER_TAG_OVER_ROLE, Severity.INFO, file="src/nav.rs", line=8, column=2),
        ),
        file_errors=(FileError(file="src/broken.rs", message="Failed to parse src/broken.rs: Unclosed <div> element",
                               line=4, column=5),),
        files_checked=2,
    )


def test_exit_codes(summary):
    assert ReportController(summary).exit_code() == 1
    assert ReportController(LintSummary()).exit_code() == 0

    warnings_only = LintSummary(diagnostics=(_diag(RuleId.ANCHOR_IS_VALID, Severity.WARNING),))
    assert ReportController(warnings_only).exit_code() == 0
    assert ReportController(warnings_only).exit_code(fail_on_warning=True) == 1

    infos_only = LintSummary(diagnostics=(_diag(RuleId.PREFER_TAG_OVER_ROLE, Severity.INFO),))
    assert ReportController(infos_only).exit_code(fail_on_warning=True) == 0


def test_file_errors_fail_the_run():
    only_errors = LintSummary(file_errors=(FileError(file="a.rs", message="Failed to read a.rs: gone"),))
    assert ReportController(only_errors).exit_code() == 1


def test_format_diagnostic(summary):
    text = ReportController.format_diagnostic(summary.diagnostics[0])
    assert text == (
        "error: <img> element is missing an `alt` attribute. [alt-text]\n"
        "  --> src/app.rs:3:9\n"
        "  help: Fix it."
    )


def test_format_file_error_without_position():
    text = ReportController.format_file_error(FileError(file="a.rs", message="Failed to read a.rs: gone"))
    assert text == "error: Failed to read a.rs: gone\n  --> a.rs"


def test_pretty_report(summary):
    text = ReportController(summary, duration=0.5).render_pretty()

    assert "Checked 2 file(s) in 0.50s. Found 1 error(s), 2 warning(s), 1 info(s)." in text
    assert "Some issues must be fixed for accessibility compliance." in text
    # Files appear in sorted order, the file error first.
    assert text.index("src/app.rs:3:9") < text.index("src/broken.rs:4:5") < text.index("src/nav.rs:2:4")
    assert "=" * 60 in text
    assert "anchor-is-valid" in text.split("=" * 60)[1]


def test_quiet_report_only_shows_errors(summary):
    text = ReportController(summary).render_pretty(quiet=True)

    assert "[alt-text]" in text
    assert "[anchor-is-valid]" not in text
    assert "src/broken.rs:4:5" in text
    assert "=" * 60 not in text


@pytest.mark.parametrize("diagnostics, verdict", [
    ((), "No accessibility issues found!"),
    ((_diag(RuleId.ANCHOR_IS_VALID, Severity.WARNING),), "Consider addressing warnings to improve accessibility."),
    ((_diag(RuleId.ALT_TEXT, Severity.ERROR),), "Some issues must be fixed for accessibility compliance."),
])
def test_verdict(diagnostics, verdict):
    assert ReportController(LintSummary(diagnostics=diagnostics)).verdict() == verdict


def test_json_report(summary):
    data = json.loads(ReportController(summary).render_json())

    assert data["files_checked"] == 2
    assert data["counts"] == {"errors": 1, "warnings": 2, "infos": 1}
    assert data["diagnostics"][0] == {
        "rule": "alt-text",
        "severity": "error",
        "message": "<img> element is missing an `alt` attribute.",
        "help": "Fix it.",
        "file": "src/app.rs",
        "line": 3,
        "column": 9,
        "element": "div",
    }
    assert data["file_errors"] == [{
        "file": "src/broken.rs",
        "message": "Failed to parse src/broken.rs: Unclosed <div> element",
        "line": 4,
        "column": 5,
    }]


def test_rule_breakdown_orders_by_severity_then_count(summary):
    breakdown = ReportController(summary).rule_breakdown()

    assert list(breakdown.itertuples(index=False, name=None)) == [
        ("error", "alt-text", 1),
        ("warning", "anchor-is-valid", 2),
        ("info", "prefer-tag-over-role", 1),
    ]


def test_empty_breakdown():
    assert ReportController(LintSummary()).rule_breakdown().empty


def test_export_csv(summary, tmp_path):
    out = ReportController(summary).export_csv(tmp_path / "reports" / "a11y")

    assert out == tmp_path / "reports" / "a11y.csv"
    df = pd.read_csv(out)
    assert list(df.columns) == EXPORT_COLUMNS
    assert len(df) == 4
    assert df.loc[0, "rule"] == "alt-text"
