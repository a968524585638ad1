import json
import logging
from pathlib import Path
from typing import Dict, List, Union

import pandas as pd

from rsx_auditor.model import Diagnostic, FileError, LintSummary, Severity

logger = logging.getLogger(__name__)

SEVERITY_ORDER = {Severity.ERROR.value: 0, Severity.WARNING.value: 1, Severity.INFO.value: 2}

EXPORT_COLUMNS = ["file", "line", "column", "severity", "rule", "element", "message", "help"]


def _plural(count: int, word: str) -> str:
    return f"{count} {word}(s)"


class ReportController:
    """
    Renders a LintSummary for humans (pretty), for machines (JSON) and as a flat
    table (CSV export), and derives the process exit status from it.
    """

    def __init__(self, summary: LintSummary, duration: float = 0.0):
        self.summary = summary
        self.duration = duration

    # --- EXIT STATUS ---

    def exit_code(self, fail_on_warning: bool = False) -> int:
        if self.summary.has_errors() or self.summary.file_errors:
            return 1
        if fail_on_warning and self.summary.has_warnings():
            return 1
        return 0

    # --- PRETTY ---

    @staticmethod
    def format_diagnostic(diagnostic: Diagnostic) -> str:
        return "\n".join([
            f"{diagnostic.severity.value}: {diagnostic.message} [{diagnostic.rule.value}]",
            f"  --> {diagnostic.file}:{diagnostic.line}:{diagnostic.column}",
            f"  help: {diagnostic.help}",
        ])

    @staticmethod
    def format_file_error(error: FileError) -> str:
        location = error.file
        if error.line is not None:
            location += f":{error.line}"
            if error.column is not None:
                location += f":{error.column}"
        return f"error: {error.message}\n  --> {location}"

    def _blocks(self, quiet: bool) -> List[str]:
        """File errors first, then diagnostics, grouped per file in file order."""
        diagnostics = self.summary.diagnostics
        if quiet:
            diagnostics = self.summary.by_severity(Severity.ERROR)

        by_file: Dict[str, List[str]] = {}
        for error in self.summary.file_errors:
            by_file.setdefault(error.file, []).append(self.format_file_error(error))
        for diagnostic in diagnostics:
            by_file.setdefault(diagnostic.file, []).append(self.format_diagnostic(diagnostic))

        return [block for file in sorted(by_file) for block in by_file[file]]

    def summary_line(self) -> str:
        counts = self.summary.counts
        return (
            f"Checked {_plural(self.summary.files_checked, 'file')} in {self.duration:.2f}s. "
            f"Found {_plural(counts.errors, 'error')}, {_plural(counts.warnings, 'warning')}, "
            f"{_plural(counts.infos, 'info')}."
        )

    def verdict(self) -> str:
        if self.summary.has_errors():
            return "Some issues must be fixed for accessibility compliance."
        if self.summary.has_warnings():
            return "Consider addressing warnings to improve accessibility."
        return "No accessibility issues found!"

    def render_pretty(self, quiet: bool = False) -> str:
        lines: List[str] = []
        for block in self._blocks(quiet):
            lines.append(block)
            lines.append("")

        lines.append(self.summary_line())
        lines.append(self.verdict())

        breakdown = self.rule_breakdown()
        if not quiet and not breakdown.empty:
            lines.append("")
            lines.append("=" * 60)
            lines.append(f"{'SEVERITY':<8} | {'RULE':<45} | {'COUNT':>5}")
            lines.append("-" * 60)
            for severity, rule, count in breakdown.itertuples(index=False, name=None):
                lines.append(f"{severity:<8} | {rule:<45} | {count:>5}")
            lines.append("=" * 60)
        return "\n".join(lines)

    # --- JSON ---

    def to_dict(self) -> dict:
        counts = self.summary.counts
        return {
            "files_checked": self.summary.files_checked,
            "counts": {"errors": counts.errors, "warnings": counts.warnings, "infos": counts.infos},
            "diagnostics": [d.to_row() for d in self.summary.diagnostics],
            "file_errors": [e.to_row() for e in self.summary.file_errors],
        }

    def render_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False)

    # --- TABULAR ---

    def diagnostics_df(self) -> pd.DataFrame:
        rows = [d.to_row() for d in self.summary.diagnostics]
        return pd.DataFrame(rows, columns=EXPORT_COLUMNS)

    def rule_breakdown(self) -> pd.DataFrame:
        """Count per (severity, rule), most severe first, then by descending count."""
        df = self.diagnostics_df()
        if df.empty:
            return pd.DataFrame(columns=["severity", "rule", "count"])

        breakdown = df.groupby(["severity", "rule"]).size().reset_index(name="count")
        breakdown["_order"] = breakdown["severity"].map(SEVERITY_ORDER)
        breakdown = breakdown.sort_values(["_order", "count", "rule"], ascending=[True, False, True])
        return breakdown.drop(columns="_order").reset_index(drop=True)

    def export_csv(self, path: Union[str, Path]) -> Path:
        out_path = Path(path)
        if out_path.suffix.lower() != ".csv":
            out_path = out_path.with_suffix(".csv")
        out_path.parent.mkdir(parents=True, exist_ok=True)
        self.diagnostics_df().to_csv(out_path, index=False)
        logger.info(f"Exported {len(self.summary.diagnostics)} diagnostic(s) to {out_path}")
        return out_path
