# tests/auditor/test_audit_controller.py
import pytest

from rsx_auditor.controllers.audit_controller import AuditController, _worker_lint_file
from rsx_auditor.exceptions import ConfigurationError
from rsx_auditor.model import RuleId
from rsx_parser.model import ParserSettings

ALL_RULES = frozenset(RuleId)


@pytest.fixture
def sources(tmp_path):
    files = {
        "a.rs": 'fn a() -> Html { html! { <img src="a.png" /> } }',
        "b.rs": 'fn b() -> Html { html! { <div role="banana"></div> } }',
        "broken.rs": 'fn c() -> Html { html! { <div> } }',
        "plain.rs": 'fn d() -> u32 { 4 }',
    }
    paths = []
    for name, content in files.items():
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        paths.append(path)
    return paths


def test_worker_lints_one_file(sources):
    batch = _worker_lint_file(str(sources[0]), ALL_RULES, ParserSettings())

    assert batch.error is None
    assert batch.has_elements
    assert [d.rule for d in batch.diagnostics] == [RuleId.ALT_TEXT]


def test_worker_turns_parse_errors_into_file_errors(sources):
    batch = _worker_lint_file(str(sources[2]), ALL_RULES, ParserSettings())

    assert batch.diagnostics == ()
    assert batch.error.file == sources[2].as_posix()
    assert "Unclosed <div> element" in batch.error.message
    assert (batch.error.line, batch.error.column) == (1, 26)


def test_worker_reports_missing_files(tmp_path):
    batch = _worker_lint_file(str(tmp_path / "gone.rs"), ALL_RULES, ParserSettings())
    assert batch.error.message.startswith("Failed to read ")


def test_run_aggregates_all_files(sources):
    progress = []
    summary = AuditController().run(sources, ALL_RULES, progress_callback=lambda i, n: progress.append((i, n)))

    assert [d.rule for d in summary.diagnostics] == [RuleId.ALT_TEXT, RuleId.ARIA_ROLE]
    assert len(summary.file_errors) == 1
    assert summary.files_checked == 2
    assert progress == [(1, 4), (2, 4), (3, 4), (4, 4)]


def test_one_bad_file_does_not_hide_the_others(sources):
    """A parse failure only affects its own file."""
    summary = AuditController().run(sources[1:3], ALL_RULES)

    assert [d.rule for d in summary.diagnostics] == [RuleId.ARIA_ROLE]
    assert [e.file for e in summary.file_errors] == [sources[2].as_posix()]


def test_parallel_run_matches_sequential_run(sources):
    sequential = AuditController().run(sources, ALL_RULES, workers=1)
    parallel = AuditController().run(sources, ALL_RULES, workers=2)

    assert parallel == sequential


def test_workers_must_be_positive(sources):
    with pytest.raises(ConfigurationError):
        AuditController().run(sources, ALL_RULES, workers=0)


def test_run_with_no_files():
    summary = AuditController().run([], ALL_RULES)
    assert summary.diagnostics == ()
    assert summary.files_checked == 0
