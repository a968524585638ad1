# tests/core/test_cli.py
import json

import pytest

from rsx_a11y.cli import EXIT_CONFIG_ERROR, build_arg_parser, main


@pytest.fixture
def clean_project(tmp_path):
    src = tmp_path / "src"
    src.mkdir()
    (src / "app.rs").write_text(
        'fn app() -> Html { html! { <main><h1>{"Hello"}</h1></main> } }', encoding="utf-8"
    )
    return tmp_path


@pytest.fixture
def broken_project(tmp_path):
    src = tmp_path / "src"
    src.mkdir()
    (src / "logo.rs").write_text('fn logo() -> Html { html! { <img src="logo.png" /> } }', encoding="utf-8")
    (src / "menu.rs").write_text('fn menu() -> Html { html! { <a href="/x">{"here"}</a> } }', encoding="utf-8")
    return tmp_path


def test_defaults():
    args = build_arg_parser().parse_args([])
    assert args.path == "."
    assert args.format is None
    assert not args.quiet


def test_clean_project_exits_zero(clean_project, capsys):
    assert main([str(clean_project), "--no-progress"]) == 0

    out = capsys.readouterr().out
    assert "Checked 1 file(s)" in out
    assert "No accessibility issues found!" in out


def test_errors_exit_one(broken_project, capsys):
    assert main([str(broken_project)]) == 1

    out = capsys.readouterr().out
    assert "[alt-text]" in out
    assert "[anchor-ambiguous-text]" in out


def test_warnings_only_exit_zero_unless_asked(broken_project):
    assert main([str(broken_project), "--skip", "alt-text"]) == 0
    assert main([str(broken_project), "--skip", "alt-text", "--fail-on-warning"]) == 1


def test_json_output(broken_project, capsys):
    assert main([str(broken_project), "--format", "json"]) == 1

    data = json.loads(capsys.readouterr().out)
    assert data["counts"] == {"errors": 1, "warnings": 1, "infos": 0}
    assert [d["rule"] for d in data["diagnostics"]] == ["alt-text", "anchor-ambiguous-text"]
    assert data["diagnostics"][0]["file"].endswith("src/logo.rs")


def test_only_filters_rules(broken_project, capsys):
    assert main([str(broken_project), "--format", "json", "--only", "anchor-ambiguous-text"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert [d["rule"] for d in data["diagnostics"]] == ["anchor-ambiguous-text"]


def test_unknown_rule_is_a_configuration_error(broken_project, capsys):
    assert main([str(broken_project), "--only", "alt-txt"]) == EXIT_CONFIG_ERROR
    assert "alt-txt" in capsys.readouterr().err


def test_missing_path_is_a_configuration_error(tmp_path, capsys):
    assert main([str(tmp_path / "nope")]) == EXIT_CONFIG_ERROR
    assert "Path does not exist" in capsys.readouterr().err


def test_workers_must_be_positive(clean_project):
    assert main([str(clean_project), "--workers", "0"]) == EXIT_CONFIG_ERROR


def test_list_rules(capsys):
    assert main(["--list-rules"]) == 0

    lines = capsys.readouterr().out.strip().splitlines()
    assert len(lines) == 36
    assert lines[0].startswith("alt-text")
    assert "error" in lines[0]


def test_parse_failures_are_reported_and_fail_the_run(tmp_path, capsys):
    (tmp_path / "broken.rs").write_text("html! { <div> }", encoding="utf-8")
    (tmp_path / "ok.rs").write_text('html! { <p>{"fine"}</p> }', encoding="utf-8")

    assert main([str(tmp_path)]) == 1
    out = capsys.readouterr().out
    assert "Unclosed <div> element" in out
    assert "broken.rs:1:9" in out


def test_out_file_and_export(broken_project, tmp_path, capsys):
    report = tmp_path / "out" / "report.json"
    report.parent.mkdir()
    export = tmp_path / "out" / "diagnostics"

    code = main([str(broken_project), "--format", "json", "--out-file", str(report), "--export", str(export)])

    assert code == 1
    assert json.loads(report.read_text(encoding="utf-8"))["counts"]["errors"] == 1
    assert (tmp_path / "out" / "diagnostics.csv").is_file()
    err = capsys.readouterr().err
    assert "Report written to" in err
    assert "Diagnostics exported to" in err


def test_settings_file_overrides(broken_project, tmp_path, capsys):
    settings = tmp_path / "a11y.json"
    settings.write_text(json.dumps({"lint": {"skip": ["alt-text"]}, "output": {"format": "json"}}))

    try:
        assert main([str(broken_project), "--settings", str(settings)]) == 0
        data = json.loads(capsys.readouterr().out)
        assert [d["rule"] for d in data["diagnostics"]] == ["anchor-ambiguous-text"]
    finally:
        from rsx_a11y.core.managers.config_manager import config_manager
        config_manager.reset()


def test_bad_settings_file(broken_project, tmp_path, capsys):
    settings = tmp_path / "bad.json"
    settings.write_text("{nope")

    assert main([str(broken_project), "--settings", str(settings)]) == EXIT_CONFIG_ERROR
    assert "Could not load settings file" in capsys.readouterr().err


def test_set_overrides_a_setting(broken_project, capsys):
    try:
        assert main([str(broken_project), "--set", "lint.skip=alt-text", "--set", "output.format=json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert [d["rule"] for d in data["diagnostics"]] == ["anchor-ambiguous-text"]
    finally:
        from rsx_a11y.core.managers.config_manager import config_manager
        config_manager.reset()


@pytest.mark.parametrize("override", ["lint.workers", "lint.workers=many", "=1"])
def test_bad_set_override(broken_project, capsys, override):
    try:
        assert main([str(broken_project), "--set", override]) == EXIT_CONFIG_ERROR
        assert "invalid setting override" in capsys.readouterr().err
    finally:
        from rsx_a11y.core.managers.config_manager import config_manager
        config_manager.reset()
