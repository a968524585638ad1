# tests/parser/test_parse_controller.py
from pathlib import Path

import pytest

from rsx_auditor.exceptions import DiscoveryError, MacroParseError, SourceReadError
from rsx_parser.controllers.parse_controller import ParseController
from rsx_parser.model import ParserSettings
from rsx_parser.services.source_discovery_service import SourceDiscoveryService


@pytest.fixture
def project(tmp_path):
    """
    A small crate layout:
    src/ with Rust files and a template, build output in target/,
    a hidden directory and a vendored node_modules/.
    """
    files = {
        "src/main.rs": 'fn main() { yew::Renderer::<App>::new().render(); }',
        "src/app.rs": 'html! { <img src="a.png" /> }',
        "src/components/nav.rs": 'html! { <nav></nav> }',
        "src/templates/index.html": '<html lang="en"><body></body></html>',
        "src/notes.md": "# notes",
        "target/debug/build/out.rs": 'html! { <img /> }',
        ".cache/gen.rs": 'html! { <img /> }',
        "node_modules/pkg/lib.rs": 'html! { <img /> }',
    }
    for name, content in files.items():
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return tmp_path


def _relative(paths, root):
    return [p.relative_to(root).as_posix() for p in paths]


def test_discovery_skips_build_and_hidden_directories(project):
    found = SourceDiscoveryService().discover(project)

    assert _relative(found, project) == [
        "src/app.rs",
        "src/components/nav.rs",
        "src/main.rs",
    ]


def test_discovery_with_templates(project):
    settings = ParserSettings(include_html=True)
    found = ParseController(settings).discover(project)

    assert "src/templates/index.html" in _relative(found, project)
    assert "src/notes.md" not in _relative(found, project)


def test_discovery_of_a_single_file(project):
    path = project / "src" / "notes.md"
    assert SourceDiscoveryService().discover(path) == [path]


def test_discovery_of_missing_path(tmp_path):
    with pytest.raises(DiscoveryError, match="Path does not exist"):
        SourceDiscoveryService().discover(tmp_path / "nope")


def test_discovery_refuses_filesystem_root():
    root = Path(Path.cwd().anchor)
    with pytest.raises(DiscoveryError, match="filesystem root"):
        SourceDiscoveryService().discover(root)


def test_settings_decide_discovered_extensions():
    assert ParserSettings().discovery_extensions == (".rs",)
    assert ParserSettings(include_html=True).discovery_extensions == (".rs", ".html", ".htm")


def test_parse_file_builds_a_document(project):
    document = ParseController().parse_file(project / "src" / "app.rs")

    assert document.file.endswith("src/app.rs")
    assert document.has_elements
    assert [e.tag for e in document.iter_elements()] == ["img"]


def test_parse_file_without_markup(project):
    document = ParseController().parse_file(project / "src" / "main.rs")
    assert not document.has_elements


def test_html_files_go_through_the_template_parser(project):
    document = ParseController().parse_file(project / "src" / "templates" / "index.html")
    assert [e.tag for e in document.iter_elements()] == ["html", "body"]


def test_unreadable_file(tmp_path):
    path = tmp_path / "latin1.rs"
    path.write_bytes(b"html! { <p>caf\xe9</p> }")

    with pytest.raises(SourceReadError) as excinfo:
        ParseController().parse_file(path)
    assert str(excinfo.value).startswith("Failed to read ")


def test_parse_errors_name_the_file(tmp_path):
    path = tmp_path / "broken.rs"
    path.write_text("html! {\n    <div>\n}\n", encoding="utf-8")

    with pytest.raises(MacroParseError) as excinfo:
        ParseController().parse_file(path)

    assert str(excinfo.value) == f"Failed to parse {path.as_posix()}: Unclosed <div> element"
    assert (excinfo.value.line, excinfo.value.column) == (2, 5)
