# tests/conftest.py
import textwrap

import pytest

from rsx_auditor.aria.knowledge_base import build_knowledge_base
from rsx_auditor.dom.qngine import QNGINE
from rsx_auditor.dom.registry import RuleRegistry
from rsx_parser.services.macro_parse_service import MacroParseService


def as_component(markup: str, macro: str = "html") -> str:
    """Wraps a markup snippet in a minimal component function."""
    body = textwrap.indent(textwrap.dedent(markup).strip(), " " * 8)
    return f"fn view() -> Html {{\n    {macro}! {{\n{body}\n    }}\n}}\n"


@pytest.fixture
def kb():
    """The shared ARIA knowledge base."""
    return build_knowledge_base()


@pytest.fixture
def parse():
    """Parses a full Rust source string into root elements."""
    service = MacroParseService()
    return lambda source: service.parse(source, "test.rs")


@pytest.fixture
def lint(kb):
    """
    Lints a markup snippet as if it were the body of an html! macro.
    Pass `only` to restrict the run to some rules.
    """
    service = MacroParseService()

    def _lint(markup, only=None, skip=None, macro="html"):
        roots = service.parse(as_component(markup, macro), "test.rs")
        enabled = RuleRegistry.resolve_enabled(only, skip)
        return QNGINE(knowledge_base=kb, enabled=enabled).run(roots, "test.rs")

    return _lint


@pytest.fixture
def rule_ids(lint):
    """Sorted rule identifiers reported for a markup snippet."""
    return lambda markup, only=None: sorted(d.rule.value for d in lint(markup, only=only))
