# tests/parser/test_html_parse_service.py
from rsx_auditor.dom.core import DynamicValue, ElementNode, LiteralValue
from rsx_auditor.controllers.audit_controller import aggregate
from rsx_auditor.dom.qngine import QNGINE
from rsx_auditor.model import FileBatch
from rsx_parser.services.html_parse_service import HtmlParseService

TEMPLATE = """<!DOCTYPE html>
<html>
  <head><title>{{ page_title }}</title></head>
  <body>
    <!-- hero -->
    <img src="/hero.png" alt="{{ hero_alt }}">
    <img src="/logo.png">
    <a href="#">Click here</a>
    <p>Hello {{ user.name }}!</p>
  </body>
</html>
"""


def test_template_is_converted_to_element_trees():
    (html,) = HtmlParseService().parse(TEMPLATE, "index.html")

    assert html.tag == "html"
    assert [c.tag for c in html.element_children] == ["head", "body"]
    body = html.element_children[1]
    assert [c.tag for c in body.element_children] == ["img", "img", "a", "p"]


def test_positions_come_from_the_source():
    (html,) = HtmlParseService().parse(TEMPLATE)
    body = html.element_children[1]
    first_img = body.element_children[0]

    assert (html.line, html.column) == (2, 1)
    assert (first_img.line, first_img.column) == (6, 5)
    assert [(a.name, a.line, a.column) for a in first_img.attributes] == [("src", 6, 10), ("alt", 6, 26)]


def test_template_interpolation_is_dynamic():
    (html,) = HtmlParseService().parse(TEMPLATE)
    body = html.element_children[1]
    first_img, second_img, _, paragraph = body.element_children

    assert first_img.get_attribute("alt").value == DynamicValue()
    assert second_img.get_attribute("src").value == LiteralValue(text="/logo.png")
    assert paragraph.children[0].dynamic
    assert paragraph.children[1].text == "Hello !"


def test_template_is_linted_like_markup():
    roots = HtmlParseService().parse(TEMPLATE, "index.html")
    found = sorted((d.rule.value, d.line) for d in QNGINE().run(roots, "index.html"))

    assert found == [
        ("alt-text", 7),
        ("anchor-ambiguous-text", 8),
        ("anchor-is-valid", 8),
        ("html-has-lang", 2),
    ]


def test_boolean_attributes_are_empty_literals():
    (node,) = HtmlParseService().parse('<input type="checkbox" checked disabled>')
    assert isinstance(node, ElementNode)
    assert node.literal_value("checked") == ""
    assert node.has_attribute("disabled")


def test_fragments_without_elements():
    assert HtmlParseService().parse("just text, no tags") == []


def test_attribute_positions_across_lines():
    source = '<div\n  aria-foo="1" ARIA-BAR=\'2\'\n  hidden>x</div>'
    (div,) = HtmlParseService().parse(source)

    assert [(a.name, a.line, a.column) for a in div.attributes] == [
        ("aria-foo", 2, 3),
        ("aria-bar", 2, 16),
        ("hidden", 3, 3),
    ]


def test_each_bad_attribute_gets_its_own_diagnostic():
    roots = HtmlParseService().parse('<div aria-foo="1" aria-bar="2">x</div>', "t.html")
    diagnostics = QNGINE().run(roots, "t.html")
    summary = aggregate([FileBatch(file="t.html", diagnostics=tuple(diagnostics), has_elements=True)])

    assert [(d.rule.value, d.line, d.column) for d in summary.diagnostics] == [
        ("aria-props", 1, 6),
        ("aria-props", 1, 19),
    ]
    keys = [d.sort_key for d in summary.diagnostics]
    assert len(keys) == len(set(keys))
