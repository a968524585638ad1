# src/rsx_auditor/aria/elements.py
from types import MappingProxyType
from typing import Mapping, Optional

from rsx_auditor.dom.core import ElementNode
from .attributes import parse_integer

HTML_TAGS = frozenset({
    "a", "abbr", "address", "area", "article", "aside", "audio", "b", "base", "bdi", "bdo",
    "blink", "blockquote", "body", "br", "button", "canvas", "caption", "cite", "code", "col",
    "colgroup", "data", "datalist", "dd", "del", "details", "dfn", "dialog", "div", "dl", "dt",
    "em", "embed", "fieldset", "figcaption", "figure", "footer", "form", "h1", "h2", "h3", "h4",
    "h5", "h6", "head", "header", "hgroup", "hr", "html", "i", "iframe", "img", "input", "ins",
    "kbd", "label", "legend", "li", "link", "main", "map", "mark", "marquee", "math", "menu",
    "meta", "meter", "nav", "noscript", "object", "ol", "optgroup", "option", "output", "p",
    "param", "picture", "pre", "progress", "q", "rp", "rt", "ruby", "s", "samp", "script",
    "search", "section", "select", "slot", "small", "source", "span", "strong", "style", "sub",
    "summary", "sup", "svg", "table", "tbody", "td", "template", "textarea", "tfoot", "th",
    "thead", "time", "title", "tr", "track", "u", "ul", "var", "video", "wbr",
})

VOID_TAGS = frozenset({
    "area", "base", "br", "col", "embed", "hr", "img", "input", "link", "meta", "param",
    "source", "track", "wbr",
})

# Elements that are interactive without any role, subject to the attribute
# conditions applied in is_interactive_element().
INTERACTIVE_TAGS = frozenset({
    "a", "area", "audio", "button", "details", "embed", "iframe", "input", "select", "summary",
    "textarea", "video",
})

ARIA_UNSUPPORTED_TAGS = frozenset({"base", "head", "html", "meta", "script", "style", "title"})

HEADING_TAGS = frozenset({"h1", "h2", "h3", "h4", "h5", "h6"})

DISTRACTING_TAGS = frozenset({"marquee", "blink"})

LABELABLE_CONTROL_TAGS = frozenset({"button", "input", "meter", "output", "progress", "select", "textarea"})

_FIXED_IMPLICIT_ROLES: Mapping[str, str] = MappingProxyType({
    "address": "group",
    "article": "article",
    "aside": "complementary",
    "blockquote": "blockquote",
    "body": "document",
    "button": "button",
    "caption": "caption",
    "code": "code",
    "datalist": "listbox",
    "dd": "definition",
    "del": "deletion",
    "details": "group",
    "dfn": "term",
    "dialog": "dialog",
    "dt": "term",
    "em": "emphasis",
    "fieldset": "group",
    "figure": "figure",
    "footer": "contentinfo",
    "form": "form",
    "h1": "heading", "h2": "heading", "h3": "heading",
    "h4": "heading", "h5": "heading", "h6": "heading",
    "header": "banner",
    "hgroup": "group",
    "hr": "separator",
    "ins": "insertion",
    "li": "listitem",
    "main": "main",
    "math": "math",
    "menu": "list",
    "meter": "meter",
    "nav": "navigation",
    "ol": "list",
    "optgroup": "group",
    "option": "option",
    "output": "status",
    "p": "paragraph",
    "progress": "progressbar",
    "search": "search",
    "section": "region",
    "strong": "strong",
    "sub": "subscript",
    "summary": "button",
    "sup": "superscript",
    "table": "table",
    "tbody": "rowgroup",
    "td": "cell",
    "textarea": "textbox",
    "tfoot": "rowgroup",
    "th": "columnheader",
    "thead": "rowgroup",
    "time": "time",
    "tr": "row",
    "ul": "list",
})

_INPUT_ROLES: Mapping[str, Optional[str]] = MappingProxyType({
    "button": "button",
    "image": "button",
    "reset": "button",
    "submit": "button",
    "checkbox": "checkbox",
    "radio": "radio",
    "range": "slider",
    "number": "spinbutton",
    "search": "searchbox",
    "email": "textbox",
    "tel": "textbox",
    "text": "textbox",
    "url": "textbox",
})

_TEXT_INPUT_TYPES = frozenset({"email", "search", "tel", "text", "url"})


def is_known_tag(tag: str) -> bool:
    return tag in HTML_TAGS


def _input_role(node: ElementNode) -> Optional[str]:
    type_attr = node.get_attribute("type")
    if type_attr is None:
        input_type = "text"
    elif type_attr.is_dynamic:
        return None
    else:
        input_type = (type_attr.literal or "text").strip().lower() or "text"

    if input_type in _TEXT_INPUT_TYPES and node.has_attribute("list"):
        return "combobox"
    return _INPUT_ROLES.get(input_type)


def implicit_role_of(node: ElementNode) -> Optional[str]:
    """
    The built-in role of an element, or None when it has none (<div>, <span>)
    or when the deciding attribute is dynamic.
    """
    tag = node.tag_lower

    if tag in ("a", "area"):
        return "link" if node.has_attribute("href") else None
    if tag == "img":
        alt = node.get_attribute("alt")
        if alt is not None and alt.literal == "":
            return "presentation"
        return "img"
    if tag == "input":
        return _input_role(node)
    if tag == "select":
        if node.has_attribute("multiple"):
            return "listbox"
        size = node.get_attribute("size")
        if size is not None:
            if size.is_dynamic:
                return None
            parsed = parse_integer(size.literal or "")
            if parsed is not None and parsed > 1:
                return "listbox"
        return "combobox"

    return _FIXED_IMPLICIT_ROLES.get(tag)


def is_hidden_input(node: ElementNode) -> bool:
    return node.tag_lower == "input" and (node.literal_value("type") or "").strip().lower() == "hidden"


def is_interactive_element(node: ElementNode) -> bool:
    """True for natively interactive elements (links with href, form controls, media with controls)."""
    tag = node.tag_lower
    if tag not in INTERACTIVE_TAGS:
        return False
    if tag in ("a", "area"):
        return node.has_attribute("href")
    if tag in ("audio", "video"):
        return node.has_attribute("controls")
    if tag == "input":
        return not is_hidden_input(node)
    return True


def is_focusable_by_default(node: ElementNode) -> bool:
    """
    Natively focusable elements and elements with a literal non-negative tabindex.
    A dynamic tabindex does not make an element provably focusable.
    """
    tabindex = node.get_attribute("tabindex")
    if tabindex is not None and not tabindex.is_dynamic:
        parsed = parse_integer(tabindex.literal or "")
        if parsed is not None:
            return parsed >= 0

    tag = node.tag_lower
    if tag in ("button", "input", "select", "textarea"):
        return not node.has_attribute("disabled") and not is_hidden_input(node)
    if tag == "summary":
        return True
    return is_interactive_element(node)
