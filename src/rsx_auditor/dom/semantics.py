# src/rsx_auditor/dom/semantics.py
"""
Shared predicates the rules build on: role resolution, labels and content.
"""
from enum import Enum
from typing import List, NamedTuple, Optional

from rsx_auditor.aria.knowledge_base import AriaKnowledgeBase
from .core import ElementNode, TextNode


class RoleState(str, Enum):
    ABSENT = "absent"
    DYNAMIC = "dynamic"
    KNOWN = "known"
    UNKNOWN = "unknown"


class RoleLookup(NamedTuple):
    state: RoleState
    name: Optional[str] = None


def explicit_role(node: ElementNode, kb: AriaKnowledgeBase) -> RoleLookup:
    """
    Resolves the `role` attribute. A value may list fallback roles; the first
    known concrete role wins.
    """
    attr = node.get_attribute("role")
    if attr is None:
        return RoleLookup(RoleState.ABSENT)
    if attr.is_dynamic:
        return RoleLookup(RoleState.DYNAMIC)

    tokens = (attr.literal or "").lower().split()
    if not tokens:
        return RoleLookup(RoleState.ABSENT)
    for token in tokens:
        if kb.is_known_role(token) and not kb.is_abstract_role(token):
            return RoleLookup(RoleState.KNOWN, token)
    return RoleLookup(RoleState.UNKNOWN)


def effective_role(node: ElementNode, kb: AriaKnowledgeBase) -> RoleLookup:
    """The explicit role when present, otherwise the implicit one."""
    explicit = explicit_role(node, kb)
    if explicit.state != RoleState.ABSENT:
        return explicit
    implicit = kb.implicit_role_of(node)
    if implicit is None:
        return RoleLookup(RoleState.ABSENT)
    return RoleLookup(RoleState.KNOWN, implicit)


def _has_value(node: ElementNode, name: str) -> bool:
    attr = node.get_attribute(name)
    if attr is None:
        return False
    return attr.is_dynamic or bool((attr.literal or "").strip())


def has_aria_label(node: ElementNode) -> bool:
    """aria-label or aria-labelledby with a non-blank or dynamic value."""
    return _has_value(node, "aria-label") or _has_value(node, "aria-labelledby")


def has_title(node: ElementNode) -> bool:
    return _has_value(node, "title")


def is_aria_hidden(node: ElementNode) -> bool:
    return (node.literal_value("aria-hidden") or "").strip().lower() == "true"


def is_hidden_from_screen_reader(node: ElementNode) -> bool:
    if is_aria_hidden(node):
        return True
    if node.tag_lower == "input" and (node.literal_value("type") or "").strip().lower() == "hidden":
        return True
    return False


def has_accessible_content(node: ElementNode) -> bool:
    """
    True when a child can give the element an accessible name: non-blank text,
    an interpolated expression, or an element not hidden from screen readers.
    """
    for child in node.children:
        if isinstance(child, TextNode):
            if not child.is_blank:
                return True
        elif not is_hidden_from_screen_reader(child):
            return True
    return False


def accessible_text(node: ElementNode) -> Optional[str]:
    """
    The text content a screen reader would announce, with <img alt> folded in.
    None when any part of it is only known at run time.
    """
    parts: List[str] = []

    def collect(element: ElementNode) -> bool:
        for child in element.children:
            if isinstance(child, TextNode):
                if child.dynamic:
                    return False
                parts.append(child.text)
                continue
            if is_hidden_from_screen_reader(child):
                continue
            if child.tag_lower == "img":
                alt = child.get_attribute("alt")
                if alt is not None:
                    if alt.is_dynamic:
                        return False
                    parts.append(alt.literal or "")
                continue
            if not collect(child):
                return False
        return True

    if not collect(node):
        return None
    return " ".join(" ".join(parts).split())
