import re
from typing import List, Optional, Tuple

from rsx_auditor.aria.knowledge_base import AriaKnowledgeBase
from rsx_auditor.model import RuleId, Severity
from ..core import ElementNode, Finding, RuleSet, rule_spec
from ..semantics import accessible_text, has_accessible_content, has_aria_label, has_title

AMBIGUOUS_LINK_PHRASES = frozenset({"click here", "here", "link", "a link", "learn more"})

_PUNCTUATION = re.compile(r"[.,:;!?'\"()\[\]{}…-]+")


def _normalize(text: str) -> str:
    return " ".join(_PUNCTUATION.sub(" ", text.lower()).split())


def _is_placeholder_href(value: str) -> bool:
    href = value.strip().lower()
    return href in ("", "#") or href.startswith("javascript:")


# --- RULES ---

@rule_spec(
    rule_id=RuleId.ANCHOR_AMBIGUOUS_TEXT,
    severity=Severity.WARNING,
    description="Enforce <a> text to not exactly match \"click here\", \"here\", \"link\", \"a link\" "
                "or \"learn more\".",
    help="Use text that describes the purpose of the link, such as where the link goes or what it does.",
    references=[
        "https://webaim.org/techniques/hypertext/",
        "https://dequeuniversity.com/checklists/web/links",
    ],
)
def check_anchor_ambiguous_text(node: ElementNode, ancestors: Tuple[ElementNode, ...],
                                kb: AriaKnowledgeBase) -> List[Finding]:
    if node.tag_lower != "a":
        return []

    label = node.get_attribute("aria-label")
    if label is not None:
        if label.is_dynamic:
            return []
        text: Optional[str] = label.literal
        line, column = label.line, label.column
    elif node.has_attribute("aria-labelledby"):
        return []
    else:
        text = accessible_text(node)
        line, column = node.line, node.column
        if text is not None and not text.strip():
            title = node.get_attribute("title")
            if title is not None:
                text = title.literal
                line, column = title.line, title.column

    if text is None or _normalize(text) not in AMBIGUOUS_LINK_PHRASES:
        return []
    return [(
        f"<a> element has ambiguous link text \"{text.strip()}\". "
        f"Link text should be descriptive of the link's purpose.",
        line, column,
    )]


@rule_spec(
    rule_id=RuleId.ANCHOR_HAS_CONTENT,
    severity=Severity.WARNING,
    description="Enforce all anchors to contain accessible content.",
    help="Add text content or an `aria-label` attribute.",
    references=[
        "https://www.w3.org/WAI/WCAG21/Understanding/link-purpose-in-context",
        "https://www.w3.org/WAI/WCAG21/Understanding/name-role-value",
        "https://dequeuniversity.com/rules/axe/3.2/link-name",
    ],
)
def check_anchor_has_content(node: ElementNode, ancestors: Tuple[ElementNode, ...],
                             kb: AriaKnowledgeBase) -> List[Finding]:
    if node.tag_lower != "a":
        return []
    if has_accessible_content(node) or has_aria_label(node) or has_title(node):
        return []
    return [("<a> element is missing content. Links must have discernible text.", node.line, node.column)]


@rule_spec(
    rule_id=RuleId.ANCHOR_IS_VALID,
    severity=Severity.WARNING,
    description="Enforce all anchors are valid, navigable elements.",
    help="Use a meaningful `href`, or use a <button> element instead.",
    references=[
        "https://www.w3.org/WAI/WCAG21/Understanding/keyboard",
        "https://webaim.org/techniques/hypertext/",
        "https://marcysutton.com/links-vs-buttons-in-modern-web-applications/",
        "https://www.w3.org/TR/using-aria/#NOTES",
    ],
)
def check_anchor_is_valid(node: ElementNode, ancestors: Tuple[ElementNode, ...],
                          kb: AriaKnowledgeBase) -> List[Finding]:
    if node.tag_lower != "a":
        return []

    href = node.get_attribute("href")
    if href is None:
        if node.has_handler("click"):
            return [("<a> element with a click handler has no `href`. It behaves like a button.",
                     node.line, node.column)]
        return []
    if href.is_dynamic or not _is_placeholder_href(href.literal or ""):
        return []
    return [(
        f"<a> element has an invalid `href` value \"{href.literal}\". "
        f"Links must navigate to a real destination.",
        href.line, href.column,
    )]


# --- DEFINITION ---
DEFINITION = RuleSet(
    name="anchors",
    rules=[check_anchor_ambiguous_text, check_anchor_has_content, check_anchor_is_valid],
)
