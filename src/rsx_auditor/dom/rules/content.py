from typing import List, Tuple

from rsx_auditor.aria.elements import DISTRACTING_TAGS
from rsx_auditor.aria.knowledge_base import AriaKnowledgeBase
from rsx_auditor.model import RuleId, Severity
from ..core import ElementNode, Finding, RuleSet, rule_spec
from ..semantics import has_accessible_content, has_aria_label, has_title, is_aria_hidden

MEDIA_TAGS = frozenset({"audio", "video"})


def _has_caption_track(node: ElementNode) -> bool:
    for child in node.element_children:
        if child.tag_lower != "track":
            continue
        kind = child.get_attribute("kind")
        if kind is not None and (kind.is_dynamic or (kind.literal or "").strip().lower() == "captions"):
            return True
    return False


def _hidden_or_unknown(node: ElementNode) -> bool:
    return is_aria_hidden(node) or node.is_dynamic("aria-hidden")


# --- RULES ---

@rule_spec(
    rule_id=RuleId.HEADING_HAS_CONTENT,
    severity=Severity.WARNING,
    description="Enforce heading (h1, h2, etc) elements contain accessible content.",
    help="Add text content or an `aria-label` attribute.",
    references=[
        "https://www.w3.org/TR/UNDERSTANDING-WCAG20/navigation-mechanisms-descriptive.html",
        "https://dequeuniversity.com/rules/axe/3.2/empty-heading",
    ],
)
def check_heading_has_content(node: ElementNode, ancestors: Tuple[ElementNode, ...],
                              kb: AriaKnowledgeBase) -> List[Finding]:
    if not kb.is_heading_tag(node.tag) or _hidden_or_unknown(node):
        return []
    if has_accessible_content(node) or has_aria_label(node):
        return []
    return [(
        f"<{node.tag}> element appears to be empty. "
        f"Headings must have text content accessible to screen readers.",
        node.line, node.column,
    )]


@rule_spec(
    rule_id=RuleId.IFRAME_HAS_TITLE,
    severity=Severity.WARNING,
    description="Enforce iframe elements have a title attribute.",
    help="Add a `title` attribute that describes the iframe content.",
    references=[
        "https://www.w3.org/WAI/WCAG21/Understanding/bypass-blocks",
        "https://www.w3.org/WAI/WCAG21/Understanding/name-role-value",
        "https://dequeuniversity.com/rules/axe/3.2/frame-title",
    ],
)
def check_iframe_has_title(node: ElementNode, ancestors: Tuple[ElementNode, ...],
                           kb: AriaKnowledgeBase) -> List[Finding]:
    if node.tag_lower != "iframe":
        return []
    if has_title(node) or has_aria_label(node) or _hidden_or_unknown(node):
        return []
    return [("<iframe> element is missing a `title` attribute.", node.line, node.column)]


@rule_spec(
    rule_id=RuleId.MEDIA_HAS_CAPTION,
    severity=Severity.WARNING,
    description="Enforces that <audio> and <video> elements must have a <track> for captions.",
    help="Add a <track kind=\"captions\"> child element, or use `aria-label` / `aria-labelledby` "
         "for descriptive text.",
    references=[
        "https://www.w3.org/WAI/WCAG21/Understanding/captions-prerecorded.html",
        "https://dequeuniversity.com/rules/axe/2.1/audio-caption",
        "https://dequeuniversity.com/rules/axe/2.1/video-caption",
    ],
)
def check_media_has_caption(node: ElementNode, ancestors: Tuple[ElementNode, ...],
                            kb: AriaKnowledgeBase) -> List[Finding]:
    if node.tag_lower not in MEDIA_TAGS:
        return []
    if node.has_attribute("muted") or _hidden_or_unknown(node):
        return []
    if has_aria_label(node) or _has_caption_track(node):
        return []
    return [(f"<{node.tag}> elements must have captions for accessibility.", node.line, node.column)]


@rule_spec(
    rule_id=RuleId.NO_DISTRACTING_ELEMENTS,
    severity=Severity.ERROR,
    description="Enforce distracting elements are not used.",
    help="Use CSS animations or transitions instead.",
    references=[
        "https://www.w3.org/WAI/WCAG21/Understanding/pause-stop-hide",
        "https://dequeuniversity.com/rules/axe/3.2/marquee",
        "https://dequeuniversity.com/rules/axe/3.2/blink",
    ],
)
def check_no_distracting_elements(node: ElementNode, ancestors: Tuple[ElementNode, ...],
                                  kb: AriaKnowledgeBase) -> List[Finding]:
    if node.tag_lower not in DISTRACTING_TAGS:
        return []
    return [(
        f"<{node.tag}> elements are distracting and should not be used. They can cause accessibility "
        f"issues for users with visual or cognitive disabilities.",
        node.line, node.column,
    )]


# --- DEFINITION ---
DEFINITION = RuleSet(
    name="content",
    rules=[check_heading_has_content, check_iframe_has_title, check_media_has_caption,
           check_no_distracting_elements],
)
