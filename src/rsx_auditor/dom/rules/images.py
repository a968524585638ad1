import re
from typing import List, Tuple

from rsx_auditor.aria.knowledge_base import AriaKnowledgeBase
from rsx_auditor.model import RuleId, Severity
from ..core import ElementNode, Finding, RuleSet, rule_spec
from ..semantics import has_accessible_content, has_aria_label, has_title, is_aria_hidden

REDUNDANT_ALT_WORDS = ("image", "picture", "photo", "icon", "graphic")
_REDUNDANT_ALT = re.compile(r"\b(" + "|".join(REDUNDANT_ALT_WORDS) + r")s?\b", re.IGNORECASE)


def _is_presentational(node: ElementNode) -> bool:
    tokens = (node.literal_value("role") or "").lower().split()
    return "presentation" in tokens or "none" in tokens


# --- RULES ---

@rule_spec(
    rule_id=RuleId.ALT_TEXT,
    severity=Severity.ERROR,
    description="Enforce all elements that require alternative text have meaningful information "
                "to relay back to the end user.",
    help="Add an `alt` attribute with descriptive text, or `alt=\"\"` for decorative images, "
         "or `role=\"presentation\"` / `role=\"none\"`. <area> and <input type=\"image\"> may use "
         "`aria-label` / `aria-labelledby`; <object> needs a `title`, an ARIA label or text content.",
    references=[
        "https://www.w3.org/WAI/WCAG21/Understanding/non-text-content.html",
        "https://dequeuniversity.com/rules/axe/3.2/image-alt",
        "https://dequeuniversity.com/rules/axe/3.2/input-image-alt",
        "https://dequeuniversity.com/rules/axe/3.2/area-alt",
        "https://dequeuniversity.com/rules/axe/3.2/object-alt",
    ],
)
def check_alt_text(node: ElementNode, ancestors: Tuple[ElementNode, ...],
                   kb: AriaKnowledgeBase) -> List[Finding]:
    tag = node.tag_lower
    has_alt = node.has_attribute("alt")

    if tag == "img":
        if has_alt or has_aria_label(node) or node.is_dynamic("role") or _is_presentational(node):
            return []
        return [("<img> element is missing an `alt` attribute.", node.line, node.column)]

    if tag == "area":
        if has_alt or has_aria_label(node):
            return []
        return [("<area> element is missing an `alt` attribute.", node.line, node.column)]

    if tag == "input":
        input_type = node.get_attribute("type")
        if input_type is None or input_type.is_dynamic:
            return []
        if (input_type.literal or "").strip().lower() != "image" or has_alt or has_aria_label(node):
            return []
        return [("<input type=\"image\"> element is missing an `alt` attribute.", node.line, node.column)]

    if tag == "object":
        if has_title(node) or has_aria_label(node) or has_accessible_content(node):
            return []
        return [("<object> element is missing alternative text.", node.line, node.column)]

    return []


@rule_spec(
    rule_id=RuleId.IMG_REDUNDANT_ALT,
    severity=Severity.WARNING,
    description="Enforce <img> alt text does not contain the words \"image\", \"picture\", \"photo\", "
                "\"icon\" or \"graphic\".",
    help="Describe what the image shows instead of stating that it is an image.",
    references=["https://webaim.org/techniques/alttext/"],
)
def check_img_redundant_alt(node: ElementNode, ancestors: Tuple[ElementNode, ...],
                            kb: AriaKnowledgeBase) -> List[Finding]:
    if node.tag_lower != "img" or is_aria_hidden(node):
        return []
    alt = node.get_attribute("alt")
    if alt is None or alt.is_dynamic:
        return []

    match = _REDUNDANT_ALT.search(alt.literal or "")
    if not match:
        return []
    word = match.group(1).lower()
    return [(
        f"<img> alt text contains the redundant word \"{word}\". "
        f"Screen readers already announce images as images.",
        alt.line, alt.column,
    )]


# --- DEFINITION ---
DEFINITION = RuleSet(
    name="images",
    rules=[check_alt_text, check_img_redundant_alt],
)
