from typing import List, Tuple

from rsx_auditor.aria.elements import LABELABLE_CONTROL_TAGS
from rsx_auditor.aria.knowledge_base import AriaKnowledgeBase
from rsx_auditor.model import RuleId, Severity
from ..core import ElementNode, Finding, RuleSet, rule_spec
from ..semantics import has_accessible_content, has_aria_label, has_title, is_hidden_from_screen_reader

AUTOCOMPLETE_TAGS = frozenset({"input", "select", "textarea"})

# Controls whose text content is their label.
CONTENT_LABELLED_TAGS = frozenset({"button", "meter", "output", "progress"})

# Input types that render a default label ("Submit", "Reset") or take it from `value`.
BUTTON_INPUT_TYPES = frozenset({"submit", "reset", "button"})


def _nests_control(label: ElementNode, kb: AriaKnowledgeBase) -> bool:
    for descendant in label.iter_descendants():
        if descendant.tag_lower in LABELABLE_CONTROL_TAGS:
            return True
        # Framework components may render the control.
        if not kb.is_known_tag(descendant.tag):
            return True
    return False


def _input_is_labelled(node: ElementNode) -> bool:
    type_attr = node.get_attribute("type")
    if type_attr is None:
        return False
    if type_attr.is_dynamic:
        return True
    input_type = (type_attr.literal or "").strip().lower()
    if input_type in BUTTON_INPUT_TYPES:
        return input_type != "button" or node.has_attribute("value")
    if input_type == "image":
        return node.has_attribute("alt")
    return False


# --- RULES ---

@rule_spec(
    rule_id=RuleId.AUTOCOMPLETE_VALID,
    severity=Severity.ERROR,
    description="Enforce that autocomplete attributes are used correctly.",
    help="Use a valid autocomplete value such as \"name\", \"email\", \"username\", \"current-password\", "
         "\"street-address\" or \"off\", optionally prefixed by a `section-*` and a "
         "\"shipping\"/\"billing\" token.",
    references=[
        "https://www.w3.org/WAI/WCAG21/Understanding/identify-input-purpose",
        "https://dequeuniversity.com/rules/axe/3.2/autocomplete-valid",
        "https://html.spec.whatwg.org/multipage/form-control-infrastructure.html#autofill",
    ],
)
def check_autocomplete_valid(node: ElementNode, ancestors: Tuple[ElementNode, ...],
                             kb: AriaKnowledgeBase) -> List[Finding]:
    if node.tag_lower not in AUTOCOMPLETE_TAGS:
        return []
    attr = node.get_attribute("autocomplete")
    if attr is None:
        return []
    result = kb.validate_attribute_value("autocomplete", attr.value)
    if not result.is_invalid:
        return []
    return [(
        f"Invalid `autocomplete` value \"{attr.literal}\" on <{node.tag}>: {result.reason}.",
        attr.line, attr.column,
    )]


@rule_spec(
    rule_id=RuleId.CONTROL_HAS_ASSOCIATED_LABEL,
    severity=Severity.WARNING,
    description="Enforce that a control (an interactive element) has a text label.",
    help="Add an `aria-label`, `aria-labelledby` or `title` attribute, wrap the control in a <label>, "
         "or give it an `id` referenced by a <label for=...>.",
    references=[
        "https://www.w3.org/WAI/WCAG21/Understanding/info-and-relationships",
        "https://www.w3.org/WAI/WCAG21/Understanding/labels-or-instructions",
        "https://www.w3.org/WAI/WCAG21/Understanding/name-role-value",
    ],
)
def check_control_has_associated_label(node: ElementNode, ancestors: Tuple[ElementNode, ...],
                                       kb: AriaKnowledgeBase) -> List[Finding]:
    tag = node.tag_lower
    if tag not in LABELABLE_CONTROL_TAGS or is_hidden_from_screen_reader(node):
        return []
    if has_aria_label(node) or has_title(node):
        return []
    if tag in CONTENT_LABELLED_TAGS and has_accessible_content(node):
        return []
    if tag == "input" and _input_is_labelled(node):
        return []
    # A <label for> elsewhere may point at this id.
    if node.has_attribute("id") or any(a.tag_lower == "label" for a in ancestors):
        return []
    return [(
        f"<{node.tag}> element has no associated label. Interactive controls must have a text label.",
        node.line, node.column,
    )]


@rule_spec(
    rule_id=RuleId.LABEL_HAS_ASSOCIATED_CONTROL,
    severity=Severity.WARNING,
    description="Enforce that a label tag has a text label and an associated control.",
    help="Give the label text, and add a `for` attribute linking to a form control's `id` "
         "or nest the form control inside the label.",
    references=[
        "https://www.w3.org/WAI/WCAG21/Understanding/info-and-relationships",
        "https://www.w3.org/WAI/WCAG21/Understanding/labels-or-instructions",
        "https://www.w3.org/WAI/WCAG21/Understanding/name-role-value",
    ],
)
def check_label_has_associated_control(node: ElementNode, ancestors: Tuple[ElementNode, ...],
                                       kb: AriaKnowledgeBase) -> List[Finding]:
    if node.tag_lower != "label":
        return []
    if not (has_accessible_content(node) or has_aria_label(node)):
        return [("<label> element has no text content.", node.line, node.column)]
    if node.has_attribute("for") or _nests_control(node, kb):
        return []
    return [("<label> element has no associated form control.", node.line, node.column)]


# --- DEFINITION ---
DEFINITION = RuleSet(
    name="forms",
    rules=[check_autocomplete_valid, check_control_has_associated_label, check_label_has_associated_control],
)
