from typing import List, Tuple

from rsx_auditor.aria.attributes import parse_integer
from rsx_auditor.aria.knowledge_base import AriaKnowledgeBase
from rsx_auditor.model import RuleId, Severity
from ..core import ElementNode, Finding, RuleSet, rule_spec
from ..semantics import RoleState, effective_role, is_aria_hidden

# Roles that may take focus without being widgets themselves.
FOCUSABLE_CONTAINER_ROLES = frozenset({"tabpanel"})


# --- RULES ---

@rule_spec(
    rule_id=RuleId.NO_ACCESS_KEY,
    severity=Severity.WARNING,
    description="Enforce that the accesskey prop is not used on any element to avoid complications "
                "with keyboard commands used by a screen reader.",
    help="Remove the `accesskey` attribute.",
    references=["https://webaim.org/techniques/keyboard/accesskey#spec"],
)
def check_no_access_key(node: ElementNode, ancestors: Tuple[ElementNode, ...],
                        kb: AriaKnowledgeBase) -> List[Finding]:
    attr = node.get_attribute("accesskey")
    if attr is None or attr.literal == "":
        return []
    return [(
        f"Avoid using the `accesskey` attribute on <{node.tag}>. Access keys create keyboard shortcuts "
        f"that conflict with screen reader and keyboard commands.",
        attr.line, attr.column,
    )]


@rule_spec(
    rule_id=RuleId.NO_AUTOFOCUS,
    severity=Severity.WARNING,
    description="Enforce autofocus prop is not used.",
    help="Remove the `autofocus` attribute and let users decide where to start interacting.",
    references=[
        "https://html.spec.whatwg.org/multipage/interaction.html#attr-fe-autofocus",
        "https://www.brucelawson.co.uk/2009/the-accessibility-of-html-5-autofocus/",
    ],
)
def check_no_autofocus(node: ElementNode, ancestors: Tuple[ElementNode, ...],
                       kb: AriaKnowledgeBase) -> List[Finding]:
    attr = node.get_attribute("autofocus")
    if attr is None or attr.is_dynamic or (attr.literal or "").strip().lower() == "false":
        return []
    return [(
        f"Avoid using the `autofocus` attribute on <{node.tag}>. Autofocus can reduce usability "
        f"and accessibility for sighted and non-sighted users.",
        attr.line, attr.column,
    )]


@rule_spec(
    rule_id=RuleId.TABINDEX_NO_POSITIVE,
    severity=Severity.WARNING,
    description="Enforce tabindex value is not greater than zero.",
    help="Use `tabindex=\"0\"` for focusable elements or `tabindex=\"-1\"` for programmatically "
         "focusable elements.",
    references=[
        "https://www.w3.org/WAI/WCAG21/Understanding/focus-order",
        "https://github.com/GoogleChrome/accessibility-developer-tools/wiki/Audit-Rules#ax_focus_03",
    ],
)
def check_tabindex_no_positive(node: ElementNode, ancestors: Tuple[ElementNode, ...],
                               kb: AriaKnowledgeBase) -> List[Finding]:
    attr = node.get_attribute("tabindex")
    if attr is None or attr.is_dynamic:
        return []
    value = parse_integer(attr.literal or "")
    if value is None or value <= 0:
        return []
    return [(
        f"Avoid using positive `tabindex` value ({value}) on <{node.tag}>. "
        f"This creates an unexpected tab order.",
        attr.line, attr.column,
    )]


@rule_spec(
    rule_id=RuleId.NO_NONINTERACTIVE_TABINDEX,
    severity=Severity.WARNING,
    description="Enforce tabindex should only be declared on interactive elements.",
    help="Remove the `tabindex` attribute, or add an interactive role.",
    references=[
        "https://www.w3.org/WAI/WCAG21/Understanding/keyboard",
        "https://www.w3.org/TR/wai-aria-practices-1.1/#kbd_generalnav",
    ],
)
def check_no_noninteractive_tabindex(node: ElementNode, ancestors: Tuple[ElementNode, ...],
                                     kb: AriaKnowledgeBase) -> List[Finding]:
    attr = node.get_attribute("tabindex")
    if attr is None:
        return []
    if not attr.is_dynamic:
        value = parse_integer(attr.literal or "")
        if value is not None and value < 0:
            return []

    if kb.is_interactive_element(node) or node.has_attribute("aria-activedescendant"):
        return []
    role = effective_role(node, kb)
    if role.state in (RoleState.DYNAMIC, RoleState.UNKNOWN):
        return []
    if role.state == RoleState.KNOWN and (kb.is_interactive_role(role.name)
                                          or role.name in FOCUSABLE_CONTAINER_ROLES):
        return []

    shown = "tabindex" if attr.is_dynamic else f"tabindex=\"{attr.literal}\""
    return [(
        f"Non-interactive element <{node.tag}> should not have `{shown}`. "
        f"Non-interactive elements should not be focusable.",
        attr.line, attr.column,
    )]


@rule_spec(
    rule_id=RuleId.NO_ARIA_HIDDEN_ON_FOCUSABLE,
    severity=Severity.ERROR,
    description="Disallow aria-hidden=\"true\" from being set on focusable elements.",
    help="Remove `aria-hidden=\"true\"` from focusable elements, or make the element non-focusable.",
    references=[
        "https://dequeuniversity.com/rules/axe/html/4.4/aria-hidden-focus",
        "https://developer.mozilla.org/en-US/docs/Web/Accessibility/ARIA/Attributes/aria-hidden",
    ],
)
def check_no_aria_hidden_on_focusable(node: ElementNode, ancestors: Tuple[ElementNode, ...],
                                      kb: AriaKnowledgeBase) -> List[Finding]:
    if not is_aria_hidden(node) or node.is_dynamic("tabindex"):
        return []
    if not kb.is_focusable_by_default(node):
        return []
    attr = node.get_attribute("aria-hidden")
    return [(
        f"<{node.tag}> element is focusable but has `aria-hidden=\"true\"`, "
        f"which hides it from assistive technologies.",
        attr.line, attr.column,
    )]


# --- DEFINITION ---
DEFINITION = RuleSet(
    name="focus",
    rules=[
        check_no_access_key,
        check_no_autofocus,
        check_tabindex_no_positive,
        check_no_noninteractive_tabindex,
        check_no_aria_hidden_on_focusable,
    ],
)
