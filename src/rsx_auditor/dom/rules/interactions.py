from typing import List, Tuple

from rsx_auditor.aria.knowledge_base import AriaKnowledgeBase
from rsx_auditor.model import RuleId, Severity
from ..core import ElementNode, Finding, RuleSet, rule_spec
from ..semantics import RoleState, effective_role, explicit_role, is_hidden_from_screen_reader

KEYBOARD_EVENTS = ("keydown", "keyup", "keypress")
INTERACTIVE_EVENTS = ("click", "mousedown", "mouseup") + KEYBOARD_EVENTS
STATIC_ELEMENT_EVENTS = INTERACTIVE_EVENTS + ("mouseover", "mouseout")
PRESENTATION_ROLES = frozenset({"presentation", "none"})


# --- RULES ---

@rule_spec(
    rule_id=RuleId.CLICK_EVENTS_HAVE_KEY_EVENTS,
    severity=Severity.WARNING,
    description="Enforce a clickable non-interactive element has at least one keyboard event listener.",
    help="Add an `onkeydown` or `onkeyup` handler, or use an interactive element like <button> instead.",
    references=["https://www.w3.org/WAI/WCAG21/Understanding/keyboard"],
)
def check_click_events_have_key_events(node: ElementNode, ancestors: Tuple[ElementNode, ...],
                                       kb: AriaKnowledgeBase) -> List[Finding]:
    if not node.has_handler("click") or node.has_handler(*KEYBOARD_EVENTS):
        return []
    if kb.is_interactive_element(node) or is_hidden_from_screen_reader(node):
        return []
    return [(
        f"<{node.tag}> with a click handler must also have a keyboard event handler "
        f"(onkeydown, onkeyup, or onkeypress) for accessibility.",
        node.line, node.column,
    )]


@rule_spec(
    rule_id=RuleId.MOUSE_EVENTS_HAVE_KEY_EVENTS,
    severity=Severity.WARNING,
    description="Enforce that onmouseover/onmouseout are accompanied by onfocus/onblur for keyboard-only users.",
    help="Pair `onmouseover` with an `onfocus` handler and `onmouseout` with an `onblur` handler "
         "that mirror their behavior.",
    references=["https://www.w3.org/WAI/WCAG21/Understanding/keyboard"],
)
def check_mouse_events_have_key_events(node: ElementNode, ancestors: Tuple[ElementNode, ...],
                                       kb: AriaKnowledgeBase) -> List[Finding]:
    missing = []
    if node.has_handler("mouseover") and not node.has_handler("focus"):
        missing.append(("mouseover", "onfocus"))
    if node.has_handler("mouseout") and not node.has_handler("blur"):
        missing.append(("mouseout", "onblur"))
    if not missing:
        return []

    detail = " and ".join(f"a {mouse} handler but no {key} handler" for mouse, key in missing)
    return [(
        f"<{node.tag}> has {detail}. Keyboard users cannot trigger this behavior.",
        node.line, node.column,
    )]


@rule_spec(
    rule_id=RuleId.NO_STATIC_ELEMENT_INTERACTIONS,
    severity=Severity.WARNING,
    description="Enforce that non-interactive, visible elements (such as <div>) that have click handlers "
                "use the role attribute.",
    help="Add a `role` attribute that describes the element's purpose, "
         "or use a semantic element like <button> or <a>.",
    references=[
        "https://www.w3.org/WAI/WCAG21/Understanding/name-role-value",
        "https://www.w3.org/TR/wai-aria-practices-1.1/#kbd_generalnav",
    ],
)
def check_no_static_element_interactions(node: ElementNode, ancestors: Tuple[ElementNode, ...],
                                         kb: AriaKnowledgeBase) -> List[Finding]:
    if not node.has_handler(*STATIC_ELEMENT_EVENTS):
        return []
    if node.has_attribute("role") or kb.implicit_role_of(node) is not None:
        return []
    if kb.is_interactive_element(node) or is_hidden_from_screen_reader(node):
        return []
    # An input with an unknown (dynamic) type has no resolvable role but is still a control.
    if node.tag_lower in ("input", "select"):
        return []
    return [(f"<{node.tag}> with event handler(s) must have a `role` attribute.", node.line, node.column)]


@rule_spec(
    rule_id=RuleId.NO_NONINTERACTIVE_ELEMENT_INTERACTIONS,
    severity=Severity.WARNING,
    description="Non-interactive elements should not be assigned mouse or keyboard event listeners.",
    help="Use an interactive element like <button> or <a>, or add an appropriate interactive `role`.",
    references=[
        "https://www.w3.org/WAI/WCAG21/Understanding/name-role-value",
        "https://www.w3.org/TR/wai-aria-1.1/#usage_intro",
        "https://www.w3.org/TR/wai-aria-practices-1.1/#kbd_generalnav",
    ],
)
def check_no_noninteractive_element_interactions(node: ElementNode, ancestors: Tuple[ElementNode, ...],
                                                 kb: AriaKnowledgeBase) -> List[Finding]:
    if not node.has_handler(*INTERACTIVE_EVENTS):
        return []
    if kb.is_interactive_element(node) or is_hidden_from_screen_reader(node):
        return []

    role = effective_role(node, kb)
    if role.state != RoleState.KNOWN or role.name in PRESENTATION_ROLES:
        return []
    if kb.is_interactive_role(role.name):
        return []
    return [(
        f"Non-interactive element <{node.tag}> (role \"{role.name}\") should not have "
        f"mouse or keyboard event handlers.",
        node.line, node.column,
    )]


@rule_spec(
    rule_id=RuleId.INTERACTIVE_SUPPORTS_FOCUS,
    severity=Severity.WARNING,
    description="Enforce that elements with interactive handlers like onclick must be focusable.",
    help="Add `tabindex=\"0\"` to make the element focusable, "
         "or use a natively interactive element like <button>.",
    references=[
        "https://www.w3.org/WAI/WCAG21/Understanding/keyboard",
        "https://github.com/GoogleChrome/accessibility-developer-tools/wiki/Audit-Rules#ax_focus_02",
        "https://www.w3.org/TR/wai-aria-practices-1.1/#kbd_generalnav",
    ],
)
def check_interactive_supports_focus(node: ElementNode, ancestors: Tuple[ElementNode, ...],
                                     kb: AriaKnowledgeBase) -> List[Finding]:
    if not node.has_handler(*INTERACTIVE_EVENTS):
        return []
    explicit = explicit_role(node, kb)
    if explicit.state != RoleState.KNOWN or not kb.is_interactive_role(explicit.name):
        return []
    if kb.is_interactive_element(node) or node.has_attribute("tabindex"):
        return []
    if kb.is_focusable_by_default(node) or is_hidden_from_screen_reader(node):
        return []
    if (node.literal_value("aria-disabled") or "").strip().lower() == "true":
        return []
    return [(
        f"<{node.tag}> with an interactive role must be focusable. Add a `tabindex` attribute.",
        node.line, node.column,
    )]


# --- DEFINITION ---
DEFINITION = RuleSet(
    name="interactions",
    rules=[
        check_click_events_have_key_events,
        check_mouse_events_have_key_events,
        check_no_static_element_interactions,
        check_no_noninteractive_element_interactions,
        check_interactive_supports_focus,
    ],
)
