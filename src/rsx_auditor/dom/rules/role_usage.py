from types import MappingProxyType
from typing import List, Tuple

from rsx_auditor.aria.elements import ARIA_UNSUPPORTED_TAGS
from rsx_auditor.aria.knowledge_base import AriaKnowledgeBase
from rsx_auditor.model import RuleId, Severity
from ..core import ElementNode, Finding, RuleSet, rule_spec
from ..semantics import RoleState, effective_role, explicit_role

# Widget roles commonly layered onto structural containers.
INTERACTIVE_ROLE_EXCEPTIONS = MappingProxyType({
    "ul": frozenset({"listbox", "menu", "menubar", "radiogroup", "tablist", "tree", "treegrid"}),
    "ol": frozenset({"listbox", "menu", "menubar", "radiogroup", "tablist", "tree", "treegrid"}),
    "li": frozenset({"menuitem", "menuitemcheckbox", "menuitemradio", "option", "row", "tab", "treeitem"}),
    "table": frozenset({"grid"}),
    "td": frozenset({"gridcell"}),
    "fieldset": frozenset({"radiogroup"}),
})

_NAME_FROM_NATIVE_TAGS = frozenset({"input", "select"})


# --- RULES ---

@rule_spec(
    rule_id=RuleId.NO_REDUNDANT_ROLES,
    severity=Severity.WARNING,
    description="Enforce explicit role property is not the same as implicit/default role property on element.",
    help="Remove the `role` attribute.",
    references=[
        "https://www.w3.org/TR/using-aria/#aria-does-nothing",
        "https://developer.mozilla.org/en-US/docs/Web/HTML/Element/img#identifying_svg_as_an_image",
    ],
)
def check_no_redundant_roles(node: ElementNode, ancestors: Tuple[ElementNode, ...],
                             kb: AriaKnowledgeBase) -> List[Finding]:
    explicit = explicit_role(node, kb)
    if explicit.state != RoleState.KNOWN:
        return []
    if kb.implicit_role_of(node) != explicit.name:
        return []
    role = node.get_attribute("role")
    return [(
        f"Redundant role \"{explicit.name}\" on <{node.tag}>. This is the element's implicit role.",
        role.line, role.column,
    )]


@rule_spec(
    rule_id=RuleId.ROLE_HAS_REQUIRED_ARIA_PROPS,
    severity=Severity.ERROR,
    description="Enforce that elements with ARIA roles must have all required attributes for that role.",
    help="Add the ARIA properties the role requires, e.g. `aria-checked` for role=\"checkbox\" "
         "or `aria-valuenow` for role=\"slider\".",
    references=[
        "https://www.w3.org/WAI/WCAG21/Understanding/name-role-value",
        "https://www.w3.org/TR/wai-aria/#roles",
        "https://github.com/GoogleChrome/accessibility-developer-tools/wiki/Audit-Rules#ax_aria_03",
    ],
)
def check_role_has_required_aria_props(node: ElementNode, ancestors: Tuple[ElementNode, ...],
                                       kb: AriaKnowledgeBase) -> List[Finding]:
    explicit = explicit_role(node, kb)
    if explicit.state != RoleState.KNOWN:
        return []
    # Native semantics (checked state, heading level) already supply the properties.
    if kb.implicit_role_of(node) == explicit.name:
        return []

    missing = sorted(p for p in kb.required_props_for(explicit.name) if not node.has_attribute(p))
    if not missing:
        return []
    listed = ", ".join(f"`{p}`" for p in missing)
    role = node.get_attribute("role")
    return [(
        f"<{node.tag}> with role=\"{explicit.name}\" is missing required ARIA properties: {listed}.",
        role.line, role.column,
    )]


@rule_spec(
    rule_id=RuleId.ROLE_SUPPORTS_ARIA_PROPS,
    severity=Severity.WARNING,
    description="Enforce that elements with explicit or implicit roles defined contain only aria-* "
                "properties supported by that role.",
    help="Remove the property, or change the role to one that supports it.",
    references=[
        "https://www.w3.org/WAI/WCAG21/Understanding/name-role-value",
        "https://www.w3.org/TR/wai-aria/#states_and_properties",
        "https://github.com/GoogleChrome/accessibility-developer-tools/wiki/Audit-Rules#ax_aria_10",
    ],
)
def check_role_supports_aria_props(node: ElementNode, ancestors: Tuple[ElementNode, ...],
                                   kb: AriaKnowledgeBase) -> List[Finding]:
    tag = node.tag_lower
    if tag in ARIA_UNSUPPORTED_TAGS:
        return []

    role = effective_role(node, kb)
    if role.state == RoleState.KNOWN:
        allowed = kb.allowed_props_for(role.name)
        subject = f"by the \"{role.name}\" role on <{node.tag}>"
    elif role.state == RoleState.ABSENT and tag not in _NAME_FROM_NATIVE_TAGS:
        # No role at all: only global states and properties apply.
        allowed = None
        subject = f"on <{node.tag}>, which has no role"
    else:
        return []

    res = []
    for attr in node.aria_attributes():
        name = attr.canonical_name
        if not kb.is_known_aria_attribute(name):
            continue
        supported = name in allowed if allowed is not None else kb.is_global_aria_attribute(name)
        if not supported:
            res.append((f"The `{name}` property is not supported {subject}.", attr.line, attr.column))
    return res


@rule_spec(
    rule_id=RuleId.PREFER_TAG_OVER_ROLE,
    severity=Severity.INFO,
    description="Enforces using semantic DOM elements over the ARIA role property.",
    help="Use the native element, which has built-in semantics and keyboard behavior, instead of relying on ARIA.",
    references=["https://developer.mozilla.org/en-US/docs/Web/Accessibility/ARIA/Roles"],
)
def check_prefer_tag_over_role(node: ElementNode, ancestors: Tuple[ElementNode, ...],
                               kb: AriaKnowledgeBase) -> List[Finding]:
    explicit = explicit_role(node, kb)
    if explicit.state != RoleState.KNOWN:
        return []
    preferred = kb.preferred_tag_for(explicit.name)
    if preferred is None or kb.implicit_role_of(node) == explicit.name:
        return []
    role = node.get_attribute("role")
    return [(
        f"Prefer using the {preferred} element instead of `role=\"{explicit.name}\"`.",
        role.line, role.column,
    )]


@rule_spec(
    rule_id=RuleId.NO_INTERACTIVE_ELEMENT_TO_NONINTERACTIVE_ROLE,
    severity=Severity.WARNING,
    description="Interactive elements should not be assigned non-interactive roles.",
    help="Remove the `role` attribute or use an appropriate interactive role.",
    references=[
        "https://www.w3.org/WAI/WCAG21/Understanding/name-role-value",
        "https://www.w3.org/TR/wai-aria-1.1/#usage_intro",
        "https://www.w3.org/TR/wai-aria-practices-1.1/#kbd_generalnav",
    ],
)
def check_no_interactive_element_to_noninteractive_role(node: ElementNode, ancestors: Tuple[ElementNode, ...],
                                                        kb: AriaKnowledgeBase) -> List[Finding]:
    if not kb.is_interactive_element(node):
        return []
    explicit = explicit_role(node, kb)
    if explicit.state != RoleState.KNOWN or kb.is_interactive_role(explicit.name):
        return []
    role = node.get_attribute("role")
    return [(
        f"Interactive element <{node.tag}> should not be assigned the non-interactive role \"{explicit.name}\".",
        role.line, role.column,
    )]


@rule_spec(
    rule_id=RuleId.NO_NONINTERACTIVE_ELEMENT_TO_INTERACTIVE_ROLE,
    severity=Severity.WARNING,
    description="Non-interactive elements should not be assigned interactive roles.",
    help="Use the appropriate interactive element instead, e.g. <button>, <a> or <input>.",
    references=[
        "https://www.w3.org/WAI/WCAG21/Understanding/name-role-value",
        "https://www.w3.org/TR/wai-aria-1.1/#usage_intro",
        "https://www.w3.org/TR/wai-aria-practices-1.1/#kbd_generalnav",
    ],
)
def check_no_noninteractive_element_to_interactive_role(node: ElementNode, ancestors: Tuple[ElementNode, ...],
                                                        kb: AriaKnowledgeBase) -> List[Finding]:
    if kb.is_interactive_element(node):
        return []
    implicit = kb.implicit_role_of(node)
    if implicit is None or kb.is_interactive_role(implicit):
        return []

    explicit = explicit_role(node, kb)
    if explicit.state != RoleState.KNOWN or not kb.is_interactive_role(explicit.name):
        return []
    if explicit.name in INTERACTIVE_ROLE_EXCEPTIONS.get(node.tag_lower, frozenset()):
        return []
    role = node.get_attribute("role")
    return [(
        f"Non-interactive element <{node.tag}> should not be assigned the interactive role \"{explicit.name}\".",
        role.line, role.column,
    )]


# --- DEFINITION ---
DEFINITION = RuleSet(
    name="role_usage",
    rules=[
        check_no_redundant_roles,
        check_role_has_required_aria_props,
        check_role_supports_aria_props,
        check_prefer_tag_over_role,
        check_no_interactive_element_to_noninteractive_role,
        check_no_noninteractive_element_to_interactive_role,
    ],
)
