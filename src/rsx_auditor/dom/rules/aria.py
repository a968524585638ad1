import difflib
from typing import List, Tuple

from rsx_auditor.aria.attributes import ARIA_ATTRIBUTE_DOMAINS
from rsx_auditor.aria.knowledge_base import AriaKnowledgeBase
from rsx_auditor.model import RuleId, Severity
from ..core import ElementNode, Finding, RuleSet, rule_spec


# --- RULES ---

@rule_spec(
    rule_id=RuleId.ARIA_PROPS,
    severity=Severity.ERROR,
    description="Enforce all aria-* props are valid.",
    help="Use a defined ARIA attribute such as aria-label, aria-labelledby, aria-hidden or aria-describedby. "
         "See https://www.w3.org/TR/wai-aria-1.2/#state_prop_def for all valid attributes.",
    references=["https://www.w3.org/WAI/WCAG21/Understanding/name-role-value"],
)
def check_aria_props(node: ElementNode, ancestors: Tuple[ElementNode, ...],
                     kb: AriaKnowledgeBase) -> List[Finding]:
    res = []
    for attr in node.aria_attributes():
        name = attr.canonical_name
        if kb.is_known_aria_attribute(name):
            continue
        message = f"Invalid ARIA attribute `{attr.name}` on <{node.tag}>."
        close = difflib.get_close_matches(name, ARIA_ATTRIBUTE_DOMAINS.keys(), n=1)
        if close:
            message += f" Did you mean `{close[0]}`?"
        res.append((message, attr.line, attr.column))
    return res


@rule_spec(
    rule_id=RuleId.ARIA_PROPTYPES,
    severity=Severity.ERROR,
    description="Enforce ARIA state and property values are valid.",
    help="Use a value from the attribute's value domain. "
         "See https://www.w3.org/TR/wai-aria-1.2/#state_prop_def for the allowed values.",
    references=[
        "https://www.w3.org/WAI/WCAG21/Understanding/name-role-value",
        "https://www.w3.org/TR/wai-aria/#states_and_properties",
        "https://github.com/GoogleChrome/accessibility-developer-tools/wiki/Audit-Rules#ax_aria_04",
    ],
)
def check_aria_proptypes(node: ElementNode, ancestors: Tuple[ElementNode, ...],
                         kb: AriaKnowledgeBase) -> List[Finding]:
    res = []
    for attr in node.aria_attributes():
        name = attr.canonical_name
        if not kb.is_known_aria_attribute(name):
            continue
        result = kb.validate_attribute_value(name, attr.value)
        if not result.is_invalid:
            continue
        domain = kb.domain_of(name)
        res.append((
            f"Invalid value \"{attr.literal}\" for `{name}` on <{node.tag}>. Expected {domain.expected}.",
            attr.line, attr.column,
        ))
    return res


@rule_spec(
    rule_id=RuleId.ARIA_ROLE,
    severity=Severity.ERROR,
    description="Enforce that elements with ARIA roles must use a valid, non-abstract ARIA role.",
    help="Use a valid, non-abstract role. "
         "See https://www.w3.org/TR/wai-aria-1.2/#role_definitions for valid roles.",
    references=[
        "https://www.w3.org/WAI/WCAG21/Understanding/name-role-value",
        "https://github.com/GoogleChrome/accessibility-developer-tools/wiki/Audit-Rules#ax_aria_01",
        "https://developer.mozilla.org/en-US/docs/Web/Accessibility/ARIA/ARIA_Techniques",
    ],
)
def check_aria_role(node: ElementNode, ancestors: Tuple[ElementNode, ...],
                    kb: AriaKnowledgeBase) -> List[Finding]:
    role = node.get_attribute("role")
    if role is None or role.is_dynamic:
        return []

    # A role value may list fallbacks; report the first bad token only.
    for token in (role.literal or "").split():
        if not kb.is_known_role(token):
            return [(f"Invalid ARIA role \"{token}\" on <{node.tag}>.", role.line, role.column)]
        if kb.is_abstract_role(token):
            return [(
                f"Abstract ARIA role \"{token}\" must not be used on <{node.tag}>. "
                f"Abstract roles only exist to structure the role taxonomy.",
                role.line, role.column,
            )]
    return []


@rule_spec(
    rule_id=RuleId.ARIA_UNSUPPORTED_ELEMENTS,
    severity=Severity.ERROR,
    description="Enforce that elements that do not support ARIA roles, states, and properties "
                "do not have those attributes.",
    help="Remove the `role` and aria-* attributes: this element is not exposed to assistive technologies.",
    references=[
        "https://www.w3.org/WAI/WCAG21/Understanding/name-role-value",
        "https://github.com/GoogleChrome/accessibility-developer-tools/wiki/Audit-Rules#ax_aria_12",
    ],
)
def check_aria_unsupported_elements(node: ElementNode, ancestors: Tuple[ElementNode, ...],
                                    kb: AriaKnowledgeBase) -> List[Finding]:
    if kb.supports_aria(node.tag):
        return []
    res = []
    for attr in node.attributes:
        name = attr.canonical_name
        if name == "role" or name.startswith("aria-"):
            res.append((f"`{name}` is not supported on <{node.tag}>.", attr.line, attr.column))
    return res


@rule_spec(
    rule_id=RuleId.ARIA_ACTIVEDESCENDANT_HAS_TABINDEX,
    severity=Severity.WARNING,
    description="Enforce elements with aria-activedescendant are tabbable.",
    help="Add `tabindex=\"0\"` to make the element focusable.",
    references=[
        "https://developer.mozilla.org/en-US/docs/Web/Accessibility/ARIA/ARIA_Techniques/"
        "Using_the_aria-activedescendant_attribute",
    ],
)
def check_aria_activedescendant_has_tabindex(node: ElementNode, ancestors: Tuple[ElementNode, ...],
                                             kb: AriaKnowledgeBase) -> List[Finding]:
    if not node.has_attribute("aria-activedescendant"):
        return []
    if kb.is_interactive_element(node) or node.has_attribute("tabindex"):
        return []
    return [(
        f"<{node.tag}> with `aria-activedescendant` must also have a `tabindex` attribute to be focusable.",
        node.line, node.column,
    )]


# --- DEFINITION ---
DEFINITION = RuleSet(
    name="aria",
    rules=[
        check_aria_props,
        check_aria_proptypes,
        check_aria_role,
        check_aria_unsupported_elements,
        check_aria_activedescendant_has_tabindex,
    ],
)
