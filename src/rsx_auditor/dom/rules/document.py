from typing import List, Tuple

from rsx_auditor.aria.knowledge_base import AriaKnowledgeBase
from rsx_auditor.model import RuleId, Severity
from ..core import ElementNode, Finding, RuleSet, rule_spec


# --- RULES ---

@rule_spec(
    rule_id=RuleId.HTML_HAS_LANG,
    severity=Severity.WARNING,
    description="Enforce <html> element has lang prop.",
    help="Add a `lang` attribute, e.g. <html lang=\"en\">.",
    references=[
        "https://www.w3.org/WAI/WCAG21/Understanding/language-of-page",
        "https://dequeuniversity.com/rules/axe/3.2/html-has-lang",
    ],
)
def check_html_has_lang(node: ElementNode, ancestors: Tuple[ElementNode, ...],
                        kb: AriaKnowledgeBase) -> List[Finding]:
    if node.tag_lower != "html":
        return []
    attr = node.get_attribute("lang")
    if attr is not None and (attr.is_dynamic or (attr.literal or "").strip()):
        return []
    return [("<html> element is missing a `lang` attribute.", node.line, node.column)]


@rule_spec(
    rule_id=RuleId.LANG,
    severity=Severity.ERROR,
    description="Enforce lang attribute has a valid value.",
    help="Use a valid BCP 47 language tag such as \"en\", \"en-US\", \"fr\" or \"zh-Hant\".",
    references=[
        "https://www.w3.org/WAI/WCAG21/Understanding/language-of-page",
        "https://dequeuniversity.com/rules/axe/3.2/valid-lang",
        "https://www.rfc-editor.org/rfc/bcp/bcp47.txt",
    ],
)
def check_lang(node: ElementNode, ancestors: Tuple[ElementNode, ...],
               kb: AriaKnowledgeBase) -> List[Finding]:
    attr = node.get_attribute("lang")
    if attr is None or attr.is_dynamic:
        return []
    value = attr.literal or ""
    if kb.validate_language_tag(value):
        return []
    return [(
        f"The `lang` attribute value \"{value}\" is not a valid BCP 47 language tag.",
        attr.line, attr.column,
    )]


@rule_spec(
    rule_id=RuleId.SCOPE,
    severity=Severity.WARNING,
    description="Enforce scope prop is only used on <th> elements.",
    help="Remove the `scope` attribute, or use it on a <th> with one of \"row\", \"col\", "
         "\"rowgroup\" or \"colgroup\".",
    references=[
        "https://www.w3.org/WAI/WCAG21/Understanding/info-and-relationships",
        "https://dequeuniversity.com/rules/axe/3.2/scope-attr-valid",
    ],
)
def check_scope(node: ElementNode, ancestors: Tuple[ElementNode, ...],
                kb: AriaKnowledgeBase) -> List[Finding]:
    attr = node.get_attribute("scope")
    if attr is None:
        return []
    if node.tag_lower != "th":
        return [(
            f"The `scope` attribute should only be used on <th> elements, not <{node.tag}>.",
            attr.line, attr.column,
        )]
    result = kb.validate_attribute_value("scope", attr.value)
    if not result.is_invalid:
        return []
    return [(f"Invalid `scope` value \"{attr.literal}\" on <th>: {result.reason}.", attr.line, attr.column)]


# --- DEFINITION ---
DEFINITION = RuleSet(
    name="document",
    rules=[check_html_has_lang, check_lang, check_scope],
)
