# src/rsx_auditor/dom/qngine.py
from typing import Iterable, List, Optional, Sequence, Tuple

from rsx_auditor.aria.knowledge_base import AriaKnowledgeBase, build_knowledge_base
from rsx_auditor.model import Diagnostic, RuleId
from .core import ElementNode
from .registry import RuleRegistry


class QNGINE:
    """
    Quality Engine (QNGINE) for linting element trees.

    It walks every tree of a forest pre-order and applies each enabled rule to every
    known HTML element, passing the ancestor chain and the knowledge base along.
    Framework components stay in the tree as content but are not linted themselves.
    """

    def __init__(self, knowledge_base: Optional[AriaKnowledgeBase] = None,
                 enabled: Optional[Iterable[RuleId]] = None):
        """Initializes the engine by discovering all rules and fixing the enabled set."""
        RuleRegistry.discover()
        self.kb = knowledge_base or build_knowledge_base()
        selected = set(enabled) if enabled is not None else set(RuleId)
        self.rules = [RuleRegistry.get_rule(r) for r in sorted(selected, key=lambda r: r.value)]

    def run(self, forest: Sequence[ElementNode], file: str = "") -> List[Diagnostic]:
        """
        Lints a forest of element trees.

        Args:
            forest: The root elements found in one source file.
            file: Path recorded on every diagnostic.

        Returns:
            List[Diagnostic]: Findings in traversal order (unsorted).
        """
        diagnostics: List[Diagnostic] = []

        def traverse(node: ElementNode, ancestors: Tuple[ElementNode, ...]):
            if self.kb.is_known_tag(node.tag):
                for rule in self.rules:
                    definition = rule.definition
                    for message, line, column in rule(node, ancestors, self.kb):
                        diagnostics.append(Diagnostic(
                            rule=definition.rule_id,
                            severity=definition.severity,
                            message=message,
                            help=definition.help,
                            file=file,
                            line=line,
                            column=column,
                            element=node.tag,
                        ))

            chain = ancestors + (node,)
            for child in node.element_children:
                traverse(child, chain)

        for root in forest:
            traverse(root, ())

        return diagnostics
