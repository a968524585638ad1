# src/rsx_auditor/aria/knowledge_base.py
import functools
import logging
from typing import FrozenSet, List, Mapping, Optional, Union

from rsx_auditor.dom.core import DynamicValue, ElementNode, LiteralValue
from . import elements
from .attributes import (
    ARIA_ATTRIBUTE_DOMAINS,
    GLOBAL_ARIA_ATTRIBUTES,
    ValidationResult,
    ValueDomain,
    domain_for,
    validate_attribute_value,
)
from .roles import PREFERRED_TAGS, RoleDefinition, build_role_table
from .tokens import validate_language_tag

logger = logging.getLogger(__name__)


class AriaKnowledgeBase:
    """
    Read-only ARIA reference data with lookup and validation helpers.

    One instance is built per process and passed explicitly to the engine and
    to every rule call. All tables are immutable mappings.
    """

    def __init__(self, roles: Mapping[str, RoleDefinition]):
        self._roles = roles

    # --- Roles ---

    def role(self, name: str) -> Optional[RoleDefinition]:
        return self._roles.get(name.lower())

    def is_known_role(self, name: str) -> bool:
        return name.lower() in self._roles

    def is_abstract_role(self, name: str) -> bool:
        definition = self.role(name)
        return bool(definition and definition.abstract)

    def is_interactive_role(self, name: str) -> bool:
        definition = self.role(name)
        return bool(definition and definition.interactive)

    def required_props_for(self, role: str) -> FrozenSet[str]:
        definition = self.role(role)
        return definition.required_props if definition else frozenset()

    def allowed_props_for(self, role: str) -> FrozenSet[str]:
        definition = self.role(role)
        return definition.allowed_props if definition else frozenset()

    def preferred_tag_for(self, role: str) -> Optional[str]:
        return PREFERRED_TAGS.get(role.lower())

    def concrete_roles(self) -> List[str]:
        return sorted(name for name, d in self._roles.items() if not d.abstract)

    # --- Attributes ---

    def is_known_aria_attribute(self, name: str) -> bool:
        return name.lower() in ARIA_ATTRIBUTE_DOMAINS

    def is_global_aria_attribute(self, name: str) -> bool:
        return name.lower() in GLOBAL_ARIA_ATTRIBUTES

    def domain_of(self, name: str) -> Optional[ValueDomain]:
        return domain_for(name)

    def validate_attribute_value(self, name: str,
                                 value: Union[LiteralValue, DynamicValue, str]) -> ValidationResult:
        return validate_attribute_value(name, value)

    def validate_language_tag(self, value: str) -> bool:
        return validate_language_tag(value)

    # --- Elements ---

    def is_known_tag(self, tag: str) -> bool:
        return elements.is_known_tag(tag)

    def implicit_role_of(self, node: ElementNode) -> Optional[str]:
        return elements.implicit_role_of(node)

    def is_interactive_element(self, node: ElementNode) -> bool:
        return elements.is_interactive_element(node)

    def is_focusable_by_default(self, node: ElementNode) -> bool:
        return elements.is_focusable_by_default(node)

    def supports_aria(self, tag: str) -> bool:
        return tag.lower() not in elements.ARIA_UNSUPPORTED_TAGS

    def is_heading_tag(self, tag: str) -> bool:
        return tag.lower() in elements.HEADING_TAGS


@functools.lru_cache(maxsize=1)
def build_knowledge_base() -> AriaKnowledgeBase:
    """Builds the knowledge base once per process."""
    roles = build_role_table()
    logger.debug(f"ARIA knowledge base built with {len(roles)} roles")
    return AriaKnowledgeBase(roles)
