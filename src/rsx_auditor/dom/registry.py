# src/rsx_auditor/dom/registry.py
import importlib
import logging
import pkgutil
from typing import Dict, FrozenSet, Iterable, List, Optional

from rsx_auditor.exceptions import UnknownRuleError
from rsx_auditor.model import RuleId
from .core import RuleDefinition, RuleFunc, RuleSet

logger = logging.getLogger(__name__)


class RuleRegistry:
    """
    Central registry for lint rules.

    Dynamically discovers RuleSet modules in the 'rsx_auditor.dom.rules' package and
    indexes every rule function by its identifier. The set of identifiers is closed:
    discovery fails loudly if a rule is missing or registered twice.
    """

    _rules: Dict[RuleId, RuleFunc] = {}
    _groups: Dict[RuleId, str] = {}
    _loaded: bool = False

    @classmethod
    def discover(cls) -> None:
        """
        Imports every module of the rules package and registers the rules listed in
        its module-level `DEFINITION` (an instance of `RuleSet`).
        """
        if cls._loaded:
            return

        import rsx_auditor.dom.rules as rules_pkg

        rules: Dict[RuleId, RuleFunc] = {}
        groups: Dict[RuleId, str] = {}
        for _, name, _ in sorted(pkgutil.iter_modules(rules_pkg.__path__), key=lambda m: m[1]):
            module = importlib.import_module(f"rsx_auditor.dom.rules.{name}")
            definition = getattr(module, "DEFINITION", None)
            if not isinstance(definition, RuleSet):
                continue

            for rule in definition.rules:
                rule_id = rule.definition.rule_id
                if rule_id in rules:
                    raise RuntimeError(f"Rule '{rule_id.value}' is registered twice "
                                       f"('{groups[rule_id]}' and '{definition.name}')")
                rules[rule_id] = rule
                groups[rule_id] = definition.name

            logger.debug(f"Rule set loaded: {definition.name} ({len(definition.rules)} rules)")

        missing = set(RuleId) - set(rules)
        if missing:
            names = ", ".join(sorted(r.value for r in missing))
            raise RuntimeError(f"No implementation registered for rule(s): {names}")

        cls._rules = rules
        cls._groups = groups
        cls._loaded = True

    @classmethod
    def get_rule(cls, rule_id: RuleId) -> RuleFunc:
        cls.discover()
        return cls._rules[rule_id]

    @classmethod
    def get_definition(cls, rule_id: RuleId) -> RuleDefinition:
        return cls.get_rule(rule_id).definition

    @classmethod
    def get_all_definitions(cls) -> List[RuleDefinition]:
        """Every rule definition, ordered by identifier. Used by --list-rules."""
        cls.discover()
        return [cls._rules[r].definition for r in sorted(cls._rules, key=lambda r: r.value)]

    @classmethod
    def get_group(cls, rule_id: RuleId) -> str:
        cls.discover()
        return cls._groups[rule_id]

    @staticmethod
    def parse_names(names: Iterable[str]) -> FrozenSet[RuleId]:
        """
        Maps rule names onto identifiers. Raises UnknownRuleError naming every
        unrecognized entry.
        """
        known = {r.value: r for r in RuleId}
        cleaned = [n.strip() for n in names if n and n.strip()]
        unknown = [n for n in cleaned if n not in known]
        if unknown:
            raise UnknownRuleError(unknown)
        return frozenset(known[n] for n in cleaned)

    @classmethod
    def resolve_enabled(cls, only: Optional[Iterable[str]] = None,
                        skip: Optional[Iterable[str]] = None) -> FrozenSet[RuleId]:
        """
        Computes the enabled rule set: the include list (or every rule when
        none is given), minus the exclude list.
        """
        only = list(only or [])
        skip = list(skip or [])
        cls.parse_names(only + skip)

        included = cls.parse_names(only)
        excluded = cls.parse_names(skip)
        enabled = included if only else frozenset(RuleId)
        return frozenset(enabled - excluded)
