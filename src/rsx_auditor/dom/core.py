from typing import Annotated, Callable, Iterator, List, Literal, Optional, Sequence, Set, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from rsx_auditor.model import RuleId, Severity


# --- ATTRIBUTE VALUES ---

class LiteralValue(BaseModel):
    """A value written as a literal in source, e.g. alt="Logo"."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["literal"] = "literal"
    text: str = ""


class DynamicValue(BaseModel):
    """A value present in source but only known at runtime, e.g. alt={label}."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["dynamic"] = "dynamic"


AttrValue = Annotated[Union[LiteralValue, DynamicValue], Field(discriminator="kind")]

EVENT_NAMES = frozenset({
    "click", "dblclick", "contextmenu",
    "mousedown", "mouseup", "mouseover", "mouseout", "mouseenter", "mouseleave", "mousemove",
    "keydown", "keypress", "keyup",
    "focus", "blur", "focusin", "focusout",
    "change", "input", "submit",
    "touchstart", "touchend", "pointerdown", "pointerup",
})

_NAME_ALIASES = {
    "html_for": "for",
    "htmlfor": "for",
    "classname": "class",
}


def canonical_attribute_name(raw: str) -> str:
    """
    Maps framework-specific attribute spellings onto plain HTML names.

    onClick -> onclick, on:click -> onclick, r#type -> type,
    attr:aria-label -> aria-label, html_for -> for.
    """
    name = raw.strip().lower()
    if name.startswith("r#"):
        name = name[2:]
    if name.startswith("attr:"):
        name = name[5:]
    if name.startswith("on:"):
        name = "on" + name[3:]
    return _NAME_ALIASES.get(name, name)


class Attribute(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    value: AttrValue = Field(default_factory=LiteralValue)
    line: int = Field(ge=1)
    column: int = Field(ge=1)

    @property
    def canonical_name(self) -> str:
        return canonical_attribute_name(self.name)

    @property
    def is_dynamic(self) -> bool:
        return isinstance(self.value, DynamicValue)

    @property
    def literal(self) -> Optional[str]:
        """The literal text, or None when the value is dynamic."""
        if isinstance(self.value, LiteralValue):
            return self.value.text
        return None


# --- TREE NODES ---

class TextNode(BaseModel):
    """A text run between tags. `dynamic` marks an interpolated expression such as {count}."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["text"] = "text"
    text: str = ""
    dynamic: bool = False
    line: int = Field(default=1, ge=1)
    column: int = Field(default=1, ge=1)

    @property
    def is_blank(self) -> bool:
        return not self.dynamic and not self.text.strip()


class ElementNode(BaseModel):
    """
    One markup element instance in a normalized tree.

    Attributes keep their source order and spelling; lookups go through the
    canonical name so that onClick, on:click and onclick are the same handler.
    """
    model_config = ConfigDict(frozen=True)

    kind: Literal["element"] = "element"
    tag: str
    attributes: Tuple[Attribute, ...] = ()
    children: Tuple[Annotated[Union["ElementNode", TextNode], Field(discriminator="kind")], ...] = ()
    line: int = Field(ge=1)
    column: int = Field(ge=1)

    @property
    def tag_lower(self) -> str:
        return self.tag.lower()

    def get_attribute(self, name: str) -> Optional[Attribute]:
        wanted = canonical_attribute_name(name)
        for attr in self.attributes:
            if attr.canonical_name == wanted:
                return attr
        return None

    def has_attribute(self, name: str) -> bool:
        return self.get_attribute(name) is not None

    def literal_value(self, name: str) -> Optional[str]:
        """Literal text of an attribute; None when absent or dynamic."""
        attr = self.get_attribute(name)
        return attr.literal if attr else None

    def is_dynamic(self, name: str) -> bool:
        attr = self.get_attribute(name)
        return attr is not None and attr.is_dynamic

    def aria_attributes(self) -> List[Attribute]:
        return [a for a in self.attributes if a.canonical_name.startswith("aria-")]

    @property
    def event_handlers(self) -> Set[str]:
        """Event names bound on this element, e.g. {"click", "keydown"}."""
        events = set()
        for attr in self.attributes:
            name = attr.canonical_name
            if name.startswith("on") and name[2:] in EVENT_NAMES:
                events.add(name[2:])
        return events

    def has_handler(self, *events: str) -> bool:
        handlers = self.event_handlers
        return any(e in handlers for e in events)

    @property
    def element_children(self) -> List["ElementNode"]:
        return [c for c in self.children if isinstance(c, ElementNode)]

    @property
    def is_empty(self) -> bool:
        """True if the element has no children other than whitespace text."""
        return all(isinstance(c, TextNode) and c.is_blank for c in self.children)

    def iter_descendants(self) -> Iterator["ElementNode"]:
        for child in self.element_children:
            yield child
            yield from child.iter_descendants()


ElementNode.model_rebuild()


# --- RULE DECLARATION ---

# A rule finding before it is bound to a file: (message, line, column)
Finding = Tuple[str, int, int]

RuleFunc = Callable[..., List[Finding]]


class RuleDefinition(BaseModel):
    """The fixed identity of a rule. Never computed at run time."""
    model_config = ConfigDict(frozen=True)

    rule_id: RuleId
    severity: Severity
    description: str
    help: str
    references: Tuple[str, ...] = ()


def rule_spec(rule_id: RuleId, severity: Severity, description: str, help: str,
              references: Sequence[str] = ()):
    """
    Decorator binding a rule function to its fixed definition.
    Facilitates auto-discovery by the RuleRegistry.
    """
    def decorator(func):
        func.definition = RuleDefinition(
            rule_id=rule_id,
            severity=severity,
            description=description,
            help=help,
            references=tuple(references),
        )
        return func
    return decorator


class RuleSet:
    """
    A themed group of rules exported by one module under rsx_auditor.dom.rules.
    """

    def __init__(self, name: str, rules: List[RuleFunc]):
        self.name = name
        self.rules = list(rules)

        for rule in self.rules:
            if not hasattr(rule, "definition"):
                raise TypeError(f"Rule {rule.__name__} in '{name}' is missing @rule_spec")

    @property
    def rule_ids(self) -> List[RuleId]:
        return sorted((r.definition.rule_id for r in self.rules), key=lambda r: r.value)
