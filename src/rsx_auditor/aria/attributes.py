# src/rsx_auditor/aria/attributes.py
import re
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict

from rsx_auditor.dom.core import DynamicValue, LiteralValue
from .tokens import autocomplete_error, validate_language_tag


class ValueKind(str, Enum):
    BOOLEAN = "boolean"
    TRISTATE = "tristate"
    BOOLEAN_OR_UNDEFINED = "boolean-or-undefined"
    TOKEN = "token"
    TOKEN_LIST = "token-list"
    INTEGER = "integer"
    NUMBER = "number"
    ID_REFERENCE = "idref"
    ID_REFERENCE_LIST = "idref-list"
    STRING = "string"
    AUTOCOMPLETE = "autocomplete"
    LANGUAGE_TAG = "language-tag"


class ValueDomain(BaseModel):
    """The set of values an attribute accepts."""
    model_config = ConfigDict(frozen=True)

    kind: ValueKind
    tokens: Tuple[str, ...] = ()

    @property
    def expected(self) -> str:
        listed = ", ".join(f'"{t}"' for t in self.tokens)
        if self.kind == ValueKind.BOOLEAN:
            return '"true" or "false"'
        if self.kind == ValueKind.TRISTATE:
            return 'one of: "true", "false", "mixed"'
        if self.kind == ValueKind.BOOLEAN_OR_UNDEFINED:
            return 'one of: "true", "false", "undefined"'
        if self.kind == ValueKind.TOKEN:
            return f"one of: {listed}"
        if self.kind == ValueKind.TOKEN_LIST:
            return f"a space-separated list of: {listed}"
        if self.kind == ValueKind.INTEGER:
            return "an integer"
        if self.kind == ValueKind.NUMBER:
            return "a number"
        if self.kind == ValueKind.AUTOCOMPLETE:
            return "a valid autocomplete token list"
        if self.kind == ValueKind.LANGUAGE_TAG:
            return "a BCP 47 language tag"
        return "any text"


class ValidationStatus(str, Enum):
    VALID = "valid"
    INVALID = "invalid"
    NOT_STATICALLY_CHECKABLE = "not-statically-checkable"


class ValidationResult(BaseModel):
    """
    Outcome of checking one attribute value. Rules flag only INVALID;
    NOT_STATICALLY_CHECKABLE means the value is dynamic and must be left alone.
    """
    model_config = ConfigDict(frozen=True)

    status: ValidationStatus
    reason: str = ""

    @classmethod
    def valid(cls) -> "ValidationResult":
        return cls(status=ValidationStatus.VALID)

    @classmethod
    def invalid(cls, reason: str) -> "ValidationResult":
        return cls(status=ValidationStatus.INVALID, reason=reason)

    @classmethod
    def not_checkable(cls) -> "ValidationResult":
        return cls(status=ValidationStatus.NOT_STATICALLY_CHECKABLE)

    @property
    def is_invalid(self) -> bool:
        return self.status == ValidationStatus.INVALID


def _d(kind: ValueKind, *tokens: str) -> ValueDomain:
    return ValueDomain(kind=kind, tokens=tokens)


_BOOL = _d(ValueKind.BOOLEAN)
_TRISTATE = _d(ValueKind.TRISTATE)
_BOOL_UNDEF = _d(ValueKind.BOOLEAN_OR_UNDEFINED)
_INT = _d(ValueKind.INTEGER)
_NUM = _d(ValueKind.NUMBER)
_IDREF = _d(ValueKind.ID_REFERENCE)
_IDREFS = _d(ValueKind.ID_REFERENCE_LIST)
_TEXT = _d(ValueKind.STRING)

ARIA_ATTRIBUTE_DOMAINS: Mapping[str, ValueDomain] = MappingProxyType({
    "aria-activedescendant": _IDREF,
    "aria-atomic": _BOOL,
    "aria-autocomplete": _d(ValueKind.TOKEN, "inline", "list", "both", "none"),
    "aria-braillelabel": _TEXT,
    "aria-brailleroledescription": _TEXT,
    "aria-busy": _BOOL,
    "aria-checked": _TRISTATE,
    "aria-colcount": _INT,
    "aria-colindex": _INT,
    "aria-colindextext": _TEXT,
    "aria-colspan": _INT,
    "aria-controls": _IDREFS,
    "aria-current": _d(ValueKind.TOKEN, "page", "step", "location", "date", "time", "true", "false"),
    "aria-describedby": _IDREFS,
    "aria-description": _TEXT,
    "aria-details": _IDREF,
    "aria-disabled": _BOOL,
    "aria-dropeffect": _d(ValueKind.TOKEN_LIST, "copy", "execute", "link", "move", "none", "popup"),
    "aria-errormessage": _IDREF,
    "aria-expanded": _BOOL_UNDEF,
    "aria-flowto": _IDREFS,
    "aria-grabbed": _BOOL_UNDEF,
    "aria-haspopup": _d(ValueKind.TOKEN, "true", "false", "menu", "listbox", "tree", "grid", "dialog"),
    "aria-hidden": _BOOL_UNDEF,
    "aria-invalid": _d(ValueKind.TOKEN, "true", "false", "grammar", "spelling"),
    "aria-keyshortcuts": _TEXT,
    "aria-label": _TEXT,
    "aria-labelledby": _IDREFS,
    "aria-level": _INT,
    "aria-live": _d(ValueKind.TOKEN, "assertive", "off", "polite"),
    "aria-modal": _BOOL,
    "aria-multiline": _BOOL,
    "aria-multiselectable": _BOOL,
    "aria-orientation": _d(ValueKind.TOKEN, "horizontal", "vertical", "undefined"),
    "aria-owns": _IDREFS,
    "aria-placeholder": _TEXT,
    "aria-posinset": _INT,
    "aria-pressed": _TRISTATE,
    "aria-readonly": _BOOL,
    "aria-relevant": _d(ValueKind.TOKEN_LIST, "additions", "all", "removals", "text"),
    "aria-required": _BOOL,
    "aria-roledescription": _TEXT,
    "aria-rowcount": _INT,
    "aria-rowindex": _INT,
    "aria-rowindextext": _TEXT,
    "aria-rowspan": _INT,
    "aria-selected": _BOOL_UNDEF,
    "aria-setsize": _INT,
    "aria-sort": _d(ValueKind.TOKEN, "ascending", "descending", "none", "other"),
    "aria-valuemax": _NUM,
    "aria-valuemin": _NUM,
    "aria-valuenow": _NUM,
    "aria-valuetext": _TEXT,
})

GLOBAL_ARIA_ATTRIBUTES = frozenset({
    "aria-atomic", "aria-braillelabel", "aria-brailleroledescription", "aria-busy",
    "aria-controls", "aria-current", "aria-describedby", "aria-description", "aria-details",
    "aria-disabled", "aria-dropeffect", "aria-errormessage", "aria-flowto", "aria-grabbed",
    "aria-haspopup", "aria-hidden", "aria-invalid", "aria-keyshortcuts", "aria-label",
    "aria-labelledby", "aria-live", "aria-owns", "aria-relevant", "aria-roledescription",
})

HTML_ATTRIBUTE_DOMAINS: Mapping[str, ValueDomain] = MappingProxyType({
    "autocomplete": _d(ValueKind.AUTOCOMPLETE),
    "lang": _d(ValueKind.LANGUAGE_TAG),
    "scope": _d(ValueKind.TOKEN, "row", "col", "rowgroup", "colgroup"),
    "tabindex": _INT,
})

_INTEGER = re.compile(r"^[+-]?\d+$")
_NUMBER = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$")


def parse_integer(text: str) -> Optional[int]:
    """Base-10 integer literal with optional sign and surrounding whitespace; None otherwise."""
    stripped = text.strip()
    if not _INTEGER.match(stripped):
        return None
    return int(stripped)


def domain_for(name: str) -> Optional[ValueDomain]:
    key = name.lower()
    return ARIA_ATTRIBUTE_DOMAINS.get(key) or HTML_ATTRIBUTE_DOMAINS.get(key)


def _check_literal(domain: ValueDomain, text: str) -> Optional[str]:
    value = text.strip().lower()
    kind = domain.kind

    if kind == ValueKind.BOOLEAN:
        ok = value in ("true", "false")
    elif kind == ValueKind.TRISTATE:
        ok = value in ("true", "false", "mixed")
    elif kind == ValueKind.BOOLEAN_OR_UNDEFINED:
        # An empty value falls back to the default state.
        ok = value in ("true", "false", "undefined", "")
    elif kind == ValueKind.TOKEN:
        ok = value in domain.tokens
    elif kind == ValueKind.TOKEN_LIST:
        parts = value.split()
        ok = bool(parts) and all(p in domain.tokens for p in parts)
    elif kind == ValueKind.INTEGER:
        ok = parse_integer(value) is not None
    elif kind == ValueKind.NUMBER:
        ok = bool(_NUMBER.match(value))
    elif kind == ValueKind.AUTOCOMPLETE:
        return autocomplete_error(text)
    elif kind == ValueKind.LANGUAGE_TAG:
        ok = validate_language_tag(text)
    else:
        ok = True

    if ok:
        return None
    return f"expected {domain.expected}"


def validate_attribute_value(name: str, value: Union[LiteralValue, DynamicValue, str]) -> ValidationResult:
    """
    Checks a value against the domain of attribute `name`.

    Dynamic values are never judged. Attributes without a known domain accept anything.
    """
    if isinstance(value, DynamicValue):
        return ValidationResult.not_checkable()
    text = value.text if isinstance(value, LiteralValue) else value

    domain = domain_for(name)
    if domain is None:
        return ValidationResult.valid()

    reason = _check_literal(domain, text)
    if reason is None:
        return ValidationResult.valid()
    return ValidationResult.invalid(reason)
