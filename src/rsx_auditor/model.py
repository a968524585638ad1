# src/rsx_auditor/model.py
from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class RuleId(str, Enum):
    """
    The fixed vocabulary of rule identifiers.

    These kebab-case names are the public surface for --only/--skip filtering
    and for the `rule` field in JSON output.
    """
    ALT_TEXT = "alt-text"
    ANCHOR_AMBIGUOUS_TEXT = "anchor-ambiguous-text"
    ANCHOR_HAS_CONTENT = "anchor-has-content"
    ANCHOR_IS_VALID = "anchor-is-valid"
    ARIA_ACTIVEDESCENDANT_HAS_TABINDEX = "aria-activedescendant-has-tabindex"
    ARIA_PROPS = "aria-props"
    ARIA_PROPTYPES = "aria-proptypes"
    ARIA_ROLE = "aria-role"
    ARIA_UNSUPPORTED_ELEMENTS = "aria-unsupported-elements"
    AUTOCOMPLETE_VALID = "autocomplete-valid"
    CLICK_EVENTS_HAVE_KEY_EVENTS = "click-events-have-key-events"
    CONTROL_HAS_ASSOCIATED_LABEL = "control-has-associated-label"
    HEADING_HAS_CONTENT = "heading-has-content"
    HTML_HAS_LANG = "html-has-lang"
    IFRAME_HAS_TITLE = "iframe-has-title"
    IMG_REDUNDANT_ALT = "img-redundant-alt"
    INTERACTIVE_SUPPORTS_FOCUS = "interactive-supports-focus"
    LABEL_HAS_ASSOCIATED_CONTROL = "label-has-associated-control"
    LANG = "lang"
    MEDIA_HAS_CAPTION = "media-has-caption"
    MOUSE_EVENTS_HAVE_KEY_EVENTS = "mouse-events-have-key-events"
    NO_ACCESS_KEY = "no-access-key"
    NO_ARIA_HIDDEN_ON_FOCUSABLE = "no-aria-hidden-on-focusable"
    NO_AUTOFOCUS = "no-autofocus"
    NO_DISTRACTING_ELEMENTS = "no-distracting-elements"
    NO_INTERACTIVE_ELEMENT_TO_NONINTERACTIVE_ROLE = "no-interactive-element-to-noninteractive-role"
    NO_NONINTERACTIVE_ELEMENT_INTERACTIONS = "no-noninteractive-element-interactions"
    NO_NONINTERACTIVE_ELEMENT_TO_INTERACTIVE_ROLE = "no-noninteractive-element-to-interactive-role"
    NO_NONINTERACTIVE_TABINDEX = "no-noninteractive-tabindex"
    NO_REDUNDANT_ROLES = "no-redundant-roles"
    NO_STATIC_ELEMENT_INTERACTIONS = "no-static-element-interactions"
    PREFER_TAG_OVER_ROLE = "prefer-tag-over-role"
    ROLE_HAS_REQUIRED_ARIA_PROPS = "role-has-required-aria-props"
    ROLE_SUPPORTS_ARIA_PROPS = "role-supports-aria-props"
    SCOPE = "scope"
    TABINDEX_NO_POSITIVE = "tabindex-no-positive"


class Diagnostic(BaseModel):
    """
    A single rule finding, located at an element or one of its attributes.
    """
    model_config = ConfigDict(frozen=True)

    rule: RuleId
    severity: Severity
    message: str
    help: str
    file: str
    line: int = Field(ge=1)
    column: int = Field(ge=1)
    element: str = ""

    @field_validator('help')
    @classmethod
    def help_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("help text must not be empty")
        return v

    @property
    def sort_key(self) -> Tuple[str, int, int, str]:
        return self.file, self.line, self.column, self.rule.value

    def to_row(self) -> dict:
        """Flat representation used by JSON output and tabular exports."""
        return {
            "rule": self.rule.value,
            "severity": self.severity.value,
            "message": self.message,
            "help": self.help,
            "file": self.file,
            "line": self.line,
            "column": self.column,
            "element": self.element,
        }


class FileError(BaseModel):
    """A file the parser could not turn into element trees. Carries no rule identifier."""
    model_config = ConfigDict(frozen=True)

    file: str
    message: str
    line: Optional[int] = None
    column: Optional[int] = None

    def to_row(self) -> dict:
        return {"file": self.file, "message": self.message, "line": self.line, "column": self.column}


class FileBatch(BaseModel):
    """Everything one worker produced for one file."""
    model_config = ConfigDict(frozen=True)

    file: str
    diagnostics: Tuple[Diagnostic, ...] = ()
    error: Optional[FileError] = None
    has_elements: bool = False


class SeverityCounts(BaseModel):
    model_config = ConfigDict(frozen=True)

    errors: int = 0
    warnings: int = 0
    infos: int = 0


class LintSummary(BaseModel):
    """
    The immutable result of one run: diagnostics sorted by (file, line, column, rule)
    plus the file errors, sorted by file.
    """
    model_config = ConfigDict(frozen=True)

    diagnostics: Tuple[Diagnostic, ...] = ()
    file_errors: Tuple[FileError, ...] = ()
    files_checked: int = 0

    @property
    def counts(self) -> SeverityCounts:
        tally = {Severity.ERROR: 0, Severity.WARNING: 0, Severity.INFO: 0}
        for d in self.diagnostics:
            tally[d.severity] += 1
        return SeverityCounts(
            errors=tally[Severity.ERROR],
            warnings=tally[Severity.WARNING],
            infos=tally[Severity.INFO],
        )

    def by_severity(self, severity: Severity) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == severity]

    def has_errors(self) -> bool:
        return any(d.severity == Severity.ERROR for d in self.diagnostics)

    def has_warnings(self) -> bool:
        return any(d.severity == Severity.WARNING for d in self.diagnostics)
