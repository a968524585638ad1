from typing import Iterable, Optional


class RsxA11yError(Exception):
    """Base error for everything the linter raises on purpose."""


class ConfigurationError(RsxA11yError):
    """Invalid run configuration. Raised before any file is processed."""


class UnknownRuleError(ConfigurationError):
    """One or more --only/--skip names are not rule identifiers."""

    def __init__(self, names: Iterable[str]):
        self.names = sorted(set(names))
        listed = ", ".join(f"'{n}'" for n in self.names)
        super().__init__(f"Unknown rule identifier(s): {listed}. Use --list-rules to see valid names.")


class DiscoveryError(RsxA11yError):
    """The path to check cannot be walked."""


class ParseError(RsxA11yError):
    """A file could not be turned into element trees."""

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        super().__init__(message)
        self.line = line
        self.column = column


class SourceReadError(ParseError):
    """The file could not be read."""


class MacroParseError(ParseError):
    """Markup inside a macro invocation is malformed."""
