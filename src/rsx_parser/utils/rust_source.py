# src/rsx_parser/utils/rust_source.py
"""
Just enough Rust lexing to find macro invocations and step over the parts of a
source file that must not be read as markup: comments (nested block comments
included), string and raw string literals, and character literals.
"""
import bisect
import re
from typing import FrozenSet, Iterator, Optional, Tuple

from rsx_auditor.exceptions import MacroParseError

_IDENT = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_RAW_STRING_START = re.compile(r'b?r(#*)"')
_SCALAR = re.compile(r"-?(?:true|false|\d[\d_]*(?:\.\d+)?)")
_ESCAPE = re.compile(r"\\(u\{[0-9A-Fa-f_]{1,8}\}|x[0-9A-Fa-f]{2}|\n\s*|.)", re.DOTALL)

_SIMPLE_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "0": "\0", "\\": "\\", "'": "'", '"': '"'}
CLOSERS = {"(": ")", "[": "]", "{": "}"}


def unescape(body: str) -> str:
    """Resolves the escape sequences of a (non-raw) Rust string literal body."""

    def replace(match: re.Match) -> str:
        escape = match.group(1)
        if escape.startswith("u{"):
            code = int(escape[2:-1].replace("_", ""), 16)
            return chr(code) if code <= 0x10FFFF else ""
        if escape.startswith("x") and len(escape) == 3:
            return chr(int(escape[1:], 16))
        if escape.startswith("\n"):
            return ""
        return _SIMPLE_ESCAPES.get(escape, escape)

    return _ESCAPE.sub(replace, body)


def is_ident_char(c: str) -> bool:
    return c.isalnum() or c == "_"


class RustSource:
    """
    Rust source text with offset to (line, column) mapping.
    Lines and columns are 1-indexed; columns count characters.
    """

    def __init__(self, text: str):
        self.text = text
        self._line_starts = [0] + [m.end() for m in re.finditer(r"\n", text)]

    def __len__(self) -> int:
        return len(self.text)

    def locate(self, pos: int) -> Tuple[int, int]:
        index = bisect.bisect_right(self._line_starts, pos) - 1
        return index + 1, pos - self._line_starts[index] + 1

    def error(self, message: str, pos: int) -> MacroParseError:
        line, column = self.locate(pos)
        return MacroParseError(message, line, column)

    # --- Trivia ---

    def skip_line_comment(self, pos: int) -> int:
        end = self.text.find("\n", pos)
        return len(self.text) if end == -1 else end

    def skip_block_comment(self, pos: int) -> int:
        depth = 0
        i = pos
        while i < len(self.text):
            if self.text.startswith("/*", i):
                depth += 1
                i += 2
            elif self.text.startswith("*/", i):
                depth -= 1
                i += 2
                if depth == 0:
                    return i
            else:
                i += 1
        raise self.error("Unterminated block comment", pos)

    def skip_trivia(self, pos: int, end: Optional[int] = None) -> int:
        """Skips whitespace and comments, never past `end`."""
        end = len(self.text) if end is None else end
        while pos < end:
            if self.text[pos].isspace():
                pos += 1
            elif self.text.startswith("//", pos):
                pos = self.skip_line_comment(pos)
            elif self.text.startswith("/*", pos):
                pos = self.skip_block_comment(pos)
            else:
                break
        return min(pos, end)

    # --- Literals ---

    def _follows_ident(self, pos: int) -> bool:
        return pos > 0 and is_ident_char(self.text[pos - 1])

    def match_raw_string(self, pos: int) -> Optional[Tuple[int, int, int]]:
        """(content_start, content_end, end) of a raw string starting at pos, or None."""
        if self._follows_ident(pos):
            return None
        match = _RAW_STRING_START.match(self.text, pos)
        if not match:
            return None
        terminator = '"' + match.group(1)
        close = self.text.find(terminator, match.end())
        if close == -1:
            raise self.error("Unterminated raw string literal", pos)
        return match.end(), close, close + len(terminator)

    def skip_string(self, pos: int) -> int:
        """pos points at the opening quote; returns the offset past the closing one."""
        i = pos + 1
        while i < len(self.text):
            c = self.text[i]
            if c == "\\":
                i += 2
            elif c == '"':
                return i + 1
            else:
                i += 1
        raise self.error("Unterminated string literal", pos)

    def skip_char_or_lifetime(self, pos: int) -> int:
        text = self.text
        if text.startswith("\\", pos + 1):
            close = text.find("'", pos + 3)
            return pos + 1 if close == -1 else close + 1
        if pos + 2 < len(text) and text[pos + 2] == "'":
            return pos + 3
        # A lifetime such as 'a, or a stray apostrophe in markup text.
        return pos + 1

    def skip_literal_or_comment(self, pos: int) -> Optional[int]:
        """Offset past the comment or literal starting at pos; None when there is none."""
        text = self.text
        if text.startswith("//", pos):
            return self.skip_line_comment(pos)
        if text.startswith("/*", pos):
            return self.skip_block_comment(pos)
        raw = self.match_raw_string(pos)
        if raw is not None:
            return raw[2]
        c = text[pos]
        if c == '"':
            return self.skip_string(pos)
        if c == "b" and text.startswith('"', pos + 1) and not self._follows_ident(pos):
            return self.skip_string(pos + 1)
        if c == "'":
            return self.skip_char_or_lifetime(pos)
        return None

    def read_string_literal(self, pos: int) -> Optional[Tuple[str, int]]:
        """(value, end) of the string or raw string literal at pos, or None."""
        raw = self.match_raw_string(pos)
        if raw is not None:
            start, close, end = raw
            return self.text[start:close], end
        if self.text.startswith('"', pos):
            end = self.skip_string(pos)
            return unescape(self.text[pos + 1:end - 1]), end
        return None

    # --- Token trees ---

    def find_matching(self, pos: int) -> int:
        """Offset of the delimiter closing the one at pos."""
        stack = [CLOSERS[self.text[pos]]]
        i = pos + 1
        while i < len(self.text):
            skipped = self.skip_literal_or_comment(i)
            if skipped is not None:
                i = skipped
                continue
            c = self.text[i]
            if c in CLOSERS:
                stack.append(CLOSERS[c])
            elif c in ")]}":
                if c != stack[-1]:
                    raise self.error(f"Mismatched closing delimiter '{c}'", i)
                stack.pop()
                if not stack:
                    return i
            i += 1
        raise self.error(f"Unclosed delimiter '{self.text[pos]}'", pos)

    def iter_macro_invocations(self, names: FrozenSet[str]) -> Iterator[Tuple[str, int, int]]:
        """
        Yields (name, open, close) for every `name!` invocation outside comments and
        literals, where open and close are the offsets of its delimiters.
        Path-qualified calls such as `yew::html!` match on their last segment.
        Scanning resumes inside each body, so nested invocations are found too.
        """
        text = self.text
        i = 0
        while i < len(text):
            skipped = self.skip_literal_or_comment(i)
            if skipped is not None:
                i = skipped
                continue
            match = _IDENT.match(text, i)
            if match is None or self._follows_ident(i):
                i += 1
                continue

            i = match.end()
            if match.group() not in names:
                continue
            bang = self.skip_trivia(i)
            if not text.startswith("!", bang) or text.startswith("!=", bang):
                continue
            opener = self.skip_trivia(bang + 1)
            if opener >= len(text) or text[opener] not in CLOSERS:
                continue
            yield match.group(), opener, self.find_matching(opener)
            i = opener + 1


def literal_value_of(expression: str) -> Optional[str]:
    """
    The text of an expression that is a plain literal: a string, raw string,
    boolean or number. None for anything only known at run time.
    """
    expression = expression.strip()
    if not expression:
        return None
    if _SCALAR.fullmatch(expression):
        return expression
    literal = RustSource(expression).read_string_literal(0)
    if literal is not None and literal[1] == len(expression):
        return literal[0]
    return None
