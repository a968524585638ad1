# src/rsx_parser/services/macro_parse_service.py
import logging
import re
from typing import Iterable, List, Optional, Tuple, Union

from rsx_auditor.aria.elements import VOID_TAGS
from rsx_auditor.dom.core import Attribute, DynamicValue, ElementNode, LiteralValue, TextNode
from rsx_parser.utils.rust_source import RustSource, is_ident_char, literal_value_of

logger = logging.getLogger(__name__)

DEFAULT_MACROS = ("html", "view", "rsx")

_TAG_NAME = re.compile(r"[A-Za-z_][A-Za-z0-9_\-:.]*")
_ATTR_NAME = re.compile(r"(?:r#)?[A-Za-z_][A-Za-z0-9_\-]*(?::[A-Za-z_][A-Za-z0-9_\-]*)*")
_SHORTHAND = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_CONTEXT_ARG = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")

Child = Union[ElementNode, TextNode]


class MacroParseService:
    """
    Extracts element trees from the markup macros of a Rust source file.

    Every `html!`, `view!` and `rsx!` invocation (names are configurable) whose
    body starts with a tag is parsed as JSX-like markup. Bodies in any other
    syntax are left alone. This is a stateless service; reading files and
    error reporting are handled by the ParseController.
    """

    def __init__(self, macros: Iterable[str] = DEFAULT_MACROS):
        self.macros = frozenset(macros)

    def parse(self, source: str, file: str = "") -> List[ElementNode]:
        """
        Returns the root elements of all macro invocations in source order.
        Raises MacroParseError with the position of the first malformed construct.
        """
        rust = RustSource(source)
        roots: List[ElementNode] = []
        for name, open_pos, close_pos in rust.iter_macro_invocations(self.macros):
            parsed = _MarkupParser(rust, open_pos + 1, close_pos).parse_body()
            if parsed:
                line, _ = rust.locate(open_pos)
                logger.debug(f"{file}:{line}: {name}! yielded {len(parsed)} root element(s)")
            roots.extend(parsed)
        return roots


class _MarkupParser:
    """Recursive-descent parser over one macro body, text[start:end]."""

    def __init__(self, rust: RustSource, start: int, end: int):
        self.rust = rust
        self.text = rust.text
        self.pos = start
        self.end = end

    # --- Cursor helpers ---

    def _at(self, token: str) -> bool:
        return self.text.startswith(token, self.pos) and self.pos + len(token) <= self.end

    def _skip_trivia(self) -> None:
        self.pos = self.rust.skip_trivia(self.pos, self.end)

    def _locate(self, pos: int) -> Tuple[int, int]:
        return self.rust.locate(pos)

    def _error(self, message: str, pos: Optional[int] = None):
        return self.rust.error(message, self.pos if pos is None else pos)

    def _jump_past_group(self) -> Tuple[str, int]:
        """Consumes the bracketed group at the cursor; returns its inner text and start offset."""
        start = self.pos
        close = self.rust.find_matching(start)
        self.pos = close + 1
        return self.text[start + 1:close], start

    # --- Body ---

    def parse_body(self) -> List[ElementNode]:
        self._skip_trivia()
        self._skip_context_argument()
        self._skip_trivia()
        if not self._at("<"):
            return []
        children = self._parse_children(None)
        return [c for c in children if isinstance(c, ElementNode)]

    def _skip_context_argument(self) -> None:
        # view! { cx, <div/> }
        match = _CONTEXT_ARG.match(self.text, self.pos)
        if not match or match.end() > self.end:
            return
        after = self.rust.skip_trivia(match.end(), self.end)
        if self.text.startswith(",", after):
            self.pos = after + 1

    def _parse_children(self, open_tag: Optional[Tuple[str, int]]) -> List[Child]:
        """
        Parses content up to the closing tag of open_tag (consumed), or to the
        end of the body when open_tag is None.
        """
        children: List[Child] = []
        while True:
            self._skip_trivia()
            if self.pos >= self.end:
                if open_tag is not None:
                    name, open_pos = open_tag
                    raise self._error(f"Unclosed <{name}> element", open_pos)
                return children

            if self._at("<!--"):
                self._skip_html_comment()
            elif self._at("<!"):
                self._skip_declaration()
            elif self._at("</"):
                close_pos = self.pos
                name = self._parse_closing_tag()
                if open_tag is None:
                    raise self._error(f"Unexpected closing tag </{name}>", close_pos)
                if name != open_tag[0]:
                    raise self._error(f"Expected closing tag </{open_tag[0]}>, found </{name}>", close_pos)
                return children
            elif self._at("<>"):
                open_pos = self.pos
                self.pos += 2
                children.extend(self._parse_children(("", open_pos)))
            elif self._at("<"):
                children.append(self._parse_element())
            elif self._at("{"):
                node = self._parse_block_child()
                if node is not None:
                    children.append(node)
            else:
                children.append(self._parse_text())

    def _skip_html_comment(self) -> None:
        close = self.text.find("-->", self.pos + 4, self.end)
        if close == -1:
            raise self._error("Unterminated HTML comment")
        self.pos = close + 3

    def _skip_declaration(self) -> None:
        close = self.text.find(">", self.pos, self.end)
        if close == -1:
            raise self._error("Unterminated markup declaration")
        self.pos = close + 1

    # --- Text ---

    def _parse_text(self) -> TextNode:
        line, column = self._locate(self.pos)
        literal = self.rust.read_string_literal(self.pos)
        if literal is not None:
            value, self.pos = literal
            return TextNode(text=value, line=line, column=column)

        start = self.pos
        while self.pos < self.end:
            if self.text[self.pos] in "<{" or self._at("//") or self._at("/*"):
                break
            self.pos += 1
        if self.pos == start:
            raise self._error(f"Unexpected character {self.text[start]!r}")
        return TextNode(text=" ".join(self.text[start:self.pos].split()), line=line, column=column)

    def _parse_block_child(self) -> Optional[TextNode]:
        inner, start = self._jump_past_group()
        if not inner.strip():
            return None
        line, column = self._locate(start)
        value = literal_value_of(inner)
        if value is None:
            return TextNode(dynamic=True, line=line, column=column)
        return TextNode(text=value, line=line, column=column)

    # --- Elements ---

    def _read_tag_name(self) -> str:
        if self._at("@"):
            # Yew dynamic tag: <@{name}>
            self.pos += 1
            if self._at("{"):
                self._jump_past_group()
            return "@"
        match = _TAG_NAME.match(self.text, self.pos)
        if not match or match.end() > self.end:
            raise self._error("Expected a tag name after '<'")
        self.pos = match.end()
        return match.group()

    def _parse_closing_tag(self) -> str:
        self.pos += 2
        self._skip_trivia()
        name = "" if self._at(">") else self._read_tag_name()
        self._skip_trivia()
        if not self._at(">"):
            raise self._error(f"Expected '>' to end </{name}>")
        self.pos += 1
        return name

    def _parse_element(self) -> ElementNode:
        start = self.pos
        line, column = self._locate(start)
        self.pos += 1
        name = self._read_tag_name()

        attributes: List[Attribute] = []
        while True:
            self._skip_trivia()
            if self.pos >= self.end:
                raise self._error(f"Unterminated <{name}> tag", start)
            if self._at("/>"):
                self.pos += 2
                return ElementNode(tag=name, attributes=tuple(attributes), line=line, column=column)
            if self._at(">"):
                self.pos += 1
                break
            attribute = self._parse_attribute(name)
            if attribute is not None:
                attributes.append(attribute)

        if name in VOID_TAGS:
            self._consume_void_close(name)
            return ElementNode(tag=name, attributes=tuple(attributes), line=line, column=column)

        children = self._parse_children((name, start))
        return ElementNode(tag=name, attributes=tuple(attributes), children=tuple(children),
                           line=line, column=column)

    def _consume_void_close(self, name: str) -> None:
        # <input></input> is tolerated
        mark = self.pos
        self._skip_trivia()
        if self._at("</") and self._parse_closing_tag() == name:
            return
        self.pos = mark

    # --- Attributes ---

    def _parse_attribute(self, tag: str) -> Optional[Attribute]:
        start = self.pos
        line, column = self._locate(start)

        if self._at("{"):
            # Shorthand {onclick}; spreads such as {..props} carry no name.
            inner, _ = self._jump_past_group()
            inner = inner.strip()
            if _SHORTHAND.fullmatch(inner):
                return Attribute(name=inner, value=DynamicValue(), line=line, column=column)
            return None
        if self._at(".."):
            self.pos += 2
            self._read_expression()
            return None

        match = _ATTR_NAME.match(self.text, self.pos)
        if not match or match.end() > self.end:
            raise self._error(f"Unexpected character {self.text[start]!r} in <{tag}> tag")
        name = match.group()
        self.pos = match.end()

        mark = self.pos
        self._skip_trivia()
        if not self._at("=") or self._at("=="):
            self.pos = mark
            return Attribute(name=name, value=LiteralValue(), line=line, column=column)
        self.pos += 1
        self._skip_trivia()
        if self.pos >= self.end:
            raise self._error(f"Missing value for attribute `{name}`", start)

        return Attribute(name=name, value=self._parse_attribute_value(), line=line, column=column)

    def _parse_attribute_value(self) -> Union[LiteralValue, DynamicValue]:
        literal = self.rust.read_string_literal(self.pos)
        if literal is not None:
            value, self.pos = literal
            return LiteralValue(text=value)
        if self._at("{"):
            inner, _ = self._jump_past_group()
        else:
            inner = self._read_expression()
        value = literal_value_of(inner)
        return DynamicValue() if value is None else LiteralValue(text=value)

    def _read_expression(self) -> str:
        """
        Reads an unbraced attribute value: a path, call, literal or closure such as
        `move |_| set_count.update(|c| *c += 1)`. Ends at whitespace, '>' or '/>'
        outside brackets.
        """
        start = self.pos
        if self._at("move") and not is_ident_char(self.text[self.pos + 4:self.pos + 5] or "_"):
            self.pos += 4
            self._skip_trivia()
        if self._at("||"):
            self.pos += 2
            self._skip_trivia()
        elif self._at("|"):
            close = self.text.find("|", self.pos + 1, self.end)
            if close == -1:
                raise self._error("Unterminated closure parameter list")
            self.pos = close + 1
            self._skip_trivia()

        while self.pos < self.end:
            c = self.text[self.pos]
            if c.isspace() or c == ">" or self._at("/>") or self._at("//") or self._at("/*"):
                break
            if c in "([{":
                self._jump_past_group()
                continue
            skipped = self.rust.skip_literal_or_comment(self.pos)
            self.pos = skipped if skipped is not None else self.pos + 1

        if self.pos == start:
            raise self._error("Expected an attribute value")
        return self.text[start:self.pos]
