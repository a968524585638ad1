from __future__ import annotations

import bisect
import re
from typing import Dict, List, Optional, Tuple, Union

from bs4 import BeautifulSoup, ParserRejectedMarkup
from bs4.element import NavigableString, PreformattedString, Tag

from rsx_auditor.dom.core import Attribute, DynamicValue, ElementNode, LiteralValue, TextNode
from rsx_auditor.exceptions import ParseError

# Jinja/Tera/Askama style interpolation and statements.
_TEMPLATE_MARKUP = re.compile(r"\{\{.*?\}\}|\{%.*?%\}", re.DOTALL)
_TAG_NAME = re.compile(r"<[^\s/>]+")
_GAP = re.compile(r"[\s/]*")
_ATTRIBUTE = re.compile(r"""([^\s"'>/=]+)(?:\s*=\s*(?:"[^"]*"|'[^']*'|[^\s"'=<>`]+))?""")


def _attribute_value(value: Optional[str]) -> Union[LiteralValue, DynamicValue]:
    if value is None:
        return LiteralValue()
    if _TEMPLATE_MARKUP.search(value):
        return DynamicValue()
    return LiteralValue(text=value)


class HtmlParseService:
    """
    Turns an HTML template into element trees using BeautifulSoup (html.parser).

    Template interpolation is treated as run-time data: an attribute containing
    `{{ ... }}` is Dynamic and so is a text run containing it. html.parser only
    reports where a start tag begins, so attribute positions are recovered by
    scanning the tag text from there.
    """

    def __init__(self):
        self._source = ""
        self._line_starts: List[int] = [0]

    def parse(self, source: str, file: str = "") -> List[ElementNode]:
        try:
            soup = BeautifulSoup(source, "html.parser", multi_valued_attributes=None)
        except ParserRejectedMarkup as e:
            raise ParseError(f"HTML parser rejected the markup: {e}") from e

        self._source = source
        self._line_starts = [0] + [m.end() for m in re.finditer(r"\n", source)]
        return [self._convert(child) for child in soup.children if isinstance(child, Tag)]

    def _locate(self, pos: int) -> Tuple[int, int]:
        index = bisect.bisect_right(self._line_starts, pos) - 1
        return index + 1, pos - self._line_starts[index] + 1

    def _attribute_positions(self, line: int, column: int) -> Dict[str, Tuple[int, int]]:
        """Maps each lowercased attribute name of the start tag at (line, column) to its position."""
        if line > len(self._line_starts):
            return {}
        start = self._line_starts[line - 1] + column - 1
        match = _TAG_NAME.match(self._source, start)
        if match is None:
            return {}

        positions: Dict[str, Tuple[int, int]] = {}
        pos = match.end()
        while pos < len(self._source):
            pos = _GAP.match(self._source, pos).end()
            attribute = _ATTRIBUTE.match(self._source, pos)
            if attribute is None:
                break
            positions.setdefault(attribute.group(1).lower(), self._locate(pos))
            pos = attribute.end()
        return positions

    def _convert(self, tag: Tag) -> ElementNode:
        line = tag.sourceline or 1
        column = (tag.sourcepos or 0) + 1
        positions = self._attribute_positions(line, column)

        attributes = []
        for name, value in tag.attrs.items():
            attr_line, attr_column = positions.get(name.lower(), (line, column))
            attributes.append(Attribute(name=name, value=_attribute_value(value),
                                        line=attr_line, column=attr_column))

        children: List[Union[ElementNode, TextNode]] = []
        for child in tag.children:
            if isinstance(child, Tag):
                children.append(self._convert(child))
            elif isinstance(child, NavigableString) and not isinstance(child, PreformattedString):
                children.extend(self._text_nodes(str(child), line, column))

        return ElementNode(tag=tag.name, attributes=tuple(attributes), children=tuple(children),
                           line=line, column=column)

    @staticmethod
    def _text_nodes(text: str, line: int, column: int) -> List[TextNode]:
        if not _TEMPLATE_MARKUP.search(text):
            return [TextNode(text=text, line=line, column=column)]
        nodes = [TextNode(dynamic=True, line=line, column=column)]
        static = " ".join(_TEMPLATE_MARKUP.sub(" ", text).split())
        if static:
            nodes.append(TextNode(text=static, line=line, column=column))
        return nodes
