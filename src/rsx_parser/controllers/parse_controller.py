from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Union

from rsx_auditor.dom.models import SourceDocument
from rsx_auditor.exceptions import ParseError, SourceReadError
from rsx_parser.model import HTML_EXTENSIONS, ParserSettings
from rsx_parser.services.html_parse_service import HtmlParseService
from rsx_parser.services.macro_parse_service import MacroParseService
from rsx_parser.services.source_discovery_service import SourceDiscoveryService

logger = logging.getLogger(__name__)


class ParseController:
    """
    Turns source files into SourceDocuments for the lint engine.
    Rust files go through the macro parser, HTML templates through BeautifulSoup.
    """

    def __init__(self, settings: Optional[ParserSettings] = None) -> None:
        self.settings = settings or ParserSettings()
        self.macro_service = MacroParseService(self.settings.macros)
        self.html_service = HtmlParseService()

    def discover(self, path: Union[str, Path]) -> List[Path]:
        """Lists the files under path that this controller can parse."""
        service = SourceDiscoveryService(
            extensions=self.settings.discovery_extensions,
            excluded_dirs=self.settings.excluded_dirs,
        )
        return service.discover(path)

    def parse_file(self, path: Union[str, Path]) -> SourceDocument:
        """
        Reads a file as UTF-8 and parses it.
        Raises SourceReadError when the file cannot be read, MacroParseError or
        ParseError when its markup is malformed.
        """
        file = Path(path).as_posix()
        try:
            source = Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise SourceReadError(f"Failed to read {file}: {e}") from e
        return self.parse_source(source, file)

    def parse_source(self, source: str, file: str) -> SourceDocument:
        try:
            if Path(file).suffix.lower() in HTML_EXTENSIONS:
                roots = self.html_service.parse(source, file)
            else:
                roots = self.macro_service.parse(source, file)
        except ParseError as e:
            raise type(e)(f"Failed to parse {file}: {e}", e.line, e.column) from e

        logger.debug(f"Parsed {file}: {len(roots)} root element(s)")
        return SourceDocument(file=file, roots=tuple(roots))
