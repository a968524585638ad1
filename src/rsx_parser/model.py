# ============================================
# file: src/rsx_parser/model.py
# ============================================
from __future__ import annotations

from typing import Tuple

from pydantic import BaseModel, ConfigDict

HTML_EXTENSIONS = (".html", ".htm")


class ParserSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    macros: Tuple[str, ...] = ("html", "view", "rsx")
    extensions: Tuple[str, ...] = (".rs",)
    excluded_dirs: Tuple[str, ...] = ("target", "node_modules")
    include_html: bool = False

    @property
    def discovery_extensions(self) -> Tuple[str, ...]:
        """Extensions to collect; HTML templates only when include_html is set."""
        if self.include_html:
            return tuple(dict.fromkeys(self.extensions + HTML_EXTENSIONS))
        return tuple(e for e in self.extensions if e not in HTML_EXTENSIONS)
