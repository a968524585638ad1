# src/rsx_auditor/dom/models.py
from typing import Iterator, Tuple

from pydantic import BaseModel, ConfigDict

from .core import ElementNode


class SourceDocument(BaseModel):
    """
    A parsed source file.

    `roots` is the forest of element trees found in the file, in source order:
    every markup macro invocation (or template) contributes its top-level elements.
    """
    model_config = ConfigDict(frozen=True)

    file: str
    roots: Tuple[ElementNode, ...] = ()

    @property
    def has_elements(self) -> bool:
        return bool(self.roots)

    def iter_elements(self) -> Iterator[ElementNode]:
        for root in self.roots:
            yield root
            yield from root.iter_descendants()
