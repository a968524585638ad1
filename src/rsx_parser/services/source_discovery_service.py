# src/rsx_parser/services/source_discovery_service.py
import logging
import os
from pathlib import Path
from typing import Iterable, List, Union

from rsx_auditor.exceptions import DiscoveryError

logger = logging.getLogger(__name__)


class SourceDiscoveryService:
    """
    Walks a file or directory and returns the source files to lint, in sorted order.
    Build output (target), node_modules and hidden directories are skipped.
    """

    def __init__(self, extensions: Iterable[str] = (".rs",),
                 excluded_dirs: Iterable[str] = ("target", "node_modules")):
        self.extensions = frozenset(e.lower() if e.startswith(".") else f".{e.lower()}" for e in extensions)
        self.excluded_dirs = frozenset(excluded_dirs)

    def _is_excluded(self, dirname: str) -> bool:
        return dirname.startswith(".") or dirname in self.excluded_dirs

    def discover(self, path: Union[str, Path]) -> List[Path]:
        root = Path(path)
        if not root.exists():
            raise DiscoveryError(f"Path does not exist: {root}")
        if root.is_file():
            return [root]

        resolved = root.resolve()
        if resolved.parent == resolved:
            raise DiscoveryError(f"Refusing to walk the filesystem root: {resolved}")

        files: List[Path] = []
        for dirpath, dirnames, filenames in os.walk(root):
            dirnames[:] = sorted(d for d in dirnames if not self._is_excluded(d))
            for name in filenames:
                if Path(name).suffix.lower() in self.extensions:
                    files.append(Path(dirpath) / name)

        files.sort()
        logger.info(f"Discovered {len(files)} source file(s) under {root}")
        return files
