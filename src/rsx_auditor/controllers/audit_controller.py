import logging
from concurrent.futures import ProcessPoolExecutor
from functools import partial
from pathlib import Path
from typing import Callable, FrozenSet, Iterable, List, Optional, Sequence, Union

from rsx_auditor.dom.qngine import QNGINE
from rsx_auditor.exceptions import ConfigurationError, ParseError
from rsx_auditor.model import FileBatch, FileError, LintSummary, RuleId
from rsx_parser.controllers.parse_controller import ParseController
from rsx_parser.model import ParserSettings

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


def _worker_lint_file(path: str, enabled: FrozenSet[RuleId], settings: ParserSettings) -> FileBatch:
    """
    Worker function to parse and lint a single file in a separate process.
    Never raises: failures become a FileError for this file only.
    """
    file = Path(path).as_posix()
    try:
        document = ParseController(settings).parse_file(path)
        diagnostics = QNGINE(enabled=enabled).run(document.roots, document.file)
        return FileBatch(
            file=document.file,
            diagnostics=tuple(diagnostics),
            has_elements=document.has_elements,
        )

    except ParseError as e:
        logger.warning(str(e))
        return FileBatch(file=file, error=FileError(file=file, message=str(e), line=e.line, column=e.column))

    except Exception as e:
        logger.error(f"Worker failed on {file}: {e}", exc_info=True)
        return FileBatch(file=file, error=FileError(file=file, message=f"Internal error while checking {file}: {e}"))


def aggregate(batches: Iterable[FileBatch]) -> LintSummary:
    """
    Folds per-file batches into one summary. Pure and order-independent:
    diagnostics are sorted by (file, line, column, rule), file errors by file.
    """
    batches = list(batches)
    diagnostics = sorted(
        (d for batch in batches for d in batch.diagnostics),
        key=lambda d: d.sort_key + (d.message,),
    )
    file_errors = sorted(
        (batch.error for batch in batches if batch.error is not None),
        key=lambda e: (e.file, e.line or 0, e.column or 0, e.message),
    )
    return LintSummary(
        diagnostics=tuple(diagnostics),
        file_errors=tuple(file_errors),
        files_checked=sum(1 for batch in batches if batch.has_elements),
    )


class AuditController:
    """
    Orchestrates a lint run: fans files out over worker processes and folds the
    resulting batches into a single LintSummary.
    """

    def __init__(self, settings: Optional[ParserSettings] = None):
        self.settings = settings or ParserSettings()

    def run(
            self,
            paths: Sequence[Union[str, Path]],
            enabled: Iterable[RuleId],
            workers: int = 1,
            progress_callback: Optional[ProgressCallback] = None
    ) -> LintSummary:
        """Lints every path with the enabled rules; inline when workers == 1."""
        if workers < 1:
            raise ConfigurationError(f"workers must be at least 1, got {workers}")

        tasks = [str(p) for p in paths]
        total = len(tasks)
        func = partial(_worker_lint_file, enabled=frozenset(enabled), settings=self.settings)
        batches: List[FileBatch] = []

        if workers == 1 or total <= 1:
            self._collect(map(func, tasks), batches, total, progress_callback)
        else:
            with ProcessPoolExecutor(max_workers=min(workers, total)) as executor:
                self._collect(executor.map(func, tasks), batches, total, progress_callback)

        summary = aggregate(batches)
        counts = summary.counts
        logger.info(
            f"Linted {total} file(s): {counts.errors} error(s), {counts.warnings} warning(s), "
            f"{counts.infos} info(s), {len(summary.file_errors)} file error(s)"
        )
        return summary

    @staticmethod
    def _collect(results: Iterable[FileBatch], batches: List[FileBatch], total: int,
                 progress_callback: Optional[ProgressCallback]) -> None:
        for i, batch in enumerate(results):
            batches.append(batch)
            if progress_callback:
                progress_callback(i + 1, total)
