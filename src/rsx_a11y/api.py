# src/rsx_a11y/api.py
"""
Programmatic entry point: lint a file or directory and get the summary back.
"""
import logging
import time
from pathlib import Path
from typing import Callable, Iterable, Optional, Union

from pydantic import BaseModel, ConfigDict

from rsx_a11y.core.managers.config_manager import config_manager
from rsx_auditor.controllers.audit_controller import AuditController
from rsx_auditor.dom.registry import RuleRegistry
from rsx_auditor.exceptions import ConfigurationError
from rsx_auditor.model import LintSummary
from rsx_parser.controllers.parse_controller import ParseController
from rsx_parser.model import ParserSettings

logger = logging.getLogger(__name__)


class CheckResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    summary: LintSummary
    duration: float = 0.0


def parser_settings_from_config(include_html: Optional[bool] = None) -> ParserSettings:
    """Parser settings from the `discovery` and `parser` configuration sections."""
    defaults = ParserSettings()
    if include_html is None:
        include_html = bool(config_manager.get_nested("parser.include_html", False))
    return ParserSettings(
        macros=tuple(config_manager.get_nested("parser.macros", defaults.macros)),
        extensions=tuple(config_manager.get_nested("discovery.extensions", defaults.extensions)),
        excluded_dirs=tuple(config_manager.get_nested("discovery.excluded_dirs", defaults.excluded_dirs)),
        include_html=include_html,
    )


def check_project(
        path: Union[str, Path],
        only: Optional[Iterable[str]] = None,
        skip: Optional[Iterable[str]] = None,
        workers: int = 1,
        include_html: Optional[bool] = None,
        progress_callback: Optional[Callable[[int, int], None]] = None,
) -> CheckResult:
    """
    Lints every supported file under path.

    Configuration errors (unknown rule names, a bad worker count) are raised
    before any file is read; a missing or unwalkable path raises DiscoveryError.
    Problems with individual files are reported in the summary, not raised.
    """
    enabled = RuleRegistry.resolve_enabled(only, skip)
    if workers < 1:
        raise ConfigurationError(f"--workers must be at least 1, got {workers}")

    settings = parser_settings_from_config(include_html)
    paths = ParseController(settings).discover(path)
    logger.info(f"Checking {len(paths)} file(s) with {len(enabled)} rule(s) on {workers} worker(s)")

    start = time.perf_counter()
    summary = AuditController(settings).run(paths, enabled, workers=workers, progress_callback=progress_callback)
    return CheckResult(summary=summary, duration=time.perf_counter() - start)
