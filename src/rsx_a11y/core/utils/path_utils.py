# src/rsx_a11y/core/utils/path_utils.py
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class PathUtils:
    """
    A central utility for reliably retrieving the paths the application depends on.
    """

    @staticmethod
    def get_shell_package_root() -> Path:
        """Returns the directory of the installed rsx_a11y package."""
        return Path(__file__).resolve().parents[2]

    @staticmethod
    def get_default_settings_path() -> Path:
        return PathUtils.get_shell_package_root() / "settings.json"
