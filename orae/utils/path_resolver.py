"""Path resolution for bundled resources and writable data files (logs).

Resources such as config.json are always read from the application root.
Writable files go to the application root when it is writable (portable
mode), otherwise to the platform-specific user data directory.
"""

import os
import sys
from pathlib import Path
from typing import Tuple


APP_NAME = "ORAE"


def get_app_root() -> Path:
    """Get the application root directory (the directory holding orae_report.py).

    Returns:
        Path to the application root directory.
    """
    return Path(__file__).resolve().parent.parent.parent


def has_write_access(directory: Path) -> bool:
    """Check if a directory exists (or can be created) and is writable.

    Args:
        directory: Directory path to check.

    Returns:
        True if a probe file can be created and removed, False otherwise.
    """
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except (OSError, PermissionError):
        return False

    probe = directory / ".write_test"
    try:
        probe.touch()
        probe.unlink()
        return True
    except (OSError, PermissionError):
        return False


def get_user_data_directory() -> Path:
    """Get the platform-specific user data directory for ORAE.

    Returns:
        Path to the user data directory.
    """
    if sys.platform == "win32":
        appdata = os.getenv("APPDATA")
        if appdata:
            return Path(appdata) / APP_NAME
        return Path.home() / "AppData" / "Roaming" / APP_NAME
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / APP_NAME
    xdg_data_home = os.getenv("XDG_DATA_HOME")
    if xdg_data_home:
        return Path(xdg_data_home) / APP_NAME
    return Path.home() / ".local" / "share" / APP_NAME


def resolve_data_file_path(filename: str) -> Tuple[Path, bool]:
    """Resolve where a writable data file (e.g. a log file) should live.

    Args:
        filename: Name of the data file.

    Returns:
        Tuple of (resolved_path, is_portable_mode).
    """
    app_root = get_app_root()
    if has_write_access(app_root):
        return app_root / filename, True

    user_data_dir = get_user_data_directory()
    user_data_dir.mkdir(parents=True, exist_ok=True)
    return user_data_dir / filename, False


def get_app_resource_path(relative_path: str) -> Path:
    """Get the path to a read-only resource below the application root.

    Args:
        relative_path: Relative path from app root (e.g., "orae/config/config.json").

    Returns:
        Path to the resource file.
    """
    return get_app_root() / relative_path
