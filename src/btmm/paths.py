"""
Path utilities for btmm.
"""

import os
from pathlib import Path


def get_package_dir() -> Path:
    """Get the directory of the installed btmm package."""
    return Path(__file__).parent


def get_i18n_dir() -> Path:
    """Get the directory holding the translation files (shipped inside the package)."""
    return get_package_dir() / "locales"


def get_data_dir() -> Path:
    """
    Get the user data directory for storing the database.

    Returns:
        - $BTMM_DATA_DIR when set
        - Otherwise .btmm/ in the current working directory
    """
    env_dir = os.environ.get("BTMM_DATA_DIR")
    data_dir = Path(env_dir) if env_dir else Path.cwd() / ".btmm"
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir


def get_default_db_path() -> Path:
    """Get the default SQLite database file path."""
    return get_data_dir() / "btmm.sqlite"
