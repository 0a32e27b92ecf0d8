"""Core paths, constants and file helpers."""

from .atomic import atomic_write_json, atomic_write_text
from .home import find_workspace, get_data_dir, get_default_dashboard_dir, get_user_db_path

__all__ = [
    "atomic_write_json",
    "atomic_write_text",
    "find_workspace",
    "get_data_dir",
    "get_default_dashboard_dir",
    "get_user_db_path",
]
