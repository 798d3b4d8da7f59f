"""
Shared filesystem helpers.
"""

from .filesystem import build_lock, copy_path, ensure_directory, is_relative_to, write_text_file

__all__ = [
    "build_lock",
    "copy_path",
    "ensure_directory",
    "is_relative_to",
    "write_text_file",
]
