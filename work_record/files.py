"""Filesystem helpers for uploaded files."""

from __future__ import annotations

from os import PathLike
from pathlib import Path

STATIC_UPLOAD_DIR = "./static/upload/"

MAX_FILENAME_BYTES = 100

_INVALID_CHARS = '<>:"/\\|?*'
_REPLACEMENTS = str.maketrans({char: "_" for char in _INVALID_CHARS})


def sanitize_filename(name: str) -> str:
    """Replace characters not allowed in file names and cap the UTF-8 length at 100 bytes."""
    clean = name.translate(_REPLACEMENTS)
    encoded = clean.encode("utf-8")
    if len(encoded) > MAX_FILENAME_BYTES:
        # A character cut in half at the limit is dropped rather than left broken.
        clean = encoded[:MAX_FILENAME_BYTES].decode("utf-8", errors="ignore")
    return clean


def create_directory(path: str | PathLike[str]) -> Path:
    """Create a directory and any missing parents; return its path."""
    directory = Path(path)
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def write_binary_file(path: str | PathLike[str], data: bytes) -> None:
    """Write bytes to a file, replacing any existing content."""
    Path(path).write_bytes(data)