"""String and filesystem helpers."""

from __future__ import annotations

import os
import stat
from collections.abc import Iterable


def base_name(path: str) -> str:
    """Return the part of ``path`` after its last slash."""
    _, slash, tail = path.rpartition("/")
    return tail if slash else path


def dir_name(path: str | None) -> str:
    """Return the directory part of ``path``, like POSIX ``dirname``."""
    if not path:
        return "."
    trimmed = path.rstrip("/")
    if not trimmed:
        return "/"
    slash = trimmed.rfind("/")
    if slash == -1:
        return "."
    if slash == 0:
        return "/"
    return trimmed[:slash]


def index_of(element: str, array: Iterable[str]) -> int:
    """Return the position of ``element`` in ``array``.

    Raises ValueError when the element is absent.
    """
    for position, item in enumerate(array):
        if item == element:
            return position
    raise ValueError(f"{element!r} is not in the sequence")


def in_array(element: str, array: Iterable[str]) -> bool:
    """Tell whether ``element`` occurs in ``array``."""
    return any(item == element for item in array)


def is_dir(path: str | os.PathLike[str]) -> bool:
    """Tell whether ``path`` is a directory that can be opened for listing."""
    try:
        with os.scandir(path):
            return True
    except OSError:
        return False


def is_file(path: str | os.PathLike[str]) -> bool:
    """Tell whether ``path`` is a regular file, following symlinks."""
    try:
        return stat.S_ISREG(os.stat(path).st_mode)
    except OSError:
        return False


def is_writable(path: str | os.PathLike[str]) -> bool:
    """Tell whether the current user may write to ``path``."""
    return os.access(path, os.W_OK)