"""File system helpers: existence checks, directory handling and safe moves."""

from __future__ import annotations

import logging
import os
import re
import shutil
import zipfile
from pathlib import Path

__all__ = [
    "file_exists",
    "dir_exists",
    "touch",
    "ensure_dir",
    "ensure_dir_all",
    "remove_dir",
    "empty_dir",
    "list_dir",
    "get_home_directory",
    "safe_move",
    "is_zip_file_uncompressed",
    "write_file",
    "get_intra_dir",
    "get_parent",
    "match_entries",
    "out_dir",
]

_log = logging.getLogger(__name__)

PathLike = str | os.PathLike


def file_exists(path: PathLike) -> bool:
    """Whether ``path`` exists; errors other than "not found" are raised."""
    try:
        os.stat(path)
    except FileNotFoundError:
        return False
    return True


def dir_exists(path: PathLike) -> bool:
    """Return True if ``path`` is an existing directory, raise otherwise."""
    message = f"path either doesn't exist, or is not a directory <{os.fspath(path)}>"
    if not file_exists(path):
        raise FileNotFoundError(message)
    if not os.path.isdir(path):
        raise NotADirectoryError(message)
    return True


def touch(path: PathLike) -> None:
    """Create an empty file at ``path`` unless something is already there."""
    try:
        os.stat(path)
    except FileNotFoundError:
        with open(path, "wb"):
            pass


def ensure_dir(path: PathLike) -> None:
    """Create the directory ``path`` (not its parents) if it does not exist."""
    if not file_exists(path):
        os.mkdir(path, 0o755)


def ensure_dir_all(path: PathLike) -> None:
    """Create the directory ``path`` together with any missing parents."""
    os.makedirs(path, 0o755, exist_ok=True)


def _remove_all(path: PathLike) -> None:
    if os.path.islink(path) or (os.path.lexists(path) and not os.path.isdir(path)):
        os.remove(path)
    elif os.path.isdir(path):
        shutil.rmtree(path)


def remove_dir(path: PathLike) -> None:
    """Remove ``path`` and everything under it; a missing path is ignored."""
    _remove_all(path)


def empty_dir(path: PathLike) -> None:
    """Remove the contents of the directory ``path``, keeping the directory."""
    for name in os.listdir(path):
        _remove_all(os.path.join(path, name))


def _subdirectories(path: str) -> list[str]:
    with os.scandir(path) as entries:
        names = sorted(
            entry.name for entry in entries if entry.is_dir(follow_symlinks=False)
        )
    return [os.path.join(path, name) for name in names]


def list_dir(path: PathLike) -> list[str]:
    """Return the sub-directories of ``path``, sorted by name.

    If ``path`` cannot be read as a directory, its parent is listed instead;
    if that fails too the result is empty.
    """
    path = os.fspath(path)
    try:
        return _subdirectories(path)
    except OSError:
        pass
    try:
        return _subdirectories(os.path.dirname(path) or ".")
    except OSError:
        return []


def get_home_directory() -> str:
    """Return the current user's home directory."""
    return str(Path.home())


def safe_move(src: PathLike, dst: PathLike) -> None:
    """Move ``src`` to ``dst``, copying and deleting when a rename fails."""
    try:
        os.rename(src, dst)
    except OSError as exc:
        _log.warning("unable to rename %r due to %s; falling back to copying", src, exc)
        with open(src, "rb") as source, open(dst, "wb") as target:
            shutil.copyfileobj(source, target)
        os.remove(src)


def is_zip_file_uncompressed(path: PathLike) -> bool:
    """Whether the first file (not directory) in a zip archive is stored uncompressed."""
    with zipfile.ZipFile(path) as archive:
        for info in archive.infolist():
            if info.is_dir():
                continue
            return info.compress_type == zipfile.ZIP_STORED
    return False


def write_file(path: PathLike, data: bytes) -> None:
    """Write ``data`` to ``path``, creating parent directories as needed."""
    ensure_dir_all(os.path.dirname(os.fspath(path)) or ".")
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "wb") as handle:
        handle.write(data)


def get_intra_dir(pattern: str, depth: int, length: int) -> str:
    """Build a nested relative directory from leading chunks of ``pattern``.

    For example ``("0af63ce3...", 2, 3)`` gives ``0af/63c``. Returns an empty
    string when the depth or length are not usable with the pattern.
    """
    if depth < 1 or length < 1 or depth * length > len(pattern):
        return ""
    chunks = [pattern[i * length : (i + 1) * length] for i in range(depth)]
    return os.path.join(*chunks)


def get_parent(path: str) -> str | None:
    """Return the parent of ``path``, or None if ``path`` ends with a slash."""
    if not path:
        raise ValueError("path must not be empty")
    if path.endswith("/"):
        return None
    return os.path.normpath(path + "/..")


def match_entries(directory: PathLike, pattern: str) -> list[str]:
    """Return the paths of entries in ``directory`` whose names match ``pattern``.

    The search is not recursive and the pattern may match anywhere in a name.
    """
    regex = re.compile(pattern)
    directory = os.fspath(directory)
    return [
        os.path.join(directory, name)
        for name in os.listdir(directory)
        if regex.search(name)
    ]


def out_dir(path: PathLike) -> str:
    """Return the absolute form of an existing directory, with a trailing '/'."""
    absolute = os.path.abspath(path)
    os.stat(absolute)
    if not os.path.isdir(absolute):
        raise NotADirectoryError(f"output directory {absolute} is not a directory")
    return absolute + "/"