"""Build information: version details, dynamic version overrides and a --version flag."""

from __future__ import annotations

import argparse
import enum
import json
import platform
import sys
import threading
from dataclasses import dataclass

from onexutil.semver import Version, VersionError, parse_semantic

__all__ = [
    "GIT_VERSION",
    "BUILD_DATE",
    "GIT_COMMIT",
    "GIT_TREE_STATE",
    "Info",
    "VersionFlag",
    "get",
    "set_dynamic_version",
    "validate_dynamic_version",
    "parse_version_flag",
    "add_flags",
    "print_and_exit_if_requested",
]

# Semantic version of the build; normally replaced at build time.
GIT_VERSION = "v0.0.0-master+$Format:%h$"
# ISO8601 build time.
BUILD_DATE = "1970-01-01T00:00:00Z"
# SHA1 of the commit the build was made from.
GIT_COMMIT = "$Format:%H$"
# State of the working tree at build time: "clean" or "dirty".
GIT_TREE_STATE = ""

_PLACEHOLDER_VERSION = "v0.0.0-master+$Format:%H$"
_MAX_COLUMN_WIDTH = 80

_dynamic_lock = threading.Lock()
_dynamic_git_version: str | None = None


@dataclass(frozen=True)
class Info:
    """Version information describing the build of the running code."""

    git_version: str = ""
    git_commit: str = ""
    git_tree_state: str = ""
    build_date: str = ""
    python_version: str = ""
    compiler: str = ""
    platform: str = ""

    def __str__(self) -> str:
        return self.git_version

    def _rows(self) -> list[tuple[str, str]]:
        return [
            ("gitVersion", self.git_version),
            ("gitCommit", self.git_commit),
            ("gitTreeState", self.git_tree_state),
            ("buildDate", self.build_date),
            ("pythonVersion", self.python_version),
            ("compiler", self.compiler),
            ("platform", self.platform),
        ]

    def to_json(self) -> str:
        """Return the information as a compact JSON object."""
        return json.dumps(dict(self._rows()), separators=(",", ":"))

    def text(self) -> str:
        """Return the information as an aligned two-column table."""
        rows = [(_truncate(f"{key}:"), _truncate(value)) for key, value in self._rows()]
        width = max(len(label) for label, _ in rows)
        return "\n".join(f"{label:>{width}} {value}".rstrip() for label, value in rows)


def _truncate(text: str) -> str:
    if len(text) <= _MAX_COLUMN_WIDTH:
        return text
    return text[: _MAX_COLUMN_WIDTH - 3] + "..."


def get() -> Info:
    """Return the version information of this build."""
    with _dynamic_lock:
        git_version = _dynamic_git_version
    return Info(
        git_version=git_version if git_version is not None else GIT_VERSION,
        git_commit=GIT_COMMIT,
        git_tree_state=GIT_TREE_STATE,
        build_date=BUILD_DATE,
        python_version=platform.python_version(),
        compiler=platform.python_implementation(),
        platform=f"{sys.platform}/{platform.machine().lower()}",
    )


def _validate_dynamic_version(dynamic_version: str, default_version: str) -> None:
    if not dynamic_version:
        raise VersionError("version must not be empty")
    if dynamic_version == default_version:
        return
    runtime = parse_semantic(dynamic_version)
    default: Version
    if default_version == _PLACEHOLDER_VERSION:
        # The placeholder does not parse as a semantic version.
        default = parse_semantic("v0.0.0-master")
    else:
        default = parse_semantic(default_version)
    if (runtime.major(), runtime.minor(), runtime.patch()) != (
        default.major(),
        default.minor(),
        default.patch(),
    ):
        raise VersionError(
            f"version {dynamic_version!r} must match major/minor/patch "
            f"of default version {default_version!r}"
        )


def validate_dynamic_version(version: str) -> None:
    """Check that ``version`` may replace the built-in version.

    It must be non-empty, a valid semantic version, and share the
    major/minor/patch numbers of the built-in version. Raises VersionError.
    """
    _validate_dynamic_version(version, GIT_VERSION)


def set_dynamic_version(version: str) -> None:
    """Override the git version reported by :func:`get`."""
    global _dynamic_git_version
    validate_dynamic_version(version)
    with _dynamic_lock:
        _dynamic_git_version = version


class VersionFlag(enum.IntEnum):
    """State of the ``--version`` flag."""

    NOT_SET = 0
    ENABLED = 1
    RAW = 2

    def __str__(self) -> str:
        if self is VersionFlag.RAW:
            return "raw"
        return "true" if self is VersionFlag.ENABLED else "false"


_TRUE_WORDS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_WORDS = frozenset({"0", "f", "F", "FALSE", "false", "False"})


def parse_version_flag(value: str) -> VersionFlag:
    """Parse a ``--version`` value: "raw" or a boolean word."""
    if value == "raw":
        return VersionFlag.RAW
    if value in _TRUE_WORDS:
        return VersionFlag.ENABLED
    if value in _FALSE_WORDS:
        return VersionFlag.NOT_SET
    raise ValueError(f"invalid version flag value {value!r}")


def add_flags(parser: argparse.ArgumentParser) -> None:
    """Register ``--version`` on ``parser``; a bare ``--version`` means true."""
    parser.add_argument(
        "--version",
        nargs="?",
        const=VersionFlag.ENABLED,
        default=VersionFlag.NOT_SET,
        type=parse_version_flag,
        metavar="true|false|raw",
        help="Print version information and quit.",
    )


def print_and_exit_if_requested(flag: VersionFlag) -> None:
    """Print the version and exit with status 0 if ``flag`` asks for it."""
    if flag is VersionFlag.RAW:
        print(get().text())
        sys.exit(0)
    if flag is VersionFlag.ENABLED:
        print(str(get()))
        sys.exit(0)