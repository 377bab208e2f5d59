"""Version number parsing and comparison for semantic and generic versions."""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence

__all__ = [
    "VersionError",
    "Version",
    "parse_generic",
    "parse_semantic",
    "major_minor",
    "highest_supported_version",
]

_UINT_LIMIT = 1 << 64

# Splits a version string into numeric and "extra" parts.
_VERSION_RE = re.compile(r"^\s*v?([0-9]+(?:\.[0-9]+)*)(.*)\Z", re.ASCII)
# Splits the "extra" part into pre-release and build metadata. It does not
# validate the "no leading zeroes" rule for numeric pre-release identifiers.
_EXTRA_RE = re.compile(
    r"^(?:-([0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?"
    r"(?:\+([0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?\s*\Z",
    re.ASCII,
)
_DIGITS_RE = re.compile(r"[0-9]+", re.ASCII)


class VersionError(ValueError):
    """Raised when a version string cannot be parsed or is not acceptable."""


def _parse_uint(text: str) -> int | None:
    """Return ``text`` as an unsigned 64-bit integer, or None if it is not one."""
    if not _DIGITS_RE.fullmatch(text):
        return None
    value = int(text)
    return value if value < _UINT_LIMIT else None


def _only_zeros(values: Iterable[int]) -> bool:
    return all(value == 0 for value in values)


class Version:
    """An opaque representation of a version number."""

    __slots__ = ("_components", "_semver", "_pre_release", "_build_metadata")

    def __init__(
        self,
        components: Sequence[int],
        *,
        semver: bool = False,
        pre_release: str = "",
        build_metadata: str = "",
    ) -> None:
        self._components = tuple(components)
        self._semver = semver
        self._pre_release = pre_release
        self._build_metadata = build_metadata

    def major(self) -> int:
        """The major release number."""
        return self._components[0]

    def minor(self) -> int:
        """The minor release number."""
        return self._components[1]

    def patch(self) -> int:
        """The patch release number, or 0 if there is none."""
        if len(self._components) < 3:
            return 0
        return self._components[2]

    def pre_release(self) -> str:
        """The pre-release part of a semantic version, or an empty string."""
        return self._pre_release

    def build_metadata(self) -> str:
        """The build metadata of a semantic version, or an empty string."""
        return self._build_metadata

    def components(self) -> tuple[int, ...]:
        """All numeric components of the version."""
        return self._components

    def _replace(self, components: Sequence[int], **changes: str) -> Version:
        return Version(
            components,
            semver=self._semver,
            pre_release=changes.get("pre_release", self._pre_release),
            build_metadata=changes.get("build_metadata", self._build_metadata),
        )

    def with_major(self, major: int) -> Version:
        """Return a copy with the given major number."""
        return self._replace((major, self.minor(), self.patch()))

    def with_minor(self, minor: int) -> Version:
        """Return a copy with the given minor number."""
        return self._replace((self.major(), minor, self.patch()))

    def with_patch(self, patch: int) -> Version:
        """Return a copy with the given patch number."""
        return self._replace((self.major(), self.minor(), patch))

    def with_pre_release(self, pre_release: str) -> Version:
        """Return a copy with the given pre-release part."""
        return self._replace(
            (self.major(), self.minor(), self.patch()), pre_release=pre_release
        )

    def with_build_metadata(self, build_metadata: str) -> Version:
        """Return a copy with the given build metadata."""
        return self._replace(
            (self.major(), self.minor(), self.patch()), build_metadata=build_metadata
        )

    def __str__(self) -> str:
        text = ".".join(str(component) for component in self._components)
        if self._pre_release:
            text += "-" + self._pre_release
        if self._build_metadata:
            text += "+" + self._build_metadata
        return text

    def __repr__(self) -> str:
        return f"Version({str(self)!r})"

    def _compare(self, other: Version) -> int:
        mine, theirs = self._components, other._components
        for a, b in zip(mine, theirs):
            if a > b:
                return 1
            if a < b:
                return -1

        # Extra trailing components only count when they are not all zero.
        if len(theirs) < len(mine) and not _only_zeros(mine[len(theirs):]):
            return 1
        if len(theirs) > len(mine) and not _only_zeros(theirs[len(mine):]):
            return -1

        if not self._semver or not other._semver:
            return 0

        if not self._pre_release and other._pre_release:
            return 1
        if self._pre_release and not other._pre_release:
            return -1
        if self._pre_release == other._pre_release:
            return 0

        my_parts = self._pre_release.split(".")
        their_parts = other._pre_release.split(".")
        for mine_part, their_part in zip(my_parts, their_parts):
            my_num = _parse_uint(mine_part)
            if my_num is not None:
                their_num = _parse_uint(their_part)
                if their_num is not None:
                    if my_num > their_num:
                        return 1
                    if my_num < their_num:
                        return -1
                    continue
            if mine_part > their_part:
                return 1
            if mine_part < their_part:
                return -1

        if len(my_parts) > len(their_parts):
            return 1
        if len(my_parts) < len(their_parts):
            return -1
        return 0

    def at_least(self, minimum: Version) -> bool:
        """Whether this version is at least ``minimum``."""
        return self._compare(minimum) != -1

    def less_than(self, other: Version) -> bool:
        """Whether this version is lower than ``other``."""
        return self._compare(other) == -1

    def compare(self, other: str) -> int:
        """Compare with a version string parsed the same way as this version.

        Returns -1, 0 or 1; raises VersionError if ``other`` does not parse.
        """
        return self._compare(_parse(other, self._semver))

    def __lt__(self, other: Version) -> bool:
        return self._compare(other) < 0

    def __le__(self, other: Version) -> bool:
        return self._compare(other) <= 0

    def __gt__(self, other: Version) -> bool:
        return self._compare(other) > 0

    def __ge__(self, other: Version) -> bool:
        return self._compare(other) >= 0


def _parse(text: str, semver: bool) -> Version:
    match = _VERSION_RE.match(text)
    if match is None:
        raise VersionError(f"could not parse {text!r} as version")
    numbers, extra = match.group(1), match.group(2)

    parts = numbers.split(".")
    if (semver and len(parts) != 3) or (not semver and len(parts) < 2):
        raise VersionError(f"illegal version string {text!r}")

    components = []
    for index, part in enumerate(parts):
        if (index == 0 or semver) and part.startswith("0") and part != "0":
            raise VersionError(
                f"illegal zero-prefixed version component {part!r} in {text!r}"
            )
        value = _parse_uint(part)
        if value is None:
            raise VersionError(
                f"illegal non-numeric version component {part!r} in {text!r}"
            )
        components.append(value)

    pre_release = build_metadata = ""
    if semver and extra:
        extra_match = _EXTRA_RE.match(extra)
        if extra_match is None:
            raise VersionError(
                f"could not parse pre-release/metadata ({extra}) in version {text!r}"
            )
        pre_release = extra_match.group(1) or ""
        build_metadata = extra_match.group(2) or ""
        for part in pre_release.split("."):
            if _parse_uint(part) is not None and part.startswith("0") and part != "0":
                raise VersionError(
                    f"illegal zero-prefixed version component {part!r} in {text!r}"
                )

    return Version(
        components,
        semver=semver,
        pre_release=pre_release,
        build_metadata=build_metadata,
    )


def parse_generic(text: str) -> Version:
    """Parse a generic version: two or more dot-separated numbers, then anything.

    Leading and trailing whitespace and a leading "v" are allowed; data after
    the numeric fields is ignored.
    """
    return _parse(text, False)


def parse_semantic(text: str) -> Version:
    """Parse a strict semantic version (surrounding whitespace and "v" allowed)."""
    return _parse(text, True)


def major_minor(major: int, minor: int) -> Version:
    """Return a version made of just a major and minor number."""
    return Version((major, minor))


def highest_supported_version(versions: Sequence[str]) -> Version:
    """Return the highest version among ``versions`` that is a v1.x release."""
    if not versions:
        raise VersionError("empty array for supported versions")

    highest: Version | None = None
    last_error: VersionError | None = None
    for text in reversed(versions):
        try:
            candidate = parse_generic(text)
        except VersionError as exc:
            last_error = exc
            continue
        if candidate.major() > 1:
            continue
        if highest is None or highest.less_than(candidate):
            highest = candidate

    if highest is None:
        raise VersionError(
            f"could not find a highest supported version from versions "
            f"({list(versions)}) reported: {last_error}"
        )
    if highest.major() != 1:
        raise VersionError(
            f"highest supported version reported is {highest}, must be v1.x"
        )
    return highest