"""Utilities for backend services: versions, strings, networks, files, tokens, queries and jobs."""

__version__ = "0.1.0"

__all__ = [
    "buildinfo",
    "fileutil",
    "netutil",
    "objutil",
    "retry",
    "semver",
    "strutil",
    "token",
    "validation",
    "watch_manager",
    "watch_registry",
    "where",
]