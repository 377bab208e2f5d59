"""Watcher registration, initialization, options and a no-op logger.

A watcher is a job: a callable or an object with a ``run()`` method. It may
also offer ``spec()`` to choose its own schedule (``EVERY_3_SECONDS`` is the
default), and ``set_job_manager(jm)`` or ``set_max_workers(n)`` to receive
shared resources from a :class:`WatcherInitializer`. A logger for watches
offers ``debug(msg, *kvs)``, ``info(msg, *kvs)`` and ``error(err, msg, *kvs)``.
"""

from __future__ import annotations

import argparse
import csv
import threading
from dataclasses import dataclass, field
from typing import Any

from onexutil.watch_manager import JobManager

__all__ = [
    "EVERY_3_SECONDS",
    "DuplicateWatcherError",
    "WatcherInitializer",
    "WatchOptions",
    "NullLogger",
    "register",
    "list_watchers",
]

EVERY_3_SECONDS = "@every 3s"

_registry_lock = threading.Lock()
_registry: dict[str, Any] = {}


class DuplicateWatcherError(ValueError):
    """Raised when a watcher name is registered twice."""


def register(name: str, watcher: Any) -> None:
    """Register ``watcher`` under ``name``; raises DuplicateWatcherError if taken."""
    with _registry_lock:
        if name in _registry:
            raise DuplicateWatcherError(f"duplicate watcher entry: {name}")
        _registry[name] = watcher


def list_watchers() -> dict[str, Any]:
    """Return the registered watchers keyed by name."""
    with _registry_lock:
        return dict(_registry)


class WatcherInitializer:
    """Hands shared resources to the watchers that ask for them."""

    def __init__(self, job_manager: JobManager, max_workers: int) -> None:
        self.job_manager = job_manager
        self.max_workers = max_workers

    def initialize(self, watcher: Any) -> None:
        """Give ``watcher`` the job manager and worker limit if it accepts them."""
        set_job_manager = getattr(watcher, "set_job_manager", None)
        if callable(set_job_manager):
            set_job_manager(self.job_manager)
        set_max_workers = getattr(watcher, "set_max_workers", None)
        if callable(set_max_workers):
            set_max_workers(self.max_workers)


def _split_csv(value: str) -> list[str]:
    if not value:
        return []
    return next(csv.reader([value]))


class _OptionAction(argparse.Action):
    """Stores a parsed value on the namespace and on the options object."""

    def __init__(self, *args: Any, options: Any, append_list: bool = False, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self._options = options
        self._append_list = append_list

    def __call__(self, parser, namespace, values, option_string=None):
        if self._append_list:
            current = getattr(namespace, self.dest, None)
            if current is self.default or current is None:
                values = list(values)
            else:
                values = [*current, *values]
        setattr(namespace, self.dest, values)
        setattr(self._options, self.dest, values)


@dataclass
class WatchOptions:
    """Settings for running a watch server."""

    lock_name: str = "default-distributed-lock"
    healthz_port: int = 8881
    disable_watchers: list[str] = field(default_factory=list)
    max_workers: int = 10

    def add_flags(self, parser: argparse.ArgumentParser) -> None:
        """Add command-line flags that update these options when parsed."""
        parser.add_argument(
            "--lock-name", dest="lock_name", default=self.lock_name,
            action=_OptionAction, options=self,
            help="The name of the lock used by the server.",
        )
        parser.add_argument(
            "--healthz-port", dest="healthz_port", type=int, default=self.healthz_port,
            action=_OptionAction, options=self,
            help="The port number for the health check endpoint.",
        )
        parser.add_argument(
            "--disable-watchers", dest="disable_watchers", type=_split_csv,
            default=self.disable_watchers, action=_OptionAction, options=self,
            append_list=True, help="The list of watchers that should be disabled.",
        )
        parser.add_argument(
            "--max-workers", dest="max_workers", type=int, default=self.max_workers,
            action=_OptionAction, options=self,
            help="Specify the maximum concurrency worker of each watcher.",
        )

    def validate(self) -> list[ValueError]:
        """Return the problems found with these options; empty when they are valid."""
        errors: list[ValueError] = []
        if self.max_workers <= 0:
            errors.append(ValueError("max-workers must be greater than 0"))
        return errors


class NullLogger:
    """A watch logger that discards everything."""

    def debug(self, msg: str, *kvs: Any) -> None:
        """Discard a debug message."""

    def info(self, msg: str, *kvs: Any) -> None:
        """Discard an informational message."""

    def error(self, err: BaseException | None, msg: str, *kvs: Any) -> None:
        """Discard an error."""