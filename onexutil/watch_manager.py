"""A small cron scheduler and a manager that keeps named jobs on it."""

from __future__ import annotations

import logging
import re
import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Protocol

__all__ = ["JobExistsError", "JobNotFoundError", "Scheduler", "JobManager"]

_log = logging.getLogger(__name__)


class JobExistsError(ValueError):
    """Raised when a job with the same name is already managed."""

    def __init__(self, job_name: str) -> None:
        super().__init__(job_name)
        self.job_name = job_name

    def __str__(self) -> str:
        return f"job {self.job_name} already exists"


class JobNotFoundError(LookupError):
    """Raised when a named job is not managed."""

    def __init__(self, job_name: str) -> None:
        super().__init__(job_name)
        self.job_name = job_name

    def __str__(self) -> str:
        return f"job {self.job_name} not found"


class _Schedule(Protocol):
    def next(self, after: datetime) -> datetime | None: ...


_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")
_UNIT_SECONDS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "μs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}


def _parse_duration(text: str) -> float:
    """Parse a duration such as ``3s``, ``1m30s`` or ``1.5h`` into seconds."""
    body = text
    sign = 1.0
    if body[:1] in "+-" and body:
        sign = -1.0 if body[0] == "-" else 1.0
        body = body[1:]
    if body == "0":
        return 0.0
    if not body:
        raise ValueError(f"invalid duration {text!r}")
    total = 0.0
    position = 0
    while position < len(body):
        match = _DURATION_PART.match(body, position)
        if match is None:
            raise ValueError(f"invalid duration {text!r}")
        total += float(match.group(1)) * _UNIT_SECONDS[match.group(2)]
        position = match.end()
    return sign * total


@dataclass(frozen=True)
class _ConstantDelay:
    delay: timedelta

    def next(self, after: datetime) -> datetime | None:
        return after.replace(microsecond=0) + self.delay


_MONTH_NAMES = {
    name: index
    for index, name in enumerate(
        ["jan", "feb", "mar", "apr", "may", "jun", "jul", "aug", "sep", "oct", "nov", "dec"],
        start=1,
    )
}
_DAY_NAMES = {
    name: index
    for index, name in enumerate(["sun", "mon", "tue", "wed", "thu", "fri", "sat"])
}

_FIELD_BOUNDS: list[tuple[int, int, dict[str, int] | None]] = [
    (0, 59, None),  # second
    (0, 59, None),  # minute
    (0, 23, None),  # hour
    (1, 31, None),  # day of month
    (1, 12, _MONTH_NAMES),  # month
    (0, 6, _DAY_NAMES),  # day of week
]

_DESCRIPTORS = {
    "@yearly": "0 0 0 1 1 *",
    "@annually": "0 0 0 1 1 *",
    "@monthly": "0 0 0 1 * *",
    "@weekly": "0 0 0 * * 0",
    "@daily": "0 0 0 * * *",
    "@midnight": "0 0 0 * * *",
    "@hourly": "0 0 * * * *",
}


def _field_value(text: str, names: dict[str, int] | None) -> int:
    if names is not None and text.lower() in names:
        return names[text.lower()]
    if not text.isascii() or not text.isdigit():
        raise ValueError(f"failed to parse int from {text!r}")
    return int(text)


def _parse_field(
    text: str, low: int, high: int, names: dict[str, int] | None
) -> tuple[frozenset[int], bool]:
    values: set[int] = set()
    star = False
    for part in text.split(","):
        range_text, has_step, step_text = part.partition("/")
        step = 1
        if has_step:
            step = _field_value(step_text, None)
            if step < 1:
                raise ValueError(f"step of range should be a positive number: {part!r}")
        if range_text in ("*", "?"):
            start, end = low, high
            if step == 1:
                star = True
        else:
            bounds = range_text.split("-")
            if len(bounds) > 2:
                raise ValueError(f"too many hyphens: {part!r}")
            start = _field_value(bounds[0], names)
            end = _field_value(bounds[1], names) if len(bounds) == 2 else start
            if has_step and len(bounds) == 1:
                end = high
        if start < low:
            raise ValueError(f"beginning of range ({start}) below minimum ({low}): {part!r}")
        if end > high:
            raise ValueError(f"end of range ({end}) above maximum ({high}): {part!r}")
        if start > end:
            raise ValueError(f"beginning of range ({start}) beyond end of range ({end}): {part!r}")
        values.update(range(start, end + 1, step))
    return frozenset(values), star


@dataclass(frozen=True)
class _CronSchedule:
    seconds: frozenset[int]
    minutes: frozenset[int]
    hours: frozenset[int]
    days_of_month: frozenset[int]
    months: frozenset[int]
    days_of_week: frozenset[int]
    dom_star: bool
    dow_star: bool

    def _day_matches(self, moment: datetime) -> bool:
        dom = moment.day in self.days_of_month
        dow = (moment.weekday() + 1) % 7 in self.days_of_week
        if self.dom_star or self.dow_star:
            return dom and dow
        return dom or dow

    def next(self, after: datetime) -> datetime | None:
        moment = after.replace(microsecond=0) + timedelta(seconds=1)
        year_limit = moment.year + 5
        while moment.year <= year_limit:
            if moment.month not in self.months:
                if moment.month == 12:
                    moment = moment.replace(year=moment.year + 1, month=1, day=1,
                                            hour=0, minute=0, second=0)
                else:
                    moment = moment.replace(month=moment.month + 1, day=1,
                                            hour=0, minute=0, second=0)
                continue
            if not self._day_matches(moment):
                moment = moment.replace(hour=0, minute=0, second=0) + timedelta(days=1)
                continue
            if moment.hour not in self.hours:
                moment = moment.replace(minute=0, second=0) + timedelta(hours=1)
                continue
            if moment.minute not in self.minutes:
                moment = moment.replace(second=0) + timedelta(minutes=1)
                continue
            if moment.second not in self.seconds:
                moment += timedelta(seconds=1)
                continue
            return moment
        return None


def _parse_spec(spec: str, with_seconds: bool) -> _Schedule:
    text = spec.strip()
    if not text:
        raise ValueError("empty spec string")
    if text.startswith("@every "):
        seconds = _parse_duration(text[len("@every "):].strip())
        whole = max(int(seconds), 1)
        return _ConstantDelay(timedelta(seconds=whole))
    if text.startswith("@"):
        expanded = _DESCRIPTORS.get(text.lower())
        if expanded is None:
            raise ValueError(f"unrecognized descriptor: {text}")
        fields = expanded.split()
    else:
        fields = text.split()
        expected = 6 if with_seconds else 5
        if len(fields) != expected:
            raise ValueError(
                f"expected exactly {expected} fields, found {len(fields)}: {text}"
            )
        if not with_seconds:
            fields = ["0", *fields]
    parsed = [
        _parse_field(field, low, high, names)
        for field, (low, high, names) in zip(fields, _FIELD_BOUNDS)
    ]
    return _CronSchedule(
        seconds=parsed[0][0],
        minutes=parsed[1][0],
        hours=parsed[2][0],
        days_of_month=parsed[3][0],
        months=parsed[4][0],
        days_of_week=parsed[5][0],
        dom_star=parsed[3][1],
        dow_star=parsed[5][1],
    )


def _job_callable(job: Any) -> Callable[[], object]:
    run = getattr(job, "run", None)
    if callable(run):
        return run
    if callable(job):
        return job
    raise TypeError(f"job must be callable or have a run() method, got {type(job).__name__}")


class _StdLogger:
    def info(self, msg: str, *kvs: Any) -> None:
        _log.info("%s %s", msg, kvs)

    def error(self, err: BaseException, msg: str, *kvs: Any) -> None:
        _log.error("%s: %s %s", msg, err, kvs)


@dataclass
class _Entry:
    schedule: _Schedule
    run: Callable[[], object]
    next: datetime | None = None


class Scheduler:
    """Runs jobs on cron schedules in background threads.

    Specs are five-field cron expressions (six with ``with_seconds``),
    descriptors such as ``@hourly`` or ``@every <duration>``. A job is a
    callable or an object with a ``run()`` method; exceptions raised by a
    job are reported to the logger and do not stop the scheduler.
    """

    def __init__(self, *, with_seconds: bool = False, logger: Any = None) -> None:
        self._with_seconds = with_seconds
        self._logger = logger if logger is not None else _StdLogger()
        self._cond = threading.Condition()
        self._entries: dict[int, _Entry] = {}
        self._last_id = 0
        self._running = False
        self._thread: threading.Thread | None = None
        self._active = 0

    def add_job(self, spec: str, job: Any) -> int:
        """Schedule ``job`` by ``spec`` and return its entry id; raises ValueError on a bad spec."""
        schedule = _parse_spec(spec, self._with_seconds)
        run = _job_callable(job)
        with self._cond:
            self._last_id += 1
            entry = _Entry(schedule, run)
            if self._running:
                entry.next = schedule.next(datetime.now())
            self._entries[self._last_id] = entry
            self._cond.notify_all()
            return self._last_id

    def remove(self, entry_id: int) -> None:
        """Stop running the entry ``entry_id``; unknown ids are ignored."""
        with self._cond:
            self._entries.pop(entry_id, None)
            self._cond.notify_all()

    def start(self) -> None:
        """Start the scheduler in a background thread; does nothing if running."""
        with self._cond:
            if self._running:
                return
            self._running = True
            now = datetime.now()
            for entry in self._entries.values():
                entry.next = entry.schedule.next(now)
            self._thread = threading.Thread(target=self._loop, name="scheduler", daemon=True)
            self._thread.start()

    def stop(self) -> threading.Event:
        """Stop scheduling; the returned event is set once running jobs finish."""
        with self._cond:
            self._running = False
            self._cond.notify_all()
            thread = self._thread
            self._thread = None
        done = threading.Event()

        def wait_for_jobs() -> None:
            if thread is not None and thread is not threading.current_thread():
                thread.join()
            with self._cond:
                self._cond.wait_for(lambda: self._active == 0)
            done.set()

        threading.Thread(target=wait_for_jobs, name="scheduler-stop", daemon=True).start()
        return done

    def _loop(self) -> None:
        with self._cond:
            while self._running:
                now = datetime.now()
                for entry_id, entry in list(self._entries.items()):
                    if entry.next is None or entry.next > now:
                        continue
                    self._spawn(entry_id, entry.run)
                    entry.next = entry.schedule.next(now)
                upcoming = [e.next for e in self._entries.values() if e.next is not None]
                if upcoming:
                    timeout = (min(upcoming) - datetime.now()).total_seconds()
                    self._cond.wait(max(timeout, 0.0))
                else:
                    self._cond.wait()

    def _spawn(self, entry_id: int, run: Callable[[], object]) -> None:
        self._active += 1

        def execute() -> None:
            try:
                run()
            except Exception as exc:
                self._logger.error(exc, "job raised an exception", "entry", entry_id)
            finally:
                with self._cond:
                    self._active -= 1
                    self._cond.notify_all()

        threading.Thread(target=execute, name=f"job-{entry_id}", daemon=True).start()


class JobManager:
    """Keeps named jobs on a scheduler."""

    def __init__(self, scheduler: Scheduler | None = None) -> None:
        self._lock = threading.Lock()
        self._scheduler = scheduler if scheduler is not None else Scheduler()
        self._jobs: dict[str, int] = {}

    def _add(self, name: str, schedule: str, job: Any) -> int:
        if name in self._jobs:
            raise JobExistsError(name)
        entry_id = self._scheduler.add_job(schedule, job)
        self._jobs[name] = entry_id
        return entry_id

    def _remove(self, name: str) -> None:
        entry_id = self._jobs.pop(name, None)
        if entry_id is not None:
            self._scheduler.remove(entry_id)

    def add_job(self, name: str, schedule: str, job: Any) -> int:
        """Add a job under ``name``; raises JobExistsError if the name is taken."""
        with self._lock:
            return self._add(name, schedule, job)

    def remove_job(self, name: str) -> None:
        """Remove the job called ``name``; unknown names are ignored."""
        with self._lock:
            self._remove(name)

    def update_job(self, name: str, schedule: str, job: Any) -> None:
        """Replace the job called ``name``; raises JobNotFoundError if it is absent."""
        with self._lock:
            if name not in self._jobs:
                raise JobNotFoundError(name)
            self._remove(name)
            self._add(name, schedule, job)

    def get_jobs(self) -> dict[str, int]:
        """Return a mapping of job names to scheduler entry ids."""
        with self._lock:
            return dict(self._jobs)

    def job_exists(self, name: str) -> bool:
        """Whether a job called ``name`` is managed."""
        with self._lock:
            return name in self._jobs

    def start(self) -> None:
        """Start the scheduler."""
        self._scheduler.start()

    def stop(self) -> threading.Event:
        """Stop the scheduler; the event is set once running jobs finish."""
        return self._scheduler.stop()