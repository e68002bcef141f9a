"""Output sinks for the two output modes: plain console and TeamCity."""

import logging
import sys
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TextIO

from jasmine_teamcity.config import Settings
from jasmine_teamcity.events import (
    Event,
    ProtocolLineError,
    is_protocol_line,
    parse_protocol_line,
    service_message,
    to_service_message,
)
from jasmine_teamcity.models.snapshot import FailureSnapshot

log = logging.getLogger(__name__)


def _stdout() -> TextIO:
    return sys.stdout


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, kw_only=True)
class Reporter(ABC):
    """Writes the product output of a run to a stream."""

    stream: TextIO = field(default_factory=_stdout)

    def write(self, line: str) -> None:
        """Write one output line."""
        print(line, file=self.stream, flush=True)

    @abstractmethod
    def report_failures(self, failures: Sequence[FailureSnapshot]) -> None:
        """Report the failed spec details found on the page, in page order."""

    @abstractmethod
    def report_event(self, event: Event) -> None:
        """Report one test lifecycle event."""

    @abstractmethod
    def report_console(self, message: str) -> None:
        """Relay a console message from the page."""

    @abstractmethod
    def report_error(self, text: str, details: str) -> None:
        """Report a fatal error of the run."""


@dataclass(frozen=True, kw_only=True)
class PlainReporter(Reporter):
    """Human readable output; structured messages are dropped."""

    def report_failures(self, failures: Sequence[FailureSnapshot]) -> None:
        """Print the number of failures and their titles."""
        if not failures:
            return
        self.write("")
        self.write(f"{len(failures)} test(s) FAILED:")
        for failure in failures:
            self.write(f"Failure: {failure.title or ''}")
        self.write("")

    def report_event(self, event: Event) -> None:
        """Drop the event."""

    def report_console(self, message: str) -> None:
        """Print plain page output, drop protocol lines."""
        if not is_protocol_line(message):
            self.write(message)

    def report_error(self, text: str, details: str) -> None:
        """Drop the annotation; the driver already logged the error."""


@dataclass(frozen=True, kw_only=True)
class TeamCityReporter(Reporter):
    """TeamCity service messages only; plain text is dropped."""

    timestamps: bool = False
    clock: Callable[[], datetime] = field(default=_utcnow, repr=False)

    def report_failures(self, failures: Sequence[FailureSnapshot]) -> None:
        """Drop the summary; failures are reported per test."""

    def report_event(self, event: Event) -> None:
        """Write the event as a service message."""
        timestamp = self.clock() if self.timestamps else None
        self.write(to_service_message(event, timestamp=timestamp))

    def report_console(self, message: str) -> None:
        """Re-emit protocol lines from the page, drop plain output."""
        if not is_protocol_line(message):
            return
        try:
            event = parse_protocol_line(message)
        except ProtocolLineError as exc:
            log.warning("Dropping malformed protocol line: %s", exc)
            return
        self.report_event(event)

    def report_error(self, text: str, details: str) -> None:
        """Write an error message the build log highlights."""
        self.write(
            service_message("message", text=text, errorDetails=details, status="ERROR")
        )


def create_reporter(settings: Settings, stream: TextIO | None = None) -> Reporter:
    """Create the reporter for the configured output mode."""
    if stream is None:
        stream = sys.stdout
    if settings.teamcity:
        return TeamCityReporter(stream=stream, timestamps=settings.timestamps)
    return PlainReporter(stream=stream)
