"""Translation of rendered Jasmine results into test lifecycle events."""

import logging
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType

from jasmine_teamcity.events import (
    Event,
    SuiteFinished,
    SuiteStarted,
    TestFailed,
    TestFinished,
    TestStarted,
)
from jasmine_teamcity.models.snapshot import (
    ElementSnapshot,
    FailureSnapshot,
    ResultsSnapshot,
)

log = logging.getLogger(__name__)

SUITE_CLASS = "jasmine-suite"
SPECS_CLASS = "jasmine-specs"
FAILED_CLASS = "jasmine-failed"

MISSING_DETAILS_MESSAGE = "Unable to find details."


@dataclass(frozen=True, kw_only=True)
class FailureRecord:
    """Details of a failed spec, keyed by its description link."""

    identifier: str
    title: str
    message: str


def collect_failures(
    failures: Sequence[FailureSnapshot],
) -> Mapping[str, FailureRecord]:
    """Index failure details by identifier.

    Details without a link cannot be matched to a spec and are left out of
    the index; they still count towards the exit code.
    """
    records: dict[str, FailureRecord] = {}
    for failure in failures:
        if failure.href is None:
            log.warning("Failure detail without description link: %s", failure)
            continue
        records[failure.href] = FailureRecord(
            identifier=failure.href,
            title=failure.title or "",
            message=failure.message,
        )
    return MappingProxyType(records)


def iter_spec_events(
    spec: ElementSnapshot, failures: Mapping[str, FailureRecord]
) -> Iterator[Event]:
    """Yield the events of one spec."""
    name = spec.text
    yield TestStarted(name=name)

    if spec.has_class(FAILED_CLASS):
        identifier = spec.anchor_href
        record = failures.get(identifier) if identifier is not None else None
        if record is None:
            log.warning("No failure details found for spec %r", name)
            message = MISSING_DETAILS_MESSAGE
        else:
            message = record.message
        yield TestFailed(name=name, message=message)

    yield TestFinished(name=name)


def iter_suite_events(
    suite: ElementSnapshot, failures: Mapping[str, FailureRecord]
) -> Iterator[Event]:
    """Yield the events of a suite and everything nested below it.

    The first child is the suite's own label; a suite with no members after
    it yields nothing.
    """
    if len(suite.children) < 2:
        return

    label, *members = suite.children
    yield SuiteStarted(name=label.text)

    for member in members:
        if member.has_class(SUITE_CLASS):
            yield from iter_suite_events(member, failures)
        elif member.has_class(SPECS_CLASS):
            for spec in member.children:
                yield from iter_spec_events(spec, failures)

    yield SuiteFinished(name=label.text)


@dataclass(frozen=True, kw_only=True)
class Translation:
    """Result of translating one snapshot of the rendered results."""

    snapshot: ResultsSnapshot
    failures: Mapping[str, FailureRecord]

    @property
    def failure_count(self) -> int:
        """Number of failed spec detail nodes on the page."""
        return len(self.snapshot.failures)

    @property
    def exit_code(self) -> int:
        """Process exit code: 1 if anything failed, 0 otherwise."""
        return 1 if self.failure_count > 0 else 0

    def iter_events(self) -> Iterator[Event]:
        """Yield all events in order; every call starts a fresh walk."""
        for suite in self.snapshot.suites:
            yield from iter_suite_events(suite, self.failures)


def translate(snapshot: ResultsSnapshot) -> Translation:
    """Build the failure index for a snapshot."""
    failures = collect_failures(snapshot.failures)
    log.info(
        "Read %d top-level suite(s) and %d failure(s)",
        len(snapshot.suites),
        len(snapshot.failures),
    )
    return Translation(snapshot=snapshot, failures=failures)
