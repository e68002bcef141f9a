"""Tests for translating rendered results into events."""

import pytest

from jasmine_teamcity.events import (
    SuiteFinished,
    SuiteStarted,
    TestFailed,
    TestFinished,
    TestStarted,
)
from jasmine_teamcity.models.snapshot import ElementSnapshot
from jasmine_teamcity.testing.factories import FailureSnapshotFactory
from jasmine_teamcity.testing.pages import (
    failure,
    results,
    spec,
    specs,
    suite,
)
from jasmine_teamcity.translator import (
    MISSING_DETAILS_MESSAGE,
    FailureRecord,
    collect_failures,
    iter_suite_events,
    translate,
)


class TestCollectFailures:
    """Tests for collect_failures."""

    def test_indexes_by_identifier(self) -> None:
        """Keys each record by its description link."""
        records = collect_failures(
            [failure("adds", "expected 1 got 2", href="?spec=math%20adds")]
        )

        assert records == {
            "?spec=math%20adds": FailureRecord(
                identifier="?spec=math%20adds",
                title="adds",
                message="expected 1 got 2",
            )
        }

    def test_skips_details_without_link(self) -> None:
        """Details without a link cannot be matched and are skipped."""
        detail = FailureSnapshotFactory.build(href=None)

        assert collect_failures([detail]) == {}

    def test_records_are_read_only(self) -> None:
        """The index cannot be changed after it is built."""
        records = collect_failures([failure("adds", "boom")])

        with pytest.raises(TypeError):
            records["other"] = FailureRecord(  # type: ignore[index]
                identifier="other", title="other", message="other"
            )


class TestIterSuiteEvents:
    """Tests for iter_suite_events."""

    def test_passing_spec(self) -> None:
        """A passing spec starts and finishes inside its suite."""
        events = list(iter_suite_events(suite("S", specs(spec("T1"))), {}))

        assert events == [
            SuiteStarted(name="S"),
            TestStarted(name="T1"),
            TestFinished(name="T1"),
            SuiteFinished(name="S"),
        ]

    def test_failing_spec(self) -> None:
        """A failing spec reports its message between start and finish."""
        failures = collect_failures([failure("T2", "expected 1 got 2")])

        events = list(
            iter_suite_events(suite("S", specs(spec("T2", failed=True))), failures)
        )

        assert events == [
            SuiteStarted(name="S"),
            TestStarted(name="T2"),
            TestFailed(name="T2", message="expected 1 got 2"),
            TestFinished(name="T2"),
            SuiteFinished(name="S"),
        ]

    def test_failing_spec_without_details(self) -> None:
        """A failing spec without matching details gets a placeholder."""
        events = list(
            iter_suite_events(suite("S", specs(spec("T2", failed=True))), {})
        )

        assert TestFailed(name="T2", message=MISSING_DETAILS_MESSAGE) in events
        assert MISSING_DETAILS_MESSAGE == "Unable to find details."

    def test_failing_spec_without_link(self) -> None:
        """A failing spec without a link also gets the placeholder."""
        broken = ElementSnapshot(class_name="jasmine-failed", text="T2")

        events = list(iter_suite_events(suite("S", specs(broken)), {}))

        assert TestFailed(name="T2", message=MISSING_DETAILS_MESSAGE) in events

    def test_nested_suites(self) -> None:
        """Nested suites are started and finished in nesting order."""
        tree = suite("A", suite("B", specs(spec("T3"))))

        events = list(iter_suite_events(tree, {}))

        assert events == [
            SuiteStarted(name="A"),
            SuiteStarted(name="B"),
            TestStarted(name="T3"),
            TestFinished(name="T3"),
            SuiteFinished(name="B"),
            SuiteFinished(name="A"),
        ]

    def test_suite_with_only_label_is_skipped(self) -> None:
        """A suite with no members emits nothing."""
        assert list(iter_suite_events(suite("empty"), {})) == []

    def test_suite_without_children_is_skipped(self) -> None:
        """A suite without any children emits nothing."""
        node = ElementSnapshot(class_name="jasmine-suite")

        assert list(iter_suite_events(node, {})) == []

    def test_empty_nested_suite_is_skipped(self) -> None:
        """An empty nested suite disappears, its parent stays."""
        tree = suite("A", suite("B"), specs(spec("T1")))

        events = list(iter_suite_events(tree, {}))

        assert SuiteStarted(name="B") not in events
        assert events[0] == SuiteStarted(name="A")
        assert events[-1] == SuiteFinished(name="A")

    def test_members_keep_document_order(self) -> None:
        """Specs and nested suites are reported in the order rendered."""
        tree = suite(
            "A",
            specs(spec("first")),
            suite("B", specs(spec("second"))),
            specs(spec("third")),
        )

        started = [
            event.name
            for event in iter_suite_events(tree, {})
            if isinstance(event, TestStarted)
        ]

        assert started == ["first", "second", "third"]

    def test_every_spec_in_container_is_reported(self) -> None:
        """All specs of a specs container are reported."""
        tree = suite("A", specs(spec("one"), spec("two")))

        finished = [
            event.name
            for event in iter_suite_events(tree, {})
            if isinstance(event, TestFinished)
        ]

        assert finished == ["one", "two"]

    def test_ignores_unknown_members(self) -> None:
        """Members that are neither suites nor specs are skipped."""
        tree = suite("A", ElementSnapshot(class_name="jasmine-other", text="x"))

        assert list(iter_suite_events(tree, {})) == [
            SuiteStarted(name="A"),
            SuiteFinished(name="A"),
        ]

    def test_matches_classes_as_tokens(self) -> None:
        """Class matching works with extra class tokens present."""
        failing = spec("T2", failed=True).model_copy(
            update={"class_name": "jasmine-failed highlighted"}
        )
        failures = collect_failures([failure("T2", "boom")])

        events = list(iter_suite_events(suite("S", specs(failing)), failures))

        assert TestFailed(name="T2", message="boom") in events


class TestTranslate:
    """Tests for translate and Translation."""

    def test_exit_code_zero_without_failures(self) -> None:
        """Exit code is 0 when nothing failed."""
        translation = translate(results([suite("S", specs(spec("T1")))]))

        assert translation.exit_code == 0
        assert translation.failure_count == 0

    def test_exit_code_one_with_failures(self) -> None:
        """Exit code is 1 when any failure detail is rendered."""
        translation = translate(
            results(
                [suite("S", specs(spec("T2", failed=True)))],
                [failure("T2", "expected 1 got 2")],
            )
        )

        assert translation.exit_code == 1
        assert translation.failure_count == 1

    def test_failures_without_link_still_fail_the_run(self) -> None:
        """Unmatched failure details still count towards the exit code."""
        translation = translate(results([], [FailureSnapshotFactory.build(href=None)]))

        assert translation.exit_code == 1
        assert translation.failures == {}

    def test_missing_details_do_not_change_exit_code(self) -> None:
        """A spec marked failed without details does not fail the run alone."""
        translation = translate(results([suite("S", specs(spec("T2", failed=True)))]))

        assert translation.exit_code == 0
        assert (
            TestFailed(name="T2", message=MISSING_DETAILS_MESSAGE)
            in translation.iter_events()
        )

    def test_walks_all_top_level_suites(self) -> None:
        """Events of top-level suites follow one another."""
        translation = translate(
            results(
                [
                    suite("A", specs(spec("T1"))),
                    suite("B", specs(spec("T2"))),
                ]
            )
        )

        suites = [
            event
            for event in translation.iter_events()
            if isinstance(event, SuiteStarted | SuiteFinished)
        ]

        assert suites == [
            SuiteStarted(name="A"),
            SuiteFinished(name="A"),
            SuiteStarted(name="B"),
            SuiteFinished(name="B"),
        ]

    def test_events_can_be_walked_again(self) -> None:
        """Each call to iter_events starts a fresh walk."""
        translation = translate(results([suite("S", specs(spec("T1")))]))

        assert list(translation.iter_events()) == list(translation.iter_events())

    def test_empty_results(self) -> None:
        """A page without suites yields no events."""
        translation = translate(results())

        assert list(translation.iter_events()) == []
        assert translation.exit_code == 0
