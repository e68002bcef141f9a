"""Test lifecycle events and the two line formats they travel in.

Events cross the page boundary as protocol lines (``TAG:JSONPAYLOAD``, raw
text in the payload) and leave the tool as TeamCity service messages
(``##teamcity[...]``, escaped text in the attributes).
"""

import json
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from jasmine_teamcity.escaping import escape

PROTOCOL_PREFIX = "TEAMCITY_"


@dataclass(frozen=True, kw_only=True)
class SuiteStarted:
    """A suite began."""

    name: str


@dataclass(frozen=True, kw_only=True)
class SuiteFinished:
    """A suite ended."""

    name: str


@dataclass(frozen=True, kw_only=True)
class TestStarted:
    """A spec began."""

    __test__ = False

    name: str


@dataclass(frozen=True, kw_only=True)
class TestFailed:
    """A spec failed with the given message."""

    __test__ = False

    name: str
    message: str


@dataclass(frozen=True, kw_only=True)
class TestFinished:
    """A spec ended, whatever its outcome."""

    __test__ = False

    name: str


type Event = SuiteStarted | SuiteFinished | TestStarted | TestFailed | TestFinished


class ProtocolLineError(ValueError):
    """Raised when a protocol line cannot be turned into an event."""


def to_protocol_line(event: Event) -> str:
    """Format an event as a ``TAG:JSONPAYLOAD`` protocol line.

    This tool only reads such lines. They are written by reporters running
    inside the page, which log them to the console; this function is the
    inverse of ``parse_protocol_line`` for that format.
    """
    match event:
        case SuiteStarted(name=name):
            return f"TEAMCITY_SUITESTARTED:{json.dumps({'suite': name})}"
        case SuiteFinished(name=name):
            return f"TEAMCITY_SUITEFINISHED:{json.dumps({'suite': name})}"
        case TestStarted(name=name):
            return f"TEAMCITY_TESTSTARTED:{json.dumps({'name': name})}"
        case TestFailed(name=name, message=message):
            payload = {"name": name, "message": message}
            return f"TEAMCITY_TESTFAILED:{json.dumps(payload)}"
        case TestFinished(name=name):
            return f"TEAMCITY_TESTFINISHED:{json.dumps({'name': name})}"


def is_protocol_line(line: str) -> bool:
    """Check whether a console line belongs to the structured protocol."""
    return line.startswith(PROTOCOL_PREFIX)


def parse_protocol_line(line: str) -> Event:
    """Parse a ``TAG:JSONPAYLOAD`` protocol line back into an event.

    Raises:
        ProtocolLineError: If the tag is unknown or the payload is malformed

    """
    tag, separator, raw_payload = line.partition(":")
    if not separator:
        raise ProtocolLineError(f"Missing payload separator in {line!r}")

    try:
        payload: Mapping[str, Any] = json.loads(raw_payload)
    except json.JSONDecodeError as exc:
        raise ProtocolLineError(f"Invalid payload in {line!r}: {exc}") from exc

    if not isinstance(payload, dict):
        raise ProtocolLineError(f"Payload is not an object in {line!r}")

    try:
        match tag:
            case "TEAMCITY_SUITESTARTED":
                return SuiteStarted(name=payload["suite"])
            case "TEAMCITY_SUITEFINISHED":
                return SuiteFinished(name=payload["suite"])
            case "TEAMCITY_TESTSTARTED":
                return TestStarted(name=payload["name"])
            case "TEAMCITY_TESTFAILED":
                return TestFailed(name=payload["name"], message=payload["message"])
            case "TEAMCITY_TESTFINISHED":
                return TestFinished(name=payload["name"])
    except KeyError as exc:
        raise ProtocolLineError(f"Missing field {exc} in {line!r}") from exc

    raise ProtocolLineError(f"Unknown protocol tag {tag!r}")


def service_message(
    message_name: str, /, **attributes: str | datetime | None
) -> str:
    """Build a ``##teamcity[...]`` service message with escaped attributes."""
    rendered = " ".join(
        f"{key}='{escape(value)}'" for key, value in attributes.items()
    )
    return f"##teamcity[{message_name} {rendered}]"


def to_service_message(event: Event, timestamp: datetime | None = None) -> str:
    """Format an event as a TeamCity service message.

    Args:
        event: Event to format
        timestamp: Optional time of the event, added as ``timestamp``

    """
    extra: dict[str, str | datetime] = {}
    if timestamp is not None:
        extra["timestamp"] = timestamp

    match event:
        case SuiteStarted(name=name):
            return service_message("testSuiteStarted", name=name, **extra)
        case SuiteFinished(name=name):
            return service_message("testSuiteFinished", name=name, **extra)
        case TestStarted(name=name):
            return service_message("testStarted", name=name, **extra)
        case TestFailed(name=name, message=message):
            return service_message(
                "testFailed", name=name, message=message, **extra
            )
        case TestFinished(name=name):
            return service_message("testFinished", name=name, **extra)
