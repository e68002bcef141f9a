"""Abstract base class for page-automation hosts."""

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

type ConsoleHandler = Callable[[str], None]


class PageLoadError(Exception):
    """Raised when the target page cannot be loaded."""


class PageScriptError(Exception):
    """Raised when a script cannot be evaluated in the page.

    Happens for example when the page navigates away or reloads while the
    script runs.
    """


@dataclass(frozen=True, kw_only=True)
class PageHost(ABC):
    """Abstract base for hosts that render and script a web page.

    A host owns one page. Everything the tool needs from a browser goes
    through the three operations below.
    """

    @abstractmethod
    async def open(self, url: str) -> None:
        """Load the given URL or local file path into the page.

        Raises:
            PageLoadError: If the page could not be loaded

        """

    @abstractmethod
    async def evaluate(self, expression: str) -> Any:
        """Evaluate a JavaScript function expression in the page context.

        Args:
            expression: Source of a zero-argument function, e.g. ``() => 1``

        Returns:
            The JSON-serializable value the function returned

        Raises:
            PageScriptError: If the page could not run the function

        """

    @abstractmethod
    def on_console_message(self, handler: ConsoleHandler) -> None:
        """Register a handler called with the text of each page console message."""
