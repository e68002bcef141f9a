"""Playwright page host implementation."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any
from urllib.parse import urlsplit

from playwright.async_api import ConsoleMessage, Page, async_playwright
from playwright.async_api import Error as PlaywrightError

from jasmine_teamcity.hosts.base import (
    ConsoleHandler,
    PageHost,
    PageLoadError,
    PageScriptError,
)
from jasmine_teamcity.hosts.playwright.config import PlaywrightConfig

log = logging.getLogger(__name__)


def resolve_target(target: str) -> str:
    """Turn a local file path into a file:// URL, leave URLs untouched."""
    # A single letter scheme is a Windows drive, not a URL
    if len(urlsplit(target).scheme) > 1:
        return target
    return Path(target).resolve().as_uri()


@dataclass(frozen=True, kw_only=True)
class PlaywrightPageHost(PageHost):
    """Page host backed by a Playwright-driven browser."""

    config: PlaywrightConfig
    page: Page = field(repr=False)

    @classmethod
    @asynccontextmanager
    async def from_config(
        cls, config: PlaywrightConfig
    ) -> AsyncGenerator["PlaywrightPageHost", None]:
        """Create host with managed browser lifecycle."""
        async with async_playwright() as playwright:
            browser_type = getattr(playwright, config.browser)
            browser = await browser_type.launch(headless=config.headless)
            try:
                page = await browser.new_page()
                yield cls(config=config, page=page)
            finally:
                await browser.close()

    async def open(self, url: str) -> None:
        """Navigate to the target and wait for the load event."""
        target = resolve_target(url)
        log.info("Opening %s in %s", target, self.config.browser)

        try:
            response = await self.page.goto(
                target,
                wait_until="load",
                timeout=self.config.navigation_timeout * 1000,
            )
        except PlaywrightError as exc:
            raise PageLoadError(f"Failed to load {target}: {exc.message}") from exc

        if response is not None and response.status >= 400:
            raise PageLoadError(
                f"Failed to load {target}: {response.status} {response.status_text}"
            )

    async def evaluate(self, expression: str) -> Any:
        """Evaluate a function expression in the page."""
        try:
            return await self.page.evaluate(expression)
        except PlaywrightError as exc:
            raise PageScriptError(exc.message) from exc

    def on_console_message(self, handler: ConsoleHandler) -> None:
        """Forward the text of every console message to the handler."""

        def _forward(message: ConsoleMessage) -> None:
            handler(message.text)

        self.page.on("console", _forward)
