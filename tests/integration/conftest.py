"""Fixtures for integration tests against a real browser."""

from pathlib import Path

import pytest
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright

PAGES = Path(__file__).parent / "pages"


async def _can_launch_chromium() -> bool:
    async with async_playwright() as playwright:
        try:
            browser = await playwright.chromium.launch()
        except PlaywrightError:
            return False
        await browser.close()
        return True


@pytest.fixture(autouse=True)
async def _require_browser() -> None:
    """Skip when the browsers have not been installed."""
    if not await _can_launch_chromium():
        pytest.skip("Chromium is not installed (run `playwright install chromium`)")


@pytest.fixture
def pages() -> Path:
    """Directory of the rendered reporter pages."""
    return PAGES
