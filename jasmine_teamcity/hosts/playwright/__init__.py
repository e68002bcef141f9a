"""Playwright page host module."""

from jasmine_teamcity.hosts.playwright.config import PlaywrightConfig
from jasmine_teamcity.hosts.playwright.host import PlaywrightPageHost

__all__ = ["PlaywrightConfig", "PlaywrightPageHost"]
