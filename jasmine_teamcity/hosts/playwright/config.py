"""Configuration for the Playwright page host."""

from typing import Literal

from pydantic import BaseModel


class PlaywrightConfig(BaseModel):
    """Configuration for the Playwright page host."""

    browser: Literal["chromium", "firefox", "webkit"] = "chromium"
    headless: bool = True
    # Seconds allowed for the initial navigation, separate from the run timeout
    navigation_timeout: float = 30.0
