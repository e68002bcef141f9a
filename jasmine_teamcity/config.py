"""Run settings resolved once from the process environment."""

import json
from collections.abc import Mapping
from typing import Any

from pydantic import Field

from jasmine_teamcity.models.base import Model
from jasmine_teamcity.poller import DEFAULT_TIMEOUT

TEAMCITY_ENV_VAR = "TEAMCITY_PROJECT_NAME"
TIMEOUT_ENV_VAR = "JASMINE_TEAMCITY_TIMEOUT"
HOST_CONFIG_ENV_VAR = "JASMINE_TEAMCITY_HOST_CONFIG"
TIMESTAMPS_ENV_VAR = "JASMINE_TEAMCITY_TIMESTAMPS"


class Settings(Model):
    """Settings for one run of the tool."""

    teamcity: bool = Field(
        default=False, description="Emit TeamCity service messages only"
    )
    timeout: float = Field(
        default=DEFAULT_TIMEOUT, gt=0, description="Seconds to wait for the run"
    )
    host_config: Mapping[str, Any] = Field(
        default_factory=dict, description="Playwright host options"
    )
    timestamps: bool = Field(
        default=False, description="Add timestamps to service messages"
    )

    @classmethod
    def from_env(cls, environ: Mapping[str, str]) -> "Settings":
        """Build settings from environment variables.

        TeamCity mode is on whenever ``TEAMCITY_PROJECT_NAME`` is set, which
        TeamCity does for every build step.
        """
        values: dict[str, Any] = {"teamcity": TEAMCITY_ENV_VAR in environ}

        if timeout := environ.get(TIMEOUT_ENV_VAR):
            values["timeout"] = timeout
        if host_config := environ.get(HOST_CONFIG_ENV_VAR):
            values["host_config"] = json.loads(host_config)
        if timestamps := environ.get(TIMESTAMPS_ENV_VAR):
            values["timestamps"] = timestamps

        return cls.model_validate(values)
