"""CLI entry point for the Jasmine to TeamCity bridge."""

import argparse
import asyncio
import logging
import os
import sys
from functools import partial
from typing import NoReturn

from jasmine_teamcity.config import Settings
from jasmine_teamcity.hosts.base import PageLoadError, PageScriptError
from jasmine_teamcity.hosts.playwright import PlaywrightConfig, PlaywrightPageHost
from jasmine_teamcity.jasmine import is_run_complete, read_results
from jasmine_teamcity.poller import CompletionTimeoutError, wait_for
from jasmine_teamcity.reporting import Reporter, create_reporter
from jasmine_teamcity.translator import Translation, translate

EXIT_SUCCESS = 0
EXIT_FAILURE = 1


class ArgumentParser(argparse.ArgumentParser):
    """Argument parser that exits with the tool's failure code on misuse."""

    def error(self, message: str) -> NoReturn:
        """Print usage and exit with code 1."""
        self.print_usage(sys.stderr)
        self.exit(EXIT_FAILURE, f"{self.prog}: error: {message}\n")


def report_translation(reporter: Reporter, translation: Translation) -> int:
    """Send the translated results to the reporter and return the exit code."""
    reporter.report_failures(translation.snapshot.failures)
    for event in translation.iter_events():
        reporter.report_event(event)
    return translation.exit_code


async def run(url: str, settings: Settings) -> int:
    """Run the page's test suite and return exit code."""
    log = logging.getLogger("jasmine_teamcity")
    reporter = create_reporter(settings)

    config = PlaywrightConfig(**settings.host_config)

    async with PlaywrightPageHost.from_config(config) as host:
        host.on_console_message(reporter.report_console)

        try:
            await host.open(url)
        except PageLoadError as exc:
            log.error("Unable to access input file/url: %s", exc)
            reporter.report_error(
                "Unable to load input file", "File was probably not found."
            )
            return EXIT_FAILURE

        log.info("Waiting up to %.3fs for the test run to finish", settings.timeout)
        try:
            snapshot = await wait_for(
                partial(is_run_complete, host),
                partial(read_results, host),
                timeout=settings.timeout,
            )
        except CompletionTimeoutError as exc:
            log.error("Test run did not finish: %s", exc)
            reporter.report_error(
                "Timeout while running tests",
                "waitFor timeout while attempting to run tests. "
                f"Timeout: {round(exc.timeout * 1000)}ms.",
            )
            return EXIT_FAILURE
        except PageScriptError as exc:
            log.error("Unable to read the test run from the page: %s", exc)
            reporter.report_error("Error while running tests", str(exc))
            return EXIT_FAILURE

    return report_translation(reporter, translate(snapshot))


def main() -> None:
    """CLI entry point."""
    parser = ArgumentParser(
        description="Run a Jasmine spec runner page and report its results",
    )
    parser.add_argument("url", help="URL or path of the spec runner page")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    settings = Settings.from_env(os.environ)
    exit_code = asyncio.run(run(url=args.url, settings=settings))
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
