"""Reading the Jasmine HTML reporter's rendered results from a page."""

import logging

from jasmine_teamcity.hosts.base import PageHost
from jasmine_teamcity.models.snapshot import ResultsSnapshot

log = logging.getLogger(__name__)

# The run is over once no spec is pending and the alert bar shows an outcome.
RUN_COMPLETE_SCRIPT = """
() => document.body.querySelector('.jasmine-symbolSummary .jasmine-pending') === null
    && (document.body.querySelector('.jasmine-alert > .jasmine-bar.jasmine-passed') !== null
        || document.body.querySelector('.jasmine-alert > .jasmine-bar.jasmine-failed') !== null)
"""

RESULTS_SNAPSHOT_SCRIPT = """
() => {
    const attribute = (element, name) =>
        element && element.hasAttribute(name) ? element.getAttribute(name) : null;

    const snapshot = (element) => ({
        className: element.className || '',
        text: element.innerText || '',
        href: attribute(element, 'href'),
        children: Array.from(element.children, snapshot),
    });

    const failureNodes = document.body.querySelectorAll(
        '.jasmine-results > .jasmine-failures > .jasmine-spec-detail.jasmine-failed'
    );
    const failures = Array.from(failureNodes, (failure) => {
        const description = failure.querySelector('.jasmine-description');
        const link = description ? description.children[0] : null;
        const message = failure.querySelector('.jasmine-result-message');
        return {
            href: attribute(link, 'href'),
            title: attribute(link, 'title'),
            message: message ? message.innerText : '',
        };
    });

    const summary = document.body.querySelector('.jasmine-results > .jasmine-summary');
    const suites = summary ? Array.from(summary.children, snapshot) : [];

    return { failures, suites };
}
"""


async def is_run_complete(host: PageHost) -> bool:
    """Check whether the reporter has finished rendering results."""
    return bool(await host.evaluate(RUN_COMPLETE_SCRIPT))


async def read_results(host: PageHost) -> ResultsSnapshot:
    """Read the rendered failures and suite tree in one pass."""
    data = await host.evaluate(RESULTS_SNAPSHOT_SCRIPT)
    snapshot = ResultsSnapshot.model_validate(data)
    log.debug(
        "Snapshot has %d suite(s), %d failure(s)",
        len(snapshot.suites),
        len(snapshot.failures),
    )
    return snapshot
