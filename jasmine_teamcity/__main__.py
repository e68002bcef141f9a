"""Allow running the bridge with ``python -m jasmine_teamcity``."""

from jasmine_teamcity.cli import main

main()
