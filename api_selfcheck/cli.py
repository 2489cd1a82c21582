"""CLI entry point for running a self-check suite."""

import argparse
import asyncio
import json
import logging
import sys

from pydantic import ValidationError

from api_selfcheck.config import HarnessConfig
from api_selfcheck.loading import SuiteNotFoundError, load_suite
from api_selfcheck.reporting import (
    format_output,
    log_results_summary,
    notify_report_ready,
    render_text,
)
from api_selfcheck.suite import Suite

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2


def parse_config(config_json: str) -> HarnessConfig:
    """Parse harness configuration from a JSON string."""
    if not config_json.strip():
        return HarnessConfig()
    return HarnessConfig.model_validate_json(config_json)


async def run(
    suite_target: str,
    config_json: str = "",
    output_format: str = "text",
    verbose: bool = False,
) -> int:
    """Run a suite and return exit code."""
    log = logging.getLogger("api_selfcheck")

    try:
        config = parse_config(config_json)
        log.info("Loading suite: %s", suite_target)
        suite = load_suite(suite_target)
    except (SuiteNotFoundError, ValidationError) as exc:
        log.error("%s", exc)
        return EXIT_USAGE

    suite.config = config
    total = len(suite.test_sets)
    log.info("Running %d test set(s)...", total)
    report = await suite.run()

    log_results_summary(log, report)

    if output_format == "json":
        rendered = json.dumps(format_output(report), indent=2) + "\n"
    else:
        rendered = render_text(report, verbose=verbose)
    print(rendered, end="")

    notify_report_ready(suite, rendered)

    severity = Suite.severity(report)
    log.info("Suite result: %s", severity.name)
    return EXIT_FAILED if severity >= config.fail_on else EXIT_OK


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Run API self-check suites")
    parser.add_argument(
        "--suite",
        required=True,
        help="Suite to run: 'package.module:attribute' or an entry point name",
    )
    parser.add_argument(
        "--config",
        default="",
        help="JSON configuration for the harness",
    )
    parser.add_argument(
        "--format",
        choices=("text", "json"),
        default="text",
        help="Report output format",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="List every test, including those of passing test sets",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    exit_code = asyncio.run(
        run(
            suite_target=args.suite,
            config_json=args.config,
            output_format=args.format,
            verbose=args.verbose,
        )
    )
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
