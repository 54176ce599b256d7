"""
Command-line job that emails a DMARC summary report.

Thin orchestration layer that delegates to SummaryDispatcher.
Policy: the message is sent at most once per run (no retries). The exit
code is 0 on success and 1 on any error.

Usage:
    send_summary_report.py domain=<all|name[,name...]> period=<period> [emailto=<address>]

The period is one of:
    lastmonth     - report for the last month
    lastweek      - report for the last week
    lastndays:N   - report for the last N days

Examples:
    $ send_summary_report.py domain=example.com period=lastweek
    $ send_summary_report.py domain=all period=lastndays:10 emailto=dmarc@example.com
"""

import logging
import os
import sys
from typing import Mapping, Optional, Sequence

from domain.arguments import parse_arguments
from domain.dispatcher import SummaryDispatcher
from services.config import Config
from services.errors import exception_text

# Configure logging
logger = logging.getLogger()

# Present when running under a web server (CGI/WSGI)
WEB_ENVIRONMENT_MARKERS = ('GATEWAY_INTERFACE', 'REQUEST_METHOD', 'SERVER_SOFTWARE')


def configure_logging(level_name: str) -> None:
    """Attach a console handler to the root logger (stderr)."""
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.WARNING
    logger.setLevel(level)

    if not logger.handlers:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        formatter = logging.Formatter('%(levelname)s - %(message)s')
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)


def is_cli_context(environ: Mapping[str, str]) -> bool:
    """Check that the job is not being run by a web server."""
    return not any(marker in environ for marker in WEB_ENVIRONMENT_MARKERS)


def main(argv: Optional[Sequence[str]] = None, environ: Optional[Mapping[str, str]] = None) -> int:
    """
    Run the summary report job.

    Args:
        argv: Arguments without the program name (defaults to sys.argv[1:])
        environ: Environment mapping (defaults to os.environ)

    Returns:
        int: Process exit code
    """
    if argv is None:
        argv = sys.argv[1:]
    if environ is None:
        environ = os.environ

    if not is_cli_context(environ):
        print('Forbidden')
        return 1

    # Configuration is read once here and only passed down from now on
    config = Config.from_environ(environ)
    configure_logging(config.log_level)

    args = parse_arguments(argv)
    logger.info(f"Summary report requested: domain={args.domain}, period={args.period}")

    result = SummaryDispatcher(config).run(args)
    logger.info(f"Summary report finished: {result!r}")

    if result.success:
        return 0

    if result.is_expected_error:
        print(result.error.render())
    else:
        print(exception_text(result.error.cause, debug=config.debug), end='')
    return result.exit_code


def cli() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == '__main__':
    cli()
