"""Main entry point for ayd-mailto-alert.

Ayd runs the plugin once per status change::

    ayd-mailto-alert ALERT_URL RECORD

The outcome is written to stdout as one Ayd result record; diagnostics go
to stderr.
"""

import argparse
import os
import sys
from pathlib import Path
from typing import Iterable, List, Mapping, Optional, Union

from dotenv import find_dotenv, load_dotenv

from ayd_mailto_alert import PROGRAM_NAME, __commit__, __version__
from ayd_mailto_alert.config import default_config_paths, load_logging_settings
from ayd_mailto_alert.invocation import UsageError, parse_invocation
from ayd_mailto_alert.logging import get_logger
from ayd_mailto_alert.logging.config import configure_logging
from ayd_mailto_alert.notifications import AlertDispatcher

logger = get_logger(__name__, component="cli")


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser."""
    parser = argparse.ArgumentParser(
        prog=PROGRAM_NAME,
        description="Send Ayd? alerts by e-mail",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {__version__} ({__commit__})",
        help="show version and exit",
    )
    parser.add_argument("alert_url", metavar="ALERT_URL", help="alert URL, e.g. mailto:ops@example.org")
    parser.add_argument("record", metavar="RECORD", help="check record that triggered the alert")
    return parser


def main(
    argv: Optional[List[str]] = None,
    env: Optional[Mapping[str, str]] = None,
    config_paths: Optional[Iterable[Union[str, Path]]] = None,
    dispatcher: Optional[AlertDispatcher] = None,
) -> int:
    """
    Main entry point for ayd-mailto-alert.

    Args:
        argv: Command-line arguments without the program name (sys.argv[1:] if None)
        env: Environment mapping (the process environment if None)
        config_paths: mailrc files to read (the platform defaults if None)
        dispatcher: Alert dispatcher (creates default if None)

    Returns:
        Exit code: 0 once an outcome is reported, 2 on usage errors
    """
    if env is None:
        load_dotenv(find_dotenv(usecwd=True))
        env = dict(os.environ)

    settings = load_logging_settings(env)
    configure_logging(level=settings.level, format_type=settings.format)

    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        invocation = parse_invocation(args.alert_url, args.record)
    except UsageError as e:
        logger.debug(f"Usage error: {e}", extra={"event": "cli.usage_error"})
        print(e, file=sys.stderr)
        parser.print_usage(sys.stderr)
        return 2

    if config_paths is None:
        config_paths = default_config_paths()

    logger.info(
        f"Dispatching {invocation.record.status.value} alert for {invocation.record.target}",
        extra={"event": "cli.dispatch", "version": __version__},
    )

    dispatcher = dispatcher or AlertDispatcher()
    result = dispatcher.dispatch(invocation, env, config_paths)

    logger.info(
        f"Dispatch finished in state {result.state.value}",
        extra={"event": "cli.finished", "outcome": result.outcome},
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
