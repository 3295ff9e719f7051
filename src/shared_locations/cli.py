"""Command line interface for shared-locations."""

import logging
import math
import os
import sys
import tomllib
from argparse import ArgumentParser, ArgumentTypeError, Namespace

import yaml

from .auth import AuthPipeline
from .errors import LocatorError
from .fetcher import LocationFetcher
from .parser import LocationRecord
from .session import LocationSession
from .utils import err, fetch_password
from .watchdog import DEFAULT_TIMEOUT, Watchdog

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_MISSING_ARGUMENT = 5

CONFIG_PATH = "~/.config/shared-locations/config.toml"
FIELD_SEPARATOR = " , "
OUTPUT_FORMATS = ("lines", "yaml")
DESCRIPTION = "Print the locations shared with a Google account"


class LocatorArgumentParser(ArgumentParser):
    """ArgumentParser whose usage errors exit with EXIT_MISSING_ARGUMENT.

    The default status 2 is reserved for the watchdog.
    """

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(EXIT_MISSING_ARGUMENT, f"{self.prog}: error: {message}\n")


def main(argv=None):
    """Entry point for printing the locations shared with a Google account."""
    sys.exit(shared_locations_cli(argv))


def shared_locations_cli(argv=None) -> int:
    args = parse_arguments(argv)
    config_logging(args)
    config = load_config()
    timeout = resolve_timeout(args, config)
    output_format = resolve_format(args, config)

    logger.info("Starting google shared locations adapter")
    with Watchdog(timeout):
        password = resolve_password(args)
        if not password:
            parser = make_parser(DESCRIPTION)
            parser.print_usage(sys.stderr)
            err("Error, missing pass argument.")
            return EXIT_MISSING_ARGUMENT
        records = query_shared_locations(args.user, password, logout=args.logout)
        if records is None:
            logger.error("Error")
            return EXIT_FAILURE
        emit_records(records, output_format)
    logger.info("Done")
    return EXIT_OK


def query_shared_locations(
    user: str, password: str, logout: bool = False
) -> list[LocationRecord] | None:
    """Log in, read the roster and optionally log out.

    Returns None when login or the roster query failed; the cause is logged.
    """
    with LocationSession() as session:
        pipeline = AuthPipeline.for_credentials(session, user, password)
        outcome = pipeline.run()
        if not outcome.ok:
            return None

        fetcher = LocationFetcher(session, pipeline.state)
        try:
            return fetcher.fetch()
        except LocatorError as e:
            logger.error(f"Query for shared locations failed: {e}")
            return None
        finally:
            if logout:
                fetcher.logout()


def emit_records(records: list[LocationRecord], output_format: str = "lines") -> None:
    """Print records to stdout, one line each or as a YAML list."""
    if output_format == "yaml":
        print(
            yaml.safe_dump([r.as_dict() for r in records], sort_keys=False), end=""
        )
        return
    for record in records:
        print(FIELD_SEPARATOR.join(str(field) for field in record.as_row()))


def parse_arguments(argv=None) -> Namespace:
    """Parse command line arguments."""
    parser = make_parser(DESCRIPTION)
    parser.add_argument("user", help="Google account e-mail address")
    parser.add_argument(
        "password",
        nargs="?",
        help="Account password (visible to other local users; "
        "prefer $SHARED_LOCATIONS_PASSWORD or --keychain)",
    )
    parser.add_argument(
        "--keychain",
        action="store_true",
        help="Read the password from the macOS keychain",
    )
    parser.add_argument(
        "--timeout",
        type=positive_float,
        metavar="SEC",
        help="Abort the whole run after SEC seconds. "
        "Resolution order: 1. --timeout "
        "2. $SHARED_LOCATIONS_TIMEOUT "
        "3. config file "
        f"4. {DEFAULT_TIMEOUT:g}",
    )
    parser.add_argument(
        "--format",
        choices=OUTPUT_FORMATS,
        help="Output format (default: lines)",
    )
    parser.add_argument(
        "--logout", action="store_true", help="Log out after reading locations"
    )
    return parser.parse_args(argv)


def load_config(config_path: str = CONFIG_PATH) -> dict:
    """Load the TOML config file, or an empty config if there is none."""
    path = os.path.expanduser(config_path)
    if not os.path.exists(path):
        return {}
    with open(path, "rb") as f:
        return tomllib.load(f)


def resolve_password(args) -> str | None:
    """Resolve the password: argument, $SHARED_LOCATIONS_PASSWORD, keychain."""
    if args.password:
        return args.password
    env_password = os.environ.get("SHARED_LOCATIONS_PASSWORD")
    if env_password:
        return env_password
    if args.keychain:
        return fetch_password(args.user)
    return None


def positive_float(value) -> float:
    """Parse a number of seconds greater than zero."""
    try:
        seconds = float(value)
    except (TypeError, ValueError):
        raise ArgumentTypeError(f"not a number: {value!r}") from None
    if not math.isfinite(seconds) or seconds <= 0:
        raise ArgumentTypeError(f"must be a finite number above zero: {value!r}")
    return seconds


def resolve_timeout(args, config: dict) -> float:
    """Resolve the watchdog deadline using resolution order from args.

    Unusable environment or config values are skipped with a warning.
    """
    # 1. Command-line option
    if args.timeout is not None:
        return args.timeout

    # 2. Environment variable, 3. Config file
    sources = [
        ("$SHARED_LOCATIONS_TIMEOUT", os.environ.get("SHARED_LOCATIONS_TIMEOUT")),
        (CONFIG_PATH, config.get("timeout")),
    ]
    for source, value in sources:
        if value is None or value == "":
            continue
        try:
            return positive_float(value)
        except ArgumentTypeError as e:
            logger.warning(f"Ignoring timeout from {source}: {e}")

    # 4. Fallback
    return DEFAULT_TIMEOUT


def resolve_format(args, config: dict) -> str:
    """Resolve the output format using resolution order from args."""
    output_format = (
        args.format
        or os.environ.get("SHARED_LOCATIONS_FORMAT")
        or config.get("format")
        or "lines"
    )
    if output_format not in OUTPUT_FORMATS:
        logger.warning(f"Unknown output format {output_format!r}, using lines")
        return "lines"
    return output_format


def make_parser(description: str) -> ArgumentParser:
    parser = LocatorArgumentParser(description=description)
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose output"
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Suppress INFO and below messages"
    )
    return parser


def config_logging(args) -> None:
    """Configure logging based on command line arguments."""
    if args.quiet:
        log_level = logging.WARNING
    elif args.verbose:
        log_level = logging.DEBUG
    else:
        log_level = logging.INFO

    logging.basicConfig(
        level=log_level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


if __name__ == "__main__":
    main()
