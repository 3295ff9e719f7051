"""Utility functions for shared-locations."""

import logging
import sys
from subprocess import CalledProcessError, run

logger = logging.getLogger(__name__)

KEYCHAIN_SERVICE = "accounts.google.com"
PARTIAL_EXTERNAL_COMMAND = [
    "/usr/bin/security",
    "find-generic-password",
    "-w",
    "-s",
]


def fetch_password(user: str, service: str = KEYCHAIN_SERVICE) -> str | None:
    """Fetch password from keychain using security command.

    Returns None when the password cannot be read.
    """
    command = PARTIAL_EXTERNAL_COMMAND + [service, "-a", user]
    try:
        logger.debug(f"Executing command: {' '.join(command[:3])} ...")
        cli_response = run(command, capture_output=True, text=True, check=True)
    except CalledProcessError as e:
        logger.error(f"External program failed with exit code {e.returncode}")
        logger.error(f"Error output: {e.stderr}")
        return None
    except FileNotFoundError:
        logger.error(f"External program not found: {command[0]}")
        return None
    logger.debug("Password fetched successfully")
    return cli_response.stdout.rstrip() or None


def err(*objects, sep=" ", end="\n", flush=False) -> None:
    """Print to stderr"""
    print(*objects, sep=sep, end=end, flush=flush, file=sys.stderr)
