"""Shared-locations package: read the locations shared with a Google account."""

from importlib.metadata import PackageNotFoundError, version

from .auth import AuthOutcome, AuthPipeline, Stage, StageRunner
from .cookies import ALLOWED_COOKIES, CookieJar
from .errors import (
    AuthorizationFailure,
    ExtractionFailure,
    LocatorError,
    TransportFailure,
)
from .fetcher import LocationFetcher
from .parser import LocationRecord, parse_location_data, parse_roster_response
from .session import LocationSession, Reply
from .state import AuthState, SessionForm
from .watchdog import Watchdog

try:
    __version__ = version("shared-locations")
except PackageNotFoundError:
    # Package is not installed, use fallback version
    __version__ = "UNKNOWN"

__all__ = [
    "ALLOWED_COOKIES",
    "AuthOutcome",
    "AuthPipeline",
    "AuthState",
    "AuthorizationFailure",
    "CookieJar",
    "ExtractionFailure",
    "LocationFetcher",
    "LocationRecord",
    "LocationSession",
    "LocatorError",
    "Reply",
    "SessionForm",
    "Stage",
    "StageRunner",
    "TransportFailure",
    "Watchdog",
    "parse_location_data",
    "parse_roster_response",
]
