"""Authenticated read of the shared-location roster."""

import logging

from .cookies import DEFAULT_DOMAIN
from .errors import AuthorizationFailure, LocatorError
from .parser import LocationRecord, parse_roster_response
from .session import ACCOUNTS_URL, MAPS_URL, LocationSession
from .state import AuthState

logger = logging.getLogger(__name__)

ROSTER_URL = f"{MAPS_URL}/preview/locationsharing/read"
LOGOUT_URL = f"{ACCOUNTS_URL}/logout"


class LocationFetcher:
    """Reads the roster with the cookies of an authenticated AuthState."""

    def __init__(
        self, session: LocationSession, state: AuthState, domain: str = DEFAULT_DOMAIN
    ):
        self.session = session
        self.state = state
        self.domain = domain

    def _cookie_header(self) -> dict[str, str]:
        return {"Cookie": self.state.cookies.to_header(self.domain)}

    def fetch(self) -> list[LocationRecord]:
        """Fetch and parse the roster.

        Raises:
            TransportFailure: If the maps endpoint could not be reached
            AuthorizationFailure: If it answered with anything but 200
            ExtractionFailure: If the body could not be parsed
        """
        logger.info("Requesting shared locations ...")
        reply = self.session.exchange(
            "GET",
            ROSTER_URL,
            headers=self._cookie_header(),
            params={"authuser": "0", "pb": ""},
        )
        if reply.status_code != 200:
            raise AuthorizationFailure(
                f"Roster query failed with HTTP {reply.status_code}", reply
            )
        logger.info("Connection successful, and authorization OK.")
        return parse_roster_response(reply.text)

    def logout(self) -> bool:
        """End the session on the provider side; returns whether it answered 200."""
        logger.info("Logout attempt.")
        try:
            reply = self.session.exchange(
                "GET", LOGOUT_URL, headers=self._cookie_header()
            )
        except LocatorError as e:
            logger.warning(f"Disconnect from Google failed: {e}")
            return False
        if reply.status_code != 200:
            logger.warning(f"Logout answered HTTP {reply.status_code}")
            return False
        logger.info("Logged out from Google.")
        return True
