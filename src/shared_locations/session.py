"""LocationSession class for the HTTP exchanges of the login flow."""

import http.cookiejar as cookiejar
import logging
from dataclasses import dataclass, field

from requests import RequestException, Response, Session
from requests.structures import CaseInsensitiveDict

from .errors import TransportFailure

logger = logging.getLogger(__name__)

ACCOUNTS_URL = "https://accounts.google.com"
MAPS_URL = "https://www.google.com/maps"
USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0 Safari/537.36"
)


@dataclass
class Reply:
    """The parts of an HTTP response the login stages look at."""

    status_code: int
    reason: str = ""
    url: str = ""
    headers: CaseInsensitiveDict = field(default_factory=CaseInsensitiveDict)
    set_cookies: list[str] = field(default_factory=list)
    text: str = ""

    @classmethod
    def from_response(cls, response: Response) -> "Reply":
        return cls(
            status_code=response.status_code,
            reason=response.reason,
            url=response.url,
            headers=CaseInsensitiveDict(response.headers),
            set_cookies=raw_set_cookies(response),
            text=response.text,
        )


def raw_set_cookies(response: Response) -> list[str]:
    """Return every Set-Cookie header of a response, one string per header.

    ``response.headers`` folds repeated headers into one comma-joined value,
    which is ambiguous for cookies carrying an Expires date, so the raw
    urllib3 headers are read instead.
    """
    raw = getattr(response, "raw", None)
    raw_headers = getattr(raw, "headers", None)
    if raw_headers is not None and hasattr(raw_headers, "getlist"):
        return list(raw_headers.getlist("Set-Cookie"))
    value = response.headers.get("Set-Cookie")
    return [value] if value else []


class LocationSession(Session):
    """Session that performs single exchanges without following redirects.

    Cookies are tracked by the caller's allow-listed jar and sent explicitly,
    so the requests cookie jar is set up to refuse everything.
    """

    def __init__(self):
        super().__init__()
        self.cookies: cookiejar.CookieJar = cookiejar.CookieJar(
            policy=cookiejar.DefaultCookiePolicy(allowed_domains=[])
        )
        self.headers["User-Agent"] = USER_AGENT

    def exchange(self, method: str, url: str, **kwargs) -> Reply:
        """Perform one request and return its Reply.

        Redirects are never followed: a 302 carries meaning for the caller.

        Raises:
            TransportFailure: If no response was received
        """
        try:
            response = self.request(method, url, allow_redirects=False, **kwargs)
        except RequestException as e:
            logger.error(f"Failed to {method} {url}: {e}")
            raise TransportFailure(f"Connection failure: {e}") from e
        reply = Reply.from_response(response)
        log_reply(reply)
        return reply


def log_reply(reply: Reply) -> None:
    """Log response details; headers only at DEBUG."""
    logger.info(f"Response URL: {reply.url}")
    logger.info(f"Status: {reply.status_code} {reply.reason}")
    logger.debug("Response headers:")
    for k, v in reply.headers.items():
        logger.debug(f"  {k}: {v}")
