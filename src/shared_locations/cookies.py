"""Allow-listed cookie jar for the Google login flow."""

import logging
from collections.abc import Iterable

logger = logging.getLogger(__name__)

DEFAULT_DOMAIN = "google.com"

# Only these cookies are tracked; order is preserved in the Cookie header.
ALLOWED_COOKIES = (
    "GAPS",
    "GALX",
    "SID",
    "LSID",
    "SIDCC",
    "HSID",
    "SSID",
    "APISID",
    "SAPISID",
    "ACCOUNT_CHOOSER",
    "NID",
    "CONSENT",
    "1P_JAR",
)


def split_set_cookie(header: str) -> tuple[str, str] | None:
    """Return the (name, value) pair of a Set-Cookie header.

    Attributes after the first ``;`` are discarded and only the first ``=``
    separates name from value, so values may themselves contain ``=``.
    Returns None for a header without any ``=``.
    """
    pair = header.split(";", 1)[0]
    if "=" not in pair:
        return None
    name, value = pair.split("=", 1)
    return name.strip(), value.strip()


class CookieJar:
    """Mapping of domain to allow-listed cookie values."""

    def __init__(self, allowed: Iterable[str] = ALLOWED_COOKIES):
        self.allowed = tuple(allowed)
        self._domains: dict[str, dict[str, str]] = {}

    def _cookies_for(self, domain: str) -> dict[str, str]:
        if domain not in self._domains:
            self._domains[domain] = {name: "" for name in self.allowed}
        return self._domains[domain]

    def merge(self, domain: str, set_cookie_headers: Iterable[str]) -> None:
        """Store allow-listed cookies from raw Set-Cookie headers.

        Later headers overwrite earlier ones, also within a single call.
        Cookies outside the allow-list are ignored.
        """
        cookies = self._cookies_for(domain)
        for header in set_cookie_headers:
            pair = split_set_cookie(header)
            if pair is None:
                logger.debug(f"Ignoring malformed Set-Cookie header for {domain}")
                continue
            name, value = pair
            if name in cookies:
                cookies[name] = value
                logger.debug(f"Saved cookie {name} for {domain}")
            else:
                logger.debug(f"Ignoring cookie {name} for {domain}")

    def get(self, domain: str, name: str) -> str:
        return self._cookies_for(domain).get(name, "")

    def to_header(self, domain: str) -> str:
        """Render every allow-listed cookie, empty ones included, as a Cookie header."""
        cookies = self._cookies_for(domain)
        return ";".join(f"{name}={value}" for name, value in cookies.items())
