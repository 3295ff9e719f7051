"""Session state threaded through the authentication stages."""

from dataclasses import dataclass, field

from .cookies import CookieJar

FORM_FIELDS = ("gxf", "ProfileInformation", "SessionState")


class SessionForm(dict):
    """Hidden form tokens harvested from login pages, keyed by field name."""

    def __init__(self):
        super().__init__((name, "") for name in FORM_FIELDS)


@dataclass
class AuthState:
    """Everything one login run mutates: cookies, form tokens, redirect URL."""

    cookies: CookieJar = field(default_factory=CookieJar)
    form: SessionForm = field(default_factory=SessionForm)
    pending_redirect: str = ""

    def take_redirect(self) -> str:
        """Return the pending redirect URL and forget it."""
        url, self.pending_redirect = self.pending_redirect, ""
        return url
