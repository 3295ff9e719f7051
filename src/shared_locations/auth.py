"""Four-stage login to a Google account using plain HTTP requests.

The login runs as a small state machine:

    INITIAL -> EMAIL_SUBMITTED -> PASSWORD_SUBMITTED -> REDIRECTED -> AUTHENTICATED

Every stage performs exactly one HTTP exchange, checks its status code and
Set-Cookie headers, merges the cookies into the AuthState and harvests the
values the next stage needs. The first failing stage ends the run in FAILED;
nothing is retried.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from .cookies import DEFAULT_DOMAIN
from .errors import AuthorizationFailure, ExtractionFailure, LocatorError
from .extract import extract_gxf, extract_profile_information, extract_session_state
from .session import ACCOUNTS_URL, LocationSession, Reply
from .state import AuthState

logger = logging.getLogger(__name__)

SERVICE_LOGIN_URL = f"{ACCOUNTS_URL}/ServiceLogin"
LOOKUP_URL = f"{ACCOUNTS_URL}/signin/v1/lookup"
PASSWORD_URL = f"{ACCOUNTS_URL}/signin/challenge/sl/password"

# Flow markers for the no-JavaScript login variant.
FLOW_FIELDS = {
    "Page": "PasswordSeparationSignIn",
    "rip": "1",
    "bgresponse": "js_disabled",
    "pstMsg": "0",
    "checkConnection": "",
    "checkedDomains": "youtube",
    "signIn": "Weiter",
    "PersistentCookie": "yes",
}


class Stage(Enum):
    INITIAL = "First stage"
    EMAIL_SUBMITTED = "Second stage (auth user)"
    PASSWORD_SUBMITTED = "Third stage (auth password)"
    REDIRECTED = "Fourth stage (locator)"
    AUTHENTICATED = "Authenticated"
    FAILED = "Failed"


NEXT_STAGE = {
    Stage.INITIAL: Stage.EMAIL_SUBMITTED,
    Stage.EMAIL_SUBMITTED: Stage.PASSWORD_SUBMITTED,
    Stage.PASSWORD_SUBMITTED: Stage.REDIRECTED,
    Stage.REDIRECTED: Stage.AUTHENTICATED,
}


@dataclass
class AuthOutcome:
    """Final state of a login run and, on failure, which stage failed and why."""

    stage: Stage
    failed_stage: Stage | None = None
    error: LocatorError | None = None

    @property
    def ok(self) -> bool:
        return self.stage is Stage.AUTHENTICATED


def expect_reply(reply: Reply, status_code: int) -> None:
    """Check status code and presence of Set-Cookie headers.

    Raises:
        AuthorizationFailure: If the status code differs from status_code
        ExtractionFailure: If the response set no cookies
    """
    if reply.status_code != status_code:
        raise AuthorizationFailure(
            f"HTTP {status_code} expected, but {reply.status_code} received",
            reply,
        )
    if not reply.set_cookies:
        raise ExtractionFailure("No cookie found", reply)


def require(value: str, what: str) -> str:
    """Return value, raising ExtractionFailure when an earlier stage left it empty."""
    if not value:
        raise ExtractionFailure(f"{what} missing from earlier stage")
    return value


class StageRunner:
    """Runs the individual login stages against one AuthState."""

    def __init__(
        self,
        session: LocationSession,
        state: AuthState,
        user: str,
        password: str,
        domain: str = DEFAULT_DOMAIN,
    ):
        self.session = session
        self.state = state
        self.user = user
        self.password = password
        self.domain = domain

    def run(self, stage: Stage) -> None:
        handlers = {
            Stage.INITIAL: self.connect_first_stage,
            Stage.EMAIL_SUBMITTED: self.connect_second_stage,
            Stage.PASSWORD_SUBMITTED: self.connect_third_stage,
            Stage.REDIRECTED: self.connect_fourth_stage,
        }
        handlers[stage]()

    def _merge(self, reply: Reply) -> None:
        self.state.cookies.merge(self.domain, reply.set_cookies)

    def _cookie(self, name: str) -> str:
        return self.state.cookies.get(self.domain, name)

    def connect_first_stage(self) -> None:
        """Open the login page and harvest the gxf token."""
        logger.info("First stage, connecting to Google ...")
        reply = self.session.exchange(
            "GET", SERVICE_LOGIN_URL, params={"rip": "1", "nojavascript": "1"}
        )
        expect_reply(reply, 200)
        self._merge(reply)
        self.state.form["gxf"] = extract_gxf(reply.text)
        logger.info("Connection successful. Saved connection cookies.")

    def connect_second_stage(self) -> None:
        """Send the e-mail address and harvest the profile and session tokens."""
        logger.info("Second stage, sending E-Mail address ...")
        form = self.state.form
        data = {
            **FLOW_FIELDS,
            "gxf": require(form["gxf"], "gxf"),
            "ProfileInformation": "",
            "SessionState": "",
            "Email": self.user,
            "identifiertoken": "",
            "identifiertoken_audio": "",
            "identifier-captcha-input": "",
            "Passwd": "",
        }
        headers = {"Cookie": f"GAPS={self._cookie('GAPS')}"}
        reply = self.session.exchange("POST", LOOKUP_URL, headers=headers, data=data)
        expect_reply(reply, 200)
        self._merge(reply)
        form["ProfileInformation"] = extract_profile_information(reply.text)
        form["SessionState"] = extract_session_state(reply.text)
        logger.info("Connection successful. Saved connection cookies.")

    def connect_third_stage(self) -> None:
        """Send the password; a 302 means it was accepted."""
        logger.info("Third stage, sending password ...")
        form = self.state.form
        galx = require(self._cookie("GALX"), "GALX cookie")
        data = {
            **FLOW_FIELDS,
            "GALX": galx,
            "gxf": form["gxf"],
            "ProfileInformation": require(
                form["ProfileInformation"], "ProfileInformation"
            ),
            "SessionState": require(form["SessionState"], "SessionState"),
            "_utf8": "☃",
            "Email": self.user,
            "Passwd": self.password,
            "rmShown": "1",
        }
        headers = {
            "Cookie": f"GAPS={self._cookie('GAPS')}; GALX={galx}",
            "Origin": ACCOUNTS_URL,
            "Referer": LOOKUP_URL,
            "Upgrade-Insecure-Requests": "1",
        }
        reply = self.session.exchange("POST", PASSWORD_URL, headers=headers, data=data)
        expect_reply(reply, 302)
        self._merge(reply)
        location = reply.headers.get("Location")
        if not location:
            raise ExtractionFailure("Redirect without Location header", reply)
        self.state.pending_redirect = location
        logger.info(f"Authentication successful, received new location URL: {location}")

    def connect_fourth_stage(self) -> None:
        """Follow the post-login redirect to collect the session cookies."""
        url = require(self.state.take_redirect(), "Redirect URL")
        logger.info(f"Fourth stage, redirecting to {url}")
        headers = {"Cookie": self.state.cookies.to_header(self.domain)}
        reply = self.session.exchange("POST", url, headers=headers)
        expect_reply(reply, 302)
        self._merge(reply)
        logger.info("Connection successful. Saved connection cookies.")


class AuthPipeline:
    """Drives the stages in order until AUTHENTICATED or FAILED."""

    def __init__(self, runner: StageRunner):
        self.runner = runner

    @classmethod
    def for_credentials(
        cls, session: LocationSession, user: str, password: str
    ) -> "AuthPipeline":
        return cls(StageRunner(session, AuthState(), user, password))

    @property
    def state(self) -> AuthState:
        return self.runner.state

    def run(self) -> AuthOutcome:
        stage = Stage.INITIAL
        while stage in NEXT_STAGE:
            try:
                self.runner.run(stage)
            except LocatorError as e:
                logger.error(f"{stage.value} error: {e}")
                return AuthOutcome(Stage.FAILED, failed_stage=stage, error=e)
            stage = NEXT_STAGE[stage]
        return AuthOutcome(stage)
