"""Global test fixtures for shared-locations."""

import json
from unittest.mock import Mock

import pytest
from pytest import fixture
from requests.structures import CaseInsensitiveDict

from shared_locations import LocationSession, Reply

REDIRECT_URL = "https://accounts.google.com/CheckCookie?continue=https%3A%2F%2Fwww.google.com"

LOGIN_HTML = """<!DOCTYPE html>
<html><body>
<form novalidate method="post" action="https://accounts.google.com/signin/v1/lookup">
<input type="hidden" name="Page" value="PasswordSeparationSignIn">
<input type="hidden" name="gxf" value="AFoagUX-gxf-token:1700000000000">
<input id="Email" name="Email" type="email" value="">
</form>
</body></html>
"""

LOOKUP_HTML = """<!DOCTYPE html>
<html><body>
<form novalidate method="post" action="https://accounts.google.com/signin/challenge/sl/password">
<input id="profile-information" name="ProfileInformation" type="hidden" value="APMTqunProfileInfo">
<input id="session-state" name="SessionState" type="hidden" value="AEThLlwSessionState">
<input id="Passwd" name="Passwd" type="password">
</form>
</body></html>
"""

ROSTER_DATA = [
    [
        [
            ["id1", "https://lh3.example.com/photo1.jpg", None, "Alice"],
            [None, [None, 12.5, 55.1], 1700000000000],
        ],
        [
            ["id2", "https://lh3.example.com/photo2.jpg", None, "Bob"],
            [None, [None, -0.1276, 51.5072], 1700000000000],
        ],
    ],
    None,
    "account@example.com",
]


def pytest_addoption(parser):
    """Add custom pytest command line options."""
    parser.addoption(
        "--e2e",
        action="store_true",
        default=False,
        help="run end-to-end tests",
    )


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "e2e: mark test as end-to-end test")


def pytest_collection_modifyitems(config, items):
    """Skip end-to-end tests unless --e2e option is used."""
    if config.getoption("--e2e"):
        return

    skip_e2e = pytest.mark.skip(reason="need --e2e option to run")
    for item in items:
        if "e2e" in item.keywords:
            item.add_marker(skip_e2e)


def frame(payload: str) -> str:
    """Wrap a JSON payload the way the roster endpoint does."""
    return ")]}'\n" + payload + "\n"


@fixture
def roster_body() -> str:
    return frame(json.dumps(ROSTER_DATA))


@fixture
def stage_replies() -> list[Reply]:
    """The four replies of a successful login, in order."""
    return [
        Reply(
            status_code=200,
            reason="OK",
            set_cookies=[
                "GAPS=1:gaps-value; Path=/; Expires=Fri, 01-Jan-2100 00:00:00 GMT; Secure",
                "GALX=galx-value; Path=/; Secure",
            ],
            text=LOGIN_HTML,
        ),
        Reply(
            status_code=200,
            reason="OK",
            set_cookies=["NID=nid-value; Domain=.google.com; HttpOnly"],
            text=LOOKUP_HTML,
        ),
        Reply(
            status_code=302,
            reason="Found",
            headers=CaseInsensitiveDict({"Location": REDIRECT_URL}),
            set_cookies=["SID=sid-value; Domain=.google.com", "HSID=hsid-value"],
        ),
        Reply(
            status_code=302,
            reason="Found",
            headers=CaseInsensitiveDict({"Location": "https://www.google.com"}),
            set_cookies=["SIDCC=sidcc-value", "SSID=ssid-value"],
        ),
    ]


@fixture
def roster_reply(roster_body) -> Reply:
    return Reply(status_code=200, reason="OK", text=roster_body)


@fixture
def make_session():
    """Return a factory for mock sessions answering with the given replies."""

    def factory(replies) -> Mock:
        session = Mock(spec=LocationSession)
        session.exchange.side_effect = list(replies)
        return session

    return factory
