"""Pattern extraction of hidden form fields from login pages.

Each field has one compiled pattern. A pattern that does not match and a
pattern that matches with an empty value both raise ExtractionFailure, so a
markup change on the provider side fails one named step.
"""

from logging import getLogger
from re import compile

from .errors import ExtractionFailure

logger = getLogger(__name__)

GXF_PATTERN = compile(r'<input\s+type="hidden"\s+name="gxf"\s+value="([^"]*)"')
PROFILE_INFORMATION_PATTERN = compile(
    r'<input\s+id="profile-information"\s+name="ProfileInformation"'
    r'\s+type="hidden"\s+value="([^"]*)"'
)
SESSION_STATE_PATTERN = compile(
    r'<input\s+id="session-state"\s+name="SessionState"'
    r'\s+type="hidden"\s+value="([^"]*)"'
)


def extract_field(name: str, pattern, html: str) -> str:
    """Return the captured value of a hidden input, or raise ExtractionFailure."""
    m = pattern.search(html or "")
    value = m.group(1) if m else ""
    if not value:
        raise ExtractionFailure(f"Hidden form field {name} not found")
    logger.debug(f"Extracted {name} ({len(value)} characters)")
    return value


def extract_gxf(html: str) -> str:
    return extract_field("gxf", GXF_PATTERN, html)


def extract_profile_information(html: str) -> str:
    return extract_field("ProfileInformation", PROFILE_INFORMATION_PATTERN, html)


def extract_session_state(html: str) -> str:
    return extract_field("SessionState", SESSION_STATE_PATTERN, html)
