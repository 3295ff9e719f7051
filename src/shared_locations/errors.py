"""Exceptions raised while logging in and reading shared locations."""


class LocatorError(Exception):
    """Base class for every failure of the login or roster query."""

    def __init__(self, message: str, reply=None):
        super().__init__(message)
        self.reply = reply


class TransportFailure(LocatorError):
    """No response was received (connection error, DNS failure, ...)."""


class AuthorizationFailure(LocatorError):
    """A response arrived with a status code other than the expected one."""


class ExtractionFailure(LocatorError):
    """An expected cookie, header, form field or JSON position is missing."""
