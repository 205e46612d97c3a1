# tgverify/errors.py
"""
Error kinds shared by the bot handlers and the HTTP API.

Both surfaces answer every failure with one generic response, but the kind
is kept on the exception so logs can tell "user not found" from "Telegram is
down".
"""

import enum
from typing import Optional

from telegram.error import BadRequest, Forbidden


class ErrorKind(str, enum.Enum):
    MISSING_CONFIG = "missing-config"
    NOT_FOUND = "not-found"
    UPSTREAM_UNAVAILABLE = "upstream-unavailable"
    PERMISSION_DENIED = "permission-denied"


class VerifierError(Exception):
    kind = ErrorKind.UPSTREAM_UNAVAILABLE

    def __init__(self, message: str, kind: Optional[ErrorKind] = None):
        super().__init__(message)
        if kind is not None:
            self.kind = kind


class ConfigError(VerifierError):
    kind = ErrorKind.MISSING_CONFIG


class LookupFailure(VerifierError):
    """A membership or identity lookup against Telegram did not produce a result."""


def classify(exc: BaseException) -> ErrorKind:
    """Map an upstream exception to an ErrorKind."""
    if isinstance(exc, VerifierError):
        return exc.kind
    # BadRequest subclasses NetworkError, so it has to be checked first
    if isinstance(exc, BadRequest):
        return ErrorKind.NOT_FOUND
    if isinstance(exc, Forbidden):
        return ErrorKind.PERMISSION_DENIED
    return ErrorKind.UPSTREAM_UNAVAILABLE
