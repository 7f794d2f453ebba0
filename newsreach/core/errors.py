"""
Error taxonomy for the NNTP engine.

Every fault raised below the operation boundary is one of these. The
operation executor converts them into failed ``OperationResult`` values,
so callers only ever inspect results.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class FailureKind(Enum):
    """Coarse reason attached to a failed operation."""
    CONNECT_TIMEOUT = "connect_timeout"
    CONNECT_FAILURE = "connect_failure"
    READ_TIMEOUT = "read_timeout"
    UNEXPECTED_STATUS = "unexpected_status"
    AUTH_FAILURE = "auth_failure"
    TRANSPORT_FAULT = "transport_fault"
    BODY_TOO_LARGE = "body_too_large"
    INVALID_ARGUMENT = "invalid_argument"


class NNTPClientError(Exception):
    """Base class for all engine errors."""
    kind = FailureKind.TRANSPORT_FAULT


class ConnectTimeout(NNTPClientError):
    kind = FailureKind.CONNECT_TIMEOUT


class ConnectFailure(NNTPClientError):
    kind = FailureKind.CONNECT_FAILURE


class ReadTimeout(NNTPClientError):
    """No complete line arrived before the read deadline."""
    kind = FailureKind.READ_TIMEOUT


class TransportFault(NNTPClientError):
    """Lower-level I/O fault: reset, EOF, send failure."""
    kind = FailureKind.TRANSPORT_FAULT


class LineTooLong(TransportFault):
    pass


class BodyTooLarge(NNTPClientError):
    """Multiline body exceeded the configured line or byte limit."""
    kind = FailureKind.BODY_TOO_LARGE


class UnexpectedStatus(NNTPClientError):
    """Reply status outside the set expected by the current step."""
    kind = FailureKind.UNEXPECTED_STATUS

    def __init__(self, command: str, line: str, code: Optional[str] = None):
        super().__init__(f"{command} failed: {line}")
        self.command = command
        self.line = line
        self.code = code


class AuthFailure(NNTPClientError):
    kind = FailureKind.AUTH_FAILURE

    def __init__(self, message: str, line: str = ""):
        super().__init__(message)
        self.line = line
