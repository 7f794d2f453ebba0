"""
AUTHINFO USER/PASS handshake
============================

    START --(no principal)--> SKIPPED
    START --> SENT_USER --281--> AUTHENTICATED
                        --381--> NEED_PASSWORD --> SENT_PASS --281--> AUTHENTICATED
                                                             --other--> FAILED
                        --other--> FAILED

A read timeout in any state ends in TIMED_OUT. Only SKIPPED and
AUTHENTICATED let the caller go on to send its own command.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .errors import ReadTimeout
from .status import AUTH_ACCEPTED, PASSWORD_REQUIRED, classify
from .transport import LineTransport

logger = logging.getLogger(__name__)


class AuthState(Enum):
    START = "start"
    SKIPPED = "skipped"
    SENT_USER = "sent_user"
    NEED_PASSWORD = "need_password"
    SENT_PASS = "sent_pass"
    AUTHENTICATED = "authenticated"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


@dataclass(frozen=True)
class AuthOutcome:
    state: AuthState
    message: str
    last_response: str = ""

    @property
    def ok(self) -> bool:
        """True when the caller may proceed with its command."""
        return self.state in (AuthState.SKIPPED, AuthState.AUTHENTICATED)


def has_principal(username: Optional[str]) -> bool:
    return bool(username and username.strip())


class AuthHandshake:
    """Runs the handshake once on an already greeted connection."""

    def __init__(
        self,
        transport: LineTransport,
        username: Optional[str],
        password: Optional[str],
        timeout: float,
    ):
        self.transport = transport
        self.username = username.strip() if username else username
        self.password = password or ""
        self.timeout = timeout
        self.state = AuthState.START

    def _transition(self, new_state: AuthState) -> None:
        logger.debug(f"[AUTH] {self.state.name} -> {new_state.name}")
        self.state = new_state

    def _finish(self, state: AuthState, message: str, last_response: str = "") -> AuthOutcome:
        self._transition(state)
        return AuthOutcome(state, message, last_response)

    def run(self) -> AuthOutcome:
        if self.state is not AuthState.START:
            raise RuntimeError(f"Handshake already ran (state {self.state.name})")

        if not has_principal(self.username):
            return self._finish(AuthState.SKIPPED, "Connected (no authentication requested).")

        logger.debug(f"[CMD] AUTHINFO USER {self.username}")
        self.transport.write_line(f"AUTHINFO USER {self.username}", self.timeout)
        self._transition(AuthState.SENT_USER)

        try:
            reply = self.transport.read_line(self.timeout)
        except ReadTimeout:
            return self._finish(AuthState.TIMED_OUT, "No response after AUTHINFO USER (timeout).")

        if classify(reply, {AUTH_ACCEPTED}):
            return self._finish(AuthState.AUTHENTICATED, f"Authentication succeeded: {reply}", reply)

        if not classify(reply, {PASSWORD_REQUIRED}):
            return self._finish(
                AuthState.FAILED, f"Unexpected server reply after AUTHINFO USER: {reply}", reply
            )

        self._transition(AuthState.NEED_PASSWORD)
        logger.debug("[CMD] AUTHINFO PASS ********")
        self.transport.write_line(f"AUTHINFO PASS {self.password}", self.timeout)
        self._transition(AuthState.SENT_PASS)

        try:
            reply = self.transport.read_line(self.timeout)
        except ReadTimeout:
            # reply still holds the 381 line
            return self._finish(AuthState.TIMED_OUT, "No response after AUTHINFO PASS (timeout).", reply)

        if classify(reply, {AUTH_ACCEPTED}):
            return self._finish(AuthState.AUTHENTICATED, f"Authentication succeeded: {reply}", reply)

        return self._finish(AuthState.FAILED, f"Authentication failed: {reply}", reply)


def run_handshake(
    transport: LineTransport,
    username: Optional[str],
    password: Optional[str],
    timeout: float,
) -> AuthOutcome:
    return AuthHandshake(transport, username, password, timeout).run()
