"""
NNTP Command Operations
=======================

One executor drives every operation through the same pipeline:

    open -> greeting -> [AUTHINFO handshake] -> command(s) -> classify
         -> [multiline body] -> close

Each public operation only contributes a ``CommandPlan``: the command
lines to send, the status codes each one must answer with, an optional
fallback command and how to shape the body. Operations never raise; every
outcome is an ``OperationResult``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, FrozenSet, List, Optional, Tuple

from .auth import AuthState, run_handshake
from .errors import AuthFailure, FailureKind, NNTPClientError, ReadTimeout, UnexpectedStatus
from .listing import article_numbers
from .multiline import DEFAULT_LIMITS, BodyLimits, read_body
from .status import (
    ARTICLE_FOLLOWS,
    COMMAND_UNSUPPORTED,
    GREETING_CODES,
    GROUP_SELECTED,
    HEAD_FOLLOWS,
    LIST_FOLLOWS,
    classify,
)
from .transport import NNTP_PORT, LineTransport

logger = logging.getLogger(__name__)

# Per-operation defaults (seconds)
AUTH_TIMEOUT = 5.0
LIST_TIMEOUT = 7.0
GROUP_TIMEOUT = 8.0
ARTICLE_TIMEOUT = 10.0


# =============================================================================
# RESULT AND SESSION TYPES
# =============================================================================

@dataclass
class OperationResult:
    """Uniform outcome of every operation. ``kind`` is None on success."""
    success: bool
    message: str
    greeting: str = ""
    last_response: str = ""
    payload: Optional[List[str]] = None
    kind: Optional[FailureKind] = None

    @classmethod
    def ok(cls, message: str, greeting: str = "", last_response: str = "",
           payload: Optional[List[str]] = None) -> OperationResult:
        return cls(True, message, greeting, last_response, payload)

    @classmethod
    def failure(cls, kind: FailureKind, message: str, greeting: str = "",
                last_response: str = "") -> OperationResult:
        return cls(False, message, greeting, last_response, None, kind)


@dataclass(frozen=True)
class Session:
    """Parameters of one call. Never reused across calls."""
    host: str
    port: int = NNTP_PORT
    timeout: float = ARTICLE_TIMEOUT
    username: Optional[str] = None
    password: Optional[str] = field(default=None, repr=False)

    def validate(self) -> None:
        if not self.host or not self.host.strip():
            raise ValueError("Host must not be empty")
        if not isinstance(self.port, int) or not 0 < self.port < 65536:
            raise ValueError(f"Invalid port number: {self.port!r}")
        if self.timeout <= 0:
            raise ValueError(f"Timeout must be positive: {self.timeout!r}")


# =============================================================================
# COMMAND PLANS
# =============================================================================

@dataclass(frozen=True)
class CommandStep:
    """One command line and the replies that let the operation continue."""
    command: str
    expected: FrozenSet[str]
    multiline: bool = False
    fallback: Optional[CommandStep] = None
    fallback_on: FrozenSet[str] = frozenset()


@dataclass(frozen=True)
class CommandPlan:
    name: str
    steps: Tuple[CommandStep, ...] = ()
    shape: Callable[[List[str]], List[str]] = list
    summary: str = "{name} succeeded."


def command_argument(value: object, what: str) -> str:
    """Validate a single command token (group name or article id)."""
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{what} must not be empty")
    token = value.strip()
    if any(ch.isspace() for ch in token):
        raise ValueError(f"{what} must not contain whitespace: {token!r}")
    if not token.isascii():
        raise ValueError(f"{what} must be ASCII: {token!r}")
    return token


def _group_step(group: str) -> CommandStep:
    return CommandStep(f"GROUP {command_argument(group, 'Group name')}", frozenset({GROUP_SELECTED}))


AUTHENTICATE_PLAN = CommandPlan("AUTHENTICATE")

LIST_PLAN = CommandPlan(
    "LIST",
    steps=(
        CommandStep(
            "LIST",
            frozenset({LIST_FOLLOWS}),
            multiline=True,
            fallback=CommandStep("LIST ACTIVE", frozenset({LIST_FOLLOWS}), multiline=True),
            fallback_on=COMMAND_UNSUPPORTED,
        ),
    ),
    summary="Retrieved {count} newsgroups.",
)


def listgroup_plan(group: str) -> CommandPlan:
    name = command_argument(group, "Group name")
    return CommandPlan(
        "LISTGROUP",
        steps=(
            _group_step(name),
            CommandStep(f"LISTGROUP {name}", frozenset({GROUP_SELECTED, LIST_FOLLOWS}), multiline=True),
        ),
        shape=article_numbers,
        summary=f"Retrieved {{count}} article numbers from {name}.",
    )


def head_plan(article_id: str, group: Optional[str] = None) -> CommandPlan:
    article = command_argument(article_id, "Article id")
    steps = (_group_step(group),) if group else ()
    return CommandPlan(
        "HEAD",
        steps=steps + (CommandStep(f"HEAD {article}", frozenset({HEAD_FOLLOWS}), multiline=True),),
        summary=f"Retrieved {{count}} header lines for article {article}.",
    )


def article_plan(article_id: str, group: Optional[str] = None) -> CommandPlan:
    article = command_argument(article_id, "Article id")
    # Numeric ids only mean something inside a group selected on this connection
    steps = (_group_step(group),) if group else ()
    return CommandPlan(
        "ARTICLE",
        steps=steps + (CommandStep(f"ARTICLE {article}", frozenset({ARTICLE_FOLLOWS}), multiline=True),),
        summary=f"Retrieved article {article} ({{count}} lines).",
    )


# =============================================================================
# EXECUTOR
# =============================================================================

class _Exchange:
    """Request/response bookkeeping for one connection."""

    def __init__(self, transport: LineTransport, timeout: float, limits: Optional[BodyLimits]):
        self.transport = transport
        self.timeout = timeout
        self.limits = limits
        self.greeting = ""
        self.last_response = ""

    def read_greeting(self) -> None:
        try:
            line = self.transport.read_line(self.timeout)
        except ReadTimeout:
            logger.warning("[CONNECT] No greeting before timeout, continuing")
            return

        self.greeting = self.last_response = line
        if not classify(line, GREETING_CODES):
            logger.warning(f"[CONNECT] Unusual greeting: {line}")

    def reply(self, command: str) -> str:
        try:
            line = self.transport.read_line(self.timeout)
        except ReadTimeout as e:
            raise ReadTimeout(f"Read timed out waiting for {command} response.") from e
        self.last_response = line
        return line

    def run(self, step: CommandStep) -> Optional[List[str]]:
        logger.debug(f"[CMD] {step.command}")
        self.transport.write_line(step.command, self.timeout)
        line = self.reply(step.command)

        match = classify(line, step.expected)
        if not match:
            if step.fallback is not None and match.code in step.fallback_on:
                logger.info(f"[CMD] {step.command} rejected ({line}), retrying with {step.fallback.command}")
                return self.run(step.fallback)
            raise UnexpectedStatus(step.command, line, match.code)

        if not step.multiline:
            return None

        try:
            return read_body(self.transport, self.timeout, self.limits)
        except ReadTimeout as e:
            raise ReadTimeout(f"Read timed out during {step.command} response body.") from e


def execute(session: Session, plan: CommandPlan, limits: Optional[BodyLimits] = None) -> OperationResult:
    """Run ``plan`` on a fresh connection. Never raises."""
    transport: Optional[LineTransport] = None
    exchange: Optional[_Exchange] = None

    def fail(kind: FailureKind, message: str) -> OperationResult:
        logger.warning(f"[{plan.name}] {session.host}:{session.port} failed: {message}")
        if exchange is None:
            return OperationResult.failure(kind, message)
        return OperationResult.failure(kind, message, exchange.greeting, exchange.last_response)

    try:
        session.validate()
        transport = LineTransport.open(
            session.host, session.port, session.timeout,
            max_line_length=(limits or DEFAULT_LIMITS).max_line_length,
        )
        exchange = _Exchange(transport, session.timeout, limits)
        exchange.read_greeting()

        outcome = run_handshake(transport, session.username, session.password, session.timeout)
        if outcome.last_response:
            exchange.last_response = outcome.last_response
        if outcome.state is AuthState.TIMED_OUT:
            raise ReadTimeout(outcome.message)
        if not outcome.ok:
            raise AuthFailure(outcome.message, outcome.last_response)

        if not plan.steps:
            logger.info(f"[{plan.name}] {session.host}:{session.port}: {outcome.message}")
            return OperationResult.ok(outcome.message, exchange.greeting, exchange.last_response)

        body: List[str] = []
        for step in plan.steps:
            lines = exchange.run(step)
            if lines is not None:
                body = lines

        payload = plan.shape(body)
        message = plan.summary.format(name=plan.name, count=len(payload))
        logger.info(f"[{plan.name}] {session.host}:{session.port}: {message}")
        return OperationResult.ok(message, exchange.greeting, exchange.last_response, payload)

    except NNTPClientError as e:
        return fail(e.kind, str(e))
    except ValueError as e:
        return fail(FailureKind.INVALID_ARGUMENT, str(e))
    except Exception as e:
        logger.exception(f"[{plan.name}] Unexpected error")
        return fail(FailureKind.TRANSPORT_FAULT, f"Exception: {e}")
    finally:
        if transport is not None:
            transport.close()


def _run(session: Session, limits: Optional[BodyLimits], build: Callable[..., CommandPlan], *args) -> OperationResult:
    try:
        plan = build(*args)
    except ValueError as e:
        logger.warning(f"Invalid argument: {e}")
        return OperationResult.failure(FailureKind.INVALID_ARGUMENT, str(e))
    return execute(session, plan, limits)


# =============================================================================
# PUBLIC OPERATIONS
# =============================================================================

def authenticate(
    host: str,
    port: int,
    username: Optional[str],
    password: Optional[str],
    timeout: float = AUTH_TIMEOUT,
) -> OperationResult:
    """
    Connect and run the AUTHINFO handshake only.

    With no username this succeeds as soon as the connection is up.
    """
    return execute(Session(host, port, timeout, username, password), AUTHENTICATE_PLAN)


def list_groups(
    host: str,
    port: int,
    username: Optional[str] = None,
    password: Optional[str] = None,
    timeout: float = LIST_TIMEOUT,
    limits: Optional[BodyLimits] = None,
) -> OperationResult:
    """LIST (falling back to LIST ACTIVE); payload is the raw descriptor lines."""
    return execute(Session(host, port, timeout, username, password), LIST_PLAN, limits)


def list_articles_in_group(
    host: str,
    port: int,
    group: str,
    username: Optional[str] = None,
    password: Optional[str] = None,
    timeout: float = GROUP_TIMEOUT,
    limits: Optional[BodyLimits] = None,
) -> OperationResult:
    """GROUP then LISTGROUP; payload is the article numbers as strings."""
    return _run(Session(host, port, timeout, username, password), limits, listgroup_plan, group)


def get_headers(
    host: str,
    port: int,
    article_id: str,
    username: Optional[str] = None,
    password: Optional[str] = None,
    group: Optional[str] = None,
    timeout: float = ARTICLE_TIMEOUT,
    limits: Optional[BodyLimits] = None,
) -> OperationResult:
    """HEAD, preceded by GROUP when a group is given."""
    return _run(Session(host, port, timeout, username, password), limits, head_plan, article_id, group)


def get_article(
    host: str,
    port: int,
    article_id: str,
    username: Optional[str] = None,
    password: Optional[str] = None,
    group: Optional[str] = None,
    timeout: float = ARTICLE_TIMEOUT,
    limits: Optional[BodyLimits] = None,
) -> OperationResult:
    """
    ARTICLE, preceded by GROUP when a group is given.

    Payload is the full article: headers, blank separator, body.
    """
    return _run(Session(host, port, timeout, username, password), limits, article_plan, article_id, group)
