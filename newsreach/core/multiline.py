"""Multiline response collection (dot-terminated, dot-stuffed bodies)."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, List, Optional

from .errors import BodyTooLarge
from .transport import MAX_LINE_LENGTH, LineTransport

logger = logging.getLogger(__name__)

TERMINATOR = "."


@dataclass(frozen=True)
class BodyLimits:
    """Upper bounds for a single multiline body."""
    max_lines: int = 1_000_000
    max_bytes: int = 64 * 1024 * 1024   # counted as received, CRLF included
    max_line_length: int = MAX_LINE_LENGTH


DEFAULT_LIMITS = BodyLimits()


def unstuff(line: str) -> str:
    """Undo transparency escaping on one content line."""
    if line.startswith(".."):
        return line[1:]
    return line


def iter_body(
    transport: LineTransport,
    timeout: float,
    limits: Optional[BodyLimits] = None,
) -> Iterator[str]:
    """
    Yield content lines until the lone "." terminator.

    The generator is lazy and single-use. A read timeout or transport fault
    propagates out of it; lines already yielded must then be discarded by
    the caller.

    Raises:
        ReadTimeout: a line did not arrive in time
        BodyTooLarge: ``limits`` exceeded
    """
    limits = limits or DEFAULT_LIMITS
    count = 0
    size = 0

    while True:
        line = transport.read_line(timeout)
        if line == TERMINATOR:
            logger.debug(f"[BODY] complete: {count} lines, {size} bytes")
            return

        count += 1
        size += len(line) + 2
        if count > limits.max_lines:
            raise BodyTooLarge(f"Response body exceeds {limits.max_lines} lines.")
        if size > limits.max_bytes:
            raise BodyTooLarge(f"Response body exceeds {limits.max_bytes} bytes.")

        yield unstuff(line)


def read_body(
    transport: LineTransport,
    timeout: float,
    limits: Optional[BodyLimits] = None,
) -> List[str]:
    """Collect a whole multiline body."""
    return list(iter_body(transport, timeout, limits))
