"""Status line classification."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

# Reply codes used by the engine
GREETING_POSTING_OK = "200"
GREETING_NO_POSTING = "201"
GROUP_SELECTED = "211"
LIST_FOLLOWS = "215"
ARTICLE_FOLLOWS = "220"
HEAD_FOLLOWS = "221"
AUTH_ACCEPTED = "281"
PASSWORD_REQUIRED = "381"
UNKNOWN_COMMAND = "500"
SYNTAX_ERROR = "501"
NOT_PERMITTED = "502"

GREETING_CODES = frozenset({GREETING_POSTING_OK, GREETING_NO_POSTING})
COMMAND_UNSUPPORTED = frozenset({UNKNOWN_COMMAND, SYNTAX_ERROR, NOT_PERMITTED})


@dataclass(frozen=True)
class StatusMatch:
    """Outcome of classifying one reply line."""
    matched: bool
    line: str
    code: Optional[str] = None

    def __bool__(self) -> bool:
        return self.matched


def status_code(line: str) -> Optional[str]:
    """First three characters of a non-empty reply line."""
    if not line:
        return None
    return line[:3]


def classify(line: str, expected: Iterable[str]) -> StatusMatch:
    code = status_code(line)
    if code is not None and code in frozenset(expected):
        return StatusMatch(True, line, code)
    return StatusMatch(False, line, code)
