"""Helpers for turning response bodies into display-ready values."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List


@dataclass(slots=True)
class GroupInfo:
    """One LIST ACTIVE descriptor: ``<group> <high> <low> <status>``."""
    name: str
    high: str = ""
    low: str = ""
    flags: str = ""
    raw: str = ""

    @property
    def posting_allowed(self) -> bool:
        return self.flags == "y"


def parse_group_line(line: str) -> GroupInfo:
    """Split a descriptor on spaces/tabs; malformed lines keep the raw text as name."""
    parts = line.split()
    if not parts:
        return GroupInfo(name=line, raw=line)
    name, *rest = parts
    rest += [""] * (3 - len(rest))
    return GroupInfo(name=name, high=rest[0], low=rest[1], flags=rest[2], raw=line)


def group_names(lines: Iterable[str]) -> List[str]:
    return [parse_group_line(line).name for line in lines]


def article_numbers(lines: Iterable[str]) -> List[str]:
    """LISTGROUP body -> article numbers, trimmed, blank lines dropped."""
    return [line.strip() for line in lines if line.strip()]


def newest_first(numbers: List[str], limit: int = 200) -> List[str]:
    """
    Keep the ``limit`` highest-positioned numbers and reverse them.

    LISTGROUP returns ascending numbers, so this shows newest first.
    """
    if limit <= 0:
        return []
    return list(reversed(numbers[-limit:]))
