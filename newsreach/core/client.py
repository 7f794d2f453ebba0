"""Configured facade over the stateless operations."""

from __future__ import annotations

import logging
from typing import Optional

from ..utils.config import Config
from .multiline import BodyLimits
from .operations import (
    OperationResult,
    authenticate,
    get_article,
    get_headers,
    list_articles_in_group,
    list_groups,
)

logger = logging.getLogger(__name__)


class NewsClient:
    """
    Binds server, credentials, timeouts and limits from a ``Config``.

    Holds no connection: every method opens and closes its own, so one
    instance can be shared between threads.
    """

    def __init__(self, config: Config):
        self.config = config

    @property
    def limits(self) -> BodyLimits:
        return BodyLimits(
            max_lines=self.config.limits.max_body_lines,
            max_bytes=self.config.limits.max_body_bytes,
            max_line_length=self.config.limits.max_line_length,
        )

    @property
    def _server(self):
        return self.config.server

    def authenticate(self) -> OperationResult:
        s = self._server
        return authenticate(s.host, s.port, s.username, s.password, timeout=self.config.timeouts.auth)

    def list_groups(self) -> OperationResult:
        s = self._server
        return list_groups(
            s.host, s.port, s.username, s.password,
            timeout=self.config.timeouts.groups, limits=self.limits,
        )

    def list_articles(self, group: str) -> OperationResult:
        s = self._server
        return list_articles_in_group(
            s.host, s.port, group, s.username, s.password,
            timeout=self.config.timeouts.articles, limits=self.limits,
        )

    def get_headers(self, article_id: str, group: Optional[str] = None) -> OperationResult:
        s = self._server
        return get_headers(
            s.host, s.port, article_id, s.username, s.password, group=group,
            timeout=self.config.timeouts.article, limits=self.limits,
        )

    def get_article(self, article_id: str, group: Optional[str] = None) -> OperationResult:
        s = self._server
        return get_article(
            s.host, s.port, article_id, s.username, s.password, group=group,
            timeout=self.config.timeouts.article, limits=self.limits,
        )
