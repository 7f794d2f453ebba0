from __future__ import annotations

import socket
from typing import Dict, Optional

import pytest

from tests.fake_server import FakeNNTPServer, Reply


@pytest.fixture
def nntp_server():
    servers = []

    def factory(greeting: Optional[str] = "200 fake news server ready",
                responses: Optional[Dict[str, Reply]] = None) -> FakeNNTPServer:
        server = FakeNNTPServer(greeting, responses)
        servers.append(server)
        return server

    yield factory
    for server in servers:
        server.stop()


@pytest.fixture
def socket_pair():
    """(client_socket, server_socket) connected back to back."""
    client, server = socket.socketpair()
    yield client, server
    client.close()
    server.close()


@pytest.fixture
def closed_port():
    """A localhost port with nothing listening on it."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    return port


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Keep config and log files out of the real home directory."""
    from newsreach.utils import config

    monkeypatch.setattr(config, "CONFIG_DIR", tmp_path / ".newsreach")
    monkeypatch.setattr(config, "CONFIG_FILE", tmp_path / ".newsreach" / "config.json")
    monkeypatch.setattr(config, "LOG_DIR", tmp_path / ".newsreach" / "logs")
    for var in ("NEWSREACH_HOST", "NEWSREACH_PORT", "NEWSREACH_USER", "NEWSREACH_PASS", "NEWSREACH_TIMEOUT"):
        monkeypatch.delenv(var, raising=False)
