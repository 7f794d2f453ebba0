"""
Line Transport
==============

CRLF-framed line I/O over a single TCP connection.

Every blocking socket call runs under a socket deadline, so an expired
timeout aborts the pending connect/recv/send instead of leaving it
running in the background. Received bytes are buffered here rather than
through ``socket.makefile()``: a file object cannot be read again after a
timeout, while a greeting timeout must leave the connection usable.

A transport is owned by exactly one operation and is closed by it on
every exit path.
"""

from __future__ import annotations

import socket
import time
import logging
from typing import Optional

from .errors import ConnectFailure, ConnectTimeout, LineTooLong, ReadTimeout, TransportFault

logger = logging.getLogger(__name__)

NNTP_PORT = 119
WIRE_ENCODING = "ascii"

# RFC 3977 caps reply lines at 512 octets; article lines in the wild are
# longer, so the default ceiling is generous.
MAX_LINE_LENGTH = 64 * 1024

RECV_SIZE = 64 * 1024

_CRLF = b"\r\n"


class LineTransport:
    """Blocking, deadline-bounded line reader/writer around one socket."""

    def __init__(self, sock: socket.socket, max_line_length: int = MAX_LINE_LENGTH):
        self.socket: Optional[socket.socket] = sock
        self.max_line_length = max_line_length
        self._buffer = bytearray()
        self._closed = False

    @classmethod
    def open(
        cls,
        host: str,
        port: int,
        timeout: float,
        max_line_length: int = MAX_LINE_LENGTH,
    ) -> "LineTransport":
        """
        Dial ``host:port`` with a single connect deadline.

        Every resolved address is tried in turn against the same deadline.
        Name resolution itself cannot be interrupted; if it uses up the
        deadline the dial fails without connecting.

        Raises:
            ConnectTimeout: the dial did not complete within ``timeout``
            ConnectFailure: refused, unreachable, DNS failure, ...
        """
        logger.debug(f"[CONNECT] {host}:{port} (timeout {timeout:.1f}s)")
        deadline = time.monotonic() + timeout
        try:
            addresses = socket.getaddrinfo(host, port, 0, socket.SOCK_STREAM)
        except OSError as e:
            raise ConnectFailure(f"Failed to connect to {host}:{port}: {e}") from e

        sock = None
        last_error: Optional[OSError] = None
        for family, socktype, proto, _, address in addresses:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise ConnectTimeout(f"Connection to {host}:{port} timed out.")
            candidate = socket.socket(family, socktype, proto)
            try:
                candidate.settimeout(remaining)
                candidate.connect(address)
            except OSError as e:
                logger.debug(f"[CONNECT] {address} failed: {e}")
                candidate.close()
                last_error = e
                continue
            sock = candidate
            break

        if sock is None:
            if isinstance(last_error, socket.timeout):
                raise ConnectTimeout(f"Connection to {host}:{port} timed out.") from last_error
            if last_error is None:
                raise ConnectFailure(f"Failed to connect to {host}:{port}: no addresses")
            raise ConnectFailure(f"Failed to connect to {host}:{port}: {last_error}") from last_error

        # Request/response protocol: small writes must go out immediately
        try:
            sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
        except OSError:
            pass

        return cls(sock, max_line_length=max_line_length)

    @property
    def closed(self) -> bool:
        return self._closed

    def _take_line(self) -> Optional[bytes]:
        end = self._buffer.find(b"\n")
        if end < 0:
            # room for the content plus a CR whose LF has not arrived yet
            if len(self._buffer) > self.max_line_length + 1:
                raise LineTooLong(f"Line exceeds {self.max_line_length} bytes.")
            return None
        raw = bytes(self._buffer[:end + 1])
        del self._buffer[:end + 1]
        if len(raw) > self.max_line_length + 2:
            raise LineTooLong(f"Line exceeds {self.max_line_length} bytes.")
        return raw

    def read_line(self, timeout: float) -> str:
        """
        Read one reply line, without its line terminator.

        ``timeout`` bounds the whole line, not each recv call. On timeout
        the partial line stays buffered.

        Raises:
            ReadTimeout: no complete line before the deadline
            LineTooLong: line exceeded ``max_line_length``
            TransportFault: connection closed or I/O error
        """
        if self._closed:
            raise TransportFault("Connection is closed.")

        deadline = time.monotonic() + timeout
        raw = self._take_line()
        while raw is None:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise ReadTimeout(f"Read timed out after {timeout:.1f}s.")
            try:
                self.socket.settimeout(remaining)
                chunk = self.socket.recv(RECV_SIZE)
            except socket.timeout as e:
                raise ReadTimeout(f"Read timed out after {timeout:.1f}s.") from e
            except OSError as e:
                raise TransportFault(f"Read failed: {e}") from e
            if not chunk:
                raise TransportFault("Connection closed by server.")
            self._buffer += chunk
            raw = self._take_line()

        if raw.endswith(_CRLF):
            raw = raw[:-2]
        else:
            raw = raw[:-1]
        return raw.decode(WIRE_ENCODING, errors="replace")

    def write_line(self, text: str, timeout: float) -> None:
        """Send ``text`` followed by CRLF."""
        if self._closed:
            raise TransportFault("Connection is closed.")
        if "\r" in text or "\n" in text:
            raise ValueError("Command text must not contain line breaks")

        data = text.encode(WIRE_ENCODING) + _CRLF
        try:
            self.socket.settimeout(timeout)
            self.socket.sendall(data)
        except socket.timeout as e:
            raise TransportFault(f"Send timed out after {timeout:.1f}s.") from e
        except OSError as e:
            raise TransportFault(f"Send failed: {e}") from e

    def close(self) -> None:
        """Close the connection. Safe to call repeatedly."""
        if self._closed:
            return
        self._closed = True
        try:
            self.socket.close()
        except OSError as e:
            logger.debug(f"[CLOSE] socket close failed: {e}")
        self.socket = None
        self._buffer.clear()

    def __enter__(self) -> "LineTransport":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
