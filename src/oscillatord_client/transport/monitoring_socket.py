"""
oscillatord Monitoring Socket

One-shot TCP connection to oscillatord's monitoring port. The client
connects, sends one request, reads one reply and closes.

Address resolution tries every candidate returned by getaddrinfo (IPv4
and IPv6) in order and keeps the first one that connects.

Usage:
    with MonitoringSocket('localhost', 2970, timeout=5.0) as sock:
        sock.send(request_bytes)
        reply = sock.receive_document(max_bytes=2048)
"""

import json
import logging
import socket
from typing import Optional

from ..errors import TransportError

logger = logging.getLogger(__name__)

DEFAULT_BUFFER_SIZE = 2048
RECV_CHUNK_SIZE = 1024


def _is_complete_json(data: bytes) -> bool:
    try:
        json.loads(data.decode('utf-8'))
    except (ValueError, RecursionError):
        return False
    return True


class MonitoringSocket:
    """
    Connected byte stream to the oscillatord monitoring socket.

    Every operation raises TransportError on failure; nothing is retried.
    """

    def __init__(
        self,
        address: Optional[str],
        port: int,
        timeout: Optional[float] = None
    ):
        """
        Args:
            address: Host name or IP address (None for the local host)
            port: TCP port of the monitoring socket
            timeout: Socket timeout in seconds (None or 0 to block forever)
        """
        self.address = address
        self.port = port
        self.timeout = timeout or None
        self.sock: Optional[socket.socket] = None

    @property
    def endpoint(self) -> str:
        return f"{self.address or 'localhost'}:{self.port}"

    def connect(self):
        """Connect to the first reachable address candidate."""
        try:
            candidates = socket.getaddrinfo(
                self.address, self.port,
                socket.AF_UNSPEC, socket.SOCK_STREAM, socket.IPPROTO_TCP
            )
        except socket.gaierror as e:
            raise TransportError(
                f"Unable to get an Internet address from '{self.endpoint}': {e}",
                address=self.endpoint
            ) from e

        for family, socktype, proto, _, sockaddr in candidates:
            ip_version = 4 if family == socket.AF_INET else 6
            try:
                sock = socket.socket(family, socktype, proto)
            except OSError as e:
                logger.warning(
                    f"Couldn't open a socket for '{self.endpoint}' (IPv{ip_version}): {e}"
                )
                continue
            sock.settimeout(self.timeout)
            try:
                sock.connect(sockaddr)
            except OSError as e:
                logger.warning(
                    f"Couldn't connect to '{self.endpoint}' (IPv{ip_version}): {e}"
                )
                sock.close()
                continue

            self.sock = sock
            logger.debug(f"Connected to {sockaddr[0]} port {sockaddr[1]}")
            return

        raise TransportError(f"Could not connect to {self.endpoint}", address=self.endpoint)

    def _require_connected(self) -> socket.socket:
        if self.sock is None:
            raise TransportError(f"Not connected to {self.endpoint}", address=self.endpoint)
        return self.sock

    def send(self, data: bytes):
        """Send the whole buffer."""
        sock = self._require_connected()
        try:
            sock.sendall(data)
        except OSError as e:
            raise TransportError(f"Error sending request: {e}", address=self.endpoint) from e

    def receive_once(self, max_bytes: int = DEFAULT_BUFFER_SIZE) -> bytes:
        """Single bounded read; may return a partial document."""
        sock = self._require_connected()
        try:
            return sock.recv(max_bytes)
        except OSError as e:
            raise TransportError(f"Error receiving response: {e}", address=self.endpoint) from e

    def receive_document(self, max_bytes: int = DEFAULT_BUFFER_SIZE) -> bytes:
        """
        Read until one complete JSON document, end of stream or max_bytes.

        The daemon may keep the connection open after replying, so a
        complete parse ends the read as well as EOF does. Whatever was read
        is returned; an incomplete document is left for the decoder to
        reject.
        """
        data = b''
        while len(data) < max_bytes:
            chunk = self.receive_once(min(RECV_CHUNK_SIZE, max_bytes - len(data)))
            if not chunk:
                break
            data += chunk
            if _is_complete_json(data):
                break
        else:
            logger.warning(f"Reply reached the {max_bytes} bytes receive limit")

        if not data:
            raise TransportError(
                f"Connection to {self.endpoint} closed without a reply",
                address=self.endpoint
            )
        return data

    def close(self):
        if self.sock is not None:
            self.sock.close()
            self.sock = None

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
