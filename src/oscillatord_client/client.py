"""
One-shot monitoring client.

Performs exactly one exchange with oscillatord: encode the request,
connect, send, read the reply, decode it. The send strictly precedes the
receive and nothing is retried.
"""

import logging
from typing import Callable, Optional

from .interfaces.status_report import StatusReport
from .protocol.commands import CommandKind, DEFAULT_COMMAND
from .protocol.request_codec import encode
from .protocol.status_decoder import decode
from .transport.monitoring_socket import DEFAULT_BUFFER_SIZE, MonitoringSocket

logger = logging.getLogger(__name__)


class MonitoringClient:
    """
    Client for oscillatord's monitoring socket.

    Usage:
        client = MonitoringClient('localhost', 2970)
        report = client.query(CommandKind.GNSS_START)
    """

    def __init__(
        self,
        address: Optional[str],
        port: int,
        timeout: Optional[float] = None,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
        socket_factory: Callable[..., MonitoringSocket] = MonitoringSocket,
    ):
        self.address = address
        self.port = port
        self.timeout = timeout
        self.buffer_size = buffer_size
        self.socket_factory = socket_factory
        self.last_reply: Optional[bytes] = None

    def exchange(self, kind: CommandKind = DEFAULT_COMMAND) -> bytes:
        """Send one request and return the raw reply bytes."""
        request = encode(kind)
        logger.debug(f"Request: {request.decode()}")
        with self.socket_factory(self.address, self.port, timeout=self.timeout) as sock:
            sock.send(request)
            reply = sock.receive_document(self.buffer_size)
        self.last_reply = reply
        return reply

    def query(self, kind: CommandKind = DEFAULT_COMMAND) -> StatusReport:
        """
        Send one request and decode the status reply.

        Raises:
            TransportError: connect/send/receive failed
            DecodeError: the reply could not be decoded
        """
        return decode(self.exchange(kind))
