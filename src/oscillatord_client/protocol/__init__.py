"""
Monitoring protocol: command catalog, request encoding, reply decoding.
"""

from .commands import CommandKind, REQUEST_CODES, resolve
from .request_codec import Request, encode
from .status_decoder import decode

__all__ = [
    "CommandKind",
    "REQUEST_CODES",
    "Request",
    "resolve",
    "encode",
    "decode",
]
