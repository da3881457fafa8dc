"""
Request encoding for the oscillatord monitoring socket.

A request is a single JSON object carrying the numeric command code:

    {"request": 7}
"""

import json
from dataclasses import dataclass

from .commands import CommandKind, DEFAULT_COMMAND, request_code


@dataclass(frozen=True)
class Request:
    """One monitoring request, consumed by a single send."""
    request: CommandKind = DEFAULT_COMMAND

    def to_dict(self) -> dict:
        # A kind missing from REQUEST_CODES is a programming error
        return {"request": request_code(self.request)}

    def to_bytes(self) -> bytes:
        return json.dumps(self.to_dict()).encode('utf-8')


def encode(kind: CommandKind) -> bytes:
    """Serialize a command kind to the UTF-8 JSON wire request."""
    return Request(kind).to_bytes()
