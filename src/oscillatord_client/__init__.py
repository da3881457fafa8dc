"""
oscillatord-client: oscillatord monitoring socket client

This package talks to the monitoring socket of oscillatord, the daemon
that disciplines a precision oscillator (mRO50, SA5x, ...) against a GNSS
receiver. One run sends a single JSON request and decodes the daemon's
status reply.

Architecture:
    CLI → command catalog → request codec → TCP socket → status decoder → renderer

The status reply is decoded into a StatusReport whose sections
(disciplining, oscillator, clock, GNSS, disciplining parameters) are each
independently optional.

Version: 1.0.0
"""

__version__ = "1.0.0"

from .errors import (
    OscillatordClientError,
    UnknownCommand,
    TransportError,
    DecodeError,
    MalformedJson,
    MissingField,
    TypeMismatch,
)
from .interfaces.status_report import (
    StatusReport,
    Disciplining,
    DiscStatus,
    Oscillator,
    Clock,
    Gnss,
    DiscipliningParameters,
    CalibrationParameters,
)
from .protocol.commands import CommandKind, resolve
from .protocol.request_codec import encode
from .protocol.status_decoder import decode

__all__ = [
    "CommandKind",
    "resolve",
    "encode",
    "decode",
    "StatusReport",
    "Disciplining",
    "DiscStatus",
    "Oscillator",
    "Clock",
    "Gnss",
    "DiscipliningParameters",
    "CalibrationParameters",
    "OscillatordClientError",
    "UnknownCommand",
    "TransportError",
    "DecodeError",
    "MalformedJson",
    "MissingField",
    "TypeMismatch",
    "__version__",
]
