"""
Error taxonomy for the oscillatord monitoring client.

Every failure of a single request/response exchange is terminal: nothing
here is retried or recovered locally. The CLI maps each class to an exit
code and a user-facing message.

    OscillatordClientError
    ├── ConfigError          bad flags or configuration file
    ├── UnknownCommand       request token not in the command catalog
    ├── TransportError       connect/send/receive failure
    └── DecodeError          reply cannot be turned into a StatusReport
        ├── MalformedJson    not JSON, or not an object at top level
        ├── MissingField     a present section lacks a mandatory field
        └── TypeMismatch     a field has the wrong JSON kind or range
"""

from typing import Optional


class OscillatordClientError(Exception):
    """Base class for all client errors."""


class ConfigError(OscillatordClientError):
    """Invalid configuration file or command-line override."""


class UnknownCommand(OscillatordClientError):
    """Request token does not match any entry of the command catalog."""

    def __init__(self, token: str):
        self.token = token
        super().__init__(f"Unknown request {token!r}")


class TransportError(OscillatordClientError):
    """Connection, send or receive failure on the monitoring socket."""

    def __init__(self, message: str, address: Optional[str] = None):
        self.address = address
        super().__init__(message)


class DecodeError(OscillatordClientError):
    """Reply bytes could not be decoded into a status report."""


class MalformedJson(DecodeError):
    """Reply is not valid JSON text or its top level is not an object."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Malformed JSON reply: {reason}")


class MissingField(DecodeError):
    """A section is present but one of its mandatory fields is absent."""

    def __init__(self, section: str, field: str):
        self.section = section
        self.field = field
        super().__init__(f"Section {section!r} is missing field {field!r}")

    def __eq__(self, other):
        if not isinstance(other, MissingField):
            return NotImplemented
        return (self.section, self.field) == (other.section, other.field)

    def __hash__(self):
        return hash((MissingField, self.section, self.field))


class TypeMismatch(DecodeError):
    """A field is present but holds the wrong JSON kind (or is out of range)."""

    def __init__(self, section: str, field: str, expected_kind: str):
        self.section = section
        self.field = field
        self.expected_kind = expected_kind
        super().__init__(
            f"Field {field!r} of section {section!r} is not a valid {expected_kind}"
        )

    def __eq__(self, other):
        if not isinstance(other, TypeMismatch):
            return NotImplemented
        return (self.section, self.field, self.expected_kind) == (
            other.section, other.field, other.expected_kind
        )

    def __hash__(self):
        return hash((TypeMismatch, self.section, self.field, self.expected_kind))
