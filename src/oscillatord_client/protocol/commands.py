"""
Monitoring Command Catalog

Maps the request tokens accepted on the command line to the numeric
request codes understood by oscillatord's monitoring socket.

The code values are a wire contract with the daemon (its
``enum monitoring_request``). They are spelled out in REQUEST_CODES
instead of being derived from declaration order, so adding a CommandKind
can never silently renumber an existing one.
"""

from enum import Enum
from typing import Dict

from ..errors import UnknownCommand


class CommandKind(str, Enum):
    """Action oscillatord should perform before replying with its status."""
    NONE = "none"
    CALIBRATION = "calibration"
    GNSS_START = "gnss_start"
    GNSS_STOP = "gnss_stop"
    GNSS_SOFT = "gnss_soft"
    GNSS_HARD = "gnss_hard"
    GNSS_COLD = "gnss_cold"
    READ_EEPROM = "read_eeprom"
    SAVE_EEPROM = "save_eeprom"
    FAKE_HOLDOVER_START = "fake_holdover_start"
    FAKE_HOLDOVER_STOP = "fake_holdover_stop"
    MRO_COARSE_INC = "mro_coarse_inc"
    MRO_COARSE_DEC = "mro_coarse_dec"


# Wire codes, must match oscillatord's enum monitoring_request
REQUEST_CODES: Dict[CommandKind, int] = {
    CommandKind.NONE: 0,
    CommandKind.CALIBRATION: 1,
    CommandKind.GNSS_START: 2,
    CommandKind.GNSS_STOP: 3,
    CommandKind.GNSS_SOFT: 4,
    CommandKind.GNSS_HARD: 5,
    CommandKind.GNSS_COLD: 6,
    CommandKind.READ_EEPROM: 7,
    CommandKind.SAVE_EEPROM: 8,
    CommandKind.FAKE_HOLDOVER_START: 9,
    CommandKind.FAKE_HOLDOVER_STOP: 10,
    CommandKind.MRO_COARSE_INC: 11,
    CommandKind.MRO_COARSE_DEC: 12,
}

# Tokens accepted by resolve(); "none" is the default, not a selectable token
COMMAND_TOKENS: Dict[str, CommandKind] = {
    kind.value: kind for kind in CommandKind if kind is not CommandKind.NONE
}

COMMAND_DESCRIPTIONS: Dict[CommandKind, str] = {
    CommandKind.CALIBRATION: "request a calibration of the algorithm",
    CommandKind.GNSS_START: "start gnss receiver",
    CommandKind.GNSS_STOP: "stop gnss receiver",
    CommandKind.GNSS_SOFT: "soft reset of the gnss receiver",
    CommandKind.GNSS_HARD: "hard reset of the gnss receiver",
    CommandKind.GNSS_COLD: "cold start of the gnss receiver",
    CommandKind.READ_EEPROM: "read disciplining data from EEPROM",
    CommandKind.SAVE_EEPROM: "save minipod's disciplining data in EEPROM",
    CommandKind.FAKE_HOLDOVER_START: "start fake holdover",
    CommandKind.FAKE_HOLDOVER_STOP: "stop fake holdover",
    CommandKind.MRO_COARSE_INC: "increment the MRO coarse control value",
    CommandKind.MRO_COARSE_DEC: "decrement the MRO coarse control value",
}

DEFAULT_COMMAND = CommandKind.NONE


def resolve(token: str) -> CommandKind:
    """
    Resolve a command-line request token to its CommandKind.

    Matching is exact and case-sensitive.

    Raises:
        UnknownCommand: if the token is not in the catalog
    """
    try:
        return COMMAND_TOKENS[token]
    except (KeyError, TypeError):
        raise UnknownCommand(token) from None


def request_code(kind: CommandKind) -> int:
    """Wire code for a command kind."""
    return REQUEST_CODES[kind]


def describe_commands() -> str:
    """Help text listing every accepted request token."""
    width = max(len(token) for token in COMMAND_TOKENS)
    return '\n'.join(
        f"  {token:<{width}}  {COMMAND_DESCRIPTIONS[kind]}"
        for token, kind in COMMAND_TOKENS.items()
    )
