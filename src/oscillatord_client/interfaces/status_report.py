"""
Status Report Data Models

These dataclasses describe one status reply of oscillatord's monitoring
socket. Every section is independently optional: a section that is None
was simply not reported by the daemon. Within a present section every
field is populated.

Reports are immutable and built fresh for each request.
"""

import re
from dataclasses import dataclass, asdict, is_dataclass
from enum import Enum
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Union

import numpy as np


class DiscStatus(str, Enum):
    """Disciplining algorithm state as reported by oscillatord."""
    INIT = "INIT"
    TRACKING = "TRACKING"
    HOLDOVER = "HOLDOVER"
    CALIBRATION = "CALIBRATION"
    LOCK_LOW_RESOLUTION = "LOCK_LOW_RESOLUTION"
    LOCK_HIGH_RESOLUTION = "LOCK_HIGH_RESOLUTION"

    @classmethod
    def parse(cls, value: str) -> Union["DiscStatus", str]:
        """Known states become DiscStatus, anything else stays a plain string."""
        try:
            return cls(value)
        except ValueError:
            return value


# States for which the convergence counters are meaningful
CONVERGING_STATES = (
    DiscStatus.TRACKING,
    DiscStatus.LOCK_LOW_RESOLUTION,
    DiscStatus.LOCK_HIGH_RESOLUTION,
)

_NUMBER_SEPARATORS = re.compile(r'[\s,;]+')


def parse_number_list(text: str) -> np.ndarray:
    """
    Parse a serialized number list such as "[0.25, 0.5, 0.75]".

    Brackets are optional; commas, semicolons and whitespace all separate
    values. An empty list gives an empty array.

    Raises:
        ValueError: if an element is not a number
    """
    body = text.strip().strip('[]()')
    tokens = [t for t in _NUMBER_SEPARATORS.split(body) if t]
    return np.array([float(t) for t in tokens], dtype=np.float64)


@dataclass(frozen=True)
class Disciplining:
    """State of the disciplining algorithm."""
    status: Union[DiscStatus, str]
    tracking_only: bool
    current_phase_convergence_count: int
    valid_phase_convergence_threshold: int
    convergence_progress_percent: float
    ready_for_holdover: bool

    @property
    def is_converging(self) -> bool:
        """True when the convergence counters describe the current state."""
        return self.status in CONVERGING_STATES


@dataclass(frozen=True)
class Oscillator:
    """Disciplined oscillator state."""
    model: str
    fine_ctrl: int
    coarse_ctrl: int
    lock: bool
    temperature_celsius: float


@dataclass(frozen=True)
class Clock:
    """PHC / system clock state."""
    clock_class: str
    offset_ns: int


@dataclass(frozen=True)
class Gnss:
    """GNSS receiver state."""
    fix: int
    fix_ok: bool
    antenna_status: int
    antenna_power: int
    survey_in_position_error_meters: float
    leap_second_change_pending: int
    leap_seconds: int


@dataclass(frozen=True)
class CalibrationParameters:
    """
    Calibration data stored in the oscillator EEPROM.

    The node and coefficient lists are kept as the daemon serialized them;
    the *_array() helpers parse them for numeric use.
    """
    ctrl_nodes_length: int
    ctrl_load_nodes: str
    ctrl_drift_coeffs: str
    coarse_equilibrium: int
    calibration_date_epoch: int
    calibration_valid: bool
    ctrl_nodes_length_factory: int
    ctrl_load_nodes_factory: str
    ctrl_drift_coeffs_factory: str
    coarse_equilibrium_factory: int
    estimated_equilibrium_es: int

    def ctrl_load_nodes_array(self) -> np.ndarray:
        return parse_number_list(self.ctrl_load_nodes)

    def ctrl_drift_coeffs_array(self) -> np.ndarray:
        return parse_number_list(self.ctrl_drift_coeffs)

    def ctrl_load_nodes_factory_array(self) -> np.ndarray:
        return parse_number_list(self.ctrl_load_nodes_factory)

    def ctrl_drift_coeffs_factory_array(self) -> np.ndarray:
        return parse_number_list(self.ctrl_drift_coeffs_factory)


@dataclass(frozen=True)
class DiscipliningParameters:
    """Disciplining parameters: calibration data and temperature table."""
    calibration: Optional[CalibrationParameters] = None
    # temperature range label -> mean value text, verbatim from the reply
    temperature_table: Optional[Mapping[str, str]] = None

    def __post_init__(self):
        if self.temperature_table is not None:
            object.__setattr__(
                self, 'temperature_table', MappingProxyType(dict(self.temperature_table))
            )

    def temperature_means(self) -> Dict[str, float]:
        """
        Temperature table with mean values parsed as floats.

        Entries whose text is not numeric map to NaN.
        """
        means = {}
        for label, text in (self.temperature_table or {}).items():
            try:
                means[label] = float(text)
            except ValueError:
                means[label] = np.nan
        return means

    def to_dict(self) -> dict:
        return {
            'calibration': asdict(self.calibration) if self.calibration else None,
            'temperature_table': (
                dict(self.temperature_table) if self.temperature_table is not None else None
            ),
        }


@dataclass(frozen=True)
class StatusReport:
    """
    Decoded status reply.

    Only the sections present in the reply are set; the rest are None.
    """
    disciplining: Optional[Disciplining] = None
    oscillator: Optional[Oscillator] = None
    clock: Optional[Clock] = None
    gnss: Optional[Gnss] = None
    disciplining_parameters: Optional[DiscipliningParameters] = None
    action_acknowledged: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return all(getattr(self, name) is None for name in self.__dataclass_fields__)

    def to_dict(self) -> dict:
        """Present sections as plain JSON-compatible values."""
        result = {}
        for name in self.__dataclass_fields__:
            section = getattr(self, name)
            if section is None:
                continue
            if isinstance(section, DiscipliningParameters):
                result[name] = section.to_dict()
            elif is_dataclass(section):
                result[name] = asdict(section)
            else:
                result[name] = section
        if self.disciplining is not None:
            result['disciplining']['status'] = str(
                getattr(self.disciplining.status, 'value', self.disciplining.status)
            )
        return result
