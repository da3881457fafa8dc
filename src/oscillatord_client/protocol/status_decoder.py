"""
Status reply decoding.

Turns the raw bytes of one oscillatord monitoring reply into a
StatusReport. The reply is a JSON object with any subset of these keys:

    disciplining, oscillator, clock, gnss,
    disciplining_parameters, "Action requested"

A missing key means the subsystem was not reported. A present section,
on the other hand, must carry every one of its fields with the right JSON
kind: missing or mistyped fields fail the whole decode instead of being
read as zero/null. A truncated or corrupted reply cannot be trusted, so
no partial report is ever returned.

Decoding is a pure function of the input bytes.
"""

import json
from typing import Any, Callable, Dict, List, Tuple

from ..errors import MalformedJson, MissingField, TypeMismatch
from ..interfaces.status_report import (
    CalibrationParameters,
    Clock,
    DiscStatus,
    Disciplining,
    DiscipliningParameters,
    Gnss,
    Oscillator,
    StatusReport,
)

# Top-level section keys, as sent by the daemon
DISCIPLINING_KEY = 'disciplining'
OSCILLATOR_KEY = 'oscillator'
CLOCK_KEY = 'clock'
GNSS_KEY = 'gnss'
DISCIPLINING_PARAMETERS_KEY = 'disciplining_parameters'
ACTION_KEY = 'Action requested'

CALIBRATION_PARAMETERS_KEY = 'calibration_parameters'
TEMPERATURE_TABLE_KEY = 'temperature_table'

INT32_MIN = -2 ** 31
INT32_MAX = 2 ** 31 - 1
UINT32_MAX = 2 ** 32 - 1

_TRUE_STRINGS = ('true',)
_FALSE_STRINGS = ('false',)


# Field converters. Each returns the converted value or raises ValueError,
# which the caller turns into a TypeMismatch naming the expected kind.

def _as_string(value: Any) -> str:
    if not isinstance(value, str):
        raise ValueError
    return value


def _as_int(value: Any, low: int, high: int) -> int:
    # bool is an int subclass in Python but a distinct JSON kind
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError
    if not low <= value <= high:
        raise ValueError
    return value


def _as_int32(value: Any) -> int:
    return _as_int(value, INT32_MIN, INT32_MAX)


def _as_uint32(value: Any) -> int:
    return _as_int(value, 0, UINT32_MAX)


def _as_float(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError
    return float(value)


def _as_bool(value: Any) -> bool:
    """JSON booleans, or the "true"/"false" strings some replies carry."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    raise ValueError


def _as_disc_status(value: Any):
    return DiscStatus.parse(_as_string(value))


Converter = Callable[[Any], Any]

KINDS: Dict[Converter, str] = {
    _as_string: 'string',
    _as_int32: 'int32',
    _as_uint32: 'uint32',
    _as_float: 'float',
    _as_bool: 'bool',
    _as_disc_status: 'string',
}

# (attribute name, wire key, converter) per section, in wire order
FieldTable = List[Tuple[str, str, Converter]]

DISCIPLINING_FIELDS: FieldTable = [
    ('status', 'status', _as_disc_status),
    ('tracking_only', 'tracking_only', _as_bool),
    ('current_phase_convergence_count', 'current_phase_convergence_count', _as_int32),
    ('valid_phase_convergence_threshold', 'valid_phase_convergence_threshold', _as_int32),
    ('convergence_progress_percent', 'convergence_progress', _as_float),
    ('ready_for_holdover', 'ready_for_holdover', _as_bool),
]

OSCILLATOR_FIELDS: FieldTable = [
    ('model', 'model', _as_string),
    ('fine_ctrl', 'fine_ctrl', _as_uint32),
    ('coarse_ctrl', 'coarse_ctrl', _as_uint32),
    ('lock', 'lock', _as_bool),
    ('temperature_celsius', 'temperature', _as_float),
]

CLOCK_FIELDS: FieldTable = [
    ('clock_class', 'class', _as_string),
    ('offset_ns', 'offset', _as_int32),
]

GNSS_FIELDS: FieldTable = [
    ('fix', 'fix', _as_int32),
    ('fix_ok', 'fixOk', _as_bool),
    ('antenna_status', 'antenna_status', _as_int32),
    ('antenna_power', 'antenna_power', _as_int32),
    ('survey_in_position_error_meters', 'survey_in_position_error', _as_float),
    ('leap_second_change_pending', 'lsChange', _as_int32),
    ('leap_seconds', 'leap_seconds', _as_int32),
]

CALIBRATION_FIELDS: FieldTable = [
    ('ctrl_nodes_length', 'ctrl_nodes_length', _as_int32),
    ('ctrl_load_nodes', 'ctrl_load_nodes', _as_string),
    ('ctrl_drift_coeffs', 'ctrl_drift_coeffs', _as_string),
    ('coarse_equilibrium', 'coarse_equilibrium', _as_int32),
    ('calibration_date_epoch', 'calibration_date', _as_int32),
    ('calibration_valid', 'calibration_valid', _as_bool),
    ('ctrl_nodes_length_factory', 'ctrl_nodes_length_factory', _as_int32),
    ('ctrl_load_nodes_factory', 'ctrl_load_nodes_factory', _as_string),
    ('ctrl_drift_coeffs_factory', 'ctrl_drift_coeffs_factory', _as_string),
    ('coarse_equilibrium_factory', 'coarse_equilibrium_factory', _as_int32),
    ('estimated_equilibrium_es', 'estimated_equilibrium_ES', _as_int32),
]

CALIBRATION_SECTION = f'{DISCIPLINING_PARAMETERS_KEY}.{CALIBRATION_PARAMETERS_KEY}'


def _reject_constant(name: str):
    # NaN and Infinity are accepted by the json module but are not JSON
    raise ValueError(f"non-standard constant {name}")


def _parse_json(data: bytes) -> Dict[str, Any]:
    try:
        text = data.decode('utf-8')
    except UnicodeDecodeError as e:
        raise MalformedJson(f"not UTF-8 text ({e.reason})") from None
    try:
        tree = json.loads(text, parse_constant=_reject_constant)
    except json.JSONDecodeError as e:
        raise MalformedJson(f"{e.msg} at line {e.lineno} column {e.colno}") from None
    except ValueError as e:
        raise MalformedJson(str(e)) from None
    except RecursionError:
        raise MalformedJson("nesting too deep") from None
    if not isinstance(tree, dict):
        raise MalformedJson(f"top level is {type(tree).__name__}, expected object")
    return tree


def _section_object(value: Any, section: str, parent: str = '') -> Dict[str, Any]:
    """A present section must itself be a JSON object."""
    if not isinstance(value, dict):
        if parent:
            raise TypeMismatch(parent, section.rsplit('.', 1)[-1], 'object')
        raise TypeMismatch('', section, 'object')
    return value


def _project(obj: Dict[str, Any], section: str, fields: FieldTable) -> Dict[str, Any]:
    """Look up and convert every mandatory field of a section."""
    values = {}
    for attr, key, convert in fields:
        if key not in obj:
            raise MissingField(section, key)
        try:
            values[attr] = convert(obj[key])
        except ValueError:
            raise TypeMismatch(section, key, KINDS[convert]) from None
    return values


def _decode_temperature_table(obj: Dict[str, Any]) -> Dict[str, str]:
    # Mean values are kept as text; non-string values keep their JSON spelling
    return {
        label: value if isinstance(value, str) else json.dumps(value)
        for label, value in obj.items()
    }


def _decode_disciplining_parameters(obj: Dict[str, Any]) -> DiscipliningParameters:
    calibration = None
    temperature_table = None

    if CALIBRATION_PARAMETERS_KEY in obj:
        cal_obj = _section_object(
            obj[CALIBRATION_PARAMETERS_KEY], CALIBRATION_SECTION,
            parent=DISCIPLINING_PARAMETERS_KEY,
        )
        calibration = CalibrationParameters(
            **_project(cal_obj, CALIBRATION_SECTION, CALIBRATION_FIELDS)
        )

    if TEMPERATURE_TABLE_KEY in obj:
        table_obj = _section_object(
            obj[TEMPERATURE_TABLE_KEY],
            f'{DISCIPLINING_PARAMETERS_KEY}.{TEMPERATURE_TABLE_KEY}',
            parent=DISCIPLINING_PARAMETERS_KEY,
        )
        temperature_table = _decode_temperature_table(table_obj)

    return DiscipliningParameters(
        calibration=calibration,
        temperature_table=temperature_table,
    )


# Flat sections: top-level key -> (record type, field table)
FLAT_SECTIONS = {
    DISCIPLINING_KEY: (Disciplining, DISCIPLINING_FIELDS),
    OSCILLATOR_KEY: (Oscillator, OSCILLATOR_FIELDS),
    CLOCK_KEY: (Clock, CLOCK_FIELDS),
    GNSS_KEY: (Gnss, GNSS_FIELDS),
}


def decode(data: bytes) -> StatusReport:
    """
    Decode one monitoring reply.

    Args:
        data: Raw reply bytes (UTF-8 JSON text)

    Returns:
        StatusReport holding exactly the sections present in the reply

    Raises:
        MalformedJson: invalid UTF-8/JSON, or top level not an object
        MissingField: a present section lacks one of its fields
        TypeMismatch: a field (or section) has the wrong JSON kind
    """
    tree = _parse_json(data)
    sections: Dict[str, Any] = {}

    for key, (record_type, fields) in FLAT_SECTIONS.items():
        if key in tree:
            obj = _section_object(tree[key], key)
            sections[key] = record_type(**_project(obj, key, fields))

    if DISCIPLINING_PARAMETERS_KEY in tree:
        obj = _section_object(tree[DISCIPLINING_PARAMETERS_KEY], DISCIPLINING_PARAMETERS_KEY)
        sections['disciplining_parameters'] = _decode_disciplining_parameters(obj)

    if ACTION_KEY in tree:
        action = tree[ACTION_KEY]
        if not isinstance(action, str):
            raise TypeMismatch('', ACTION_KEY, 'string')
        sections['action_acknowledged'] = action

    return StatusReport(**sections)
