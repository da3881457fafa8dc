"""
Human-readable rendering of a StatusReport.

Produces one line per reported value, grouped by section, in the layout
the monitoring client has always printed:

    Disciplining detected
        - Current status: TRACKING
        - tracking convergence progress: 42.50 % (3/10)
    Oscillator detected
        - model: mRO50
    ...

The renderer only formats; the caller decides where lines go.
"""

import logging
from typing import List

from ..interfaces.status_report import (
    CalibrationParameters,
    Clock,
    DiscStatus,
    Disciplining,
    DiscipliningParameters,
    Gnss,
    Oscillator,
    StatusReport,
    parse_number_list,
)

logger = logging.getLogger(__name__)

CONVERGENCE_LABELS = {
    DiscStatus.TRACKING: "tracking",
    DiscStatus.LOCK_LOW_RESOLUTION: "lock low resolution",
    DiscStatus.LOCK_HIGH_RESOLUTION: "lock high resolution",
}


def _flag(value: bool) -> str:
    return "True" if value else "False"


def _flag_lower(value: bool) -> str:
    return "true" if value else "false"


class ReportRenderer:
    """Formats status reports as indented text lines."""

    def __init__(self, indent: str = '\t'):
        self.indent = indent

    def _item(self, depth: int, text: str) -> str:
        return f"{self.indent * depth}- {text}"

    def render(self, report: StatusReport) -> List[str]:
        """Render every present section, in reply order."""
        lines: List[str] = []
        if report.disciplining is not None:
            lines.extend(self.render_disciplining(report.disciplining))
        if report.oscillator is not None:
            lines.extend(self.render_oscillator(report.oscillator))
        if report.clock is not None:
            lines.extend(self.render_clock(report.clock))
        if report.gnss is not None:
            lines.extend(self.render_gnss(report.gnss))
        if report.disciplining_parameters is not None:
            lines.extend(self.render_disciplining_parameters(report.disciplining_parameters))
        if report.action_acknowledged is not None:
            lines.append(f"Action requested: {report.action_acknowledged}")
        return lines

    def render_disciplining(self, disc: Disciplining) -> List[str]:
        status = getattr(disc.status, 'value', disc.status)
        lines = [
            "Disciplining detected",
            self._item(1, f"Current status: {status}"),
            self._item(1, f"tracking_only: {_flag_lower(disc.tracking_only)}"),
            self._item(1, f"ready_for_holdover: {_flag_lower(disc.ready_for_holdover)}"),
        ]
        if disc.is_converging:
            lines.append(self._item(
                1,
                f"{CONVERGENCE_LABELS[disc.status]} convergence progress: "
                f"{disc.convergence_progress_percent:0.2f} % "
                f"({disc.current_phase_convergence_count}/{disc.valid_phase_convergence_threshold})"
            ))
        return lines

    def render_oscillator(self, osc: Oscillator) -> List[str]:
        return [
            "Oscillator detected",
            self._item(1, f"model: {osc.model}"),
            self._item(1, f"fine_ctrl: {osc.fine_ctrl}"),
            self._item(1, f"coarse_ctrl: {osc.coarse_ctrl}"),
            self._item(1, f"lock: {_flag(osc.lock)}"),
            self._item(1, f"temperature: {osc.temperature_celsius:f}"),
        ]

    def render_clock(self, clock: Clock) -> List[str]:
        return [
            "Clock detected",
            self._item(1, f"class: {clock.clock_class}"),
            self._item(1, f"offset: {clock.offset_ns}"),
        ]

    def render_gnss(self, gnss: Gnss) -> List[str]:
        return [
            "GNSS detected",
            self._item(1, f"fix: {gnss.fix}"),
            self._item(1, f"fixOk: {_flag(gnss.fix_ok)}"),
            self._item(1, f"antenna_status: {gnss.antenna_status}"),
            self._item(1, f"antenna_power: {gnss.antenna_power}"),
            self._item(1, f"survey_in_position_error: {gnss.survey_in_position_error_meters:0.2f} m"),
            self._item(1, f"lsChange: {gnss.leap_second_change_pending}"),
            self._item(1, f"leap_seconds: {gnss.leap_seconds}"),
        ]

    def render_calibration(self, cal: CalibrationParameters) -> List[str]:
        self._check_node_counts(cal)
        return [
            self._item(1, "Calibration parameters"),
            self._item(2, f"ctrl_nodes_length: {cal.ctrl_nodes_length}"),
            self._item(2, f"ctrl_load_nodes: {cal.ctrl_load_nodes}"),
            self._item(2, f"ctrl_drift_coeffs: {cal.ctrl_drift_coeffs}"),
            self._item(2, f"coarse_equilibrium: {cal.coarse_equilibrium}"),
            self._item(2, f"calibration_date: {cal.calibration_date_epoch}"),
            self._item(2, f"calibration_valid: {_flag_lower(cal.calibration_valid)}"),
            self._item(2, f"ctrl_nodes_length_factory: {cal.ctrl_nodes_length_factory}"),
            self._item(2, f"ctrl_load_nodes_factory: {cal.ctrl_load_nodes_factory}"),
            self._item(2, f"ctrl_drift_coeffs_factory: {cal.ctrl_drift_coeffs_factory}"),
            self._item(2, f"coarse_equilibrium_factory: {cal.coarse_equilibrium_factory}"),
            self._item(2, f"estimated_equilibrium_ES: {cal.estimated_equilibrium_es}"),
        ]

    def render_disciplining_parameters(self, params: DiscipliningParameters) -> List[str]:
        lines = ["Disciplining parameters detected"]
        if params.calibration is not None:
            lines.extend(self.render_calibration(params.calibration))
        if params.temperature_table is not None:
            lines.append(self._item(1, "Temperature table"))
            for temperature_range, mean_value in params.temperature_table.items():
                lines.append(self._item(2, f"{temperature_range}: {mean_value}"))
        return lines

    def _check_node_counts(self, cal: CalibrationParameters):
        """Warn when a serialized node list disagrees with its declared length."""
        pairs = (
            ('ctrl_load_nodes', cal.ctrl_load_nodes, cal.ctrl_nodes_length),
            ('ctrl_load_nodes_factory', cal.ctrl_load_nodes_factory, cal.ctrl_nodes_length_factory),
        )
        for name, text, expected in pairs:
            try:
                count = len(parse_number_list(text))
            except ValueError:
                logger.warning(f"{name} is not a number list: {text!r}")
                continue
            if count != expected:
                logger.warning(f"{name} holds {count} values, expected {expected}")
