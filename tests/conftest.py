"""
Pytest configuration and fixtures for oscillatord-client tests.
"""

import copy
import json

import pytest
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))


SAMPLE_REPLY = {
    'disciplining': {
        'status': 'TRACKING',
        'tracking_only': False,
        'current_phase_convergence_count': 3,
        'valid_phase_convergence_threshold': 10,
        'convergence_progress': 42.5,
        'ready_for_holdover': False,
    },
    'oscillator': {
        'model': 'mRO50',
        'fine_ctrl': 2048,
        'coarse_ctrl': 4000000,
        'lock': True,
        'temperature': 45.25,
    },
    'clock': {
        'class': 'Lock',
        'offset': -12,
    },
    'gnss': {
        'fix': 5,
        'fixOk': True,
        'antenna_status': 2,
        'antenna_power': 1,
        'survey_in_position_error': 1.75,
        'lsChange': 0,
        'leap_seconds': 18,
    },
    'disciplining_parameters': {
        'calibration_parameters': {
            'ctrl_nodes_length': 3,
            'ctrl_load_nodes': '[0.25, 0.5, 0.75]',
            'ctrl_drift_coeffs': '[1.2, -0.3, 0.8]',
            'coarse_equilibrium': 4000000,
            'calibration_date': 1654000000,
            'calibration_valid': True,
            'ctrl_nodes_length_factory': 3,
            'ctrl_load_nodes_factory': '[0.25, 0.5, 0.75]',
            'ctrl_drift_coeffs_factory': '[1.0, 0.0, 1.0]',
            'coarse_equilibrium_factory': 3999000,
            'estimated_equilibrium_ES': 4000100,
        },
        'temperature_table': {
            '0-10': '1.23',
            '10-20': '4.56',
        },
    },
    'Action requested': 'gnss_start',
}


@pytest.fixture
def sample_reply():
    """Full status reply with every section present (fresh copy per test)."""
    return copy.deepcopy(SAMPLE_REPLY)


@pytest.fixture
def encode_reply():
    """Serialize a reply dict to wire bytes."""
    def _encode(reply):
        return json.dumps(reply).encode('utf-8')
    return _encode
