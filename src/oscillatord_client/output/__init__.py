"""
Output modules for oscillatord-client.
"""

from .report_renderer import ReportRenderer

__all__ = ['ReportRenderer']
