"""
Transport for the oscillatord monitoring socket.
"""

from .monitoring_socket import MonitoringSocket

__all__ = ['MonitoringSocket']
