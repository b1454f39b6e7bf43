"""
Remote device HTTP API.
"""

from .client import DeviceClient, OutboundRequest, format_value

__all__ = ['DeviceClient', 'OutboundRequest', 'format_value']
