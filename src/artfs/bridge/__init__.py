"""
DMX change detection and dispatch to the device.
"""

from .change_detector import ChangeDetector, ChannelDelta
from .dispatch import DispatchBridge

__all__ = ['ChangeDetector', 'ChannelDelta', 'DispatchBridge']
