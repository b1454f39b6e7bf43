"""
Channel table and value scaling.

- ChannelDefinition: DMX slot -> device parameter with min/center/max
- ChannelSchema: validated lookup table
- scale: piecewise-linear raw byte -> device value transform
"""

from .schema import ChannelDefinition, ChannelSchema, SchemaError, DEFAULT_CHANNELS
from .scaling import scale

__all__ = [
    'ChannelDefinition',
    'ChannelSchema',
    'SchemaError',
    'DEFAULT_CHANNELS',
    'scale',
]
