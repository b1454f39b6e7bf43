"""
Scaling - maps a raw DMX byte onto a channel's device value range.

The byte range is split at the midpoint (127) into two linear segments:
0..127 covers min..center and 127..255 covers center..max.
"""

from ..core.constants import DMX_MIDPOINT
from .schema import ChannelDefinition


def scale(definition: ChannelDefinition, raw_value: int):
    """
    Translate a raw DMX value into the channel's device value.

    Args:
        definition: Channel definition with min/center/max
        raw_value: DMX value 0-255

    Returns:
        The center value unchanged at the midpoint, otherwise a float
        within [min, max]
    """
    if raw_value == DMX_MIDPOINT:
        return definition.center

    if raw_value < DMX_MIDPOINT:
        percentage = raw_value / DMX_MIDPOINT
        return definition.minimum + (definition.center - definition.minimum) * percentage

    # (255 - 127) / 127 overshoots 1.0, so the top of the range is capped at max
    percentage = (raw_value - DMX_MIDPOINT) / DMX_MIDPOINT
    if percentage >= 1.0:
        return definition.maximum
    return definition.center + (definition.maximum - definition.center) * percentage
