"""
Channel Schema

Static table that maps DMX channel slots to device parameters:
- ChannelDefinition: one channel (index, name, parameter id, min/center/max)
- ChannelSchema: ordered, validated, read-only table with O(1) lookup

Channels without a definition are simply not forwarded; the table is a
sparse allow-list over the 512 slots of a universe.
"""

import math
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Union

from ..core.constants import DMX_CHANNELS_PER_UNIVERSE
from ..core.logger import get_logger

logger = get_logger(__name__)

Number = Union[int, float]


class SchemaError(ValueError):
    """Raised when a channel table is malformed."""


@dataclass(frozen=True)
class ChannelDefinition:
    """Mapping of one DMX channel onto a device parameter"""

    index: int                 # 0-based slot within a frame
    name: str                  # Display name (e.g., "Master Gain")
    parameter_id: str          # Device parameter (e.g., "eParamID_TV_Vid1MasterGain")
    minimum: Number            # Value at raw 0
    center: Number             # Value at raw 127
    maximum: Number            # Value at raw 255

    def to_dict(self) -> dict:
        """Serialize to JSON"""
        return {
            'index': self.index,
            'name': self.name,
            'param': self.parameter_id,
            'min': self.minimum,
            'center': self.center,
            'max': self.maximum
        }

    @staticmethod
    def from_dict(data: dict) -> 'ChannelDefinition':
        """Deserialize from JSON ("default" is accepted for "center")"""
        center = data['center'] if 'center' in data else data['default']
        return ChannelDefinition(
            index=data['index'],
            name=data.get('name', f"Channel {data['index']}"),
            parameter_id=data['param'],
            minimum=data['min'],
            center=center,
            maximum=data['max']
        )


# AJA colour-correction parameters, one per channel starting at slot 0
DEFAULT_CHANNELS: List[dict] = [
    {'index': 0, 'name': 'Master Gain', 'param': 'eParamID_TV_Vid1MasterGain', 'min': 0, 'center': 1000, 'max': 3000},
    {'index': 1, 'name': 'Red Gain', 'param': 'eParamID_TV_Vid1RedGain', 'min': 0, 'center': 1000, 'max': 3000},
    {'index': 2, 'name': 'Green Gain', 'param': 'eParamID_TV_Vid1GreenGain', 'min': 0, 'center': 1000, 'max': 3000},
    {'index': 3, 'name': 'Blue Gain', 'param': 'eParamID_TV_Vid1BlueGain', 'min': 0, 'center': 1000, 'max': 3000},
    {'index': 4, 'name': 'Saturation', 'param': 'eParamID_TV_Vid1HDRSaturation', 'min': 0, 'center': 1000, 'max': 2000},
    {'index': 5, 'name': 'Master Lift', 'param': 'eParamID_TV_Vid1MasterLift', 'min': -1000, 'center': 0, 'max': 1000},
    {'index': 6, 'name': 'Red Lift', 'param': 'eParamID_TV_Vid1RedLift', 'min': -1000, 'center': 0, 'max': 1000},
    {'index': 7, 'name': 'Green Lift', 'param': 'eParamID_TV_Vid1GreenLift', 'min': -1000, 'center': 0, 'max': 1000},
    {'index': 8, 'name': 'Blue Lift', 'param': 'eParamID_TV_Vid1BlueLift', 'min': -1000, 'center': 0, 'max': 1000},
    {'index': 9, 'name': 'Master Gamma', 'param': 'eParamID_TV_Vid1MasterGamma', 'min': 0, 'center': 1000, 'max': 2000},
    {'index': 10, 'name': 'Red Gamma', 'param': 'eParamID_TV_Vid1RedGamma', 'min': 0, 'center': 1000, 'max': 2000},
    {'index': 11, 'name': 'Green Gamma', 'param': 'eParamID_TV_Vid1GreenGamma', 'min': 0, 'center': 1000, 'max': 2000},
    {'index': 12, 'name': 'Blue Gamma', 'param': 'eParamID_TV_Vid1BlueGamma', 'min': 0, 'center': 1000, 'max': 2000},
]


def check_definition(definition: ChannelDefinition) -> List[str]:
    """
    Check a single definition for problems.

    Args:
        definition: Channel definition to check

    Returns:
        List[str]: Error messages (empty if valid)
    """
    errors = []
    label = f"channel {definition.index} ({definition.name})"

    if not 0 <= definition.index < DMX_CHANNELS_PER_UNIVERSE:
        errors.append(f"{label}: index must be within 0-{DMX_CHANNELS_PER_UNIVERSE - 1}")
    bounds = (definition.minimum, definition.center, definition.maximum)
    if not all(math.isfinite(bound) for bound in bounds):
        errors.append(f"{label}: min, center and max must be finite numbers")
    else:
        if definition.minimum > definition.center:
            errors.append(f"{label}: min ({definition.minimum}) is greater than center ({definition.center})")
        if definition.center > definition.maximum:
            errors.append(f"{label}: center ({definition.center}) is greater than max ({definition.maximum})")

    return errors


class ChannelSchema:
    """Ordered, read-only table of channel definitions"""

    def __init__(self, definitions: Iterable[ChannelDefinition]):
        """
        Build and validate the table.

        Args:
            definitions: Channel definitions in display order

        Raises:
            SchemaError: If a definition has min > center or center > max,
                or if two definitions share an index
        """
        self._definitions = tuple(definitions)
        self._by_index: Dict[int, ChannelDefinition] = {}

        errors = []
        for definition in self._definitions:
            errors.extend(check_definition(definition))
            if definition.index in self._by_index:
                errors.append(f"channel {definition.index}: duplicate index "
                              f"({self._by_index[definition.index].name} / {definition.name})")
            else:
                self._by_index[definition.index] = definition

        if errors:
            raise SchemaError("Invalid channel table: " + "; ".join(errors))

    @classmethod
    def from_records(cls, records: Iterable[dict]) -> 'ChannelSchema':
        """Build a schema from JSON records."""
        try:
            definitions = [ChannelDefinition.from_dict(record) for record in records]
        except KeyError as e:
            raise SchemaError(f"Invalid channel table: missing field {e}") from e
        return cls(definitions)

    @classmethod
    def default(cls) -> 'ChannelSchema':
        return cls.from_records(DEFAULT_CHANNELS)

    def lookup(self, index: int) -> Optional[ChannelDefinition]:
        """
        Find the definition for a channel slot.

        Args:
            index: 0-based channel index

        Returns:
            The definition, or None if the channel is not mapped
        """
        return self._by_index.get(index)

    def describe(self):
        """Log the channel table, one line per channel."""
        logger.info(f"Channels ({len(self)} mapped)")
        for d in self._definitions:
            logger.info(f"  {d.index:>3}  {d.name:<14} {d.minimum:>7} {d.center:>7} {d.maximum:>7}  {d.parameter_id}")

    def to_records(self) -> List[dict]:
        return [definition.to_dict() for definition in self._definitions]

    def __len__(self):
        return len(self._definitions)

    def __iter__(self) -> Iterator[ChannelDefinition]:
        return iter(self._definitions)
