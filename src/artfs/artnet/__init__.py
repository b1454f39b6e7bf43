"""
Art-Net input and test output.

- DMXReceiver: UDP listener for ArtDMX frames on one universe
- RandomEmitter: random test frames via stupidArtnet
"""

from .receiver import DMXReceiver, parse_artdmx, port_address
from .emitter import RandomEmitter

__all__ = [
    'DMXReceiver',
    'RandomEmitter',
    'parse_artdmx',
    'port_address',
]
