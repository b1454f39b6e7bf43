"""
ArtFS - Art-Net DMX to device parameter bridge
"""
# Lazy imports so `import artfs` does not pull in the network libraries
__all__ = ['ChannelSchema', 'ChannelDefinition', 'ChangeDetector', 'DispatchBridge',
           'DeviceClient', 'DMXReceiver', 'RandomEmitter', 'scale']

from .core.constants import VERSION as __version__


def __getattr__(name):
    if name in ('ChannelSchema', 'ChannelDefinition'):
        from .channels import schema
        return getattr(schema, name)
    elif name == 'scale':
        from .channels.scaling import scale
        return scale
    elif name == 'ChangeDetector':
        from .bridge.change_detector import ChangeDetector
        return ChangeDetector
    elif name == 'DispatchBridge':
        from .bridge.dispatch import DispatchBridge
        return DispatchBridge
    elif name == 'DeviceClient':
        from .device.client import DeviceClient
        return DeviceClient
    elif name == 'DMXReceiver':
        from .artnet.receiver import DMXReceiver
        return DMXReceiver
    elif name == 'RandomEmitter':
        from .artnet.emitter import RandomEmitter
        return RandomEmitter
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
