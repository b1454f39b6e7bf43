"""
Central constants for ArtFS
"""

# Art-Net / DMX
DMX_CHANNELS_PER_UNIVERSE = 512
DMX_MAX_VALUE = 255
DMX_MIDPOINT = 127  # Raw value that maps to a channel's center value
ARTNET_PORT = 6454

# Remote device (AJA-style parameter API)
DEFAULT_DEVICE_HOST = '192.168.10.40'
DEFAULT_DEVICE_PORT = 80
DEFAULT_DEVICE_TIMEOUT = 2.0  # Seconds
DEFAULT_DEVICE_WORKERS = 4
DEVICE_CONFIG_PATH = '/config'
DEVICE_SET_ACTION = 'set'
VALUE_DECIMALS = 3  # Fractional digits sent in the value query parameter

# Random test emitter
DEFAULT_EMIT_TARGET_IP = '127.0.0.1'
DEFAULT_EMIT_INTERVAL = 2.0  # Seconds
DEFAULT_EMIT_CHANNELS = 100

# LiveEdit
DEFAULT_LIVEEDIT_TIMEOUT = 5.0

# Logging
DEFAULT_LOG_DIR = 'logs'
DEFAULT_CONSOLE_LOG_LEVEL = 'WARNING'
DEFAULT_MAX_LOG_FILES = 10

# Exit codes
EXIT_OK = 0
EXIT_STARTUP_FAILURE = 1

VERSION = '1.0.0'
