"""
Main entry point for ArtFS.
"""
import argparse
import logging
import sys
import time

from .artnet.emitter import RandomEmitter
from .artnet.receiver import DMXReceiver, port_address
from .bridge.dispatch import DispatchBridge
from .channels.schema import ChannelSchema, SchemaError
from .core.config import LOG_LEVELS, ConfigError, load_config
from .core.constants import (
    DEFAULT_LIVEEDIT_TIMEOUT, DEFAULT_MAX_LOG_FILES, EXIT_OK, EXIT_STARTUP_FAILURE, VERSION
)
from .core.logger import ArtFSLogger, get_logger
from .device.client import DeviceClient
from .liveedit.client import LiveEditClient, LiveEditError

logger = get_logger(__name__)

BANNER = r"""
    _         _   _____ ____
   / \   _ __| |_|  ___/ ___|
  / _ \ | '__| __| |_  \___ \
 / ___ \| |  | |_|  _|  ___) |
/_/   \_\_|   \__|_|   |____/
"""


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog='artfs',
        description="Forward Art-Net DMX channel changes to a device's HTTP parameter API"
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {VERSION}')
    parser.add_argument('-c', '--config', default='config.json',
                        help="Path to config.json (default: ./config.json)")
    parser.add_argument('-e', '--emit-random', action='store_true',
                        help="Emit random Art-Net data for testing")
    parser.add_argument('-s', '--subnet', type=int, help="Art-Net subnet")
    parser.add_argument('-u', '--universe', type=int, help="Art-Net universe")
    parser.add_argument('-n', '--net', type=int, help="Art-Net net")
    parser.add_argument('--device-host', help="Device host name or IP")
    parser.add_argument('--device-port', type=int, help="Device HTTP port")
    parser.add_argument('--log-level', choices=LOG_LEVELS, type=str.upper,
                        help="Console log level")
    return parser.parse_args(argv)


def apply_cli_overrides(config, args):
    """Write command line values into the config (CLI wins)."""
    artnet = config.setdefault('artnet', {})
    if args.subnet is not None:
        artnet['subnet'] = args.subnet
    if args.universe is not None:
        artnet['universe'] = args.universe
    if args.net is not None:
        artnet['net'] = args.net
    if args.emit_random:
        artnet.setdefault('emit_random', {})['enabled'] = True

    device = config.setdefault('device', {})
    if args.device_host:
        device['host'] = args.device_host
    if args.device_port is not None:
        device['port'] = args.device_port

    if args.log_level:
        config.setdefault('app', {})['console_log_level'] = args.log_level
    return config


def build_schema(config):
    """Channel table from the config, or the built-in table."""
    records = config.get('channels')
    if records is not None:
        return ChannelSchema.from_records(records)
    return ChannelSchema.default()


def setup_logging(config):
    app = config.get('app', {})
    console_level = getattr(logging, app.get('console_log_level', 'WARNING'), logging.WARNING)
    artfs_logger = ArtFSLogger()
    artfs_logger.setup_logging(
        log_dir=app.get('log_dir'),
        console_level=console_level,
        max_log_files=app.get('max_log_files', DEFAULT_MAX_LOG_FILES)
    )
    artfs_logger.apply_debug_modules(app.get('debug_modules', []))


def fetch_liveedit(config):
    """Fetch LiveEdit entries if enabled; failure is fatal to startup."""
    liveedit = config.get('liveedit', {})
    if not liveedit.get('enabled'):
        return None
    client = LiveEditClient(liveedit['url'], timeout=liveedit.get('timeout', DEFAULT_LIVEEDIT_TIMEOUT))
    return client.fetch_entries()


def main(argv=None):
    """Run the bridge until interrupted. Returns the process exit code."""
    args = parse_args(argv)

    try:
        config = load_config(args.config)
    except ConfigError as e:
        logger.critical(f"Invalid configuration {args.config}:")
        for error in e.errors:
            logger.critical(f"  - {error}")
        return EXIT_STARTUP_FAILURE

    apply_cli_overrides(config, args)
    setup_logging(config)
    print(BANNER)

    artnet = config['artnet']
    device = config['device']

    try:
        schema = build_schema(config)
        universe = port_address(artnet['net'], artnet['subnet'], artnet['universe'])
        fetch_liveedit(config)
    except (SchemaError, ValueError, LiveEditError) as e:
        logger.critical(str(e))
        return EXIT_STARTUP_FAILURE

    schema.describe()

    client = DeviceClient(
        host=device['host'],
        port=device['port'],
        timeout=device['timeout'],
        max_workers=device['max_workers']
    )
    bridge = DispatchBridge(
        schema,
        client,
        log_schema_miss=config['bridge']['log_schema_miss'],
        universe=universe
    )
    receiver = DMXReceiver(
        bridge.handle_frame,
        universe=universe,
        listen_ip=artnet['listen_ip'],
        listen_port=artnet['listen_port']
    )

    emitter = None
    try:
        receiver.start()
    except OSError as e:
        logger.critical(f"Cannot listen on {artnet['listen_ip']}:{artnet['listen_port']}: {e}")
        client.close(wait=False)
        return EXIT_STARTUP_FAILURE

    emit = artnet['emit_random']
    if emit['enabled']:
        emitter = RandomEmitter(
            target_ip=emit['target_ip'],
            universe=universe,
            interval=emit['interval'],
            channel_count=emit['channel_count']
        )
        emitter.start()

    logger.info(f"Running: universe {universe} → http://{device['host']}:{device['port']}")
    try:
        while True:
            time.sleep(1.0)
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
    finally:
        if emitter:
            emitter.stop()
        receiver.stop()
        client.close()
        logger.info(f"Bridge stats: {bridge.get_stats()}, device: {client.get_stats()}")

    return EXIT_OK


if __name__ == '__main__':
    sys.exit(main())
