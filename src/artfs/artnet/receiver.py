"""
DMX Receiver - receives ArtDMX packets for one universe over UDP
"""
import socket
import struct
import threading
from typing import Callable, Optional, Sequence

from ..core.constants import ARTNET_PORT, DMX_CHANNELS_PER_UNIVERSE
from ..core.logger import get_logger

logger = get_logger(__name__)

ARTNET_HEADER = b'Art-Net\x00'
OPCODE_ARTDMX = 0x5000
ARTDMX_DATA_OFFSET = 18


def port_address(net: int, subnet: int, universe: int) -> int:
    """
    Combine net (0-127), subnet (0-15) and universe (0-15) into the 15-bit
    Art-Net port address carried in ArtDMX packets.
    """
    if not 0 <= net <= 127:
        raise ValueError(f"net must be within 0-127, got {net}")
    if not 0 <= subnet <= 15:
        raise ValueError(f"subnet must be within 0-15, got {subnet}")
    if not 0 <= universe <= 15:
        raise ValueError(f"universe must be within 0-15, got {universe}")
    return (net << 8) | (subnet << 4) | universe


def parse_artdmx(data: bytes):
    """
    Parse an ArtDMX packet.

    Args:
        data: Raw UDP payload

    Returns:
        tuple: (port_address, dmx_values) or None if the packet is not ArtDMX
    """
    if len(data) < ARTDMX_DATA_OFFSET:
        return None

    if data[0:8] != ARTNET_HEADER:
        return None

    opcode = struct.unpack('<H', data[8:10])[0]
    if opcode != OPCODE_ARTDMX:
        return None

    universe = struct.unpack('<H', data[14:16])[0]
    length = struct.unpack('>H', data[16:18])[0]
    length = min(length, DMX_CHANNELS_PER_UNIVERSE)
    dmx_data = list(data[ARTDMX_DATA_OFFSET:ARTDMX_DATA_OFFSET + length])
    return universe, dmx_data


class DMXReceiver:
    """Listens for Art-Net DMX frames and hands them to a callback."""

    def __init__(
        self,
        on_frame: Callable[[Sequence[int]], object],
        universe: int = 0,
        listen_ip: str = '0.0.0.0',
        listen_port: int = ARTNET_PORT
    ):
        """
        Args:
            on_frame: Called with the DMX values of every matching frame
            universe: 15-bit port address to listen on (see port_address)
            listen_ip: Interface to bind
            listen_port: UDP port
        """
        self.on_frame = on_frame
        self.universe = universe
        self.listen_ip = listen_ip
        self.listen_port = listen_port

        self.is_running = False
        self.thread: Optional[threading.Thread] = None
        self.sock: Optional[socket.socket] = None
        self.frames_received = 0

    def start(self):
        """Start the listener thread."""
        if self.is_running:
            return

        self.sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        self.sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self.sock.bind((self.listen_ip, self.listen_port))
        self.sock.settimeout(1.0)

        self.is_running = True
        self.thread = threading.Thread(target=self._listen_loop, daemon=True, name='DMXReceiver')
        self.thread.start()
        logger.info(f"DMX input listening on {self.listen_ip}:{self.listen_port}, universe {self.universe}")

    def stop(self):
        """Stop the listener thread."""
        self.is_running = False
        if self.thread:
            self.thread.join(timeout=2.0)
            self.thread = None
        if self.sock:
            self.sock.close()
            self.sock = None
        logger.debug(f"DMX input stopped after {self.frames_received} frames")

    def _listen_loop(self):
        """Receive loop, runs until stop()."""
        while self.is_running:
            try:
                data, addr = self.sock.recvfrom(1024)
            except socket.timeout:
                continue
            except OSError as e:
                if self.is_running:
                    logger.error(f"DMX receive error: {e}")
                continue
            self.process_packet(data)

    def process_packet(self, data: bytes) -> bool:
        """
        Handle one UDP payload.

        Returns:
            bool: True if the packet was an ArtDMX frame for our universe
        """
        parsed = parse_artdmx(data)
        if parsed is None:
            return False

        universe, dmx_data = parsed
        if universe != self.universe:
            return False

        self.frames_received += 1
        try:
            self.on_frame(dmx_data)
        except Exception as e:
            logger.error(f"Frame handler failed: {e}", exc_info=True)
        return True
