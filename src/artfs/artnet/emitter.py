"""
Random Emitter - sends random DMX frames for bench testing without a desk
"""
import random
import threading
from typing import Optional

from stupidArtnet import StupidArtnet

from ..core.constants import (
    DEFAULT_EMIT_CHANNELS, DEFAULT_EMIT_INTERVAL, DEFAULT_EMIT_TARGET_IP,
    DMX_CHANNELS_PER_UNIVERSE, DMX_MAX_VALUE
)
from ..core.logger import get_logger

logger = get_logger(__name__)


class RandomEmitter:
    """Periodically fills the first channels of a universe with one random value."""

    def __init__(
        self,
        target_ip: str = DEFAULT_EMIT_TARGET_IP,
        universe: int = 0,
        interval: float = DEFAULT_EMIT_INTERVAL,
        channel_count: int = DEFAULT_EMIT_CHANNELS
    ):
        self.target_ip = target_ip
        self.universe = universe
        self.interval = interval
        self.channel_count = min(channel_count, DMX_CHANNELS_PER_UNIVERSE)

        self.artnet: Optional[StupidArtnet] = None
        self.thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        self.frames_sent = 0

    def start(self):
        if self.thread is not None:
            return

        # Frames go out only via show(); start() is never called on it
        self.artnet = StupidArtnet(
            target_ip=self.target_ip,
            universe=self.universe,
            packet_size=DMX_CHANNELS_PER_UNIVERSE,
            fps=30,
            even_packet_size=True,
            broadcast=False
        )
        self._stop_event.clear()
        self.thread = threading.Thread(target=self._emit_loop, daemon=True, name='RandomEmitter')
        self.thread.start()
        logger.info(f"Random DMX emitter → {self.target_ip} universe {self.universe} "
                    f"(channels 0-{self.channel_count - 1}, every {self.interval}s)")

    def stop(self):
        self._stop_event.set()
        if self.thread:
            self.thread.join(timeout=self.interval + 1.0)
            self.thread = None
        self.artnet = None

    def build_frame(self):
        """Frame with channels 0..channel_count-1 set to one random value."""
        value = random.randint(0, DMX_MAX_VALUE - 1)
        frame = [value] * self.channel_count
        frame.extend([0] * (DMX_CHANNELS_PER_UNIVERSE - self.channel_count))
        return frame

    def emit_once(self):
        frame = self.build_frame()
        self.artnet.set(frame)
        self.artnet.show()
        self.frames_sent += 1
        logger.debug(f"Random frame #{self.frames_sent} sent (value {frame[0]})")

    def _emit_loop(self):
        while not self._stop_event.wait(self.interval):
            try:
                self.emit_once()
            except OSError as e:
                logger.error(f"Random emitter send failed: {e}")
