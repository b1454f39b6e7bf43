"""
Dispatch Bridge

Turns DMX channel changes into device parameter requests:
frame -> ChangeDetector -> ChannelSchema lookup -> scale -> DeviceClient
"""

import threading
from typing import Dict, List, Optional, Sequence

from ..channels.schema import ChannelSchema
from ..channels.scaling import scale
from ..device.client import DeviceClient, OutboundRequest
from ..core.logger import get_logger, log_dmx_frame
from .change_detector import ChangeDetector, ChannelDelta

logger = get_logger(__name__)


class DispatchBridge:
    """Bridges incoming DMX frames with the device client"""

    def __init__(
        self,
        schema: ChannelSchema,
        client: DeviceClient,
        detector: Optional[ChangeDetector] = None,
        log_schema_miss: bool = False,
        universe: int = 0
    ):
        """
        Initialize dispatch bridge.

        Args:
            schema: Channel table
            client: Device client that receives the requests
            detector: Change detector owning the baseline (new one if omitted)
            log_schema_miss: Log unmapped channel changes at DEBUG
            universe: Port address, only used in log output
        """
        self.schema = schema
        self.client = client
        self.detector = detector or ChangeDetector()
        self.log_schema_miss = log_schema_miss
        self.universe = universe

        self._frame_lock = threading.Lock()
        self._frames = 0
        self._deltas = 0
        self._requests = 0
        self._schema_misses = 0

    def dispatch(self, delta: ChannelDelta) -> Optional[OutboundRequest]:
        """
        Issue the device request for one channel change.

        Args:
            delta: Changed channel and its new raw value

        Returns:
            The submitted request, or None if the channel is not mapped
        """
        definition = self.schema.lookup(delta.index)
        if definition is None:
            self._schema_misses += 1
            if self.log_schema_miss:
                logger.debug(f"Channel {delta.index} not mapped, ignoring value {delta.value}")
            return None

        request = OutboundRequest(definition.parameter_id, scale(definition, delta.value))
        self.client.submit(request)
        self._requests += 1
        logger.debug(f"Channel {delta.index} ({definition.name}) = {delta.value} → "
                     f"{request.parameter_id} {request.value}")
        return request

    def handle_frame(self, frame: Sequence[int]) -> List[OutboundRequest]:
        """
        Process one DMX frame.

        Requests for a frame are all submitted before the next frame is
        looked at; their completion is not awaited.

        Args:
            frame: Raw DMX values

        Returns:
            List[OutboundRequest]: Submitted requests in channel order
        """
        with self._frame_lock:
            self._frames += 1
            log_dmx_frame(logger, self.universe, frame, self._frames)

            deltas = self.detector.detect_changes(frame)
            self._deltas += len(deltas)

            requests = []
            for delta in deltas:
                request = self.dispatch(delta)
                if request is not None:
                    requests.append(request)
            return requests

    def get_stats(self) -> Dict[str, int]:
        """Counters for frames, changes, requests and unmapped changes"""
        return {
            'frames': self._frames,
            'deltas': self._deltas,
            'requests': self._requests,
            'schema_misses': self._schema_misses
        }
