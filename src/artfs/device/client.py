"""
Device Client

Sends parameter-set requests to the remote device's HTTP config API:

    GET http://<host>:<port>/config?action=set&paramid=<id>&value=<value>

Requests run on a small worker pool so frame processing never waits on the
network. While a request for a parameter is still queued, newer values for
that parameter replace it, so a slow device only ever receives the latest
value. Failures are logged and counted, never raised to the caller.
"""

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Dict, Union

import requests

from ..core.constants import (
    DEFAULT_DEVICE_HOST, DEFAULT_DEVICE_PORT, DEFAULT_DEVICE_TIMEOUT,
    DEFAULT_DEVICE_WORKERS, DEVICE_CONFIG_PATH, DEVICE_SET_ACTION, VALUE_DECIMALS
)
from ..core.logger import get_logger

logger = get_logger(__name__)


def format_value(value: Union[int, float]) -> str:
    """
    Serialize a device value for the query string.

    Integers are sent as-is; floats get at most 3 decimals with trailing
    zeros stripped (496.0629... -> "496.063", 1000.0 -> "1000").
    """
    if isinstance(value, int):
        return str(value)
    text = f"{value:.{VALUE_DECIMALS}f}".rstrip('0').rstrip('.')
    return '0' if text == '-0' else text


@dataclass(frozen=True)
class OutboundRequest:
    """One parameter-set call for the device"""

    parameter_id: str
    value: Union[int, float]

    def to_params(self) -> Dict[str, str]:
        """Query parameters for the config endpoint"""
        return {
            'action': DEVICE_SET_ACTION,
            'paramid': self.parameter_id,
            'value': format_value(self.value)
        }


class DeviceClient:
    """Fire-and-forget HTTP client for the device parameter API"""

    def __init__(
        self,
        host: str = DEFAULT_DEVICE_HOST,
        port: int = DEFAULT_DEVICE_PORT,
        timeout: float = DEFAULT_DEVICE_TIMEOUT,
        max_workers: int = DEFAULT_DEVICE_WORKERS
    ):
        """
        Initialize device client.

        Args:
            host: Device host name or IP
            port: Device HTTP port
            timeout: Per-request timeout in seconds
            max_workers: Size of the request worker pool
        """
        self.url = f"http://{host}:{port}{DEVICE_CONFIG_PATH}"
        self.timeout = timeout
        self.session = requests.Session()
        self.executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix='DeviceClient')

        self._pending_lock = threading.Lock()
        self._pending: Dict[str, OutboundRequest] = {}
        self._pending_futures: Dict[str, Future] = {}

        self._stats_lock = threading.Lock()
        self._sent = 0
        self._failed = 0
        self._coalesced = 0

    def send(self, request: OutboundRequest) -> requests.Response:
        """
        Send one request and wait for the response.

        Raises:
            requests.RequestException: On connection errors, timeouts or
                non-2xx responses
        """
        response = self.session.get(self.url, params=request.to_params(), timeout=self.timeout)
        response.raise_for_status()
        return response

    def submit(self, request: OutboundRequest) -> Future:
        """
        Queue a request without waiting for it.

        If a request for the same parameter is still waiting for a worker,
        its value is replaced and its future is returned instead.

        Returns:
            Future: Resolves to True if the device accepted the request
        """
        parameter_id = request.parameter_id
        with self._pending_lock:
            if parameter_id in self._pending:
                self._pending[parameter_id] = request
                with self._stats_lock:
                    self._coalesced += 1
                return self._pending_futures[parameter_id]

            future = self.executor.submit(self._send_pending, parameter_id)
            self._pending[parameter_id] = request
            self._pending_futures[parameter_id] = future
            return future

    def _send_pending(self, parameter_id: str) -> bool:
        with self._pending_lock:
            request = self._pending.pop(parameter_id)
            del self._pending_futures[parameter_id]
        return self._send_logged(request)

    def _send_logged(self, request: OutboundRequest) -> bool:
        try:
            self.send(request)
        except requests.RequestException as e:
            with self._stats_lock:
                self._failed += 1
            logger.warning(f"Device request failed: paramid={request.parameter_id} "
                           f"value={format_value(request.value)}: {e}")
            return False

        with self._stats_lock:
            self._sent += 1
        logger.debug(f"Device set {request.parameter_id} = {format_value(request.value)}")
        return True

    def get_stats(self) -> Dict[str, int]:
        with self._stats_lock:
            return {'sent': self._sent, 'failed': self._failed, 'coalesced': self._coalesced}

    def close(self, wait: bool = True):
        """Stop the worker pool and close the HTTP session."""
        self.executor.shutdown(wait=wait)
        self.session.close()
        logger.debug(f"Device client closed ({self.get_stats()})")
