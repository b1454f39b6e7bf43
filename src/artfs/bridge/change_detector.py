"""
Change Detector

Keeps the last seen value of every DMX channel and reports which channels
changed when a new frame arrives.
"""

import threading
from typing import Dict, List, NamedTuple, Sequence


class ChannelDelta(NamedTuple):
    """A channel whose value differs from the last frame"""
    index: int
    value: int


class ChangeDetector:
    """Diffs incoming DMX frames against the last observed values."""

    def __init__(self):
        self._baseline: Dict[int, int] = {}  # channel index -> last raw value
        self._lock = threading.Lock()

    def detect_changes(self, frame: Sequence[int]) -> List[ChannelDelta]:
        """
        Compare a frame against the baseline and update it.

        A channel seen for the first time always counts as changed. Channels
        beyond the end of a shorter frame keep their previous value.

        Args:
            frame: Raw DMX values, one per channel slot

        Returns:
            List[ChannelDelta]: Changed channels in ascending index order
        """
        changes = []
        with self._lock:
            for index, value in enumerate(frame):
                if self._baseline.get(index) != value:
                    self._baseline[index] = value
                    changes.append(ChannelDelta(index, value))
        return changes

    def snapshot(self) -> Dict[int, int]:
        """Copy of the current baseline (for diagnostics)."""
        with self._lock:
            return dict(self._baseline)

    def __len__(self):
        return len(self._baseline)
