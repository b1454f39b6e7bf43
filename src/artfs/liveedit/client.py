"""
LiveEdit Client - fetches show data from the LiveEdit API at startup
"""
from typing import List

import requests

from ..core.constants import DEFAULT_LIVEEDIT_TIMEOUT
from ..core.logger import get_logger

logger = get_logger(__name__)


class LiveEditError(RuntimeError):
    """LiveEdit data could not be fetched."""


class LiveEditClient:
    """Read-only client for the LiveEdit entries endpoint."""

    def __init__(self, url: str, timeout: float = DEFAULT_LIVEEDIT_TIMEOUT):
        self.url = url
        self.timeout = timeout

    def fetch_entries(self) -> List[dict]:
        """
        Fetch all LiveEdit entries.

        Returns:
            List[dict]: Decoded entries

        Raises:
            LiveEditError: On transport errors, non-2xx responses or a
                payload that is not a JSON list
        """
        try:
            response = requests.get(self.url, timeout=self.timeout)
            response.raise_for_status()
            entries = response.json()
        except requests.RequestException as e:
            raise LiveEditError(f"Error fetching data from LiveEdit ({self.url}): {e}") from e
        except ValueError as e:
            raise LiveEditError(f"LiveEdit returned invalid JSON: {e}") from e

        if not isinstance(entries, list):
            raise LiveEditError(f"LiveEdit returned {type(entries).__name__}, expected a list of entries")

        logger.info(f"LiveEdit: {len(entries)} entries loaded")
        return entries
