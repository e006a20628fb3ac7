"""
Latency probers for PingTrack.

A prober performs one round trip and returns its latency in whole
milliseconds, raising ProbeError when the round trip cannot complete.
"""

import logging
import time
from typing import Optional

import requests

from ..core.config import ProbeConfig
from ..core.errors import ProbeError


class HttpProber:
    """Times an HTTP HEAD request against a no-content endpoint."""

    def __init__(self, target_url: str, timeout: float = 5.0,
                 session: Optional[requests.Session] = None):
        self.target_url = target_url
        self.timeout = timeout
        self.logger = logging.getLogger(__name__)
        self._session = session or requests.Session()
        self._headers = {'Cache-Control': 'no-cache'}

    def probe(self) -> int:
        """Measure one round trip to the target in milliseconds."""
        start = time.perf_counter()
        try:
            response = self._session.head(
                self.target_url,
                headers=self._headers,
                timeout=self.timeout,
                allow_redirects=False
            )
        except requests.RequestException as e:
            self.logger.debug(f"Probe to {self.target_url} failed: {e}")
            raise ProbeError(f"Ping failed: {e}") from e

        latency = int(round((time.perf_counter() - start) * 1000))

        if response.status_code >= 500:
            raise ProbeError(f"Ping failed: HTTP {response.status_code}")

        return latency

    def close(self) -> None:
        self._session.close()


class EndpointProber:
    """Reads latency from a PingTrack ``/ping`` endpoint."""

    def __init__(self, endpoint_url: str, timeout: float = 5.0,
                 session: Optional[requests.Session] = None):
        self.endpoint_url = endpoint_url
        self.timeout = timeout
        self.logger = logging.getLogger(__name__)
        self._session = session or requests.Session()

    def probe(self) -> int:
        try:
            response = self._session.get(self.endpoint_url, timeout=self.timeout)
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            raise ProbeError(f"Ping endpoint unavailable: {e}") from e

        if response.status_code != 200:
            error = data.get('error', 'Ping failed') if isinstance(data, dict) else 'Ping failed'
            raise ProbeError(f"{error} (HTTP {response.status_code})")

        try:
            return int(data['latency'])
        except (KeyError, TypeError, ValueError) as e:
            raise ProbeError(f"Malformed ping response: {data!r}") from e

    def close(self) -> None:
        self._session.close()


def create_prober(config: ProbeConfig):
    """Build the prober selected by ``config.mode``."""
    if config.mode == 'endpoint':
        return EndpointProber(config.endpoint_url, timeout=config.timeout)
    return HttpProber(config.target_url, timeout=config.timeout)
