import logging
import time
from dataclasses import dataclass
from typing import Iterable, Optional

import requests

LOG = logging.getLogger("pkg-mirror")

TIMEOUT = 10


@dataclass
class ProbeResult:
    url: str
    reachable: bool
    status_code: Optional[int] = None
    elapsed_ms: Optional[int] = None
    error: str = ""


class MirrorProbe:
    """Checks that mirror URLs answer over HTTP."""

    def __init__(self, session: Optional[requests.Session] = None):
        self.requests = session or requests.Session()

    def probe(self, url: str) -> ProbeResult:
        start = time.monotonic()
        try:
            response = self.requests.head(url, allow_redirects=True, timeout=TIMEOUT)
        except requests.RequestException as exc:
            LOG.debug("Probe of %s failed", url, exc_info=True)
            return ProbeResult(url=url, reachable=False, error=str(exc))

        elapsed_ms = int((time.monotonic() - start) * 1000)
        return ProbeResult(
            url=url,
            reachable=response.status_code < 400,
            status_code=response.status_code,
            elapsed_ms=elapsed_ms,
            error="" if response.status_code < 400 else response.reason or "",
        )

    def probe_all(self, urls: Iterable[str]) -> list[ProbeResult]:
        return [self.probe(url) for url in urls]
