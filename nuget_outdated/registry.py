"""
Latest-version lookups against the NuGet v3 flat container.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

import requests

from .config import CheckerConfig
from .interfaces import VersionLookup
from .models import Found, LookupResult, NotFound
from .versions import NuGetVersion


logger = logging.getLogger(__name__)

# Transport errors worth another attempt; HTTP status errors are final.
RETRYABLE_EXCEPTIONS = (
    requests.exceptions.ConnectionError,
    requests.exceptions.Timeout,
)


@dataclass
class RegistryCache:
    """In-memory cache of lookups for one run."""

    latest: Dict[Tuple[str, bool], LookupResult] = field(default_factory=dict)
    session: requests.Session = field(default_factory=requests.Session)


class NuGetClient(VersionLookup):
    """Find the latest version of a package on a NuGet v3 feed."""

    def __init__(
        self,
        config: Optional[CheckerConfig] = None,
        cache: Optional[RegistryCache] = None,
    ) -> None:
        self.config = config or CheckerConfig()
        self.cache = cache or RegistryCache()
        self.cache.session.headers["User-Agent"] = self.config.user_agent

    def get_latest_version(self, package_id: str, include_prerelease: bool) -> LookupResult:
        """Return :class:`Found` with the highest version, else :class:`NotFound`.

        Every failure, from the network to a version string that does not
        parse, is reported as ``NotFound``; this method does not raise.
        """
        cache_key = (package_id.lower(), include_prerelease)
        if cache_key in self.cache.latest:
            logger.debug("Cache hit: latest %s (prerelease=%s)", package_id, include_prerelease)
            return self.cache.latest[cache_key]

        result = self._lookup(package_id, include_prerelease)
        self.cache.latest[cache_key] = result
        return result

    def _lookup(self, package_id: str, include_prerelease: bool) -> LookupResult:
        url = self.config.package_index_url(package_id)
        try:
            data = self._fetch_index(url)
            versions = [NuGetVersion.parse(v) for v in data["versions"]]
        except requests.RequestException as e:
            logger.debug("Request for %s failed: %s", url, e)
            return NotFound(f"request failed: {e}")
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            logger.debug("Unusable index for %s: %s", package_id, e)
            return NotFound(f"invalid index: {e}")

        if not include_prerelease:
            versions = [v for v in versions if not v.is_prerelease]
        if not versions:
            return NotFound("no matching versions")
        return Found(max(versions))

    def _fetch_index(self, url: str) -> Dict:
        delay = self.config.backoff
        attempts = max(1, self.config.retries)
        attempt = 1
        while True:
            try:
                logger.debug("GET %s", url)
                with self.cache.session.get(url, timeout=self.config.timeout) as response:
                    response.raise_for_status()
                    return response.json()
            except RETRYABLE_EXCEPTIONS as e:
                if attempt >= attempts:
                    raise
                logger.debug(
                    "Attempt %d/%d for %s failed (%s), retrying in %.1fs",
                    attempt, attempts, url, e, delay,
                )
                time.sleep(delay)
                delay *= 2
                attempt += 1
