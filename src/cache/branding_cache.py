"""
Company Branding Cache

Time-bounded cache of the organization record stamped onto exports.

Provides:
1. Time-based expiration (5 minutes by default)
2. Fallback to DEFAULT_COMPANY when the settings endpoint fails
3. Explicit invalidation after the company profile is edited

Usage:
    from cache.branding_cache import BrandingCache

    branding = BrandingCache(api_client.get_company_info, ttl=300)
    info = await branding.get_company_info()

    # After the profile is saved elsewhere
    branding.clear_cache()

Concurrent callers during a miss may each issue a fetch. The fetched record
is read-only, so the last write simply wins.
"""

from __future__ import annotations

import time
import logging
from typing import Any, Awaitable, Callable, Dict, Optional

from config.branding import CompanyInfo, DEFAULT_COMPANY, is_valid_company_info

logger = logging.getLogger(__name__)

DEFAULT_BRANDING_TTL = 300  # 5 minutes

CompanyInfoFetcher = Callable[[], Awaitable[CompanyInfo]]


class BrandingCache:
    """
    Single-value TTL cache for CompanyInfo.

    Only ``get_company_info`` writes the cached value. Failures are never
    cached, so the call after a failure retries the network. A record with
    no contact details is returned but refetched on the next call.
    """

    def __init__(
        self,
        fetcher: CompanyInfoFetcher,
        ttl: float = DEFAULT_BRANDING_TTL,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize cache.

        Args:
            fetcher: Coroutine function returning fresh company info
            ttl: Time-to-live in seconds
            clock: Monotonic time source (injectable for tests)
        """
        self._fetcher = fetcher
        self._ttl = ttl
        self._clock = clock
        self._value: Optional[CompanyInfo] = None
        self._fetched_at: Optional[float] = None
        self._stats = {
            "hits": 0,
            "misses": 0,
            "failures": 0,
        }

    @property
    def ttl(self) -> float:
        return self._ttl

    def is_fresh(self) -> bool:
        """True when a valid value was fetched within the TTL."""
        if self._fetched_at is None or not is_valid_company_info(self._value):
            return False
        return self._clock() - self._fetched_at < self._ttl

    async def get_company_info(self) -> CompanyInfo:
        """
        Return cached company info, fetching it when stale.

        Never raises: any fetch failure yields DEFAULT_COMPANY.
        """
        if self.is_fresh():
            self._stats["hits"] += 1
            return self._value

        self._stats["misses"] += 1
        try:
            info = await self._fetcher()
        except Exception as e:
            self._stats["failures"] += 1
            logger.warning(f"Company info fetch failed, using defaults: {e}")
            return DEFAULT_COMPANY

        self._value = info
        self._fetched_at = self._clock()
        logger.debug(f"Company info cached for {self._ttl}s: {info.name}")
        return info

    def clear_cache(self) -> None:
        """Forcibly invalidate the cached record."""
        self._value = None
        self._fetched_at = None
        logger.info("Company info cache cleared")

    def stats(self) -> Dict[str, Any]:
        """Get cache statistics."""
        return {
            **self._stats,
            "cached": self._value is not None,
            "ttl": self._ttl,
        }
