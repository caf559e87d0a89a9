"""Cache layer for the reporting pipeline.

Provides the TTL-bounded company branding cache read by exports.
"""

from .branding_cache import (
    BrandingCache,
    CompanyInfoFetcher,
    DEFAULT_BRANDING_TTL,
)

__all__ = [
    "BrandingCache",
    "CompanyInfoFetcher",
    "DEFAULT_BRANDING_TTL",
]
