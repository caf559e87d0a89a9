"""
Services Module - Infrastructure services for the reporting pipeline.

- ReportsApiClient: async HTTP client for the rental management backend
- Branding cache and logo loader wired to that client
- Logging and observability
"""

# Imports are deferred to avoid circular imports
def get_api_client(settings=None):
    """Get a ReportsApiClient configured from application settings."""
    from config.settings import get_settings
    from .api_client import ReportsApiClient
    settings = settings or get_settings()
    return ReportsApiClient(settings.api)


def get_branding_cache(client, settings=None):
    """Get a BrandingCache reading company info through ``client``.

    The TTL comes from ``Settings.company_info_ttl``.
    """
    from cache.branding_cache import BrandingCache
    from config.settings import get_settings
    settings = settings or get_settings()
    return BrandingCache(client.get_company_info, ttl=settings.company_info_ttl)


def get_logo_loader(client, settings=None):
    """Get a LogoLoader downloading through ``client`` with the export logo limits."""
    from config.settings import get_settings
    from export.logo import LogoLoader
    export_settings = (settings or get_settings()).export
    return LogoLoader(
        client.fetch_bytes,
        circular=export_settings.circular_logo,
        max_bytes=export_settings.max_logo_bytes,
    )


def create_export_renderer(store, client=None, settings=None, sink=None):
    """Create an ExportRenderer with branding, logo and export settings wired in.

    Args:
        store: ReportStore holding the report to export.
        client: ReportsApiClient; one is built from settings when omitted.
        settings: Settings override (defaults to get_settings()).
        sink: DownloadSink override (defaults to the download directory).

    Usage:
        renderer = create_export_renderer(store)
        await renderer.export_report(ExportRequest(ExportFormat.PDF, ReportType.FINANCIAL))
    """
    from config.settings import get_settings
    from export.renderer import ExportRenderer
    settings = settings or get_settings()
    client = client or get_api_client(settings)
    return ExportRenderer(
        store,
        get_branding_cache(client, settings),
        logo_loader=get_logo_loader(client, settings),
        sink=sink,
        settings=settings.export,
    )


def init_logging(settings=None):
    """Configure logging from the application settings."""
    from config.settings import get_settings
    from .logging_config import configure_from_settings
    configure_from_settings(settings or get_settings())


__all__ = [
    'get_api_client',
    'get_branding_cache',
    'get_logo_loader',
    'create_export_renderer',
    'init_logging',
]
