"""
Report aggregation and state.

Fetches typed report snapshots (financial, occupancy, payment, revenue,
custom) from the backend, derives summary metrics and keeps the current
report plus the historical list in a ReportStore.
"""

# Use lazy imports to avoid circular dependencies with services.api_client
def __getattr__(name):
    """Lazy import for module attributes."""
    if name == 'ReportAggregator':
        from reports.aggregator import ReportAggregator
        return ReportAggregator
    elif name == 'ReportStore':
        from reports.store import ReportStore
        return ReportStore
    elif name in ('Report', 'ReportType', 'ReportSummary', 'Filters',
                  'DateRange', 'CustomReportRequest'):
        from reports import models
        return getattr(models, name)
    elif name in ('ReportingError', 'ApiClientError', 'ApiResponseError',
                  'ExportError', 'LogoError', 'MissingReportError'):
        from reports import exceptions
        return getattr(exceptions, name)
    raise AttributeError(f"module 'reports' has no attribute '{name}'")


__all__ = [
    # Aggregation
    'ReportAggregator',
    'ReportStore',
    # Data structures
    'Report',
    'ReportType',
    'ReportSummary',
    'Filters',
    'DateRange',
    'CustomReportRequest',
    # Errors
    'ReportingError',
    'ApiClientError',
    'ApiResponseError',
    'ExportError',
    'LogoError',
    'MissingReportError',
]
