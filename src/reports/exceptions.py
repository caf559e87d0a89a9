"""Exceptions raised by the reporting pipeline."""

from typing import Optional


class ReportingError(Exception):
    """Base class for reporting pipeline errors."""
    pass


class ApiClientError(ReportingError):
    """Backend request failed at the transport or HTTP level."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ApiResponseError(ReportingError):
    """Backend answered, but the response envelope is unusable."""
    pass


class ExportError(ReportingError):
    """Error while building or saving an export artifact."""
    pass


class LogoError(ReportingError):
    """Company logo could not be fetched or decoded."""
    pass


class MissingReportError(ReportingError):
    """Export requested while no report has been generated."""
    pass
