"""Report Export Module.

Branded report exports for the reporting screen:
- PDF via ReportLab (logo, letterhead, striped table, paged footer)
- Excel workbooks via openpyxl
- Plain CSV tables
- Download sinks that receive the finished files
"""

from export.renderer import (
    ExportRenderer,
    ExportRequest,
    ExportFormat,
    build_filename,
)
from export.download import (
    DownloadSink,
    ExportArtifact,
    FileSystemDownloadSink,
    MemoryDownloadSink,
)
from export.document import ExportDocument
from export.logo import LogoImage, LogoLoader, prepare_logo
from export.tables import NO_DATA_MESSAGE, TableData, resolve_table_data

__all__ = [
    # Rendering
    "ExportRenderer",
    "ExportRequest",
    "ExportFormat",
    "build_filename",
    "ExportDocument",
    # Sinks
    "DownloadSink",
    "ExportArtifact",
    "FileSystemDownloadSink",
    "MemoryDownloadSink",
    # Logo
    "LogoImage",
    "LogoLoader",
    "prepare_logo",
    # Tables
    "NO_DATA_MESSAGE",
    "TableData",
    "resolve_table_data",
]
