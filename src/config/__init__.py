"""Configuration module for the reporting pipeline."""

from .branding import CompanyInfo, DEFAULT_COMPANY, is_valid_company_info
from .settings import ApiSettings, ExportSettings, Settings, get_settings

__all__ = [
    "CompanyInfo",
    "DEFAULT_COMPANY",
    "is_valid_company_info",
    "ApiSettings",
    "ExportSettings",
    "Settings",
    "get_settings",
]
