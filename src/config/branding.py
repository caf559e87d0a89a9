"""
Company Branding Configuration

Organization identity stamped onto every exported report: name, contact
details and logo. The live values come from the settings endpoint of the
backend (see cache.branding_cache); DEFAULT_COMPANY is used whenever that
endpoint cannot be reached.

Usage:
    from config.branding import CompanyInfo, DEFAULT_COMPANY

    info = CompanyInfo.from_api(response_data)
    header = info.contact_line()
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class CompanyInfo:
    """Organization metadata used to brand exports"""

    name: str
    email: str = ""
    phone: str = ""
    address: str = ""
    logo: Optional[str] = None

    @classmethod
    def from_api(cls, data: Optional[Dict[str, Any]]) -> "CompanyInfo":
        """Build from a settings payload, falling back to defaults per field."""
        data = data or {}
        return cls(
            name=data.get("name") or DEFAULT_COMPANY.name,
            email=data.get("email") or "",
            phone=data.get("phone") or "",
            address=data.get("address") or "",
            logo=data.get("logo") or None,
        )

    def contact_parts(self) -> List[str]:
        """Non-empty contact fragments in display order."""
        parts = []
        if self.address:
            parts.append(self.address)
        if self.phone:
            parts.append(f"Tel: {self.phone}")
        if self.email:
            parts.append(f"Email: {self.email}")
        return parts

    def contact_line(self) -> str:
        return " | ".join(self.contact_parts())

    @property
    def footer_text(self) -> str:
        return f"{self.name} - Confidential"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


DEFAULT_COMPANY = CompanyInfo(name="Rental Management System")


def is_valid_company_info(info: Optional[CompanyInfo]) -> bool:
    """A usable record has a name and at least one way to reach the company."""
    if info is None or not info.name:
        return False
    return bool(info.email or info.phone or info.address or info.logo)
