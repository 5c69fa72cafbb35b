"""UTMAudit — Report Output Models."""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel

from utmaudit.core.platform_registry import Platform
from utmaudit.models.creative_models import CampaignGroup, PlatformConfigs


# ─────────────────────────────────────────────
# DASHBOARDS
# ─────────────────────────────────────────────


class DashboardRef(BaseModel):
    """A dashboard (one customer account view) the operator manages."""

    id: str
    name: str = ""
    account_id: str = ""
    integrations: List[str] = []


class ReportStatus(str, Enum):
    """Outcome of validating one dashboard."""

    SUCCESS = "success"
    FAILED = "failed"
    TIMED_OUT = "timed_out"
    CANCELLED = "cancelled"


# ─────────────────────────────────────────────
# SUMMARY
# ─────────────────────────────────────────────


class PlatformBreakdown(BaseModel):
    """Per-platform counts."""

    platform: Platform
    ads: int = 0
    invalid: int = 0
    errors: int = 0
    warnings: int = 0


class ValidationSummary(BaseModel):
    """High-level numbers for one dashboard."""

    total_ads_checked: int = 0
    valid_ads: int = 0
    invalid_ads: int = 0
    errors: int = 0
    warnings: int = 0
    error_rate: float = 0.0  # % invalid of total
    campaigns: int = 0
    platforms: List[PlatformBreakdown] = []
    issue_counts: Dict[str, int] = {}
    generated_at: str = ""


# ─────────────────────────────────────────────
# EXPORT
# ─────────────────────────────────────────────


class ExportRow(BaseModel):
    """One creative as it appears in the downloadable table."""

    platform: str
    campaign_name: str
    campaign_id: str
    medium_name: str
    medium_id: str
    ad_name: str
    ad_id: str
    link: str
    track_params: str
    status: str  # "Valid" | "Invalid"
    issues: str = ""
    spend: Optional[float] = None
    is_active: bool = True


# ─────────────────────────────────────────────
# REPORTS
# ─────────────────────────────────────────────


class DashboardReport(BaseModel):
    """Everything the reporting layer needs for one dashboard.

    Independent of every other report in a bulk run.
    """

    dashboard_id: str
    dashboard_name: str = ""
    status: ReportStatus = ReportStatus.SUCCESS
    error: Optional[str] = None
    platforms: Dict[Platform, PlatformConfigs] = {}
    campaigns: List[CampaignGroup] = []
    summary: ValidationSummary = ValidationSummary()
    export_rows: List[ExportRow] = []

    @property
    def ok(self) -> bool:
        return self.status == ReportStatus.SUCCESS


class BulkReport(BaseModel):
    """Combined output of a bulk validation run."""

    generated_at: str = ""
    total_dashboards: int = 0
    succeeded: int = 0
    failed: int = 0
    reports: List[DashboardReport] = []
