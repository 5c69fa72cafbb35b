"""UTMAudit — Creative & Campaign Models.

A Creative is one ad with its four nesting levels (account, campaign,
medium, ad). Every derived structure here is recomputed from Creatives
on each request; nothing is persisted or mutated in place.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from utmaudit.core.issue_registry import IssueCode
from utmaudit.core.platform_registry import Platform
from utmaudit.core.utm import UtmComparison


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        value = str(value)
    return value if value.strip() else None


# ─────────────────────────────────────────────
# LEVELS
# ─────────────────────────────────────────────


class ParamLevel(str, Enum):
    """Where an effective tracking string came from."""

    AD = "ad"
    MEDIUM = "medium"
    CAMPAIGN = "campaign"
    ACCOUNT = "account"
    NONE = "none"


class LevelConfig(BaseModel):
    """Tracking configuration carried by one nesting level."""

    track_params: Optional[str] = None
    suffix: Optional[str] = None

    @field_validator("track_params", "suffix", mode="before")
    @classmethod
    def normalize_blank(cls, value):
        return _blank_to_none(value)


class Account(LevelConfig):
    """Account level. Carries no id or name in the source data."""


class Campaign(LevelConfig):
    id: str = ""
    name: str = ""


class Medium(LevelConfig):
    """Ad set (Facebook, TikTok) or ad group (Google, Pinterest)."""

    id: str = ""
    name: str = ""


class Ad(LevelConfig):
    id: str = ""
    name: str = ""


# ─────────────────────────────────────────────
# CREATIVE
# ─────────────────────────────────────────────


class Creative(BaseModel):
    """One advertisement record with all its level associations."""

    platform: Platform
    account: Account = Field(default_factory=Account)
    campaign: Campaign = Field(default_factory=Campaign)
    medium: Medium = Field(default_factory=Medium)
    ad: Ad = Field(default_factory=Ad)
    link: str = ""
    preview_link: Optional[str] = None
    spend: Optional[float] = None  # None = no known spend
    is_active: bool = True
    messages: List[IssueCode] = []
    track_params: Optional[str] = None  # flat fallback, level unknown

    @field_validator("track_params", "preview_link", mode="before")
    @classmethod
    def normalize_blank(cls, value):
        return _blank_to_none(value)

    @property
    def issue_count(self) -> int:
        return len(self.messages)

    @property
    def has_level_params(self) -> bool:
        """True when any of the four levels carries a tracking string."""
        return any(
            level.track_params
            for level in (self.ad, self.medium, self.campaign, self.account)
        )


class PlatformConfigs(BaseModel):
    """All creatives of one platform for one dashboard."""

    platform: Platform
    recommended_utms: Optional[str] = None
    configs: List[Creative] = []


# ─────────────────────────────────────────────
# DERIVED — Resolution & Classification
# ─────────────────────────────────────────────


class EffectiveParams(BaseModel):
    """The tracking string actually in effect and the level it came from."""

    value: Optional[str] = None
    level: ParamLevel = ParamLevel.NONE


class ErrorCountingPolicy(str, Enum):
    """Which invalid creatives count as errors rather than warnings."""

    SPEND_ONLY = "spend_only"
    SPEND_AND_ACTIVE = "spend_and_active"


class Verdict(BaseModel):
    """Validation outcome for one creative. Exactly one flag is set."""

    is_valid: bool
    is_error: bool = False
    is_warning: bool = False
    recommendation: Optional[str] = None


class AuditedCreative(BaseModel):
    """A creative together with its effective params and verdict."""

    creative: Creative
    effective: EffectiveParams
    verdict: Verdict
    # Per-key comparison against the expected template; invalid ads only
    utm_comparisons: List[UtmComparison] = []

    @property
    def platform(self) -> Platform:
        return self.creative.platform

    @property
    def is_active(self) -> bool:
        return self.creative.is_active

    @property
    def spend(self) -> float:
        return self.creative.spend or 0.0


# ─────────────────────────────────────────────
# AGGREGATE — Campaign groups
# ─────────────────────────────────────────────


class CampaignGroup(BaseModel):
    """All creatives sharing (platform, campaign id)."""

    platform: Platform
    campaign_id: str
    campaign_name: str = ""
    ads: List[AuditedCreative] = []
    ad_count: int = 0
    error_count: int = 0
    warning_count: int = 0
    total_spend: float = 0.0
    is_campaign_active: bool = False

    @classmethod
    def from_ads(
        cls, platform: Platform, campaign_id: str, ads: List[AuditedCreative]
    ) -> "CampaignGroup":
        """Build a group with every derived attribute computed from ``ads``."""
        return cls(
            platform=platform,
            campaign_id=campaign_id,
            campaign_name=ads[0].creative.campaign.name if ads else "",
            ads=list(ads),
            ad_count=len(ads),
            error_count=sum(1 for a in ads if a.verdict.is_error),
            warning_count=sum(1 for a in ads if a.verdict.is_warning),
            total_spend=sum(a.spend for a in ads),
            is_campaign_active=any(a.is_active for a in ads),
        )


# ─────────────────────────────────────────────
# FILTERS
# ─────────────────────────────────────────────


class FilterOptions(BaseModel):
    """Display filters. Defaults give the error/warning-focused view."""

    show_disabled: bool = False
    show_non_spend: bool = False
    show_no_utms_only: bool = False
    show_valid_too: bool = False
    search_query: str = ""

    @classmethod
    def permissive(cls) -> "FilterOptions":
        """Options under which nothing is filtered out."""
        return cls(
            show_disabled=True,
            show_non_spend=True,
            show_no_utms_only=False,
            show_valid_too=True,
            search_query="",
        )

