"""UTMAudit — Campaign Aggregator.

Groups audited creatives by (platform, campaign id) and computes the
per-campaign roll-up. Groups are always built fresh from their ads.
"""

from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Tuple

from utmaudit.core.platform_registry import Platform
from utmaudit.models.creative_models import (
    AuditedCreative,
    CampaignGroup,
    Creative,
    ErrorCountingPolicy,
    PlatformConfigs,
)
from utmaudit.analyzer.classifier import audit
from utmaudit.core.logging import get_logger

logger = get_logger("analyzer.aggregator")


# ─────────────────────────────────────────────
# ORDERING
# ─────────────────────────────────────────────


def ad_sort_key(ad: AuditedCreative) -> tuple:
    """Active first, then errors, then warnings, then most issues."""
    return (
        not ad.is_active,
        not ad.verdict.is_error,
        not ad.verdict.is_warning,
        -ad.creative.issue_count,
    )


def campaign_sort_key(group: CampaignGroup) -> tuple:
    """Active first, then most errors, then highest spend, then name."""
    return (
        not group.is_campaign_active,
        -group.error_count,
        -group.total_spend,
        group.campaign_name.casefold(),
    )


def sort_ads(ads: Iterable[AuditedCreative]) -> List[AuditedCreative]:
    return sorted(ads, key=ad_sort_key)


def sort_campaigns(groups: Iterable[CampaignGroup]) -> List[CampaignGroup]:
    return sorted(groups, key=campaign_sort_key)


def build_group(
    platform: Platform, campaign_id: str, ads: Iterable[AuditedCreative]
) -> CampaignGroup:
    """Build a group whose ads are in display order."""
    return CampaignGroup.from_ads(platform, campaign_id, sort_ads(ads))


# ─────────────────────────────────────────────
# AGGREGATION
# ─────────────────────────────────────────────


def aggregate(
    creatives: List[Creative],
    platform: Optional[Platform] = None,
    policy: ErrorCountingPolicy | None = None,
    expected_utms: Optional[str] = None,
) -> List[CampaignGroup]:
    """Partition creatives into campaign groups.

    When ``platform`` is given, creatives of other platforms are skipped.
    ``expected_utms`` is the template invalid ads are compared against.
    A repeated ad id within a campaign keeps the first record seen so its
    spend is not counted twice.
    """
    partitions: Dict[Tuple[Platform, str], List[AuditedCreative]] = defaultdict(list)
    seen_ads: set[Tuple[Platform, str, str]] = set()
    duplicates = 0

    for creative in creatives:
        if platform is not None and creative.platform != platform:
            logger.warning(
                f"Skipping {creative.platform.value} creative {creative.ad.id} "
                f"while aggregating {platform.value}"
            )
            continue

        key = (creative.platform, creative.campaign.id)
        ad_id = creative.ad.id
        if ad_id:
            ad_key = (creative.platform, creative.campaign.id, ad_id)
            if ad_key in seen_ads:
                duplicates += 1
                continue
            seen_ads.add(ad_key)

        partitions[key].append(audit(creative, policy, expected_utms))

    if duplicates:
        logger.warning(f"Dropped {duplicates} duplicate ad records")

    groups = sort_campaigns(
        build_group(p, campaign_id, ads) for (p, campaign_id), ads in partitions.items()
    )
    logger.info(
        f"Aggregated {sum(g.ad_count for g in groups)} ads into {len(groups)} campaigns"
    )
    return groups


def aggregate_platforms(
    platforms: Dict[Platform, PlatformConfigs],
    policy: ErrorCountingPolicy | None = None,
) -> List[CampaignGroup]:
    """Aggregate every platform of a dashboard into one ordered list."""
    groups: List[CampaignGroup] = []
    for platform in Platform:
        configs = platforms.get(platform)
        if configs and configs.configs:
            groups.extend(
                aggregate(configs.configs, platform, policy, configs.recommended_utms)
            )
    return sort_campaigns(groups)
