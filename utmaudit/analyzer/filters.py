"""UTMAudit — Filter Pipeline.

Applies the display filters to campaign groups. Each group's ads are
filtered into a new group (the source is never mutated) and groups left
without ads are dropped, so campaigns never appear empty.

Predicates combine with AND:
- show_disabled=False      drops inactive ads
- show_non_spend=False     drops ads with zero or unknown spend
- show_no_utms_only=True   keeps only ads with no level-specific params
- show_valid_too=False     drops valid ads
- search_query             case-insensitive match on campaign/medium/ad name or id
"""

from typing import Callable, List

from utmaudit.models.creative_models import AuditedCreative, CampaignGroup, FilterOptions
from utmaudit.analyzer.aggregator import build_group, sort_campaigns
from utmaudit.core.logging import get_logger

logger = get_logger("analyzer.filters")

AdPredicate = Callable[[AuditedCreative], bool]


def matches_search(ad: AuditedCreative, query: str) -> bool:
    """Case-insensitive substring match against names and ids."""
    needle = query.strip().casefold()
    if not needle:
        return True
    c = ad.creative
    haystack = (
        c.campaign.name,
        c.campaign.id,
        c.ad.name,
        c.ad.id,
        c.medium.name,
        c.medium.id,
    )
    return any(needle in field.casefold() for field in haystack if field)


def build_predicates(options: FilterOptions) -> List[AdPredicate]:
    """Translate options into the list of active predicates."""
    predicates: List[AdPredicate] = []
    if not options.show_disabled:
        predicates.append(lambda ad: ad.is_active)
    if not options.show_non_spend:
        predicates.append(lambda ad: (ad.creative.spend or 0) != 0)
    if options.show_no_utms_only:
        predicates.append(lambda ad: not ad.creative.has_level_params)
    if not options.show_valid_too:
        predicates.append(lambda ad: not ad.verdict.is_valid)
    if options.search_query.strip():
        query = options.search_query
        predicates.append(lambda ad: matches_search(ad, query))
    return predicates


def filter_groups(
    groups: List[CampaignGroup], options: FilterOptions | None = None
) -> List[CampaignGroup]:
    """Filter campaign groups and return them in display order."""
    options = options or FilterOptions()
    predicates = build_predicates(options)

    result: List[CampaignGroup] = []
    for group in groups:
        kept = [ad for ad in group.ads if all(p(ad) for p in predicates)]
        if kept:
            result.append(build_group(group.platform, group.campaign_id, kept))

    before = sum(g.ad_count for g in groups)
    after = sum(g.ad_count for g in result)
    logger.info(
        f"Filtered {before} ads in {len(groups)} campaigns down to "
        f"{after} ads in {len(result)} campaigns"
    )
    return sort_campaigns(result)
