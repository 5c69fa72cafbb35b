"""UTMAudit — Validation Summary.

Headline numbers for one dashboard, computed over the groups the
operator is shown.
"""

from collections import Counter
from datetime import datetime, timezone
from typing import Dict, List

from utmaudit.core.platform_registry import Platform
from utmaudit.models.creative_models import CampaignGroup
from utmaudit.models.report_models import PlatformBreakdown, ValidationSummary


def summarize(groups: List[CampaignGroup]) -> ValidationSummary:
    """Compute totals, error rate and per-platform / per-issue counts."""
    breakdown: Dict[Platform, PlatformBreakdown] = {
        p: PlatformBreakdown(platform=p) for p in Platform
    }
    issues: Counter = Counter()

    total = valid = errors = warnings = 0
    for group in groups:
        pb = breakdown[group.platform]
        for ad in group.ads:
            total += 1
            pb.ads += 1
            if ad.verdict.is_valid:
                valid += 1
                continue
            pb.invalid += 1
            if ad.verdict.is_error:
                errors += 1
                pb.errors += 1
            else:
                warnings += 1
                pb.warnings += 1
            issues.update(code.value for code in ad.creative.messages)

    invalid = total - valid
    return ValidationSummary(
        total_ads_checked=total,
        valid_ads=valid,
        invalid_ads=invalid,
        errors=errors,
        warnings=warnings,
        error_rate=round(invalid / total * 100, 1) if total > 0 else 0.0,
        campaigns=len(groups),
        platforms=list(breakdown.values()),
        issue_counts=dict(issues),
        generated_at=datetime.now(timezone.utc).isoformat(),
    )
