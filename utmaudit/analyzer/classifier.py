"""UTMAudit — Validation Classifier.

Classifies a creative as Valid, Error or Warning:
- no issues → valid, whatever the tracking configuration looks like
- issues + spend (+ active, under the default policy) → error
- any other invalid creative → warning
"""

from utmaudit.config import settings
from utmaudit.models.creative_models import (
    AuditedCreative,
    Creative,
    EffectiveParams,
    ErrorCountingPolicy,
    ParamLevel,
    Verdict,
)
from utmaudit.core.utm import DEFAULT_PATTERN, compare_utms
from utmaudit.analyzer.resolver import resolve

ACCOUNT_LEVEL_RECOMMENDATION = (
    "Tracking parameters are effective at {level} level. "
    "Set the tracking template at account level for consistency."
)
NO_LEVEL_RECOMMENDATION = (
    "No level-specific tracking parameters are set. "
    "Set the tracking template at account level for consistency."
)


def default_policy() -> ErrorCountingPolicy:
    """The error-counting policy selected by configuration."""
    if settings.error_requires_active:
        return ErrorCountingPolicy.SPEND_AND_ACTIVE
    return ErrorCountingPolicy.SPEND_ONLY


def classify(
    creative: Creative,
    effective: EffectiveParams,
    policy: ErrorCountingPolicy | None = None,
) -> Verdict:
    """Classify one creative. Exactly one of valid/error/warning is set."""
    policy = policy or default_policy()

    if not creative.messages:
        recommendation = None
        if effective.level == ParamLevel.NONE:
            recommendation = NO_LEVEL_RECOMMENDATION
        elif effective.level != ParamLevel.ACCOUNT:
            recommendation = ACCOUNT_LEVEL_RECOMMENDATION.format(
                level=effective.level.value
            )
        return Verdict(is_valid=True, recommendation=recommendation)

    is_error = (creative.spend or 0) > 0
    if policy == ErrorCountingPolicy.SPEND_AND_ACTIVE:
        is_error = is_error and creative.is_active
    return Verdict(is_valid=False, is_error=is_error, is_warning=not is_error)


def audit(
    creative: Creative,
    policy: ErrorCountingPolicy | None = None,
    expected_utms: str | None = None,
) -> AuditedCreative:
    """Resolve and classify a creative in one step.

    Invalid creatives also carry a per-key comparison of their effective
    params against ``expected_utms`` (or the default template).
    """
    effective = resolve(creative)
    verdict = classify(creative, effective, policy)
    comparisons = (
        []
        if verdict.is_valid
        else compare_utms(effective.value, expected_utms or DEFAULT_PATTERN)
    )
    return AuditedCreative(
        creative=creative,
        effective=effective,
        verdict=verdict,
        utm_comparisons=comparisons,
    )
