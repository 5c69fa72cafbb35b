"""UTMAudit — Hierarchy Resolver.

Determines which level's tracking string is in effect for a creative.
Priority: Ad → Medium → Campaign → Account, then the flat fallback.
"""

from utmaudit.models.creative_models import Creative, EffectiveParams, ParamLevel

LEVEL_PRIORITY = (
    ParamLevel.AD,
    ParamLevel.MEDIUM,
    ParamLevel.CAMPAIGN,
    ParamLevel.ACCOUNT,
)


def resolve(creative: Creative) -> EffectiveParams:
    """Return the effective tracking string and the level that produced it.

    Only the first set level counts; lower-priority values stay on the
    creative for display but never become effective. The flat
    ``track_params`` field is used only when no level is set, and its
    level is reported as NONE since its origin is unknown.
    """
    levels = {
        ParamLevel.AD: creative.ad,
        ParamLevel.MEDIUM: creative.medium,
        ParamLevel.CAMPAIGN: creative.campaign,
        ParamLevel.ACCOUNT: creative.account,
    }
    for level in LEVEL_PRIORITY:
        value = levels[level].track_params
        if value:
            return EffectiveParams(value=value, level=level)

    if creative.track_params:
        return EffectiveParams(value=creative.track_params, level=ParamLevel.NONE)
    return EffectiveParams()
