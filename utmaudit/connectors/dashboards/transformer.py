"""UTMAudit — Raw Ads-Config → Creative Transformer.

Converts the backend's per-platform ads-config payload into Creative
models. Never raises on malformed records: bad values fall back to
"no data" and flow through validation like any other creative.
"""

import math
from typing import Any, Dict, List, Optional

from utmaudit.core.issue_registry import IssueCode, parse_issue_code
from utmaudit.core.platform_registry import Platform, normalize_platform
from utmaudit.models.creative_models import (
    Account,
    Ad,
    Campaign,
    Creative,
    Medium,
    PlatformConfigs,
)
from utmaudit.core.logging import get_logger

logger = get_logger("dashboards.transformer")


def _safe_float(value: Any) -> Optional[float]:
    """Convert a spend value to float; None when unknown."""
    if value is None or isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        logger.warning(f"Unparseable spend value {value!r}, treating as unknown")
        return None
    if not math.isfinite(result):
        logger.warning(f"Non-finite spend value {value!r}, treating as unknown")
        return None
    return result


def _safe_str(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _safe_bool(value: Any, default: bool = True) -> bool:
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() not in ("false", "0", "no", "")
    return bool(value)


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _level_fields(raw: Dict[str, Any], with_identity: bool = True) -> Dict[str, Any]:
    fields: Dict[str, Any] = {
        "track_params": raw.get("trackParams"),
        "suffix": raw.get("suffix"),
    }
    if with_identity:
        fields["id"] = _safe_str(raw.get("id"))
        fields["name"] = _safe_str(raw.get("name"))
    return fields


def _extract_messages(raw: Any) -> List[IssueCode]:
    """Parse issue codes, keeping unknown ones as UNKNOWN_ISSUE."""
    if not isinstance(raw, list):
        return []
    codes: List[IssueCode] = []
    for item in raw:
        code = parse_issue_code(item)
        if code is IssueCode.UNKNOWN_ISSUE and item != IssueCode.UNKNOWN_ISSUE.value:
            logger.warning(f"Unknown issue code {item!r}")
        codes.append(code)
    return codes


def transform_creative(raw: Dict[str, Any], platform: Platform) -> Creative:
    """Build one Creative from a raw ads-config record."""
    raw = _as_dict(raw)
    return Creative(
        platform=platform,
        account=Account(**_level_fields(_as_dict(raw.get("account")), False)),
        campaign=Campaign(**_level_fields(_as_dict(raw.get("campaign")))),
        medium=Medium(**_level_fields(_as_dict(raw.get("medium")))),
        ad=Ad(**_level_fields(_as_dict(raw.get("ad")))),
        link=_safe_str(raw.get("link")),
        preview_link=raw.get("preview_link") or None,
        spend=_safe_float(raw.get("spend")),
        is_active=_safe_bool(raw.get("isActive")),
        messages=_extract_messages(raw.get("messages")),
        track_params=raw.get("trackParams"),
    )


def _unwrap(value: Any) -> tuple[Optional[str], List[Any]]:
    """Accept either a bare list or a {recommendedUtms, configs} wrapper."""
    if isinstance(value, list):
        return None, value
    if isinstance(value, dict):
        configs = value.get("configs")
        recommended = value.get("recommendedUtms") or None
        return (
            _safe_str(recommended) if recommended else None,
            configs if isinstance(configs, list) else [],
        )
    return None, []


def transform_ads_configs(payload: Any) -> Dict[Platform, PlatformConfigs]:
    """Transform a full ads-config payload into per-platform creative lists.

    All four platforms are always present in the result, empty when the
    payload has nothing for them.
    """
    result: Dict[Platform, PlatformConfigs] = {
        p: PlatformConfigs(platform=p) for p in Platform
    }
    if not isinstance(payload, dict):
        logger.warning(f"Ads-config payload is {type(payload).__name__}, not a mapping")
        return result

    total = 0
    for key, value in payload.items():
        platform = normalize_platform(key)
        if platform is None:
            logger.warning(f"Skipping unknown platform key {key!r}")
            continue

        recommended, records = _unwrap(value)
        target = result[platform]
        if recommended and not target.recommended_utms:
            target.recommended_utms = recommended
        for record in records:
            if not isinstance(record, dict):
                logger.warning(f"Skipping non-object {platform.value} record")
                continue
            target.configs.append(transform_creative(record, platform))
            total += 1

    logger.info(f"Transformed {total} creatives across {len(result)} platforms")
    return result
