"""UTMAudit — Advertising Platform Registry."""

from enum import Enum
from typing import Any, Dict, Optional


class Platform(str, Enum):
    """Advertising platforms whose creatives are audited."""

    FACEBOOK = "facebook"
    GOOGLE = "google"
    TIKTOK = "tiktok"
    PINTEREST = "pinterest"


DISPLAY_NAMES: Dict[Platform, str] = {
    Platform.FACEBOOK: "Facebook",
    Platform.GOOGLE: "Google",
    Platform.TIKTOK: "TikTok",
    Platform.PINTEREST: "Pinterest",
}

# Substring aliases, checked in order
_ALIASES = (
    ("meta", Platform.FACEBOOK),
    ("facebook", Platform.FACEBOOK),
    ("google", Platform.GOOGLE),
    ("tiktok", Platform.TIKTOK),
    ("pinterest", Platform.PINTEREST),
)


def normalize_platform(name: Any) -> Optional[Platform]:
    """Map a loose platform name ("Meta", "Google Ads", ...) to a Platform."""
    if isinstance(name, Platform):
        return name
    if not isinstance(name, str):
        return None
    normalized = name.strip().lower()
    for alias, platform in _ALIASES:
        if alias in normalized:
            return platform
    return None


def display_name(platform: Platform) -> str:
    """Human-readable platform name."""
    return DISPLAY_NAMES.get(platform, "Unknown")
