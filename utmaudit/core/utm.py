"""UTMAudit — UTM String Helpers.

Parsing and comparison aids used when debugging a flagged creative.
"""

from typing import Dict, List
from urllib.parse import parse_qs, urlsplit

from pydantic import BaseModel

UTM_KEYS = ["utm_source", "utm_campaign", "utm_medium", "utm_content", "utm_term"]

# Shown when a platform carries no recommended template
DEFAULT_PATTERN = (
    "utm_source=SOURCE&utm_medium=MEDIUM&utm_campaign=CAMPAIGN&utm_content=CONTENT"
)


class UtmComparison(BaseModel):
    """One parameter compared between a found and an expected string."""

    key: str
    found: str = ""
    expected: str = ""
    matches: bool = False


def parse_utm_string(utm_string: str | None) -> Dict[str, str]:
    """Parse a query-string-like UTM string into the standard keys."""
    text = (utm_string or "").strip()
    if text.startswith("?"):
        text = text[1:]
    params = parse_qs(text, keep_blank_values=True)
    return {key: params.get(key, [""])[0] for key in UTM_KEYS}


def compare_utms(found: str | None, expected: str | None) -> List[UtmComparison]:
    """Compare the standard UTM keys of two strings.

    Keys missing from both sides are omitted.
    """
    found_params = parse_utm_string(found)
    expected_params = parse_utm_string(expected)

    rows: List[UtmComparison] = []
    for key in UTM_KEYS:
        f, e = found_params[key], expected_params[key]
        if not f and not e:
            continue
        rows.append(UtmComparison(key=key, found=f, expected=e, matches=f == e))
    return rows


def matches_required_pattern(candidate: str | None, required: str | None) -> bool:
    """Exact match against the required pattern, ignoring outer whitespace."""
    candidate = (candidate or "").strip()
    if not candidate:
        return False
    return candidate == (required or "").strip()


def link_has_utms(url: str | None) -> bool:
    """True when a destination URL carries utm_* keys in its query string."""
    if not url:
        return False
    query = urlsplit(url).query
    return any(key.lower().startswith("utm_") for key in parse_qs(query, keep_blank_values=True))
