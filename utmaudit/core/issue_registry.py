"""UTMAudit — Issue Code Registry.

The closed set of issue codes a creative can carry, shared by the
transformer, the classifier and the reporting layer. Any code outside
the taxonomy is folded into UNKNOWN_ISSUE so it still counts against
the creative instead of silently disappearing.
"""

from enum import Enum
from typing import Any, Dict


class IssueCode(str, Enum):
    """Tracking-parameter problems reported per creative."""

    MISSING_UTM_FIELD = "MISSING_UTM_FIELD"
    INCORRECT_UTM_FORMAT = "INCORRECT_UTM_FORMAT"
    UTM_IN_LINK_URL = "UTM_IN_LINK_URL"
    CAMPAIGN_WITH_TRACKING_PARAMS = "CAMPAIGN_WITH_TRACKING_PARAMS"
    ADGROUP_WITH_TRACKING_PARAMS = "ADGROUP_WITH_TRACKING_PARAMS"
    UNKNOWN_ISSUE = "UNKNOWN_ISSUE"


class IssueDefinition:
    """Describes a single issue code."""

    def __init__(
        self, code: IssueCode, title: str, description: str, advisory: bool = False
    ):
        self.code = code
        self.title = title
        self.description = description
        self.advisory = advisory

    def __repr__(self) -> str:
        return f"<Issue {self.code.value}{' (advisory)' if self.advisory else ''}>"


# ─────────────────────────────────────────────
# ISSUE TAXONOMY — Canonical Registry
# ─────────────────────────────────────────────

ISSUES: Dict[IssueCode, IssueDefinition] = {
    IssueCode.MISSING_UTM_FIELD: IssueDefinition(
        IssueCode.MISSING_UTM_FIELD,
        "Missing UTM Field",
        "The tracking-parameter field is absent or empty",
    ),
    IssueCode.INCORRECT_UTM_FORMAT: IssueDefinition(
        IssueCode.INCORRECT_UTM_FORMAT,
        "Incorrect UTM Format",
        "UTM parameters do not match the required pattern",
    ),
    IssueCode.UTM_IN_LINK_URL: IssueDefinition(
        IssueCode.UTM_IN_LINK_URL,
        "UTM in Link URL",
        "UTM parameters found in the destination URL instead of the tracking field",
    ),
    # Advisory: set higher than recommended, still makes the creative invalid
    IssueCode.CAMPAIGN_WITH_TRACKING_PARAMS: IssueDefinition(
        IssueCode.CAMPAIGN_WITH_TRACKING_PARAMS,
        "Campaign With Tracking Params",
        "Tracking parameters are configured at campaign level",
        advisory=True,
    ),
    IssueCode.ADGROUP_WITH_TRACKING_PARAMS: IssueDefinition(
        IssueCode.ADGROUP_WITH_TRACKING_PARAMS,
        "Ad Group With Tracking Params",
        "Tracking parameters are configured at ad group / ad set level",
        advisory=True,
    ),
    IssueCode.UNKNOWN_ISSUE: IssueDefinition(
        IssueCode.UNKNOWN_ISSUE,
        "Unknown Error",
        "Unknown validation error",
    ),
}


# ─────────────────────────────────────────────
# HELPERS
# ─────────────────────────────────────────────

_BY_VALUE = {code.value: code for code in IssueCode}


def get_issue(code: IssueCode) -> IssueDefinition:
    """Look up an issue definition by code."""
    return ISSUES[code]


def parse_issue_code(raw: Any) -> IssueCode:
    """Map a raw issue string onto the taxonomy.

    Matching is case-insensitive and ignores surrounding whitespace.
    Anything unrecognised becomes UNKNOWN_ISSUE.
    """
    if isinstance(raw, IssueCode):
        return raw
    if not isinstance(raw, str):
        return IssueCode.UNKNOWN_ISSUE
    return _BY_VALUE.get(raw.strip().upper(), IssueCode.UNKNOWN_ISSUE)

