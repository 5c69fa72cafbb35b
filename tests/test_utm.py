"""Unit tests for the UTM helpers and the issue/platform registries."""

import pytest

from utmaudit.core.issue_registry import IssueCode, get_issue, parse_issue_code
from utmaudit.core.platform_registry import Platform, display_name, normalize_platform
from utmaudit.core.utm import (
    compare_utms,
    link_has_utms,
    matches_required_pattern,
    parse_utm_string,
)

REQUIRED = (
    "utm_source=facebook&utm_campaign={{campaign.name}}|{{campaign.id}}"
    "&utm_medium=cpc_{{adset.name}}|{{adset.id}}&utm_content={{ad.name}}|{{ad.id}}"
)


class TestParse:
    def test_standard_keys(self):
        parsed = parse_utm_string("?utm_source=fb&utm_medium=cpc&other=1")
        assert parsed == {
            "utm_source": "fb",
            "utm_campaign": "",
            "utm_medium": "cpc",
            "utm_content": "",
            "utm_term": "",
        }

    def test_template_placeholders_survive(self):
        assert parse_utm_string(REQUIRED)["utm_campaign"] == "{{campaign.name}}|{{campaign.id}}"

    def test_none(self):
        assert set(parse_utm_string(None).values()) == {""}


class TestCompare:
    def test_mismatch_rows(self):
        rows = compare_utms("utm_source=facebook&utm_campaign=summer", REQUIRED)
        by_key = {r.key: r for r in rows}
        assert by_key["utm_source"].matches
        assert not by_key["utm_campaign"].matches
        assert by_key["utm_content"].found == ""
        assert "utm_term" not in by_key

    def test_pattern_match_is_exact_after_trim(self):
        assert matches_required_pattern(f"  {REQUIRED} ", REQUIRED)
        assert not matches_required_pattern("utm_source=facebook", REQUIRED)
        assert not matches_required_pattern("", "")

    @pytest.mark.parametrize(
        "url,expected",
        [
            ("https://example.com?utm_source=facebook&utm_campaign=launch", True),
            ("https://example.com/?UTM_SOURCE=", True),
            ("https://example.com/page?ref=1", False),
            ("", False),
            (None, False),
        ],
    )
    def test_link_has_utms(self, url, expected):
        assert link_has_utms(url) is expected


class TestRegistries:
    def test_parse_issue_code(self):
        assert parse_issue_code("UTM_IN_LINK_URL") is IssueCode.UTM_IN_LINK_URL
        assert parse_issue_code("nope") is IssueCode.UNKNOWN_ISSUE
        assert parse_issue_code(3) is IssueCode.UNKNOWN_ISSUE

    def test_advisory_codes(self):
        advisory = {code for code in IssueCode if get_issue(code).advisory}
        assert advisory == {
            IssueCode.CAMPAIGN_WITH_TRACKING_PARAMS,
            IssueCode.ADGROUP_WITH_TRACKING_PARAMS,
        }

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("Meta", Platform.FACEBOOK),
            ("facebook_ads", Platform.FACEBOOK),
            ("GOOGLE", Platform.GOOGLE),
            ("TikTok", Platform.TIKTOK),
            ("pinterest", Platform.PINTEREST),
            ("snapchat", None),
            (None, None),
        ],
    )
    def test_normalize_platform(self, name, expected):
        assert normalize_platform(name) == expected

    def test_display_name(self):
        assert display_name(Platform.TIKTOK) == "TikTok"
