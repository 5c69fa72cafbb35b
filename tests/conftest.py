"""Shared factories for creative-level tests."""

import pytest

from utmaudit.core.issue_registry import IssueCode
from utmaudit.core.platform_registry import Platform
from utmaudit.models.creative_models import (
    Account,
    Ad,
    Campaign,
    Creative,
    ErrorCountingPolicy,
    Medium,
)


def make_creative(
    ad_id="ad1",
    campaign_id="c1",
    campaign_name="Campaign One",
    medium_id="m1",
    medium_name="Ad Set One",
    ad_name=None,
    platform=Platform.FACEBOOK,
    ad_params=None,
    medium_params=None,
    campaign_params=None,
    account_params=None,
    track_params=None,
    spend=None,
    is_active=True,
    messages=(),
    link="https://example.com",
):
    return Creative(
        platform=platform,
        account=Account(track_params=account_params),
        campaign=Campaign(id=campaign_id, name=campaign_name, track_params=campaign_params),
        medium=Medium(id=medium_id, name=medium_name, track_params=medium_params),
        ad=Ad(id=ad_id, name=ad_name or f"Ad {ad_id}", track_params=ad_params),
        link=link,
        spend=spend,
        is_active=is_active,
        messages=[IssueCode(m) for m in messages],
        track_params=track_params,
    )


@pytest.fixture
def creative_factory():
    return make_creative


@pytest.fixture
def strict_policy():
    return ErrorCountingPolicy.SPEND_AND_ACTIVE


def raw_record(
    ad_id="ad1",
    campaign_id="c1",
    campaign_name="Campaign One",
    spend=10,
    is_active=True,
    messages=None,
    ad_params="",
):
    """A creative record shaped like the backend's ads-config payload."""
    return {
        "account": {"trackParams": "", "suffix": ""},
        "campaign": {"id": campaign_id, "name": campaign_name, "suffix": ""},
        "medium": {"id": "m1", "name": "Ad Set One", "suffix": ""},
        "ad": {"id": ad_id, "name": f"Ad {ad_id}", "trackParams": ad_params, "suffix": ""},
        "link": "https://example.com/landing",
        "isLinkWithoutUtms": True,
        "isTrackParamsValid": not messages,
        "spend": spend,
        "isActive": is_active,
        "messages": messages or [],
    }
