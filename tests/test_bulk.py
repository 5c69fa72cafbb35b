"""Tests for the single-dashboard pipeline and the bulk orchestrator.

Run with: pytest tests/test_bulk.py -v
"""

import asyncio

import pytest

from conftest import raw_record
from utmaudit.analyzer.bulk import BulkValidationRun, validate_all
from utmaudit.analyzer.pipeline import build_report, validate_dashboard
from utmaudit.connectors.dashboards.client import DashboardAPIError
from utmaudit.core.platform_registry import Platform
from utmaudit.models.creative_models import FilterOptions
from utmaudit.models.report_models import DashboardRef, ReportStatus


def _payload(prefix="x"):
    return {
        "facebook": [
            raw_record(ad_id=f"{prefix}-err", spend=10, messages=["MISSING_UTM_FIELD"]),
            raw_record(ad_id=f"{prefix}-ok", spend=10, ad_params="utm_source=facebook"),
        ],
        "google": {"recommendedUtms": "utm_source=google", "configs": []},
    }


class FakeSource:
    """Ads-config source with per-dashboard failures and delays."""

    def __init__(self, failing=(), slow=(), delay=0.0):
        self.failing = set(failing)
        self.slow = set(slow)
        self.delay = delay
        self.calls = []

    async def fetch_ads_configs(self, dashboard_id):
        self.calls.append(dashboard_id)
        if dashboard_id in self.slow:
            await asyncio.sleep(self.delay)
        if dashboard_id in self.failing:
            raise DashboardAPIError(f"boom {dashboard_id}", 500)
        return _payload(dashboard_id)


DASHBOARDS = [DashboardRef(id=str(i), name=f"Dashboard {i}") for i in (1, 2, 3)]


class TestBuildReport:
    def test_report_contents(self):
        report = build_report(DASHBOARDS[0], _payload())
        assert report.ok
        assert report.dashboard_name == "Dashboard 1"
        assert report.summary.errors == 1
        assert [row.ad_id for row in report.export_rows] == ["x-err"]

    def test_export_matches_visible_creatives(self):
        report = build_report(DASHBOARDS[0], _payload(), FilterOptions(show_valid_too=True))
        shown = [a.creative.ad.id for g in report.campaigns for a in g.ads]
        assert [row.ad_id for row in report.export_rows] == shown

    def test_platform_lists_are_unfiltered(self):
        report = build_report(DASHBOARDS[0], _payload())
        assert len(report.platforms[Platform.FACEBOOK].configs) == 2
        assert report.platforms[Platform.GOOGLE].recommended_utms == "utm_source=google"

    def test_invalid_ads_compared_with_recommended_utms(self):
        payload = {
            "google": {
                "recommendedUtms": "utm_source=google&utm_medium=cpc",
                "configs": [
                    raw_record(ad_id="g-bad", ad_params="utm_source=google&utm_medium=social",
                               messages=["INCORRECT_UTM_FORMAT"]),
                    raw_record(ad_id="g-ok", ad_params="utm_source=google&utm_medium=cpc"),
                ],
            },
        }
        report = build_report(DASHBOARDS[0], payload, FilterOptions.permissive())
        ads = {a.creative.ad.id: a for g in report.campaigns for a in g.ads}

        assert {c.key: (c.found, c.expected, c.matches) for c in ads["g-bad"].utm_comparisons} == {
            "utm_source": ("google", "google", True),
            "utm_medium": ("social", "cpc", False),
        }
        assert ads["g-ok"].utm_comparisons == []

    def test_default_pattern_without_recommendation(self):
        report = build_report(DASHBOARDS[0], _payload())
        (flagged,) = [a for g in report.campaigns for a in g.ads]

        assert [c.key for c in flagged.utm_comparisons] == [
            "utm_source", "utm_campaign", "utm_medium", "utm_content",
        ]
        assert all(c.found == "" and not c.matches for c in flagged.utm_comparisons)

    def test_malformed_payload_never_raises(self):
        report = build_report(DASHBOARDS[0], {"facebook": "garbage", "other": 1})
        assert report.ok
        assert report.campaigns == []
        assert report.summary.total_ads_checked == 0


@pytest.mark.asyncio
async def test_validate_dashboard_fetches_by_id():
    source = FakeSource()
    report = await validate_dashboard(source, DASHBOARDS[1])
    assert source.calls == ["2"]
    assert report.dashboard_id == "2"


class TestValidateAll:
    @pytest.mark.asyncio
    async def test_failure_is_isolated(self):
        bulk = await validate_all(FakeSource(failing={"2"}), DASHBOARDS, timeout=5)

        assert [r.dashboard_id for r in bulk.reports] == ["1", "2", "3"]
        assert bulk.succeeded == 2
        assert bulk.failed == 1

        first, second, third = bulk.reports
        assert first.ok and third.ok
        assert first.summary.total_ads_checked == 1
        assert third.export_rows[0].ad_id == "3-err"
        assert second.status == ReportStatus.FAILED
        assert "boom 2" in second.error
        assert second.campaigns == []

    @pytest.mark.asyncio
    async def test_timeout_is_isolated(self):
        source = FakeSource(slow={"3"}, delay=1.0)
        bulk = await validate_all(source, DASHBOARDS, timeout=0.05)
        statuses = [r.status for r in bulk.reports]
        assert statuses == [ReportStatus.SUCCESS, ReportStatus.SUCCESS, ReportStatus.TIMED_OUT]

    @pytest.mark.asyncio
    async def test_empty_dashboard_list(self):
        bulk = await validate_all(FakeSource(), [])
        assert bulk.reports == []
        assert bulk.total_dashboards == 0

    @pytest.mark.asyncio
    async def test_options_apply_to_every_dashboard(self):
        bulk = await validate_all(
            FakeSource(), DASHBOARDS, FilterOptions(show_valid_too=True), timeout=5
        )
        assert all(len(r.export_rows) == 2 for r in bulk.reports)


class TestCancellation:
    @pytest.mark.asyncio
    async def test_cancel_keeps_completed_reports(self):
        source = FakeSource(slow={"2", "3"}, delay=5.0)
        run = BulkValidationRun(source, DASHBOARDS, timeout=10)
        run.start()

        # Let the fast dashboard finish
        for _ in range(50):
            if run.completed:
                break
            await asyncio.sleep(0.01)

        run.cancel()
        reports = await run.wait()

        assert run.cancelled
        assert [r.status for r in reports] == [
            ReportStatus.SUCCESS,
            ReportStatus.CANCELLED,
            ReportStatus.CANCELLED,
        ]
        assert reports[0].summary.total_ads_checked == 1

    @pytest.mark.asyncio
    async def test_cancel_before_start_fetches_nothing(self):
        source = FakeSource()
        run = BulkValidationRun(source, DASHBOARDS, timeout=5)
        run.cancel()
        reports = await run.wait()

        assert source.calls == []
        assert [r.status for r in reports] == [ReportStatus.CANCELLED] * 3
        assert run.completed == []

    @pytest.mark.asyncio
    async def test_concurrency_cap(self):
        active = 0
        peak = 0

        class CountingSource:
            async def fetch_ads_configs(self, dashboard_id):
                nonlocal active, peak
                active += 1
                peak = max(peak, active)
                await asyncio.sleep(0.01)
                active -= 1
                return _payload(dashboard_id)

        refs = [DashboardRef(id=str(i)) for i in range(6)]
        bulk = await validate_all(CountingSource(), refs, timeout=5, max_concurrency=2)
        assert bulk.succeeded == 6
        assert peak <= 2
