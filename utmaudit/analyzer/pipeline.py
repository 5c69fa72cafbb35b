"""UTMAudit — Single-Dashboard Validation Pipeline.

Runs the full data flow for one dashboard:
  fetch → transform → resolve → classify → aggregate → filter → summary → export

Everything after the fetch is synchronous and free of side effects.
"""

import time
from typing import Any, Dict, Protocol

from utmaudit.models.creative_models import ErrorCountingPolicy, FilterOptions
from utmaudit.models.report_models import DashboardRef, DashboardReport
from utmaudit.connectors.dashboards.transformer import transform_ads_configs
from utmaudit.analyzer.aggregator import aggregate_platforms
from utmaudit.analyzer.filters import filter_groups
from utmaudit.analyzer.summary import summarize
from utmaudit.analyzer.export import export_rows
from utmaudit.core.logging import get_logger

logger = get_logger("analyzer.pipeline")


class AdsConfigSource(Protocol):
    """Anything that can fetch a dashboard's raw ads-config payload."""

    async def fetch_ads_configs(self, dashboard_id: str) -> Dict[str, Any]: ...


def build_report(
    ref: DashboardRef,
    payload: Any,
    options: FilterOptions | None = None,
    policy: ErrorCountingPolicy | None = None,
) -> DashboardReport:
    """Build a dashboard report from an already-fetched payload."""
    options = options or FilterOptions()

    platforms = transform_ads_configs(payload)
    groups = aggregate_platforms(platforms, policy)
    visible = filter_groups(groups, options)

    report = DashboardReport(
        dashboard_id=ref.id,
        dashboard_name=ref.name,
        platforms=platforms,
        campaigns=visible,
        summary=summarize(visible),
        export_rows=export_rows(visible),
    )
    logger.info(
        f"Dashboard {ref.id}: {report.summary.total_ads_checked} ads shown, "
        f"{report.summary.errors} errors, {report.summary.warnings} warnings",
        extra={"dashboard_id": ref.id},
    )
    return report


async def validate_dashboard(
    source: AdsConfigSource,
    ref: DashboardRef,
    options: FilterOptions | None = None,
    policy: ErrorCountingPolicy | None = None,
) -> DashboardReport:
    """Fetch one dashboard's ads configs and build its report."""
    started = time.perf_counter()
    payload = await source.fetch_ads_configs(ref.id)
    duration_ms = round((time.perf_counter() - started) * 1000, 1)
    logger.info(
        f"Fetched ads configs for dashboard {ref.id}",
        extra={"dashboard_id": ref.id, "duration_ms": duration_ms},
    )
    return build_report(ref, payload, options, policy)
