"""UTMAudit — Bulk Validation Orchestrator.

Runs the single-dashboard pipeline across many dashboards concurrently.
Each dashboard is isolated: a failed, timed-out or cancelled fetch turns
into that dashboard's error report and never affects the others.
"""

import asyncio
from datetime import datetime, timezone
from typing import Dict, List, Optional

from utmaudit.config import settings
from utmaudit.models.creative_models import ErrorCountingPolicy, FilterOptions
from utmaudit.models.report_models import (
    BulkReport,
    DashboardRef,
    DashboardReport,
    ReportStatus,
)
from utmaudit.analyzer.pipeline import AdsConfigSource, validate_dashboard
from utmaudit.core.logging import get_logger

logger = get_logger("analyzer.bulk")


def failure_report(
    ref: DashboardRef, status: ReportStatus, error: str
) -> DashboardReport:
    """An isolated error entry for one dashboard."""
    return DashboardReport(
        dashboard_id=ref.id,
        dashboard_name=ref.name,
        status=status,
        error=error,
    )


class BulkValidationRun:
    """A cancelable bulk run over a fixed list of dashboards.

    Reports are kept per position in ``dashboards``, so completed
    reports survive a cancel and duplicate ids stay distinct.
    """

    def __init__(
        self,
        source: AdsConfigSource,
        dashboards: List[DashboardRef],
        options: FilterOptions | None = None,
        policy: ErrorCountingPolicy | None = None,
        timeout: float | None = None,
        max_concurrency: int | None = None,
    ):
        self.source = source
        self.dashboards = list(dashboards)
        self.options = options or FilterOptions()
        self.policy = policy
        self.timeout = settings.dashboard_timeout if timeout is None else timeout
        self._semaphore = asyncio.Semaphore(
            max_concurrency or settings.bulk_max_concurrency
        )
        self._reports: Dict[int, DashboardReport] = {}
        self._tasks: List[asyncio.Task] = []
        self.cancelled = False

    # ── Lifecycle ──

    def start(self) -> None:
        """Schedule one task per dashboard. Must run inside an event loop."""
        if self._tasks:
            return
        if self.cancelled:
            logger.warning("Bulk validation cancelled before start, nothing fetched")
            return
        self._tasks = [
            asyncio.create_task(self._run_one(index, ref))
            for index, ref in enumerate(self.dashboards)
        ]
        logger.info(f"Bulk validation started for {len(self._tasks)} dashboards")

    def cancel(self) -> None:
        """Abort every dashboard that has not finished yet."""
        self.cancelled = True
        pending = [t for t in self._tasks if not t.done()]
        for task in pending:
            task.cancel()
        logger.warning(f"Bulk validation cancelled with {len(pending)} dashboards pending")

    async def wait(self) -> List[DashboardReport]:
        """Wait for every dashboard and return reports in request order."""
        self.start()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        return self.reports

    @property
    def reports(self) -> List[DashboardReport]:
        """Reports in request order; unfinished dashboards show as cancelled."""
        return [
            self._reports.get(index)
            or failure_report(ref, ReportStatus.CANCELLED, "Validation cancelled")
            for index, ref in enumerate(self.dashboards)
        ]

    @property
    def completed(self) -> List[DashboardReport]:
        """Reports that finished so far, whatever their status."""
        return [self._reports[i] for i in sorted(self._reports)]

    # ── Per-dashboard Unit of Work ──

    async def _run_one(self, index: int, ref: DashboardRef) -> DashboardReport:
        extra = {"dashboard_id": ref.id}
        try:
            async with self._semaphore:
                report = await asyncio.wait_for(
                    validate_dashboard(self.source, ref, self.options, self.policy),
                    timeout=self.timeout,
                )
        except asyncio.TimeoutError:
            logger.error(
                f"Dashboard {ref.id} timed out after {self.timeout}s", extra=extra
            )
            report = failure_report(
                ref,
                ReportStatus.TIMED_OUT,
                f"Timed out after {self.timeout}s",
            )
        except asyncio.CancelledError:
            self._reports[index] = failure_report(
                ref, ReportStatus.CANCELLED, "Validation cancelled"
            )
            raise
        except Exception as e:
            logger.error(f"Dashboard {ref.id} failed: {e}", extra=extra)
            report = failure_report(ref, ReportStatus.FAILED, str(e) or type(e).__name__)

        self._reports[index] = report
        return report


def build_bulk_report(reports: List[DashboardReport]) -> BulkReport:
    """Combine per-dashboard reports into one bulk report."""
    succeeded = sum(1 for r in reports if r.ok)
    return BulkReport(
        generated_at=datetime.now(timezone.utc).isoformat(),
        total_dashboards=len(reports),
        succeeded=succeeded,
        failed=len(reports) - succeeded,
        reports=reports,
    )


async def validate_all(
    source: AdsConfigSource,
    dashboards: List[DashboardRef],
    options: FilterOptions | None = None,
    policy: ErrorCountingPolicy | None = None,
    timeout: Optional[float] = None,
    max_concurrency: Optional[int] = None,
) -> BulkReport:
    """Validate every dashboard concurrently with per-dashboard isolation."""
    run = BulkValidationRun(
        source, dashboards, options, policy, timeout, max_concurrency
    )
    reports = await run.wait()
    bulk = build_bulk_report(reports)
    logger.info(
        f"Bulk validation complete: {bulk.succeeded} succeeded, {bulk.failed} failed"
    )
    return bulk
