"""UTMAudit — Dashboard Backend Endpoints.

Fetch functions for each backend resource the validator needs.
"""

from typing import Any, Dict, List

from utmaudit.config import settings
from utmaudit.connectors.dashboards.client import DashboardClient
from utmaudit.models.report_models import DashboardRef
from utmaudit.core.logging import get_logger

logger = get_logger("dashboards.endpoints")


def _records(result: Any) -> List[Dict[str, Any]]:
    """Unwrap list responses that may arrive bare or under a data key."""
    if isinstance(result, dict):
        for key in ("data", "dashboards"):
            if isinstance(result.get(key), list):
                result = result[key]
                break
    if not isinstance(result, list):
        return []
    return [r for r in result if isinstance(r, dict)]


class DashboardEndpoints:
    """Fetch raw data for dashboards from the backend."""

    def __init__(self, client: DashboardClient):
        self.client = client

    # ── Dashboards ──

    async def list_dashboards(self) -> List[DashboardRef]:
        """Fetch the dashboards visible to the session's account."""
        params = {}
        if self.client.session:
            params["accountId"] = self.client.session.account_id
        result = await self.client.request("GET", settings.dashboards_path, params)

        dashboards = [
            DashboardRef(
                id=str(raw.get("id", "")),
                name=str(raw.get("name") or ""),
                account_id=str(raw.get("accountId") or ""),
                integrations=[
                    str(i) for i in raw.get("integrations") or [] if i is not None
                ],
            )
            for raw in _records(result)
            if raw.get("id") is not None
        ]
        logger.info(f"Fetched {len(dashboards)} dashboards")
        return dashboards

    # ── Ads Configs ──

    async def fetch_ads_configs(self, dashboard_id: str) -> Dict[str, Any]:
        """Fetch the raw per-platform ads-config payload of one dashboard."""
        path = settings.ads_configs_path.format(dashboard_id=dashboard_id)
        result = await self.client.request("GET", path)
        if not isinstance(result, dict):
            logger.warning(
                f"Ads-config payload for dashboard {dashboard_id} is not an object",
                extra={"dashboard_id": dashboard_id},
            )
            return {}
        return result
