"""UTMAudit — Validation API Routes."""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from utmaudit.connectors.dashboards.client import DashboardAPIError
from utmaudit.connectors.dashboards.endpoints import DashboardEndpoints
from utmaudit.core.utm import (
    UtmComparison,
    compare_utms,
    link_has_utms,
    matches_required_pattern,
)
from utmaudit.models.creative_models import FilterOptions
from utmaudit.models.report_models import BulkReport, DashboardRef, DashboardReport
from utmaudit.analyzer.pipeline import build_report, validate_dashboard
from utmaudit.analyzer.bulk import validate_all
from utmaudit.api.deps import get_endpoints
from utmaudit.core.logging import get_logger

logger = get_logger("api.validation")

router = APIRouter(tags=["Validation"])


# ── Request / Response Models ──


class BulkValidateRequest(BaseModel):
    """Request body for POST /validate-all."""

    dashboard_ids: Optional[List[str]] = None
    """Restrict the run to these dashboards. All dashboards when omitted."""
    options: FilterOptions = FilterOptions()


class PayloadValidateRequest(BaseModel):
    """Request body for POST /validate."""

    payload: Dict[str, Any]
    """Ads-config payload keyed by platform (facebook, google, tiktok, pinterest)."""
    dashboard_id: str = "upload"
    dashboard_name: str = ""
    options: FilterOptions = FilterOptions()

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "payload": {
                        "facebook": {
                            "recommendedUtms": "utm_source=facebook&utm_medium=cpc",
                            "configs": [],
                        },
                        "google": [],
                    },
                    "options": {"show_valid_too": True},
                }
            ]
        }
    }


class UtmCompareRequest(BaseModel):
    found: str = ""
    expected: str = ""
    link: str = ""


class UtmCompareResponse(BaseModel):
    matches_pattern: bool
    comparisons: List[UtmComparison]
    link_has_utms: bool = False


# ── Endpoints ──


@router.get("/dashboards", response_model=List[DashboardRef])
async def list_dashboards(endpoints: DashboardEndpoints = Depends(get_endpoints)):
    """List the dashboards available to the session's account."""
    try:
        return await endpoints.list_dashboards()
    except DashboardAPIError as e:
        logger.error(f"Listing dashboards failed: {e}")
        raise HTTPException(status_code=502, detail=f"Backend error: {str(e)}")


@router.post("/dashboards/{dashboard_id}/validate", response_model=DashboardReport)
async def validate_one(
    dashboard_id: str,
    options: Optional[FilterOptions] = None,
    name: str = "",
    endpoints: DashboardEndpoints = Depends(get_endpoints),
):
    """Validate the tracking parameters of a single dashboard."""
    ref = DashboardRef(id=dashboard_id, name=name)
    try:
        return await validate_dashboard(endpoints, ref, options)
    except DashboardAPIError as e:
        logger.error(
            f"Validation failed for dashboard {dashboard_id}: {e}",
            extra={"dashboard_id": dashboard_id},
        )
        raise HTTPException(status_code=502, detail=f"Backend error: {str(e)}")


@router.post("/validate-all", response_model=BulkReport)
async def validate_every_dashboard(
    request: BulkValidateRequest,
    endpoints: DashboardEndpoints = Depends(get_endpoints),
):
    """Validate all (or the selected) dashboards concurrently.

    A dashboard that fails shows up as an error entry; the rest still
    return their reports.
    """
    try:
        dashboards = await endpoints.list_dashboards()
    except DashboardAPIError as e:
        logger.error(f"Listing dashboards failed: {e}")
        raise HTTPException(status_code=502, detail=f"Backend error: {str(e)}")

    if request.dashboard_ids is not None:
        by_id = {d.id: d for d in dashboards}
        dashboards = [
            by_id.get(dashboard_id) or DashboardRef(id=dashboard_id)
            for dashboard_id in request.dashboard_ids
        ]

    return await validate_all(endpoints, dashboards, request.options)


@router.post("/validate", response_model=DashboardReport)
async def validate_payload(request: PayloadValidateRequest):
    """Validate an ads-config payload supplied in the request body."""
    ref = DashboardRef(id=request.dashboard_id, name=request.dashboard_name)
    return build_report(ref, request.payload, request.options)


@router.post("/utm/compare", response_model=UtmCompareResponse)
async def compare(request: UtmCompareRequest):
    """Compare a found UTM string against the expected one."""
    return UtmCompareResponse(
        matches_pattern=matches_required_pattern(request.found, request.expected),
        comparisons=compare_utms(request.found, request.expected),
        link_has_utms=link_has_utms(request.link),
    )
