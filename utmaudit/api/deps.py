"""UTMAudit — Shared API Dependencies."""

from typing import AsyncIterator, Optional

from fastapi import Depends, Header, HTTPException

from utmaudit.connectors.dashboards.client import DashboardClient, DashboardSession
from utmaudit.connectors.dashboards.endpoints import DashboardEndpoints


def get_dashboard_session(
    authorization: Optional[str] = Header(None),
    x_account_id: Optional[str] = Header(None),
) -> DashboardSession:
    """Build the session from the request headers."""
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise HTTPException(status_code=401, detail="Missing bearer token")
    if not x_account_id:
        raise HTTPException(status_code=401, detail="Missing X-Account-Id header")
    return DashboardSession(token=token.strip(), account_id=x_account_id)


async def get_endpoints(
    session: DashboardSession = Depends(get_dashboard_session),
) -> AsyncIterator[DashboardEndpoints]:
    """Dependency — yields backend endpoints bound to the caller's session."""
    client = DashboardClient(session=session)
    try:
        yield DashboardEndpoints(client)
    finally:
        await client.close()
