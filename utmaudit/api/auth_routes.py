"""UTMAudit — Authentication Routes.

Credentials are exchanged with the dashboard backend server-side; the
backend issues the token. No signing secret lives in this service.
"""

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from utmaudit.connectors.dashboards.client import (
    AuthenticationError,
    DashboardAPIError,
    DashboardClient,
)
from utmaudit.core.logging import get_logger

logger = get_logger("api.auth")

router = APIRouter(prefix="/auth", tags=["Auth"])


class LoginRequest(BaseModel):
    account_id: str
    password: str


class LoginResponse(BaseModel):
    token: str
    account_id: str


@router.post("/login", response_model=LoginResponse)
async def login(request: LoginRequest):
    """Exchange account credentials for a session token."""
    client = DashboardClient()
    try:
        session = await client.authenticate(request.account_id, request.password)
        return LoginResponse(token=session.token, account_id=session.account_id)
    except AuthenticationError as e:
        logger.warning(f"Login rejected for account {request.account_id}: {e}")
        raise HTTPException(status_code=401, detail="Authentication failed")
    except DashboardAPIError as e:
        raise HTTPException(status_code=502, detail=f"Backend unavailable: {str(e)}")
    finally:
        await client.close()
