"""UTMAudit — Dashboard Backend Client.

Handles the session, retry logic and rate limiting for calls to the
dashboard backend. The session is an explicit object handed to the
client; nothing is kept in process-wide state.
"""

import asyncio
from typing import Any, Dict, Optional

import httpx
from pydantic import BaseModel

from utmaudit.config import settings
from utmaudit.core.logging import get_logger

logger = get_logger("dashboards.client")


class DashboardAPIError(Exception):
    """Raised when the dashboard backend returns an error."""

    def __init__(self, message: str, status_code: int = 0, error_code: int = 0):
        self.status_code = status_code
        self.error_code = error_code
        super().__init__(message)


class AuthenticationError(DashboardAPIError):
    """Raised when the credential exchange is rejected."""


class DashboardSession(BaseModel):
    """Opaque backend token plus the account it was issued for."""

    token: str
    account_id: str

    model_config = {"frozen": True}


class DashboardClient:
    """Async HTTP client for the dashboard backend."""

    def __init__(
        self,
        session: DashboardSession | None = None,
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        max_retries: int | None = None,
        retry_base_delay: float | None = None,
    ):
        self.session = session
        self.base_url = (base_url or settings.api_base).rstrip("/")
        self.max_retries = max_retries or settings.max_retries
        self.retry_base_delay = (
            settings.retry_base_delay if retry_base_delay is None else retry_base_delay
        )
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=settings.request_timeout, transport=self._transport
            )
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def __aenter__(self) -> "DashboardClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.session:
            headers["Authorization"] = f"Bearer {self.session.token}"
            headers["X-Account-Id"] = self.session.account_id
        return headers

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    # ── Core Request Method ──

    async def request(
        self,
        method: str,
        path: str,
        params: Dict[str, Any] | None = None,
    ) -> Any:
        """Make a request with retry + rate-limit handling."""
        client = await self._get_client()
        url = self.url(path)

        for attempt in range(1, self.max_retries + 1):
            wait = self.retry_base_delay * (2 ** (attempt - 1))
            try:
                resp = await client.request(
                    method, url, params=params, headers=self._headers()
                )

                # Rate limited
                if resp.status_code == 429:
                    logger.warning(
                        f"Rate limited (429). Retrying in {wait}s (attempt {attempt}/{self.max_retries})",
                        extra={"endpoint": path, "status_code": 429},
                    )
                    await asyncio.sleep(wait)
                    continue

                resp.raise_for_status()
                try:
                    return resp.json()
                except ValueError as e:
                    raise DashboardAPIError(
                        f"Malformed JSON response from {path}", resp.status_code
                    ) from e

            except httpx.HTTPStatusError as e:
                try:
                    body = e.response.json()
                except ValueError:
                    body = {}
                error = body.get("error", {}) if isinstance(body, dict) else {}
                if isinstance(error, str):
                    error = {"message": error}
                error_msg = error.get("message", str(e))
                error_code = error.get("code", 0)

                if attempt < self.max_retries and e.response.status_code >= 500:
                    logger.warning(
                        f"Server error {e.response.status_code}. Retrying in {wait}s",
                        extra={"endpoint": path, "status_code": e.response.status_code},
                    )
                    await asyncio.sleep(wait)
                    continue

                raise DashboardAPIError(
                    error_msg, e.response.status_code, error_code
                ) from e

            except httpx.RequestError as e:
                if attempt < self.max_retries:
                    logger.warning(f"Request error: {e}. Retrying in {wait}s")
                    await asyncio.sleep(wait)
                    continue
                raise DashboardAPIError(
                    f"Connection failed after {self.max_retries} retries: {e}"
                ) from e

        raise DashboardAPIError("Max retries exhausted", 429)

    # ── Authentication ──

    async def authenticate(self, account_id: str, password: str) -> DashboardSession:
        """Exchange credentials for a backend-issued session token."""
        try:
            result = await self.request(
                "GET",
                settings.auth_path,
                {"password": password, "accountId": account_id},
            )
        except DashboardAPIError as e:
            if e.status_code not in (400, 401, 403):
                raise
            raise AuthenticationError(
                f"Authentication failed: {e}", e.status_code, e.error_code
            ) from e

        token = result.get("token") if isinstance(result, dict) else None
        if not token:
            raise AuthenticationError("Authentication response carried no token")

        self.session = DashboardSession(token=token, account_id=str(account_id))
        logger.info(f"Authenticated account {account_id}")
        return self.session
