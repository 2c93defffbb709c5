"""HTTP client for the incident backend with retry logic for list requests."""

import asyncio
import logging
from typing import Any

import httpx
from pydantic import ValidationError

from citizen_alerts.config import get_settings
from citizen_alerts.schemas.report import ReportAck, ReportSubmission

logger = logging.getLogger(__name__)
settings = get_settings()


class BackendClientError(Exception):
    """Base exception for backend client errors."""

    pass


class BackendTimeoutError(BackendClientError):
    """The backend did not answer within the configured timeout."""

    pass


class BackendClient:
    """
    Client for the Citizen Alerts incident backend.

    Features:
    - Exponential backoff retry for incident listing (429, 5xx, transport errors)
    - Single-attempt report submission (not idempotent)
    - Timeouts reported as BackendTimeoutError
    """

    def __init__(
        self,
        base_url: str = settings.backend_base_url,
        api_prefix: str = settings.backend_api_prefix,
        max_retries: int = settings.backend_max_retries,
        timeout: float = settings.backend_timeout_seconds,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_prefix = api_prefix
        self.max_retries = max_retries
        self.timeout = timeout
        self.transport = transport

        self.headers: dict[str, str] = {
            "Accept": "application/json",
        }

    def api_path(self, endpoint: str) -> str:
        """Build a full URL for an API endpoint."""
        return f"{self.base_url}{self.api_prefix}/{endpoint}"

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self.transport)

    async def _request_with_retry(
        self,
        url: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """
        GET with exponential backoff.

        Rate limits back off from 10s, server and transport errors from 1s.
        Other 4xx responses and undecodable bodies fail immediately. No wait
        follows the final attempt.
        """
        last_error: Exception | None = None

        for attempt in range(1, self.max_retries + 1):
            try:
                async with self._client() as client:
                    response = await client.get(url, headers=self.headers, params=params)
                    response.raise_for_status()
                    return response.json()

            except httpx.HTTPStatusError as e:
                status = e.response.status_code
                if status != 429 and status < 500:
                    raise BackendClientError(f"HTTP error: {e}") from e
                last_error = e
                base_delay = 10 if status == 429 else 1
                logger.warning(
                    f"Backend answered {status} (attempt {attempt}/{self.max_retries})"
                )

            except httpx.RequestError as e:
                # Includes timeouts
                last_error = e
                base_delay = 1
                logger.warning(
                    f"Request to backend failed: {e!r} (attempt {attempt}/{self.max_retries})"
                )

            except ValueError as e:
                raise BackendClientError(f"Invalid JSON response: {e}") from e

            if attempt < self.max_retries:
                wait_time = base_delay * 2 ** (attempt - 1)
                logger.info(f"Retrying incident request in {wait_time}s")
                await asyncio.sleep(wait_time)

        if isinstance(last_error, httpx.TimeoutException):
            raise BackendTimeoutError(
                f"Timed out after {self.max_retries} attempts: {last_error}"
            )
        raise BackendClientError(f"Failed after {self.max_retries} attempts: {last_error}")

    async def fetch_incidents(self, is_ongoing: bool | None = None) -> list[dict[str, Any]]:
        """
        Fetch the incident list.

        Args:
            is_ongoing: Only fetch ongoing (True) or finished (False) incidents;
                None fetches everything

        Returns:
            List of raw incident records
        """
        url = self.api_path("incidents")

        params: dict[str, Any] = {}
        if is_ongoing is not None:
            params["isOngoing"] = "true" if is_ongoing else "false"

        logger.info(f"Fetching incidents: is_ongoing={is_ongoing}")
        records = await self._request_with_retry(url, params or None)
        if not isinstance(records, list):
            raise BackendClientError(
                f"Expected a list of incidents, got {type(records).__name__}"
            )
        logger.info(f"Fetched {len(records)} incident records")

        return records

    async def submit_report(self, payload: ReportSubmission) -> ReportAck:
        """
        Create a report, either for a new incident or an existing one.

        Not retried: a lost response could otherwise file the report twice.
        """
        url = self.api_path("reports/v1")

        try:
            async with self._client() as client:
                response = await client.post(url, headers=self.headers, json=payload.to_payload())
                response.raise_for_status()
                data = response.json()
        except httpx.TimeoutException as e:
            raise BackendTimeoutError(f"Report submission timed out: {e}") from e
        except httpx.HTTPStatusError as e:
            raise BackendClientError(f"HTTP error: {e}") from e
        except httpx.RequestError as e:
            raise BackendClientError(f"Request error: {e}") from e
        except ValueError as e:
            raise BackendClientError(f"Invalid JSON response: {e}") from e

        try:
            ack = ReportAck.model_validate(data)
        except ValidationError as e:
            raise BackendClientError(f"Unexpected report response: {e}") from e

        logger.info(f"Report {ack.report_id} accepted for incident {ack.incident_id}")
        return ack
