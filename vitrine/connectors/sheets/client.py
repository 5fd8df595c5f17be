"""VITRINE — Spreadsheet Export Client.

Downloads the sales workbook (.xlsx export from Google Sheets, SharePoint
or a proxy in front of either). Handles retry and rate limiting.
"""

import asyncio
from typing import Optional

import httpx

from vitrine.config import settings
from vitrine.core.logging import get_logger

logger = get_logger("sheets.client")

MAX_RETRIES = 3
RETRY_BASE_DELAY = 2  # seconds

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


class SheetsAPIError(Exception):
    """Raised when the workbook cannot be downloaded."""

    def __init__(self, message: str, status_code: int = 0):
        self.status_code = status_code
        super().__init__(message)


class SheetsClient:
    """Async HTTP client for the spreadsheet export endpoint."""

    def __init__(
        self,
        export_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        retry_base_delay: float = RETRY_BASE_DELAY,
    ):
        self.export_url = export_url or settings.effective_export_url
        self.timeout = timeout or settings.request_timeout
        self.retry_base_delay = retry_base_delay
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def _backoff(self, attempt: int) -> float:
        wait = self.retry_base_delay * (2 ** (attempt - 1))
        await asyncio.sleep(wait)
        return wait

    # ── Workbook Download ──

    async def fetch_workbook(self) -> bytes:
        """Download the workbook bytes with retry + rate-limit handling."""
        if not self.export_url:
            raise SheetsAPIError("No spreadsheet export URL configured")

        client = await self._get_client()
        headers = {"Accept": XLSX_MEDIA_TYPE}

        for attempt in range(1, MAX_RETRIES + 1):
            try:
                resp = await client.get(self.export_url, headers=headers)

                # Rate limited
                if resp.status_code == 429 and attempt < MAX_RETRIES:
                    wait = await self._backoff(attempt)
                    logger.warning(
                        f"Rate limited (429). Retried after {wait}s (attempt {attempt}/{MAX_RETRIES})",
                        extra={"status_code": 429},
                    )
                    continue

                resp.raise_for_status()
                logger.info(
                    f"Downloaded workbook: {len(resp.content)} bytes",
                    extra={"status_code": resp.status_code},
                )
                return resp.content

            except httpx.HTTPStatusError as e:
                status = e.response.status_code
                if attempt < MAX_RETRIES and status >= 500:
                    wait = await self._backoff(attempt)
                    logger.warning(
                        f"Server error {status}. Retried after {wait}s",
                        extra={"status_code": status},
                    )
                    continue

                raise SheetsAPIError(
                    f"Workbook download failed: {status} {e.response.reason_phrase}",
                    status,
                ) from e

            except httpx.RequestError as e:
                if attempt < MAX_RETRIES:
                    wait = await self._backoff(attempt)
                    logger.warning(f"Request error: {e}. Retried after {wait}s")
                    continue
                raise SheetsAPIError(
                    f"Connection failed after {MAX_RETRIES} retries: {e}"
                ) from e

        raise SheetsAPIError("Max retries exhausted")
