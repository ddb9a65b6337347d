from __future__ import annotations

import logging
from typing import Any

import httpx
from bs4 import BeautifulSoup
from tenacity import AsyncRetrying, retry_if_exception, stop_after_attempt, wait_exponential

from applytrack.config import settings
from applytrack.connectors.base import (
    BaseJobConnector,
    ConnectorRequestError,
    CredentialField,
    JobResult,
    JobSearchParams,
    JobSearchResponse,
)
from applytrack.services.api_logger import ApiCallLogger


logger = logging.getLogger(__name__)

ADZUNA_BASE_URL = "https://api.adzuna.com/v1/api/jobs"
MAX_RESULTS_PER_PAGE = 50
DEFAULT_RESULTS_PER_PAGE = 20
UNKNOWN_COMPANY = "Unknown Company"
UNKNOWN_LOCATION = "Unknown Location"
RETRY_WAIT_MAX_SECONDS = 8.0
MIN_ATTEMPT_TIMEOUT_SECONDS = 1.0
_REDACTED_PARAMS = ("app_id", "app_key")


def _is_retryable(exc: BaseException) -> bool:
    if isinstance(exc, httpx.TransportError):
        return True
    return isinstance(exc, ConnectorRequestError) and exc.status_code is not None and exc.status_code >= 500


class AdzunaConnector(BaseJobConnector):
    connector_type = "adzuna"
    display_name = "Adzuna"
    description = "Global job search engine aggregating positions from hundreds of job boards"
    required_credentials = (
        CredentialField("adzuna_app_id", "App ID"),
        CredentialField("adzuna_api_key", "API Key"),
    )

    def __init__(
        self,
        app_id: str | None = None,
        api_key: str | None = None,
        country: str | None = None,
        api_logger: ApiCallLogger | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float | None = None,
        max_attempts: int | None = None,
        retry_wait_seconds: float | None = None,
    ) -> None:
        super().__init__(
            credentials={"adzuna_app_id": app_id, "adzuna_api_key": api_key},
            api_logger=api_logger,
            transport=transport,
            timeout=timeout,
        )
        self.country = (country or settings.adzuna_country or "us").strip().lower()
        self.max_attempts = max(1, max_attempts if max_attempts is not None else settings.connector_max_attempts)
        self.retry_wait_seconds = (
            settings.connector_retry_wait_seconds if retry_wait_seconds is None else max(0.0, retry_wait_seconds)
        )

    @property
    def attempt_timeout(self) -> float:
        """HTTP timeout for one attempt, sized so every attempt and backoff fit in the call deadline."""
        backoff = sum(
            min(self.retry_wait_seconds * 2**retry, RETRY_WAIT_MAX_SECONDS) for retry in range(self.max_attempts - 1)
        )
        return max((self._timeout - backoff) / self.max_attempts, MIN_ATTEMPT_TIMEOUT_SECONDS)

    @property
    def app_id(self) -> str:
        return self.credentials.get("adzuna_app_id", "")

    @property
    def api_key(self) -> str:
        return self.credentials.get("adzuna_api_key", "")

    def build_search_request(self, params: JobSearchParams) -> tuple[str, dict[str, str]]:
        """Return the search URL and query string; the page number is a path segment."""
        page = max(1, params.page or 1)
        per_page = self._results_per_page(params.per_page)
        query: dict[str, str] = {
            "app_id": self.app_id,
            "app_key": self.api_key,
            "results_per_page": str(per_page),
        }
        if params.query:
            query["what"] = params.query
        if params.location:
            query["where"] = params.location
        if params.salary_min:
            query["salary_min"] = str(params.salary_min)
        if params.salary_max:
            query["salary_max"] = str(params.salary_max)
        if params.company:
            query["company"] = params.company
        if params.category:
            query["category"] = params.category
        return f"{ADZUNA_BASE_URL}/{self.country}/search/{page}", query

    async def search_jobs(self, params: JobSearchParams) -> JobSearchResponse:
        self.validate_config()

        url, query = self.build_search_request(params)
        page = max(1, params.page or 1)
        per_page = int(query["results_per_page"])

        response = await self._get(url, query)
        if not response.is_success:
            raise ConnectorRequestError(
                self.display_name,
                f"Adzuna API error: {response.status_code} {response.reason_phrase} - {response.text[:500]}",
                status_code=response.status_code,
            )

        data = self._json(response)
        jobs = tuple(self._to_job_result(item) for item in (data.get("results") or []) if isinstance(item, dict))
        logger.debug("Adzuna returned %d jobs (page=%d, country=%s)", len(jobs), page, self.country)

        return JobSearchResponse(
            jobs=jobs,
            total_results=int(data.get("count") or 0),
            page=page,
            per_page=per_page,
            has_more=len(jobs) == per_page,
        )

    async def get_job_details(self, job_id: str) -> JobResult | None:
        self.validate_config()

        url = f"{ADZUNA_BASE_URL}/{self.country}/details/{job_id}"
        query = {"app_id": self.app_id, "app_key": self.api_key}
        response = await self._get(url, query)
        if response.status_code == 404:
            return None
        if not response.is_success:
            raise ConnectorRequestError(
                self.display_name,
                f"Adzuna API error: {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
            )
        data = self._json(response)
        if not data.get("id"):
            raise ConnectorRequestError(self.display_name, "Adzuna API returned a job without an id")
        return self._to_job_result(data)

    async def get_categories(self) -> list[dict[str, str]]:
        self.validate_config()

        url = f"{ADZUNA_BASE_URL}/{self.country}/categories"
        response = await self._get(url, {"app_id": self.app_id, "app_key": self.api_key})
        if not response.is_success:
            raise ConnectorRequestError(
                self.display_name,
                f"Adzuna API error: {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
            )
        data = self._json(response)
        return [
            {"tag": str(item.get("tag", "")), "label": str(item.get("label", ""))}
            for item in (data.get("results") or [])
            if isinstance(item, dict) and item.get("tag")
        ]

    async def _get(self, url: str, query: dict[str, str]) -> httpx.Response:
        # 5xx and transport failures are retried; 4xx responses are returned to the caller.
        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self.max_attempts),
                wait=wait_exponential(multiplier=self.retry_wait_seconds, max=RETRY_WAIT_MAX_SECONDS),
                retry=retry_if_exception(_is_retryable),
                reraise=True,
            ):
                with attempt:
                    response = await self._send(url, query)
                    if response.status_code >= 500:
                        raise ConnectorRequestError(
                            self.display_name,
                            f"Adzuna API error: {response.status_code} {response.reason_phrase}",
                            status_code=response.status_code,
                        )
        except httpx.TransportError as exc:
            raise ConnectorRequestError(self.display_name, f"Adzuna request failed: {exc!r}") from exc
        return response

    async def _send(self, url: str, query: dict[str, str]) -> httpx.Response:
        async def send() -> httpx.Response:
            return await self.client.get(url, params=query, timeout=self.attempt_timeout)

        if self.api_logger is None:
            return await send()
        return await self.api_logger.call(
            service=self.display_name,
            endpoint=url,
            method="GET",
            request_data=self._redact(query),
            send=send,
        )

    def _json(self, response: httpx.Response) -> dict[str, Any]:
        try:
            data = response.json()
        except ValueError as exc:
            raise ConnectorRequestError(
                self.display_name, "Adzuna API returned malformed JSON", status_code=response.status_code
            ) from exc
        if not isinstance(data, dict):
            raise ConnectorRequestError(
                self.display_name, "Adzuna API returned an unexpected payload", status_code=response.status_code
            )
        return data

    def _to_job_result(self, item: dict[str, Any]) -> JobResult:
        company = (item.get("company") or {}).get("display_name") if isinstance(item.get("company"), dict) else None
        location = (item.get("location") or {}).get("display_name") if isinstance(item.get("location"), dict) else None
        return JobResult(
            id=str(item.get("id") or ""),
            title=_strip_html(item.get("title")) or "Untitled Position",
            company=_strip_html(company) or UNKNOWN_COMPANY,
            location=_strip_html(location) or UNKNOWN_LOCATION,
            description=_strip_html(item.get("description")),
            url=str(item.get("redirect_url") or ""),
            source=self.connector_type,
            salary_min=_as_float(item.get("salary_min")),
            salary_max=_as_float(item.get("salary_max")),
            posted_date=item.get("created") or None,
            contract_type=item.get("contract_type") or None,
        )

    def _results_per_page(self, requested: int | None) -> int:
        return max(1, min(requested or DEFAULT_RESULTS_PER_PAGE, MAX_RESULTS_PER_PAGE))

    def _redact(self, query: dict[str, str]) -> dict[str, str]:
        return {key: ("***" if key in _REDACTED_PARAMS else value) for key, value in query.items()}


def _strip_html(value: Any) -> str:
    if not value:
        return ""
    return BeautifulSoup(str(value), "html.parser").get_text(" ", strip=True)


def _as_float(value: Any) -> float | None:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None
