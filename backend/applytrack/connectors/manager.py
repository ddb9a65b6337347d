from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

from applytrack.config import settings
from applytrack.connectors.adzuna import AdzunaConnector
from applytrack.connectors.base import (
    BaseJobConnector,
    ConnectorConfig,
    ConnectorConfigurationError,
    JobResult,
    JobSearchParams,
    JobSearchResponse,
    NoConnectorsConfiguredError,
)
from applytrack.connectors.indeed import IndeedConnector
from applytrack.connectors.linkedin import LinkedInConnector
from applytrack.services.api_logger import ApiCallLogger


logger = logging.getLogger(__name__)

CONNECTOR_TYPES = ("adzuna", "linkedin", "indeed")


@dataclass(frozen=True)
class ConnectorFailure:
    connector: str
    error: str


@dataclass
class SearchOutcome:
    results: list[JobSearchResponse] = field(default_factory=list)
    errors: list[ConnectorFailure] = field(default_factory=list)

    @property
    def jobs(self) -> list[JobResult]:
        return [job for response in self.results for job in response.jobs]


class ConnectorManager:
    """Holds one connector per backend for a single user and fans searches out."""

    def __init__(self, connectors: dict[str, BaseJobConnector], timeout: float | None = None) -> None:
        self.connectors = dict(connectors)
        self.timeout = settings.connector_timeout_seconds if timeout is None else timeout

    @classmethod
    def for_user(cls, user: Any, api_logger: ApiCallLogger | None = None) -> ConnectorManager:
        # Stored per-user credentials win; the environment is the fallback.
        adzuna = AdzunaConnector(
            app_id=getattr(user, "adzuna_app_id", None) or settings.adzuna_app_id,
            api_key=getattr(user, "adzuna_api_key", None) or settings.adzuna_api_key,
            country=settings.adzuna_country,
            api_logger=api_logger,
        )
        return cls(
            {
                "adzuna": adzuna,
                "linkedin": LinkedInConnector(api_logger=api_logger),
                "indeed": IndeedConnector(api_logger=api_logger),
            }
        )

    def get_available_connectors(self) -> list[ConnectorConfig]:
        return [connector.describe() for connector in self.connectors.values()]

    def get_configured_connectors(self) -> list[str]:
        return [name for name, connector in self.connectors.items() if connector.is_configured()]

    def get_connector(self, connector_type: str) -> BaseJobConnector:
        connector = self.connectors.get(connector_type)
        if connector is None:
            raise ConnectorConfigurationError(connector_type, message=f"Unknown connector: {connector_type}")
        if not connector.is_configured():
            raise ConnectorConfigurationError(
                connector_type,
                missing=connector.missing_credentials(),
                message=connector.unavailable_reason(),
            )
        return connector

    async def search_jobs(
        self,
        params: JobSearchParams,
        connector_types: list[str] | None = None,
    ) -> SearchOutcome:
        """Search every target connector and collect what succeeded and what failed.

        Without ``connector_types`` the configured connectors are searched, and
        having none of them configured is the only error this method raises.
        Requested connectors that are unknown or unusable are reported in
        ``errors`` without being called.
        """
        if connector_types is None:
            targets = self.get_configured_connectors()
            if not targets:
                raise NoConnectorsConfiguredError("No job connectors are configured")
        else:
            targets = list(dict.fromkeys(connector_types))

        outcome = SearchOutcome()
        runnable: list[tuple[str, BaseJobConnector]] = []
        for name in targets:
            connector = self.connectors.get(name)
            if connector is None:
                outcome.errors.append(ConnectorFailure(name, f"Unknown connector: {name}"))
                continue
            if not connector.is_configured():
                outcome.errors.append(ConnectorFailure(name, connector.unavailable_reason()))
                continue
            runnable.append((name, connector))

        if not runnable:
            return outcome

        results = await asyncio.gather(
            *(self._search_one(name, connector, params) for name, connector in runnable),
            return_exceptions=True,
        )
        for (name, _), result in zip(runnable, results):
            if isinstance(result, JobSearchResponse):
                outcome.results.append(result)
                continue
            message = _error_message(result, name)
            logger.warning("Connector %s failed: %s", name, message)
            outcome.errors.append(ConnectorFailure(name, message))

        return outcome

    async def get_job_details(self, job_id: str, connector_type: str) -> JobResult | None:
        connector = self.get_connector(connector_type)
        try:
            return await asyncio.wait_for(connector.get_job_details(job_id), timeout=self.timeout)
        except asyncio.TimeoutError as exc:
            raise TimeoutError(f"{connector_type} job lookup timed out after {self.timeout:g}s") from exc

    async def aclose(self) -> None:
        for connector in self.connectors.values():
            await connector.aclose()

    async def __aenter__(self) -> ConnectorManager:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def _search_one(self, name: str, connector: BaseJobConnector, params: JobSearchParams) -> JobSearchResponse:
        try:
            return await asyncio.wait_for(connector.search_jobs(params), timeout=self.timeout)
        except asyncio.TimeoutError as exc:
            raise TimeoutError(f"{name} search timed out after {self.timeout:g}s") from exc


def _error_message(error: BaseException, connector: str) -> str:
    message = str(error).strip()
    return message or f"Failed to search {connector}"
