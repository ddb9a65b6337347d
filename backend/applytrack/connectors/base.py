from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

import httpx

from applytrack.config import settings
from applytrack.services.api_logger import ApiCallLogger


@dataclass(frozen=True)
class JobSearchParams:
    query: str | None = None
    location: str | None = None
    category: str | None = None
    salary_min: int | None = None
    salary_max: int | None = None
    company: str | None = None
    page: int = 1
    per_page: int = 20


@dataclass(frozen=True)
class JobResult:
    id: str
    title: str
    company: str
    location: str
    description: str
    url: str
    source: str
    salary_min: float | None = None
    salary_max: float | None = None
    posted_date: str | None = None
    contract_type: str | None = None


@dataclass(frozen=True)
class JobSearchResponse:
    jobs: tuple[JobResult, ...]
    total_results: int
    page: int
    per_page: int
    has_more: bool


@dataclass(frozen=True)
class CredentialField:
    field: str
    label: str


@dataclass(frozen=True)
class ConnectorConfig:
    type: str
    name: str
    description: str
    is_configured: bool
    is_supported: bool
    requires_credentials: list[CredentialField] = field(default_factory=list)


class ConnectorError(Exception):
    """Base class for every failure raised by a job connector."""


class ConnectorConfigurationError(ConnectorError):
    def __init__(self, connector: str, missing: list[str] | None = None, message: str | None = None) -> None:
        self.connector = connector
        self.missing = list(missing or [])
        if message is None:
            message = f"{connector} is not properly configured. Missing credentials: {', '.join(self.missing)}"
        super().__init__(message)


class ConnectorRequestError(ConnectorError):
    def __init__(self, connector: str, message: str, status_code: int | None = None) -> None:
        self.connector = connector
        self.status_code = status_code
        super().__init__(message)


class ConnectorNotSupportedError(ConnectorError):
    pass


class NoConnectorsConfiguredError(ConnectorError):
    pass


class BaseJobConnector(ABC):
    """Adapter from one external job board to the shared job contract.

    Subclasses declare their credentials in ``required_credentials``; the
    values are passed to the constructor as keyword arguments with the same
    field names. ``search_jobs`` raises instead of returning an empty response
    when the backend call fails, and ``get_job_details`` returns ``None`` only
    when the backend reports that the job does not exist.
    """

    connector_type: str = ""
    display_name: str = ""
    description: str = ""
    required_credentials: tuple[CredentialField, ...] = ()
    supported: bool = True

    def __init__(
        self,
        credentials: dict[str, str | None] | None = None,
        api_logger: ApiCallLogger | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float | None = None,
    ) -> None:
        self.credentials = {key: (value or "").strip() for key, value in (credentials or {}).items()}
        self.api_logger = api_logger
        self._transport = transport
        self._timeout = settings.connector_timeout_seconds if timeout is None else timeout
        self._client: httpx.AsyncClient | None = None

    def missing_credentials(self) -> list[str]:
        return [cred.field for cred in self.required_credentials if not self.credentials.get(cred.field)]

    def is_configured(self) -> bool:
        return self.supported and not self.missing_credentials()

    def validate_config(self) -> None:
        if not self.supported:
            raise ConnectorNotSupportedError(self.unavailable_reason())
        missing = self.missing_credentials()
        if missing:
            raise ConnectorConfigurationError(type(self).__name__, missing)

    def unavailable_reason(self) -> str:
        if not self.supported:
            return f"{self.connector_type} connector is not supported"
        return f"{self.connector_type} connector is not configured"

    def describe(self) -> ConnectorConfig:
        return ConnectorConfig(
            type=self.connector_type,
            name=self.display_name,
            description=self.description,
            is_configured=self.is_configured(),
            is_supported=self.supported,
            requires_credentials=list(self.required_credentials),
        )

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                transport=self._transport,
                follow_redirects=True,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> BaseJobConnector:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    @abstractmethod
    async def search_jobs(self, params: JobSearchParams) -> JobSearchResponse:
        raise NotImplementedError

    @abstractmethod
    async def get_job_details(self, job_id: str) -> JobResult | None:
        raise NotImplementedError
