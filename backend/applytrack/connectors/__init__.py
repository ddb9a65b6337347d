from applytrack.connectors.adzuna import AdzunaConnector
from applytrack.connectors.base import (
    BaseJobConnector,
    ConnectorConfig,
    ConnectorConfigurationError,
    ConnectorError,
    ConnectorNotSupportedError,
    ConnectorRequestError,
    CredentialField,
    JobResult,
    JobSearchParams,
    JobSearchResponse,
    NoConnectorsConfiguredError,
)
from applytrack.connectors.indeed import IndeedConnector
from applytrack.connectors.linkedin import LinkedInConnector
from applytrack.connectors.manager import ConnectorFailure, ConnectorManager, SearchOutcome

__all__ = [
    "AdzunaConnector",
    "BaseJobConnector",
    "ConnectorConfig",
    "ConnectorConfigurationError",
    "ConnectorError",
    "ConnectorFailure",
    "ConnectorManager",
    "ConnectorNotSupportedError",
    "ConnectorRequestError",
    "CredentialField",
    "IndeedConnector",
    "JobResult",
    "JobSearchParams",
    "JobSearchResponse",
    "LinkedInConnector",
    "NoConnectorsConfiguredError",
    "SearchOutcome",
]
