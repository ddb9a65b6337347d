from __future__ import annotations

from applytrack.connectors.base import (
    BaseJobConnector,
    ConnectorNotSupportedError,
    JobResult,
    JobSearchParams,
    JobSearchResponse,
)


class IndeedConnector(BaseJobConnector):
    """Indeed closed its publisher API to new partners; see ``LinkedInConnector``."""

    connector_type = "indeed"
    display_name = "Indeed"
    description = "World's largest job search engine (API access requires partnership; scraping is not supported)"
    supported = False

    def unavailable_reason(self) -> str:
        return "indeed connector is not supported: the Indeed publisher API requires a partnership"

    async def search_jobs(self, params: JobSearchParams) -> JobSearchResponse:
        raise ConnectorNotSupportedError(self.unavailable_reason())

    async def get_job_details(self, job_id: str) -> JobResult | None:
        raise ConnectorNotSupportedError(self.unavailable_reason())
