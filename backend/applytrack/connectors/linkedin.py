from __future__ import annotations

from applytrack.connectors.base import (
    BaseJobConnector,
    ConnectorNotSupportedError,
    JobResult,
    JobSearchParams,
    JobSearchResponse,
)


class LinkedInConnector(BaseJobConnector):
    """LinkedIn offers no public job search API.

    The connector is registered so it shows up in the connector listing, but it
    reports itself as unsupported and refuses every call instead of returning
    made-up postings.
    """

    connector_type = "linkedin"
    display_name = "LinkedIn"
    description = "Professional network job listings (no public job search API; scraping is not supported)"
    supported = False

    def unavailable_reason(self) -> str:
        return "linkedin connector is not supported: LinkedIn provides no public job search API"

    async def search_jobs(self, params: JobSearchParams) -> JobSearchResponse:
        raise ConnectorNotSupportedError(self.unavailable_reason())

    async def get_job_details(self, job_id: str) -> JobResult | None:
        raise ConnectorNotSupportedError(self.unavailable_reason())
