from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from applytrack.api.deps import get_connector_manager
from applytrack.connectors.adzuna import AdzunaConnector
from applytrack.connectors.base import (
    ConnectorConfigurationError,
    ConnectorError,
    ConnectorNotSupportedError,
    JobSearchParams,
    NoConnectorsConfiguredError,
)
from applytrack.connectors.manager import ConnectorManager
from applytrack.schemas.connector import (
    ConnectorConfigOut,
    ConnectorFailureOut,
    ConnectorSearchRequest,
    ConnectorSearchResponse,
    JobResultOut,
    JobSearchResponseOut,
)


logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=list[ConnectorConfigOut])
def list_connectors(manager: ConnectorManager = Depends(get_connector_manager)) -> list[ConnectorConfigOut]:
    return [ConnectorConfigOut.model_validate(config) for config in manager.get_available_connectors()]


@router.post("/search", response_model=ConnectorSearchResponse)
async def search_jobs(
    payload: ConnectorSearchRequest,
    manager: ConnectorManager = Depends(get_connector_manager),
) -> ConnectorSearchResponse:
    params = JobSearchParams(
        query=payload.query,
        location=payload.location,
        category=payload.category,
        salary_min=payload.salary_min,
        salary_max=payload.salary_max,
        company=payload.company,
        page=payload.page,
        per_page=payload.per_page,
    )
    try:
        outcome = await manager.search_jobs(params, payload.connectors)
    except NoConnectorsConfiguredError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return ConnectorSearchResponse(
        results=[JobSearchResponseOut.model_validate(result) for result in outcome.results],
        errors=[ConnectorFailureOut.model_validate(failure) for failure in outcome.errors],
        total_jobs=len(outcome.jobs),
    )


@router.get("/adzuna/categories")
async def adzuna_categories(manager: ConnectorManager = Depends(get_connector_manager)) -> list[dict[str, str]]:
    try:
        connector = manager.get_connector("adzuna")
    except ConnectorConfigurationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    if not isinstance(connector, AdzunaConnector):
        raise HTTPException(status_code=400, detail="adzuna connector is not available")
    try:
        return await connector.get_categories()
    except ConnectorError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc


@router.get("/{connector_type}/jobs/{job_id}", response_model=JobResultOut)
async def get_job_details(
    connector_type: str,
    job_id: str,
    manager: ConnectorManager = Depends(get_connector_manager),
) -> JobResultOut:
    try:
        job = await manager.get_job_details(job_id, connector_type)
    except (ConnectorConfigurationError, ConnectorNotSupportedError) as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except (ConnectorError, TimeoutError) as exc:
        logger.warning("Job detail lookup %s/%s failed: %s", connector_type, job_id, exc)
        raise HTTPException(status_code=502, detail=str(exc) or "Job board request failed") from exc
    if job is None:
        raise HTTPException(status_code=404, detail="Job not found")
    return JobResultOut.model_validate(job)
