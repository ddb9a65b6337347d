from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends

from applytrack.auth import get_current_user
from applytrack.connectors.manager import ConnectorManager
from applytrack.models.user import User
from applytrack.services.api_logger import ApiCallLogger


async def get_connector_manager(current_user: User = Depends(get_current_user)) -> AsyncIterator[ConnectorManager]:
    manager = ConnectorManager.for_user(current_user, api_logger=ApiCallLogger(current_user.id))
    try:
        yield manager
    finally:
        await manager.aclose()
