from __future__ import annotations

import asyncio
import json
import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any

import httpx
from sqlalchemy.orm import Session, sessionmaker
from starlette.concurrency import run_in_threadpool

from applytrack.database import SessionLocal
from applytrack.models.external_log import ExternalLog


logger = logging.getLogger(__name__)

MAX_LOGGED_TEXT_CHARS = 20_000
CANCELLED_MESSAGE = "Request cancelled before completion (deadline exceeded)"


class ApiCallLogger:
    """Times an outbound HTTP call and records it as an ``ExternalLog`` row.

    The row is written in a dedicated session so a failing insert never
    touches the caller's unit of work. The wrapped call's response or
    exception is always what the caller sees. Calls cancelled by a caller's
    deadline are recorded as failures too.
    """

    def __init__(self, user_id: int | None, session_factory: sessionmaker | Callable[[], Session] = SessionLocal) -> None:
        self.user_id = user_id
        self.session_factory = session_factory

    async def call(
        self,
        *,
        service: str,
        endpoint: str,
        method: str,
        send: Callable[[], Awaitable[httpx.Response]],
        request_data: dict[str, Any] | None = None,
    ) -> httpx.Response:
        started = time.perf_counter()
        entry = {"service": service, "endpoint": endpoint, "method": method, "request_data": request_data}
        try:
            response = await send()
        except asyncio.CancelledError:
            # The task is being torn down, so the row is written without awaiting.
            self._record(
                **entry,
                response_status=None,
                response_data=None,
                response_time=_elapsed_ms(started),
                success=False,
                error_message=CANCELLED_MESSAGE,
            )
            raise
        except Exception as exc:
            elapsed_ms = _elapsed_ms(started)
            await run_in_threadpool(
                self._record,
                **entry,
                response_status=None,
                response_data=None,
                response_time=elapsed_ms,
                success=False,
                error_message=str(exc) or type(exc).__name__,
            )
            raise

        elapsed_ms = _elapsed_ms(started)
        success = response.is_success
        await run_in_threadpool(
            self._record,
            **entry,
            response_status=response.status_code,
            response_data=_parse_body(response),
            response_time=elapsed_ms,
            success=success,
            error_message=None if success else f"HTTP {response.status_code}: {response.reason_phrase}",
        )
        return response

    def _record(self, **fields: Any) -> None:
        if self.user_id is None:
            return
        try:
            db = self.session_factory()
            try:
                db.add(ExternalLog(user_id=self.user_id, **fields))
                db.commit()
            finally:
                db.close()
        except Exception:
            logger.exception(
                "Failed to log external call %s %s (%s)",
                fields.get("method"),
                fields.get("endpoint"),
                fields.get("service"),
            )


def _elapsed_ms(started: float) -> int:
    return max(0, int(round((time.perf_counter() - started) * 1000)))


def _parse_body(response: httpx.Response) -> Any:
    text = response.text
    if not text:
        return None
    try:
        return json.loads(text)
    except ValueError:
        return text[:MAX_LOGGED_TEXT_CHARS]
