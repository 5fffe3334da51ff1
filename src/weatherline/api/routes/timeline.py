"""Timeline endpoints."""

from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import PlainTextResponse
from starlette.concurrency import run_in_threadpool

from ...config import settings
from ...errors import TimelineError
from ...schemas.timeline import TimelineRequest, TimelineResponse
from ...services.timeline import service as timeline_service
from ..errors import to_http_exception

router = APIRouter(prefix="/timeline", tags=["timeline"])
logger = logging.getLogger(__name__)


async def _run(func, payload: TimelineRequest):
    try:
        return await asyncio.wait_for(run_in_threadpool(func, payload), timeout=settings.run_timeout_seconds)
    except TimelineError as exc:
        logger.info(f"Timeline run failed ({exc.code}): {exc.message}")
        raise to_http_exception(exc) from exc
    except asyncio.TimeoutError as exc:
        raise HTTPException(
            status_code=status.HTTP_504_GATEWAY_TIMEOUT,
            detail={"code": "timeout", "message": "The timeline took too long to compute. Please retry."},
        ) from exc
    except Exception as exc:
        logging.exception(f"Error computing timeline: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"code": "internal_error", "message": f"Failed to compute timeline: {exc}"},
        ) from exc


@router.post("", response_model=TimelineResponse, status_code=status.HTTP_200_OK)
async def create_timeline(payload: TimelineRequest) -> TimelineResponse:
    return await _run(timeline_service.build_timeline, payload)


@router.post("/export.csv", response_class=PlainTextResponse, status_code=status.HTTP_200_OK)
async def export_timeline(payload: TimelineRequest) -> PlainTextResponse:
    content = await _run(timeline_service.export_timeline_csv, payload)
    return PlainTextResponse(
        content,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="timeline.csv"'},
    )
