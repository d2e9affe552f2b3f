from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.concurrency import run_in_threadpool

from achievements.dependencies import get_caller_id, get_store
from achievements.errors import ActivityLogError
from achievements.repository import SchoolStore
from achievements.schemas import LogEventRequest, LogEventResponse
from achievements.services.activity_log import log_user_event

router = APIRouter(prefix="/events", tags=["events"])

STATUS_BY_CODE = {
    ActivityLogError.UNAUTHENTICATED: 401,
    ActivityLogError.PERMISSION_DENIED: 403,
    ActivityLogError.INVALID_ARGUMENT: 400,
    ActivityLogError.INTERNAL: 500,
}


@router.post("", response_model=LogEventResponse, name="events.log_event")
async def log_event(
    payload: LogEventRequest,
    caller_id: Optional[str] = Depends(get_caller_id),
    store: SchoolStore = Depends(get_store),
):
    try:
        event_id = await run_in_threadpool(log_user_event, store, caller_id, payload)
    except ActivityLogError as exc:
        raise HTTPException(
            status_code=STATUS_BY_CODE.get(exc.code, 500),
            detail={"code": exc.code, "message": exc.message},
        ) from exc
    return LogEventResponse(success=True, message="Event logged successfully.", event_id=event_id)
