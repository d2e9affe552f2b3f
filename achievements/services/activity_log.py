"""
Activity events written by students' clients (calendar visits, downloads, reads).
The badge rules read these back through the userEvents collection.
"""
from __future__ import annotations

import logging
from typing import Optional

from achievements.errors import ActivityLogError
from achievements.repository import SchoolStore
from achievements.schemas import LogEventRequest

log = logging.getLogger(__name__)


def log_user_event(store: SchoolStore, caller_id: Optional[str], request: LogEventRequest) -> str:
    """Append one userEvents record on behalf of the authenticated student. Returns the event id."""
    if not caller_id:
        raise ActivityLogError(ActivityLogError.UNAUTHENTICATED, "The function must be called while authenticated.")
    if caller_id != request.student_id:
        raise ActivityLogError(ActivityLogError.PERMISSION_DENIED, "You can only log events for yourself.")
    if not (request.event_name and request.student_id and request.app_id and request.academic_year):
        raise ActivityLogError(ActivityLogError.INVALID_ARGUMENT, "Missing required event data.")

    try:
        event_id = store.add_user_event(
            request.academic_year,
            request.student_id,
            request.event_name,
            request.details or None,
            app_id=request.app_id,
        )
    except Exception as exc:
        log.error("Error logging event for student %s: %s", request.student_id, exc)
        raise ActivityLogError(ActivityLogError.INTERNAL, "Failed to log event.") from exc

    log.info("Event '%s' logged for student %s", request.event_name, request.student_id)
    return event_id
