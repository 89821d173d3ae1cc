from fastapi import Query, Request

from timetracker.config import settings
from timetracker.services.tracker_service import TrackerService


def get_tracker(request: Request) -> TrackerService:
    return request.app.state.tracker


def get_use_12h(
    clock_format: str | None = Query(default=None, alias="format", pattern="^(12h|24h)$"),
) -> bool:
    if clock_format is None:
        return settings.USE_12H_CLOCK
    return clock_format == "12h"
