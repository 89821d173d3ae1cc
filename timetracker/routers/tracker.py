from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from timetracker.clock import format_elapsed_clock
from timetracker.database import get_db
from timetracker.dependencies import get_tracker
from timetracker.schemas.tracker import TrackerStatusResponse
from timetracker.services.tracker_service import SessionState, TrackerAction, TrackerService

router = APIRouter(prefix="/tracker", tags=["tracker"])


def _status_response(
    tracker: TrackerService, state: SessionState, changed: bool = False
) -> TrackerStatusResponse:
    elapsed = tracker.elapsed_seconds(state)
    return TrackerStatusResponse(
        status=state.status,
        date=state.day,
        open_segment_id=state.open_segment_id,
        open_since=state.open_since,
        elapsed_seconds=elapsed,
        elapsed=format_elapsed_clock(elapsed),
        changed=changed,
    )


@router.get("", response_model=TrackerStatusResponse)
async def get_status(
    db: AsyncSession = Depends(get_db),
    tracker: TrackerService = Depends(get_tracker),
):
    state = await tracker.snapshot(db)
    return _status_response(tracker, state)


@router.get("/stream")
async def stream_elapsed(
    db: AsyncSession = Depends(get_db),
    tracker: TrackerService = Depends(get_tracker),
):
    """Server-sent events carrying the elapsed clock of today's session.

    Emits once per tick while the session runs and closes as soon as it
    leaves the running state. A session that is not running gets a single
    event with its current total.
    """
    state = await tracker.snapshot(db)
    ticker = tracker.tickers.get(state.day)

    async def events():
        if ticker is None:
            yield f"event: {state.status.value}\ndata: {format_elapsed_clock(tracker.elapsed_seconds(state))}\n\n"
            return
        queue = ticker.subscribe()
        try:
            while True:
                text = await queue.get()
                if text is None:
                    yield "event: end\ndata: \n\n"
                    return
                yield f"event: tick\ndata: {text}\n\n"
        finally:
            ticker.unsubscribe(queue)

    return StreamingResponse(events(), media_type="text/event-stream")


@router.post("/{action}", response_model=TrackerStatusResponse)
async def apply_action(
    action: TrackerAction,
    db: AsyncSession = Depends(get_db),
    tracker: TrackerService = Depends(get_tracker),
):
    state, changed = await tracker.apply(db, action)
    return _status_response(tracker, state, changed=changed)
