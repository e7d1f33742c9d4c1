from fastapi import APIRouter, Depends, HTTPException, Query

from app.api.dependencies import get_orchestrator
from app.config import settings
from app.models.schemas import AggregatedResponse
from app.services.orchestrator import InvalidQueryError, TeeTimeOrchestrator
from app.services.time_filter import filter_by_time_window, parse_time_of_day

router = APIRouter(tags=["tee-times"])


@router.get("/tee-times", response_model=AggregatedResponse)
async def get_tee_times(
    course: str | None = Query(None, description="Course slug, or 'all'"),
    date: str | None = Query(None, description="Date in YYYY-MM-DD format"),
    start: str | None = Query(None, description="Earliest time of day (HH:MM)"),
    end: str | None = Query(None, description="Latest time of day (HH:MM)"),
    orchestrator: TeeTimeOrchestrator = Depends(get_orchestrator),
) -> AggregatedResponse:
    """
    Aggregated tee times for one course or all courses on a date.

    Backend failures do not fail the request; they are listed in
    metadata.errors and the remaining courses are still returned.

    Raises:
        HTTPException 400: Missing or malformed date, malformed start/end,
            or an unknown course slug.
    """
    try:
        start_time = parse_time_of_day(start)
        end_time = parse_time_of_day(end)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    try:
        response = await orchestrator.handle(course or settings.default_course, date)
    except InvalidQueryError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    if start_time is not None or end_time is not None:
        response = response.model_copy(
            update={"tee_times": filter_by_time_window(response.tee_times, start_time, end_time)}
        )
    return response
