from fastapi import APIRouter, Depends

from app.api.dependencies import get_registry
from app.models.schemas import CoursesResponse
from app.services.course_registry import CourseRegistry

router = APIRouter(tags=["courses"])


@router.get("/courses", response_model=CoursesResponse)
async def list_courses(registry: CourseRegistry = Depends(get_registry)) -> CoursesResponse:
    return CoursesResponse(courses=registry.listing())
