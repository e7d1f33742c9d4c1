from fastapi import Request

from app.services.course_registry import CourseRegistry
from app.services.orchestrator import TeeTimeOrchestrator


def get_orchestrator(request: Request) -> TeeTimeOrchestrator:
    orchestrator: TeeTimeOrchestrator = request.app.state.orchestrator
    return orchestrator


def get_registry(request: Request) -> CourseRegistry:
    registry: CourseRegistry = request.app.state.registry
    return registry
