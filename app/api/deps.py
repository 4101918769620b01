"""FastAPI dependencies for the comparison service."""

from fastapi import Request

from app.orchestrator_compare import ComparisonOrchestrator


async def get_orchestrator(request: Request) -> ComparisonOrchestrator:
    """Get the shared ComparisonOrchestrator from app state."""
    return request.app.state.orchestrator
