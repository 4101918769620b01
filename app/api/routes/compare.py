"""Project comparison routes.

  GET  /compare-projects  → static health message
  POST /compare-projects  → compare two repositories of one GitHub user
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from app.orchestrator_compare import ComparisonOrchestrator
from app.services.compare.errors import (
    ComparisonInternalError,
    InvalidComparisonRequest,
    ProjectNotFound,
)

from ..deps import get_orchestrator

logger = logging.getLogger(__name__)

router = APIRouter(tags=["compare"])

HEALTH_MESSAGE = "Enhanced Project Comparison API - Use POST method"


@router.get("/compare-projects")
async def compare_projects_info():
    """Static health payload."""
    return {"message": HEALTH_MESSAGE}


@router.post("/compare-projects")
async def compare_projects(
    request: Request,
    orchestrator: ComparisonOrchestrator = Depends(get_orchestrator),
):
    """Compare two projects and return a ComparisonResult.

    The body is read as raw JSON so missing or malformed fields map to the
    400 contract instead of FastAPI's 422 validation response.
    """
    try:
        body = await request.json()
    except ValueError:
        body = None
    if not isinstance(body, dict):
        body = {}

    try:
        result = await orchestrator.compare(
            body.get("github_username"),
            body.get("project1"),
            body.get("project2"),
        )
    except InvalidComparisonRequest as e:
        return JSONResponse(status_code=400, content={"error": str(e)})
    except ProjectNotFound as e:
        return JSONResponse(status_code=404, content={"error": str(e)})
    except ComparisonInternalError as e:
        return JSONResponse(status_code=500, content={"error": str(e)})

    return result.model_dump()
