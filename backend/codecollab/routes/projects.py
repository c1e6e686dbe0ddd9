"""
CodeCollab Backend — Project Route Handlers
=============================================

What:  The project CRUD endpoints under /api/projects.
How:   Parses the body/path, delegates to ProjectService, wraps the result in
       the {success, data, count?, message?} envelope.
Who:   Called by the CodeCollab frontend editor and project list.

Status codes:
    200 list / get / update / delete, 201 create,
    400 validation, 404 unknown or malformed id, 500 store failure
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from codecollab.database import get_db_session
from codecollab.models.project import RECENT_PROJECTS_LIMIT
from codecollab.schemas.project import (
    DeleteEnvelope,
    ErrorEnvelope,
    ProjectCreate,
    ProjectEnvelope,
    ProjectListEnvelope,
    ProjectSummaryListEnvelope,
    ProjectUpdate,
)
from codecollab.services.project_service import project_service

logger = logging.getLogger(__name__)

# ── Router Configuration ──────────────────────────────────────────────────
router = APIRouter(prefix="/api/projects", tags=["Projects"])

_NOT_FOUND = {404: {"description": "Project not found", "model": ErrorEnvelope}}
_BAD_REQUEST = {400: {"description": "Validation failed", "model": ErrorEnvelope}}
_SERVER_ERROR = {500: {"description": "Server error", "model": ErrorEnvelope}}


@router.get(
    "",
    response_model=ProjectListEnvelope,
    responses={**_SERVER_ERROR},
    summary="List all projects",
    description="Returns every project, most recently updated first.",
)
async def list_projects(
    db: AsyncSession = Depends(get_db_session),
) -> ProjectListEnvelope:
    projects = await project_service.list_projects(db)
    return ProjectListEnvelope(count=len(projects), data=projects)


@router.get(
    "/recent",
    response_model=ProjectSummaryListEnvelope,
    responses={**_SERVER_ERROR},
    summary="List recently updated projects",
    description=(
        "Returns id, title, description and timestamps of the most recently "
        "updated projects."
    ),
)
async def recent_projects(
    limit: int = Query(
        default=RECENT_PROJECTS_LIMIT, ge=1, le=100,
        description="Number of projects to return (max 100)",
    ),
    db: AsyncSession = Depends(get_db_session),
) -> ProjectSummaryListEnvelope:
    summaries = await project_service.recent_projects(db, limit=limit)
    return ProjectSummaryListEnvelope(count=len(summaries), data=summaries)


@router.get(
    "/{project_id}",
    response_model=ProjectEnvelope,
    responses={**_NOT_FOUND, **_SERVER_ERROR},
    summary="Get a single project by id",
)
async def get_project(
    project_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> ProjectEnvelope:
    """
    Args:
        project_id: Kept as a plain string so a malformed id reaches the
                    service and becomes a 404 instead of FastAPI's 422.
    """
    project = await project_service.get_project(db, project_id)
    return ProjectEnvelope(data=project)


@router.post(
    "",
    status_code=201,
    response_model=ProjectEnvelope,
    responses={**_BAD_REQUEST, **_SERVER_ERROR},
    summary="Create a project",
    description=(
        "Creates a project. Only the title is required; missing HTML/CSS/JS "
        "sources are filled with starter templates."
    ),
)
async def create_project(
    payload: Optional[ProjectCreate] = None,
    db: AsyncSession = Depends(get_db_session),
) -> ProjectEnvelope:
    # An empty request body is treated as an empty object
    project = await project_service.create_project(db, payload or ProjectCreate())
    return ProjectEnvelope(data=project)


@router.put(
    "/{project_id}",
    response_model=ProjectEnvelope,
    responses={**_BAD_REQUEST, **_NOT_FOUND, **_SERVER_ERROR},
    summary="Update a project",
    description="Overwrites only the fields present in the request body.",
)
async def update_project(
    project_id: str,
    payload: Optional[ProjectUpdate] = None,
    db: AsyncSession = Depends(get_db_session),
) -> ProjectEnvelope:
    project = await project_service.update_project(db, project_id, payload or ProjectUpdate())
    return ProjectEnvelope(data=project)


@router.delete(
    "/{project_id}",
    response_model=DeleteEnvelope,
    responses={**_NOT_FOUND, **_SERVER_ERROR},
    summary="Delete a project",
)
async def delete_project(
    project_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> DeleteEnvelope:
    await project_service.delete_project(db, project_id)
    return DeleteEnvelope()
