"""
CodeCollab Backend — Project Service (CRUD Business Logic)
===========================================================

What:  All project persistence operations: list, recent, get, create, update, delete.
How:   Each method trims/validates input, performs one store call through the
       request's AsyncSession, and returns Pydantic response models.
Who:   Called by route handlers in routes/projects.py.

Error Translation:
    - Unknown or malformed id         → NotFoundError   (404)
    - Blank title / constraint breach → ValidationError (400)
    - Anything else from the driver   → DatabaseError   (500, fixed message per operation)

    The session is flushed here and committed by get_db_session, so a raised
    error rolls back the whole request.
"""

import logging
import uuid
from typing import Any, Dict, List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from codecollab.exceptions import (
    CodeCollabError,
    DatabaseError,
    NotFoundError,
    ValidationError,
)
from codecollab.models.project import (
    DEFAULT_CSS_CODE,
    DEFAULT_HTML_CODE,
    DEFAULT_JS_CODE,
    DESCRIPTION_MAX_LENGTH,
    DESCRIPTION_TOO_LONG_MESSAGE,
    RECENT_PROJECTS_LIMIT,
    TITLE_MAX_LENGTH,
    TITLE_REQUIRED_MESSAGE,
    TITLE_TOO_LONG_MESSAGE,
    Project,
    utcnow,
)
from codecollab.schemas.project import (
    ProjectCreate,
    ProjectResponse,
    ProjectSummary,
    ProjectUpdate,
)

logger = logging.getLogger(__name__)

# Fields that reset to their column default when sent as null or omitted on create
_FIELD_DEFAULTS: Dict[str, Any] = {
    "html_code": DEFAULT_HTML_CODE,
    "css_code": DEFAULT_CSS_CODE,
    "js_code": DEFAULT_JS_CODE,
    "is_public": False,
}


class ProjectService:
    """
    Stateless service for project CRUD; receives the session on every call.

    Responsibilities:
        - list_projects(): every project, most recently updated first
        - recent_projects(): summary rows of the N most recently updated
        - get_project(): single lookup with not-found handling
        - create_project(): trimming, defaults and validation on insert
        - update_project(): partial replacement of provided fields
        - delete_project(): removal with not-found handling
    """

    # ── Validation ────────────────────────────────────────────────────────

    @staticmethod
    def validate(values: Dict[str, Any]) -> List[str]:
        """
        Check the field constraints of the keys present in `values`.

        Values are expected to be trimmed already. Returns every violated
        constraint's message (empty list when valid).
        """
        errors: List[str] = []

        if "title" in values:
            title = values["title"]
            if not title:
                errors.append(TITLE_REQUIRED_MESSAGE)
            elif len(title) > TITLE_MAX_LENGTH:
                errors.append(TITLE_TOO_LONG_MESSAGE)

        description = values.get("description")
        if description is not None and len(description) > DESCRIPTION_MAX_LENGTH:
            errors.append(DESCRIPTION_TOO_LONG_MESSAGE)

        return errors

    @staticmethod
    def _parse_id(project_id: str) -> uuid.UUID:
        # A malformed id can never match a row, so it is reported as not found
        try:
            return uuid.UUID(project_id)
        except (ValueError, TypeError, AttributeError):
            raise NotFoundError(resource="Project", resource_id=str(project_id))

    async def _load(self, db: AsyncSession, project_id: str) -> Project:
        pid = self._parse_id(project_id)
        result = await db.execute(select(Project).where(Project.id == pid))
        project = result.scalar_one_or_none()
        if project is None:
            raise NotFoundError(resource="Project", resource_id=project_id)
        return project

    # ── Queries ───────────────────────────────────────────────────────────

    async def list_projects(self, db: AsyncSession) -> List[ProjectResponse]:
        """
        Return every project ordered by updated_at descending.

        Query plan:
            SELECT * FROM projects ORDER BY updated_at DESC, created_at DESC
            → idx_projects_updated_at
        """
        try:
            result = await db.execute(
                select(Project).order_by(
                    Project.updated_at.desc(), Project.created_at.desc()
                )
            )
            projects = result.scalars().all()
            return [ProjectResponse.model_validate(p) for p in projects]
        except Exception as e:
            logger.error("Error fetching projects: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Server Error: Could not fetch projects",
                context={"error_type": type(e).__name__},
            ) from e

    async def recent_projects(
        self, db: AsyncSession, limit: int = RECENT_PROJECTS_LIMIT
    ) -> List[ProjectSummary]:
        """Return summaries of the `limit` most recently updated projects."""
        try:
            result = await db.execute(Project.recent_query(limit))
            return [ProjectSummary.model_validate(dict(row)) for row in result.mappings().all()]
        except Exception as e:
            logger.error("Error fetching recent projects: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Server Error: Could not fetch projects",
                context={"error_type": type(e).__name__, "limit": limit},
            ) from e

    async def get_project(self, db: AsyncSession, project_id: str) -> ProjectResponse:
        """
        Retrieve a single project by id.

        Raises:
            NotFoundError: unknown or malformed id (→ 404)
            DatabaseError: query execution failed (→ 500)
        """
        try:
            project = await self._load(db, project_id)
            return ProjectResponse.model_validate(project)
        except CodeCollabError:
            raise
        except Exception as e:
            logger.error("Error fetching project %s: %s", project_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Server Error: Could not fetch project",
                context={"project_id": project_id},
            ) from e

    # ── Mutations ─────────────────────────────────────────────────────────

    async def create_project(self, db: AsyncSession, payload: ProjectCreate) -> ProjectResponse:
        """
        Insert a new project.

        Steps:
            1. Reject a missing or blank title (single message)
            2. Trim title/description; empty or null sources use the templates
            3. Check length constraints (list of messages)
            4. Insert and flush so the id and timestamps are populated

        Raises:
            ValidationError: title missing/blank or constraint violated (→ 400)
            DatabaseError: insert failed (→ 500)
        """
        if payload.title is None or not payload.title.strip():
            raise ValidationError(TITLE_REQUIRED_MESSAGE, context={"field": "title"})

        values: Dict[str, Any] = {
            "title": payload.title.strip(),
            "html_code": payload.html_code or DEFAULT_HTML_CODE,
            "css_code": payload.css_code or DEFAULT_CSS_CODE,
            "js_code": payload.js_code or DEFAULT_JS_CODE,
            "description": payload.description.strip() if payload.description else None,
            "is_public": bool(payload.is_public),
        }

        errors = self.validate(values)
        if errors:
            raise ValidationError(errors)

        try:
            now = utcnow()
            project = Project(**values, created_at=now, updated_at=now)
            db.add(project)
            await db.flush()
            logger.info("Project created: %s", project.id)
            return ProjectResponse.model_validate(project)
        except Exception as e:
            logger.error("Error creating project: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Server Error: Could not create project",
                context={"error_type": type(e).__name__},
            ) from e

    async def update_project(
        self, db: AsyncSession, project_id: str, payload: ProjectUpdate
    ) -> ProjectResponse:
        """
        Apply a partial update: only fields present in the request body change.

        title and description are trimmed; a blank title fails validation.
        Sources and isPublic sent as null reset to their defaults; a null
        description clears it. updated_at is always refreshed.

        Raises:
            NotFoundError: unknown or malformed id (→ 404)
            ValidationError: constraint violated (→ 400)
            DatabaseError: update failed (→ 500)
        """
        changes: Dict[str, Any] = {}
        for field, value in payload.provided_fields().items():
            if field in ("title", "description"):
                value = value.strip() if value is not None else None
                if field == "title" and value is None:
                    value = ""
            elif value is None:
                value = _FIELD_DEFAULTS[field]
            changes[field] = value

        try:
            project = await self._load(db, project_id)

            errors = self.validate(changes)
            if errors:
                raise ValidationError(errors)

            for field, value in changes.items():
                setattr(project, field, value)
            project.updated_at = utcnow()

            await db.flush()
            logger.info("Project updated: %s (%s)", project.id, ", ".join(changes) or "touch")
            return ProjectResponse.model_validate(project)
        except CodeCollabError:
            raise
        except Exception as e:
            logger.error("Error updating project %s: %s", project_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Server Error: Could not update project",
                context={"project_id": project_id},
            ) from e

    async def delete_project(self, db: AsyncSession, project_id: str) -> None:
        """
        Delete a project.

        Raises:
            NotFoundError: unknown or malformed id (→ 404)
            DatabaseError: delete failed (→ 500)
        """
        try:
            project = await self._load(db, project_id)
            await db.delete(project)
            await db.flush()
            logger.info("Project deleted: %s", project_id)
        except CodeCollabError:
            raise
        except Exception as e:
            logger.error("Error deleting project %s: %s", project_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Server Error: Could not delete project",
                context={"project_id": project_id},
            ) from e


# ── Singleton Instance ────────────────────────────────────────────────────
project_service = ProjectService()
