"""
CodeCollab Backend — Pydantic Request/Response Schemas
=======================================================

What:  Pydantic models defining the API contract between frontend and backend.
How:   FastAPI uses these models to parse request bodies, serialize responses,
       and generate the OpenAPI documentation.
Who:   Used by route handlers as body/return types.

Wire format:
    JSON keys are camelCase (htmlCode, isPublic, updatedAt, ...). Every model
    derives from CamelModel, which generates the aliases; Python code keeps
    snake_case attribute names. FastAPI serializes responses by alias.

Envelope:
    Every endpoint answers with {success, data?, error?, count?, message?}.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator
from pydantic.alias_generators import to_camel

from codecollab.models.project import format_date


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ══════════════════════════════════════════════════════════════════════════
# Request Models: what the client sends
# ══════════════════════════════════════════════════════════════════════════


class ProjectCreate(CamelModel):
    """
    Body of POST /api/projects.

    Every field is optional at the schema level: a missing or blank title is
    reported by ProjectService with the project-specific 400 message rather
    than FastAPI's generic field error. Empty sources fall back to the
    starter templates.
    """
    title: Optional[str] = Field(default=None, description="Project title (required, ≤100 chars)")
    html_code: Optional[str] = Field(default=None, description="HTML source")
    css_code: Optional[str] = Field(default=None, description="CSS source")
    js_code: Optional[str] = Field(default=None, description="JavaScript source")
    description: Optional[str] = Field(default=None, description="Optional description (≤500 chars)")
    is_public: Optional[bool] = Field(default=None, description="Share publicly (default false)")


class ProjectUpdate(CamelModel):
    """
    Body of PUT /api/projects/{id}.

    Partial replacement: only keys present in the JSON body are applied
    (see `provided_fields`). Omitted keys keep their stored values.
    """
    title: Optional[str] = None
    html_code: Optional[str] = None
    css_code: Optional[str] = None
    js_code: Optional[str] = None
    description: Optional[str] = None
    is_public: Optional[bool] = None

    def provided_fields(self) -> Dict[str, Any]:
        """Field values the client actually sent, keyed by attribute name."""
        return self.model_dump(exclude_unset=True)


# ══════════════════════════════════════════════════════════════════════════
# Response Models: what the API returns to clients
# ══════════════════════════════════════════════════════════════════════════


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class ProjectResponse(CamelModel):
    """Full representation of a project."""
    id: uuid.UUID
    title: str
    html_code: str
    css_code: str
    js_code: str
    description: Optional[str] = None
    is_public: bool
    created_at: datetime
    updated_at: datetime
    formatted_date: str = Field(description="Creation date, e.g. 'Jan 5, 2024'")

    @field_validator("created_at", "updated_at")
    @classmethod
    def normalize_timestamps(cls, v: datetime) -> datetime:
        return _as_utc(v)


class ProjectSummary(CamelModel):
    """Compact project representation returned by the recent-projects listing."""
    id: uuid.UUID
    title: str
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at")
    @classmethod
    def normalize_timestamps(cls, v: datetime) -> datetime:
        return _as_utc(v)

    @computed_field(alias="formattedDate")
    @property
    def formatted_date(self) -> str:
        return format_date(self.created_at)


class ProjectEnvelope(CamelModel):
    success: bool = True
    data: ProjectResponse


class ProjectListEnvelope(CamelModel):
    success: bool = True
    count: int = Field(description="Number of projects in data")
    data: List[ProjectResponse]


class ProjectSummaryListEnvelope(CamelModel):
    success: bool = True
    count: int
    data: List[ProjectSummary]


class DeleteEnvelope(CamelModel):
    success: bool = True
    message: str = "Project deleted successfully"
    data: Dict[str, Any] = Field(default_factory=dict)


class ErrorEnvelope(CamelModel):
    """
    Error envelope used by every failure response.

    Example:
        {"success": false, "error": "Project not found"}
        {"success": false, "error": ["Title cannot be more than 100 characters"]}
    """
    success: bool = False
    error: Union[str, List[str]]


# ══════════════════════════════════════════════════════════════════════════
# Service Responses
# ══════════════════════════════════════════════════════════════════════════


class HealthResponse(CamelModel):
    """Liveness probe payload for GET /api/health."""
    status: str = Field(description="healthy, or degraded when the database is unreachable")
    timestamp: datetime
    version: str
    database: str = Field(description="connected or disconnected")
    uptime_seconds: float


class RootResponse(CamelModel):
    """Banner returned by GET /."""
    message: str
    status: str = "success"
    endpoints: Dict[str, str]
