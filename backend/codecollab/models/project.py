"""
CodeCollab Backend — Project SQLAlchemy Model
===============================================

What:  ORM model representing the `projects` table.
How:   Inherits from SQLAlchemy's DeclarativeBase; Alembic reads this for migrations.
Who:   Used by ProjectService for CRUD operations and by Alembic for schema management.

Table Design:
    - UUID primary key, generated in Python so the id exists after flush
    - title / description: trimmed, length-limited text (limits enforced by
      ProjectService.validate, which reports every violation at once)
    - html_code / css_code / js_code: the playground sources, defaulting to
      starter templates
    - is_public: sharing flag, false by default
    - created_at / updated_at: UTC, maintained by the ORM on insert/update

    Indexes:
        title ASC, created_at DESC, updated_at DESC (list ordering)
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Index, String, Text, Uuid, select
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import Select

from codecollab.database import Base

# ── Field Constraints ─────────────────────────────────────────────────────
TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500

TITLE_REQUIRED_MESSAGE = "Please provide a project title"
TITLE_TOO_LONG_MESSAGE = f"Title cannot be more than {TITLE_MAX_LENGTH} characters"
DESCRIPTION_TOO_LONG_MESSAGE = (
    f"Description cannot be more than {DESCRIPTION_MAX_LENGTH} characters"
)

# ── Starter Templates ─────────────────────────────────────────────────────
DEFAULT_HTML_CODE = "<!-- Write your HTML here -->\n<h1>Hello CodeCollab!</h1>"
DEFAULT_CSS_CODE = (
    "/* Write your CSS here */\n"
    "body {\n"
    "  font-family: Arial, sans-serif;\n"
    "  padding: 20px;\n"
    "}"
)
DEFAULT_JS_CODE = '// Write your JavaScript here\nconsole.log("CodeCollab is ready!");'

RECENT_PROJECTS_LIMIT = 10


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def format_date(value: datetime) -> str:
    """Formats a timestamp as 'Mon D, YYYY' (e.g. 'Jan 5, 2024')."""
    return f"{value:%b} {value.day}, {value.year}"


class Project(Base):
    """
    A saved code-playground snippet.

    Lifecycle:
        1. Created by POST /api/projects (defaults fill missing sources)
        2. Partially updated by PUT /api/projects/{id} (updated_at refreshed)
        3. Removed by DELETE /api/projects/{id}

    Query Patterns:
        - List: SELECT ... ORDER BY updated_at DESC
          → idx_projects_updated_at
        - Get single project: SELECT ... WHERE id = :uuid
          → primary key lookup
    """

    __tablename__ = "projects"

    # ── Primary Key ───────────────────────────────────────────────────────
    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    # ── Metadata ──────────────────────────────────────────────────────────
    title: Mapped[str] = mapped_column(
        String(TITLE_MAX_LENGTH),
        nullable=False,
    )

    description: Mapped[str | None] = mapped_column(
        String(DESCRIPTION_MAX_LENGTH),
        nullable=True,
        default=None,
    )

    is_public: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
    )

    # ── Sources ───────────────────────────────────────────────────────────
    # TEXT: no length limit on playground code
    html_code: Mapped[str] = mapped_column(Text, nullable=False, default=DEFAULT_HTML_CODE)
    css_code: Mapped[str] = mapped_column(Text, nullable=False, default=DEFAULT_CSS_CODE)
    js_code: Mapped[str] = mapped_column(Text, nullable=False, default=DEFAULT_JS_CODE)

    # ── Timestamps ────────────────────────────────────────────────────────
    # Stored in UTC; the Python-side defaults keep the values on the instance
    # after flush, so no refresh round-trip is needed to serialize them.
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )

    @property
    def formatted_date(self) -> str:
        return format_date(self.created_at)

    @classmethod
    def recent_query(cls, limit: int = RECENT_PROJECTS_LIMIT) -> Select:
        """
        Most recently updated projects, projected to the summary columns.

        Returns a statement; execute it with `session.execute(...)` and read
        rows with `.mappings()`.
        """
        return (
            select(cls.id, cls.title, cls.description, cls.created_at, cls.updated_at)
            .order_by(cls.updated_at.desc(), cls.created_at.desc())
            .limit(limit)
        )

    def __repr__(self) -> str:
        return f"<Project(id={self.id}, title='{self.title}', updated_at='{self.updated_at}')>"


# ── Indexes ───────────────────────────────────────────────────────────────
# updated_at DESC serves the list ordering
Index("idx_projects_title", Project.title)
Index("idx_projects_created_at", Project.created_at.desc())
Index("idx_projects_updated_at", Project.updated_at.desc())
