"""Create projects table

Revision ID: 001
Revises: None
Create Date: 2024-01-15 00:00:00.000000+00:00

What:  Creates the `projects` table holding saved playground snippets.
How:   Portable column types (UUID, TIMESTAMP WITH TIME ZONE where supported)
       so the same migration runs on PostgreSQL and SQLite.

Rollback: downgrade() drops the table (all projects are lost).
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the projects table and its three indexes (see codecollab/models/project.py)."""
    op.create_table(
        "projects",
        sa.Column("id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("title", sa.String(100), nullable=False),
        sa.Column("description", sa.String(500), nullable=True),
        sa.Column(
            "is_public",
            sa.Boolean(),
            nullable=False,
            server_default=sa.false(),
        ),
        # Starter templates are applied by the application, not the database
        sa.Column("html_code", sa.Text(), nullable=False),
        sa.Column("css_code", sa.Text(), nullable=False),
        sa.Column("js_code", sa.Text(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_index("idx_projects_title", "projects", ["title"])
    op.create_index("idx_projects_created_at", "projects", [sa.text("created_at DESC")])
    op.create_index("idx_projects_updated_at", "projects", [sa.text("updated_at DESC")])


def downgrade() -> None:
    op.drop_index("idx_projects_updated_at", table_name="projects")
    op.drop_index("idx_projects_created_at", table_name="projects")
    op.drop_index("idx_projects_title", table_name="projects")
    op.drop_table("projects")
