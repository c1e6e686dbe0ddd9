"""
CodeCollab Backend — Application Package
=========================================

What: The REST API behind the CodeCollab code playground.
Who:  Imported by uvicorn (codecollab.main:app), Alembic, and pytest.

Layers:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP verbs, status codes, envelopes
    ├─────────────────────────────────────┤
    │      Services (Project CRUD)        │  ← trimming, validation, store calls
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
