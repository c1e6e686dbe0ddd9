# Services package init
"""
CodeCollab Backend — Services Layer
=====================================

What:  Business logic between routes (HTTP) and the database (persistence).
How:   Services receive the request's AsyncSession, apply validation and
       return Pydantic response models.

Service Inventory:
    - ProjectService: project CRUD, trimming, defaults and constraint checks
"""
