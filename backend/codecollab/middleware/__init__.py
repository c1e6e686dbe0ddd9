# Middleware package init
"""
CodeCollab Backend — Middleware Package
========================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (request direction):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    - Request ID runs first so every log line of the request carries the id
    - Logging measures the full handler time and flags blocked CORS origins
    - CORS is FastAPI's CORSMiddleware (preflight handling, allow-list)
"""
