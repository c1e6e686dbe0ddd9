# Routes package init
"""
CodeCollab Backend — API Routes Package
=========================================

What:  HTTP route handlers that accept requests and return envelopes.
How:   Each route module handles a specific resource or action.

Route Inventory:
    - projects.py: GET    /api/projects          (list, newest update first)
                   GET    /api/projects/recent   (recent summaries)
                   GET    /api/projects/{id}     (single project)
                   POST   /api/projects          (create)
                   PUT    /api/projects/{id}     (partial update)
                   DELETE /api/projects/{id}     (delete)
    - health.py:   GET    /                      (banner)
                   GET    /api/health            (liveness probe)

Routes stay thin: extract request data, call ProjectService, wrap the result
in the {success, data} envelope. Errors travel as exceptions to the handlers
in main.py.
"""
