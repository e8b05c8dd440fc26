"""API Layer — FastAPI routes and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - Errors are structured JSON; successful previews are PNG bytes

Design Decisions:
    - Thin routes delegate to services (functional core, imperative shell)
"""
