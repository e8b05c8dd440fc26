"""Infrastructure Layer — external IO and cross-cutting concerns.

Invariants:
    - Every network fetch is bounded by a timeout
    - Best-effort fetches degrade locally; required ones map to core errors

Design Decisions:
    - Thin wrappers over httpx, SQLAlchemy and CairoSVG
"""
