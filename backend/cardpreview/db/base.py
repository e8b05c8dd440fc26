"""SQLAlchemy Declarative Base — shared base class for all ORM projections.

Invariants:
    - All models inherit from Base
    - Base.metadata is used only by test fixtures (the tables are owned upstream)

Design Decisions:
    - Separate file for Base: avoids circular imports between models
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all card preview ORM models."""
    pass
