"""ORM Models — read-only SQLAlchemy projections of the upstream card tables.

Invariants:
    - All models inherit from Base (db/base.py)
    - Tables are owned by the card editor service; this service never writes them

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata is complete before any query runs
"""

from cardpreview.models.digital_card import DigitalCard  # noqa: F401
from cardpreview.models.custom_domain import CustomDomain  # noqa: F401
from cardpreview.models.endorsement_signal import EndorsementSignal  # noqa: F401
