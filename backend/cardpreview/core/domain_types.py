"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - CardId wraps the store's card primary key — never mix with slugs
    - Canvas is always 1200×630; every rendered document and bitmap uses it
    - All valid discriminants encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

CardId = NewType("CardId", str)


# ─── Canvas ──────────────────────────────────────────────────────

CANVAS_WIDTH = 1200
CANVAS_HEIGHT = 630


# ─── Enums ───────────────────────────────────────────────────────

class CardVariant(str, Enum):
    """The two built-in preview layouts."""
    CIVIC = "civic"
    STANDARD = "standard"


class FontWeight(int, Enum):
    """Font weights compiled into the asset cache."""
    REGULAR = 400
    BOLD = 700
