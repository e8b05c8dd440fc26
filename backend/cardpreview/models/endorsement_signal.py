"""EndorsementSignal ORM — one row per endorsement ("signal" tap) on a card.

Invariants:
    - Always belongs to a card (card_id FK); the preview only counts rows
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from cardpreview.db.base import Base


class EndorsementSignal(Base):
    __tablename__ = "ecard_endorsement_signals"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    card_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("digital_cards.id"), nullable=False, index=True,
    )
    signal_type: Mapped[str | None] = mapped_column(String(40), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
