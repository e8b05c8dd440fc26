"""CustomDomain ORM — maps a caller-owned domain name to a card.

Invariants:
    - domain is unique; one domain resolves to at most one card
"""

import uuid

from sqlalchemy import String, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from cardpreview.db.base import Base


class CustomDomain(Base):
    __tablename__ = "custom_domains"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    domain: Mapped[str] = mapped_column(String(253), unique=True, nullable=False)
    card_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("digital_cards.id"), nullable=False,
    )
