"""DigitalCard ORM — read-only projection of the upstream `digital_cards` table.

Invariants:
    - id is UUID primary key; slug is unique among cards
    - Only columns the preview reads are mapped
    - status "active" marks a published card

Design Decisions:
    - Civic fields live on the same row (no join) — template_layout prefix selects the variant
    - election_year stored as text upstream: editors type it free-form
"""

import uuid

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from cardpreview.db.base import Base


class DigitalCard(Base):
    """A public digital card."""
    __tablename__ = "digital_cards"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    slug: Mapped[str] = mapped_column(String(120), unique=True, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="active",
    )
    full_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    title: Mapped[str | None] = mapped_column(String(200), nullable=True)
    company: Mapped[str | None] = mapped_column(String(200), nullable=True)
    city: Mapped[str | None] = mapped_column(String(120), nullable=True)
    state: Mapped[str | None] = mapped_column(String(120), nullable=True)
    profile_photo_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    gradient_color_1: Mapped[str | None] = mapped_column(String(20), nullable=True)
    template_layout: Mapped[str | None] = mapped_column(String(60), nullable=True)

    # Civic card fields
    ballot_number: Mapped[str | None] = mapped_column(String(20), nullable=True)
    party_name: Mapped[str | None] = mapped_column(String(120), nullable=True)
    office_running_for: Mapped[str | None] = mapped_column(String(120), nullable=True)
    region: Mapped[str | None] = mapped_column(String(120), nullable=True)
    election_year: Mapped[str | None] = mapped_column(String(10), nullable=True)
    campaign_slogan: Mapped[str | None] = mapped_column(Text, nullable=True)
