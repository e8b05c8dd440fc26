"""SQL Card Store — CardStore implementation over the upstream tables.

Invariants:
    - Read-only: SELECT statements only
    - "Not found" is None / 0; SQLAlchemy failures are raised as DatabaseError
    - Slug lookup only matches published cards (status == active_status)
    - Domain lookup is case-insensitive (domains are stored lower-case)

Design Decisions:
    - Card-by-id does not filter on status: it is reached only through a custom
      domain whose owner mapped it explicitly
    - Records are plain dicts keyed by column name, decoupling core from the ORM
"""

import logging
import uuid

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cardpreview.core.domain_types import CardId
from cardpreview.core.errors import DatabaseError, ErrorContext
from cardpreview.core.repository_protocols import CardRecord
from cardpreview.models.custom_domain import CustomDomain
from cardpreview.models.digital_card import DigitalCard
from cardpreview.models.endorsement_signal import EndorsementSignal

logger = logging.getLogger(__name__)


def _record(card: DigitalCard) -> CardRecord:
    return {c.key: getattr(card, c.key) for c in DigitalCard.__table__.columns}


def _as_uuid(card_id: CardId) -> uuid.UUID | None:
    try:
        return uuid.UUID(str(card_id))
    except ValueError:
        return None


class SqlCardStore:
    """Card lookups over an AsyncSession."""

    def __init__(self, db: AsyncSession, active_status: str = "active"):
        self.db = db
        self.active_status = active_status

    async def _scalar(self, stmt, operation: str, **ctx):
        try:
            result = await self.db.execute(stmt)
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Card store {operation} failed: {e}", extra=ctx)
            raise DatabaseError(
                "Card store query failed", operation,
                ErrorContext(identifier=ctx.get("identifier"), card_id=ctx.get("card_id")),
            ) from e

    async def get_active_card_by_slug(self, slug: str) -> CardRecord | None:
        card = await self._scalar(
            select(DigitalCard).where(
                DigitalCard.slug == slug,
                DigitalCard.status == self.active_status,
            ),
            "slug_lookup", identifier=slug,
        )
        return _record(card) if card else None

    async def get_card_id_for_domain(self, domain: str) -> CardId | None:
        card_id = await self._scalar(
            select(CustomDomain.card_id).where(CustomDomain.domain == domain.lower()),
            "domain_lookup", identifier=domain,
        )
        return CardId(str(card_id)) if card_id else None

    async def get_card_by_id(self, card_id: CardId) -> CardRecord | None:
        key = _as_uuid(card_id)
        if key is None:
            return None
        card = await self._scalar(
            select(DigitalCard).where(DigitalCard.id == key),
            "id_lookup", card_id=card_id,
        )
        return _record(card) if card else None

    async def count_endorsements(self, card_id: CardId) -> int:
        key = _as_uuid(card_id)
        if key is None:
            return 0
        count = await self._scalar(
            select(func.count()).select_from(EndorsementSignal).where(
                EndorsementSignal.card_id == key,
            ),
            "endorsement_count", card_id=card_id,
        )
        return int(count or 0)
