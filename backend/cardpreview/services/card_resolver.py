"""Card Resolver — public identifier → card snapshot, with the custom-domain fallback.

Invariants:
    - Lookup order is fixed: published slug first, then custom domain → card id
    - Both steps missing is the only business-level negative (CardNotFoundError)
    - Store failures other than "not found" propagate unchanged (DatabaseError)
    - Engagement count failure or absence degrades to 0, never raises
    - Read-only: no side effects

Design Decisions:
    - Slug before domain: identifiers are ambiguous and slugs win by convention,
      so callers never need to know which kind they hold
    - Count is a separate call so the pipeline can run it alongside the photo fetch
"""

import logging

from cardpreview.core.card_snapshot import (
    DEFAULT_CIVIC_PREFIX, CardSnapshot, snapshot_from_record,
)
from cardpreview.core.domain_types import CardId
from cardpreview.core.errors import CardNotFoundError
from cardpreview.core.repository_protocols import CardStore

logger = logging.getLogger(__name__)


class CardResolver:
    """Resolves identifiers against a CardStore."""

    def __init__(self, store: CardStore, civic_prefix: str = DEFAULT_CIVIC_PREFIX):
        self.store = store
        self.civic_prefix = civic_prefix

    async def resolve(self, identifier: str) -> CardSnapshot:
        """Slug first, then custom domain. Raises CardNotFoundError."""
        record = await self.store.get_active_card_by_slug(identifier)
        if record is None:
            card_id = await self.store.get_card_id_for_domain(identifier)
            if card_id is not None:
                record = await self.store.get_card_by_id(card_id)
                if record is not None:
                    logger.info(
                        "Resolved card via custom domain",
                        extra={"identifier": identifier, "card_id": card_id},
                    )
        if record is None:
            raise CardNotFoundError(identifier)
        return snapshot_from_record(record, self.civic_prefix)

    async def engagement_count(self, card_id: CardId) -> int:
        """Endorsement count for the card; 0 when absent or unavailable."""
        try:
            count = await self.store.count_endorsements(card_id)
        except Exception as e:
            logger.warning(
                f"Engagement count unavailable, using 0: {e}",
                extra={"card_id": card_id},
            )
            return 0
        return max(0, int(count or 0))

