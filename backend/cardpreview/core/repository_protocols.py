"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - The card store is read-only: no method here mutates anything
    - "Not found" is expressed as None / 0, never as an exception;
      any exception raised by an implementation is an infrastructure failure

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Records are flat mappings (column name → value): the core projects them into
      CardSnapshot without knowing about the ORM
"""

from typing import Any, Mapping, Protocol

from cardpreview.core.domain_types import CardId

CardRecord = Mapping[str, Any]


class CardStore(Protocol):
    """Read-only data contract of the external card record store."""
    async def get_active_card_by_slug(self, slug: str) -> CardRecord | None: ...
    async def get_card_id_for_domain(self, domain: str) -> CardId | None: ...
    async def get_card_by_id(self, card_id: CardId) -> CardRecord | None: ...
    async def count_endorsements(self, card_id: CardId) -> int: ...
