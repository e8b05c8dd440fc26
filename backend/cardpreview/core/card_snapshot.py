"""Card Snapshot — immutable per-request projection of a card record.

Invariants:
    - Blank string fields are normalized to None at projection time
    - variant is derived, never stored: template_layout starting with the civic
      prefix, or equal to a legacy civic template name (politician-generic), →
      CIVIC; anything else (including None) → STANDARD
    - Snapshots are never persisted or shared across requests

Design Decisions:
    - Frozen dataclass over ORM object: layout code never touches a DB session
    - accent_color accepted only as #RGB / #RRGGBB hex; anything else becomes None
      so a malformed editor value cannot break SVG output
"""

import re
from dataclasses import dataclass
from typing import Any, Mapping

from cardpreview.core.card_text import clean, location_line
from cardpreview.core.domain_types import CardId, CardVariant

DEFAULT_CIVIC_PREFIX = "civic-card"
# Older editor templates that predate the civic-card prefix
CIVIC_LAYOUT_ALIASES = frozenset({"politician-generic"})

_HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


@dataclass(frozen=True)
class CardSnapshot:
    """Read-only view of the fields the preview needs."""
    card_id: CardId
    slug: str | None = None
    full_name: str | None = None
    title: str | None = None
    company: str | None = None
    city: str | None = None
    state: str | None = None
    profile_photo_url: str | None = None
    template_layout: str | None = None
    ballot_number: str | None = None
    party_name: str | None = None
    office_running_for: str | None = None
    region: str | None = None
    election_year: str | None = None
    campaign_slogan: str | None = None
    accent_color: str | None = None
    civic_prefix: str = DEFAULT_CIVIC_PREFIX

    @property
    def variant(self) -> CardVariant:
        layout = self.template_layout or ""
        if layout.startswith(self.civic_prefix) or layout in CIVIC_LAYOUT_ALIASES:
            return CardVariant.CIVIC
        return CardVariant.STANDARD

    @property
    def location(self) -> str | None:
        return location_line(self.city, self.state)


@dataclass(frozen=True)
class ResolvedCard:
    """A snapshot plus its engagement count (absent count → 0)."""
    snapshot: CardSnapshot
    engagement_count: int = 0


def snapshot_from_record(
    record: Mapping[str, Any], civic_prefix: str = DEFAULT_CIVIC_PREFIX,
) -> CardSnapshot:
    """Project a flat card record (column name → value) into a CardSnapshot."""
    accent = clean(record.get("gradient_color_1"))
    if accent is not None and not _HEX_COLOR.match(accent):
        accent = None
    return CardSnapshot(
        card_id=CardId(str(record["id"])),
        slug=clean(record.get("slug")),
        full_name=clean(record.get("full_name")),
        title=clean(record.get("title")),
        company=clean(record.get("company")),
        city=clean(record.get("city")),
        state=clean(record.get("state")),
        profile_photo_url=clean(record.get("profile_photo_url")),
        template_layout=clean(record.get("template_layout")),
        ballot_number=clean(record.get("ballot_number")),
        party_name=clean(record.get("party_name")),
        office_running_for=clean(record.get("office_running_for")),
        region=clean(record.get("region")),
        election_year=clean(record.get("election_year")),
        campaign_slogan=clean(record.get("campaign_slogan")),
        accent_color=accent,
        civic_prefix=civic_prefix,
    )
