"""Layout Builder — pure construction of the preview layout tree for one card.

Invariants:
    - Pure: same ResolvedCard + photo → equal tree; no IO, no clock
    - Exactly one of two paths runs, selected by snapshot.variant
    - Blank optional fields produce no node at all (never an empty-string node)
    - Endorsement line exists only when engagement_count > 0
    - Ballot badge exists only on the civic path and only when ballot_number is set
    - The endorsement count and the wordmark are never truncated; location and
      tagline give way to them on overflow
    - Root is always the fixed 1200×630 canvas

Design Decisions:
    - Shared pieces (avatar, meta row, footer, ornaments) are module functions so both
      variants render them identically
    - Node names are stable identifiers ("ballot-badge", "office-line", ...) that
      tests and the debug endpoint rely on
"""

from cardpreview.core.assets import InlinedImage
from cardpreview.core.card_snapshot import CardSnapshot, ResolvedCard
from cardpreview.core.card_text import (
    composite_line, endorsement_label, initials,
)
from cardpreview.core.domain_types import CANVAS_HEIGHT, CANVAS_WIDTH, CardVariant
from cardpreview.core.layout_tree import (
    Border, Edges, GradientStop, LayoutNode, LinearGradient, Offsets, box, text,
)

NAME_PLACEHOLDER = "Tavvy Card"
BRAND_WORDMARK = "tavvy"
STANDARD_TAGLINE = "Digital Business Card"
CIVIC_TAGLINE = "Civic Card"
LOCATION_MARKER = "●"
ENDORSEMENT_MARKER = "★"

WHITE = "#FFFFFF"
GOLD = "#FFD700"

_STANDARD_BACKGROUND = LinearGradient(135, (
    GradientStop(0.0, "#1a2744"),
    GradientStop(0.4, "#243b5e"),
    GradientStop(1.0, "#1e3150"),
))
_CIVIC_BACKGROUND = LinearGradient(135, (
    GradientStop(0.0, "#0b1f4b"),
    GradientStop(0.5, "#12306e"),
    GradientStop(1.0, "#0a1a3d"),
))


def build_layout(resolved: ResolvedCard, photo: InlinedImage | None) -> LayoutNode:
    """Build the layout tree for the card's variant."""
    snapshot = resolved.snapshot
    if snapshot.variant is CardVariant.CIVIC:
        return _build_civic(snapshot, resolved.engagement_count, photo)
    return _build_standard(snapshot, resolved.engagement_count, photo)


# ─── Standard variant ───────────────────────────────────────────

def _build_standard(
    card: CardSnapshot, count: int, photo: InlinedImage | None,
) -> LayoutNode:
    text_stack = box(
        "text-stack",
        _name(card, size=48),
        text(
            "title-line", card.title, size=26, weight=600,
            color="rgba(255,255,255,0.85)", max_lines=1,
            margin=Edges(top=4),
        ) if card.title else None,
        text(
            "company-line", card.company, size=22, italic=True,
            color="rgba(255,255,255,0.6)", max_lines=1,
            margin=Edges(top=2),
        ) if card.company else None,
        _meta_row(card, count),
        direction="column", flex=1, gap=8,
    )
    main = box(
        "main",
        _avatar(card, photo, 220, "rgba(255,255,255,0.3)"),
        text_stack,
        direction="row", align="center", flex=1, gap=60,
        padding=Edges.xy(60, 80),
    )
    return _canvas(
        "standard-card", _STANDARD_BACKGROUND,
        *_ornaments(),
        main,
        _footer(STANDARD_TAGLINE),
    )


# ─── Civic variant ──────────────────────────────────────────────

def _build_civic(
    card: CardSnapshot, count: int, photo: InlinedImage | None,
) -> LayoutNode:
    accent = card.accent_color or GOLD
    left = box(
        "civic-left",
        _avatar(card, photo, 200, accent),
        _ballot_badge(card.ballot_number, accent) if card.ballot_number else None,
        direction="column", align="center", gap=20, shrink=False,
    )
    office = composite_line(card.office_running_for, card.region, card.election_year)
    right = box(
        "civic-right",
        text(
            "party-label", card.party_name, size=20, weight=700,
            color=accent, letter_spacing=2, max_lines=1,
        ) if card.party_name else None,
        _name(card, size=52),
        text(
            "office-line", office, size=26, weight=600,
            color="rgba(255,255,255,0.85)", max_lines=1,
        ) if office else None,
        text(
            "slogan-line", f"“{card.campaign_slogan}”", size=22,
            italic=True, color="rgba(255,255,255,0.75)", line_height=1.35,
            max_lines=2, margin=Edges(top=6),
        ) if card.campaign_slogan else None,
        _meta_row(card, count),
        direction="column", flex=1, gap=10,
    )
    main = box(
        "main", left, right,
        direction="row", align="center", flex=1, gap=64,
        padding=Edges(68, 80, 48, 80),
    )
    accent_bar = box(
        "accent-bar", width="100%", height=10, background=accent,
        absolute=Offsets(top=0, left=0),
    )
    return _canvas(
        "civic-card", _CIVIC_BACKGROUND,
        accent_bar,
        *_ornaments(),
        main,
        _footer(_civic_tagline(card)),
    )


def _ballot_badge(ballot_number: str, accent: str) -> LayoutNode:
    return box(
        "ballot-badge",
        text(
            "ballot-caption", "VOTE", size=14, weight=700,
            color="rgba(255,255,255,0.85)", letter_spacing=2,
        ),
        text(
            "ballot-number", ballot_number, size=44, weight=800,
            color=WHITE, letter_spacing=4, line_height=1.1, max_lines=1,
        ),
        direction="column", align="center", gap=2,
        padding=Edges.xy(10, 24), radius=14,
        background="rgba(255,255,255,0.12)", border=Border(2, accent),
    )


def _civic_tagline(card: CardSnapshot) -> str:
    if card.office_running_for:
        return composite_line(CIVIC_TAGLINE, card.office_running_for)
    if card.ballot_number:
        return composite_line(CIVIC_TAGLINE, f"Vote {card.ballot_number}")
    return CIVIC_TAGLINE


# ─── Shared pieces ──────────────────────────────────────────────

def _canvas(name: str, background: LinearGradient, *children) -> LayoutNode:
    return box(
        name, *children,
        width=CANVAS_WIDTH, height=CANVAS_HEIGHT,
        direction="column", background=background,
    )


def _name(card: CardSnapshot, size: float) -> LayoutNode:
    return text(
        "name", card.full_name or NAME_PLACEHOLDER, size=size, weight=700,
        color=WHITE, line_height=1.15, letter_spacing=-0.02 * size,
        max_lines=2,
    )


def _avatar(
    card: CardSnapshot, photo: InlinedImage | None, diameter: float, ring: str,
) -> LayoutNode:
    """Circular photo, or the initials glyph when no photo could be inlined."""
    frame = dict(
        width=diameter, height=diameter, radius="50%", shrink=False,
        border=Border(4, ring),
    )
    if photo is not None:
        return box("avatar", image=photo, **frame)
    return box(
        "avatar",
        text(
            "initials", initials(card.full_name), size=diameter * 0.33,
            weight=700, color="rgba(255,255,255,0.7)", line_height=1.0,
        ),
        align="center", justify="center",
        background="rgba(255,255,255,0.15)", **frame,
    )


def _meta_row(card: CardSnapshot, count: int) -> LayoutNode | None:
    """Location + endorsements row; None when both are absent."""
    location = card.location
    if not location and count <= 0:
        return None
    return box(
        "meta-row",
        _marked("location", LOCATION_MARKER, location, "rgba(255,255,255,0.55)")
        if location else None,
        _marked(
            "endorsements", ENDORSEMENT_MARKER, endorsement_label(count), GOLD,
            shrink=False,
        )
        if count > 0 else None,
        direction="row", align="center", gap=24, margin=Edges(top=16),
    )


def _marked(
    name: str, marker: str, label: str, marker_color: str, shrink: bool = True,
) -> LayoutNode:
    return box(
        name,
        text(f"{name}-marker", marker, size=20, color=marker_color),
        text(
            f"{name}-label", label, size=20, color="rgba(255,255,255,0.55)",
            max_lines=1,
        ),
        direction="row", align="center", gap=8, shrink=shrink,
    )


def _ornaments() -> tuple[LayoutNode, LayoutNode]:
    """Two outline circles bleeding off the canvas corners."""
    return (
        box(
            "ornament-circle", width=350, height=350, radius="50%",
            border=Border(1, "rgba(255,255,255,0.08)"),
            absolute=Offsets(top=-80, right=-80),
        ),
        box(
            "ornament-circle", width=400, height=400, radius="50%",
            border=Border(1, "rgba(255,255,255,0.05)"),
            absolute=Offsets(bottom=-120, left=-60),
        ),
    )


def _footer(tagline: str) -> LayoutNode:
    return box(
        "footer",
        text(
            "wordmark", BRAND_WORDMARK, size=28, weight=700, color=WHITE,
            letter_spacing=2.24,
        ),
        text(
            "tagline", tagline, size=18, color="rgba(255,255,255,0.4)", max_lines=1,
        ),
        direction="row", align="center", justify="space-between", shrink=False,
        padding=Edges.xy(20, 80),
        border_top=Border(1, "rgba(255,255,255,0.1)"),
    )
