"""Card Text — pure string helpers shared by both preview layouts.

Invariants:
    - Blank means None, empty, or whitespace-only; blank parts never reach the output
    - initials() always returns 1–2 upper-case characters
    - composite_line() never emits a leading, trailing, or doubled separator
"""

INITIALS_PLACEHOLDER = "T"
COMPOSITE_SEPARATOR = " • "


def clean(value: object) -> str | None:
    """Strip a field value; blank becomes None."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def initials(name: str | None) -> str:
    """First letter of each whitespace-separated token, upper-cased, max 2 chars."""
    name = clean(name)
    if name is None:
        return INITIALS_PLACEHOLDER
    letters = "".join(token[0] for token in name.split())
    return letters.upper()[:2]


def composite_line(*parts: object, separator: str = COMPOSITE_SEPARATOR) -> str | None:
    """Join non-blank parts with separator. None when every part is blank."""
    kept = [p for p in (clean(part) for part in parts) if p is not None]
    return separator.join(kept) if kept else None


def location_line(city: str | None, state: str | None) -> str | None:
    return composite_line(city, state, separator=", ")


def endorsement_label(count: int) -> str:
    noun = "endorsement" if count == 1 else "endorsements"
    return f"{count} {noun}"
