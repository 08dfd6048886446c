"""Gmail search query construction for a filter."""

from collections.abc import Iterable
from datetime import date

from gmail_order_status.models.enums import ContentArea
from gmail_order_status.utils.helpers import parse_start_date


def quote_term(value: str) -> str:
    """Quote a value for a Gmail search operator."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def build_query(
    statuses: Iterable[str],
    title_filter: str | None = "",
    start_date: date | str | None = None,
    status_search_areas: Iterable[ContentArea | str] = (ContentArea.SUBJECT,),
) -> str:
    """
    Build the Gmail ``q`` expression for a filter.

    - Statuses become ``(subject:"A" OR subject:"B")`` only when the subject
      is among the status areas. Body matching always happens locally.
    - A title filter is always added as a subject term.
    - A valid ``YYYY-MM-DD`` start date becomes ``after:YYYY/MM/DD``.

    An empty string means no server-side filtering.
    """
    areas = {
        area.value if isinstance(area, ContentArea) else str(area).strip().lower()
        for area in status_search_areas
    }
    cleaned = [s.strip() for s in statuses if s and s.strip()]

    parts: list[str] = []

    if ContentArea.SUBJECT.value in areas and cleaned:
        terms = " OR ".join(f"subject:{quote_term(s)}" for s in cleaned)
        parts.append(f"({terms})")

    title = (title_filter or "").strip()
    if title:
        parts.append(f"subject:{quote_term(title)}")

    after = parse_start_date(start_date)
    if after is not None:
        parts.append(f"after:{after:%Y/%m/%d}")

    return " ".join(parts)
