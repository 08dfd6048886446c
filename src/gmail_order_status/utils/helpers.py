"""Small parsing helpers shared by models and services."""

from datetime import date, datetime
import json
import re
from typing import Any

import yaml

BOM = "\ufeff"

_STATUS_SPLIT = re.compile(r"[\n,]+")
_ESCAPED_QUOTE = re.compile(r"\\([\"'\\])")
_ANY_ESCAPE = re.compile(r"\\(.)", re.DOTALL)


def decode_json_robust(text: str | None) -> dict[str, Any] | None:
    """Decode a JSON object that may carry escaping artifacts.

    Variants are tried in order: raw, unescaped (backslash-escaped quotes
    and backslashes undone) and slash-stripped (every backslash escape
    removed). A leading byte-order mark is stripped from each.
    """
    for candidate in json_variants(text):
        try:
            value = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(value, dict):
            return value
    return None


def json_variants(text: str | None) -> list[str]:
    """Return the de-duplicated decode candidates for `text`."""
    raw = (text or "").strip()
    if not raw:
        return []

    variants: list[str] = []
    for candidate in (
        raw,
        _ESCAPED_QUOTE.sub(r"\1", raw),
        _ANY_ESCAPE.sub(r"\1", raw),
    ):
        candidate = candidate.lstrip(BOM).strip()
        if candidate and candidate not in variants:
            variants.append(candidate)
    return variants


def parse_token_text(raw: str) -> dict[str, Any] | None:
    """Parse token text with tolerance for common formatting issues.

    Tries standard JSON first, then falls back to YAML which natively
    handles unquoted keys/values, single quotes, and other non-strict formats.
    """
    cleaned = raw.strip().lstrip(BOM)
    if not cleaned:
        return None
    if cleaned.startswith("'") and cleaned.endswith("'"):
        cleaned = cleaned[1:-1]

    try:
        value = json.loads(cleaned)
    except json.JSONDecodeError:
        try:
            value = yaml.safe_load(cleaned)
        except yaml.YAMLError:
            return None

    return value if isinstance(value, dict) else None


def split_statuses(value: Any) -> list[str]:
    """Normalize statuses from a list or a comma/newline separated string.

    Items are trimmed, blanks dropped, and duplicates (compared case-folded)
    removed while keeping the first spelling and the declared order.
    """
    if value is None:
        return []
    if isinstance(value, str):
        parts = _STATUS_SPLIT.split(value.replace("\r\n", "\n").replace("\r", "\n"))
    else:
        parts = [str(v) for v in value if v is not None]

    seen: set[str] = set()
    statuses: list[str] = []
    for part in parts:
        status = part.strip()
        key = status.casefold()
        if status and key not in seen:
            seen.add(key)
            statuses.append(status)
    return statuses


def parse_start_date(value: Any) -> date | None:
    """Parse a `YYYY-MM-DD` lower bound; anything else is None."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not re.fullmatch(r"\d{4}-\d{2}-\d{2}", value.strip()):
        return None
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        return None
