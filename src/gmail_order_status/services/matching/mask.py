"""
Mask compilation.

A mask is literal text with at most one placeholder, for example
``order-{entry_id}`` or ``Tracking number: {value}``. The literal parts are
escaped one by one and the placeholder is swapped for a named capturing
group, so user text is never escaped twice.
"""

from dataclasses import dataclass
import re

from gmail_order_status.utils.errors import ConfigurationError

ENTRY_ID_PLACEHOLDER = "{entry_id}"
VALUE_PLACEHOLDER = "{value}"

_DIGITS_GROUP = r"(?P<entry_id>\d+)"
_VALUE_GROUP = r"(?P<value>.+)"


@dataclass(frozen=True)
class MaskPattern:
    """A compiled mask: the raw template, its literal prefix and the regex."""

    raw: str
    literal_prefix: str
    pattern: re.Pattern[str]
    group: str | None

    def search(self, text: str) -> re.Match[str] | None:
        if not text:
            return None
        return self.pattern.search(text)

    def capture(self, text: str) -> str | None:
        """Return the captured value, "" for a placeholder-free hit, or None."""
        match = self.search(text)
        if match is None:
            return None
        if self.group is None:
            return ""
        return (match.group(self.group) or "").strip()


def _compile(template: str | None, placeholder: str, group_regex: str, group: str) -> MaskPattern | None:
    raw = (template or "").strip()
    if not raw:
        return None

    count = raw.count(placeholder)
    if count > 1:
        raise ConfigurationError(
            f"Mask '{raw}' contains {placeholder} {count} times",
            "Use the placeholder at most once",
        )

    prefix = raw.split(placeholder, 1)[0].split("*", 1)[0].strip()

    if count == 0:
        return MaskPattern(
            raw=raw,
            literal_prefix=prefix,
            pattern=re.compile(re.escape(raw), re.IGNORECASE),
            group=None,
        )

    head, tail = raw.split(placeholder, 1)
    regex = re.escape(head) + group_regex + re.escape(tail)
    return MaskPattern(
        raw=raw,
        literal_prefix=prefix,
        pattern=re.compile(regex, re.IGNORECASE),
        group=group,
    )


def compile_order_id_mask(template: str | None) -> MaskPattern | None:
    """Compile an order-id mask; ``{entry_id}`` captures one or more digits.

    Returns None for a blank template, which disables order-id extraction.
    """
    return _compile(template, ENTRY_ID_PLACEHOLDER, _DIGITS_GROUP, "entry_id")


def compile_extra_field_mask(template: str | None) -> MaskPattern | None:
    """Compile an extra-field mask; ``{value}`` captures any non-empty text."""
    return _compile(template, VALUE_PLACEHOLDER, _VALUE_GROUP, "value")


def compile_status_pattern(status: str) -> re.Pattern[str]:
    """Case-insensitive literal-substring pattern for one status."""
    return re.compile(re.escape(status), re.IGNORECASE)
