"""Apply one filter's extraction rules to a fetched message."""

import logging

from gmail_order_status.models.accounts import ExtraFieldSpec, Filter
from gmail_order_status.models.enums import ContentArea, OrderIdArea
from gmail_order_status.models.messages import ExtraFieldValue, MailMessage, MatchResult
from gmail_order_status.services.matching.mask import (
    MaskPattern,
    compile_extra_field_mask,
    compile_order_id_mask,
    compile_status_pattern,
)

logger = logging.getLogger(__name__)


class MessageMatcher:
    """
    Match messages against a single filter.

    Masks and status patterns are compiled once per filter, so a bad mask
    surfaces as a ConfigurationError before any message is fetched.

    Rules, in order:
    1. Title safeguard: a non-empty title filter must occur in the subject
       (case-insensitive). This repeats the server-side subject term.
    2. Order id: when a mask is set, the selected header must match it or the
       message is rejected. The captured digits become the entry id.
    3. Status: statuses are tried in their declared order, subject before
       body. The first status found in any permitted area wins.
    4. Extra fields: each mask is searched in its own area; a miss records
       an empty value.
    """

    def __init__(self, flt: Filter):
        self.filter = flt
        self.title_filter = flt.title_filter.casefold()
        self.order_id_mask: MaskPattern | None = compile_order_id_mask(flt.mask)
        self.status_patterns = [(s, compile_status_pattern(s)) for s in flt.statuses]
        self.extra_masks: list[tuple[ExtraFieldSpec, MaskPattern | None]] = [
            (spec, compile_extra_field_mask(spec.mask)) for spec in flt.extra_fields
        ]

    def match(self, message: MailMessage) -> MatchResult | None:
        """Return a MatchResult, or None when the title or order-id gate rejects."""
        if self.title_filter and self.title_filter not in message.subject.casefold():
            logger.debug(f"Message {message.id} rejected by title filter")
            return None

        entry_id = ""
        if self.order_id_mask is not None:
            captured = self.order_id_mask.capture(self._order_id_text(message))
            if captured is None:
                logger.debug(f"Message {message.id} rejected by order id mask")
                return None
            entry_id = captured

        return MatchResult(
            message_id=message.id,
            subject=message.subject,
            sender=message.sender,
            delivered_to=message.delivered_to,
            status=self.match_status(message),
            entry_id=entry_id,
            extras=self.extract_extras(message),
            body=message.body,
        )

    def _order_id_text(self, message: MailMessage) -> str:
        area = self.filter.order_id_search_area
        if area == OrderIdArea.TO:
            return message.to or message.delivered_to
        if area == OrderIdArea.FROM:
            return message.sender
        return message.subject

    def match_status(self, message: MailMessage) -> str:
        in_subject = self.filter.searches(ContentArea.SUBJECT)
        in_body = self.filter.searches(ContentArea.BODY)

        for status, pattern in self.status_patterns:
            if in_subject and pattern.search(message.subject):
                return status
            if in_body and message.body and pattern.search(message.body):
                return status
        return ""

    def extract_extras(self, message: MailMessage) -> list[ExtraFieldValue]:
        extras: list[ExtraFieldValue] = []
        for spec, mask in self.extra_masks:
            if mask is None:
                continue
            text = message.body if spec.search_area == ContentArea.BODY else message.subject
            extras.append(ExtraFieldValue(spec=spec, value=mask.capture(text) or ""))
        return extras
