"""
Reduce Gmail API ``format=full`` payloads to MailMessage.

Header and body decoding is best-effort: missing headers become empty
strings and undecodable parts are skipped.
"""

import base64
import binascii
import logging
import re
from typing import Any

from bs4 import BeautifulSoup

from gmail_order_status.models.messages import MailMessage
from gmail_order_status.utils.errors import DataError

logger = logging.getLogger(__name__)

_BLANK_LINES = re.compile(r"\n\s*\n+")


def decode_body_data(data: str) -> str:
    """Decode base64url body data, restoring stripped padding."""
    if not data:
        return ""
    padded = data + "=" * (-len(data) % 4)
    try:
        raw = base64.urlsafe_b64decode(padded)
    except (binascii.Error, ValueError) as e:
        raise DataError(f"Undecodable body part: {e}") from e
    return raw.decode("utf-8", errors="ignore")


def html_to_text(html: str) -> str:
    """Strip tags with BeautifulSoup; entities are decoded by the parser."""
    soup = BeautifulSoup(html, "lxml")
    for tag in soup(["script", "style", "head"]):
        tag.decompose()
    text = soup.get_text("\n")
    return _BLANK_LINES.sub("\n\n", text).strip()


def header_map(payload: dict[str, Any]) -> dict[str, str]:
    """Lower-cased header name to value; the first occurrence wins."""
    headers: dict[str, str] = {}
    for header in payload.get("headers") or []:
        if not isinstance(header, dict):
            continue
        name = str(header.get("name") or "").lower()
        if name and name not in headers:
            headers[name] = str(header.get("value") or "")
    return headers


def _collect_parts(part: dict[str, Any], mime_type: str, out: list[str]) -> None:
    data = (part.get("body") or {}).get("data")
    if part.get("mimeType") == mime_type and data:
        try:
            out.append(decode_body_data(data))
        except DataError as e:
            logger.debug(f"Skipping {mime_type} part: {e}")

    for sub_part in part.get("parts") or []:
        if isinstance(sub_part, dict):
            _collect_parts(sub_part, mime_type, out)


def extract_body(payload: dict[str, Any]) -> str:
    """
    Best-effort plain text body.

    Preference order:
    1. all ``text/plain`` parts joined by a blank line
    2. all ``text/html`` parts, tags stripped
    3. the top-level payload body
    """
    plain: list[str] = []
    _collect_parts(payload, "text/plain", plain)
    if plain:
        return "\n\n".join(plain)

    html: list[str] = []
    _collect_parts(payload, "text/html", html)
    if html:
        return html_to_text("\n\n".join(html))

    data = (payload.get("body") or {}).get("data")
    if data:
        try:
            return decode_body_data(data)
        except DataError as e:
            logger.debug(f"Skipping payload body: {e}")
    return ""


def parse_message(raw: dict[str, Any]) -> MailMessage:
    """Build a MailMessage from a Gmail API message resource."""
    payload = raw.get("payload") or {}
    headers = header_map(payload)

    to_header = headers.get("to", "")
    delivered_to = headers.get("delivered-to", "")

    return MailMessage(
        id=str(raw.get("id") or ""),
        thread_id=str(raw.get("threadId") or ""),
        sender=headers.get("from", ""),
        to=to_header or delivered_to,
        delivered_to=delivered_to or to_header,
        subject=headers.get("subject", ""),
        body=extract_body(payload),
    )
