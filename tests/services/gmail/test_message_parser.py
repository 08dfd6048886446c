"""Tests for Gmail payload parsing."""

import base64

from gmail_order_status.services.gmail.message_parser import (
    decode_body_data,
    extract_body,
    html_to_text,
    parse_message,
)


def _b64(text: str) -> str:
    return base64.urlsafe_b64encode(text.encode()).decode().rstrip("=")


def test_decode_body_data_tolerates_missing_padding():
    assert decode_body_data(_b64("hello!")) == "hello!"
    assert decode_body_data("") == ""


def test_plain_parts_are_joined():
    payload = {
        "mimeType": "multipart/mixed",
        "parts": [
            {"mimeType": "text/plain", "body": {"data": _b64("first")}},
            {
                "mimeType": "multipart/alternative",
                "parts": [
                    {"mimeType": "text/plain", "body": {"data": _b64("second")}},
                    {"mimeType": "text/html", "body": {"data": _b64("<p>html</p>")}},
                ],
            },
        ],
    }
    assert extract_body(payload) == "first\n\nsecond"


def test_html_used_when_no_plain_part():
    payload = {
        "mimeType": "text/html",
        "body": {"data": _b64("<html><style>p{}</style><p>Order&nbsp;Paid &amp; shipped</p></html>")},
    }
    text = extract_body(payload)
    assert "Order\xa0Paid & shipped" in text
    assert "p{}" not in text


def test_falls_back_to_payload_body():
    payload = {"mimeType": "application/octet-stream", "body": {"data": _b64("raw body")}}
    assert extract_body(payload) == "raw body"


def test_malformed_payload_yields_empty_body():
    assert extract_body({}) == ""
    assert extract_body({"mimeType": "text/plain", "body": {"data": "abcde"}}) == ""


def test_html_to_text_strips_tags():
    assert html_to_text("<div>A<br>B</div>") == "A\nB"


def test_parse_message_headers(raw_message):
    raw = raw_message("m1", subject="order-1 Paid", sender="shop@x.com", to="me@x.com", body="hi")
    message = parse_message(raw)

    assert message.id == "m1"
    assert message.thread_id == "t-m1"
    assert message.subject == "order-1 Paid"
    assert message.sender == "shop@x.com"
    assert message.to == "me@x.com"
    assert message.delivered_to == "me@x.com"
    assert message.body == "hi"


def test_to_and_delivered_to_fall_back_to_each_other():
    only_delivered = {"id": "a", "payload": {"headers": [{"name": "Delivered-To", "value": "d@x.com"}]}}
    message = parse_message(only_delivered)
    assert message.to == "d@x.com"
    assert message.delivered_to == "d@x.com"

    both = {
        "id": "b",
        "payload": {
            "headers": [
                {"name": "delivered-to", "value": "d@x.com"},
                {"name": "TO", "value": "t@x.com"},
            ]
        },
    }
    message = parse_message(both)
    assert message.to == "t@x.com"
    assert message.delivered_to == "d@x.com"


def test_missing_headers_default_to_empty():
    message = parse_message({"id": "c"})
    assert message.subject == ""
    assert message.sender == ""
    assert message.body == ""
