"""Tests for Gmail query construction."""

from datetime import date

from gmail_order_status.models.enums import ContentArea
from gmail_order_status.services.matching.query import build_query, quote_term


def test_statuses_become_subject_or_clause():
    query = build_query(["Paid", "Cancelled"])
    assert query == '(subject:"Paid" OR subject:"Cancelled")'


def test_title_and_start_date_terms():
    query = build_query(["Paid"], title_filter="Shop order", start_date="2024-03-05")
    assert query == '(subject:"Paid") subject:"Shop order" after:2024/03/05'


def test_status_clause_omitted_without_subject_area():
    query = build_query(
        ["Paid"],
        title_filter="Shop",
        start_date=date(2024, 1, 2),
        status_search_areas=[ContentArea.BODY],
    )
    assert "Paid" not in query
    assert query == 'subject:"Shop" after:2024/01/02'


def test_invalid_start_date_is_ignored():
    assert build_query(["Paid"], start_date="02/01/2024") == '(subject:"Paid")'
    assert build_query(["Paid"], start_date="2024-02-30") == '(subject:"Paid")'


def test_no_terms_means_empty_query():
    assert build_query([], status_search_areas=["body"]) == ""
    assert build_query(["  "], title_filter="  ") == ""


def test_quote_term_escapes_backslash_and_quote():
    assert quote_term('say "hi"') == '"say \\"hi\\""'
    assert quote_term("a\\b") == '"a\\\\b"'
