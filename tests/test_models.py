"""Tests for settings and message models."""

from gmail_order_status.models.accounts import Account, ExtraFieldSpec, Filter, FilterOverrides
from gmail_order_status.models.enums import ContentArea, ErrorType, OrderIdArea
from gmail_order_status.models.messages import FetchResult
from gmail_order_status.models.summary import RunCounters, RunSummary
from gmail_order_status.utils.errors import AuthError, NotFoundError


def test_statuses_accept_string_and_dedupe():
    flt = Filter(statuses="Paid, paid\nShipped,, ")
    assert flt.statuses == ["Paid", "Shipped"]


def test_areas_are_coerced():
    flt = Filter(order_id_search_area="FROM", status_search_area=["Body", "nowhere", "body"])
    assert flt.order_id_search_area == OrderIdArea.FROM
    assert flt.status_search_area == [ContentArea.BODY]

    fallback = Filter(order_id_search_area="cc", status_search_area=[])
    assert fallback.order_id_search_area == OrderIdArea.SUBJECT
    assert fallback.status_search_area == [ContentArea.SUBJECT]


def test_filter_is_empty():
    assert Filter().is_empty()
    assert Filter(extra_fields=[ExtraFieldSpec()]).is_empty()
    assert not Filter(status_field_id="4").is_empty()


def test_overrides_layer_over_base():
    base = Filter(parser_code="orders", mask="order-{entry_id}", statuses=["Paid"])
    merged = FilterOverrides(statuses=["Refunded"]).apply(base)

    assert merged.id == base.id
    assert merged.mask == "order-{entry_id}"
    assert merged.statuses == ["Refunded"]


def test_account_token_parsed_leniently():
    assert Account(token="{token: abc, refresh_token: def}").token == {"token": "abc", "refresh_token": "def"}
    assert Account(token="").token is None
    assert Account(token={}).token is None


def test_get_filter_by_id_or_parser_code():
    account = Account(filters=[Filter(id="flt_1", parser_code="Orders")])
    assert account.get_filter("flt_1").parser_code == "Orders"
    assert account.get_filter("orders").id == "flt_1"
    assert account.get_filter("missing") is None


def test_fetch_result_failure_maps_error_type():
    assert FetchResult.failure(NotFoundError("Account not found")).error_type == ErrorType.CONFIGURATION
    assert FetchResult.failure(AuthError("Not connected")).error_type == ErrorType.AUTH
    assert FetchResult.failure(ValueError("boom")).error_type == ErrorType.TRANSPORT
    assert not FetchResult.failure(ValueError("boom")).ok


def test_run_counters_add():
    totals = RunCounters()
    totals.add(RunSummary(account_id="a", updated=2, errors=1))
    totals.add(RunSummary(account_id="b", updated=1, skipped_no_entry_id=3))
    assert totals.counters() == {
        "updated": 3,
        "extras_updated": 0,
        "skipped_no_status_field": 0,
        "skipped_no_entry_id": 3,
        "skipped_empty_status": 0,
        "errors": 1,
    }
