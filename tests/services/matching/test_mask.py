"""Tests for mask compilation."""

import pytest

from gmail_order_status.services.matching.mask import (
    compile_extra_field_mask,
    compile_order_id_mask,
    compile_status_pattern,
)
from gmail_order_status.utils.errors import ConfigurationError


@pytest.mark.parametrize("digits", ["7", "4821", "000123"])
def test_order_id_mask_recovers_digits(digits):
    mask = compile_order_id_mask("order-{entry_id}")
    assert mask.capture(f"Your order-{digits} has shipped") == digits


def test_order_id_mask_is_case_insensitive():
    mask = compile_order_id_mask("Order #{entry_id}")
    assert mask.capture("ORDER #55 paid") == "55"


def test_order_id_mask_escapes_literal_text():
    mask = compile_order_id_mask("order.{entry_id}(x)")
    assert mask.capture("order.12(x)") == "12"
    assert mask.capture("orderX12(x)") is None


def test_order_id_mask_requires_digits():
    mask = compile_order_id_mask("order-{entry_id}")
    assert mask.capture("order-abc") is None


def test_blank_mask_compiles_to_none():
    assert compile_order_id_mask("") is None
    assert compile_order_id_mask("   ") is None
    assert compile_extra_field_mask(None) is None


def test_mask_without_placeholder_is_a_literal_gate():
    mask = compile_order_id_mask("Order confirmation")
    assert mask.group is None
    assert mask.capture("Your order confirmation") == ""
    assert mask.capture("Invoice") is None


def test_repeated_placeholder_is_rejected():
    with pytest.raises(ConfigurationError):
        compile_order_id_mask("{entry_id}-{entry_id}")


def test_literal_prefix_stops_at_placeholder_and_wildcard():
    assert compile_order_id_mask("order-{entry_id}").literal_prefix == "order-"
    assert compile_order_id_mask("shop*order {entry_id}").literal_prefix == "shop"


def test_extra_field_mask_captures_trimmed_value():
    mask = compile_extra_field_mask("Tracking: {value}")
    assert mask.capture("Tracking:   1Z999AA1  ") == "1Z999AA1"


def test_extra_field_mask_miss_returns_none():
    mask = compile_extra_field_mask("Tracking: {value}")
    assert mask.capture("No tracking yet") is None
    assert mask.capture("") is None


def test_status_pattern_matches_substring_ignoring_case():
    pattern = compile_status_pattern("Paid (online)")
    assert pattern.search("Order PAID (ONLINE) today")
    assert not pattern.search("Order Paid online")
