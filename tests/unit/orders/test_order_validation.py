"""Unit tests for the order field validator.

Covers:
- parse_order: accepted submissions and their normalized values.
- Field rules in declaration order (first failing field wins).
- OrderMetadataDTO: recognised gift keys and string-only extras.
- CreateOrderDTO.to_record: the persisted row shape and initial status.
"""

from __future__ import annotations

from decimal import Decimal

import pytest
from pydantic import ValidationError

from modules.orders.constants import OrderStatus
from modules.orders.dtos import (
    CreateOrderDTO,
    StockStatusEnum,
    is_nigerian_mobile,
    normalize_phone,
    parse_order,
)
from modules.orders.exceptions import OrderValidationFailed

pytestmark = pytest.mark.unit


def _payload(**overrides):
    payload = {
        "full_name": "Ada Obi",
        "phone": "08012345678",
        "state": "Lagos",
        "address": "12 Admiralty Way, Lekki Phase 1",
        "product_name": "MEGIR Chronograph Watch",
        "color": "Navy Blue",
        "quantity": 1,
        "price": 57000,
        "total_price": 57000,
    }
    payload.update(overrides)
    return payload


def _failed_field(payload) -> str:
    with pytest.raises(OrderValidationFailed) as exc_info:
        parse_order(payload)
    return exc_info.value.field


# ===========================================================================
# Phone helpers
# ===========================================================================


class TestPhoneHelpers:
    def test_normalize_strips_spaces_and_dashes(self):
        assert normalize_phone("0801 234-5678") == "08012345678"

    @pytest.mark.parametrize(
        "phone", ["08012345678", "+2348012345678", "09031234567", "07031234567"]
    )
    def test_nigerian_mobiles_accepted(self, phone):
        assert is_nigerian_mobile(phone)

    @pytest.mark.parametrize(
        "phone", ["12345", "+14155550123", "not-a-phone"]
    )
    def test_other_numbers_rejected(self, phone):
        assert not is_nigerian_mobile(phone)


# ===========================================================================
# Accepted submissions
# ===========================================================================


class TestParseOrderValid:
    def test_minimal_submission(self):
        dto = parse_order(_payload())
        assert dto.full_name == "Ada Obi"
        assert dto.email is None
        assert dto.metadata is None
        assert dto.stock_status is None
        assert dto.price == Decimal("57000.00")

    def test_phone_stored_without_separators(self):
        dto = parse_order(_payload(phone="+234 801-234-5678"))
        assert dto.phone == "+2348012345678"

    def test_blank_email_is_absent(self):
        dto = parse_order(_payload(email="   "))
        assert dto.email is None

    def test_valid_email_kept(self):
        dto = parse_order(_payload(email="ada@example.com"))
        assert dto.email == "ada@example.com"

    def test_empty_discount_is_absent(self):
        dto = parse_order(_payload(discount=""))
        assert dto.discount is None

    def test_amounts_rounded_to_cents(self):
        dto = parse_order(_payload(price=19.999, total_price=39.996))
        assert dto.price == Decimal("20.00")
        assert dto.total_price == Decimal("40.00")

    def test_zero_discount_amount_allowed(self):
        dto = parse_order(_payload(discount="WELCOME10", discount_amount=0))
        assert dto.discount == "WELCOME10"
        assert dto.discount_amount == Decimal("0.00")

    def test_unknown_top_level_keys_ignored(self):
        dto = parse_order(_payload(utm_source="instagram"))
        assert not hasattr(dto, "utm_source")

    def test_stock_status_read_from_camel_case_key(self):
        dto = parse_order(_payload(stockStatus="out-of-stock"))
        assert dto.stock_status == StockStatusEnum.OUT_OF_STOCK

    def test_gift_metadata_with_extra_string_keys(self):
        dto = parse_order(
            _payload(
                metadata={
                    "gift_recipient": "Chinedu",
                    "gift_relationship": "Brother",
                    "occasion": "Birthday",
                    "wrapping": "premium",
                }
            )
        )
        assert dto.metadata.gift_recipient == "Chinedu"
        assert dto.metadata.model_extra == {"wrapping": "premium"}

    def test_dto_is_frozen(self):
        dto = parse_order(_payload())
        with pytest.raises(ValidationError):
            dto.quantity = 5


# ===========================================================================
# Rejected submissions
# ===========================================================================


class TestParseOrderInvalid:
    @pytest.mark.parametrize("payload", [None, [], "order", 42])
    def test_non_object_body(self, payload):
        assert _failed_field(payload) == "body"

    @pytest.mark.parametrize("name", ["A", "Ada 0bi", "x" * 101, "Ada<b>"])
    def test_full_name(self, name):
        assert _failed_field(_payload(full_name=name)) == "full_name"

    def test_full_name_accepts_hyphen_and_apostrophe(self):
        dto = parse_order(_payload(full_name="Ngozi O'Neil-Adeyemi"))
        assert dto.full_name == "Ngozi O'Neil-Adeyemi"

    def test_phone_message(self):
        with pytest.raises(OrderValidationFailed) as exc_info:
            parse_order(_payload(phone="12345"))
        assert str(exc_info.value) == (
            "phone: Invalid Nigerian phone number. Use format: +234... or 0..."
        )

    def test_invalid_email(self):
        assert _failed_field(_payload(email="not-an-email")) == "email"

    @pytest.mark.parametrize("state", ["lagos", "Atlantis", ""])
    def test_state_is_case_exact_member(self, state):
        assert _failed_field(_payload(state=state)) == "state"

    @pytest.mark.parametrize(
        "address",
        [
            "short",
            "<script>alert(1)</script> Lekki",
            "12 Admiralty Way JavaScript:void(0)",
            "<img src=x ONERROR=alert(1)> Lekki",
        ],
    )
    def test_address(self, address):
        assert _failed_field(_payload(address=address)) == "address"

    @pytest.mark.parametrize("product_name", ["", "Watch; DROP TABLE", "Watch & Co"])
    def test_product_name(self, product_name):
        assert _failed_field(_payload(product_name=product_name)) == "product_name"

    def test_product_name_accepts_parentheses(self):
        dto = parse_order(_payload(product_name="MEGIR Watch (Gift Edition)"))
        assert dto.product_name == "MEGIR Watch (Gift Edition)"

    def test_unknown_color(self):
        assert _failed_field(_payload(color="Purple")) == "color"

    @pytest.mark.parametrize("quantity", [0, 101, 1.5, "2", True])
    def test_quantity_is_strict_integer_in_range(self, quantity):
        assert _failed_field(_payload(quantity=quantity)) == "quantity"

    @pytest.mark.parametrize(
        "price", [0, -1, 0.001, float("inf"), float("nan"), "57000", "abc", True]
    )
    def test_price_must_be_positive_and_finite(self, price):
        assert _failed_field(_payload(price=price)) == "price"

    def test_numeric_string_amount_rejected(self):
        with pytest.raises(OrderValidationFailed) as exc_info:
            parse_order(_payload(total_price="57000"))
        assert str(exc_info.value) == "total_price: Input should be a number"

    def test_string_discount_amount_rejected(self):
        assert _failed_field(_payload(discount_amount="500")) == "discount_amount"

    def test_total_price_must_be_positive(self):
        assert _failed_field(_payload(total_price=0)) == "total_price"

    def test_discount_too_long(self):
        assert _failed_field(_payload(discount="X" * 51)) == "discount"

    def test_negative_discount_amount(self):
        assert _failed_field(_payload(discount_amount=-5)) == "discount_amount"

    def test_metadata_values_must_be_strings(self):
        field = _failed_field(_payload(metadata={"wrapping": 3}))
        assert field == "metadata.wrapping"

    def test_gift_message_too_long(self):
        field = _failed_field(_payload(metadata={"gift_message": "x" * 501}))
        assert field == "metadata.gift_message"

    def test_unknown_stock_status(self):
        assert _failed_field(_payload(stockStatus="backorder")) == "stockStatus"

    def test_first_failing_field_wins(self):
        payload = _payload(full_name="A", phone="123", color="Purple")
        with pytest.raises(OrderValidationFailed) as exc_info:
            parse_order(payload)
        assert exc_info.value.field == "full_name"

    def test_missing_required_field(self):
        payload = _payload()
        del payload["address"]
        with pytest.raises(OrderValidationFailed) as exc_info:
            parse_order(payload)
        assert exc_info.value.field == "address"
        assert exc_info.value.message == "Field required"


# ===========================================================================
# Persistence payload
# ===========================================================================


class TestToRecord:
    def test_record_shape(self):
        record = parse_order(_payload(email="ada@example.com")).to_record()
        assert record == {
            "full_name": "Ada Obi",
            "phone": "08012345678",
            "email": "ada@example.com",
            "state": "Lagos",
            "address": "12 Admiralty Way, Lekki Phase 1",
            "product_name": "MEGIR Chronograph Watch",
            "color": "Navy Blue",
            "quantity": 1,
            "price": Decimal("57000.00"),
            "total_price": Decimal("57000.00"),
            "discount": None,
            "discount_amount": None,
            "metadata": {},
            "status": OrderStatus.PENDING,
        }

    def test_out_of_stock_status(self):
        record = parse_order(_payload(stockStatus="out-of-stock")).to_record()
        assert record["status"] == OrderStatus.OUT_OF_STOCK

    def test_in_stock_status(self):
        record = parse_order(_payload(stockStatus="in-stock")).to_record()
        assert record["status"] == OrderStatus.PENDING

    def test_metadata_drops_absent_keys(self):
        record = parse_order(
            _payload(metadata={"gift_recipient": "Chinedu", "note": "ring first"})
        ).to_record()
        assert record["metadata"] == {"gift_recipient": "Chinedu", "note": "ring first"}

    def test_direct_construction_by_field_name(self):
        dto = CreateOrderDTO(
            **_payload(), stock_status=StockStatusEnum.IN_STOCK
        )
        assert dto.initial_status == OrderStatus.PENDING
