"""Order intake DTOs (the field validator).

Framework-agnostic data transfer objects using Pydantic v2.
``CreateOrderDTO`` is the contract between the intake view and the
intake service: it checks and normalizes every inbound field of a
storefront order submission.  DTOs are immutable (``frozen=True``).

Fields are declared in validation order.  ``parse_order`` reports only
the first failing field, so the declaration order below is an
observable contract of the endpoint.

- ``OrderMetadataDTO``: string-only extension map (gift orders etc.).
- ``CreateOrderDTO``: a full order submission.
"""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal
from enum import StrEnum
from typing import Annotated, Any, Optional

import phonenumbers
from phonenumbers import NumberParseException, PhoneNumberType
from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
)

from modules.orders.constants import (
    ADDRESS_INJECTION_PATTERN,
    MAX_QUANTITY,
    NIGERIAN_STATES,
    PRODUCT_COLORS,
    OrderStatus,
)
from modules.orders.exceptions import OrderValidationFailed

PHONE_REGION = "NG"

_NAME_RE = re.compile(r"[a-zA-Z\s'-]+")
_PRODUCT_NAME_RE = re.compile(r"[a-zA-Z0-9\s\-()]+")
_PHONE_SEPARATORS_RE = re.compile(r"[\s-]")
_ADDRESS_INJECTION_RE = re.compile(ADDRESS_INJECTION_PATTERN, re.IGNORECASE)

_MOBILE_TYPES = {PhoneNumberType.MOBILE, PhoneNumberType.FIXED_LINE_OR_MOBILE}

CENTS = Decimal("0.01")
MAX_AMOUNT = Decimal("10000000000")

Money = Annotated[Decimal, Field(gt=0, lt=MAX_AMOUNT, allow_inf_nan=False)]


def normalize_phone(phone: str) -> str:
    """Strip spaces and dashes from a phone number."""
    return _PHONE_SEPARATORS_RE.sub("", phone)


def is_nigerian_mobile(phone: str) -> bool:
    """Return ``True`` if *phone* is a valid Nigerian mobile number.

    Accepts both the international (``+234...``) and the national
    (``0...``) forms.
    """
    try:
        parsed = phonenumbers.parse(phone, PHONE_REGION)
    except NumberParseException:
        return False
    if not phonenumbers.is_valid_number_for_region(parsed, PHONE_REGION):
        return False
    return phonenumbers.number_type(parsed) in _MOBILE_TYPES


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


# ---------------------------------------------------------------------------
# Enum (framework-agnostic, NOT Django TextChoices)
# ---------------------------------------------------------------------------


class StockStatusEnum(StrEnum):
    """Availability flag sent by the product page."""

    IN_STOCK = "in-stock"
    OUT_OF_STOCK = "out-of-stock"


# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class OrderMetadataDTO(BaseModel):
    """Open extension map for specialised order variants.

    Recognised gift keys are length-bounded; any additional key is
    accepted as long as its value is a string.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    __pydantic_extra__: dict[str, str] = Field(init=False)

    gift_recipient: Optional[str] = Field(default=None, max_length=100)
    gift_relationship: Optional[str] = Field(default=None, max_length=50)
    gift_message: Optional[str] = Field(default=None, max_length=500)
    occasion: Optional[str] = Field(default=None, max_length=100)
    delivery_date: Optional[str] = None


class CreateOrderDTO(BaseModel):
    """Immutable DTO for a storefront order submission.

    Validates (first failure wins, in this order):
    - ``full_name``: 2-100 letters, spaces, hyphens, apostrophes.
    - ``phone``: Nigerian mobile number; stored without spaces/dashes.
    - ``email``: optional; blank means absent.
    - ``state``: case-exact Nigerian state.
    - ``address``: 10-500 chars without script-injection signatures.
    - ``product_name``: 1-200 alphanumerics, spaces, hyphens, parentheses.
    - ``color``: one of the storefront colours.
    - ``quantity``: integer 1-100.
    - ``price`` / ``total_price``: positive, finite JSON numbers.
    - ``discount`` (<= 50 chars) / ``discount_amount`` (>= 0): optional.
    - ``metadata``: optional string-only map.
    - ``stockStatus``: optional ``in-stock`` / ``out-of-stock``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    full_name: str = Field(min_length=2, max_length=100)
    phone: str
    email: Optional[EmailStr] = None
    state: str
    address: str = Field(min_length=10, max_length=500)
    product_name: str = Field(min_length=1, max_length=200)
    color: str
    quantity: int = Field(strict=True, ge=1, le=MAX_QUANTITY)
    price: Money
    total_price: Money
    discount: Optional[str] = Field(default=None, max_length=50)
    discount_amount: Optional[Decimal] = Field(
        default=None, ge=0, lt=MAX_AMOUNT, allow_inf_nan=False
    )
    metadata: Optional[OrderMetadataDTO] = None
    stock_status: Optional[StockStatusEnum] = Field(default=None, alias="stockStatus")

    @field_validator("full_name")
    @classmethod
    def name_characters(cls, v: str) -> str:
        if not _NAME_RE.fullmatch(v):
            raise ValueError(
                "Name can only contain letters, spaces, hyphens, and apostrophes"
            )
        return v

    @field_validator("phone")
    @classmethod
    def phone_must_be_nigerian_mobile(cls, v: str) -> str:
        cleaned = normalize_phone(v)
        if not is_nigerian_mobile(cleaned):
            raise ValueError(
                "Invalid Nigerian phone number. Use format: +234... or 0..."
            )
        return cleaned

    @field_validator("email", "discount", mode="before")
    @classmethod
    def blank_is_absent(cls, v: Any) -> Any:
        return _blank_to_none(v)

    @field_validator("state")
    @classmethod
    def state_must_be_known(cls, v: str) -> str:
        if v not in NIGERIAN_STATES:
            raise ValueError(f"Unknown state '{v}'")
        return v

    @field_validator("address")
    @classmethod
    def address_must_not_carry_markup(cls, v: str) -> str:
        if _ADDRESS_INJECTION_RE.search(v):
            raise ValueError("Address contains invalid characters")
        return v

    @field_validator("product_name")
    @classmethod
    def product_name_characters(cls, v: str) -> str:
        if not _PRODUCT_NAME_RE.fullmatch(v):
            raise ValueError("Product name contains invalid characters")
        return v

    @field_validator("color")
    @classmethod
    def color_must_be_known(cls, v: str) -> str:
        if v not in PRODUCT_COLORS:
            raise ValueError(f"Unknown color '{v}'")
        return v

    @field_validator("price", "total_price", "discount_amount", mode="before")
    @classmethod
    def amount_must_be_number(cls, v: Any) -> Any:
        # JSON numbers only; quantity is strict in the same way.
        if isinstance(v, (str, bool)):
            raise ValueError("Input should be a number")
        return v

    @field_validator("price", "total_price", "discount_amount")
    @classmethod
    def round_to_cents(
        cls, v: Optional[Decimal], info: ValidationInfo
    ) -> Optional[Decimal]:
        if v is None:
            return v
        rounded = v.quantize(CENTS, rounding=ROUND_HALF_UP)
        if info.field_name != "discount_amount" and rounded <= 0:
            raise ValueError("Price must be greater than 0")
        return rounded

    # ------------------------------------------------------------------
    # Persistence payload
    # ------------------------------------------------------------------

    @property
    def initial_status(self) -> str:
        if self.stock_status == StockStatusEnum.OUT_OF_STOCK:
            return OrderStatus.OUT_OF_STOCK
        return OrderStatus.PENDING

    def to_record(self) -> dict[str, Any]:
        """Build the row inserted by the order writer."""
        record = self.model_dump(exclude={"metadata", "stock_status"})
        record["metadata"] = (
            self.metadata.model_dump(exclude_none=True) if self.metadata else {}
        )
        record["status"] = self.initial_status
        return record


# ---------------------------------------------------------------------------
# Validation entry point
# ---------------------------------------------------------------------------


def parse_order(payload: Any) -> CreateOrderDTO:
    """Validate an untyped submission into a ``CreateOrderDTO``.

    Raises:
        OrderValidationFailed: carrying the first failing field path
            (dotted, e.g. ``metadata.gift_message``) and its reason.
    """
    try:
        return CreateOrderDTO.model_validate(payload)
    except ValidationError as exc:
        first = exc.errors()[0]
        raise OrderValidationFailed(_field_path(first["loc"]), _reason(first)) from exc


def _field_path(loc: tuple[Any, ...]) -> str:
    if not loc:
        return "body"
    return ".".join(str(part) for part in loc)


def _reason(error: dict[str, Any]) -> str:
    if error["type"] == "value_error":
        return str(error["ctx"]["error"])
    return error["msg"]
