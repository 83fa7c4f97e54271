"""Storefront order models.

Business rules implemented:
- Orders are written once by the intake pipeline and never mutated by it.
- ``status`` starts as ``pending`` (or ``out_of_stock`` when the product
  page flagged the item unavailable).
- ``state`` and ``color`` are closed enumerations (choices).
- ``metadata`` holds string values only (enforced by the intake DTO).
- Production and non-production orders live in two tables with an
  identical schema (``orders`` / ``test_orders``); the tenant router
  decides which one a submission lands in.
"""

from __future__ import annotations

import uuid6
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from modules.orders.constants import (
    MAX_QUANTITY,
    NIGERIAN_STATES,
    PRODUCT_COLORS,
    PRODUCTION_TABLE,
    TEST_TABLE,
    OrderStatus,
)

STATE_CHOICES = [(state, state) for state in NIGERIAN_STATES]
COLOR_CHOICES = [(color, color) for color in PRODUCT_COLORS]


class AbstractOrder(models.Model):
    """Schema shared by both order partitions.

    The UUIDv7 primary key is time-ordered, so ids handed to the sales
    team sort in submission order.
    """

    id = models.UUIDField(primary_key=True, default=uuid6.uuid7, editable=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    full_name: models.CharField = models.CharField(max_length=100)
    phone: models.CharField = models.CharField(max_length=20)
    email: models.EmailField = models.EmailField(  # noqa: DJ01
        null=True, blank=True, default=None
    )
    state: models.CharField = models.CharField(max_length=32, choices=STATE_CHOICES)
    address: models.CharField = models.CharField(max_length=500)

    product_name: models.CharField = models.CharField(max_length=200)
    color: models.CharField = models.CharField(max_length=32, choices=COLOR_CHOICES)
    quantity: models.PositiveSmallIntegerField = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(MAX_QUANTITY)],
    )
    price: models.DecimalField = models.DecimalField(max_digits=12, decimal_places=2)
    total_price: models.DecimalField = models.DecimalField(
        max_digits=12, decimal_places=2
    )
    discount: models.CharField = models.CharField(  # noqa: DJ01
        max_length=50, null=True, blank=True, default=None
    )
    discount_amount: models.DecimalField = models.DecimalField(
        max_digits=12, decimal_places=2, null=True, blank=True, default=None
    )

    metadata: models.JSONField = models.JSONField(default=dict, blank=True)
    status: models.CharField = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
    )

    class Meta:
        abstract = True
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.product_name} x{self.quantity} for {self.full_name} ({self.status})"


class Order(AbstractOrder):
    """Live storefront orders."""

    class Meta(AbstractOrder.Meta):
        db_table = PRODUCTION_TABLE
        indexes = [
            models.Index(fields=["status"], name="orders_status_idx"),
            models.Index(fields=["-created_at"], name="orders_created_idx"),
        ]


class PreviewOrder(AbstractOrder):
    """Orders submitted from local and preview deployments."""

    class Meta(AbstractOrder.Meta):
        db_table = TEST_TABLE
        indexes = [
            models.Index(fields=["status"], name="test_orders_status_idx"),
            models.Index(fields=["-created_at"], name="test_orders_created_idx"),
        ]
