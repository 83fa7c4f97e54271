"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's QuerySet API.  Writes go
through the database alias named by ``ORDERS_DATABASE_ALIAS``: the
service-credential connection configured from ``ORDERS_DATABASE_URL``,
which is not subject to the storefront's row-level security.  When the
alias is unset the repository reports itself as unconfigured.

Exactly one INSERT per call; retries are the caller's responsibility.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import structlog
from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction

from modules.orders.exceptions import StorageWriteFailed
from modules.orders.models import AbstractOrder, Order, PreviewOrder
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)

_MODELS_BY_TABLE: Dict[str, type[AbstractOrder]] = {
    model._meta.db_table: model for model in (Order, PreviewOrder)
}


def model_for_table(table: str) -> type[AbstractOrder]:
    """Map a partition name to its model class."""
    try:
        return _MODELS_BY_TABLE[table]
    except KeyError:
        raise ValueError(f"Unknown order table '{table}'.") from None


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    def __init__(self, using: Optional[str] = None) -> None:
        self._using = using if using is not None else settings.ORDERS_DATABASE_ALIAS

    @property
    def is_configured(self) -> bool:
        return bool(self._using)

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(self, table: str, data: Dict[str, Any]) -> AbstractOrder:
        """Insert a single order row into *table*.

        ``data`` keys mirror the model fields (see ``CreateOrderDTO.to_record``).
        """
        model = model_for_table(table)
        log = logger.bind(table=table)
        try:
            with transaction.atomic(using=self._using):
                order = model.objects.using(self._using).create(**data)
        except DatabaseError as exc:
            log.error("order.persist_failed", error=str(exc))
            raise StorageWriteFailed(str(exc)) from exc

        log.info("order.persisted", order_id=str(order.id))
        return order

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, table: str, id: str) -> Optional[AbstractOrder]:
        """Retrieve an order by ID.

        Returns ``None`` for non-existent or invalid IDs.
        """
        model = model_for_table(table)
        try:
            return model.objects.using(self._using).filter(id=id).first()
        except (ValueError, ValidationError):
            return None
