"""Order writer: storage contract and its Django ORM implementation."""

from modules.orders.repositories.django_repository import (
    OrderDjangoRepository,
    model_for_table,
)
from modules.orders.repositories.interfaces import IOrderRepository

__all__ = ["IOrderRepository", "OrderDjangoRepository", "model_for_table"]
