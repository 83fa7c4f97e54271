"""Order repository interface (the order writer contract).

The intake pipeline consumes storage through a narrow contract:
"insert a record into a named table, return the stored record or an
error" plus "fetch a record by id".

The Service Layer depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Optional

if TYPE_CHECKING:
    from modules.orders.models import AbstractOrder


class IOrderRepository(ABC):
    """Repository contract for storefront orders.

    ``table`` is one of the partition names returned by the tenant
    router (``orders`` / ``test_orders``).
    """

    @property
    @abstractmethod
    def is_configured(self) -> bool:
        """``True`` when storage credentials are present."""

    @abstractmethod
    def create(self, table: str, data: Dict[str, Any]) -> AbstractOrder:
        """Insert exactly one order row and return it with its id.

        Raises:
            StorageWriteFailed: the datastore rejected the write.
        """

    @abstractmethod
    def get_by_id(self, table: str, id: str) -> Optional[AbstractOrder]:
        """Retrieve an order by primary key, or ``None``."""
