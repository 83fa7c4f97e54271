"""Order intake service layer (Use Cases).

Orchestrates the admission pipeline for storefront order submissions,
strictly in this order:

    RECEIVED -> ADMITTED -> VALIDATED -> DEDUPLICATED -> ROUTED -> PERSISTED

Each stage raises its own domain exception and skips every later stage:
- ``AdmissionDenied``: the client exceeded its request budget.
- ``OrderValidationFailed``: first invalid field of the submission.
- ``DuplicateOrder``: same phone + product seen within the window.
- ``StorageWriteFailed``: the single insert failed.

When storage is not configured the order is still admitted, validated
and deduplicated, but nothing is written: the result carries
``recorded=False`` so the storefront can keep the WhatsApp hand-off
working without a database.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional

import structlog

from modules.orders.dtos import parse_order
from modules.orders.exceptions import (
    DuplicateOrder,
    OrderNotFound,
    OrderValidationFailed,
)
from modules.orders.routing import resolve_table

if TYPE_CHECKING:
    from modules.orders.admission import AdmissionLimiter
    from modules.orders.dtos import CreateOrderDTO
    from modules.orders.duplicates import DuplicateSuppressor
    from modules.orders.models import AbstractOrder
    from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class IntakeResult:
    """Outcome of an accepted submission."""

    dto: CreateOrderDTO
    table: str
    order: Optional[AbstractOrder] = None

    @property
    def recorded(self) -> bool:
        return self.order is not None

    @property
    def order_id(self) -> Optional[str]:
        return str(self.order.id) if self.order is not None else None


class OrderIntakeService:
    """Application service for the order intake endpoint.

    Receives its collaborators via constructor injection (DIP).
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        admission_limiter: AdmissionLimiter,
        duplicate_suppressor: DuplicateSuppressor,
    ) -> None:
        self._order_repo = order_repository
        self._limiter = admission_limiter
        self._duplicates = duplicate_suppressor

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def submit(
        self,
        payload: Any,
        identity: str,
        hostname: Optional[str],
    ) -> IntakeResult:
        """Run a submission through the admission pipeline.

        Raises:
            AdmissionDenied: request budget exhausted for *identity*.
            OrderValidationFailed: a field failed validation.
            DuplicateOrder: equivalent order accepted recently.
            StorageWriteFailed: the insert failed.
        """
        self.admit(identity)
        return self.process(payload, identity, hostname)

    def admit(self, identity: str) -> None:
        """Stage 1: count the request against *identity*'s budget.

        Callers that read the request body themselves must call this
        before touching it, so unparseable bodies are counted too.

        Raises:
            AdmissionDenied: request budget exhausted for *identity*.
        """
        logger.info("order.intake_started", identity=identity)
        self._limiter.check(identity)

    def process(
        self,
        payload: Any,
        identity: str,
        hostname: Optional[str],
    ) -> IntakeResult:
        """Stages 2-5 for a request that was already admitted."""
        log = logger.bind(identity=identity)

        # 2. Validation
        try:
            dto = parse_order(payload)
        except OrderValidationFailed as exc:
            log.info("order.validation_failed", field=exc.field)
            raise
        log = log.bind(product_name=dto.product_name, state=dto.state)

        # 3. Duplicate suppression
        if self._duplicates.is_duplicate(dto.phone, dto.product_name):
            raise DuplicateOrder(
                "An identical order was submitted recently. "
                "Please wait a few minutes before ordering again."
            )

        # 4. Tenant routing
        table = resolve_table(hostname)
        log = log.bind(table=table)
        log.info("order.routed")

        # 5. Persistence
        if not self._order_repo.is_configured:
            log.warning("order.storage_unconfigured")
            return IntakeResult(dto=dto, table=table)

        order = self._order_repo.create(table, dto.to_record())
        log.info("order.accepted", order_id=str(order.id), status=order.status)
        return IntakeResult(dto=dto, table=table, order=order)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, table: str, order_id: str) -> AbstractOrder:
        """Retrieve a stored order by ID.

        Raises:
            OrderNotFound: if the order does not exist.
        """
        order = self._order_repo.get_by_id(table, order_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order
