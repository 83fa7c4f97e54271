"""Order intake API view.

Exposes ``OrderIntakeService`` via ``POST /api/orders``.  Domain exceptions
are caught and translated into the endpoint's stable response shapes;
the view never swallows generic exceptions.
"""

from __future__ import annotations

from typing import Any

import structlog
from rest_framework import status
from rest_framework.exceptions import ParseError, UnsupportedMediaType
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from modules.orders.admission import AdmissionLimiter, client_identity
from modules.orders.constants import (
    CREATED_MESSAGE,
    NOT_RECORDED_MESSAGE,
    STORAGE_FAILED_MESSAGE,
)
from modules.orders.duplicates import DuplicateSuppressor
from modules.orders.exceptions import (
    AdmissionDenied,
    DuplicateOrder,
    OrderValidationFailed,
    StorageWriteFailed,
)
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderIntakeService

logger = structlog.get_logger(__name__)


def _read_payload(request: Request) -> Any:
    """Parse the JSON body, reporting parser failures as a ``body`` error."""
    try:
        return request.data
    except ParseError:
        reason = "Malformed JSON body"
    except UnsupportedMediaType:
        reason = "Content-Type must be application/json"
    logger.info("order.validation_failed", field="body", reason=reason)
    raise OrderValidationFailed("body", reason)


class OrderIntakeView(APIView):
    """Public order submission endpoint used by the product pages.

    Uses ``OrderIntakeService`` with injected collaborators (DIP).  The
    admission and duplicate caches are process-wide; only the thin
    wrappers around them are built per request.
    """

    authentication_classes: list = []
    permission_classes = [AllowAny]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = OrderIntakeService(
            order_repository=OrderDjangoRepository(),
            admission_limiter=AdmissionLimiter(),
            duplicate_suppressor=DuplicateSuppressor(),
        )

    def post(self, request: Request) -> Response:
        """POST /api/orders

        Returns 200 with ``order_id`` when stored, 200 without it when
        storage is not configured, and 400/409/429/500 on failure.
        """
        identity = client_identity(request)
        try:
            # Admission runs before the body is parsed so malformed
            # requests still count against the client's budget.
            self._service.admit(identity)
            result = self._service.process(
                payload=_read_payload(request),
                identity=identity,
                hostname=request.META.get("HTTP_HOST"),
            )
        except AdmissionDenied as exc:
            return Response(
                {"error": "Too many requests. Please try again later."},
                status=status.HTTP_429_TOO_MANY_REQUESTS,
                headers={"Retry-After": str(exc.retry_after)},
            )
        except OrderValidationFailed as exc:
            return Response(
                {"error": "Validation failed", "message": str(exc)},
                status=status.HTTP_400_BAD_REQUEST,
            )
        except DuplicateOrder as exc:
            return Response(
                {"error": "Duplicate order detected", "message": str(exc)},
                status=status.HTTP_409_CONFLICT,
            )
        except StorageWriteFailed:
            return Response(
                {
                    "error": "Failed to process order",
                    "message": STORAGE_FAILED_MESSAGE,
                },
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        if not result.recorded:
            return Response({"success": True, "message": NOT_RECORDED_MESSAGE})

        return Response(
            {
                "success": True,
                "order_id": result.order_id,
                "message": CREATED_MESSAGE,
            }
        )
