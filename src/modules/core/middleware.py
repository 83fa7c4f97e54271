import re
import uuid
from typing import Callable

import structlog
from django.conf import settings
from django.http import HttpRequest, HttpResponse

logger = structlog.get_logger(__name__)

# Caller-supplied ids end up in every log line; anything else is replaced.
_REQUEST_ID_RE = re.compile(r"[A-Za-z0-9._:-]{1,128}")


class CorrelationIdMiddleware:
    """Tags every log line of a request with a correlation ID.

    The ID comes from the ``X-Request-ID`` header set by the storefront's
    edge proxy; a missing or malformed value is replaced with a UUID4.
    It is bound to the structlog context (so the intake pipeline's
    ``order.*`` events carry it) and echoed back in ``X-Request-ID``.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        supplied = request.META.get("HTTP_X_REQUEST_ID", "")
        cid = supplied if _REQUEST_ID_RE.fullmatch(supplied) else str(uuid.uuid4())

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(correlation_id=cid)

        log = logger.bind(method=request.method, path=request.path)
        log.info("http.request_started")

        response = self.get_response(request)

        log.info("http.request_finished", status_code=response.status_code)

        response["X-Request-ID"] = cid
        return response


class SecurityHeadersMiddleware:
    """Adds the browser hardening headers Django does not set itself.

    ``X-Frame-Options``, ``X-Content-Type-Options`` and ``Referrer-Policy``
    come from Django's own middleware; this one adds the Content Security
    Policy, the Permissions Policy and the legacy XSS filter header.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response
        self.csp = "; ".join(settings.CONTENT_SECURITY_POLICY)
        self.permissions_policy = settings.PERMISSIONS_POLICY

    def __call__(self, request: HttpRequest) -> HttpResponse:
        response = self.get_response(request)
        response.setdefault("Content-Security-Policy", self.csp)
        response.setdefault("Permissions-Policy", self.permissions_policy)
        response.setdefault("X-XSS-Protection", "1; mode=block")
        return response
