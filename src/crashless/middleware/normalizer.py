"""Turns any captured failure into exactly one error envelope.

The normalizer classifies the failure, applies the mode policy (masking in
production, stack traces in development), logs one event, schedules the
telemetry callback and every registered exporter, and builds the JSON
response. It never raises for the failure it was given.
"""

from typing import Any

import structlog
from fastapi.encoders import jsonable_encoder
from starlette.requests import Request
from starlette.responses import JSONResponse

from crashless.config.mode import is_production
from crashless.config.settings import MiddlewareConfig
from crashless.errors.envelope import ErrorEnvelope, FailureKind, build_envelope, format_stack, to_domain_error
from crashless.errors.exceptions import DomainError
from crashless.exporters.registry import ExporterRegistry, RequestMeta, exporter_registry

logger = structlog.get_logger()


class ErrorNormalizer:
    """Per-installation failure handler.

    Usable directly (``await normalizer.capture(err, request)``) or as a
    Starlette exception handler (``await normalizer(request, exc)``).
    """

    def __init__(
        self,
        config: MiddlewareConfig | None = None,
        registry: ExporterRegistry | None = None,
    ) -> None:
        self.config = config or MiddlewareConfig()
        self.registry = registry if registry is not None else exporter_registry

    def normalize(self, failure: Any) -> tuple[FailureKind, DomainError, ErrorEnvelope]:
        kind, error = to_domain_error(failure, self.config.default_status)
        envelope = build_envelope(
            error,
            production=is_production(),
            mask_messages=self.config.mask_messages,
            stack=format_stack(failure),
        )
        return kind, error, envelope

    async def capture(
        self,
        failure: Any,
        request: Request,
        *,
        committed: bool = False,
    ) -> JSONResponse | None:
        """Handle one failure captured on ``request``.

        Args:
            failure: Whatever reached the error channel, ``None`` included.
            request: The failing request.
            committed: The response start was already sent. The failure is
                still logged and reported, but no response is built.

        Returns:
            The envelope response, or ``None`` when ``committed``.
        """
        kind, error, envelope = self.normalize(failure)
        meta = RequestMeta(method=request.method, path=request.url.path, status=envelope.status)

        if self.config.log:
            self._log(kind, envelope, meta, failure, committed)

        extra = []
        if self.config.on_telemetry is not None:
            extra.append(("telemetry", self.config.on_telemetry))
        self.registry.dispatch(error, meta, extra=extra, report_failures=self.config.log)

        if committed:
            return None
        return _render(envelope)

    async def __call__(self, request: Request, exc: Exception) -> JSONResponse:
        response = await self.capture(exc, request, committed=False)
        if response is None:
            raise RuntimeError("No response built for an uncommitted failure")
        return response

    def _log(
        self,
        kind: FailureKind,
        envelope: ErrorEnvelope,
        meta: RequestMeta,
        failure: Any,
        committed: bool,
    ) -> None:
        log_method = logger.error if envelope.status >= 500 else logger.warning
        fields: dict[str, Any] = {
            "method": meta.method,
            "path": meta.path,
            "status": envelope.status,
            "code": envelope.code,
            "kind": kind.value,
        }
        if committed:
            fields["committed"] = True
        if kind is FailureKind.GENERIC and isinstance(failure, BaseException):
            fields["exc_info"] = failure
        log_method("request_error", **fields)


def _render(envelope: ErrorEnvelope) -> JSONResponse:
    body = envelope.to_dict()
    try:
        return JSONResponse(jsonable_encoder(body), status_code=envelope.status)
    except (TypeError, ValueError, RecursionError):
        # Details that cannot be rendered as strict JSON are dropped.
        body.pop("details", None)
        return JSONResponse(jsonable_encoder(body), status_code=envelope.status)
