import logging

from fastapi import APIRouter, BackgroundTasks, Depends
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from conflict_lens.api.widget import WIDGET_MIME_TYPE, load_widget_html
from conflict_lens.core.errors import ConflictLensError, UpstreamError
from conflict_lens.models.pydantic import (
    Acknowledgement,
    AttributionRequest,
    DiscoverRequest,
    DiscoveryResult,
)
from conflict_lens.services.discovery_service import DiscoveryService, get_discovery_service
from conflict_lens.services.telemetry import ATTRIBUTION_EVENT, RUN_EVENT

logger = logging.getLogger(__name__)

router = APIRouter()


def error_payload(exc: ConflictLensError) -> dict:
    payload = {"error": exc.kind, "detail": str(exc)}
    if isinstance(exc, UpstreamError):
        payload["upstream_status"] = exc.status
    errors = getattr(exc, "errors", None)
    if errors:
        payload["violations"] = errors
    return payload


# einfacher Liveness-Check
@router.get("/healthz", response_class=PlainTextResponse)
def healthz():
    return "ok"


# Discovery: Claims aufzählen, Konflikte auditieren, Report zurückgeben
@router.post("/discover", response_model=DiscoveryResult)
def discover(
    req: DiscoverRequest,
    background_tasks: BackgroundTasks,
    service: DiscoveryService = Depends(get_discovery_service),
):
    try:
        result, event = service.discover(req)
    except ConflictLensError as exc:
        return JSONResponse(status_code=502, content=error_payload(exc))

    # erst nach dem Response, Fehler dort werden verschluckt
    background_tasks.add_task(service.telemetry.capture, RUN_EVENT, event)
    return result


@router.post("/attribution", response_model=Acknowledgement)
def track_attribution(
    req: AttributionRequest,
    background_tasks: BackgroundTasks,
    service: DiscoveryService = Depends(get_discovery_service),
):
    background_tasks.add_task(
        service.telemetry.capture,
        ATTRIBUTION_EVENT,
        service.attribution_event(req.found_via),
    )
    return Acknowledgement(message="Thanks. Saved.")


@router.get("/widget")
def widget():
    return Response(content=load_widget_html(), media_type=WIDGET_MIME_TYPE)
