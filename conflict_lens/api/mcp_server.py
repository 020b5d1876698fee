"""
MCP-Boundary (streamable HTTP) für Chat-Hosts mit Inline-Widget.

Tools:
- discover_conflicting_claims: Report als structuredContent + Widget-Template in _meta
- track_attribution: nur Bestätigung

Resource:
- ui://conflict-lens/widget: statisches Widget-Dokument (text/html+skybridge)
"""

import asyncio
import logging
from typing import Annotated, Any, Literal

import anyio
from mcp.server.fastmcp import FastMCP
from mcp.server.transport_security import TransportSecuritySettings
from mcp.types import CallToolResult, TextContent
from pydantic import Field

from conflict_lens.api.widget import WIDGET_MIME_TYPE, WIDGET_URI, load_widget_html
from conflict_lens.core.config import Settings, get_settings
from conflict_lens.models.pydantic import AttributionRequest, DiscoverRequest, FoundVia
from conflict_lens.services.discovery_service import get_discovery_service
from conflict_lens.services.telemetry import ATTRIBUTION_EVENT, RUN_EVENT

logger = logging.getLogger(__name__)


def transport_security(settings: Settings) -> TransportSecuritySettings:
    """
    Host-Check für /mcp aus der Konfiguration.

    Ohne MCP_ALLOWED_HOSTS ist der Check aus; FastMCP würde sonst wegen des
    Default-Hosts 127.0.0.1 nur localhost-Header zulassen.
    """
    hosts = settings.mcp_allowed_host_list
    return TransportSecuritySettings(
        enable_dns_rebinding_protection=bool(hosts),
        allowed_hosts=hosts,
    )


mcp = FastMCP(
    get_settings().app_name,
    stateless_http=True,
    transport_security=transport_security(get_settings()),
)


def _drop_telemetry_failure(future: "asyncio.Future[None]") -> None:
    # Telemetrie darf nie durchschlagen: Fehler loggen und verwerfen
    if future.cancelled():
        return
    exc = future.exception()
    if exc is not None:
        logger.error("detached telemetry capture FAILED: %r", exc)


def _capture_detached(event: str, properties: dict[str, Any]) -> None:
    # fire-and-forget im Executor, das Tool-Ergebnis wartet nicht darauf
    telemetry = get_discovery_service().telemetry
    future = asyncio.get_running_loop().run_in_executor(None, telemetry.capture, event, properties)
    future.add_done_callback(_drop_telemetry_failure)


@mcp.resource(WIDGET_URI, mime_type=WIDGET_MIME_TYPE)
def conflict_lens_widget() -> str:
    return load_widget_html()


@mcp.tool(
    name="discover_conflicting_claims",
    description="Enumerate conflicting claims about a topic and audit them for contradictions. Never cites sources.",
)
async def discover_conflicting_claims(
    topic: Annotated[str, Field(min_length=2)],
    domain: str | None = None,
    depth: Literal["overview", "academic"] = "academic",
    max_claims: Annotated[int, Field(ge=5, le=40)] = 18,
    strict_no_sources: bool = True,
) -> CallToolResult:
    req = DiscoverRequest(
        topic=topic,
        domain=domain,
        depth=depth,
        max_claims=max_claims,
        strict_no_sources=strict_no_sources,
    )
    logger.debug("mcp discover_conflicting_claims (topic=%r)", topic)
    service = get_discovery_service()
    # Pipeline ist synchron -> Worker-Thread, Event-Loop bleibt frei
    result, event = await anyio.to_thread.run_sync(service.discover, req)
    _capture_detached(RUN_EVENT, event)

    return CallToolResult(
        content=[TextContent(type="text", text="Conflict Lens report ready.")],
        structuredContent=result.model_dump(mode="json"),
        _meta={
            "openai/outputTemplate": WIDGET_URI,
            "openai/widgetAccessible": True,
        },
    )


@mcp.tool(name="track_attribution", description="Record how the user found Conflict Lens.")
async def track_attribution(found_via: FoundVia) -> CallToolResult:
    req = AttributionRequest(found_via=found_via)
    _capture_detached(ATTRIBUTION_EVENT, get_discovery_service().attribution_event(req.found_via))
    return CallToolResult(content=[TextContent(type="text", text="Thanks. Saved.")])
