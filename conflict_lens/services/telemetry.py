import logging
from typing import Any

import requests

from conflict_lens.core.config import Settings
from conflict_lens.core.errors import AnalyticsError

logger = logging.getLogger(__name__)

RUN_EVENT = "conflict_lens_run"
ATTRIBUTION_EVENT = "conflict_lens_found_via"


class TelemetrySink:
    """
    Best-effort Event-Recording (PostHog /capture/).

    Fehler werden geloggt und verworfen; der Aufrufer merkt davon nichts.
    Ohne API-Key oder Host ist die Senke stumm.
    """

    def __init__(
        self,
        api_key: str = "",
        host: str = "",
        timeout: float = 5.0,
        session: requests.Session | None = None,
    ):
        self.api_key = api_key
        self.host = host.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_settings(cls, settings: Settings) -> "TelemetrySink":
        return cls(
            api_key=settings.posthog_api_key,
            host=settings.posthog_host,
            timeout=settings.telemetry_timeout,
        )

    @property
    def enabled(self) -> bool:
        return bool(self.api_key and self.host)

    def capture(self, event: str, properties: dict[str, Any]) -> None:
        if not self.enabled:
            return
        try:
            self._send(event, properties)
        except AnalyticsError:
            logger.exception("telemetry capture FAILED (event=%s)", event)

    def _send(self, event: str, properties: dict[str, Any]) -> None:
        distinct_id = properties.get("distinct_id") or properties.get("widget_session_id") or "unknown"
        try:
            response = self.session.post(
                f"{self.host}/capture/",
                json={
                    "api_key": self.api_key,
                    "distinct_id": distinct_id,
                    "event": event,
                    "properties": properties,
                },
                timeout=self.timeout,
            )
            response.raise_for_status()
        except (requests.RequestException, TypeError, ValueError) as exc:
            raise AnalyticsError(str(exc)) from exc


def run_event_properties(
    topic: str,
    domain: str | None,
    depth: str,
    max_claims: int,
    conflict_count: int,
    elapsed_ms: int,
) -> dict[str, Any]:
    return {
        "distinct_id": topic,
        "topic": topic,
        "domain": domain or "",
        "depth": depth,
        "max_claims": max_claims,
        "conflict_count": conflict_count,
        "elapsed_ms": elapsed_ms,
    }


def attribution_event_properties(found_via: str) -> dict[str, Any]:
    return {"distinct_id": "attribution", "found_via": found_via}
