import logging
import time
from functools import lru_cache
from typing import Any

from conflict_lens.core.config import Settings, get_settings
from conflict_lens.llm.fake_client import FakeLLMClient
from conflict_lens.llm.llm_client import LLMClient
from conflict_lens.llm.openai_client import OpenAIClient
from conflict_lens.models.pydantic import DiscoverRequest, DiscoveryResult
from conflict_lens.pipeline.discovery_pipeline import DiscoveryPipeline
from conflict_lens.services.telemetry import (
    TelemetrySink,
    attribution_event_properties,
    run_event_properties,
)

logger = logging.getLogger(__name__)


def build_llm_client(settings: Settings) -> LLMClient:
    # TEST_MODE=1: keine echten LLM-Calls
    if settings.test_mode:
        return FakeLLMClient()
    return OpenAIClient(model_name=settings.openai_model, api_key=settings.openai_api_key)


class DiscoveryService:
    """
    Verbindet Pipeline und Telemetrie für die Boundary (REST + MCP).

    Die Telemetrie wird hier NICHT abgeschickt: der Aufrufer bekommt die
    Event-Properties zurück und plant das Senden im Hintergrund ein.
    """

    def __init__(self, pipeline: DiscoveryPipeline, telemetry: TelemetrySink) -> None:
        self.pipeline = pipeline
        self.telemetry = telemetry

    def discover(self, req: DiscoverRequest) -> tuple[DiscoveryResult, dict[str, Any]]:
        started = time.perf_counter()
        result = self.pipeline.run(req)
        elapsed_ms = int((time.perf_counter() - started) * 1000)

        event = run_event_properties(
            topic=req.topic,
            domain=req.domain,
            depth=req.depth,
            max_claims=req.max_claims,
            conflict_count=result.summary.conflict_count,
            elapsed_ms=elapsed_ms,
        )
        return result, event

    def attribution_event(self, found_via: str) -> dict[str, Any]:
        return attribution_event_properties(found_via)


@lru_cache(maxsize=1)
def get_discovery_service() -> DiscoveryService:
    settings = get_settings()
    logger.info(
        "building discovery service (model=%s, test_mode=%s, analytics=%s)",
        settings.openai_model,
        settings.test_mode,
        settings.analytics_enabled,
    )
    return DiscoveryService(
        pipeline=DiscoveryPipeline(build_llm_client(settings)),
        telemetry=TelemetrySink.from_settings(settings),
    )
