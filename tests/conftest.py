import os

import pytest

os.environ.setdefault("TEST_MODE", "1")
os.environ.setdefault("POSTHOG_API_KEY", "")
os.environ.setdefault("POSTHOG_HOST", "")
os.environ.setdefault("MCP_ALLOWED_HOSTS", "")

from conflict_lens.core.config import get_settings
from conflict_lens.llm.llm_client import LLMClient
from conflict_lens.services.discovery_service import get_discovery_service


def make_claim(i: int, **overrides) -> dict:
    claim = {
        "claim_id": f"c{i}",
        "assertion": f"Assertion number {i}.",
        "dimension": "effect size",
        "polarity": ["affirm", "deny", "mixed"][i % 3],
        "qualifiers": ["adults"],
        "confidence": 0.5,
    }
    claim.update(overrides)
    return claim


def make_conflict(i: int, claim_a: str, claim_b: str, **overrides) -> dict:
    conflict = {
        "conflict_id": f"k{i}",
        "dimension": "effect size",
        "claim_a": claim_a,
        "claim_b": claim_b,
        "conflict_type": "polarity_incompatible",
        "explanation": "One affirms what the other denies.",
        "severity": 0.6,
        "researcher_warning": "Do not cite either claim without its scope.",
    }
    conflict.update(overrides)
    return conflict


class ScriptedLLMClient(LLMClient):
    """Spielt vorbereitete Antworten (oder Exceptions) der Reihe nach ab und zeichnet Calls auf."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls: list[tuple[str, str]] = []

    def generate_json(self, instructions: str, input: str):
        self.calls.append((instructions, input))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def claim_factory():
    return make_claim


@pytest.fixture
def conflict_factory():
    return make_conflict


@pytest.fixture
def claim_set_payload():
    def _build(n: int, topic: str = "coffee and longevity") -> dict:
        return {"topic": topic, "claims": [make_claim(i) for i in range(1, n + 1)]}

    return _build


@pytest.fixture
def report_payload():
    def _build(conflicts: list[dict], topic: str = "coffee and longevity", count: int | None = None) -> dict:
        return {
            "topic": topic,
            "conflicts": conflicts,
            "summary": {
                "conflict_count": len(conflicts) if count is None else count,
                "top_dimensions": ["effect size"] if conflicts else [],
                "safe_citation_note": "Qualify every claim by population and era.",
            },
        }

    return _build


@pytest.fixture
def scripted_llm():
    return ScriptedLLMClient


@pytest.fixture(autouse=True)
def _fresh_singletons():
    # Settings und Service sind prozessweit gecacht
    get_settings.cache_clear()
    get_discovery_service.cache_clear()
    yield
    get_settings.cache_clear()
    get_discovery_service.cache_clear()
