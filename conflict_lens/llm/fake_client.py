import json
from typing import Any

from conflict_lens.llm.llm_client import LLMClient


class FakeLLMClient(LLMClient):
    """
    Völlig deterministischer Offline-Client für TEST_MODE=1.

    Stufe 1 liefert ein festes Claim-Set zum angefragten Topic,
    Stufe 2 Konflikte, die auf die übergebenen claim_ids verweisen.
    """

    def generate_json(self, instructions: str, input: str) -> Any:
        payload = json.loads(input)
        if "contradiction auditor" in instructions:
            return self._audit(payload)
        return self._claims(payload)

    def _claims(self, payload: dict) -> dict:
        topic = payload.get("topic", "")
        return {
            "topic": topic,
            "claims": [
                {
                    "claim_id": "c1",
                    "assertion": f"{topic} has a large positive effect.",
                    "dimension": "effect size",
                    "polarity": "affirm",
                    "value": "large",
                    "qualifiers": ["adults", "short-term"],
                    "confidence": 0.7,
                    "why_people_repeat_it": "Early headline studies reported it.",
                },
                {
                    "claim_id": "c2",
                    "assertion": f"{topic} has no measurable effect.",
                    "dimension": "effect size",
                    "polarity": "deny",
                    "qualifiers": ["adults", "long-term"],
                    "confidence": 0.6,
                },
                {
                    "claim_id": "c3",
                    "assertion": f"The effect of {topic} depends on how the outcome is defined.",
                    "dimension": "definition of outcome",
                    "polarity": "mixed",
                    "definition_notes": "Self-report vs. objective measurement.",
                    "confidence": 0.5,
                },
            ],
        }

    def _audit(self, payload: dict) -> dict:
        ids = [c["claim_id"] for c in payload.get("claims", [])]
        conflicts = []
        if len(ids) >= 2:
            conflicts.append(
                {
                    "conflict_id": "k1",
                    "dimension": "effect size",
                    "claim_a": ids[0],
                    "claim_b": ids[1],
                    "conflict_type": "scope_mismatch",
                    "explanation": "The claims differ in time horizon, not only in direction.",
                    "severity": 0.8,
                    "researcher_warning": "State the follow-up period when citing either claim.",
                }
            )
        return {
            "topic": payload.get("topic", ""),
            "conflicts": conflicts,
            "summary": {
                "conflict_count": len(conflicts),
                "top_dimensions": ["effect size"] if conflicts else [],
                "safe_citation_note": "Cite scope and definitions alongside any of these claims.",
            },
        }
