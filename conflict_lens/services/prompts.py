"""
Prompt-Policy für die zwei Pipeline-Stufen.

Die Instruktionen sind reine Daten: gleiche Parameter => identischer String.
Das JSON-Strict-Suffix hängt der LLM-Client an, nicht die Policy.
"""

import json
from typing import Any, Sequence

STRICT_ANTI_CITATION = "Do NOT fabricate citations, paper titles, authors, journals, or DOIs."
LOOSE_ANTI_CITATION = "Do not fabricate citations."

_CLAIM_SET_SHAPE = """Output schema:
{
  "topic": "string",
  "claims": [
    {
      "claim_id": "c1",
      "assertion": "string",
      "dimension": "string (axis of comparison, e.g. a quantity, a causal link, a definition)",
      "polarity": "affirm" | "deny" | "mixed",
      "value": "string (optional)",
      "qualifiers": ["population, era, measurement method, ..."],
      "definition_notes": "string (optional)",
      "era_hint": "string (optional)",
      "why_people_repeat_it": "string (optional)",
      "confidence": 0.0
    }
  ]
}
Provide at least 3 claims with unique claim_id values. confidence is between 0 and 1."""

_CONFLICT_REPORT_SHAPE = """Output schema:
{
  "topic": "string",
  "conflicts": [
    {
      "conflict_id": "k1",
      "dimension": "string",
      "claim_a": "claim_id",
      "claim_b": "claim_id",
      "conflict_type": "numeric_incompatible" | "polarity_incompatible" | "scope_mismatch" | "definition_shift" | "measurement_paradigm_shift" | "other",
      "explanation": "string",
      "severity": 0.0,
      "researcher_warning": "string"
    }
  ],
  "summary": {
    "conflict_count": 0,
    "top_dimensions": ["string"],
    "safe_citation_note": "string"
  }
}
claim_a and claim_b must be two different claim_id values from the given claims.
severity is between 0 and 1. If there are no conflicts, use an empty list."""


def anti_fabrication_directive(strict_no_sources: bool = True) -> str:
    return STRICT_ANTI_CITATION if strict_no_sources else LOOSE_ANTI_CITATION


def build_claim_instructions(max_claims: int, strict_no_sources: bool = True) -> str:
    """
    Stufe 1: Claims so aufzählen, wie sie in Literatur/Populärzusammenfassungen
    existieren, ohne Widersprüche aufzulösen.
    """
    return "\n".join(
        [
            "You enumerate conflicting scientific claims that exist in the literature or popular summaries.",
            "Do not reconcile disagreements. Do not average them.",
            "Each claim must be atomic and testable.",
            "Separate by paradigm, definition, and scope when relevant.",
            anti_fabrication_directive(strict_no_sources),
            f"Max claims: {max_claims}",
            _CLAIM_SET_SHAPE,
        ]
    )


def build_audit_instructions(strict_no_sources: bool = True) -> str:
    """Stufe 2: Claims auf Unvereinbarkeit unter gleichem Scope/gleicher Definition prüfen."""
    return "\n".join(
        [
            "You are a contradiction auditor.",
            "Given claims, identify conflicts that cannot both be true under the same scope and definition.",
            "If contradiction depends on scope/definition shifts, mark conflict_type accordingly.",
            "Prioritize conflicts that would mislead a researcher if cited without qualifiers.",
            anti_fabrication_directive(strict_no_sources),
            _CONFLICT_REPORT_SHAPE,
        ]
    )


def build_claim_input(topic: str, domain: str | None, depth: str) -> str:
    return json.dumps({"topic": topic, "domain": domain, "depth": depth}, ensure_ascii=False)


def build_audit_input(topic: str, claims: Sequence[Any]) -> str:
    # Claims kommen als pydantic-Modelle oder bereits als dicts
    payload = [c.model_dump(exclude_none=True) if hasattr(c, "model_dump") else c for c in claims]
    return json.dumps({"topic": topic, "claims": payload}, ensure_ascii=False)
