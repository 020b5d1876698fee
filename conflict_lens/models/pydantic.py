from typing import List, Optional, Literal

from pydantic import BaseModel, Field, field_validator, model_validator


Polarity = Literal["affirm", "deny", "mixed"]

ConflictType = Literal[
    "numeric_incompatible",
    "polarity_incompatible",
    "scope_mismatch",
    "definition_shift",
    "measurement_paradigm_shift",
    "other",
]

Depth = Literal["overview", "academic"]

FoundVia = Literal["directory", "chatgpt_suggested", "link", "friend", "other"]


class Claim(BaseModel):
    """
    Atomare, testbare Aussage zu einem Topic.
    Unbekannte Zusatzfelder aus dem LLM-Output werden ignoriert.
    """

    claim_id: str
    assertion: str
    dimension: str
    polarity: Polarity
    value: Optional[str] = None
    qualifiers: List[str] = Field(default_factory=list)
    definition_notes: Optional[str] = None
    era_hint: Optional[str] = None
    confidence: float = Field(ge=0.0, le=1.0)
    why_people_repeat_it: Optional[str] = None

    @field_validator("value", mode="before")
    @classmethod
    def _numbers_as_text(cls, v):
        # Zahlen sind als Wert erlaubt, werden aber als Text geführt
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v


class ClaimSet(BaseModel):
    topic: str
    claims: List[Claim] = Field(min_length=3)

    @model_validator(mode="after")
    def _unique_claim_ids(self):
        seen = set()
        for claim in self.claims:
            if claim.claim_id in seen:
                raise ValueError(f"duplicate claim_id: {claim.claim_id}")
            seen.add(claim.claim_id)
        return self


class Conflict(BaseModel):
    """Unvereinbarkeit zwischen genau zwei Claims."""

    conflict_id: str
    dimension: str
    claim_a: str
    claim_b: str
    conflict_type: ConflictType
    explanation: str
    severity: float = Field(ge=0.0, le=1.0)
    researcher_warning: str

    @model_validator(mode="after")
    def _two_distinct_claims(self):
        if self.claim_a == self.claim_b:
            raise ValueError(f"conflict {self.conflict_id} references claim {self.claim_a} twice")
        return self


class ConflictSummary(BaseModel):
    conflict_count: int = Field(ge=0)
    top_dimensions: List[str] = Field(default_factory=list)
    safe_citation_note: str


class ConflictReport(BaseModel):
    topic: str
    conflicts: List[Conflict]
    summary: ConflictSummary

    @model_validator(mode="after")
    def _unique_conflict_ids(self):
        seen = set()
        for conflict in self.conflicts:
            if conflict.conflict_id in seen:
                raise ValueError(f"duplicate conflict_id: {conflict.conflict_id}")
            seen.add(conflict.conflict_id)
        return self


class DiscoveryResult(BaseModel):
    """
    Zusammengeführtes Ergebnis eines Runs: ConflictReport + gekürzte Claim-Liste.
    Einziges Artefakt, das an den Aufrufer zurückgeht.
    """

    topic: str
    conflicts: List[Conflict]
    summary: ConflictSummary
    claims: List[Claim]


class DiscoverRequest(BaseModel):
    """
    Request-Body für die Discovery-Operation.
    """

    topic: str = Field(min_length=2)
    domain: Optional[str] = None
    depth: Depth = "academic"
    max_claims: int = Field(default=18, ge=5, le=40)
    strict_no_sources: bool = True


class AttributionRequest(BaseModel):
    found_via: FoundVia


class Acknowledgement(BaseModel):
    ok: bool = True
    message: str
