"""
Zwei-Stufen-Pipeline: Claims aufzählen -> Konflikte auditieren -> zusammenführen.

Ein Run ist alles-oder-nichts: jeder Fehler in einer Stufe bricht den ganzen
Run ab (ABORTED), es gibt weder Retries noch Teilergebnisse.
"""

from __future__ import annotations

import logging
from enum import Enum

from conflict_lens.core.errors import ConflictLensError
from conflict_lens.llm.llm_client import LLMClient
from conflict_lens.models.pydantic import (
    Claim,
    ClaimSet,
    ConflictReport,
    DiscoverRequest,
    DiscoveryResult,
)
from conflict_lens.services.contracts import validate_claim_set, validate_conflict_report
from conflict_lens.services.prompts import (
    build_audit_input,
    build_audit_instructions,
    build_claim_input,
    build_claim_instructions,
)

logger = logging.getLogger(__name__)


class PipelineState(str, Enum):
    INIT = "INIT"
    EXTRACTING = "EXTRACTING"
    EXTRACTED_VALID = "EXTRACTED_VALID"
    AUDITING = "AUDITING"
    AUDITED_VALID = "AUDITED_VALID"
    MERGED = "MERGED"
    ABORTED = "ABORTED"


TERMINAL_STATES = frozenset({PipelineState.MERGED, PipelineState.ABORTED})

_TRANSITIONS = {
    PipelineState.INIT: {PipelineState.EXTRACTING},
    PipelineState.EXTRACTING: {PipelineState.EXTRACTED_VALID},
    PipelineState.EXTRACTED_VALID: {PipelineState.AUDITING},
    PipelineState.AUDITING: {PipelineState.AUDITED_VALID},
    PipelineState.AUDITED_VALID: {PipelineState.MERGED},
}


def truncate_claims(claims: list[Claim], max_claims: int) -> list[Claim]:
    """Stabile Präfix-Kürzung: die ersten max_claims in Modell-Reihenfolge."""
    return list(claims[:max_claims])


class DiscoveryRun:
    """Zustand eines einzelnen Runs; wird pro Request neu erzeugt."""

    def __init__(self, llm_client: LLMClient, request: DiscoverRequest):
        self.llm = llm_client
        self.request = request
        self.state = PipelineState.INIT
        self.history: list[PipelineState] = [PipelineState.INIT]
        self.error: ConflictLensError | None = None

    def _advance(self, target: PipelineState) -> None:
        if target == PipelineState.ABORTED:
            if self.state in TERMINAL_STATES:
                raise RuntimeError(f"cannot abort run in terminal state {self.state.value}")
        elif target not in _TRANSITIONS.get(self.state, set()):
            raise RuntimeError(f"illegal transition {self.state.value} -> {target.value}")
        logger.debug("discovery run %s -> %s", self.state.value, target.value)
        self.state = target
        self.history.append(target)

    def execute(self) -> DiscoveryResult:
        if self.state != PipelineState.INIT:
            raise RuntimeError("a discovery run can only be executed once")

        req = self.request
        logger.info(
            "discovery run START (topic=%r, depth=%s, max_claims=%s)",
            req.topic,
            req.depth,
            req.max_claims,
        )
        try:
            claim_set = self._extract()
            claims = truncate_claims(claim_set.claims, req.max_claims)
            report = self._audit(claim_set.topic, claims)
        except ConflictLensError as exc:
            self.error = exc
            self._advance(PipelineState.ABORTED)
            logger.warning("discovery run ABORTED (topic=%r, kind=%s): %s", req.topic, exc.kind, exc)
            raise

        result = self._merge(report, claims)
        logger.info(
            "discovery run DONE (topic=%r, claims=%s, conflicts=%s)",
            req.topic,
            len(result.claims),
            len(result.conflicts),
        )
        return result

    # ---------- Stufen ---------- #

    def _extract(self) -> ClaimSet:
        req = self.request
        self._advance(PipelineState.EXTRACTING)
        raw = self.llm.generate_json(
            build_claim_instructions(req.max_claims, req.strict_no_sources),
            build_claim_input(req.topic, req.domain, req.depth),
        )
        claim_set = validate_claim_set(raw)
        self._advance(PipelineState.EXTRACTED_VALID)

        if len(claim_set.claims) > req.max_claims:
            logger.info(
                "model returned %s claims, truncating to %s",
                len(claim_set.claims),
                req.max_claims,
            )
        return claim_set

    def _audit(self, topic: str, claims: list[Claim]) -> ConflictReport:
        self._advance(PipelineState.AUDITING)
        raw = self.llm.generate_json(
            build_audit_instructions(self.request.strict_no_sources),
            build_audit_input(topic, claims),
        )
        report = validate_conflict_report(raw, known_claim_ids=[c.claim_id for c in claims])
        self._advance(PipelineState.AUDITED_VALID)
        return report

    def _merge(self, report: ConflictReport, claims: list[Claim]) -> DiscoveryResult:
        summary = report.summary
        if summary.conflict_count != len(report.conflicts):
            logger.warning(
                "summary.conflict_count=%s does not match %s conflicts; using the actual count",
                summary.conflict_count,
                len(report.conflicts),
            )
            summary = summary.model_copy(update={"conflict_count": len(report.conflicts)})

        result = DiscoveryResult(
            topic=report.topic,
            conflicts=report.conflicts,
            summary=summary,
            claims=claims,
        )
        self._advance(PipelineState.MERGED)
        return result


class DiscoveryPipeline:
    def __init__(self, llm_client: LLMClient) -> None:
        # zustandslos, kann von parallelen Requests geteilt werden
        self.llm_client = llm_client

    def start(self, request: DiscoverRequest) -> DiscoveryRun:
        return DiscoveryRun(self.llm_client, request)

    def run(self, request: DiscoverRequest) -> DiscoveryResult:
        return self.start(request).execute()
