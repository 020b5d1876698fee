"""
Datenverträge für LLM-Outputs.

Jeder Rückgabewert eines Generativ-Calls ist untrusted input und wird hier
vollständig strukturell validiert, bevor der Rest des Systems ihn nutzt.
Die Validatoren sind pure Funktionen: kein I/O, keine Mutation des Inputs.
"""

from typing import Any, Collection

from pydantic import ValidationError

from conflict_lens.core.errors import SchemaValidationError
from conflict_lens.models.pydantic import ClaimSet, ConflictReport


def _error_entries(exc: ValidationError) -> list[dict[str, Any]]:
    # nur serialisierbare Felder (ctx kann Exceptions enthalten)
    return [
        {"loc": list(e["loc"]), "msg": e["msg"], "type": e["type"]}
        for e in exc.errors()
    ]


def validate_claim_set(raw: Any) -> ClaimSet:
    """
    Validiert den Stage-1-Output als ClaimSet (>= 3 Claims, eindeutige IDs).

    Raises:
        SchemaValidationError bei jeder Vertragsverletzung
    """
    try:
        return ClaimSet.model_validate(raw)
    except ValidationError as exc:
        raise SchemaValidationError("claim_set", _error_entries(exc)) from exc


def validate_conflict_report(
    raw: Any,
    known_claim_ids: Collection[str] | None = None,
) -> ConflictReport:
    """
    Validiert den Stage-2-Output als ConflictReport.

    Args:
        raw: geparstes JSON des Audit-Calls
        known_claim_ids: wenn gesetzt, müssen claim_a/claim_b jedes Conflicts
            auf eine dieser IDs verweisen (referenzielle Integrität)

    Raises:
        SchemaValidationError bei jeder Vertragsverletzung
    """
    try:
        report = ConflictReport.model_validate(raw)
    except ValidationError as exc:
        raise SchemaValidationError("conflict_report", _error_entries(exc)) from exc

    if known_claim_ids is None:
        return report

    known = set(known_claim_ids)
    dangling = []
    for i, conflict in enumerate(report.conflicts):
        for field in ("claim_a", "claim_b"):
            ref = getattr(conflict, field)
            if ref not in known:
                dangling.append(
                    {
                        "loc": ["conflicts", i, field],
                        "msg": f"unknown claim reference: {ref}",
                        "type": "dangling_reference",
                    }
                )

    if dangling:
        raise SchemaValidationError("conflict_report", dangling)

    return report
