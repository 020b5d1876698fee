"""
Fehlertaxonomie für Conflict Lens.

- ConfigurationError: fehlende Pflicht-Konfiguration, fatal beim Startup
- UpstreamError / ParseError / SchemaValidationError: brechen nur den aktuellen Run ab
- AnalyticsError: wird in der Telemetrie immer abgefangen und nie weitergereicht
"""

from typing import Any


class ConflictLensError(Exception):
    """Basisklasse aller fachlichen Fehler."""

    kind = "conflict_lens_error"


class ConfigurationError(ConflictLensError):
    kind = "configuration_error"


class UpstreamError(ConflictLensError):
    """Nicht-erfolgreiche Antwort (oder Transportfehler) des Generativ-Dienstes."""

    kind = "upstream_error"

    def __init__(self, status: int | None, body: str = ""):
        self.status = status
        self.body = body
        super().__init__(f"Upstream error {status}: {body[:500]}")


class ParseError(ConflictLensError):
    """Erfolgreiche Antwort, deren Text kein gültiges JSON ist."""

    kind = "parse_error"

    def __init__(self, raw_text: str, reason: str = ""):
        self.raw_text = raw_text
        self.reason = reason
        super().__init__(f"Model output is not valid JSON ({reason}): {raw_text[:200]!r}")


class SchemaValidationError(ConflictLensError):
    """Wohlgeformtes JSON, das den Claim-/Conflict-Vertrag verletzt."""

    kind = "schema_validation_error"

    def __init__(self, stage: str, errors: list[dict[str, Any]]):
        self.stage = stage
        self.errors = errors
        first = errors[0]["msg"] if errors else "unknown violation"
        super().__init__(f"{stage} payload violates contract ({len(errors)} error(s)): {first}")


class AnalyticsError(ConflictLensError):
    kind = "analytics_error"
