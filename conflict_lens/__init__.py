"""
Conflict Lens: findet unvereinbare Behauptungen zu einem Topic.

Zwei-Stufen-Pipeline:
- Claims aufzählen (ohne Widersprüche aufzulösen)
- Claims auf Konflikte auditieren und klassifizieren

Keine Quellen, keine Persistenz.
"""
