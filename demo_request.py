#!/usr/bin/env python3
"""Demo-Request gegen einen laufenden Conflict-Lens-Server"""

import json
import os
import sys

import requests

BASE_URL = os.getenv("CONFLICT_LENS_URL", "http://localhost:3000")

payload = {
    "topic": sys.argv[1] if len(sys.argv) > 1 else "intermittent fasting and weight loss",
    "domain": "nutrition science",
    "depth": "academic",
    "max_claims": 8,
    "strict_no_sources": True,
}

print("=" * 70)
print("INPUT:")
print("=" * 70)
print(json.dumps(payload, indent=2, ensure_ascii=False))
print()

try:
    response = requests.post(f"{BASE_URL}/discover", json=payload, timeout=300)
except requests.exceptions.ConnectionError:
    print(f"❌ Server nicht erreichbar unter {BASE_URL}")
    print("   Bitte starten Sie den Server mit: conflict-lens")
    sys.exit(1)

if response.status_code != 200:
    # Fehler-Payload des Servers: {"error": ..., "detail": ...}
    print(f"❌ Fehler ({response.status_code}): {response.text[:500]}")
    sys.exit(1)

result = response.json()

print("=" * 70)
print(f"OUTPUT: CLAIMS ({len(result['claims'])})")
print("=" * 70)
for claim in result["claims"]:
    print(f"  [{claim['claim_id']}] ({claim['polarity']}, {claim['confidence']:.2f}) {claim['assertion']}")
print()

print("=" * 70)
print(f"OUTPUT: CONFLICTS ({result['summary']['conflict_count']})")
print("=" * 70)
if result["conflicts"]:
    for conflict in result["conflicts"]:
        print(f"  {conflict['claim_a']} <-> {conflict['claim_b']}  [{conflict['conflict_type']}]")
        print(f"    Dimension: {conflict['dimension']}")
        print(f"    Severity:  {conflict['severity']:.2f}")
        print(f"    Warnung:   {conflict['researcher_warning']}")
        print()
else:
    print("  Keine Konflikte gefunden")
print()

print("  Top-Dimensionen:", ", ".join(result["summary"]["top_dimensions"]) or "-")
print("  Zitierhinweis:  ", result["summary"]["safe_citation_note"])
print("=" * 70)
print("✅ Demo abgeschlossen")
print("=" * 70)
