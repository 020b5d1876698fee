from pathlib import Path

WIDGET_URI = "ui://conflict-lens/widget"
WIDGET_MIME_TYPE = "text/html+skybridge"

STATIC_DIR = Path(__file__).resolve().parent.parent / "static"
WIDGET_PATH = STATIC_DIR / "conflict-lens.html"


def load_widget_html() -> str:
    """Liest das Widget-Dokument unverändert von der Platte."""
    return WIDGET_PATH.read_text(encoding="utf-8")
