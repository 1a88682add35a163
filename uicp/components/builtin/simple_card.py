"""SimpleCard renderer: a titled card with optional footer."""

from html import escape
from typing import Any, Mapping

VARIANTS = ("default", "info", "success", "warning", "error")


def SimpleCard(data: Mapping[str, Any]) -> str:
    variant = data.get("variant") or "default"
    if variant not in VARIANTS:
        variant = "default"

    parts = [
        f'<div class="uicp-card uicp-card--{variant}">',
        f'<h3 class="uicp-card__title">{escape(str(data.get("title", "")))}</h3>',
        f'<div class="uicp-card__content">{escape(str(data.get("content", "")))}</div>',
    ]
    if data.get("footer"):
        parts.append(f'<div class="uicp-card__footer">{escape(str(data["footer"]))}</div>')
    parts.append("</div>")
    return "".join(parts)
