"""DataTable renderer: headers and rows as an HTML table."""

from html import escape
from typing import Any, Mapping


def DataTable(data: Mapping[str, Any]) -> str:
    striped = data.get("striped", True)
    classes = ["uicp-table"]
    if data.get("compact"):
        classes.append("uicp-table--compact")

    parts = ['<div class="uicp-table-wrapper">']
    if data.get("title"):
        parts.append(f'<h3 class="uicp-table__title">{escape(str(data["title"]))}</h3>')
    parts.append(f'<table class="{" ".join(classes)}"><thead><tr>')
    parts.extend(f"<th>{escape(str(header))}</th>" for header in data.get("headers", []))
    parts.append("</tr></thead><tbody>")
    for index, row in enumerate(data.get("rows", [])):
        row_class = ' class="uicp-table__row--alt"' if striped and index % 2 == 1 else ""
        cells = "".join(f"<td>{escape(str(cell))}</td>" for cell in row)
        parts.append(f"<tr{row_class}>{cells}</tr>")
    parts.append("</tbody></table></div>")
    return "".join(parts)
