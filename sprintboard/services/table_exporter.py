"""
Table Export

Renders tabular data as a Markdown table (for chat, clipboard type
``text/plain``) or a styled HTML table (for email, clipboard type
``text/html``). Cell content is escaped for the target format.
"""

import html
from enum import Enum
from typing import List, NamedTuple, Sequence, Union

from sprintboard.pyd_models.project_models import ProjectItem


class ExportFormat(str, Enum):
    """Supported export formats."""
    MARKDOWN = "markdown"
    HTML = "html"

    @property
    def media_type(self) -> str:
        return "text/html" if self is ExportFormat.HTML else "text/plain"


class Link(NamedTuple):
    """A cell rendered as a hyperlink."""
    text: str
    url: str


Cell = Union[str, Link]

SPRINT_HEADERS = ["ID", "Title", "Assignee", "Status", "Estimate"]

_TABLE_STYLE = "border-collapse: collapse; width: 100%; font-family: Calibri, Arial, sans-serif;"
_HEADER_ROW_STYLE = "background-color: #f5f5f5;"
_TH_STYLE = "border: 1px solid #ddd; padding: 8px; text-align: left;"
_TD_STYLE = "border: 1px solid #ddd; padding: 8px;"
_LINK_STYLE = "color: #0366d6; text-decoration: none;"


def _markdown_text(value: str) -> str:
    return value.replace("\\", "\\\\").replace("|", "\\|").replace("\r", " ").replace("\n", " ")


def _markdown_cell(cell: Cell) -> str:
    if isinstance(cell, Link):
        url = cell.url.replace(" ", "%20").replace("(", "%28").replace(")", "%29")
        text = _markdown_text(cell.text).replace("[", "\\[").replace("]", "\\]")
        return f"[{text}]({url})"
    return _markdown_text(str(cell))


def _html_cell(cell: Cell) -> str:
    if isinstance(cell, Link):
        return (
            f'<a href="{html.escape(cell.url, quote=True)}" style="{_LINK_STYLE}">'
            f"{html.escape(cell.text)}</a>"
        )
    return html.escape(str(cell))


def render_markdown(headers: Sequence[str], rows: Sequence[Sequence[Cell]]) -> str:
    """
    Render a pipe-delimited Markdown table.

    Example:
        >>> render_markdown(["A", "B"], [["1", "2"]])
        '| A | B |\\n| --- | --- |\\n| 1 | 2 |'
    """
    lines = [
        "| " + " | ".join(_markdown_cell(h) for h in headers) + " |",
        "| " + " | ".join("---" for _ in headers) + " |",
    ]
    lines.extend("| " + " | ".join(_markdown_cell(cell) for cell in row) + " |" for row in rows)
    return "\n".join(lines)


def render_html(headers: Sequence[str], rows: Sequence[Sequence[Cell]]) -> str:
    """Render an inline-styled HTML table: one header row, one row per input row."""
    lines = [
        f'<table style="{_TABLE_STYLE}">',
        "  <thead>",
        f'    <tr style="{_HEADER_ROW_STYLE}">',
    ]
    lines.extend(f'      <th style="{_TH_STYLE}">{_html_cell(h)}</th>' for h in headers)
    lines.extend(["    </tr>", "  </thead>", "  <tbody>"])
    for row in rows:
        lines.append("    <tr>")
        lines.extend(f'      <td style="{_TD_STYLE}">{_html_cell(cell)}</td>' for cell in row)
        lines.append("    </tr>")
    lines.extend(["  </tbody>", "</table>"])
    return "\n".join(lines)


def render(headers: Sequence[str], rows: Sequence[Sequence[Cell]], format: ExportFormat) -> str:
    """Render ``rows`` under ``headers`` in the requested format."""
    if ExportFormat(format) is ExportFormat.HTML:
        return render_html(headers, rows)
    return render_markdown(headers, rows)


def field_display(item: ProjectItem, field_name: str, default: str = "Not set") -> str:
    value = item.value_for_field_name(field_name)
    if value is None:
        return default
    return value.display_value or default


def sprint_export_rows(items: Sequence[ProjectItem]) -> List[List[Cell]]:
    """
    Flatten sprint items into rows matching SPRINT_HEADERS.

    Items without a linked issue (drafts) get an empty ID cell.
    """
    rows = []
    for item in items:
        content = item.content
        if content is not None:
            id_cell: Cell = Link(f"#{content.number}", content.url)
            title = content.title
            assignee = content.assignees[0].login if content.assignees else "Unassigned"
        else:
            id_cell = ""
            title = "(no linked issue)"
            assignee = "Unassigned"
        rows.append([
            id_cell,
            title,
            assignee,
            field_display(item, "Status"),
            field_display(item, "Estimate"),
        ])
    return rows
