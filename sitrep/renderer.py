"""
Report renderer module for the Situation Report Registry.

Projects classified markup blocks onto presentation elements for on-screen
viewing and assembles the full HTML page around them.
This module is stateless - returns strings without file I/O.
"""

import html
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from .classifier import classify
from .models import Block, BlockKind, MediaAttachment, ReportRecord


class ElementKind(str, Enum):
    SECTION_TITLE = "section_title"
    LIST_ITEM = "list_item"
    PARAGRAPH = "paragraph"
    PARAGRAPH_BREAK = "paragraph_break"


class PresentationElement(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: ElementKind
    text: str = ""


class PresentationTree(BaseModel):
    """Ordered presentation elements for one report body."""
    elements: List[PresentationElement] = []

    def to_html(self) -> str:
        """
        Serialize to an HTML fragment.

        Consecutive list items share one <ul>. The fragment classifies back
        to the blocks it was rendered from.
        """
        parts: List[str] = []
        in_list = False

        for element in self.elements:
            if element.kind == ElementKind.LIST_ITEM:
                if not in_list:
                    parts.append('<ul class="report-list">')
                    in_list = True
                parts.append(f"<li>{_escape(element.text)}</li>")
                continue

            if in_list:
                parts.append("</ul>")
                in_list = False

            if element.kind == ElementKind.SECTION_TITLE:
                parts.append(f'<h3 class="section-title">{_escape(element.text)}</h3>')
            elif element.kind == ElementKind.PARAGRAPH_BREAK:
                parts.append("<br>")
            else:
                parts.append(f"<p>{_escape(element.text)}</p>")

        if in_list:
            parts.append("</ul>")

        return "\n".join(parts)


_ELEMENT_FOR_BLOCK = {
    BlockKind.HEADING: ElementKind.SECTION_TITLE,
    BlockKind.BULLET: ElementKind.LIST_ITEM,
    BlockKind.BODY: ElementKind.PARAGRAPH,
    BlockKind.BLANK: ElementKind.PARAGRAPH_BREAK,
}


def _escape(text: str) -> str:
    return html.escape(text, quote=False)


def render(blocks: List[Block]) -> PresentationTree:
    """Map each block onto its presentation element, in order."""
    return PresentationTree(
        elements=[
            PresentationElement(kind=_ELEMENT_FOR_BLOCK[block.kind], text=block.text)
            for block in blocks
        ]
    )


def render_markup(markup_text: str) -> PresentationTree:
    return render(classify(markup_text))


# =============================================================================
# FULL PAGE ASSEMBLY
# =============================================================================

def get_html_template(title: str, subtitle: Optional[str] = None) -> str:
    """
    Generate the HTML header for a report page.

    Args:
        title: Page and document title
        subtitle: Optional line under the title (date / unit)

    Returns:
        HTML header string
    """
    subtitle_html = f'<div class="meta-info">{_escape(subtitle)}</div>' if subtitle else ""

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{_escape(title)}</title>
    <style>
        * {{
            box-sizing: border-box;
        }}

        body {{
            font-family: 'Inter', Arial, sans-serif;
            line-height: 1.7;
            color: #1e293b;
            margin: 0;
            background-color: #f8fafc;
        }}

        .report-container {{
            max-width: 900px;
            margin: 40px auto;
            background: white;
            padding: 40px;
            border-radius: 8px;
            box-shadow: 0 2px 10px rgba(0,0,0,0.1);
        }}

        h1 {{
            color: #0f172a;
            text-transform: uppercase;
            border-bottom: 3px solid #1d4ed8;
            padding-bottom: 15px;
            margin-bottom: 10px;
        }}

        .section-title {{
            font-weight: 900;
            text-transform: uppercase;
            margin-top: 36px;
            padding-bottom: 8px;
            border-bottom: 2px solid #e2e8f0;
        }}

        .report-list {{
            padding-left: 25px;
        }}

        li {{
            margin-bottom: 6px;
        }}

        .meta-info {{
            color: #64748b;
            font-size: 13px;
            margin-bottom: 30px;
        }}

        .evidence {{
            display: grid;
            grid-template-columns: repeat(2, 1fr);
            gap: 16px;
            margin-top: 40px;
        }}

        .evidence img {{
            width: 100%;
            height: auto;
            border: 1px solid #e2e8f0;
            border-radius: 4px;
        }}

        @page {{
            size: A4;
            margin: 15mm;
        }}

        @media print {{
            body {{
                background-color: white;
            }}

            .report-container {{
                box-shadow: none;
                padding: 0;
                margin: 0;
            }}

            .section-title {{
                page-break-after: avoid;
            }}
        }}
    </style>
</head>
<body>
    <div class="report-container">
        <h1>{_escape(title)}</h1>
        {subtitle_html}
"""


def get_html_footer() -> str:
    """
    Generate the HTML footer.

    Returns:
        HTML footer string
    """
    return """
    </div>
</body>
</html>
"""


def create_attachments_html(attachments: List[MediaAttachment]) -> str:
    """Embed the report's evidence photos in their stored order."""
    if not attachments:
        return ""

    images = "\n".join(
        f'<img src="{html.escape(a.data_url)}" alt="Evidence photo {i + 1}" />'
        for i, a in enumerate(attachments)
    )
    return f'\n<div class="evidence">\n{images}\n</div>\n'


def render_report_page(record: ReportRecord) -> str:
    """
    Assemble a complete HTML page for a stored report.

    Args:
        record: The stored report

    Returns:
        Complete HTML document as a string
    """
    subtitle = " | ".join(part for part in (record.report_date, record.unit) if part)
    page = get_html_template(record.title or "Situation Report", subtitle or None)
    page += render_markup(record.markup_text).to_html()
    page += create_attachments_html(record.attachments)
    page += get_html_footer()
    return page
