#!/usr/bin/env python3
"""
Word Document Export Module.

Packs classified report markup and its evidence photos into a .docx file
using python-docx, and assembles the cadet magazine draft from submitted
articles.

Unlike the on-screen view, a body line written entirely in capitals is
styled like a heading here even without the `*...*` delimiter.
"""

import asyncio
import io
import logging
import re
from datetime import date
from typing import List, Optional, Sequence

from docx import Document
from docx.document import Document as DocxDocument
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.image.exceptions import (
    InvalidImageStreamError,
    UnexpectedEndOfFileError,
    UnrecognizedImageError,
)
from docx.image.image import Image as DocxImage
from docx.shared import Emu, Inches, Pt, RGBColor

from .attachments import decode_attachment
from .classifier import classify
from .config import (
    ATTACHMENT_DISPLAY_HEIGHT_PX,
    ATTACHMENT_DISPLAY_WIDTH_PX,
    EXPORT_FONT,
    MAGAZINE_COMPANIES,
    MAGAZINE_PICTURE_SIZE_PX,
    MAGAZINE_TITLE,
    PAGE_MARGIN_INCHES,
    PROVENANCE_FOOTER,
    PSEUDO_HEADING_MIN_LENGTH,
)
from .exceptions import AttachmentDecodeError, DocumentBuildError
from .models import (
    ArticleRecord,
    Block,
    BlockKind,
    DocumentMetadata,
    ExportedDocument,
    MediaAttachment,
    ReportRecord,
)
from .template import signature_line

logger = logging.getLogger(__name__)

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

# python-docx lengths are EMU; 9525 EMU per CSS pixel
EMU_PER_PIXEL = 9525

DOCX_IMAGE_ERRORS = (UnrecognizedImageError, InvalidImageStreamError, UnexpectedEndOfFileError)

TITLE_SIZE = Pt(16)
HEADING_SIZE = Pt(13)
PSEUDO_HEADING_SIZE = Pt(12)
BODY_SIZE = Pt(11)
FOOTER_SIZE = Pt(8)
SPACE_AFTER = Pt(6)
FOOTER_COLOR = RGBColor(100, 116, 139)

_ILLEGAL_FILENAME_CHARS = re.compile(r'[/\\?%*:|"<>]')


# =============================================================================
# HELPERS
# =============================================================================

def is_pseudo_heading(text: str) -> bool:
    """Whether a body line is styled as a heading: all caps and long enough."""
    stripped = text.strip()
    return len(stripped) >= PSEUDO_HEADING_MIN_LENGTH and stripped == stripped.upper()


def sanitize_filename(title: str, extension: str = ".docx") -> str:
    """Replace filesystem-illegal characters in a title with '-'."""
    return f"{_ILLEGAL_FILENAME_CHARS.sub('-', title)}{extension}"


def _pixels(value: int) -> Emu:
    return Emu(value * EMU_PER_PIXEL)


def _new_document() -> DocxDocument:
    doc = Document()
    for section in doc.sections:
        section.top_margin = Inches(PAGE_MARGIN_INCHES)
        section.bottom_margin = Inches(PAGE_MARGIN_INCHES)
        section.left_margin = Inches(PAGE_MARGIN_INCHES)
        section.right_margin = Inches(PAGE_MARGIN_INCHES)
    return doc


def _add_text(doc: DocxDocument, text: str, size=BODY_SIZE, bold: Optional[bool] = None,
              italic: Optional[bool] = None, style: Optional[str] = None):
    paragraph = doc.add_paragraph(style=style)
    paragraph.paragraph_format.space_after = SPACE_AFTER
    if text:
        run = paragraph.add_run(text)
        run.font.name = EXPORT_FONT
        run.font.size = size
        if bold is not None:
            run.bold = bold
        if italic is not None:
            run.italic = italic
    return paragraph


def _add_picture(doc: DocxDocument, attachment: MediaAttachment, width: Emu, height: Emu) -> bool:
    """Embed one attachment; returns False when it could not be decoded or parsed."""
    try:
        image_bytes = decode_attachment(attachment)
    except AttachmentDecodeError as e:
        logger.warning(f"Skipping attachment that could not be decoded: {e}")
        return False

    # python-docx parses headers more strictly than Pillow (a JPEG needs JFIF or Exif)
    try:
        DocxImage.from_blob(image_bytes)
    except DOCX_IMAGE_ERRORS as e:
        logger.warning(f"Skipping attachment python-docx cannot embed: {type(e).__name__}: {e}")
        return False

    paragraph = doc.add_paragraph()
    paragraph.alignment = WD_ALIGN_PARAGRAPH.CENTER
    paragraph.add_run().add_picture(io.BytesIO(image_bytes), width=width, height=height)
    return True


def _pack(doc: DocxDocument) -> bytes:
    try:
        buffer = io.BytesIO()
        doc.save(buffer)
    except Exception as e:
        logger.error(f"DOCX packing failed: {e}")
        raise DocumentBuildError(f"Could not build the document: {e}") from e
    return buffer.getvalue()


# =============================================================================
# REPORT EXPORT
# =============================================================================

def _add_block(doc: DocxDocument, block: Block) -> None:
    if block.kind == BlockKind.HEADING:
        paragraph = doc.add_heading(level=3)
        paragraph.paragraph_format.space_before = Pt(12)
        run = paragraph.add_run(block.text)
        run.font.size = HEADING_SIZE
    elif block.kind == BlockKind.BULLET:
        _add_text(doc, block.text, style="List Bullet")
    elif block.kind == BlockKind.BLANK:
        _add_text(doc, "")
    elif is_pseudo_heading(block.text):
        _add_text(doc, block.text, size=PSEUDO_HEADING_SIZE, bold=True)
    else:
        _add_text(doc, block.text)


def encode_document(
    blocks: Sequence[Block],
    attachments: Sequence[MediaAttachment],
    metadata: DocumentMetadata,
) -> bytes:
    """
    Pack report blocks and attachments into .docx bytes.

    Layout: uppercase title, date/unit block, body, attachments in stored
    order, signature, italic provenance footer. An attachment that cannot
    be decoded is logged and skipped; the rest of the document is still
    produced.

    Args:
        blocks: Classified report body
        attachments: Evidence photos, in display order
        metadata: Title, date, unit and signing officer

    Returns:
        The .docx file content

    Raises:
        DocumentBuildError: If packing the document fails
    """
    doc = _new_document()

    title = doc.add_paragraph()
    title.alignment = WD_ALIGN_PARAGRAPH.CENTER
    title.paragraph_format.space_after = Pt(20)
    title_run = title.add_run(metadata.title.upper())
    title_run.bold = True
    title_run.font.size = TITLE_SIZE
    title_run.font.name = EXPORT_FONT

    for label, value in (("DATE", metadata.report_date), ("UNIT", metadata.unit)):
        paragraph = doc.add_paragraph()
        label_run = paragraph.add_run(f"{label}: ")
        label_run.bold = True
        paragraph.add_run(value)

    for block in blocks:
        _add_block(doc, block)

    width = _pixels(ATTACHMENT_DISPLAY_WIDTH_PX)
    height = _pixels(ATTACHMENT_DISPLAY_HEIGHT_PX)
    embedded = sum(1 for a in attachments if _add_picture(doc, a, width, height))
    if embedded < len(attachments):
        logger.warning(f"Embedded {embedded}/{len(attachments)} attachments")

    signature = doc.add_paragraph()
    signature.paragraph_format.space_before = Pt(24)
    signature.add_run(signature_line(metadata.unit, metadata.commander_name)).bold = True

    footer = doc.sections[0].footer.paragraphs[0]
    footer.alignment = WD_ALIGN_PARAGRAPH.CENTER
    footer_run = footer.add_run(PROVENANCE_FOOTER)
    footer_run.italic = True
    footer_run.font.size = FOOTER_SIZE
    footer_run.font.color.rgb = FOOTER_COLOR

    return _pack(doc)


def export_markup(
    markup_text: str,
    attachments: Sequence[MediaAttachment],
    metadata: DocumentMetadata,
) -> ExportedDocument:
    """Classify markup and export it under a filename built from the title."""
    content = encode_document(classify(markup_text), attachments, metadata)
    logger.info(f"DOCX generated successfully ({len(content):,} bytes)")
    return ExportedDocument(filename=sanitize_filename(metadata.title), content=content)


def export_report(record: ReportRecord) -> ExportedDocument:
    """Export a stored report."""
    metadata = DocumentMetadata(
        title=record.title or "Situation Report",
        report_date=record.report_date,
        unit=record.unit,
        commander_name=record.signing_officer,
    )
    return export_markup(record.markup_text, record.attachments, metadata)


async def export_report_async(record: ReportRecord) -> ExportedDocument:
    """Export off the event loop so other requests keep running."""
    return await asyncio.to_thread(export_report, record)


# =============================================================================
# MAGAZINE EXPORT
# =============================================================================

def build_magazine_docx(articles: Sequence[ArticleRecord], today: Optional[date] = None) -> ExportedDocument:
    """
    Assemble the cadet magazine draft.

    Articles are grouped by company in the fixed company order; companies
    without articles are left out.

    Args:
        articles: Submitted articles
        today: Date used in the filename (defaults to today)

    Returns:
        The packed magazine draft
    """
    doc = _new_document()

    title = doc.add_paragraph()
    title.alignment = WD_ALIGN_PARAGRAPH.CENTER
    title.paragraph_format.space_after = Pt(30)
    title_run = title.add_run(MAGAZINE_TITLE)
    title_run.bold = True
    title_run.font.size = Pt(18)
    title_run.font.name = EXPORT_FONT

    picture_size = _pixels(MAGAZINE_PICTURE_SIZE_PX)

    for company in MAGAZINE_COMPANIES:
        company_articles: List[ArticleRecord] = [a for a in articles if a.company == company]
        if not company_articles:
            continue

        header = doc.add_heading(level=1)
        header_run = header.add_run(f"{company.upper()} COMPANY")
        header_run.underline = True
        header_run.font.size = Pt(14)
        header_run.font.name = EXPORT_FONT

        for article in company_articles:
            byline = doc.add_paragraph()
            byline.paragraph_format.space_before = Pt(10)
            author_run = byline.add_run(f"Author: OC {article.cadet_name}")
            author_run.bold = True
            author_run.font.size = Pt(12)
            byline.add_run(f" | Platoon: {article.platoon}").font.size = Pt(11)

            if article.image is not None:
                _add_picture(doc, article.image, picture_size, picture_size)

            for line in article.content.splitlines():
                if line.strip():
                    _add_text(doc, line.strip(), size=Pt(12))

            separator = doc.add_paragraph()
            separator.paragraph_format.space_after = Pt(20)
            separator.add_run("_" * 50).font.color.rgb = RGBColor(0xCC, 0xCC, 0xCC)

    content = _pack(doc)
    stamp = (today or date.today()).isoformat()
    logger.info(f"Magazine draft generated ({len(articles)} articles, {len(content):,} bytes)")
    return ExportedDocument(filename=f"CADET_MAGAZINE_DRAFT_{stamp}.docx", content=content)
