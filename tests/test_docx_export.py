"""Tests for docx_export.py Word document export."""

import base64
import io
from datetime import date
from unittest.mock import patch

import pytest
from docx import Document
from docx.shared import Pt

from sitrep import (
    ARTICLE_POLICY,
    ArticleRecord,
    DocumentBuildError,
    DocumentMetadata,
    MediaAttachment,
    ReportRecord,
    build_magazine_docx,
    compress_image,
    classify,
    encode_document,
    export_markup,
    export_report,
    is_pseudo_heading,
    sanitize_filename,
)
from sitrep.config import PROVENANCE_FOOTER

BROKEN = MediaAttachment(data_url="data:image/jpeg;base64,!!!not-base64!!!")


def _metadata(**overrides):
    defaults = {
        "title": "Situation Report Alpha 16 FEB 26",
        "report_date": "16 FEB 26",
        "unit": "Alpha Company",
        "commander_name": "J. Mwangi",
    }
    defaults.update(overrides)
    return DocumentMetadata(**defaults)


def _read(content):
    return Document(io.BytesIO(content))


def _strip_app0(jpeg):
    """Drop the JFIF APP0 segment; Pillow still reads the result, python-docx does not."""
    assert jpeg[:4] == b"\xff\xd8\xff\xe0"
    length = int.from_bytes(jpeg[4:6], "big")
    return jpeg[:2] + jpeg[4 + length:]


class TestPseudoHeading:
    """Tests for is_pseudo_heading()."""

    @pytest.mark.parametrize("text,expected", [
        ("SECURITY STATUS", True),
        ("Security status", False),
        ("OK", False),
        ("ABCD", True),
        ("1234", True),
    ])
    def test_detection(self, text, expected):
        assert is_pseudo_heading(text) is expected

    def test_all_caps_body_is_bold_in_export(self):
        doc = _read(encode_document(classify("SECURITY STATUS\nSecurity status"), [], _metadata()))
        caps, mixed = doc.paragraphs[3], doc.paragraphs[4]

        assert caps.runs[0].bold is True
        assert caps.runs[0].font.size == Pt(12)
        assert not mixed.runs[0].bold
        assert mixed.runs[0].font.size == Pt(11)


class TestEncodeDocument:
    """Tests for encode_document() layout."""

    def test_header_block(self):
        doc = _read(encode_document([], [], _metadata()))
        assert doc.paragraphs[0].text == "SITUATION REPORT ALPHA 16 FEB 26"
        assert doc.paragraphs[0].runs[0].bold is True
        assert doc.paragraphs[1].text == "DATE: 16 FEB 26"
        assert doc.paragraphs[2].text == "UNIT: Alpha Company"

    def test_signature_last(self):
        doc = _read(encode_document(classify("body"), [], _metadata()))
        assert doc.paragraphs[-1].text == "OC Alpha Company: OC J. Mwangi"
        assert doc.paragraphs[-1].runs[0].bold is True

    def test_footer_is_italic(self):
        doc = _read(encode_document([], [], _metadata()))
        footer = doc.sections[0].footer.paragraphs[0]
        assert footer.text == PROVENANCE_FOOTER
        assert footer.runs[0].italic is True

    def test_attachments_embedded(self, make_image):
        attachments = [compress_image(make_image()), compress_image(make_image(fmt="JPEG"))]
        doc = _read(encode_document([], attachments, _metadata()))
        assert len(doc.inline_shapes) == 2

    def test_bad_attachment_skipped(self, make_image):
        attachments = [compress_image(make_image()), BROKEN, compress_image(make_image())]
        doc = _read(encode_document(classify("body"), attachments, _metadata()))
        assert len(doc.inline_shapes) == 2
        assert doc.paragraphs[-1].text == "OC Alpha Company: OC J. Mwangi"

    def test_jpeg_without_jfif_header_skipped(self, make_image):
        bare_jpeg = _strip_app0(make_image(fmt="JPEG"))
        unembeddable = MediaAttachment(
            data_url="data:image/jpeg;base64," + base64.b64encode(bare_jpeg).decode()
        )
        attachments = [compress_image(make_image()), unembeddable, compress_image(make_image())]

        doc = _read(encode_document(classify("body"), attachments, _metadata()))
        clean = _read(encode_document(classify("body"), [attachments[0], attachments[2]], _metadata()))

        assert len(doc.inline_shapes) == 2
        assert doc.paragraphs[-1].text == "OC Alpha Company: OC J. Mwangi"
        assert len(doc.paragraphs) == len(clean.paragraphs)

    def test_non_image_attachment_skipped(self):
        attachment = MediaAttachment(data_url="data:image/jpeg;base64,aGVsbG8gd29ybGQ=")
        doc = _read(encode_document([], [attachment], _metadata()))
        assert len(doc.inline_shapes) == 0

    def test_packing_failure_raises(self):
        with patch("docx.document.Document.save", side_effect=OSError("disk full")):
            with pytest.raises(DocumentBuildError, match="disk full"):
                encode_document([], [], _metadata())


class TestExportMarkup:

    def test_filename_from_title(self):
        document = export_markup("body", [], _metadata())
        assert document.filename == "Situation Report Alpha 16 FEB 26.docx"
        assert document.content[:2] == b"PK"

    def test_export_report_uses_record(self):
        record = ReportRecord(
            id="r1",
            report_date="17 FEB 26",
            unit="Bravo",
            title="Day 2/3: Bravo",
            signing_officer="A. Otieno",
            markup_text="*UNIT: Bravo*",
        )
        document = export_report(record)
        doc = _read(document.content)

        assert document.filename == "Day 2-3- Bravo.docx"
        assert doc.paragraphs[1].text == "DATE: 17 FEB 26"
        assert doc.paragraphs[-1].text == "OC Bravo: OC A. Otieno"


class TestSanitizeFilename:

    @pytest.mark.parametrize("title,expected", [
        ("Plain Title", "Plain Title.docx"),
        ('a/b\\c?d%e*f:g|h"i<j>k', "a-b-c-d-e-f-g-h-i-j-k.docx"),
        ("CONSOLIDATED PROGRESS REPORT (FIRST 3 DAYS)", "CONSOLIDATED PROGRESS REPORT (FIRST 3 DAYS).docx"),
    ])
    def test_illegal_characters(self, title, expected):
        assert sanitize_filename(title) == expected


class TestMagazine:
    """Tests for build_magazine_docx()."""

    def _article(self, name, company, content="First line\nSecond line", image=None):
        return ArticleRecord(
            id=name, cadet_name=name, company=company, platoon="2", content=content, image=image
        )

    def test_grouped_in_company_order(self):
        articles = [
            self._article("Kamau", "Bravo"),
            self._article("Achieng", "Alpha"),
            self._article("Ghost", "Delta"),
        ]
        doc = _read(build_magazine_docx(articles, today=date(2026, 10, 19)).content)
        texts = [p.text for p in doc.paragraphs]

        assert texts[0] == "CADET MAGAZINE CONTRIBUTIONS"
        assert texts.index("ALPHA COMPANY") < texts.index("BRAVO COMPANY")
        assert "Author: OC Achieng | Platoon: 2" in texts
        assert not any("Ghost" in t for t in texts)

    def test_filename_carries_date(self):
        document = build_magazine_docx([], today=date(2026, 10, 19))
        assert document.filename == "CADET_MAGAZINE_DRAFT_2026-10-19.docx"

    def test_profile_picture(self, make_image):
        image = compress_image(make_image(800, 800), ARTICLE_POLICY)
        doc = _read(build_magazine_docx([self._article("Wanjiru", "Charlie", image=image)]).content)
        assert len(doc.inline_shapes) == 1
