"""Display and document export must agree on how every line is classified.

Each block yields exactly one body paragraph in the exported document, so
the document body can be lined up against the rendered presentation tree.
"""

import io

import pytest
from docx import Document

from sitrep import DocumentMetadata, ElementKind, classify, compile_report, encode_document, render

_STYLE_FOR_ELEMENT = {
    ElementKind.SECTION_TITLE: "Heading 3",
    ElementKind.LIST_ITEM: "List Bullet",
    ElementKind.PARAGRAPH: "Normal",
    ElementKind.PARAGRAPH_BREAK: "Normal",
}

CASES = [
    "*SITUATION REPORT AS ON 16 FEB 26*\n*UNIT: Alpha*\n\n1. On Day 1 all quiet",
    ". first\n• second\n\n*  padded  *\nclosing",
    "<h3>HEADING</h3><ul><li>one</li><li>two</li></ul><p>body &amp; more</p>",
    "<p>line one<br>line two</p><div>*INLINE HEADING*</div>",
    "\n\n**\n***\n. \n",
]


def _body_paragraphs(markup):
    metadata = DocumentMetadata(title="Conformance", report_date="16 FEB 26", unit="Alpha")
    doc = Document(io.BytesIO(encode_document(classify(markup), [], metadata)))
    # title, DATE, UNIT before the body; signature after it
    return doc.paragraphs[3:-1]


@pytest.mark.parametrize("markup", CASES)
def test_same_sequence(markup):
    elements = render(classify(markup)).elements
    paragraphs = _body_paragraphs(markup)

    assert len(paragraphs) == len(elements)
    for element, paragraph in zip(elements, paragraphs):
        assert paragraph.style.name == _STYLE_FOR_ELEMENT[element.kind]
        assert paragraph.text == element.text


def test_compiled_report(sample_fields):
    markup = compile_report(sample_fields)
    elements = render(classify(markup)).elements
    paragraphs = _body_paragraphs(markup)

    assert [p.text for p in paragraphs] == [e.text for e in elements]
