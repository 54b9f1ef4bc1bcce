"""Tests for classifier.py markup classification."""

import pytest

from sitrep import Block, BlockKind, classify, classify_line, normalize_markup


class TestClassifyLine:
    """Tests for classify_line()."""

    @pytest.mark.parametrize("line,expected", [
        ("*UNIT: Alpha*", Block(kind=BlockKind.HEADING, text="UNIT: Alpha")),
        ("  * spaced heading *  ", Block(kind=BlockKind.HEADING, text="spaced heading")),
        (". Guard mounting", Block(kind=BlockKind.BULLET, text="Guard mounting")),
        ("• Patrol", Block(kind=BlockKind.BULLET, text="Patrol")),
        ("   ", Block(kind=BlockKind.BLANK)),
        ("Plain sentence.", Block(kind=BlockKind.BODY, text="Plain sentence.")),
    ])
    def test_kinds(self, line, expected):
        assert classify_line(line) == expected

    def test_short_star_line_is_body(self):
        assert classify_line("**").kind == BlockKind.BODY
        assert classify_line("*").kind == BlockKind.BODY

    def test_three_star_line_is_heading(self):
        block = classify_line("***")
        assert block == Block(kind=BlockKind.HEADING, text="*")

    def test_inline_heading_with_trailing_text_is_body(self):
        block = classify_line("*3. Action Taken:* Vehicle recovered")
        assert block.kind == BlockKind.BODY

    def test_dot_without_space_is_body(self):
        assert classify_line(".5 km march").kind == BlockKind.BODY

    def test_all_caps_is_body(self):
        assert classify_line("SECURITY STATUS").kind == BlockKind.BODY


class TestNormalizeMarkup:
    """Tests for normalize_markup()."""

    def test_plain_text_unchanged(self):
        text = "*HEADING*\n. item\n\nbody"
        assert normalize_markup(text) == text

    def test_crlf_normalized(self):
        assert normalize_markup("a\r\nb\rc") == "a\nb\nc"

    def test_paragraphs_become_lines(self):
        assert normalize_markup("<p>one</p><p>two</p>").splitlines() == ["one", "two"]

    def test_br_becomes_newline(self):
        assert normalize_markup("one<br>two<br/>three").splitlines() == ["one", "two", "three"]

    def test_list_items_become_bullets(self):
        text = normalize_markup("<ul><li>alpha</li><li>bravo</li></ul>")
        assert text.splitlines() == ["• alpha", "• bravo"]

    def test_heading_tags_become_headings(self):
        blocks = classify("<h3>FORCE DISCIPLINE</h3><p>Quiet day</p>")
        assert blocks == [
            Block(kind=BlockKind.HEADING, text="FORCE DISCIPLINE"),
            Block(kind=BlockKind.BODY, text="Quiet day"),
        ]

    def test_inline_tags_stripped(self):
        assert normalize_markup("<p>very <b>good</b> day</p>").strip() == "very good day"

    def test_entities_decoded(self):
        text = normalize_markup("<p>A&nbsp;&amp;&nbsp;B, x &lt; y, &quot;x&quot;</p>")
        assert text.strip() == 'A & B, x < y, "x"'

    def test_double_escaped_entity_decodes_once(self):
        assert normalize_markup("&amp;lt;") == "&lt;"

    def test_nested_tag_fully_stripped(self):
        assert normalize_markup("<<b>b>") == ""
        assert normalize_markup("keep <b<i>>this") == "keep this"

    def test_source_newline_kept_beside_block_tag(self):
        text = normalize_markup("*HEADER*\n<p>body</p>")
        assert text.splitlines() == ["*HEADER*", "body"]

    def test_empty_input(self):
        assert normalize_markup("") == ""
        assert classify("") == []


class TestClassify:
    """Tests for classify()."""

    def test_one_block_per_line(self):
        blocks = classify("*A*\n. b\n\nc")
        assert [b.kind for b in blocks] == [
            BlockKind.HEADING, BlockKind.BULLET, BlockKind.BLANK, BlockKind.BODY,
        ]

    def test_editor_html_matches_plain_markup(self):
        plain = classify("*SITUATION*\n• item one\nClosing line")
        editor = classify("<h2>SITUATION</h2>\n<ul>\n  <li>item one</li>\n</ul>\n<p>Closing line</p>")
        assert editor == plain

    def test_plain_lines_mixed_with_html(self):
        blocks = classify("*HEADER*\n<p>body</p>")
        assert blocks == [
            Block(kind=BlockKind.HEADING, text="HEADER"),
            Block(kind=BlockKind.BODY, text="body"),
        ]

    def test_plain_text_before_list(self):
        blocks = classify("Intro line\n<ul><li>alpha</li></ul>")
        assert blocks == [
            Block(kind=BlockKind.BODY, text="Intro line"),
            Block(kind=BlockKind.BULLET, text="alpha"),
        ]

    @pytest.mark.parametrize("text", [
        "<p>unclosed",
        "<<<>>>",
        "*\n**\n***\n****",
        "\x00\x01 odd bytes",
        "<li></li><h1></h1>",
    ])
    def test_never_raises(self, text):
        assert isinstance(classify(text), list)
