"""Tests for paragraph reconstruction."""

import pytest
from cleanhtml.autop import (
    BLOCK_TAGS,
    autop,
    clean_up_object_tags,
    extract_preformatted,
    reconstruct,
    restore_preformatted,
    space_out_blocks,
)
from cleanhtml.errors import AutopError


class TestBasicParagraphs:
    def test_empty_input(self):
        assert autop("") == ""

    def test_whitespace_only_input(self):
        assert autop("  \n\t \n") == ""

    def test_single_line_gets_one_paragraph(self):
        assert autop("Just text", False) == "<p>Just text</p>\n"

    def test_blank_line_splits_paragraphs(self):
        result = autop("Line one\n\nLine two", False)
        assert result == "<p>Line one</p>\n<p>Line two</p>\n"

    def test_many_blank_lines_split_once(self):
        result = autop("Line one\n\n\n\nLine two", False)
        assert result == "<p>Line one</p>\n<p>Line two</p>\n"

    def test_single_newline_becomes_line_break(self):
        result = autop("Line one\nLine two", True)
        assert result == "<p>Line one<br />\nLine two</p>\n"

    def test_single_newline_kept_without_line_breaks(self):
        result = autop("Line one\nLine two", False)
        assert result == "<p>Line one\nLine two</p>\n"

    def test_line_breaks_on_by_default(self):
        assert autop("a\nb") == autop("a\nb", insert_line_breaks=True)

    def test_windows_newlines(self):
        result = autop("Line one\r\n\r\nLine two", False)
        assert result == "<p>Line one</p>\n<p>Line two</p>\n"

    def test_reconstruct_alias(self):
        assert reconstruct is autop


class TestLineBreakPairs:
    def test_double_break_becomes_paragraph_boundary(self):
        result = autop("First<br /><br />Second", True)
        assert result == "<p>First</p>\n<p>Second</p>\n"

    @pytest.mark.parametrize("text", [
        "First<br /><br />Second",
        "First<br/>\n<br/>Second",
        "First<br><br>Second\nThird",
    ])
    def test_no_adjacent_line_breaks(self, text):
        result = autop(text, True)
        assert "<br /><br />" not in result
        assert "<br/><br/>" not in result
        assert "<br><br>" not in result

    def test_existing_break_not_doubled(self):
        result = autop("one<br />\ntwo", True)
        assert result == "<p>one<br />\ntwo</p>\n"


class TestBlockTags:
    def test_heading_not_wrapped(self):
        result = autop("<h2>Title</h2>\nSome text", False)
        assert result == "<h2>Title</h2>\n<p>Some text</p>\n"

    def test_no_line_break_after_block(self):
        result = autop("<h2>Title</h2>\nSome text", True)
        assert result == "<h2>Title</h2>\n<p>Some text</p>\n"

    def test_list_items_not_wrapped(self):
        result = autop("<ul>\n<li>One</li>\n<li>Two</li>\n</ul>", False)
        assert result == "<ul>\n<li>One</li>\n<li>Two</li>\n</ul>\n"

    def test_div_content_not_wrapped(self):
        assert autop("<div>Inside</div>", False) == "<div>Inside</div>\n"

    def test_blockquote_wraps_paragraph(self):
        result = autop("<blockquote>Quoted text</blockquote>", False)
        assert result == "<blockquote><p>Quoted text</p></blockquote>\n"

    def test_paragraph_closes_inside_container(self):
        result = autop("<div>\nFirst\n\nSecond</div>", False)
        assert "<p>Second</p></div>" in result

    def test_inline_tags_stay_inside_paragraph(self):
        result = autop("Some <strong>bold</strong> text", False)
        assert result == "<p>Some <strong>bold</strong> text</p>\n"

    def test_param_is_not_a_paragraph_tag(self):
        result = space_out_blocks('<param name="a">')
        assert result == '<param name="a">'

    def test_block_tag_set(self):
        assert {"p", "pre", "blockquote", "h1", "h6", "li", "table"} <= BLOCK_TAGS
        assert "span" not in BLOCK_TAGS
        assert "strong" not in BLOCK_TAGS


class TestObjectTags:
    def test_param_whitespace_removed(self):
        text = '<object data="movie.swf">\n  <param name="a" value="b" />\n</object>'
        result = autop(text, True)
        assert '<object data="movie.swf"><param name="a" value="b" /></object>' in result

    def test_embed_close_whitespace_removed(self):
        text = '<object>\n<embed src="x">\n</embed>\n</object>'
        result = clean_up_object_tags(text)
        assert "</embed></object>" in result

    def test_object_cleanup_only_with_object(self):
        text = 'a\n<param name="x">\nb'
        assert space_out_blocks(text) == text


class TestPreformatted:
    def test_pre_content_preserved(self):
        text = "Intro\n\n<pre>a\n\n\nb</pre>\n\nOutro"
        result = autop(text, True)
        assert result == "<p>Intro</p>\n<pre>a\n\n\nb</pre>\n<p>Outro</p>\n"

    def test_only_pre_block(self):
        result = autop("<pre>x\n\ny</pre>", True)
        assert result == "<pre>x\n\ny</pre>\n"

    def test_multiple_pre_blocks(self):
        text = "<pre>one\n\n1</pre>\nmiddle\n<pre>two\n  2</pre>"
        result = autop(text, True)
        assert "<pre>one\n\n1</pre>" in result
        assert "<pre>two\n  2</pre>" in result
        assert "autop-pre-tag" not in result

    def test_pre_with_attributes(self):
        result = autop('<pre class="code">x = 1\n\ny = 2</pre>', False)
        assert '<pre class="code">x = 1\n\ny = 2</pre>' in result

    def test_unterminated_pre_flows_through(self):
        result = autop("<pre>never closed\n\nstill", False)
        assert "autop-pre-tag" not in result
        assert "never closed" in result
        assert "still" in result

    def test_stray_closing_pre_kept(self):
        text, blocks = extract_preformatted("a</pre>b<pre>c</pre>\n")
        assert text.startswith("a</pre>b<pre autop-pre-tag-0></pre>")
        assert blocks == {"<pre autop-pre-tag-0></pre>": "<pre>c</pre>"}

    def test_extract_without_pre_is_noop(self):
        assert extract_preformatted("plain\n") == ("plain\n", {})

    def test_restore_missing_token_fails(self):
        with pytest.raises(AutopError):
            restore_preformatted("nothing here", {"<pre autop-pre-tag-0></pre>": "<pre>x</pre>"})

    def test_restore_does_not_rescan_restored_content(self):
        blocks = {
            "<pre autop-pre-tag-0></pre>": "<pre>see <pre autop-pre-tag-1></pre>",
            "<pre autop-pre-tag-1></pre>": "<pre>y</pre>",
        }
        text = "<pre autop-pre-tag-0></pre>\n<pre autop-pre-tag-1></pre>"
        result = restore_preformatted(text, blocks)
        assert result == "<pre>see <pre autop-pre-tag-1></pre>\n<pre>y</pre>"


class TestScriptAndStyle:
    def test_newlines_inside_script_preserved(self):
        result = autop("<script>var a;\nvar b;</script>", True)
        assert "var a;\nvar b;" in result
        assert "var a;<br />" not in result
