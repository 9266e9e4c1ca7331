"""Tests for the fragment model, parsing and serialization."""

from cleanhtml.dom import (
    Element,
    Text,
    export_html,
    parse_fragment,
    significant_children,
    to_html,
)
from cleanhtml.normalizer import DOCUMENT_HEADER, NBSP


class TestElement:
    def test_renamed_keeps_attributes_and_children(self):
        el = Element("h1", (("id", "top"),), (Text("Title"),))
        renamed = el.renamed("h2")

        assert renamed.tag == "h2"
        assert renamed.attributes == (("id", "top"),)
        assert renamed.children == (Text("Title"),)
        assert el.tag == "h1"

    def test_attrs_mapping(self):
        el = Element("a", (("href", "/x"), ("target", "_blank")))
        assert el.attrs == {"href": "/x", "target": "_blank"}
        assert el.attrs.get("href") == "/x"
        assert "title" not in el.attrs

    def test_text_content(self):
        el = Element("p", (), (Text("a "), Element("b", (), (Text("b"),)), Text(" c")))
        assert el.text_content() == "a b c"

    def test_significant_children_skip_blank_text(self):
        bold = Element("strong", (), (Text("x"),))
        el = Element("p", (), (Text("  "), bold, Text("\n")))
        assert significant_children(el) == [bold]


class TestParseFragment:
    def test_nested_elements(self):
        fragment = parse_fragment("<p>Hi <b>there</b></p>")
        assert fragment == (
            Element("p", (), (Text("Hi "), Element("b", (), (Text("there"),)))),
        )

    def test_document_header_dropped(self):
        fragment = parse_fragment(DOCUMENT_HEADER + "<p>x</p>")
        assert fragment == (Element("p", (), (Text("x"),)),)

    def test_full_document_uses_body(self):
        markup = "<html><head><title>T</title></head><body><p>Body</p></body></html>"
        assert parse_fragment(markup) == (Element("p", (), (Text("Body"),)),)

    def test_content_after_body_kept(self):
        fragment = parse_fragment("<body><p>x</p></body><p>after</p>")
        assert fragment == (
            Element("p", (), (Text("x"),)),
            Element("p", (), (Text("after"),)),
        )

    def test_content_before_body_kept(self):
        fragment = parse_fragment("<p>lead</p><body><p>x</p>")
        assert [el.text_content() for el in fragment] == ["lead", "x"]

    def test_head_skipped_between_wrappers(self):
        markup = "intro <html><head><title>T</title></head><body><p>x</p></body></html>"
        assert parse_fragment(markup) == (Text("intro "), Element("p", (), (Text("x"),)))

    def test_comments_dropped(self):
        fragment = parse_fragment("<p>a<!-- note -->b</p>")
        assert fragment == (Element("p", (), (Text("a"), Text("b"))),)

    def test_entities_decoded(self):
        fragment = parse_fragment("<p>a&nbsp;&amp;b</p>")
        assert fragment[0].children == (Text("a" + NBSP + "&b"),)

    def test_class_attribute_is_a_string(self):
        fragment = parse_fragment('<span class="one two">x</span>')
        assert fragment[0].attributes == (("class", "one two"),)

    def test_malformed_markup_tolerated(self):
        fragment = parse_fragment("<p>unclosed <b>bold")
        assert fragment[0].tag == "p"
        assert fragment[0].text_content() == "unclosed bold"


class TestSerialization:
    def test_escapes_text_and_attributes(self):
        el = Element("a", (("title", 'say "hi"'),), (Text("a < b & c"),))
        assert to_html(el) == '<a title="say &quot;hi&quot;">a &lt; b &amp; c</a>'

    def test_void_elements_self_close(self):
        el = Element("p", (), (Text("a"), Element("br"), Text("b")))
        assert to_html(el) == "<p>a<br/>b</p>"

    def test_export_one_node_per_line(self):
        fragment = (
            Element("h2", (), (Text("T"),)),
            Text("\n"),
            Element("p", (), (Text("Body"),)),
        )
        assert export_html(fragment) == "<h2>T</h2>\n<p>Body</p>\n"

    def test_export_replaces_nbsp(self):
        fragment = (Element("p", (), (Text("a" + NBSP + "b"),)),)
        assert export_html(fragment) == "<p>a b</p>\n"

    def test_export_keeps_top_level_text(self):
        assert export_html((Text("plain"),)) == "plain\n"

    def test_export_empty_fragment(self):
        assert export_html(()) == ""

    def test_parse_then_export(self):
        markup = '<p class="x">a &amp; b<br>c</p>'
        assert export_html(parse_fragment(markup)) == '<p class="x">a &amp; b<br/>c</p>\n'
