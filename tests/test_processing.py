"""
Tests for the processing passes.

Format detection, entity decoding, tag repair, structure
normalization, sanitizing, conversion, cleaning and rendering.
"""

import pytest

from content_quality.core.models.content import ContentFormat, RenderOptions, SanitizeOptions
from content_quality.core.processing.article import (
    EMPTY_CONTENT_HTML,
    extract_json_content,
    generate_excerpt,
    is_legacy_article,
    normalize_article_content,
    normalize_article_metadata,
    normalize_featured_image
)
from content_quality.core.processing.cleaner import (
    clean_ai_placeholders,
    collapse_stock_phrases,
    enhance_natural_language,
    improve_content_structure,
    remove_empty_sections,
    remove_repetitive_content
)
from content_quality.core.processing.converter import markdown_to_html, plain_to_html, to_html
from content_quality.core.processing.entities import decode_entities, escape_unsafe_html
from content_quality.core.processing.format_detector import detect_format
from content_quality.core.processing.renderer import process_html, render_content, strip_code_fences
from content_quality.core.processing.sanitizer import is_safe_url, sanitize_html
from content_quality.core.processing.structure import normalize_structure
from content_quality.core.processing.tag_repair import (
    DEFAULT_PLACEHOLDER_SRC,
    find_unbalanced_tags,
    repair_tags
)


MALFORMED_INPUTS = [
    "<div><p>text</div>",
    "<p>a</span></p>",
    "<div><strong>bold",
    "<ul><li>one<li>two</ul>",
    "<h3>Storage Tips",
    "<table><tr><td>cell</table>",
    "</p>stray closer<p>open",
]


@pytest.mark.parametrize("text, expected", [
    ("&lt;h2&gt;Title&lt;/h2&gt;", ContentFormat.HTML_ESCAPED),
    ("<p>Hello</p>", ContentFormat.HTML),
    ("# Title\n\nSome text", ContentFormat.MARKDOWN),
    ("- first\n- second", ContentFormat.MARKDOWN),
    ("A plain sentence with nothing special.", ContentFormat.PLAIN),
    ("", ContentFormat.PLAIN),
    ("   \n ", ContentFormat.PLAIN),
])
def test_detect_format(text, expected):
    """Test format detection priority."""
    assert detect_format(text) == expected


def test_escaped_html_is_not_markdown():
    """Test escaped markup with Markdown-looking text stays escaped HTML."""
    text = "&lt;h2&gt;**Bold** heading&lt;/h2&gt;"
    assert detect_format(text) == ContentFormat.HTML_ESCAPED


def test_entity_decoding():
    """Test entity decoding."""
    assert decode_entities("&lt;h2&gt;Title&lt;/h2&gt;") == "<h2>Title</h2>"
    assert decode_entities("") == ""
    assert decode_entities("no entities") == "no entities"


def test_escape_unsafe_html():
    """Test escaping markup for display."""
    assert escape_unsafe_html("<a href='/x'>") == "&lt;a href=&#x27;&#x2F;x&#x27;&gt;"
    assert escape_unsafe_html("") == ""


def test_repair_closes_trailing_heading():
    """Test a heading cut off at end of input is closed."""
    assert repair_tags("<h3>Storage Tips") == "<h3>Storage Tips</h3>"


def test_repair_image_without_src():
    """Test an image without a source gets the placeholder and keeps its alt."""
    repaired = repair_tags('<img alt="house">')

    assert f'src="{DEFAULT_PLACEHOLDER_SRC}"' in repaired
    assert 'alt="house"' in repaired
    assert repaired.count('alt=') == 1


def test_repair_image_with_empty_src():
    """Test an empty src is replaced and alt text added."""
    repaired = repair_tags('<img src="">')

    assert f'src="{DEFAULT_PLACEHOLDER_SRC}"' in repaired
    assert 'alt="Image"' in repaired


def test_repair_pops_through_to_matching_opener():
    """Test a closer closes the tags opened after its opener."""
    assert repair_tags("<div><p>text</div>") == "<div><p>text</p></div>"


def test_repair_drops_orphan_closer():
    """Test closers without an opener are dropped."""
    assert repair_tags("<p>a</span></p>") == "<p>a</p>"


def test_repair_closes_open_tags_at_end():
    """Test tags still open at the end are closed in reverse order."""
    assert repair_tags("<div><strong>bold") == "<div><strong>bold</strong></div>"


def test_repair_wraps_orphan_list_items():
    """Test list items outside a list are wrapped."""
    assert repair_tags("<li>One</li><li>Two</li>") == "<ul><li>One</li><li>Two</li></ul>"
    assert repair_tags("<ol><li>One</li></ol>") == "<ol><li>One</li></ol>"


def test_repair_wraps_orphan_items_with_nested_list():
    """Test a list nested inside an orphan item stays inside it."""
    html = repair_tags("<li>a<ul><li>b</li></ul></li><li>c</li>")

    assert html == "<ul><li>a<ul><li>b</li></ul></li><li>c</li></ul>"
    assert repair_tags("<li>a</li>tail") == "<ul><li>a</li></ul>tail"


def test_repair_keeps_spacing_inside_image_attributes():
    """Test repaired images keep attribute values as written."""
    html = repair_tags('<img alt="big  house">')

    assert 'alt="big  house"' in html
    assert f'src="{DEFAULT_PLACEHOLDER_SRC}"' in html


def test_repair_fixes_links():
    """Test empty and unquoted hrefs."""
    assert repair_tags('<a href="">x</a>') == '<a href="#">x</a>'
    assert repair_tags('<a href=/page>x</a>') == '<a href="/page">x</a>'


@pytest.mark.parametrize("html", MALFORMED_INPUTS)
def test_repair_leaves_no_open_tags(html):
    """Test every opened tag is closed after repair."""
    unclosed, orphans = find_unbalanced_tags(repair_tags(html))

    assert unclosed == []
    assert orphans == []


def test_repair_empty_input():
    """Test empty input."""
    assert repair_tags("") == ""
    assert repair_tags(None) == ""


def test_normalize_structure():
    """Test structure normalization rules."""
    assert normalize_structure("<p> </p><p>Text</p>") == "<p>Text</p>"
    assert normalize_structure("Intro text<h2>Head</h2>") == "<p>Intro text</p><h2>Head</h2>"
    assert normalize_structure("<h1>A</h1><h1>B</h1>") == "<h1>A</h1><h2>B</h2>"
    assert "<p>Outer inner</p>" in normalize_structure("<p>Outer <p>inner</p></p>")
    assert normalize_structure("<p>a</p>\n\n\n\n<p>b</p>") == "<p>a</p>\n\n<p>b</p>"
    assert normalize_structure("") == ""


def test_sanitize_removes_script_vectors():
    """Test scripts, event handlers and javascript: URLs are removed."""
    assert sanitize_html("<p>Hi</p><script>alert(1)</script>") == "<p>Hi</p>"
    assert sanitize_html('<p onclick="steal()">Hi</p>') == "<p>Hi</p>"
    assert sanitize_html('<a href="javascript:alert(1)">x</a>') == "<a>x</a>"

    obfuscated = sanitize_html('<a href="java&#9;script:alert(1)">x</a>')
    assert "script" not in obfuscated


def test_sanitize_unwraps_disallowed_tags():
    """Test disallowed tags lose their markup but keep their text."""
    assert sanitize_html("<p><font color='red'>Text</font></p>") == "<p>Text</p>"


def test_sanitize_options():
    """Test allow-list switches."""
    html = '<p><img src="/a.jpg" alt="a">Hi</p>'
    assert sanitize_html(html, SanitizeOptions(allow_images=False)) == "<p>Hi</p>"
    assert "<img" in sanitize_html(html)

    table = "<table><tr><td>x</td></tr></table>"
    assert sanitize_html(table, SanitizeOptions(strict=True)) == "x"
    assert "<table>" in sanitize_html(table)


def test_sanitize_blank_target_gets_rel():
    """Test links opening a new window get rel=noopener."""
    html = sanitize_html('<a href="https://example.com" target="_blank">x</a>')
    assert 'rel="noopener noreferrer"' in html


@pytest.mark.parametrize("html", MALFORMED_INPUTS + [
    '<p class="lead" onmouseover="x()">Lead <b>bold</b></p><iframe src="x"></iframe>',
    '<div><!-- comment --><img src="javascript:x" alt="a"></div>',
])
def test_sanitize_is_idempotent_and_deterministic(html):
    """Test sanitizing twice changes nothing and output is stable."""
    once = sanitize_html(html)

    assert sanitize_html(once) == once
    assert sanitize_html(html) == once


def test_is_safe_url():
    """Test URL scheme checks."""
    assert is_safe_url("/relative/path")
    assert is_safe_url("https://example.com")
    assert is_safe_url("mailto:agent@example.com")
    assert not is_safe_url("javascript:alert(1)")
    assert not is_safe_url(" JaVaScRiPt:alert(1)")
    assert not is_safe_url("data:text/html;base64,xxx")


def test_markdown_table_converted_before_lists():
    """Test pipe tables become tables and are never itemized."""
    html = markdown_to_html("| A | B |\n|---|---|\n| 1 | 2 |")

    assert "<table><thead><tr><th>A</th><th>B</th></tr></thead>" in html
    assert "<td>1</td><td>2</td>" in html
    assert "<li>" not in html


def test_markdown_constructs():
    """Test headings, emphasis, links and lists."""
    assert markdown_to_html("# Title") == "<h1>Title</h1>"
    assert markdown_to_html("This is **bold** text") == "<p>This is <strong>bold</strong> text</p>"
    assert markdown_to_html("[Home](/home)") == '<p><a href="/home">Home</a></p>'

    html = markdown_to_html("- one\n- two\n\n1. first\n2. second")
    assert html.count("<ul>") == 1
    assert html.count("<ol>") == 1
    assert "<li>one</li>" in html
    assert "<li>second</li>" in html


def test_plain_to_html():
    """Test paragraphs and line breaks from plain text."""
    html = plain_to_html("First line\nsecond line\n\nNext para")
    assert html == "<p>First line<br>second line</p>\n<p>Next para</p>"


def test_to_html_decodes_escaped_markup():
    """Test escaped HTML is decoded."""
    assert to_html("&lt;p&gt;Hi&lt;/p&gt;") == "<p>Hi</p>"
    assert to_html("") == ""


def test_repetition_cleaner_keeps_first_occurrence():
    """Test near-duplicate sentences are dropped and order is kept."""
    cleaned = remove_repetitive_content("Sentence one. Sentence one. Sentence two.")

    assert cleaned.count("Sentence one.") == 1
    assert cleaned.count("Sentence two.") == 1
    assert cleaned.index("Sentence one.") < cleaned.index("Sentence two.")


def test_repetition_cleaner_keeps_markup():
    """Test tags inside a dropped sentence survive."""
    cleaned = remove_repetitive_content("<p>The balcony faces the sea.</p><p>The balcony faces the sea.</p>")

    assert cleaned.count("The balcony faces the sea.") == 1
    assert cleaned.count("<p>") == 2
    assert cleaned.count("</p>") == 2


def test_placeholder_cleaner():
    """Test placeholder tokens and markers are removed."""
    assert clean_ai_placeholders("Nice view [image: sea view] here") == "Nice view here"
    assert clean_ai_placeholders("Görsel (görsel: salon) burada") == "Görsel burada"
    assert clean_ai_placeholders("TODO: fix this") == "fix this"
    assert clean_ai_placeholders("") == ""


def test_stock_phrases_collapsed():
    """Test a repeated stock opener is kept once."""
    text = "In recent years prices rose. In recent years rents rose too."
    assert collapse_stock_phrases(text).count("In recent years") == 1


def test_stock_phrase_mid_sentence_drops_whole_sentence():
    """Test a repeated phrase inside a sentence takes its sentence with it."""
    text = "Prices rose in recent years in Karasu. Rents also climbed in recent years near the coast. Done here."
    assert collapse_stock_phrases(text) == "Prices rose in recent years in Karasu. Done here."


def test_remove_empty_sections():
    """Test empty and &nbsp;-only elements are removed."""
    assert remove_empty_sections("<p>&nbsp;</p><div> </div><p>Text</p>") == "<p>Text</p>"


def test_improve_content_structure_promotes_first_h3():
    """Test the first h3 becomes h2 when there is no h2."""
    html = improve_content_structure("<h3>Intro</h3><p>a</p><h3>More</h3>")

    assert html.startswith("<h2>Intro</h2>")
    assert "<h3>More</h3>" in html


def test_enhance_natural_language():
    """Test transitions and punctuation runs are toned down."""
    assert enhance_natural_language("Great!!! Moreover, it works.") == "Great! It works."
    assert "In conclusion" not in enhance_natural_language("Nice flat. In conclusion, buy it.")


def test_process_html_pipeline():
    """Test the combined repair, normalize, sanitize pass."""
    html = process_html('Intro <script>x()</script><p onclick="a()">Body<img alt="x">')

    assert "<script" not in html
    assert "onclick" not in html
    assert html.startswith("<p>")
    assert f'src="{DEFAULT_PLACEHOLDER_SRC}"' in html
    assert process_html(html) == html
    assert process_html("") == ""


def test_process_html_drops_elements_emptied_by_sanitizing():
    """Test containers left empty by the sanitizer are removed."""
    raw = '<p>Intro</p><p><form><input></form></p><div><script>x()</script></div>'

    assert render_content(raw) == "<p>Intro</p>"
    assert process_html("<select><option>z</option></select>") == ""


@pytest.mark.parametrize("html", [
    "<p>a</span></p>",
    "<div><strong>bold",
    '<p>Intro</p><p><form><input></form></p>',
    '<select><option>z</option></select>',
])
def test_process_html_is_idempotent(html):
    """Test processing already processed HTML changes nothing."""
    once = process_html(html)
    assert process_html(once) == once


def test_render_content():
    """Test the top-level render entry point."""
    assert render_content("") == ""
    assert render_content("```html\n<p>Hi</p>\n```") == "<p>Hi</p>"
    assert render_content("&lt;p&gt;Hello&lt;/p&gt;") == "<p>Hello</p>"
    assert "<script" not in render_content("<p>x</p><script>bad()</script>")

    table = render_content("| A | B |\n|---|---|\n| 1 | 2 |")
    assert '<div class="table-scroll overflow-x-auto"><table>' in table

    unwrapped = render_content("| A | B |\n|---|---|\n| 1 | 2 |", RenderOptions(wrap_tables=False))
    assert "table-scroll" not in unwrapped


def test_strip_code_fences():
    """Test fence unwrapping."""
    assert strip_code_fences("```\n<p>a</p>\n```") == "<p>a</p>"
    assert strip_code_fences("<p>a</p>") == "<p>a</p>"


def test_article_normalization():
    """Test stored article normalization."""
    assert normalize_article_content(None) == EMPTY_CONTENT_HTML
    assert normalize_article_content("   ") == EMPTY_CONTENT_HTML

    raw = '{"content": "<p>Hi there</p>", "title": "x"}'
    assert extract_json_content(raw) == "<p>Hi there</p>"
    assert extract_json_content("<p>not json</p>") == "<p>not json</p>"

    html = normalize_article_content('<p>Photo <img src="not a url" alt="a"></p>')
    assert f'src="{DEFAULT_PLACEHOLDER_SRC}"' in html


def test_generate_excerpt():
    """Test excerpts end at a sentence boundary when one is close."""
    text = "First sentence here. Second sentence is longer than the limit allows."

    assert generate_excerpt(text, 30) == "First sentence here."
    assert generate_excerpt(text, 40).endswith("...")
    assert generate_excerpt("Short.", 160) == "Short."
    assert generate_excerpt(None) == ""


def test_featured_image_and_legacy_checks():
    """Test featured image validation and legacy detection."""
    assert normalize_featured_image("https://cdn.example.com/a.jpg") == "https://cdn.example.com/a.jpg"
    assert normalize_featured_image("asset_123") == "asset_123"
    assert normalize_featured_image("javascript:alert(1)") is None
    assert normalize_featured_image(None) is None

    assert is_legacy_article({'content': ''})
    assert is_legacy_article({'content': '<p>x</p>'})
    assert not is_legacy_article({'content': '<p>x</p>', 'excerpt': 'e'})


def test_article_metadata_defaults():
    """Test missing excerpt, meta description and author are filled."""
    normalized = normalize_article_metadata({
        'content': '<p>The flat has two bedrooms and a sunny balcony.</p>',
        'tags': ['rent', '', 3]
    })

    assert normalized['excerpt'] == 'The flat has two bedrooms and a sunny balcony.'
    assert normalized['meta_description'] == normalized['excerpt']
    assert normalized['author'] == 'Editorial Team'
    assert normalized['tags'] == ['rent']
    assert normalized['featured_image'] is None
