from supportwise.data_models import LinkSpan, parse_markup

def test_parse_plain_text():
    rich_text = parse_markup("No links here.")
    assert rich_text.segments == ("No links here.",)
    assert rich_text.links == ()

def test_parse_anchor_with_single_and_double_quotes():
    rich_text = parse_markup(
        "Visit <a href='https://docs.thoughtful.ai' target='_blank'>docs</a> "
        'or email <a href="mailto:support@thoughtful.ai">support@thoughtful.ai</a>.'
    )
    assert rich_text.links == (
        LinkSpan(label="docs", url="https://docs.thoughtful.ai"),
        LinkSpan(label="support@thoughtful.ai", url="mailto:support@thoughtful.ai"),
    )
    assert rich_text.plain_text == "Visit docs or email support@thoughtful.ai."

def test_non_anchor_tags_stay_inert_and_are_escaped():
    rich_text = parse_markup("<script>alert(1)</script> <b>bold</b>")
    assert rich_text.links == ()
    assert rich_text.to_html() == "&lt;script&gt;alert(1)&lt;/script&gt; &lt;b&gt;bold&lt;/b&gt;"

def test_unsafe_scheme_renders_label_only():
    rich_text = parse_markup("<a href='javascript:alert(1)'>click</a>")
    assert rich_text.links[0].is_safe is False
    assert rich_text.to_html() == "click"

def test_safe_anchor_is_rebuilt_with_escaped_parts():
    html_text = parse_markup("<a href='https://x.test/?a=1&b=2'>A & B</a>").to_html()
    assert html_text == '<a href="https://x.test/?a=1&amp;b=2" target="_blank" rel="noopener noreferrer">A &amp; B</a>'

def test_to_terminal():
    rich_text = parse_markup(
        "See <a href='https://www.thoughtful.ai'>website</a> or "
        "<a href='mailto:support@thoughtful.ai'>support@thoughtful.ai</a>"
    )
    assert rich_text.to_terminal() == "See website (https://www.thoughtful.ai) or support@thoughtful.ai"

def test_parse_empty():
    assert parse_markup("").segments == ()
