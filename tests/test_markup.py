from foliogen.markup import highlight_css, parse_attrs, render_markdown


def test_render_markdown_basic_and_toc():
    html, toc = render_markdown("## Section\n\nSome *text*.")
    assert '<h2 id="section">Section</h2>' in html
    assert "<em>text</em>" in html
    assert 'href="#section"' in toc


def test_fenced_code_is_highlighted():
    html, _ = render_markdown("```python\ndef f():\n    return 1\n```\n")
    assert 'class="codehilite"' in html
    assert '<span class="k">def</span>' in html


def test_notice_renders_inner_markdown():
    html, _ = render_markdown("Intro\n\n<Notice>\nBe **careful** here\n</Notice>\n\nOutro")
    assert '<div class="notice"><p>Be <strong>careful</strong> here</p></div>' in html
    assert "<p>Intro</p>" in html
    assert "<p>Outro</p>" in html


def test_sandbox_renders_iframe():
    html, _ = render_markdown('<Sandbox id="abc123" module="/src/index.js" />')
    assert "<iframe" in html
    assert "https://codesandbox.io/embed/abc123?fontsize=14&amp;view=editor&amp;module=%2Fsrc%2Findex.js" in html
    assert 'sandbox="allow-modals allow-forms allow-popups allow-scripts allow-same-origin"' in html


def test_sandbox_without_module():
    html, _ = render_markdown("<Sandbox id='abc' />")
    assert 'src="https://codesandbox.io/embed/abc?fontsize=14&amp;view=editor"' in html


def test_shortcodes_inside_code_fences_stay_literal():
    html, _ = render_markdown("```\n<Notice>not rendered</Notice>\n```\n")
    assert "notice" not in html.replace("&lt;Notice&gt;", "").replace("&lt;/Notice&gt;", "")
    assert "&lt;Notice&gt;" in html


def test_custom_registry():
    registry = {"Shout": lambda attrs, body: f"<strong>{body.upper()}</strong>"}
    html, _ = render_markdown("<Shout>hi</Shout>\n\n<Notice>kept</Notice>", registry=registry)
    assert "<strong>HI</strong>" in html
    assert "<Notice>kept</Notice>" in html


def test_parse_attrs_accepts_both_quote_styles():
    assert parse_attrs(' id="a" module=\'b\'') == {"id": "a", "module": "b"}


def test_highlight_css_targets_code_class():
    assert ".codehilite" in highlight_css()
