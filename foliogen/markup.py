from __future__ import annotations

import html
import re
from typing import Callable, Optional
from urllib.parse import quote

import markdown
from markdown.extensions import Extension
from markdown.preprocessors import Preprocessor
from pygments.formatters import HtmlFormatter

CODE_CSS_CLASS = "codehilite"

SHORTCODE_RE = re.compile(
    r"<(?P<name>[A-Z][A-Za-z0-9]*)(?P<attrs>(?:\s+[A-Za-z_][\w-]*\s*=\s*(?:\"[^\"]*\"|'[^']*'))*)\s*"
    r"(?:/>|>(?P<body>.*?)</(?P=name)\s*>)",
    re.DOTALL,
)
ATTR_RE = re.compile(r"([A-Za-z_][\w-]*)\s*=\s*(?:\"([^\"]*)\"|'([^']*)')")

SANDBOX_ALLOW = (
    "geolocation; microphone; camera; midi; vr; accelerometer; gyroscope; "
    "payment; ambient-light-sensor; encrypted-media"
)
SANDBOX_FLAGS = "allow-modals allow-forms allow-popups allow-scripts allow-same-origin"

ShortcodeRenderer = Callable[[dict, str], str]


def parse_attrs(text: str) -> dict:
    return {m.group(1): m.group(2) if m.group(2) is not None else m.group(3) for m in ATTR_RE.finditer(text)}


def render_notice(attrs: dict, body: str) -> str:
    inner, _ = render_markdown(body.strip())
    return f'<div class="notice">{inner}</div>'


def render_sandbox(attrs: dict, body: str) -> str:
    sandbox_id = attrs.get("id", "")
    src = f"https://codesandbox.io/embed/{quote(sandbox_id, safe='')}?fontsize=14&view=editor"
    module = attrs.get("module")
    if module:
        src += "&module=" + quote(module, safe="")
    return (
        f'<iframe class="sandbox" src="{html.escape(src)}" title="{html.escape(sandbox_id)}" '
        f'allow="{SANDBOX_ALLOW}" sandbox="{SANDBOX_FLAGS}" '
        'style="width: 100%; height: 500px; border: 0; border-radius: 4px; overflow: hidden;"></iframe>'
    )


SHORTCODES: dict[str, ShortcodeRenderer] = {
    "Notice": render_notice,
    "Sandbox": render_sandbox,
}


class ShortcodePreprocessor(Preprocessor):
    def __init__(self, md, registry: dict[str, ShortcodeRenderer]):
        super().__init__(md)
        self.registry = registry

    def run(self, lines):
        text = "\n".join(lines)

        def repl(match: re.Match) -> str:
            renderer = self.registry.get(match.group("name"))
            if renderer is None:
                return match.group(0)
            rendered = renderer(parse_attrs(match.group("attrs") or ""), match.group("body") or "")
            placeholder = self.md.htmlStash.store(rendered)
            return f"\n\n{placeholder}\n\n"

        return SHORTCODE_RE.sub(repl, text).split("\n")


class ShortcodeExtension(Extension):
    def __init__(self, registry: Optional[dict[str, ShortcodeRenderer]] = None, **kwargs):
        super().__init__(**kwargs)
        self.registry = SHORTCODES if registry is None else registry

    def extendMarkdown(self, md):
        # Below fenced_code (25) so shortcodes inside code fences stay literal.
        md.preprocessors.register(ShortcodePreprocessor(md, self.registry), "shortcodes", 24)


def make_markdown(
    toc_depth: str = "2-4", registry: Optional[dict[str, ShortcodeRenderer]] = None
) -> markdown.Markdown:
    return markdown.Markdown(
        extensions=["fenced_code", "tables", "toc", "codehilite", ShortcodeExtension(registry)],
        extension_configs={
            "toc": {"toc_depth": toc_depth},
            "codehilite": {"css_class": CODE_CSS_CLASS, "guess_lang": False},
        },
    )


def render_markdown(
    text: str, toc_depth: str = "2-4", registry: Optional[dict[str, ShortcodeRenderer]] = None
) -> tuple[str, str]:
    md = make_markdown(toc_depth, registry)
    html_content = md.convert(text)
    toc_html = md.toc
    md.reset()
    return html_content, toc_html


def highlight_css(style: str = "monokai") -> str:
    return HtmlFormatter(style=style).get_style_defs(f".{CODE_CSS_CLASS}")
