import argparse
import json
from pathlib import Path

import pytest

from foliogen.config import DEFAULTS
from foliogen.manifest import parse_manifest

BASE_TEMPLATE = (
    "<html><head><title>{{title}}</title>{{extra_head}}</head>"
    "<body><nav>{{nav}}</nav><main>{{content}}</main><footer>{{author}} {{year}}</footer></body></html>"
)

MANIFEST = {
    "articles": {
        "a": {
            "title": "Foo",
            "tldr": "bar",
            "published": "05.03.2020",
            "tags": ["python", "web"],
            "heroUrl": "https://example.com/a.png",
        },
        "b": {
            "title": "Second & <last>",
            "tldr": "",
            "published": "17.08.2019",
            "tags": ["rust"],
            "heroUrl": "https://example.com/b.png",
        },
    },
    "videos": {
        "news": [{"youtubeId": "x", "published": "01.01.2021", "title": "Vid", "duration": "1:00"}],
        "presentations": [
            {
                "youtubeId": "y",
                "published": "10.10.2019",
                "title": "Talk",
                "duration": "30:00",
                "description": "A conference talk",
            }
        ],
    },
}


@pytest.fixture
def manifest_data() -> dict:
    return json.loads(json.dumps(MANIFEST))


@pytest.fixture
def manifest(manifest_data):
    return parse_manifest(manifest_data)


@pytest.fixture
def site_dir(tmp_path: Path, manifest_data: dict) -> Path:
    (tmp_path / "publisher.json").write_text(json.dumps(manifest_data), encoding="utf-8")
    articles = tmp_path / "articles"
    articles.mkdir()
    (articles / "a.md").write_text("# Heading\n\nSome *text*.\n\n<Notice>Be **careful**</Notice>\n", encoding="utf-8")
    (articles / "b.md").write_text("Plain body with ![img](pics/b.png)\n", encoding="utf-8")
    templates = tmp_path / "templates"
    templates.mkdir()
    (templates / "base.html").write_text(BASE_TEMPLATE, encoding="utf-8")
    static = tmp_path / "static" / "js"
    static.mkdir(parents=True)
    (static / "tag-filter.js").write_text("// filter\n", encoding="utf-8")
    return tmp_path


@pytest.fixture
def make_args(site_dir: Path):
    def factory(**overrides) -> argparse.Namespace:
        values = dict(DEFAULTS)
        values.update(
            config=str(site_dir / "site.toml"),
            site_name="Test Site",
            site_description="Notes & videos",
            site_url="https://example.com",
            author_name="Jane Doe",
            author_email="jane@example.com",
            feed_category="development",
        )
        values.update(overrides)
        return argparse.Namespace(**values)

    return factory


@pytest.fixture
def base_template() -> str:
    return BASE_TEMPLATE
