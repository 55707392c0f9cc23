import json
import xml.etree.ElementTree as ET

import pytest

from foliogen.server import handle_request, normalize_path


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("/", "/"),
        ("/index.html", "/"),
        ("/articles", "/articles"),
        ("/articles/", "/articles"),
        ("/articles/index.html", "/articles"),
        ("/articles/a.html", "/articles/a"),
        ("/api/rss.xml", "/api/rss"),
        ("/videos/", "/videos"),
    ],
)
def test_normalize_path(raw, expected):
    assert normalize_path(raw) == expected


def test_home_and_listing_routes(make_args):
    args = make_args()
    home = handle_request(args, "/")
    assert home.status == 200
    assert home.content_type.startswith("text/html")
    assert b"Test Site | Home" in home.body

    filtered = handle_request(args, "/articles?tag=rust")
    assert filtered.status == 200
    assert b"<h3>Foo</h3>" not in filtered.body
    assert b"Second &amp; &lt;last&gt;" in filtered.body

    videos = handle_request(args, "/videos/?tag=news")
    assert b"<h3>Vid</h3>" in videos.body
    assert b"<h3>Talk</h3>" not in videos.body


@pytest.mark.parametrize("target", ["/articles/a", "/articles/a.html"])
def test_article_route(make_args, target):
    response = handle_request(make_args(), target)
    assert response.status == 200
    assert b"<h1>Foo</h1>" in response.body


@pytest.mark.parametrize("target", ["/articles/missing", "/nowhere", "/articles/a/extra", "/../publisher.json"])
def test_not_found(make_args, target):
    response = handle_request(make_args(), target)
    assert response.status == 404
    assert b"404" in response.body


@pytest.mark.parametrize("target", ["/api/rss", "/api/rss.xml"])
def test_rss_route(make_args, target):
    response = handle_request(make_args(), target)
    assert response.status == 200
    assert response.content_type == "application/rss+xml"
    titles = [item.findtext("title") for item in ET.fromstring(response.body).findall("channel/item")]
    assert titles[:2] == ["Vid", "Foo"]


def test_atom_route(make_args):
    response = handle_request(make_args(), "/api/atom")
    assert response.content_type == "application/atom+xml"
    assert ET.fromstring(response.body).tag == "{http://www.w3.org/2005/Atom}feed"


def test_feed_reflects_manifest_changes_without_restart(make_args, site_dir, manifest_data):
    args = make_args()
    assert b"Brand new" not in handle_request(args, "/api/rss").body
    manifest_data["articles"]["c"] = {"title": "Brand new", "published": "01.06.2023", "tags": []}
    (site_dir / "publisher.json").write_text(json.dumps(manifest_data), encoding="utf-8")
    assert b"Brand new" in handle_request(args, "/api/rss").body


def test_broken_manifest_is_a_500(make_args, site_dir, manifest_data):
    manifest_data["articles"]["a"]["published"] = "March 5th"
    (site_dir / "publisher.json").write_text(json.dumps(manifest_data), encoding="utf-8")
    response = handle_request(make_args(), "/api/rss")
    assert response.status == 500
    assert b"March 5th" in response.body


def test_static_files_and_highlight_css(make_args):
    args = make_args()
    script = handle_request(args, "/js/tag-filter.js")
    assert script.status == 200
    assert script.body == b"// filter\n"
    css = handle_request(args, "/css/highlight.css")
    assert css.status == 200
    assert b".codehilite" in css.body


def test_surrogate_in_manifest_still_serves_feed(make_args, site_dir, manifest_data):
    manifest_data["articles"]["a"]["title"] = "Foo \ud800"
    (site_dir / "publisher.json").write_text(json.dumps(manifest_data), encoding="utf-8")
    response = handle_request(make_args(), "/api/rss")
    assert response.status == 200
    titles = [item.findtext("title") for item in ET.fromstring(response.body).findall("channel/item")]
    assert "Foo " in titles
