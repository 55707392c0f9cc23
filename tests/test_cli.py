import xml.etree.ElementTree as ET

import pytest

from foliogen.cli import main


def _write_config(site_dir, extra: str = "") -> str:
    config = site_dir / "site.toml"
    config.write_text(
        'site_name = "Test Site"\n'
        'site_url = "https://example.com"\n'
        'author_name = "Jane Doe"\n'
        'author_email = "jane@example.com"\n'
        'feed_category = "development"\n' + extra,
        encoding="utf-8",
    )
    return str(config)


def test_build_writes_site(site_dir, capsys):
    main(["build", "--config", _write_config(site_dir)])
    out = site_dir / "dist"
    for name in [
        "index.html",
        "articles/index.html",
        "articles/a.html",
        "articles/b.html",
        "videos/index.html",
        "api/rss.xml",
        "api/atom.xml",
        "sitemap.xml",
        "404.html",
        "css/highlight.css",
        "js/tag-filter.js",
        ".nojekyll",
    ]:
        assert (out / name).exists(), name
    rss = ET.fromstring((out / "api" / "rss.xml").read_text(encoding="utf-8"))
    assert rss.find("channel/category").text == "development"
    assert "Build completed" in capsys.readouterr().out


def test_cli_flags_override_config(site_dir):
    main(["--config", _write_config(site_dir), "--no-enable-atom", "--output", "public", "--feed-limit", "1"])
    out = site_dir / "public"
    assert not (out / "api" / "atom.xml").exists()
    rss = ET.fromstring((out / "api" / "rss.xml").read_text(encoding="utf-8"))
    assert len(rss.findall("channel/item")) == 1


def test_build_without_site_url_skips_feeds(site_dir, capsys):
    config = site_dir / "site.json"
    config.write_text('{"site_name": "Test Site"}', encoding="utf-8")
    main(["build", "--config", str(config)])
    assert (site_dir / "dist" / "index.html").exists()
    assert not (site_dir / "dist" / "api" / "rss.xml").exists()
    assert "skipping feeds" in capsys.readouterr().err


def test_build_fails_on_malformed_date(site_dir, capsys):
    manifest = site_dir / "publisher.json"
    manifest.write_text(
        '{"articles": {"a": {"title": "Foo", "published": "2020-03-05"}}}',
        encoding="utf-8",
    )
    with pytest.raises(SystemExit) as excinfo:
        main(["build", "--config", _write_config(site_dir)])
    assert excinfo.value.code == 1
    assert "Malformed date" in capsys.readouterr().err


def test_unknown_config_key_is_rejected(site_dir, capsys):
    with pytest.raises(SystemExit):
        main(["--config", _write_config(site_dir, 'colour = "red"\n')])
    assert "Unknown config keys" in capsys.readouterr().err


def test_feed_self_links_point_at_written_files(site_dir):
    main(["build", "--config", _write_config(site_dir)])
    out = site_dir / "dist"
    rss = ET.fromstring((out / "api" / "rss.xml").read_text(encoding="utf-8"))
    href = rss.find("channel/{http://www.w3.org/2005/Atom}link").get("href")
    assert href.startswith("https://example.com/")
    assert (out / href[len("https://example.com/"):]).is_file()
    atom = ET.fromstring((out / "api" / "atom.xml").read_text(encoding="utf-8"))
    self_href = [
        link.get("href")
        for link in atom.findall("{http://www.w3.org/2005/Atom}link")
        if link.get("rel") == "self"
    ][0]
    assert (out / self_href[len("https://example.com/"):]).is_file()
