from __future__ import annotations

import datetime as dt
import html
from typing import Iterable
from urllib.parse import quote

from .config import feed_channel, resolve_path
from .dates import parse_published, readable_date
from .entities import collect_entities, latest_article, latest_video, sort_descending, sorted_articles, sorted_videos
from .feeds import build_atom, build_feed
from .manifest import Manifest, load_article_body
from .markup import render_markdown
from .render import fix_relative_img_src, render_template
from .tags import collect_tags, is_visible, tag_query, toggle
from .utils import join_url, truncate

NAV_ITEMS = [
    ("home", "Home", "index.html"),
    ("articles", "Articles", "articles/index.html"),
    ("videos", "Videos", "videos/index.html"),
]
VIDEO_TITLE_LIMIT = 60
PRESENTATIONS = "presentations"


def build_nav(root: str, active: str) -> str:
    links = []
    for key, label, path in NAV_ITEMS:
        active_class = ' class="active"' if key == active else ""
        links.append(f'<a href="{root}/{path}"{active_class}>{label}</a>')
    links.append(f'<a class="nav-rss" href="{root}/api/rss.xml">RSS</a>')
    return "".join(links)


def build_meta(title: str, description: str, url: str = "", image: str = "") -> str:
    tags = [
        f'<meta name="description" content="{html.escape(description)}">',
        '<meta name="twitter:card" content="summary">',
        f'<meta property="og:title" content="{html.escape(title)}">',
        '<meta property="og:type" content="website">',
        f'<meta property="og:description" content="{html.escape(description)}">',
    ]
    if url:
        tags.append(f'<meta property="og:url" content="{html.escape(url)}">')
    if image:
        tags.append(f'<meta property="og:image" content="{html.escape(image)}">')
    return "\n".join(tags)


def render_layout(
    base_template: str,
    args: object,
    *,
    title: str,
    root: str,
    content: str,
    active: str = "",
    extra_head: str = "",
) -> str:
    return render_template(
        base_template,
        title=html.escape(title),
        root=root,
        nav=build_nav(root, active),
        site_name=html.escape(args.site_name),
        site_description=html.escape(args.site_description),
        author=html.escape(getattr(args, "author_name", "") or args.site_name),
        year=str(dt.datetime.now().year),
        extra_head=extra_head,
        content=content,
    )


def build_card(url: str, title: str, hero_url: str, description: str) -> str:
    target = ' target="_blank" rel="noopener"' if url.startswith("http") else ""
    return (
        f'<a class="card" href="{html.escape(url)}"{target}>'
        f'<div class="hero" style="background-image: url(&quot;{html.escape(hero_url)}&quot;)"></div>'
        f"<h2>{html.escape(title)}</h2>"
        f'<div class="description">{html.escape(description)}</div>'
        "</a>"
    )


def build_tag_bar(tags: Iterable[str], selected: frozenset[str]) -> str:
    chips = []
    for tag in tags:
        selected_class = " selected" if tag in selected else ""
        href = tag_query(toggle(selected, tag)) or "?"
        chips.append(
            f'<a class="tag{selected_class}" data-tag="{html.escape(tag)}" href="{html.escape(href)}">'
            f"{html.escape(tag)}</a>"
        )
    return f'<div class="tags" data-tag-filter>{"".join(chips)}</div>'


def render_home(base_template: str, manifest: Manifest, args: object) -> str:
    root = "."
    cards = []
    article = latest_article(manifest)
    if article:
        url = f"{root}/articles/{quote(article.slug)}.html"
        cards.append(build_card(url, article.title, article.hero_url, article.tldr))
    video = latest_video(manifest)
    if video:
        cards.append(
            build_card(video.url, truncate(video.title, VIDEO_TITLE_LIMIT), video.hero_url, video.description)
        )
    content = f'<div class="cards"><div class="cards-row">{"".join(cards)}</div></div>'

    presentations = sorted_videos(manifest, [PRESENTATIONS])
    if presentations:
        rows = "".join(
            f'<li><a href="{html.escape(item.url)}" target="_blank" rel="noopener">{html.escape(item.title)}'
            f"<br><small>{readable_date(item.published)}</small></a></li>"
            for item in presentations
        )
        content += f'<div class="other-row"><div class="other-column"><h4>Presentations</h4><ul>{rows}</ul></div></div>'
    content += f'<div class="other-row"><a class="rss" href="{root}/api/rss.xml">Subscribe to updates</a></div>'

    site_url = (getattr(args, "site_url", "") or "").rstrip("/")
    return render_layout(
        base_template,
        args,
        title=f"{args.site_name} | Home",
        root=root,
        content=content,
        active="home",
        extra_head=build_meta(args.site_name, args.site_description, site_url),
    )


def render_article_index(
    base_template: str, manifest: Manifest, args: object, selected: frozenset[str] = frozenset()
) -> str:
    root = ".."
    rows = []
    for article in sorted_articles(manifest):
        if not is_visible(article.tags, selected):
            continue
        url = f"{root}/articles/{quote(article.slug)}.html"
        rows.append(
            f'<li class="item" data-tags="{html.escape("|".join(article.tags))}">'
            f'<a href="{url}">'
            f'<div><img src="{html.escape(article.hero_url)}" alt=""></div>'
            '<div class="item-details">'
            f"<h3>{html.escape(article.title)}</h3>"
            f"<div>{html.escape(article.tldr)}</div>"
            f'<div class="item-meta"><div><strong>published:</strong> {readable_date(article.published)}</div></div>'
            "</div></a></li>"
        )
    if not rows:
        rows.append('<li class="empty">No articles match the selected tags.</li>')
    content = f'{build_tag_bar(collect_tags(manifest), selected)}<ul class="list">{"".join(rows)}</ul>'
    return render_layout(
        base_template,
        args,
        title=f"Articles | {args.site_name}",
        root=root,
        content=content,
        active="articles",
        extra_head=f'<script src="{root}/js/tag-filter.js" defer></script>',
    )


def render_article(base_template: str, manifest: Manifest, slug: str, args: object) -> str:
    article = manifest.article(slug)
    root = ".."
    body = load_article_body(resolve_path(args, "articles"), slug)
    html_content, _ = render_markdown(body, getattr(args, "toc_depth", "2-4"))
    html_content = fix_relative_img_src(html_content, root)
    tags_html = "".join(f"<div>{html.escape(tag)}</div>" for tag in article.tags)
    author = getattr(args, "author_name", "") or args.site_name
    content = (
        '<article class="article">'
        '<div class="hero">'
        f'<div class="hero-background" style="background-image: url(&quot;{html.escape(article.hero_url)}&quot;)"></div>'
        '<div class="hero-content">'
        f"<h1>{html.escape(article.title)}</h1>"
        f'<div class="tags">{tags_html}</div>'
        f'<div class="hero-date">{readable_date(article.published)}</div>'
        f'<div class="hero-publisher"><span>by {html.escape(author)}</span></div>'
        "</div></div>"
        f'<div class="tldr">{html.escape(article.tldr)}</div>'
        f'<div class="content">{html_content}</div>'
        "</article>"
    )
    site_url = (getattr(args, "site_url", "") or "").rstrip("/")
    url = join_url(site_url, f"articles/{quote(slug)}") if site_url else ""
    return render_layout(
        base_template,
        args,
        title=f"{article.title} | {args.site_name}",
        root=root,
        content=content,
        active="articles",
        extra_head=(
            build_meta(article.title, article.tldr, url, article.hero_url)
            + f'\n<link rel="stylesheet" href="{root}/css/highlight.css">'
        ),
    )


def render_video_index(
    base_template: str, manifest: Manifest, args: object, selected: frozenset[str] = frozenset()
) -> str:
    root = ".."
    categories = [category for category in manifest.videos if is_visible([category], selected)]
    rows = []
    for video in sorted_videos(manifest, categories):
        rows.append(
            f'<li class="item" data-tags="{html.escape(video.category)}">'
            f'<a href="{html.escape(video.url)}" target="_blank" rel="noopener">'
            f'<div><img src="{html.escape(video.thumbnail_url)}" alt=""></div>'
            '<div class="item-details">'
            f"<h3>{html.escape(video.title)}</h3>"
            f"<div>{html.escape(video.description)}</div>"
            '<div class="item-meta">'
            f"<div><strong>duration:</strong> {html.escape(video.duration)}</div>"
            f"<div><strong>published:</strong> {readable_date(video.published)}</div>"
            "</div></div></a></li>"
        )
    if not rows:
        rows.append('<li class="empty">No videos match the selected tags.</li>')
    content = (
        '<div class="content">'
        f'{build_tag_bar(manifest.videos.keys(), selected)}<ul class="list">{"".join(rows)}</ul>'
        "</div>"
    )
    return render_layout(
        base_template,
        args,
        title=f"Videos | {args.site_name}",
        root=root,
        content=content,
        active="videos",
        extra_head=f'<script src="{root}/js/tag-filter.js" defer></script>',
    )


def render_404(base_template: str, args: object, root: str = ".") -> str:
    content = (
        '<div class="section-head">'
        "<h2>404</h2>"
        "<p>The page you requested does not exist.</p>"
        f'<a href="{root}/index.html">Back to home</a>'
        "</div>"
    )
    return render_layout(base_template, args, title=f"404 | {args.site_name}", root=root, content=content)


def render_rss(manifest: Manifest, args: object, feed_path: str = "api/rss") -> str:
    channel = feed_channel(args, feed_path=feed_path)
    entities = sort_descending(collect_entities(manifest, channel.link))
    return build_feed(channel, entities, limit=getattr(args, "feed_limit", 0) or 0)


def render_atom(manifest: Manifest, args: object, atom_path: str = "api/atom") -> str:
    channel = feed_channel(args, atom_path=atom_path)
    entities = sort_descending(collect_entities(manifest, channel.link))
    return build_atom(channel, entities, limit=getattr(args, "feed_limit", 0) or 0)


def render_sitemap(manifest: Manifest, site_url: str) -> str:
    site_url = site_url.rstrip("/")
    urls = [
        (site_url + "/", None),
        (join_url(site_url, "articles/"), None),
        (join_url(site_url, "videos/"), None),
    ]
    for article in sorted_articles(manifest):
        urls.append((join_url(site_url, f"articles/{quote(article.slug)}"), article.published))
    items = []
    for url, published in urls:
        lines = ["<url>", f"<loc>{html.escape(url)}</loc>"]
        if published:
            lines.append(f"<lastmod>{parse_published(published).date().isoformat()}</lastmod>")
        lines.append("</url>")
        items.append("\n".join(lines))
    return "\n".join(
        [
            '<?xml version="1.0" encoding="UTF-8"?>',
            '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">',
            "\n".join(items),
            "</urlset>",
        ]
    )
