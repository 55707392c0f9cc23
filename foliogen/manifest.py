from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

from .dates import parse_published
from .errors import MalformedDateError, ManifestError, UnknownSlugError


@dataclass(frozen=True)
class Article:
    slug: str
    title: str
    tldr: str
    published: str
    tags: tuple[str, ...] = ()
    hero_url: str = ""


@dataclass(frozen=True)
class Video:
    category: str
    title: str
    youtube_id: str
    published: str
    duration: str = ""
    description: str = ""

    @property
    def url(self) -> str:
        return f"https://www.youtube.com/watch?v={self.youtube_id}"

    @property
    def thumbnail_url(self) -> str:
        return f"https://img.youtube.com/vi/{self.youtube_id}/default.jpg"

    @property
    def hero_url(self) -> str:
        return f"https://i.ytimg.com/vi/{self.youtube_id}/hqdefault.jpg"


@dataclass
class Manifest:
    articles: dict[str, Article] = field(default_factory=dict)
    videos: dict[str, list[Video]] = field(default_factory=dict)

    def article(self, slug: str) -> Article:
        try:
            return self.articles[slug]
        except KeyError:
            raise UnknownSlugError(slug) from None


def _text(entry: dict, key: str, where: str, required: bool = True) -> str:
    value = entry.get(key)
    if value is None:
        if required:
            raise ManifestError(f"{where}: missing '{key}'")
        return ""
    return str(value)


def _checked_date(entry: dict, where: str) -> str:
    published = _text(entry, "published", where)
    try:
        parse_published(published)
    except MalformedDateError as exc:
        raise MalformedDateError(published, f"{exc.reason} (in {where})") from None
    return published


def parse_manifest(data: object) -> Manifest:
    if not isinstance(data, dict):
        raise ManifestError("Manifest must be a mapping")
    raw_articles = data.get("articles") or {}
    raw_videos = data.get("videos") or {}
    if not isinstance(raw_articles, dict):
        raise ManifestError("'articles' must map slugs to articles")
    if not isinstance(raw_videos, dict):
        raise ManifestError("'videos' must map categories to video lists")

    articles = {}
    for slug, entry in raw_articles.items():
        where = f"articles.{slug}"
        if not isinstance(entry, dict):
            raise ManifestError(f"{where}: expected a mapping")
        tags = entry.get("tags") or []
        if not isinstance(tags, list):
            raise ManifestError(f"{where}: 'tags' must be a list")
        articles[slug] = Article(
            slug=slug,
            title=_text(entry, "title", where),
            tldr=_text(entry, "tldr", where, required=False),
            published=_checked_date(entry, where),
            tags=tuple(str(tag) for tag in tags),
            hero_url=_text(entry, "heroUrl", where, required=False),
        )

    videos = {}
    for category, entries in raw_videos.items():
        if not isinstance(entries, list):
            raise ManifestError(f"videos.{category}: expected a list")
        items = []
        for index, entry in enumerate(entries):
            where = f"videos.{category}[{index}]"
            if not isinstance(entry, dict):
                raise ManifestError(f"{where}: expected a mapping")
            items.append(
                Video(
                    category=category,
                    title=_text(entry, "title", where),
                    youtube_id=_text(entry, "youtubeId", where),
                    published=_checked_date(entry, where),
                    duration=_text(entry, "duration", where, required=False),
                    description=_text(entry, "description", where, required=False),
                )
            )
        videos[category] = items
    return Manifest(articles=articles, videos=videos)


def load_manifest(path: Path) -> Manifest:
    if not path.exists():
        raise ManifestError(f"Manifest not found: {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ManifestError(f"Invalid JSON in manifest {path}: {exc}") from exc
    return parse_manifest(data)


def load_article_body(articles_dir: Path, slug: str) -> str:
    path = articles_dir / f"{slug}.md"
    if not path.exists():
        raise ManifestError(f"Markdown not found for article '{slug}': {path}")
    return path.read_text(encoding="utf-8").lstrip("\ufeff")
