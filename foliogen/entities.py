from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Iterable, Optional
from urllib.parse import quote

from .dates import parse_published
from .manifest import Article, Manifest, Video
from .utils import join_url


@dataclass(frozen=True)
class Entity:
    """Uniform view of an article or a video, used for ordering and feeds."""

    title: str
    link: str
    summary: str
    published_raw: str
    kind: str = "article"
    tags: tuple[str, ...] = ()

    @property
    def published_at(self) -> dt.datetime:
        return parse_published(self.published_raw)


def normalize_articles(articles: dict[str, Article], base_url: str) -> list[Entity]:
    return [
        Entity(
            title=article.title,
            link=join_url(base_url, f"articles/{quote(slug)}"),
            summary=article.tldr or "",
            published_raw=article.published,
            kind="article",
            tags=article.tags,
        )
        for slug, article in articles.items()
    ]


def normalize_videos(videos: dict[str, list[Video]]) -> list[Entity]:
    return [
        Entity(
            title=video.title,
            link=video.url,
            summary=video.description or "",
            published_raw=video.published,
            kind="video",
            tags=(category,),
        )
        for category, items in videos.items()
        for video in items
    ]


def collect_entities(manifest: Manifest, base_url: str) -> list[Entity]:
    return normalize_articles(manifest.articles, base_url) + normalize_videos(manifest.videos)


def sort_descending(entities: Iterable[Entity]) -> list[Entity]:
    # sorted() is stable; reverse=True keeps equal keys in input order.
    return sorted(entities, key=lambda entity: entity.published_at, reverse=True)


def sorted_articles(manifest: Manifest) -> list[Article]:
    return sorted(
        manifest.articles.values(), key=lambda article: parse_published(article.published), reverse=True
    )


def sorted_videos(manifest: Manifest, categories: Optional[Iterable[str]] = None) -> list[Video]:
    wanted = None if categories is None else set(categories)
    items = [
        video
        for category, videos in manifest.videos.items()
        if wanted is None or category in wanted
        for video in videos
    ]
    return sorted(items, key=lambda video: parse_published(video.published), reverse=True)


def latest_article(manifest: Manifest) -> Optional[Article]:
    articles = sorted_articles(manifest)
    return articles[0] if articles else None


def latest_video(manifest: Manifest) -> Optional[Video]:
    videos = sorted_videos(manifest)
    return videos[0] if videos else None
