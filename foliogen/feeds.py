from __future__ import annotations

import datetime as dt
import html
import re
from dataclasses import dataclass
from typing import Optional, Sequence

from .dates import iso_date, rfc822_date
from .entities import Entity
from .utils import join_url

RSS_CONTENT_TYPE = "application/rss+xml"
ATOM_CONTENT_TYPE = "application/atom+xml"
GENERATOR = "foliogen"
INVALID_XML_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")


@dataclass(frozen=True)
class FeedAuthor:
    name: str
    email: str = ""
    link: str = ""


@dataclass(frozen=True)
class FeedChannel:
    id: str
    title: str
    description: str
    link: str
    image: str = ""
    copyright: str = ""
    author: Optional[FeedAuthor] = None
    category: str = ""
    feed_path: str = "api/rss"
    atom_path: str = "api/atom"


def xml_text(value: object) -> str:
    return html.escape(INVALID_XML_RE.sub("", str(value or "")), quote=True)


def _last_build(entities: Sequence[Entity], now: Optional[dt.datetime]) -> dt.datetime:
    if entities:
        return max(entity.published_at for entity in entities)
    return now or dt.datetime.now(dt.timezone.utc)


def build_feed(
    channel: FeedChannel,
    entities: Sequence[Entity],
    limit: int = 0,
    now: Optional[dt.datetime] = None,
) -> str:
    if limit > 0:
        entities = entities[:limit]
    items = []
    for entity in entities:
        link = xml_text(entity.link)
        items.append(
            "\n".join(
                [
                    "<item>",
                    f"<title>{xml_text(entity.title)}</title>",
                    f"<link>{link}</link>",
                    f'<guid isPermaLink="true">{link}</guid>',
                    f"<pubDate>{rfc822_date(entity.published_at)}</pubDate>",
                    f"<description>{xml_text(entity.summary)}</description>",
                    "</item>",
                ]
            )
        )

    head = [
        f"<title>{xml_text(channel.title)}</title>",
        f"<link>{xml_text(channel.link)}</link>",
        f"<description>{xml_text(channel.description)}</description>",
        f"<lastBuildDate>{rfc822_date(_last_build(entities, now))}</lastBuildDate>",
        "<docs>https://validator.w3.org/feed/docs/rss2.html</docs>",
        f"<generator>{GENERATOR}</generator>",
    ]
    if channel.image:
        head.extend(
            [
                "<image>",
                f"<title>{xml_text(channel.title)}</title>",
                f"<url>{xml_text(channel.image)}</url>",
                f"<link>{xml_text(channel.link)}</link>",
                "</image>",
            ]
        )
    if channel.copyright:
        head.append(f"<copyright>{xml_text(channel.copyright)}</copyright>")
    if channel.author and channel.author.email:
        editor = f"{channel.author.email} ({channel.author.name})"
        head.append(f"<managingEditor>{xml_text(editor)}</managingEditor>")
    head.append(
        f'<atom:link href="{xml_text(join_url(channel.id, channel.feed_path))}" '
        'rel="self" type="application/rss+xml"/>'
    )
    if channel.category:
        head.append(f"<category>{xml_text(channel.category)}</category>")

    return "\n".join(
        [
            '<?xml version="1.0" encoding="UTF-8"?>',
            '<rss version="2.0" xmlns:atom="http://www.w3.org/2005/Atom">',
            "<channel>",
            "\n".join(head),
            "\n".join(items),
            "</channel>",
            "</rss>",
        ]
    )


def build_atom(
    channel: FeedChannel,
    entities: Sequence[Entity],
    limit: int = 0,
    now: Optional[dt.datetime] = None,
) -> str:
    if limit > 0:
        entities = entities[:limit]
    entries = []
    for entity in entities:
        link = xml_text(entity.link)
        entries.append(
            "\n".join(
                [
                    "<entry>",
                    f"<title>{xml_text(entity.title)}</title>",
                    f'<link href="{link}" />',
                    f"<id>{link}</id>",
                    f"<updated>{iso_date(entity.published_at)}</updated>",
                    f"<summary>{xml_text(entity.summary)}</summary>",
                    "</entry>",
                ]
            )
        )

    head = [
        f"<title>{xml_text(channel.title)}</title>",
        f"<subtitle>{xml_text(channel.description)}</subtitle>",
        f"<id>{xml_text(channel.id)}</id>",
        f"<updated>{iso_date(_last_build(entities, now))}</updated>",
        f'<link href="{xml_text(join_url(channel.id, channel.atom_path))}" rel="self" />',
        f'<link href="{xml_text(channel.link)}" />',
        f"<generator>{GENERATOR}</generator>",
    ]
    if channel.image:
        head.append(f"<logo>{xml_text(channel.image)}</logo>")
    if channel.copyright:
        head.append(f"<rights>{xml_text(channel.copyright)}</rights>")
    if channel.author:
        author = [f"<name>{xml_text(channel.author.name)}</name>"]
        if channel.author.email:
            author.append(f"<email>{xml_text(channel.author.email)}</email>")
        if channel.author.link:
            author.append(f"<uri>{xml_text(channel.author.link)}</uri>")
        head.append("<author>" + "".join(author) + "</author>")
    if channel.category:
        head.append(f'<category term="{xml_text(channel.category)}" />')

    return "\n".join(
        [
            '<?xml version="1.0" encoding="UTF-8"?>',
            '<feed xmlns="http://www.w3.org/2005/Atom">',
            "\n".join(head),
            "\n".join(entries),
            "</feed>",
        ]
    )
