from __future__ import annotations

from typing import Iterable, Mapping, Optional
from urllib.parse import parse_qs, urlencode

from .manifest import Manifest


def toggle(state: Iterable[str], tag: str) -> frozenset[str]:
    return frozenset(state) ^ {tag}


def reduce_tags(state: Iterable[str], action: tuple[str, Optional[str]]) -> frozenset[str]:
    """Apply a ``(kind, tag)`` action to a tag selection and return the new one.

    ``("toggle", tag)`` flips one tag, ``("clear", None)`` resets to the
    empty selection, which means "show everything".
    """
    kind, tag = action
    if kind == "toggle":
        if tag is None:
            raise ValueError("toggle needs a tag")
        return toggle(state, tag)
    if kind == "clear":
        return frozenset()
    raise ValueError(f"Unknown tag action: {kind}")


def is_visible(tags: Iterable[str], selected: Iterable[str]) -> bool:
    selected = frozenset(selected)
    if not selected:
        return True
    return not selected.isdisjoint(tags)


def collect_tags(manifest: Manifest) -> list[str]:
    seen: dict[str, None] = {}
    for article in manifest.articles.values():
        for tag in article.tags:
            seen.setdefault(tag, None)
    return list(seen)


def tags_from_query(query: str | Mapping[str, list[str]]) -> frozenset[str]:
    if isinstance(query, str):
        query = parse_qs(query.lstrip("?"))
    return frozenset(value for value in query.get("tag", []) if value)


def tag_query(selected: Iterable[str]) -> str:
    tags = sorted(selected)
    if not tags:
        return ""
    return "?" + urlencode([("tag", tag) for tag in tags])
