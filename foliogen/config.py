from __future__ import annotations

import json
from pathlib import Path

from .errors import ConfigError
from .feeds import FeedAuthor, FeedChannel

try:
    import tomllib as toml
except ImportError:
    try:
        import tomli as toml
    except ImportError:  # pragma: no cover - optional dependency
        toml = None

try:
    import yaml
except ImportError:  # pragma: no cover - optional dependency
    yaml = None

DEFAULTS = {
    "manifest": "publisher.json",
    "articles": "articles",
    "static": "static",
    "templates": "templates",
    "output": "dist",
    "site_name": "My Portfolio",
    "site_description": "Articles and videos.",
    "site_url": "",
    "author_name": "",
    "author_email": "",
    "author_link": "",
    "feed_image": "",
    "copyright": "",
    "feed_category": "",
    "feed_limit": 0,
    "toc_depth": "2-4",
    "clean": True,
    "enable_atom": True,
    "enable_sitemap": True,
    "enable_404": True,
    "write_nojekyll": True,
    "host": "127.0.0.1",
    "port": 8000,
}


def _parse(path: Path, text: str) -> object:
    suffix = path.suffix.lower()
    if suffix == ".toml":
        if toml is None:
            raise ConfigError("TOML config requires tomllib (Python 3.11+) or tomli.")
        try:
            return toml.loads(text)
        except toml.TOMLDecodeError as exc:
            raise ConfigError(f"Invalid TOML in config file {path}: {exc}") from exc
    if suffix in {".yml", ".yaml"}:
        if yaml is None:
            raise ConfigError("YAML config requires PyYAML.")
        try:
            return yaml.safe_load(text) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in config file {path}: {exc}") from exc
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in config file {path}: {exc}") from exc


def load_config(path: Path) -> dict:
    if not path.exists():
        return {}
    data = _parse(path, path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ConfigError(f"Config must be a mapping: {path}")
    unknown = sorted(set(data) - set(DEFAULTS))
    if unknown:
        raise ConfigError(f"Unknown config keys in {path}: {', '.join(unknown)}")
    return data


def resolve_path(args: object, key: str) -> Path:
    """Resolve a path option relative to the config file's directory."""
    path = Path(getattr(args, key))
    if path.is_absolute():
        return path
    config_path = Path(getattr(args, "config", "site.toml")).resolve()
    return config_path.parent / path


def feed_channel(args: object, **paths: str) -> FeedChannel:
    site_url = (getattr(args, "site_url", "") or "").strip().rstrip("/")
    author = None
    author_name = (getattr(args, "author_name", "") or "").strip()
    if author_name:
        author = FeedAuthor(
            name=author_name,
            email=(getattr(args, "author_email", "") or "").strip(),
            link=(getattr(args, "author_link", "") or "").strip() or site_url,
        )
    return FeedChannel(
        id=site_url,
        title=args.site_name,
        description=args.site_description,
        link=site_url,
        image=(getattr(args, "feed_image", "") or "").strip(),
        copyright=(getattr(args, "copyright", "") or "").strip(),
        author=author,
        category=(getattr(args, "feed_category", "") or "").strip(),
        **paths,
    )
