from __future__ import annotations


class FolioError(Exception):
    pass


class ManifestError(FolioError):
    pass


class MalformedDateError(FolioError):
    def __init__(self, raw: str, reason: str) -> None:
        super().__init__(f"Malformed date {raw!r}: {reason}")
        self.raw = raw
        self.reason = reason


class UnknownSlugError(FolioError):
    def __init__(self, slug: str) -> None:
        super().__init__(f"Unknown article: {slug}")
        self.slug = slug


class ConfigError(FolioError):
    pass
