from __future__ import annotations

import argparse
import html
import mimetypes
import sys
from dataclasses import dataclass
from http.server import BaseHTTPRequestHandler, HTTPServer
from urllib.parse import unquote, urlsplit

from .config import resolve_path
from .errors import FolioError, UnknownSlugError
from .feeds import ATOM_CONTENT_TYPE, RSS_CONTENT_TYPE
from .manifest import load_manifest
from .markup import highlight_css
from .pages import (
    render_404,
    render_article,
    render_article_index,
    render_atom,
    render_home,
    render_rss,
    render_sitemap,
    render_video_index,
)
from .render import read_template
from .tags import tags_from_query

HTML_TYPE = "text/html; charset=utf-8"
SUFFIXES = ("/index.html", ".html", ".xml")


@dataclass
class Response:
    status: int
    content_type: str
    body: bytes


def _text(status: int, content_type: str, text: str) -> Response:
    return Response(status, content_type, text.encode("utf-8"))


def normalize_path(raw_path: str) -> str:
    path = "/" + unquote(raw_path).strip("/")
    for suffix in SUFFIXES:
        if path.endswith(suffix):
            path = path[: -len(suffix)] or "/"
            break
    return "/" if path in {"/index", ""} else path


def _static_file(args: argparse.Namespace, raw_path: str) -> Response | None:
    static_dir = resolve_path(args, "static").resolve()
    candidate = (static_dir / unquote(raw_path).lstrip("/")).resolve()
    if not candidate.is_relative_to(static_dir) or not candidate.is_file():
        return None
    content_type = mimetypes.guess_type(candidate.name)[0] or "application/octet-stream"
    return Response(200, content_type, candidate.read_bytes())


def handle_request(args: argparse.Namespace, target: str) -> Response:
    """Render one GET request from a fresh manifest snapshot."""
    parts = urlsplit(target)
    if parts.path == "/css/highlight.css":
        return _text(200, "text/css; charset=utf-8", highlight_css())
    static = _static_file(args, parts.path)
    if static is not None:
        return static

    path = normalize_path(parts.path)
    base_template = read_template(resolve_path(args, "templates") / "base.html")
    try:
        manifest = load_manifest(resolve_path(args, "manifest"))
        if path == "/":
            return _text(200, HTML_TYPE, render_home(base_template, manifest, args))
        if path == "/articles":
            selected = tags_from_query(parts.query)
            return _text(200, HTML_TYPE, render_article_index(base_template, manifest, args, selected))
        if path.startswith("/articles/") and path.count("/") == 2:
            slug = path.rsplit("/", 1)[1]
            return _text(200, HTML_TYPE, render_article(base_template, manifest, slug, args))
        if path == "/videos":
            selected = tags_from_query(parts.query)
            return _text(200, HTML_TYPE, render_video_index(base_template, manifest, args, selected))
        if path == "/api/rss":
            return _text(200, RSS_CONTENT_TYPE, render_rss(manifest, args))
        if path == "/api/atom":
            return _text(200, ATOM_CONTENT_TYPE, render_atom(manifest, args))
        if path == "/sitemap":
            return _text(200, "application/xml", render_sitemap(manifest, args.site_url))
    except UnknownSlugError:
        pass
    except FolioError as exc:
        print(f"Error rendering {target}: {exc}", file=sys.stderr)
        return _text(500, HTML_TYPE, f"<h1>500</h1><p>{html.escape(str(exc))}</p>")
    return _text(404, HTML_TYPE, render_404(base_template, args, root=""))


class _ReusableHTTPServer(HTTPServer):
    allow_reuse_address = True


def make_handler(args: argparse.Namespace) -> type[BaseHTTPRequestHandler]:
    class _Handler(BaseHTTPRequestHandler):
        def do_GET(self):
            response = handle_request(args, self.path)
            self.send_response(response.status)
            self.send_header("Content-Type", response.content_type)
            self.send_header("Content-Length", str(len(response.body)))
            self.send_header("Cache-Control", "no-store")
            self.end_headers()
            self.wfile.write(response.body)

    return _Handler


def serve(args: argparse.Namespace) -> None:
    if not (args.site_url or "").strip():
        args.site_url = f"http://{args.host}:{args.port}"
    template_path = resolve_path(args, "templates") / "base.html"
    if not template_path.exists():
        print(f"Template not found: {template_path}", file=sys.stderr)
        sys.exit(1)
    server = _ReusableHTTPServer((args.host, args.port), make_handler(args))
    print(f"Serving on {args.site_url} (Ctrl+C to stop)")
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        print("Stopping server.")
    finally:
        server.server_close()
