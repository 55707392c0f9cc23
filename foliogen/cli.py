from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

from .config import DEFAULTS, load_config, resolve_path
from .errors import FolioError
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
from .render import copy_static, read_template, write_text
from .server import serve
from .utils import clean_output_dir, parse_bool, parse_int, write_nojekyll


def build_site(args: argparse.Namespace) -> None:
    manifest_path = resolve_path(args, "manifest")
    templates_dir = resolve_path(args, "templates")
    static_dir = resolve_path(args, "static")
    output_dir = resolve_path(args, "output")
    project_root = Path(args.config).resolve().parent

    template_path = templates_dir / "base.html"
    if not template_path.exists():
        raise FolioError(f"Template not found: {template_path}")
    base_template = read_template(template_path)
    manifest = load_manifest(manifest_path)

    if args.clean:
        clean_output_dir(output_dir, project_root)
    output_dir.mkdir(parents=True, exist_ok=True)
    if static_dir.exists():
        copy_static(static_dir, output_dir)
    if args.write_nojekyll:
        write_nojekyll(output_dir)

    write_text(output_dir / "index.html", render_home(base_template, manifest, args))
    write_text(output_dir / "articles" / "index.html", render_article_index(base_template, manifest, args))
    for slug in manifest.articles:
        write_text(output_dir / "articles" / f"{slug}.html", render_article(base_template, manifest, slug, args))
    write_text(output_dir / "videos" / "index.html", render_video_index(base_template, manifest, args))
    write_text(output_dir / "css" / "highlight.css", highlight_css())

    site_url = (args.site_url or "").strip()
    if site_url:
        write_text(output_dir / "api" / "rss.xml", render_rss(manifest, args, "api/rss.xml"))
        if args.enable_atom:
            write_text(output_dir / "api" / "atom.xml", render_atom(manifest, args, "api/atom.xml"))
        if args.enable_sitemap:
            write_text(output_dir / "sitemap.xml", render_sitemap(manifest, site_url))
    else:
        print("site_url is not set; skipping feeds and sitemap.", file=sys.stderr)
    if args.enable_404:
        write_text(output_dir / "404.html", render_404(base_template, args))
    print(f"Rendered {len(manifest.articles)} articles and {sum(len(v) for v in manifest.videos.values())} videos.")


def build_parser(config: dict, config_path: str) -> argparse.ArgumentParser:
    def cfg_str(key: str) -> str:
        value = config.get(key, DEFAULTS[key])
        return DEFAULTS[key] if value is None else str(value)

    def cfg_bool(key: str) -> bool:
        value = config.get(key)
        return DEFAULTS[key] if value is None else parse_bool(value)

    def cfg_int(key: str) -> int:
        return parse_int(config.get(key), DEFAULTS[key])

    parser = argparse.ArgumentParser(description="Blog and video portfolio generator.")
    parser.add_argument(
        "command",
        nargs="?",
        choices=["build", "serve"],
        default="build",
        help="Write the static site, or serve it with per-request rendering.",
    )
    parser.add_argument("--config", default=config_path, help="Path to site config file (TOML/YAML/JSON).")
    parser.add_argument("--manifest", default=cfg_str("manifest"), help="Publisher manifest (JSON).")
    parser.add_argument("--articles", default=cfg_str("articles"), help="Directory with <slug>.md article bodies.")
    parser.add_argument("--static", default=cfg_str("static"), help="Directory containing static assets.")
    parser.add_argument("--templates", default=cfg_str("templates"), help="Directory containing base.html.")
    parser.add_argument("--output", default=cfg_str("output"), help="Output directory for the site.")
    parser.add_argument("--site-name", default=cfg_str("site_name"), help="Site title.")
    parser.add_argument("--site-description", default=cfg_str("site_description"), help="Site description.")
    parser.add_argument("--site-url", default=cfg_str("site_url"), help="Public site URL used for links and feeds.")
    parser.add_argument("--author-name", default=cfg_str("author_name"), help="Author shown on articles and feeds.")
    parser.add_argument("--author-email", default=cfg_str("author_email"), help="Author email for feeds.")
    parser.add_argument("--author-link", default=cfg_str("author_link"), help="Author homepage for feeds.")
    parser.add_argument("--feed-image", default=cfg_str("feed_image"), help="Channel image URL.")
    parser.add_argument("--copyright", default=cfg_str("copyright"), help="Channel copyright notice.")
    parser.add_argument("--feed-category", default=cfg_str("feed_category"), help="Channel category.")
    parser.add_argument(
        "--feed-limit",
        default=cfg_int("feed_limit"),
        type=int,
        help="Maximum number of feed items (0 = all).",
    )
    parser.add_argument("--toc-depth", default=cfg_str("toc_depth"), help="Heading depth range for TOC (e.g. 2-4).")
    parser.add_argument(
        "--clean",
        action=argparse.BooleanOptionalAction,
        default=cfg_bool("clean"),
        help="Clean output directory before build.",
    )
    parser.add_argument(
        "--enable-atom",
        action=argparse.BooleanOptionalAction,
        default=cfg_bool("enable_atom"),
        help="Generate api/atom.xml.",
    )
    parser.add_argument(
        "--enable-sitemap",
        action=argparse.BooleanOptionalAction,
        default=cfg_bool("enable_sitemap"),
        help="Generate sitemap.xml.",
    )
    parser.add_argument(
        "--enable-404",
        action=argparse.BooleanOptionalAction,
        default=cfg_bool("enable_404"),
        help="Generate 404.html.",
    )
    parser.add_argument(
        "--write-nojekyll",
        action=argparse.BooleanOptionalAction,
        default=cfg_bool("write_nojekyll"),
        help="Write .nojekyll in the output directory.",
    )
    parser.add_argument("--host", default=cfg_str("host"), help="Address for the preview server.")
    parser.add_argument("--port", default=cfg_int("port"), type=int, help="Port for the preview server.")
    return parser


def main(argv: list[str] | None = None) -> None:
    pre_parser = argparse.ArgumentParser(add_help=False)
    pre_parser.add_argument(
        "--config",
        default="site.toml",
        help="Path to site config file (TOML/YAML/JSON).",
    )
    pre_args, _ = pre_parser.parse_known_args(argv)
    try:
        config = load_config(Path(pre_args.config))
    except FolioError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    args = build_parser(config, pre_args.config).parse_args(argv)
    if args.command == "serve":
        serve(args)
        return

    start = time.perf_counter()
    try:
        build_site(args)
    except FolioError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)
    elapsed = time.perf_counter() - start
    print(f"Build completed in {elapsed:.2f}s.")
    print(f"Site generated in: {resolve_path(args, 'output')}")
