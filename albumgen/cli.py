#!/usr/bin/env python3
"""Command-line interface for the album generator."""

import argparse
import asyncio
import sys

from .album import DEFAULT_FILENAME, DEFAULT_TITLE, MAX_IMAGES, export_album
from .layout import InvalidLayoutError
from .loader import DecodeError
from .manifest import (
    LAYOUT_RANDOM_SEED,
    generate_manifest,
    list_images,
    pick_random,
    read_manifest,
    selection_from_filenames,
)
from .previews import album_to_images
from .search_client import SEARCH_ENDPOINT, SearchServiceError, search_images, top_matches
from .styles import DEFAULT_PALETTE, palette_with_fonts
from .thumbnails import THUMBNAIL_WIDTH, generate_thumbnails


def manifest(args):
    """Write images.json for a folder."""
    generate_manifest(args.folder, args.output)


def thumbnails(args):
    """Generate gallery thumbnails."""
    _, failed = generate_thumbnails(args.src, args.dest, args.width)
    if failed:
        sys.exit(1)


def choose_filenames(args):
    """Album selection: search results, manifest, explicit files, or a random window."""
    if args.query:
        print(f"Searching: {args.query!r}")
        return top_matches(search_images(args.query, endpoint=args.endpoint))
    if args.manifest:
        return read_manifest(args.manifest)[:MAX_IMAGES]
    if args.files:
        return list(args.files)
    return pick_random(list_images(args.image_dir), count=MAX_IMAGES, seed=args.seed)


def build(args):
    """Build the album PDF."""
    filenames = choose_filenames(args)
    if not filenames:
        print("❌ Nothing to put in the album.")
        sys.exit(1)

    selection = selection_from_filenames(filenames, args.image_dir)
    palette = DEFAULT_PALETTE if args.builtin_fonts else palette_with_fonts()

    print(f"=== Building album from {min(len(selection), MAX_IMAGES)} photo(s) ===")
    asyncio.run(export_album(
        selection,
        args.output,
        palette=palette,
        title=args.title,
        subtitle=args.subtitle,
        date_text=args.date,
    ))


def previews(args):
    """Render album pages to images."""
    album_to_images(args.pdf, args.output, dpi=args.dpi, image_format=args.format)


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Album Generator - Turn selected photos into a decorated PDF album"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # Manifest command
    manifest_parser = subparsers.add_parser("manifest", help="Write images.json for a folder")
    manifest_parser.add_argument("folder", help="Folder of full-size images")
    manifest_parser.add_argument(
        "--output", "-o",
        default=None,
        help="Output JSON file (default: images.json next to the folder)"
    )
    manifest_parser.set_defaults(func=manifest)

    # Thumbnails command
    thumbs_parser = subparsers.add_parser("thumbnails", help="Generate gallery thumbnails")
    thumbs_parser.add_argument("src", help="Folder of full-size images")
    thumbs_parser.add_argument("dest", help="Folder to write thumbnails to")
    thumbs_parser.add_argument(
        "--width", "-w",
        type=int,
        default=THUMBNAIL_WIDTH,
        help=f"Thumbnail width in pixels (default: {THUMBNAIL_WIDTH})"
    )
    thumbs_parser.set_defaults(func=thumbnails)

    # Build command
    build_parser = subparsers.add_parser("build", help="Build an album PDF")
    build_parser.add_argument("image_dir", help="Folder the selected filenames live in")
    build_parser.add_argument("files", nargs="*", help="Explicit filenames, in album order")
    source = build_parser.add_mutually_exclusive_group()
    source.add_argument("--query", "-q", help="Text to send to the search service")
    source.add_argument("--manifest", "-m", help="Use the first entries of this images.json")
    build_parser.add_argument(
        "--endpoint",
        default=SEARCH_ENDPOINT,
        help=f"Search service URL (default: {SEARCH_ENDPOINT})"
    )
    build_parser.add_argument(
        "--output", "-o",
        default=DEFAULT_FILENAME,
        help=f"Output PDF path or directory (default: {DEFAULT_FILENAME})"
    )
    build_parser.add_argument("--title", default=DEFAULT_TITLE, help="Cover title")
    build_parser.add_argument("--subtitle", default=None, help="Cover subtitle")
    build_parser.add_argument("--date", default=None, help="Cover date line (default: this month)")
    build_parser.add_argument(
        "--seed",
        type=int,
        default=LAYOUT_RANDOM_SEED,
        help="Seed for the random selection when no other source is given"
    )
    build_parser.add_argument(
        "--builtin-fonts",
        action="store_true",
        help="Skip system font registration and use the built-in Times fonts"
    )
    build_parser.set_defaults(func=build)

    # Previews command
    previews_parser = subparsers.add_parser("previews", help="Render album pages to images")
    previews_parser.add_argument("pdf", help="Album PDF")
    previews_parser.add_argument("output", help="Folder for page images")
    previews_parser.add_argument("--dpi", type=int, default=150, help="Resolution (default: 150)")
    previews_parser.add_argument(
        "--format", "-f",
        choices=["JPEG", "PNG"],
        default="JPEG",
        help="Image format (default: JPEG)"
    )
    previews_parser.set_defaults(func=previews)

    args = parser.parse_args(argv)
    try:
        args.func(args)
    except (DecodeError, InvalidLayoutError, SearchServiceError, FileNotFoundError, ValueError) as e:
        print(f"❌ {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
