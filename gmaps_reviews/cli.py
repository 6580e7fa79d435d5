"""
Command Line Interface

Entry point for running the extractor from command line.

Usage:
    python -m gmaps_reviews reviews ChIJN1t_tDeuEmsRUsoyG83frY4 --limit 10
    python -m gmaps_reviews search "coffee" "Austin, TX"
    python -m gmaps_reviews parse saved_page.html --kind reviews
"""

import argparse
import json
import logging
import sys

from .config import (
    API_HOST,
    API_PORT,
    DEFAULT_REVIEWS_LIMIT,
    DEFAULT_SEARCH_LIMIT,
    LOG_FORMAT,
    LOG_LEVEL,
)
from .exceptions import GMapsReviewsError
from .extractor import PARSE_KINDS, GMapsReviews, parse_html
from .extraction.urls import SORT_PARAMS


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gmaps-reviews",
        description="Google Maps Reviews & Business Extractor",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m gmaps_reviews reviews ChIJN1t_tDeuEmsRUsoyG83frY4
  python -m gmaps_reviews reviews ChIJN1t_tDeuEmsRUsoyG83frY4 --sort highest --limit 50
  python -m gmaps_reviews business ChIJN1t_tDeuEmsRUsoyG83frY4 -o business.json
  python -m gmaps_reviews search "lawyers" "New York, USA" --limit 20
  python -m gmaps_reviews parse page.html --kind distribution
  python -m gmaps_reviews serve --port 8080
        """
    )
    parser.add_argument(
        "-o", "--output",
        help="Write JSON result to this file instead of stdout"
    )
    parser.add_argument(
        "--proxy",
        help="Proxy URL (default: GMAPS_PROXY_* env vars)"
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Debug logging (shows which extraction tier matched)"
    )
    verbosity.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Only log errors"
    )

    commands = parser.add_subparsers(dest="command", required=True)

    reviews = commands.add_parser("reviews", help="Fetch reviews for a place")
    reviews.add_argument("place_id", help="Google place ID (ChIJ...)")
    reviews.add_argument("--sort", choices=sorted(SORT_PARAMS), default="newest")
    reviews.add_argument(
        "--limit",
        type=int,
        default=DEFAULT_REVIEWS_LIMIT,
        help=f"Maximum reviews to return (default: {DEFAULT_REVIEWS_LIMIT})"
    )

    business = commands.add_parser("business", help="Fetch business details and review summary")
    business.add_argument("place_id", help="Google place ID (ChIJ...)")

    summary = commands.add_parser("summary", help="Fetch the review summary for a place")
    summary.add_argument("place_id", help="Google place ID (ChIJ...)")

    search = commands.add_parser("search", help="Search businesses")
    search.add_argument("query", help="What to search for (e.g., 'lawyers')")
    search.add_argument("location", help="Where to search (e.g., 'New York, USA')")
    search.add_argument(
        "--limit",
        type=int,
        default=DEFAULT_SEARCH_LIMIT,
        help=f"Maximum businesses to return (default: {DEFAULT_SEARCH_LIMIT})"
    )

    parse = commands.add_parser("parse", help="Parse a saved HTML document offline")
    parse.add_argument("file", help="Path to the saved HTML file")
    parse.add_argument("--kind", choices=PARSE_KINDS, required=True)
    parse.add_argument("--place-id", default="", help="Place ID to attach to business records")
    parse.add_argument("--limit", type=int, default=DEFAULT_REVIEWS_LIMIT)

    serve = commands.add_parser("serve", help="Run the HTTP API server")
    serve.add_argument("--host", default=API_HOST)
    serve.add_argument("--port", type=int, default=API_PORT)

    return parser


def configure_logging(verbose: bool = False, quiet: bool = False):
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = getattr(logging, LOG_LEVEL.upper(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)


def write_output(result, output=None):
    """Dump a result as JSON to stdout or a file."""
    text = json.dumps(result, indent=2, ensure_ascii=False)
    if output:
        with open(output, "w", encoding="utf-8") as f:
            f.write(text + "\n")
    else:
        print(text)


def run_command(args) -> object:
    if args.command == "parse":
        with open(args.file, encoding="utf-8") as f:
            html = f.read()
        return parse_html(html, args.kind, place_id=args.place_id, limit=args.limit)

    with GMapsReviews(proxy=args.proxy) as client:
        if args.command == "reviews":
            return client.reviews(args.place_id, sort=args.sort, limit=args.limit)
        if args.command == "business":
            return client.business(args.place_id)
        if args.command == "summary":
            return client.summary(args.place_id)
        return client.search(args.query, args.location, limit=args.limit)


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(verbose=args.verbose, quiet=args.quiet)

    try:
        if args.command == "serve":
            from .server import run_server
            run_server(host=args.host, port=args.port)
            return 0

        write_output(run_command(args), args.output)
        return 0

    except (GMapsReviewsError, OSError) as e:
        print(f"\nError: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\n\nInterrupted by user.", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
