"""
1.0 Command Line Entry Point
Generates the sitemap once, or serves it over HTTP.

Usage:
    xml-sitemap                      # print the sitemap to stdout
    xml-sitemap -o sitemap.xml       # write it to a file
    xml-sitemap --headers            # print response headers first (CGI style)
    xml-sitemap --serve --port 8080  # run the Flask development server
"""

import argparse
import logging
import sys
from typing import List, Optional

from xml_sitemap.config import load_config
from xml_sitemap.exceptions import SitemapError
from xml_sitemap.generator import generate_sitemap

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(verbose: bool = False, log_file: Optional[str] = None) -> None:
    """1.1 Log to stderr (stdout may carry the sitemap) and optionally to a file."""
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        handlers=handlers,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate an XML sitemap from a directory tree"
    )
    parser.add_argument(
        "--config", "-c",
        default=None,
        help="Config file (default: ./xml-sitemap-config.ini, then ../xml-sitemap-config.ini)"
    )
    parser.add_argument(
        "--output", "-o",
        default=None,
        help="Write the sitemap to this file instead of stdout"
    )
    parser.add_argument(
        "--base-url",
        default=None,
        help="Base URL used when directory_url is empty in the config"
    )
    parser.add_argument(
        "--headers",
        action="store_true",
        help="Print HTTP response headers before the document"
    )
    parser.add_argument(
        "--serve",
        action="store_true",
        help="Serve the sitemap over HTTP instead of printing it"
    )
    parser.add_argument("--host", default="127.0.0.1", help="Bind address for --serve (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=8000, help="Port for --serve (default: 8000)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    parser.add_argument("--log-file", default=None, help="Also log to this file")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    2.0 Run the command line interface.

    Returns:
        Process exit status: 0 on success, 1 on any sitemap error.
    """
    args = build_parser().parse_args(argv)
    setup_logging(verbose=args.verbose, log_file=args.log_file)

    try:
        config = load_config(args.config)

        if args.serve:
            from xml_sitemap.app import create_app

            app = create_app(config)
            logger.info(f"Serving sitemap on http://{args.host}:{args.port}/sitemap.xml")
            app.run(host=args.host, port=args.port)
            return 0

        result = generate_sitemap(config, request_base_url=args.base_url)
    except SitemapError as e:
        logger.error(str(e))
        print(str(e), file=sys.stderr)
        return 1

    if args.output:
        with open(args.output, "wb") as f:
            f.write(result.body)
        logger.info(f"Sitemap written to {args.output}")
        return 0

    out = sys.stdout.buffer
    if args.headers:
        for name, value in result.headers.items():
            out.write(f"{name}: {value}\r\n".encode("latin-1"))
        out.write(b"\r\n")
    out.write(result.body)
    out.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main())
