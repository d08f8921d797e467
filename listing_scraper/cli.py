"""
Command line entry point: extract one or more listings and print or export them.
"""
import argparse
import asyncio
import json
import os
import sys
from typing import List, Optional, Tuple

from .errors import ExtractionError
from .export import save_output_rows
from .fetcher import FETCH_MODES
from .models import ListingRecord
from .pipeline import build_extractor, parse_listing_html
from .utils import init_logger, now_iso


def parse_args(argv: Optional[List[str]] = None):
    ap = argparse.ArgumentParser(description="Extract clothing listing details from marketplace pages")
    ap.add_argument("urls", nargs="*", help="Listing URLs")
    ap.add_argument("--fetch", choices=FETCH_MODES, default=os.getenv("FETCH_MODE", "direct"),
                    help="How to retrieve pages: direct GET, rendering proxy, or local browser")
    ap.add_argument("--html-file", type=str, default="",
                    help="Parse a saved listing page instead of fetching URLs")
    ap.add_argument("--out", type=str, default="", help="CSV/XLSX file to export records to")
    ap.add_argument("--json", action="store_true", help="Print records as JSON instead of summaries")
    # Logging
    lvl_choices = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    ap.add_argument("--log-level", choices=lvl_choices, default=None,
                    help="Global log level for both console and file (overrides --log-console/--log-file).")
    ap.add_argument("--log-console", choices=lvl_choices, default=os.getenv("LOG_CONSOLE", "INFO"),
                    help="Console log level (default from env LOG_CONSOLE or INFO).")
    ap.add_argument("--log-file", choices=lvl_choices, default=os.getenv("LOG_FILE", "DEBUG"),
                    help="File log level (default from env LOG_FILE or DEBUG).")
    ap.add_argument("--log-file-path", default=os.getenv("LOG_FILE_PATH", "listing_scraper.log"),
                    help="Path to log file (default from env LOG_FILE_PATH or listing_scraper.log).")
    ap.add_argument("--no-file-log", action="store_true",
                    help="Disable file logging (only console output).")

    args = ap.parse_args(argv)
    if not args.urls and not args.html_file:
        ap.error("provide at least one URL or --html-file")
    return args


async def run_batch(urls: List[str], fetch_mode: str, logger) -> List[Tuple[str, ListingRecord]]:
    """Extract each URL in turn; failures are logged and skipped."""
    extractor = build_extractor(fetch_mode=fetch_mode)
    results = []
    for url in urls:
        try:
            record = await extractor.extract(url)
        except ExtractionError as e:
            logger.error(f">>> {url}: {type(e).__name__}: {e}")
            continue
        results.append((url, record))
    return results


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    eff_console = args.log_level or args.log_console
    eff_file = args.log_level or args.log_file
    logger = init_logger(
        console_level=eff_console,
        file_level=eff_file,
        log_file=None if args.no_file_log else args.log_file_path
    )
    logger.info(f">>> Run started at {now_iso()} (fetch={args.fetch})")

    if args.html_file:
        with open(args.html_file, encoding="utf-8") as f:
            results = [(args.html_file, parse_listing_html(f.read()))]
    else:
        results = asyncio.run(run_batch(args.urls, args.fetch, logger))

    for source, record in results:
        if args.json:
            print(json.dumps({"url": source, **record.to_dict()}, ensure_ascii=False, indent=2))
        else:
            print(f"=== {source}\n{record.summary}\n")

    if args.out and results:
        save_output_rows(
            [record for _, record in results], args.out,
            urls=[source for source, _ in results], logger=logger
        )

    logger.info(f">>> Extracted {len(results)} of {len(args.urls) or 1} listings")
    return 0 if results else 1


if __name__ == "__main__":
    sys.exit(main())
