import argparse
import asyncio
import io
import json
import logging
import sys
from pathlib import Path

# Fix Windows console encoding for non-ASCII page text
if sys.platform == 'win32':
    sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding='utf-8', errors='replace')
    sys.stderr = io.TextIOWrapper(sys.stderr.buffer, encoding='utf-8', errors='replace')

from knowledge_scout.models import ScraperSettings
from knowledge_scout.pipeline import KnowledgeScraper
from knowledge_scout.utils import logger, setup_logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Company website to knowledge record scraper")

    subparsers = parser.add_subparsers(dest='task', required=True, help='Task to run')

    # Scrape Command
    scrape_parser = subparsers.add_parser('scrape', help='Scrape one website into a knowledge record')
    scrape_parser.add_argument("url", help="Website URL or bare domain (https:// is assumed)")
    scrape_parser.add_argument("--output", help="Write the JSON outcome to this file instead of stdout")
    scrape_parser.add_argument("--no-browser", action="store_true", help="Disable the headless browser fallback")
    scrape_parser.add_argument("--log-level", default="INFO", choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                               help="Console and file log level")
    return parser


async def async_main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logger(log_level=getattr(logging, args.log_level))

    if args.task == 'scrape':
        overrides = {"browser_fallback": False} if args.no_browser else {}
        scraper = KnowledgeScraper(ScraperSettings.from_settings(overrides))
        outcome = await scraper.scrape(args.url)
        payload = json.dumps(outcome.to_dict(), indent=2, ensure_ascii=False)

        if args.output:
            output_path = Path(args.output)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(payload, encoding="utf-8")
            logger.info(f"Saved outcome to {output_path}")
        else:
            print(payload)
        return 0 if outcome.success else 1
    return 2


def main():
    try:
        sys.exit(asyncio.run(async_main()))
    except KeyboardInterrupt:
        logger.info("Interrupted by user.")


if __name__ == "__main__":
    main()
