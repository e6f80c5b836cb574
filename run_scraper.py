# run_scraper.py
import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, Optional

# Make the repo root importable (same as the other scripts)
repo_root = Path(__file__).resolve().parent
if str(repo_root) not in sys.path:
    sys.path.append(str(repo_root))

from loguru import logger

from core.config import get_settings
from core.exceptions import ScraperException
from core.logging import configure_logging
from models.scrape_request import ScrapeRequest
from services.pipeline.config_loader import (
    TargetNotFoundError,
    get_target_config,
    list_available_targets,
)
from services.pipeline.json_writer import write_payload
from services.pipeline.related_content_service import RelatedContentService
from services.renderer.page_renderer import StaticPageRenderer


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Scrape a page's related-content cards into a JSON snapshot.",
    )
    parser.add_argument("target", help="Target name from configs/targets.yaml")
    parser.add_argument(
        "--snapshot",
        type=Path,
        help="Read pre-rendered HTML from this file instead of launching a browser",
    )
    parser.add_argument("--source-url", help="Override the target's source_url")
    parser.add_argument(
        "--output-dir",
        type=Path,
        help="Directory for the JSON file (default: RELATED_OUTPUT_DIR)",
    )
    parser.add_argument("--concurrency", type=int, help="Simultaneous og:image lookups")
    parser.add_argument("--timeout", type=float, help="Per-article lookup timeout (s)")
    parser.add_argument("--settle", type=float, help="Settle delay after load (s)")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


async def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    settings = get_settings()
    configure_logging("DEBUG" if args.verbose else settings.LOG_LEVEL)

    try:
        target = get_target_config(args.target)
        renderer = StaticPageRenderer.from_file(args.snapshot) if args.snapshot else None
    except TargetNotFoundError as exc:
        logger.error(f"{exc.args[0]} Available: {', '.join(list_available_targets())}")
        return 2
    except ScraperException as exc:
        logger.error(exc.to_dict())
        return 1

    req = ScrapeRequest(
        target_name=args.target,
        source_url=args.source_url,
        concurrency=args.concurrency,
        fetch_timeout_seconds=args.timeout,
        settle_delay_seconds=args.settle,
    )

    svc = RelatedContentService(target, renderer=renderer)
    try:
        result = await svc.run(req)
    except ScraperException as exc:
        logger.error(exc.to_dict())
        return 1
    finally:
        await svc.cleanup()

    out_dir = args.output_dir or settings.OUTPUT_DIR
    filename = target.output_file or f"{args.target}.json"
    path = write_payload(result.payload, out_dir, filename)
    print(f"Wrote {len(result.payload.items)} items to {path}")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
