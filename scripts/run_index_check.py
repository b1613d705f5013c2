"""
Run an index check batch from CLI and print one JSON line per outcome.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys

from app.config import get_browser_settings, get_check_pipeline_settings
from app.indexing.browser import AutomationEngine
from app.indexing.orchestrator import CheckOrchestrator
from app.indexing.types import CheckOptions
from app.services.check_service import (
    get_browser_manager,
    get_check_storage,
    get_primary_client,
    shutdown_check_resources,
)


async def _run(urls: list[str], economy_mode: bool) -> int:
    settings = get_check_pipeline_settings()
    orchestrator = CheckOrchestrator(
        storage=get_check_storage(),
        automation=AutomationEngine(
            browser_provider=get_browser_manager(),
            settings=get_browser_settings(),
            ambiguous_as_indexed=settings.ambiguous_as_indexed,
        ),
        settings=settings,
        primary_client=get_primary_client(),
    )
    try:
        async for progress in orchestrator.run(urls, CheckOptions(economy_mode=economy_mode)):
            outcome = progress.outcome
            print(
                json.dumps(
                    {
                        "url": outcome.url,
                        "status": outcome.status,
                        "engine": outcome.engine,
                        "checked_at": outcome.checked_at.isoformat(),
                        "completed": progress.completed,
                        "total": progress.total,
                    }
                ),
                flush=True,
            )
    finally:
        await shutdown_check_resources()
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Check whether URLs are indexed by search engines.")
    parser.add_argument("urls", nargs="*", help="URLs to check. Reads stdin when omitted.")
    parser.add_argument(
        "--economy",
        action="store_true",
        help="Skip the primary search API and use browser automation only.",
    )
    args = parser.parse_args()

    urls = args.urls or [line.strip() for line in sys.stdin if line.strip()]
    if not urls:
        parser.error("no URLs given")
    return asyncio.run(_run(urls, args.economy))


if __name__ == "__main__":
    raise SystemExit(main())
