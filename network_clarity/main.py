"""
Command-line entry point.

``serve`` runs the local HTTP surface with uvicorn.  ``scan <url>``
loads one page in Chromium, feeds its traffic through the engine and
prints the tab snapshot summary and privacy score as JSON.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import os
import sys

import dotenv
import uvicorn

from network_clarity import config
from network_clarity.analysis import privacy_score
from network_clarity.browser import session as browser_session
from network_clarity.sessions import dispatcher, panel, registry
from network_clarity.utils import formatting, logger

log = logger.create_logger("CLI")

SCAN_TAB_ID = 1


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="network-clarity",
        description="Network Clarity - request classification and privacy scoring",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true",
        help="Enable debug logging (same as LOG_LEVEL=debug)",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    serve = commands.add_parser("serve", help="Run the local HTTP server")
    serve.add_argument("--host", type=str, default=None, help="Override UVICORN_HOST")
    serve.add_argument("--port", type=int, default=None, help="Override UVICORN_PORT")

    scan = commands.add_parser("scan", help="Load a page and score its traffic")
    scan.add_argument("url", type=str, help="Page to load")
    scan.add_argument(
        "--headed", action="store_true",
        help="Show the browser window",
    )
    scan.add_argument(
        "--timeout", type=int, default=None,
        help="Navigation timeout in ms (default: NAVIGATION_TIMEOUT_MS)",
    )
    scan.add_argument(
        "--pii", action="store_true",
        help="Also scan finished requests for personal data",
    )
    return parser.parse_args(argv)


# ============================================================================
# serve
# ============================================================================


def serve(settings: config.Settings) -> None:
    """Run the HTTP surface until interrupted."""
    log.success(f"Server listening on {settings.host}:{settings.port}")
    uvicorn.run(
        "network_clarity.app:app",
        host=settings.host,
        port=settings.port,
        reload=not settings.is_production,
    )


# ============================================================================
# scan
# ============================================================================


async def _pii_findings(feed: panel.PanelFeed) -> list[dict[str, object]]:
    findings: list[dict[str, object]] = []
    for record in feed.records:
        inspection = await feed.inspect_request(record.id)
        if inspection is None or not inspection.pii.has_pii:
            continue
        findings.append({
            "url": formatting.truncate_url(record.url, 80),
            "riskLevel": inspection.pii.risk_level,
            "summary": inspection.pii.summary,
        })
    return findings


async def scan(url: str, settings: config.Settings, *, with_pii: bool = False) -> dict[str, object]:
    """Load *url* and return the tab snapshot summary and privacy score."""
    sessions = registry.SessionRegistry()
    command_dispatcher = dispatcher.Dispatcher(sessions)
    feed = panel.PanelFeed(sessions, SCAN_TAB_ID, prefetch_bodies=settings.prefetch_response_bodies)
    browser = browser_session.BrowserSession(command_dispatcher, SCAN_TAB_ID, feed)
    command_dispatcher.page_url_lookup = browser.current_page_url
    feed.page_url_lookup = browser.current_page_url

    log.start_timer("scan")
    try:
        await browser.launch_browser(headless=settings.browser_headless)
        loaded = await browser.navigate_to(url, timeout=settings.navigation_timeout_ms)
        if loaded:
            await browser.wait_for_network_idle(timeout=settings.navigation_timeout_ms)

        data = sessions.get_tab_data(SCAN_TAB_ID)
        if data is None:
            raise RuntimeError(f"No traffic was observed for {url}")

        result: dict[str, object] = {
            "pageUrl": data.page_url,
            "pageDomain": data.page_domain,
            "loaded": loaded,
            "stats": data.stats.model_dump(by_alias=True),
            "score": privacy_score.calculate_privacy_score(data.stats).model_dump(by_alias=True),
        }
        if with_pii:
            result["pii"] = await _pii_findings(feed)
    finally:
        await browser.close()
        log.end_timer("scan", "Scan finished")
    return result


def main(argv: list[str] | None = None) -> None:
    """Entry point for the ``network-clarity`` command."""
    dotenv.load_dotenv()
    args = parse_args(argv)
    if args.verbose:
        os.environ["LOG_LEVEL"] = "debug"

    if args.command == "serve":
        # network_clarity.app reads its settings from the environment.
        if args.host:
            os.environ["UVICORN_HOST"] = args.host
        if args.port:
            os.environ["UVICORN_PORT"] = str(args.port)
        serve(config.Settings())
        return

    settings = config.Settings()

    if args.headed:
        settings = settings.model_copy(update={"browser_headless": False})
    if args.timeout:
        settings = settings.model_copy(update={"navigation_timeout_ms": args.timeout})

    try:
        result = asyncio.run(scan(args.url, settings, with_pii=args.pii))
    except RuntimeError as error:
        log.error(str(error))
        sys.exit(1)
    print(json.dumps(result, indent=2))


if __name__ == "__main__":
    main()
