"""
Playwright-backed interception producer.

A ``BrowserSession`` drives one Chromium page and turns its network
events into interception-feed commands, exactly as a browser host
would report them:

- ``request``         -> ``begin`` + ``request_headers`` (preceded by
  ``tab_navigated`` for a main-frame navigation)
- ``response``        -> ``response_headers``
- ``requestfinished`` -> ``completed`` with the response status
- ``requestfailed``   -> ``completed`` with status 0
- page ``close``      -> ``tab_closed``

When a :class:`~network_clarity.sessions.panel.PanelFeed` is attached,
finished requests are also handed to it as HAR entries with a lazy
body fetcher.
"""

from __future__ import annotations

import itertools
import time
from datetime import UTC, datetime
from typing import Literal

from playwright import async_api

from network_clarity.models import messages, tracking
from network_clarity.sessions import dispatcher, panel
from network_clarity.utils import errors, logger

log = logger.create_logger("BrowserSession")


def _headers_from_mapping(headers: dict[str, str]) -> list[tracking.Header]:
    return [tracking.Header(name=name, value=value) for name, value in headers.items()]


def _headers_from_array(headers: list[dict[str, str]]) -> list[tracking.Header]:
    return [tracking.Header(name=h.get("name", ""), value=h.get("value", "")) for h in headers]


class BrowserSession:
    """
    Feeds one browser tab's traffic into the engine.

    Args:
        command_dispatcher: Where interception commands are sent.
        tab_id: Tab id reported for every event of this page.
        inspection_panel: Optional panel feed receiving HAR entries.
    """

    def __init__(
        self,
        command_dispatcher: dispatcher.Dispatcher,
        tab_id: int = 1,
        inspection_panel: panel.PanelFeed | None = None,
    ) -> None:
        self._dispatcher = command_dispatcher
        self.tab_id = tab_id
        self._panel = inspection_panel

        self._playwright: async_api.Playwright | None = None
        self._browser: async_api.Browser | None = None
        self._context: async_api.BrowserContext | None = None
        self._page: async_api.Page | None = None

        # Playwright request objects -> engine request ids.  Kept until the
        # next main-frame navigation so redirect hops can find their id.
        self._request_ids: dict[async_api.Request, str] = {}
        self._statuses: dict[str, int] = {}
        self._ids = itertools.count(1)

    # ==========================================================================
    # State Getters
    # ==========================================================================

    def get_page(self) -> async_api.Page | None:
        """Return the active Playwright page, if any."""
        return self._page

    async def current_page_url(self, tab_id: int) -> str | None:
        """Page-URL lookup for the dispatcher and panel."""
        if tab_id != self.tab_id or self._page is None:
            return None
        return self._page.url

    # ==========================================================================
    # Browser Lifecycle
    # ==========================================================================

    async def launch_browser(self, headless: bool = True) -> None:
        """Launch Chromium and open the page whose traffic is observed."""
        log.info("Launching browser", {"headless": headless})
        await self.close()

        self._playwright = await async_api.async_playwright().start()
        self._browser = await self._playwright.chromium.launch(headless=headless)
        self._context = await self._browser.new_context(locale="en-GB")
        self._page = await self._context.new_page()
        self.attach(self._page)

    def attach(self, page: async_api.Page) -> None:
        """Start forwarding *page*'s network events."""
        self._page = page
        page.on("request", self._on_request)
        page.on("response", self._on_response)
        page.on("requestfinished", self._on_request_finished)
        page.on("requestfailed", self._on_request_failed)
        page.on("close", self._on_close)

    def detach(self) -> None:
        """Stop forwarding events from the current page."""
        if self._page is None:
            return
        self._page.remove_listener("request", self._on_request)
        self._page.remove_listener("response", self._on_response)
        self._page.remove_listener("requestfinished", self._on_request_finished)
        self._page.remove_listener("requestfailed", self._on_request_failed)
        self._page.remove_listener("close", self._on_close)

    # ==========================================================================
    # Event Handlers
    # ==========================================================================

    def _is_main_frame_navigation(self, request: async_api.Request) -> bool:
        if self._page is None or not request.is_navigation_request():
            return False
        try:
            return request.frame == self._page.main_frame
        except Exception:
            # Service-worker requests have no frame.
            return False

    async def _on_request(self, request: async_api.Request) -> None:
        """Report a new request, or a redirect hop of a known one."""
        previous = request.redirected_from
        request_id = self._request_ids.get(previous) if previous is not None else None

        if request_id is None:
            if self._is_main_frame_navigation(request):
                self._request_ids.clear()
                self._statuses.clear()
                await self._dispatcher.dispatch(messages.TabNavigated(tab_id=self.tab_id, url=request.url))
                if self._panel is not None:
                    self._panel.on_navigated()
            request_id = str(next(self._ids))
        self._request_ids[request] = request_id

        await self._dispatcher.dispatch(
            messages.BeginRequest(
                request_id=request_id,
                url=request.url,
                method=request.method,
                resource_type=request.resource_type,
                tab_id=self.tab_id,
                timestamp=time.time() * 1000,
            )
        )

        try:
            headers = _headers_from_mapping(await request.all_headers())
        except Exception as error:
            log.debug("Falling back to provisional request headers", {"error": errors.get_error_message(error)})
            headers = _headers_from_mapping(request.headers)
        await self._dispatcher.dispatch(
            messages.RecordRequestHeaders(request_id=request_id, tab_id=self.tab_id, headers=headers)
        )

    async def _on_response(self, response: async_api.Response) -> None:
        """Report response headers and remember the status."""
        request_id = self._request_ids.get(response.request)
        if request_id is None:
            return
        self._statuses[request_id] = response.status

        try:
            headers = _headers_from_array(await response.headers_array())
        except Exception as error:
            log.debug("Response headers unavailable", {"error": errors.get_error_message(error)})
            return
        await self._dispatcher.dispatch(
            messages.RecordResponseHeaders(request_id=request_id, tab_id=self.tab_id, headers=headers)
        )

    async def _on_request_finished(self, request: async_api.Request) -> None:
        """Report completion and hand the request to the panel."""
        request_id = self._request_ids.get(request)
        if request_id is None:
            return
        await self._dispatcher.dispatch(
            messages.CompleteRequest(
                request_id=request_id,
                tab_id=self.tab_id,
                status_code=self._statuses.get(request_id, 0),
                timestamp=time.time() * 1000,
            )
        )

        if self._panel is not None:
            response = await request.response()
            entry = await self._har_entry(request, response)

            async def fetch_content() -> str | None:
                return await response.text() if response is not None else None

            await self._panel.on_request_finished(entry, fetch_content)

    async def _on_request_failed(self, request: async_api.Request) -> None:
        """Report a failed request as completed without a status."""
        request_id = self._request_ids.get(request)
        if request_id is None:
            return
        log.debug("Request failed", {"url": request.url, "error": request.failure or ""})
        await self._dispatcher.dispatch(
            messages.CompleteRequest(
                request_id=request_id,
                tab_id=self.tab_id,
                status_code=0,
                timestamp=time.time() * 1000,
            )
        )

    async def _on_close(self, _page: async_api.Page) -> None:
        await self._dispatcher.dispatch(messages.TabClosed(tab_id=self.tab_id))

    async def _har_entry(
        self,
        request: async_api.Request,
        response: async_api.Response | None,
    ) -> tracking.HarEntry:
        """Describe a finished request the way the inspection panel sees it."""
        timing = request.timing
        start_ms = timing.get("startTime") or time.time() * 1000
        elapsed = max(timing.get("responseEnd", 0) or 0, 0)

        post_data = request.post_data
        har_request = tracking.HarRequest(
            url=request.url,
            method=request.method,
            headers=_headers_from_mapping(request.headers),
            post_data=(
                tracking.HarPostData(
                    mime_type=request.headers.get("content-type", ""),
                    text=post_data,
                )
                if post_data
                else None
            ),
        )

        har_response = tracking.HarResponse()
        if response is not None:
            headers = _headers_from_array(await response.headers_array())
            content_type = next((h.value for h in headers if h.name.lower() == "content-type"), "")
            length = next((h.value for h in headers if h.name.lower() == "content-length"), "")
            har_response = tracking.HarResponse(
                status=response.status,
                status_text=response.status_text,
                headers=headers,
                content=tracking.HarContent(
                    size=int(length) if length.isdigit() else None,
                    mime_type=content_type,
                ),
            )

        return tracking.HarEntry(
            started_date_time=datetime.fromtimestamp(start_ms / 1000, tz=UTC),
            time=elapsed,
            request=har_request,
            response=har_response,
            resource_type=request.resource_type,
        )

    # ==========================================================================
    # Navigation
    # ==========================================================================

    async def navigate_to(
        self,
        url: str,
        wait_until: Literal["commit", "domcontentloaded", "load", "networkidle"] = "load",
        timeout: int = 90000,
    ) -> bool:
        """Navigate the page to *url*.

        Returns:
            ``True`` when the page loaded, ``False`` on a navigation
            error (logged as a warning).
        """
        if not self._page:
            raise RuntimeError("No browser session active")

        log.debug("Navigating", {"url": url, "waitUntil": wait_until, "timeout": timeout})
        try:
            response = await self._page.goto(url, wait_until=wait_until, timeout=timeout)
        except Exception as error:
            log.warn("Navigation error", {"url": url, "error": errors.get_error_message(error)})
            return False

        if response is not None and response.status >= 400:
            log.warn("Page returned an error status", {"url": url, "status": response.status})
        final_url = self._page.url
        if final_url != url:
            log.info("Redirected", {"from": url, "to": final_url})
        return True

    async def wait_for_network_idle(self, timeout: int = 60000) -> bool:
        """Wait for the network to become idle."""
        if not self._page:
            return False
        try:
            await self._page.wait_for_load_state("networkidle", timeout=timeout)
            return True
        except Exception:
            log.debug("Network idle timeout", {"timeoutMs": timeout})
            return False

    # ==========================================================================
    # Cleanup
    # ==========================================================================

    async def close(self) -> None:
        """Close the browser and clean up all resources."""
        self.detach()
        self._page = None
        self._request_ids.clear()
        self._statuses.clear()

        if self._context:
            try:
                await self._context.close()
            except Exception as exc:
                log.debug("Context close error (non-fatal)", {"error": str(exc)})
            self._context = None

        if self._browser:
            try:
                await self._browser.close()
            except Exception as exc:
                log.debug("Browser close error (non-fatal)", {"error": str(exc)})
            self._browser = None

        if self._playwright:
            try:
                await self._playwright.stop()
            except Exception as exc:
                log.debug("Playwright stop error (non-fatal)", {"error": str(exc)})
            self._playwright = None
