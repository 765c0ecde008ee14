"""Playwright browser manager — loads a page and captures a DOM snapshot."""

from __future__ import annotations

import logging
from types import TracebackType

from playwright.async_api import async_playwright, Browser, Page, Playwright

from pai.engine.snapshot import CapturedPage, PageSnapshot, Viewport

logger = logging.getLogger(__name__)

# Computed style properties the audit engine reads
STYLE_PROPERTIES = [
    "color",
    "background-color",
    "display",
    "visibility",
    "opacity",
    "font-size",
    "font-weight",
    "pointer-events",
]

# Serializes the live DOM into the flat CapturedPage shape, walking it with
# an explicit stack.
CAPTURE_SCRIPT = r"""(styleProps) => {
    const describe = (el) => {
        const attributes = {};
        for (const attr of el.attributes) attributes[attr.name] = attr.value;

        const computed = window.getComputedStyle(el);
        const style = {};
        for (const prop of styleProps) style[prop] = computed.getPropertyValue(prop);

        const r = el.getBoundingClientRect();
        return {
            tag: el.tagName.toLowerCase(),
            namespace: el.namespaceURI === 'http://www.w3.org/1999/xhtml' ? '' : (el.namespaceURI || ''),
            attributes,
            style,
            rect: {top: r.top, left: r.left, width: r.width, height: r.height},
            has_click_listener: typeof el.onclick === 'function',
            disabled: el.disabled === true,
            children: [],
        };
    };

    const nodes = [];
    // [element, parent's children array, slot reserved in it]
    const stack = [[document.documentElement, null, -1]];
    while (stack.length) {
        const [el, siblings, slot] = stack.pop();
        const index = nodes.length;
        const node = describe(el);
        nodes.push(node);
        if (siblings) siblings[slot] = index;

        const pending = [];
        for (const child of el.childNodes) {
            if (child.nodeType === Node.ELEMENT_NODE) {
                pending.push([child, node.children, node.children.length]);
                node.children.push(-1);
            } else if (child.nodeType === Node.TEXT_NODE && child.nodeValue) {
                node.children.push(child.nodeValue);
            }
        }
        for (let i = pending.length - 1; i >= 0; i--) stack.push(pending[i]);
    }
    return {
        url: window.location.href,
        viewport: {width: window.innerWidth, height: window.innerHeight},
        nodes,
    };
}"""


class BrowserManager:
    """Manages a shared Playwright Chromium instance.

    Usage::

        async with BrowserManager() as bm:
            snapshot = await bm.capture_snapshot("https://example.com")
    """

    def __init__(
        self,
        *,
        viewport: Viewport | None = None,
        timeout_ms: int = 30_000,
    ) -> None:
        self._pw: Playwright | None = None
        self._browser: Browser | None = None
        self.viewport = viewport or Viewport()
        self.timeout_ms = timeout_ms

    async def __aenter__(self) -> "BrowserManager":
        self._pw = await async_playwright().start()
        self._browser = await self._pw.chromium.launch(headless=True)
        logger.info("Browser launched")
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._browser:
            await self._browser.close()
        if self._pw:
            await self._pw.stop()
        logger.info("Browser closed")

    async def _new_page(self) -> Page:
        assert self._browser is not None, "BrowserManager not entered"
        page = await self._browser.new_page()
        await page.set_viewport_size({"width": self.viewport.width, "height": self.viewport.height})
        return page

    async def capture_page(self, url: str, *, wait_ms: int = 1000) -> CapturedPage:
        """Navigate to URL, let it settle, and serialize the DOM."""
        page = await self._new_page()
        try:
            await page.goto(url, wait_until="load", timeout=self.timeout_ms)
            await page.wait_for_timeout(wait_ms)
            data = await page.evaluate(CAPTURE_SCRIPT, STYLE_PROPERTIES)
            captured = CapturedPage.model_validate(data)
            logger.debug("Captured %s: %d element(s), viewport %sx%s", captured.url, len(captured.nodes),
                         captured.viewport.width, captured.viewport.height)
            return captured
        finally:
            await page.close()

    async def capture_snapshot(self, url: str, *, wait_ms: int = 1000) -> PageSnapshot:
        return PageSnapshot(await self.capture_page(url, wait_ms=wait_ms))
