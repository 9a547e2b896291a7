"""
Heuristic DOM probe for testathon.live.

Tries fixed lists of candidate selectors and logs whichever match, so the
page objects' selectors can be checked against the live markup.

    python -m testathon_ui.discovery
"""

import logging
import re
from typing import Dict, List, Optional

from playwright.sync_api import Error as PlaywrightError, Page, sync_playwright
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from testathon_ui.browser import launch_browser, new_page
from testathon_ui.errors import PageTimeoutError
from testathon_ui.models import DiscoveryReport, SelectorHit
from testathon_ui.pages.base import BasePage

logger = logging.getLogger(__name__)

SETTLE_MS = 3_000
SCREENSHOT_NAME = "page-discovery.png"
MAX_PRICE_ELEMENTS = 50
MAX_IMAGES = 10
MAX_CLASSES = 50

CONTAINER_SELECTORS = [
    "main",
    ".main",
    "#main",
    ".container",
    ".content",
    ".products",
    ".product-list",
    ".product-grid",
    ".items",
    '[class*="product"]',
    '[class*="item"]',
    '[class*="card"]',
    "article",
    ".row",
    ".grid",
]

FILTER_SELECTORS = [
    ".filter",
    ".filters",
    ".sidebar",
    ".filter-panel",
    '[class*="filter"]',
    "form",
    'input[type="checkbox"]',
    'input[type="radio"]',
    "select",
    "button",
    '[class*="brand"]',
    '[class*="price"]',
    '[class*="sort"]',
]

BRAND_WORDS = ["iPhone", "Galaxy", "Pixel", "OnePlus", "Samsung"]

_DESCRIBE_ELEMENT = """el => ({
    tag: el.tagName.toLowerCase(),
    class: el.getAttribute('class'),
    id: el.getAttribute('id'),
    text: (el.innerText || '').substring(0, 50),
    type: el.getAttribute('type'),
    name: el.getAttribute('name'),
    value: el.getAttribute('value'),
})"""

_PRICE_ELEMENTS = """limit => {
    const found = [];
    for (const el of document.querySelectorAll('body *')) {
        if (found.length >= limit) break;
        if (el.children.length) continue;
        const text = (el.innerText || '').trim();
        if (text.includes('$') || /\\d+\\.\\d{2}/.test(text)) {
            found.push(text.substring(0, 30));
        }
    }
    return found;
}"""

_IMAGES = """limit => Array.from(document.querySelectorAll('img')).slice(0, limit).map(img => ({
    src: (img.getAttribute('src') || '').substring(0, 50) || null,
    alt: img.getAttribute('alt'),
    class: img.getAttribute('class'),
    parent: img.parentElement ? img.parentElement.getAttribute('class') : null,
}))"""

_STRUCTURE = """limit => {
    const counts = {};
    for (const tag of ['div', 'span', 'button', 'input', 'img', 'a', 'form', 'article', 'section']) {
        counts[tag] = document.querySelectorAll(tag).length;
    }
    const classes = new Set();
    document.querySelectorAll('*').forEach(el => {
        if (typeof el.className === 'string') {
            el.className.split(' ').forEach(cls => { if (cls.trim()) classes.add(cls.trim()); });
        }
    });
    return {counts, classes: Array.from(classes).slice(0, limit)};
}"""


def _probe_selectors(page: Page, selectors: List[str], samples: int) -> List[SelectorHit]:
    hits = []
    for selector in selectors:
        try:
            elements = page.locator(selector)
            count = elements.count()
            if not count:
                continue
            details = [elements.nth(i).evaluate(_DESCRIBE_ELEMENT) for i in range(min(samples, count))]
        except PlaywrightError as e:
            logger.debug("selector %s skipped: %s", selector, e)
            continue

        hits.append(SelectorHit(selector=selector, count=count, samples=details))
        logger.info("Found %d elements with selector: %s", count, selector)
        for i, d in enumerate(details):
            logger.info(
                "   [%d] Tag: %s, Class: %s, ID: %s, Text: %r, Type: %s, Name: %s, Value: %s",
                i, d["tag"], d["class"] or "none", d["id"] or "none", d["text"],
                d["type"] or "none", d["name"] or "none", d["value"] or "none",
            )
    return hits


def count_brand_mentions(text: str, brands: Optional[List[str]] = None) -> Dict[str, int]:
    return {
        brand: len(re.findall(re.escape(brand), text, flags=re.IGNORECASE))
        for brand in (brands or BRAND_WORDS)
    }


def probe(page: Page, screenshot: bool = True) -> DiscoveryReport:
    """Open the store and record what its DOM looks like."""
    base = BasePage(page)
    base.open("/")
    page.wait_for_timeout(SETTLE_MS)

    report = DiscoveryReport(
        title=base.page_title(),
        url=base.current_url(),
        page_source_length=len(page.content()),
    )
    logger.info("Page Title: %s", report.title)
    logger.info("Page URL: %s", report.url)
    logger.info("Page source length: %d", report.page_source_length)

    if screenshot:
        report.screenshot = base.take_screenshot(SCREENSHOT_NAME)

    logger.info("=== DISCOVERING MAIN CONTAINERS ===")
    report.containers = _probe_selectors(page, CONTAINER_SELECTORS, samples=1)

    logger.info("=== DISCOVERING FILTER ELEMENTS ===")
    report.filters = _probe_selectors(page, FILTER_SELECTORS, samples=3)

    logger.info("=== DISCOVERING PRODUCT ELEMENTS ===")
    report.price_texts = page.evaluate(_PRICE_ELEMENTS, MAX_PRICE_ELEMENTS)
    for text in report.price_texts:
        logger.info("Price element: %r", text)
    report.images = page.evaluate(_IMAGES, MAX_IMAGES)
    logger.info("Found %d images (first %d sampled)", page.locator("img").count(), len(report.images))

    logger.info("=== DISCOVERING BRAND NAMES ===")
    report.brand_counts = count_brand_mentions(page.evaluate("() => document.body.innerText"))
    for brand, count in report.brand_counts.items():
        logger.info('"%s" appears %d times', brand, count)

    logger.info("=== ANALYZING PAGE STRUCTURE ===")
    structure = page.evaluate(_STRUCTURE, MAX_CLASSES)
    report.structure = structure["counts"]
    report.unique_classes = structure["classes"]
    logger.info("Page structure: %s", report.structure)
    logger.info("Unique CSS classes (first %d): %s", MAX_CLASSES, ", ".join(report.unique_classes))

    report.ready_state = page.evaluate("() => document.readyState")
    logger.info("Document ready state: %s", report.ready_state)
    return report


def run() -> int:
    """
    Runs the discovery probe against the configured site and prints a summary.
    Returns an exit code (0 = success, non-zero = failure).
    """
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    try:
        with sync_playwright() as p:
            browser = launch_browser(p)
            context, page = new_page(browser)
            try:
                report = probe(page)
            finally:
                context.close()
                browser.close()

    except (PlaywrightTimeoutError, PageTimeoutError) as e:
        print(f"A step timed out. The page may be slow or elements changed: {e}")
        return 2

    except PlaywrightError as e:
        print(f"Browser automation error: {e}")
        return 2

    print(f"\n=== DISCOVERY RESULT for {report.url} ===")
    print(f"Title: {report.title}")
    print(f"Containers matched: {', '.join(h.selector for h in report.containers) or 'none'}")
    print(f"Filter candidates matched: {', '.join(h.selector for h in report.filters) or 'none'}")
    print(f"Brand mentions: {report.brand_counts}")
    return 0


if __name__ == "__main__":
    raise SystemExit(run())
