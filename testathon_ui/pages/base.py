import logging
import time
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, Optional, Sequence

from playwright.sync_api import Error as PlaywrightError, Locator, Page
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from testathon_ui import config
from testathon_ui.errors import PageTimeoutError
from testathon_ui.models import NetworkProfile, PerformanceMetrics, TimedResult

logger = logging.getLogger(__name__)

# throughput in bytes/s, latency in ms
NETWORK_CONDITIONS: Dict[str, NetworkProfile] = {
    "slow3G": NetworkProfile(
        download_throughput=500 * 1024 / 8,
        upload_throughput=500 * 1024 / 8,
        latency=400,
    ),
    "fast3G": NetworkProfile(
        download_throughput=1600 * 1024 / 8,
        upload_throughput=750 * 1024 / 8,
        latency=150,
    ),
    "offline": NetworkProfile(offline=True),
}

MOBILE_MAX_WIDTH = 768
TABLET_MAX_WIDTH = 1024

_PERFORMANCE_SCRIPT = """() => {
    const nav = performance.getEntriesByType('navigation')[0];
    const paint = performance.getEntriesByType('paint');
    return {
        dom_content_loaded: nav ? nav.domContentLoadedEventEnd - nav.domContentLoadedEventStart : 0,
        load_complete: nav ? nav.loadEventEnd - nav.loadEventStart : 0,
        first_paint: paint[0] ? paint[0].startTime : 0,
        first_contentful_paint: paint[1] ? paint[1].startTime : 0,
    };
}"""


class BasePage:
    """
    Shared interaction helpers for every page object.

    Takes the live Playwright page explicitly; locators built from it are lazy
    and re-resolve against the DOM every time they are used.
    """

    def __init__(self, page: Page):
        self.page = page

    # ---- navigation ----

    def open(self, path: str = "/") -> None:
        self.page.goto(config.BASE_URL + path, wait_until="domcontentloaded")
        self.wait_for_page_load()

    def wait_for_page_load(self, timeout_ms: int = config.PAGE_LOAD_TIMEOUT_MS) -> None:
        try:
            self.page.wait_for_function(
                "() => document.readyState === 'complete'", timeout=timeout_ms
            )
        except PlaywrightTimeoutError as e:
            raise PageTimeoutError(
                f"Page did not load within {timeout_ms / 1000:g} seconds"
            ) from e

    def page_title(self) -> str:
        return self.page.title()

    def current_url(self) -> str:
        return self.page.url

    # ---- waits ----

    def wait_until(
        self,
        condition: Callable[[], bool],
        timeout_ms: int = config.PAGE_LOAD_TIMEOUT_MS,
        message: str = "Condition not met",
        interval_ms: int = config.POLL_INTERVAL_MS,
    ) -> None:
        """Poll `condition` until it returns True; raise PageTimeoutError on expiry."""
        deadline = time.monotonic() + timeout_ms / 1000
        while True:
            if condition():
                return
            if time.monotonic() >= deadline:
                raise PageTimeoutError(message)
            self.page.wait_for_timeout(interval_ms)

    def wait_for_element_clickable(
        self, element: Locator, timeout_ms: int = config.ELEMENT_WAIT_MS
    ) -> None:
        element.wait_for(state="visible", timeout=timeout_ms)
        # trial click runs the actionability checks without clicking
        element.click(trial=True, timeout=timeout_ms)

    def wait_for_elements(
        self,
        elements: Sequence[Locator],
        should_appear: bool = True,
        timeout_ms: int = config.PAGE_LOAD_TIMEOUT_MS,
    ) -> None:
        def settled() -> bool:
            states = [self.is_element_displayed(e) for e in elements]
            return all(states) if should_appear else not any(states)

        verb = "appear" if should_appear else "disappear"
        self.wait_until(
            settled,
            timeout_ms=timeout_ms,
            message=f"Elements did not {verb} within {timeout_ms}ms",
        )

    # ---- interaction ----

    def scroll_to_element(self, element: Locator) -> None:
        element.scroll_into_view_if_needed()
        self.page.wait_for_timeout(config.SCROLL_SETTLE_MS)

    def safe_click(self, element: Locator, retries: int = config.RETRY_ATTEMPTS) -> None:
        """Click with a fixed-delay retry; the last failure is re-raised."""
        if retries < 1:
            raise ValueError(f"retries must be at least 1, got {retries}")
        for attempt in range(retries):
            try:
                self.wait_for_element_clickable(element)
                element.click()
                return
            except PlaywrightError as e:
                if attempt == retries - 1:
                    raise
                logger.debug("click attempt %d/%d failed: %s", attempt + 1, retries, e)
                self.page.wait_for_timeout(config.RETRY_DELAY_MS)

    def get_element_text(self, element: Locator) -> str:
        element.wait_for(state="visible")
        return element.inner_text()

    def type_text(self, element: Locator, text: str) -> None:
        self.wait_for_element_clickable(element)
        element.clear()
        element.fill(text)

    def is_element_displayed(self, element: Locator) -> bool:
        try:
            return element.is_visible()
        except PlaywrightError:
            return False

    # ---- measurement ----

    def capture_performance_metrics(self) -> PerformanceMetrics:
        return PerformanceMetrics(**self.page.evaluate(_PERFORMANCE_SCRIPT))

    def measure_response_time(self, action: Callable[[], object]) -> TimedResult:
        start = time.perf_counter()
        result = action()
        elapsed = (time.perf_counter() - start) * 1000
        return TimedResult(response_time=elapsed, result=result)

    # ---- environment ----

    def _window_width(self) -> int:
        size = self.page.viewport_size
        if size is None:
            return self.page.evaluate("() => window.innerWidth")
        return size["width"]

    def is_mobile_device(self) -> bool:
        return self._window_width() <= MOBILE_MAX_WIDTH

    def is_tablet_device(self) -> bool:
        return MOBILE_MAX_WIDTH < self._window_width() <= TABLET_MAX_WIDTH

    def set_network_condition(self, condition: str) -> bool:
        """Throttle the page via CDP; unknown condition names are ignored."""
        profile = NETWORK_CONDITIONS.get(condition)
        if profile is None:
            return False
        session = self.page.context.new_cdp_session(self.page)
        session.send("Network.enable")
        session.send("Network.emulateNetworkConditions", profile.to_cdp())
        logger.info("network condition set to %s", condition)
        return True

    def take_screenshot(self, filename: Optional[str] = None) -> str:
        timestamp = datetime.now().isoformat().replace(":", "-").replace(".", "-")
        name = filename or f"debug_screenshot_{timestamp}.png"
        directory = Path(config.SCREENSHOT_DIR)
        directory.mkdir(parents=True, exist_ok=True)
        self.page.screenshot(path=str(directory / name))
        return name
