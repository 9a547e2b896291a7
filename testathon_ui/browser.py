from typing import Optional, Tuple

from playwright.sync_api import Browser, BrowserContext, Page, Playwright

from testathon_ui import config

BROWSER_NAMES = ("chromium", "firefox", "webkit")


def launch_browser(
    playwright: Playwright,
    name: str = config.BROWSER,
    headless: Optional[bool] = None,
) -> Browser:
    if name not in BROWSER_NAMES:
        raise ValueError(f"Unsupported browser {name!r}; expected one of {', '.join(BROWSER_NAMES)}")
    if headless is None:
        headless = config.HEADLESS
    return getattr(playwright, name).launch(headless=headless)


def new_page(browser: Browser) -> Tuple[BrowserContext, Page]:
    """Fresh context + page with the default step timeout applied."""
    context = browser.new_context()
    page = context.new_page()
    page.set_default_timeout(config.TIMEOUT_MS)
    return context, page
