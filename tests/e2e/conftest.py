import logging
import re

import pytest
from playwright.sync_api import Error as PlaywrightError

from testathon_ui.pages import BasePage, FilterPanel, ProductListingPage

logger = logging.getLogger(__name__)


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    outcome = yield
    report = outcome.get_result()
    setattr(item, f"rep_{report.when}", report)


@pytest.fixture(autouse=True)
def screenshot_on_failure(request, page):
    yield
    report = getattr(request.node, "rep_call", None)
    if report is None or not report.failed:
        return
    name = re.sub(r"[^\w.-]", "_", request.node.name) + ".png"
    try:
        BasePage(page).take_screenshot(name)
        logger.info("failure screenshot saved as %s", name)
    except PlaywrightError as e:
        logger.warning("failure screenshot not taken: %s", e)


@pytest.fixture(scope="module")
def listing(page):
    listing = ProductListingPage(page)
    listing.open()
    return listing


@pytest.fixture(scope="module")
def filters(page, listing):
    return FilterPanel(page)


@pytest.fixture(scope="module")
def baseline(listing):
    """Products scraped once per module before any filter is touched."""
    return listing.get_all_products()


@pytest.fixture(scope="module")
def capabilities(filters):
    return filters.probe_capabilities()


@pytest.fixture
def require(capabilities):
    """Skip the calling test unless every named feature was found by the probe."""

    def _require(*features):
        for feature in features:
            if not capabilities.is_present(feature):
                pytest.skip(capabilities.reason(feature))

    return _require
