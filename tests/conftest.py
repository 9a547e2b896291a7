import pytest
from playwright.sync_api import sync_playwright

from testathon_ui import config as settings
from testathon_ui.browser import launch_browser, new_page
from testathon_ui.testdata import catalog_products


def pytest_addoption(parser):
    parser.addoption(
        "--run-e2e",
        action="store_true",
        default=False,
        help="run the tests that drive a real browser against the live site",
    )


def pytest_collection_modifyitems(config, items):
    if config.getoption("--run-e2e") or settings.RUN_E2E:
        return
    skip_e2e = pytest.mark.skip(reason="live-site test; pass --run-e2e or set TESTATHON_E2E=1")
    for item in items:
        if "e2e" in item.keywords:
            item.add_marker(skip_e2e)


@pytest.fixture(scope="session")
def playwright_instance():
    with sync_playwright() as p:
        yield p


@pytest.fixture(scope="session")
def browser(playwright_instance):
    browser = launch_browser(playwright_instance)
    yield browser
    browser.close()


@pytest.fixture(scope="module")
def page(browser):
    context, page = new_page(browser)
    yield page
    context.close()


@pytest.fixture
def catalog():
    return catalog_products()
