import pytest

from testathon_ui import config
from testathon_ui.models import Brand, Capability
from testathon_ui.testdata import get_brands, get_expected_product_counts, get_network_conditions

pytestmark = pytest.mark.e2e

THROTTLED = [c["name"] for c in get_network_conditions() if c["name"] != "offline"]


@pytest.fixture(autouse=True)
def reset_filters(filters, listing):
    if filters.clear_all_filters() is Capability.PRESENT:
        listing.wait_for_products_to_load()


@pytest.mark.parametrize("brand", get_brands())
def test_single_brand_filter(require, filters, listing, baseline, brand):
    require("filter_panel", f"brand:{brand}")

    timed = filters.measure_filter_response_time(lambda: filters.select_brand_filter(brand))
    listing.wait_for_products_to_load()
    products = listing.get_all_products()

    assert timed.response_time < config.MAX_RESPONSE_TIME_MS + config.FILTER_SETTLE_MS
    assert listing.verify_products_match_criteria({"brands": [brand]}, products).passed
    assert 0 < len(products) <= len(baseline)


def test_filter_state_reflects_selection(require, filters):
    require("filter_panel", "brand:iPhone")

    filters.select_brand_filter("iPhone")

    assert filters.get_current_filter_state().selected_brands == [Brand.IPHONE]


def test_clear_restores_full_catalog(require, filters, listing, baseline):
    require("filter_panel", "brand:Pixel")

    filters.select_brand_filter("Pixel")
    assert filters.clear_all_filters() is Capability.PRESENT
    listing.wait_for_products_to_load()

    assert listing.get_product_count() == len(baseline)
    assert filters.get_selected_brand_filters() == []


def test_price_range_filter(require, filters, listing):
    require("filter_panel", "price_inputs")

    assert filters.set_price_range(500, 800) is Capability.PRESENT
    listing.wait_for_products_to_load()

    assert listing.verify_products_match_criteria({"min_price": 500, "max_price": 800}).passed


def test_unfiltered_catalog_matches_brand_counts(listing, baseline):
    expected = get_expected_product_counts()["by_brand"]
    for brand, count in expected.items():
        assert len(listing.verify_products_match_criteria({"brands": [brand]}, baseline).mismatched) \
            == len(baseline) - count


@pytest.mark.parametrize("condition", THROTTLED)
def test_catalog_loads_on_throttled_network(listing, condition):
    if config.BROWSER != "chromium":
        pytest.skip("network throttling needs the Chromium DevTools protocol")

    assert listing.set_network_condition(condition)
    try:
        timed = listing.measure_response_time(listing.refresh_page)
    finally:
        listing.set_network_condition("fast3G")
    assert listing.get_product_count() > 0
    assert timed.response_time < config.TIMEOUT_MS
