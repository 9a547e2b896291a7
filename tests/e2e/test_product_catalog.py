import time

import pytest

from testathon_ui import config
from testathon_ui.pages.product_listing import products_by_brand
from testathon_ui.testdata import PRICE_BUCKETS, get_brands, get_expected_product_counts

pytestmark = pytest.mark.e2e

EXPECTED = get_expected_product_counts()


def test_catalog_has_every_product(listing, baseline):
    assert len(baseline) == EXPECTED["total"]
    assert listing.get_product_count() == EXPECTED["total"]
    assert listing.get_displayed_product_count() == EXPECTED["total"]


def test_product_details_are_mostly_valid(baseline):
    titled = [p for p in baseline if p.has_valid_title]
    priced = [p for p in baseline if p.price > 0]
    branded = [p for p in baseline if p.brand in get_brands()]

    for group in (titled, priced, branded):
        assert len(group) / len(baseline) > 0.9


def test_brand_distribution(baseline):
    by_brand = {brand: len(products_by_brand(baseline, brand)) for brand in get_brands()}

    assert sum(by_brand.values()) == len(baseline)
    assert by_brand == EXPECTED["by_brand"]


def test_price_distribution(baseline):
    prices = [p.price for p in baseline]
    buckets = {
        name: sum(1 for price in prices if low <= price < high)
        for name, (low, high) in PRICE_BUCKETS.items()
    }

    assert buckets == EXPECTED["by_price_range"]
    assert 0 < min(prices) < max(prices) < 10_000
    assert 500 < sum(prices) / len(prices) < 1_200


def test_every_card_is_complete(listing, baseline):
    counts = listing.get_layout_counts()
    assert set(counts.values()) == {len(baseline)}


def test_cart_is_reachable(listing):
    assert "cart" in listing.get_visible_navigation()


def test_images_have_sources(listing):
    images = listing.get_image_details()
    assert images
    assert all(img["src"] for img in images)


def test_add_first_product_to_cart(listing):
    before = listing.get_cart_count()
    listing.add_product_to_cart(0)
    assert listing.get_cart_count() == before + 1


def test_add_to_cart_rejects_index_past_the_end(listing, baseline):
    with pytest.raises(IndexError):
        listing.add_product_to_cart(len(baseline))


def test_page_load_performance(listing):
    listing.refresh_page()
    perf = listing.verify_page_load_performance()

    assert perf.dom_content_loaded < config.MAX_PAGE_LOAD_TIME_MS
    assert perf.performance_score >= 60


def test_scraping_is_fast_enough(listing):
    start = time.perf_counter()
    products = listing.get_all_products()
    elapsed_ms = (time.perf_counter() - start) * 1000

    assert len(products) == EXPECTED["total"]
    assert elapsed_ms < 10_000
