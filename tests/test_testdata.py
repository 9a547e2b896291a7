import pytest

from testathon_ui import testdata
from testathon_ui.errors import UnknownFilterError
from testathon_ui.models import Brand, SortType
from testathon_ui.pages.base import NETWORK_CONDITIONS
from testathon_ui.pages.product_listing import (
    products_by_brand,
    products_in_price_range,
    verify_products_match_criteria,
)


def test_brand_combinations():
    combos = testdata.get_brand_combinations()

    assert len(combos) == 15
    assert len({tuple(c) for c in combos}) == 15
    assert combos[:4] == [["iPhone"], ["Galaxy"], ["Pixel"], ["OnePlus"]]
    assert combos[-1] == ["iPhone", "Galaxy", "Pixel", "OnePlus"]


class TestCatalogSnapshot:
    def test_counts_add_up(self):
        expected = testdata.get_expected_product_counts()
        assert sum(expected["by_brand"].values()) == expected["total"]
        assert sum(expected["by_price_range"].values()) == expected["total"]

    def test_snapshot_matches_expected_counts(self, catalog):
        expected = testdata.get_expected_product_counts()

        assert len(catalog) == expected["total"]
        for brand, count in expected["by_brand"].items():
            assert len(products_by_brand(catalog, brand)) == count, brand
        for bucket, (low, high) in testdata.PRICE_BUCKETS.items():
            in_bucket = [p for p in catalog if low <= p.price < high]
            assert len(in_bucket) == expected["by_price_range"][bucket], bucket

    def test_every_title_resolves_to_a_brand(self, catalog):
        assert all(p.brand in testdata.get_brands() for p in catalog)
        assert all(p.has_valid_title for p in catalog)


@pytest.mark.parametrize("case", testdata.get_price_ranges(), ids=lambda c: c.description)
def test_price_range_expected_brands(catalog, case):
    found = {p.brand for p in products_in_price_range(catalog, case.min_price, case.max_price)}
    assert found == set(case.expected_brands)


@pytest.mark.parametrize("scenario", testdata.get_edge_case_scenarios(), ids=lambda s: s.name)
def test_edge_case_scenarios(catalog, scenario):
    result = verify_products_match_criteria(catalog, {
        "brands": scenario.brands,
        "min_price": scenario.price_range.min_price,
        "max_price": scenario.price_range.max_price,
    })
    expected = {"noResults": 0, "allProducts": 25, "singleProduct": 1}[scenario.expected_result]
    assert result.matching == expected


def test_invalid_brands_do_not_parse():
    for name in testdata.get_invalid_inputs()["brands"]:
        with pytest.raises(UnknownFilterError):
            Brand.parse(name)


def test_sort_types():
    supported = testdata.get_supported_sort_types()
    assert supported == [s.value for s in SortType]
    offered = [s["value"] for s in testdata.get_sort_types()]
    assert set(supported) <= set(offered)
    assert "popularity" in offered and "popularity" not in supported


def test_complex_scenarios_use_known_values():
    for scenario in testdata.get_complex_filter_scenarios():
        for name in scenario.brands:
            Brand.parse(name)
        SortType.parse(scenario.sort_type)
        assert scenario.view_type in testdata.get_view_types()
        assert scenario.price_range.min_price < scenario.price_range.max_price


def test_performance_scenarios():
    scenarios = testdata.get_performance_test_scenarios()
    assert [s.expected_response_time for s in scenarios] == [2000, 3000]
    assert scenarios[0].actions[0].value == "iPhone"


class TestRandomData:
    def test_seeded_is_reproducible(self):
        assert testdata.get_random_test_data(7) == testdata.get_random_test_data(7)

    @pytest.mark.parametrize("seed", range(5))
    def test_values_within_bounds(self, seed):
        data = testdata.get_random_test_data(seed)

        assert 1 <= len(data["brand_combination"]) <= 4
        assert set(data["brand_combination"]) <= set(testdata.get_brands())
        assert 0 <= data["price_range"].min_price <= 800 <= data["price_range"].max_price <= 2000
        assert data["view_type"] in testdata.get_view_types()
        assert data["results_per_page"] in testdata.get_results_per_page_options()


def test_test_config_reflects_settings():
    settings = testdata.get_test_config()
    assert settings["retry"] == {"attempts": 3, "delay": 1000}
    assert settings["timeout"]["page_load"] == 10_000
    assert settings["screenshots"]["on_failure"] is True


@pytest.mark.parametrize("case", testdata.get_price_boundary_values(), ids=lambda c: c["description"])
def test_price_boundaries_are_inclusive(catalog, case):
    low, high = case["min_price"], case["max_price"]
    in_range = products_in_price_range(catalog, low, high)

    assert len(in_range) == verify_products_match_criteria(
        catalog, {"min_price": low, "max_price": high}
    ).matching
    if low > high:
        assert in_range == []
    assert all(low <= p.price <= high for p in in_range)


def test_single_price_point_boundary(catalog):
    assert [p.title for p in products_in_price_range(catalog, 499, 500)] == ["iPhone XR"]


@pytest.mark.parametrize("condition", testdata.get_network_conditions(), ids=lambda c: c["name"])
def test_network_conditions_have_profiles(condition):
    assert condition["name"] in NETWORK_CONDITIONS


class TestValidationRules:
    def test_brands_match_enum(self):
        rules = testdata.get_validation_rules()["brands"]
        assert rules["allowed_values"] == [b.value for b in Brand]
        assert rules["multi_select"] is True

    def test_supported_sorts_are_allowed(self):
        rules = testdata.get_validation_rules()["sort"]
        assert {s.value for s in SortType} <= set(rules["allowed_values"])
        assert rules["default"] == "default"

    def test_valid_boundaries_fit_price_rule(self):
        rules = testdata.get_validation_rules()["price"]
        for case in testdata.get_price_boundary_values():
            if case["min_price"] <= case["max_price"]:
                assert rules["min"] <= case["min_price"] <= case["max_price"] <= rules["max"]
