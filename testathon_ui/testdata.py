"""
Test data for the testathon.live suite.

Static enumerations, generated combinations and a snapshot of the 25-phone
catalog. Tests wire these into fixtures and parametrization.
"""

import random
from itertools import combinations
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from testathon_ui import config
from testathon_ui.models import BRAND_NAMES, PriceRange, ProductRecord, SortType
from testathon_ui.pages.product_listing import extract_brand_from_title, extract_price_value


class PriceRangeCase(BaseModel):
    min_price: float
    max_price: float
    description: str
    expected_brands: List[str] = Field(default_factory=list)


class FilterScenario(BaseModel):
    name: str
    brands: List[str]
    price_range: PriceRange
    sort_type: str
    view_type: str
    expected_results: str


class EdgeCaseScenario(BaseModel):
    name: str
    brands: List[str]
    price_range: PriceRange
    expected_result: str
    description: str


class ScenarioAction(BaseModel):
    type: str
    value: Any = None


class PerformanceScenario(BaseModel):
    name: str
    actions: List[ScenarioAction]
    expected_response_time: int  # ms


# ---------- Login ----------
LOGIN_USERNAMES = [
    "demouser",
    "image_not_loading_user",
    "existing_orders_user",
    "fav_user",
]
LOCKED_USERNAME = "locked_user"
VALID_PASSWORD = "testingisfun99"
INVALID_PASSWORD = "wrongpassword"
EMPTY_FIELDS_ERROR = "Please fill out username and password"
LOCKED_ACCOUNT_ERROR = "Your account has been locked"

# ---------- Catalog snapshot (title, displayed price) ----------
CATALOG = [
    ("iPhone 12", "$799.00"),
    ("iPhone 12 Mini", "$699.00"),
    ("iPhone 12 Pro", "$999.00"),
    ("iPhone 12 Pro Max", "$1,099.00"),
    ("iPhone 11", "$699.00"),
    ("iPhone 11 Pro", "$999.00"),
    ("iPhone XS Max", "$1,249.00"),
    ("iPhone XR", "$499.00"),
    ("Galaxy S20", "$999.00"),
    ("Galaxy S20+", "$1,199.00"),
    ("Galaxy S20 Ultra", "$1,399.00"),
    ("Galaxy S10", "$899.00"),
    ("Galaxy S9", "$699.00"),
    ("Galaxy Note 20", "$1,049.00"),
    ("Galaxy Note 20 Ultra", "$1,299.00"),
    ("Galaxy Z Flip", "$1,380.00"),
    ("Pixel 4", "$799.00"),
    ("Pixel 3", "$699.00"),
    ("Pixel 2", "$399.00"),
    ("One Plus 8", "$699.00"),
    ("One Plus 8T", "$849.00"),
    ("One Plus 8 Pro", "$899.00"),
    ("One Plus 7 Pro", "$869.00"),
    ("One Plus 7T", "$599.00"),
    ("One Plus 7", "$449.00"),
]

# price bucket -> [low, high) in dollars
PRICE_BUCKETS = {
    "under500": (0, 500),
    "500to800": (500, 800),
    "800to1200": (800, 1200),
    "over1200": (1200, float("inf")),
}


def catalog_products() -> List[ProductRecord]:
    """The catalog snapshot as freshly scraped Product Records."""
    return [
        ProductRecord(
            index=i,
            title=title,
            brand=extract_brand_from_title(title),
            price=extract_price_value(price_text),
            price_text=price_text,
            is_available=True,
        )
        for i, (title, price_text) in enumerate(CATALOG)
    ]


def get_brands() -> List[str]:
    return list(BRAND_NAMES)


def get_brand_combinations() -> List[List[str]]:
    """Every non-empty brand subset, singles first, all brands last."""
    brands = get_brands()
    return [
        list(combo)
        for size in range(1, len(brands) + 1)
        for combo in combinations(brands, size)
    ]


def get_price_ranges() -> List[PriceRangeCase]:
    return [
        PriceRangeCase(min_price=0, max_price=500, description="Budget phones",
                       expected_brands=["iPhone", "Pixel", "OnePlus"]),
        PriceRangeCase(min_price=400, max_price=700, description="Mid-range phones",
                       expected_brands=["iPhone", "Galaxy", "Pixel", "OnePlus"]),
        PriceRangeCase(min_price=600, max_price=900, description="Premium phones",
                       expected_brands=["iPhone", "Galaxy", "Pixel", "OnePlus"]),
        PriceRangeCase(min_price=800, max_price=1200, description="High-end phones",
                       expected_brands=["iPhone", "Galaxy", "OnePlus"]),
        PriceRangeCase(min_price=1000, max_price=1500, description="Flagship phones",
                       expected_brands=["iPhone", "Galaxy"]),
        PriceRangeCase(min_price=1300, max_price=9999, description="Ultra-premium phones",
                       expected_brands=["Galaxy"]),
    ]


def get_price_boundary_values() -> List[Dict[str, Any]]:
    return [
        # valid boundaries
        {"min_price": 0, "max_price": 1, "description": "Minimum valid range"},
        {"min_price": 0.01, "max_price": 0.02, "description": "Decimal precision test"},
        {"min_price": 499, "max_price": 500, "description": "Boundary around 500"},
        {"min_price": 799, "max_price": 800, "description": "Boundary around 800"},
        {"min_price": 999, "max_price": 1000, "description": "Boundary around 1000"},
        {"min_price": 9998, "max_price": 9999, "description": "Maximum valid range"},
        # edge cases
        {"min_price": 0, "max_price": 0, "description": "Zero range"},
        {"min_price": 500, "max_price": 500, "description": "Single price point"},
        {"min_price": 1000, "max_price": 999, "description": "Invalid range (min > max)"},
    ]


def get_invalid_inputs() -> Dict[str, list]:
    return {
        "prices": [
            {"min_price": -100, "max_price": 500, "description": "Negative minimum price"},
            {"min_price": 0, "max_price": -100, "description": "Negative maximum price"},
            {"min_price": -100, "max_price": -50, "description": "Both negative prices"},
            {"min_price": "abc", "max_price": 500, "description": "Alphabetic minimum price"},
            {"min_price": 500, "max_price": "xyz", "description": "Alphabetic maximum price"},
            {"min_price": "!@#", "max_price": "$%^", "description": "Special characters"},
            {"min_price": 999999999, "max_price": 999999999, "description": "Extremely large numbers"},
            {"min_price": 0.001, "max_price": 0.002, "description": "Too precise decimals"},
        ],
        "brands": ["InvalidBrand", "NotExistingBrand", "12345", "!@#$%", "", None],
    }


def get_sort_types() -> List[Dict[str, str]]:
    """All sort orders a shopper might expect; only some map to a SortType."""
    return [
        {"value": "price_asc", "description": "Price: Low to High"},
        {"value": "price_desc", "description": "Price: High to Low"},
        {"value": "name_asc", "description": "Name: A to Z"},
        {"value": "name_desc", "description": "Name: Z to A"},
        {"value": "popularity", "description": "Popularity"},
        {"value": "rating", "description": "Customer Rating"},
        {"value": "newest", "description": "Newest First"},
    ]


def get_supported_sort_types() -> List[str]:
    return [s.value for s in SortType]


def get_view_types() -> List[str]:
    return ["grid", "list"]


def get_results_per_page_options() -> List[int]:
    return [12, 24, 36, 48, 60]


def get_complex_filter_scenarios() -> List[FilterScenario]:
    return [
        FilterScenario(
            name="iPhone Premium Range",
            brands=["iPhone"],
            price_range=PriceRange(min_price=800, max_price=1200),
            sort_type="price_asc",
            view_type="grid",
            expected_results="iPhone products between $800-$1200 sorted by price ascending",
        ),
        FilterScenario(
            name="Budget Android Phones",
            brands=["Galaxy", "Pixel", "OnePlus"],
            price_range=PriceRange(min_price=400, max_price=700),
            sort_type="price_desc",
            view_type="list",
            expected_results="Android phones under $700 sorted by price descending",
        ),
        FilterScenario(
            name="High-End Multi-Brand",
            brands=["iPhone", "Galaxy"],
            price_range=PriceRange(min_price=1000, max_price=1500),
            sort_type="name_asc",
            view_type="grid",
            expected_results="Premium iPhone and Galaxy phones sorted alphabetically",
        ),
        FilterScenario(
            name="All Brands Mid-Range",
            brands=["iPhone", "Galaxy", "Pixel", "OnePlus"],
            price_range=PriceRange(min_price=600, max_price=900),
            sort_type="price_asc",
            view_type="list",
            expected_results="All brands in mid-range price sorted by price",
        ),
    ]


def get_performance_test_scenarios() -> List[PerformanceScenario]:
    return [
        PerformanceScenario(
            name="Rapid Filter Changes",
            actions=[
                ScenarioAction(type="selectBrand", value="iPhone"),
                ScenarioAction(type="wait", value=100),
                ScenarioAction(type="selectBrand", value="Galaxy"),
                ScenarioAction(type="wait", value=100),
                ScenarioAction(type="deselectBrand", value="iPhone"),
                ScenarioAction(type="wait", value=100),
                ScenarioAction(type="setPriceRange", value={"min_price": 500, "max_price": 800}),
                ScenarioAction(type="wait", value=100),
            ],
            expected_response_time=2000,
        ),
        PerformanceScenario(
            name="Complex Filter Application",
            actions=[
                ScenarioAction(type="selectMultipleBrands", value=["iPhone", "Galaxy", "Pixel"]),
                ScenarioAction(type="setPriceRange", value={"min_price": 700, "max_price": 1200}),
                ScenarioAction(type="applySortFilter", value="price_desc"),
                ScenarioAction(type="changeViewType", value="list"),
            ],
            expected_response_time=3000,
        ),
    ]


def get_edge_case_scenarios() -> List[EdgeCaseScenario]:
    return [
        EdgeCaseScenario(
            name="No Results Scenario",
            brands=["Pixel"],
            price_range=PriceRange(min_price=2000, max_price=3000),
            expected_result="noResults",
            description="Filter combination that yields no products",
        ),
        EdgeCaseScenario(
            name="All Products Scenario",
            brands=["iPhone", "Galaxy", "Pixel", "OnePlus"],
            price_range=PriceRange(min_price=0, max_price=9999),
            expected_result="allProducts",
            description="Filter combination that shows all products",
        ),
        EdgeCaseScenario(
            name="Single Product Range",
            brands=["iPhone"],
            price_range=PriceRange(min_price=1099, max_price=1099),
            expected_result="singleProduct",
            description="Very specific filter that should show one product",
        ),
    ]


def get_network_conditions() -> List[Dict[str, str]]:
    return [
        {"name": "fast3G", "description": "Fast 3G connection"},
        {"name": "slow3G", "description": "Slow 3G connection"},
        {"name": "offline", "description": "Offline condition"},
    ]


def get_random_test_data(seed: Optional[int] = None) -> Dict[str, Any]:
    rng = random.Random(seed)
    brands = get_brands()
    return {
        "brand_combination": rng.sample(brands, rng.randint(1, len(brands))),
        "price_range": PriceRange(
            min_price=rng.randint(0, 800),
            max_price=rng.randint(800, 2000),
        ),
        "sort_type": rng.choice(get_sort_types())["value"],
        "view_type": rng.choice(get_view_types()),
        "results_per_page": rng.choice(get_results_per_page_options()),
    }


def get_expected_product_counts() -> Dict[str, Any]:
    return {
        "total": 25,
        "by_brand": {
            "iPhone": 8,
            "Galaxy": 8,
            "Pixel": 3,
            "OnePlus": 6,
        },
        "by_price_range": {
            "under500": 3,
            "500to800": 8,
            "800to1200": 10,
            "over1200": 4,
        },
    }


def get_validation_rules() -> Dict[str, Any]:
    return {
        "price": {"min": 0, "max": 9999, "decimal_places": 2, "required": False},
        "brands": {"allowed_values": get_brands(), "multi_select": True, "required": False},
        "sort": {
            "allowed_values": [s["value"] for s in get_sort_types()],
            "required": False,
            "default": "default",
        },
    }


def get_test_config() -> Dict[str, Any]:
    return {
        "timeout": {
            "page_load": config.PAGE_LOAD_TIMEOUT_MS,
            "filter_application": config.FILTER_APPLICATION_MS,
            "element_wait": config.ELEMENT_WAIT_MS,
        },
        "retry": {"attempts": config.RETRY_ATTEMPTS, "delay": config.RETRY_DELAY_MS},
        "performance": {
            "max_response_time": config.MAX_RESPONSE_TIME_MS,
            "max_page_load_time": config.MAX_PAGE_LOAD_TIME_MS,
        },
        "screenshots": {"on_failure": True, "on_success": False, "path": config.SCREENSHOT_DIR},
    }
