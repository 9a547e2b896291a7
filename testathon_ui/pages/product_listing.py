import logging
import re
from typing import Dict, Iterable, List, Optional, Union

from playwright.sync_api import Error as PlaywrightError, Locator
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError
from pydantic import ValidationError

from testathon_ui import config
from testathon_ui.errors import UnknownFilterError
from testathon_ui.models import (
    UNKNOWN_BRAND,
    Brand,
    FilterCriteria,
    Mismatch,
    PagePerformance,
    PerformanceMetrics,
    ProductRecord,
    VerificationResult,
)
from testathon_ui.pages.base import BasePage

logger = logging.getLogger(__name__)

# css selectors we care about

SEL_PRODUCT_GRID = ".shelf-container"
SEL_PRODUCT_CARD = ".shelf-item"
SEL_PRODUCT_TITLE = ".shelf-item__title"
SEL_PRODUCT_PRICE = ".shelf-item__price"
SEL_CARD_PRICE_VALUE = ".shelf-item__price .val"
SEL_ADD_TO_CART = ".shelf-item__buy-btn"
SEL_CARD_ADD_TO_CART = '[data-testid="add-to-cart"], .add-to-cart, .shelf-item__buy-btn, button'
SEL_PRODUCT_COUNTER = ".products-found"
SEL_NO_RESULTS = ".no-results, .empty-state"
SEL_LOADING_SPINNER = ".loading, .spinner"
SEL_IMAGES = "img"

SEL_CART_ICON = ".float-cart, .bag"
SEL_CART_COUNTER = ".bag__quantity"

SEL_HOME_LINK = 'a[href="/"], a[href="#home"], .logo'
SEL_OFFERS_LINK = 'a:has-text("Offers")'
SEL_ORDERS_LINK = 'a:has-text("Orders")'
SEL_FAVOURITES_LINK = 'a:has-text("Favourites")'
SEL_SIGN_IN_LINK = 'a:has-text("Sign In")'

# title keyword -> canonical brand, checked in order
BRAND_KEYWORDS = [
    ("iPhone", Brand.IPHONE),
    ("Galaxy", Brand.GALAXY),
    ("Pixel", Brand.PIXEL),
    ("OnePlus", Brand.ONEPLUS),
    ("One Plus", Brand.ONEPLUS),
]

CART_UPDATE_TIMEOUT_MS = 5_000
LAZY_LOAD_SETTLE_MS = 1_000

_PRICE_NUMBER = re.compile(r"\d+(?:\.\d+)?")


def extract_price_value(price_text: Optional[str]) -> float:
    """Numeric value of a displayed price such as "$1,099.00"; 0 when unparseable."""
    if not price_text:
        return 0.0
    match = _PRICE_NUMBER.search(price_text.replace("$", "").replace(",", ""))
    return float(match.group()) if match else 0.0


def extract_brand_from_title(title: Optional[str]) -> str:
    if not title:
        return UNKNOWN_BRAND
    lowered = title.lower()
    for keyword, brand in BRAND_KEYWORDS:
        if keyword.lower() in lowered:
            return brand.value
    return UNKNOWN_BRAND


def _canonical_brand(name: str) -> str:
    try:
        return Brand.parse(name).value.lower()
    except UnknownFilterError:
        return str(name).lower()


def products_by_brand(products: Iterable[ProductRecord], brand: str) -> List[ProductRecord]:
    wanted = _canonical_brand(brand)
    return [p for p in products if p.brand.lower() == wanted]


def products_in_price_range(
    products: Iterable[ProductRecord], min_price: float, max_price: float
) -> List[ProductRecord]:
    return [p for p in products if min_price <= p.price <= max_price]


def verify_products_match_criteria(
    products: Iterable[ProductRecord],
    criteria: Union[FilterCriteria, Dict, None] = None,
) -> VerificationResult:
    """
    Check already-scraped products against brand and price criteria.

    An empty or missing brand list places no brand constraint. `passed` is
    True only when every product satisfies every supplied criterion.
    """
    if criteria is None:
        criteria = FilterCriteria()
    elif isinstance(criteria, dict):
        criteria = FilterCriteria(**criteria)

    products = list(products)
    wanted = {_canonical_brand(b) for b in criteria.brands or []}
    result = VerificationResult(total=len(products))

    for product in products:
        issues = []

        if wanted and product.brand.lower() not in wanted:
            issues.append(
                f"Brand {product.brand} not in filter: {', '.join(criteria.brands)}"
            )
        if criteria.min_price is not None and product.price < criteria.min_price:
            issues.append(f"Price {product.price} below minimum {criteria.min_price}")
        if criteria.max_price is not None and product.price > criteria.max_price:
            issues.append(f"Price {product.price} above maximum {criteria.max_price}")

        if issues:
            result.mismatched.append(Mismatch(product=product.title, issues=issues))
            result.passed = False
        else:
            result.matching += 1

    return result


def calculate_performance_score(metrics: PerformanceMetrics) -> int:
    score = 100
    if metrics.dom_content_loaded > 2000:
        score -= 20
    if metrics.load_complete > 3000:
        score -= 20
    if metrics.first_contentful_paint > 1500:
        score -= 20
    return max(0, score)


class ProductListingPage(BasePage):
    """The product catalog on the home page."""

    extract_price_value = staticmethod(extract_price_value)
    extract_brand_from_title = staticmethod(extract_brand_from_title)
    products_by_brand = staticmethod(products_by_brand)
    products_in_price_range = staticmethod(products_in_price_range)
    calculate_performance_score = staticmethod(calculate_performance_score)

    # ---- locators ----

    @property
    def product_grid(self) -> Locator:
        return self.page.locator(SEL_PRODUCT_GRID)

    @property
    def product_cards(self) -> Locator:
        return self.page.locator(SEL_PRODUCT_CARD)

    @property
    def product_titles(self) -> Locator:
        return self.page.locator(SEL_PRODUCT_TITLE)

    @property
    def product_prices(self) -> Locator:
        return self.page.locator(SEL_PRODUCT_PRICE)

    @property
    def add_to_cart_buttons(self) -> Locator:
        return self.page.locator(SEL_ADD_TO_CART)

    @property
    def product_counter(self) -> Locator:
        return self.page.locator(SEL_PRODUCT_COUNTER)

    @property
    def no_results_message(self) -> Locator:
        return self.page.locator(SEL_NO_RESULTS)

    @property
    def loading_spinner(self) -> Locator:
        return self.page.locator(SEL_LOADING_SPINNER)

    @property
    def cart_icon(self) -> Locator:
        return self.page.locator(SEL_CART_ICON)

    @property
    def cart_counter(self) -> Locator:
        return self.page.locator(SEL_CART_COUNTER)

    @property
    def home_link(self) -> Locator:
        return self.page.locator(SEL_HOME_LINK)

    @property
    def offers_link(self) -> Locator:
        return self.page.locator(SEL_OFFERS_LINK)

    @property
    def orders_link(self) -> Locator:
        return self.page.locator(SEL_ORDERS_LINK)

    @property
    def favourites_link(self) -> Locator:
        return self.page.locator(SEL_FAVOURITES_LINK)

    @property
    def sign_in_link(self) -> Locator:
        return self.page.locator(SEL_SIGN_IN_LINK)

    # ---- loading ----

    def open(self, path: str = "/") -> None:
        super().open(path)
        self.wait_for_products_to_load()

    def wait_for_products_to_load(self) -> None:
        spinner = self.loading_spinner.first
        try:
            spinner.wait_for(state="visible", timeout=config.SPINNER_APPEAR_MS)
            spinner.wait_for(state="hidden", timeout=config.PAGE_LOAD_TIMEOUT_MS)
        except PlaywrightTimeoutError:
            pass  # no spinner on this render

        self.product_grid.first.wait_for(state="visible", timeout=config.PAGE_LOAD_TIMEOUT_MS)
        self.wait_until(
            lambda: self.product_cards.count() > 0,
            timeout_ms=config.PAGE_LOAD_TIMEOUT_MS,
            message="No product cards found within 10 seconds",
        )

    # ---- scraping ----

    def get_all_products(self) -> List[ProductRecord]:
        """Parse every rendered card; a card that fails to parse is skipped."""
        self.wait_for_products_to_load()

        cards = self.product_cards
        products: List[ProductRecord] = []

        for i in range(cards.count()):
            card = cards.nth(i)
            try:
                title = self.get_element_text(card.locator(SEL_PRODUCT_TITLE).first).strip()
                price_text = self.get_element_text(card.locator(SEL_CARD_PRICE_VALUE).first).strip()
                products.append(
                    ProductRecord(
                        index=i,
                        title=title,
                        brand=extract_brand_from_title(title),
                        price=extract_price_value(price_text),
                        price_text=price_text,
                        is_available=self.is_element_displayed(card.locator(SEL_ADD_TO_CART).first),
                    )
                )
            except (PlaywrightError, ValidationError) as e:
                logger.warning("Error parsing product at index %d: %s", i, e)

        return products

    def get_product_count(self) -> int:
        return self.product_cards.count()

    def get_displayed_product_count(self) -> int:
        """Number shown by the "N Product(s) found" counter, else the card count."""
        if self.product_counter.count() == 0:
            return self.get_product_count()
        text = self.get_element_text(self.product_counter.first)
        match = re.search(r"\d+", text)
        return int(match.group()) if match else 0

    def get_layout_counts(self) -> Dict[str, int]:
        """Counts of the per-card parts; on a healthy render each equals the card count."""
        return {
            "cards": self.product_cards.count(),
            "titles": self.product_titles.count(),
            "prices": self.product_prices.count(),
            "buy_buttons": self.add_to_cart_buttons.count(),
        }

    def get_visible_navigation(self) -> List[str]:
        links = {
            "home": self.home_link,
            "offers": self.offers_link,
            "orders": self.orders_link,
            "favourites": self.favourites_link,
            "sign_in": self.sign_in_link,
            "cart": self.cart_icon,
        }
        return [name for name, link in links.items() if link.count() and self.is_element_displayed(link.first)]

    def get_products_by_brand(self, brand: str) -> List[ProductRecord]:
        return products_by_brand(self.get_all_products(), brand)

    def get_products_in_price_range(self, min_price: float, max_price: float) -> List[ProductRecord]:
        return products_in_price_range(self.get_all_products(), min_price, max_price)

    def verify_products_match_criteria(
        self,
        criteria: Union[FilterCriteria, Dict, None] = None,
        products: Optional[List[ProductRecord]] = None,
    ) -> VerificationResult:
        if products is None:
            products = self.get_all_products()
        return verify_products_match_criteria(products, criteria)

    def get_image_details(self, limit: int = 10) -> List[Dict[str, Optional[str]]]:
        images = self.page.locator(SEL_IMAGES)
        details = []
        for i in range(min(images.count(), limit)):
            img = images.nth(i)
            details.append({"src": img.get_attribute("src"), "alt": img.get_attribute("alt")})
        return details

    # ---- cart ----

    def add_product_to_cart(self, index: int) -> None:
        cards = self.product_cards
        count = cards.count()
        if index < 0 or index >= count:
            raise IndexError(
                f"Product index {index} out of range. Only {count} products available."
            )

        button = cards.nth(index).locator(SEL_CARD_ADD_TO_CART).first
        initial = self.get_cart_count()
        self.safe_click(button)

        self.wait_until(
            lambda: self.get_cart_count() > initial,
            timeout_ms=CART_UPDATE_TIMEOUT_MS,
            message="Cart count did not update after adding product",
        )

    def get_cart_count(self) -> int:
        counter = self.cart_counter
        if counter.count() == 0:
            return 0
        try:
            return int(counter.first.inner_text().strip() or 0)
        except (PlaywrightError, ValueError):
            return 0

    def is_no_results_displayed(self) -> bool:
        return self.is_element_displayed(self.no_results_message.first)

    # ---- performance ----

    def verify_page_load_performance(self) -> PagePerformance:
        metrics = self.capture_performance_metrics()
        return PagePerformance(
            **metrics.model_dump(),
            performance_score=calculate_performance_score(metrics),
        )

    def scroll_to_bottom(self) -> None:
        self.page.evaluate("() => window.scrollTo(0, document.body.scrollHeight)")
        self.page.wait_for_timeout(LAZY_LOAD_SETTLE_MS)

    def refresh_page(self) -> None:
        self.page.reload(wait_until="domcontentloaded")
        self.wait_for_products_to_load()
