import logging
from typing import Callable, Dict, Iterable, List, Union

from playwright.sync_api import Error as PlaywrightError, Locator
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from testathon_ui import config
from testathon_ui.errors import UnknownFilterError
from testathon_ui.models import (
    Brand,
    Capability,
    CapabilityReport,
    FilterState,
    InvalidInputReport,
    PriceRange,
    SortType,
    TimedResult,
    ViewType,
)
from testathon_ui.pages.base import BasePage

logger = logging.getLogger(__name__)

# ---- panel ----
SEL_FILTER_PANEL = ".filters"
SEL_FILTER_TOGGLE = ".filter-toggle, .filters-toggle"
SEL_CLEAR_ALL = 'button:has-text("Clear")'
SEL_APPLY = 'button:has-text("Apply")'
SEL_LOADING = '[data-testid="loading"], .loading, .spinner'

# ---- brand ----
SEL_BRAND_SECTION = '[data-testid="brand-filter"], .brand-filter, .filter-brand'
SEL_BRAND_OPTIONS = '[data-testid="brand-option"], .brand-option, input[type="checkbox"][name*="brand"]'
SEL_BRAND: Dict[Brand, str] = {
    Brand.IPHONE: 'input[value*="Apple"], input[value*="iPhone"], label:has-text("Apple"), label:has-text("iPhone")',
    Brand.GALAXY: 'input[value*="Samsung"], input[value*="Galaxy"], label:has-text("Samsung"), label:has-text("Galaxy")',
    Brand.PIXEL: 'input[value*="Google"], input[value*="Pixel"], label:has-text("Google"), label:has-text("Pixel")',
    Brand.ONEPLUS: 'input[value*="OnePlus"], label:has-text("OnePlus")',
}

# ---- price ----
SEL_PRICE_SECTION = '[data-testid="price-filter"], .price-filter, .filter-price'
SEL_MIN_PRICE = '[data-testid="min-price"], input[name*="min"], input[placeholder*="min"]'
SEL_MAX_PRICE = '[data-testid="max-price"], input[name*="max"], input[placeholder*="max"]'
SEL_PRICE_SLIDER = '[data-testid="price-slider"], .price-slider, input[type="range"]'
SEL_PRICE_RANGE_OPTIONS = '[data-testid="price-range"], .price-range, input[type="radio"][name*="price"]'

# ---- sort ----
SEL_SORT_SECTION = '[data-testid="sort"], .sort, .sorting'
SEL_SORT_DROPDOWN = '[data-testid="sort-dropdown"], .sort-dropdown, select[name*="sort"]'
SEL_SORT_OPTION: Dict[SortType, str] = {
    SortType.PRICE_ASC: 'option[value*="price_asc"], option:has-text("Low to High")',
    SortType.PRICE_DESC: 'option[value*="price_desc"], option:has-text("High to Low")',
    SortType.NAME_ASC: 'option[value*="name_asc"], option:has-text("A-Z")',
    SortType.NAME_DESC: 'option[value*="name_desc"], option:has-text("Z-A")',
}

# ---- view ----
SEL_VIEW_SECTION = '[data-testid="view"], .view-options, .view-toggle'
SEL_VIEW_BUTTON: Dict[ViewType, str] = {
    ViewType.GRID: '[data-testid="grid-view"], .grid-view, button:has-text("Grid")',
    ViewType.LIST: '[data-testid="list-view"], .list-view, button:has-text("List")',
}

# ---- pagination ----
SEL_PAGINATION = '[data-testid="pagination"], .pagination, .pager'
SEL_PER_PAGE = '[data-testid="per-page"], select[name*="per_page"], select[name*="limit"]'
SEL_NEXT_PAGE = '[data-testid="next-page"], .next-page, a:has-text("Next")'
SEL_PREV_PAGE = '[data-testid="prev-page"], .prev-page, a:has-text("Previous")'
SEL_PAGE_NUMBERS = '[data-testid="page-number"], .page-number, .pagination a[href*="page"]'

PANEL_TIMEOUT_MS = 10_000
TOGGLE_TIMEOUT_MS = 5_000
BRAND_SELECTION_PAUSE_MS = 500
DEFAULT_MAX_PRICE = 999_999


class FilterPanel(BasePage):
    """Brand, price, sort, view and pagination controls of the catalog."""

    # ---- locators ----

    @property
    def filter_panel(self) -> Locator:
        return self.page.locator(SEL_FILTER_PANEL)

    @property
    def filter_toggle(self) -> Locator:
        return self.page.locator(SEL_FILTER_TOGGLE)

    @property
    def clear_all_filters_btn(self) -> Locator:
        return self.page.locator(SEL_CLEAR_ALL)

    @property
    def apply_filters_btn(self) -> Locator:
        return self.page.locator(SEL_APPLY)

    @property
    def loading_indicator(self) -> Locator:
        return self.page.locator(SEL_LOADING)

    @property
    def brand_filter_section(self) -> Locator:
        return self.page.locator(SEL_BRAND_SECTION)

    @property
    def brand_filter_options(self) -> Locator:
        return self.page.locator(SEL_BRAND_OPTIONS)

    def brand_filter(self, brand: Union[Brand, str]) -> Locator:
        return self.page.locator(SEL_BRAND[Brand.parse(brand)])

    @property
    def price_filter_section(self) -> Locator:
        return self.page.locator(SEL_PRICE_SECTION)

    @property
    def min_price_input(self) -> Locator:
        return self.page.locator(SEL_MIN_PRICE)

    @property
    def max_price_input(self) -> Locator:
        return self.page.locator(SEL_MAX_PRICE)

    @property
    def price_slider(self) -> Locator:
        return self.page.locator(SEL_PRICE_SLIDER)

    @property
    def price_range_options(self) -> Locator:
        return self.page.locator(SEL_PRICE_RANGE_OPTIONS)

    @property
    def sort_section(self) -> Locator:
        return self.page.locator(SEL_SORT_SECTION)

    @property
    def sort_dropdown(self) -> Locator:
        return self.page.locator(SEL_SORT_DROPDOWN)

    def sort_option(self, sort_type: Union[SortType, str]) -> Locator:
        return self.page.locator(SEL_SORT_OPTION[SortType.parse(sort_type)])

    @property
    def view_section(self) -> Locator:
        return self.page.locator(SEL_VIEW_SECTION)

    def view_button(self, view_type: Union[ViewType, str]) -> Locator:
        return self.page.locator(SEL_VIEW_BUTTON[ViewType.parse(view_type)])

    @property
    def pagination_section(self) -> Locator:
        return self.page.locator(SEL_PAGINATION)

    @property
    def results_per_page_dropdown(self) -> Locator:
        return self.page.locator(SEL_PER_PAGE)

    @property
    def next_page_btn(self) -> Locator:
        return self.page.locator(SEL_NEXT_PAGE)

    @property
    def prev_page_btn(self) -> Locator:
        return self.page.locator(SEL_PREV_PAGE)

    @property
    def page_numbers(self) -> Locator:
        return self.page.locator(SEL_PAGE_NUMBERS)

    # ---- panel ----

    def _present(self, element: Locator) -> bool:
        """Visible right now; never waits."""
        return element.count() > 0 and self.is_element_displayed(element.first)

    def is_filter_panel_visible(self) -> bool:
        return self._present(self.filter_panel)

    def open_filter_panel(self) -> None:
        """Expand the panel on narrow screens, then wait for it to be visible."""
        if self.is_mobile_device() and not self.is_filter_panel_visible():
            if self._present(self.filter_toggle):
                self.safe_click(self.filter_toggle.first)
                self.filter_panel.first.wait_for(state="visible", timeout=TOGGLE_TIMEOUT_MS)
            else:
                logger.info("Filter toggle not found, panel might already be open")

        self.filter_panel.first.wait_for(state="visible", timeout=PANEL_TIMEOUT_MS)

    def wait_for_filter_application(self) -> None:
        indicator = self.loading_indicator.first
        try:
            indicator.wait_for(state="visible", timeout=config.SPINNER_APPEAR_MS)
            indicator.wait_for(state="hidden", timeout=config.PAGE_LOAD_TIMEOUT_MS)
        except PlaywrightTimeoutError:
            pass  # filters applied without a loading indicator

        self.page.wait_for_timeout(config.FILTER_SETTLE_MS)

    # ---- brand ----

    def _is_checked(self, control: Locator) -> bool:
        if control.get_attribute("type") == "checkbox":
            return control.is_checked()
        nested = control.locator('input[type="checkbox"]')
        if nested.count() > 0:
            return nested.first.is_checked()
        return control.get_attribute("aria-checked") == "true"

    def _set_brand(self, brand: Union[Brand, str], selected: bool) -> None:
        brand = Brand.parse(brand)
        self.open_filter_panel()

        control = self.brand_filter(brand).first
        self.scroll_to_element(control)
        if self._is_checked(control) != selected:
            self.safe_click(control)

        self.wait_for_filter_application()

    def select_brand_filter(self, brand: Union[Brand, str]) -> None:
        """Check the brand's filter; a no-op when it is already checked."""
        self._set_brand(brand, True)

    def deselect_brand_filter(self, brand: Union[Brand, str]) -> None:
        self._set_brand(brand, False)

    def select_multiple_brand_filters(self, brands: Iterable[Union[Brand, str]]) -> None:
        parsed = [Brand.parse(b) for b in brands]
        self.open_filter_panel()
        for brand in parsed:
            self.select_brand_filter(brand)
            self.page.wait_for_timeout(BRAND_SELECTION_PAUSE_MS)

    def get_selected_brand_filters(self) -> List[Brand]:
        selected = []
        for brand in Brand:
            control = self.brand_filter(brand)
            if control.count() > 0 and self._is_checked(control.first):
                selected.append(brand)
        return selected

    # ---- price ----

    def set_price_range(self, min_price: Union[float, str], max_price: Union[float, str]) -> Capability:
        """
        Type the bounds into the min/max inputs.

        Dual-handle sliders are detected but not dragged. Missing inputs are
        reported as ABSENT rather than raised.
        """
        self.open_filter_panel()

        outcome = Capability.ABSENT
        try:
            if self._present(self.min_price_input):
                self.type_text(self.min_price_input.first, str(min_price))
                outcome = Capability.PRESENT
            if self._present(self.max_price_input):
                self.type_text(self.max_price_input.first, str(max_price))
                outcome = Capability.PRESENT
        except PlaywrightError as e:
            logger.warning("Price inputs not usable: %s", e)
            return Capability.ERROR

        if outcome is Capability.ABSENT:
            logger.info("Price input fields not found")
            if self._present(self.price_slider):
                logger.info("Price slider found but slider dragging is not supported")

        self.wait_for_filter_application()
        return outcome

    def get_current_price_range(self) -> PriceRange:
        def read(element: Locator, default: float) -> float:
            if element.count() == 0:
                return default
            try:
                return float(element.first.input_value() or default)
            except (PlaywrightError, ValueError):
                return default

        return PriceRange(
            min_price=read(self.min_price_input, 0),
            max_price=read(self.max_price_input, DEFAULT_MAX_PRICE),
        )

    # ---- sort / view / pagination ----

    def apply_sort_filter(self, sort_type: Union[SortType, str]) -> Capability:
        sort_type = SortType.parse(sort_type)
        if not self._present(self.sort_dropdown):
            logger.info("Sort dropdown not found")
            return Capability.ABSENT

        try:
            option = self.sort_option(sort_type)
            if option.count() == 0:
                logger.info("Sort option %s not offered", sort_type.value)
                return Capability.ABSENT
            self.sort_dropdown.first.select_option(value=option.first.get_attribute("value"))
        except PlaywrightError as e:
            logger.warning("Sort dropdown not functional: %s", e)
            return Capability.ERROR

        self.wait_for_filter_application()
        return Capability.PRESENT

    def get_current_sort_type(self) -> str:
        if self.sort_dropdown.count() == 0:
            return "default"
        try:
            return self.sort_dropdown.first.input_value() or "default"
        except PlaywrightError:
            return "default"

    def change_view_type(self, view_type: Union[ViewType, str]) -> Capability:
        button = self.view_button(view_type)
        if not self._present(button):
            return Capability.ABSENT
        try:
            self.safe_click(button.first)
        except PlaywrightError as e:
            logger.warning("View toggle not functional: %s", e)
            return Capability.ERROR
        self.page.wait_for_timeout(config.FILTER_SETTLE_MS)
        return Capability.PRESENT

    def get_current_view_type(self) -> str:
        for view_type in (ViewType.GRID, ViewType.LIST):
            button = self.view_button(view_type)
            if button.count() == 0:
                continue
            classes = button.first.get_attribute("class") or ""
            if "active" in classes.split():
                return view_type.value
        return ViewType.GRID.value

    def change_results_per_page(self, per_page: int) -> Capability:
        if not self._present(self.results_per_page_dropdown):
            return Capability.ABSENT
        dropdown = self.results_per_page_dropdown.first
        if dropdown.locator(f'option[value="{per_page}"]').count() == 0:
            logger.info("Results per page option %d not offered", per_page)
            return Capability.ABSENT
        try:
            dropdown.select_option(value=str(per_page))
        except PlaywrightError as e:
            logger.warning("Results per page dropdown not functional: %s", e)
            return Capability.ERROR
        self.wait_for_filter_application()
        return Capability.PRESENT

    def _click_pager(self, element: Locator, label: str) -> Capability:
        if not self._present(element):
            logger.info("%s control not found", label)
            return Capability.ABSENT
        try:
            self.safe_click(element.first)
        except PlaywrightError as e:
            logger.warning("%s control not functional: %s", label, e)
            return Capability.ERROR
        self.wait_for_filter_application()
        return Capability.PRESENT

    def next_page(self) -> Capability:
        return self._click_pager(self.next_page_btn, "Next page")

    def previous_page(self) -> Capability:
        return self._click_pager(self.prev_page_btn, "Previous page")

    # ---- whole panel ----

    def clear_all_filters(self) -> Capability:
        """Best-effort reset; failures are logged and reported, never raised."""
        if not self.is_filter_panel_visible():
            return Capability.ABSENT
        try:
            if self._present(self.clear_all_filters_btn):
                self.safe_click(self.clear_all_filters_btn.first)
                self.wait_for_filter_application()
            else:
                for brand in self.get_selected_brand_filters():
                    self.deselect_brand_filter(brand)
        except PlaywrightError as e:
            logger.warning("Clearing filters failed: %s", e)
            return Capability.ERROR
        return Capability.PRESENT

    def apply_filters(self) -> Capability:
        if not self._present(self.apply_filters_btn):
            logger.info("Apply filters button not found, filters may apply automatically")
            return Capability.ABSENT
        try:
            self.safe_click(self.apply_filters_btn.first)
        except PlaywrightError as e:
            logger.warning("Apply filters button not functional: %s", e)
            return Capability.ERROR
        self.wait_for_filter_application()
        return Capability.PRESENT

    def get_current_filter_state(self) -> FilterState:
        return FilterState(
            selected_brands=self.get_selected_brand_filters(),
            price_range=self.get_current_price_range(),
            sort_type=self.get_current_sort_type(),
            view_type=self.get_current_view_type(),
        )

    def measure_filter_response_time(self, filter_action: Callable[[], object]) -> TimedResult:
        return self.measure_response_time(filter_action)

    # ---- capability probe ----

    def probe_capabilities(self) -> CapabilityReport:
        """Record which optional filter features the current page offers."""
        report = CapabilityReport()
        probes = {
            "filter_panel": self.filter_panel,
            "filter_toggle": self.filter_toggle,
            "brand_section": self.brand_filter_section,
            "brand_options": self.brand_filter_options,
            "price_section": self.price_filter_section,
            "price_ranges": self.price_range_options,
            "sort_section": self.sort_section,
            "view_section": self.view_section,
            "page_numbers": self.page_numbers,
            "clear_filters": self.clear_all_filters_btn,
            "apply_filters": self.apply_filters_btn,
            "price_inputs": self.min_price_input,
            "price_slider": self.price_slider,
            "sort": self.sort_dropdown,
            "view_toggle": self.view_button(ViewType.LIST),
            "pagination": self.pagination_section,
            "results_per_page": self.results_per_page_dropdown,
        }
        for brand in Brand:
            probes[f"brand:{brand.value}"] = self.brand_filter(brand)

        for feature, element in probes.items():
            try:
                count = element.count()
                if count and self.is_element_displayed(element.first):
                    report.record(feature, Capability.PRESENT, f"{count} match(es)")
                elif count:
                    report.record(feature, Capability.ABSENT, "in DOM but hidden")
                else:
                    report.record(feature, Capability.ABSENT)
            except PlaywrightError as e:
                report.record(feature, Capability.ERROR, str(e).splitlines()[0])

        logger.info(
            "Capabilities present: %s; absent: %s",
            report.features(Capability.PRESENT) or "none",
            report.features(Capability.ABSENT) or "none",
        )
        return report

    # ---- validation ----

    def check_invalid_filter_inputs(self, invalid_inputs: Dict) -> InvalidInputReport:
        """
        Feed invalid values to the filters and report the ones that were accepted.

        `invalid_inputs` has the shape of `testdata.get_invalid_inputs()`:
        {"prices": [{"min_price", "max_price", ...}], "brands": [...]}.
        """
        report = InvalidInputReport()
        prices = invalid_inputs.get("prices", [])

        if prices and not self.is_filter_panel_visible():
            logger.info("No filter panel; invalid price ranges not exercised")
            prices = []

        for case in prices:
            low, high = case["min_price"], case["max_price"]
            try:
                outcome = self.set_price_range(low, high)
            except PlaywrightError as e:
                # input errors come back as ERROR; anything raised is the panel itself
                logger.warning("Filter panel unavailable for price range %s-%s: %s", low, high, e)
                report.price_inputs = Capability.ERROR
                continue
            if outcome is Capability.ERROR:
                report.price_inputs = Capability.ERROR
            if outcome is not Capability.PRESENT:
                continue

            if report.price_inputs is not Capability.ERROR:
                report.price_inputs = Capability.PRESENT
            current = self.get_current_price_range()
            if _is_number(low) and _is_number(high) and \
                    (current.min_price, current.max_price) == (float(low), float(high)):
                report.price_range.fail(f"Invalid price range accepted: {low}-{high}")

        for name in invalid_inputs.get("brands", []):
            try:
                brand = Brand.parse(name)
            except UnknownFilterError:
                continue
            report.brand_selection.fail(f"Invalid brand accepted: {name!r} -> {brand.value}")

        return report


def _is_number(value) -> bool:
    try:
        float(value)
    except (TypeError, ValueError):
        return False
    return True
