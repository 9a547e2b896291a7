from testathon_ui.pages.base import BasePage, NETWORK_CONDITIONS
from testathon_ui.pages.filter_panel import FilterPanel
from testathon_ui.pages.login import LoginPage
from testathon_ui.pages.product_listing import ProductListingPage

__all__ = [
    "BasePage",
    "FilterPanel",
    "LoginPage",
    "NETWORK_CONDITIONS",
    "ProductListingPage",
]
