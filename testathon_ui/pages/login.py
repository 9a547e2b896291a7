from playwright.sync_api import Locator

from testathon_ui import config
from testathon_ui.pages.base import BasePage

SEL_LOGO = "img"
SEL_USERNAME_DROPDOWN = '//div[contains(text(), "Select Username")]'
SEL_PASSWORD_DROPDOWN = '//div[contains(text(), "Select Password")]'
SEL_LOGIN_BTN = "#login-btn"
SEL_LOGOUT_BTN = "#logout"
SEL_API_ERROR = ".api-error"

LOGOUT_TIMEOUT_MS = 5_000


def _option(text: str) -> str:
    return f'//div[contains(text(), "{text}")]'


class LoginPage(BasePage):
    """The /signin page with its username and password pickers."""

    @property
    def logo(self) -> Locator:
        return self.page.locator(SEL_LOGO).first

    @property
    def username_dropdown(self) -> Locator:
        return self.page.locator(SEL_USERNAME_DROPDOWN).first

    @property
    def password_dropdown(self) -> Locator:
        return self.page.locator(SEL_PASSWORD_DROPDOWN).first

    @property
    def login_button(self) -> Locator:
        return self.page.locator(SEL_LOGIN_BTN)

    @property
    def logout_button(self) -> Locator:
        return self.page.locator(SEL_LOGOUT_BTN)

    @property
    def api_error(self) -> Locator:
        return self.page.locator(SEL_API_ERROR)

    def open(self, path: str = config.SIGNIN_PATH) -> None:
        super().open(path)

    def select_username(self, username: str) -> None:
        self.safe_click(self.username_dropdown)
        self.safe_click(self.page.locator(_option(username)).first)

    def select_password(self, password: str) -> None:
        self.safe_click(self.password_dropdown)
        self.safe_click(self.page.locator(_option(password)).first)

    def submit(self) -> None:
        self.safe_click(self.login_button)

    def login(self, username: str, password: str) -> None:
        self.select_username(username)
        self.select_password(password)
        self.submit()

    def logout(self) -> None:
        self.logout_button.wait_for(state="visible", timeout=LOGOUT_TIMEOUT_MS)
        self.safe_click(self.logout_button)
        self.wait_until(
            lambda: "signin" in self.current_url(),
            timeout_ms=LOGOUT_TIMEOUT_MS,
            message="Expected to return to signin page after logout",
        )

    def error_message(self) -> str:
        return self.get_element_text(self.api_error)

    def is_logo_displayed(self) -> bool:
        return self.is_element_displayed(self.logo)
