import pytest

from testathon_ui.errors import PageTimeoutError
from testathon_ui.pages.login import (
    SEL_API_ERROR,
    SEL_LOGIN_BTN,
    SEL_LOGOUT_BTN,
    SEL_PASSWORD_DROPDOWN,
    SEL_USERNAME_DROPDOWN,
    LoginPage,
)

from fakes import FakeLocator, FakePage


@pytest.fixture
def clicks(monkeypatch):
    clicked = []
    monkeypatch.setattr(LoginPage, "safe_click", lambda self, element: clicked.append(element.selector))
    return clicked


def test_login_clicks_dropdowns_in_order(clicks):
    LoginPage(FakePage()).login("demouser", "testingisfun99")

    assert clicks == [
        SEL_USERNAME_DROPDOWN,
        '//div[contains(text(), "demouser")]',
        SEL_PASSWORD_DROPDOWN,
        '//div[contains(text(), "testingisfun99")]',
        SEL_LOGIN_BTN,
    ]


def test_logout_waits_for_signin_url(clicks):
    page = FakePage({SEL_LOGOUT_BTN: FakeLocator(selector=SEL_LOGOUT_BTN)})
    page.url = "https://testathon.live/signin?signin=true"

    LoginPage(page).logout()

    assert clicks == [SEL_LOGOUT_BTN]


def test_logout_without_redirect_times_out(clicks, monkeypatch):
    monkeypatch.setattr("testathon_ui.pages.login.LOGOUT_TIMEOUT_MS", 20)
    page = FakePage({SEL_LOGOUT_BTN: FakeLocator(selector=SEL_LOGOUT_BTN)})

    with pytest.raises(PageTimeoutError, match="Expected to return to signin page after logout"):
        LoginPage(page).logout()


def test_error_message():
    page = FakePage({SEL_API_ERROR: FakeLocator(text="Invalid Username")})
    assert LoginPage(page).error_message() == "Invalid Username"
