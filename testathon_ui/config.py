import os

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name, "").strip()
    return int(value) if value else default


# ---------- Site ----------
BASE_URL = os.getenv("TESTATHON_BASE_URL", "https://testathon.live").rstrip("/")
SIGNIN_PATH = "/signin"

# ---------- Browser ----------
BROWSER = os.getenv("TESTATHON_BROWSER", "chromium")   # chromium | firefox | webkit
HEADLESS = _env_bool("TESTATHON_HEADLESS", True)        # set to False to watch it run
TIMEOUT_MS = _env_int("TESTATHON_TIMEOUT_MS", 30_000)   # default step timeout (ms)
SCREENSHOT_DIR = os.getenv("TESTATHON_SCREENSHOT_DIR", "./screenshots")

# ---------- Waits (ms) ----------
PAGE_LOAD_TIMEOUT_MS = 10_000
ELEMENT_WAIT_MS = 5_000
FILTER_APPLICATION_MS = 5_000
SPINNER_APPEAR_MS = 2_000
POLL_INTERVAL_MS = 100
SCROLL_SETTLE_MS = 500
FILTER_SETTLE_MS = 1_000

# ---------- Retry ----------
RETRY_ATTEMPTS = 3
RETRY_DELAY_MS = 1_000

# ---------- Performance budgets (ms) ----------
MAX_RESPONSE_TIME_MS = 2_000
MAX_PAGE_LOAD_TIME_MS = 3_000

# opt-in switch for the live-site tests
RUN_E2E = _env_bool("TESTATHON_E2E", False)
