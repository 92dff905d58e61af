from urllib.parse import urlsplit, urlunsplit

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from .errors import ExtractionFailure, InvalidProfileUrl, NavigationFailure, NavigationTimeout
from .selectors import AUTO_SCROLL_SCRIPT


def validate_profile_url(url: str) -> None:
    """Reject anything that is not an http(s) URL on linkedin.com."""
    if not url:
        raise InvalidProfileUrl("No profile URL given.")
    try:
        parts = urlsplit(url)
        hostname = parts.hostname or ""
    except ValueError as e:
        raise InvalidProfileUrl(f"Could not parse profile URL {url!r}: {e}") from e
    if parts.scheme not in ("http", "https"):
        raise InvalidProfileUrl(f"The given URL is not an http(s) URL: {url}")
    if hostname != "linkedin.com" and not hostname.endswith(".linkedin.com"):
        raise InvalidProfileUrl(f"The given URL to scrape is not a linkedin.com URL: {url}")


def detail_url(profile_url: str, section: str) -> str:
    """Map a profile URL to one of its detail pages.

    https://www.linkedin.com/in/jane/?x=1 -> https://www.linkedin.com/in/jane/details/skills/
    """
    parts = urlsplit(profile_url)
    path = parts.path.rstrip("/")
    return urlunsplit((parts.scheme, parts.netloc, f"{path}/details/{section}/", "", ""))


async def goto(
    page: Page,
    url: str,
    timeout_ms: int,
    wait_until: str = "domcontentloaded",
    phase: str = "run",
) -> None:
    """Navigate once, bounded by `timeout_ms`. Failures are not retried."""
    try:
        await page.goto(url, timeout=timeout_ms, wait_until=wait_until)
    except PlaywrightTimeoutError as e:
        raise NavigationTimeout(url, timeout_ms, phase) from e
    except PlaywrightError as e:
        raise NavigationFailure(url, str(e), phase) from e


async def auto_scroll(page: Page, distance: int = 100, delay_ms: int = 100, max_steps: int = 400) -> None:
    """Scroll to the bottom in small steps so lazy sections render.

    The loop runs inside the page and resolves once the bottom is reached or
    after `max_steps` steps, whichever comes first.
    """
    try:
        await page.evaluate(
            AUTO_SCROLL_SCRIPT,
            {"distance": distance, "delay": delay_ms, "maxSteps": max_steps},
        )
    except PlaywrightError as e:
        # A redirect during the scroll destroys the execution context.
        raise ExtractionFailure("profile", str(e)) from e
