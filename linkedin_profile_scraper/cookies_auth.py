import json
import logging
import os
import re
from typing import Optional
from urllib.parse import urlparse

from playwright.async_api import Page

from .config import SESSION_COOKIE_DOMAIN, SESSION_COOKIE_NAME
from .scraper_logging import status_log


def session_cookie(value: str) -> dict:
    """Build the `li_at` cookie that marks the browser as logged in."""
    return {
        "name": SESSION_COOKIE_NAME,
        "value": value,
        "domain": SESSION_COOKIE_DOMAIN,
        "path": "/",
        "secure": True,
        "httpOnly": True,
    }


def is_login_url(url: str) -> bool:
    try:
        path = urlparse(url).path
    except ValueError:
        return False
    return path.rstrip("/").endswith("/login")


def check_login_status(page: Page) -> bool:
    """Return True when the page was redirected away from the login form.

    LinkedIn sends authenticated sessions from /login to the feed; an
    expired or invalid token leaves the browser on /login.
    """
    return not is_login_url(page.url)


def load_session_cookie(path: str) -> Optional[str]:
    """Read the `li_at` value from an exported cookies file.

    Accepts a plain list of cookies (browser extension exports) or a
    Playwright storage state with a `cookies` key. Only LinkedIn cookies are
    considered; whitespace and line breaks in the value are removed.
    """
    if not os.path.exists(path):
        return None
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        status_log("constructing", f"Could not read cookies file {path}: {e}", level=logging.WARNING)
        return None

    cookies = data.get("cookies", []) if isinstance(data, dict) else data
    if not isinstance(cookies, list):
        return None
    for c in cookies:
        if not isinstance(c, dict) or c.get("name") != SESSION_COOKIE_NAME:
            continue
        if "linkedin.com" not in c.get("domain", ""):
            continue
        value = c.get("value")
        if isinstance(value, str):
            value = re.sub(r"\s+", "", value)
            if value:
                return value
    return None
