"""Shared fixtures: an in-memory stand-in for the Playwright objects the
scraper drives, so session and run logic can be tested without Chromium."""
import asyncio
from typing import Dict, List, Optional

import pytest
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from linkedin_profile_scraper import scraper as scraper_module
from linkedin_profile_scraper.browser import BrowserHandle
from linkedin_profile_scraper.config import LOGIN_URL
from linkedin_profile_scraper.selectors import (
    AUTO_SCROLL_SCRIPT,
    ENTITY_LIST_SCRIPT,
    PROFILE_SCRIPT,
)

FEED_URL = "https://www.linkedin.com/feed/"
PROFILE_URL = "https://www.linkedin.com/in/example"


class FakeCDPSession:
    def __init__(self):
        self.sent = []

    async def send(self, method, params=None):
        self.sent.append((method, params))


class FakePage:
    def __init__(self, context: "FakeContext"):
        self.context = context
        self.url = "about:blank"
        self.closed = False
        self.routes = []
        self.viewport = None

    @property
    def browser(self) -> "FakeBrowser":
        return self.context.browser

    async def route(self, pattern, handler):
        self.routes.append((pattern, handler))

    async def set_viewport_size(self, size):
        self.viewport = size

    async def goto(self, url, timeout=None, wait_until=None):
        browser = self.browser
        browser.events.append(("goto", url, wait_until, timeout))
        delay = next((d for key, d in browser.delays.items() if key in url), 0)
        if delay:
            await asyncio.sleep(delay)
        failure = next((e for key, e in browser.failures.items() if key in url), None)
        if failure is not None:
            raise failure
        if any(key in url for key in browser.timeouts):
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded.")
        self.url = browser.login_redirect if url == LOGIN_URL else url

    async def evaluate(self, script, arg=None):
        browser = self.browser
        if script == AUTO_SCROLL_SCRIPT:
            browser.events.append(("scroll", self.url))
            if browser.scroll_error is not None:
                raise browser.scroll_error
            return None
        if script == PROFILE_SCRIPT:
            browser.events.append(("extract", "profile"))
            return dict(browser.profile_snapshot, url=self.url)
        if script == ENTITY_LIST_SCRIPT:
            section = "volunteering"
            for name in ("experience", "education", "skills"):
                if f"/details/{name}/" in self.url:
                    section = name
            browser.events.append(("extract", section))
            return [{"texts": list(texts)} for texts in browser.lists.get(section, [])]
        raise AssertionError(f"unexpected script: {script[:40]}")

    async def close(self):
        if self.browser.page_close_error is not None:
            raise self.browser.page_close_error
        self.closed = True


class FakeContext:
    def __init__(self, browser: "FakeBrowser"):
        self.browser = browser
        self.pages: List[FakePage] = []
        self.cookies = []
        self.cdp_sessions: List[FakeCDPSession] = []

    async def new_page(self):
        page = FakePage(self)
        self.pages.append(page)
        return page

    async def new_cdp_session(self, page):
        if self.browser.cdp_error is not None:
            raise self.browser.cdp_error
        session = FakeCDPSession()
        self.cdp_sessions.append(session)
        return session

    async def add_cookies(self, cookies):
        self.cookies.extend(cookies)


class FakeBrowser:
    def __init__(self, launcher: "FakeLauncher"):
        self.login_redirect = launcher.login_redirect
        self.timeouts = set(launcher.timeouts)
        self.failures: Dict[str, Exception] = dict(launcher.failures)
        self.scroll_error: Optional[Exception] = launcher.scroll_error
        self.delays: Dict[str, float] = dict(launcher.delays)
        self.profile_snapshot = dict(launcher.profile_snapshot)
        self.lists = {k: list(v) for k, v in launcher.lists.items()}
        self.cdp_error: Optional[Exception] = launcher.cdp_error
        self.page_close_error: Optional[Exception] = None
        self.events = []
        self.closed = False
        self.context = FakeContext(self)

    async def close(self):
        self.closed = True


class FakePlaywright:
    def __init__(self):
        self.stopped = False

    async def stop(self):
        self.stopped = True


class FakeLauncher:
    """Replaces `launch_browser`; tests tweak its attributes before setup."""

    def __init__(self):
        self.login_redirect = FEED_URL
        self.timeouts = set()
        self.failures = {}
        self.scroll_error = None
        self.launch_error = None
        self.delays = {}
        self.cdp_error = None
        self.pid = None
        self.profile_snapshot = {
            "full_name": "  Jane Doe\n",
            "title": "Engineer",
            "location": "Amsterdam, North Holland, Netherlands",
            "photo": None,
            "description": None,
        }
        self.lists = {
            "experience": [
                ["Senior Engineer", "Acme Corp · Full-time", "Jan 2020 - Present · 4 yrs",
                 "Amsterdam, North Holland, Netherlands · Hybrid", "Building things."],
                ["Engineer", "Initech", "Mar 2016 - Dec 2019 · 3 yrs 10 mos",
                 "Austin, Texas, United States"],
            ],
            "education": [
                ["Delft University of Technology", "Master of Science - MS, Computer Science", "2014 - 2016"],
            ],
            "skills": [
                ["Python", "12 endorsements"],
                ["Playwright"],
                ["asyncio", "Endorsed by 3 colleagues", "3 endorsements"],
            ],
            "volunteering": [],
        }
        self.handles: List[BrowserHandle] = []

    @property
    def browser(self) -> FakeBrowser:
        return self.handles[-1].browser

    async def __call__(self, options):
        if self.launch_error is not None:
            raise self.launch_error
        browser = FakeBrowser(self)
        handle = BrowserHandle(FakePlaywright(), browser, browser.context, self.pid)
        self.handles.append(handle)
        return handle


@pytest.fixture
def launcher(monkeypatch):
    fake = FakeLauncher()
    monkeypatch.setattr(scraper_module, "launch_browser", fake)
    return fake


@pytest.fixture
def killed_pids(monkeypatch):
    killed = []
    monkeypatch.setattr(scraper_module, "kill_process_tree", killed.append)
    return killed
