import asyncio
import logging
import uuid
from dataclasses import dataclass
from typing import Optional

import psutil
from playwright.async_api import Browser, BrowserContext, Page, Playwright, Route
from playwright.async_api import async_playwright

from .config import (
    ALLOWED_HOSTNAMES,
    BLOCKED_RESOURCE_TYPES,
    BLOCKED_URLS,
    VIEWPORT,
    browser_args,
)
from .cookies_auth import session_cookie
from .errors import SetupError
from .models import ScraperOptions
from .normalize import get_hostname
from .scraper_logging import status_log

# Extra switch carried by the browser root process so it can be told apart
# from other Chromium instances started by this Python process.
PROCESS_MARKER = "--linkedin-profile-scraper-session"


@dataclass
class BrowserHandle:
    """Everything owned by one launched browser."""
    playwright: Playwright
    browser: Browser
    context: BrowserContext
    pid: Optional[int] = None


async def launch_browser(options: ScraperOptions) -> BrowserHandle:
    """Start the Playwright driver, Chromium and the shared browser context.

    On failure everything that did start is torn down, including a forced
    kill of the browser process tree, before SetupError is raised.
    """
    marker = f"{PROCESS_MARKER}={uuid.uuid4().hex}"
    playwright = None
    browser = None
    try:
        playwright = await async_playwright().start()
        browser = await playwright.chromium.launch(
            headless=options.headless,
            args=browser_args(options.headless) + [marker],
            timeout=options.timeout,
        )
        context = await new_context(browser, options)
    except Exception as e:
        await _abort_launch(playwright, browser, marker)
        raise SetupError(f"Could not launch the browser: {e}") from e
    return BrowserHandle(playwright, browser, context, find_browser_pid(marker))


async def new_context(browser: Browser, options: ScraperOptions) -> BrowserContext:
    """Create the context every page of the session is opened in.

    CSP bypass lives on the context in Playwright; without it LinkedIn's
    policy blocks the snapshot scripts the extractors evaluate.
    """
    return await browser.new_context(
        user_agent=options.user_agent,
        viewport=VIEWPORT,
        bypass_csp=True,
        locale="en-US",
    )


async def _abort_launch(playwright, browser, marker: str) -> None:
    pid = find_browser_pid(marker)
    if browser is not None:
        try:
            await browser.close()
        except Exception as e:
            status_log("setup", f"Could not close partially started browser: {e}", level=logging.WARNING)
    if pid:
        try:
            await asyncio.to_thread(kill_process_tree, pid)
        except Exception as e:
            status_log("setup", f"Could not kill browser process pid {pid}: {e}", level=logging.WARNING)
    if playwright is not None:
        try:
            await playwright.stop()
        except Exception as e:
            status_log("setup", f"Could not stop the Playwright driver: {e}", level=logging.WARNING)


def find_browser_pid(marker: str) -> Optional[int]:
    """Return the pid of the browser root process started with `marker`."""
    matches = {}
    for proc in psutil.Process().children(recursive=True):
        try:
            if marker in proc.cmdline():
                matches[proc.pid] = proc.ppid()
        except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
            continue
    for pid, ppid in matches.items():
        if ppid not in matches:
            return pid
    return None


def kill_process_tree(pid: int, timeout: float = 5.0) -> None:
    """SIGKILL a process and all its descendants.

    Processes that already exited count as killed. Raises OSError when some
    process survives the kill.
    """
    try:
        root = psutil.Process(pid)
    except psutil.NoSuchProcess:
        return
    try:
        procs = root.children(recursive=True)
    except psutil.NoSuchProcess:
        procs = []
    procs.append(root)

    for proc in procs:
        try:
            proc.kill()
        except psutil.NoSuchProcess:
            continue

    _, alive = psutil.wait_procs(procs, timeout=timeout)
    if alive:
        pids = ", ".join(str(p.pid) for p in alive)
        raise OSError(f"Failed to kill browser process pid: {pid} (still alive: {pids})")


def should_block_request(url: str, resource_type: str) -> bool:
    """Decide whether a request from a scraper page gets aborted."""
    if resource_type in BLOCKED_RESOURCE_TYPES:
        return True
    if url.split("?")[0] in BLOCKED_URLS:
        return True
    hostname = get_hostname(url)
    if hostname and hostname not in ALLOWED_HOSTNAMES:
        return True
    return False


async def handle_route(route: Route) -> None:
    request = route.request
    if should_block_request(request.url, request.resource_type):
        await route.abort()
    else:
        await route.continue_()


async def configure_page(page: Page, options: ScraperOptions) -> None:
    """Apply the fast, filtered and authenticated setup to a fresh page."""
    context = page.context

    # Keeps Chromium from throttling pages that are not in the foreground.
    session = await context.new_cdp_session(page)
    await session.send("Page.enable")
    await session.send("Page.setWebLifecycleState", {"state": "active"})

    await page.route("**/*", handle_route)
    await page.set_viewport_size(VIEWPORT)
    await context.add_cookies([session_cookie(options.session_cookie_value)])
