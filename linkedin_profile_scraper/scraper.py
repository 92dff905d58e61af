import asyncio
import json
import logging
import time
from enum import Enum
from typing import Awaitable, Callable, List, Optional, TypeVar

from playwright.async_api import Page

from . import extraction
from .browser import BrowserHandle, configure_page, kill_process_tree, launch_browser
from .config import LOGIN_URL
from .cookies_auth import check_login_status
from .errors import (
    ConfigurationError,
    InvalidProfileUrl,
    ScraperError,
    SessionExpired,
    SetupError,
    TerminationError,
)
from .models import ScrapeResult, ScraperOptions
from .navigation import auto_scroll, detail_url, goto, validate_profile_url
from .scraper_logging import status_log

T = TypeVar("T")


class SessionState(str, Enum):
    UNINITIALIZED = "uninitialized"
    LAUNCHED = "launched"
    READY = "ready"
    TERMINATED = "terminated"


async def gather_all(*aws: Awaitable[T]) -> List[T]:
    """Run awaitables concurrently and return their results in call order.

    The first failure cancels every task still running and is re-raised;
    results of tasks that already finished are discarded.
    """
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
    except asyncio.CancelledError:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise

    failed = [t for t in tasks if t in done and not t.cancelled() and t.exception() is not None]
    if failed:
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
        raise failed[0].exception()
    return [t.result() for t in tasks]


class LinkedInProfileScraper:
    """Scrape LinkedIn profiles with a logged-in headless Chromium.

    Usage:

        scraper = LinkedInProfileScraper(session_cookie_value="AQED...")
        await scraper.setup()
        result = await scraper.run("https://www.linkedin.com/in/someone/")

    `setup()` launches the browser and checks the `li_at` session; `run()`
    scrapes one profile. Without `keep_alive` the browser is shut down after
    each run and the scraper cannot be reused. Any failure shuts the browser
    down as well; a fresh scraper has to be constructed afterwards.
    """

    def __init__(
        self,
        session_cookie_value: Optional[str] = None,
        keep_alive: Optional[bool] = None,
        user_agent: Optional[str] = None,
        timeout: Optional[int] = None,
        headless: Optional[bool] = None,
    ):
        log_section = "constructing"
        try:
            self.options = ScraperOptions.from_user_options(
                session_cookie_value=session_cookie_value,
                user_agent=user_agent,
                keep_alive=keep_alive,
                timeout=timeout,
                headless=headless,
            )
        except ConfigurationError as e:
            status_log(log_section, str(e), level=logging.ERROR)
            raise

        self._handle: Optional[BrowserHandle] = None
        self._state = SessionState.UNINITIALIZED
        self._lifecycle_lock = asyncio.Lock()

        status_log(log_section, f"Using options: {json.dumps(self.options.redacted())}")

    @property
    def state(self) -> SessionState:
        return self._state

    async def __aenter__(self) -> "LinkedInProfileScraper":
        await self.setup()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._state is not SessionState.TERMINATED:
            await self.close()

    async def setup(self) -> None:
        """Launch Chromium and make sure the session token is still valid."""
        log_section = "setup"
        async with self._lifecycle_lock:
            if self._state is SessionState.READY:
                status_log(log_section, "Browser already running, reusing it.")
                return
            if self._state is not SessionState.UNINITIALIZED:
                message = "This scraper has been closed. Construct a new one to scrape again."
                status_log(log_section, message, level=logging.ERROR)
                raise SetupError(message)

            try:
                status_log(
                    log_section,
                    f"Launching Chromium in the {'background' if self.options.headless else 'foreground'}...",
                )
                self._handle = await launch_browser(self.options)
                self._state = SessionState.LAUNCHED
                status_log(log_section, f"Chromium launched (pid: {self._handle.pid})!")

                await self._verify_logged_in()

                status_log(log_section, "Done!")
            except (Exception, asyncio.CancelledError):
                await self._terminate_quietly(log_section)
                status_log(log_section, "An error occurred during setup.", level=logging.ERROR)
                raise

    async def check_if_logged_in(self) -> None:
        """Verify the session; an expired one terminates the scraper."""
        log_section = "checkIfLoggedIn"
        if self._state not in (SessionState.LAUNCHED, SessionState.READY):
            raise SetupError("Browser is not set. Please run the setup method first.", phase=log_section)
        try:
            await self._verify_logged_in()
        except (Exception, asyncio.CancelledError):
            await self._terminate_quietly(log_section)
            raise

    async def _verify_logged_in(self) -> None:
        log_section = "checkIfLoggedIn"
        page = await self._new_page()

        status_log(log_section, "Checking if we are still logged in...")

        # Logged-in sessions get redirected from /login to the feed.
        try:
            await goto(page, LOGIN_URL, self.options.timeout, wait_until="domcontentloaded", phase=log_section)
            is_logged_in = check_login_status(page)
        finally:
            await page.close()

        if not is_logged_in:
            message = (
                "Bad news, we are not logged in! Your session seems to be expired. "
                "Use your browser to login again with your LinkedIn credentials and extract "
                'the "li_at" cookie value for the "session_cookie_value" option.'
            )
            status_log(log_section, message, level=logging.ERROR)
            raise SessionExpired(message)

        self._state = SessionState.READY
        status_log(log_section, "All good. We are still logged in.")

    async def create_page(self) -> Page:
        """Open a new filtered, authenticated page on the running browser."""
        if self._state is not SessionState.READY:
            raise SetupError("Browser is not ready. Please run the setup method first.", phase="setup page")
        return await self._new_page()

    async def _new_page(self) -> Page:
        log_section = "setup page"
        if self._handle is None or self._state not in (SessionState.LAUNCHED, SessionState.READY):
            raise SetupError("Browser not set.", phase=log_section)

        page = None
        try:
            page = await self._handle.context.new_page()
            await configure_page(page, self.options)
            status_log(log_section, "Session cookie set!", level=logging.DEBUG)
            return page
        except asyncio.CancelledError:
            await self._terminate_quietly(log_section, page)
            raise
        except Exception as e:
            # A page that cannot be set up means the browser is unhealthy.
            await self._terminate_quietly(log_section, page)
            status_log(log_section, f"An error occurred during page setup: {e}", level=logging.ERROR)
            if isinstance(e, ScraperError):
                raise
            raise SetupError(f"Could not set up a page: {e}", phase=log_section) from e

    async def run(self, profile_url: str) -> ScrapeResult:
        """Scrape one profile: top card and volunteering from the profile
        page, then experience, education and skills from their detail pages
        in parallel."""
        log_section = "run"
        session_id = int(time.time() * 1000)

        if self._state is not SessionState.READY or self._handle is None:
            if self._state is SessionState.UNINITIALIZED:
                message = "Browser is not set. Please run the setup method first."
            else:
                message = "This scraper has been closed. Construct a new one with a valid session."
            status_log(log_section, message, session_id, level=logging.ERROR)
            raise SetupError(message, phase=log_section)

        try:
            validate_profile_url(profile_url)
        except InvalidProfileUrl as e:
            status_log(log_section, str(e), session_id, level=logging.ERROR)
            raise

        page = None
        try:
            page = await self.create_page()

            status_log(log_section, f"Navigating to LinkedIn profile: {profile_url}", session_id)
            # Only wait for the DOM: LinkedIn keeps long-polling connections
            # open, so network idle would never be reached here.
            await goto(page, profile_url, self.options.timeout, wait_until="domcontentloaded")
            status_log(log_section, "LinkedIn profile page loaded!", session_id)

            status_log(
                log_section,
                "Getting all the LinkedIn profile data by scrolling the page to the bottom, "
                "so all the data gets loaded into the page...",
                session_id,
            )
            await auto_scroll(page)

            profile = await extraction.get_profile(page)
            volunteering = await extraction.get_volunteering(page)

            status_log(log_section, "Opening detail pages for experience, education and skills...", session_id)
            experiences, education, skills = await gather_all(
                self._scrape_details(profile_url, "experience", extraction.get_experiences, session_id),
                self._scrape_details(profile_url, "education", extraction.get_education, session_id),
                self._scrape_details(profile_url, "skills", extraction.get_skills, session_id),
            )

            result = ScrapeResult(
                profile=profile,
                experiences=experiences,
                education=education,
                volunteering=volunteering,
                skills=skills,
            )
            status_log(log_section, f"Done! Returned profile details for: {profile_url}", session_id)

            if not self.options.keep_alive:
                status_log(log_section, "Not keeping the session alive.", session_id)
                await self.close(page)
                status_log(log_section, "Done. Chromium is closed.", session_id)
            else:
                await page.close()
                status_log(log_section, "Done. Chromium is being kept alive in memory.", session_id)

            return result
        except (Exception, asyncio.CancelledError):
            await self._terminate_quietly(log_section, page)
            status_log(log_section, "An error occurred during a run.", session_id, level=logging.ERROR)
            raise

    async def _scrape_details(
        self,
        profile_url: str,
        section: str,
        extractor: Callable[[Page], Awaitable[T]],
        session_id: int,
    ) -> T:
        page = await self.create_page()
        try:
            url = detail_url(profile_url, section)
            status_log("run", f"Navigating to {section} details: {url}", session_id)
            await goto(page, url, self.options.timeout, wait_until="networkidle")
            return await extractor(page)
        finally:
            await page.close()

    async def close(self, page: Optional[Page] = None) -> None:
        """Close `page` (if given) and kill the browser with its processes.

        Safe to call more than once. Every step is attempted even when an
        earlier one fails; failures are raised together as TerminationError.
        """
        async with self._lifecycle_lock:
            try:
                await self._terminate(page)
            except TerminationError as e:
                status_log("close", str(e), level=logging.ERROR)
                raise

    async def _terminate_quietly(self, log_section: str, page: Optional[Page] = None) -> None:
        """Terminate on an error path; cleanup failures are logged so the
        original error reaches the caller."""
        try:
            await self._terminate(page)
        except TerminationError as e:
            status_log(log_section, f"Cleanup after failure was incomplete: {e}", level=logging.WARNING)

    async def _terminate(self, page: Optional[Page] = None) -> None:
        log_section = "close"
        errors: List[BaseException] = []

        if page is not None:
            try:
                status_log(log_section, "Closing page...")
                await page.close()
                status_log(log_section, "Closed page!")
            except Exception as e:
                errors.append(e)

        handle, self._handle = self._handle, None
        self._state = SessionState.TERMINATED
        if handle is None:
            if errors:
                raise TerminationError(errors)
            return

        try:
            status_log(log_section, "Closing browser...")
            await handle.browser.close()
            status_log(log_section, "Closed browser!")
        except Exception as e:
            errors.append(e)

        # A graceful close can leave Chromium helpers running; always finish
        # with a forced kill of the whole tree.
        if handle.pid:
            try:
                status_log(log_section, f"Killing browser process pid: {handle.pid}...")
                await asyncio.to_thread(kill_process_tree, handle.pid)
                status_log(log_section, f"Killed browser pid: {handle.pid}. Closed browser.")
            except Exception as e:
                errors.append(e)

        try:
            await handle.playwright.stop()
        except Exception as e:
            errors.append(e)

        if errors:
            raise TerminationError(errors)
