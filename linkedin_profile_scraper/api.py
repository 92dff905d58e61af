"""HTTP service around a shared, kept-alive scraper.

Run with `linkedin-profile-scraper-api` or `uvicorn linkedin_profile_scraper.api:app`.
"""
import asyncio
import os
from contextlib import asynccontextmanager
from typing import Callable, Optional

import uvicorn
from fastapi import FastAPI, HTTPException

from .config import ENV_HEADLESS, ENV_SESSION_COOKIE, ENV_TIMEOUT_MS, ENV_USER_AGENT
from .errors import (
    ConfigurationError,
    InvalidProfileUrl,
    NavigationFailure,
    NavigationTimeout,
    ScraperError,
    SessionExpired,
)
from .models import ProfileRequest
from .navigation import validate_profile_url
from .scraper import LinkedInProfileScraper, SessionState
from .scraper_logging import configure_logging


def default_scraper_factory() -> LinkedInProfileScraper:
    return LinkedInProfileScraper(
        session_cookie_value=ENV_SESSION_COOKIE,
        keep_alive=True,
        user_agent=ENV_USER_AGENT,
        timeout=ENV_TIMEOUT_MS,
        headless=ENV_HEADLESS,
    )


class ScraperHolder:
    """Keeps one ready scraper and replaces it once it has terminated.

    A failed run shuts its browser down, so the next request sets up a
    fresh one.
    """

    def __init__(self, factory: Callable[[], LinkedInProfileScraper] = default_scraper_factory):
        self._factory = factory
        self._scraper: Optional[LinkedInProfileScraper] = None
        self._lock = asyncio.Lock()

    async def get(self) -> LinkedInProfileScraper:
        async with self._lock:
            if self._scraper is None or self._scraper.state is SessionState.TERMINATED:
                scraper = self._factory()
                await scraper.setup()
                self._scraper = scraper
            return self._scraper

    async def shutdown(self) -> None:
        async with self._lock:
            scraper, self._scraper = self._scraper, None
        if scraper is not None and scraper.state is not SessionState.TERMINATED:
            await scraper.close()


scrapers = ScraperHolder()


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await scrapers.shutdown()


app = FastAPI(title="LinkedIn Profile Scraper", lifespan=lifespan)


def status_code_for(error: ScraperError) -> int:
    if isinstance(error, InvalidProfileUrl):
        return 422
    if isinstance(error, SessionExpired):
        return 401
    if isinstance(error, NavigationTimeout):
        return 504
    if isinstance(error, NavigationFailure):
        return 502
    if isinstance(error, ConfigurationError):
        return 500
    return 502


@app.post("/scrape/linkedin")
async def scrape_linkedin(data: ProfileRequest):
    try:
        validate_profile_url(data.url)
        scraper = await scrapers.get()
        result = await scraper.run(data.url)
    except ScraperError as e:
        raise HTTPException(
            status_code=status_code_for(e),
            detail={"url": data.url, "error": str(e), "phase": e.phase},
        ) from e
    return result.model_dump(mode="json")


@app.get("/health")
def health():
    return {"status": "ok"}


def serve() -> None:
    configure_logging()
    uvicorn.run(
        app,
        host=os.environ.get("SCRAPER_HOST", "0.0.0.0"),
        port=int(os.environ.get("SCRAPER_PORT", "8000")),
    )
