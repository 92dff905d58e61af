"""Scrape LinkedIn profiles through an authenticated headless Chromium.

The package is split into small modules: browser launch and page setup,
session cookie handling, navigation, in-page snapshot scripts, extractors,
normalization helpers and the `LinkedInProfileScraper` that ties them
together.
"""
from .errors import (
    ConfigurationError,
    ExtractionFailure,
    InvalidProfileUrl,
    NavigationFailure,
    NavigationTimeout,
    ScraperError,
    SessionExpired,
    SetupError,
    TerminationError,
)
from .models import (
    Education,
    Experience,
    Location,
    Profile,
    ScrapeResult,
    ScraperOptions,
    Skill,
    Volunteering,
)
from .scraper import LinkedInProfileScraper, SessionState

__all__ = [
    "ConfigurationError",
    "Education",
    "Experience",
    "ExtractionFailure",
    "InvalidProfileUrl",
    "LinkedInProfileScraper",
    "Location",
    "NavigationFailure",
    "NavigationTimeout",
    "Profile",
    "ScrapeResult",
    "ScraperError",
    "ScraperOptions",
    "SessionExpired",
    "SessionState",
    "SetupError",
    "Skill",
    "TerminationError",
    "Volunteering",
]
