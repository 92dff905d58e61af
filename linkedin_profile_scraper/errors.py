from typing import List, Optional


class ScraperError(Exception):
    """Base class for every error raised by the scraper.

    `phase` names the step that failed (constructing, setup, setup page,
    checkIfLoggedIn, run, close) so callers can branch on the kind of
    failure instead of parsing messages.
    """

    phase = "run"

    def __init__(self, message: str, phase: Optional[str] = None):
        super().__init__(message)
        if phase is not None:
            self.phase = phase


class ConfigurationError(ScraperError):
    phase = "constructing"


class SetupError(ScraperError):
    """The browser could not be launched, a page could not be provisioned,
    or the scraper is in a state that does not allow the call."""

    phase = "setup"


class SessionExpired(ScraperError):
    phase = "checkIfLoggedIn"


class NavigationTimeout(ScraperError):
    def __init__(self, url: str, timeout_ms: int, phase: Optional[str] = None):
        super().__init__(f"Navigation to {url} timed out after {timeout_ms}ms", phase)
        self.url = url
        self.timeout_ms = timeout_ms


class NavigationFailure(ScraperError):
    """The browser reported an error other than a timeout while loading
    `url` (aborted request, closed target, DNS failure)."""

    def __init__(self, url: str, message: str, phase: Optional[str] = None):
        super().__init__(f"Navigation to {url} failed: {message}", phase)
        self.url = url


class ExtractionFailure(ScraperError):
    def __init__(self, section: str, message: str):
        super().__init__(f"Could not extract {section}: {message}")
        self.section = section


class InvalidProfileUrl(ScraperError, ValueError):
    pass


class TerminationError(ScraperError):
    """One or more shutdown steps failed. Every step was still attempted."""

    phase = "close"

    def __init__(self, errors: List[BaseException]):
        details = "; ".join(f"{type(e).__name__}: {e}" for e in errors)
        super().__init__(f"Failed to fully close the browser session ({details})")
        self.errors = list(errors)
