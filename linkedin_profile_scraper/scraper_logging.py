import logging
from typing import Optional, Union

logger = logging.getLogger("linkedin_profile_scraper")


def status_log(
    section: str,
    message: str,
    session_id: Optional[Union[int, str]] = None,
    level: int = logging.INFO,
) -> None:
    """Write one human readable status line tagged with the current phase.

    Lines look like `Scraper (1700000000000) (run): Navigating to ...` so a
    single run can be followed in a busy log.
    """
    session_part = f" ({session_id})" if session_id is not None else ""
    logger.log(level, "Scraper%s (%s): %s", session_part, section, message)


def configure_logging(verbose: bool = False) -> None:
    """Attach a stderr handler for the CLI and HTTP service.

    The library itself never installs handlers; embedding applications keep
    control over their own logging setup.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(message)s",
    )
