"""Command line entry point: scrape one profile and print it as JSON."""
import argparse
import asyncio
import json
import sys
from typing import List, Optional

from .config import ENV_HEADLESS, ENV_SESSION_COOKIE, ENV_TIMEOUT_MS, ENV_USER_AGENT
from .cookies_auth import load_session_cookie
from .errors import ConfigurationError, ScraperError, SessionExpired
from .models import ScrapeResult
from .scraper import LinkedInProfileScraper
from .scraper_logging import configure_logging

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CONFIG = 2
EXIT_SESSION_EXPIRED = 3
EXIT_INTERRUPTED = 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="linkedin-profile-scraper",
        description="LinkedIn Profile Scraper - Scrape profile, experience, education, volunteering and skills",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s https://www.linkedin.com/in/johndoe/
  %(prog)s https://www.linkedin.com/in/johndoe/ --cookies cookies.json -o johndoe.json
  %(prog)s https://www.linkedin.com/in/johndoe/ --headless false --timeout 30000
        """,
    )
    parser.add_argument(
        "url",
        help="LinkedIn profile URL to scrape (e.g., https://www.linkedin.com/in/username/)",
    )
    parser.add_argument(
        "--session-cookie",
        default=None,
        help="Value of the li_at cookie (default: $LINKEDIN_SESSION_COOKIE_VALUE)",
    )
    parser.add_argument(
        "--cookies",
        help="Path to an exported cookies.json or auth_state.json to read li_at from",
    )
    parser.add_argument(
        "--user-agent",
        default=ENV_USER_AGENT,
        help="User agent sent by the browser",
    )
    parser.add_argument(
        "--timeout",
        type=int,
        default=ENV_TIMEOUT_MS,
        help=f"Navigation timeout in milliseconds (default: {ENV_TIMEOUT_MS})",
    )
    parser.add_argument(
        "--headless",
        type=lambda x: x.lower() in ("true", "1", "yes"),
        default=ENV_HEADLESS,
        help="Run browser in headless mode (default: true)",
    )
    parser.add_argument(
        "--output",
        "-o",
        help="Output file path (JSON format). If not specified, prints to stdout",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log debug status lines",
    )
    return parser


def resolve_session_cookie(args: argparse.Namespace) -> str:
    if args.session_cookie:
        return args.session_cookie
    if args.cookies:
        value = load_session_cookie(args.cookies)
        if value:
            return value
    return ENV_SESSION_COOKIE


async def scrape(args: argparse.Namespace) -> ScrapeResult:
    async with LinkedInProfileScraper(
        session_cookie_value=resolve_session_cookie(args),
        user_agent=args.user_agent,
        timeout=args.timeout,
        headless=args.headless,
    ) as scraper:
        return await scraper.run(args.url)


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    if not args.url.startswith("http"):
        args.url = f"https://{args.url}"

    try:
        result = asyncio.run(scrape(args))
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        sys.exit(EXIT_INTERRUPTED)
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(EXIT_CONFIG)
    except SessionExpired as e:
        print(f"Session expired: {e}", file=sys.stderr)
        sys.exit(EXIT_SESSION_EXPIRED)
    except ScraperError as e:
        print(f"Scrape failed during {e.phase}: {e}", file=sys.stderr)
        sys.exit(EXIT_FAILED)
    except Exception as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        sys.exit(EXIT_FAILED)

    payload = json.dumps(result.model_dump(mode="json"), indent=2, ensure_ascii=False)
    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(payload)
        print(f"Results saved to: {args.output}", file=sys.stderr)
    else:
        print(payload)
    sys.exit(EXIT_OK)
