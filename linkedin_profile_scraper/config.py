import os

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/69.0.3497.100 Safari/537.36"
)
DEFAULT_TIMEOUT_MS = 10000

LINKEDIN_URL = "https://www.linkedin.com"
LOGIN_URL = f"{LINKEDIN_URL}/login"
SESSION_COOKIE_NAME = "li_at"
SESSION_COOKIE_DOMAIN = ".www.linkedin.com"

VIEWPORT = {"width": 1200, "height": 720}

# Stylesheets must stay allowed: LinkedIn lays out lazy sections with CSS and
# the extractors depend on that layout.
BLOCKED_RESOURCE_TYPES = frozenset({"image", "media", "font", "texttrack", "manifest"})
BLOCKED_URLS = frozenset({"https://www.linkedin.com/li/track"})
ALLOWED_HOSTNAMES = frozenset({
    "linkedin.com",
    "www.linkedin.com",
    "platform.linkedin.com",
    "realtime.www.linkedin.com",
})

# Defaults for the CLI and HTTP service. The library itself only takes
# explicit options.
ENV_SESSION_COOKIE = os.environ.get("LINKEDIN_SESSION_COOKIE_VALUE", "")
ENV_USER_AGENT = os.environ.get("SCRAPER_USER_AGENT") or DEFAULT_USER_AGENT
ENV_TIMEOUT_MS = int(os.environ.get("SCRAPER_TIMEOUT_MS", str(DEFAULT_TIMEOUT_MS)))
ENV_HEADLESS = os.environ.get("SCRAPER_HEADLESS", "true").lower() not in ["0", "false", "no"]


def browser_args(headless: bool) -> list:
    """Return the Chromium switches used for every launch.

    The set favours speed and stability on servers: no sandbox, no
    background throttling, no GPU/audio/notifications and a capped disk
    cache. Headless runs add single-process mode; headed runs maximize.
    """
    args = [
        "--no-sandbox",
        "--disable-setuid-sandbox",
        "--proxy-server=direct://",
        "--proxy-bypass-list=*",
        "--disable-dev-shm-usage",
        "--disable-accelerated-2d-canvas",
        "--disable-gpu",
        "--disable-features=site-per-process,AudioServiceOutOfProcess",
        "--allow-running-insecure-content",
        "--disable-background-timer-throttling",
        "--disable-backgrounding-occluded-windows",
        "--disable-renderer-backgrounding",
        "--disable-web-security",
        "--autoplay-policy=user-gesture-required",
        "--disable-background-networking",
        "--disable-breakpad",
        "--disable-client-side-phishing-detection",
        "--disable-component-update",
        "--disable-default-apps",
        "--disable-domain-reliability",
        "--disable-extensions",
        "--disable-hang-monitor",
        "--disable-ipc-flooding-protection",
        "--disable-notifications",
        "--disable-offer-store-unmasked-wallet-cards",
        "--disable-popup-blocking",
        "--disable-print-preview",
        "--disable-prompt-on-repost",
        "--disable-speech-api",
        "--disable-sync",
        "--disk-cache-size=33554432",
        "--hide-scrollbars",
        "--ignore-gpu-blocklist",
        "--metrics-recording-only",
        "--mute-audio",
        "--no-default-browser-check",
        "--no-first-run",
        "--no-pings",
        "--no-zygote",
        "--password-store=basic",
        "--use-gl=swiftshader",
        "--use-mock-keychain",
    ]
    if headless:
        args.append("--single-process")
    else:
        args.append("--start-maximized")
    return args
