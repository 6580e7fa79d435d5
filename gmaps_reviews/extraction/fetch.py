"""
Page Fetching

Downloads Google Maps / Google Search HTML with httpx, retrying transport
errors and retryable status codes with exponential backoff.

Failures are raised as typed errors (see exceptions.py) so callers can tell
"could not fetch" apart from "fetched, but nothing was extracted".
"""

import logging
import time
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

import httpx

from ..config import (
    CHALLENGE_MARKERS,
    DEFAULT_HEADERS,
    MAX_RETRIES,
    REQUEST_TIMEOUT,
    RETRY_BACKOFF,
    RETRY_MAX_DELAY,
    RETRY_STATUS_CODES,
    USER_AGENT,
    get_proxy_url,
)
from ..exceptions import CaptchaError, FetchError, FetchTimeoutError, HTTPStatusError

logger = logging.getLogger(__name__)


def build_headers(user_agent: str = USER_AGENT) -> Dict[str, str]:
    """Browser-like request headers."""
    headers = {'User-Agent': user_agent}
    headers.update(DEFAULT_HEADERS)
    return headers


def default_client_kwargs(
    proxy_url: Optional[str] = None,
    timeout: float = REQUEST_TIMEOUT,
    user_agent: str = USER_AGENT,
) -> Dict[str, Any]:
    """Keyword arguments for an ``httpx.Client`` that looks like a mobile browser."""
    kwargs = {
        'timeout': timeout,
        'follow_redirects': True,
        'headers': build_headers(user_agent),
    }
    proxy_url = proxy_url or get_proxy_url()
    if proxy_url:
        kwargs['proxy'] = proxy_url
    return kwargs


@contextmanager
def client_scope(client: Optional[httpx.Client] = None) -> Iterator[httpx.Client]:
    """Yield the caller's client, or a short-lived one closed on exit."""
    if client is not None:
        yield client
        return

    with httpx.Client(**default_client_kwargs()) as owned:
        yield owned


def check_challenge(html: str, url: str) -> None:
    """Raise CaptchaError if the body is an anti-bot interstitial."""
    if any(marker in html for marker in CHALLENGE_MARKERS):
        raise CaptchaError(
            "Google CAPTCHA detected. The proxy may be flagged; try a different proxy region.",
            url,
        )


def fetch_page(
    url: str,
    client: Optional[httpx.Client] = None,
    max_retries: int = MAX_RETRIES,
    backoff: float = RETRY_BACKOFF,
) -> str:
    """
    Fetch a page and return its HTML.

    Headers, proxy and timeout come from the client. Without one, a
    short-lived client built from config.py defaults is used.

    Args:
        url: Page URL
        client: Optional httpx client to reuse
        max_retries: Retries after the first attempt
        backoff: Initial delay between attempts, doubled each time

    Returns:
        Response body

    Raises:
        HTTPStatusError: Non-2xx response (after retries for 429/5xx)
        FetchTimeoutError: Every attempt timed out
        FetchError: Other transport failure
        CaptchaError: Google served a challenge page
    """
    attempts = max(max_retries, 0) + 1
    delay = backoff
    last_error = FetchError(f"Could not fetch {url}", url)

    logger.info("Fetching: %s", url)

    with client_scope(client) as http:
        for attempt in range(1, attempts + 1):
            try:
                response = http.get(url)
            except httpx.TimeoutException as e:
                last_error = FetchTimeoutError(f"Timed out fetching {url}: {e}", url)
            except httpx.TransportError as e:
                last_error = FetchError(f"Transport error fetching {url}: {e}", url)
            else:
                if response.status_code in RETRY_STATUS_CODES:
                    last_error = HTTPStatusError(response.status_code, url)
                elif not response.is_success:
                    raise HTTPStatusError(response.status_code, url)
                else:
                    html = response.text
                    logger.info("HTML length: %d", len(html))
                    check_challenge(html, url)
                    return html

            if attempt < attempts:
                logger.warning(
                    "Attempt %d/%d failed (%s), retrying in %.1fs",
                    attempt, attempts, last_error, delay,
                )
                time.sleep(delay)
                delay = min(delay * 2, RETRY_MAX_DELAY)

    raise last_error
