# ================================================================================
# URL Helpers Module
# ================================================================================
#
# URL assertions for navigation checks. Assertions poll the current URL for
# a short budget because client-side routers update it asynchronously.
#
# ================================================================================

from typing import Callable, Optional
from urllib.parse import urljoin, urlparse

import allure
from playwright.async_api import Page

from .config_loader import ConfigLoader, get_timeout
from .constants import DOMAIN
from .wait_helpers import WaitConfig, WaitTimeoutError, wait_until


def normalize_url(url: str) -> str:
    """Strip a trailing slash from the path so '/x' and '/x/' compare equal."""
    parsed = urlparse(url)
    path = parsed.path.rstrip("/") or "/"
    return parsed._replace(path=path).geturl()


def is_on_domain(url: str, domain: str) -> bool:
    """True if `url`'s host is `domain` or one of its subdomains."""
    host = urlparse(url).hostname or ""
    return host == domain or host.endswith(f".{domain}")


def to_absolute(href: str, base_url: str) -> str:
    return urljoin(base_url, href)


async def verify_url_satisfies(
    page: Page,
    condition: Callable[[str], bool],
    description: str = "URL condition",
    timeout: Optional[int] = None,
) -> str:
    """
    Assert the current URL satisfies `condition` within `timeout` ms.

    Returns:
        The URL that satisfied the condition
    """
    budget = get_timeout("long") if timeout is None else timeout
    with allure.step(f"Verify URL: {description}"):
        try:
            return await wait_until(
                lambda: (condition(page.url), page.url),
                description=description,
                config=WaitConfig.from_millis(budget, initial_interval=0.1),
            )
        except WaitTimeoutError:
            raise AssertionError(f"URL {page.url!r} does not satisfy: {description}") from None


async def verify_url_includes(
    page: Page,
    expected_path: str,
    exact_match: bool = False,
    timeout: Optional[int] = None,
) -> str:
    """Assert the URL contains (or, with exact_match, equals) `expected_path`."""
    if exact_match:
        return await verify_url_satisfies(
            page,
            lambda url: normalize_url(url) == normalize_url(expected_path),
            f"equals {expected_path}",
            timeout,
        )
    return await verify_url_satisfies(
        page,
        lambda url: expected_path in url,
        f"includes {expected_path}",
        timeout,
    )


async def verify_url_on_domain(
    page: Page,
    domain: Optional[str] = None,
    timeout: Optional[int] = None,
) -> str:
    """Assert the browser is still on `domain` (default: ui.domain)."""
    domain = domain or ConfigLoader().get("ui.domain", DOMAIN)
    return await verify_url_satisfies(
        page,
        lambda url: domain in url,
        f"on domain {domain}",
        timeout,
    )


__all__ = [
    "normalize_url",
    "is_on_domain",
    "to_absolute",
    "verify_url_satisfies",
    "verify_url_includes",
    "verify_url_on_domain",
]
