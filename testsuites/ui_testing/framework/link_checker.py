"""
================================================================================
Link Checker
================================================================================

Link discovery on a rendered page plus HTTP status checks for internal links.

Features:
    - Anchor collection (text, href, target, aria-label, title)
    - Internal URL extraction (anchors, mailto/tel/javascript excluded)
    - Accessibility audits (missing href, missing accessible name)
    - Async HTTP status checks via httpx, redirects reported not followed

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, asdict
from typing import Any, Dict, Iterable, List, Optional, Sequence

import allure
import httpx
from loguru import logger
from playwright.async_api import Page

from .config_loader import ConfigLoader
from .constants import BASE_URL, DOMAIN
from .url_helpers import is_on_domain, to_absolute


DEFAULT_OK_STATUSES = [200, 301, 302]
NON_NAVIGABLE_SCHEMES = ("mailto:", "tel:", "javascript:")

COLLECT_LINKS_JS = """els => els.map(el => ({
    text: (el.innerText || "").trim(),
    href: el.getAttribute("href"),
    target: el.getAttribute("target"),
    aria_label: el.getAttribute("aria-label"),
    title: el.getAttribute("title"),
}))"""


@dataclass
class LinkInfo:
    """Attributes of one anchor element."""
    text: str
    href: Optional[str] = None
    target: Optional[str] = None
    aria_label: Optional[str] = None
    title: Optional[str] = None

    @property
    def is_anchor(self) -> bool:
        return bool(self.href) and self.href.startswith("#")

    @property
    def has_accessible_name(self) -> bool:
        return bool(self.text or self.aria_label or self.title)


@dataclass
class LinkCheckResult:
    """Outcome of one HTTP status check."""
    url: str
    status: Optional[int] = None
    ok: bool = False
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


async def collect_links(page: Page, selector: str = "a") -> List[LinkInfo]:
    """Snapshot the attributes of every node matching `selector`."""
    raw = await page.locator(selector).evaluate_all(COLLECT_LINKS_JS)
    return [LinkInfo(**item) for item in raw]


def internal_urls(
    links: Iterable[LinkInfo],
    base_url: str = BASE_URL,
    domain: str = DOMAIN,
) -> List[str]:
    """Absolute, de-duplicated URLs of links that stay on `domain`."""
    urls: List[str] = []
    for link in links:
        href = (link.href or "").strip()
        if not href or href.startswith("#") or href.lower().startswith(NON_NAVIGABLE_SCHEMES):
            continue
        url = to_absolute(href, base_url).split("#", 1)[0]
        if is_on_domain(url, domain) and url not in urls:
            urls.append(url)
    return urls


def external_links(links: Iterable[LinkInfo], domain: str = DOMAIN) -> List[LinkInfo]:
    """Absolute http(s) links pointing away from `domain`."""
    return [
        link for link in links
        if (link.href or "").startswith("http") and not is_on_domain(link.href, domain)
    ]


def anchor_links(links: Iterable[LinkInfo]) -> List[LinkInfo]:
    """Same-page hash links, excluding the bare '#'."""
    return [link for link in links if link.is_anchor and link.href != "#"]


def links_without_href(links: Iterable[LinkInfo]) -> List[LinkInfo]:
    """Links with visible text but no href attribute."""
    return [link for link in links if link.text and link.href is None]


def links_without_accessible_name(links: Iterable[LinkInfo]) -> List[LinkInfo]:
    """Links with no text, aria-label or title."""
    return [link for link in links if not link.has_accessible_name]


class LinkChecker:
    """
    Async HTTP status checker for discovered links.

    Redirects are not followed so a 301/302 is reported as such.

    Usage:
        async with LinkChecker() as checker:
            results = await checker.check_all(urls)
    """

    def __init__(
        self,
        ok_statuses: Optional[Sequence[int]] = None,
        timeout: Optional[float] = None,
        concurrency: int = 5,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            ok_statuses: Statuses counted as healthy (default: links.ok_statuses)
            timeout: Request timeout in seconds (default: links.request_timeout)
            concurrency: Maximum parallel requests
            transport: Custom httpx transport (used by unit tests)
        """
        config = ConfigLoader()
        self.ok_statuses = list(ok_statuses or config.get("links.ok_statuses", DEFAULT_OK_STATUSES))
        self.timeout = timeout if timeout is not None else float(config.get("links.request_timeout", 30))
        self._semaphore = asyncio.Semaphore(concurrency)
        self._client = httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=False,
            transport=transport,
        )

    async def __aenter__(self) -> "LinkChecker":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    async def check(self, url: str) -> LinkCheckResult:
        """Request `url` once and classify the status."""
        async with self._semaphore:
            try:
                response = await self._client.get(url)
            except httpx.HTTPError as e:
                logger.warning(f"Link check failed for {url}: {e}")
                return LinkCheckResult(url=url, error=str(e))

        ok = response.status_code in self.ok_statuses
        if not ok:
            logger.warning(f"Unexpected status {response.status_code} for {url}")
        else:
            logger.debug(f"{response.status_code} {url}")
        return LinkCheckResult(url=url, status=response.status_code, ok=ok)

    async def check_all(self, urls: Iterable[str]) -> List[LinkCheckResult]:
        """Check every URL (bounded concurrency); order is preserved."""
        urls = list(urls)
        with allure.step(f"Check {len(urls)} links"):
            return list(await asyncio.gather(*(self.check(url) for url in urls)))


__all__ = [
    "LinkInfo",
    "LinkCheckResult",
    "LinkChecker",
    "collect_links",
    "internal_urls",
    "external_links",
    "anchor_links",
    "links_without_href",
    "links_without_accessible_name",
]
