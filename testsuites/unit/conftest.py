"""
================================================================================
Unit Test Fixtures
================================================================================

In-memory stand-ins for the slice of the async Playwright Page / Locator API
the framework touches, so resolver, wait, scroll, cookie and page-object
logic can be exercised without a browser.

The fake DOM supports:
    - Selector lists ("a, button"), tag and attribute selectors
      ([attr], [attr="v"], [attr*="v"], [attr^="v"]), descendant chains
      ("header a") and the parent step "xpath=.."
    - has_text filtering and get_by_text (own text only)
    - Visibility inherited from ancestors
    - Anchor clicks ("#id" scrolls, other hrefs navigate)
    - The scroll scripts from scroll_helpers

================================================================================
"""

import os
import re
from typing import Any, Callable, Iterator, List, Optional
from urllib.parse import urljoin

import pytest
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from testsuites.ui_testing.framework.config_loader import ConfigLoader
from testsuites.ui_testing.framework.link_checker import COLLECT_LINKS_JS
from testsuites.ui_testing.framework.scroll_helpers import SCROLL_POSITION_JS, SCROLL_TO_JS


_ATTR = re.compile(r'\[([\w-]+)(?:([*^]?=)"([^"]*)")?\]')
_TAG = re.compile(r"^([\w*]+)")

CONFIG_ENV_PREFIXES = ("UI_", "TIMEOUTS_", "LINKS_")


def _attr_name(key: str) -> str:
    return key.rstrip("_").replace("_", "-")


def text_matches(text: str, pattern: Any, exact: bool = False) -> bool:
    if isinstance(pattern, re.Pattern):
        return pattern.search(text) is not None
    if exact:
        return text.strip() == pattern
    return pattern.lower() in text.lower()


class FakeNode:
    """
    Element in the fake DOM.

    Keyword arguments not consumed by the constructor become attributes:
    class_="logo" -> class, aria_label="x" -> aria-label.
    """

    def __init__(
        self,
        tag: str,
        text: str = "",
        *children: "FakeNode",
        visible: bool = True,
        enabled: bool = True,
        offset: float = 0.0,
        styles: Optional[dict] = None,
        on_click: Optional[Callable[["FakePage"], None]] = None,
        **attrs: str,
    ):
        self.tag = tag
        self.text = text
        self.children = list(children)
        self.visible = visible
        self.enabled = enabled
        self.offset = offset
        self.styles = styles or {}
        self.on_click = on_click
        self.attrs = {_attr_name(key): value for key, value in attrs.items()}
        self.parent: Optional[FakeNode] = None
        for child in self.children:
            child.parent = self

    def __repr__(self) -> str:
        return f"<{self.tag} {self.text!r}>"

    def iter(self) -> Iterator["FakeNode"]:
        yield self
        for child in self.children:
            yield from child.iter()

    def descendants(self) -> Iterator["FakeNode"]:
        for child in self.children:
            yield from child.iter()

    def ancestors(self) -> Iterator["FakeNode"]:
        node = self.parent
        while node is not None:
            yield node
            node = node.parent

    @property
    def is_displayed(self) -> bool:
        return self.visible and all(node.visible for node in self.ancestors())

    def text_content(self) -> str:
        parts = [self.text] + [child.text_content() for child in self.children]
        return " ".join(part for part in parts if part)

    def inner_text(self) -> str:
        if not self.visible:
            return ""
        parts = [self.text] + [child.inner_text() for child in self.children]
        return "\n".join(part for part in parts if part)


def _matches_simple(node: FakeNode, simple: str) -> bool:
    tag = _TAG.match(simple)
    if tag and tag.group(1) not in ("*", node.tag):
        return False
    for name, op, value in _ATTR.findall(simple):
        actual = node.attrs.get(name)
        if actual is None:
            return False
        if op == "*=" and value not in actual:
            return False
        if op == "^=" and not actual.startswith(value):
            return False
        if op == "=" and actual != value:
            return False
    return True


def matches(node: FakeNode, selector: str) -> bool:
    """Match one comma-free selector, descendant chains included."""
    simples = selector.split()
    if not _matches_simple(node, simples[-1]):
        return False
    ancestors = list(node.ancestors())
    for simple in reversed(simples[:-1]):
        while ancestors and not _matches_simple(ancestors[0], simple):
            ancestors.pop(0)
        if not ancestors:
            return False
        ancestors.pop(0)
    return True


def query(scopes: List[FakeNode], selector: str) -> List[FakeNode]:
    found: List[FakeNode] = []
    if selector == "xpath=..":
        for node in scopes:
            if node.parent is not None and node.parent not in found:
                found.append(node.parent)
        return found

    parts = [part.strip() for part in selector.split(",") if part.strip()]
    for scope in scopes:
        for node in scope.descendants():
            if node not in found and any(matches(node, part) for part in parts):
                found.append(node)
    return found


class FakeLocator:
    """Lazy locator: every call re-runs the query against the live fake DOM."""

    def __init__(self, page: "FakePage", resolve: Callable[[], List[FakeNode]]):
        self.page = page
        self._resolve = resolve

    def nodes(self) -> List[FakeNode]:
        return self._resolve()

    @property
    def first(self) -> "FakeLocator":
        return FakeLocator(self.page, lambda: self.nodes()[:1])

    def nth(self, index: int) -> "FakeLocator":
        return FakeLocator(self.page, lambda: self.nodes()[index:index + 1])

    def filter(self, has_text: Any = None) -> "FakeLocator":
        return FakeLocator(
            self.page,
            lambda: [node for node in self.nodes() if text_matches(node.text_content(), has_text)],
        )

    def locator(self, selector: str) -> "FakeLocator":
        return FakeLocator(self.page, lambda: query(self.nodes(), selector))

    def _one(self) -> FakeNode:
        nodes = self.nodes()
        if not nodes:
            raise PlaywrightTimeoutError("Timeout 100ms exceeded waiting for locator")
        return nodes[0]

    async def count(self) -> int:
        return len(self.nodes())

    async def is_visible(self) -> bool:
        nodes = self.nodes()
        return bool(nodes) and nodes[0].is_displayed

    async def is_enabled(self) -> bool:
        return self._one().enabled

    async def inner_text(self) -> str:
        return self._one().inner_text()

    async def get_attribute(self, name: str) -> Optional[str]:
        return self._one().attrs.get(name)

    async def click(self, **kwargs: Any) -> None:
        node = self._one()
        self.page.clicks.append((node, kwargs))
        self.page.activate(node)

    async def hover(self) -> None:
        self.page.hovered = self._one()

    async def focus(self) -> None:
        self.page.focused = self._one()

    async def scroll_into_view_if_needed(self) -> None:
        self.page.scroll_y = self._one().offset

    async def evaluate(self, script: str, arg: Any = None) -> Any:
        node = self._one()
        if "getComputedStyle" in script:
            return node.styles.get(arg, "")
        if "activeElement" in script:
            return node is self.page.focused
        raise NotImplementedError(script)

    async def evaluate_all(self, script: str) -> List[dict]:
        if script != COLLECT_LINKS_JS:
            raise NotImplementedError(script)
        return [
            {
                "text": node.inner_text().strip(),
                "href": node.attrs.get("href"),
                "target": node.attrs.get("target"),
                "aria_label": node.attrs.get("aria-label"),
                "title": node.attrs.get("title"),
            }
            for node in self.nodes()
        ]


class FakePage:
    """Page holding a fake DOM under <html><body>."""

    def __init__(
        self,
        *children: FakeNode,
        url: str = "https://fundix.pro/",
        scroll_height: float = 3000.0,
        viewport_height: float = 1080.0,
    ):
        self.body = FakeNode("body", "", *children)
        self.document = FakeNode("html", "", self.body)
        self.url = url
        self.history = [url]
        self.scroll_y = 0.0
        self.scroll_height = scroll_height
        self.viewport_height = viewport_height
        self.load_state_error = False
        self.focused: Optional[FakeNode] = None
        self.hovered: Optional[FakeNode] = None
        self.viewport: Optional[dict] = None
        self.clicks: List[tuple] = []
        self.waits: List[int] = []
        self.load_states: List[str] = []
        self.reloads = 0

    # DOM access

    def locator(self, selector: str) -> FakeLocator:
        return FakeLocator(self, lambda: query([self.document], selector))

    def get_by_text(self, pattern: Any, exact: bool = False) -> FakeLocator:
        return FakeLocator(
            self,
            lambda: [
                node for node in self.body.iter()
                if node.text and text_matches(node.text, pattern, exact)
            ],
        )

    def find_by_id(self, element_id: str) -> Optional[FakeNode]:
        for node in self.document.iter():
            if node.attrs.get("id") == element_id:
                return node
        return None

    # Behaviour

    def activate(self, node: FakeNode) -> None:
        if node.on_click is not None:
            node.on_click(self)
        href = node.attrs.get("href") if node.tag == "a" else None
        if not href:
            return
        if href.startswith("#"):
            target = self.find_by_id(href[1:])
            if target is not None:
                self.scroll_y = target.offset
        elif not href.lower().startswith(("mailto:", "tel:", "javascript:")):
            self._navigate(urljoin(self.url, href))

    def _navigate(self, url: str) -> None:
        index = self.history.index(self.url) if self.url in self.history else len(self.history) - 1
        self.history = self.history[:index + 1] + [url]
        self.url = url

    async def evaluate(self, script: str, arg: Any = None) -> Any:
        if script == SCROLL_POSITION_JS:
            return self.scroll_y
        if script == SCROLL_TO_JS:
            target, _smooth = arg
            max_scroll = max(self.scroll_height - self.viewport_height, 0.0)
            if target == "top":
                self.scroll_y = 0.0
            elif target == "bottom":
                self.scroll_y = max_scroll
            else:
                self.scroll_y = float(min(max(target, 0), max_scroll))
            return None
        raise NotImplementedError(script)

    async def wait_for_timeout(self, timeout: int) -> None:
        self.waits.append(timeout)

    async def wait_for_load_state(self, state: str = "load", timeout: Optional[int] = None) -> None:
        self.load_states.append(state)
        if self.load_state_error:
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded.")

    async def goto(self, url: str, **kwargs: Any) -> None:
        self._navigate(url)

    async def reload(self, **kwargs: Any) -> None:
        self.reloads += 1

    async def go_back(self, **kwargs: Any) -> None:
        index = self.history.index(self.url)
        if index > 0:
            self.url = self.history[index - 1]

    async def go_forward(self, **kwargs: Any) -> None:
        index = self.history.index(self.url)
        if index < len(self.history) - 1:
            self.url = self.history[index + 1]

    async def set_viewport_size(self, size: dict) -> None:
        self.viewport = dict(size)


# ================================================================================
# Fixtures
# ================================================================================

@pytest.fixture(autouse=True)
def _fresh_config(monkeypatch):
    """Each test reads the bundled config.yaml without environment overrides."""
    for name in list(os.environ):
        if name.startswith(CONFIG_ENV_PREFIXES):
            monkeypatch.delenv(name)
    ConfigLoader.reset()
    yield
    ConfigLoader.reset()


@pytest.fixture
def el():
    """Element factory: el("a", "FAQ", href="/faq")."""
    return FakeNode


@pytest.fixture
def make_page():
    """Page factory: make_page(el("header", "", ...), url=...)."""
    return FakePage
