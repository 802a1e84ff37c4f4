"""
================================================================================
Smart Locator
================================================================================

Element location through declarative, prioritized locator rules:
    - Typed strategies evaluated in a fixed precedence order
    - Bounded polling with exponential backoff (no per-strategy timeouts)
    - Absence reported as an empty ElementRef instead of an exception
    - Usage analytics when a non-primary rule had to be used

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, List, Optional, Pattern, Tuple, Union

import allure
from loguru import logger
from playwright.async_api import Locator, Page

from .config_loader import get_timeout
from .wait_helpers import WaitConfig, poll_until


TextPattern = Union[str, Pattern]

# Element types searched by TEXT rules when none are given
DEFAULT_TEXT_ELEMENTS: Tuple[str, ...] = ("a", "button")


class ElementNotFoundError(Exception):
    """Raised when a required element could not be resolved."""
    pass


class ElementNotVisibleError(AssertionError):
    """Raised when a located element failed a visibility check."""
    pass


class LocatorStrategy(IntEnum):
    """
    Lookup strategies. The integer value is the precedence (lower wins).

    TEXT:         visible text inside a constrained element-type set
    CSS:          explicit CSS selector
    CSS_FRAGMENT: class / data-testid / id attribute fragment
    PAGE_TEXT:    full-document text scan
    """
    TEXT = 1
    CSS = 2
    CSS_FRAGMENT = 3
    PAGE_TEXT = 4


@dataclass(frozen=True)
class LocatorRule:
    """
    One (strategy, pattern) pair of a locator descriptor.

    Attributes:
        strategy: Lookup strategy
        pattern: Text, compiled regex, CSS selector or attribute fragment
        elements: Element selectors a TEXT rule is restricted to
        exact: TEXT/PAGE_TEXT only - match the whole trimmed text
    """
    strategy: LocatorStrategy
    pattern: TextPattern
    elements: Tuple[str, ...] = ()
    exact: bool = False

    def describe(self) -> str:
        pattern = self.pattern.pattern if isinstance(self.pattern, re.Pattern) else self.pattern
        scope = f" in {', '.join(self.elements)}" if self.elements else ""
        return f"{self.strategy.name.lower()}:{pattern!r}{scope}"


def text_rule(pattern: TextPattern, *elements: str, exact: bool = False) -> LocatorRule:
    """TEXT rule, e.g. text_rule("FAQ", "a")."""
    return LocatorRule(
        LocatorStrategy.TEXT,
        pattern,
        tuple(elements) or DEFAULT_TEXT_ELEMENTS,
        exact,
    )


def css_rule(selector: str) -> LocatorRule:
    """CSS rule, e.g. css_rule("footer")."""
    return LocatorRule(LocatorStrategy.CSS, selector)


def fragment_rule(fragment: str) -> LocatorRule:
    """CSS_FRAGMENT rule, e.g. fragment_rule("footer")."""
    return LocatorRule(LocatorStrategy.CSS_FRAGMENT, fragment)


def page_text_rule(pattern: TextPattern, exact: bool = False) -> LocatorRule:
    """PAGE_TEXT rule scanning the whole document."""
    return LocatorRule(LocatorStrategy.PAGE_TEXT, pattern, exact=exact)


def fragment_selector(fragment: str) -> str:
    """CSS selector matching `fragment` inside class, data-testid or id."""
    return (
        f'[class*="{fragment}"], '
        f'[data-testid*="{fragment}"], '
        f'[id*="{fragment}"]'
    )


def text_matcher(pattern: TextPattern, exact: bool = False) -> TextPattern:
    """
    Normalize a text pattern for Playwright text filters.

    Plain strings are case-insensitive substring matches in Playwright;
    exact strings become an anchored, whitespace-tolerant regex.
    """
    if isinstance(pattern, re.Pattern) or not exact:
        return pattern
    return re.compile(rf"^\s*{re.escape(pattern)}\s*$")


@dataclass(frozen=True)
class LocatorDescriptor:
    """
    Declarative description of how to find a named UI element.

    Rules are evaluated in strategy precedence order regardless of the order
    they were declared in; rules sharing a strategy keep declaration order.

    Attributes:
        name: Human-readable element name for logs and reports
        rules: Locator rules
        timeout: Resolution budget in ms (None = timeouts.element)
    """
    name: str
    rules: Tuple[LocatorRule, ...]
    timeout: Optional[int] = None

    def __post_init__(self) -> None:
        if not self.rules:
            raise ValueError(f"Locator descriptor '{self.name}' has no rules")

    @property
    def ordered_rules(self) -> Tuple[LocatorRule, ...]:
        return tuple(sorted(self.rules, key=lambda rule: rule.strategy))

    @property
    def primary(self) -> LocatorRule:
        return self.ordered_rules[0]

    @classmethod
    def text(
        cls,
        name: str,
        pattern: TextPattern,
        *elements: str,
        exact: bool = False,
        timeout: Optional[int] = None,
    ) -> "LocatorDescriptor":
        """Single TEXT rule descriptor."""
        return cls(name, (text_rule(pattern, *elements, exact=exact),), timeout)

    @classmethod
    def page_text(
        cls,
        name: str,
        pattern: TextPattern,
        timeout: Optional[int] = None,
    ) -> "LocatorDescriptor":
        """Single PAGE_TEXT rule descriptor."""
        return cls(name, (page_text_rule(pattern),), timeout)


@dataclass
class LocatorHealth:
    """
    Tracks which rule resolved a descriptor.

    Attributes:
        element_name: Human-readable element name
        primary_rule: The preferred rule
        used_fallback: Whether a lower-precedence rule was used
        fallback_rule: The rule that matched (if not primary)
    """
    element_name: str
    primary_rule: str
    used_fallback: bool = False
    fallback_rule: Optional[str] = None


@dataclass
class ElementRef:
    """
    Resolved, possibly-empty handle to zero or more DOM nodes.

    A found reference wraps a lazy Playwright Locator, so every operation
    re-queries the live DOM. An absent reference holds no locator.
    """
    name: str
    locator: Optional[Locator] = None
    rule: Optional[LocatorRule] = None
    _visible_timeout: int = field(default=0, repr=False)

    @classmethod
    def absent(cls, name: str) -> "ElementRef":
        return cls(name=name)

    @property
    def found(self) -> bool:
        return self.locator is not None

    def __bool__(self) -> bool:
        return self.found

    def _require(self) -> Locator:
        if self.locator is None:
            raise ElementNotFoundError(f"Element '{self.name}' was not found")
        return self.locator

    def _derive(self, locator: Locator, suffix: str) -> "ElementRef":
        return ElementRef(f"{self.name}{suffix}", locator, self.rule, self._visible_timeout)

    @property
    def first(self) -> "ElementRef":
        if not self.found:
            return self
        return self._derive(self.locator.first, "")

    def nth(self, index: int) -> "ElementRef":
        if not self.found:
            return self
        return self._derive(self.locator.nth(index), f"[{index}]")

    def within(self, selector: str) -> "ElementRef":
        """Descendants of this element matching `selector`."""
        if not self.found:
            return ElementRef.absent(f"{self.name} >> {selector}")
        return self._derive(self.locator.locator(selector), f" >> {selector}")

    async def count(self) -> int:
        if not self.found:
            return 0
        return await self.locator.count()

    async def is_visible(self) -> bool:
        """True if any matched node is currently visible."""
        return (await self.first_visible()).found

    async def first_visible(self) -> "ElementRef":
        """Narrow to the first currently visible node (absent if none)."""
        if not self.found:
            return self
        for index in range(await self.locator.count()):
            candidate = self.locator.nth(index)
            if await candidate.is_visible():
                return self._derive(candidate, "")
        return ElementRef.absent(self.name)

    async def should_be_visible(self, timeout: Optional[int] = None) -> "ElementRef":
        """
        Wait until a matched node is visible.

        Raises:
            ElementNotVisibleError: If nothing matched or no node became
                visible within `timeout` ms
        """
        if not self.found:
            raise ElementNotVisibleError(f"'{self.name}' was not found on the page")

        budget = timeout if timeout is not None else (self._visible_timeout or get_timeout("visible"))

        async def probe() -> Tuple[bool, ElementRef]:
            visible = await self.first_visible()
            return visible.found, visible

        visible = await poll_until(
            probe,
            description=f"'{self.name}' visible",
            config=WaitConfig.from_millis(budget),
        )
        if visible is None:
            raise ElementNotVisibleError(
                f"'{self.name}' was found but not visible within {budget}ms"
            )
        return visible

    async def text(self) -> str:
        """Rendered text of the first match ("" when absent)."""
        if not self.found:
            return ""
        return (await self.locator.first.inner_text()).strip()

    async def get_attribute(self, name: str) -> Optional[str]:
        if not self.found:
            return None
        return await self.locator.first.get_attribute(name)

    async def css(self, prop: str) -> str:
        """Computed style property of the first match."""
        return await self._require().first.evaluate(
            "(el, prop) => getComputedStyle(el).getPropertyValue(prop)",
            prop,
        )

    async def is_enabled(self) -> bool:
        if not self.found:
            return False
        return await self.locator.first.is_enabled()

    async def is_focused(self) -> bool:
        if not self.found:
            return False
        return await self.locator.first.evaluate("el => el === document.activeElement")

    async def click(self, **kwargs: Any) -> None:
        """
        Click the first visible match (or the first match when forced).

        Raises:
            ElementNotFoundError: When the reference is absent
        """
        locator = self._require()
        target = await self.first_visible()
        if target.found:
            locator = target.locator
        else:
            locator = locator.first
        with allure.step(f"Click: {self.name}"):
            await locator.click(**kwargs)

    async def hover(self) -> None:
        await self._require().first.hover()

    async def focus(self) -> None:
        await self._require().first.focus()

    async def scroll_into_view(self) -> None:
        await self._require().first.scroll_into_view_if_needed()


class SmartLocator:
    """
    Resolves LocatorDescriptors against a Playwright page.

    Locator Priority Order:
        1. Visible text inside a constrained element-type set
        2. Explicit CSS selector
        3. class / data-testid / id fragment
        4. Full-document text

    All rules are probed on every polling round, highest precedence first,
    so the total wait never exceeds the descriptor's timeout no matter how
    many rules it declares.

    Usage:
        >>> smart = SmartLocator(page)
        >>> faq = await smart.resolve(LocatorDescriptor.text("faq", "FAQ", "a"))
        >>> if faq:
        ...     await faq.click()
    """

    def __init__(
        self,
        page: Page,
        default_timeout: Optional[int] = None,
        visible_timeout: Optional[int] = None,
    ):
        """
        Args:
            page: Playwright Page object
            default_timeout: Resolution budget in ms (default: timeouts.element)
            visible_timeout: Visibility budget in ms (default: timeouts.visible)
        """
        self.page = page
        self.default_timeout = default_timeout if default_timeout is not None else get_timeout("element")
        self.visible_timeout = visible_timeout if visible_timeout is not None else get_timeout("visible")
        self._health_records: List[LocatorHealth] = []
        self._fallback_used: Dict[str, LocatorHealth] = {}

    def build(self, rule: LocatorRule) -> Locator:
        """Translate a rule into a lazy Playwright Locator."""
        if rule.strategy is LocatorStrategy.TEXT:
            scope = ", ".join(rule.elements or DEFAULT_TEXT_ELEMENTS)
            return self.page.locator(scope).filter(
                has_text=text_matcher(rule.pattern, rule.exact)
            )
        if rule.strategy is LocatorStrategy.CSS:
            return self.page.locator(rule.pattern)
        if rule.strategy is LocatorStrategy.CSS_FRAGMENT:
            return self.page.locator(fragment_selector(rule.pattern))
        return self.page.get_by_text(rule.pattern, exact=rule.exact)

    async def resolve(
        self,
        descriptor: LocatorDescriptor,
        timeout: Optional[int] = None,
    ) -> ElementRef:
        """
        Resolve a descriptor to an ElementRef.

        Args:
            descriptor: What to look for
            timeout: Budget in ms (descriptor timeout, then default_timeout)

        Returns:
            A found ElementRef, or an absent one when nothing matched in time
        """
        budget = timeout
        if budget is None:
            budget = descriptor.timeout if descriptor.timeout is not None else self.default_timeout

        candidates = [(rule, self.build(rule)) for rule in descriptor.ordered_rules]

        async def probe() -> Tuple[bool, Optional[Tuple[LocatorRule, Locator]]]:
            # A TEXT match with no visible node yields to any later rule that matches
            hidden_text = None
            for rule, locator in candidates:
                if await locator.count() == 0:
                    continue
                if rule.strategy is LocatorStrategy.TEXT:
                    if not await ElementRef(descriptor.name, locator).is_visible():
                        hidden_text = hidden_text or (rule, locator)
                        continue
                return True, (rule, locator)
            if hidden_text is not None:
                return True, hidden_text
            return False, None

        match = await poll_until(
            probe,
            description=f"resolve '{descriptor.name}'",
            config=WaitConfig.from_millis(budget),
        )

        if match is None:
            logger.debug(f"Element '{descriptor.name}' not found within {budget}ms")
            return ElementRef.absent(descriptor.name)

        rule, locator = match
        self._record(descriptor, rule)
        return ElementRef(descriptor.name, locator, rule, self.visible_timeout)

    async def require(
        self,
        descriptor: LocatorDescriptor,
        timeout: Optional[int] = None,
    ) -> ElementRef:
        """
        Resolve a descriptor that must exist.

        Raises:
            ElementNotFoundError: When no rule matched within the budget
        """
        ref = await self.resolve(descriptor, timeout=timeout)
        if not ref:
            rules = "\n".join(f"  - {rule.describe()}" for rule in descriptor.ordered_rules)
            error_msg = f"All locators failed for '{descriptor.name}':\n{rules}"
            logger.error(error_msg)
            raise ElementNotFoundError(error_msg)
        return ref

    async def is_visible(
        self,
        descriptor: LocatorDescriptor,
        timeout: Optional[int] = None,
    ) -> bool:
        ref = await self.resolve(descriptor, timeout=timeout)
        return await ref.is_visible()

    async def click(
        self,
        descriptor: LocatorDescriptor,
        timeout: Optional[int] = None,
        **kwargs: Any,
    ) -> None:
        ref = await self.require(descriptor, timeout=timeout)
        await ref.click(**kwargs)

    async def get_text(
        self,
        descriptor: LocatorDescriptor,
        timeout: Optional[int] = None,
    ) -> str:
        ref = await self.resolve(descriptor, timeout=timeout)
        return await ref.text()

    def _record(self, descriptor: LocatorDescriptor, rule: LocatorRule) -> None:
        primary = descriptor.primary
        health = LocatorHealth(
            element_name=descriptor.name,
            primary_rule=primary.describe(),
            used_fallback=rule != primary,
            fallback_rule=rule.describe() if rule != primary else None,
        )
        self._health_records.append(health)

        if health.used_fallback:
            logger.warning(
                f"⚠️ Element '{descriptor.name}' used fallback: {health.fallback_rule}"
            )
            self._fallback_used[descriptor.name] = health
        else:
            logger.debug(f"✅ Element '{descriptor.name}' found: {health.primary_rule}")

    def get_health_report(self) -> str:
        """
        Generate locator health report.

        Lists descriptors that needed a lower-precedence rule; those are
        candidates for a selector update.
        """
        if not self._fallback_used:
            return "✅ All elements used primary locators. No maintenance needed."

        report_lines = [
            "⚠️ Locator Health Report - Fallbacks Used:",
            "",
        ]
        for element_name, health in self._fallback_used.items():
            report_lines.extend([
                f"  [{element_name}]",
                f"    Failed primary: {health.primary_rule}",
                f"    Used: {health.fallback_rule}",
                "",
            ])
        return "\n".join(report_lines)


__all__ = [
    "SmartLocator",
    "ElementRef",
    "ElementNotFoundError",
    "ElementNotVisibleError",
    "LocatorStrategy",
    "LocatorRule",
    "LocatorDescriptor",
    "LocatorHealth",
    "DEFAULT_TEXT_ELEMENTS",
    "text_rule",
    "css_rule",
    "fragment_rule",
    "page_text_rule",
    "fragment_selector",
    "text_matcher",
]
