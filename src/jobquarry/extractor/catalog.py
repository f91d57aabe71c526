"""
Selector catalog: structural hints for job-description containers, ranked by
how reliably they have located the description on the supported job boards.
"""

from __future__ import annotations

from typing import Iterable, Sequence, Tuple

from ..config.config import SelectorRuleSettings
from .models import SelectorKind, SelectorRule

_CSS = SelectorKind.CSS
_FRAGMENT = SelectorKind.ATTRIBUTE_FRAGMENT

DEFAULT_SELECTOR_RULES: Tuple[SelectorRule, ...] = (
    SelectorRule(".show-more-less-html__markup", _CSS, 10),
    SelectorRule(".jobs-description-content__text", _CSS, 20),
    SelectorRule('[data-test-id="job-details-description"]', _CSS, 30),
    SelectorRule(".jobs-box__html-content", _CSS, 40),
    SelectorRule(".description__text", _CSS, 50),
    SelectorRule(".jobs-description__content", _CSS, 60),
    SelectorRule('div[class*="jobs-description"]', _CSS, 70),
    SelectorRule('section[class*="jobs-description"]', _CSS, 80),
    SelectorRule("description__text", _FRAGMENT, 90),
    SelectorRule("job-details", _FRAGMENT, 100),
    SelectorRule(".jobs-description__text", _CSS, 110),
    SelectorRule("job-details", _FRAGMENT, 120, attribute="id"),
    SelectorRule('div[class*="jobs-details"]', _CSS, 130),
    SelectorRule('section[class*="jobs-details"]', _CSS, 140),
    SelectorRule("description", _FRAGMENT, 150, attribute="data-test-id"),
    SelectorRule("job", _FRAGMENT, 160, attribute="data-test-id"),
)

# Used by the page driver to wait for the description before capturing.
DESCRIPTION_WAIT_SELECTORS: Tuple[str, ...] = tuple(rule.to_css() for rule in DEFAULT_SELECTOR_RULES[:4])


def build_catalog(rules: Iterable[SelectorRule]) -> Tuple[SelectorRule, ...]:
    """Return rules as an immutable sequence, lowest priority value first.

    Ties keep their input order.
    """
    ordered = sorted(rules, key=lambda rule: rule.priority)
    if not ordered:
        raise ValueError("selector catalog must contain at least one rule")
    return tuple(ordered)


def catalog_from_settings(entries: Sequence[SelectorRuleSettings]) -> Tuple[SelectorRule, ...]:
    """Build a catalog from configured entries.

    An empty sequence yields the default catalog. Entries without a priority
    are ranked by their position in the list.
    """
    if not entries:
        return SELECTOR_CATALOG
    rules = [
        SelectorRule(
            pattern=entry.pattern,
            kind=SelectorKind(entry.kind),
            priority=entry.priority if entry.priority is not None else (index + 1) * 10,
            attribute=entry.attribute,
        )
        for index, entry in enumerate(entries)
    ]
    return build_catalog(rules)


SELECTOR_CATALOG: Tuple[SelectorRule, ...] = build_catalog(DEFAULT_SELECTOR_RULES)
