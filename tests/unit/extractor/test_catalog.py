"""Tests for the selector catalog and selector rules."""

from __future__ import annotations

import dataclasses

import pytest
from pydantic import ValidationError

from jobquarry.config.config import ExtractionSettings, SelectorRuleSettings
from jobquarry.extractor.catalog import (
    DEFAULT_SELECTOR_RULES,
    DESCRIPTION_WAIT_SELECTORS,
    SELECTOR_CATALOG,
    build_catalog,
    catalog_from_settings,
)
from jobquarry.extractor.models import SelectorKind, SelectorRule


@pytest.mark.unit
class TestSelectorRule:
    def test_css_rule_passes_through(self):
        rule = SelectorRule(".jobs-box__html-content", SelectorKind.CSS, 1)
        assert rule.to_css() == ".jobs-box__html-content"

    def test_fragment_rule_defaults_to_class(self):
        rule = SelectorRule("job-details", SelectorKind.ATTRIBUTE_FRAGMENT, 1)
        assert rule.to_css() == '[class*="job-details"]'

    def test_fragment_rule_on_other_attribute(self):
        rule = SelectorRule("description", SelectorKind.ATTRIBUTE_FRAGMENT, 1, attribute="data-test-id")
        assert rule.to_css() == '[data-test-id*="description"]'

    def test_fragment_quotes_are_escaped(self):
        rule = SelectorRule('a"b', SelectorKind.ATTRIBUTE_FRAGMENT, 1)
        assert rule.to_css() == '[class*="a\\"b"]'

    def test_empty_pattern_rejected(self):
        with pytest.raises(ValueError):
            SelectorRule("  ", SelectorKind.CSS, 1)

    def test_rules_are_immutable(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            SELECTOR_CATALOG[0].priority = 99  # type: ignore[misc]


@pytest.mark.unit
class TestCatalog:
    def test_default_catalog_is_priority_ordered(self):
        priorities = [rule.priority for rule in SELECTOR_CATALOG]
        assert priorities == sorted(priorities)
        assert len(SELECTOR_CATALOG) == len(DEFAULT_SELECTOR_RULES)
        assert SELECTOR_CATALOG[0].pattern == ".show-more-less-html__markup"

    def test_catalog_is_a_tuple(self):
        assert isinstance(SELECTOR_CATALOG, tuple)

    def test_build_catalog_sorts_and_keeps_ties_stable(self):
        a = SelectorRule(".a", SelectorKind.CSS, 20)
        b = SelectorRule(".b", SelectorKind.CSS, 10)
        c = SelectorRule(".c", SelectorKind.CSS, 20)
        assert build_catalog([a, b, c]) == (b, a, c)

    def test_build_catalog_requires_rules(self):
        with pytest.raises(ValueError):
            build_catalog([])

    def test_wait_selectors_are_the_most_reliable_rules(self):
        assert DESCRIPTION_WAIT_SELECTORS[0] == ".show-more-less-html__markup"
        assert len(DESCRIPTION_WAIT_SELECTORS) == 4


@pytest.mark.unit
class TestCatalogFromSettings:
    def test_empty_uses_default(self):
        assert catalog_from_settings([]) is SELECTOR_CATALOG

    def test_entries_are_parsed(self):
        settings = ExtractionSettings(
            selectors=[
                {"pattern": "job-body", "kind": "attribute_fragment", "priority": 20, "attribute": "id"},
                {"pattern": ".posting", "priority": 10},
            ]
        )
        rules = catalog_from_settings(settings.selectors)
        assert [r.pattern for r in rules] == [".posting", "job-body"]
        assert rules[1].kind is SelectorKind.ATTRIBUTE_FRAGMENT
        assert rules[1].to_css() == '[id*="job-body"]'

    def test_missing_priority_follows_list_order(self):
        rules = catalog_from_settings([SelectorRuleSettings(pattern=".first"), SelectorRuleSettings(pattern=".second")])
        assert [r.pattern for r in rules] == [".first", ".second"]
        assert [r.priority for r in rules] == [10, 20]

    def test_unknown_kind_is_a_config_error(self):
        with pytest.raises(ValidationError):
            ExtractionSettings(selectors=[{"pattern": ".x", "kind": "xpath"}])

    def test_entry_without_pattern_is_a_config_error(self):
        with pytest.raises(ValidationError, match="pattern"):
            ExtractionSettings(selectors=[{"kind": "css", "priority": 5}])

    def test_blank_pattern_is_a_config_error(self):
        with pytest.raises(ValidationError, match="blank"):
            SelectorRuleSettings(pattern="   ")
