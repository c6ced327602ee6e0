"""Tests for tier classification and role heuristics."""

from __future__ import annotations

from unittest.mock import patch

import pytest
from gridwright.roles import (
    CLASSIFIER_ENV,
    KeywordTierClassifier,
    Tier,
    classify_tier,
    get_tier_classifier,
    is_gateway_like,
    is_priority_group,
)
from gridwright.spec import Component, Group


@pytest.mark.parametrize(
    "component, tier",
    [
        (Component(id="u", type="user"), Tier.TOP),
        (Component(id="f", name="Web Frontend", type="service"), Tier.TOP),
        (Component(id="c", name="Mobile Client"), Tier.TOP),
        (Component(id="d", type="database"), Tier.BOTTOM),
        (Component(id="r", name="Redis", type="cache"), Tier.BOTTOM),
        (Component(id="s", name="Assets Bucket"), Tier.BOTTOM),
        (Component(id="o", name="Order Service", type="backend"), Tier.MIDDLE),
    ],
)
def test_classify_tier(component, tier):
    assert classify_tier(component) == tier


def test_custom_keywords():
    classifier = KeywordTierClassifier(bottom_keywords=("warehouse",))
    assert classifier(Component(id="w", name="Data Warehouse")) == Tier.BOTTOM
    assert classifier(Component(id="b", name="Bucket")) == Tier.MIDDLE


def test_gateway_like():
    assert is_gateway_like(Component(id="g", name="API Gateway"))
    assert is_gateway_like(Component(id="r", name="Public API"))
    assert not is_gateway_like(Component(id="w", name="Worker"))


@pytest.mark.parametrize(
    "group, expected",
    [
        (Group(id="a", name="External Clients"), True),
        (Group(id="b", name="Edge", group_type="presentation"), True),
        (Group(id="c", name="Private Subnet", group_type="subnet"), False),
    ],
)
def test_priority_group(group, expected):
    assert is_priority_group(group) is expected


class TestGetClassifier:
    def test_default_is_keyword(self, monkeypatch):
        monkeypatch.delenv(CLASSIFIER_ENV, raising=False)
        assert get_tier_classifier() is classify_tier

    def test_unknown_name_falls_back(self, caplog):
        with patch("gridwright.plugins.discover_tier_classifiers", return_value={}):
            assert get_tier_classifier("nope") is classify_tier
        assert "not found" in caplog.text

    def test_plugin_class_is_instantiated(self):
        class AllTop:
            def __call__(self, component):
                return Tier.TOP

        with patch("gridwright.plugins.discover_tier_classifiers", return_value={"all-top": AllTop}):
            classifier = get_tier_classifier("all-top")
        assert isinstance(classifier, AllTop)
        assert classifier(Component(id="d", type="database")) == Tier.TOP

    def test_env_var_selects_plugin(self, monkeypatch):
        monkeypatch.setenv(CLASSIFIER_ENV, "flat")
        fn = lambda component: Tier.MIDDLE  # noqa: E731
        with patch("gridwright.plugins.discover_tier_classifiers", return_value={"flat": fn}):
            assert get_tier_classifier() is fn
