"""Semantic role heuristics: tiering, gateway detection and group priority.

All string matching lives here so the layout engines only see a ``Tier``.
A different classifier can be plugged in through the
``gridwright.tier_classifiers`` entry point group.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from gridwright.spec import Component, ComponentType, Group

log = logging.getLogger(__name__)

CLASSIFIER_ENV = "GRIDWRIGHT_TIER_CLASSIFIER"
DEFAULT_CLASSIFIER = "keyword"

_TOP_TYPES = (ComponentType.USER, ComponentType.FRONTEND, ComponentType.EXTERNAL)
_TOP_NAME_KEYWORDS = ("client", "frontend")
_BOTTOM_TYPES = (ComponentType.DATABASE, ComponentType.CACHE)
_BOTTOM_NAME_KEYWORDS = ("db", "database", "s3", "bucket")
_GATEWAY_NAME_KEYWORDS = ("gateway", "api")
_PRIORITY_GROUP_KEYWORDS = ("user", "client", "external", "presentation")


class Tier(str, Enum):
    TOP = "top"
    MIDDLE = "middle"
    BOTTOM = "bottom"


TIER_ORDER = (Tier.TOP, Tier.MIDDLE, Tier.BOTTOM)


class TierClassifier(Protocol):
    def __call__(self, component: Component) -> Tier: ...


@dataclass(frozen=True)
class KeywordTierClassifier:
    """Tier by component type first, then by keywords in the component name."""

    top_types: tuple[ComponentType, ...] = _TOP_TYPES
    top_keywords: tuple[str, ...] = _TOP_NAME_KEYWORDS
    bottom_types: tuple[ComponentType, ...] = _BOTTOM_TYPES
    bottom_keywords: tuple[str, ...] = _BOTTOM_NAME_KEYWORDS

    def __call__(self, component: Component) -> Tier:
        name = component.name.lower()
        if component.type in self.top_types or any(k in name for k in self.top_keywords):
            return Tier.TOP
        if component.type in self.bottom_types or any(k in name for k in self.bottom_keywords):
            return Tier.BOTTOM
        return Tier.MIDDLE


classify_tier: TierClassifier = KeywordTierClassifier()


def is_gateway_like(component: Component) -> bool:
    name = component.name.lower()
    return any(k in name for k in _GATEWAY_NAME_KEYWORDS)


def is_priority_group(group: Group) -> bool:
    """Groups that should appear first (left-most) among their siblings."""
    name = (group.name or "").lower()
    group_type = (group.group_type or "").lower()
    return any(k in name or k in group_type for k in _PRIORITY_GROUP_KEYWORDS)


def get_tier_classifier(name: str | None = None) -> TierClassifier:
    """Resolve a classifier by name, falling back to the keyword classifier.

    The name comes from the argument, then $GRIDWRIGHT_TIER_CLASSIFIER.
    """
    name = name or os.environ.get(CLASSIFIER_ENV, "") or DEFAULT_CLASSIFIER
    if name == DEFAULT_CLASSIFIER:
        return classify_tier

    from gridwright.plugins import discover_tier_classifiers

    plugins = discover_tier_classifiers()
    if name in plugins:
        plugin = plugins[name]
        # Entry points may expose a class or a ready-made callable.
        return plugin() if isinstance(plugin, type) else plugin
    log.warning("Tier classifier %r not found, using %s", name, DEFAULT_CLASSIFIER)
    return classify_tier
