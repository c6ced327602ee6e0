"""Entry-point discovery for pluggable tier classifiers.

A distribution registers a classifier under the ``gridwright.tier_classifiers``
entry point group. The entry point may be a callable ``component -> Tier`` or
a class whose instances are; ``GRIDWRIGHT_TIER_CLASSIFIER`` selects one by name.
"""

from __future__ import annotations

import logging
from importlib.metadata import entry_points
from typing import Any

logger = logging.getLogger(__name__)

TIER_CLASSIFIER_GROUP = "gridwright.tier_classifiers"

ALL_GROUPS = (TIER_CLASSIFIER_GROUP,)


def _load_group(group: str) -> dict[str, Any]:
    loaded: dict[str, Any] = {}
    for ep in entry_points(group=group):
        try:
            loaded[ep.name] = ep.load()
        except Exception as exc:
            logger.warning("Skipping %s plugin %r: %s", group, ep.name, exc)
        else:
            logger.debug("Loaded %s plugin %r", group, ep.name)
    return loaded


def discover_plugins(group: str | None = None) -> dict[str, dict[str, Any]]:
    """``{group: {name: loaded_object}}`` for ``group``, or for every known group."""
    return {g: _load_group(g) for g in ((group,) if group else ALL_GROUPS)}


def discover_tier_classifiers() -> dict[str, Any]:
    return _load_group(TIER_CLASSIFIER_GROUP)


def list_plugins() -> dict[str, list[str]]:
    return {group: sorted(found) for group, found in discover_plugins().items()}
