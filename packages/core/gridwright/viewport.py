"""Viewport size presets for the layout engines."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from enum import Enum

log = logging.getLogger(__name__)

VIEWPORT_ENV = "GRIDWRIGHT_VIEWPORT"

TITLE_SPACE = 50
LAYER_LABEL_HEIGHT = 50
BOTTOM_MARGIN = 40


class Viewport(str, Enum):
    DESKTOP = "desktop"
    TABLET = "tablet"
    MOBILE = "mobile"


@dataclass(frozen=True)
class ViewportProfile:
    component_width: float
    component_height: float
    gap_x: float
    layer_height: float
    padding_top: float
    padding_side: float
    min_width: float
    # hierarchical (cloud) view
    cloud_component_width: float = 180
    cloud_component_height: float = 180
    cloud_gap: float = 80


_PROFILES: dict[Viewport, ViewportProfile] = {
    Viewport.DESKTOP: ViewportProfile(
        component_width=220,
        component_height=120,
        gap_x=80,
        layer_height=250,
        padding_top=60 + TITLE_SPACE,
        padding_side=100,
        min_width=1200,
    ),
    Viewport.TABLET: ViewportProfile(
        component_width=180,
        component_height=120,
        gap_x=60,
        layer_height=250,
        padding_top=60 + TITLE_SPACE,
        padding_side=60,
        min_width=1200,
    ),
    Viewport.MOBILE: ViewportProfile(
        component_width=150,
        component_height=90,
        gap_x=40,
        layer_height=200,
        padding_top=40 + TITLE_SPACE,
        padding_side=40,
        min_width=350,
        cloud_component_width=150,
        cloud_component_height=150,
        cloud_gap=60,
    ),
}


def parse_viewport(viewport: Viewport | str) -> Viewport:
    if isinstance(viewport, Viewport):
        return viewport
    try:
        return Viewport(viewport.strip().lower())
    except ValueError:
        valid = ", ".join(v.value for v in Viewport)
        raise ValueError(f"Unknown viewport {viewport!r}. Valid: {valid}") from None


def get_profile(viewport: Viewport | str = Viewport.DESKTOP) -> ViewportProfile:
    return _PROFILES[parse_viewport(viewport)]


def default_viewport() -> Viewport:
    """Viewport named by $GRIDWRIGHT_VIEWPORT, desktop when unset or invalid."""
    raw = os.environ.get(VIEWPORT_ENV, "")
    if not raw:
        return Viewport.DESKTOP
    try:
        return parse_viewport(raw)
    except ValueError:
        log.warning("Ignoring invalid %s=%r, using desktop", VIEWPORT_ENV, raw)
        return Viewport.DESKTOP
