"""Tests for viewport presets."""

from __future__ import annotations

import pytest
from gridwright.viewport import VIEWPORT_ENV, Viewport, default_viewport, get_profile, parse_viewport


@pytest.mark.parametrize(
    "viewport, size, gap, min_width",
    [
        ("desktop", (220, 120), 80, 1200),
        ("tablet", (180, 120), 60, 1200),
        ("mobile", (150, 90), 40, 350),
    ],
)
def test_presets(viewport, size, gap, min_width):
    p = get_profile(viewport)
    assert (p.component_width, p.component_height) == size
    assert p.gap_x == gap
    assert p.min_width == min_width


def test_cloud_sizes_scale_only_on_mobile():
    assert get_profile("desktop").cloud_component_width == get_profile("tablet").cloud_component_width == 180
    assert get_profile("mobile").cloud_component_width == 150
    assert get_profile("mobile").cloud_gap == 60


def test_parse_accepts_enum_and_mixed_case():
    assert parse_viewport(Viewport.TABLET) is Viewport.TABLET
    assert parse_viewport(" Mobile ") is Viewport.MOBILE


def test_unknown_viewport_raises():
    with pytest.raises(ValueError, match="Valid: desktop, tablet, mobile"):
        get_profile("watch")


def test_default_viewport_from_env(monkeypatch):
    monkeypatch.setenv(VIEWPORT_ENV, "tablet")
    assert default_viewport() is Viewport.TABLET


def test_default_viewport_invalid_env_falls_back(monkeypatch, caplog):
    monkeypatch.setenv(VIEWPORT_ENV, "watch")
    assert default_viewport() is Viewport.DESKTOP
    assert VIEWPORT_ENV in caplog.text


def test_default_viewport_unset(monkeypatch):
    monkeypatch.delenv(VIEWPORT_ENV, raising=False)
    assert default_viewport() is Viewport.DESKTOP
