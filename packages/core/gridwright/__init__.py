"""Gridwright: automatic layout for architecture diagrams."""

from gridwright.diagnostics import EventKind, LayoutEvent
from gridwright.geometry import Box, Point, Segment
from gridwright.spec import (
    Component,
    ComponentType,
    Connection,
    ConnectionType,
    DiagramGraph,
    Group,
    LabelDim,
    Layer,
    PositionedComponent,
    PositionedDiagram,
    PositionedGroup,
    RoutedConnection,
)
from gridwright.viewport import Viewport, get_profile

__version__ = "0.1.0"

__all__ = [
    "Box",
    "Component",
    "ComponentType",
    "Connection",
    "ConnectionType",
    "DiagramGraph",
    "EventKind",
    "get_profile",
    "Group",
    "LabelDim",
    "Layer",
    "LayoutEvent",
    "layout_diagram",
    "layout_flat",
    "layout_hierarchical",
    "lint_graph",
    "lint_layout",
    "LintWarning",
    "Point",
    "PositionedComponent",
    "PositionedDiagram",
    "PositionedGroup",
    "RoutedConnection",
    "Segment",
    "Viewport",
]


def __getattr__(name: str):
    # Lazy imports so `import gridwright` stays cheap for model-only users
    if name in ("layout_flat", "layout_hierarchical", "layout_diagram"):
        from gridwright import engine

        return getattr(engine, name)
    if name in ("lint_graph", "lint_layout", "LintWarning"):
        from gridwright import linter

        return getattr(linter, name)
    raise AttributeError(f"module 'gridwright' has no attribute {name!r}")
