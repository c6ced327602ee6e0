"""Non-fatal layout events: healing, redistribution and skipped input."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum


class EventKind(str, Enum):
    ORPHAN_HEALED = "orphan_healed"
    ISOLATED_HEALED = "isolated_healed"
    LAYER_PRUNED = "layer_pruned"
    GROUP_PRUNED = "group_pruned"
    GROUP_REPARENTED = "group_reparented"
    DUPLICATE_COMPONENT = "duplicate_component"
    EDGE_REDISTRIBUTED = "edge_redistributed"
    DANGLING_CONNECTION = "dangling_connection"


_LEVELS: dict[EventKind, int] = {
    EventKind.EDGE_REDISTRIBUTED: logging.INFO,
    EventKind.DANGLING_CONNECTION: logging.DEBUG,
}


@dataclass(frozen=True)
class LayoutEvent:
    kind: EventKind
    subject: str
    detail: str = ""


def record(events: list[LayoutEvent], logger: logging.Logger, kind: EventKind, subject: str, detail: str = "") -> None:
    """Append an event and log it at the level its kind calls for."""
    events.append(LayoutEvent(kind=kind, subject=subject, detail=detail))
    logger.log(_LEVELS.get(kind, logging.WARNING), "%s: %s %s", kind.value, subject, detail)
