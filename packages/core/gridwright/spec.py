"""DiagramGraph, the input and output data format for gridwright.

The generation service hands us camelCase JSON (``groupId``, ``componentIds``,
``from``/``to``); the models accept it as-is and serialize back to the same
shape, enriched with geometry, for the SVG renderer.
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from gridwright.diagnostics import LayoutEvent
from gridwright.geometry import Box, Point, Segment

log = logging.getLogger(__name__)

_MODEL_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ComponentType(str, Enum):
    USER = "user"
    FRONTEND = "frontend"
    BACKEND = "backend"
    DATABASE = "database"
    CACHE = "cache"
    QUEUE = "queue"
    API = "api"
    SERVICE = "service"
    EXTERNAL = "external"


class ConnectionType(str, Enum):
    SYNC = "sync"
    ASYNC = "async"
    BIDIRECTIONAL = "bidirectional"


def _coerce_enum(enum_cls: type[Enum], value: Any, default: Enum) -> Any:
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        v = value.strip().lower()
        if v in enum_cls._value2member_map_:
            return v
    return default


def _none_to_list(v: Any) -> Any:
    return [] if v is None else v


class Component(BaseModel):
    model_config = _MODEL_CONFIG

    id: str
    name: str = ""
    type: ComponentType = ComponentType.SERVICE
    description: str = ""
    technologies: list[str] = Field(default_factory=list)
    group_id: str | None = None
    cloud_provider: str | None = None
    cloud_service: str | None = None

    @field_validator("type", mode="before")
    @classmethod
    def coerce_type(cls, v: Any) -> Any:
        return _coerce_enum(ComponentType, v, ComponentType.SERVICE)

    @field_validator("technologies", mode="before")
    @classmethod
    def coerce_technologies(cls, v: Any) -> Any:
        return _none_to_list(v)

    @model_validator(mode="after")
    def default_name(self) -> Component:
        if not self.name:
            self.name = self.id
        return self


class Connection(BaseModel):
    model_config = _MODEL_CONFIG

    source: str = Field(default="", alias="from")
    target: str = Field(default="", alias="to")
    label: str = ""
    type: ConnectionType = ConnectionType.SYNC

    @field_validator("label", mode="before")
    @classmethod
    def coerce_label(cls, v: Any) -> Any:
        return "" if v is None else str(v)

    @field_validator("type", mode="before")
    @classmethod
    def coerce_type(cls, v: Any) -> Any:
        return _coerce_enum(ConnectionType, v, ConnectionType.SYNC)


class Layer(BaseModel):
    model_config = _MODEL_CONFIG

    name: str = ""
    component_ids: list[str] = Field(default_factory=list)

    @field_validator("component_ids", mode="before")
    @classmethod
    def coerce_ids(cls, v: Any) -> Any:
        return _none_to_list(v)


class Group(BaseModel):
    model_config = _MODEL_CONFIG

    id: str
    name: str = ""
    group_type: str = "region"
    cloud_provider: str | None = None
    parent_group_id: str | None = None
    component_ids: list[str] = Field(default_factory=list)
    child_group_ids: list[str] = Field(default_factory=list)

    @field_validator("component_ids", "child_group_ids", mode="before")
    @classmethod
    def coerce_ids(cls, v: Any) -> Any:
        return _none_to_list(v)

    @field_validator("group_type", mode="before")
    @classmethod
    def coerce_group_type(cls, v: Any) -> Any:
        return v or "region"


class DiagramGraph(BaseModel):
    """Abstract architecture graph as produced by the generation service."""

    model_config = _MODEL_CONFIG

    system_name: str = ""
    cloud_provider: str | None = None
    components: list[Component] = Field(default_factory=list)
    connections: list[Connection] = Field(default_factory=list)
    layers: list[Layer] = Field(default_factory=list)
    groups: list[Group] = Field(default_factory=list)

    @field_validator("connections", "layers", mode="before")
    @classmethod
    def coerce_lists(cls, v: Any) -> Any:
        return _none_to_list(v)

    @field_validator("components", "groups", mode="before")
    @classmethod
    def drop_entries_without_id(cls, v: Any) -> Any:
        if v is None:
            return []
        if not isinstance(v, list):
            return v
        kept = [e for e in v if not isinstance(e, dict) or e.get("id")]
        if len(kept) != len(v):
            log.warning("Dropped %d entries without an id", len(v) - len(kept))
        return kept

    @property
    def is_hierarchical(self) -> bool:
        return bool(self.groups)

    def component(self, component_id: str) -> Component | None:
        for c in self.components:
            if c.id == component_id:
                return c
        return None

    def to_json(self, indent: int = 2) -> str:
        return self.model_dump_json(indent=indent, by_alias=True, exclude_none=True)

    @classmethod
    def from_json(cls, json_str: str) -> DiagramGraph:
        return cls.model_validate_json(json_str)

    @classmethod
    def from_yaml(cls, yaml_str: str) -> DiagramGraph:
        data = yaml.safe_load(yaml_str)
        return cls.model_validate(data or {})

    @classmethod
    def from_file(cls, path: str | Path) -> DiagramGraph:
        p = Path(path)
        text = p.read_text()
        if p.suffix in (".yaml", ".yml"):
            return cls.from_yaml(text)
        return cls.from_json(text)


# ---------------------------------------------------------------------------
# Positioned output
# ---------------------------------------------------------------------------


class PositionedComponent(Component):
    x: float
    y: float
    width: float
    height: float
    layer_index: int | None = None

    @property
    def box(self) -> Box:
        return Box.around(self.x, self.y, self.width, self.height)


class PositionedGroup(Group):
    """A group with top-left origin bounds."""

    x: float
    y: float
    width: float
    height: float

    @property
    def box(self) -> Box:
        return Box.from_origin(self.x, self.y, self.width, self.height)


class LabelDim(BaseModel):
    width: float
    height: float


class RoutedConnection(Connection):
    index: int
    from_edge: str
    to_edge: str
    path_points: list[Point] = Field(default_factory=list)
    path_segments: list[Segment] = Field(default_factory=list)
    path_d: str = ""
    label_pos: Point | None = None
    label_dim: LabelDim | None = None

    @property
    def is_async(self) -> bool:
        return self.type == ConnectionType.ASYNC

    @property
    def label_box(self) -> Box | None:
        if self.label_pos is None or self.label_dim is None:
            return None
        return Box.around(self.label_pos.x, self.label_pos.y, self.label_dim.width, self.label_dim.height)


class PositionedDiagram(BaseModel):
    model_config = _MODEL_CONFIG

    system_name: str = ""
    mode: str = "flat"
    width: float = 0.0
    height: float = 0.0
    cloud_provider: str | None = None
    components: list[PositionedComponent] = Field(default_factory=list)
    connections: list[RoutedConnection] = Field(default_factory=list)
    layers: list[Layer] = Field(default_factory=list)
    groups: list[PositionedGroup] = Field(default_factory=list)
    layer_height: float | None = None
    padding_top: float | None = None
    layer_label_height: float | None = None
    events: list[LayoutEvent] = Field(default_factory=list)

    @property
    def is_cloud_mode(self) -> bool:
        return self.mode == "hierarchical"

    def component(self, component_id: str) -> PositionedComponent | None:
        for c in self.components:
            if c.id == component_id:
                return c
        return None

    def group(self, group_id: str) -> PositionedGroup | None:
        for g in self.groups:
            if g.id == group_id:
                return g
        return None

    def to_json(self, indent: int = 2) -> str:
        return self.model_dump_json(indent=indent, by_alias=True, exclude_none=True)
