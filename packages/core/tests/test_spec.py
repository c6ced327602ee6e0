"""Tests for the DiagramGraph data model."""

from __future__ import annotations

import json

import pytest
import yaml
from gridwright.spec import ComponentType, Connection, ConnectionType, DiagramGraph
from pydantic import ValidationError


class TestParsing:
    def test_camel_case_input(self, flat_graph):
        assert flat_graph.system_name == "Web Shop"
        assert flat_graph.layers[1].component_ids == ["gw", "orders", "queue"]
        conn = flat_graph.connections[0]
        assert (conn.source, conn.target) == ("web", "gw")

    def test_snake_case_names_also_accepted(self):
        conn = Connection(source="a", target="b")
        assert conn.source == "a"

    def test_unknown_enum_values_coerce_to_defaults(self):
        g = DiagramGraph.model_validate(
            {
                "components": [{"id": "x", "type": "mainframe"}],
                "connections": [{"from": "x", "to": "x", "type": "carrier-pigeon", "label": None}],
            }
        )
        assert g.components[0].type == ComponentType.SERVICE
        assert g.connections[0].type == ConnectionType.SYNC
        assert g.connections[0].label == ""

    def test_name_defaults_to_id(self):
        g = DiagramGraph.model_validate({"components": [{"id": "svc"}]})
        assert g.components[0].name == "svc"

    def test_entries_without_id_dropped(self):
        g = DiagramGraph.model_validate({"components": [{"id": "a"}, {"name": "nameless"}], "groups": [{"name": "g"}]})
        assert [c.id for c in g.components] == ["a"]
        assert g.groups == []

    def test_null_lists(self):
        g = DiagramGraph.model_validate({"components": None, "connections": None, "layers": None, "groups": None})
        assert g.components == []
        assert not g.is_hierarchical

    def test_is_hierarchical(self, cloud_graph, flat_graph):
        assert cloud_graph.is_hierarchical
        assert not flat_graph.is_hierarchical


class TestSerialization:
    def test_to_json_uses_aliases(self, flat_graph):
        data = json.loads(flat_graph.to_json())
        assert data["systemName"] == "Web Shop"
        assert data["connections"][0]["from"] == "web"
        assert "componentIds" in data["layers"][0]

    def test_json_roundtrip(self, cloud_graph):
        assert DiagramGraph.from_json(cloud_graph.to_json()) == cloud_graph


class TestFromFile:
    def test_yaml_file(self, tmp_path, flat_data):
        p = tmp_path / "graph.yaml"
        p.write_text(yaml.safe_dump(flat_data))
        g = DiagramGraph.from_file(p)
        assert len(g.components) == 6

    def test_json_file(self, tmp_path, cloud_data):
        p = tmp_path / "graph.json"
        p.write_text(json.dumps(cloud_data))
        assert DiagramGraph.from_file(p).cloud_provider == "aws"

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            DiagramGraph.from_file(tmp_path / "nope.json")

    def test_invalid_json_raises(self, tmp_path):
        p = tmp_path / "bad.json"
        p.write_text("{not json")
        with pytest.raises(ValidationError):
            DiagramGraph.from_file(p)
