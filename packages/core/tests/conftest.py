"""Shared fixtures for core tests."""

from __future__ import annotations

import pytest
from gridwright.spec import DiagramGraph


def _flat_data() -> dict:
    return {
        "systemName": "Web Shop",
        "components": [
            {"id": "web", "name": "Web Frontend", "type": "frontend"},
            {"id": "gw", "name": "API Gateway", "type": "api"},
            {"id": "orders", "name": "Order Service", "type": "backend"},
            {"id": "queue", "name": "Order Queue", "type": "queue"},
            {"id": "db", "name": "Orders DB", "type": "database"},
            {"id": "cache", "name": "Session Cache", "type": "cache"},
        ],
        "connections": [
            {"from": "web", "to": "gw", "label": "HTTPS", "type": "sync"},
            {"from": "gw", "to": "orders", "label": "REST", "type": "sync"},
            {"from": "orders", "to": "queue", "label": "publish", "type": "async"},
            {"from": "orders", "to": "db", "label": "SQL", "type": "sync"},
            {"from": "gw", "to": "cache", "label": "", "type": "sync"},
        ],
        "layers": [
            {"name": "Presentation", "componentIds": ["web"]},
            {"name": "Application", "componentIds": ["gw", "orders", "queue"]},
            {"name": "Data", "componentIds": ["db", "cache"]},
        ],
    }


def _cloud_data() -> dict:
    return {
        "systemName": "Cloud Shop",
        "cloudProvider": "aws",
        "components": [
            {"id": "users", "name": "Mobile Client", "type": "user", "groupId": "clients"},
            {"id": "alb", "name": "Load Balancer", "type": "service", "groupId": "public"},
            {"id": "api", "name": "API Service", "type": "backend", "groupId": "private"},
            {"id": "worker", "name": "Worker", "type": "backend", "groupId": "private"},
            {"id": "rds", "name": "Orders DB", "type": "database", "groupId": "private"},
            {"id": "s3", "name": "Assets Bucket", "type": "service"},
        ],
        "connections": [
            {"from": "users", "to": "alb", "label": "HTTPS"},
            {"from": "alb", "to": "api", "label": "HTTP"},
            {"from": "api", "to": "worker", "label": "jobs", "type": "async"},
            {"from": "api", "to": "rds", "label": "SQL"},
            {"from": "worker", "to": "s3", "label": "upload"},
        ],
        "groups": [
            {"id": "vpc", "name": "Production VPC", "groupType": "vpc", "childGroupIds": ["public", "private"]},
            {"id": "public", "name": "Public Subnet", "groupType": "subnet", "parentGroupId": "vpc"},
            {"id": "private", "name": "Private Subnet", "groupType": "subnet", "parentGroupId": "vpc"},
            {"id": "clients", "name": "External Clients", "groupType": "external"},
            {"id": "empty", "name": "Unused", "groupType": "region"},
        ],
    }


def _dense_data() -> dict:
    """24 components over four layers with 36 labeled connections."""
    layer_names = ["Edge", "Services", "Workers", "Storage"]
    components = []
    layers = []
    for li, lname in enumerate(layer_names):
        ids = []
        for i in range(6):
            cid = f"{lname.lower()}{i}"
            ids.append(cid)
            components.append({"id": cid, "name": f"{lname} {i}", "type": "service"})
        layers.append({"name": lname, "componentIds": ids})

    connections = []
    for li in range(len(layer_names) - 1):
        upper, lower = layers[li]["componentIds"], layers[li + 1]["componentIds"]
        for i in range(6):
            connections.append({"from": upper[i], "to": lower[i], "label": f"call {li}{i}"})
            connections.append({"from": upper[i], "to": lower[(i + 2) % 6], "label": f"fanout {li}{i}"})
    return {"systemName": "Dense", "components": components, "connections": connections, "layers": layers}


@pytest.fixture
def flat_data() -> dict:
    return _flat_data()


@pytest.fixture
def flat_graph() -> DiagramGraph:
    """Six components across three layers."""
    return DiagramGraph.model_validate(_flat_data())


@pytest.fixture
def cloud_data() -> dict:
    return _cloud_data()


@pytest.fixture
def cloud_graph() -> DiagramGraph:
    """Nested VPC/subnet groups, a priority client group, one ungrouped and one empty group."""
    return DiagramGraph.model_validate(_cloud_data())


@pytest.fixture
def dense_graph() -> DiagramGraph:
    return DiagramGraph.model_validate(_dense_data())
