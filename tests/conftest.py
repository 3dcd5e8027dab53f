"""Pytest configuration and fixtures."""

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient

from flowcompare.history.dependencies import get_comparison_service, get_version_store
from flowcompare.history.service import VersionComparisonService
from flowcompare.history.versions import WorkflowVersionStore
from flowcompare.main import app


# Test data factories
class TestDataFactory:
    """Factory for creating workflow test data."""

    @staticmethod
    def node(node_id: str, label: str = "Node", x: float = 0, y: float = 0, **overrides):
        """Create node test data."""
        data = {
            "id": node_id,
            "type": "action",
            "position": {"x": x, "y": y},
            "data": {"label": label},
        }
        data.update(overrides)
        return data

    @staticmethod
    def edge(edge_id: str, source: str, target: str, **overrides):
        """Create edge test data."""
        data = {
            "id": edge_id,
            "source": source,
            "target": target,
        }
        data.update(overrides)
        return data

    @staticmethod
    def definition(nodes=None, edges=None, **overrides):
        """Create definition test data."""
        data = {
            "nodes": nodes or [],
            "edges": edges or [],
        }
        data.update(overrides)
        return data


@pytest.fixture
def test_data():
    """Provide test data factory."""
    return TestDataFactory


@pytest.fixture
def base_definition(test_data):
    """Base version of the reference comparison."""
    return test_data.definition(
        nodes=[test_data.node("n1", "Node 1"), test_data.node("n2", "Node 2")],
        edges=[test_data.edge("e1", "n1", "n2")],
    )


@pytest.fixture
def compare_definition(test_data):
    """Compare version: n1 relabelled, n2 replaced by n3, e2 added."""
    return test_data.definition(
        nodes=[test_data.node("n1", "Modified"), test_data.node("n3", "New")],
        edges=[test_data.edge("e1", "n1", "n2"), test_data.edge("e2", "n1", "n3")],
    )


@pytest.fixture
def rich_definition(test_data):
    """Definition exercising settings, variables and edge handles."""
    return test_data.definition(
        nodes=[
            test_data.node("trigger", "Webhook", type="trigger", data={
                "label": "Webhook",
                "config": {"path": "/hooks/orders", "methods": ["POST"]},
            }),
            test_data.node("http", "Fetch order", x=250, y=40),
            test_data.node("branch", "Is paid?", x=500, y=40, type="conditional"),
        ],
        edges=[
            test_data.edge("e1", "trigger", "http"),
            test_data.edge("e2", "http", "branch", sourceHandle="out", targetHandle="in"),
        ],
        settings={"timeout": 3000, "retryPolicy": {"maxRetries": 3, "initialDelay": 100}},
        variables=[{"name": "orderId", "type": "string"}],
    )


@pytest.fixture
def version_store():
    """Fresh in-memory version store."""
    return WorkflowVersionStore(max_versions_per_workflow=0)


@pytest.fixture
def comparison_service(version_store):
    """Comparison service bound to the fresh store."""
    return VersionComparisonService(version_store, cache_size=16)


@pytest.fixture
def client(version_store, comparison_service):
    """Test client with isolated version history."""
    app.dependency_overrides[get_version_store] = lambda: version_store
    app.dependency_overrides[get_comparison_service] = lambda: comparison_service
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def async_client(version_store, comparison_service):
    """Async test client with isolated version history."""
    app.dependency_overrides[get_version_store] = lambda: version_store
    app.dependency_overrides[get_comparison_service] = lambda: comparison_service
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
