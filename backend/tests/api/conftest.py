"""API-specific test fixtures."""

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.services.board_service import BoardService, get_board_service
from app.services.workflow_service import WorkflowService, get_workflow_service


@pytest.fixture
def board_service(sequential_ids):
    return BoardService(id_factory=sequential_ids)


@pytest.fixture
def workflow_service():
    return WorkflowService()


@pytest.fixture
def api_client(board_service, workflow_service):
    """TestClient with fresh in-memory services (no Redis)."""
    app.dependency_overrides[get_board_service] = lambda: board_service
    app.dependency_overrides[get_workflow_service] = lambda: workflow_service
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()
