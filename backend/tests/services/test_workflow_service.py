"""Unit tests for WorkflowService session bookkeeping."""

import pytest

from app.core.exceptions import WorkflowSessionNotFoundError
from app.services.workflow_service import WorkflowService

pytestmark = pytest.mark.unit


@pytest.fixture
def service():
    return WorkflowService()


def test_create_and_get(service):
    session_id, workflow = service.create()
    assert service.get(session_id) is workflow


def test_sessions_are_independent(service):
    first_id, _ = service.create()
    second_id, _ = service.create()

    service.send(first_id, "Checkout Rescue")

    assert first_id != second_id
    assert service.get(first_id).idea == "Checkout Rescue"
    assert service.get(second_id).at_intro is True


def test_unknown_session(service):
    with pytest.raises(WorkflowSessionNotFoundError):
        service.get("missing")


def test_send_reports_acceptance(service):
    session_id, _ = service.create()
    _, accepted = service.send(session_id, "  ")
    assert accepted is False
    _, accepted = service.send(session_id, "Checkout Rescue")
    assert accepted is True


def test_navigation(service):
    session_id, _ = service.create()
    service.send(session_id, "Checkout Rescue")

    assert service.go_next(session_id).step_index == 1
    assert service.go_back(session_id).step_index == 0

    workflow = service.reset(session_id)
    assert workflow.at_intro is True


def test_delete_releases_session(service):
    session_id, _ = service.create()
    service.delete(session_id)

    with pytest.raises(WorkflowSessionNotFoundError):
        service.get(session_id)
    assert service._sessions == {}


def test_delete_unknown_session(service):
    with pytest.raises(WorkflowSessionNotFoundError):
        service.delete("missing")
