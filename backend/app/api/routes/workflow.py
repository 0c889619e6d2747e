"""Guided workflow API routes — the coach chat session lifecycle."""

from fastapi import APIRouter, Depends

from app.schemas.workflow import SendMessageRequest, WorkflowSessionResponse
from app.services.workflow_service import WorkflowService, get_workflow_service

router = APIRouter()


@router.post("", response_model=WorkflowSessionResponse, status_code=201)
async def create_session(
    service: WorkflowService = Depends(get_workflow_service),
) -> WorkflowSessionResponse:
    """Start a new guided workflow with the coach's welcome messages."""
    session_id, workflow = service.create()
    return WorkflowSessionResponse.from_workflow(session_id, workflow)


@router.get("/{session_id}", response_model=WorkflowSessionResponse)
async def get_session(
    session_id: str,
    service: WorkflowService = Depends(get_workflow_service),
) -> WorkflowSessionResponse:
    return WorkflowSessionResponse.from_workflow(session_id, service.get(session_id))


@router.delete("/{session_id}", status_code=204)
async def delete_session(
    session_id: str,
    service: WorkflowService = Depends(get_workflow_service),
) -> None:
    service.delete(session_id)


@router.post("/{session_id}/messages", response_model=WorkflowSessionResponse)
async def send_message(
    session_id: str,
    request: SendMessageRequest,
    service: WorkflowService = Depends(get_workflow_service),
) -> WorkflowSessionResponse:
    """Send a founder message.

    The first message names the idea; later messages answer the current
    step and advance. Blank messages are ignored (``accepted: false``).
    """
    workflow, accepted = service.send(session_id, request.text)
    return WorkflowSessionResponse.from_workflow(session_id, workflow, accepted=accepted)


@router.post("/{session_id}/next", response_model=WorkflowSessionResponse)
async def next_step(
    session_id: str,
    service: WorkflowService = Depends(get_workflow_service),
) -> WorkflowSessionResponse:
    return WorkflowSessionResponse.from_workflow(session_id, service.go_next(session_id))


@router.post("/{session_id}/back", response_model=WorkflowSessionResponse)
async def previous_step(
    session_id: str,
    service: WorkflowService = Depends(get_workflow_service),
) -> WorkflowSessionResponse:
    return WorkflowSessionResponse.from_workflow(session_id, service.go_back(session_id))


@router.post("/{session_id}/reset", response_model=WorkflowSessionResponse)
async def reset_session(
    session_id: str,
    service: WorkflowService = Depends(get_workflow_service),
) -> WorkflowSessionResponse:
    return WorkflowSessionResponse.from_workflow(session_id, service.reset(session_id))
