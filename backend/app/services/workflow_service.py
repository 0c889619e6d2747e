"""WorkflowService — in-memory guided workflow sessions."""

import uuid

import structlog

from app.core.exceptions import WorkflowSessionNotFoundError
from app.domain.workflow import GuidedWorkflow

logger = structlog.get_logger(__name__)


class WorkflowService:
    """Creates and looks up guided workflow sessions by id."""

    def __init__(self):
        self._sessions: dict[str, GuidedWorkflow] = {}

    def create(self) -> tuple[str, GuidedWorkflow]:
        session_id = str(uuid.uuid4())
        workflow = GuidedWorkflow()
        self._sessions[session_id] = workflow
        logger.info("workflow_session_created", session_id=session_id)
        return session_id, workflow

    def get(self, session_id: str) -> GuidedWorkflow:
        """Return a session.

        Raises:
            WorkflowSessionNotFoundError: If the id is unknown
        """
        workflow = self._sessions.get(session_id)
        if workflow is None:
            raise WorkflowSessionNotFoundError(session_id)
        return workflow

    def delete(self, session_id: str) -> None:
        """End a session and release its state.

        Raises:
            WorkflowSessionNotFoundError: If the id is unknown
        """
        self.get(session_id)
        del self._sessions[session_id]
        logger.info("workflow_session_deleted", session_id=session_id)

    def send(self, session_id: str, text: str) -> tuple[GuidedWorkflow, bool]:
        workflow = self.get(session_id)
        accepted = workflow.send(text)
        if accepted:
            logger.info(
                "workflow_message",
                session_id=session_id,
                step=workflow.current_step.id,
                at_intro=workflow.at_intro,
            )
        return workflow, accepted

    def go_next(self, session_id: str) -> GuidedWorkflow:
        workflow = self.get(session_id)
        workflow.go_next()
        return workflow

    def go_back(self, session_id: str) -> GuidedWorkflow:
        workflow = self.get(session_id)
        workflow.go_back()
        return workflow

    def reset(self, session_id: str) -> GuidedWorkflow:
        workflow = self.get(session_id)
        workflow.reset()
        logger.info("workflow_session_reset", session_id=session_id)
        return workflow


_workflow_service: WorkflowService | None = None


def get_workflow_service() -> WorkflowService:
    """FastAPI dependency returning the process-wide WorkflowService."""
    global _workflow_service

    if _workflow_service is None:
        _workflow_service = WorkflowService()
    return _workflow_service
