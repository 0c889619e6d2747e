"""Guided workflow Pydantic schemas."""

from typing import Literal

from pydantic import BaseModel, Field

from app.domain.workflow import GuidedWorkflow


class ChatMessageResponse(BaseModel):
    id: str
    role: Literal["coach", "user"]
    content: str


class WorkflowStepResponse(BaseModel):
    id: str
    title: str
    question: str
    canvas: str | None = None


class WorkflowSessionResponse(BaseModel):
    """Full state of a guided workflow session."""

    id: str
    idea: str
    at_intro: bool
    step_index: int
    current_step: WorkflowStepResponse
    steps: list[WorkflowStepResponse] = Field(default_factory=list)
    messages: list[ChatMessageResponse] = Field(default_factory=list)
    answers: dict[str, str] = Field(default_factory=dict)
    accepted: bool | None = None

    @classmethod
    def from_workflow(
        cls,
        session_id: str,
        workflow: GuidedWorkflow,
        accepted: bool | None = None,
    ) -> "WorkflowSessionResponse":
        steps = [
            WorkflowStepResponse(id=s.id, title=s.title, question=s.question, canvas=s.canvas)
            for s in workflow.steps
        ]
        return cls(
            id=session_id,
            idea=workflow.idea,
            at_intro=workflow.at_intro,
            step_index=workflow.step_index,
            current_step=steps[workflow.step_index],
            steps=steps,
            messages=[
                ChatMessageResponse(id=m.id, role=m.role, content=m.content)
                for m in workflow.messages
            ],
            answers=dict(workflow.answers),
            accepted=accepted,
        )


class SendMessageRequest(BaseModel):
    text: str
