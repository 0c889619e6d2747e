"""Guided workflow: the coach chat that walks a founder through the modules.

Pure in-memory state machine. The first user message names the idea; every
later message answers the current step and advances to the next one.
"""

import uuid
from dataclasses import dataclass, field
from typing import Literal


@dataclass(frozen=True)
class WorkflowStep:
    id: str
    title: str
    question: str
    canvas: str | None = None


STEPS: tuple[WorkflowStep, ...] = (
    WorkflowStep(
        id="deconstruct",
        title="Deconstruction",
        question="Let's deconstruct the problem space. What problem are you tackling and for whom?",
        canvas="deconstruct",
    ),
    WorkflowStep(
        id="discovery",
        title="Discovery",
        question="Great. Now let's shape your customer discovery approach and interview plan.",
    ),
    WorkflowStep(
        id="evidence",
        title="Evidence",
        question="Time to gather evidence. Define targets and run searches.",
    ),
    WorkflowStep(
        id="synthesis",
        title="Synthesis",
        question="Finally, synthesize what you've learned into patterns and insights.",
        canvas="synthesis",
    ),
)

WELCOME_MESSAGES = (
    "Welcome! I'll guide you through the validation workflow, step by step.",
    "First, what's the name of the idea you're working on?",
)
COMPLETED_MESSAGE = "Got it. You've completed the guided flow. Great work!"
END_OF_FLOW_MESSAGE = "You've reached the end of the guided flow. Great work!"


@dataclass(frozen=True)
class ChatMessage:
    id: str
    role: Literal["coach", "user"]
    content: str


def _message(role: Literal["coach", "user"], content: str) -> ChatMessage:
    return ChatMessage(id=str(uuid.uuid4()), role=role, content=content)


@dataclass
class GuidedWorkflow:
    """State of one founder's pass through the guided flow."""

    steps: tuple[WorkflowStep, ...] = STEPS
    idea: str = ""
    step_index: int = 0
    messages: list[ChatMessage] = field(default_factory=list)
    answers: dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        if not self.steps:
            raise ValueError("A guided workflow needs at least one step")
        if not self.messages:
            self.messages = [_message("coach", text) for text in WELCOME_MESSAGES]

    @property
    def at_intro(self) -> bool:
        return not self.idea.strip()

    @property
    def current_step(self) -> WorkflowStep:
        return self.steps[self.step_index]

    @property
    def is_last_step(self) -> bool:
        return self.step_index >= len(self.steps) - 1

    def _coach(self, content: str) -> None:
        # Identical consecutive coach messages collapse into one.
        last = self.messages[-1] if self.messages else None
        if last is not None and last.role == "coach" and last.content == content:
            return
        self.messages.append(_message("coach", content))

    def _ask_once(self, step: WorkflowStep) -> None:
        # Once an idea is named, every step change leaves its bare question in the history.
        if self.at_intro:
            return
        if not any(m.role == "coach" and m.content == step.question for m in self.messages):
            self._coach(step.question)

    def send(self, text: str) -> bool:
        """Handle a founder message. Blank messages are ignored.

        Returns True if the message was accepted.
        """
        text = text.strip()
        if not text:
            return False

        self.messages.append(_message("user", text))

        if self.at_intro:
            self.idea = text
            self.step_index = 0
            first = self.steps[0]
            self._coach(f"Great - we'll call it \"{text}\". Let's start with {first.title}.")
            self._coach(first.question)
            return True

        self.answers[self.current_step.id] = text
        if self.is_last_step:
            self._coach(COMPLETED_MESSAGE)
        else:
            self.step_index += 1
            step = self.current_step
            self._coach(f"Got it. Moving to {step.title}.")
            self._coach(step.question)
        return True

    def go_next(self) -> None:
        if self.is_last_step:
            self._coach(END_OF_FLOW_MESSAGE)
            return
        self.step_index += 1
        step = self.current_step
        self._coach(f"Moving to {step.title}. {step.question}")
        self._ask_once(step)

    def go_back(self) -> None:
        if self.step_index == 0:
            return
        self.step_index -= 1
        step = self.current_step
        self._coach(f"Back to {step.title}.")
        self._coach(step.question)

    def reset(self) -> None:
        """Start over from the welcome. Recorded answers are kept."""
        self.idea = ""
        self.step_index = 0
        self.messages = [_message("coach", text) for text in WELCOME_MESSAGES]
