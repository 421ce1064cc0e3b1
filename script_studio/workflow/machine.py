"""
Review/refine workflow for a generated script.

One ReviewWorkflow drives a single session: generate a script, review and
edit it, send feedback for refinement until it is approved, and hand any
generated video to a VideoDecisionFlow. All state lives behind one
WorkflowState value so combinations like "editing while submitting" cannot
exist.

Remote calls suspend the transition that started them. A reset while a call
is outstanding bumps the epoch, and the late result is dropped on arrival.
"""

from enum import Enum
from typing import Optional

from loguru import logger

from ..models.draft import (
    DecisionKind,
    RequestParameters,
    ScriptDraft,
    VideoArtifact,
)
from ..service.client import ScriptService, ScriptServiceError
from .status import StatusNotifier
from .video import VideoDecisionFlow


class WorkflowState(str, Enum):
    IDLE = "idle"
    GENERATING = "generating"
    REVIEWING = "reviewing"
    EDITING = "editing"
    SUBMITTING_DECISION = "submitting_decision"
    APPROVED = "approved"


class WorkflowError(Exception):
    """Base class for workflow errors."""


class InvalidTransition(WorkflowError):
    def __init__(self, action: str, state: WorkflowState):
        super().__init__(f"Cannot {action} while {state.value}")
        self.action = action
        self.state = state


def classify_feedback(feedback: str) -> DecisionKind:
    """Non-blank feedback asks for a refinement; blank feedback approves."""
    return DecisionKind.REFINE if feedback.strip() else DecisionKind.APPROVED


class ReviewWorkflow:
    """State machine for the generate → review → refine → approve loop."""

    def __init__(
        self,
        service: ScriptService,
        status: Optional[StatusNotifier] = None,
        error_duration_ms: int = 4000,
    ):
        self.service = service
        self.status = status or StatusNotifier()
        self.error_duration_ms = error_duration_ms

        self.state = WorkflowState.IDLE
        self.params: Optional[RequestParameters] = None
        self.draft: Optional[ScriptDraft] = None
        self.video: Optional[VideoDecisionFlow] = None
        self.feedback = ""
        self.last_error: Optional[str] = None
        self._epoch = 0

    @property
    def busy(self) -> bool:
        return self.state in (WorkflowState.GENERATING, WorkflowState.SUBMITTING_DECISION)

    @property
    def pending_decision(self) -> DecisionKind:
        """The kind of decision submit_decision() would send right now."""
        return classify_feedback(self.feedback)

    def _require(self, action: str, *allowed: WorkflowState) -> None:
        if self.state not in allowed:
            raise InvalidTransition(action, self.state)

    def _fail(self, message: str, error: Exception) -> None:
        logger.error(f"{message}: {error}")
        self.last_error = str(error)
        self.status.notify(message, self.error_duration_ms)

    async def submit(self, params: RequestParameters) -> bool:
        """Generate a script for ``params``. Returns True if a draft was created."""
        if self.state is WorkflowState.GENERATING:
            logger.warning("Generation already in progress, ignoring submit")
            return False
        self._require("submit a topic", WorkflowState.IDLE)

        self.params = params
        self.last_error = None
        self.state = WorkflowState.GENERATING
        epoch = self._epoch
        logger.info(f"Generating script: topic='{params.topic}' tone={params.tone.value} genre={params.genre.value}")

        try:
            result = await self.service.generate(params)
        except ScriptServiceError as e:
            if epoch != self._epoch:
                logger.debug("Dropping generation failure from before reset")
                return False
            self.state = WorkflowState.IDLE
            self.params = None
            self._fail("Error generating script. Please try again.", e)
            return False
        except Exception:
            if epoch == self._epoch:
                self.state = WorkflowState.IDLE
                self.params = None
            raise

        if epoch != self._epoch:
            logger.debug("Dropping generation result from before reset")
            return False

        self.draft = ScriptDraft.from_generation(
            result.text,
            response_id=result.response_id,
            response_timestamp=result.response_timestamp,
        )
        if result.video_url:
            self.video = VideoDecisionFlow(VideoArtifact(url=result.video_url), self.service, self.status)
        self.state = WorkflowState.REVIEWING
        logger.success(f"Script ready for review ({len(result.text)} chars)")
        return True

    def start_edit(self) -> None:
        self._require("start editing", WorkflowState.REVIEWING)
        self.draft.working_text = self.draft.committed_text
        self.state = WorkflowState.EDITING

    def edit(self, text: str) -> None:
        self._require("edit the script", WorkflowState.EDITING)
        self.draft.working_text = text

    def save_edit(self) -> None:
        self._require("save an edit", WorkflowState.EDITING)
        self.draft.committed_text = self.draft.working_text
        self.state = WorkflowState.REVIEWING
        self.status.notify("Script updated successfully!")

    def cancel_edit(self) -> None:
        self._require("cancel an edit", WorkflowState.EDITING)
        self.draft.working_text = self.draft.committed_text
        self.state = WorkflowState.REVIEWING

    def set_feedback(self, feedback: str) -> None:
        self._require("change feedback", WorkflowState.REVIEWING)
        self.feedback = feedback

    async def submit_decision(self) -> Optional[DecisionKind]:
        """Approve the script or request a refinement, depending on the feedback.

        Returns the decision kind that succeeded, or None if nothing was
        applied (already submitting, failure, or a reset during the call).
        """
        if self.state is WorkflowState.SUBMITTING_DECISION:
            logger.warning("Decision already in flight, ignoring submit")
            return None
        self._require("submit a decision", WorkflowState.REVIEWING)

        kind = classify_feedback(self.feedback)
        draft = self.draft
        self.last_error = None
        self.state = WorkflowState.SUBMITTING_DECISION
        epoch = self._epoch
        logger.info(f"Submitting decision: {kind.value}")

        try:
            result = await self.service.submit_decision(
                draft.response_id,
                draft.response_timestamp,
                draft.committed_text,
                self.params,
                self.feedback,
                kind,
            )
        except ScriptServiceError as e:
            if epoch != self._epoch:
                logger.debug("Dropping decision failure from before reset")
                return None
            self.state = WorkflowState.REVIEWING
            self._fail("Error processing script. Please try again.", e)
            return None
        except Exception:
            if epoch == self._epoch:
                self.state = WorkflowState.REVIEWING
            raise

        if epoch != self._epoch:
            logger.debug("Dropping decision result from before reset")
            return None

        if kind is DecisionKind.REFINE:
            draft.replace(result.refined_text or "")
            self.feedback = ""
            self.state = WorkflowState.REVIEWING
            self.status.notify("Script refined with your feedback!")
        else:
            self.state = WorkflowState.APPROVED
            self.status.notify("Script approved successfully!")

        return kind

    def reset(self) -> None:
        """Start over. Results of calls still in flight will be ignored."""
        if self.state is not WorkflowState.IDLE:
            logger.info(f"Resetting workflow from {self.state.value}")
        self._epoch += 1
        if self.video is not None:
            self.video.detach()
        self.state = WorkflowState.IDLE
        self.params = None
        self.draft = None
        self.video = None
        self.feedback = ""
        self.last_error = None
        self.status.clear()
