"""Approve/reject decision on a generated video."""

import asyncio
from typing import Optional

from loguru import logger

from ..models.draft import VideoArtifact, VideoDecision
from ..service.client import ScriptService, ScriptServiceError
from .status import StatusNotifier

DECISION_MESSAGES = {
    VideoDecision.APPROVED: "Video approved! Uploading to YouTube...",
    VideoDecision.REJECTED: "Video rejected! Sent for revision.",
}


class VideoDecisionFlow:
    """Tracks the local decision for one video and reports it to the service.

    The local decision is applied before the service hears about it and is
    never rolled back if the report fails.
    """

    def __init__(self, artifact: VideoArtifact, service: ScriptService, status: StatusNotifier):
        self.artifact = artifact
        self.service = service
        self.status = status
        self._tasks: set[asyncio.Task] = set()
        self._detached = False

    @property
    def decision(self) -> VideoDecision:
        return self.artifact.decision

    def decide(self, decision: VideoDecision) -> Optional[asyncio.Task]:
        """Set the decision and schedule the report. Returns the report task."""
        if decision is VideoDecision.UNDECIDED:
            raise ValueError("A video decision must be approved or rejected")
        if decision is self.artifact.decision:
            logger.debug(f"Video already {decision.value}, nothing to send")
            return None

        self.artifact.decision = decision
        logger.info(f"Video marked {decision.value}: {self.artifact.url}")

        task = asyncio.get_running_loop().create_task(self._report(decision))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _report(self, decision: VideoDecision) -> bool:
        try:
            await self.service.submit_video_decision(self.artifact.url, decision)
        except ScriptServiceError as e:
            logger.error(f"Failed to send video decision: {e}")
            if self._is_current(decision):
                self.status.notify("Error sending video decision. Your choice was kept locally.")
            return False

        if self._is_current(decision):
            self.status.notify(DECISION_MESSAGES[decision])
        return True

    def _is_current(self, decision: VideoDecision) -> bool:
        # A report superseded by a newer decision, or by a reset, stays quiet
        return not self._detached and decision is self.artifact.decision

    def detach(self) -> None:
        """Stop surfacing report outcomes; used when the session is reset."""
        self._detached = True

    async def wait(self) -> None:
        """Wait for outstanding reports to finish."""
        if self._tasks:
            await asyncio.gather(*self._tasks)
