from .machine import (
    ReviewWorkflow,
    WorkflowState,
    WorkflowError,
    InvalidTransition,
    classify_feedback,
)
from .status import StatusNotifier
from .video import VideoDecisionFlow

__all__ = [
    "ReviewWorkflow",
    "WorkflowState",
    "WorkflowError",
    "InvalidTransition",
    "classify_feedback",
    "StatusNotifier",
    "VideoDecisionFlow",
]
