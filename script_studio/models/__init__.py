from .draft import (
    Tone,
    Genre,
    DecisionKind,
    VideoDecision,
    RequestParameters,
    ScriptDraft,
    VideoArtifact,
)

__all__ = [
    "Tone",
    "Genre",
    "DecisionKind",
    "VideoDecision",
    "RequestParameters",
    "ScriptDraft",
    "VideoArtifact",
]
