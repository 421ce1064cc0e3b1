"""Data models for a script review session."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator


class Tone(str, Enum):
    PROFESSIONAL = "Professional"
    CASUAL = "Casual"
    FUNNY = "Funny"


class Genre(str, Enum):
    EDUCATIONAL = "Educational"
    ENTERTAINMENT = "Entertainment"
    TUTORIAL = "Tutorial"


class DecisionKind(str, Enum):
    """What a script decision asks of the service; values are the wire status."""

    APPROVED = "approved"
    REFINE = "refine"


class VideoDecision(str, Enum):
    UNDECIDED = "undecided"
    APPROVED = "approved"
    REJECTED = "rejected"


class RequestParameters(BaseModel):
    """Topic, tone and genre of a generation request. Frozen once built."""

    model_config = ConfigDict(frozen=True)

    topic: str
    tone: Tone = Tone.PROFESSIONAL
    genre: Genre = Genre.EDUCATIONAL

    @field_validator("topic")
    @classmethod
    def topic_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("topic must not be empty")
        return value


@dataclass
class ScriptDraft:
    committed_text: str = ""
    working_text: str = ""
    response_id: Optional[str] = None
    response_timestamp: Optional[str] = None

    @classmethod
    def from_generation(
        cls,
        text: str,
        response_id: Optional[str] = None,
        response_timestamp: Optional[str] = None,
    ) -> "ScriptDraft":
        return cls(
            committed_text=text,
            working_text=text,
            response_id=response_id,
            response_timestamp=response_timestamp,
        )

    @property
    def has_unsaved_edits(self) -> bool:
        return self.working_text != self.committed_text

    def replace(self, text: str) -> None:
        """Swap in a new script, keeping the correlation metadata."""
        self.committed_text = text
        self.working_text = text


@dataclass
class VideoArtifact:
    url: str
    decision: VideoDecision = VideoDecision.UNDECIDED
