"""Shared fixtures: an in-memory ScriptService with controllable timing."""

import asyncio
from typing import Optional

import pytest

from script_studio.models import DecisionKind, RequestParameters, VideoDecision
from script_studio.service import (
    DecisionResult,
    GenerationResult,
    ScriptService,
    TransportFailure,
)


class FakeScriptService(ScriptService):
    """Records every call. Set ``gate`` (an asyncio.Event) to hold calls open."""

    def __init__(self):
        self.generate_result = GenerationResult(text="Hello", response_id="r1", response_timestamp="t1")
        self.refined_text = "Shorter hello"
        self.fail_generate = False
        self.fail_generate_from: Optional[int] = None
        self.fail_decision = False
        self.fail_video = False
        self.gate: Optional[asyncio.Event] = None

        self.generate_calls = []
        self.decision_calls = []
        self.video_calls = []
        self.closed = False

    async def _hold(self):
        if self.gate is not None:
            await self.gate.wait()

    async def generate(self, params: RequestParameters) -> GenerationResult:
        self.generate_calls.append(params)
        await self._hold()
        failing_call = self.fail_generate_from is not None and len(self.generate_calls) >= self.fail_generate_from
        if self.fail_generate or failing_call:
            raise TransportFailure("generate failed", status_code=500)
        return self.generate_result

    async def submit_decision(self, response_id, response_timestamp, text, params, feedback, kind):
        self.decision_calls.append({
            "response_id": response_id,
            "response_timestamp": response_timestamp,
            "text": text,
            "params": params,
            "feedback": feedback,
            "kind": kind,
        })
        await self._hold()
        if self.fail_decision:
            raise TransportFailure("decision failed", status_code=502)
        if kind is DecisionKind.REFINE:
            return DecisionResult(kind=kind, refined_text=self.refined_text)
        return DecisionResult(kind=kind)

    async def submit_video_decision(self, url: str, decision: VideoDecision) -> None:
        self.video_calls.append((url, decision))
        await self._hold()
        if self.fail_video:
            raise TransportFailure("video endpoint down")

    async def aclose(self):
        self.closed = True


@pytest.fixture
def service():
    return FakeScriptService()


@pytest.fixture
def params():
    return RequestParameters(topic="cats", tone="Funny", genre="Entertainment")
