"""
Remote script service: the abstract port the workflow talks to, and an
httpx-based adapter for the n8n-style webhooks that generate and refine scripts.

Every call is a single attempt. Transport errors and non-2xx responses are
raised as TransportFailure; callers decide what to do with local state.
"""

import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional

import httpx
from loguru import logger

from ..config import ServiceConfig
from ..models.draft import DecisionKind, RequestParameters, VideoDecision


class ScriptServiceError(Exception):
    """Base class for remote script service errors."""


class TransportFailure(ScriptServiceError):
    """Network error or non-success HTTP status from the remote service."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


@dataclass
class GenerationResult:
    text: str
    video_url: Optional[str] = None
    response_id: Optional[str] = None
    response_timestamp: Optional[str] = None


@dataclass
class DecisionResult:
    kind: DecisionKind
    refined_text: Optional[str] = None


class ScriptService(ABC):
    """Port for the remote generation service."""

    @abstractmethod
    async def generate(self, params: RequestParameters) -> GenerationResult:
        """Request a new script for the given parameters."""
        ...

    @abstractmethod
    async def submit_decision(
        self,
        response_id: Optional[str],
        response_timestamp: Optional[str],
        text: str,
        params: RequestParameters,
        feedback: str,
        kind: DecisionKind,
    ) -> DecisionResult:
        """Approve a script, or ask for a refined one using the feedback."""
        ...

    @abstractmethod
    async def submit_video_decision(self, url: str, decision: VideoDecision) -> None:
        """Report an approve/reject decision on a generated video."""
        ...


def extract_script_text(data: Any) -> str:
    """Pull the script out of a response body: ``content.text``, then ``text``."""
    if not isinstance(data, dict):
        return ""
    content = data.get("content")
    if isinstance(content, dict) and content.get("text"):
        return str(content["text"])
    if data.get("text"):
        return str(data["text"])
    return ""


def _iso_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class HttpScriptService(ScriptService):
    """ScriptService backed by JSON POSTs to configurable webhook URLs."""

    def __init__(self, config: ServiceConfig, client: Optional[httpx.AsyncClient] = None):
        self.config = config
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=config.timeout)

    async def __aenter__(self) -> "HttpScriptService":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _post(self, url: str, payload: dict) -> httpx.Response:
        logger.debug(f"POST {url}")
        try:
            response = await self._client.post(url, json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise TransportFailure(f"{url} returned HTTP {status}", status_code=status) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise TransportFailure(f"Request to {url} failed: {e}") from e
        return response

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise TransportFailure(f"Invalid JSON from {response.request.url}") from e

    async def generate(self, params: RequestParameters) -> GenerationResult:
        payload = {
            "topic": params.topic,
            "tone": params.tone.value,
            "genre": params.genre.value,
            "id": str(uuid.uuid4()),
            "timestamp": _iso_now(),
        }
        response = await self._post(self.config.generate_url, payload)
        data = self._json(response)
        if not isinstance(data, dict):
            data = {}

        result = GenerationResult(
            text=extract_script_text(data),
            video_url=data.get("videoUrl") or None,
            response_id=data.get("responseId") or None,
            response_timestamp=data.get("timestamp") or None,
        )
        logger.info(
            f"Generated script for '{params.topic}': {len(result.text)} chars, "
            f"video={'yes' if result.video_url else 'no'}"
        )
        return result

    async def submit_decision(
        self,
        response_id: Optional[str],
        response_timestamp: Optional[str],
        text: str,
        params: RequestParameters,
        feedback: str,
        kind: DecisionKind,
    ) -> DecisionResult:
        payload = {
            "responseId": response_id,
            "content": {"text": text},
            "topic": params.topic,
            "tone": params.tone.value,
            "genre": params.genre.value,
            "feedback": feedback,
            "status": kind.value,
            "timestamp": response_timestamp,
        }
        response = await self._post(self.config.decision_url, payload)

        if kind is DecisionKind.APPROVED:
            # Any 2xx is an acknowledgment; the body is not inspected
            logger.info(f"Script approved (responseId={response_id})")
            return DecisionResult(kind=kind)

        refined = extract_script_text(self._json(response))
        logger.info(f"Received refined script: {len(refined)} chars")
        return DecisionResult(kind=kind, refined_text=refined)

    async def submit_video_decision(self, url: str, decision: VideoDecision) -> None:
        if decision is VideoDecision.APPROVED:
            endpoint = self.config.video_approve_url
        elif decision is VideoDecision.REJECTED:
            endpoint = self.config.video_reject_url
        else:
            raise ValueError(f"Cannot submit an {decision.value} video decision")

        await self._post(endpoint, {"videoUrl": url, "status": decision.value})
        logger.info(f"Video {decision.value}: {url}")
