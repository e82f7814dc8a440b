"""Chat-completion client for keyword extraction.

Posts a system+user message pair to an OpenAI-style ``/chat/completions``
endpoint and classifies whatever comes back into an AnalysisOutcome.
Nothing here raises for network, parsing, or response-shape problems.
"""

import json
import logging
import time
from itertools import islice
from typing import TYPE_CHECKING, Any

import requests

from keyword_agent.models import (
    AnalysisFailed,
    AnalysisOutcome,
    ChatMessage,
    ClientConfig,
    ErrorKind,
    KeywordsFound,
    RawApiResult,
    RequestPayload,
)

if TYPE_CHECKING:
    from keyword_agent.config import Settings

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "https://api.openai.com/v1/chat/completions"
REQUEST_TIMEOUT = 30  # seconds
RAW_SAMPLE_CHARS = 200
STRUCTURE_SAMPLE_ENTRIES = 3


class ChatCompletionClient:
    """Single-call wrapper around a chat-completion API."""

    def __init__(
        self,
        endpoint: str = DEFAULT_ENDPOINT,
        api_key: str = "",
        model: str = "",
        system_prompt: str = "",
    ):
        self.config = ClientConfig(
            endpoint=endpoint,
            api_key=api_key,
            model=model,
            system_prompt=system_prompt,
        )

    @classmethod
    def from_config(cls, config: ClientConfig) -> "ChatCompletionClient":
        return cls(**config.model_dump())

    @classmethod
    def from_settings(cls, settings: "Settings") -> "ChatCompletionClient":
        """Build a client from a ``keyword_agent.config.Settings`` instance."""
        return cls(
            endpoint=settings.endpoint,
            api_key=settings.api_key,
            model=settings.model,
            system_prompt=settings.system_prompt,
        )

    def configure_model(self, model_id: str) -> None:
        self.config.model = model_id

    def set_system_prompt(self, prompt: str) -> None:
        self.config.system_prompt = prompt

    def build_payload(self, input_text: str) -> RequestPayload:
        return RequestPayload(
            model=self.config.model,
            messages=[
                ChatMessage(role="system", content=self.config.system_prompt),
                ChatMessage(role="user", content=input_text),
            ],
        )

    def analyze_text(self, input_text: str) -> AnalysisOutcome:
        """Extract keywords from ``input_text``.

        Makes exactly one POST. Returns KeywordsFound with the trimmed reply,
        or AnalysisFailed describing what went wrong.
        """
        payload = self.build_payload(input_text)
        raw = self._execute_request(payload)
        return process_response(raw)

    def _execute_request(self, payload: RequestPayload) -> RawApiResult:
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.config.api_key}",
        }
        logger.debug("POST %s (model=%s)", self.config.endpoint, payload.model)

        start_time = time.monotonic()
        try:
            # requests.post opens and closes its own session
            resp = requests.post(
                self.config.endpoint,
                json=payload.model_dump(),
                headers=headers,
                timeout=REQUEST_TIMEOUT,
                verify=True,
            )
        except (requests.RequestException, ValueError) as e:
            # header encoding errors (UnicodeEncodeError) are not wrapped by requests
            return RawApiResult(body=None, status_code=0, transport_error=str(e) or type(e).__name__)

        elapsed = time.monotonic() - start_time
        logger.info("Response %s received in %.1fs (%d chars)", resp.status_code, elapsed, len(resp.text))
        return RawApiResult(body=resp.text, status_code=resp.status_code)


def process_response(raw: RawApiResult) -> AnalysisOutcome:
    """Classify a raw API result into an AnalysisOutcome."""
    if raw.body is None:
        logger.warning("Network failure: %s", raw.transport_error)
        return AnalysisFailed(kind=ErrorKind.NETWORK_FAILURE, details=raw.transport_error)

    try:
        data = json.loads(raw.body)
    except (json.JSONDecodeError, RecursionError):
        logger.warning("Response is not valid JSON (status %s)", raw.status_code)
        return AnalysisFailed(
            kind=ErrorKind.MALFORMED_RESPONSE,
            details={
                "status_code": raw.status_code,
                "raw_content": raw.body[:RAW_SAMPLE_CHARS],
            },
        )

    content = _message_content(data)
    if content:
        return KeywordsFound(keywords=content.strip())

    if isinstance(data, dict) and data.get("error") is not None:
        logger.warning("API reported an error: %s", data["error"])
        return AnalysisFailed(kind=ErrorKind.API_ERROR, details=data["error"])

    logger.warning("Unexpected response structure (status %s)", raw.status_code)
    return AnalysisFailed(kind=ErrorKind.UNEXPECTED_STRUCTURE, details=_sample(data))


def _message_content(data: Any) -> str | None:
    """Return ``choices[0].message.content`` if it is a string, else None."""
    if not isinstance(data, dict):
        return None
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    if not isinstance(first, dict):
        return None
    message = first.get("message")
    if not isinstance(message, dict):
        return None
    content = message.get("content")
    return content if isinstance(content, str) else None


def _sample(data: Any) -> Any:
    if isinstance(data, dict):
        return dict(islice(data.items(), STRUCTURE_SAMPLE_ENTRIES))
    if isinstance(data, list):
        return data[:STRUCTURE_SAMPLE_ENTRIES]
    return data
