"""Data models for chat-completion requests and keyword analysis outcomes.

The client builds a RequestPayload, receives a RawApiResult, and turns it
into one of the two AnalysisOutcome variants. Callers branch on ``status``
(or ``ok``) instead of guessing between a string and an error dict.
"""

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field


class ClientConfig(BaseModel):
    """Connection and prompt settings held by a single client instance."""

    endpoint: str
    api_key: str = ""
    model: str = ""
    system_prompt: str = ""


class ChatMessage(BaseModel):
    role: Literal["system", "user"]
    content: str


class RequestPayload(BaseModel):
    """Body of a chat-completion POST: system message first, then user."""

    model: str
    messages: list[ChatMessage]


class RawApiResult(BaseModel):
    """What came back over the wire, before any interpretation."""

    body: str | None = None  # None when no response arrived
    status_code: int = 0
    transport_error: str | None = None


class ErrorKind(str, Enum):
    NETWORK_FAILURE = "network_failure"
    MALFORMED_RESPONSE = "malformed_response"
    API_ERROR = "api_error"
    UNEXPECTED_STRUCTURE = "unexpected_structure"


ERROR_MESSAGES = {
    ErrorKind.NETWORK_FAILURE: "Network communication failure",
    ErrorKind.MALFORMED_RESPONSE: "Malformed API response",
    ErrorKind.API_ERROR: "API service error",
    ErrorKind.UNEXPECTED_STRUCTURE: "Unexpected response structure",
}


class KeywordsFound(BaseModel):
    status: Literal["success"] = "success"
    keywords: str

    @property
    def ok(self) -> bool:
        return True


class AnalysisFailed(BaseModel):
    """A classified failure; ``details`` depends on ``kind``.

    - network_failure: transport error text
    - malformed_response: {"status_code", "raw_content"}
    - api_error: the service's ``error`` value
    - unexpected_structure: up to 3 entries of the parsed body
    """

    status: Literal["error"] = "error"
    kind: ErrorKind
    details: Any = None

    @property
    def ok(self) -> bool:
        return False

    @property
    def message(self) -> str:
        return ERROR_MESSAGES[self.kind]


AnalysisOutcome = Annotated[
    Union[KeywordsFound, AnalysisFailed],
    Field(discriminator="status"),
]
