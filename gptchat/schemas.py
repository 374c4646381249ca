"""Response schemas for the chat completions endpoint."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import DecodingError
from .models import Message


class Usage(BaseModel):
    """Token accounting for one completion."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class Choice(BaseModel):
    """One candidate completion."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    index: int = 0
    message: Message
    finish_reason: str | None = None

    @field_validator("message", mode="before")
    @classmethod
    def _parse_message(cls, value: Any) -> Message:
        if isinstance(value, Message):
            return value
        if not isinstance(value, dict) or "role" not in value:
            raise ValueError("message must be an object with a role")
        return Message.from_openai_format(value)


class ChatCompletionResult(BaseModel):
    """A decoded chat completion."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = ""
    object: str = ""
    created: int = Field(0, description="Creation time in epoch seconds")
    model: str | None = None
    usage: Usage = Field(default_factory=Usage)
    choices: tuple[Choice, ...] = ()

    @field_validator("choices", mode="before")
    @classmethod
    def _none_is_empty(cls, value: Any) -> Any:
        return () if value is None else value

    @property
    def created_at(self) -> int:
        return self.created

    def texts(self) -> list[str]:
        """Contents of the choices, in order."""
        return [choice.message.content for choice in self.choices]

    @classmethod
    def from_payload(cls, value: Any) -> "ChatCompletionResult":
        """
        Validate a decoded JSON value.

        Raises:
            DecodingError: if the value does not match the response schema
        """
        if not isinstance(value, dict):
            raise DecodingError(
                f"expected a JSON object, got {type(value).__name__}"
            )
        try:
            return cls.model_validate(value)
        except ValidationError as exc:
            raise DecodingError(f"unexpected response shape: {exc}") from exc
