"""Data models for gptchat."""

import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping


class MessageRole(str, Enum):
    """Message roles in conversation."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class Message:
    """A single message in the conversation."""

    role: MessageRole
    content: str

    def to_openai_format(self) -> dict[str, str]:
        """Convert to OpenAI API format."""
        return {"role": self.role.value, "content": self.content}

    @classmethod
    def from_openai_format(cls, data: Mapping[str, Any]) -> "Message":
        """Build a message from its OpenAI API format.

        Raises:
            ValueError: if the role is not system, user or assistant
        """
        return cls(role=MessageRole(data["role"]), content=data.get("content") or "")


Stop = str | tuple[str, ...]


@dataclass(frozen=True)
class ChatParameters:
    """Request options for a chat completion.

    Every option defaults to None, meaning "absent": absent options are left
    out of the request body so the API applies its own defaults. Values are
    passed through as given; range checks are the API's job.
    """

    model: str | None = None
    temperature: float | None = None
    top_p: float | None = None
    n: int | None = None
    stream: bool | None = None
    stop: Stop | None = None
    max_tokens: int | None = None
    presence_penalty: float | None = None
    frequency_penalty: float | None = None
    logit_bias: Mapping[str, int] | None = field(default=None, hash=False)
    user: str | None = None

    def __post_init__(self) -> None:
        # Freeze containers so a snapshot can't change under a reader.
        if isinstance(self.stop, list):
            object.__setattr__(self, "stop", tuple(self.stop))
        if self.logit_bias is not None and not isinstance(self.logit_bias, MappingProxyType):
            object.__setattr__(self, "logit_bias", MappingProxyType(dict(self.logit_bias)))

    @classmethod
    def option_names(cls) -> tuple[str, ...]:
        """Names of all recognized options, in wire order."""
        return tuple(f.name for f in dataclasses.fields(cls))

    def replace(self, **changes: Any) -> "ChatParameters":
        """Return a copy with the given options overwritten."""
        return dataclasses.replace(self, **changes)

    def to_payload(self) -> dict[str, Any]:
        """Convert the options that are present to request body fields."""
        payload: dict[str, Any] = {}
        for name in self.option_names():
            value = getattr(self, name)
            if value is None:
                continue
            if name == "stop" and isinstance(value, tuple):
                value = list(value)
            elif name == "logit_bias":
                value = dict(value)
            payload[name] = value
        return payload
