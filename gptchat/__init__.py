"""gptchat - a thread-safe chat-completion session client."""

__app_name__ = "gptchat"
__version__ = "0.1.0"

from .errors import (
    APIStatusError,
    ChatError,
    DecodingError,
    EncodingError,
    MissingCredentialError,
    MissingModelError,
    NoResponse,
    TransportError,
)
from .models import ChatParameters, Message, MessageRole
from .schemas import ChatCompletionResult, Choice, Usage
from .session import CHAT_COMPLETIONS_URL, ConversationSession

__all__ = [
    "__app_name__",
    "__version__",
    "APIStatusError",
    "CHAT_COMPLETIONS_URL",
    "ChatCompletionResult",
    "ChatError",
    "ChatParameters",
    "Choice",
    "ConversationSession",
    "DecodingError",
    "EncodingError",
    "Message",
    "MessageRole",
    "MissingCredentialError",
    "MissingModelError",
    "NoResponse",
    "TransportError",
    "Usage",
]
