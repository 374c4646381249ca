"""Error types raised by gptchat.

Every failure of a round trip is terminal for that call. Nothing is retried
here; callers inspect the error type and decide what to do next.
"""


class ChatError(Exception):
    """Base class for all gptchat errors."""


class EncodingError(ChatError):
    """The request payload could not be serialized."""


class TransportError(ChatError):
    """The request could not be sent or the response could not be read."""


class DecodingError(ChatError):
    """The response body did not parse into a chat completion."""


class NoResponse(ChatError):
    """The API answered with a well-formed response carrying zero choices."""

    def __init__(self, message: str = "no response") -> None:
        super().__init__(message)


class APIStatusError(ChatError):
    """
    The API answered with a non-2xx HTTP status.

    `message` is the API's own error message when the body carries one,
    otherwise a generic description of the status.
    """

    def __init__(
        self,
        *,
        status_code: int,
        message: str,
        text: str = "",
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.text = text

    def __str__(self) -> str:
        return f"HTTP {self.status_code}: {self.message}"


class MissingCredentialError(ChatError):
    """A round trip was attempted before an API key was set."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or "API key not set; call set_api_key() first")


class MissingModelError(ChatError):
    """A round trip was attempted before a model was selected."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or "model not set; call set_model() first")
