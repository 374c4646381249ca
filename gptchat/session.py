"""Conversation session: request options, history and the round trip."""

import logging
import threading
from typing import TYPE_CHECKING, Any, Mapping, Sequence

from .codec import JSONCodec
from .errors import (
    APIStatusError,
    DecodingError,
    MissingCredentialError,
    MissingModelError,
    NoResponse,
)
from .models import ChatParameters, Message, MessageRole
from .schemas import ChatCompletionResult
from .transport import HTTPTransport

if TYPE_CHECKING:
    from .config import Config

logger = logging.getLogger(__name__)

CHAT_COMPLETIONS_URL = "https://api.openai.com/v1/chat/completions"


class ConversationSession:
    """A chat conversation that can be shared between threads.

    The session holds the request options, the API key and the message
    history. Any thread may change options, append messages or run a round
    trip at any time.

    Options and history are immutable values swapped under locks, so every
    reader sees a whole snapshot. A round trip snapshots under the history
    lock, talks to the API unlocked, then locks again to append the replies
    to whatever the history is by then.

    The model is not tied to the API key: set it through the constructor or
    `set_model()` before sending.
    """

    def __init__(
        self,
        api_key: str | None = None,
        *,
        model: str | None = None,
        transport: HTTPTransport | None = None,
        codec: JSONCodec | None = None,
        endpoint: str = CHAT_COMPLETIONS_URL,
    ) -> None:
        self.endpoint = endpoint
        self.transport = transport if transport is not None else HTTPTransport()
        self.codec = codec if codec is not None else JSONCodec()

        self._options_lock = threading.Lock()
        self._history_lock = threading.Lock()
        self._api_key = api_key
        self._parameters = ChatParameters(model=model)
        self._messages: tuple[Message, ...] = ()

    @classmethod
    def from_config(
        cls,
        config: "Config",
        transport: HTTPTransport | None = None,
    ) -> "ConversationSession":
        """Build a session from gptchat settings."""
        session = cls(
            config.api_key,
            model=config.model,
            transport=transport if transport is not None else HTTPTransport(timeout=config.timeout),
            endpoint=config.endpoint,
        )
        if config.temperature is not None:
            session.set_temperature(config.temperature)
        if config.max_tokens is not None:
            session.set_max_tokens(config.max_tokens)
        if config.system_prompt:
            session.add_system_message(config.system_prompt)
        return session

    # ----- options -----

    @property
    def parameters(self) -> ChatParameters:
        """Current request options."""
        with self._options_lock:
            return self._parameters

    def _set(self, **changes: Any) -> None:
        with self._options_lock:
            self._parameters = self._parameters.replace(**changes)

    def unset(self, name: str) -> None:
        """Drop an option so the API default applies again."""
        if name not in ChatParameters.option_names():
            raise ValueError(f"unknown option: {name!r}")
        self._set(**{name: None})

    def set_api_key(self, api_key: str) -> None:
        with self._options_lock:
            self._api_key = api_key

    def set_model(self, model: str) -> None:
        self._set(model=model)

    def set_temperature(self, temperature: float) -> None:
        """Sampling temperature; the API accepts 0 to 2."""
        self._set(temperature=temperature)

    def set_top_p(self, top_p: float) -> None:
        """Nucleus sampling mass, an alternative to temperature."""
        self._set(top_p=top_p)

    def set_n(self, n: int) -> None:
        """Number of choices to generate per request."""
        self._set(n=n)

    def set_stream(self, stream: bool) -> None:
        self._set(stream=stream)

    def set_stop(self, stop: str) -> None:
        self._set(stop=stop)

    def set_stop_list(self, stop: Sequence[str]) -> None:
        """Up to 4 sequences where the API stops generating.

        Raises:
            TypeError: if given a bare string; use set_stop() for one sequence
        """
        if isinstance(stop, str):
            raise TypeError("set_stop_list() takes a sequence of strings, not a str")
        self._set(stop=tuple(stop))

    def set_max_tokens(self, max_tokens: int) -> None:
        self._set(max_tokens=max_tokens)

    def set_presence_penalty(self, presence_penalty: float) -> None:
        self._set(presence_penalty=presence_penalty)

    def set_frequency_penalty(self, frequency_penalty: float) -> None:
        self._set(frequency_penalty=frequency_penalty)

    def set_logit_bias(self, logit_bias: Mapping[str, int]) -> None:
        """Map of token id to a bias added to its logit before sampling."""
        self._set(logit_bias=dict(logit_bias))

    def set_user(self, user: str) -> None:
        """End-user identifier passed along for abuse monitoring."""
        self._set(user=user)

    # ----- history -----

    def add_message(self, role: MessageRole | str, content: str) -> None:
        """Append a message to the end of the history."""
        message = Message(role=MessageRole(role), content=content)
        with self._history_lock:
            self._messages = self._messages + (message,)

    def add_system_message(self, content: str) -> None:
        self.add_message(MessageRole.SYSTEM, content)

    def add_user_message(self, content: str) -> None:
        self.add_message(MessageRole.USER, content)

    def add_assistant_message(self, content: str) -> None:
        self.add_message(MessageRole.ASSISTANT, content)

    def history(self) -> tuple[Message, ...]:
        """Snapshot of the message history."""
        with self._history_lock:
            return self._messages

    def history_dicts(self) -> list[dict[str, str]]:
        """Snapshot of the message history in OpenAI API format."""
        return [msg.to_openai_format() for msg in self.history()]

    # ----- round trip -----

    def _snapshot(self) -> tuple[str, dict[str, Any]]:
        # Options before history; nothing else holds both.
        with self._options_lock, self._history_lock:
            api_key = self._api_key
            parameters = self._parameters
            messages = self._messages
        if not api_key:
            raise MissingCredentialError()
        if not parameters.model:
            raise MissingModelError()

        payload = parameters.to_payload()
        payload["messages"] = [msg.to_openai_format() for msg in messages]
        return api_key, payload

    def send_and_receive(self) -> ChatCompletionResult:
        """Send the conversation and append the replies to the history.

        Every returned choice is appended as an assistant message, in order.
        On any error the history is left as it was.

        Returns:
            The decoded completion

        Raises:
            MissingCredentialError: no API key set
            MissingModelError: no model set
            EncodingError: an option value can't be serialized
            TransportError: the request failed on the network
            APIStatusError: the API answered with an error status
            DecodingError: the response isn't a chat completion
            NoResponse: the response has no choices
        """
        api_key, payload = self._snapshot()
        body = self.codec.encode(payload)

        logger.debug(
            "POST %s model=%s messages=%d",
            self.endpoint,
            payload["model"],
            len(payload["messages"]),
        )
        response = self.transport.post(
            self.endpoint,
            headers={
                "Content-Type": self.codec.content_type,
                "Authorization": f"Bearer {api_key}",
            },
            body=body,
        )
        logger.debug("response status %s (%d bytes)", response.status_code, len(response.body))

        if not response.is_success:
            raise self._status_error(response.status_code, response.body)

        result = ChatCompletionResult.from_payload(self.codec.decode(response.body))
        if not result.choices:
            logger.warning("completion %r carried no choices", result.id)
            raise NoResponse()

        replies = tuple(
            Message(role=MessageRole.ASSISTANT, content=choice.message.content)
            for choice in result.choices
        )
        with self._history_lock:
            self._messages = self._messages + replies
        logger.debug("appended %d assistant message(s)", len(replies))
        return result

    def send_and_receive_text(self) -> list[str]:
        """Run a round trip and return only the reply texts."""
        return self.send_and_receive().texts()

    def ask(self, content: str) -> list[str]:
        """Append a user message and run a round trip.

        The user message stays in the history even if the round trip fails.
        """
        self.add_user_message(content)
        return self.send_and_receive_text()

    def _status_error(self, status_code: int, body: bytes) -> APIStatusError:
        text = body.decode("utf-8", errors="ignore")
        message = f"API returned status {status_code}"
        try:
            data = self.codec.decode(body)
        except DecodingError:
            data = None
        if isinstance(data, dict) and isinstance(data.get("error"), dict):
            message = data["error"].get("message") or message
        logger.warning("chat completion failed with status %s: %s", status_code, message)
        return APIStatusError(status_code=status_code, message=message, text=text)

    def close(self) -> None:
        """Close the transport."""
        self.transport.close()

    def __enter__(self) -> "ConversationSession":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
