"""HTTP transport for gptchat."""

import logging
from dataclasses import dataclass, field
from typing import Mapping

import httpx

from .errors import TransportError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 120.0


@dataclass(frozen=True)
class TransportResponse:
    """Status, headers and full body of one HTTP response."""

    status_code: int
    body: bytes
    headers: Mapping[str, str] = field(default_factory=dict)

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="ignore")


class HTTPTransport:
    """Send requests over a shared `httpx.Client`.

    The client is safe to use from several threads at once. Pass `client` to
    supply a preconfigured one (for example with an `httpx.MockTransport`);
    a client passed in is not closed by `close()`.
    """

    def __init__(
        self,
        timeout: float | None = DEFAULT_TIMEOUT,
        client: httpx.Client | None = None,
    ) -> None:
        self._owns_client = client is None
        self.client = client if client is not None else httpx.Client(timeout=timeout)

    def post(self, url: str, headers: Mapping[str, str], body: bytes) -> TransportResponse:
        """POST `body` to `url` and read the whole response.

        Raises:
            TransportError: on connection, timeout or read failures
        """
        try:
            with self.client.stream("POST", url, headers=dict(headers), content=body) as resp:
                data = resp.read()
                return TransportResponse(
                    status_code=resp.status_code,
                    body=data,
                    headers=dict(resp.headers),
                )
        except (httpx.TransportError, httpx.StreamError) as exc:
            logger.warning("POST %s failed: %s", url, exc)
            raise TransportError(f"request to {url} failed: {exc}") from exc

    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    def __enter__(self) -> "HTTPTransport":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
