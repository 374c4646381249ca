"""JSON encoding for request and response bodies."""

import json
from typing import Any

from .errors import DecodingError, EncodingError


class JSONCodec:
    """Convert structured values to and from UTF-8 JSON bytes."""

    content_type = "application/json"

    def encode(self, value: Any) -> bytes:
        """Serialize a value.

        Raises:
            EncodingError: if the value holds something JSON can't represent
        """
        try:
            text = json.dumps(value, ensure_ascii=False, allow_nan=False)
        except (TypeError, ValueError) as exc:
            raise EncodingError(f"cannot encode request body: {exc}") from exc
        return text.encode("utf-8")

    def decode(self, data: bytes) -> Any:
        """Parse a JSON document.

        Raises:
            DecodingError: if the bytes are not valid UTF-8 JSON
        """
        try:
            return json.loads(data.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise DecodingError(f"malformed response body: {exc}") from exc
