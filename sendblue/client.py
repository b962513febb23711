"""Sendblue API client.

A thin asynchronous wrapper around the Sendblue REST API.  Every
call goes through ``Sendblue.call``, which signs the request with
the credential pair, posts an optional JSON payload, camelCases the
keys of the decoded response and raises ``SendblueError`` when the
server reports a failure.

The client keeps no state besides the credentials, so a single
instance can serve any number of concurrent calls.
"""

from __future__ import annotations

import enum
import itertools
import json
from typing import Any

import aiohttp

from sendblue import config
from sendblue.errors import RequestFailureCause, SendblueError, SendblueErrorKind
from sendblue.utils import logger, serialization

log = logger.create_logger("Sendblue")

_KEY_ID_HEADER = "sb-api-key-id"
_SECRET_KEY_HEADER = "sb-api-secret-key"

# Distinguishes timers of concurrent calls to the same route.
_request_ids = itertools.count(1)


class HttpMethod(enum.Enum):
    """HTTP verbs used by the Sendblue API."""

    GET = "GET"
    POST = "POST"
    DELETE = "DELETE"

    @classmethod
    def coerce(cls, method: HttpMethod | str) -> HttpMethod:
        """Accept an ``HttpMethod`` or a verb string in any case.

        Raises:
            ValueError: If the verb is not supported.
        """
        if isinstance(method, cls):
            return method
        try:
            return cls(str(method).upper())
        except ValueError:
            supported = ", ".join(m.value for m in cls)
            raise ValueError(f"Unsupported HTTP method {method!r} (expected one of {supported})") from None


class Sendblue:
    """Client for interacting with the Sendblue API.

    Args:
        public_key: API key id, sent as ``sb-api-key-id``.
        secret_key: API secret key, sent as ``sb-api-secret-key``.
    """

    base_url: str = "https://api.sendblue.co"

    def __init__(self, public_key: str, secret_key: str) -> None:
        if not public_key or not secret_key:
            raise ValueError("Both the Sendblue public key and secret key are required")
        self._public_key = public_key
        self._secret_key = secret_key

    @classmethod
    def from_env(cls, settings: config.SendblueSettings | None = None) -> Sendblue:
        """Build a client from ``SENDBLUE_*`` environment variables.

        Raises:
            ValueError: If either credential is missing.
        """
        if settings is None:
            settings = config.SendblueSettings()
        if not settings.validate_config():
            raise ValueError(config.missing_credentials_message())
        return cls(settings.api_key_id, settings.api_secret_key.get_secret_value())

    def __repr__(self) -> str:
        return f"{type(self).__name__}(base_url={self.base_url!r})"

    def _headers(self) -> dict[str, str]:
        return {
            _KEY_ID_HEADER: self._public_key,
            _SECRET_KEY_HEADER: self._secret_key,
            "Content-Type": "application/json",
        }

    async def call(
        self,
        method: HttpMethod | str,
        path: str,
        payload: Any = None,
    ) -> Any:
        """Perform one authenticated request against the Sendblue API.

        ``path`` is appended to ``base_url`` verbatim, so any query
        parameters or path segments must already be encoded.

        Args:
            method: ``GET``, ``POST`` or ``DELETE``.
            path: Route such as ``"/api/send-message"``.
            payload: JSON-serializable body; omitted when ``None``.

        Returns:
            The decoded response body with camelCase keys.

        Raises:
            SendblueError: ``API_REQUEST_FAILURE`` for a non-2xx status,
                ``MALFORMED_RESPONSE`` when a successful response is not
                valid UTF-8 JSON (an empty body included).
            ValueError: If *method* is not a supported verb.
        """
        verb = HttpMethod.coerce(method)
        request_body = json.dumps(payload) if payload is not None else None
        url = f"{self.base_url}{path}"
        timer_label = f"{verb.value} {path} #{next(_request_ids)}"

        log.debug("Sending request", {"method": verb.value, "path": path})
        log.start_timer(timer_label)

        async with aiohttp.ClientSession() as session:
            async with session.request(
                verb.value,
                url,
                data=request_body,
                headers=self._headers(),
            ) as response:
                status = response.status
                ok = 200 <= status < 300
                retry_after = _retry_after_seconds(response.headers.get("Retry-After"))
                raw = await response.read()

        log.end_timer(timer_label, f"{verb.value} {path} -> {status}")

        try:
            body = serialization.keys_to_camel_case(json.loads(raw.decode("utf-8")))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            if not ok:
                body = None
            else:
                log.warn("Response body is not valid JSON", {"path": path, "status": status})
                raise SendblueError(
                    SendblueErrorKind.MALFORMED_RESPONSE,
                    f'Malformed response from Sendblue on route "{path}"',
                    RequestFailureCause(request=request_body, code=status),
                ) from exc

        if not ok:
            server_message = _server_message(body)
            log.warn(
                "Sendblue request failed",
                {"path": path, "status": status, "message": server_message},
            )
            raise SendblueError(
                SendblueErrorKind.API_REQUEST_FAILURE,
                f'Error fetching data from Sendblue on route "{path}"',
                RequestFailureCause(
                    request=request_body,
                    code=status,
                    message=server_message,
                    retry_after=retry_after,
                ),
            )

        return body


def _retry_after_seconds(value: str | None) -> int | None:
    """Parse a delta-seconds ``Retry-After`` header; HTTP dates are ignored."""
    if value is None or not value.strip().isdigit():
        return None
    return int(value.strip())


def _server_message(body: Any) -> str | None:
    """Pull the ``message`` field out of an error body, if present."""
    if not isinstance(body, dict):
        return None
    message = body.get("message")
    if message is None:
        return None
    return message if isinstance(message, str) else str(message)
