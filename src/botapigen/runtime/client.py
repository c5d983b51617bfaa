"""Synchronous Bot API client used by generated method functions.

:class:`BotApiClient` wraps :class:`httpx.Client` and knows exactly one
calling convention: ``{api_url}/bot{token}/{method}``, sent as GET when the
method takes no parameters and as a JSON POST otherwise. Responses are
decoded into :class:`~botapigen.runtime.response.BotApiResponse` with the
result validated against the method's return type.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx
from pydantic import BaseModel, TypeAdapter

from botapigen.exceptions import BotApiConnectionError
from botapigen.output import get_output
from botapigen.runtime.response import BotApiResponse

DEFAULT_API_URL = "https://api.telegram.org"


class BotApiClient:
    """Blocking client for one bot token.

    Args:
        token: The bot token issued by BotFather.
        api_url: Base URL of the Bot API server.
        timeout: Request timeout in seconds.
        transport: Optional httpx transport, e.g. :class:`httpx.MockTransport`
            in tests.

    Example::

        with BotApiClient(token) as client:
            me = get_me(client)
    """

    def __init__(
        self,
        token: str,
        api_url: str = DEFAULT_API_URL,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._token = token
        self._api_url = api_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.Client] = None
        self._adapters: dict[Any, TypeAdapter[Any]] = {}

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> BotApiClient:
        self._http()
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        if self._client:
            self._client.close()
            self._client = None

    # ------------------------------------------------------------------ #
    # Calls
    # ------------------------------------------------------------------ #

    def method_url(self, method: str) -> str:
        return f"{self._api_url}/bot{self._token}/{method}"

    def try_call(
        self, method: str, request: Optional[BaseModel], result_type: Any
    ) -> BotApiResponse[Any]:
        """Call *method* and return the decoded response envelope, successful or not.

        Raises:
            BotApiConnectionError: On network errors or a non-JSON answer.
        """
        url = self.method_url(method)
        output = get_output()
        try:
            if request is None:
                output.debug(f"GET {method}")
                response = self._http().get(url)
            else:
                body = request.model_dump(mode="json", by_alias=True, exclude_none=True)
                output.debug(f"POST {method} {sorted(body)}")
                response = self._http().post(url, json=body)
        except (httpx.ConnectError, httpx.TimeoutException, httpx.NetworkError) as exc:
            raise BotApiConnectionError(f"Request to {method} failed: {exc}") from exc

        if "json" not in response.headers.get("content-type", "application/json"):
            raise BotApiConnectionError(
                f"Unexpected HTTP {response.status_code} answer to {method}: {response.text[:200]}"
            )
        return self._adapter(result_type).validate_json(response.content)

    def call(self, method: str, request: Optional[BaseModel], result_type: Any) -> Any:
        """Call *method* and return its result.

        Raises:
            BotApiException: If the API answers with ``ok: false``.
            BotApiConnectionError: On network errors.
        """
        return self.try_call(method, request, result_type).get_result_or_raise()

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _http(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(timeout=self._timeout, transport=self._transport)
        return self._client

    def _adapter(self, result_type: Any) -> TypeAdapter[Any]:
        try:
            adapter = self._adapters.get(result_type)
        except TypeError:
            # Unhashable type expression; build a fresh adapter.
            return TypeAdapter(BotApiResponse[result_type])
        if adapter is None:
            adapter = TypeAdapter(BotApiResponse[result_type])
            self._adapters[result_type] = adapter
        return adapter
