"""The response envelope every Bot API call answers with."""

from __future__ import annotations

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict

from botapigen.exceptions import BotApiException

T = TypeVar("T")


class ResponseParameters(BaseModel):
    """Hints on how a failed request can be retried."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    migrate_to_chat_id: Optional[int] = None
    retry_after: Optional[int] = None


class BotApiResponse(BaseModel, Generic[T]):
    """``{"ok": ..., "result": ...}`` or ``{"ok": false, "description": ...}``."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    ok: bool
    result: Optional[T] = None
    description: Optional[str] = None
    error_code: Optional[int] = None
    parameters: Optional[ResponseParameters] = None

    def get_result_or_raise(self) -> T:
        """Return ``result`` of a successful response.

        Raises:
            BotApiException: If the response is not ``ok`` or carries no result.
        """
        if self.ok and self.result is not None:
            return self.result
        raise BotApiException(self)
