"""Runtime support imported by generated client packages.

Classes:
    :class:`BotApiModel` -- frozen pydantic base of every generated record.
    :class:`BotApiResponse` -- the generic ``ok``/``result`` envelope.
    :class:`BotApiClient` -- httpx-backed client that performs the calls.
"""

from botapigen.runtime.client import DEFAULT_API_URL, BotApiClient
from botapigen.runtime.model import BotApiModel
from botapigen.runtime.response import BotApiResponse, ResponseParameters

__all__ = [
    "BotApiClient",
    "BotApiModel",
    "BotApiResponse",
    "ResponseParameters",
    "DEFAULT_API_URL",
]
