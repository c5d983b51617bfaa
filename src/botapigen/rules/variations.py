"""Method variation rules for operations with exclusive parameter groups.

Several Bot API methods address a message either by ``chat_id`` plus
``message_id`` or by ``inline_message_id``, and return the edited
``Message`` only in the first case. Each such method is split into a
chat-message operation and an inline-message operation.
"""

from __future__ import annotations

from botapigen.models import DescriptionRewrite, MethodVariationRule

_EDITED_RESULT_PATTERN = (
    r"On success, if the( edited)? message is not an inline message, "
    r"the( edited)? Message is returned, otherwise True is returned\."
)

_CHAT_MESSAGE_REWRITES = (
    DescriptionRewrite(
        pattern=_EDITED_RESULT_PATTERN,
        replacement="On success the edited Message is returned.",
    ),
)

_INLINE_MESSAGE_REWRITES = (
    DescriptionRewrite(pattern=_EDITED_RESULT_PATTERN, replacement="On success True is returned."),
)

# (base method, name of the inline-message variation)
_SPLIT_METHODS = (
    ("editMessageText", "editInlineMessageText"),
    ("editMessageCaption", "editInlineMessageCaption"),
    ("editMessageMedia", "editInlineMessageMedia"),
    ("editMessageLiveLocation", "editInlineMessageLiveLocation"),
    ("editMessageReplyMarkup", "editInlineMessageReplyMarkup"),
    ("stopMessageLiveLocation", "stopInlineMessageLiveLocation"),
    ("setGameScore", "setInlineGameScore"),
)


def default_variations() -> tuple[MethodVariationRule, ...]:
    rules: list[MethodVariationRule] = []
    for method, inline_name in _SPLIT_METHODS:
        rules.append(
            MethodVariationRule(
                method_name=method,
                required_params=("chat_id", "message_id"),
                skip_params=("inline_message_id",),
                new_method_name=method,
                new_return_type="Message",
                description_rewrites=_CHAT_MESSAGE_REWRITES,
            )
        )
        rules.append(
            MethodVariationRule(
                method_name=method,
                required_params=("inline_message_id",),
                skip_params=("chat_id", "message_id"),
                new_method_name=inline_name,
                new_return_type="bool",
                description_rewrites=_INLINE_MESSAGE_REWRITES,
            )
        )
    return tuple(rules)
