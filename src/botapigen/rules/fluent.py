"""Fluent method rules: convenience operations bound to a receiver type.

Rule names are camelCase like the method names they sit next to; the
emitter turns ``Message.replyHtml`` into ``message_reply_html(receiver, ...)``.
Binding keys are delegate parameter names.
"""

from __future__ import annotations

from typing import Any

from botapigen.models import FieldPathBinding, FluentRule, LiteralBinding, ReceiverBinding

_RECEIVER = ReceiverBinding()

_PARSE_MODES = (
    ("Markdown", "Markdown"),
    ("MarkdownV2", "MarkdownV2"),
    ("Html", "HTML"),
)

_CHAT_SEND_METHODS = (
    "sendPhoto",
    "sendAudio",
    "sendDocument",
    "sendVideo",
    "sendAnimation",
    "sendVoice",
    "sendVideoNote",
    "sendMediaGroup",
    "sendLocation",
    "sendVenue",
    "sendContact",
    "sendPoll",
    "sendDice",
    "sendChatAction",
)


def _path(*segments: str) -> FieldPathBinding:
    return FieldPathBinding(path=segments)


def _literal(value: Any) -> LiteralBinding:
    return LiteralBinding(value=value)


def _chat_rules(receiver: str, chat_id: Any) -> list[FluentRule]:
    """Send helpers shared by ``Chat`` (bound to ``id``) and ``ChatId`` (the receiver)."""
    rules = [
        FluentRule(
            receiver=receiver,
            name="sendMessage",
            delegate="sendMessage",
            bindings={"chat_id": chat_id},
        )
    ]
    for suffix, mode in _PARSE_MODES:
        rules.append(
            FluentRule(
                receiver=receiver,
                name=f"send{suffix}",
                delegate="sendMessage",
                bindings={"chat_id": chat_id, "parse_mode": _literal(mode)},
            )
        )
    for method in _CHAT_SEND_METHODS:
        rules.append(
            FluentRule(receiver=receiver, name=method, delegate=method, bindings={"chat_id": chat_id})
        )
    rules.append(
        FluentRule(
            receiver=receiver,
            name="getMemberCount",
            delegate="getChatMemberCount",
            bindings={"chat_id": chat_id},
        )
    )
    rules.append(
        FluentRule(
            receiver=receiver,
            name="getMember",
            delegate="getChatMember",
            bindings={"chat_id": chat_id},
        )
    )
    return rules


def _message_rules() -> list[FluentRule]:
    chat_id = _path("chat", "id")
    message_id = _path("message_id")

    rules = [
        FluentRule(
            receiver="Message",
            name="reply",
            delegate="sendMessage",
            bindings={"chat_id": chat_id, "reply_to_message_id": message_id},
        )
    ]
    for suffix, mode in _PARSE_MODES:
        rules.append(
            FluentRule(
                receiver="Message",
                name=f"reply{suffix}",
                delegate="sendMessage",
                bindings={
                    "chat_id": chat_id,
                    "reply_to_message_id": message_id,
                    "parse_mode": _literal(mode),
                },
            )
        )

    rules.append(
        FluentRule(
            receiver="Message",
            name="editText",
            delegate="editMessageText",
            bindings={"chat_id": chat_id, "message_id": message_id},
        )
    )
    for suffix, mode in _PARSE_MODES:
        rules.append(
            FluentRule(
                receiver="Message",
                name=f"editText{suffix}",
                delegate="editMessageText",
                bindings={
                    "chat_id": chat_id,
                    "message_id": message_id,
                    "parse_mode": _literal(mode),
                },
            )
        )

    rules.extend(
        [
            FluentRule(
                receiver="Message",
                name="delete",
                delegate="deleteMessage",
                bindings={"chat_id": chat_id, "message_id": message_id},
            ),
            FluentRule(
                receiver="Message",
                name="forward",
                delegate="forwardMessage",
                bindings={"from_chat_id": chat_id, "message_id": message_id},
            ),
            FluentRule(
                receiver="Message",
                name="copyMessage",
                delegate="copyMessage",
                bindings={"from_chat_id": chat_id, "message_id": message_id},
            ),
        ]
    )
    return rules


def default_fluent_methods() -> tuple[FluentRule, ...]:
    """The fluent rule table, in emission order."""
    rules: list[FluentRule] = []
    rules.extend(_chat_rules("Chat", _path("id")))
    rules.extend(_chat_rules("ChatId", _RECEIVER))
    rules.extend(_message_rules())
    rules.extend(
        [
            FluentRule(
                receiver="User",
                name="getProfilePhotos",
                delegate="getUserProfilePhotos",
                bindings={"user_id": _path("id")},
            ),
            FluentRule(
                receiver="UserId",
                name="getProfilePhotos",
                delegate="getUserProfilePhotos",
                bindings={"user_id": _RECEIVER},
            ),
            FluentRule(
                receiver="CallbackQuery",
                name="answer",
                delegate="answerCallbackQuery",
                bindings={"callback_query_id": _path("id")},
            ),
            FluentRule(
                receiver="CallbackQueryId",
                name="answer",
                delegate="answerCallbackQuery",
                bindings={"callback_query_id": _RECEIVER},
            ),
            FluentRule(
                receiver="InlineQuery",
                name="answer",
                delegate="answerInlineQuery",
                bindings={"inline_query_id": _path("id")},
            ),
            FluentRule(
                receiver="InlineQueryId",
                name="answer",
                delegate="answerInlineQuery",
                bindings={"inline_query_id": _RECEIVER},
            ),
        ]
    )
    return tuple(rules)
