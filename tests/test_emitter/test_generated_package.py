"""End-to-end tests: import the generated package and talk to a mock Bot API."""

from __future__ import annotations

import json
from typing import Any

import httpx
import pytest
from pydantic import TypeAdapter, ValidationError

from botapigen.exceptions import BotApiException

_USER = {"id": 7, "is_bot": False, "first_name": "Ann"}
_CHAT = {"id": 5, "type": "private"}
_MESSAGE = {
    "message_id": 10,
    "from": _USER,
    "date": 1700000000,
    "chat": _CHAT,
    "text": "ping",
}


def _client(package: Any, handler, calls: list[httpx.Request]):
    def recording(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return handler(request)

    return package.create_client("TOKEN", transport=httpx.MockTransport(recording))


def _ok(result: Any) -> httpx.Response:
    return httpx.Response(200, json={"ok": True, "result": result})


class TestGeneratedTypes:
    def test_message_decodes_with_wrapper_types(self, generated_package: Any) -> None:
        message = generated_package.Message.model_validate(_MESSAGE)
        assert message.message_id == generated_package.MessageId(10)
        assert message.from_.first_name == "Ann"
        assert message.chat.id.root == 5
        assert message.model_dump(by_alias=True, exclude_none=True) == _MESSAGE

    def test_records_are_frozen(self, generated_package: Any) -> None:
        user = generated_package.User.model_validate(_USER)
        with pytest.raises(ValidationError):
            user.first_name = "Bob"

    def test_update_selects_sibling_record(self, generated_package: Any) -> None:
        adapter = TypeAdapter(generated_package.Update)
        update = adapter.validate_python({"update_id": 1, "message": _MESSAGE})
        assert isinstance(update, generated_package.MessageUpdate)
        assert update.update_type is generated_package.UpdateType.MESSAGE
        assert update.message.text == "ping"

    def test_update_with_two_event_keys_is_rejected(self, generated_package: Any) -> None:
        payload = {"update_id": 1, "message": _MESSAGE, "edited_message": _MESSAGE}
        with pytest.raises(ValidationError):
            TypeAdapter(generated_package.Update).validate_python(payload)
        with pytest.raises(ValueError, match="Failed to deserialize Update"):
            generated_package.select_update(payload)

    def test_update_without_event_key_is_rejected(self, generated_package: Any) -> None:
        with pytest.raises(ValidationError):
            TypeAdapter(generated_package.Update).validate_python({"update_id": 1})

    def test_select_update(self, generated_package: Any) -> None:
        record = generated_package.select_update({"update_id": 3, "callback_query": {}})
        assert record is generated_package.CallbackQueryUpdate

    def test_tagged_union(self, generated_package: Any) -> None:
        adapter = TypeAdapter(generated_package.ChatMember)
        member = adapter.validate_python(
            {"status": "creator", "user": _USER, "is_anonymous": False}
        )
        assert isinstance(member, generated_package.ChatMemberOwner)
        assert member.model_dump()["status"] == "creator"
        with pytest.raises(ValidationError):
            adapter.validate_python({"status": "kicked", "user": _USER})

    def test_union_inside_record(self, generated_package: Any) -> None:
        updated = generated_package.ChatMemberUpdated.model_validate(
            {
                "chat": _CHAT,
                "from": _USER,
                "date": 1700000000,
                "old_chat_member": {"status": "member", "user": _USER},
                "new_chat_member": {"status": "creator", "user": _USER, "is_anonymous": True},
            }
        )
        assert isinstance(updated.old_chat_member, generated_package.ChatMemberMember)
        assert isinstance(updated.new_chat_member, generated_package.ChatMemberOwner)

    def test_structural_union(self, generated_package: Any) -> None:
        adapter = TypeAdapter(generated_package.InputMessageContent)
        content = adapter.validate_python({"latitude": 1.5, "longitude": 2.5})
        assert isinstance(content, generated_package.InputLocationMessageContent)
        content = adapter.validate_python({"message_text": "hi"})
        assert isinstance(content, generated_package.InputTextMessageContent)

    def test_allow_listed_union_keeps_field(self, generated_package: Any) -> None:
        adapter = TypeAdapter(generated_package.PassportElementError)
        error = adapter.validate_python(
            {"source": "front_side", "type": "passport", "file_hash": "abc", "message": "blurry"}
        )
        assert isinstance(error, generated_package.PassportElementErrorFrontSide)
        assert error.type == "passport"


class TestGeneratedMethods:
    def test_get_me_uses_get(self, generated_package: Any) -> None:
        calls: list[httpx.Request] = []
        with _client(generated_package, lambda r: _ok(_USER), calls) as client:
            me = generated_package.get_me(client)
        assert me.id.root == 7
        assert calls[0].method == "GET"
        assert calls[0].url.path == "/botTOKEN/getMe"

    def test_send_message_posts_json(self, generated_package: Any) -> None:
        calls: list[httpx.Request] = []
        with _client(generated_package, lambda r: _ok(_MESSAGE), calls) as client:
            message = generated_package.send_message(
                client, chat_id=generated_package.ChatId(5), text="ping"
            )
        assert isinstance(message, generated_package.Message)
        assert calls[0].method == "POST"
        assert json.loads(calls[0].content) == {"chat_id": 5, "text": "ping"}

    def test_inline_variation_calls_base_endpoint(self, generated_package: Any) -> None:
        calls: list[httpx.Request] = []
        with _client(generated_package, lambda r: _ok(True), calls) as client:
            result = generated_package.edit_inline_message_text(
                client,
                inline_message_id=generated_package.InlineMessageId("AAA"),
                text="edited",
            )
        assert result is True
        assert calls[0].url.path == "/botTOKEN/editMessageText"
        assert json.loads(calls[0].content) == {"inline_message_id": "AAA", "text": "edited"}

    def test_error_response(self, generated_package: Any) -> None:
        calls: list[httpx.Request] = []
        error = {"ok": False, "error_code": 400, "description": "Bad Request: chat not found"}

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, json=error)

        with _client(generated_package, handler, calls) as client:
            response = generated_package.try_send_message(
                client, chat_id=generated_package.ChatId(1), text="x"
            )
            assert not response.ok
            with pytest.raises(BotApiException) as exc_info:
                generated_package.send_message(
                    client, chat_id=generated_package.ChatId(1), text="x"
                )
        assert exc_info.value.error_code == 400
        assert "chat not found" in str(exc_info.value)

    def test_get_updates_decodes_envelopes(self, generated_package: Any) -> None:
        calls: list[httpx.Request] = []
        updates = [
            {"update_id": 1, "message": _MESSAGE},
            {"update_id": 2, "callback_query": {"id": "cb1", "from": _USER, "data": "x"}},
        ]
        with _client(generated_package, lambda r: _ok(updates), calls) as client:
            result = generated_package.get_updates(client, limit=2)
        assert [type(u).__name__ for u in result] == ["MessageUpdate", "CallbackQueryUpdate"]
        assert json.loads(calls[0].content) == {"limit": 2, "timeout": 0}


class TestGeneratedFluent:
    def test_message_reply(self, generated_package: Any) -> None:
        calls: list[httpx.Request] = []
        message = generated_package.Message.model_validate(_MESSAGE)
        with _client(generated_package, lambda r: _ok(_MESSAGE), calls) as client:
            generated_package.message_reply_html(message, client, text="<b>pong</b>")
        assert calls[0].url.path == "/botTOKEN/sendMessage"
        assert json.loads(calls[0].content) == {
            "chat_id": 5,
            "text": "<b>pong</b>",
            "parse_mode": "HTML",
            "reply_to_message_id": 10,
        }

    def test_wrapper_receiver(self, generated_package: Any) -> None:
        calls: list[httpx.Request] = []
        with _client(generated_package, lambda r: _ok(True), calls) as client:
            answered = generated_package.callback_query_id_answer(
                generated_package.CallbackQueryId("cb1"), client, text="done"
            )
        assert answered is True
        assert calls[0].url.path == "/botTOKEN/answerCallbackQuery"
        assert json.loads(calls[0].content) == {
            "callback_query_id": "cb1",
            "text": "done",
            "show_alert": False,
        }


def _build(raw: dict[str, Any], rules: Any, build_package: Any) -> Any:
    from botapigen.parser import extract_model
    from botapigen.resolver import resolve_model

    return build_package(resolve_model(extract_model(raw), rules))


def _set_param_type(raw: dict[str, Any], method: str, wire_name: str, type_: str) -> None:
    entry = next(m for m in raw["methods"] if m["name"] == method)
    param = next(p for p in entry["parameters"] if p["wire_name"] == wire_name)
    param["type"] = type_


class TestIntOrStringChatId:
    """``sendMessage.chat_id`` declared as ``Union[int, str]`` gets no wrapper type."""

    @pytest.fixture
    def package(self, mini_raw: dict[str, Any], default_rules: Any, build_package: Any) -> Any:
        _set_param_type(mini_raw, "sendMessage", "chat_id", "Union[int, str]")
        return _build(mini_raw, default_rules, build_package)

    def test_request_accepts_both_forms(self, package: Any) -> None:
        assert package.SendMessageRequest(chat_id="@channel", text="x").chat_id == "@channel"
        assert package.SendMessageRequest(chat_id=5, text="x").chat_id == 5

    def test_method_posts_username(self, package: Any) -> None:
        calls: list[httpx.Request] = []
        with _client(package, lambda r: _ok(_MESSAGE), calls) as client:
            package.send_message(client, chat_id="@channel", text="hi")
        assert json.loads(calls[0].content) == {"chat_id": "@channel", "text": "hi"}

    def test_fluent_unwraps_record_field(self, package: Any) -> None:
        calls: list[httpx.Request] = []
        chat = package.Chat.model_validate(_CHAT)
        with _client(package, lambda r: _ok(_MESSAGE), calls) as client:
            sent = package.chat_send_message(chat, client, text="hi")
        assert sent.message_id == package.MessageId(10)
        assert json.loads(calls[0].content) == {"chat_id": 5, "text": "hi"}

    def test_fluent_unwraps_nested_field_path(self, package: Any) -> None:
        calls: list[httpx.Request] = []
        message = package.Message.model_validate(_MESSAGE)
        with _client(package, lambda r: _ok(_MESSAGE), calls) as client:
            package.message_reply(message, client, text="pong")
        assert json.loads(calls[0].content) == {
            "chat_id": 5,
            "text": "pong",
            "reply_to_message_id": 10,
        }

    def test_fluent_unwraps_wrapper_receiver(self, package: Any) -> None:
        calls: list[httpx.Request] = []
        with _client(package, lambda r: _ok(_MESSAGE), calls) as client:
            package.chat_id_send_message(package.ChatId(5), client, text="hi")
        assert json.loads(calls[0].content) == {"chat_id": 5, "text": "hi"}


def _inline_result(name: str, tag: str, *fields: str) -> dict[str, Any]:
    return {
        "name": name,
        "description": f"Represents {name}.",
        "fields": [
            {"wire_name": "type", "type": "str", "description": f'Type of the result, must be "{tag}"'},
            {"wire_name": "id", "type": "str", "description": "Unique identifier for this result."},
            *({"wire_name": f, "type": "str", "description": f"The {f}."} for f in fields),
        ],
    }


class TestSharedTagUnion:
    """Members sharing a tag value are told apart by their fields."""

    @pytest.fixture
    def package(self, mini_raw: dict[str, Any], default_rules: Any, build_package: Any) -> Any:
        mini_raw["types"].extend(
            [
                _inline_result("InlineQueryResultArticle", "article", "title"),
                _inline_result("InlineQueryResultPhoto", "photo", "photo_url", "thumbnail_url"),
                _inline_result("InlineQueryResultCachedPhoto", "photo", "photo_file_id"),
                {
                    "name": "InlineQueryResult",
                    "description": "One result of an inline query.",
                    "union": [
                        "InlineQueryResultArticle",
                        "InlineQueryResultPhoto",
                        "InlineQueryResultCachedPhoto",
                    ],
                },
            ]
        )
        return _build(mini_raw, default_rules, build_package)

    def test_unique_tag_selects_member(self, package: Any) -> None:
        adapter = TypeAdapter(package.InlineQueryResult)
        result = adapter.validate_python({"type": "article", "id": "1", "title": "t"})
        assert isinstance(result, package.InlineQueryResultArticle)

    def test_shared_tag_selects_by_fields(self, package: Any) -> None:
        adapter = TypeAdapter(package.InlineQueryResult)
        photo = adapter.validate_python(
            {"type": "photo", "id": "1", "photo_url": "u", "thumbnail_url": "t"}
        )
        cached = adapter.validate_python({"type": "photo", "id": "2", "photo_file_id": "f"})
        assert isinstance(photo, package.InlineQueryResultPhoto)
        assert isinstance(cached, package.InlineQueryResultCachedPhoto)
        assert cached.model_dump(by_alias=True)["type"] == "photo"

    def test_model_instances_pass_through(self, package: Any) -> None:
        cached = package.InlineQueryResultCachedPhoto(id="2", photo_file_id="f")
        result = TypeAdapter(package.InlineQueryResult).validate_python(cached)
        assert isinstance(result, package.InlineQueryResultCachedPhoto)
        assert result == cached

    def test_unknown_tag_is_rejected(self, package: Any) -> None:
        with pytest.raises(ValidationError):
            TypeAdapter(package.InlineQueryResult).validate_python({"type": "video", "id": "3"})
