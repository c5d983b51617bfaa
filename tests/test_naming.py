"""Tests for botapigen.naming."""

from __future__ import annotations

import pytest

from botapigen.naming import loud_snake_case, pascal_case, sanitize_identifier, snake_case


class TestSnakeCase:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("sendMessage", "send_message"),
            ("sendMarkdownV2", "send_markdown_v2"),
            ("ChatId", "chat_id"),
            ("getMe", "get_me"),
            ("sendHtml", "send_html"),
            ("already_snake", "already_snake"),
        ],
    )
    def test_conversion(self, name: str, expected: str) -> None:
        assert snake_case(name) == expected


class TestSanitizeIdentifier:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("from", "from_"),
            ("inline_message_id", "inline_message_id"),
            ("file-size", "file_size"),
            ("2fa", "_2fa"),
            ("__", "field"),
        ],
    )
    def test_conversion(self, name: str, expected: str) -> None:
        assert sanitize_identifier(name) == expected

    def test_result_is_always_an_identifier(self) -> None:
        for name in ("from", "class", "a.b", "with space", "9"):
            assert sanitize_identifier(name).isidentifier()


class TestPascalAndLoud:
    def test_pascal_case(self) -> None:
        assert pascal_case("edited_message") == "EditedMessage"
        assert pascal_case("sendMessage") == "SendMessage"

    def test_loud_snake_case(self) -> None:
        assert loud_snake_case("callback_query") == "CALLBACK_QUERY"
        assert loud_snake_case("chatMember") == "CHAT_MEMBER"
