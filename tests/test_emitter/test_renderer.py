"""Tests for botapigen.emitter.renderer."""

from __future__ import annotations

import ast

import pytest

from botapigen.emitter import render_package
from botapigen.emitter.renderer import escape_docstring, format_docstring
from botapigen.models import GeneratorConfig, ResolvedModel


@pytest.fixture
def files(resolved: ResolvedModel) -> dict[str, str]:
    return render_package(resolved, GeneratorConfig())


class TestRenderPackage:
    def test_file_set(self, files: dict[str, str]) -> None:
        assert list(files) == [
            "types.py",
            "requests.py",
            "methods.py",
            "fluent.py",
            "__init__.py",
            "py.typed",
        ]

    @pytest.mark.parametrize("filename", ["types.py", "requests.py", "methods.py", "fluent.py", "__init__.py"])
    def test_output_is_valid_python(self, files: dict[str, str], filename: str) -> None:
        ast.parse(files[filename], filename=filename)

    def test_deterministic(self, resolved: ResolvedModel) -> None:
        config = GeneratorConfig()
        assert render_package(resolved, config) == render_package(resolved, config)

    def test_config_is_baked_in(self, resolved: ResolvedModel) -> None:
        config = GeneratorConfig(package_name="mybot_api", api_url="http://localhost:8081")
        init = render_package(resolved, config)["__init__.py"]
        assert 'API_URL = "http://localhost:8081"' in init
        assert "from mybot_api import create_client" in init


class TestTypesModule:
    def test_wrapper_types(self, files: dict[str, str]) -> None:
        source = files["types.py"]
        assert "class ChatId(RootModel[int]):" in source
        assert "class InlineMessageId(RootModel[str]):" in source

    def test_records_follow_declaration_order(self, files: dict[str, str]) -> None:
        source = files["types.py"]
        positions = [source.index(f"class {name}(BotApiModel):") for name in ("User", "Chat", "PhotoSize", "Message")]
        assert positions == sorted(positions)

    def test_keyword_field_is_aliased(self, files: dict[str, str]) -> None:
        assert 'from_: Optional[User] = Field(default=None, alias="from")' in files["types.py"]
        assert 'from_: User = Field(alias="from")' in files["types.py"]

    def test_tag_field_replaces_discriminator(self, files: dict[str, str]) -> None:
        source = files["types.py"]
        assert 'status: Literal["creator"] = "creator"' in source
        assert "status: str" not in source
        assert 'Field(discriminator="status")' in source

    def test_allow_listed_union_is_plain(self, files: dict[str, str]) -> None:
        source = files["types.py"]
        assert "PassportElementError = Union[" in source
        assert "    type: str" in source

    def test_structural_union_uses_callable_discriminator(self, files: dict[str, str]) -> None:
        source = files["types.py"]
        assert "def _input_message_content_tag(value: Any) -> Optional[str]:" in source
        assert 'if "message_text" in value:' in source
        assert "Discriminator(_input_message_content_tag)" in source

    def test_envelope_block(self, files: dict[str, str]) -> None:
        source = files["types.py"]
        assert "class UpdateType(str, Enum):" in source
        assert '    CALLBACK_QUERY = "callback_query"' in source
        assert "class MessageUpdate(BotApiModel):" in source
        assert "def select_update(payload: Mapping[str, Any]) -> type[BotApiModel]:" in source
        assert "At most one of the optional parameters" not in source

    def test_union_aliases_follow_records(self, files: dict[str, str]) -> None:
        source = files["types.py"]
        assert source.index("class File(BotApiModel):") < source.index("ChatMember = Annotated[")


class TestMethodsModule:
    def test_pair_per_operation(self, files: dict[str, str]) -> None:
        source = files["methods.py"]
        for name in ("get_me", "send_message", "edit_message_text", "edit_inline_message_text"):
            assert f"def try_{name}(" in source
            assert f"def {name}(" in source

    def test_inline_variation_calls_base_method(self, files: dict[str, str]) -> None:
        tree = ast.parse(files["methods.py"])
        function = next(
            node
            for node in tree.body
            if isinstance(node, ast.FunctionDef) and node.name == "try_edit_inline_message_text"
        )
        assert [a.arg for a in function.args.kwonlyargs] == ["inline_message_id", "text", "parse_mode"]
        assert '"editMessageText"' in ast.get_source_segment(files["methods.py"], function)

    def test_parameters_are_keyword_only(self, files: dict[str, str]) -> None:
        tree = ast.parse(files["methods.py"])
        for node in tree.body:
            if isinstance(node, ast.FunctionDef):
                assert [a.arg for a in node.args.args] == ["client"], node.name

    def test_method_without_parameters_sends_no_request(self, files: dict[str, str]) -> None:
        assert '"getMe",\n        None,\n        User,' in files["methods.py"]


class TestFluentModule:
    def test_function_names(self, files: dict[str, str]) -> None:
        source = files["fluent.py"]
        assert "def chat_send_html(" in source
        assert "def chat_id_send_message(" in source
        assert "def message_edit_text_markdown_v2(" in source
        assert "def callback_query_id_answer(" in source

    def test_bindings_are_rendered(self, files: dict[str, str]) -> None:
        source = files["fluent.py"]
        assert "chat_id=receiver.chat.id," in source
        assert "reply_to_message_id=receiver.message_id," in source
        assert "parse_mode='HTML'," in source

    def test_skipped_rules_are_absent(self, files: dict[str, str]) -> None:
        assert "def chat_send_photo(" not in files["fluent.py"]


class TestDocstrings:
    def test_escape(self) -> None:
        assert escape_docstring('a """b""" \\n') == 'a \\"\\"\\"b\\"\\"\\" \\\\n'

    def test_single_line(self) -> None:
        assert format_docstring("Chat identifier.") == '    """Chat identifier."""'

    def test_empty(self) -> None:
        assert format_docstring("  ") == ""

    def test_trailing_quote_goes_multiline(self) -> None:
        text = format_docstring('Always "creator"', depth=0)
        assert text == '"""Always "creator"\n"""'

    def test_sections(self) -> None:
        text = format_docstring(
            "Send a message.",
            (("Args", [("chat_id", "Target chat."), ("text", "")]),),
        )
        assert text.splitlines() == [
            '    """Send a message.',
            "",
            "    Args:",
            "        chat_id: Target chat.",
            '    """',
        ]
