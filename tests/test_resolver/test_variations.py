"""Tests for method variation expansion."""

from __future__ import annotations

import pytest

from botapigen.exceptions import InvalidVariationError
from botapigen.models import (
    ApiField,
    ApiModel,
    DescriptionRewrite,
    MethodElement,
    MethodVariationRule,
    ResolvedModel,
    RuleSet,
)
from botapigen.resolver.variations import expand_method, expand_methods


def _param(wire_name: str, optional: bool = True) -> ApiField:
    return ApiField(name=wire_name, wire_name=wire_name, declared_type="int", is_optional=optional)


def _edit_method() -> MethodElement:
    return MethodElement(
        name="editThing",
        api_name="editThing",
        description="Edits a thing. Returns the thing or True.",
        parameters=(_param("chat_id"), _param("message_id"), _param("inline_message_id"), _param("text", False)),
        return_type="Thing",
    )


def _rule(**overrides) -> MethodVariationRule:
    values = dict(
        method_name="editThing",
        required_params=("chat_id", "message_id"),
        skip_params=("inline_message_id",),
        new_method_name="editThing",
        new_return_type="Thing",
    )
    values.update(overrides)
    return MethodVariationRule(**values)


class TestExpandMethod:
    def test_method_without_rules_is_unchanged(self) -> None:
        method = _edit_method()
        assert expand_method(method, RuleSet()) == [method]

    def test_required_params_lose_optionality(self) -> None:
        (expanded,) = expand_method(_edit_method(), RuleSet(variations=(_rule(),)))
        assert expanded.parameter_wire_names == ["chat_id", "message_id", "text"]
        assert not any(p.is_optional for p in expanded.parameters)

    def test_expanded_method_keeps_api_name(self) -> None:
        rule = _rule(
            required_params=("inline_message_id",),
            skip_params=("chat_id", "message_id"),
            new_method_name="editInlineThing",
            new_return_type="bool",
        )
        (expanded,) = expand_method(_edit_method(), RuleSet(variations=(rule,)))
        assert expanded.name == "editInlineThing"
        assert expanded.api_name == "editThing"
        assert expanded.return_type == "bool"

    def test_description_rewrites_apply_in_order(self) -> None:
        rule = _rule(
            description_rewrites=(
                DescriptionRewrite(pattern=r"the thing or True", replacement="the thing"),
                DescriptionRewrite(pattern=r"Returns", replacement="On success returns"),
            )
        )
        (expanded,) = expand_method(_edit_method(), RuleSet(variations=(rule,)))
        assert expanded.description == "Edits a thing. On success returns the thing."

    def test_overlapping_groups_raise(self) -> None:
        rule = _rule(required_params=("chat_id",), skip_params=("chat_id",))
        with pytest.raises(InvalidVariationError, match="both required and skipped"):
            expand_method(_edit_method(), RuleSet(variations=(rule,)))

    def test_unknown_parameter_raises(self) -> None:
        rule = _rule(required_params=("chat_id", "business_id"))
        with pytest.raises(InvalidVariationError) as exc_info:
            expand_method(_edit_method(), RuleSet(variations=(rule,)))
        assert exc_info.value.method == "editThing"
        assert "business_id" in str(exc_info.value)


class TestExpandMethods:
    def test_name_collision_raises(self) -> None:
        api = ApiModel(
            methods=(
                _edit_method(),
                MethodElement(name="editInlineThing", api_name="editInlineThing", return_type="bool"),
            )
        )
        rule = _rule(
            required_params=("inline_message_id",),
            skip_params=("chat_id", "message_id"),
            new_method_name="editInlineThing",
        )
        with pytest.raises(InvalidVariationError, match="collides"):
            expand_methods(api, RuleSet(variations=(rule,)))

    def test_fixture_partition(self, resolved: ResolvedModel) -> None:
        names = [m.name for m in resolved.methods]
        index = names.index("editMessageText")
        assert names[index : index + 2] == ["editMessageText", "editInlineMessageText"]

        chat = resolved.method("editMessageText")
        inline = resolved.method("editInlineMessageText")
        chat_params = set(chat.parameter_wire_names)
        inline_params = set(inline.parameter_wire_names)
        assert {"chat_id", "message_id"} <= chat_params
        assert "inline_message_id" not in chat_params
        assert "inline_message_id" in inline_params
        assert not {"chat_id", "message_id"} & inline_params

    def test_fixture_return_types_and_descriptions(self, resolved: ResolvedModel) -> None:
        chat = resolved.method("editMessageText")
        inline = resolved.method("editInlineMessageText")
        assert chat.return_type == "Message"
        assert inline.return_type == "bool"
        assert chat.description.endswith("On success the edited Message is returned.")
        assert inline.description.endswith("On success True is returned.")
        assert inline.api_name == "editMessageText"

    def test_signature_uses_wrapper_types(self, resolved: ResolvedModel) -> None:
        params, returns = resolved.signature("editInlineMessageText")
        assert ("inline_message_id", "InlineMessageId", False) in params
        assert returns == "bool"

    def test_signature_of_unknown_method_raises(self, resolved: ResolvedModel) -> None:
        with pytest.raises(KeyError):
            resolved.signature("sendCarrierPigeon")
