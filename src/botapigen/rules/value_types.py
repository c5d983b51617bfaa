"""Value-type rules: which primitive fields become semantic wrapper types.

Each predicate receives the owning element name (a type name, or a
method's API name for parameters) and the field. Predicates exclude
competing suffixes themselves: ``inline_message_id`` ends with
``message_id``, so the ``MessageId`` rule rejects it explicitly instead of
relying on ``InlineMessageId`` being listed first.
"""

from __future__ import annotations

from botapigen.models import ApiField, FieldPredicate, ValueTypeRule

_SECONDS_FIELDS = frozenset(
    {"cache_time", "duration", "life_period", "open_period", "timeout", "retry_after"}
)

_TIMESTAMP_FIELDS = frozenset(
    {
        "date",
        "last_error_date",
        "last_synchronization_error_date",
        "emoji_status_expiration_date",
        "forward_date",
        "edit_date",
        "close_date",
        "start_date",
        "expire_date",
        "until_date",
        "file_date",
    }
)


def _id_of(owner_name: str) -> FieldPredicate:
    """Match the ``id`` field of exactly *owner_name*."""

    def predicate(owner: str, field: ApiField) -> bool:
        return owner == owner_name and field.wire_name == "id"

    return predicate


def _suffix(suffix: str, *excluded: str) -> FieldPredicate:
    """Match wire names ending in *suffix* but in none of *excluded*."""

    def predicate(owner: str, field: ApiField) -> bool:
        name = field.wire_name
        return name.endswith(suffix) and not any(name.endswith(e) for e in excluded)

    return predicate


def _any_of(*predicates: FieldPredicate) -> FieldPredicate:
    def predicate(owner: str, field: ApiField) -> bool:
        return any(p(owner, field) for p in predicates)

    return predicate


def _inline_query_result_id(owner: str, field: ApiField) -> bool:
    # InlineQueryResult* records; the InlineQuery.id itself is an InlineQueryId.
    if owner.startswith("InlineQuery") and owner != "InlineQuery" and field.wire_name == "id":
        return True
    return owner == "ChosenInlineResult" and field.wire_name == "result_id"


def _wire_name_in(names: frozenset[str]) -> FieldPredicate:
    def predicate(owner: str, field: ApiField) -> bool:
        return field.wire_name in names

    return predicate


def default_value_types() -> tuple[ValueTypeRule, ...]:
    """The Bot API identifier and unit wrapper types, in evaluation order."""
    return (
        ValueTypeRule(
            name="ChatId",
            backing_primitive="int",
            doc_string="Chat identifier.",
            predicate=_any_of(_id_of("Chat"), _suffix("chat_id")),
        ),
        ValueTypeRule(
            name="UserId",
            backing_primitive="int",
            doc_string="User identifier.",
            predicate=_any_of(_id_of("User"), _suffix("user_id")),
        ),
        ValueTypeRule(
            name="MessageId",
            backing_primitive="int",
            doc_string="Opaque message identifier.",
            predicate=_suffix("message_id", "inline_message_id"),
        ),
        ValueTypeRule(
            name="InlineMessageId",
            backing_primitive="str",
            doc_string="Opaque inline message identifier.",
            predicate=_suffix("inline_message_id"),
        ),
        ValueTypeRule(
            name="MessageThreadId",
            backing_primitive="int",
            doc_string="Opaque message thread identifier.",
            predicate=_suffix("message_thread_id"),
        ),
        ValueTypeRule(
            name="CallbackQueryId",
            backing_primitive="str",
            doc_string="Opaque CallbackQuery identifier.",
            predicate=_any_of(_id_of("CallbackQuery"), _suffix("callback_query_id")),
        ),
        ValueTypeRule(
            name="InlineQueryId",
            backing_primitive="str",
            doc_string="Opaque InlineQuery identifier.",
            predicate=_any_of(_id_of("InlineQuery"), _suffix("inline_query_id")),
        ),
        ValueTypeRule(
            name="InlineQueryResultId",
            backing_primitive="str",
            doc_string="Opaque InlineQueryResult identifier.",
            predicate=_inline_query_result_id,
        ),
        ValueTypeRule(
            name="FileId",
            backing_primitive="str",
            doc_string="Identifier for a file, which can be used to download or reuse the file.",
            predicate=_suffix("file_id"),
        ),
        ValueTypeRule(
            name="FileUniqueId",
            backing_primitive="str",
            doc_string=(
                "Unique identifier for a file, which is supposed to be the same over time "
                "and for different bots.\n\nIt can't be used to download or reuse the file."
            ),
            predicate=_suffix("file_unique_id"),
        ),
        ValueTypeRule(
            name="ShippingQueryId",
            backing_primitive="str",
            doc_string="Opaque ShippingQuery identifier.",
            predicate=_any_of(_id_of("ShippingQuery"), _suffix("shipping_query_id")),
        ),
        ValueTypeRule(
            name="WebAppQueryId",
            backing_primitive="str",
            doc_string="Opaque web-app query identifier.",
            predicate=_suffix("web_app_query_id"),
        ),
        ValueTypeRule(
            name="CustomEmojiId",
            backing_primitive="str",
            doc_string="Opaque custom emoji identifier.",
            predicate=_suffix("custom_emoji_id"),
        ),
        ValueTypeRule(
            name="Seconds",
            backing_primitive="int",
            doc_string="Duration in seconds.",
            predicate=_wire_name_in(_SECONDS_FIELDS),
        ),
        ValueTypeRule(
            name="UnixTimestamp",
            backing_primitive="int",
            doc_string=(
                "Unix time - number of seconds that have elapsed since "
                "00:00:00 UTC on 1 January 1970."
            ),
            predicate=_wire_name_in(_TIMESTAMP_FIELDS),
        ),
    )
