import pytest

from cyoa.data.errors import DataValidationError
from cyoa.domain import Message, Option, normalize_messages, normalize_node_messages, normalize_options


def test_single_object_and_list_of_one_normalize_identically() -> None:
    payload = {"body": "Hey!", "sender": "them"}

    from_object = normalize_node_messages({"message": payload})
    from_singular_list = normalize_node_messages({"message": [payload]})
    from_plural_list = normalize_node_messages({"messages": [payload]})

    assert from_object == from_singular_list == from_plural_list == (Message("Hey!", "them"),)


def test_many_messages_keep_their_order_in_every_shape() -> None:
    payload = [
        {"body": "First", "sender": "Narrator"},
        {"body": "Second", "sender": "Tree Spirit"},
    ]
    expected = (Message("First", "Narrator"), Message("Second", "Tree Spirit"))

    assert normalize_node_messages({"message": payload}) == expected
    assert normalize_node_messages({"messages": payload}) == expected


def test_messages_key_wins_over_legacy_message_key() -> None:
    node = {
        "message": {"body": "old", "sender": "a"},
        "messages": [{"body": "new", "sender": "b"}],
    }
    assert normalize_node_messages(node) == (Message("new", "b"),)


def test_missing_messages_and_sender_default() -> None:
    assert normalize_node_messages({}) == ()
    assert normalize_messages(None) == ()
    assert normalize_messages({"body": "No sender"}) == (Message("No sender", ""),)


def test_text_is_accepted_as_message_body() -> None:
    assert normalize_messages([{"text": "Hello", "sender": "you"}]) == (Message("Hello", "you"),)


def test_invalid_message_shapes_raise() -> None:
    with pytest.raises(DataValidationError):
        normalize_messages("just a string")
    with pytest.raises(DataValidationError):
        normalize_messages([{"sender": "them"}])
    with pytest.raises(DataValidationError):
        normalize_messages([{"body": "hi", "sender": 3}])


def test_options_accept_legacy_choices_key() -> None:
    options = [{"text": "Begin the journey", "destination": "chapter1"}]
    expected = (Option("Begin the journey", "chapter1"),)

    assert normalize_options({"options": options}) == expected
    assert normalize_options({"choices": options}) == expected
    assert normalize_options({}) == ()


def test_invalid_options_raise() -> None:
    with pytest.raises(DataValidationError):
        normalize_options({"options": {"text": "Go", "destination": "x"}})
    with pytest.raises(DataValidationError):
        normalize_options({"options": [{"text": "Go"}]})
