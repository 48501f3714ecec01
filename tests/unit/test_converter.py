"""Unit tests for message conversion."""

import pytest

from queue_gateway.domain.errors import InvalidArgumentError
from queue_gateway.domain.message import QueueMessage, RECEIPT_HANDLE_PROPERTY
from queue_gateway.service.converter import (
    BODY_ENCODING_ATTRIBUTE,
    EMPTY_PROPERTIES_ATTRIBUTE,
    MESSAGE_ID_ATTRIBUTE,
    from_wire,
    to_wire,
)


def echo(entry, receipt_handle="rh-1", message_id="sqs-id-1"):
    """What SQS hands back for an entry that was sent."""
    return {
        "MessageId": message_id,
        "ReceiptHandle": receipt_handle,
        "Body": entry["MessageBody"],
        "MessageAttributes": entry.get("MessageAttributes", {}),
    }


def test_to_wire_copies_body_and_properties():
    message = QueueMessage(content="hello", properties={"tenant": "acme", "priority": "high"})

    entry = to_wire(message, "0")

    assert entry["Id"] == "0"
    assert entry["MessageBody"] == "hello"
    assert entry["MessageAttributes"]["tenant"] == {"StringValue": "acme", "DataType": "String"}
    assert set(entry["MessageAttributes"]) == {"tenant", "priority"}


def test_to_wire_omits_receipt_handle():
    """Test that the receipt handle is never sent."""
    message = QueueMessage(content="x", properties={RECEIPT_HANDLE_PROPERTY: "rh", "a": "b"})

    entry = to_wire(message, "3")

    assert RECEIPT_HANDLE_PROPERTY not in entry["MessageAttributes"]


def test_bytes_body_round_trips_as_bytes():
    """Test that a bytes body that is not UTF-8 comes back unchanged."""
    message = QueueMessage(content=b"\xff\xfe\x00binary")

    entry = to_wire(message, "0")
    restored = from_wire(echo(entry))

    assert entry["MessageBody"] == "//4AYmluYXJ5"
    assert restored.content == b"\xff\xfe\x00binary"
    assert BODY_ENCODING_ATTRIBUTE not in restored.properties


def test_text_body_is_sent_as_is():
    entry = to_wire(QueueMessage(content="ünïcode"), "0")

    assert entry["MessageBody"] == "ünïcode"
    assert "MessageAttributes" not in entry


def test_empty_property_values_survive_round_trip():
    """Test that a property whose value is empty is not lost."""
    message = QueueMessage(content="b", properties={"flag": "", "other": "", "tenant": "acme"})

    entry = to_wire(message, "0")
    restored = from_wire(echo(entry))

    assert "flag" not in entry["MessageAttributes"]
    assert restored.properties["flag"] == ""
    assert restored.properties["other"] == ""
    assert restored.properties["tenant"] == "acme"
    assert EMPTY_PROPERTIES_ATTRIBUTE not in restored.properties


def test_none_property_value_is_rejected():
    with pytest.raises(InvalidArgumentError):
        to_wire(QueueMessage(content="b", properties={"flag": None}), "0")


def test_reserved_property_name_is_rejected():
    with pytest.raises(InvalidArgumentError):
        to_wire(QueueMessage(content="b", properties={MESSAGE_ID_ATTRIBUTE: "x"}), "0")


def test_round_trip_restores_body_and_properties():
    """Test that body and every property survive send and receive."""
    message = QueueMessage(content="payload", id="order-42", properties={"tenant": "acme", "kind": "created"})

    restored = from_wire(echo(to_wire(message, "0")))

    assert restored.text == "payload"
    assert restored.id == "order-42"
    for key, value in message.properties.items():
        assert restored.properties[key] == value
    assert MESSAGE_ID_ATTRIBUTE not in restored.properties


def test_from_wire_injects_receipt_handle_and_attributes():
    raw = {
        "MessageId": "sqs-id-9",
        "ReceiptHandle": "handle-9",
        "Body": "b",
        "Attributes": {"ApproximateReceiveCount": "3", "SentTimestamp": "1700000000000"},
        "MessageAttributes": {"blob": {"BinaryValue": b"\x00\x01", "DataType": "Binary"}},
    }

    message = from_wire(raw)

    assert message.id == "sqs-id-9"
    assert message.receipt_handle == "handle-9"
    assert message.properties["ApproximateReceiveCount"] == "3"
    assert message.properties["blob"] == "AAE="


def test_from_wire_without_caller_id_uses_service_id():
    message = from_wire(echo(to_wire(QueueMessage(content="x"), "0"), message_id="generated"))

    assert message.id == "generated"
