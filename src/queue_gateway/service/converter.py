"""Conversion between QueueMessage and SQS wire dictionaries."""

import base64
from typing import Dict, Any, List

from ..domain.errors import InvalidArgumentError
from ..domain.message import QueueMessage, RECEIPT_HANDLE_PROPERTY

# Message attribute carrying a caller-assigned id across the wire
MESSAGE_ID_ATTRIBUTE = "queue-gateway.id"
# Marks a body that was bytes and travels base64-encoded
BODY_ENCODING_ATTRIBUTE = "queue-gateway.encoding"
# Comma-separated names of properties whose value is "" (SQS rejects empty values)
EMPTY_PROPERTIES_ATTRIBUTE = "queue-gateway.empty"

RESERVED_ATTRIBUTES = frozenset({MESSAGE_ID_ATTRIBUTE, BODY_ENCODING_ATTRIBUTE, EMPTY_PROPERTIES_ATTRIBUTE})


def _string_attribute(value: str) -> Dict[str, str]:
    return {"StringValue": value, "DataType": "String"}


def to_wire(message: QueueMessage, entry_id: str) -> Dict[str, Any]:
    """Build a SendMessageBatch entry from a message.

    The receipt handle is receive-only and never sent. Bytes bodies are
    base64-encoded; empty property values are listed by name so they come
    back on receive.
    """
    attributes: Dict[str, Dict[str, str]] = {}
    empty: List[str] = []
    for key, value in message.properties.items():
        if key == RECEIPT_HANDLE_PROPERTY:
            continue
        if key in RESERVED_ATTRIBUTES:
            raise InvalidArgumentError(f"property name '{key}' is reserved")
        if value is None:
            raise InvalidArgumentError(f"property '{key}' has no value")
        if value == "":
            empty.append(key)
            continue
        attributes[key] = _string_attribute(str(value))

    if message.id:
        attributes[MESSAGE_ID_ATTRIBUTE] = _string_attribute(message.id)
    if empty:
        attributes[EMPTY_PROPERTIES_ATTRIBUTE] = _string_attribute(",".join(empty))

    if isinstance(message.content, bytes):
        body = base64.b64encode(message.content).decode("ascii")
        attributes[BODY_ENCODING_ATTRIBUTE] = _string_attribute("base64")
    elif isinstance(message.content, str):
        body = message.content
    else:
        raise InvalidArgumentError(f"message body must be str or bytes, got {type(message.content).__name__}")

    entry: Dict[str, Any] = {
        "Id": entry_id,
        "MessageBody": body,
    }
    if attributes:
        entry["MessageAttributes"] = attributes
    return entry


def from_wire(raw: Dict[str, Any]) -> QueueMessage:
    """Create a message from a ReceiveMessage response entry."""
    properties: Dict[str, str] = {}

    # System attributes (SentTimestamp, ApproximateReceiveCount, ...)
    for key, value in raw.get("Attributes", {}).items():
        properties[key] = str(value)

    message_id = raw.get("MessageId")
    body_encoding = None
    for key, attr in raw.get("MessageAttributes", {}).items():
        if "StringValue" in attr:
            value = attr["StringValue"]
        elif "BinaryValue" in attr:
            value = base64.b64encode(attr["BinaryValue"]).decode("ascii")
        else:
            continue
        if key == MESSAGE_ID_ATTRIBUTE:
            message_id = value
        elif key == BODY_ENCODING_ATTRIBUTE:
            body_encoding = value
        elif key == EMPTY_PROPERTIES_ATTRIBUTE:
            for name in value.split(","):
                properties[name] = ""
        else:
            properties[key] = value

    receipt_handle = raw.get("ReceiptHandle")
    if receipt_handle:
        properties[RECEIPT_HANDLE_PROPERTY] = receipt_handle

    content = raw.get("Body", "")
    if body_encoding == "base64":
        content = base64.b64decode(content)

    return QueueMessage(
        content=content,
        id=message_id,
        properties=properties,
    )
