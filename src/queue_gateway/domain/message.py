"""Queue message domain model."""

import base64
from typing import Optional, Dict, Any, Union

# Receive-only property carrying the SQS receipt handle. Written by the
# receive path, read by the delete path. Not part of the public API.
RECEIPT_HANDLE_PROPERTY = "sqs.receipthandle"


class QueueMessage:
    """Message entity."""

    def __init__(
        self,
        content: Union[str, bytes],
        id: Optional[str] = None,
        properties: Optional[Dict[str, str]] = None,
    ):
        self.id = id
        self.content = content
        self.properties: Dict[str, str] = dict(properties or {})

    @property
    def text(self) -> str:
        """Body decoded as UTF-8 text."""
        if isinstance(self.content, bytes):
            return self.content.decode("utf-8")
        return self.content

    @property
    def receipt_handle(self) -> Optional[str]:
        return self.properties.get(RECEIPT_HANDLE_PROPERTY)

    @property
    def has_receipt_handle(self) -> bool:
        return bool(self.receipt_handle)

    def to_dict(self) -> Dict[str, Any]:
        """Convert message to dictionary."""
        if isinstance(self.content, bytes):
            item: Dict[str, Any] = {
                "content": base64.b64encode(self.content).decode("ascii"),
                "encoding": "base64",
            }
        else:
            item = {"content": self.content}

        # Only include optional fields if they are set
        if self.id is not None:
            item["id"] = self.id
        if self.properties:
            item["properties"] = dict(self.properties)

        return item

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "QueueMessage":
        """Create message from dictionary."""
        content = data.get("content", "")
        if data.get("encoding") == "base64":
            content = base64.b64decode(content)

        return cls(
            content=content,
            id=data.get("id"),
            properties=data.get("properties", {}),
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, QueueMessage):
            return NotImplemented
        return (
            self.id == other.id
            and self.content == other.content
            and self.properties == other.properties
        )

    def __repr__(self) -> str:
        return f"QueueMessage(id={self.id!r}, properties={len(self.properties)})"
