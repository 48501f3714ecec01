"""Gateway error taxonomy."""

from enum import Enum
from typing import Any, Dict, List, Optional


class ErrorKind(str, Enum):
    """Error kind enumeration."""

    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    CHANNEL_MISSING = "CHANNEL_MISSING"
    TRANSPORT = "TRANSPORT"
    DELIVERY_HANDLE = "DELIVERY_HANDLE"
    CANCELLED = "CANCELLED"


class GatewayError(Exception):
    """Base class for every failure surfaced by the gateway."""

    kind: ErrorKind = ErrorKind.TRANSPORT

    def __init__(
        self,
        message: str,
        channel: Optional[str] = None,
        code: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.channel = channel
        self.code = code


class InvalidArgumentError(GatewayError, ValueError):
    """A required argument was missing or malformed. No remote call was made."""

    kind = ErrorKind.INVALID_ARGUMENT


class TransportError(GatewayError):
    """A remote call failed. Keeps the service error code for diagnostics."""

    kind = ErrorKind.TRANSPORT


class ChannelMissingError(GatewayError):
    """The channel does not exist on the service."""

    kind = ErrorKind.CHANNEL_MISSING

    def __init__(self, channel: str, code: Optional[str] = None):
        super().__init__(f"the queue '{channel}' doesn't exist.", channel=channel, code=code)


class DeliveryHandleError(GatewayError, ValueError):
    """A message without a receipt handle was passed to delete."""

    kind = ErrorKind.DELIVERY_HANDLE

    def __init__(self, channel: str, message_id: Optional[str]):
        super().__init__(
            f"message '{message_id}' has no receipt handle; "
            "only messages received through this gateway can be deleted",
            channel=channel,
        )
        self.message_id = message_id


class OperationCancelledError(GatewayError):
    """The caller's cancel signal was set before the next remote call."""

    kind = ErrorKind.CANCELLED

    def __init__(self, operation: str, channel: Optional[str] = None, completed: int = 0):
        super().__init__(
            f"{operation} cancelled after {completed} completed item(s)",
            channel=channel,
        )
        self.operation = operation
        self.completed = completed


class FailedEntry:
    """A batch entry the service reported as failed."""

    def __init__(
        self,
        message_id: Optional[str],
        code: str,
        error_message: str = "",
        sender_fault: bool = False,
    ):
        self.message_id = message_id
        self.code = code
        self.error_message = error_message
        self.sender_fault = sender_fault

    def to_dict(self) -> Dict[str, Any]:
        return {
            "messageId": self.message_id,
            "code": self.code,
            "message": self.error_message,
            "senderFault": self.sender_fault,
        }

    def __repr__(self) -> str:
        return f"FailedEntry(message_id={self.message_id!r}, code={self.code!r})"


class BatchSendError(TransportError):
    """Some entries of a send batch were rejected by the service."""

    def __init__(self, channel: str, failed: List[FailedEntry], sent_ids: List[str]):
        codes = sorted({f.code for f in failed})
        super().__init__(
            f"{len(failed)} message(s) could not be sent to '{channel}'",
            channel=channel,
            code=codes[0] if len(codes) == 1 else ",".join(codes),
        )
        self.failed = failed
        self.sent_ids = sent_ids


class PartialDeleteError(TransportError):
    """Some messages were not deleted. The outcome lists which ones were."""

    def __init__(self, channel: str, outcome: Any):
        codes = sorted({f.code for f in outcome.failed})
        super().__init__(
            f"{len(outcome.failed)} message(s) could not be deleted from '{channel}'",
            channel=channel,
            code=codes[0] if len(codes) == 1 else ",".join(codes),
        )
        self.outcome = outcome


class ChannelOperationError(GatewayError):
    """Per-channel failures of a create or delete that spans several channels."""

    def __init__(self, operation: str, failures: Dict[str, GatewayError]):
        names = ", ".join(sorted(failures))
        super().__init__(f"{operation} failed for channel(s): {names}")
        self.operation = operation
        self.failures = failures
        kinds = {e.kind for e in failures.values()}
        if len(kinds) == 1:
            self.kind = kinds.pop()
