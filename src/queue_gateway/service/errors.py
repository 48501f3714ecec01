"""Translation of SQS errors into gateway errors."""

from typing import Optional, Tuple

from botocore.exceptions import BotoCoreError, ClientError

from ..domain.errors import ChannelMissingError, GatewayError, TransportError

# Query protocol code and the JSON protocol shape of the same error
NON_EXISTENT_QUEUE_CODES = frozenset({
    "AWS.SimpleQueueService.NonExistentQueue",
    "QueueDoesNotExist",
})


def error_details(exc: Exception) -> Tuple[str, str]:
    """Return (code, message) from a botocore error."""
    if isinstance(exc, ClientError):
        error = exc.response.get("Error", {})
        return error.get("Code", "Unknown"), error.get("Message", str(exc))
    return type(exc).__name__, str(exc)


def is_channel_missing(exc: Exception) -> bool:
    """True if the service reported that the queue does not exist."""
    return isinstance(exc, ClientError) and error_details(exc)[0] in NON_EXISTENT_QUEUE_CODES


def translate_error(exc: Exception, operation: str, channel: Optional[str] = None) -> GatewayError:
    """Map a transport exception to a gateway error for the given operation.

    Only ``send`` turns a missing queue into ChannelMissingError; the
    transport error it wraps is attached as ``__cause__``. Count queries
    absorb the condition before calling this. Everything else becomes a
    TransportError carrying the original code.
    """
    if isinstance(exc, GatewayError):
        return exc
    if not isinstance(exc, (ClientError, BotoCoreError)):
        raise TypeError(f"cannot translate {type(exc).__name__}") from exc

    code, message = error_details(exc)
    transport_error = TransportError(
        f"{operation} failed on '{channel}': {code}: {message}" if channel else f"{operation} failed: {code}: {message}",
        channel=channel,
        code=code,
    )
    transport_error.__cause__ = exc

    if operation == "send" and channel is not None and code in NON_EXISTENT_QUEUE_CODES:
        missing = ChannelMissingError(channel, code=code)
        missing.__cause__ = transport_error
        return missing

    return transport_error
