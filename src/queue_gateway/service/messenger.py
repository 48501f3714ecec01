"""SQS messenger: channel lifecycle and message operations."""

import asyncio
import time
from datetime import timedelta
from typing import Optional, Dict, Any, Iterable, List, Union

from botocore.exceptions import BotoCoreError, ClientError

from ..domain.errors import (
    BatchSendError,
    ChannelOperationError,
    DeliveryHandleError,
    FailedEntry,
    GatewayError,
    InvalidArgumentError,
    OperationCancelledError,
    PartialDeleteError,
)
from ..domain.interfaces import Logger, MetricsClient, QueueTransport
from ..domain.message import QueueMessage
from ..infra.config import MAX_VISIBILITY_SECONDS, MAX_WAIT_TIME_SECONDS, clamp_wait_time
from ..infra.logger import StructLogger
from .batching import MAX_ENTRIES_PER_REQUEST, chunk
from .converter import from_wire, to_wire
from .errors import is_channel_missing, translate_error
from .resolver import ChannelUriResolver

DEFAULT_VISIBILITY = timedelta(minutes=1)
PEEK_VISIBILITY = timedelta(seconds=1)

TRANSPORT_ERRORS = (ClientError, BotoCoreError)


class DeleteOutcome:
    """Accounting of a delete call: which messages went, which did not."""

    def __init__(
        self,
        deleted: Optional[List[QueueMessage]] = None,
        failed: Optional[List[FailedEntry]] = None,
        batches: int = 0,
    ):
        self.deleted = deleted or []
        self.failed = failed or []
        self.batches = batches

    def add_batch(self, deleted: List[QueueMessage], failed: List[FailedEntry]) -> "DeleteOutcome":
        """Return a new outcome with one more batch folded in."""
        return DeleteOutcome(
            deleted=self.deleted + deleted,
            failed=self.failed + failed,
            batches=self.batches + 1,
        )

    @property
    def complete(self) -> bool:
        return not self.failed


def _check_cancelled(cancel: Optional[asyncio.Event], operation: str, channel: Optional[str] = None, completed: int = 0) -> None:
    if cancel is not None and cancel.is_set():
        raise OperationCancelledError(operation, channel=channel, completed=completed)


def _require_channel(channel: Any) -> str:
    if not isinstance(channel, str) or not channel:
        raise InvalidArgumentError("channel name is required", channel=channel if isinstance(channel, str) else None)
    return channel


def _require_names(names: Any) -> List[str]:
    if names is None:
        raise InvalidArgumentError("channel names are required")
    if isinstance(names, str):
        raise InvalidArgumentError("channel names must be a collection, not a single string")
    unique = list(dict.fromkeys(names))
    for name in unique:
        _require_channel(name)
    return unique


def _require_messages(messages: Any, channel: str) -> List[QueueMessage]:
    if messages is None:
        raise InvalidArgumentError("messages are required", channel=channel)
    items = list(messages)
    for item in items:
        if not isinstance(item, QueueMessage):
            raise InvalidArgumentError(f"expected QueueMessage, got {type(item).__name__}", channel=channel)
    return items


def _visibility_seconds(visibility: Union[timedelta, int, float]) -> int:
    if isinstance(visibility, timedelta):
        seconds = visibility.total_seconds()
    elif isinstance(visibility, (int, float)) and not isinstance(visibility, bool):
        seconds = visibility
    else:
        raise InvalidArgumentError(f"visibility must be a timedelta, got {type(visibility).__name__}")
    return max(0, min(int(seconds), MAX_VISIBILITY_SECONDS))


def _failed_entries(response: Dict[str, Any], batch: List[QueueMessage]) -> Dict[int, FailedEntry]:
    failed: Dict[int, FailedEntry] = {}
    for f in response.get("Failed", []):
        index = int(f["Id"])
        failed[index] = FailedEntry(
            message_id=batch[index].id,
            code=f.get("Code", "Unknown"),
            error_message=f.get("Message", ""),
            sender_fault=bool(f.get("SenderFault", False)),
        )
    return failed


class SQSMessenger:
    """Message channels over SQS queues."""

    def __init__(
        self,
        transport: QueueTransport,
        service_url: str,
        wait_time_seconds: int = MAX_WAIT_TIME_SECONDS,
        kms_key_id: Optional[str] = None,
        metrics_client: Optional[MetricsClient] = None,
        logger: Optional[Logger] = None,
        resolver: Optional[ChannelUriResolver] = None,
    ):
        """Initialize messenger."""
        self.transport = transport
        self.resolver = resolver or ChannelUriResolver(service_url)
        self.wait_time_seconds = clamp_wait_time(wait_time_seconds)
        self.kms_key_id = kms_key_id
        self.metrics_client = metrics_client
        self.logger = logger or StructLogger("queue-gateway")

    async def __aenter__(self) -> "SQSMessenger":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        """Release the transport."""
        await self.transport.close()

    async def _emit(self, metric_name: str, value: float, unit: str = "Count") -> None:
        if self.metrics_client is None:
            return
        try:
            await asyncio.to_thread(self.metrics_client.put_metric, metric_name, value, unit)
        except Exception as e:
            # Don't fail the operation if metrics fail
            self.logger.warning("Failed to emit metric", metric=metric_name, error=str(e))

    # ------------------------------------------------------------------
    # Channel lifecycle
    # ------------------------------------------------------------------

    async def create_channels(self, names: Iterable[str], *, cancel: Optional[asyncio.Event] = None) -> None:
        """Create every channel concurrently and wait for all of them.

        Channels created before another one failed are kept.
        """
        unique = _require_names(names)
        _check_cancelled(cancel, "create_channels")

        attributes = {"KmsMasterKeyId": self.kms_key_id} if self.kms_key_id else None
        results = await asyncio.gather(
            *(self.transport.create_queue(name, attributes) for name in unique),
            return_exceptions=True,
        )

        failures: Dict[str, GatewayError] = {}
        for name, result in zip(unique, results):
            if isinstance(result, TRANSPORT_ERRORS):
                failures[name] = translate_error(result, "create_channel", name)
            elif isinstance(result, BaseException):
                raise result

        if failures:
            self.logger.error(
                "Failed to create channels",
                channels=sorted(failures),
                errors={name: e.code for name, e in failures.items()},
            )
            raise ChannelOperationError("create_channels", failures)

        self.logger.info("Channels created", channels=unique)

    async def list_channels(self, prefix: Optional[str] = None, *, cancel: Optional[asyncio.Event] = None) -> List[str]:
        """List channel names known to the service."""
        _check_cancelled(cancel, "list_channels")
        try:
            urls = await self.transport.list_queues(prefix)
        except TRANSPORT_ERRORS as e:
            self.logger.error("Failed to list channels", error=str(e))
            raise translate_error(e, "list_channels")

        return [url.rstrip("/").rsplit("/", 1)[-1] for url in urls]

    async def delete_channels(self, names: Iterable[str], *, cancel: Optional[asyncio.Event] = None) -> None:
        """Delete channels one after another; every failure is reported."""
        unique = _require_names(names)

        failures: Dict[str, GatewayError] = {}
        deleted = 0
        for name in unique:
            _check_cancelled(cancel, "delete_channels", completed=deleted)
            try:
                await self.transport.delete_queue(self.resolver.resolve(name))
                deleted += 1
            except TRANSPORT_ERRORS as e:
                failures[name] = translate_error(e, "delete_channel", name)

        if failures:
            self.logger.error(
                "Failed to delete channels",
                channels=sorted(failures),
                errors={name: e.code for name, e in failures.items()},
            )
            raise ChannelOperationError("delete_channels", failures)

        self.logger.info("Channels deleted", channels=unique)

    async def get_message_count(self, channel: str, *, cancel: Optional[asyncio.Event] = None) -> int:
        """Approximate number of visible messages; 0 if the channel is gone."""
        channel = _require_channel(channel)
        _check_cancelled(cancel, "get_message_count", channel)

        try:
            attributes = await self.transport.get_queue_attributes(
                self.resolver.resolve(channel),
                ["ApproximateNumberOfMessages"],
            )
        except TRANSPORT_ERRORS as e:
            if is_channel_missing(e):
                self.logger.info("Channel does not exist, reporting empty", channel=channel)
                return 0
            self.logger.error("Failed to get message count", channel=channel, error=str(e))
            raise translate_error(e, "get_message_count", channel)

        return int(attributes.get("ApproximateNumberOfMessages", 0))

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------

    async def send(
        self,
        channel: str,
        messages: Iterable[QueueMessage],
        *,
        cancel: Optional[asyncio.Event] = None,
    ) -> List[str]:
        """Send messages in batches of 10. Returns service message ids in input order."""
        channel = _require_channel(channel)
        items = _require_messages(messages, channel)
        # Every message converts before the first batch goes out
        wire_entries = [
            to_wire(message, str(index % MAX_ENTRIES_PER_REQUEST))
            for index, message in enumerate(items)
        ]
        queue_url = self.resolver.resolve(channel)
        start_time = time.time()

        sent_ids: List[str] = []
        failed: List[FailedEntry] = []
        processed = 0
        batches = 0
        for batch, entries in zip(chunk(items, MAX_ENTRIES_PER_REQUEST), chunk(wire_entries, MAX_ENTRIES_PER_REQUEST)):
            _check_cancelled(cancel, "send", channel, completed=processed)

            try:
                response = await self.transport.send_message_batch(queue_url, entries)
            except TRANSPORT_ERRORS as e:
                self.logger.error(
                    "Failed to send message batch",
                    channel=channel,
                    batch_size=len(batch),
                    already_sent=len(sent_ids),
                    error=str(e),
                )
                raise translate_error(e, "send", channel)

            batch_failed = _failed_entries(response, batch)
            successful = {s["Id"]: s.get("MessageId", "") for s in response.get("Successful", [])}
            sent_ids.extend(successful[str(i)] for i in range(len(batch)) if str(i) in successful)
            failed.extend(batch_failed[i] for i in sorted(batch_failed))
            processed += len(batch)
            batches += 1

        latency = (time.time() - start_time) * 1000  # Convert to milliseconds
        await self._emit("MessagesSent", float(len(sent_ids)))

        if failed:
            self.logger.error(
                "Some messages were rejected",
                channel=channel,
                failed=[f.to_dict() for f in failed],
                sent=len(sent_ids),
            )
            raise BatchSendError(channel, failed, sent_ids)

        self.logger.info(
            "Messages sent",
            channel=channel,
            count=len(sent_ids),
            batches=batches,
            latency_ms=latency,
        )
        return sent_ids

    async def receive(
        self,
        channel: str,
        count: int = 100,
        visibility: Optional[timedelta] = None,
        *,
        cancel: Optional[asyncio.Event] = None,
    ) -> List[QueueMessage]:
        """Receive up to min(count, 10) messages, hiding them for the visibility window."""
        return await self._pull(channel, count, DEFAULT_VISIBILITY if visibility is None else visibility, cancel, "receive")

    async def peek(
        self,
        channel: str,
        count: int = 100,
        *,
        cancel: Optional[asyncio.Event] = None,
    ) -> List[QueueMessage]:
        """Receive with a 1 second visibility so messages reappear almost immediately."""
        return await self._pull(channel, count, PEEK_VISIBILITY, cancel, "peek")

    async def _pull(
        self,
        channel: str,
        count: int,
        visibility: Union[timedelta, int, float],
        cancel: Optional[asyncio.Event],
        operation: str,
    ) -> List[QueueMessage]:
        channel = _require_channel(channel)
        if isinstance(count, bool) or not isinstance(count, int) or count < 1:
            raise InvalidArgumentError(f"count must be a positive integer, got {count!r}", channel=channel)
        visibility_timeout = _visibility_seconds(visibility)
        _check_cancelled(cancel, operation, channel)

        start_time = time.time()
        try:
            raw_messages = await self.transport.receive_messages(
                self.resolver.resolve(channel),
                max_messages=min(count, MAX_ENTRIES_PER_REQUEST),
                wait_time_seconds=self.wait_time_seconds,
                visibility_timeout=visibility_timeout,
            )
        except TRANSPORT_ERRORS as e:
            self.logger.error("Failed to receive messages", channel=channel, operation=operation, error=str(e))
            raise translate_error(e, operation, channel)

        latency = (time.time() - start_time) * 1000  # Convert to milliseconds
        messages = [from_wire(raw) for raw in raw_messages]

        if messages:
            self.logger.info(
                "Received messages",
                channel=channel,
                operation=operation,
                count=len(messages),
                visibility_timeout=visibility_timeout,
            )
            await self._emit("MessagesReceived", float(len(messages)))
        await self._emit("ReceiveLatency", latency, "Milliseconds")
        return messages

    async def delete(
        self,
        channel: str,
        messages: Iterable[QueueMessage],
        *,
        cancel: Optional[asyncio.Event] = None,
    ) -> DeleteOutcome:
        """Delete previously received messages in batches of 10."""
        channel = _require_channel(channel)
        items = _require_messages(messages, channel)
        for message in items:
            if not message.has_receipt_handle:
                raise DeliveryHandleError(channel, message.id)

        queue_url = self.resolver.resolve(channel)
        outcome = DeleteOutcome()
        for batch in chunk(items, MAX_ENTRIES_PER_REQUEST):
            _check_cancelled(cancel, "delete", channel, completed=len(outcome.deleted))
            entries = [
                {"Id": str(index), "ReceiptHandle": message.receipt_handle}
                for index, message in enumerate(batch)
            ]

            try:
                response = await self.transport.delete_message_batch(queue_url, entries)
            except TRANSPORT_ERRORS as e:
                self.logger.error(
                    "Failed to delete message batch",
                    channel=channel,
                    batch_size=len(batch),
                    already_deleted=len(outcome.deleted),
                    error=str(e),
                )
                raise translate_error(e, "delete", channel)

            batch_failed = _failed_entries(response, batch)
            outcome = outcome.add_batch(
                [message for index, message in enumerate(batch) if index not in batch_failed],
                [batch_failed[i] for i in sorted(batch_failed)],
            )

        await self._emit("MessagesDeleted", float(len(outcome.deleted)))

        if outcome.failed:
            self.logger.warning(
                "Some messages could not be deleted",
                channel=channel,
                failed=[f.to_dict() for f in outcome.failed],
                deleted=len(outcome.deleted),
            )
            raise PartialDeleteError(channel, outcome)

        self.logger.info("Messages deleted", channel=channel, count=len(outcome.deleted), batches=outcome.batches)
        return outcome
