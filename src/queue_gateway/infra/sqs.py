"""SQS transport implementation.

boto3 is blocking, so every call is pushed to a worker thread with
``asyncio.to_thread``; the awaiting coroutine is the suspension point.
Errors are not translated here: botocore ``ClientError``/``BotoCoreError``
propagate to the messenger, which owns the error taxonomy.
"""

import asyncio
import boto3
from typing import List, Dict, Any, Optional
from botocore.config import Config

from ..domain.interfaces import QueueTransport
from .xray import xray_capture


def create_sqs_client(
    region: str = "us-east-1",
    endpoint_url: Optional[str] = None,
    access_key_id: Optional[str] = None,
    secret_access_key: Optional[str] = None,
):
    """Create SQS client tuned for long-polling."""
    return boto3.client(
        "sqs",
        region_name=region,
        endpoint_url=endpoint_url,
        aws_access_key_id=access_key_id,
        aws_secret_access_key=secret_access_key,
        config=Config(
            retries={"max_attempts": 6, "mode": "standard"},
            read_timeout=70,     # > 20s long-poll
            connect_timeout=3,
        ),
    )


class SQSTransport(QueueTransport):
    """SQS transport implementation."""

    def __init__(self, sqs=None, region: str = "us-east-1", **client_kwargs: Any):
        """Initialize SQS transport around an existing or new boto3 client."""
        self.sqs = sqs if sqs is not None else create_sqs_client(region=region, **client_kwargs)

    @xray_capture("sqs_create_queue")
    def _create_queue(self, queue_name: str, attributes: Dict[str, str]) -> str:
        params: Dict[str, Any] = {"QueueName": queue_name}
        if attributes:
            params["Attributes"] = attributes
        return self.sqs.create_queue(**params)["QueueUrl"]

    async def create_queue(self, queue_name: str, attributes: Optional[Dict[str, str]] = None) -> str:
        """Create a queue and return its URL."""
        return await asyncio.to_thread(self._create_queue, queue_name, attributes or {})

    @xray_capture("sqs_list_queues")
    def _list_queues(self, prefix: Optional[str]) -> List[str]:
        params: Dict[str, Any] = {}
        if prefix:
            params["QueueNamePrefix"] = prefix
        urls: List[str] = []
        for page in self.sqs.get_paginator("list_queues").paginate(**params):
            urls.extend(page.get("QueueUrls", []))
        return urls

    async def list_queues(self, prefix: Optional[str] = None) -> List[str]:
        """List all queue URLs, following pagination."""
        return await asyncio.to_thread(self._list_queues, prefix)

    @xray_capture("sqs_delete_queue")
    def _delete_queue(self, queue_url: str) -> None:
        self.sqs.delete_queue(QueueUrl=queue_url)

    async def delete_queue(self, queue_url: str) -> None:
        """Delete a queue."""
        await asyncio.to_thread(self._delete_queue, queue_url)

    @xray_capture("sqs_get_queue_attributes")
    def _get_queue_attributes(self, queue_url: str, attribute_names: List[str]) -> Dict[str, str]:
        response = self.sqs.get_queue_attributes(QueueUrl=queue_url, AttributeNames=attribute_names)
        return response.get("Attributes", {})

    async def get_queue_attributes(self, queue_url: str, attribute_names: List[str]) -> Dict[str, str]:
        """Get queue attributes (for approximate queue depth)."""
        return await asyncio.to_thread(self._get_queue_attributes, queue_url, attribute_names)

    @xray_capture("sqs_send_message_batch")
    def _send_message_batch(self, queue_url: str, entries: List[Dict[str, Any]]) -> Dict[str, Any]:
        return self.sqs.send_message_batch(QueueUrl=queue_url, Entries=entries)

    async def send_message_batch(self, queue_url: str, entries: List[Dict[str, Any]]) -> Dict[str, Any]:
        """Send one batch of at most 10 entries."""
        return await asyncio.to_thread(self._send_message_batch, queue_url, entries)

    @xray_capture("sqs_receive_messages")
    def _receive_messages(
        self,
        queue_url: str,
        max_messages: int,
        wait_time_seconds: int,
        visibility_timeout: int,
    ) -> List[Dict[str, Any]]:
        response = self.sqs.receive_message(
            QueueUrl=queue_url,
            MaxNumberOfMessages=max_messages,
            WaitTimeSeconds=wait_time_seconds,
            VisibilityTimeout=visibility_timeout,
            AttributeNames=["All"],
            MessageAttributeNames=["All"],
        )
        return response.get("Messages", [])

    async def receive_messages(
        self,
        queue_url: str,
        max_messages: int,
        wait_time_seconds: int,
        visibility_timeout: int,
    ) -> List[Dict[str, Any]]:
        """Receive messages from SQS with long polling."""
        return await asyncio.to_thread(
            self._receive_messages,
            queue_url,
            max_messages,
            wait_time_seconds,
            visibility_timeout,
        )

    @xray_capture("sqs_delete_message_batch")
    def _delete_message_batch(self, queue_url: str, entries: List[Dict[str, Any]]) -> Dict[str, Any]:
        return self.sqs.delete_message_batch(QueueUrl=queue_url, Entries=entries)

    async def delete_message_batch(self, queue_url: str, entries: List[Dict[str, Any]]) -> Dict[str, Any]:
        """Delete one batch of at most 10 entries."""
        return await asyncio.to_thread(self._delete_message_batch, queue_url, entries)

    async def close(self) -> None:
        """Close the underlying HTTP connections."""
        await asyncio.to_thread(self.sqs.close)
