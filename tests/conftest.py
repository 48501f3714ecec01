"""Pytest configuration and fixtures."""

import os
import pytest
from unittest.mock import AsyncMock, Mock
from moto import mock_aws
import boto3

from queue_gateway.infra.sqs import SQSTransport
from queue_gateway.service.messenger import SQSMessenger

# Set test environment variables
os.environ["AWS_ACCESS_KEY_ID"] = "testing"
os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
os.environ["AWS_SECURITY_TOKEN"] = "testing"
os.environ["AWS_SESSION_TOKEN"] = "testing"
os.environ["AWS_DEFAULT_REGION"] = "us-east-1"
os.environ.pop("AWS_ENDPOINT_URL", None)

SERVICE_URL = "https://sqs.us-east-1.amazonaws.com/123456789012/"


@pytest.fixture
def mock_logger():
    """Mock logger."""
    logger = Mock()
    logger.info.return_value = None
    logger.error.return_value = None
    logger.warning.return_value = None
    return logger


@pytest.fixture
def mock_transport():
    """Mock queue transport that accepts every batch entry."""
    transport = AsyncMock()

    def accept_send(queue_url, entries):
        return {
            "Successful": [{"Id": e["Id"], "MessageId": f"mid-{e['MessageBody']}"} for e in entries],
            "Failed": [],
        }

    def accept_delete(queue_url, entries):
        return {"Successful": [{"Id": e["Id"]} for e in entries], "Failed": []}

    transport.send_message_batch.side_effect = accept_send
    transport.delete_message_batch.side_effect = accept_delete
    transport.receive_messages.return_value = []
    transport.list_queues.return_value = []
    transport.get_queue_attributes.return_value = {"ApproximateNumberOfMessages": "0"}
    return transport


@pytest.fixture
def messenger(mock_transport, mock_logger):
    """Create SQSMessenger instance over the mock transport."""
    return SQSMessenger(
        transport=mock_transport,
        service_url=SERVICE_URL,
        logger=mock_logger,
    )


@pytest.fixture
def sqs_client():
    """Create a mocked SQS client."""
    with mock_aws():
        yield boto3.client("sqs", region_name="us-east-1")


@pytest.fixture
def sqs_messenger(sqs_client, mock_logger):
    """Create SQSMessenger backed by moto, without long polling."""
    return SQSMessenger(
        transport=SQSTransport(sqs=sqs_client),
        service_url=SERVICE_URL,
        wait_time_seconds=0,
        logger=mock_logger,
    )
