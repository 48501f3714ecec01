"""CloudWatch Metrics client implementation."""

import os
import boto3
from typing import Optional
from botocore.exceptions import BotoCoreError, ClientError

from ..domain.interfaces import Logger, MetricsClient
from .xray import xray_capture


class CloudWatchMetricsClient(MetricsClient):
    """CloudWatch Metrics client implementation."""

    def __init__(
        self,
        namespace: str = "QueueGateway",
        region: str = "us-east-1",
        endpoint_url: Optional[str] = None,
        logger: Optional[Logger] = None,
    ):
        """Initialize CloudWatch client."""
        self.cloudwatch = boto3.client(
            "cloudwatch",
            region_name=region,
            endpoint_url=endpoint_url or os.getenv("AWS_ENDPOINT_URL"),
        )
        self.namespace = namespace
        self.logger = logger

    @xray_capture("cloudwatch_put_metric")
    def put_metric(self, metric_name: str, value: float, unit: str = "Count") -> None:
        """Put a custom metric."""
        try:
            self.cloudwatch.put_metric_data(
                Namespace=self.namespace,
                MetricData=[
                    {
                        "MetricName": metric_name,
                        "Value": value,
                        "Unit": unit,
                    }
                ],
            )
        except (ClientError, BotoCoreError) as e:
            # Metrics never fail the queue operation
            if self.logger is not None:
                self.logger.warning("Failed to put metric", metric=metric_name, error=str(e))
