"""Gateway configuration."""

import os
from typing import Optional

from ..domain.errors import InvalidArgumentError

# SQS service limits
MAX_WAIT_TIME_SECONDS = 20
MAX_VISIBILITY_SECONDS = 43_200  # 12h hard SQS limit


def clamp_wait_time(seconds: int) -> int:
    """Long-poll wait is always bounded by the service maximum."""
    return max(0, min(int(seconds), MAX_WAIT_TIME_SECONDS))


class GatewayConfig:
    """Settings for one messenger instance."""

    def __init__(
        self,
        service_url: str,
        region: str = "us-east-1",
        endpoint_url: Optional[str] = None,
        wait_time_seconds: int = MAX_WAIT_TIME_SECONDS,
        kms_key_id: Optional[str] = None,
        access_key_id: Optional[str] = None,
        secret_access_key: Optional[str] = None,
        metrics_namespace: Optional[str] = None,
        log_level: str = "INFO",
    ):
        if not service_url:
            raise InvalidArgumentError("service_url is required, e.g. https://sqs.us-east-1.amazonaws.com/123456789012/")
        if bool(access_key_id) != bool(secret_access_key):
            raise InvalidArgumentError("access_key_id and secret_access_key must be given together")

        # urljoin replaces the last path segment unless the base ends with "/"
        self.service_url = service_url if service_url.endswith("/") else service_url + "/"
        self.region = region
        self.endpoint_url = endpoint_url
        self.wait_time_seconds = clamp_wait_time(wait_time_seconds)
        self.kms_key_id = kms_key_id
        self.access_key_id = access_key_id
        self.secret_access_key = secret_access_key
        self.metrics_namespace = metrics_namespace
        self.log_level = log_level

    @classmethod
    def from_env(cls) -> "GatewayConfig":
        """Build configuration from environment variables."""
        wait_raw = os.getenv("SQS_WAIT_TIME_SECONDS", str(MAX_WAIT_TIME_SECONDS))
        try:
            wait_time_seconds = int(wait_raw)
        except ValueError as e:
            raise InvalidArgumentError(f"SQS_WAIT_TIME_SECONDS must be an integer, got {wait_raw!r}") from e

        return cls(
            service_url=os.getenv("SQS_SERVICE_URL", ""),
            region=os.getenv("AWS_REGION", "us-east-1"),
            endpoint_url=os.getenv("AWS_ENDPOINT_URL") or None,
            wait_time_seconds=wait_time_seconds,
            kms_key_id=os.getenv("SQS_KMS_KEY_ID") or None,
            access_key_id=os.getenv("AWS_ACCESS_KEY_ID") or None,
            secret_access_key=os.getenv("AWS_SECRET_ACCESS_KEY") or None,
            metrics_namespace=os.getenv("METRICS_NAMESPACE") or None,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )
