"""Messenger wiring from configuration."""

from typing import Optional

from ..domain.interfaces import Logger
from ..infra.config import GatewayConfig
from ..infra.logger import setup_logging, StructLogger
from ..infra.metrics import CloudWatchMetricsClient
from ..infra.sqs import SQSTransport
from ..infra.xray import setup_xray
from .messenger import SQSMessenger


def create_messenger(
    config: Optional[GatewayConfig] = None,
    logger: Optional[Logger] = None,
    configure_logging: bool = False,
) -> SQSMessenger:
    """Build an SQSMessenger with its SQS transport and optional metrics."""
    config = config or GatewayConfig.from_env()

    if configure_logging:
        setup_xray("queue-gateway")
        configured = setup_logging(config.log_level, region=config.region)
        logger = logger or configured
    logger = logger or StructLogger(region=config.region)

    transport = SQSTransport(
        region=config.region,
        endpoint_url=config.endpoint_url,
        access_key_id=config.access_key_id,
        secret_access_key=config.secret_access_key,
    )

    metrics_client = None
    if config.metrics_namespace:
        metrics_client = CloudWatchMetricsClient(
            namespace=config.metrics_namespace,
            region=config.region,
            endpoint_url=config.endpoint_url,
            logger=logger,
        )

    logger.info(
        "Messenger configured",
        service_url=config.service_url,
        region=config.region,
        wait_time_seconds=config.wait_time_seconds,
        metrics=metrics_client is not None,
    )

    return SQSMessenger(
        transport=transport,
        service_url=config.service_url,
        wait_time_seconds=config.wait_time_seconds,
        kms_key_id=config.kms_key_id,
        metrics_client=metrics_client,
        logger=logger,
    )
