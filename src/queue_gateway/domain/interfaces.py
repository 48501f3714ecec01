"""Domain interfaces (Protocols)."""

from typing import Protocol, Optional, Dict, Any, List


class QueueTransport(Protocol):
    """Remote queue transport interface."""

    async def create_queue(self, queue_name: str, attributes: Optional[Dict[str, str]] = None) -> str:
        """Create a queue and return its URL."""
        ...

    async def list_queues(self, prefix: Optional[str] = None) -> List[str]:
        """List all queue URLs."""
        ...

    async def delete_queue(self, queue_url: str) -> None:
        """Delete a queue."""
        ...

    async def get_queue_attributes(self, queue_url: str, attribute_names: List[str]) -> Dict[str, str]:
        """Get queue attributes."""
        ...

    async def send_message_batch(self, queue_url: str, entries: List[Dict[str, Any]]) -> Dict[str, Any]:
        """Send up to 10 messages."""
        ...

    async def receive_messages(
        self,
        queue_url: str,
        max_messages: int,
        wait_time_seconds: int,
        visibility_timeout: int,
    ) -> List[Dict[str, Any]]:
        """Receive up to 10 messages."""
        ...

    async def delete_message_batch(self, queue_url: str, entries: List[Dict[str, Any]]) -> Dict[str, Any]:
        """Delete up to 10 messages."""
        ...

    async def close(self) -> None:
        """Release the underlying client."""
        ...


class MetricsClient(Protocol):
    """CloudWatch Metrics client interface."""

    def put_metric(self, metric_name: str, value: float, unit: str = "Count") -> None:
        """Put a custom metric."""
        ...


class Logger(Protocol):
    """Logger interface."""

    def info(self, message: str, **kwargs: Any) -> None:
        """Log info message."""
        ...

    def error(self, message: str, **kwargs: Any) -> None:
        """Log error message."""
        ...

    def warning(self, message: str, **kwargs: Any) -> None:
        """Log warning message."""
        ...
