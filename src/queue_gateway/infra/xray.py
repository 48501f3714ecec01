"""X-Ray instrumentation setup."""

import os
from functools import wraps
from aws_xray_sdk.core import xray_recorder
from aws_xray_sdk.core import patch as xray_patch


def is_tracing_enabled() -> bool:
    """Tracing is opt-in and always off against a local endpoint."""
    if os.getenv("AWS_ENDPOINT_URL"):
        return False
    return os.getenv("XRAY_ENABLED", "false").lower() == "true"


def setup_xray(service_name: str = "queue-gateway"):
    """Set up X-Ray tracing."""
    if not is_tracing_enabled():
        # Local development or tracing not requested
        xray_recorder.configure(service=service_name, context_missing="LOG_ERROR")
        return

    xray_recorder.configure(
        service=service_name,
        context_missing="LOG_ERROR",
        sampling_rules={"version": 1, "default": {"fixed_target": 1, "rate": 0.1}},
    )

    # Patch boto3 for X-Ray tracing
    xray_patch(["boto3"])


def xray_capture(name):
    """Conditional X-Ray capture decorator - no-op unless tracing is enabled."""
    def decorator(func):
        captured = xray_recorder.capture(name)(func)

        @wraps(func)
        def wrapper(*args, **kwargs):
            if is_tracing_enabled():
                return captured(*args, **kwargs)
            return func(*args, **kwargs)
        return wrapper
    return decorator
