"""CloudWatch API calls used by the CLI.

boto3 clients are synchronous, so every call runs in a worker thread and is
awaited. Nothing here retries beyond what botocore itself does.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

logger = logging.getLogger(__name__)

_ERROR_CODES = {
    "AccessDenied": "access_denied",
    "AccessDeniedException": "access_denied",
    "InvalidParameterInput": "invalid_parameter",
    "InvalidParameterValue": "invalid_parameter",
    "InvalidNextToken": "invalid_next_token",
    "LimitExceeded": "limit_exceeded",
    "Throttling": "throttled",
    "ExpiredToken": "token_expired",
}


class CloudWatchServiceError(Exception):
    """Raised when a CloudWatch call fails."""

    def __init__(self, message: str, code: str, operation: str) -> None:
        super().__init__(message)
        self.code = code
        self.operation = operation


@dataclass(frozen=True)
class MetricDescriptor:
    namespace: str
    metric_name: str
    dimensions: tuple[tuple[str, str], ...] = field(default=())

    @classmethod
    def from_api(cls, metric: dict[str, Any]) -> MetricDescriptor:
        return cls(
            namespace=metric.get("Namespace", ""),
            metric_name=metric.get("MetricName", ""),
            dimensions=tuple(
                (dimension.get("Name", ""), dimension.get("Value", ""))
                for dimension in metric.get("Dimensions") or []
            ),
        )


def _service_error(operation: str, exc: Exception) -> CloudWatchServiceError:
    if isinstance(exc, ClientError):
        error_code = exc.response.get("Error", {}).get("Code", "Unknown")
        error_message = exc.response.get("Error", {}).get("Message", str(exc))
        logger.warning("CloudWatch %s failed: %s: %s", operation, error_code, error_message)
        return CloudWatchServiceError(
            error_message,
            code=_ERROR_CODES.get(error_code, "service_error"),
            operation=operation,
        )
    logger.warning("CloudWatch %s failed: %s", operation, exc)
    return CloudWatchServiceError(str(exc), code="sdk_error", operation=operation)


def _get_metric_widget_image_sync(client: Any, widget_json: str) -> bytes | None:
    try:
        response = client.get_metric_widget_image(MetricWidget=widget_json, OutputFormat="png")
    except (ClientError, BotoCoreError) as exc:
        raise _service_error("GetMetricWidgetImage", exc) from exc

    image = response.get("MetricWidgetImage")
    if not image:
        logger.warning("GetMetricWidgetImage returned an empty image")
        return None
    return image


def _paginate(client: Any, operation: str, method: str, result_key: str, **kwargs: Any) -> list:
    items: list = []
    try:
        paginator = client.get_paginator(method)
        for page in paginator.paginate(**kwargs):
            items.extend(page.get(result_key) or [])
    except (ClientError, BotoCoreError) as exc:
        raise _service_error(operation, exc) from exc
    return items


def _describe_alarms_sync(client: Any) -> list[dict[str, Any]]:
    alarms = _paginate(
        client,
        "DescribeAlarms",
        "describe_alarms",
        "MetricAlarms",
        AlarmTypes=["MetricAlarm"],
    )
    logger.info("Described %d metric alarms", len(alarms))
    return alarms


def _list_metrics_sync(client: Any, namespace: str | None) -> list[MetricDescriptor]:
    kwargs: dict[str, Any] = {}
    if namespace:
        kwargs["Namespace"] = namespace
    metrics = _paginate(client, "ListMetrics", "list_metrics", "Metrics", **kwargs)
    return [MetricDescriptor.from_api(metric) for metric in metrics]


async def get_metric_widget_image(client: Any, widget_json: str) -> bytes | None:
    """Render ``widget_json`` server-side as a PNG.

    Returns None when CloudWatch answers with an empty payload.
    """
    return await asyncio.to_thread(_get_metric_widget_image_sync, client, widget_json)


async def describe_alarms(client: Any) -> list[dict[str, Any]]:
    """Return every metric alarm in the client's account and region."""
    return await asyncio.to_thread(_describe_alarms_sync, client)


async def list_metrics(client: Any, namespace: str | None = None) -> list[MetricDescriptor]:
    return await asyncio.to_thread(_list_metrics_sync, client, namespace)
