"""CloudWatch request/response operations."""

from aws_dev_cli.cloudwatch.operations import (
    CloudWatchServiceError,
    MetricDescriptor,
    describe_alarms,
    get_metric_widget_image,
    list_metrics,
)

__all__ = [
    "CloudWatchServiceError",
    "MetricDescriptor",
    "describe_alarms",
    "get_metric_widget_image",
    "list_metrics",
]
