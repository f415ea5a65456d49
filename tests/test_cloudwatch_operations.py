"""Tests for CloudWatch operations against fake clients."""

from __future__ import annotations

from typing import Any

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from aws_dev_cli.cloudwatch import (
    CloudWatchServiceError,
    MetricDescriptor,
    describe_alarms,
    get_metric_widget_image,
    list_metrics,
)


class _FakePaginator:
    def __init__(self, pages: list[dict[str, Any]], error: Exception | None = None) -> None:
        self._pages = pages
        self._error = error
        self.kwargs: dict[str, Any] | None = None

    def paginate(self, **kwargs: Any):
        self.kwargs = kwargs
        for page in self._pages:
            yield page
        if self._error is not None:
            raise self._error


class _FakeCloudWatchClient:
    def __init__(
        self,
        image_response: dict[str, Any] | None = None,
        paginators: dict[str, _FakePaginator] | None = None,
        error: Exception | None = None,
    ) -> None:
        self._image_response = image_response or {}
        self._paginators = paginators or {}
        self._error = error
        self.image_calls: list[dict[str, Any]] = []

    def get_metric_widget_image(self, **kwargs: Any) -> dict[str, Any]:
        self.image_calls.append(kwargs)
        if self._error is not None:
            raise self._error
        return self._image_response

    def get_paginator(self, name: str) -> _FakePaginator:
        return self._paginators[name]


def _client_error(code: str, operation: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": f"{code} message"}}, operation)


@pytest.mark.asyncio
async def test_get_metric_widget_image_requests_png() -> None:
    client = _FakeCloudWatchClient(image_response={"MetricWidgetImage": b"\x89PNG"})

    image = await get_metric_widget_image(client, '{"metrics": []}')

    assert image == b"\x89PNG"
    assert client.image_calls == [{"MetricWidget": '{"metrics": []}', "OutputFormat": "png"}]


@pytest.mark.asyncio
@pytest.mark.parametrize("response", [{}, {"MetricWidgetImage": b""}])
async def test_get_metric_widget_image_returns_none_for_empty_payload(
    response: dict[str, Any],
) -> None:
    assert await get_metric_widget_image(_FakeCloudWatchClient(image_response=response), "{}") is None


@pytest.mark.asyncio
async def test_get_metric_widget_image_wraps_service_errors() -> None:
    client = _FakeCloudWatchClient(
        error=_client_error("InvalidParameterInput", "GetMetricWidgetImage")
    )

    with pytest.raises(CloudWatchServiceError) as exc_info:
        await get_metric_widget_image(client, "{}")

    assert exc_info.value.code == "invalid_parameter"
    assert exc_info.value.operation == "GetMetricWidgetImage"


@pytest.mark.asyncio
async def test_describe_alarms_follows_every_page() -> None:
    paginator = _FakePaginator(
        [
            {"MetricAlarms": [{"AlarmName": "a"}, {"AlarmName": "b"}], "NextToken": "t"},
            {"MetricAlarms": [{"AlarmName": "c"}]},
            {"CompositeAlarms": []},
        ]
    )
    client = _FakeCloudWatchClient(paginators={"describe_alarms": paginator})

    alarms = await describe_alarms(client)

    assert [alarm["AlarmName"] for alarm in alarms] == ["a", "b", "c"]
    assert paginator.kwargs == {"AlarmTypes": ["MetricAlarm"]}


@pytest.mark.asyncio
async def test_describe_alarms_wraps_errors_mid_pagination() -> None:
    paginator = _FakePaginator(
        [{"MetricAlarms": [{"AlarmName": "a"}]}],
        error=_client_error("AccessDenied", "DescribeAlarms"),
    )
    client = _FakeCloudWatchClient(paginators={"describe_alarms": paginator})

    with pytest.raises(CloudWatchServiceError) as exc_info:
        await describe_alarms(client)

    assert exc_info.value.code == "access_denied"
    assert exc_info.value.operation == "DescribeAlarms"


@pytest.mark.asyncio
async def test_describe_alarms_wraps_transport_errors() -> None:
    paginator = _FakePaginator(
        [], error=EndpointConnectionError(endpoint_url="https://monitoring.us-east-1.amazonaws.com")
    )
    client = _FakeCloudWatchClient(paginators={"describe_alarms": paginator})

    with pytest.raises(CloudWatchServiceError) as exc_info:
        await describe_alarms(client)

    assert exc_info.value.code == "sdk_error"


@pytest.mark.asyncio
async def test_list_metrics_returns_descriptors() -> None:
    paginator = _FakePaginator(
        [
            {
                "Metrics": [
                    {
                        "Namespace": "AWS/SQS",
                        "MetricName": "NumberOfMessagesSent",
                        "Dimensions": [{"Name": "QueueName", "Value": "jobs"}],
                    }
                ]
            },
            {"Metrics": [{"Namespace": "AWS/SQS", "MetricName": "ApproximateAgeOfOldestMessage"}]},
        ]
    )
    client = _FakeCloudWatchClient(paginators={"list_metrics": paginator})

    metrics = await list_metrics(client, namespace="AWS/SQS")

    assert metrics == [
        MetricDescriptor("AWS/SQS", "NumberOfMessagesSent", (("QueueName", "jobs"),)),
        MetricDescriptor("AWS/SQS", "ApproximateAgeOfOldestMessage"),
    ]
    assert paginator.kwargs == {"Namespace": "AWS/SQS"}


@pytest.mark.asyncio
async def test_list_metrics_without_namespace_sends_no_filter() -> None:
    paginator = _FakePaginator([{"Metrics": []}])
    client = _FakeCloudWatchClient(paginators={"list_metrics": paginator})

    assert await list_metrics(client) == []
    assert paginator.kwargs == {}
