"""Alarm records persisted by ``dev alarms``."""

from __future__ import annotations

import json
import logging
from enum import Enum
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

logger = logging.getLogger(__name__)


class ComparisonOperator(str, Enum):
    GREATER_THAN_OR_EQUAL_TO_THRESHOLD = "GreaterThanOrEqualToThreshold"
    GREATER_THAN_THRESHOLD = "GreaterThanThreshold"
    LESS_THAN_THRESHOLD = "LessThanThreshold"
    LESS_THAN_OR_EQUAL_TO_THRESHOLD = "LessThanOrEqualToThreshold"
    UNKNOWN = "Unknown"

    @classmethod
    def from_api(cls, value: str | None) -> ComparisonOperator:
        # Anomaly detection operators and missing values collapse to Unknown.
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN


class Statistic(str, Enum):
    AVERAGE = "Average"
    MAXIMUM = "Maximum"
    MINIMUM = "Minimum"
    SAMPLE_COUNT = "SampleCount"
    SUM = "Sum"
    UNKNOWN = "Unknown"

    @classmethod
    def from_api(cls, value: str | None) -> Statistic | Literal[""]:
        # Extended statistic and metric math alarms have no Statistic.
        if value is None:
            return ""
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN


class AlarmRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    program_name: str
    alarm_name: str = ""
    alarm_arn: str = ""
    alarm_description: str = ""
    dimensions: list[str] = Field(default_factory=list)
    actions_enabled: bool = False
    period: int = 0
    threshold: float = 0.0
    comparison_operator: ComparisonOperator = ComparisonOperator.UNKNOWN
    treat_missing_data: str = ""
    statistic: Statistic | Literal[""] = ""

    @classmethod
    def from_metric_alarm(cls, program_name: str, alarm: dict[str, Any]) -> AlarmRecord:
        """Map one ``MetricAlarms`` entry from DescribeAlarms."""
        return cls(
            program_name=program_name,
            alarm_name=alarm.get("AlarmName") or "",
            alarm_arn=alarm.get("AlarmArn") or "",
            alarm_description=alarm.get("AlarmDescription") or "",
            dimensions=[
                dimension.get("Name", "") for dimension in alarm.get("Dimensions") or []
            ],
            actions_enabled=bool(alarm.get("ActionsEnabled", False)),
            period=int(alarm.get("Period") or 0),
            threshold=float(alarm.get("Threshold") or 0.0),
            comparison_operator=ComparisonOperator.from_api(alarm.get("ComparisonOperator")),
            treat_missing_data=alarm.get("TreatMissingData") or "",
            statistic=Statistic.from_api(alarm.get("Statistic")),
        )


_RECORDS_ADAPTER = TypeAdapter(list[AlarmRecord])


def dump_alarm_records(records: list[AlarmRecord]) -> str:
    return json.dumps([record.model_dump(mode="json") for record in records])


def write_alarm_records(path: str | Path, records: list[AlarmRecord]) -> Path:
    """Write all records in one go, replacing any previous report."""
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(dump_alarm_records(records), encoding="utf-8")
    logger.info("Saved %d alarms to %s", len(records), output_path)
    return output_path


def load_alarm_records(path: str | Path) -> list[AlarmRecord]:
    return _RECORDS_ADAPTER.validate_json(Path(path).read_bytes())
