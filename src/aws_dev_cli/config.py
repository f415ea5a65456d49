"""Configuration management for the dev CLI."""

from __future__ import annotations

import logging
import os
from functools import lru_cache

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

_config_logger = logging.getLogger(__name__)


class LoggingSettings(BaseModel):
    level: str = Field(default="INFO", description="Python logging level name")
    file: str | None = Field(default=None, description="Optional log file path")


class ExecutionSettings(BaseModel):
    # Matches botocore's own connect/read timeout default.
    sdk_timeout_seconds: int = Field(default=60, ge=1, le=300)


class AWSSettings(BaseModel):
    profile: str | None = Field(default=None)
    default_region: str = Field(
        default="us-west-2",
        description="Region used when an account's region is not recognized.",
    )
    role_session_name: str = Field(default="dev-cli", min_length=2, max_length=64)
    credential_duration_seconds: int = Field(
        default=1800,
        ge=900,
        le=43200,
        description="Validity window of assumed-role credentials.",
    )

    @field_validator("role_session_name")
    @classmethod
    def _validate_role_session_name(cls, value: str) -> str:
        allowed = set("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789+=,.@-_")
        if not set(value) <= allowed:
            raise ValueError(f"invalid characters in role session name: {value!r}")
        return value


class OutputSettings(BaseModel):
    alarms_path: str = Field(default="describe-alarms.json")
    image_dir: str = Field(default=".")


class Settings(BaseModel):
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    execution: ExecutionSettings = Field(default_factory=ExecutionSettings)
    aws: AWSSettings = Field(default_factory=AWSSettings)
    output: OutputSettings = Field(default_factory=OutputSettings)


ENV_KEYS = {
    "log_level": "LOG_LEVEL",
    "log_file": "LOG_FILE",
    "sdk_timeout": "SDK_TIMEOUT_SECONDS",
    "aws_profile": "AWS_PROFILE",
    "default_region": "DEV_CLI_DEFAULT_REGION",
    "role_session_name": "DEV_CLI_ROLE_SESSION_NAME",
    "credential_duration": "DEV_CLI_CREDENTIAL_DURATION_SECONDS",
    "alarms_path": "DEV_CLI_ALARMS_OUTPUT_PATH",
    "image_dir": "DEV_CLI_IMAGE_OUTPUT_DIR",
}


def _env_int(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError:
        _config_logger.warning(
            "Invalid integer value for %s: %r, using default %d", key, value, default
        )
        return default


def load_settings() -> Settings:
    """Load configuration and cache the result."""

    return _load_settings_cached()


@lru_cache(maxsize=1)
def _load_settings_cached() -> Settings:
    load_dotenv(dotenv_path=find_dotenv(usecwd=True))

    settings_data: dict[str, object] = {
        "logging": {
            "level": os.getenv(ENV_KEYS["log_level"], LoggingSettings().level),
            "file": os.getenv(ENV_KEYS["log_file"]) or None,
        },
        "execution": {
            "sdk_timeout_seconds": _env_int(
                ENV_KEYS["sdk_timeout"],
                ExecutionSettings().sdk_timeout_seconds,
            ),
        },
        "aws": {
            "profile": os.getenv(ENV_KEYS["aws_profile"]) or None,
            "default_region": os.getenv(
                ENV_KEYS["default_region"], AWSSettings().default_region
            ),
            "role_session_name": os.getenv(
                ENV_KEYS["role_session_name"], AWSSettings().role_session_name
            ),
            "credential_duration_seconds": _env_int(
                ENV_KEYS["credential_duration"],
                AWSSettings().credential_duration_seconds,
            ),
        },
        "output": {
            "alarms_path": os.getenv(ENV_KEYS["alarms_path"], OutputSettings().alarms_path),
            "image_dir": os.getenv(ENV_KEYS["image_dir"], OutputSettings().image_dir),
        },
    }

    try:
        return Settings.model_validate(settings_data)
    except ValidationError as exc:
        raise RuntimeError(f"Invalid configuration: {exc}") from exc
