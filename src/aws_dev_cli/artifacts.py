"""Metric image artifacts written by ``dev images``."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from aws_dev_cli.utils.time import unix_timestamp

IMAGE_EXTENSION = ".png"


def image_file_name(
    namespace: str,
    title: str,
    region: str,
    start: str,
    timestamp: int | None = None,
) -> str:
    """``{namespace}-{title}-{region}-{start}-{unix_timestamp}.png``"""
    if timestamp is None:
        timestamp = unix_timestamp()
    return f"{namespace}-{title}-{region}-{start}-{timestamp}{IMAGE_EXTENSION}"


@dataclass(frozen=True)
class MetricImageArtifact:
    name: str
    content: bytes

    def __repr__(self) -> str:
        return f"MetricImageArtifact(name={self.name!r}, size={len(self.content)})"

    def write(self, directory: str | Path) -> Path:
        output_dir = Path(directory)
        output_dir.mkdir(parents=True, exist_ok=True)
        path = output_dir / self.name
        path.write_bytes(self.content)
        return path
