from __future__ import annotations

import re
from pathlib import Path

from aws_dev_cli.artifacts import MetricImageArtifact, image_file_name


def test_image_file_name_uses_current_timestamp() -> None:
    name = image_file_name("Foo", "metric", "us-east-1", "4320H")

    assert re.fullmatch(r"Foo-metric-us-east-1-4320H-\d+\.png", name)


def test_image_file_name_with_fixed_timestamp() -> None:
    assert (
        image_file_name("Foo", "retries", "eu-west-1", "720H", timestamp=1700000000)
        == "Foo-retries-eu-west-1-720H-1700000000.png"
    )


def test_artifact_write_creates_directory(tmp_path: Path) -> None:
    artifact = MetricImageArtifact(name="Foo-metric.png", content=b"\x89PNG")

    path = artifact.write(tmp_path / "images")

    assert path == tmp_path / "images" / "Foo-metric.png"
    assert path.read_bytes() == b"\x89PNG"
    assert "size=4" in repr(artifact)
