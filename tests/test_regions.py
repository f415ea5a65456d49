from __future__ import annotations

import pytest

from aws_dev_cli.regions import DEFAULT_REGION, KNOWN_REGIONS, AirportCode, resolve_region


@pytest.mark.parametrize("region", sorted(KNOWN_REGIONS))
def test_known_regions_resolve_to_themselves(region: str) -> None:
    assert resolve_region(region) == region


@pytest.mark.parametrize("value", ["", "us-east-9", "US-EAST-1", " us-east-1", "IAD"])
def test_unknown_regions_fall_back_to_default(value: str) -> None:
    assert resolve_region(value) == DEFAULT_REGION == "us-west-2"


def test_custom_default_is_used_for_unknown_region() -> None:
    assert resolve_region("nowhere-1", default="eu-west-1") == "eu-west-1"
    assert resolve_region("us-east-1", default="eu-west-1") == "us-east-1"


def test_airport_codes_name_known_regions() -> None:
    assert AirportCode.IAD.region_name == "us-east-1"
    assert AirportCode.PDX.region_name == "us-west-2"
    assert AirportCode.DUB.region_name == "eu-west-1"
    assert {code.region_name for code in AirportCode} == KNOWN_REGIONS
