"""Static region lookup.

Inventory files carry free-form region strings. Anything that is not one of
the regions the fleet runs in resolves to the default region instead of
failing, so a typo in one inventory entry does not stop a multi-account run.
"""

from __future__ import annotations

from enum import Enum

DEFAULT_REGION = "us-west-2"


class AirportCode(str, Enum):
    """3-letter airport code closest to a data center region."""

    IAD = "IAD"
    PDX = "PDX"
    DUB = "DUB"

    @property
    def region_name(self) -> str:
        return _AIRPORT_REGIONS[self]


_AIRPORT_REGIONS: dict[AirportCode, str] = {
    AirportCode.IAD: "us-east-1",
    AirportCode.PDX: "us-west-2",
    AirportCode.DUB: "eu-west-1",
}

KNOWN_REGIONS: frozenset[str] = frozenset(_AIRPORT_REGIONS.values())


def resolve_region(value: str, default: str = DEFAULT_REGION) -> str:
    """Return ``value`` if it is a known region, otherwise ``default``."""
    if value in KNOWN_REGIONS:
        return value
    return default
