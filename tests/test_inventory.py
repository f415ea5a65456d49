"""Tests for the accounts.toml loader and filter."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from aws_dev_cli.inventory import (
    AccountRecord,
    AccountsConfig,
    InventoryConfigError,
    InventoryNotFoundError,
    filter_accounts,
    load_inventory,
    parse_inventory,
)

ACCOUNTS_TOML = """
[[account]]
namespace = "SomeDataProcessingProgram"
account_id = "111111111111"
region = "us-east-1"
role_arn = "arn:aws:iam::111111111111:role/observer"

[[account]]
namespace = "ItemDPP"
region = "eu-west-1"
role_arn = "arn:aws:iam::222222222222:role/observer"

[[account]]
namespace = "ItemDPPCanary"
region = "us-west-2"
role_arn = "arn:aws:iam::333333333333:role/observer"
"""


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "accounts.toml"
    path.write_text(text, encoding="utf-8")
    return path


def test_load_inventory_parses_accounts_in_order(tmp_path: Path) -> None:
    inventory = load_inventory(_write(tmp_path, ACCOUNTS_TOML))

    assert inventory is not None
    assert [record.namespace for record in inventory] == [
        "SomeDataProcessingProgram",
        "ItemDPP",
        "ItemDPPCanary",
    ]
    assert inventory[0] == AccountRecord(
        namespace="SomeDataProcessingProgram",
        region="us-east-1",
        role_arn="arn:aws:iam::111111111111:role/observer",
    )


def test_account_records_are_immutable(tmp_path: Path) -> None:
    inventory = load_inventory(_write(tmp_path, ACCOUNTS_TOML))
    assert inventory is not None

    with pytest.raises(Exception):
        inventory[0].namespace = "Other"  # type: ignore[misc]


def test_load_inventory_returns_none_for_missing_file(tmp_path: Path) -> None:
    assert load_inventory(tmp_path / "missing.toml") is None


def test_load_inventory_returns_none_for_directory(tmp_path: Path) -> None:
    assert load_inventory(tmp_path) is None


def test_load_inventory_rejects_invalid_toml(tmp_path: Path) -> None:
    path = _write(tmp_path, "[[account]\nnamespace = ")

    with pytest.raises(InventoryConfigError, match="unable to parse as toml"):
        load_inventory(path)


@pytest.mark.parametrize(
    "text",
    [
        "",
        'title = "accounts"',
        '[[account]]\nnamespace = "A"\nregion = "us-east-1"',
        '[[account]]\nnamespace = 1\nregion = "us-east-1"\nrole_arn = "arn"',
        '[account]\nnamespace = "A"\nregion = "us-east-1"\nrole_arn = "arn"',
    ],
)
def test_parse_inventory_rejects_wrong_schema(text: str) -> None:
    with pytest.raises(InventoryConfigError) as exc_info:
        parse_inventory(text, source="accounts.toml")

    assert exc_info.value.path == "accounts.toml"


def test_parse_inventory_accepts_empty_account_list() -> None:
    assert parse_inventory("account = []") == ()


def test_accounts_config_requires_account_list() -> None:
    with pytest.raises(ValidationError):
        AccountsConfig.model_validate({"title": "accounts"})


def test_filter_without_pattern_returns_everything_in_order() -> None:
    inventory = parse_inventory(ACCOUNTS_TOML)

    assert filter_accounts(None, inventory) == list(inventory)


def test_filter_keeps_substring_matches_in_order() -> None:
    inventory = parse_inventory(ACCOUNTS_TOML)

    filtered = filter_accounts("DPP", inventory)

    assert [record.namespace for record in filtered] == ["ItemDPP", "ItemDPPCanary"]
    assert all("DPP" in record.namespace for record in filtered)


def test_filter_is_case_sensitive() -> None:
    inventory = parse_inventory(ACCOUNTS_TOML)

    assert filter_accounts("itemdpp", inventory) == []


def test_filter_with_no_match_is_empty() -> None:
    assert filter_accounts("Nothing", parse_inventory(ACCOUNTS_TOML)) == []


def test_filter_requires_an_inventory() -> None:
    with pytest.raises(InventoryNotFoundError):
        filter_accounts(None, None)
    with pytest.raises(InventoryNotFoundError):
        filter_accounts("A", None)
