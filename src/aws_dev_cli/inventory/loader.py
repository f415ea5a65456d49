"""Account inventory loader for accounts.toml."""

from __future__ import annotations

import logging
from pathlib import Path

import tomli
from pydantic import ValidationError

from aws_dev_cli.inventory.models import AccountInventory, AccountRecord, AccountsConfig

logger = logging.getLogger(__name__)


class InventoryError(Exception):
    """Base exception for inventory problems."""


class InventoryConfigError(InventoryError):
    """Raised when an inventory file exists but is not a valid inventory."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid accounts config '{path}': {reason}")


class InventoryNotFoundError(InventoryError):
    """Raised when accounts are requested but no inventory was loaded."""


def parse_inventory(text: str, source: str = "<string>") -> AccountInventory:
    try:
        data = tomli.loads(text)
    except tomli.TOMLDecodeError as exc:
        raise InventoryConfigError(source, f"unable to parse as toml: {exc}") from exc

    if "account" not in data:
        raise InventoryConfigError(source, "missing [[account]] tables")

    try:
        config = AccountsConfig.model_validate(data)
    except ValidationError as exc:
        raise InventoryConfigError(source, str(exc)) from exc
    return config.account


def load_inventory(path: str | Path) -> AccountInventory | None:
    """Read and parse an inventory file.

    Returns None when the file cannot be read. A file that is readable but
    malformed raises InventoryConfigError, since a broken inventory cannot be
    partially trusted.
    """
    inventory_path = Path(path)
    try:
        text = inventory_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Unable to read accounts config %s: %s", inventory_path, exc)
        return None

    inventory = parse_inventory(text, source=str(inventory_path))
    for record in inventory:
        logger.debug("Loaded account: %r", record)
    return inventory


def filter_accounts(
    pattern: str | None,
    inventory: AccountInventory | None,
) -> list[AccountRecord]:
    """Keep accounts whose namespace contains ``pattern`` (case-sensitive)."""
    if inventory is None:
        raise InventoryNotFoundError("expected accounts to filter")

    if pattern is None:
        return list(inventory)

    filtered = [record for record in inventory if pattern in record.namespace]
    logger.info(
        "Filtered accounts: %d of %d match %r", len(filtered), len(inventory), pattern
    )
    return filtered
