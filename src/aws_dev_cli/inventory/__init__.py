"""Account inventory loading and filtering."""

from aws_dev_cli.inventory.loader import (
    InventoryConfigError,
    InventoryError,
    InventoryNotFoundError,
    filter_accounts,
    load_inventory,
    parse_inventory,
)
from aws_dev_cli.inventory.models import AccountInventory, AccountRecord, AccountsConfig

__all__ = [
    "AccountInventory",
    "AccountRecord",
    "AccountsConfig",
    "InventoryConfigError",
    "InventoryError",
    "InventoryNotFoundError",
    "filter_accounts",
    "load_inventory",
    "parse_inventory",
]
