"""
Configuration Loader (``cashbook_config.loader``).

Responsibility
--------------
Loads the YAML files of a configuration directory and parses them into
kernel value objects: ``AccountSpec`` for the default chart and
``CategoryRuleTable`` for categorization.  Runtime callers use
``cashbook_config.get_active_config()`` instead of this module.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing required keys  -> ``KeyError`` propagates.
* Unknown account type or transaction type  -> ``ValueError``.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

from cashbook_kernel.domain.categorization import (
    CategoryRule,
    CategoryRuleTable,
    TypeRules,
)
from cashbook_kernel.domain.dtos import AccountSpec, TransactionType

CHART_FILE = "chart_of_accounts.yaml"
CATEGORIZATION_FILE = "categorization.yaml"
CLASSIFICATION_FILE = "classification.yaml"


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def parse_chart(data: dict[str, Any]) -> tuple[AccountSpec, ...]:
    """Parse the ``accounts`` list of a chart file, preserving order."""
    return tuple(
        AccountSpec(
            account_number=str(item["number"]),
            account_name=item["name"],
            account_type=item["type"],
            description=item.get("description"),
        )
        for item in data["accounts"]
    )


def parse_type_rules(data: dict[str, Any]) -> TypeRules:
    rules = tuple(
        CategoryRule(
            category=rule["category"],
            keywords=tuple(str(k) for k in rule["keywords"]),
        )
        for rule in data.get("rules", [])
    )
    return TypeRules(
        rules=rules,
        fallback=data["fallback"],
        canonical=tuple(data.get("canonical", ())),
    )


def parse_rule_table(data: dict[str, Any]) -> CategoryRuleTable:
    """
    Parse a categorization file keyed by transaction type.

    Raises:
        ValueError: unknown transaction type key, or a type is missing.
    """
    by_type = {
        TransactionType(key): parse_type_rules(value)
        for key, value in data.items()
    }
    return CategoryRuleTable(by_type=by_type)


def compute_checksum(data: dict[str, Any]) -> str:
    """SHA-256 of the canonical JSON serialization of ``data``."""
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
