"""
cashbook_config -- single public entrypoint for cashbook configuration.

Responsibility:
    Provides ``get_active_config()``, which loads the default chart of
    accounts, the categorization rule table and the reporting defaults
    from YAML and returns a frozen ``CashbookConfiguration``.

Architecture position:
    Configuration -- sits above ``cashbook_kernel`` and below
    ``cashbook_modules`` / ``cashbook_services``.  The kernel MUST NEVER
    import from ``cashbook_config``.

Invariants enforced:
    - Account names in the chart are unique.
    - Every canonical category, rule category and fallback of the rule
      table is an account in the chart, with the account type its
      transaction type posts to.
    - Deterministic: the same files always give the same checksum.

Failure modes:
    - ``FileNotFoundError`` -- config directory or a YAML file is missing.
    - ``ValueError`` -- structural validation failures.
"""

from __future__ import annotations

from pathlib import Path
from types import MappingProxyType

from cashbook_config.loader import (
    CATEGORIZATION_FILE,
    CHART_FILE,
    CLASSIFICATION_FILE,
    compute_checksum,
    load_yaml_file,
    parse_chart,
    parse_rule_table,
)
from cashbook_config.schema import CashbookConfiguration
from cashbook_kernel.domain.dtos import TransactionType
from cashbook_kernel.logging_config import get_logger

logger = get_logger("config")

_DEFAULT_CONFIG_DIR = Path(__file__).parent / "defaults"


def get_active_config(config_dir: Path | str | None = None) -> CashbookConfiguration:
    """
    Load and validate the configuration in ``config_dir``.

    Args:
        config_dir: Directory holding chart_of_accounts.yaml,
            categorization.yaml and classification.yaml.  Defaults to the
            packaged ``cashbook_config/defaults``.

    Raises:
        FileNotFoundError: Directory or file missing.
        ValueError: Validation failed; the message lists every problem.
    """
    source = Path(config_dir) if config_dir is not None else _DEFAULT_CONFIG_DIR
    if not source.is_dir():
        raise FileNotFoundError(f"Configuration directory not found: {source}")

    chart_data = load_yaml_file(source / CHART_FILE)
    rules_data = load_yaml_file(source / CATEGORIZATION_FILE)
    classification_data = load_yaml_file(source / CLASSIFICATION_FILE)

    chart = parse_chart(chart_data)
    rule_table = parse_rule_table(rules_data)
    reporting = classification_data.get("reporting", {})

    config = CashbookConfiguration(
        chart=chart,
        rule_table=rule_table,
        reporting=MappingProxyType(dict(reporting)),
        checksum=compute_checksum({
            "chart": chart_data,
            "categorization": rules_data,
            "classification": classification_data,
        }),
        source_dir=str(source),
    )

    errors = validate_configuration(config)
    if errors:
        raise ValueError(
            "Configuration validation failed:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )

    logger.info(
        "cashbook_config_loaded",
        extra={
            "source_dir": str(source),
            "checksum": config.checksum,
            "account_count": len(chart),
        },
    )
    return config


def validate_configuration(config: CashbookConfiguration) -> list[str]:
    """Structural problems of a configuration; empty when valid."""
    errors: list[str] = []

    seen: set[str] = set()
    for spec in config.chart:
        if spec.account_name in seen:
            errors.append(f"Duplicate account name in chart: {spec.account_name!r}")
        seen.add(spec.account_name)

    types_by_name = {spec.account_name: spec.account_type for spec in config.chart}
    for txn_type in TransactionType:
        type_rules = config.rule_table.for_type(txn_type)
        names = set(type_rules.canonical)
        names.update(rule.category for rule in type_rules.rules)
        names.add(type_rules.fallback)
        for name in sorted(names):
            account_type = types_by_name.get(name)
            if account_type is None:
                errors.append(
                    f"{txn_type.value} category {name!r} has no account in the chart"
                )
            elif account_type != txn_type.account_type:
                errors.append(
                    f"{txn_type.value} category {name!r} is a {account_type.value} account"
                )
    return errors


__all__ = [
    "CashbookConfiguration",
    "get_active_config",
    "validate_configuration",
]
