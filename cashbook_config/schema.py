"""
Configuration schema (``cashbook_config.schema``).

Frozen dataclasses describing a loaded cashbook configuration.  Reporting
settings stay a plain mapping here; ``cashbook_modules.reporting.config``
owns their typed form so that this package depends on the kernel only.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from cashbook_kernel.domain.categorization import CategoryRuleTable
from cashbook_kernel.domain.dtos import AccountSpec, TransactionType


@dataclass(frozen=True)
class CashbookConfiguration:
    """
    The runtime configuration artifact returned by ``get_active_config()``.

    Attributes:
        chart: Default chart of accounts seeded at onboarding, in file order.
        rule_table: Keyword rules, fallbacks and canonical category lists.
        reporting: Raw reporting settings (see ReportingConfig.from_dict).
        checksum: SHA-256 of the canonical JSON of all three sources.
        source_dir: Directory the YAML files were read from.
    """

    chart: tuple[AccountSpec, ...]
    rule_table: CategoryRuleTable
    reporting: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    checksum: str = ""
    source_dir: str = ""

    def chart_account_names(self) -> frozenset[str]:
        return frozenset(spec.account_name for spec in self.chart)

    def canonical_categories(self, transaction_type: TransactionType | str) -> tuple[str, ...]:
        return self.rule_table.canonical_categories(transaction_type)
