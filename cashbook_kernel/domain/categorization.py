"""
Categorization -- keyword rules that suggest a category for a transaction.

Responsibility:
    ``auto_categorize`` maps a free-text description and a coarse
    TransactionType to a canonical category name by case-insensitive
    substring tests over an ordered rule table.  The rule table itself is
    configuration data (see ``cashbook_config``); this module only
    evaluates it.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - Total: every (description, type) pair yields a category; when no rule
      matches, the type's fallback ("Other ...") is returned.
    - First match wins; rule order is significant.
    - Deterministic: same inputs, same output.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from cashbook_kernel.domain.dtos import TransactionType


@dataclass(frozen=True)
class CategoryRule:
    """Return ``category`` when any keyword occurs in the description."""

    category: str
    keywords: tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.keywords:
            raise ValueError(f"Rule for '{self.category}' has no keywords")
        # Matching is case-insensitive; store keywords lowercased
        object.__setattr__(
            self, "keywords", tuple(k.lower() for k in self.keywords),
        )

    def matches(self, text: str) -> bool:
        return any(keyword in text for keyword in self.keywords)


@dataclass(frozen=True)
class TypeRules:
    """Ordered rules, fallback and canonical category list for one type."""

    rules: tuple[CategoryRule, ...]
    fallback: str
    canonical: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        names = set(self.canonical)
        if names:
            missing = [r.category for r in self.rules if r.category not in names]
            if self.fallback not in names:
                missing.append(self.fallback)
            if missing:
                raise ValueError(
                    f"Rule categories not in canonical list: {sorted(set(missing))}"
                )


@dataclass(frozen=True)
class CategoryRuleTable:
    """
    Rule sets for every TransactionType.

    Contract:
        Constructed with an entry for each of the five transaction types.
    """

    by_type: Mapping[TransactionType, TypeRules] = field(default_factory=dict)

    def __post_init__(self) -> None:
        missing = [t.value for t in TransactionType if t not in self.by_type]
        if missing:
            raise ValueError(f"Rule table missing types: {missing}")

    def for_type(self, transaction_type: TransactionType | str) -> TypeRules:
        return self.by_type[TransactionType(transaction_type)]

    def canonical_categories(self, transaction_type: TransactionType | str) -> tuple[str, ...]:
        return self.for_type(transaction_type).canonical


def auto_categorize(
    description: str | None,
    transaction_type: TransactionType | str,
    table: CategoryRuleTable,
) -> str:
    """
    Suggest a category name for a transaction description.

    Preconditions: transaction_type is one of the five TransactionTypes.
    Postconditions: Returns the category of the first matching rule for the
        type, or the type's fallback when none matches.  Never raises for
        any description, including None or "".
    """
    type_rules = table.for_type(transaction_type)
    text = (description or "").lower()
    for rule in type_rules.rules:
        if rule.matches(text):
            return rule.category
    return type_rules.fallback
