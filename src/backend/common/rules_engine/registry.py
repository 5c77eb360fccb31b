from __future__ import annotations

import uuid
from typing import Dict, Iterable, List, Optional, Set

from .models import Rule


def _category_key(category: str) -> str:
    return (category or "").strip().casefold()


class RuleCatalog:
    """In-memory rule store with a case-insensitive category index.

    The category index is rebuilt from scratch on every write.
    """

    def __init__(self, rules: Optional[Iterable[Rule]] = None):
        self._rules: Dict[str, Rule] = {}
        self._by_category: Dict[str, Set[str]] = {}
        for rule in rules or ():
            self.add(rule)

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._rules

    def add(self, rule: Rule) -> Rule:
        if not rule.id:
            rule = rule.model_copy(update={"id": uuid.uuid4().hex})
        if rule.id in self._rules:
            raise ValueError(f"Duplicate rule id registered: {rule.id}")
        self._rules[rule.id] = rule
        self._reindex()
        return rule

    def replace(self, rule: Rule) -> Rule:
        if not rule.id or rule.id not in self._rules:
            raise KeyError(rule.id)
        self._rules[rule.id] = rule
        self._reindex()
        return rule

    def remove(self, rule_id: str) -> Rule:
        rule = self._rules.pop(rule_id)
        self._reindex()
        return rule

    def get(self, rule_id: str) -> Rule:
        return self._rules[rule_id]

    def ids(self) -> Iterable[str]:
        return self._rules.keys()

    def rules(self) -> List[Rule]:
        return list(self._rules.values())

    def by_category(self, category: str, *, active_only: bool = True) -> List[Rule]:
        ids = self._by_category.get(_category_key(category), set())
        # Dict order keeps insertion order; the index set only filters.
        return [
            rule
            for rule_id, rule in self._rules.items()
            if rule_id in ids and (rule.is_active or not active_only)
        ]

    def categories(self) -> List[str]:
        seen: Dict[str, str] = {}
        for rule in self._rules.values():
            seen.setdefault(_category_key(rule.business_category), rule.business_category)
        return list(seen.values())

    def required_fields(self, rule_id: str) -> List[str]:
        return self.get(rule_id).required_fields()

    def _reindex(self) -> None:
        index: Dict[str, Set[str]] = {}
        for rule_id, rule in self._rules.items():
            index.setdefault(_category_key(rule.business_category), set()).add(rule_id)
        self._by_category = index
