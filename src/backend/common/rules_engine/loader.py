from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from pydantic import ValidationError

from .models import Rule
from .registry import RuleCatalog

logger = logging.getLogger(__name__)


def _raw_rule_entries(payload: Any) -> List[Dict[str, Any]]:
    if isinstance(payload, dict) and "rules" in payload:
        payload = payload["rules"]
    if isinstance(payload, dict):
        entries = []
        for rule_id, raw in payload.items():
            if isinstance(raw, dict):
                # The document key is the rule id unless the body carries one.
                raw = {**raw, "id": raw.get("id") or rule_id}
            entries.append(raw)
        return entries
    if isinstance(payload, list):
        return list(payload)
    raise ValueError("Rules document must be an object keyed by rule id or a list of rules.")


def parse_rules_document(payload: Any) -> List[Rule]:
    """Validate every rule in a rules document, skipping the ones that do not parse."""
    rules: List[Rule] = []
    for raw in _raw_rule_entries(payload):
        try:
            rules.append(Rule.model_validate(raw))
        except ValidationError as exc:
            preview = json.dumps(raw, default=str)[:50]
            logger.warning("Skipping invalid rule: %s... (%d error(s))", preview, exc.error_count())
    return rules


def _load_json(path: Path) -> Any:
    with path.open(encoding="utf-8") as handle:
        return json.load(handle)


def load_rule_catalog(path: Path | str) -> RuleCatalog:
    rules = parse_rules_document(_load_json(Path(path)))
    logger.info("Loaded %d rule(s) from %s", len(rules), path)
    return RuleCatalog(rules)


def load_facts(path: Path | str) -> Dict[str, Any]:
    facts = _load_json(Path(path))
    if not isinstance(facts, dict):
        raise ValueError(f"Facts file must contain a JSON object: {path}")
    return facts
