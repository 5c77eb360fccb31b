from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any


logger = logging.getLogger(__name__)


def _ensure_backend_on_path() -> None:
    backend_dir = Path(__file__).resolve().parents[1]
    if str(backend_dir) not in sys.path:
        sys.path.insert(0, str(backend_dir))


def evaluate_single_rule(rules_path: Path, facts_path: Path, rule_id: str) -> dict[str, Any]:
    """Evaluate one rule by id; the payload mirrors the rule-evaluation tool response."""
    _ensure_backend_on_path()

    from common.rules_engine.evaluator import evaluate_rule
    from common.rules_engine.loader import load_facts, load_rule_catalog

    catalog = load_rule_catalog(rules_path)
    if rule_id not in catalog:
        raise SystemExit(f"Rule not found with ID: {rule_id}")
    rule = catalog.get(rule_id)
    result = evaluate_rule(load_facts(facts_path), rule)
    return {
        "matched": result.matched,
        "ruleName": rule.name,
        "evaluationLog": result.log,
    }


def evaluate_category(rules_path: Path, facts_path: Path, category: str) -> dict[str, Any]:
    """Evaluate every rule in a category (in document order) until one matches."""
    _ensure_backend_on_path()

    from common.rules_engine.loader import load_facts, load_rule_catalog
    from common.rules_engine.runner import RulesRunner

    catalog = load_rule_catalog(rules_path)
    candidates = catalog.by_category(category, active_only=False)
    if not candidates:
        logger.warning("No rules found for category: %s", category)
    report = RulesRunner(candidates).run(load_facts(facts_path))
    return report.model_dump(mode="json", by_alias=True)


def main(argv: list[str] | None = None) -> int:
    _ensure_backend_on_path()
    from common.rules_engine.config import get_engine_settings

    settings = get_engine_settings()
    parser = argparse.ArgumentParser(
        description="Evaluate extracted facts (JSON object) against business rules and print the evaluation log."
    )
    parser.add_argument("--facts", required=True, help="Path to a JSON object mapping field paths to values.")
    parser.add_argument(
        "--rules",
        default=settings.rules_path,
        help="Path to the rules JSON document (default: $RULES_ENGINE_RULES_PATH or rules.json).",
    )
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--rule-id", help="Evaluate a single rule by id.")
    target.add_argument(
        "--category",
        help="Evaluate the rules of a business category in order, stopping at the first match.",
    )
    args = parser.parse_args(argv)
    settings.configure_logging()

    rules_path = Path(args.rules)
    facts_path = Path(args.facts)
    if args.rule_id:
        payload = evaluate_single_rule(rules_path, facts_path, args.rule_id)
    else:
        payload = evaluate_category(rules_path, facts_path, args.category)

    print(json.dumps(payload, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
