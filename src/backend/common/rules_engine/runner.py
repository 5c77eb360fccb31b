from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Iterable, Optional

from .evaluator import FactMap, evaluate_rule
from .models import Rule, RuleEvaluation, RuleMatchReport

logger = logging.getLogger(__name__)


class RulesRunner:
    """Evaluates candidate rules in the order given and stops at the first match."""

    def __init__(self, rules: Iterable[Rule]):
        self._rules = list(rules)

    def run(self, facts: FactMap, *, rule_ids: Optional[set[str]] = None) -> RuleMatchReport:
        evaluation_log: list[str] = []
        results: list[RuleEvaluation] = []
        matched_rule: Optional[Rule] = None

        for rule in self._rules:
            if rule_ids is not None and rule.id not in rule_ids:
                continue
            if not rule.is_active:
                evaluation_log.append(f'Skipping inactive rule: "{rule.name}"')
                continue

            outcome = evaluate_rule(facts, rule)
            evaluation_log.extend(outcome.log)
            results.append(
                RuleEvaluation(
                    rule_id=rule.id,
                    rule_name=rule.name,
                    matched=outcome.matched,
                    log=outcome.log,
                    issues=outcome.issues,
                )
            )
            if outcome.matched:
                matched_rule = rule
                break

        if matched_rule is None:
            logger.info("No rule matched after evaluating %d candidate(s)", len(results))
        else:
            logger.info("Rule %s (%r) matched", matched_rule.id, matched_rule.name)

        return RuleMatchReport(
            run_id=str(uuid.uuid4()),
            generated_at=datetime.now(timezone.utc),
            matched_rule=matched_rule,
            recommended_actions=list(matched_rule.actions) if matched_rule else [],
            evaluation_log=evaluation_log,
            results=results,
        )
