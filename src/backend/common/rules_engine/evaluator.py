"""Deterministic evaluation of a single business rule against extracted facts.

The evaluator is a pure function over its two inputs:
- It never mutates the fact map or the rule.
- It never raises for malformed condition data; every problem degrades the
  rule to "not matched" with an explanatory line in the returned log.

Evaluation walks the conditions in order and stops at the first condition
that is unresolvable or not met, so later conditions never appear in the log.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Mapping

from .models import Condition, EvaluationIssue, EvaluationResult, Formula, Rule
from .operators import (
    NAN,
    apply_formula,
    as_double,
    compare,
    contains,
    format_value,
    is_number,
    loose_equals,
    stringify,
    to_number,
)

logger = logging.getLogger(__name__)

FactMap = Mapping[str, Any]

_MISSING = object()


@dataclass(frozen=True)
class _ResolvedValue:
    value: Any
    description: str


class _Aborted(Exception):
    """Condition could not be resolved; remaining conditions are not evaluated."""

    def __init__(self, message: str, issue: EvaluationIssue):
        super().__init__(message)
        self.message = message
        self.issue = issue


def _skipped(condition: Condition, reason: str) -> str:
    return f'- Condition for field "{condition.field}" SKIPPED: {reason}'


def _resolve_formula(condition: Condition, formula: Formula, facts: FactMap) -> _ResolvedValue:
    base_value = facts.get(formula.field, _MISSING)
    if base_value is _MISSING:
        raise _Aborted(
            _skipped(condition, f'Base field "{formula.field}" for formula not found in prompt data.'),
            EvaluationIssue.MISSING_FACT_FIELD,
        )
    if not is_number(base_value):
        raise _Aborted(
            _skipped(
                condition,
                f'Base field "{formula.field}" is not a number (Value: {format_value(base_value)}).',
            ),
            EvaluationIssue.NON_NUMERIC_FORMULA_BASE,
        )

    # A formula without a "value" key has an undefined operand (NaN); an explicit null coerces to 0.
    operand = to_number(formula.value) if "value" in formula.model_fields_set else NAN
    base_value = as_double(base_value)
    result = apply_formula(base_value, formula.operator, operand)
    if result is None:
        raise _Aborted(
            _skipped(condition, f'Unsupported formula operator "{formula.operator}".'),
            EvaluationIssue.UNSUPPORTED_FORMULA_OPERATOR,
        )
    description = (
        f"Formula[ {formula.field}({format_value(base_value)}) {formula.operator} "
        f"{format_value(operand)} = {format_value(result)} ]"
    )
    return _ResolvedValue(value=result, description=description)


def _resolve_value(condition: Condition, facts: FactMap) -> _ResolvedValue:
    value = condition.value
    if isinstance(value, dict):
        # Conditions built without validation may still carry a raw object.
        value = Formula.model_validate(value)
    if isinstance(value, Formula):
        return _resolve_formula(condition, value, facts)
    return _ResolvedValue(value=condition.value, description=stringify(condition.value))


def _condition_met(
    condition: Condition,
    prompt_value: Any,
    rule_value: Any,
    log: List[str],
    issues: List[EvaluationIssue],
) -> bool:
    op = condition.operator
    if op == "==":
        return loose_equals(prompt_value, rule_value)
    if op == "!=":
        return not loose_equals(prompt_value, rule_value)
    if op in (">", "<", ">=", "<="):
        return compare(op, prompt_value, rule_value)
    if op == "in":
        if isinstance(rule_value, list):
            return contains(rule_value, prompt_value)
        log.append(f'- Operator "in" for field "{condition.field}" requires the rule value to be an array.')
        issues.append(EvaluationIssue.INVALID_IN_OPERAND)
        return False
    log.append(f'- Unsupported operator "{op}" for field "{condition.field}"')
    issues.append(EvaluationIssue.UNSUPPORTED_CONDITION_OPERATOR)
    return False


def evaluate_rule(facts: FactMap, rule: Rule) -> EvaluationResult:
    log: List[str] = [f'Evaluating rule: "{rule.name}"']
    issues: List[EvaluationIssue] = []
    all_conditions_met = True

    for condition in rule.conditions:
        prompt_value = facts.get(condition.field, _MISSING)

        try:
            resolved = _resolve_value(condition, facts)
        except _Aborted as aborted:
            log.append(aborted.message)
            issues.append(aborted.issue)
            all_conditions_met = False
            break

        if prompt_value is _MISSING:
            log.append(_skipped(condition, "Field not found in prompt data."))
            issues.append(EvaluationIssue.MISSING_FACT_FIELD)
            all_conditions_met = False
            break

        met = _condition_met(condition, prompt_value, resolved.value, log, issues)
        log.append(
            f"- Condition: `{condition.field} {condition.operator} {resolved.description}` "
            f"(Prompt Value: {format_value(prompt_value)}). Result: {'MET' if met else 'NOT MET'}"
        )
        if not met:
            all_conditions_met = False
            break

    if all_conditions_met:
        log.append(f'SUCCESS: All conditions met for rule "{rule.name}".')
    else:
        log.append(f'FAILURE: Not all conditions met for rule "{rule.name}".')

    logger.debug("Rule %r evaluated: matched=%s issues=%s", rule.name, all_conditions_met, issues)
    return EvaluationResult(matched=all_conditions_met, log=log, issues=issues)

