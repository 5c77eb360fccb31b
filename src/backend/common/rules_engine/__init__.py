"""Deterministic business-rule evaluation.

This package intentionally contains only domain logic:
- Rule inputs are a validated `Rule` plus an already-extracted fact map.
- No category inference, data extraction, storage backend or transport lives here.
"""

from .evaluator import evaluate_rule
from .models import (
    Action,
    Condition,
    EvaluationIssue,
    EvaluationResult,
    Formula,
    Rule,
    RuleEvaluation,
    RuleMatchReport,
    RuleStatus,
)
from .registry import RuleCatalog
from .runner import RulesRunner
