from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RuleStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class EvaluationIssue(str, Enum):
    MISSING_FACT_FIELD = "MISSING_FACT_FIELD"
    NON_NUMERIC_FORMULA_BASE = "NON_NUMERIC_FORMULA_BASE"
    UNSUPPORTED_FORMULA_OPERATOR = "UNSUPPORTED_FORMULA_OPERATOR"
    UNSUPPORTED_CONDITION_OPERATOR = "UNSUPPORTED_CONDITION_OPERATOR"
    INVALID_IN_OPERAND = "INVALID_IN_OPERAND"


class Formula(BaseModel):
    """A comparison value derived from another fact: ``facts[field] <operator> value``.

    Any JSON object used as a condition value is read as a Formula, so every
    key is optional and unknown keys are ignored.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    field: str = ""
    operator: str = ""
    value: Any = None


ConditionValue = Union[Formula, List[Any], bool, int, float, str, None]


class Condition(BaseModel):
    model_config = ConfigDict(frozen=True)

    field: str = Field(min_length=1)
    operator: str = Field(min_length=1)
    value: ConditionValue = None

    @field_validator("value", mode="before")
    @classmethod
    def _resolve_value_kind(cls, value: Any) -> Any:
        # Decided once here; the evaluator only checks isinstance(Formula).
        if isinstance(value, Formula):
            return value
        if isinstance(value, dict):
            return Formula.model_validate(value)
        if isinstance(value, tuple):
            return list(value)
        return value

    @property
    def is_formula(self) -> bool:
        return isinstance(self.value, Formula)


class Action(BaseModel):
    type: str = Field(min_length=1)
    function: str = Field(min_length=1)
    description: Optional[str] = None
    parameters: Dict[str, Any] = Field(default_factory=dict)


class Rule(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None
    name: str = Field(min_length=1)
    description: str = Field(min_length=1)
    business_category: str = Field(alias="businessCategory", min_length=1)
    conditions: List[Condition] = Field(min_length=1)
    actions: List[Action] = Field(min_length=1)
    status: RuleStatus = RuleStatus.ACTIVE

    @property
    def is_active(self) -> bool:
        return self.status == RuleStatus.ACTIVE

    def required_fields(self) -> List[str]:
        """Fact fields a caller must extract before this rule can be evaluated.

        Condition fields come first, each followed by its formula base field
        (if any). Duplicates keep their first position.
        """
        seen: Dict[str, None] = {}
        for condition in self.conditions:
            seen.setdefault(condition.field, None)
            if isinstance(condition.value, Formula) and condition.value.field:
                seen.setdefault(condition.value.field, None)
        return list(seen)


class EvaluationResult(BaseModel):
    matched: bool
    log: List[str] = Field(default_factory=list)
    issues: List[EvaluationIssue] = Field(default_factory=list)


class RuleEvaluation(BaseModel):
    rule_id: Optional[str] = None
    rule_name: str
    matched: bool
    log: List[str] = Field(default_factory=list)
    issues: List[EvaluationIssue] = Field(default_factory=list)


class RuleMatchReport(BaseModel):
    run_id: str
    generated_at: datetime

    matched_rule: Optional[Rule] = None
    recommended_actions: List[Action] = Field(default_factory=list)
    evaluation_log: List[str] = Field(default_factory=list)
    results: List[RuleEvaluation] = Field(default_factory=list)

    @property
    def matched(self) -> bool:
        return self.matched_rule is not None
