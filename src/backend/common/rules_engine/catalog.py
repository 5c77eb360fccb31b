from __future__ import annotations

import argparse
import json
from typing import Any, List, Optional

from pydantic import BaseModel, Field

from .config import get_engine_settings
from .loader import load_rule_catalog
from .models import RuleStatus
from .registry import RuleCatalog


class RuleCatalogEntry(BaseModel):
    id: str
    name: str
    business_category: str
    status: RuleStatus
    description: str = ""

    required_fields: List[str] = Field(default_factory=list)
    condition_count: int = 0
    action_count: int = 0


def build_catalog(rules: RuleCatalog, *, category: Optional[str] = None) -> List[RuleCatalogEntry]:
    selected = rules.by_category(category, active_only=False) if category else rules.rules()
    entries = [
        RuleCatalogEntry(
            id=rule.id or "",
            name=rule.name,
            business_category=rule.business_category,
            status=rule.status,
            description=rule.description,
            required_fields=rule.required_fields(),
            condition_count=len(rule.conditions),
            action_count=len(rule.actions),
        )
        for rule in selected
    ]
    entries.sort(key=lambda e: e.id)
    return entries


def _dump_json(catalog: list[dict[str, Any]]) -> str:
    return json.dumps(catalog, indent=2, sort_keys=True)


def _dump_yaml(catalog: list[dict[str, Any]]) -> str:
    try:
        import yaml  # type: ignore
    except ModuleNotFoundError as exc:
        raise SystemExit(
            "PyYAML is required for YAML output. Install the `yaml` extra (e.g., `pip install -e .[yaml]`)."
        ) from exc

    return yaml.safe_dump(catalog, sort_keys=True)


def main(argv: list[str] | None = None) -> None:
    settings = get_engine_settings()
    parser = argparse.ArgumentParser(description="Print the rule catalog with the fact fields each rule needs.")
    parser.add_argument(
        "--rules",
        default=settings.rules_path,
        help="Path to the rules JSON document (default: $RULES_ENGINE_RULES_PATH or rules.json).",
    )
    parser.add_argument("--category", default=None, help="Only list rules in this business category.")
    parser.add_argument(
        "--format",
        choices=("yaml", "json"),
        default="yaml",
        help="Output format (default: yaml).",
    )
    args = parser.parse_args(argv)
    settings.configure_logging()

    catalog = [e.model_dump(mode="json") for e in build_catalog(load_rule_catalog(args.rules), category=args.category)]
    if args.format == "json":
        print(_dump_json(catalog))
    else:
        print(_dump_yaml(catalog))


if __name__ == "__main__":
    main()
