import os
import sys


# Ensure `src/backend` is on sys.path so imports like `import common...` work.
BACKEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "../.."))
if BACKEND_DIR not in sys.path:
    sys.path.insert(0, BACKEND_DIR)

import json

import pytest

from common.rules_engine.models import Rule


@pytest.fixture
def make_rule():
    def _make(
        *,
        conditions,
        name: str = "Price Variance Check",
        rule_id: str | None = "rule-1",
        category: str = "Procurement & Sourcing",
        status: str = "active",
        actions=None,
    ) -> Rule:
        return Rule.model_validate(
            {
                "id": rule_id,
                "name": name,
                "description": f"{name} (fixture)",
                "businessCategory": category,
                "conditions": conditions,
                "actions": actions
                or [
                    {
                        "type": "notification",
                        "function": "notifyBuyer",
                        "parameters": {"channel": "email"},
                    }
                ],
                "status": status,
            }
        )

    return _make


@pytest.fixture
def invoice_facts() -> dict:
    return {
        "invoice.materialPrice": 110,
        "purchaseOrder.materialPrice": 100,
        "invoice.quantity": 50,
        "purchaseOrder.quantity": 50,
    }


@pytest.fixture
def rules_document() -> dict:
    return {
        "rules": {
            "price-variance": {
                "name": "Invoice Price Variance",
                "description": "Block invoices priced more than 5% above the purchase order.",
                "businessCategory": "Accounts Payable",
                "conditions": [
                    {
                        "field": "invoice.materialPrice",
                        "operator": ">",
                        "value": {"field": "purchaseOrder.materialPrice", "operator": "*", "value": 1.05},
                    },
                    {"field": "invoice.quantity", "operator": "==", "value": 50},
                ],
                "actions": [
                    {
                        "type": "workflow",
                        "function": "blockInvoice",
                        "description": "Put the invoice on payment block.",
                        "parameters": {"reason": "price variance"},
                    }
                ],
                "status": "active",
            },
            "quantity-mismatch": {
                "name": "Invoice Quantity Mismatch",
                "description": "Flag invoices whose quantity differs from the purchase order.",
                "businessCategory": "accounts payable",
                "conditions": [
                    {
                        "field": "invoice.quantity",
                        "operator": "!=",
                        "value": {"field": "purchaseOrder.quantity", "operator": "+", "value": 0},
                    }
                ],
                "actions": [{"type": "notification", "function": "notifyBuyer", "parameters": {}}],
                "status": "active",
            },
            "premium-discount": {
                "name": "Premium Discount",
                "description": "Apply a discount for premium customers.",
                "businessCategory": "Sales & Finance",
                "conditions": [{"field": "customer.tier", "operator": "==", "value": "premium"}],
                "actions": [{"type": "pricing", "function": "applyDiscount", "parameters": {"pct": 5}}],
                "status": "inactive",
            },
            "broken": {
                "name": "Broken Rule",
                "description": "Has no conditions and must be skipped.",
                "businessCategory": "Sales & Finance",
                "conditions": [],
                "actions": [{"type": "noop", "function": "noop", "parameters": {}}],
                "status": "active",
            },
        }
    }


@pytest.fixture
def write_json(tmp_path):
    def _write(name: str, payload) -> str:
        path = tmp_path / name
        path.write_text(json.dumps(payload))
        return str(path)

    return _write
