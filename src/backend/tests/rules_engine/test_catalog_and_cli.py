import json

import pytest

from common.rules_engine import catalog as catalog_cli
from common.rules_engine.config import get_engine_settings
from common.rules_engine.loader import load_rule_catalog
from scripts import run_rule_evaluation


def test_build_catalog_lists_required_fields(rules_document, write_json):
    entries = catalog_cli.build_catalog(load_rule_catalog(write_json("rules.json", rules_document)))
    assert [e.id for e in entries] == ["premium-discount", "price-variance", "quantity-mismatch"]
    by_id = {e.id: e for e in entries}
    assert by_id["price-variance"].required_fields == [
        "invoice.materialPrice",
        "purchaseOrder.materialPrice",
        "invoice.quantity",
    ]
    assert by_id["premium-discount"].status.value == "inactive"


def test_catalog_cli_json_output_filtered_by_category(rules_document, write_json, capsys):
    catalog_cli.main(["--rules", write_json("rules.json", rules_document), "--category", "Sales & Finance", "--format", "json"])
    out = json.loads(capsys.readouterr().out)
    assert [e["id"] for e in out] == ["premium-discount"]
    assert out[0]["business_category"] == "Sales & Finance"


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("RULES_ENGINE_RULES_PATH", "/data/rules.json")
    monkeypatch.setenv("RULES_ENGINE_LOG_LEVEL", "debug")
    settings = get_engine_settings()
    assert settings.rules_path == "/data/rules.json"
    assert settings.log_level == "DEBUG"


def test_settings_reject_unknown_log_level(monkeypatch):
    monkeypatch.setenv("RULES_ENGINE_LOG_LEVEL", "chatty")
    with pytest.raises(ValueError):
        get_engine_settings()


def test_run_rule_evaluation_single_rule(rules_document, invoice_facts, write_json, capsys):
    rules_path = write_json("rules.json", rules_document)
    facts_path = write_json("facts.json", invoice_facts)

    assert run_rule_evaluation.main(["--rules", rules_path, "--facts", facts_path, "--rule-id", "price-variance"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["matched"] is True
    assert payload["ruleName"] == "Invoice Price Variance"
    assert payload["evaluationLog"][-1] == 'SUCCESS: All conditions met for rule "Invoice Price Variance".'


def test_run_rule_evaluation_unknown_rule(rules_document, write_json):
    rules_path = write_json("rules.json", rules_document)
    facts_path = write_json("facts.json", {})
    with pytest.raises(SystemExit) as exc:
        run_rule_evaluation.main(["--rules", rules_path, "--facts", facts_path, "--rule-id", "nope"])
    assert "Rule not found with ID: nope" in str(exc.value)


def test_run_rule_evaluation_by_category(rules_document, invoice_facts, write_json, capsys):
    rules_path = write_json("rules.json", rules_document)
    facts_path = write_json("facts.json", invoice_facts)

    run_rule_evaluation.main(["--rules", rules_path, "--facts", facts_path, "--category", "accounts payable"])
    report = json.loads(capsys.readouterr().out)
    assert report["matched_rule"]["id"] == "price-variance"
    assert report["matched_rule"]["businessCategory"] == "Accounts Payable"
    assert report["recommended_actions"][0]["function"] == "blockInvoice"
