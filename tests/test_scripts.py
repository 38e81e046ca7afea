"""
Tests for the command-line scripts (calculate_event, approve_rules).
"""

import importlib.util
import json
from pathlib import Path

import pytest

from catering_config import RuleIntegrityError, get_active_rules

SCRIPTS = Path(__file__).resolve().parents[1] / "scripts"


def _load_script(name):
    spec = importlib.util.spec_from_file_location(name, SCRIPTS / f"{name}.py")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def calculate_event():
    return _load_script("calculate_event")


@pytest.fixture
def approve_rules():
    return _load_script("approve_rules")


@pytest.fixture
def event_file(tmp_path):
    path = tmp_path / "event.yaml"
    path.write_text("bookingId: bk-1\nadults: 10\neventType: private-dinner\n")
    return path


class TestCalculateEvent:

    def test_prints_financials(self, calculate_event, event_file, capsys, clean_logging):
        assert calculate_event.main([str(event_file)]) == 0

        payload = json.loads(capsys.readouterr().out)
        assert payload["pricing_source"] == "rules"
        assert payload["financials"]["subtotal"] == "600"
        assert payload["financials"]["gross_profit"] == "262"
        assert payload["financials"]["staffing_plan"]["roles"] == ["lead", "assistant"]

    def test_menu_pricing(self, calculate_event, event_file, tmp_path, capsys, clean_logging):
        menu = tmp_path / "menu.json"
        menu.write_text(json.dumps([
            {"id": "g1", "isAdult": True, "protein1": "chicken", "protein2": "steak"},
        ]))
        catalog = tmp_path / "catalog.json"
        catalog.write_text(json.dumps([
            {"id": "protein-chicken", "costPerServing": 4, "pricePerServing": 12},
            {"id": "protein-steak", "costPerServing": 7, "pricePerServing": 20},
        ]))

        calculate_event.main(
            [str(event_file), "--menu", str(menu), "--catalog", str(catalog)]
        )
        payload = json.loads(capsys.readouterr().out)

        assert payload["pricing_source"] == "menu"
        assert payload["financials"]["subtotal"] == "32.00"
        assert payload["financials"]["food_cost"] == "11.00"

    def test_unknown_category_logged_and_exits_nonzero(
        self, calculate_event, tmp_path, capsys, clean_logging
    ):
        path = tmp_path / "event.yaml"
        path.write_text("adults: 10\neventType: banquet\n")

        assert calculate_event.main([str(path)]) == 1

        err = capsys.readouterr().err
        (line,) = [line for line in err.splitlines() if line.startswith("{")]
        record = json.loads(line)
        assert record["message"] == "event_calculation_failed"
        assert record["exc_code"] == "UNKNOWN_EVENT_CATEGORY"
        assert record["exc_category"] == "banquet"
        assert "Error: Unknown event category: 'banquet'" in err

    def test_menu_requires_catalog(self, calculate_event, event_file, clean_logging):
        with pytest.raises(SystemExit):
            calculate_event.main([str(event_file), "--menu", "menu.json"])


class TestApproveRules:

    def test_writes_pin(self, approve_rules, tmp_path):
        rules_file = tmp_path / "rules.yaml"
        rules_file.write_text("pricing:\n  primary_base_price: 70\n")

        checksum = approve_rules.approve(rules_file)

        assert (tmp_path / "APPROVED_CHECKSUM").read_text().strip() == checksum
        assert get_active_rules(rules_file).pricing.primary_base_price == 70

        rules_file.write_text("pricing:\n  primary_base_price: 71\n")
        with pytest.raises(RuleIntegrityError):
            get_active_rules(rules_file)
