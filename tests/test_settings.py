from __future__ import annotations

import json
from datetime import date
from pathlib import Path

import pytest

from invoicer.core.errors import ConfigError
from invoicer.core.settings import Settings, load_config, load_settings

TODAY = date(2024, 10, 3)


def test_defaults_follow_run_date() -> None:
    doc = Settings.defaults(TODAY).to_document()
    assert doc.id == "INV202410"
    assert doc.date == "Oct 03, 2024"
    assert doc.dates == (TODAY,)
    assert doc.items == ("Paper Cranes",)
    assert doc.due == ""
    assert doc.due_days == 14
    assert doc.generated_on == TODAY


def test_config_keys_merge_over_defaults(tmp_path: Path) -> None:
    p = tmp_path / "invoice.json"
    p.write_text(json.dumps({
        "idPrefix": "ACME-",
        "id": 7,
        "from": "Acme Ltd",
        "fromDetails": {"VAT": "GB123"},
        "toAddress": ["2 High St", "Leeds"],
        "ratesTaxInclusive": True,
        "tax_name": "GST",
        "dates": ["2024-09-30T00:00:00Z"],
        "unknown": "ignored",
    }), encoding="utf-8")

    doc = load_settings(p, TODAY).to_document()
    assert doc.id == "ACME-7"
    assert doc.issuer.name == "Acme Ltd"
    assert doc.issuer.details == {"VAT": "GB123"}
    assert doc.recipient.address == ("2 High St", "Leeds")
    assert doc.rates_tax_inclusive is True
    assert doc.tax_name == "GST"
    assert doc.dates == (date(2024, 9, 30),)
    # untouched values keep their defaults
    assert doc.currency == "USD"


def test_flags_win_over_config() -> None:
    settings = Settings.defaults(TODAY).merged({"currency": "EUR", "rates": [50]})
    settings = settings.merged({"currency": "GBP"})
    doc = settings.to_document()
    assert doc.currency == "GBP"
    assert doc.rates == (50.0,)


def test_run_date_cannot_be_overridden() -> None:
    settings = Settings.defaults(TODAY).merged({"generated_on": "1999-01-01"})
    assert settings.generated_on == TODAY


def test_no_config_path_returns_defaults() -> None:
    assert load_settings(None, TODAY) == Settings.defaults(TODAY)


def test_invalid_json(tmp_path: Path) -> None:
    p = tmp_path / "broken.json"
    p.write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(p)


def test_non_object_json(tmp_path: Path) -> None:
    p = tmp_path / "list.json"
    p.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(p)


def test_yaml_config_uses_same_keys(tmp_path: Path) -> None:
    p = tmp_path / "invoice.yaml"
    p.write_text(
        "from: Acme Ltd\n"
        "toAddress:\n"
        "  - 2 High St\n"
        "  - Leeds\n"
        "rates: [40, 60]\n"
        "dates:\n"
        "  - 2024-09-30\n"
        "currency: EUR\n",
        encoding="utf-8",
    )

    doc = load_settings(p, TODAY).to_document()
    assert doc.issuer.name == "Acme Ltd"
    assert doc.recipient.address == ("2 High St", "Leeds")
    assert doc.rates == (40.0, 60.0)
    assert doc.dates == (date(2024, 9, 30),)
    assert doc.currency == "EUR"


def test_invalid_yaml(tmp_path: Path) -> None:
    p = tmp_path / "broken.yml"
    p.write_text("rates: [1, 2\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(p)


def test_scalar_yaml_is_rejected(tmp_path: Path) -> None:
    p = tmp_path / "scalar.yaml"
    p.write_text("just a string\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(p)


def test_bad_values_raise_config_error() -> None:
    with pytest.raises(ConfigError):
        Settings.defaults(TODAY).merged({"rates": ["ten"]}).to_document()
    with pytest.raises(ConfigError):
        Settings.defaults(TODAY).merged({"dates": ["yesterday"]}).to_document()
