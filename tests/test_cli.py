from __future__ import annotations

from datetime import date
from pathlib import Path

from pypdf import PdfReader

from invoicer.main import main, output_path

HEADER = "Date,Start,End,Worked,Titles\n"


def test_output_path_appends_identifier() -> None:
    assert output_path("invoice.pdf", "INV7") == Path("invoice_INV7.pdf")
    assert output_path("out/acme", "INV7") == Path("out/acme_INV7.pdf")


def test_generate_writes_pdf(tmp_path: Path, capsys) -> None:
    out = tmp_path / "invoice.pdf"
    code = main([
        "generate", "-o", str(out), "--id", "0001",
        "-i", "A", "-i", "B", "-q", "2,3", "-r", "10",
    ])
    assert code == 0
    written = tmp_path / "invoice_INV0001.pdf"
    assert written.exists()
    assert f"Generated {written}" in capsys.readouterr().out

    text = PdfReader(str(written)).pages[0].extract_text() or ""
    assert "$50.00" in text


def test_items_split_on_commas(capsys) -> None:
    code = main(["totals", "-i", "Design, Review", "-i", "Handover", "-q", "2,3,1", "-r", "10"])
    assert code == 0
    out = capsys.readouterr().out
    assert "6.00" in out
    assert "$60.00" in out


def test_worklog_replaces_items(tmp_path: Path, capsys) -> None:
    worklog = tmp_path / "worklog.csv"
    worklog.write_text(HEADER + "2024-06-03,09:00,16:30,7:30,Migration\n", encoding="utf-8")
    code = main(["totals", "--worklog", str(worklog), "-r", "20", "-i", "Ignored"])
    assert code == 0
    out = capsys.readouterr().out
    assert "7.50" in out
    assert "$150.00" in out


def test_totals_with_config_and_flags(tmp_path: Path, capsys) -> None:
    config = tmp_path / "invoice.json"
    config.write_text('{"currency": "EUR", "rates": [100], "quantities": [1], "tax": 0.2, "taxName": "TVA"}',
                      encoding="utf-8")
    code = main(["totals", "--config", str(config), "--discount", "0.1"])
    assert code == 0
    out = capsys.readouterr().out
    assert "TVA 20%" in out
    assert "Discount" in out
    assert "€110.00" in out


def test_bad_worklog_header_fails_without_output(tmp_path: Path) -> None:
    worklog = tmp_path / "worklog.csv"
    worklog.write_text("Day,Start,End,Worked,Titles\n2024-06-03,,,1:00,x\n", encoding="utf-8")
    out = tmp_path / "invoice.pdf"
    code = main(["generate", "--worklog", str(worklog), "-o", str(out), "--id", "9"])
    assert code == 1
    assert list(tmp_path.glob("*.pdf")) == []
