from liquidity_report.cli import main

CSV_TEXT = 'ABC\nExchange,Symbol,JPEG Volume ($),Market Volume ($)\nBinance,ABC/USDT,"$1,000","$10,000"\n'


def test_csv_report_is_written_to_file(tmp_path, capsys):
    source = tmp_path / "liq.csv"
    source.write_text(CSV_TEXT, encoding="utf-8")
    out = tmp_path / "report.html"

    code = main(["csv", str(source), "--date", "2025-02-01", "--commentary", "Quiet", "--out", str(out)])

    assert code == 0
    document = out.read_text(encoding="utf-8")
    assert "Monthly Liquidity Report - ABC - 2025-02-01" in document
    err = capsys.readouterr().err
    assert "Token: ABC" in err
    assert "Exchanges: 1" in err


def test_csv_report_goes_to_stdout_without_out(tmp_path, capsys):
    source = tmp_path / "liq.csv"
    source.write_text(CSV_TEXT, encoding="utf-8")

    assert main(["csv", str(source), "--date", "2025-02-01"]) == 0

    assert capsys.readouterr().out.startswith("<!DOCTYPE html>")


def test_structural_csv_errors_exit_non_zero(tmp_path, capsys):
    source = tmp_path / "bad.csv"
    source.write_text("ABC\nVenue,Pair\nBinance,ABC/USDT\n", encoding="utf-8")

    assert main(["csv", str(source)]) == 1

    assert "Import failed" in capsys.readouterr().err


def test_validation_errors_exit_non_zero(tmp_path, capsys):
    source = tmp_path / "share.csv"
    source.write_text("ABC\nExchange,Symbol,JPEG Volume ($),Market Volume ($)\nBinance,ABC/USDT,250,100\n")

    assert main(["csv", str(source), "--date", "2025-02-01"]) == 1

    assert "Market share must be between 0% and 200%" in capsys.readouterr().err


def test_invalid_sheet_url_exits_non_zero(capsys):
    assert main(["sheet", "https://example.com/not-a-sheet", "--api-key", "k", "--no-prices"]) == 1

    assert "Invalid Google Sheets URL" in capsys.readouterr().err
