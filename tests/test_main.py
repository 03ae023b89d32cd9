import main
from database.db_manager import DatabaseManager
from database.recurring_dao import RecurringDAO
from database.transaction_dao import TransactionDAO
from models.recurring_rule import RecurringRule


def test_main_applies_rules_and_prints_summary(tmp_path, capsys, monkeypatch):
    monkeypatch.setattr(main, "get_currency", lambda: "USD")
    folder = tmp_path / "data"
    db = DatabaseManager.open_in_folder(str(folder))
    RecurringDAO(db).save_all("s1", [RecurringRule(
        id="r1", type="income", amount="400", category="allowance",
        description="Allowance", day=1,
    )])
    db.close()

    argv = ["--user", "s1", "--date", "2024-03-10", "--data-folder", str(folder)]
    assert main.main(argv) == 0
    out = capsys.readouterr().out
    assert "+ Allowance (Auto): $400 (income)" in out
    assert "March 2024" in out
    assert "Income:       $400" in out

    assert main.main(argv) == 0
    assert "+ Allowance" not in capsys.readouterr().out

    db = DatabaseManager.open_in_folder(str(folder))
    assert len(TransactionDAO(db).get_all("s1")) == 1
    db.close()


def test_main_rejects_bad_date(capsys):
    assert main.main(["--user", "s1", "--date", "31/31/2024"]) == 2


def test_main_saves_charts(tmp_path, capsys):
    folder = tmp_path / "data"
    charts = tmp_path / "charts"
    argv = ["--user", "s1", "--date", "2024-03-10", "--data-folder", str(folder),
            "--charts", str(charts)]
    assert main.main(argv) == 0
    assert (charts / "monthly.png").stat().st_size > 0
    assert (charts / "categories.png").stat().st_size > 0
    assert f"Charts saved to {charts}" in capsys.readouterr().out
