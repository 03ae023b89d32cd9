import logging
from datetime import date, datetime, timezone
from decimal import Decimal

from conftest import USER, make_rule
from database.db_manager import DatabaseManager
from models.transaction import Transaction


def test_load_missing_returns_default(db):
    assert db.load(USER, "transactions", []) == []
    assert db.load(USER, "nothing") is None


def test_save_and_load(db):
    assert db.save(USER, "budget", {"food": "100.00"})
    assert db.load(USER, "budget", {}) == {"food": "100.00"}


def test_save_many_writes_all_keys(db):
    assert db.save_many(USER, {"a": [1], "b": {"x": 2}})
    assert db.load(USER, "a") == [1]
    assert db.load(USER, "b") == {"x": 2}


def test_unserializable_value_is_rejected(db):
    assert db.save_many(USER, {"a": [1], "b": object()}) is False
    assert db.load(USER, "a") is None


def test_failed_write_rolls_back_every_key(db):
    db.save(USER, "a", "old")
    conn = db.get_connection()
    conn.execute("""
        CREATE TRIGGER block_b BEFORE INSERT ON user_data
        WHEN NEW.key = 'b'
        BEGIN SELECT RAISE(ABORT, 'blocked'); END
    """)
    conn.commit()

    assert db.save_many(USER, {"a": "new", "b": "x"}) is False
    assert db.load(USER, "a") == "old"


def test_corrupt_json_falls_back_to_default(db):
    conn = db.get_connection()
    conn.execute(
        "INSERT INTO user_data(user_id, key, value) VALUES (?, ?, ?)",
        (USER, "banks", "{not json"),
    )
    conn.commit()
    assert db.load(USER, "banks", ["fallback"]) == ["fallback"]


def test_keys_are_namespaced_per_user(db):
    db.save("alice", "transactions", ["a"])
    db.save("bob", "transactions", ["b"])
    assert db.load("alice", "transactions") == ["a"]
    assert db.delete_user("alice")
    assert db.load("alice", "transactions", []) == []
    assert db.load("bob", "transactions") == ["b"]


def test_settings(db):
    assert db.get_setting("currency") == "BDT"
    db.set_setting("currency", "USD")
    assert db.get_setting("currency") == "USD"
    assert db.get_setting("missing", "x") == "x"


def test_open_in_folder_creates_file(tmp_path):
    folder = tmp_path / "data"
    db = DatabaseManager.open_in_folder(str(folder))
    try:
        assert db.save(USER, "k", 1)
    finally:
        db.close()
    assert (folder / "money_tracker.db").exists()


def test_transaction_record_round_trip(daos):
    tx = Transaction(
        id="t1", type="expense", amount="19.99", category="books",
        date=date(2024, 3, 4), description="Notebook", bank_id="card",
        notes="", timestamp=datetime(2024, 3, 4, 12, tzinfo=timezone.utc), origin="manual",
    )
    assert daos["tx"].save_all(USER, [tx])
    record = daos["tx"].model_to_record(tx)
    assert record["bankId"] == "card"
    assert record["amount"] == "19.99"
    assert daos["tx"].get_all(USER) == [tx]


def test_rule_record_round_trip(daos):
    rule = make_rule(last_processed=date(2024, 2, 5), amount="12.30")
    assert daos["recurring"].save_all(USER, [rule])
    assert daos["recurring"].model_to_record(rule)["lastProcessed"] == "2024-02-05"
    assert daos["recurring"].get_all(USER) == [rule]


def test_legacy_records_default_bank(db, daos):
    db.save(USER, "transactions", [{
        "id": "old", "type": "income", "amount": 25, "category": "allowance",
        "date": "2024-01-02", "description": "From home",
        "timestamp": "2024-01-02T10:00:00.000Z",
    }])
    (tx,) = daos["tx"].get_all(USER)
    assert tx.bank_id == "main"
    assert tx.amount == Decimal("25.00")
    assert tx.timestamp.tzinfo is not None


def test_unreadable_records_are_skipped(db, daos, caplog):
    db.save(USER, "transactions", [
        {"id": "no-type", "amount": "10", "date": "2024-01-02"},
        {"id": "bad-amount", "type": "expense", "amount": "abc", "date": "2024-01-02"},
        {"id": "ok", "type": "expense", "amount": "5", "category": "food",
         "date": "2024-01-03", "description": "Tea"},
    ])
    db.save(USER, "recurring", [
        {"id": "r0", "amount": "10", "day": 3},
        {"id": "r1", "type": "income", "amount": "20", "day": 3},
    ])
    with caplog.at_level(logging.WARNING):
        assert [t.id for t in daos["tx"].get_all(USER)] == ["ok"]
        assert [r.id for r in daos["recurring"].get_all(USER)] == ["r1"]
    assert len([r for r in caplog.records if r.levelno == logging.WARNING]) == 3
