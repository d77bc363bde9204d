import pytest

from tencents import ReadError, SchemaError, load_transactions_from_csv


def test_load_transactions_from_csv(legacy_csv):
    txs = load_transactions_from_csv(legacy_csv)
    assert [t.name for t in txs] == ["Food", "Food", "Transport", "Salary", "Food", "Transport"]
    assert txs[3].kind == "income"
    assert txs[3].recurring == "true"


def test_byte_order_mark_is_dropped(tmp_path):
    f = tmp_path / "bom.csv"
    f.write_bytes("\ufeffDate,Name,Amount,Type\n2024-01-01,Food,5,expense\n".encode())
    [tx] = load_transactions_from_csv(f)
    assert tx.date == "2024-01-01"


def test_load_errors(tmp_path):
    with pytest.raises(ReadError, match="CSV file"):
        load_transactions_from_csv(tmp_path / "statement.xlsx")

    empty = tmp_path / "empty.csv"
    empty.write_text("\n\n", encoding="utf-8")
    with pytest.raises(SchemaError, match="empty"):
        load_transactions_from_csv(empty)
