import json

import pytest

from tencents import (
    Transaction,
    TransactionStore,
    decode_csv,
    deserialize_transactions,
    serialize_transactions,
)


def test_serialized_shape_uses_export_field_names():
    tx = Transaction(
        date="2024-01-05",
        name="Food",
        amount=50.0,
        kind="expense",
        note="Lunch",
        icon="🍔",
        currency="KES",
        recurring="false",
    )
    [item] = json.loads(serialize_transactions([tx]))
    assert item == {
        "date": "2024-01-05",
        "icon": "🍔",
        "name": "Food",
        "note": "Lunch",
        "amount": 50.0,
        "currency": "KES",
        "type": "expense",
        "recurring": "false",
    }


def test_destination_icon_is_written_only_when_known(destination_csv):
    txs = decode_csv(destination_csv.read_text(encoding="utf-8"))
    items = json.loads(serialize_transactions(txs))
    assert items[0]["destinationIcon"] == "🍔"
    assert deserialize_transactions(serialize_transactions(txs)) == txs


def test_deserialize_accepts_manually_entered_records():
    # Records typed into a form keep their amount as text and may omit optionals.
    text = json.dumps(
        [
            {"date": "2024-03-01", "name": "Rent", "amount": "700", "type": "expense"},
            {"date": "2024-03-02", "name": "Gift", "amount": "", "type": "income", "note": None},
        ]
    )
    rent, gift = deserialize_transactions(text)
    assert rent == Transaction(date="2024-03-01", name="Rent", amount=700.0, kind="expense")
    assert gift.amount == 0.0
    assert gift.note == ""


@pytest.mark.parametrize(
    "text",
    [
        "{}",
        '[{"date": "2024-01-01", "name": "X", "amount": 1, "type": "transfer"}]',
        '[{"name": "X", "amount": 1, "type": "expense"}]',
        "not json",
    ],
)
def test_deserialize_rejects_other_shapes(text):
    with pytest.raises(ValueError):
        deserialize_transactions(text)


def test_store_uses_env_root_and_round_trips(_isolate_store_dir, legacy_csv):
    store = TransactionStore()
    assert store.root == _isolate_store_dir.resolve()
    assert store.load() == []

    txs = decode_csv(legacy_csv.read_text(encoding="utf-8"))
    assert store.save(txs) == 6
    assert store.path == _isolate_store_dir.resolve() / "expenses.json"
    assert not store.path.with_suffix(".json.tmp").exists()
    assert store.load() == txs


def test_save_replaces_previous_dataset(tmp_path):
    store = TransactionStore(tmp_path / "kv")
    store.save([Transaction(date="2024-01-01", name="A", amount=1, kind="expense")])
    store.save([Transaction(date="2024-01-02", name="B", amount=2, kind="income")])
    assert [t.name for t in store.load()] == ["B"]


def test_clear_removes_saved_dataset(tmp_path):
    store = TransactionStore(tmp_path)
    assert store.clear() is False
    store.save([Transaction(date="2024-01-01", name="A", amount=1, kind="expense")])
    assert store.clear() is True
    assert store.load() == []


def test_corrupt_store_raises_value_error(tmp_path):
    store = TransactionStore(tmp_path)
    store.path.write_text('[{"oops": true}]', encoding="utf-8")
    with pytest.raises(ValueError, match="invalid"):
        store.load()


@pytest.mark.parametrize("key", ["../escape", "a/b", "", ".."])
def test_store_key_must_be_a_plain_name(tmp_path, key):
    with pytest.raises(ValueError):
        TransactionStore(tmp_path, key=key)
