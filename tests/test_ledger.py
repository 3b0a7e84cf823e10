import json
import logging
import re

from fadasblock.ledger import JsonFileStore, MemoryStore, ScoreEntry, ScoreLedger, utc_timestamp


def fixed_clock() -> str:
    return "2024-05-01T12:00:00.000Z"


def test_record_keeps_top_ten_sorted():
    ledger = ScoreLedger(MemoryStore(), clock=fixed_clock)
    points = [50, 900, 10, 300, 300, 1200, 0, 75, 640, 410, 5, 999, 20]
    for i, value in enumerate(points):
        ledger.record(f"p{i}", value)
        assert len(ledger.entries) <= 10
        ranked = [entry.points for entry in ledger.entries]
        assert ranked == sorted(ranked, reverse=True)
    assert [e.points for e in ledger.entries] == [1200, 999, 900, 640, 410, 300, 300, 75, 50, 20]


def test_ties_keep_insertion_order():
    ledger = ScoreLedger(MemoryStore(), clock=fixed_clock)
    ledger.record("first", 100)
    ledger.record("second", 100)
    assert [e.name for e in ledger.entries] == ["first", "second"]


def test_record_persists_and_reloads():
    store = MemoryStore()
    ledger = ScoreLedger(store, clock=fixed_clock)
    entry = ledger.record("  ana ", 400)
    assert entry == ScoreEntry("ana", 400, "2024-05-01T12:00:00.000Z")

    stored = json.loads(store.get("fadasblock_scores"))
    assert stored == [{"name": "ana", "points": 400, "date": "2024-05-01T12:00:00.000Z"}]
    assert ScoreLedger(store).entries == [entry]


def test_blank_name_becomes_anon():
    ledger = ScoreLedger(MemoryStore(), clock=fixed_clock)
    assert ledger.record("", 10).name == "Anon"


def test_malformed_data_loads_as_empty(caplog):
    bad_payloads = [
        "{not json",
        json.dumps({"name": "x"}),
        json.dumps([{"name": "x"}]),
        json.dumps([{"name": "x", "points": "lots"}]),
        json.dumps(["oops"]),
    ]
    for payload in bad_payloads:
        store = MemoryStore({"fadasblock_scores": payload})
        with caplog.at_level(logging.WARNING, logger="fadasblock.ledger"):
            assert ScoreLedger(store).entries == []
    assert "Discarding unreadable score table" in caplog.text


def test_load_ranks_stored_entries():
    raw = [{"name": n, "points": p, "date": ""} for n, p in [("a", 1), ("b", 3), ("c", 2)]]
    ledger = ScoreLedger(MemoryStore({"fadasblock_scores": json.dumps(raw)}))
    assert [e.name for e in ledger.entries] == ["b", "c", "a"]


def test_clear_removes_stored_key():
    store = MemoryStore()
    ledger = ScoreLedger(store, clock=fixed_clock)
    ledger.record("ana", 10)
    ledger.clear()
    assert ledger.entries == []
    assert store.get("fadasblock_scores") is None


def test_json_file_store_round_trip(tmp_path):
    path = tmp_path / "nested" / "scores.json"
    ledger = ScoreLedger(JsonFileStore(path), clock=fixed_clock)
    assert ledger.entries == []
    ledger.record("ana", 120)
    ledger.record("bob", 340)

    reloaded = ScoreLedger(JsonFileStore(path))
    assert [(e.name, e.points) for e in reloaded.entries] == [("bob", 340), ("ana", 120)]

    reloaded.clear()
    assert ScoreLedger(JsonFileStore(path)).entries == []
    assert json.loads(path.read_text()) == {}


def test_corrupt_file_is_ignored_then_overwritten(tmp_path):
    path = tmp_path / "scores.json"
    path.write_text("garbage")
    ledger = ScoreLedger(JsonFileStore(path), clock=fixed_clock)
    assert ledger.entries == []
    ledger.record("ana", 5)
    assert [e.name for e in ScoreLedger(JsonFileStore(path)).entries] == ["ana"]


def test_utc_timestamp_format():
    assert re.fullmatch(r"\d{4}-\d\d-\d\dT\d\d:\d\d:\d\d\.\d{3}Z", utc_timestamp())
