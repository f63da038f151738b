import json
from pathlib import Path

from scriptscan.analysis.encoder import ImageBlob
from scriptscan.prescription import PrescriptionInfo
from scriptscan.store import HistoryStore, SettingsStore


# --- Helpers ---

def _image(data: bytes = b"\xff\xd8jpeg") -> ImageBlob:
    return ImageBlob(mime_type="image/jpeg", source=data)


def _info(med: str) -> PrescriptionInfo:
    return PrescriptionInfo(medications=[med], raw_text=f"{med} 500mg")


# --- Settings ---

def test_settings_missing_file_starts_empty(tmp_path):
    store = SettingsStore(tmp_path)
    assert store.get_api_key("123") is None
    assert store.get_language("123") is None


def test_settings_corrupt_file_starts_empty(tmp_path):
    (tmp_path / "settings.json").write_text("{not valid json")
    store = SettingsStore(tmp_path)
    assert store.get_api_key("123") is None


def test_settings_set_and_get(tmp_path):
    store = SettingsStore(tmp_path)
    store.set_api_key("123", "sk-a")
    store.set_language("123", "hindi")
    assert store.get_api_key("123") == "sk-a"
    assert store.get_language("123") == "hindi"
    assert store.get_api_key("456") is None


def test_settings_last_write_wins(tmp_path):
    store = SettingsStore(tmp_path)
    store.set_api_key("123", "sk-a")
    store.set_api_key("123", "sk-b")
    assert store.get_api_key("123") == "sk-b"


def test_settings_persist_to_disk(tmp_path):
    SettingsStore(tmp_path).set_language("123", "hindi")
    assert SettingsStore(tmp_path).get_language("123") == "hindi"


def test_settings_creates_data_dir(tmp_path):
    data_dir = tmp_path / "nested" / "data"
    SettingsStore(data_dir).set_api_key("123", "sk-a")
    assert (data_dir / "settings.json").exists()


# --- History ---

def test_history_add_copies_image_and_persists(tmp_path):
    store = HistoryStore(tmp_path)
    item = store.add("123", _image(b"pixels"), _info("Paracetamol"))

    assert Path(item.image).read_bytes() == b"pixels"
    reloaded = HistoryStore(tmp_path).entries("123")
    assert [i.id for i in reloaded] == [item.id]
    assert reloaded[0].prescription_info == _info("Paracetamol")


def test_history_file_uses_camel_case_fields(tmp_path):
    HistoryStore(tmp_path).add("123", _image(), _info("Paracetamol"))
    raw = json.loads((tmp_path / "history.json").read_text())
    entry = raw["123"][0]
    assert set(entry) == {"id", "timestamp", "image", "prescriptionInfo"}
    assert entry["prescriptionInfo"]["rawText"] == "Paracetamol 500mg"


def test_history_newest_first(tmp_path):
    store = HistoryStore(tmp_path)
    store.add("123", _image(), _info("first"))
    store.add("123", _image(), _info("second"))
    assert [i.title for i in store.entries("123")] == ["second", "first"]
    assert store.latest("123").title == "second"
    assert store.get("123", 2).title == "first"


def test_history_get_out_of_range(tmp_path):
    store = HistoryStore(tmp_path)
    store.add("123", _image(), _info("only"))
    assert store.get("123", 0) is None
    assert store.get("123", 2) is None
    assert store.latest("456") is None


def test_history_is_capped_and_drops_old_images(tmp_path):
    store = HistoryStore(tmp_path, max_per_chat=2)
    oldest = store.add("123", _image(), _info("a"))
    store.add("123", _image(), _info("b"))
    store.add("123", _image(), _info("c"))

    assert [i.title for i in store.entries("123")] == ["c", "b"]
    assert not Path(oldest.image).exists()


def test_history_is_per_chat(tmp_path):
    store = HistoryStore(tmp_path)
    store.add("123", _image(), _info("mine"))
    assert store.entries("456") == []


def test_history_replace_latest(tmp_path):
    store = HistoryStore(tmp_path)
    store.add("123", _image(), _info("old"))
    original = store.add("123", _image(), _info("english"))

    updated = store.replace_latest("123", _info("hindi"))

    assert updated.id == original.id
    assert updated.image == original.image
    assert [i.title for i in HistoryStore(tmp_path).entries("123")] == ["hindi", "old"]


def test_history_replace_latest_on_empty(tmp_path):
    assert HistoryStore(tmp_path).replace_latest("123", _info("x")) is None


def test_history_clear_removes_items_and_images(tmp_path):
    store = HistoryStore(tmp_path)
    items = [store.add("123", _image(), _info(m)) for m in ("a", "b")]
    other = store.add("456", _image(), _info("keep"))

    store.clear("123")

    assert store.entries("123") == []
    assert not any(Path(i.image).exists() for i in items)
    assert HistoryStore(tmp_path).entries("456")[0].id == other.id


def test_history_clear_unknown_chat_is_noop(tmp_path):
    store = HistoryStore(tmp_path)
    store.clear("123")
    assert not (tmp_path / "history.json").exists()


def test_history_skips_unreadable_entries(tmp_path):
    (tmp_path / "history.json").write_text(json.dumps({"123": [{"id": "broken"}]}))
    assert HistoryStore(tmp_path).entries("123") == []


def test_degraded_result_round_trips(tmp_path):
    store = HistoryStore(tmp_path)
    store.add("123", _image(), PrescriptionInfo.raw("Sorry, I cannot read this image."))
    item = HistoryStore(tmp_path).latest("123")
    assert item.prescription_info.to_json() == {"rawText": "Sorry, I cannot read this image."}
    assert item.title is None
