"""Unit tests for saved quote persistence."""
import json

import pytest

from anime_quotes.app.saved_quotes import SAVED_QUOTES_KEY, SavedQuotesStore


@pytest.fixture
def store_path(tmp_path):
    return tmp_path / "saved_quotes.json"


def test_new_store_is_empty(store_path):
    store = SavedQuotesStore(store_path)
    assert store.list_saved() == []
    assert not store_path.exists()


def test_save_persists_under_namespace(store_path, enriched_quotes):
    store = SavedQuotesStore(store_path)

    assert store.save_quote(enriched_quotes[0]) is True

    data = json.loads(store_path.read_text(encoding="utf-8"))
    assert data[SAVED_QUOTES_KEY] == [enriched_quotes[0]]
    assert SavedQuotesStore(store_path).is_saved("e-1")


def test_duplicate_save_is_ignored(store_path, enriched_quotes):
    store = SavedQuotesStore(store_path)
    store.save_quote(enriched_quotes[0])

    assert store.save_quote(enriched_quotes[0]) is False
    assert len(store.list_saved()) == 1


def test_remove_and_toggle(store_path, enriched_quotes):
    store = SavedQuotesStore(store_path)

    assert store.toggle(enriched_quotes[1]) is True
    assert store.is_saved("e-2")
    assert store.toggle(enriched_quotes[1]) is False
    assert not store.is_saved("e-2")
    assert store.remove_quote("e-2") is False
    assert SavedQuotesStore(store_path).list_saved() == []


def test_save_requires_object_id(store_path):
    with pytest.raises(ValueError, match="objectID"):
        SavedQuotesStore(store_path).save_quote({"quote": "no id"})


def test_corrupt_file_treated_as_empty(store_path):
    store_path.write_text("{broken", encoding="utf-8")
    assert SavedQuotesStore(store_path).list_saved() == []


def test_other_namespaces_preserved(store_path, enriched_quotes):
    store_path.write_text(json.dumps({"other-key": ["keep"]}), encoding="utf-8")

    SavedQuotesStore(store_path).save_quote(enriched_quotes[0])

    data = json.loads(store_path.read_text(encoding="utf-8"))
    assert data["other-key"] == ["keep"]
    assert len(data[SAVED_QUOTES_KEY]) == 1


def test_saved_copy_is_independent(store_path, enriched_quotes):
    store = SavedQuotesStore(store_path)
    store.save_quote(enriched_quotes[0])
    enriched_quotes[0]["emotion"] = "Changed"

    assert store.list_saved()[0]["emotion"] == "Melancholic"
