"""
Integration tests for the enrichment pipeline.

Runs full analysis and the emotion-only pipeline against a dataset file on
disk with the OpenAI client mocked at the chat completion boundary.
"""
import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from anime_quotes.ingestion.dataset_store import QuoteDatasetStore
from anime_quotes.nlp.add_emotions import run_add_emotions
from anime_quotes.nlp.analyze_quotes import run_analysis


class RecordingSleep:
    def __init__(self):
        self.calls = []

    async def __call__(self, seconds):
        self.calls.append(seconds)


def completion(content):
    response = MagicMock()
    response.choices = [MagicMock()]
    response.choices[0].message.content = content
    return response


@pytest.fixture
def mock_openai_client():
    """Patch client creation; answers depend on the quote in the prompt."""
    client = MagicMock()

    async def create(**kwargs):
        prompt = kwargs["messages"][1]["content"]
        if "Quote 7" in prompt:
            return completion("I cannot analyze this quote.")
        if "Quote 13" in prompt:
            raise ConnectionError("socket closed")
        return completion(
            json.dumps({"sentiment_score": 9, "sentiment_label": "positive", "tags": ["courage", "love"]})
        )

    client.chat.completions.create = AsyncMock(side_effect=create)
    with patch("anime_quotes.nlp.analyze_quotes.create_openai_client", return_value=client):
        yield client


@pytest.fixture
def dataset(tmp_path):
    quotes = [
        {"objectID": str(i), "quote": f"Quote {i}", "character": f"Char {i % 3}", "anime": "Y"}
        for i in range(25)
    ]
    path = tmp_path / "quotes.json"
    path.write_text(json.dumps(quotes, indent=2), encoding="utf-8")
    return path


def test_full_analysis_end_to_end(dataset, mock_openai_client):
    original = dataset.read_bytes()
    sleep = RecordingSleep()
    store = QuoteDatasetStore(dataset)

    result = run_analysis(store, api_key="sk-test", batch_size=10, delay=2.0, sleep=sleep)

    assert mock_openai_client.chat.completions.create.await_count == 25
    assert sleep.calls == [2.0, 2.0]
    assert result["quote_count"] == 25
    assert result["defaulted_count"] == 2

    assert (dataset.parent / "quotes.backup.json").read_bytes() == original

    quotes = store.load()
    assert [q["objectID"] for q in quotes] == [str(i) for i in range(25)]
    assert quotes[0]["emotion"] == "Inspiring"
    assert quotes[0]["annotation_status"] == "ok"
    for index in (7, 13):
        assert quotes[index]["sentiment_score"] == 5
        assert quotes[index]["sentiment_label"] == "neutral"
        assert quotes[index]["tags"] == ["general"]
        assert quotes[index]["emotion"] == "Neutral"
        assert quotes[index]["annotation_status"] == "defaulted"

    stats = result["statistics"]
    assert stats["sentiment"][0] == {"label": "positive", "count": 23, "percentage": 92.0}


def test_second_run_leaves_dataset_unchanged(dataset, mock_openai_client):
    store = QuoteDatasetStore(dataset)
    run_analysis(store, api_key="sk-test", sleep=RecordingSleep())
    after_first = dataset.read_bytes()
    backup_after_first = (dataset.parent / "quotes.backup.json").read_bytes()

    result = run_analysis(store, api_key="sk-test", sleep=RecordingSleep())

    assert result["skipped"] is True
    assert dataset.read_bytes() == after_first
    assert (dataset.parent / "quotes.backup.json").read_bytes() == backup_after_first
    assert mock_openai_client.chat.completions.create.await_count == 25


def test_emotion_only_after_full_analysis_is_skipped(dataset, mock_openai_client):
    store = QuoteDatasetStore(dataset)
    run_analysis(store, api_key="sk-test", sleep=RecordingSleep())

    assert run_add_emotions(store)["skipped"] is True


def test_emotion_only_on_legacy_analyzed_dataset(tmp_path):
    legacy = [
        {
            "objectID": "1",
            "quote": "A",
            "character": "X",
            "anime": "Y",
            "sentiment_score": 9,
            "sentiment_label": "positive",
            "tags": ["courage", "love"],
        },
        {
            "objectID": "2",
            "quote": "B",
            "character": "X",
            "anime": "Y",
            "sentiment_score": 2,
            "sentiment_label": "negative",
            "tags": ["rain"],
        },
    ]
    path = tmp_path / "quotes.json"
    path.write_text(json.dumps(legacy), encoding="utf-8")
    store = QuoteDatasetStore(path)

    run_add_emotions(store)

    assert [q["emotion"] for q in store.load()] == ["Inspiring", "Tragic"]
    assert store.load_metadata()["emotions"] is True
    assert json.loads((tmp_path / "quotes.backup.json").read_text(encoding="utf-8")) == legacy
