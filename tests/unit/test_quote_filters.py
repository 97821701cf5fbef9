"""Unit tests for quote filtering helpers."""
import pytest

from anime_quotes.app.quote_filters import (
    filter_by_character,
    filter_by_emotion,
    filter_by_sentiment,
    filter_by_sentiment_score,
    get_all_tags,
    get_emotion_stats,
    paginate,
    search_by_tags,
)


def ids(quotes):
    return [quote["objectID"] for quote in quotes]


def test_filter_by_sentiment(enriched_quotes):
    assert ids(filter_by_sentiment(enriched_quotes, "positive")) == ["e-2", "e-4"]


def test_filter_by_emotion(enriched_quotes):
    assert ids(filter_by_emotion(enriched_quotes, "Tragic")) == ["e-3"]


def test_filter_by_character(enriched_quotes):
    assert ids(filter_by_character(enriched_quotes, "Kamina")) == ["e-2"]


def test_filter_by_sentiment_score_inclusive(enriched_quotes):
    assert ids(filter_by_sentiment_score(enriched_quotes, 6, 9)) == ["e-1", "e-2", "e-4"]


def test_filter_by_sentiment_score_skips_unscored(sample_quotes):
    assert filter_by_sentiment_score(sample_quotes, 1, 10) == []


def test_search_by_tags_substring_case_insensitive(enriched_quotes):
    assert ids(search_by_tags(enriched_quotes, ["COURAGE"])) == ["e-2"]
    assert ids(search_by_tags(enriched_quotes, ["sacri", "hum"])) == ["e-1", "e-4"]


def test_get_all_tags_sorted_unique(enriched_quotes):
    tags = get_all_tags(enriched_quotes)
    assert tags == sorted(tags)
    assert len(tags) == 10


def test_get_emotion_stats(enriched_quotes):
    stats = get_emotion_stats(enriched_quotes)
    assert list(stats.items())[0] == ("Inspiring", 2)
    assert stats["Tragic"] == 1


def test_paginate(enriched_quotes):
    page = paginate(enriched_quotes + enriched_quotes, page=1, hits_per_page=3)

    assert ids(page["hits"]) == ["e-4", "e-1", "e-2"]
    assert page["nb_pages"] == 3
    assert page["nb_hits"] == 8


def test_paginate_past_end_is_empty(enriched_quotes):
    assert paginate(enriched_quotes, page=5)["hits"] == []


def test_paginate_invalid():
    with pytest.raises(ValueError, match="page"):
        paginate([], page=-1)
    with pytest.raises(ValueError, match="hits_per_page"):
        paginate([], hits_per_page=0)
