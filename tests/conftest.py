"""Shared pytest fixtures for all tests."""
import json

import pytest


@pytest.fixture
def sample_quotes():
    """Unenriched quote records as they appear in the seed dataset."""
    return [
        {
            "objectID": "q-1",
            "quote": "If you don't take risks, you can't create a future.",
            "character": "Monkey D. Luffy",
            "anime": "One Piece",
        },
        {
            "objectID": "q-2",
            "quote": "Whatever you lose, you'll find it again. But what you throw away you'll never get back.",
            "character": "Kenshin Himura",
            "anime": "Rurouni Kenshin",
        },
        {
            "objectID": "q-3",
            "quote": "Fear is not evil. It tells you what your weakness is.",
            "character": "Gildarts Clive",
            "anime": "Fairy Tail",
        },
    ]


@pytest.fixture
def enriched_quotes():
    """Quote records after full analysis."""
    return [
        {
            "objectID": "e-1",
            "quote": "A lesson without pain is meaningless.",
            "character": "Edward Elric",
            "anime": "Fullmetal Alchemist: Brotherhood",
            "sentiment_score": 6,
            "sentiment_label": "mixed",
            "tags": ["pain", "growth", "sacrifice"],
            "emotion": "Melancholic",
            "annotation_status": "ok",
        },
        {
            "objectID": "e-2",
            "quote": "Believe in the me that believes in you!",
            "character": "Kamina",
            "anime": "Tengen Toppa Gurren Lagann",
            "sentiment_score": 9,
            "sentiment_label": "positive",
            "tags": ["Courage", "friendship", "belief"],
            "emotion": "Inspiring",
            "annotation_status": "ok",
        },
        {
            "objectID": "e-3",
            "quote": "People die when they are killed.",
            "character": "Shirou Emiya",
            "anime": "Fate/stay night",
            "sentiment_score": 3,
            "sentiment_label": "negative",
            "tags": ["death", "truth"],
            "emotion": "Tragic",
            "annotation_status": "ok",
        },
        {
            "objectID": "e-4",
            "quote": "I'll take a potato chip... and eat it!",
            "character": "Light Yagami",
            "anime": "Death Note",
            "sentiment_score": 9,
            "sentiment_label": "positive",
            "tags": ["determination", "humor"],
            "emotion": "Inspiring",
            "annotation_status": "ok",
        },
    ]


@pytest.fixture
def quotes_file(tmp_path, sample_quotes):
    """Legacy bare-array dataset file on disk."""
    path = tmp_path / "data" / "quotes.json"
    path.parent.mkdir()
    path.write_text(json.dumps(sample_quotes, indent=2), encoding="utf-8")
    return path
