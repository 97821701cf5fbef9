"""
Tag and sentiment to emotion mapping.

Single source of the keyword tables used by both the full sentiment analysis
pipeline (analyze_quotes) and the emotion-only pipeline (add_emotions).
Emotion derivation is deterministic: the first tag found in TAG_TO_EMOTION
wins, otherwise the sentiment label decides, otherwise "Neutral".
"""

from typing import Dict, Iterable, List, Optional

# Bump when either table changes so enriched datasets record which mapping produced them
MAPPING_VERSION = 1

DEFAULT_EMOTION = "Neutral"

TAG_TO_EMOTION: Dict[str, str] = {
    # Love and relationships
    "love": "Romantic",
    "romance": "Romantic",
    "heartbreak": "Melancholic",
    "friendship": "Warm",
    "family": "Warm",
    "betrayal": "Tragic",
    # Courage and determination
    "courage": "Inspiring",
    "bravery": "Inspiring",
    "determination": "Inspiring",
    "perseverance": "Inspiring",
    "strength": "Inspiring",
    "heroism": "Inspiring",
    # Wisdom and philosophy
    "wisdom": "Philosophical",
    "philosophy": "Philosophical",
    "truth": "Philosophical",
    "meaning": "Philosophical",
    "life": "Philosophical",
    "existence": "Philosophical",
    # Fear and darkness
    "fear": "Terrifying",
    "horror": "Terrifying",
    "death": "Tragic",
    "despair": "Melancholic",
    "darkness": "Dark",
    "evil": "Dark",
    # Joy and happiness
    "joy": "Joyful",
    "happiness": "Joyful",
    "laughter": "Joyful",
    "celebration": "Joyful",
    "success": "Joyful",
    # Anger and conflict
    "anger": "Furious",
    "rage": "Furious",
    "war": "Intense",
    "battle": "Intense",
    "conflict": "Intense",
    # Sadness and loss
    "sadness": "Melancholic",
    "grief": "Melancholic",
    "loss": "Melancholic",
    "pain": "Melancholic",
    "suffering": "Melancholic",
    # Hope and optimism
    "hope": "Hopeful",
    "optimism": "Hopeful",
    "dreams": "Hopeful",
    "future": "Hopeful",
    # Mystery and intrigue
    "mystery": "Mysterious",
    "secrets": "Mysterious",
    "intrigue": "Mysterious",
    "deception": "Mysterious",
    # Peace and calm
    "peace": "Serene",
    "calm": "Serene",
    "tranquility": "Serene",
    "meditation": "Serene",
    # Excitement and energy
    "excitement": "Energetic",
    "adventure": "Energetic",
    "thrill": "Energetic",
    "passion": "Energetic",
    # Humor and comedy
    "humor": "Humorous",
    "comedy": "Humorous",
    "funny": "Humorous",
    "wit": "Humorous",
    # Nostalgia and memories
    "memories": "Nostalgic",
    "past": "Nostalgic",
    "childhood": "Nostalgic",
    "nostalgia": "Nostalgic",
    # Justice and morality
    "justice": "Noble",
    "morality": "Noble",
    "honor": "Noble",
    "duty": "Noble",
    "sacrifice": "Noble",
    # Power and ambition
    "power": "Ambitious",
    "ambition": "Ambitious",
    "leadership": "Ambitious",
    "control": "Ambitious",
    # Freedom and rebellion
    "freedom": "Liberating",
    "rebellion": "Liberating",
    "independence": "Liberating",
    "liberation": "Liberating",
    # Nature and beauty
    "nature": "Serene",
    "beauty": "Serene",
    "art": "Serene",
    "music": "Serene",
    # Technology and science
    "technology": "Futuristic",
    "science": "Futuristic",
    "innovation": "Futuristic",
    "progress": "Futuristic",
    # Spirituality and religion
    "spirituality": "Spiritual",
    "religion": "Spiritual",
    "faith": "Spiritual",
    "soul": "Spiritual",
    "divine": "Spiritual",
    # Time and change
    "time": "Reflective",
    "change": "Reflective",
    "growth": "Reflective",
    "transformation": "Reflective",
    # Fate and destiny
    "fate": "Mysterious",
    "destiny": "Mysterious",
    "prophecy": "Mysterious",
    "fortune": "Mysterious",
}

SENTIMENT_TO_EMOTION: Dict[str, str] = {
    "positive": "Inspiring",
    "neutral": "Reflective",
    "negative": "Tragic",
    "mixed": "Complex",
}

SENTIMENT_LABELS = list(SENTIMENT_TO_EMOTION.keys())

# Closed emotion vocabulary, sorted for stable display
EMOTION_LABELS: List[str] = sorted(
    set(TAG_TO_EMOTION.values()) | set(SENTIMENT_TO_EMOTION.values()) | {DEFAULT_EMOTION}
)


def derive_emotion(sentiment_label: Optional[str], tags: Optional[Iterable[str]]) -> str:
    """
    Derive a single emotion label from a sentiment label and tags.

    Tags are checked in input order and the first one present in
    TAG_TO_EMOTION (case-insensitive) decides. If no tag matches, the
    sentiment label is looked up in SENTIMENT_TO_EMOTION. Unknown labels
    resolve to DEFAULT_EMOTION, so this never raises.

    Args:
        sentiment_label: positive/negative/neutral/mixed, or any other string
        tags: Ordered tags from the annotation step

    Returns:
        Emotion label from EMOTION_LABELS

    Example:
        >>> derive_emotion("positive", ["courage", "love"])
        'Inspiring'
        >>> derive_emotion("mixed", ["unknown"])
        'Complex'
    """
    for tag in tags or []:
        if not isinstance(tag, str):
            continue
        emotion = TAG_TO_EMOTION.get(tag.lower())
        if emotion:
            return emotion

    if isinstance(sentiment_label, str):
        return SENTIMENT_TO_EMOTION.get(sentiment_label, DEFAULT_EMOTION)
    return DEFAULT_EMOTION
