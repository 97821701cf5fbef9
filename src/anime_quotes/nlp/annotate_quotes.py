"""
Quote annotation using the OpenAI chat completion API.

Each quote is sent once to the chat model with a fixed prompt asking for a
1-10 sentiment score, a sentiment label and 3-5 theme tags as JSON. The
annotator never raises: network errors, timeouts and malformed responses all
resolve to DEFAULT_ANALYSIS with status "defaulted".
"""

import asyncio
import json
import logging
import math
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from openai import APIConnectionError, APIError, AsyncOpenAI, RateLimitError

from anime_quotes.nlp.rate_limiter import AsyncTokenBucket
from anime_quotes.shared.exceptions import AnnotationError

logger = logging.getLogger(__name__)

# Constants
DEFAULT_MODEL = "gpt-3.5-turbo"
DEFAULT_TEMPERATURE = 0.3
DEFAULT_MAX_TOKENS = 200
DEFAULT_TIMEOUT = 30.0

STATUS_OK = "ok"
STATUS_DEFAULTED = "defaulted"

DEFAULT_ANALYSIS: Dict[str, Any] = {
    "sentiment_score": 5,
    "sentiment_label": "neutral",
    "tags": ["general"],
}

SYSTEM_PROMPT = (
    "You are an expert at analyzing anime quotes for sentiment and themes. "
    "Provide accurate, relevant analysis in the specified JSON format."
)

PROMPT_TEMPLATE = """Analyze the following anime quote and provide:
1. A sentiment score (1-10, where 1 is very negative, 5 is neutral, 10 is very positive)
2. A list of 3-5 relevant tags that describe the theme, emotion, or topic of the quote
3. A brief sentiment label (positive, negative, neutral, mixed)

Quote: "{quote}"
Character: {character}
Anime: {anime}

Please respond in the following JSON format:
{{
  "sentiment_score": number,
  "sentiment_label": "string",
  "tags": ["tag1", "tag2", "tag3"]
}}"""

_CODE_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


@dataclass
class Annotation:
    """Result of annotating one quote."""

    sentiment_score: int
    sentiment_label: str
    tags: List[str] = field(default_factory=list)
    status: str = STATUS_OK
    error: Optional[str] = None

    @property
    def defaulted(self) -> bool:
        return self.status == STATUS_DEFAULTED

    def as_dict(self) -> Dict[str, Any]:
        return {
            "sentiment_score": self.sentiment_score,
            "sentiment_label": self.sentiment_label,
            "tags": list(self.tags),
        }

    @classmethod
    def default(cls, error: Optional[str] = None) -> "Annotation":
        return cls(
            sentiment_score=DEFAULT_ANALYSIS["sentiment_score"],
            sentiment_label=DEFAULT_ANALYSIS["sentiment_label"],
            tags=list(DEFAULT_ANALYSIS["tags"]),
            status=STATUS_DEFAULTED,
            error=error,
        )


def create_openai_client(api_key: str, timeout: float = DEFAULT_TIMEOUT) -> AsyncOpenAI:
    """
    Create the async OpenAI client used for annotation.

    SDK retries are disabled: each quote gets exactly one attempt.

    Raises:
        ValueError: If api_key is empty
    """
    if not api_key:
        raise ValueError("OPENAI_API_KEY not found in environment variables")
    return AsyncOpenAI(api_key=api_key, timeout=timeout, max_retries=0)


def build_prompt(quote: str, character: str, anime: str) -> str:
    """Build the per-quote user prompt."""
    return PROMPT_TEMPLATE.format(quote=quote, character=character, anime=anime)


def parse_analysis(content: Optional[str]) -> Dict[str, Any]:
    """
    Parse and validate the model's JSON answer.

    Args:
        content: Raw message content returned by the chat model

    Returns:
        Dictionary with sentiment_score (int 1-10), sentiment_label
        (lower-case str) and tags (list of str)

    Raises:
        AnnotationError: If the content is not JSON or deviates from the
            expected shape

    Example:
        >>> parse_analysis('{"sentiment_score": 8, "sentiment_label": "Positive", "tags": ["hope"]}')
        {'sentiment_score': 8, 'sentiment_label': 'positive', 'tags': ['hope']}
    """
    if not content or not content.strip():
        raise AnnotationError("Empty response from model")

    text = content.strip()
    fenced = _CODE_FENCE.match(text)
    if fenced:
        text = fenced.group(1)

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise AnnotationError(f"Response is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise AnnotationError(f"Expected JSON object, got {type(data).__name__}")

    score = data.get("sentiment_score")
    # bool is an int subclass
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        raise AnnotationError(f"sentiment_score must be a number, got {score!r}")
    # json.loads accepts NaN and Infinity
    if not math.isfinite(score):
        raise AnnotationError(f"sentiment_score must be finite, got {score!r}")
    score = int(round(score))
    if not 1 <= score <= 10:
        raise AnnotationError(f"sentiment_score out of range 1-10: {score}")

    label = data.get("sentiment_label")
    if not isinstance(label, str) or not label.strip():
        raise AnnotationError(f"sentiment_label must be a non-empty string, got {label!r}")

    tags = data.get("tags")
    if not isinstance(tags, list) or not all(isinstance(tag, str) for tag in tags):
        raise AnnotationError(f"tags must be a list of strings, got {tags!r}")

    return {
        "sentiment_score": score,
        "sentiment_label": label.strip().lower(),
        "tags": tags,
    }


async def _request_analysis(
    client: AsyncOpenAI,
    quote: str,
    character: str,
    anime: str,
    model: str,
    temperature: float,
    max_tokens: int,
) -> Optional[str]:
    response = await client.chat.completions.create(
        model=model,
        messages=[
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": build_prompt(quote, character, anime)},
        ],
        temperature=temperature,
        max_tokens=max_tokens,
    )
    if not response.choices:
        return None
    return response.choices[0].message.content


async def annotate(
    client: AsyncOpenAI,
    quote: str,
    character: str,
    anime: str,
    *,
    model: str = DEFAULT_MODEL,
    temperature: float = DEFAULT_TEMPERATURE,
    max_tokens: int = DEFAULT_MAX_TOKENS,
    timeout: float = DEFAULT_TIMEOUT,
    rate_limiter: Optional[AsyncTokenBucket] = None,
) -> Annotation:
    """
    Annotate a single quote with sentiment score, label and tags.

    Makes one chat completion request bounded by `timeout` seconds. Any
    failure is logged and downgraded to Annotation.default().

    Args:
        client: AsyncOpenAI client instance
        quote: Quote text
        character: Character who says the quote
        anime: Source anime title
        model: Chat model name
        temperature: Sampling temperature (low for repeatable labels)
        max_tokens: Output token budget
        timeout: Per-call timeout in seconds
        rate_limiter: Optional token bucket acquired before the call

    Returns:
        Annotation with status "ok", or the default annotation with status
        "defaulted"
    """
    try:
        if rate_limiter is not None:
            await rate_limiter.acquire()
        content = await asyncio.wait_for(
            _request_analysis(client, quote, character, anime, model, temperature, max_tokens),
            timeout=timeout,
        )
        analysis = parse_analysis(content)
    except asyncio.TimeoutError:
        logger.warning(f"Error analyzing quote: timed out after {timeout}s")
        return Annotation.default(error=f"timeout after {timeout}s")
    except RateLimitError as e:
        logger.warning(f"Error analyzing quote: rate limit hit: {e}")
        return Annotation.default(error=str(e))
    except (APIConnectionError, APIError) as e:
        logger.warning(f"Error analyzing quote: API error: {e}")
        return Annotation.default(error=str(e))
    except AnnotationError as e:
        logger.warning(f"Error analyzing quote: {e}")
        return Annotation.default(error=str(e))
    except Exception as e:
        logger.error(f"Unexpected error analyzing quote: {e}")
        return Annotation.default(error=str(e))

    return Annotation(
        sentiment_score=analysis["sentiment_score"],
        sentiment_label=analysis["sentiment_label"],
        tags=analysis["tags"],
    )
