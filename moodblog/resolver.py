"""
Mood resolution for the Moodblog service.

A mood is resolved to a theme identifier and, independently, to up to three
topic keywords. Each resolution has two branches: a generative attempt
against an optional backend, and a deterministic keyword heuristic that is
always available. The theme is chosen to counterbalance the mood (a sad mood
gets an uplifting theme) while topics are chosen for relevance, so the two
results are not expected to agree with each other.

Nothing in this module raises to its caller.
"""

import logging
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from .backend import GenerativeBackend
from .models import ThemeSelection, TopicSuggestion
from .themes import DEFAULT_THEME, THEME_TRIGGERS, THEMES, ThemeDescriptor
from .topics import DEFAULT_TOPICS, MAX_TOPICS, MOOD_TOPIC_GROUPS, TOPIC_CATALOGUE

logger = logging.getLogger(__name__)

THEME_MAX_TOKENS = 200
TOPICS_MAX_TOKENS = 50
TEMPERATURE = 0.7

COMPENSATORY_POLICY = """\
COMPENSATORY LOGIC:
- If they're SAD/DEPRESSED -> beach (bright, uplifting)
- If they're ANGRY/FRUSTRATED -> pastel (calming, gentle)
- If they're ANXIOUS/STRESSED -> beach or desert (peaceful)
- If they're LONELY/ISOLATED -> autumn (cozy, warm)
- If they're OVERWHELMED/CHAOTIC -> desert (minimal, zen)
- If they're FEELING SMALL/INSIGNIFICANT -> space (vast, inspiring)
- If they're UNFOCUSED/PLAYFUL but need to work -> dark or corporate (serious, productive)
- If they're HARSH/CRITICAL -> pastel (gentle, soft)
- If they're BORED/ROUTINE -> festive (exciting, celebratory)
- If they're TOO SERIOUS/RIGID -> kids (playful, fun)
- If they're TECH OVERWHELMED/URBAN FATIGUE -> rainforest (natural, grounding)
- If they're UNSTRUCTURED/CASUAL but need discipline -> corporate (structured)"""

_NON_LETTERS = re.compile(r"[^a-z]")


@dataclass(frozen=True)
class GenerativeResult:
    """Outcome of one generative attempt. `value` is None on any failure."""

    value: str | list[str] | None = None
    error: str | None = None


# MARK: - Prompt Builders


def build_theme_prompt(
    text: str, themes: Mapping[str, ThemeDescriptor] = THEMES
) -> str:
    """Build the theme-selection prompt for a mood."""
    catalogue = "\n".join(
        f"- {identifier} ({theme.description})" for identifier, theme in themes.items()
    )
    return (
        "You are a therapeutic web design expert. Based on the user's mood/prompt, "
        "select a theme that will COMPENSATE and IMPROVE their emotional state, "
        "not match it.\n\n"
        f"Available themes:\n{catalogue}\n\n"
        f"{COMPENSATORY_POLICY}\n\n"
        f'User prompt: "{text}"\n\n'
        "Analyze their emotional state and select the theme that will HELP and "
        "UPLIFT them, not mirror their current mood.\n\n"
        "Return ONLY the theme name (one word):"
    )


def build_topics_prompt(
    text: str, catalogue: Sequence[Sequence[str]] = TOPIC_CATALOGUE
) -> str:
    """Build the topic-suggestion prompt for a mood."""
    topics = "\n".join(f"- {', '.join(group)}" for group in catalogue)
    return (
        f'Based on the user\'s mood/prompt: "{text}"\n\n'
        f"Suggest exactly {MAX_TOPICS} blog topic keywords that would be most "
        "relevant and helpful for someone in this emotional state. Focus on "
        "topics that could:\n"
        "- Provide comfort, insight, or perspective\n"
        "- Help them process their feelings\n"
        "- Offer practical advice or inspiration\n"
        "- Connect to their current mental/emotional state\n\n"
        f"Available blog topics/themes:\n{topics}\n\n"
        f"Respond with ONLY {MAX_TOPICS} topic keywords, separated by commas, "
        "no explanations.\n"
        'Example: "love, space, sports"'
    )


# MARK: - Response Parsers


def extract_theme_token(raw: str) -> str | None:
    """
    Pull a theme identifier out of a raw backend response.

    The response is trimmed, lower-cased and stripped of every non-letter.
    Anything that does not then equal a known identifier is rejected.
    """
    token = _NON_LETTERS.sub("", raw.strip().lower())
    return token if token in THEMES else None


def parse_topics(raw: str) -> list[str]:
    """Split a comma-separated backend response into at most three topics."""
    topics = [segment.strip().lower() for segment in raw.split(",")]
    return [topic for topic in topics if topic][:MAX_TOPICS]


# MARK: - Heuristics


def score_themes(text: str) -> dict[str, int]:
    """Count trigger keywords present in the text, per theme."""
    folded = text.casefold()
    return {
        theme: sum(1 for keyword in keywords if keyword in folded)
        for theme, keywords in THEME_TRIGGERS.items()
    }


def heuristic_theme(text: str) -> str:
    """Pick the theme with the strictly highest score; ties go to the first declared."""
    best, best_score = DEFAULT_THEME, 0
    for theme, score in score_themes(text).items():
        if score > best_score:
            best, best_score = theme, score

    logger.debug("Best keyword match: %s (score: %d)", best, best_score)
    return best


def heuristic_topics(text: str) -> list[str]:
    """Return the topics of the first mood group the text mentions."""
    folded = text.casefold()
    for keywords, topics in MOOD_TOPIC_GROUPS:
        if any(keyword in folded for keyword in keywords):
            return list(topics)
    return list(DEFAULT_TOPICS)


# MARK: - Generative Branch


async def generate_theme(text: str, backend: GenerativeBackend) -> GenerativeResult:
    """Ask the backend for a theme. Never raises; no retries."""
    try:
        raw = await backend.complete(
            build_theme_prompt(text), THEME_MAX_TOKENS, TEMPERATURE
        )
        theme = extract_theme_token(raw)
    except Exception as e:
        logger.warning("AI theme generation failed: %s", e)
        return GenerativeResult(error=str(e) or type(e).__name__)

    if theme is None:
        logger.info("Backend returned no known theme: %r", raw)
    return GenerativeResult(value=theme)


async def generate_topics(text: str, backend: GenerativeBackend) -> GenerativeResult:
    """Ask the backend for topic keywords. Never raises; no retries."""
    try:
        raw = await backend.complete(
            build_topics_prompt(text), TOPICS_MAX_TOKENS, TEMPERATURE
        )
        topics = parse_topics(raw)
    except Exception as e:
        logger.warning("AI suggestion generation failed: %s", e)
        return GenerativeResult(error=str(e) or type(e).__name__)

    if not topics:
        logger.info("Backend returned no usable topics: %r", raw)
    return GenerativeResult(value=topics or None)


# MARK: - Resolution


def _usable(backend: GenerativeBackend | None) -> bool:
    if backend is None:
        return False
    try:
        return backend.is_ready()
    except Exception as e:
        logger.warning("Backend readiness check failed: %s", e)
        return False


async def select_theme(
    text: str, backend: GenerativeBackend | None = None
) -> ThemeSelection:
    """
    Resolve a mood to a theme, reporting which branch produced it.

    Args:
        text: The mood text; callers skip resolution for empty input
        backend: Optional generative backend, used only if ready

    Returns:
        A ThemeSelection whose theme is always a known identifier
    """
    error = None
    if _usable(backend):
        result = await generate_theme(text, backend)
        if isinstance(result.value, str):
            logger.info("Generative theme selected: %s", result.value)
            return ThemeSelection(theme=result.value, source="generative")
        error = result.error

    theme = heuristic_theme(text)
    logger.info("Heuristic theme selected: %s", theme)
    return ThemeSelection(theme=theme, source="heuristic", error=error)


async def resolve_theme(text: str, backend: GenerativeBackend | None = None) -> str:
    """Resolve a mood to a theme identifier."""
    return (await select_theme(text, backend)).theme


async def suggest_topics(
    text: str, backend: GenerativeBackend | None = None
) -> TopicSuggestion:
    """
    Resolve a mood to at most three topic keywords.

    Empty or whitespace-only input yields no suggestions and never reaches
    the backend.
    """
    if not text.strip():
        return TopicSuggestion()

    if _usable(backend):
        result = await generate_topics(text, backend)
        if isinstance(result.value, list):
            return TopicSuggestion(topics=result.value, source="generative")

    return TopicSuggestion(topics=heuristic_topics(text), source="heuristic")


async def resolve_topics(
    text: str, backend: GenerativeBackend | None = None
) -> list[str]:
    """Resolve a mood to a list of zero to three topic keywords."""
    return (await suggest_topics(text, backend)).topics
