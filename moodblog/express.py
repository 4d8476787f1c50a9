"""
Express cards: turn a free-text wish into a card form and a visual style.

"A birthday card for my sister, I feel so grateful" yields a recipient field,
a date field, a feelings field with a generated message, and a bold style.
Everything is keyword driven; the only randomness is which variation of a
style is shown, and its source is injectable.
"""

import logging
import random
from types import MappingProxyType
from typing import Literal

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)

CardStyle = Literal["minimal", "warm", "soft", "bold"]


class FormComponent(BaseModel):
    type: Literal["text", "date", "textarea", "generated-text"]
    key: str
    label: str
    placeholder: str = ""
    required: bool = False
    rows: int | None = None
    depends_on: str | None = None


class StyleVariation(BaseModel):
    model_config = ConfigDict(frozen=True)

    bg: str
    text: str
    accent: str


class CardForm(BaseModel):
    prompt: str
    style: CardStyle
    variation: StyleVariation
    components: list[FormComponent]


BOLD_KEYWORDS = (
    "love", "celebrate", "excited", "proud", "amazing", "birthday", "congratulat",
    "awesome", "fantastic", "wonderful", "achievement", "success", "victory",
    "win", "champion", "best", "incredible", "party", "graduation", "wedding",
    "anniversary", "milestone", "joy", "happy", "thrilled", "elated", "brilliant",
)

WARM_KEYWORDS = (
    "comfort", "support", "family", "friend", "cozy", "warm", "home", "grateful",
    "thank", "appreciate", "welcome", "caring", "kind", "sweet", "mother",
    "father", "sister", "brother", "togetherness", "friendship", "community",
    "belonging", "embrace", "hug", "love you",
)

SOFT_KEYWORDS = (
    "sorry", "gentle", "soft", "care", "sympathy", "peaceful", "calm", "miss",
    "apologize", "forgive", "understand", "tender", "delicate", "quiet",
    "serene", "soothe", "comfort", "heal", "think of you", "remember",
    "farewell", "goodbye", "condolence",
)

STYLE_VARIATIONS: MappingProxyType[str, tuple[StyleVariation, ...]] = MappingProxyType(
    {
        "minimal": (
            StyleVariation(bg="bg-white border border-gray-200", text="text-gray-800", accent="text-gray-600"),
            StyleVariation(bg="bg-gray-50 border border-gray-300", text="text-gray-900", accent="text-gray-700"),
            StyleVariation(bg="bg-slate-100 border border-slate-300", text="text-slate-800", accent="text-slate-600"),
            StyleVariation(bg="bg-stone-50 border border-stone-200", text="text-stone-800", accent="text-stone-600"),
        ),
        "warm": (
            StyleVariation(bg="bg-gradient-to-br from-orange-100 to-red-100 border border-orange-200", text="text-orange-900", accent="text-orange-700"),
            StyleVariation(bg="bg-gradient-to-br from-amber-100 to-orange-200 border border-amber-300", text="text-amber-900", accent="text-amber-700"),
            StyleVariation(bg="bg-gradient-to-br from-yellow-100 to-orange-100 border border-yellow-300", text="text-yellow-900", accent="text-yellow-700"),
            StyleVariation(bg="bg-gradient-to-br from-rose-100 to-pink-100 border border-rose-200", text="text-rose-900", accent="text-rose-700"),
        ),
        "soft": (
            StyleVariation(bg="bg-gradient-to-br from-blue-100 to-green-100 border border-blue-200", text="text-blue-900", accent="text-blue-700"),
            StyleVariation(bg="bg-gradient-to-br from-purple-100 to-pink-100 border border-purple-200", text="text-purple-900", accent="text-purple-700"),
            StyleVariation(bg="bg-gradient-to-br from-teal-100 to-cyan-100 border border-teal-200", text="text-teal-900", accent="text-teal-700"),
            StyleVariation(bg="bg-gradient-to-br from-green-100 to-emerald-100 border border-green-200", text="text-green-900", accent="text-green-700"),
        ),
        "bold": (
            StyleVariation(bg="bg-gradient-to-br from-purple-400 to-pink-400 border border-purple-300", text="text-white", accent="text-purple-100"),
            StyleVariation(bg="bg-gradient-to-br from-blue-500 to-purple-500 border border-blue-300", text="text-white", accent="text-blue-100"),
            StyleVariation(bg="bg-gradient-to-br from-red-400 to-pink-500 border border-red-300", text="text-white", accent="text-red-100"),
            StyleVariation(bg="bg-gradient-to-br from-indigo-500 to-purple-600 border border-indigo-300", text="text-white", accent="text-indigo-100"),
            StyleVariation(bg="bg-gradient-to-br from-emerald-400 to-cyan-400 border border-emerald-300", text="text-white", accent="text-emerald-100"),
        ),
    }
)

# (keywords, message) checked in order
_DESCRIPTIONS = (
    (("grateful", "thankful"), "I am deeply grateful for your presence in my life. Your kindness and support mean the world to me."),
    (("miss", "far"), "Even though we're apart, you're always in my thoughts. Distance can't diminish how much you mean to me."),
    (("proud",), "I am so incredibly proud of you and all that you've accomplished. You inspire me every day."),
    (("love",), "My love for you grows stronger each day. You bring so much joy and meaning to my life."),
    (("sorry", "apologize"), "I want you to know how truly sorry I am. Your forgiveness would mean everything to me."),
    (("happy", "joy"), "You bring such happiness and light into my life. Thank you for being exactly who you are."),
)
DEFAULT_DESCRIPTION = "Your impact on my life is immeasurable. I wanted you to know how much you mean to me."


def _mentions(text: str, *keywords: str) -> bool:
    return any(keyword in text for keyword in keywords)


def generate_form_components(prompt: str) -> list[FormComponent]:
    """Build the card form fields a wish asks for."""
    text = prompt.lower()
    components = [
        FormComponent(
            type="text",
            key="recipient",
            label="Who is this for?",
            placeholder="e.g., my best friend, mom, partner...",
            required=True,
        )
    ]

    if _mentions(text, "birthday", "date", "anniversary", "celebration"):
        components.append(
            FormComponent(type="date", key="specialDate", label="Special Date", placeholder="Select the important date")
        )

    if _mentions(text, "name", "called", "named"):
        components.append(
            FormComponent(type="text", key="personName", label="Their Name", placeholder="Enter their name")
        )

    if _mentions(text, "feeling", "emotion", "mood", "sad", "happy", "love", "grateful", "sorry"):
        components.append(
            FormComponent(
                type="textarea",
                key="feelings",
                label="Describe Your Feelings",
                placeholder="How are you feeling about them or this situation?",
                rows=3,
            )
        )
        components.append(
            FormComponent(
                type="generated-text",
                key="description",
                label="Generated Message",
                placeholder="A thoughtful message will be generated based on your feelings...",
                depends_on="feelings",
            )
        )

    if _mentions(text, "message", "tell", "say", "express"):
        components.append(
            FormComponent(
                type="textarea",
                key="personalMessage",
                label="Your Personal Message",
                placeholder="What do you want to tell them?",
                rows=4,
                required=True,
            )
        )

    if _mentions(text, "memory", "remember", "occasion", "moment"):
        components.append(
            FormComponent(
                type="textarea",
                key="memory",
                label="Special Memory or Occasion",
                placeholder="Describe the memory or occasion...",
                rows=3,
            )
        )

    # Only the recipient so far
    if len(components) == 1:
        components.append(
            FormComponent(
                type="textarea",
                key="message",
                label="Your Message",
                placeholder="What would you like to express?",
                rows=4,
                required=True,
            )
        )

    return components


def detect_card_style(prompt: str) -> CardStyle:
    """
    Classify a wish as bold, warm, soft or minimal.

    The style with the most keyword hits wins, ties going bold, then warm,
    then soft. Without any hits a few contextual cues are checked before
    settling on minimal.
    """
    text = prompt.lower()
    scores = {
        "bold": sum(1 for k in BOLD_KEYWORDS if k in text),
        "warm": sum(1 for k in WARM_KEYWORDS if k in text),
        "soft": sum(1 for k in SOFT_KEYWORDS if k in text),
    }
    best = max(scores.values())
    if best > 0:
        for style in ("bold", "warm", "soft"):
            if scores[style] == best:
                logger.debug("Card style %s with %d matches", style, best)
                return style

    if _mentions(text, "get well", "feel better"):
        return "soft"
    if _mentions(text, "thanksgiving", "christmas", "holiday"):
        return "warm"
    if _mentions(text, "!", "wow", "yay"):
        return "bold"
    return "minimal"


def choose_style_variation(
    style: str, rng: random.Random | None = None
) -> StyleVariation:
    """Pick one visual variation of a style at random."""
    variations = STYLE_VARIATIONS.get(style, STYLE_VARIATIONS["minimal"])
    return (rng or random).choice(variations)


def generate_description(feelings: str) -> str:
    """Canned card message for the feelings a sender describes."""
    if not feelings:
        return ""
    text = feelings.lower()
    for keywords, message in _DESCRIPTIONS:
        if _mentions(text, *keywords):
            return message
    return DEFAULT_DESCRIPTION


def build_card_form(prompt: str, rng: random.Random | None = None) -> CardForm:
    """Build the complete card form for a wish; an empty wish gets an empty form."""
    prompt = prompt.strip()
    if not prompt:
        return CardForm(
            prompt="",
            style="minimal",
            variation=STYLE_VARIATIONS["minimal"][0],
            components=[],
        )

    style = detect_card_style(prompt)
    return CardForm(
        prompt=prompt,
        style=style,
        variation=choose_style_variation(style, rng),
        components=generate_form_components(prompt),
    )
