"""
Static topic registry.

Topic keywords are offered to the generative backend as a catalogue and
returned directly by the heuristic fallback.
"""

MAX_TOPICS = 3

TOPIC_CATALOGUE: tuple[tuple[str, ...], ...] = (
    ("politics", "democracy", "government"),
    ("cars", "mobility", "transportation", "electric vehicles"),
    ("love", "relationships", "vulnerability", "digital age"),
    ("faith", "spirituality", "divine", "paradox"),
    ("mars", "space", "psychology", "exploration"),
    ("sports", "character", "community", "psychology"),
    ("art", "compromise", "everyday moments"),
    ("future", "technology", "dreams"),
)

# Checked in order; the first group with any keyword present wins.
MOOD_TOPIC_GROUPS: tuple[tuple[tuple[str, ...], tuple[str, str, str]], ...] = (
    (("sad", "down", "depressed"), ("love", "sports", "space")),
    (("angry", "frustrated", "mad"), ("faith", "art", "everyday")),
    (("anxious", "worried", "stress"), ("space", "faith", "love")),
    (("lonely", "isolated", "alone"), ("love", "community", "sports")),
    (("excited", "happy", "great"), ("future", "space", "cars")),
    (("confused", "lost", "uncertain"), ("politics", "faith", "psychology")),
)

DEFAULT_TOPICS: tuple[str, str, str] = ("love", "space", "psychology")
