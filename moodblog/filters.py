"""
Topic-based post filtering.

Matching is a loose, bidirectional substring test. A post matches a topic if
its text contains the topic, or if the topic contains the first word of the
post's text. The second half lets short topics like "mars" pick up a post
titled "Mars", but it also over-matches when a post starts with a very short
word ("a", "i") that happens to occur inside the topic.

Empty topic lists yield no posts here. Callers that want "show everything"
for an empty mood must check for that before filtering.
"""

from collections.abc import Sequence
from typing import TypeVar

from .models import PostSummary

P = TypeVar("P", bound=PostSummary)


def post_haystack(post: PostSummary) -> str:
    """Lower-cased title, excerpt and category of a post."""
    return f"{post.title} {post.excerpt} {post.category or ''}".lower()


def matches_topic(post: PostSummary, topic: str) -> bool:
    haystack = post_haystack(post)
    topic = topic.lower()
    if topic in haystack:
        return True

    words = haystack.split()
    return bool(words) and words[0] in topic


def filter_posts(posts: Sequence[P], topics: Sequence[str]) -> list[P]:
    """Return the posts matching any topic, in their original order."""
    return [post for post in posts if any(matches_topic(post, t) for t in topics)]
