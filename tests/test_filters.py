"""
Tests for topic-based post filtering.
"""

from moodblog.filters import filter_posts, matches_topic, post_haystack
from moodblog.models import PostSummary


def _post(slug, title, excerpt="", category=None):
    return PostSummary(slug=slug, title=title, excerpt=excerpt, category=category)


class TestFilterPosts:
    """Test suite for filter_posts."""

    def setup_method(self):
        self.mars = _post("mars", "Mars Dreams", "exploring space", "space")
        self.budget = _post("budget", "Budget Tips", "saving money", "finance")
        self.love = _post("love", "First Love", "notes on vulnerability", "relationships")

    def test_keeps_only_matching_posts(self):
        assert filter_posts([self.mars, self.budget], ["space"]) == [self.mars]

    def test_empty_topics_return_nothing(self):
        """Callers must special-case an empty mood before filtering."""
        assert filter_posts([self.mars, self.budget], []) == []

    def test_preserves_order(self):
        posts = [self.love, self.budget, self.mars]
        assert filter_posts(posts, ["space", "love"]) == [self.love, self.mars]

    def test_any_topic_matches(self):
        assert filter_posts([self.budget, self.love], ["cars", "money"]) == [self.budget]

    def test_topic_case_is_ignored(self):
        assert filter_posts([self.mars], ["SPACE"]) == [self.mars]

    def test_haystack_includes_category(self):
        assert post_haystack(self.budget) == "budget tips saving money finance"
        assert filter_posts([self.budget], ["finance"]) == [self.budget]

    def test_missing_category(self):
        post = _post("x", "Quiet", "morning walk")
        assert post_haystack(post) == "quiet morning walk "

    def test_topic_containing_first_word_matches(self):
        """'electric cars' is not in the post, but contains the post's first word."""
        post = _post("cars", "Cars")
        assert matches_topic(post, "electric cars")

    def test_short_first_word_over_matches(self):
        """Known false positive: a post starting with 'a' matches any topic containing 'a'."""
        post = _post("quiet", "A Quiet Morning", "coffee and birds")
        assert filter_posts([post], ["space"]) == [post]
