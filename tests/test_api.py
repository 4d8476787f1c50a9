"""
End-to-end tests for the Moodblog API endpoints.

These tests verify theme persistence, mood submission and broadcast, and the
two post-filtering policies: the listing falls back to every post, a post's
suggestion panel does not.
"""

import asyncio
import shutil
import tempfile
from pathlib import Path

from fakes import FakeBackend
from fastapi.testclient import TestClient

from moodblog.content import ContentStore
from moodblog.server import NO_SUGGESTIONS_MESSAGE, create_app
from moodblog.session import THEME_COOKIE, MoodSession

POSTS = {
    "mars-dreams.md": (
        "---\ntitle: Mars Dreams\ndate: 2024-03-01\ncategory: space\n"
        "excerpt: exploring space\n---\nRed dust and **big** skies.\n"
    ),
    "budget-tips.md": (
        "---\ntitle: Budget Tips\ndate: 2024-02-01\ncategory: finance\n"
        "excerpt: saving money\n---\nSpend less.\n"
    ),
    "first-love.md": (
        "---\ntitle: First Love\ndate: 2024-01-01\ncategory: relationships\n"
        "---\nNotes on vulnerability.\n"
    ),
}


class APITestCase:
    """Fresh content directory, session and app for each test."""

    def make_backend(self):
        return None

    def setup_method(self):
        self.content_dir = Path(tempfile.mkdtemp())
        for name, text in POSTS.items():
            (self.content_dir / name).write_text(text, encoding="utf-8")
        self.session = MoodSession(self.make_backend())
        self.app = create_app(ContentStore(self.content_dir), self.session)

    def teardown_method(self):
        shutil.rmtree(self.content_dir, ignore_errors=True)


# MARK: - Themes


class TestThemes(APITestCase):
    def test_health(self):
        with TestClient(self.app) as client:
            assert client.get("/").json() == {"status": "ok", "service": "moodblog"}

    def test_default_theme(self):
        with TestClient(self.app) as client:
            response = client.get("/theme")
            assert response.status_code == 200
            assert response.json()["theme"] == "beach"
            assert response.json()["descriptor"]["name"] == "Beach"

    def test_theme_restored_from_cookie(self):
        with TestClient(self.app) as client:
            client.cookies.set(THEME_COOKIE, "space")
            assert client.get("/theme").json()["theme"] == "space"

            client.cookies.set(THEME_COOKIE, "not-a-theme")
            assert client.get("/theme").json()["theme"] == "beach"

    def test_explicit_switch(self):
        with TestClient(self.app) as client:
            response = client.put("/theme", json={"theme": "kids"})
            assert response.status_code == 200
            assert response.cookies.get(THEME_COOKIE) == "kids"
            assert client.get("/theme").json()["theme"] == "kids"

    def test_unknown_theme_rejected(self):
        with TestClient(self.app) as client:
            assert client.put("/theme", json={"theme": "purple"}).status_code == 422

    def test_list_themes(self):
        with TestClient(self.app) as client:
            themes = client.get("/themes").json()
            assert list(themes)[:3] == ["beach", "autumn", "space"]
            assert len(themes) == 10


# MARK: - Moods


class TestMood(APITestCase):
    def test_complete_workflow(self):
        """Submit -> theme cookie updated -> empty mood leaves it but is broadcast."""
        with TestClient(self.app) as client:
            response = client.put("/mood", json={"mood": "I feel so angry and frustrated"})
            assert response.status_code == 200
            result = response.json()
            assert result["theme"] == "pastel"
            assert result["changed"] is True
            assert result["source"] == "heuristic"
            assert response.cookies.get(THEME_COOKIE) == "pastel"
            assert client.get("/theme").json()["theme"] == "pastel"

            cleared = client.put("/mood", json={"mood": ""})
            assert cleared.status_code == 200
            assert cleared.json()["theme"] == "pastel"
            assert cleared.json()["changed"] is False

            assert asyncio.run(self.session.channel.read()).prompt == ""

    def test_busy_rejects_submission(self):
        with TestClient(self.app) as client:
            self.session.busy = True
            response = client.put("/mood", json={"mood": "sad"})
            assert response.status_code == 409


class TestMoodWithBackend(APITestCase):
    def make_backend(self):
        return FakeBackend(responses=["  SPACE!! \n"])

    def test_generative_theme(self):
        with TestClient(self.app) as client:
            result = client.put("/mood", json={"mood": "everything feels pointless"}).json()
            assert result["theme"] == "space"
            assert result["source"] == "generative"

    def test_backend_status(self):
        with TestClient(self.app) as client:
            status = client.post("/backend/initialize").json()
            assert status["ready"] is True
            assert client.get("/backend/status").json()["busy"] is False


# MARK: - Posts


class TestPosts(APITestCase):
    def test_listing_without_mood(self):
        with TestClient(self.app) as client:
            result = client.get("/posts").json()
            assert [p["slug"] for p in result["posts"]] == [
                "mars-dreams",
                "budget-tips",
                "first-love",
            ]
            assert result["filtering_active"] is False
            assert result["topics"] == []

    def test_listing_filtered_by_mood(self):
        with TestClient(self.app) as client:
            result = client.get("/posts", params={"mood": "feeling sad"}).json()
            assert result["topics"] == ["love", "sports", "space"]
            assert result["filtering_active"] is True
            assert [p["slug"] for p in result["posts"]] == ["mars-dreams", "first-love"]

    def test_listing_falls_back_when_nothing_matches(self):
        """An unmatched mood shows every post rather than an empty page."""
        with TestClient(self.app) as client:
            result = client.get("/posts", params={"mood": "lost and confused"}).json()
            assert result["topics"] == ["politics", "faith", "psychology"]
            assert result["filtering_active"] is True
            assert len(result["posts"]) == 3

    def test_post_detail(self):
        with TestClient(self.app) as client:
            result = client.get("/posts/mars-dreams").json()
            assert result["post"]["title"] == "Mars Dreams"
            assert "<strong>big</strong>" in result["post"]["html"]
            assert result["theme"] == "beach"

    def test_missing_post(self):
        with TestClient(self.app) as client:
            assert client.get("/posts/nope").status_code == 404
            assert client.get("/posts/nope/suggestions").status_code == 404

    def test_suggestions_hidden_without_mood(self):
        with TestClient(self.app) as client:
            result = client.get("/posts/mars-dreams/suggestions").json()
            assert result["show_suggestions"] is False
            assert result["posts"] == []

    def test_suggestions_exclude_current_post(self):
        with TestClient(self.app) as client:
            result = client.get(
                "/posts/mars-dreams/suggestions", params={"mood": "feeling sad"}
            ).json()
            assert result["show_suggestions"] is True
            assert [p["slug"] for p in result["posts"]] == ["first-love"]
            assert result["message"] is None

    def test_suggestions_do_not_fall_back(self):
        """Unlike the listing, an unmatched mood leaves the panel empty."""
        with TestClient(self.app) as client:
            result = client.get(
                "/posts/mars-dreams/suggestions", params={"mood": "lost"}
            ).json()
            assert result["show_suggestions"] is True
            assert result["posts"] == []
            assert result["message"] == NO_SUGGESTIONS_MESSAGE


# MARK: - Express


class TestExpress(APITestCase):
    def test_card_form(self):
        with TestClient(self.app) as client:
            result = client.post("/express", json={"prompt": "birthday card for my sister"}).json()
            assert result["style"] == "bold"
            assert [c["key"] for c in result["components"]] == ["recipient", "specialDate"]
