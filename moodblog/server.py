"""
FastAPI server for the Moodblog service.

This module implements the HTTP API for posts, themes and moods, and the
Server-Sent Events stream that broadcasts every submitted mood. It is also
where the two post-filtering policies live: the listing falls back to every
post when a mood matches nothing, while a post's suggestion panel stays
empty.
"""

import asyncio
import json
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import Cookie, FastAPI, HTTPException, Query, Response
from fastapi.responses import StreamingResponse
from pydantic import BaseModel, Field, field_validator

from . import __version__
from .backend import ChatCompletionBackend
from .config import Settings, setup_logging
from .content import ContentStore, PostNotFound
from .express import CardForm, build_card_form
from .filters import filter_posts
from .models import Post, PostSummary
from .session import (
    THEME_COOKIE,
    BackendStatus,
    MoodOutcome,
    MoodSession,
    SessionBusy,
    ThemeContext,
)
from .themes import THEMES, ThemeDescriptor, is_theme

logger = logging.getLogger(__name__)

MAX_SUGGESTED_POSTS = 3
NO_SUGGESTIONS_MESSAGE = "No related posts found. Try expressing a different mood!"


# API Request/Response Schemas
class MoodUpdate(BaseModel):
    """Payload for mood submissions."""

    mood: str = Field(..., description="Free-text mood; empty clears filters")


class ThemeUpdate(BaseModel):
    """Payload for explicit theme switches."""

    theme: str = Field(..., description="A known theme identifier")

    @field_validator("theme")
    @classmethod
    def known_theme(cls, value: str) -> str:
        if not is_theme(value):
            raise ValueError(f"unknown theme: {value}")
        return value


class ExpressRequest(BaseModel):
    prompt: str = Field("", description="What the visitor wants to express")


class ThemeResponse(BaseModel):
    theme: str
    descriptor: ThemeDescriptor


class PostListResponse(BaseModel):
    theme: str
    topics: list[str]
    filtering_active: bool
    posts: list[PostSummary]


class PostResponse(BaseModel):
    theme: str
    post: Post


class SuggestionResponse(BaseModel):
    topics: list[str]
    show_suggestions: bool
    posts: list[PostSummary]
    message: str | None = None


def _theme_response(context: ThemeContext) -> ThemeResponse:
    return ThemeResponse(theme=context.identifier, descriptor=context.descriptor)


def create_app(store: ContentStore, session: MoodSession | None = None) -> FastAPI:
    """
    Create a FastAPI application over the given content store.

    Args:
        store: Where posts are read from
        session: Mood session holding the backend and mood channel; a
            heuristic-only session is created when omitted

    Returns:
        Configured FastAPI application
    """
    session = session or MoodSession()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Lifespan context manager for FastAPI application."""
        yield
        aclose = getattr(session.backend, "aclose", None)
        if aclose is not None:
            await aclose()

    app = FastAPI(
        title="Moodblog",
        description="A personal blog with mood-driven theming",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.session = session

    @app.get("/")
    async def root() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "service": "moodblog"}

    # MARK: - Themes

    @app.get("/themes")
    async def list_themes() -> dict[str, ThemeDescriptor]:
        return dict(THEMES)

    @app.get("/theme")
    async def get_theme(
        blog_theme: str | None = Cookie(None, alias=THEME_COOKIE),
    ) -> ThemeResponse:
        """Get the active theme restored from the visitor's preference."""
        return _theme_response(ThemeContext.from_preference(blog_theme))

    @app.put("/theme")
    async def set_theme(update: ThemeUpdate, response: Response) -> ThemeResponse:
        """Switch theme explicitly and remember the choice."""
        response.set_cookie(THEME_COOKIE, update.theme)
        return _theme_response(ThemeContext(identifier=update.theme))

    # MARK: - Moods

    @app.put("/mood")
    async def submit_mood(
        mood_update: MoodUpdate,
        response: Response,
        blog_theme: str | None = Cookie(None, alias=THEME_COOKIE),
    ) -> MoodOutcome:
        """
        Broadcast a mood and resolve it to a theme.

        Returns:
            The resolution outcome; the theme cookie is updated when the
            theme changed

        Raises:
            HTTPException: 409 while a previous mood is still being resolved
        """
        context = ThemeContext.from_preference(blog_theme)
        try:
            outcome = await session.submit(mood_update.mood, context)
        except SessionBusy as e:
            raise HTTPException(status_code=409, detail=str(e))

        if outcome.changed:
            response.set_cookie(THEME_COOKIE, outcome.theme)
        return outcome

    @app.get("/mood/stream")
    async def stream_mood() -> StreamingResponse:
        """
        Stream mood submissions via Server-Sent Events.

        The latest mood is sent immediately upon connection.

        Returns:
            StreamingResponse with text/event-stream content type
        """

        async def event_generator() -> AsyncGenerator[str, None]:
            """Generate SSE events for mood submissions."""
            try:
                async with session.channel.stream() as mood_stream:
                    async for event in mood_stream:
                        data = json.dumps(event.model_dump())
                        yield f"data: {data}\n\n"
            except asyncio.CancelledError:
                # Client disconnected
                pass
            except Exception as e:
                logger.exception("Mood stream failed")
                error_data = json.dumps({"error": str(e)})
                yield f"event: error\ndata: {error_data}\n\n"

        return StreamingResponse(
            event_generator(),
            media_type="text/event-stream",
            headers={
                "Cache-Control": "no-cache",
                "Connection": "keep-alive",
                "Access-Control-Allow-Origin": "*",
                "Access-Control-Allow-Headers": "*",
            },
        )

    # MARK: - Posts

    @app.get("/posts")
    async def list_posts(
        mood: str = Query("", description="Mood to filter by"),
        blog_theme: str | None = Cookie(None, alias=THEME_COOKIE),
    ) -> PostListResponse:
        """
        List posts, optionally filtered by a mood.

        An empty mood shows every post. A mood whose topics match no post
        also shows every post, with filtering still reported as active.
        """
        context = ThemeContext.from_preference(blog_theme)
        posts = store.list_posts()
        topics = await session.suggest(mood)

        if not topics:
            return PostListResponse(
                theme=context.identifier, topics=[], filtering_active=False, posts=posts
            )

        filtered = filter_posts(posts, topics)
        logger.info("Filtered posts: %d out of %d", len(filtered), len(posts))
        return PostListResponse(
            theme=context.identifier,
            topics=topics,
            filtering_active=True,
            posts=filtered or posts,
        )

    @app.get("/posts/{slug}")
    async def get_post(
        slug: str,
        blog_theme: str | None = Cookie(None, alias=THEME_COOKIE),
    ) -> PostResponse:
        try:
            post = store.get_post(slug)
        except PostNotFound:
            raise HTTPException(status_code=404, detail=f"Post not found: {slug}")
        return PostResponse(
            theme=ThemeContext.from_preference(blog_theme).identifier, post=post
        )

    @app.get("/posts/{slug}/suggestions")
    async def suggest_posts(
        slug: str, mood: str = Query("", description="Mood to suggest for")
    ) -> SuggestionResponse:
        """
        Suggest up to three other posts for a mood.

        An empty mood hides the suggestion panel. A mood whose topics match no
        other post yields an empty list and a message, never the full listing.
        """
        try:
            store.get_post(slug)
        except PostNotFound:
            raise HTTPException(status_code=404, detail=f"Post not found: {slug}")

        topics = await session.suggest(mood)
        if not topics:
            return SuggestionResponse(topics=[], show_suggestions=False, posts=[])

        others = [post for post in store.list_posts() if post.slug != slug]
        suggested = filter_posts(others, topics)[:MAX_SUGGESTED_POSTS]
        logger.info("Suggested posts: %d out of %d", len(suggested), len(others))
        return SuggestionResponse(
            topics=topics,
            show_suggestions=True,
            posts=suggested,
            message=None if suggested else NO_SUGGESTIONS_MESSAGE,
        )

    # MARK: - Express

    @app.post("/express")
    async def express(request: ExpressRequest) -> CardForm:
        return build_card_form(request.prompt)

    # MARK: - Backend

    @app.post("/backend/initialize")
    async def initialize_backend() -> BackendStatus:
        """Start loading the generative backend; repeated calls share one load."""
        return await session.initialize_backend()

    @app.get("/backend/status")
    async def backend_status() -> BackendStatus:
        return session.status()

    return app


def build_app(settings: Settings | None = None) -> FastAPI:
    """Create the application from settings (environment by default)."""
    settings = settings or Settings.from_env()
    backend = None
    if settings.llm_url:
        backend = ChatCompletionBackend(
            settings.llm_url,
            preferred_models=settings.models,
            api_key=settings.llm_api_key,
        )
    return create_app(ContentStore(settings.content_dir), MoodSession(backend))


def main() -> None:
    """Main entry point for the server."""
    import uvicorn

    settings = Settings.from_env()
    setup_logging("moodblog", settings.log_level)
    uvicorn.run(
        "moodblog.server:build_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level,
    )


if __name__ == "__main__":
    main()
