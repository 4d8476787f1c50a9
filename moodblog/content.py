"""
File-backed post storage for the Moodblog service.

Each post is a markdown file with a YAML front-matter block. Nothing is
cached: every listing and lookup re-reads the directory.
"""

import datetime
import logging
import re
from pathlib import Path
from typing import Any

import yaml
from markdown_it import MarkdownIt

from .models import Post, PostSummary

logger = logging.getLogger(__name__)

POST_SUFFIXES = (".mdx", ".md")
EXCERPT_LENGTH = 200

_FRONT_MATTER = re.compile(r"^---\s*\n(.*?)\n---\s*\n?(.*)$", re.DOTALL)

# Applied in order
_MARKUP_RULES = (
    (re.compile(r"#{1,6}\s+"), ""),
    (re.compile(r"\*\*(.*?)\*\*"), r"\1"),
    (re.compile(r"\*(.*?)\*"), r"\1"),
    (re.compile(r"\[(.*?)\]\(.*?\)"), r"\1"),
    (re.compile(r"```[\s\S]*?```"), ""),
    (re.compile(r"`(.*?)`"), r"\1"),
    (re.compile(r"\n\s*\n"), " "),
    (re.compile(r"\s+"), " "),
)


class PostNotFound(LookupError):
    """Raised when no post exists for a slug."""


def parse_front_matter(text: str) -> tuple[dict[str, Any], str]:
    """
    Split a post file into its front-matter mapping and markdown body.

    Args:
        text: Full file contents

    Returns:
        (front_matter, body). A missing or unparseable block yields an empty
        mapping and the full text as body.
    """
    match = _FRONT_MATTER.match(text)
    if not match:
        return {}, text

    try:
        data = yaml.safe_load(match.group(1)) or {}
    except yaml.YAMLError as e:
        logger.warning("Could not parse front matter: %s", e)
        return {}, text

    if not isinstance(data, dict):
        return {}, text
    return data, match.group(2)


def derive_excerpt(body: str, limit: int = EXCERPT_LENGTH) -> str:
    """Strip markdown from a body and cut it to `limit` characters."""
    plain = body
    for pattern, replacement in _MARKUP_RULES:
        plain = pattern.sub(replacement, plain)
    plain = plain.strip()

    if len(plain) > limit:
        return plain[:limit] + "..."
    return plain


def _as_text(value: Any) -> str | None:
    if value is None or value == "":
        return None
    if isinstance(value, (datetime.date, datetime.datetime)):
        return value.isoformat()
    return str(value)


def _markdown() -> MarkdownIt:
    return MarkdownIt("commonmark").enable(["table", "strikethrough"])


class ContentStore:
    """Reads posts from a directory of front-matter + markdown files."""

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)

    def list_slugs(self) -> list[str]:
        """Return the slug of every post file, in file-name order."""
        try:
            paths = sorted(self.directory.iterdir())
        except OSError:
            return []
        stems = (p.stem for p in paths if p.is_file() and p.suffix in POST_SUFFIXES)
        # x.md and x.mdx are one post
        return list(dict.fromkeys(stems))

    def list_posts(self) -> list[PostSummary]:
        """
        Load listing metadata for every post, newest first.

        Dates are compared as strings; posts without a date sort last and keep
        their file order among themselves.
        """
        posts = []
        for slug in self.list_slugs():
            try:
                posts.append(self._summary(slug, *self._read(slug)))
            except PostNotFound:
                continue
        return sorted(posts, key=lambda post: post.date or "", reverse=True)

    def get_post(self, slug: str) -> Post:
        """
        Load a single post with its rendered body.

        Raises:
            PostNotFound: If no post file exists for the slug, or it cannot
                be read as UTF-8 text
        """
        front_matter, body = self._read(slug)
        summary = self._summary(slug, front_matter, body)
        return Post(
            **summary.model_dump(),
            front_matter=front_matter,
            body=body,
            html=_markdown().render(body),
        )

    # MARK: - Private Helpers

    def _path(self, slug: str) -> Path:
        if not slug or "/" in slug or "\\" in slug or slug.startswith("."):
            raise PostNotFound(slug)
        for suffix in POST_SUFFIXES:
            path = self.directory / f"{slug}{suffix}"
            if path.is_file():
                return path
        raise PostNotFound(slug)

    def _read(self, slug: str) -> tuple[dict[str, Any], str]:
        path = self._path(slug)
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not read post %s: %s", path.name, e)
            raise PostNotFound(slug) from e
        return parse_front_matter(text)

    def _summary(
        self, slug: str, front_matter: dict[str, Any], body: str
    ) -> PostSummary:
        excerpt = _as_text(front_matter.get("excerpt")) or derive_excerpt(body)
        return PostSummary(
            slug=slug,
            title=_as_text(front_matter.get("title")) or slug,
            excerpt=excerpt,
            date=_as_text(front_matter.get("date")),
            category=_as_text(front_matter.get("category")),
        )
