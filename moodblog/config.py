"""
Runtime configuration for the Moodblog service.

Settings come from environment variables so the same build can serve any
content directory and point at any model server.
"""

import logging
import os
from collections.abc import Mapping

from pydantic import BaseModel, Field

from .backend import DEFAULT_MODEL_PREFERENCE

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class Settings(BaseModel):
    """Service settings."""

    content_dir: str = Field("content/blog", description="Directory of post files")
    llm_url: str | None = Field(
        None, description="Base URL of an OpenAI-compatible server, e.g. http://localhost:11434/v1"
    )
    llm_api_key: str | None = None
    models: tuple[str, ...] = DEFAULT_MODEL_PREFERENCE
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "info"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """Load settings from MOODBLOG_* environment variables."""
        env = os.environ if environ is None else environ
        values: dict[str, object] = {}

        if env.get("MOODBLOG_CONTENT_DIR"):
            values["content_dir"] = env["MOODBLOG_CONTENT_DIR"]
        if env.get("MOODBLOG_LLM_URL"):
            values["llm_url"] = env["MOODBLOG_LLM_URL"]
        if env.get("MOODBLOG_LLM_API_KEY"):
            values["llm_api_key"] = env["MOODBLOG_LLM_API_KEY"]
        if env.get("MOODBLOG_MODELS"):
            values["models"] = tuple(
                m.strip() for m in env["MOODBLOG_MODELS"].split(",") if m.strip()
            )
        if env.get("MOODBLOG_HOST"):
            values["host"] = env["MOODBLOG_HOST"]
        if env.get("MOODBLOG_PORT"):
            values["port"] = env["MOODBLOG_PORT"]
        if env.get("MOODBLOG_LOG_LEVEL"):
            values["log_level"] = env["MOODBLOG_LOG_LEVEL"].lower()

        return cls.model_validate(values)


def setup_logging(name: str, level: str = "info") -> logging.Logger:
    """Configure root logging once and return a named logger."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    return logging.getLogger(name)
